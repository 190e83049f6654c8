"""Unit tests for ledger entries, amount validation and the response schema."""

from datetime import date, datetime

import pytest
from pydantic import ValidationError

from expense_planner.models import GeminiResponse, LedgerEntry, parse_amount


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("12.50", 12.5),
        (" 3 ", 3.0),
        (1000, 1000.0),
        (0.01, 0.01),
    ],
)
def test_parse_amount_accepts_positive_numbers(raw, expected):
    assert parse_amount(raw) == expected


@pytest.mark.parametrize("raw", [0, -5, "-5", "0", "abc", "", None, True, "nan", "inf"])
def test_parse_amount_rejects_invalid_values(raw):
    assert parse_amount(raw) is None


def test_entries_get_unique_ids():
    first = LedgerEntry(datetime(2025, 1, 1), "Food", "Lunch", 10.0, False)
    second = LedgerEntry(datetime(2025, 1, 1), "Food", "Lunch", 10.0, False)

    assert first.id != second.id


def test_entries_are_immutable():
    entry = LedgerEntry(datetime(2025, 1, 1), "Food", "Lunch", 10.0, False)
    with pytest.raises(AttributeError):
        entry.amount = 20.0


def test_from_mapping_accepts_snake_case_and_date_objects():
    entry = LedgerEntry.from_mapping(
        {
            "id": "fixed",
            "date": date(2025, 3, 4),
            "category": "Housing",
            "description": "Rent",
            "amount": 800,
            "is_income": False,
        }
    )

    assert entry.id == "fixed"
    assert entry.date == datetime(2025, 3, 4)
    assert entry.amount == 800.0


@pytest.mark.parametrize(
    "record",
    [
        {"id": "x", "date": "2025-01-01", "category": "Food", "amount": 1, "isIncome": "no"},
        {"id": "x", "date": "2025-01-01", "category": "Food", "amount": "1", "isIncome": False},
        {"id": "x", "date": "yesterday", "category": "Food", "amount": 1, "isIncome": False},
        {"id": "x", "category": "Food", "amount": 1, "isIncome": False},
        {"id": "x", "date": "2025-01-01", "category": "Food", "amount": 0, "isIncome": False},
        {"id": "x", "date": "2025-01-01", "category": "Food", "amount": -50, "isIncome": False},
        {"id": "x", "date": "2025-01-01", "category": "Food", "amount": float("nan"), "isIncome": False},
    ],
)
def test_from_mapping_rejects_malformed_records(record):
    with pytest.raises(ValueError):
        LedgerEntry.from_mapping(record)


def test_response_schema_tolerates_missing_fields():
    payload = GeminiResponse.model_validate_json("{}")

    assert payload.candidates is None
    assert payload.error is None


def test_response_schema_reads_error_payload():
    payload = GeminiResponse.model_validate_json(
        '{"candidates": null, "error": {"message": "bad key", "code": "403"}}'
    )

    assert payload.error.message == "bad key"
    assert payload.error.code == "403"


def test_response_schema_rejects_wrong_shape():
    with pytest.raises(ValidationError):
        GeminiResponse.model_validate_json('{"candidates": [{"content": "text"}]}')
