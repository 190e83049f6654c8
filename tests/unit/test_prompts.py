"""Unit tests covering the tips prompt and request envelope."""

from expense_planner.aggregator import FinancialSnapshot
from expense_planner.prompts import build_request_body, build_tip_prompt, format_distribution


def test_format_distribution_joins_pairs():
    text = format_distribution({"Food": 75.0, "Transport": 25.0})

    assert text == "Food: 75.0%, Transport: 25.0%"


def test_format_distribution_empty():
    assert format_distribution({}) == ""


def test_prompt_includes_metrics_and_savings():
    prompt = build_tip_prompt(
        FinancialSnapshot(
            total_income=1000.0,
            total_expenses=400.0,
            distribution={"Food": 75.0, "Transport": 25.0},
        )
    )

    assert "- Total Income: $1000.0" in prompt
    assert "- Total Expenses: $400.0" in prompt
    assert "- Savings: $600.0" in prompt
    assert "- Expense Distribution: Food: 75.0%, Transport: 25.0%" in prompt


def test_prompt_requests_plain_text_tips():
    prompt = build_tip_prompt(FinancialSnapshot())

    assert "one per line" in prompt
    assert "without using Markdown formatting" in prompt
    assert "Budget Tips" in prompt
    assert "Investment Tips" in prompt
    assert prompt == prompt.strip()


def test_empty_distribution_line_has_no_trailing_space():
    prompt = build_tip_prompt(FinancialSnapshot(total_income=100.0))

    assert prompt.splitlines()[-1] == "- Expense Distribution:"


def test_request_body_envelope():
    assert build_request_body("hello") == {"contents": [{"parts": [{"text": "hello"}]}]}
