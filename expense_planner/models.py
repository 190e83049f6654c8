"""Ledger entries and the generative API response schema."""

from __future__ import annotations

import math
import uuid
from dataclasses import dataclass, field
from datetime import date as date_type
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict

EXPENSE_CATEGORIES = ("Food", "Transport", "Housing", "Shopping", "Others")
INCOME_CATEGORY = "Income"
INCOME_DESCRIPTION = "Salary"
ENTRY_TYPES = ("Income", "Expense")


def parse_amount(value: object) -> Optional[float]:
    """Return *value* as a positive float, or ``None`` when it is not one."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(amount) or math.isinf(amount) or amount <= 0:
        return None
    return amount


def _parse_date(raw: object) -> datetime:
    if isinstance(raw, datetime):
        return raw
    if isinstance(raw, date_type):
        return datetime(raw.year, raw.month, raw.day)
    if isinstance(raw, str) and raw.strip():
        return datetime.fromisoformat(raw.strip())
    raise ValueError(f"Invalid entry date: {raw!r}")


@dataclass(frozen=True)
class LedgerEntry:
    """A single recorded income or expense transaction."""

    date: datetime
    category: str
    description: str
    amount: float
    is_income: bool
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "category": self.category,
            "description": self.description,
            "amount": self.amount,
            "isIncome": self.is_income,
        }

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> "LedgerEntry":
        """Create an entry from a stored record.

        Raises ``ValueError`` when a field is missing or has the wrong shape.
        """

        try:
            entry_id = str(data["id"])
            category = str(data["category"])
            description = str(data.get("description") or "")
            raw_flag = data["isIncome"] if "isIncome" in data else data["is_income"]
            raw_amount = data["amount"]
            raw_date = data["date"]
        except KeyError as exc:
            raise ValueError(f"Ledger record missing field {exc.args[0]!r}") from exc

        if not isinstance(raw_flag, bool):
            raise ValueError(f"isIncome must be a boolean, got {raw_flag!r}")
        if isinstance(raw_amount, bool) or not isinstance(raw_amount, (int, float)):
            raise ValueError(f"amount must be a number, got {raw_amount!r}")
        amount = parse_amount(raw_amount)
        if amount is None:
            raise ValueError(f"amount must be positive, got {raw_amount!r}")

        return cls(
            id=entry_id,
            date=_parse_date(raw_date),
            category=category,
            description=description,
            amount=amount,
            is_income=raw_flag,
        )


class Part(BaseModel):
    model_config = ConfigDict(extra="ignore")

    text: str


class Content(BaseModel):
    model_config = ConfigDict(extra="ignore")

    parts: List[Part]


class Candidate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    content: Content


class ErrorResponse(BaseModel):
    """Error payload returned by the API instead of candidates."""

    model_config = ConfigDict(extra="ignore")

    message: str
    code: Optional[Union[int, str]] = None


class GeminiResponse(BaseModel):
    """Top-level ``generateContent`` reply.

    Both fields are optional; a well-formed reply populates exactly one.
    """

    model_config = ConfigDict(extra="ignore")

    candidates: Optional[List[Candidate]] = None
    error: Optional[ErrorResponse] = None


__all__ = [
    "EXPENSE_CATEGORIES",
    "INCOME_CATEGORY",
    "INCOME_DESCRIPTION",
    "ENTRY_TYPES",
    "LedgerEntry",
    "parse_amount",
    "GeminiResponse",
    "Candidate",
    "Content",
    "Part",
    "ErrorResponse",
]
