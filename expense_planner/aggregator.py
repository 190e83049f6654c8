"""Aggregate metrics over the ledger."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Sequence

import pandas as pd

from .models import LedgerEntry

FRAME_COLUMNS = ["id", "date", "category", "description", "amount", "is_income"]


def entries_frame(entries: Sequence[LedgerEntry]) -> pd.DataFrame:
    """Tabulate entries in ledger order."""

    rows = [
        {
            "id": entry.id,
            "date": entry.date,
            "category": entry.category,
            "description": entry.description,
            "amount": float(entry.amount),
            "is_income": bool(entry.is_income),
        }
        for entry in entries
    ]
    return pd.DataFrame(rows, columns=FRAME_COLUMNS)


def _sum_amounts(entries: Sequence[LedgerEntry], *, income: bool) -> float:
    if not entries:
        return 0.0
    df = entries_frame(entries)
    mask = df["is_income"].astype(bool)
    if not income:
        mask = ~mask
    return float(df.loc[mask, "amount"].sum())


def total_income(entries: Sequence[LedgerEntry]) -> float:
    return _sum_amounts(entries, income=True)


def total_expenses(entries: Sequence[LedgerEntry]) -> float:
    return _sum_amounts(entries, income=False)


def expense_distribution(entries: Sequence[LedgerEntry]) -> Dict[str, float]:
    """Map each expense category to its share of total expenses, in percent.

    Categories without expenses are left out. If total expenses are zero,
    every listed category maps to 0.
    """

    if not entries:
        return {}
    df = entries_frame(entries)
    expenses = df[~df["is_income"].astype(bool)]
    if expenses.empty:
        return {}

    by_category = expenses.groupby("category", sort=False)["amount"].sum()
    total = float(expenses["amount"].sum())
    if total <= 0:
        return {str(category): 0.0 for category in by_category.index}
    return {
        str(category): float(value) / total * 100
        for category, value in by_category.items()
    }


@dataclass
class FinancialSnapshot:
    """Point-in-time metrics fed into the tips prompt."""

    total_income: float = 0.0
    total_expenses: float = 0.0
    distribution: Dict[str, float] = field(default_factory=dict)

    @property
    def savings(self) -> float:
        return self.total_income - self.total_expenses


def snapshot(entries: Sequence[LedgerEntry]) -> FinancialSnapshot:
    return FinancialSnapshot(
        total_income=total_income(entries),
        total_expenses=total_expenses(entries),
        distribution=expense_distribution(entries),
    )


__all__ = [
    "entries_frame",
    "total_income",
    "total_expenses",
    "expense_distribution",
    "FinancialSnapshot",
    "snapshot",
]
