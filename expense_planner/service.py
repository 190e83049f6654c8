"""FastAPI service exposing the ledger, its summary and budget tips."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, List, Optional, Union

from fastapi import FastAPI, HTTPException, status
from pydantic import BaseModel, Field, field_validator

from .config import settings
from .models import ENTRY_TYPES, EXPENSE_CATEGORIES, LedgerEntry
from .planner import FinancePlanner


class EntryRequest(BaseModel):
    type: str = Field(..., description="Income or Expense")
    amount: Union[float, str] = Field(..., description="Positive amount")
    category: Optional[str] = Field(
        None, description=f"Expense category: {', '.join(EXPENSE_CATEGORIES)}"
    )
    description: str = Field("", max_length=200)
    date: Optional[datetime] = Field(None, description="Transaction date in ISO format")

    @field_validator("type")
    @classmethod
    def validate_type(cls, value: str) -> str:
        normalised = value.strip().capitalize()
        if normalised not in ENTRY_TYPES:
            raise ValueError(f"type must be one of {', '.join(ENTRY_TYPES)}")
        return normalised


class EntryResponse(BaseModel):
    id: str
    date: str
    category: str
    description: str
    amount: float
    is_income: bool


class SummaryResponse(BaseModel):
    total_income: float
    total_expenses: float
    savings: float
    distribution: Dict[str, float]


class TipsResponse(BaseModel):
    tips: List[str]
    is_loading: bool


def create_app(planner: Optional[FinancePlanner] = None) -> FastAPI:
    """Create a FastAPI app around a ``FinancePlanner``."""

    finance = planner or FinancePlanner.from_config(settings)
    logger = logging.getLogger("expense_planner.service")
    if not logger.handlers:
        logging.basicConfig(level=logging.INFO)

    app = FastAPI(
        title="Expense Planner API",
        description=(
            "Record income and expenses, review spending by category, "
            "and request budget tips generated from your own numbers."
        ),
        version="0.1.0",
    )

    @app.get("/entries", response_model=List[EntryResponse])
    async def list_entries() -> List[EntryResponse]:
        return [_entry_to_response(entry) for entry in finance.entries]

    @app.post("/entries", response_model=EntryResponse, status_code=status.HTTP_201_CREATED)
    async def add_entry(payload: EntryRequest) -> EntryResponse:
        if payload.type == "Income":
            entry = finance.add_income(payload.amount, date=payload.date)
        else:
            if payload.category not in EXPENSE_CATEGORIES:
                raise HTTPException(
                    status_code=422,
                    detail=f"category must be one of {', '.join(EXPENSE_CATEGORIES)}",
                )
            entry = finance.add_expense(
                payload.category, payload.description, payload.amount, date=payload.date
            )
        if entry is None:
            raise HTTPException(
                status_code=422,
                detail="Amount must be a positive number",
            )
        if not finance.last_save_ok:
            logger.warning("Entry %s recorded in memory only", entry.id)
        return _entry_to_response(entry)

    @app.get("/summary", response_model=SummaryResponse)
    async def summary() -> SummaryResponse:
        snapshot = finance.snapshot()
        return SummaryResponse(
            total_income=snapshot.total_income,
            total_expenses=snapshot.total_expenses,
            savings=snapshot.savings,
            distribution=snapshot.distribution,
        )

    @app.get("/tips", response_model=TipsResponse)
    async def tips() -> TipsResponse:
        return TipsResponse(tips=finance.budget_tips, is_loading=finance.is_loading_tips)

    @app.post("/tips/refresh", response_model=TipsResponse)
    async def refresh_tips() -> TipsResponse:
        await finance.fetch_budget_tips()
        return TipsResponse(tips=finance.budget_tips, is_loading=finance.is_loading_tips)

    return app


def _entry_to_response(entry: LedgerEntry) -> EntryResponse:
    return EntryResponse(
        id=entry.id,
        date=entry.date.isoformat(),
        category=entry.category,
        description=entry.description,
        amount=entry.amount,
        is_income=entry.is_income,
    )
