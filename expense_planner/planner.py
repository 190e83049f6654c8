"""Observable state for the ledger and its budget tips."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from . import aggregator
from .aggregator import FinancialSnapshot
from .config import PlannerConfig
from .models import (
    EXPENSE_CATEGORIES,
    INCOME_CATEGORY,
    INCOME_DESCRIPTION,
    LedgerEntry,
    parse_amount,
)
from .storage import EntryStore, KeyValueStore
from .tips import TipClient, TipResult

logger = logging.getLogger("expense_planner.planner")

Subscriber = Callable[[str, Any], None]


class FinancePlanner:
    """Holds entries, tips and the loading flag, and notifies subscribers on change.

    All mutation is expected to happen on one thread or event loop. Tip
    fetches are sequenced so that only the most recently issued request may
    overwrite ``budget_tips``.
    """

    def __init__(self, entry_store: EntryStore, tip_client: TipClient) -> None:
        self.entry_store = entry_store
        self.tip_client = tip_client
        self._entries: List[LedgerEntry] = []
        self._budget_tips: List[str] = []
        self._is_loading_tips = False
        self._subscribers: List[Subscriber] = []
        self._request_seq = 0
        self._refresh_task: Optional[asyncio.Task] = None
        self.last_save_ok = True
        self.load_entries()

    @classmethod
    def from_config(cls, config: PlannerConfig) -> "FinancePlanner":
        store = EntryStore(KeyValueStore(config.db_path), key=config.storage_key)
        return cls(store, TipClient(config))

    @property
    def entries(self) -> List[LedgerEntry]:
        return list(self._entries)

    @property
    def budget_tips(self) -> List[str]:
        return list(self._budget_tips)

    @property
    def is_loading_tips(self) -> bool:
        return self._is_loading_tips

    def subscribe(self, callback: Subscriber) -> None:
        if callback not in self._subscribers:
            self._subscribers.append(callback)

    def unsubscribe(self, callback: Subscriber) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def _publish(self, name: str, value: Any) -> None:
        for callback in list(self._subscribers):
            callback(name, value)

    def _set_entries(self, entries: List[LedgerEntry]) -> None:
        self._entries = entries
        self._publish("entries", self.entries)

    def _set_tips(self, tips: List[str]) -> None:
        self._budget_tips = list(tips)
        self._publish("budget_tips", self.budget_tips)

    def _set_loading(self, value: bool) -> None:
        if self._is_loading_tips != value:
            self._is_loading_tips = value
            self._publish("is_loading_tips", value)

    # Ledger

    def load_entries(self) -> List[LedgerEntry]:
        self._set_entries(self.entry_store.load_entries())
        return self.entries

    def add_entry(
        self,
        date: Optional[datetime],
        category: str,
        description: str,
        amount: object,
        is_income: bool,
    ) -> Optional[LedgerEntry]:
        """Append an entry and persist the ledger.

        Returns ``None`` without touching the ledger when *amount* is not a
        positive number. A failed save is logged and leaves ``last_save_ok``
        false; the entry is kept in memory either way.
        """

        value = parse_amount(amount)
        if value is None:
            logger.info("Rejected entry with invalid amount %r", amount)
            return None

        entry = LedgerEntry(
            date=date or datetime.now(),
            category=category,
            description=description,
            amount=value,
            is_income=bool(is_income),
        )
        self._set_entries(self._entries + [entry])
        self.last_save_ok = self.entry_store.save_entries(self._entries)
        return entry

    def add_income(self, amount: object, date: Optional[datetime] = None) -> Optional[LedgerEntry]:
        return self.add_entry(date, INCOME_CATEGORY, INCOME_DESCRIPTION, amount, True)

    def add_expense(
        self,
        category: str,
        description: str,
        amount: object,
        date: Optional[datetime] = None,
    ) -> Optional[LedgerEntry]:
        if category not in EXPENSE_CATEGORIES:
            logger.info("Rejected expense with unknown category %r", category)
            return None
        return self.add_entry(date, category, description.strip(), amount, False)

    # Metrics

    def total_income(self) -> float:
        return aggregator.total_income(self._entries)

    def total_expenses(self) -> float:
        return aggregator.total_expenses(self._entries)

    def expense_distribution(self) -> Dict[str, float]:
        return aggregator.expense_distribution(self._entries)

    def snapshot(self) -> FinancialSnapshot:
        return aggregator.snapshot(self._entries)

    # Tips

    async def fetch_budget_tips(
        self, on_complete: Optional[Callable[[], None]] = None
    ) -> Optional[TipResult]:
        """Fetch tips for the current ledger.

        ``on_complete`` runs exactly once, including when the fetch fails or
        is cancelled. A response is applied only if no newer fetch was issued
        in the meantime.
        """

        self._request_seq += 1
        request_id = self._request_seq
        self._set_loading(True)
        result: Optional[TipResult] = None
        try:
            try:
                result = await self.tip_client.fetch(self.snapshot())
            except Exception as exc:  # pragma: no cover - defensive guard
                logger.exception("Tip client raised unexpectedly")
                result = TipResult.failure(f"Unexpected error - {exc}")
        finally:
            if request_id == self._request_seq:
                if result is not None:
                    self._set_tips(result.tips)
                self._set_loading(False)
            elif result is not None:
                logger.info(
                    "Discarding stale tips response %d (latest is %d)",
                    request_id,
                    self._request_seq,
                )
            if on_complete is not None:
                on_complete()
        return result

    def refresh_tips(self, on_complete: Optional[Callable[[], None]] = None) -> asyncio.Task:
        """Schedule a fetch on the running event loop and return its task."""

        fired = False

        def complete_once() -> None:
            nonlocal fired
            if fired:
                return
            fired = True
            if on_complete is not None:
                on_complete()

        task = asyncio.get_running_loop().create_task(self.fetch_budget_tips(complete_once))
        # A task cancelled before its first step never runs the fetch body.
        task.add_done_callback(lambda _task: complete_once())
        self._refresh_task = task
        return task

    def cancel_tip_refresh(self) -> bool:
        task = self._refresh_task
        if task is None or task.done():
            return False
        return task.cancel()


__all__ = ["FinancePlanner"]
