"""Expense Planner personal finance tracker with AI budget tips."""

from .aggregator import FinancialSnapshot
from .config import PlannerConfig, settings
from .models import GeminiResponse, LedgerEntry
from .planner import FinancePlanner
from .storage import EntryStore, KeyValueStore
from .tips import TipClient, TipResult, sanitize_tips

__all__ = [
    "settings",
    "PlannerConfig",
    "FinancialSnapshot",
    "GeminiResponse",
    "LedgerEntry",
    "FinancePlanner",
    "EntryStore",
    "KeyValueStore",
    "TipClient",
    "TipResult",
    "sanitize_tips",
]
