"""Expense Planner configuration for storage and the tips API."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlencode

DEFAULT_ENDPOINT = (
    "https://generativelanguage.googleapis.com/v1/models/"
    "gemini-1.5-flash:generateContent"
)
DEFAULT_STORAGE_KEY = "ExpenseEntries"
DEFAULT_DB_PATH = "expense_planner.sqlite"
DEFAULT_TIMEOUT = 30.0

logger = logging.getLogger("expense_planner.config")


@dataclass
class PlannerConfig:
    """Settings for the ledger database and the generative tips endpoint."""

    api_endpoint: str = DEFAULT_ENDPOINT
    api_key: Optional[str] = None
    db_path: str = DEFAULT_DB_PATH
    storage_key: str = DEFAULT_STORAGE_KEY
    timeout: float = DEFAULT_TIMEOUT

    def request_url(self) -> str:
        """Return the endpoint with the API key appended as a query parameter."""

        if not self.api_key:
            return self.api_endpoint
        separator = "&" if "?" in self.api_endpoint else "?"
        return f"{self.api_endpoint}{separator}{urlencode({'key': self.api_key})}"

    @classmethod
    def from_env(cls) -> "PlannerConfig":
        """Build a configuration by reading environment variables."""

        timeout_raw = os.getenv("EXPENSE_PLANNER_TIMEOUT")
        timeout = DEFAULT_TIMEOUT
        if timeout_raw:
            try:
                timeout = float(timeout_raw)
            except ValueError:
                logger.warning(
                    "Ignoring EXPENSE_PLANNER_TIMEOUT=%r, using %.0fs",
                    timeout_raw,
                    DEFAULT_TIMEOUT,
                )

        return cls(
            api_endpoint=os.getenv("EXPENSE_PLANNER_API_ENDPOINT", DEFAULT_ENDPOINT),
            api_key=os.getenv("EXPENSE_PLANNER_API_KEY") or os.getenv("GEMINI_API_KEY"),
            db_path=os.getenv("EXPENSE_PLANNER_DB", DEFAULT_DB_PATH),
            storage_key=os.getenv("EXPENSE_PLANNER_STORAGE_KEY", DEFAULT_STORAGE_KEY),
            timeout=timeout,
        )


# Default configuration resolved from environment variables.
settings = PlannerConfig.from_env()

# Example explicit configuration usage:
#
# config = PlannerConfig(api_key="AIza...", db_path="/tmp/ledger.sqlite")
# planner = FinancePlanner.from_config(config)
