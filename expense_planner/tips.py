"""Budget tips client for the Gemini ``generateContent`` endpoint."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional

import httpx
from pydantic import ValidationError

from .aggregator import FinancialSnapshot
from .config import PlannerConfig
from .models import GeminiResponse
from .prompts import build_request_body, build_tip_prompt

logger = logging.getLogger("expense_planner.tips")

_ENUMERATION = re.compile(r"^\d+\.\s*")


def clean_tip(line: str) -> str:
    cleaned = _ENUMERATION.sub("", line)
    cleaned = cleaned.replace("**", "")
    cleaned = cleaned.replace("*", "")
    return cleaned.strip()


def sanitize_tips(text: str) -> List[str]:
    """Split free-form model output into one cleaned tip per line.

    Numbered prefixes such as ``"1. "`` and Markdown asterisks are removed.
    Lines that end up empty are dropped.
    """

    tips: List[str] = []
    for raw_line in text.splitlines():
        cleaned = clean_tip(raw_line)
        if cleaned:
            tips.append(cleaned)
    return tips


@dataclass
class TipResult:
    """Outcome of one tips fetch. Failures carry a single error line."""

    tips: List[str] = field(default_factory=list)
    ok: bool = True
    status_code: Optional[int] = None

    @classmethod
    def failure(cls, message: str, status_code: Optional[int] = None) -> "TipResult":
        logger.warning("Budget tips unavailable: %s", message)
        return cls(tips=[f"Error: {message}"], ok=False, status_code=status_code)


class TipClient:
    """Sends the financial summary to the API and returns cleaned tips."""

    def __init__(
        self,
        config: PlannerConfig,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.config = config
        self._transport = transport

    async def fetch(self, snapshot: FinancialSnapshot) -> TipResult:
        return await self.fetch_prompt(build_tip_prompt(snapshot))

    async def fetch_prompt(self, prompt: str) -> TipResult:
        """Issue one POST request. Every failure is returned as a ``TipResult``."""

        try:
            async with httpx.AsyncClient(
                transport=self._transport, timeout=self.config.timeout
            ) as client:
                response = await client.post(
                    self.config.request_url(),
                    json=build_request_body(prompt),
                    headers={"Content-Type": "application/json"},
                )
        except (httpx.InvalidURL, httpx.UnsupportedProtocol):
            return TipResult.failure("Invalid API URL")
        except httpx.HTTPError as exc:
            detail = str(exc) or exc.__class__.__name__
            return TipResult.failure(f"Network error - {detail}")

        logger.debug("Raw API response (%s): %s", response.status_code, response.text)

        if response.status_code != 200:
            return TipResult.failure(
                f"HTTP {response.status_code}", status_code=response.status_code
            )
        if not response.content:
            return TipResult.failure("No data received from API", status_code=200)

        return parse_tip_response(response.content)


def parse_tip_response(body: bytes | str) -> TipResult:
    """Decode a 200 response body into tips."""

    try:
        payload = GeminiResponse.model_validate_json(body)
    except ValidationError as exc:
        detail = exc.errors()[0].get("msg", str(exc)) if exc.errors() else str(exc)
        return TipResult.failure(f"Failed to parse response - {detail}", status_code=200)

    if payload.error is not None:
        return TipResult.failure(f"API error - {payload.error.message}", status_code=200)
    if not payload.candidates:
        return TipResult.failure("No candidates found in response", status_code=200)

    parts = payload.candidates[0].content.parts
    tips = sanitize_tips(parts[0].text) if parts else []
    if not tips:
        return TipResult.failure("No tips found in response", status_code=200)
    return TipResult(tips=tips, status_code=200)


__all__ = ["TipClient", "TipResult", "clean_tip", "sanitize_tips", "parse_tip_response"]
