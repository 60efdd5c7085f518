"""
fuel_services.insight -- Optional free-text commentary on reconciliations.

Responsibility:
    Send a small batch of reconciliation records, as JSON, to a text
    generation endpoint and return its commentary for display.

Architecture position:
    Services -- outbound HTTP collaborator.  Runs on a worker thread and
    returns a ``concurrent.futures.Future`` so the caller never blocks on
    it; ``Future.cancel()`` drops a request that has not started.

Invariants enforced:
    - Opaque output: the returned text is display-only and never feeds
      back into any reconciliation record.
    - Best effort: network errors, HTTP errors, timeouts, malformed
      responses and a missing endpoint all resolve to ``FALLBACK_TEXT``.
      The future itself never raises.
"""

from __future__ import annotations

import json
import os
from collections.abc import Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any

import requests

from fuel_config.schema import InsightSettings
from fuel_kernel.domain.model import Reconciliation
from fuel_kernel.logging_config import get_logger

logger = get_logger("services.insight")

FALLBACK_TEXT = "Unable to generate insights at this time."

PROMPT_TEMPLATE = (
    "Analyze this fuel reconciliation data and provide a brief executive "
    "summary regarding stock losses, variance trends, and potential meter "
    "inaccuracies: {data}"
)


def _resolved(value: str) -> Future:
    future: Future = Future()
    future.set_result(value)
    return future


def extract_text(body: Any) -> str:
    """Pull commentary out of a response body.

    Accepts ``{"text": ...}`` or a messages-style
    ``{"content": [{"text": ...}, ...]}``.
    """
    if isinstance(body, dict):
        if isinstance(body.get("text"), str):
            return body["text"]
        content = body.get("content")
        if isinstance(content, list):
            parts = [
                c["text"] for c in content
                if isinstance(c, dict) and isinstance(c.get("text"), str)
            ]
            if parts:
                return "".join(parts)
    raise ValueError("response body has no text")


class InsightService:
    """Non-blocking client for the commentary endpoint."""

    def __init__(
        self,
        settings: InsightSettings,
        *,
        session: requests.Session | None = None,
        executor: ThreadPoolExecutor | None = None,
    ):
        self._settings = settings
        self._session = session or requests.Session()
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="fuel-insight"
        )

    def __enter__(self) -> InsightService:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.shutdown()

    def shutdown(self) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=False, cancel_futures=True)

    def build_payload(self, records: Sequence[Reconciliation]) -> dict[str, Any]:
        batch = [r.to_dict() for r in records[: self._settings.max_records]]
        return {
            "model": self._settings.model,
            "prompt": PROMPT_TEMPLATE.format(data=json.dumps(batch)),
            "records": batch,
        }

    def request_insights(self, records: Sequence[Reconciliation]) -> Future:
        """Start a commentary request; the future resolves to display text."""
        if not records:
            return _resolved("")
        if not self._settings.endpoint:
            logger.info("insight_disabled", extra={"record_count": len(records)})
            return _resolved(FALLBACK_TEXT)
        return self._executor.submit(self._fetch, self.build_payload(records))

    def _fetch(self, payload: dict[str, Any]) -> str:
        headers = {"content-type": "application/json"}
        api_key = os.environ.get(self._settings.api_key_env)
        if api_key:
            headers["authorization"] = f"Bearer {api_key}"

        try:
            response = self._session.post(
                self._settings.endpoint,
                json=payload,
                headers=headers,
                timeout=self._settings.timeout_seconds,
            )
            response.raise_for_status()
            text = extract_text(response.json())
        except (requests.RequestException, ValueError) as exc:
            logger.warning("insight_request_failed", extra={
                "endpoint": self._settings.endpoint,
                "error_type": type(exc).__name__,
                "error": str(exc),
            })
            return FALLBACK_TEXT

        logger.info("insight_received", extra={
            "record_count": len(payload["records"]),
            "text_length": len(text),
        })
        return text
