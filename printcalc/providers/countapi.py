import logging
import os
from concurrent.futures import CancelledError, ThreadPoolExecutor
from typing import Any

import requests

from printcalc.providers.base import UsageCounterProvider
from printcalc.units import to_number

logger = logging.getLogger(__name__)

DEFAULT_COUNTER_URL = "https://api.countapi.xyz/hit/printcalc/printcalc-v1-5"
DEFAULT_TIMEOUT_SECONDS = 4.0


class CountAPIProvider(UsageCounterProvider):
    """
    Anonymous hit counter in the countapi.xyz style.

    A GET increments the counter and answers with a JSON body such as
    {"value": 1234}. Anything else is treated as a failure.
    """

    provider_name = "countapi"

    def __init__(self, url: str | None = None, timeout_seconds: float | None = None):
        self.url = (url if url is not None else os.getenv("USAGE_COUNTER_URL", DEFAULT_COUNTER_URL)).strip()
        if timeout_seconds is None:
            timeout_seconds = to_number(os.getenv("USAGE_COUNTER_TIMEOUT_SECONDS")) or DEFAULT_TIMEOUT_SECONDS
        self.timeout_seconds = timeout_seconds

    def fetch_count(self) -> int | float:
        if not self.url:
            raise RuntimeError("USAGE_COUNTER_URL is empty; counter disabled")

        response = requests.get(
            self.url,
            headers={"Cache-Control": "no-store"},
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        if not response.text:
            raise RuntimeError("Counter returned an empty body")

        payload: Any = response.json()
        value = payload.get("value") if isinstance(payload, dict) else None
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise RuntimeError("Counter response has no numeric value")
        return value


def fetch_usage_count(provider: UsageCounterProvider | None = None) -> int | float | None:
    """Best-effort counter read. Every failure is logged and turned into None."""
    try:
        active = provider or CountAPIProvider()
        return active.fetch_count()
    except Exception as exc:
        logger.warning("Usage counter unavailable (ignored): %s", exc)
        return None


class UsageCounterTask:
    """Runs one counter fetch in the background; result() stays None until it succeeds."""

    def __init__(self, provider: UsageCounterProvider | None = None):
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="usage-counter")
        self._future = executor.submit(fetch_usage_count, provider)
        executor.shutdown(wait=False)

    def done(self) -> bool:
        return self._future.done()

    def cancel(self) -> bool:
        return self._future.cancel()

    def result(self) -> int | float | None:
        if self._future.cancelled() or not self._future.done():
            return None
        return self._future.result()

    def wait(self, timeout: float | None = None) -> int | float | None:
        try:
            return self._future.result(timeout=timeout)
        except (CancelledError, TimeoutError):
            return None
