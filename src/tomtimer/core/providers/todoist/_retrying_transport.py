"""httpx async transport that retries transient Todoist failures."""

from __future__ import annotations

import asyncio
import logging
import random
import time
from uuid import uuid4

import httpx

_LOG = logging.getLogger(__name__)

_RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})
_REQUEST_ID_HEADER = "X-Request-Id"


class RetryingTransport(httpx.AsyncBaseTransport):
    """Retries transient failures with exponential backoff and jitter.

    A 429 pauses every request sharing this transport until the advertised
    ``Retry-After`` (header, or ``error_extra.retry_after`` in the body) has
    elapsed. Writes carry a stable ``X-Request-Id`` so the server discards a
    retried POST it already applied.
    """

    def __init__(
        self,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        max_retries: int = 3,
        backoff_base: float = 1.0,
        backoff_cap: float = 8.0,
    ) -> None:
        self._transport = transport or httpx.AsyncHTTPTransport()
        self._max_retries = max_retries
        self._backoff_base = backoff_base
        self._backoff_cap = backoff_cap

        self._pause_lock = asyncio.Lock()
        self._unpaused = asyncio.Event()
        self._unpaused.set()
        self._paused_until = 0.0

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        if request.method != "GET" and _REQUEST_ID_HEADER not in request.headers:
            request.headers[_REQUEST_ID_HEADER] = uuid4().hex

        attempt = 0
        while True:
            await self._unpaused.wait()
            try:
                response = await self._transport.handle_async_request(request)
            except httpx.TransportError as exc:
                if attempt >= self._max_retries:
                    raise
                _LOG.warning("%s %s failed (%s); retrying", request.method, request.url.path, exc)
                await self._backoff(attempt)
                attempt += 1
                continue

            if response.status_code not in _RETRYABLE_STATUS_CODES or attempt >= self._max_retries:
                return response

            await response.aread()
            delay = _retry_after(response)
            await response.aclose()
            _LOG.warning(
                "%s %s returned %d; retry %d of %d",
                request.method,
                request.url.path,
                response.status_code,
                attempt + 1,
                self._max_retries,
            )
            if response.status_code == 429:
                await self._pause(delay if delay is not None else self._backoff_base)
            elif delay:
                await asyncio.sleep(delay)
            await self._backoff(attempt)
            attempt += 1

    async def aclose(self) -> None:
        await self._transport.aclose()

    async def _pause(self, seconds: float) -> None:
        async with self._pause_lock:
            until = time.monotonic() + max(0.0, seconds)
            if until > self._paused_until:
                self._paused_until = until
                self._unpaused.clear()

        target = self._paused_until
        await asyncio.sleep(max(0.0, target - time.monotonic()))

        async with self._pause_lock:
            if self._paused_until <= target:
                self._unpaused.set()

    async def _backoff(self, attempt: int) -> None:
        if self._backoff_base <= 0:
            return
        seconds = min(self._backoff_cap, self._backoff_base * 2**attempt)
        await asyncio.sleep(seconds + random.uniform(0.0, self._backoff_base / 4))


def _retry_after(response: httpx.Response) -> float | None:
    raw = response.headers.get("Retry-After")
    if raw is None:
        try:
            payload = response.json()
        except ValueError:
            return None
        extra = payload.get("error_extra") if isinstance(payload, dict) else None
        raw = extra.get("retry_after") if isinstance(extra, dict) else None
        if raw is None:
            return None
    try:
        return max(0.0, float(raw))
    except (TypeError, ValueError):
        return None
