"""
Chat-completion client for the hosted review endpoint.

Thin wrapper over ``httpx.AsyncClient`` that posts
``{model, messages, temperature, max_tokens}`` to ``/chat/completions`` and
returns the trimmed message content.  Three failure modes are handled here
so callers only ever see a ``ReviewError``:

- HTTP 429: exponential backoff (base delay doubling, ``Retry-After``
  honored, capped), then ``RateLimitError``
- empty content: a short pause and a retry, then ``EmptyCompletionError``
- a call exceeding its deadline: ``CompletionTimeoutError``
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Awaitable, Callable

import httpx

from ..core.engine.config_loader import ReviewSettings

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]
Message = dict[str, str]


class ReviewError(Exception):
    """Raised when the completion endpoint cannot produce usable text."""

    pass


class RateLimitError(ReviewError):
    """Raised when HTTP 429 persists after every backoff retry."""

    pass


class EmptyCompletionError(ReviewError):
    """Raised when the endpoint keeps answering without content."""

    pass


class CompletionTimeoutError(ReviewError):
    """Raised when a single call exceeds its deadline."""

    pass


def parse_retry_after(value: str | None, now: datetime | None = None) -> float | None:
    """
    Seconds from a ``Retry-After`` header, or None if absent/unparseable.

    Accepts delay-seconds or an HTTP date; a date already past gives 0.
    """
    if value is None:
        return None
    try:
        seconds = float(value.strip())
    except ValueError:
        pass
    else:
        return seconds if seconds >= 0 else None
    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    return max(0.0, (when - now).total_seconds())


def backoff_delay(attempt: int, settings: ReviewSettings, retry_after: float | None = None) -> float:
    """
    Delay before rate-limit retry number ``attempt`` (0-based).

    base × 2^attempt, replaced by ``Retry-After`` when the server sends one,
    and never longer than the configured ceiling.
    """
    delay = settings.rate_limit_base_delay_seconds * (2**attempt)
    if retry_after is not None:
        delay = retry_after
    return min(delay, settings.rate_limit_max_delay_seconds)


def extract_content(data: Any) -> str:
    """Return ``choices[0].message.content`` stripped, or '' when missing."""
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return ""
    return content.strip() if isinstance(content, str) else ""


class CompletionClient:
    """
    Async client for an OpenAI-compatible chat-completions endpoint.

    Use as an async context manager so the underlying connection pool is
    closed::

        async with CompletionClient(settings) as client:
            text = await client.complete(messages, max_tokens=500)

    ``transport`` and ``sleep`` are injectable for tests.
    """

    def __init__(
        self,
        settings: ReviewSettings,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.settings = settings
        self._sleep = sleep
        headers = {"Content-Type": "application/json"}
        if settings.api_key:
            headers["Authorization"] = f"Bearer {settings.api_key}"
        self._http = httpx.AsyncClient(
            base_url=settings.base_url.rstrip("/"),
            headers=headers,
            transport=transport,
        )

    async def __aenter__(self) -> "CompletionClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # ------------------------------------------------------------------
    # Request plumbing
    # ------------------------------------------------------------------

    async def _post(self, payload: dict[str, Any], timeout: float) -> httpx.Response:
        try:
            return await asyncio.wait_for(
                self._http.post("/chat/completions", json=payload, timeout=timeout),
                timeout=timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise CompletionTimeoutError(f"completion call exceeded {timeout:g}s") from e
        except httpx.HTTPError as e:
            raise ReviewError(f"completion request failed: {e}") from e

    async def _post_with_backoff(self, payload: dict[str, Any], timeout: float) -> httpx.Response:
        retries = self.settings.rate_limit_retries
        for attempt in range(retries + 1):
            response = await self._post(payload, timeout)
            if response.status_code != 429:
                return response
            if attempt == retries:
                break
            delay = backoff_delay(
                attempt, self.settings, parse_retry_after(response.headers.get("Retry-After"))
            )
            logger.warning(
                "Rate limited (429); retry %d/%d in %.1fs", attempt + 1, retries, delay
            )
            await self._sleep(delay)
        raise RateLimitError(f"rate limited after {retries} retries")

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def complete(
        self,
        messages: list[Message],
        max_tokens: int,
        timeout: float | None = None,
    ) -> str:
        """
        Run one chat completion and return its non-empty text.

        Args:
            messages: ``[{role, content}, ...]``
            max_tokens: Completion token budget
            timeout: Per-call deadline in seconds (defaults to settings)

        Returns:
            Stripped message content

        Raises:
            RateLimitError, EmptyCompletionError, CompletionTimeoutError,
            ReviewError
        """
        payload = {
            "model": self.settings.model,
            "messages": messages,
            "temperature": self.settings.temperature,
            "max_tokens": max_tokens,
        }
        deadline = timeout if timeout is not None else self.settings.timeout_seconds
        retries = self.settings.empty_content_retries

        for attempt in range(retries + 1):
            response = await self._post_with_backoff(payload, deadline)
            if response.status_code >= 400:
                raise ReviewError(f"completion endpoint returned HTTP {response.status_code}")
            try:
                data = response.json()
            except ValueError as e:
                raise ReviewError("completion endpoint returned invalid JSON") from e

            content = extract_content(data)
            if content:
                return content
            if attempt < retries:
                logger.warning("Empty completion; retry %d/%d", attempt + 1, retries)
                await self._sleep(self.settings.empty_content_delay_seconds)

        raise EmptyCompletionError("completion endpoint returned no content")
