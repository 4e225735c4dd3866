"""Async HTTP client for the Wit.ai natural-language-understanding API.

WHY: Callers want the meaning of an utterance (audio or text) without
dealing with HTTP details: auth headers, query-string encoding of the
context hint, chunked uploads, and telling a well-formed error response
apart from a real result.

HOW: Uses httpx.AsyncClient for non-blocking HTTP. WitClient is an async
context manager: enter it to get an authenticated client, exit to close
the connection. Each operation sends exactly one request and runs the
response through _parse_response(). The module-level speech(), stream()
and text() coroutines open a WitClient for a single call.

RULES:
- One request per call; nothing is retried
- No timeout unless WIT_TIMEOUT (or timeout=) sets one
- Transport errors (httpx.HTTPError) propagate unchanged
- A JSON object carrying both "error" and "code" raises WitAPIError
- Any other JSON value is returned exactly as parsed
- Query parameters whose value is None are never sent
- Audio goes in the request body, never in the query string
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import AsyncIterator
from typing import Any

import httpx

from wit_client.api.models import ContextLike, encode_context
from wit_client.config import (
    MAX_QUERY_LENGTH,
    MESSAGE_PATH,
    SPEECH_CONTENT_TYPE,
    SPEECH_PATH,
    WIT_BASE_URL,
    WIT_STREAM_CHUNK_SIZE,
    WIT_TIMEOUT,
    load_access_token,
)

logger = logging.getLogger(__name__)


class WitError(Exception):
    """Base class for errors reported by the Wit service itself."""


class WitAPIError(WitError):
    """Raised when the Wit API answers with an error object.

    WHY: Wit reports failures (bad token, malformed request, rate limits)
    as a normal JSON body with "error" and "code" fields. Callers need a
    typed exception to tell these apart from network failures.

    HOW: Wraps the code and message from the body, plus the HTTP status.

    RULES:
    - str(exc) is exactly "<code>: <message>"
    - status_code is informational; detection never depends on it
    """

    def __init__(self, code: Any, message: Any, status_code: int | None = None) -> None:
        self.code = code
        self.message = message
        self.status_code = status_code
        super().__init__(f"{code}: {message}")


class WitResponseError(WitError):
    """Raised when the response body cannot be parsed as JSON."""

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"Wit returned a non-JSON response (HTTP {status_code}): {body[:200]}")


class QueryLengthError(ValueError):
    """Raised when a text query is empty or too long.

    RULES:
    - Raised before any network I/O
    - Valid queries have 1 to MAX_QUERY_LENGTH - 1 characters
    """


class WitClient:
    """Async client for the Wit.ai speech and message endpoints.

    WHY: Gives speech, stream and text one shared place for auth, query
    encoding and error normalization, and lets callers that issue several
    requests reuse one connection.

    HOW: Wraps httpx.AsyncClient with Bearer token auth and an
    "Accept: application/json" header. Use as an async context manager.

    RULES:
    - Use as: async with WitClient() as client: ...
    - access_token=None falls back to load_access_token() from .env
    - A blank access_token raises ValueError
    - base_url defaults to WIT_BASE_URL from config
    - timeout=None disables timeouts entirely
    - transport is for tests (httpx.MockTransport) and custom networking
    """

    def __init__(
        self,
        access_token: str | None = None,
        base_url: str | None = None,
        timeout: float | None = WIT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if access_token is None:
            access_token = load_access_token()
        elif not access_token.strip():
            raise ValueError("access_token must not be blank")
        self._access_token = access_token
        self._base_url = (base_url or WIT_BASE_URL).rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> WitClient:
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={
                "Authorization": f"Bearer {self._access_token}",
                "Accept": "application/json",
            },
            timeout=httpx.Timeout(self._timeout),
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        """Return the active httpx client, raising if not in context manager."""
        if self._client is None:
            raise RuntimeError(
                "WitClient must be used as an async context manager: "
                "async with WitClient() as client: ..."
            )
        return self._client

    # ------------------------------------------------------------------
    # Speech: complete audio buffer
    # ------------------------------------------------------------------

    async def speech(
        self,
        audio: bytes,
        context: ContextLike = None,
        msg_id: str | None = None,
        thread_id: str | None = None,
        n: int | None = None,
    ) -> Any:
        """Return the meaning extracted from a complete WAV payload.

        Args:
            audio: The whole audio file as bytes.
            context: Optional context hint (WitContext, dict or JSON string).
            msg_id: Optional id to assign to the processed message.
            thread_id: Optional id grouping requests of one conversation.
            n: Optional number of n-best trait entities to return.

        Returns:
            The parsed JSON response.
        """
        client = self._ensure_client()
        params = _query(context=encode_context(context), msg_id=msg_id, thread_id=thread_id, n=n)
        logger.debug("POST %s (%d bytes) params=%s", SPEECH_PATH, len(audio), sorted(params))

        resp = await client.post(
            SPEECH_PATH,
            params=params,
            headers={"Content-Type": SPEECH_CONTENT_TYPE},
            content=bytes(audio),
        )
        return _parse_response(resp)

    # ------------------------------------------------------------------
    # Stream: chunked upload from an open source
    # ------------------------------------------------------------------

    async def stream(
        self,
        source: Any,
        context: ContextLike = None,
        msg_id: str | None = None,
        thread_id: str | None = None,
        n: int | None = None,
        chunk_size: int = WIT_STREAM_CHUNK_SIZE,
    ) -> Any:
        """Return the meaning extracted from a streamed WAV source.

        WHY: Long recordings or live microphone input should not have to
        be buffered in memory before upload.

        HOW: Adapts the source into an async byte iterator and sends it
        with "Transfer-Encoding: chunked".

        RULES:
        - source may be a binary file object (sync or async read()),
          an async iterable of bytes, or a sync iterable of bytes
        - The source is read until exhausted but never closed here

        Returns:
            The parsed JSON response.
        """
        client = self._ensure_client()
        params = _query(context=encode_context(context), msg_id=msg_id, thread_id=thread_id, n=n)
        logger.debug("POST %s (chunked) params=%s", SPEECH_PATH, sorted(params))

        resp = await client.post(
            SPEECH_PATH,
            params=params,
            headers={
                "Content-Type": SPEECH_CONTENT_TYPE,
                "Transfer-Encoding": "chunked",
            },
            content=_iter_audio(source, chunk_size),
        )
        return _parse_response(resp)

    # ------------------------------------------------------------------
    # Text: message endpoint
    # ------------------------------------------------------------------

    async def text(
        self,
        q: str,
        context: ContextLike = None,
        msg_id: str | None = None,
        thread_id: str | None = None,
        n: int | None = None,
        verbose: bool | None = None,
    ) -> Any:
        """Return the meaning extracted from a sentence.

        Args:
            q: The user's query, 1 to 255 characters.
            context: Optional context hint (WitContext, dict or JSON string).
            msg_id: Optional id to assign to the processed message.
            thread_id: Optional id grouping requests of one conversation.
            n: Optional number of n-best trait entities to return.
            verbose: Ask for auxiliary information about entities.

        Returns:
            The parsed JSON response (typically text, intents, entities, traits).
        """
        _validate_query(q)
        client = self._ensure_client()
        params = _query(
            q=q,
            context=encode_context(context),
            msg_id=msg_id,
            thread_id=thread_id,
            n=n,
            verbose=verbose,
        )
        logger.debug("GET %s params=%s", MESSAGE_PATH, sorted(params))

        resp = await client.get(MESSAGE_PATH, params=params)
        return _parse_response(resp)


# ---------------------------------------------------------------------------
# One-shot helpers
# ---------------------------------------------------------------------------


async def speech(
    token: str | None,
    audio: bytes,
    context: ContextLike = None,
    msg_id: str | None = None,
    thread_id: str | None = None,
    n: int | None = None,
    **client_options: Any,
) -> Any:
    """Send one complete audio buffer; see WitClient.speech()."""
    async with WitClient(token, **client_options) as client:
        return await client.speech(audio, context, msg_id, thread_id, n)


async def stream(
    token: str | None,
    source: Any,
    context: ContextLike = None,
    msg_id: str | None = None,
    thread_id: str | None = None,
    n: int | None = None,
    **client_options: Any,
) -> Any:
    """Send one streamed audio source; see WitClient.stream()."""
    async with WitClient(token, **client_options) as client:
        return await client.stream(source, context, msg_id, thread_id, n)


async def text(
    token: str | None,
    q: str,
    context: ContextLike = None,
    msg_id: str | None = None,
    thread_id: str | None = None,
    n: int | None = None,
    verbose: bool | None = None,
    **client_options: Any,
) -> Any:
    """Send one text query; see WitClient.text()."""
    async with WitClient(token, **client_options) as client:
        return await client.text(q, context, msg_id, thread_id, n, verbose)


# ---------------------------------------------------------------------------
# Request/response helpers (module-private)
# ---------------------------------------------------------------------------


def _query(**params: Any) -> dict[str, Any]:
    """Drop unset parameters; httpx renders bools as "true"/"false"."""
    return {key: value for key, value in params.items() if value is not None}


def _validate_query(q: str) -> None:
    """Reject empty or over-long text queries before sending."""
    if not isinstance(q, str):
        raise TypeError("q must be a string, got {}".format(type(q).__name__))
    if not 0 < len(q) < MAX_QUERY_LENGTH:
        raise QueryLengthError(
            f"Query length must be between 1 and {MAX_QUERY_LENGTH - 1} "
            f"characters, got {len(q)}"
        )


def _is_error(data: Any) -> bool:
    """True when a parsed body is a Wit error object."""
    return isinstance(data, dict) and "error" in data and "code" in data


def _parse_response(resp: httpx.Response) -> Any:
    """Parse a Wit response body, raising for the error shape.

    RULES:
    - Detection looks only at the body, never at the status code
    - Non-JSON bodies raise WitResponseError
    """
    try:
        data = resp.json()
    except ValueError as exc:
        raise WitResponseError(resp.status_code, resp.text) from exc

    if _is_error(data):
        logger.debug("Wit API error %s (HTTP %d): %s", data["code"], resp.status_code, data["error"])
        raise WitAPIError(data["code"], data["error"], resp.status_code)

    return data


async def _iter_audio(source: Any, chunk_size: int) -> AsyncIterator[bytes]:
    """Adapt a readable source into the async byte stream httpx uploads."""
    if isinstance(source, (bytes, bytearray, memoryview)):
        yield bytes(source)
        return

    if hasattr(source, "read"):
        while True:
            chunk = source.read(chunk_size)
            if inspect.isawaitable(chunk):
                chunk = await chunk
            if not chunk:
                break
            if isinstance(chunk, str):
                raise TypeError("audio source must be opened in binary mode")
            yield bytes(chunk)
        return

    if hasattr(source, "__aiter__"):
        async for chunk in source:
            yield bytes(chunk)
        return

    for chunk in source:
        yield bytes(chunk)
