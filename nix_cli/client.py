"""HTTP client for the agent server.

Three calls are used: create a session, submit a prompt without waiting for
the reply, and subscribe to the server-sent event stream. Every call is
attempted exactly once.
"""

import json
from collections.abc import AsyncIterator
from contextlib import aclosing, asynccontextmanager
from typing import Any

import httpx

from .errors import ApiError
from .logging_config import get_logger
from .types import Event, Session, decode_event

logger = get_logger(__name__)

REQUEST_TIMEOUT = 30.0  # seconds, for ordinary requests; the event stream has none


async def iter_sse_data(lines: AsyncIterator[str]) -> AsyncIterator[str]:
    """Yield the data payload of each server-sent event.

    Multi-line data fields are joined with newlines; comments and other
    fields (event:, id:, retry:) are ignored.
    """
    data: list[str] = []
    async for line in lines:
        line = line.rstrip("\r\n")
        if not line:
            # Empty line = end of event
            if data:
                yield "\n".join(data)
                data = []
            continue
        if line.startswith(":"):
            continue
        field, _, value = line.partition(":")
        if field == "data":
            data.append(value[1:] if value.startswith(" ") else value)
    # Final event if the stream ended without a trailing blank line
    if data:
        yield "\n".join(data)


async def _decode_stream(lines: AsyncIterator[str]) -> AsyncIterator[Event]:
    """Decoded events until the stream ends or the connection drops."""
    try:
        async for payload in iter_sse_data(lines):
            try:
                raw = json.loads(payload)
            except json.JSONDecodeError as e:
                logger.debug("Skipping malformed event payload: %s", e)
                continue
            yield decode_event(raw)
    except httpx.TransportError as e:
        # A dropped connection ends the stream like a clean close
        logger.warning("Event stream closed by server: %s", e)


def _error_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


class OpencodeClient:
    """Async client bound to one server URL."""

    def __init__(self, base_url: str, transport: httpx.AsyncBaseTransport | None = None):
        self._http = httpx.AsyncClient(
            base_url=base_url,
            timeout=REQUEST_TIMEOUT,
            transport=transport,
        )

    async def __aenter__(self) -> "OpencodeClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._http.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise ApiError(f"{method} {url} failed: {e}") from e
        if response.is_error:
            raise ApiError.from_response(response.status_code, _error_body(response))
        return response

    async def create_session(self, title: str) -> Session:
        response = await self._request("POST", "/session", json={"title": title})
        try:
            return Session.from_dict(response.json())
        except (ValueError, KeyError, TypeError) as e:
            raise ApiError(f"Unexpected session response: {e}", status=response.status_code) from e

    async def prompt_async(self, session_id: str, system: str, text: str) -> None:
        """Submit a prompt; the reply arrives on the event stream."""
        body = {
            "system": system,
            "parts": [{"type": "text", "text": text}],
        }
        await self._request("POST", f"/session/{session_id}/prompt_async", json=body)

    @asynccontextmanager
    async def subscribe(self) -> AsyncIterator[AsyncIterator[Event]]:
        """Open the event stream.

        The connection is established (headers received) before the block
        runs, so events caused by requests made inside it are not missed.
        """
        timeout = httpx.Timeout(REQUEST_TIMEOUT, read=None)
        try:
            async with self._http.stream("GET", "/event", timeout=timeout) as response:
                if response.is_error:
                    await response.aread()
                    raise ApiError.from_response(response.status_code, _error_body(response))
                async with aclosing(_decode_stream(response.aiter_lines())) as events:
                    yield events
        except httpx.HTTPError as e:
            raise ApiError(f"Event stream failed: {e}") from e
