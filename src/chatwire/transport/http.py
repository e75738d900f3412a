# src/chatwire/transport/http.py
from __future__ import annotations
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

import httpx

from chatwire.core.errors import DecodeError, TransportError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 120.0


def _status_error(resp: httpx.Response, what: str) -> TransportError:
    status = resp.status_code
    logger.error("Failed to make %s request (status=%s, url=%s)", what, status, resp.request.url)
    return TransportError(f"{what} request failed with HTTP {status}", status_code=status)


async def _iter_body(resp: httpx.Response) -> AsyncIterator[bytes]:
    try:
        async for chunk in resp.aiter_bytes():
            if chunk:
                yield chunk
    except httpx.HTTPError as e:
        raise TransportError(f"Error while reading response body: {e}") from e


class HttpTransport:
    """
    Thin httpx wrapper. Every call opens its own AsyncClient unless one was
    injected (tests pass a client built on httpx.MockTransport).
    """

    def __init__(self, *, timeout: Optional[float] = None, client: Optional[httpx.AsyncClient] = None):
        self.timeout = DEFAULT_TIMEOUT if timeout is None else float(timeout)
        self._client = client

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._client is not None:
            yield self._client
            return
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            yield client

    @asynccontextmanager
    async def stream_post(
        self,
        url: str,
        headers: Dict[str, str],
        body: Dict[str, Any],
    ) -> AsyncIterator[AsyncIterator[bytes]]:
        """
        POST a JSON body and yield the raw byte stream of a 2xx response.
        Raises TransportError on non-2xx or network failure.
        """
        try:
            async with self._session() as client:
                async with client.stream("POST", url, json=body, headers=headers) as resp:
                    if not resp.is_success:
                        await resp.aread()
                        raise _status_error(resp, "completion")
                    yield _iter_body(resp)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(f"HTTP request to {url} failed: {e}") from e

    async def get_json(self, url: str, headers: Optional[Dict[str, str]] = None) -> Any:
        try:
            async with self._session() as client:
                resp = await client.get(url, headers=headers or {})
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(f"HTTP request to {url} failed: {e}") from e
        if not resp.is_success:
            raise _status_error(resp, "list models")
        try:
            return resp.json()
        except ValueError as e:
            raise DecodeError(f"Response from {url} is not valid JSON: {e}") from e
