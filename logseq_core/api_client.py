# =============================================================================
# logseq_core/api_client.py  —  Logseq HTTP API Client
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Sends one RPC-style request to Logseq's local HTTP API and turns the
#   outcome into either parsed JSON or one of our typed errors.
#
# THE WIRE FORMAT:
#   POST {base_url}/api
#   Authorization: Bearer <token>
#   {"method": "logseq.Editor.getPage", "args": ["My Page"]}
#
# OUTCOME MAPPING:
#   2xx            → parsed JSON, passed through unmodified (null included)
#   2xx, no body   → None (updateBlock answers this way)
#   401 / 403      → AuthError
#   other 4xx/5xx  → RemoteError(status, body)
#   no response    → TransportError (connect failure, timeout)
#
# ONE ATTEMPT PER CALL:
#   Logseq gives no idempotency guarantee for createPage/insertBlock, so a
#   retry here could create duplicate content.  Retrying is left to callers.
#
# CONCURRENCY:
#   One LogseqClient (and its pooled httpx.AsyncClient) is shared by every
#   in-flight tool call.  call() keeps no per-call state on self.
# =============================================================================

import asyncio
import json
import logging
from typing import Any, Optional, Sequence

import httpx

from logseq_core.errors import AuthError, RemoteError, TransportError
from logseq_core.models import RemoteRequest, Settings

logger = logging.getLogger(__name__)


class LogseqClient:
    """Async client for Logseq's `/api` endpoint.

    Usage:
        async with LogseqClient(settings) as client:
            page = await client.call("logseq.Editor.getPage", ["Inbox"])
    """

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            settings: Shared, read-only connection settings.
            transport: Optional httpx transport (tests pass a MockTransport).
        """
        self._settings = settings
        self._http = httpx.AsyncClient(
            timeout=httpx.Timeout(settings.timeout_seconds),
            headers={
                "Authorization": f"Bearer {settings.token}",
                "Content-Type": "application/json",
            },
            transport=transport,
        )
        logger.info(f"LogseqClient initialized: url={settings.api_url}")

    async def call(self, method: str, args: Sequence[Any] = ()) -> Any:
        """Invoke one Logseq API method.

        Args:
            method: Dot-qualified method name, e.g. "logseq.Editor.getPage".
            args: Positional arguments in the method's documented order.

        Returns:
            The decoded JSON response (None for null or an empty body).

        Raises:
            AuthError: HTTP 401/403.
            RemoteError: Any other non-2xx status, or a non-JSON body.
            TransportError: No HTTP response within the timeout.
        """
        request = RemoteRequest(method=method, args=list(args))
        timeout = self._settings.timeout_seconds
        logger.debug(f"Logseq call: {method} ({len(request.args)} args)")

        try:
            response = await asyncio.wait_for(
                self._http.post(self._settings.api_url, json=request.to_payload()),
                timeout=timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException):
            logger.warning(f"Logseq call {method} timed out after {timeout:g}s")
            raise TransportError(
                f"request timed out after {timeout:g}s "
                "(a write may still have been applied by Logseq)"
            ) from None
        except httpx.HTTPError as e:
            logger.warning(f"Logseq call {method} failed: {e!r}")
            raise TransportError(f"{type(e).__name__}: {e}") from e

        return self._decode(method, response)

    def _decode(self, method: str, response: httpx.Response) -> Any:
        status = response.status_code
        if status in (401, 403):
            logger.warning(f"Logseq call {method} rejected: HTTP {status}")
            raise AuthError(status, response.text)
        if not response.is_success:
            logger.warning(f"Logseq call {method} failed: HTTP {status}")
            raise RemoteError(status, response.text)

        body = response.text
        if not body.strip():
            return None
        try:
            return json.loads(body)
        except json.JSONDecodeError:
            raise RemoteError(status, f"response is not valid JSON: {body}") from None

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "LogseqClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
