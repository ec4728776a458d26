"""Async HTTP client for the megaverse challenge API.

Wraps httpx and turns non-success responses into classified errors:
a body carrying the rate limit phrase becomes RateLimitedError, anything
else becomes MegaverseApiError.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from megaverse.domain.exceptions import MegaverseApiError, RateLimitedError

logger = logging.getLogger(__name__)

RATE_LIMIT_PHRASE = "Too Many Requests"


def classify_failure(response: httpx.Response) -> MegaverseApiError:
    """Builds the error matching a non-success response."""
    body = response.text
    message = f"HTTP {response.status_code} from {response.request.method} {response.request.url}: {body}"
    if RATE_LIMIT_PHRASE in body:
        return RateLimitedError(message, status_code=response.status_code, body=body)
    return MegaverseApiError(message, status_code=response.status_code, body=body)


class MegaverseHttpClient:
    """Thin async wrapper over httpx bound to the challenge API base URL."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: float,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url + "/",
            timeout=httpx.Timeout(timeout_seconds, connect=10.0),
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    async def send(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> httpx.Response:
        """Sends a request with an optional JSON body.

        Raises:
            RateLimitedError: If the API throttled the request.
            MegaverseApiError: On any other non-success status or transport error.
        """
        try:
            response = await self._client.request(method, path.lstrip("/"), json=payload)
        except httpx.HTTPError as exc:
            logger.warning(f"HTTP error calling {method} {path}: {exc}")
            raise MegaverseApiError(f"{method} {path} failed: {exc}") from exc

        if not response.is_success:
            raise classify_failure(response)
        return response

    async def get_json(self, path: str) -> Any:
        """GETs `path` and decodes the JSON body.

        Raises:
            MegaverseApiError: On a failed request or a body that is not JSON.
        """
        response = await self.send("GET", path)
        try:
            return response.json()
        except ValueError as exc:
            raise MegaverseApiError(f"Invalid JSON from GET {path}: {exc}", status_code=response.status_code, body=response.text) from exc

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> MegaverseHttpClient:
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.aclose()
