"""HTTP client for the translator microservice.

Protocol: `GET {base_url}/?content=<percent-encoded text>` answering
`{"is_english": bool, "translated_content": str}`. Every way the call can go wrong
(deadline, transport, status, body) surfaces as `ExternalServiceException` so callers
handle a single failure type.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from forum.core.exceptions import ExternalServiceException

from .schemas import TranslationOutcome, TranslatorResponse

logger = logging.getLogger(__name__)

SERVICE_NAME = "translator"
DEFAULT_TIMEOUT_SECONDS = 35.0

# Characters encodeURIComponent leaves untouched.
_URI_SAFE = "!'()*-._~"


def build_request_url(base_url: str, content: str) -> str:
    """Percent-encode content the way `encodeURIComponent` does."""
    return f"{base_url.rstrip('/')}/?content={quote(content, safe=_URI_SAFE)}"


class TranslatorClient:
    """Thin async wrapper over `httpx.AsyncClient` with a hard per-call deadline."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._http = http_client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))

    async def fetch(self, content: str) -> TranslationOutcome:
        """Ask the translator about `content`; raises ExternalServiceException on any failure."""
        url = build_request_url(self.base_url, content)
        try:
            # wait_for cancels the in-flight request once the deadline passes.
            response = await asyncio.wait_for(self._http.get(url), timeout=self.timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            raise ExternalServiceException(
                SERVICE_NAME,
                f"Request timeout after {self.timeout:g} seconds",
                timed_out=True,
            ) from exc
        except httpx.HTTPError as exc:
            raise ExternalServiceException(
                SERVICE_NAME, f"Request failed: {exc}"
            ) from exc

        if not response.is_success:
            raise ExternalServiceException(
                SERVICE_NAME, f"Unexpected status {response.status_code}"
            )

        try:
            payload = TranslatorResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise ExternalServiceException(
                SERVICE_NAME, "Invalid API response format"
            ) from exc
        return payload.to_outcome()

    async def aclose(self) -> None:
        await self._http.aclose()


__all__ = ["TranslatorClient", "build_request_url", "SERVICE_NAME"]
