"""Client for the osint-search analysis function.

Request:  {"query", "searchId", "userId"}
Success:  {"success": true, "data": SearchData, "searchId", "query"}
Failure:  {"success": false, "error"} or a non-2xx status (429 = rate limited)
"""

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from headhunter_trace.config import get_settings
from headhunter_trace.core.interfaces import IAnalysisFunction
from headhunter_trace.searches.schemas import SearchData
from headhunter_trace.searches.exceptions import (
    AnalysisFunctionError,
    AnalysisRateLimitedError,
    MalformedPayloadError,
)

logger = logging.getLogger(__name__)


class AnalysisFunctionClient(IAnalysisFunction):
    """Invokes the analysis function once per search. No retries, no caching."""

    def __init__(
        self,
        url: str,
        timeout: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            url: Full URL of the analysis function
            timeout: Request timeout in seconds
            transport: Optional transport (used to stub the network in tests)
        """
        self._url = url
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
                headers={"Content-Type": "application/json"},
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def invoke(self, query: str, search_id: str, user_id: str) -> SearchData:
        """Run the analysis for ``query`` and return the parsed search data.

        Raises:
            AnalysisRateLimitedError: The function answered 429
            MalformedPayloadError: The payload is not JSON or does not match SearchData
            AnalysisFunctionError: Any other failure (network, non-2xx, success=false)
        """
        client = await self._get_client()

        try:
            response = await client.post(
                self._url,
                json={"query": query, "searchId": search_id, "userId": user_id},
            )
        except httpx.HTTPError as e:
            logger.error(f"Analysis function request failed for search {search_id}: {e}")
            raise AnalysisFunctionError(f"Search failed: {e}") from e

        if response.status_code == 429:
            logger.warning(f"Analysis function rate limited for search {search_id}")
            raise AnalysisRateLimitedError(_error_message(response) or AnalysisRateLimitedError().message)

        if not response.is_success:
            logger.error(f"Analysis function error: {response.status_code} - {response.text}")
            raise AnalysisFunctionError(
                _error_message(response) or f"Search failed with status {response.status_code}"
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise MalformedPayloadError("The search returned a response that is not JSON.") from e

        if not isinstance(payload, dict):
            raise MalformedPayloadError()

        if not payload.get("success") or payload.get("data") is None:
            raise AnalysisFunctionError(payload.get("error") or "Search failed")

        try:
            return SearchData.model_validate(payload["data"])
        except ValidationError as e:
            logger.error(f"Analysis payload for search {search_id} is malformed: {e}")
            raise MalformedPayloadError() from e


def _error_message(response: httpx.Response) -> str | None:
    try:
        body: Any = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return None


# =============================================================================
# Singleton instance
# =============================================================================

_analysis_client: AnalysisFunctionClient | None = None


def get_analysis_client() -> AnalysisFunctionClient:
    """Get singleton analysis function client instance."""
    global _analysis_client
    if _analysis_client is None:
        settings = get_settings()
        _analysis_client = AnalysisFunctionClient(
            url=settings.analysis_function_url,
            timeout=settings.analysis_timeout_seconds,
        )
    return _analysis_client
