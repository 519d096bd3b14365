"""AI gateway client (OpenAI-compatible chat completions)."""

import json
import logging
from typing import Any

import httpx

from headhunter_trace.config import get_settings
from headhunter_trace.analysis.exceptions import (
    GatewayError,
    GatewayNotConfiguredError,
    GatewayRateLimitedError,
    UnparseableResultError,
)
from headhunter_trace.analysis.prompts import build_messages

logger = logging.getLogger(__name__)


class AIGatewayClient:
    """Asks the completion model for a fictional SearchData JSON object."""

    def __init__(
        self,
        url: str,
        api_key: str,
        model: str,
        timeout: float = 90.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = url
        self._api_key = api_key
        self._model = model
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self._timeout, transport=self._transport)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def analyze(self, query: str) -> dict[str, Any]:
        """Return the parsed JSON object produced for ``query``.

        The payload is relayed as parsed; shape validation is the caller's job.
        """
        if not self._api_key:
            raise GatewayNotConfiguredError()

        client = await self._get_client()
        try:
            response = await client.post(
                self._url,
                headers={
                    "Authorization": f"Bearer {self._api_key}",
                    "Content-Type": "application/json",
                },
                json={
                    "model": self._model,
                    "messages": build_messages(query),
                    "response_format": {"type": "json_object"},
                },
            )
        except httpx.HTTPError as e:
            logger.error(f"AI gateway request failed: {e}")
            raise GatewayError(f"AI gateway request failed: {e}") from e

        if response.status_code == 429:
            logger.warning("AI gateway: Rate limit exceeded")
            raise GatewayRateLimitedError()

        if not response.is_success:
            logger.error(f"AI gateway error: {response.status_code} - {response.text}")
            raise GatewayError(f"AI gateway error: {response.status_code}")

        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError):
            content = None
        if not content:
            raise GatewayError("No content in AI response")

        try:
            parsed = json.loads(content)
        except json.JSONDecodeError:
            logger.error(f"Failed to parse AI response: {content}")
            raise UnparseableResultError()

        if not isinstance(parsed, dict):
            raise UnparseableResultError()

        logger.info(f"Analysis completed. Found {len(parsed.get('results') or [])} results")
        return parsed


# =============================================================================
# Singleton instance
# =============================================================================

_gateway_client: AIGatewayClient | None = None


def get_gateway_client() -> AIGatewayClient:
    """Get singleton AI gateway client instance."""
    global _gateway_client
    if _gateway_client is None:
        settings = get_settings()
        _gateway_client = AIGatewayClient(
            url=settings.ai_gateway_url,
            api_key=settings.ai_gateway_api_key,
            model=settings.ai_gateway_model,
            timeout=settings.ai_gateway_timeout_seconds,
        )
    return _gateway_client
