"""HTTP client for the RootData Open API.

Every endpoint is a JSON POST to ``<base_url>/<endpoint>`` authenticated by
a static ``apikey`` header. Responses share one envelope::

    {"result": 200, "message": "...", "data": ...}

A non-2xx status is a transport failure; a ``result`` other than 200 is an
application failure. No retries, caching or rate limiting happen here.
"""

import logging
from typing import Any

import httpx

from ..config import Settings
from .base import (
    UpstreamApplicationError,
    UpstreamClient,
    UpstreamConfigurationError,
    UpstreamResponse,
    UpstreamTransportError,
)

logger = logging.getLogger(__name__)


class RootDataClient(UpstreamClient):
    """RootData API client backed by ``httpx.AsyncClient``.

    Usage:
        async with RootDataClient() as client:
            hits = await client.search("ethereum")
    """

    DEFAULT_HEADERS: dict[str, str] = {"Content-Type": "application/json"}

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        config: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: Overrides ``ROOTDATA_API_KEY``
            base_url: Overrides ``ROOTDATA_BASE_URL``
            config: Settings instance (defaults to the global one)
            transport: Optional httpx transport, used by tests
        """
        super().__init__(config)
        self._api_key = api_key if api_key is not None else self._config.rootdata_api_key
        self._base_url = (base_url or self._config.api_base_url).rstrip("/")
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_headers(self) -> dict[str, str]:
        headers = self.DEFAULT_HEADERS.copy()
        headers["apikey"] = self._api_key
        headers["language"] = self._config.rootdata_language
        return headers

    def _validate_connection(self) -> None:
        """Validate that the API key is configured."""
        if not self._api_key:
            raise UpstreamConfigurationError(
                "RootData API key not configured. Set ROOTDATA_API_KEY in .env"
            )

    async def connect(self) -> None:
        """Initialize the HTTP client.

        Raises:
            UpstreamConfigurationError: If the API key is missing
        """
        if self._client is not None:
            return
        self._validate_connection()
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._config.request_timeout,
            headers=self._get_headers(),
            transport=self._transport,
        )

    async def disconnect(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
        self._client = None

    def is_connected(self) -> bool:
        return self._client is not None

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise UpstreamConfigurationError("Client not connected")
        return self._client

    async def call(self, endpoint: str, body: dict[str, Any] | None = None) -> UpstreamResponse:
        """POST ``body`` to ``endpoint`` and unwrap the envelope."""
        client = self._ensure_client()
        logger.debug(f"RootData call: {endpoint} {body or {}}")

        try:
            response = await client.post(f"/{endpoint}", json=body or {})
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise UpstreamTransportError(
                f"Rootdata API returned status: {status} {e.response.reason_phrase}",
                endpoint=endpoint,
                status_code=status,
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamTransportError(
                f"Rootdata API request failed: {e}", endpoint=endpoint
            ) from e

        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamTransportError(
                f"Rootdata API returned invalid JSON for {endpoint}", endpoint=endpoint
            ) from e

        if not isinstance(payload, dict):
            raise UpstreamApplicationError(
                f"Unexpected response shape from {endpoint}", endpoint=endpoint
            )

        code = payload.get("result")
        envelope = UpstreamResponse(
            result=code,
            data=payload.get("data"),
            message=payload.get("message"),
        )
        if not envelope.ok:
            raise UpstreamApplicationError(
                envelope.message or f"API Error: {code}", endpoint=endpoint, code=code
            )
        return envelope


def create_client(config: Settings | None = None) -> RootDataClient:
    """Create a client from settings."""
    return RootDataClient(config=config)
