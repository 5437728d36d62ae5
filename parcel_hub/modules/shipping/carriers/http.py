"""
HTTP Carrier Base

Shared plumbing for carriers that talk to a web API:
- Lazily created httpx.AsyncClient
- Transport and HTTP status failures raised as CarrierTransportError
- Carrier-reported business errors raised as CarrierServiceError

Building the carrier's request payloads and parsing its responses stays in
each concrete carrier.
"""
import logging
from typing import Any, Dict, NoReturn, Optional, Sequence

import httpx

from parcel_hub.core.config import settings
from parcel_hub.core.exceptions import CarrierServiceError, CarrierTransportError
from parcel_hub.modules.shipping.carriers.base import BaseCarrier

logger = logging.getLogger(__name__)


class HttpCarrier(BaseCarrier):
    """
    Base class for carriers backed by an HTTP API.

    Subclasses set PRODUCTION_URL / SANDBOX_URL (or pass base_url) and
    call `_request` for every outbound call.
    """

    PRODUCTION_URL: str = ""
    SANDBOX_URL: str = ""
    DEFAULT_HEADERS: Dict[str, str] = {}

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        if base_url is None:
            base_url = self.SANDBOX_URL if settings.CARRIER_USE_SANDBOX else self.PRODUCTION_URL
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout if timeout is not None else settings.CARRIER_HTTP_TIMEOUT_SECONDS
        self._http_client = http_client

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=self.timeout,
                headers=dict(self.DEFAULT_HEADERS),
            )
        return self._http_client

    async def close(self):
        """Close HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def __aenter__(self):
        await self._get_http_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def _request(self, method: str, path: str = "", **kwargs: Any) -> httpx.Response:
        """
        Make a request against the carrier API.

        Args:
            method: HTTP method
            path: Path appended to base_url, or an absolute URL
            **kwargs: Passed through to httpx (params, json, content, headers...)

        Returns:
            The httpx.Response for any status below 400

        Raises:
            CarrierTransportError: network failure or HTTP status >= 400
        """
        client = await self._get_http_client()
        url = path if path.startswith(("http://", "https://")) else f"{self.base_url}{path}"

        try:
            response = await client.request(method.upper(), url, **kwargs)
        except httpx.RequestError as e:
            logger.error(f"{self.vendor} API request failed: {e}")
            raise CarrierTransportError(
                f"Network error: {e}",
                vendor=self.vendor,
                code="NETWORK_ERROR",
            ) from e

        logger.debug(f"{self.vendor} API {method.upper()} {url} -> {response.status_code}")

        if response.status_code >= 400:
            logger.error(
                f"{self.vendor} API error: {response.status_code} - {response.text[:500]}"
            )
            raise CarrierTransportError(
                f"{self.vendor} API returned HTTP {response.status_code}",
                vendor=self.vendor,
                status_code=response.status_code,
                code=str(response.status_code),
                details={"body": response.text[:500]},
            )

        return response

    def _raise_service_error(self, errors: Sequence[str], body: str = "") -> NoReturn:
        """Raise the carrier's own error messages as a CarrierServiceError."""
        logger.warning(f"{self.vendor} reported errors: {'; '.join(errors) or 'unknown'}")
        raise CarrierServiceError(errors, body=body, vendor=self.vendor)
