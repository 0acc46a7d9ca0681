"""
HTTP client for the stops backend.

The client performs the data request and sorts failures into the two error
kinds the dashboard distinguishes:

- NetworkError: the endpoint could not be reached (connection refused, DNS
  failure, timeout)
- ApplicationError: the endpoint answered, but with a non-success status or
  a body that is not JSON
"""

import logging
from typing import Any, Optional

import httpx

from ..models.config import BackendConfig
from ..validation import ApplicationError, NetworkError, validate_base_url

logger = logging.getLogger(__name__)

USER_AGENT = "stopmonitor/1.0"


class StopsClient:
    """
    Async client for `GET {base}/api/data`.

    The underlying httpx.AsyncClient is created from the backend settings
    unless one is supplied (tests pass one built on httpx.MockTransport).

    Raises:
        ValidationError: If the client would be created without a usable base URL
    """

    def __init__(self, backend: BackendConfig, http_client: Optional[httpx.AsyncClient] = None):
        if http_client is None:
            validate_base_url(backend.base_url, field_name="backend.base_url")
        self.backend = backend
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            base_url=backend.base_url,
            timeout=httpx.Timeout(backend.timeout_seconds, connect=backend.connect_timeout_seconds),
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
            follow_redirects=True,
        )

    @property
    def data_url(self) -> str:
        return self.backend.data_url

    async def fetch_stops(self) -> Any:
        """
        Request the stop records and return the decoded JSON body.

        Returns:
            The decoded body, in whatever shape the backend sent

        Raises:
            NetworkError: If the request could not reach the endpoint
            ApplicationError: On a non-success status or an undecodable body
        """
        url = self.data_url
        try:
            response = await self._http.get(self.backend.data_path)
        except httpx.TransportError as e:
            raise NetworkError(f"Could not reach {url}: {e.__class__.__name__}: {e}", url=url) from e
        except httpx.RequestError as e:
            raise ApplicationError(f"Request to {url} failed: {e}", url=url) from e

        if not response.is_success:
            raise ApplicationError(
                f"Backend answered {response.status_code} {response.reason_phrase} for {url}",
                url=url,
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise ApplicationError(
                f"Backend returned a body that is not JSON for {url}: {e}",
                url=url,
                status_code=response.status_code,
            ) from e

        logger.debug(f"Fetched {len(response.content)} bytes from {url}")
        return payload

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            await self._http.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
