"""HTTP transport for the DHL XML-PI endpoint.

One POST per call, no retry. The request timeout is owned here. Use as an
async context manager to share one httpx client across calls, or inject
an existing httpx.AsyncClient (tests pass one built on MockTransport).

Example:
    async with DHLTransport(resolve_base_url("test")) as transport:
        body = await transport.post(xml)
"""

import logging

import httpx

from src.services.dhl_constants import DHL_UTF8_QUERY, DHL_XML_MEDIA_TYPE
from src.services.errors import TransportError
from src.utils.redaction import sanitize_error_message

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0


class DHLTransport:
    """Posts XML documents to DHL and returns the response body text."""

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            base_url: Full XMLShippingServlet URL.
            timeout: Request timeout in seconds.
            client: Optional pre-built client. It is not closed by this
                transport.
        """
        self._base_url = base_url
        self._timeout = timeout
        self._client = client
        self._owns_client = False

    @property
    def base_url(self) -> str:
        return self._base_url

    async def __aenter__(self) -> "DHLTransport":
        """Open an httpx async client unless one was injected."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
            self._owns_client = True
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Close the client opened by __aenter__."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None
            self._owns_client = False

    async def post(self, body: str) -> str:
        """Send one request document.

        Args:
            body: Serialized XML request.

        Returns:
            Response body text.

        Raises:
            TransportError: On connection failure, timeout or a non-2xx status.
        """
        if self._client is None:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                return await self._send(client, body)
        return await self._send(self._client, body)

    async def _send(self, client: httpx.AsyncClient, body: str) -> str:
        try:
            response = await client.post(
                self._base_url,
                params=DHL_UTF8_QUERY,
                headers={
                    "Accept": DHL_XML_MEDIA_TYPE,
                    "Content-Type": DHL_XML_MEDIA_TYPE,
                },
                content=body.encode("utf-8"),
                timeout=self._timeout,
            )
        except httpx.HTTPError as e:
            logger.warning("DHL request to %s failed: %s", self._base_url, e)
            raise TransportError.for_exception(e) from e

        if not response.is_success:
            logger.warning(
                "DHL responded with HTTP %d: %s",
                response.status_code,
                sanitize_error_message(response.text, max_length=500),
            )
            raise TransportError.for_status(response.status_code, response.text)

        return response.text
