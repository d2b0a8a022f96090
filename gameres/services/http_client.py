"""HTTP client service for launcher API requests."""

import json
from typing import Any

import httpx
import structlog

from .errors import RemoteFetchError

log = structlog.stdlib.get_logger()


class HttpClientService:
    """Thin async JSON client with timeout handling and error classification.

    Requests are attempted once. Failures are raised as ``RemoteFetchError``
    and retrying is left to the caller.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        verify_ssl: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the HTTP client service.

        Args:
            timeout: Request timeout in seconds
            verify_ssl: Whether to verify SSL certificates
            transport: Optional transport override (used by tests)
        """
        self.timeout = timeout
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            headers={"User-Agent": "gameres/0.1.0"},
            follow_redirects=True,
            verify=verify_ssl,
            transport=transport,
        )
        log.debug("HTTP client service initialized", timeout=timeout, verify_ssl=verify_ssl)

    async def get_json(
        self,
        url: str,
        params: dict[str, str] | None = None,
    ) -> Any:
        """GET ``url`` and decode the JSON body.

        Raises:
            RemoteFetchError: On transport errors, non-2xx status or invalid JSON
        """
        log.debug("Making HTTP GET request", url=url)
        try:
            response = await self._client.get(url, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            log.warning("HTTP GET request failed", url=url, status_code=status_code)
            raise RemoteFetchError(
                f"The launcher server answered with HTTP {status_code}.",
                original_error=e,
                url=url,
                status_code=status_code,
            ) from e
        except httpx.TimeoutException as e:
            log.warning("HTTP GET request timed out", url=url, error=str(e))
            raise RemoteFetchError(
                "The request timed out. The launcher server may be slow or unavailable.",
                original_error=e,
                url=url,
            ) from e
        except httpx.RequestError as e:
            log.warning(
                "HTTP GET request failed",
                url=url,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise RemoteFetchError(
                "A network error occurred. Please check your connection.",
                original_error=e,
                url=url,
            ) from e

        try:
            data = response.json()
        except json.JSONDecodeError as e:
            log.warning("Response is not valid JSON", url=url, error=str(e))
            raise RemoteFetchError(
                "The launcher server returned invalid JSON.",
                original_error=e,
                url=url,
                status_code=response.status_code,
            ) from e

        log.info(
            "HTTP GET request successful",
            url=url,
            status_code=response.status_code,
            content_length=len(response.content),
        )
        return data

    async def close(self) -> None:
        """Close the HTTP client and clean up resources."""
        await self._client.aclose()
        log.debug("HTTP client closed")

    async def __aenter__(self) -> "HttpClientService":
        return self

    async def __aexit__(self, exc_type: type[Exception] | None, exc_val: Exception | None, exc_tb: Any) -> None:
        await self.close()
