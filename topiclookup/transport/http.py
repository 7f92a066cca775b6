"""
REST transport for lookup requests.

LookupTransport is the seam the resolver and the metadata provider talk
through. HttpTransport implements it on top of an httpx.AsyncClient and
translates every httpx failure into the topiclookup error taxonomy.
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx

from topiclookup.errors import TransportError, error_from_status
from topiclookup.utils.logging import get_logger

logger = get_logger(__name__)


class LookupTransport(ABC):
    """Asynchronous GET-only REST transport."""

    @abstractmethod
    async def get_json(self, path: str) -> Any:
        """
        GET a path and decode the JSON body.

        Args:
            path: Request path relative to the service URL

        Returns:
            Decoded JSON document

        Raises:
            TransportError: On any request or decoding failure
        """
        pass

    @abstractmethod
    async def get_text(self, path: str) -> str:
        """
        GET a path and return the body as text.

        Args:
            path: Request path relative to the service URL

        Returns:
            Response body

        Raises:
            TransportError: On any request failure
        """
        pass

    async def close(self) -> None:
        """Release transport resources."""
        pass


def _failure_reason(response: httpx.Response) -> str:
    """Prefer the server's JSON reason, then the body, then the status phrase."""
    body = response.text
    try:
        document = json.loads(body)
    except ValueError:
        document = None

    if isinstance(document, dict) and document.get("reason"):
        return str(document["reason"])
    if body.strip():
        return body.strip()
    return response.reason_phrase or f"HTTP {response.status_code}"


class HttpTransport(LookupTransport):
    """
    httpx-backed transport.

    Features:
    - One pooled AsyncClient per transport
    - Read timeout taken from the lookup configuration
    - Static request headers (e.g. pre-issued authorization tokens)
    """

    def __init__(
        self,
        service_url: str,
        read_timeout_ms: int = 60000,
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize HTTP transport.

        Args:
            service_url: Base URL of the lookup service
            read_timeout_ms: Read timeout for each request
            headers: Headers sent with every request
            transport: Custom httpx transport (e.g. httpx.MockTransport)
        """
        self.service_url = service_url.rstrip("/")
        self.read_timeout_ms = read_timeout_ms
        self._client = httpx.AsyncClient(
            base_url=self.service_url,
            headers={"Accept": "application/json", **(headers or {})},
            timeout=httpx.Timeout(read_timeout_ms / 1000.0),
            transport=transport,
        )

        logger.info(
            "HttpTransport initialized",
            service_url=self.service_url,
            read_timeout_ms=read_timeout_ms,
        )

    async def _get(self, path: str) -> httpx.Response:
        try:
            response = await self._client.get(path)
        except httpx.TimeoutException as e:
            raise TransportError(
                f"GET {path} timed out after {self.read_timeout_ms} ms", cause=e
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(
                f"GET {path} failed: {type(e).__name__}: {e}", cause=e
            ) from e

        if response.is_error:
            reason = _failure_reason(response)
            logger.debug(
                "Request failed",
                path=path,
                status_code=response.status_code,
                reason=reason,
            )
            cause = httpx.HTTPStatusError(
                f"HTTP {response.status_code}",
                request=response.request,
                response=response,
            )
            raise error_from_status(response.status_code, reason, cause=cause)

        return response

    async def get_json(self, path: str) -> Any:
        response = await self._get(path)
        try:
            return response.json()
        except ValueError as e:
            raise TransportError(
                f"GET {path} returned an invalid JSON body", cause=e
            ) from e

    async def get_text(self, path: str) -> str:
        response = await self._get(path)
        return response.text

    async def close(self) -> None:
        await self._client.aclose()
        logger.info("HttpTransport closed", service_url=self.service_url)
