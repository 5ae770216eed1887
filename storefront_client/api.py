"""HTTP client for the storefront backend."""

import logging
from typing import Any, Optional

import httpx

from .notifications import LoggingNotifier, Notifier

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = "Internal server error"
TRANSPORT_ERROR_MESSAGE = "Could not reach the server"


class StorefrontError(Exception):
    """Base error for the storefront client."""


class ApiError(StorefrontError):
    """Transport failure or non-2xx response from the backend."""

    def __init__(self, message: str, status_code: Optional[int] = None, payload: Any = None):
        self.message = message
        self.status_code = status_code
        self.payload = payload
        super().__init__(message)


class InvalidPayloadError(StorefrontError):
    """A response record failed validation."""


class ApiClient:
    """Client for the storefront REST API.

    Every request and response is logged. Failures are reported once to the
    notifier and raised as ApiError; nothing is retried.
    """

    DEFAULT_HEADERS = {
        "Content-Type": "application/json",
        "Cache-Control": "no-cache, no-store, must-revalidate",
        "Pragma": "no-cache",
        "Expires": "0",
    }

    def __init__(
        self,
        base_url: str,
        notifier: Optional[Notifier] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the API client.

        Args:
            base_url: Backend base URL
            notifier: Sink for user-facing error messages (default: log only)
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.notifier = notifier or LoggingNotifier()
        self.client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers=self.DEFAULT_HEADERS,
            transport=transport,
            event_hooks={
                "request": [self._log_request],
                "response": [self._log_response],
            },
        )

    async def _log_request(self, request: httpx.Request) -> None:
        logger.info(f"🚀 {request.method} {request.url.path}")

    async def _log_response(self, response: httpx.Response) -> None:
        logger.info(f"✅ {response.status_code} {response.request.url.path}")

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    @staticmethod
    def _error_message(payload: Any) -> str:
        if isinstance(payload, dict):
            for key in ("error", "message"):
                if isinstance(payload.get(key), str) and payload[key]:
                    return payload[key]
        return DEFAULT_ERROR_MESSAGE

    async def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: Optional[dict[str, Any]] = None,
    ) -> Any:
        """
        Send a request and return the decoded response body.

        Args:
            method: HTTP method
            path: Path relative to the base URL
            json: Optional JSON body
            params: Optional query parameters

        Returns:
            Decoded JSON payload, raw text for non-JSON bodies, None if empty

        Raises:
            ApiError: On transport errors or non-2xx responses
        """
        try:
            response = await self.client.request(method, path, json=json, params=params)
        except httpx.HTTPError as e:
            logger.error(f"❌ {method} {path} failed: {e}")
            self.notifier.error(TRANSPORT_ERROR_MESSAGE)
            raise ApiError(TRANSPORT_ERROR_MESSAGE) from e

        payload = self._decode(response)
        if response.is_error:
            message = self._error_message(payload)
            logger.error(f"❌ {response.status_code} {method} {path}: {payload!r}")
            self.notifier.error(message)
            raise ApiError(message, status_code=response.status_code, payload=payload)

        return payload

    async def get(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Any = None) -> Any:
        return await self.request("POST", path, json=json)

    async def put(self, path: str, json: Any = None) -> Any:
        return await self.request("PUT", path, json=json)

    async def patch(self, path: str, json: Any = None) -> Any:
        return await self.request("PATCH", path, json=json)

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.aclose()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
