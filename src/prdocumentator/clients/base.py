"""
Shared plumbing for the upstream HTTP clients.

Defines the protocols the analyzer depends on and a small async base class
that owns an ``httpx.AsyncClient``, maps transport failures onto the error
taxonomy and retries transient failures with tenacity.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol, runtime_checkable

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from prdocumentator.errors import (
    ExternalServiceError,
    RateLimitError,
    UnavailableError,
    UpstreamTimeoutError,
)
from prdocumentator.models.collection import CollectionMeta, CollectionTree
from prdocumentator.models.github import GitHubPullRequest, GitHubRepository
from prdocumentator.models.routes import ExistingRoute, RouteChangeSet

logger = logging.getLogger(__name__)

# Errors worth another attempt
RETRYABLE_ERRORS = (RateLimitError, UnavailableError)


@runtime_checkable
class RouteOracle(Protocol):
    """Infers route changes from a diff."""

    async def analyze(
        self,
        diff: str,
        existing_routes: Optional[list[ExistingRoute]] = None,
        pull_request: Optional[GitHubPullRequest] = None,
        repository: Optional[GitHubRepository] = None,
    ) -> RouteChangeSet: ...


@runtime_checkable
class CollectionStore(Protocol):
    """Reads and writes the documentation collection."""

    @property
    def collection_id(self) -> str: ...

    async def fetch_tree(self) -> CollectionTree: ...

    async def persist_tree(self, tree: CollectionTree) -> CollectionMeta: ...


@runtime_checkable
class DiffSource(Protocol):
    """Fetches a diff given a reference such as a diff URL."""

    async def fetch_diff(self, reference: str) -> str: ...


class BaseHTTPClient:
    """Async HTTP client base with retry and error mapping.

    Subclasses provide ``_default_headers()`` and ``_raise_for_status()``.
    """

    service_name = "upstream"

    def __init__(
        self,
        base_url: str = "",
        timeout: float = 30.0,
        max_retries: int = 3,
        wait_min: float = 1.0,
        wait_max: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Base URL requests are relative to
            timeout: Request timeout in seconds
            max_retries: Total attempts for retryable failures
            wait_min: Minimum backoff between attempts, seconds
            wait_max: Maximum backoff between attempts, seconds
            transport: Optional httpx transport (tests)
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._max_retries = max(1, max_retries)
        self._wait_min = wait_min
        self._wait_max = wait_max
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self):
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    def _default_headers(self) -> dict[str, str]:
        return {}

    async def _ensure_client(self) -> httpx.AsyncClient:
        """Ensure HTTP client is initialized."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers=self._default_headers(),
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _raise_for_status(self, response: httpx.Response) -> None:
        raise NotImplementedError

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send one request, mapping transport failures to taxonomy errors."""
        client = await self._ensure_client()
        try:
            response = await client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            raise UpstreamTimeoutError(f"{self.service_name} request timed out") from e
        except httpx.HTTPError as e:
            raise ExternalServiceError(f"{self.service_name} request failed") from e
        self._raise_for_status(response)
        return response

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send a request, retrying rate-limited and unavailable responses.

        Raises:
            DocumentatorError: The last failure once attempts are exhausted,
                or the first non-retryable one
        """
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self._max_retries),
            wait=wait_exponential(multiplier=1, min=self._wait_min, max=self._wait_max),
            retry=retry_if_exception_type(RETRYABLE_ERRORS),
            reraise=True,
        ):
            with attempt:
                attempt_num = attempt.retry_state.attempt_number
                logger.debug(
                    f"{self.service_name} {method} {url} "
                    f"(attempt {attempt_num}/{self._max_retries})"
                )
                return await self._send(method, url, **kwargs)

        # Unreachable with reraise=True, but satisfies type checker
        raise ExternalServiceError(f"{self.service_name} request failed")


def error_detail(response: httpx.Response) -> str:
    """Best-effort error text from an error response."""
    try:
        data = response.json()
    except ValueError:
        return response.text
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict):
            return str(error.get("message") or error.get("name") or response.text)
        if isinstance(error, str):
            return error
    return response.text
