"""
Pull request diff fetcher.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from prdocumentator.clients.base import BaseHTTPClient
from prdocumentator.config.models import GitHubConfig
from prdocumentator.errors import ExternalServiceError, ValidationError

logger = logging.getLogger(__name__)


class GitHubDiffFetcher(BaseHTTPClient):
    """Downloads a pull request's diff from its ``diff_url``."""

    service_name = "github"

    def __init__(
        self,
        token: Optional[str] = None,
        timeout: float = 30.0,
        **kwargs: Any,
    ) -> None:
        super().__init__(timeout=timeout, max_retries=1, **kwargs)
        self._token = token

    @classmethod
    def from_config(cls, config: GitHubConfig, **kwargs: Any) -> GitHubDiffFetcher:
        token = config.token.get_secret_value() if config.token else None
        return cls(token=token, timeout=config.timeout, **kwargs)

    def _default_headers(self) -> dict[str, str]:
        headers = {"Accept": "text/plain"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def _raise_for_status(self, response: httpx.Response) -> None:
        if response.status_code != 200:
            raise ExternalServiceError(
                f"Failed to fetch diff, status: {response.status_code}",
                upstream_status=response.status_code,
            )

    async def fetch_diff(self, reference: str) -> str:
        """Fetch the diff at ``reference`` (a URL).

        Raises:
            ValidationError: Empty reference
            ExternalServiceError: Any non-200 response
        """
        if not reference:
            raise ValidationError("Diff URL is empty")

        logger.debug(f"Fetching PR diff from {reference}")
        response = await self._request("GET", reference, follow_redirects=True)
        diff = response.text
        logger.debug(f"Fetched diff: {len(diff)} chars")
        return diff
