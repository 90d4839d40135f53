"""
Anthropic Messages API client.

Sends a diff to the model with a forced ``analyze_api_changes`` tool call
and parses the tool input into a ``RouteChangeSet``. The tool input is
treated as untrusted: anything that does not validate is reported as a
validation error rather than partially applied.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from prdocumentator.clients.base import BaseHTTPClient, error_detail
from prdocumentator.clients.prompts import (
    ANALYSIS_TOOL,
    ANALYSIS_TOOL_NAME,
    SYSTEM_PROMPT,
    build_analysis_prompt,
)
from prdocumentator.config.models import (
    DEFAULT_CLAUDE_BASE_URL,
    DEFAULT_CLAUDE_MODEL,
    ClaudeConfig,
)
from prdocumentator.errors import (
    ExternalServiceError,
    RateLimitError,
    UnauthorizedError,
    UnavailableError,
    ValidationError,
)
from prdocumentator.models.github import GitHubPullRequest, GitHubRepository
from prdocumentator.models.routes import ExistingRoute, RouteChangeSet

logger = logging.getLogger(__name__)

ANTHROPIC_VERSION = "2023-06-01"
MESSAGES_ENDPOINT = "/v1/messages"
UNAVAILABLE_STATUSES = (500, 502, 503, 504)


class ClaudeClient(BaseHTTPClient):
    """Route-change oracle backed by the Anthropic Messages API.

    Example:
        async with ClaudeClient(api_key="sk-ant-...") as oracle:
            change_set = await oracle.analyze(diff)
    """

    service_name = "claude"

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_CLAUDE_MODEL,
        max_tokens: int = 4096,
        base_url: str = DEFAULT_CLAUDE_BASE_URL,
        timeout: float = 30.0,
        max_retries: int = 3,
        **kwargs: Any,
    ) -> None:
        super().__init__(base_url=base_url, timeout=timeout, max_retries=max_retries, **kwargs)
        if not api_key:
            raise UnauthorizedError("Claude API key is not configured")
        self._api_key = api_key
        self._model = model
        self._max_tokens = max_tokens

    @classmethod
    def from_config(cls, config: ClaudeConfig, **kwargs: Any) -> ClaudeClient:
        api_key = config.api_key.get_secret_value() if config.api_key else ""
        return cls(
            api_key=api_key,
            model=config.model,
            max_tokens=config.max_tokens,
            base_url=config.base_url,
            timeout=config.timeout,
            max_retries=config.max_retries,
            **kwargs,
        )

    @property
    def model(self) -> str:
        return self._model

    def _default_headers(self) -> dict[str, str]:
        return {
            "x-api-key": self._api_key,
            "anthropic-version": ANTHROPIC_VERSION,
            "Content-Type": "application/json",
        }

    def _raise_for_status(self, response: httpx.Response) -> None:
        status = response.status_code
        if status < 400:
            return
        if status == 401:
            raise UnauthorizedError("Invalid Claude API key")
        if status == 429:
            retry_after = response.headers.get("retry-after", "unknown")
            logger.warning(f"Claude rate limited, retry-after: {retry_after}")
            raise RateLimitError("Claude rate limit exceeded", retry_after=retry_after)
        if status in UNAVAILABLE_STATUSES:
            raise UnavailableError("Claude API unavailable", upstream_status=status)
        raise ExternalServiceError(
            f"Claude API error: HTTP {status}: {error_detail(response)}",
            upstream_status=status,
        )

    def build_request(
        self,
        diff: str,
        existing_routes: Optional[list[ExistingRoute]] = None,
        pull_request: Optional[GitHubPullRequest] = None,
        repository: Optional[GitHubRepository] = None,
    ) -> dict[str, Any]:
        """Build the Messages API request body."""
        prompt = build_analysis_prompt(diff, existing_routes, pull_request, repository)
        return {
            "model": self._model,
            "max_tokens": self._max_tokens,
            "system": SYSTEM_PROMPT,
            "messages": [{"role": "user", "content": prompt}],
            "tools": [ANALYSIS_TOOL],
            "tool_choice": {"type": "tool", "name": ANALYSIS_TOOL_NAME},
        }

    async def analyze(
        self,
        diff: str,
        existing_routes: Optional[list[ExistingRoute]] = None,
        pull_request: Optional[GitHubPullRequest] = None,
        repository: Optional[GitHubRepository] = None,
    ) -> RouteChangeSet:
        """Ask the model which routes a diff adds, changes or removes.

        Args:
            diff: Unified diff text
            existing_routes: Routes already documented, sent as context
            pull_request: Pull request details, if the diff came from one
            repository: Repository the pull request belongs to

        Returns:
            The model's route change set

        Raises:
            UnauthorizedError: Invalid API key
            RateLimitError: Rate limited after all retries
            UnavailableError: 5xx after all retries
            UpstreamTimeoutError: Transport timeout
            ExternalServiceError: Any other API failure or no tool call
            ValidationError: Tool input that does not describe a change set
        """
        body = self.build_request(diff, existing_routes, pull_request, repository)

        start_time = time.time()
        logger.info(f"Sending diff ({len(diff)} chars) to {self._model}")
        response = await self._request("POST", MESSAGES_ENDPOINT, json=body)
        latency_ms = int((time.time() - start_time) * 1000)

        change_set = self.parse_response(response)
        logger.info(
            f"Claude analysis completed in {latency_ms}ms: "
            f"{len(change_set.new_routes)} new, "
            f"{len(change_set.modified_routes)} modified, "
            f"{len(change_set.deleted_routes)} deleted "
            f"(confidence {change_set.confidence})"
        )
        return change_set

    def parse_response(self, response: httpx.Response) -> RouteChangeSet:
        """Extract the change set from the forced tool call."""
        try:
            data = response.json()
        except ValueError as e:
            raise ExternalServiceError("Claude returned invalid JSON") from e

        content = data.get("content") if isinstance(data, dict) else None
        if not content:
            raise ExternalServiceError("Claude returned empty response content")
        if not isinstance(content, list):
            raise ExternalServiceError("Claude returned malformed response content")

        tool_input = None
        for block in content:
            if not isinstance(block, dict):
                raise ExternalServiceError("Claude returned a malformed content block")
            if block.get("type") == "tool_use" and block.get("name") == ANALYSIS_TOOL_NAME:
                tool_input = block.get("input")
                break
        if tool_input is None:
            raise ExternalServiceError("No tool use found in Claude response")

        try:
            return RouteChangeSet.model_validate(tool_input)
        except PydanticValidationError as e:
            raise ValidationError(
                f"Claude tool output failed validation: {e.error_count()} errors"
            ) from e
