"""
Session-based analysis for interactive callers.

A caller first exchanges its own Claude and Postman credentials for a
bearer token, then submits diffs with that token. Each analysis builds
fresh clients from the session's credentials, so no credential is shared
between callers.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from prdocumentator.clients.claude import ClaudeClient
from prdocumentator.clients.postman import PostmanClient
from prdocumentator.config.models import DocumentatorConfig
from prdocumentator.errors import UnauthorizedError, ValidationError
from prdocumentator.models.analysis import AnalysisResult
from prdocumentator.models.github import PullRequestEvent
from prdocumentator.models.session import SessionCredentials, UserSession
from prdocumentator.services.analyzer import AnalyzerService
from prdocumentator.services.sessions import SessionStore, utc_now
from prdocumentator.utils.logging import mask_token

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "

AnalyzerFactory = Callable[[UserSession], AnalyzerService]


class AuthResponse(BaseModel):
    """Returned after a successful credential exchange."""

    token: str
    expires_at: datetime
    message: str = Field(
        default="Session created successfully. Use this token for API requests."
    )


def strip_bearer(authorization: Optional[str]) -> str:
    """Take the token out of an ``Authorization`` header value."""
    if not authorization:
        return ""
    if authorization.startswith(BEARER_PREFIX):
        return authorization[len(BEARER_PREFIX):].strip()
    return authorization.strip()


class WebAnalysisService:
    """Credential exchange and token-authenticated diff analysis."""

    def __init__(
        self,
        sessions: SessionStore,
        config: Optional[DocumentatorConfig] = None,
        analyzer_factory: Optional[AnalyzerFactory] = None,
    ) -> None:
        """Initialize the service.

        Args:
            sessions: Shared session store
            config: Non-secret client settings (model, URLs, timeouts)
            analyzer_factory: Builds an analyzer for a session; defaults to
                HTTP clients configured from the session's credentials
        """
        self._sessions = sessions
        self._config = config or DocumentatorConfig()
        self._analyzer_factory = analyzer_factory or self._build_analyzer

    def authenticate(self, credentials: SessionCredentials | dict[str, Any]) -> AuthResponse:
        """Exchange a credential bundle for a session token.

        Raises:
            ValidationError: A credential is missing or empty
        """
        if not isinstance(credentials, SessionCredentials):
            try:
                credentials = SessionCredentials.model_validate(credentials)
            except PydanticValidationError as e:
                raise ValidationError(f"Validation failed: {e.error_count()} errors") from e

        missing = [
            name
            for name in ("claude_api_key", "postman_api_key")
            if not getattr(credentials, name).get_secret_value()
        ]
        if missing:
            raise ValidationError(f"Validation failed: missing {', '.join(missing)}")

        token = self._sessions.create_session(credentials)
        session = self._sessions.get_session(token)
        expires_at = session.expires_at if session else utc_now() + self._sessions.ttl
        return AuthResponse(token=token, expires_at=expires_at)

    def resolve_session(self, authorization: Optional[str]) -> UserSession:
        """Resolve an ``Authorization`` header (or bare token) to a live session.

        Raises:
            UnauthorizedError: No token, or the token is unknown or expired
        """
        token = strip_bearer(authorization)
        if not token:
            raise UnauthorizedError("Authorization token required")
        session = self._sessions.get_session(token)
        if session is None:
            raise UnauthorizedError("Invalid or expired token")
        return session

    async def analyze(self, authorization: Optional[str], diff: str) -> AnalysisResult:
        """Analyze ``diff`` with the credentials of the caller's session.

        Raises:
            UnauthorizedError: Bad or expired token
            ValidationError: Empty diff
            DocumentatorError: The oracle failed
        """
        session = self.resolve_session(authorization)
        if not diff or not diff.strip():
            raise ValidationError("Validation failed: diff is required")

        event = PullRequestEvent.manual(diff, source="web")
        async with self._analyzer_factory(session) as analyzer:
            result = await analyzer.analyze_pull_request(event)

        logger.info(
            f"Web analysis completed for {mask_token(strip_bearer(authorization))}: "
            f"{len(result.new_routes)} new, {len(result.modified_routes)} modified "
            f"(confidence {result.confidence})"
        )
        return result

    def _build_analyzer(self, session: UserSession) -> AnalyzerService:
        claude_config = self._config.claude.model_copy(update={"api_key": session.claude_api_key})
        postman_config = self._config.postman.model_copy(
            update={
                "api_key": session.postman_api_key,
                "workspace_id": session.postman_workspace_id,
                "collection_id": session.postman_collection_id,
            }
        )
        return AnalyzerService(
            oracle=ClaudeClient.from_config(claude_config),
            store=PostmanClient.from_config(postman_config),
            include_existing_routes=self._config.analysis.include_existing_routes,
            timeout=self._config.analysis.analysis_timeout,
            target_folder=postman_config.target_folder,
        )
