"""
Configuration Data Models.

Defines all configuration schemas using Pydantic for validation
and type safety.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, SecretStr, field_validator

DEFAULT_CLAUDE_MODEL = "claude-3-sonnet-20240229"
DEFAULT_CLAUDE_BASE_URL = "https://api.anthropic.com"
DEFAULT_POSTMAN_BASE_URL = "https://api.postman.com"
DEFAULT_PROCESSABLE_ACTIONS = ["opened", "synchronize", "reopened"]


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class LogFormat(str, Enum):
    """Log output formats."""

    TEXT = "text"
    RICH = "rich"


class ClaudeConfig(BaseModel):
    """Configuration for the Anthropic Messages API oracle.

    Attributes:
        api_key: Anthropic API key
        model: Model identifier
        max_tokens: Maximum output tokens per call
        base_url: API base URL
        timeout: Request timeout in seconds
        max_retries: Attempts for rate-limited or unavailable responses
    """

    api_key: Optional[SecretStr] = Field(default=None, description="Anthropic API key")
    model: str = Field(
        default=DEFAULT_CLAUDE_MODEL,
        description="Model identifier",
        examples=[DEFAULT_CLAUDE_MODEL, "claude-sonnet-4-5-20250929"],
    )
    max_tokens: int = Field(default=4096, ge=1, description="Max output tokens")
    base_url: str = Field(default=DEFAULT_CLAUDE_BASE_URL)
    timeout: float = Field(default=30.0, gt=0, description="Request timeout (s)")
    max_retries: int = Field(default=3, ge=1, le=10)

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class PostmanConfig(BaseModel):
    """Configuration for the Postman collection store.

    Attributes:
        api_key: Postman API key
        workspace_id: Workspace holding the collection
        collection_id: Collection kept in sync
        base_url: API base URL
        timeout: Request timeout in seconds
        max_retries: Attempts for rate-limited or unavailable responses
        target_folder: Folder new requests are added to (root when unset)
    """

    api_key: Optional[SecretStr] = Field(default=None, description="Postman API key")
    workspace_id: Optional[str] = Field(default=None)
    collection_id: Optional[str] = Field(default=None)
    base_url: str = Field(default=DEFAULT_POSTMAN_BASE_URL)
    timeout: float = Field(default=30.0, gt=0)
    max_retries: int = Field(default=3, ge=1, le=10)
    target_folder: Optional[str] = Field(
        default=None,
        description="Folder for new requests",
        examples=["API Changes"],
    )

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class GitHubConfig(BaseModel):
    """Configuration for fetching pull request diffs.

    Attributes:
        token: Optional token for private repositories
        timeout: Request timeout in seconds
    """

    token: Optional[SecretStr] = Field(default=None, description="GitHub token")
    timeout: float = Field(default=30.0, gt=0)


class SessionConfig(BaseModel):
    """Session store settings.

    Attributes:
        ttl: Session lifetime in seconds
        cleanup_interval: Seconds between expired-session sweeps
    """

    ttl: float = Field(default=3600.0, gt=0)
    cleanup_interval: float = Field(default=600.0, gt=0)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Attributes:
        level: Root log level
        format: ``text`` for plain lines, ``rich`` for the rich console handler
    """

    level: LogLevel = Field(default=LogLevel.INFO)
    format: LogFormat = Field(default=LogFormat.TEXT)

    @field_validator("level", mode="before")
    @classmethod
    def uppercase_level(cls, v):
        if isinstance(v, str):
            return v.upper()
        return v

    @field_validator("format", mode="before")
    @classmethod
    def lowercase_format(cls, v):
        # "json" was accepted by older deployments; treat it as plain text.
        if isinstance(v, str):
            v = v.lower()
            return LogFormat.TEXT.value if v == "json" else v
        return v


class AnalysisConfig(BaseModel):
    """Analysis pipeline settings.

    Attributes:
        processable_actions: Pull request actions that trigger an analysis
        include_existing_routes: Send documented routes to the oracle as context
        analysis_timeout: Upper bound in seconds for each upstream step
    """

    processable_actions: list[str] = Field(
        default_factory=lambda: list(DEFAULT_PROCESSABLE_ACTIONS),
    )
    include_existing_routes: bool = Field(default=True)
    analysis_timeout: float = Field(default=120.0, gt=0)


class DocumentatorConfig(BaseModel):
    """Root configuration.

    Attributes:
        claude: Oracle client settings
        postman: Collection store settings
        github: Diff fetcher settings
        sessions: Session store settings
        logging: Logging settings
        analysis: Pipeline settings
    """

    claude: ClaudeConfig = Field(default_factory=ClaudeConfig)
    postman: PostmanConfig = Field(default_factory=PostmanConfig)
    github: GitHubConfig = Field(default_factory=GitHubConfig)
    sessions: SessionConfig = Field(default_factory=SessionConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)

    def missing_credentials(self) -> list[str]:
        """Names of the settings required for a full analysis that are unset."""
        missing = []
        if self.claude.api_key is None:
            missing.append("claude.api_key")
        if self.postman.api_key is None:
            missing.append("postman.api_key")
        if not self.postman.collection_id:
            missing.append("postman.collection_id")
        return missing
