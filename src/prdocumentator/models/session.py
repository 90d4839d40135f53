"""
User session model for the web analysis flow.
"""

from datetime import datetime

from pydantic import BaseModel, Field, SecretStr


class SessionCredentials(BaseModel):
    """Credentials a caller exchanges for a session token.

    Attributes:
        claude_api_key: Anthropic API key used for the oracle call
        postman_api_key: Postman API key used for the collection store
        postman_workspace_id: Postman workspace the collection lives in
        postman_collection_id: Collection to keep in sync
    """

    claude_api_key: SecretStr = Field(..., description="Anthropic API key")
    postman_api_key: SecretStr = Field(..., description="Postman API key")
    postman_workspace_id: str = Field(..., min_length=1)
    postman_collection_id: str = Field(..., min_length=1)


class UserSession(SessionCredentials):
    """A credential bundle with an expiry."""

    created_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        """A session is expired strictly after ``expires_at``."""
        return now > self.expires_at
