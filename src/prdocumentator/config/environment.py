"""
Environment Variable Handling.

Manages credentials using python-dotenv. Secrets are read from the process
environment (optionally populated from a ``.env`` file) and never from the
YAML configuration unless it references them via ``${VAR}``.
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, SecretStr

# Track whether dotenv has been loaded
_dotenv_loaded: bool = False


def ensure_dotenv_loaded(env_file: str = ".env") -> bool:
    """Ensure the .env file is loaded into os.environ.

    Values already present in the environment win over the file.

    Args:
        env_file: Path to .env file (relative or absolute)

    Returns:
        True if a .env file was found and loaded
    """
    global _dotenv_loaded

    if _dotenv_loaded:
        return True

    env_paths = [
        Path(env_file),
        Path.cwd() / env_file,
    ]
    for env_path in env_paths:
        if env_path.exists():
            load_dotenv(env_path, override=False)
            _dotenv_loaded = True
            return True

    _dotenv_loaded = True
    return False


class EnvironmentConfig(BaseModel):
    """Credentials taken from environment variables.

    Attributes:
        claude_api_key: Anthropic API key
        postman_api_key: Postman API key
        postman_workspace_id: Postman workspace id
        postman_collection_id: Postman collection id
        github_token: Token for fetching private diffs
    """

    claude_api_key: Optional[SecretStr] = Field(default=None)
    postman_api_key: Optional[SecretStr] = Field(default=None)
    postman_workspace_id: Optional[str] = Field(default=None)
    postman_collection_id: Optional[str] = Field(default=None)
    github_token: Optional[SecretStr] = Field(default=None)


# Environment variable names
ENV_VARS = {
    "claude_api_key": "CLAUDE_API_KEY",
    "postman_api_key": "POSTMAN_API_KEY",
    "postman_workspace_id": "POSTMAN_WORKSPACE_ID",
    "postman_collection_id": "POSTMAN_COLLECTION_ID",
    "github_token": "GITHUB_TOKEN",
}

_config: Optional[EnvironmentConfig] = None


def load_environment(env_file: str = ".env") -> EnvironmentConfig:
    """Load credentials from the environment, reading ``env_file`` first.

    The result is cached until ``reset_environment()`` is called.
    """
    global _config

    ensure_dotenv_loaded(env_file)
    if _config is None:
        values = {}
        for config_key, env_var in ENV_VARS.items():
            value = os.environ.get(env_var)
            if value:
                values[config_key] = value
        _config = EnvironmentConfig(**values)
    return _config


def reset_environment() -> None:
    """Reset cached environment configuration.

    Useful for testing or reloading after .env changes.
    """
    global _config, _dotenv_loaded
    _config = None
    _dotenv_loaded = False
