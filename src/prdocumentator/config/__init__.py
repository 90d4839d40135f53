"""
Configuration management.

- YAML configuration loading and validation
- ``${VAR}`` substitution and ``PRDOC_*`` overrides
- Credentials from the environment and ``.env`` files
"""

from prdocumentator.config.environment import (
    ENV_VARS,
    EnvironmentConfig,
    ensure_dotenv_loaded,
    load_environment,
    reset_environment,
)
from prdocumentator.config.loader import (
    CONFIG_ENV_VAR,
    DEFAULT_CONFIG_PATHS,
    ENV_VAR_OVERRIDES,
    ConfigLoader,
    ConfigurationError,
    load_config,
)
from prdocumentator.config.models import (
    AnalysisConfig,
    ClaudeConfig,
    DocumentatorConfig,
    GitHubConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
    PostmanConfig,
    SessionConfig,
)

__all__ = [
    # Config models
    "AnalysisConfig",
    "ClaudeConfig",
    "DocumentatorConfig",
    "GitHubConfig",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "PostmanConfig",
    "SessionConfig",
    # Loader
    "CONFIG_ENV_VAR",
    "DEFAULT_CONFIG_PATHS",
    "ENV_VAR_OVERRIDES",
    "ConfigLoader",
    "ConfigurationError",
    "load_config",
    # Environment
    "ENV_VARS",
    "EnvironmentConfig",
    "ensure_dotenv_loaded",
    "load_environment",
    "reset_environment",
]
