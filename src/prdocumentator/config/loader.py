"""
Configuration Loader.

Loads and validates configuration from YAML files with environment
variable substitution, ``PRDOC_*`` overrides and credentials from the
environment.
"""

import os
import re
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import ValidationError

from prdocumentator.config.environment import EnvironmentConfig, load_environment
from prdocumentator.config.models import DocumentatorConfig

# Default configuration file locations
DEFAULT_CONFIG_PATHS = [
    "prdoc.yaml",
    "prdoc.yml",
    ".prdoc.yaml",
    ".prdoc.yml",
    "config.yaml",
    "config.yml",
]

# Environment variable for config path
CONFIG_ENV_VAR = "PRDOC_CONFIG"

# Environment variable overrides for configuration settings
# Maps env var name to config path (dot-separated)
ENV_VAR_OVERRIDES = {
    # Oracle
    "PRDOC_CLAUDE_MODEL": "claude.model",
    "PRDOC_CLAUDE_MAX_TOKENS": "claude.max_tokens",
    "PRDOC_CLAUDE_BASE_URL": "claude.base_url",
    "PRDOC_CLAUDE_TIMEOUT": "claude.timeout",
    "PRDOC_CLAUDE_MAX_RETRIES": "claude.max_retries",
    # Collection store
    "PRDOC_POSTMAN_BASE_URL": "postman.base_url",
    "PRDOC_POSTMAN_TIMEOUT": "postman.timeout",
    "PRDOC_POSTMAN_MAX_RETRIES": "postman.max_retries",
    "PRDOC_POSTMAN_TARGET_FOLDER": "postman.target_folder",
    # Diff fetcher
    "PRDOC_GITHUB_TIMEOUT": "github.timeout",
    # Sessions
    "PRDOC_SESSION_TTL": "sessions.ttl",
    "PRDOC_SESSION_CLEANUP_INTERVAL": "sessions.cleanup_interval",
    # Logging
    "PRDOC_LOG_LEVEL": "logging.level",
    "PRDOC_LOG_FORMAT": "logging.format",
    # Pipeline
    "PRDOC_INCLUDE_EXISTING_ROUTES": "analysis.include_existing_routes",
    "PRDOC_ANALYSIS_TIMEOUT": "analysis.analysis_timeout",
}

# Settings that are always kept as strings, never type-coerced
STRING_SETTINGS = {"postman.target_folder", "claude.model", "claude.base_url", "postman.base_url"}

# Credentials filled from the environment when the file leaves them unset
CREDENTIAL_PATHS = {
    "claude_api_key": "claude.api_key",
    "postman_api_key": "postman.api_key",
    "postman_workspace_id": "postman.workspace_id",
    "postman_collection_id": "postman.collection_id",
    "github_token": "github.token",
}


class ConfigurationError(Exception):
    """Raised when configuration is invalid."""

    def __init__(
        self,
        message: str,
        errors: Optional[list[dict]] = None,
        path: Optional[Path] = None,
    ) -> None:
        """Initialize configuration error.

        Args:
            message: Error message
            errors: List of validation errors (from Pydantic)
            path: Path to the config file that caused the error
        """
        super().__init__(message)
        self.errors = errors or []
        self.path = path

    def __str__(self) -> str:
        """Format error message with details."""
        msg = super().__str__()
        if self.path:
            msg = f"{msg} (file: {self.path})"
        if self.errors:
            error_details = []
            for err in self.errors[:5]:
                loc = ".".join(str(x) for x in err.get("loc", []))
                error_msg = err.get("msg", "Unknown error")
                error_details.append(f"  - {loc}: {error_msg}")
            if len(self.errors) > 5:
                error_details.append(f"  ... and {len(self.errors) - 5} more errors")
            msg = f"{msg}\n" + "\n".join(error_details)
        return msg


class ConfigLoader:
    """Loads configuration from YAML files.

    Precedence, lowest first: model defaults, YAML file (with ``${VAR}`` and
    ``${VAR:-default}`` substitution), ``PRDOC_*`` overrides. Credentials
    missing from the file are taken from the environment.

    Usage:
        loader = ConfigLoader("prdoc.yaml")
        config = loader.load()

        # Search PRDOC_CONFIG, then the default file names
        config = ConfigLoader().load_from_env()
    """

    # Matches ${VAR_NAME}, ${VAR_NAME:-default} and ${VAR_NAME:default}
    ENV_PATTERN = re.compile(r"\$\{(\w+)(?::-?([^}]*))?\}")

    def __init__(
        self,
        config_path: Union[str, Path, None] = None,
        env_file: str = ".env",
    ) -> None:
        self._config_path = Path(config_path) if config_path else None
        self._env_file = env_file
        self._config: Optional[DocumentatorConfig] = None
        self._loaded_from_path: Optional[Path] = None

    @property
    def config_path(self) -> Optional[Path]:
        return self._config_path

    @property
    def loaded_from_path(self) -> Optional[Path]:
        """The file the configuration was actually read from, if any."""
        return self._loaded_from_path

    @property
    def config(self) -> Optional[DocumentatorConfig]:
        return self._config

    def load(self, path: Union[str, Path, None] = None) -> DocumentatorConfig:
        """Load and validate configuration.

        Without a path, only defaults, overrides and the environment apply.

        Raises:
            ConfigurationError: If config is invalid
            FileNotFoundError: If config file not found
        """
        if path is not None:
            self._config_path = Path(path)

        environment = load_environment(self._env_file)

        if self._config_path:
            raw = self._load_yaml()
            self._loaded_from_path = self._config_path
        else:
            raw = {}
            self._loaded_from_path = None

        processed = self._substitute_env_vars(raw)
        processed = self._clean_none_values(processed)
        processed = self._apply_env_overrides(processed)
        processed = self._apply_credentials(processed, environment)

        try:
            self._config = DocumentatorConfig(**processed)
        except ValidationError as e:
            raise ConfigurationError(
                f"Configuration validation failed: {e.error_count()} errors",
                errors=e.errors(),
                path=self._loaded_from_path,
            ) from e

        return self._config

    def load_from_env(self) -> DocumentatorConfig:
        """Load configuration from PRDOC_CONFIG or the default locations.

        Unlike ``load()`` with an explicit path, a missing file is not an
        error here: every setting has a default.

        Raises:
            ConfigurationError: If config is invalid
            FileNotFoundError: If PRDOC_CONFIG names a missing file
        """
        env_config_path = os.environ.get(CONFIG_ENV_VAR)
        if env_config_path:
            config_path = Path(env_config_path)
            if not config_path.exists():
                raise FileNotFoundError(
                    f"Config file specified by {CONFIG_ENV_VAR} not found: {env_config_path}"
                )
            return self.load(config_path)

        for default_path in DEFAULT_CONFIG_PATHS:
            path = Path(default_path)
            if path.exists():
                return self.load(path)

        return self.load()

    def _load_yaml(self) -> dict[str, Any]:
        if not self._config_path.exists():
            raise FileNotFoundError(f"Config file not found: {self._config_path}")

        try:
            with open(self._config_path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML: {e}", path=self._config_path) from e

        if not isinstance(data, dict):
            raise ConfigurationError("Top-level YAML value must be a mapping", path=self._config_path)
        return data

    def _substitute_env_vars(self, data: Any) -> Any:
        """Recursively substitute ``${VAR}`` references."""
        if isinstance(data, dict):
            return {k: self._substitute_env_vars(v) for k, v in data.items()}
        elif isinstance(data, list):
            return [self._substitute_env_vars(item) for item in data]
        elif isinstance(data, str):
            return self._substitute_string(data)
        return data

    def _clean_none_values(self, data: Any) -> Any:
        """Drop None values so Pydantic falls back to defaults.

        YAML parses empty sections (with only comments) as None.
        """
        if isinstance(data, dict):
            return {k: self._clean_none_values(v) for k, v in data.items() if v is not None}
        elif isinstance(data, list):
            return [self._clean_none_values(item) for item in data]
        return data

    def _substitute_string(self, value: str) -> Any:
        """Substitute environment variables in a string.

        A string that is exactly one reference is type-coerced; references
        embedded in longer strings are substituted textually. Unresolved
        references are left as written.
        """
        full_match = self.ENV_PATTERN.fullmatch(value)
        if full_match:
            env_value = os.environ.get(full_match.group(1))
            resolved = env_value if env_value is not None else full_match.group(2)
            if resolved is not None:
                return self._coerce_type(resolved)
            return value

        def replace(match: re.Match) -> str:
            env_value = os.environ.get(match.group(1))
            if env_value is not None:
                return env_value
            if match.group(2) is not None:
                return match.group(2)
            return match.group(0)

        return self.ENV_PATTERN.sub(replace, value)

    def _coerce_type(self, value: str) -> Any:
        """Coerce a string to bool, int, float or None where it looks like one."""
        if value == "":
            return None

        lower_value = value.lower()
        if lower_value in ("true", "yes", "on"):
            return True
        if lower_value in ("false", "no", "off"):
            return False

        try:
            if "." not in value and "e" not in lower_value:
                return int(value)
            return float(value)
        except ValueError:
            pass

        return value

    def _apply_env_overrides(self, config_dict: dict[str, Any]) -> dict[str, Any]:
        """Apply PRDOC_* overrides, which take precedence over the file."""
        for env_var, config_path in ENV_VAR_OVERRIDES.items():
            env_value = os.environ.get(env_var)
            if env_value is None:
                continue
            value = env_value if config_path in STRING_SETTINGS else self._coerce_type(env_value)
            self._set_nested_value(config_dict, config_path, value)
        return config_dict

    def _apply_credentials(
        self,
        config_dict: dict[str, Any],
        environment: EnvironmentConfig,
    ) -> dict[str, Any]:
        """Fill unset credentials from the environment."""
        for env_key, config_path in CREDENTIAL_PATHS.items():
            value = getattr(environment, env_key)
            if value is None or self._get_nested_value(config_dict, config_path) is not None:
                continue
            self._set_nested_value(config_dict, config_path, value)
        return config_dict

    def _get_nested_value(self, config_dict: dict[str, Any], path: str) -> Any:
        current: Any = config_dict
        for part in path.split("."):
            if not isinstance(current, dict) or part not in current:
                return None
            current = current[part]
        return current

    def _set_nested_value(self, config_dict: dict[str, Any], path: str, value: Any) -> None:
        """Set a nested value using dot notation, creating sections as needed."""
        parts = path.split(".")
        current = config_dict
        for part in parts[:-1]:
            if not isinstance(current.get(part), dict):
                current[part] = {}
            current = current[part]
        current[parts[-1]] = value


def load_config(
    config_path: Union[str, Path, None] = None,
    env_file: str = ".env",
) -> DocumentatorConfig:
    """Load configuration from ``config_path``, or discover it when None."""
    loader = ConfigLoader(config_path, env_file)
    if config_path is None:
        return loader.load_from_env()
    return loader.load()
