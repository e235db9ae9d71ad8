"""Configuration management for Datadog MCP server."""

import json
import os
from pathlib import Path
from typing import Optional, Dict, Any
from pydantic import BaseModel, Field, field_validator, ValidationError as PydanticValidationError

from . import __version__
from .exceptions import ConfigurationError


DEFAULT_SITE = "datadoghq.com"


class DatadogConfig(BaseModel):
    """Configuration for Datadog MCP server.

    Built once at process start and handed to the HTTP client and the
    endpoint resolver; nothing downstream reads environment variables.
    """

    # Datadog API credentials
    api_key: str = Field(
        default="",
        description="Datadog API key (DD_API_KEY)"
    )
    app_key: str = Field(
        default="",
        description="Datadog application key (DD_APP_KEY)"
    )

    # Site selection
    site: str = Field(
        default=DEFAULT_SITE,
        description="Datadog site hostname (DD_SITE)"
    )
    logs_site: Optional[str] = Field(
        default=None,
        description="Site override for all API calls (DD_LOGS_SITE)"
    )

    # Logging configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )
    log_format: str = Field(
        default="json",
        description="Log format (json or text)"
    )

    # MCP server configuration
    server_name: str = Field(
        default="datadog-mcp-server",
        description="MCP server name"
    )
    server_version: str = Field(
        default=__version__,
        description="MCP server version"
    )

    @field_validator("site")
    @classmethod
    def validate_site(cls, v: str) -> str:
        """Strip the site hostname; an empty value falls back to the default."""
        v = v.strip()
        return v or DEFAULT_SITE

    @field_validator("logs_site")
    @classmethod
    def validate_logs_site(cls, v: Optional[str]) -> Optional[str]:
        """Treat an empty logs site as unset."""
        if v is None:
            return None
        v = v.strip()
        return v or None

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of: {', '.join(sorted(valid_levels))}")
        return v_upper

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        valid_formats = {"json", "text"}
        v_lower = v.lower()
        if v_lower not in valid_formats:
            raise ValueError(f"Log format must be one of: {', '.join(sorted(valid_formats))}")
        return v_lower

    @property
    def resolved_site(self) -> str:
        """Site hostname used for every API call.

        ``logs_site`` wins over ``site``, which itself defaults to the public
        US1 hostname.
        """
        return self.logs_site or self.site or DEFAULT_SITE

    @classmethod
    def from_env(cls) -> "DatadogConfig":
        """Create configuration from environment variables."""
        return cls.from_env_and_file(None)

    @classmethod
    def from_file(cls, config_path: Path) -> "DatadogConfig":
        """Create configuration from a JSON configuration file.

        Args:
            config_path: Path to the JSON configuration file

        Returns:
            DatadogConfig instance

        Raises:
            ConfigurationError: If the file is missing, unreadable or invalid
        """
        return cls._build(cls._read_file(config_path))

    @classmethod
    def from_env_and_file(cls, config_path: Optional[Path] = None) -> "DatadogConfig":
        """Create configuration from environment variables and optional config file.

        Environment variables take precedence over config file values.

        Args:
            config_path: Optional path to JSON configuration file

        Returns:
            DatadogConfig instance

        Raises:
            ConfigurationError: If the file or an environment value is invalid
        """
        config_data: Dict[str, Any] = {}
        if config_path:
            config_data.update(cls._read_file(config_path))

        # Later entries win, so generic fallbacks come first
        env_mappings = {
            "LOG_LEVEL": "log_level",
            "LOG_FORMAT": "log_format",
            "DD_API_KEY": "api_key",
            "DD_APP_KEY": "app_key",
            "DD_SITE": "site",
            "DD_LOGS_SITE": "logs_site",
            "DD_MCP_LOG_LEVEL": "log_level",
            "DD_MCP_LOG_FORMAT": "log_format",
            "DD_MCP_SERVER_NAME": "server_name",
            "DD_MCP_SERVER_VERSION": "server_version",
        }

        for env_var, config_key in env_mappings.items():
            env_value = os.getenv(env_var)
            if env_value:
                config_data[config_key] = env_value.strip()

        return cls._build(config_data)

    @staticmethod
    def _read_file(config_path: Path) -> Dict[str, Any]:
        if not config_path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {config_path}",
                context={"path": str(config_path)}
            )

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                file_config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in configuration file {config_path}: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Error reading configuration file {config_path}: {e}") from e

        if not isinstance(file_config, dict):
            raise ConfigurationError(
                f"Configuration file must contain a JSON object, got {type(file_config).__name__}"
            )
        return file_config

    @classmethod
    def _build(cls, config_data: Dict[str, Any]) -> "DatadogConfig":
        try:
            return cls(**config_data)
        except PydanticValidationError as e:
            first = e.errors()[0]
            config_key = ".".join(str(x) for x in first["loc"])
            raise ConfigurationError(
                f"Invalid configuration value for {config_key}: {first['msg']}",
                config_key=config_key
            ) from e

    def validate_required_fields(self) -> Dict[str, str]:
        """Validate that credentials are present.

        Returns:
            Dictionary of validation errors (empty if valid)
        """
        errors = {}

        if not self.api_key:
            errors["api_key"] = "Datadog API key is not set. Set DD_API_KEY or provide api_key in the config file."

        if not self.app_key:
            errors["app_key"] = "Datadog application key is not set. Set DD_APP_KEY or provide app_key in the config file."

        return errors

    def get_validation_summary(self) -> Dict[str, Any]:
        """Get a summary of configuration validation status.

        Credentials are reported as set/unset, never echoed.
        """
        errors = self.validate_required_fields()

        return {
            "valid": len(errors) == 0,
            "errors": errors,
            "config": {
                "api_key_set": bool(self.api_key),
                "app_key_set": bool(self.app_key),
                "site": self.site,
                "logs_site": self.logs_site,
                "resolved_site": self.resolved_site,
                "log_level": self.log_level,
                "log_format": self.log_format,
                "server_name": self.server_name,
                "server_version": self.server_version,
            }
        }
