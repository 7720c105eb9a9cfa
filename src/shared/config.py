"""Configuration management for the Leaf MCP proxy.

Supports YAML configuration files and environment variable overrides.
Configuration is loaded once and cached for performance.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal, Optional

import yaml
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from shared.errors import ConfigurationError
from shared.models import TenancyMode

LEAF_BASE_URL = "https://api.withleaf.io/services/"


class LeafSettings(BaseSettings):
    """Upstream Leaf API configuration."""
    api_key: Optional[str] = Field(default=None, description="Process-wide Leaf API token")
    # Trailing "/" is significant: relative paths resolve against it
    base_url: str = Field(default=LEAF_BASE_URL)
    timeout_seconds: float = Field(default=30.0, gt=0)

    model_config = SettingsConfigDict(
        env_prefix="LEAF_",
        env_file=".env",
        extra="ignore"
    )


class MCPServerSettings(BaseSettings):
    """MCP Server configuration."""
    transport: Literal["stdio", "http"] = Field(default="stdio")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8080)
    path: str = Field(default="/mcp", description="Streamable HTTP endpoint path")
    stateless_http: bool = Field(default=False)

    tool_source: Literal["static", "openapi"] = Field(default="static")
    openapi_spec_path: Optional[str] = Field(default=None)
    docs_path: Optional[str] = Field(
        default=None,
        description="Directory of documentation pages; defaults to the bundled pages"
    )

    model_config = SettingsConfigDict(
        env_prefix="MCP_SERVER_",
        env_file=".env",
        extra="ignore"
    )

    @property
    def tenancy(self) -> TenancyMode:
        """HTTP serves many callers with their own tokens; stdio serves one."""
        return TenancyMode.MULTI if self.transport == "http" else TenancyMode.SINGLE


class Settings(BaseSettings):
    """Main application settings."""
    environment: str = Field(default="development")
    log_level: str = Field(default="INFO")

    # Component settings
    leaf: LeafSettings = Field(default_factory=LeafSettings)
    mcp_server: MCPServerSettings = Field(default_factory=MCPServerSettings)

    model_config = SettingsConfigDict(
        env_prefix="MCP_",
        env_file=".env",
        extra="ignore"
    )

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Settings":
        """
        Load settings from a YAML file.

        The ``leaf`` and ``mcp_server`` sections configure the component
        settings. Environment variables take precedence over the file.

        Raises:
            ConfigurationError: Unreadable file or invalid values
        """
        data = dict(load_yaml_config(path))
        try:
            leaf = _layered(LeafSettings, data.pop("leaf", None), "leaf")
            mcp_server = _layered(MCPServerSettings, data.pop("mcp_server", None), "mcp_server")
            return _layered(cls, {**data, "leaf": leaf, "mcp_server": mcp_server})
        except ValidationError as e:
            raise ConfigurationError(f"Invalid settings in {path}: {e}") from e


def _layered(
    settings_cls: type[BaseSettings],
    file_values: Optional[dict[str, Any]],
    section: Optional[str] = None
) -> Any:
    """Build ``settings_cls`` from file values overridden by its environment."""
    if file_values is None:
        file_values = {}
    if not isinstance(file_values, dict):
        raise ConfigurationError(f"Configuration section '{section}' must be a mapping")

    from_env = settings_cls()
    env_values = {name: getattr(from_env, name) for name in from_env.model_fields_set}
    return settings_cls(**{**file_values, **env_values})


def load_yaml_config(path: str | Path) -> dict[str, Any]:
    """
    Load a YAML (or JSON) file into a mapping. A missing file is empty.

    Raises:
        ConfigurationError: If the file cannot be read or parsed, or does
            not hold a mapping
    """
    path = Path(path)
    if not path.exists():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Cannot load {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Expected a mapping at the top of {path}")
    return data


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    config_path = os.environ.get("MCP_CONFIG_PATH", "config/settings.yaml")
    return Settings.from_yaml(config_path)
