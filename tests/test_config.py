"""Tests for configuration loading."""

import pytest

from shared.config import Settings, load_yaml_config
from shared.errors import ConfigurationError

CONFIG_ENV = (
    "LEAF_API_KEY",
    "LEAF_BASE_URL",
    "LEAF_TIMEOUT_SECONDS",
    "MCP_LOG_LEVEL",
    "MCP_ENVIRONMENT",
    "MCP_SERVER_TRANSPORT",
    "MCP_SERVER_HOST",
    "MCP_SERVER_PORT",
    "MCP_SERVER_PATH",
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """No configuration variables and no .env file in the working directory."""
    for name in CONFIG_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return monkeypatch


def write_config(tmp_path, text):
    path = tmp_path / "settings.yaml"
    path.write_text(text, encoding="utf-8")
    return path


class TestSettingsFromYaml:
    """Tests for Settings.from_yaml."""

    def test_missing_file_gives_defaults(self, clean_env, tmp_path):
        settings = Settings.from_yaml(tmp_path / "absent.yaml")

        assert settings.log_level == "INFO"
        assert settings.mcp_server.transport == "stdio"
        assert settings.leaf.base_url == "https://api.withleaf.io/services/"

    def test_component_sections_applied(self, clean_env, tmp_path):
        path = write_config(tmp_path, (
            "log_level: DEBUG\n"
            "mcp_server:\n"
            "  transport: http\n"
            "  port: 9999\n"
            "leaf:\n"
            "  timeout_seconds: 5\n"
        ))

        settings = Settings.from_yaml(path)

        assert settings.log_level == "DEBUG"
        assert settings.mcp_server.transport == "http"
        assert settings.mcp_server.port == 9999
        assert settings.mcp_server.path == "/mcp"
        assert settings.leaf.timeout_seconds == 5.0

    def test_environment_overrides_file(self, clean_env, tmp_path):
        path = write_config(tmp_path, (
            "log_level: DEBUG\n"
            "mcp_server:\n"
            "  transport: http\n"
            "  port: 9999\n"
        ))
        clean_env.setenv("MCP_SERVER_PORT", "7000")
        clean_env.setenv("MCP_LOG_LEVEL", "WARNING")
        clean_env.setenv("LEAF_API_KEY", "from-env")

        settings = Settings.from_yaml(path)

        assert settings.mcp_server.port == 7000
        assert settings.mcp_server.transport == "http"
        assert settings.log_level == "WARNING"
        assert settings.leaf.api_key == "from-env"

    def test_section_must_be_mapping(self, clean_env, tmp_path):
        path = write_config(tmp_path, "mcp_server: http\n")

        with pytest.raises(ConfigurationError, match="mcp_server"):
            Settings.from_yaml(path)

    def test_invalid_value(self, clean_env, tmp_path):
        path = write_config(tmp_path, "mcp_server:\n  transport: carrier-pigeon\n")

        with pytest.raises(ConfigurationError, match="Invalid settings"):
            Settings.from_yaml(path)


class TestLoadYamlConfig:
    """Tests for load_yaml_config."""

    def test_malformed_yaml(self, tmp_path):
        path = write_config(tmp_path, "paths: [unclosed\n")

        with pytest.raises(ConfigurationError, match="Cannot load"):
            load_yaml_config(path)

    def test_non_mapping_document(self, tmp_path):
        path = write_config(tmp_path, "- just\n- a list\n")

        with pytest.raises(ConfigurationError, match="mapping"):
            load_yaml_config(path)

    def test_empty_file(self, tmp_path):
        assert load_yaml_config(write_config(tmp_path, "")) == {}
