"""Tests for the command-line entry point and startup."""

import json

import pytest

from shared.config import get_settings
from shared.errors import ConfigurationError

from conftest import make_settings


@pytest.fixture
def environment(monkeypatch, tmp_path):
    """Isolated environment: no config file, no credential, no logging setup."""
    for name in (
        "LEAF_API_KEY",
        "MCP_SERVER_TRANSPORT",
        "MCP_SERVER_TOOL_SOURCE",
        "MCP_SERVER_OPENAPI_SPEC_PATH",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("MCP_CONFIG_PATH", str(tmp_path / "settings.yaml"))
    monkeypatch.setattr("mcp_server.main.setup_logging", lambda *args, **kwargs: None)
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()


class TestListMode:
    """Tests for --tools=list."""

    def test_prints_catalogue(self, environment, capsys):
        from mcp_server.main import main

        exit_code = main(["--tools=list"])

        assert exit_code == 0
        catalogue = json.loads(capsys.readouterr().out)
        names = [entry["name"] for entry in catalogue]
        assert names[:3] == ["createField", "getField", "listFields"]
        assert names[-2:] == ["listDocs", "getDoc"]
        assert all(set(entry) == {"name", "description"} for entry in catalogue)

    def test_no_network_access(self, environment, capsys):
        from mcp_server.main import main

        def fail(*args, **kwargs):
            raise AssertionError("list mode must not build an upstream client")

        environment.setattr("mcp_server.main.UpstreamClient", fail)

        assert main(["--tools", "list"]) == 0


class TestStartup:
    """Tests for startup failures and overrides."""

    def test_missing_api_key_in_stdio_mode(self, environment):
        from mcp_server.main import main

        environment.setenv("LEAF_API_KEY", "  ")

        assert main([]) == 1

    def test_credential_checked_before_registration(self, monkeypatch):
        from mcp_server.main import bootstrap

        calls = []
        monkeypatch.setattr("mcp_server.main.load_all_domains", lambda *args: calls.append(args))

        with pytest.raises(ConfigurationError, match="LEAF_API_KEY"):
            bootstrap(make_settings(api_key=""))

        assert calls == []

    def test_http_mode_starts_without_api_key(self):
        from mcp_server.main import bootstrap

        application = bootstrap(make_settings(transport="http", api_key=None))

        assert application.resolver.mode.value == "multi"
        assert "listFields" in application.registry

    def test_openapi_source_requires_path(self, environment):
        from mcp_server.main import main

        environment.setenv("MCP_SERVER_TOOL_SOURCE", "openapi")

        assert main(["--tools=list"]) == 1

    def test_malformed_config_file(self, environment, tmp_path):
        from mcp_server.main import main

        config = tmp_path / "broken.yaml"
        config.write_text("mcp_server: [unclosed\n", encoding="utf-8")
        environment.setenv("MCP_CONFIG_PATH", str(config))

        assert main(["--tools=list"]) == 1

    def test_malformed_openapi_document(self, environment, tmp_path):
        from mcp_server.main import main

        document = tmp_path / "openapi.yaml"
        document.write_text("paths: {/a: [\n", encoding="utf-8")
        environment.setenv("MCP_SERVER_TOOL_SOURCE", "openapi")
        environment.setenv("MCP_SERVER_OPENAPI_SPEC_PATH", str(document))

        assert main(["--tools=list"]) == 1

    def test_registry_sealed_after_bootstrap(self):
        from mcp_server.main import bootstrap
        from shared.errors import ToolRegistrationError
        from shared.models import ToolDefinition

        application = bootstrap(make_settings())

        with pytest.raises(ToolRegistrationError):
            application.registry.register(
                ToolDefinition(name="late", domain="fields", description="Late")
            )

    def test_command_line_overrides(self):
        from mcp_server.main import apply_overrides, parse_args

        settings = apply_overrides(
            make_settings(),
            parse_args(["--transport", "http", "--port", "9000"])
        )

        assert settings.mcp_server.transport == "http"
        assert settings.mcp_server.port == 9000
        assert settings.mcp_server.host == "0.0.0.0"
