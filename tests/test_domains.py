"""Tests for the Leaf domains."""

import pytest

from shared.errors import DocNotFoundError, ToolNotFoundError
from shared.models import AuthContext, HttpMethod, JsonResponse, TextResponse

EXPECTED_TOOLS = {
    "fields": {
        "createField", "getField", "listFields",
        "getFieldBoundary", "updateFieldBoundary",
    },
    "operations": {
        "listOperations", "getOperation", "getOperationSummary", "getOperationUnits",
    },
    "users": {"listUsers"},
    "files": {"listFiles", "getFile", "getFileSummary", "getFileStatus"},
    "weather": {
        "getFieldWeatherForecast", "getFieldWeatherHistorical",
        "getPointWeatherForecast", "getPointWeatherHistorical",
    },
}


def all_static_tools():
    from domains import REST_DOMAINS

    return [tool for domain_class in REST_DOMAINS for tool in domain_class().tools]


class TestStaticCatalogue:
    """Tests for the hand-written Leaf tools."""

    def test_expected_tools_per_domain(self):
        from domains import REST_DOMAINS

        catalogue = {
            domain.name: {tool.name for tool in domain.tools}
            for domain in (domain_class() for domain_class in REST_DOMAINS)
        }

        assert catalogue == EXPECTED_TOOLS

    def test_tool_names_unique(self):
        names = [tool.name for tool in all_static_tools()]

        assert len(names) == len(set(names))

    def test_every_placeholder_is_required(self):
        for tool in all_static_tools():
            required = set(tool.input_schema.get("required", []))
            for placeholder in tool.binding.placeholders:
                assert placeholder in required, f"{tool.name}: {placeholder}"

    def test_paths_are_relative(self):
        for tool in all_static_tools():
            assert not tool.binding.path_template.startswith("/"), tool.name

    def test_mutating_tools_have_body_field(self):
        writes = {
            tool.name: tool.binding.method
            for tool in all_static_tools()
            if tool.binding.method.is_mutating
        }

        assert writes == {
            "createField": HttpMethod.POST,
            "updateFieldBoundary": HttpMethod.PUT,
        }
        for tool in all_static_tools():
            if tool.name in writes:
                assert tool.binding.body_field in tool.input_schema["properties"]

    def test_domain_get_tool(self):
        from domains.users import UsersDomain

        domain = UsersDomain()

        assert domain.get_tool("listUsers").binding.path_template == "usermanagement/api/users"
        assert domain.get_tool("missing") is None

    def test_register_all_domains(self):
        from domains import load_all_domains
        from mcp_server.registry import ToolRegistry

        registry = ToolRegistry()
        load_all_domains(registry)

        assert registry.list_domains() == ["fields", "operations", "users", "files", "weather"]
        assert len(registry) == sum(len(names) for names in EXPECTED_TOOLS.values())


class TestDocStore:
    """Tests for the documentation store."""

    def test_load_directory(self, tmp_path):
        from domains.docs import DocStore

        (tmp_path / "fields").mkdir()
        (tmp_path / "overview.md").write_text("# Overview", encoding="utf-8")
        (tmp_path / "fields" / "filters.md").write_text("filters", encoding="utf-8")
        (tmp_path / ".hidden.md").write_text("secret", encoding="utf-8")

        store = DocStore.from_directory(tmp_path)

        assert store.list_slugs() == ["fields/filters", "overview"]
        assert store.get("fields/filters") == "filters"
        assert len(store) == 2

    def test_missing_directory_is_empty(self, tmp_path):
        from domains.docs import DocStore

        store = DocStore.from_directory(tmp_path / "nowhere")

        assert store.list_slugs() == []

    def test_undecodable_page(self, tmp_path):
        from domains.docs import DocStore
        from shared.errors import ConfigurationError

        (tmp_path / "broken.md").write_bytes(b"\xff\xfe\x00bad")

        with pytest.raises(ConfigurationError, match="broken.md"):
            DocStore.from_directory(tmp_path)

    def test_unknown_slug(self):
        from domains.docs import DocStore

        store = DocStore({"overview": "text"})

        with pytest.raises(DocNotFoundError) as exc_info:
            store.get("missing")

        assert exc_info.value.code == "NOT_FOUND"

    def test_store_is_read_only(self):
        from domains.docs import DocStore

        source = {"overview": "text"}
        store = DocStore(source)
        source["later"] = "added"

        assert store.list_slugs() == ["overview"]

    def test_bundled_docs(self):
        from domains.docs import DocStore

        store = DocStore.from_directory()

        assert {"overview", "authentication", "pagination", "fields/filters"} <= set(store.list_slugs())


class TestDocsDomain:
    """Tests for the docs tools."""

    def setup_method(self):
        from domains.docs import DocsDomain, DocStore

        self.domain = DocsDomain(DocStore({"b": "Bee", "a": "Ay"}))

    def test_tools(self):
        assert [tool.name for tool in self.domain.tools] == ["listDocs", "getDoc"]
        assert all(tool.binding is None for tool in self.domain.tools)

    @pytest.mark.asyncio
    async def test_list_docs(self):
        response = await self.domain.execute(self.domain.get_tool("listDocs"), {}, AuthContext())

        assert isinstance(response, JsonResponse)
        assert response.render() == '["a","b"]'

    @pytest.mark.asyncio
    async def test_get_doc(self):
        response = await self.domain.execute(
            self.domain.get_tool("getDoc"), {"slug": "a"}, AuthContext()
        )

        assert isinstance(response, TextResponse)
        assert response.text == "Ay"

    @pytest.mark.asyncio
    async def test_get_doc_unknown_slug(self):
        with pytest.raises(DocNotFoundError):
            await self.domain.execute(
                self.domain.get_tool("getDoc"), {"slug": "zzz"}, AuthContext()
            )

    @pytest.mark.asyncio
    async def test_unknown_tool(self):
        from domains.fields import FieldsDomain

        with pytest.raises(ToolNotFoundError):
            await self.domain.execute(FieldsDomain().get_tool("getField"), {}, AuthContext())
