"""Docs Domain - embedded Leaf documentation.

Documentation pages are read once at startup from a directory tree into a
flat, read-only mapping of slug to text. A slug is the page's path relative
to the root, without extension, using "/" separators (``fields/filters``).
"""

from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional

from shared.errors import ConfigurationError, DocNotFoundError, ToolNotFoundError
from shared.logging import get_logger
from shared.models import AuthContext, JsonResponse, TextResponse, ToolDefinition, ToolResponse
from domains.base import BaseDomain

logger = get_logger(__name__)

BUNDLED_DOCS_PATH = Path(__file__).parent / "content"


def load_docs(root: str | Path) -> dict[str, str]:
    """
    Walk a directory tree and read every non-hidden file as UTF-8 text.

    Raises:
        ConfigurationError: If a page cannot be read as UTF-8
    """
    root = Path(root)
    docs: dict[str, str] = {}

    if not root.is_dir():
        logger.warning("Docs directory not found", path=str(root))
        return docs

    for path in sorted(root.rglob("*")):
        relative = path.relative_to(root)
        if not path.is_file() or any(part.startswith(".") for part in relative.parts):
            continue
        slug = relative.with_suffix("").as_posix()
        try:
            docs[slug] = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigurationError(f"Cannot read documentation page {path}: {e}") from e

    return docs


class DocStore:
    """Read-only slug to document mapping."""

    def __init__(self, docs: Mapping[str, str]) -> None:
        self._docs = MappingProxyType(dict(docs))

    @classmethod
    def from_directory(cls, root: Optional[str | Path] = None) -> "DocStore":
        root = Path(root) if root else BUNDLED_DOCS_PATH
        store = cls(load_docs(root))
        logger.info("Docs loaded", path=str(root), count=len(store))
        return store

    def __len__(self) -> int:
        return len(self._docs)

    def list_slugs(self) -> list[str]:
        return sorted(self._docs)

    def get(self, slug: str) -> str:
        try:
            return self._docs[slug]
        except KeyError:
            raise DocNotFoundError(slug) from None


class DocsDomain(BaseDomain):
    """Local tools over a DocStore. No upstream calls, no credential needed."""

    name = "docs"
    description = "Embedded Leaf documentation"

    def __init__(self, store: DocStore) -> None:
        self.store = store
        super().__init__()

    def _define_tools(self) -> None:
        self._tools["listDocs"] = ToolDefinition(
            name="listDocs",
            domain=self.name,
            description="List the slugs of the embedded Leaf documentation pages.",
            input_schema={"type": "object", "properties": {}, "required": []},
            tags=["docs"],
        )

        self._tools["getDoc"] = ToolDefinition(
            name="getDoc",
            domain=self.name,
            description="Return the full text of an embedded documentation page by slug (see listDocs).",
            input_schema={
                "type": "object",
                "properties": {
                    "slug": {
                        "type": "string",
                        "description": "Page slug, e.g. 'fields/filters'"
                    }
                },
                "required": ["slug"]
            },
            tags=["docs"],
        )

    async def execute(
        self,
        tool: ToolDefinition,
        arguments: dict[str, Any],
        context: AuthContext
    ) -> ToolResponse:
        """Serve a docs tool call."""
        if tool.name == "listDocs":
            return JsonResponse(value=self.store.list_slugs())
        if tool.name == "getDoc":
            return TextResponse(text=self.store.get(arguments["slug"]))
        raise ToolNotFoundError(tool.name)
