"""Leaf MCP Server - bootstrap and entry point.

Reads configuration, builds the tool catalogue and serves it over stdio
(single-tenant) or streamable HTTP (multi-tenant). ``--tools=list`` prints
the catalogue and exits without serving.
"""

import argparse
import asyncio
import json
import sys
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Optional

import httpx
import uvicorn
from fastapi import FastAPI
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from pydantic import BaseModel
from starlette.routing import Route

from shared.config import Settings, get_settings
from shared.errors import ConfigurationError, ToolRegistrationError
from shared.logging import get_logger, setup_logging
from mcp_server.auth import AuthorizationResolver, BearerAuthGate
from mcp_server.openapi import DERIVED_DOMAIN, derive_tools, load_openapi_document
from mcp_server.registry import ToolRegistry
from mcp_server.router import AdapterExecutor, ToolDispatcher
from mcp_server.transport import (
    SERVER_VERSION,
    StreamableHTTPEndpoint,
    create_mcp_server,
    run_stdio,
)
from mcp_server.upstream import UpstreamClient, UpstreamExecutor
from domains import DocStore, load_all_domains, load_docs_domain

logger = get_logger(__name__)


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    transport: str
    domains: list[str]
    tool_count: int


@dataclass
class Application:
    """Everything built at startup. Read-only while serving."""
    settings: Settings
    resolver: AuthorizationResolver
    client: UpstreamClient
    registry: ToolRegistry
    dispatcher: ToolDispatcher


def populate_registry(
    registry: ToolRegistry,
    settings: Settings,
    dispatcher: Optional[ToolDispatcher] = None,
    executor: Optional[AdapterExecutor] = None
) -> ToolRegistry:
    """
    Register the configured catalogue and seal the registry.

    The Leaf tools come either from the static domains or from an OpenAPI
    document; the docs tools are always added.
    """
    server_settings = settings.mcp_server

    if server_settings.tool_source == "openapi":
        if not server_settings.openapi_spec_path:
            raise ConfigurationError(
                "MCP_SERVER_OPENAPI_SPEC_PATH is required when tool_source is 'openapi'"
            )
        document = load_openapi_document(server_settings.openapi_spec_path)
        registry.register_many(derive_tools(document))
        if dispatcher is not None and executor is not None:
            dispatcher.register_adapter(DERIVED_DOMAIN, executor)
    else:
        load_all_domains(registry, dispatcher, executor)

    load_docs_domain(registry, DocStore.from_directory(server_settings.docs_path), dispatcher)

    registry.seal()
    return registry


def bootstrap(
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> Application:
    """
    Build the application.

    The credential check runs first, so a single-tenant start without
    LEAF_API_KEY fails before any tool is registered.

    Raises:
        ConfigurationError: Missing credential or OpenAPI document
        ToolRegistrationError: Invalid or conflicting tool definitions
    """
    resolver = AuthorizationResolver(settings.mcp_server.tenancy, settings.leaf.api_key)
    client = UpstreamClient(timeout=settings.leaf.timeout_seconds, transport=transport)

    registry = ToolRegistry()
    dispatcher = ToolDispatcher(registry)
    executor = UpstreamExecutor(client, resolver, settings.leaf.base_url)
    populate_registry(registry, settings, dispatcher, executor)

    logger.info(
        "Leaf MCP proxy initialized",
        tenancy=resolver.mode.value,
        tool_source=settings.mcp_server.tool_source,
        tool_count=len(registry)
    )
    return Application(
        settings=settings,
        resolver=resolver,
        client=client,
        registry=registry,
        dispatcher=dispatcher,
    )


def list_catalogue(settings: Settings) -> str:
    """Catalogue JSON for ``--tools=list``. Needs no credential or network."""
    registry = populate_registry(ToolRegistry(), settings)
    return json.dumps(registry.catalogue(), indent=2, ensure_ascii=False)


def create_http_app(application: Application) -> FastAPI:
    """
    FastAPI application serving MCP over streamable HTTP.

    The MCP endpoint sits behind the bearer authentication gate; /health
    does not.
    """
    settings = application.settings.mcp_server
    server = create_mcp_server(application.registry, application.dispatcher)
    session_manager = StreamableHTTPSessionManager(
        app=server,
        stateless=settings.stateless_http
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        logger.info("Starting MCP HTTP server", path=settings.path, port=settings.port)
        try:
            async with session_manager.run():
                yield
        finally:
            logger.info("Shutting down MCP HTTP server")
            await application.client.close()

    app = FastAPI(
        title="Leaf MCP Server",
        description="MCP tools for the Leaf agricultural data API",
        version=SERVER_VERSION,
        lifespan=lifespan
    )

    @app.get("/health", response_model=HealthResponse, tags=["System"])
    async def health_check():
        """Health check endpoint."""
        registry = application.registry
        return HealthResponse(
            status="healthy",
            version=SERVER_VERSION,
            transport=settings.transport,
            domains=registry.list_domains(),
            tool_count=len(registry)
        )

    app.router.routes.append(
        Route(settings.path, endpoint=BearerAuthGate(StreamableHTTPEndpoint(session_manager)))
    )
    return app


async def serve_stdio(application: Application) -> None:
    server = create_mcp_server(application.registry, application.dispatcher)
    try:
        await run_stdio(server)
    finally:
        await application.client.close()


def serve_http(application: Application) -> None:
    settings = application.settings
    uvicorn.run(
        create_http_app(application),
        host=settings.mcp_server.host,
        port=settings.mcp_server.port,
        log_level=settings.log_level.lower()
    )


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="leaf-mcp",
        description="Expose the Leaf API as Model Context Protocol tools."
    )
    parser.add_argument(
        "--tools",
        choices=["list"],
        help="print the tool catalogue as JSON and exit"
    )
    parser.add_argument("--transport", choices=["stdio", "http"])
    parser.add_argument("--host")
    parser.add_argument("--port", type=int)
    return parser.parse_args(argv)


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Command-line flags take precedence over environment and YAML."""
    overrides = {
        key: value
        for key, value in (
            ("transport", args.transport),
            ("host", args.host),
            ("port", args.port),
        )
        if value is not None
    }
    if not overrides:
        return settings
    return settings.model_copy(
        update={"mcp_server": settings.mcp_server.model_copy(update=overrides)}
    )


def main(argv: Optional[list[str]] = None) -> int:
    """Run the Leaf MCP Server. Returns the process exit status."""
    args = parse_args(argv)
    try:
        settings = apply_overrides(get_settings(), args)
    except ConfigurationError as e:
        setup_logging()
        logger.error("Invalid configuration", error=e.message, code=e.code)
        return 1
    setup_logging(settings.log_level, json_output=settings.environment == "production")

    try:
        if args.tools == "list":
            print(list_catalogue(settings))
            return 0

        application = bootstrap(settings)
    except (ConfigurationError, ToolRegistrationError) as e:
        logger.error("Startup failed", error=e.message, code=e.code)
        return 1

    if settings.mcp_server.transport == "http":
        serve_http(application)
    else:
        asyncio.run(serve_stdio(application))
    return 0


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
