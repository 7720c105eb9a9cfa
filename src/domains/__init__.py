"""Leaf API Domains.

Each domain contains the tool definitions of one Leaf service. REST domains
are executed by the shared upstream executor; the docs domain serves its
tools locally.
"""

from typing import TYPE_CHECKING, Optional

from domains.base import BaseDomain, RESTDomain
from domains.docs import DocsDomain, DocStore
from domains.fields import FieldsDomain
from domains.files import FilesDomain
from domains.operations import OperationsDomain
from domains.users import UsersDomain
from domains.weather import WeatherDomain
from shared.logging import get_logger

if TYPE_CHECKING:
    from mcp_server.registry import ToolRegistry
    from mcp_server.router import AdapterExecutor, ToolDispatcher

logger = get_logger(__name__)

REST_DOMAINS: tuple[type[RESTDomain], ...] = (
    FieldsDomain,
    OperationsDomain,
    UsersDomain,
    FilesDomain,
    WeatherDomain,
)


def register_domain(
    domain: BaseDomain,
    registry: "ToolRegistry",
    dispatcher: Optional["ToolDispatcher"] = None,
    executor: Optional["AdapterExecutor"] = None
) -> None:
    """Register a domain's tools and, when given, its adapter."""
    registry.register_many(domain.tools)
    if dispatcher is not None and executor is not None:
        dispatcher.register_adapter(domain.name, executor)
    logger.debug("Domain registered", domain=domain.name, tool_count=len(domain.tools))


def load_all_domains(
    registry: "ToolRegistry",
    dispatcher: Optional["ToolDispatcher"] = None,
    executor: Optional["AdapterExecutor"] = None
) -> None:
    """
    Register the static Leaf catalogue.

    Called at startup. Without a dispatcher only the tool definitions are
    registered (diagnostic listing).
    """
    for domain_class in REST_DOMAINS:
        register_domain(domain_class(), registry, dispatcher, executor)


def load_docs_domain(
    registry: "ToolRegistry",
    store: DocStore,
    dispatcher: Optional["ToolDispatcher"] = None
) -> DocsDomain:
    """Register the documentation tools backed by ``store``."""
    domain = DocsDomain(store)
    register_domain(domain, registry, dispatcher, domain.execute)
    return domain


__all__ = [
    "REST_DOMAINS",
    "DocStore",
    "load_all_domains",
    "load_docs_domain",
    "register_domain",
]
