"""Authentication and credential resolution for the MCP Server.

Handles:
- Fail-fast validation of the process-wide Leaf API token
- Per-request bearer authentication in multi-tenant HTTP mode
- Two-level resolution of the credential attached to each upstream call
"""

from typing import Optional

from starlette.datastructures import Headers
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Receive, Scope, Send

from shared.errors import ConfigurationError, UnauthorizedError
from shared.logging import get_logger
from shared.models import AuthContext, TenancyMode

logger = get_logger(__name__)

BEARER_SCHEME = "bearer"
SESSION_TOKEN_KEY = "session_token"


def extract_bearer_token(authorization: Optional[str]) -> str:
    """
    Extract the raw credential from an Authorization header value.

    Raises:
        UnauthorizedError: If the header is absent, not a bearer credential,
            or carries an empty token
    """
    if not authorization or not authorization.strip():
        raise UnauthorizedError("Authentication required")

    scheme, _, credential = authorization.strip().partition(" ")
    if scheme.lower() != BEARER_SCHEME:
        raise UnauthorizedError("Authorization header must use the Bearer scheme")

    credential = credential.strip()
    if not credential:
        raise UnauthorizedError("Bearer token is empty")

    return credential


class AuthorizationResolver:
    """
    Decides which bearer token an upstream call carries.

    Resolution order:
    1. The session token supplied by the HTTP authentication gate
    2. The process-wide token read once at startup
    Neither present is an UnauthorizedError, raised before any upstream call.
    """

    def __init__(self, mode: TenancyMode, process_token: Optional[str] = None) -> None:
        token = (process_token or "").strip()

        if mode == TenancyMode.SINGLE and not token:
            raise ConfigurationError("LEAF_API_KEY is missing or empty")

        self.mode = mode
        self._process_token = token or None

    @property
    def has_process_token(self) -> bool:
        return self._process_token is not None

    def resolve(self, context: Optional[AuthContext] = None) -> str:
        """
        Resolve the Authorization header value for one call.

        Args:
            context: Per-call authorization context

        Returns:
            "Bearer <token>"

        Raises:
            UnauthorizedError: If no credential is available
        """
        session_token = context.session_token if context else None
        if session_token:
            return f"Bearer {session_token}"

        if self._process_token:
            return f"Bearer {self._process_token}"

        logger.warning("Call rejected without credential", mode=self.mode.value)
        raise UnauthorizedError("No session credential supplied for this call")


class BearerAuthGate:
    """
    ASGI authentication hook for the streamable HTTP endpoint.

    Runs once per inbound HTTP request before the MCP session manager sees
    it. Requests without a valid bearer credential get a 401; accepted
    requests carry the raw token in ``request.state.session_token``.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = Headers(scope=scope)
        try:
            token = extract_bearer_token(headers.get("authorization"))
        except UnauthorizedError as e:
            logger.warning(
                "Request rejected",
                path=scope.get("path"),
                reason=e.message
            )
            response = JSONResponse(
                {"detail": e.message, "code": e.code},
                status_code=401,
                headers={"WWW-Authenticate": "Bearer"},
            )
            await response(scope, receive, send)
            return

        scope.setdefault("state", {})[SESSION_TOKEN_KEY] = token
        await self.app(scope, receive, send)
