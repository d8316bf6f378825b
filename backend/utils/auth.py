# utils/auth.py
"""
Two-stage authorization gate: authenticate the bearer token, then check the
role carried by the token against the roles a route accepts.

``authenticate`` is the only producer of ``AuthenticatedRequest``, so role
checks can only ever run on the result of a successful authentication.
"""
import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from fastapi import Depends, Request
from starlette.middleware.base import BaseHTTPMiddleware

from models.users import Role
from schemas.response import error_response
from utils.errors import APIError, Forbidden, InternalError, Unauthorized
from utils.tokenJWT import TokenClaims, TokenError, TokenService, get_token_service

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "

# Reachable without a token
PUBLIC_PATHS = frozenset({
    "/",
    "/enquiry",
    "/create-user",
    "/auth/signin",
    "/auth/login",
    "/auth/refresh",
    "/health",
})

ADMIN_ROLES = (Role.ADMIN, Role.SUPER_ADMIN)


@dataclass(frozen=True)
class AuthenticatedRequest:
    user_id: str
    email: str
    username: str
    role: Optional[str]
    claims: TokenClaims


def is_public(method: str, path: str) -> bool:
    return method == "OPTIONS" or path in PUBLIC_PATHS


def extract_bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        raise Unauthorized("Authorization header missing", "Bearer token is required")
    if not authorization.startswith(BEARER_PREFIX):
        raise Unauthorized("Invalid authorization format", "Authorization header must be 'Bearer <token>'")
    return authorization[len(BEARER_PREFIX):]


def authenticate(authorization: Optional[str], token_service: TokenService) -> AuthenticatedRequest:
    token = extract_bearer_token(authorization)
    try:
        claims = token_service.validate(token)
    except TokenError as exc:
        logger.warning("Rejected bearer token: %s: %s", type(exc).__name__, exc)
        raise Unauthorized("Invalid token", "Token is expired or invalid") from exc

    return AuthenticatedRequest(
        user_id=claims.user_id,
        email=claims.email,
        username=claims.username,
        role=claims.role,
        claims=claims,
    )


def authorize(auth: AuthenticatedRequest, accepted_roles: Iterable[Role],
              detail: str = "Access denied: insufficient role permissions") -> AuthenticatedRequest:
    if not auth.role:
        raise InternalError(
            "User role not found in context",
            "Authentication middleware must be applied before role middleware",
        )
    if auth.role not in {Role(r).value for r in accepted_roles}:
        logger.warning("Forbidden: user=%s role=%s", auth.user_id, auth.role)
        raise Forbidden("Insufficient permissions", detail)
    return auth


# --- FastAPI dependencies ---

def current_auth(request: Request) -> AuthenticatedRequest:
    auth = getattr(request.state, "auth", None)
    if not isinstance(auth, AuthenticatedRequest):
        raise InternalError(
            "User role not found in context",
            "Authentication middleware must be applied before role middleware",
        )
    return auth


# Exact role match, or super-admin which always passes
def role_required(role: Role):
    def _checker(auth: AuthenticatedRequest = Depends(current_auth)) -> AuthenticatedRequest:
        return authorize(auth, {Role(role), Role.SUPER_ADMIN})
    return _checker


def admin_or_super_admin(auth: AuthenticatedRequest = Depends(current_auth)) -> AuthenticatedRequest:
    return authorize(auth, ADMIN_ROLES, "Access denied: admin or super-admin role required")


class AuthGateMiddleware(BaseHTTPMiddleware):
    """Authenticate and authorize every non-public request before routing."""

    async def dispatch(self, request: Request, call_next):
        if is_public(request.method, request.url.path):
            return await call_next(request)

        try:
            auth = authenticate(request.headers.get("Authorization"), get_token_service())
            authorize(auth, ADMIN_ROLES, "Access denied: admin or super-admin role required")
        except APIError as exc:
            return error_response(exc.status_code, exc.message, exc.detail)

        request.state.auth = auth
        return await call_next(request)
