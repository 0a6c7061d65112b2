"""
FastAPI Authentication Dependencies

Access-token verification plus role and permission guards. Handlers receive
an explicit ``AuthContext`` instead of reading identity from request state.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from halolight.database.repository import UserRepository
from halolight.dependencies import get_db
from halolight.exceptions import ForbiddenError, NotFoundError, UnauthorizedError
from halolight.utils.logging_utils import log_auth_event

from .auth_core import verify_access_token
from .permissions import has_permission

logger = logging.getLogger(__name__)

# Registered for the OpenAPI security scheme; the raw header is validated below
http_bearer = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthContext:
    """Identity of the caller for the current request."""
    user_id: str
    email: str
    roles: Tuple[str, ...] = ()


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token from an exact ``Bearer <token>`` header, else None."""
    if not authorization:
        return None
    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        return None
    return parts[1]


async def get_auth_context(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(http_bearer),
    session: AsyncSession = Depends(get_db),
) -> AuthContext:
    """
    Authenticate the request from its access token.

    Role names are read from the database on every request, so role changes
    take effect without re-issuing tokens.
    """
    client_ip = request.client.host if request.client else None

    token = extract_bearer_token(request.headers.get("Authorization"))
    if token is None:
        raise UnauthorizedError("Authentication required")

    try:
        payload = verify_access_token(token)
    except UnauthorizedError:
        log_auth_event("TOKEN_INVALID", success=False, client_ip=client_ip, details=request.url.path)
        raise

    user_id = payload["userId"]
    roles = await UserRepository(session).get_role_names(user_id)
    return AuthContext(user_id=user_id, email=payload.get("email", ""), roles=tuple(roles))


def require_role(*roles: str):
    """
    Dependency factory: the caller must hold at least one of ``roles``.

    Usage:
        @router.delete("/{id}", dependencies=[Depends(require_role("admin"))])
    """
    required = tuple(roles)

    async def role_checker(auth: AuthContext = Depends(get_auth_context)) -> AuthContext:
        if not set(required) & set(auth.roles):
            log_auth_event("UNAUTHORIZED_ACCESS", success=False, user=auth.user_id, details=f"roles={list(required)}")
            raise ForbiddenError(
                "Insufficient permissions",
                details={"requiredRoles": list(required), "userRoles": list(auth.roles)},
            )
        return auth

    return role_checker


def require_permission(resource: str, action: str):
    """
    Dependency factory: the caller's permission set must satisfy
    ``resource:action``, honouring ``*`` wildcards in either segment.
    """
    required = f"{resource}:{action}"

    async def permission_checker(
        auth: AuthContext = Depends(get_auth_context),
        session: AsyncSession = Depends(get_db),
    ) -> AuthContext:
        users = UserRepository(session)
        if not await users.exists(auth.user_id):
            raise NotFoundError("User not found", code="USER_NOT_FOUND")

        granted = await users.get_permission_strings(auth.user_id)
        if not has_permission(granted, resource, action):
            log_auth_event("UNAUTHORIZED_ACCESS", success=False, user=auth.user_id, details=required)
            raise ForbiddenError("Insufficient permissions", details={"requiredPermission": required})
        return auth

    return permission_checker
