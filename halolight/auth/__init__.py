"""Authentication: token issuer, auth service, request guards and routes."""

from .dependencies import AuthContext, get_auth_context, require_permission, require_role
from .permissions import has_permission, permission_matches

__all__ = [
    "AuthContext",
    "get_auth_context",
    "require_role",
    "require_permission",
    "permission_matches",
    "has_permission",
]
