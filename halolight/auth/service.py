"""Authentication service: register, login, token rotation and revocation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from halolight.config import get_settings
from halolight.database.activity import record_activity
from halolight.database.models import User, UserStatus
from halolight.database.repository import (
    RefreshTokenRepository,
    RoleRepository,
    UserRepository,
)
from halolight.exceptions import ConflictError, NotFoundError, UnauthorizedError
from halolight.users.schemas import UserWithRoles
from halolight.utils.logging_utils import log_auth_event

from .auth_core import (
    TokenPair,
    get_password_hash,
    issue_token_pair,
    verify_password,
    verify_refresh_token,
)

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"
ACCOUNT_DISABLED = "Account is deactivated or suspended"
INVALID_REFRESH_TOKEN = "Invalid or expired refresh token"


@dataclass(frozen=True)
class AuthResult:
    user: UserWithRoles
    tokens: TokenPair


class AuthService:
    """Orchestrates credentials, token issuance and the refresh token store."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.users = UserRepository(session)
        self.tokens = RefreshTokenRepository(session)
        self.roles = RoleRepository(session)

    async def register(
        self,
        email: str,
        username: str,
        password: str,
        name: Optional[str] = None,
        phone: Optional[str] = None,
        client_ip: Optional[str] = None,
    ) -> AuthResult:
        """
        Create an account, assign the default role and issue a token pair.

        Raises:
            ConflictError: email or username already in use
        """
        if await self.users.get_by_email(email):
            log_auth_event("REGISTER", success=False, user=email, client_ip=client_ip, details="email taken")
            raise ConflictError("Email already registered")
        if await self.users.get_by_username(username):
            log_auth_event("REGISTER", success=False, user=email, client_ip=client_ip, details="username taken")
            raise ConflictError("Username already taken")

        try:
            user = await self.users.create(
                {
                    "email": email,
                    "username": username,
                    "password": get_password_hash(password),
                    "name": name or username,
                    "phone": phone,
                }
            )
        except IntegrityError:
            # Lost a race with a concurrent registration
            await self.session.rollback()
            raise ConflictError("Email already registered")

        settings = get_settings()
        default_role = await self.roles.get_by_name(settings.DEFAULT_ROLE_NAME)
        if default_role:
            await self.users.assign_role(user.id, default_role.id)
        else:
            logger.debug(f"Default role '{settings.DEFAULT_ROLE_NAME}' not found; user {user.id} has no roles")

        tokens = await self._issue_tokens(user)
        await self._record_activity(user.id, "register", "user", user.id)
        log_auth_event("REGISTER", user=user.id, client_ip=client_ip)

        profile = await self.get_current_user(user.id)
        if profile is None:
            raise NotFoundError("User not found", code="USER_NOT_FOUND")
        return AuthResult(user=profile, tokens=tokens)

    async def login(self, email: str, password: str, client_ip: Optional[str] = None) -> AuthResult:
        """
        Authenticate by email and password.

        Unknown email and wrong password raise the same error so callers
        cannot tell which accounts exist.
        """
        user = await self.users.get_by_email(email)
        if not user or not verify_password(password, user.password):
            log_auth_event("LOGIN_FAILURE", success=False, user=email, client_ip=client_ip)
            raise UnauthorizedError(INVALID_CREDENTIALS)

        if user.status != UserStatus.ACTIVE:
            log_auth_event("LOGIN_FAILURE", success=False, user=user.id, client_ip=client_ip, details="account disabled")
            raise UnauthorizedError(ACCOUNT_DISABLED)

        await self.users.update_last_login(user.id)
        tokens = await self._issue_tokens(user)
        await self._record_activity(user.id, "login", "user", user.id)
        log_auth_event("LOGIN_SUCCESS", user=user.id, client_ip=client_ip)

        profile = await self.get_current_user(user.id)
        if profile is None:
            raise NotFoundError("User not found", code="USER_NOT_FOUND")
        return AuthResult(user=profile, tokens=tokens)

    async def refresh(self, refresh_token: str, client_ip: Optional[str] = None) -> TokenPair:
        """
        Exchange a refresh token for a new pair, consuming the old one.

        The stored row is authoritative: a token whose row is gone or expired
        is rejected even when its signature is still valid.
        """
        payload = verify_refresh_token(refresh_token)
        user_id = payload["userId"]

        stored = await self.tokens.find_valid(refresh_token, user_id)
        if not stored:
            log_auth_event("REFRESH_FAILURE", success=False, user=user_id, client_ip=client_ip, details="token not stored")
            raise UnauthorizedError(INVALID_REFRESH_TOKEN)

        user = await self.users.get(user_id)
        if not user:
            log_auth_event("REFRESH_FAILURE", success=False, user=user_id, client_ip=client_ip, details="user missing")
            raise UnauthorizedError(INVALID_REFRESH_TOKEN)
        if user.status != UserStatus.ACTIVE:
            log_auth_event("REFRESH_FAILURE", success=False, user=user_id, client_ip=client_ip, details="account disabled")
            raise UnauthorizedError(ACCOUNT_DISABLED)

        tokens = issue_token_pair(user.id, user.email)
        rotated = await self.tokens.rotate(stored.id, user.id, tokens.refresh_token, tokens.refresh_expires_at)
        if not rotated:
            log_auth_event("REFRESH_FAILURE", success=False, user=user_id, client_ip=client_ip, details="token already used")
            raise UnauthorizedError(INVALID_REFRESH_TOKEN)

        log_auth_event("TOKEN_REFRESHED", user=user.id, client_ip=client_ip)
        return tokens

    async def logout(self, refresh_token: str, client_ip: Optional[str] = None) -> None:
        """Revoke a single refresh token. Unknown tokens are ignored."""
        removed = await self.tokens.delete_by_token(refresh_token)
        log_auth_event("LOGOUT", client_ip=client_ip, details=f"revoked={removed}")

    async def logout_all(self, user_id: str, client_ip: Optional[str] = None) -> int:
        """Revoke every refresh token the user holds."""
        removed = await self.tokens.delete_for_user(user_id)
        await self._record_activity(user_id, "logout_all", "user", user_id, {"revoked": removed})
        log_auth_event("LOGOUT_ALL", user=user_id, client_ip=client_ip, details=f"revoked={removed}")
        return removed

    async def get_current_user(self, user_id: str) -> Optional[UserWithRoles]:
        """Public user fields plus role names and flattened permissions, or None."""
        user = await self.users.get(user_id)
        if not user:
            return None

        profile = UserWithRoles.model_validate(user)
        profile.roles = await self.users.get_role_names(user_id)
        profile.permissions = await self.users.get_permission_strings(user_id)
        return profile

    async def cleanup_expired_tokens(self) -> int:
        """Delete refresh tokens past their stored expiry."""
        removed = await self.tokens.delete_expired()
        logger.info(f"Removed {removed} expired refresh tokens")
        return removed

    async def _issue_tokens(self, user: User) -> TokenPair:
        tokens = issue_token_pair(user.id, user.email)
        await self.tokens.store(user.id, tokens.refresh_token, tokens.refresh_expires_at)
        return tokens

    async def _record_activity(
        self,
        actor_id: Optional[str],
        action: str,
        target_type: str,
        target_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        await record_activity(self.session, actor_id, action, target_type, target_id, metadata)
