"""
Authentication API Routes

Register, login, token refresh, logout and the current-user profile.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from halolight.dependencies import get_db
from halolight.exceptions import ConflictError, NotFoundError, UnauthorizedError
from halolight.schemas.responses import ApiResponse, MessageResponse
from halolight.users.schemas import UserWithRoles

from .dependencies import AuthContext, get_auth_context
from .schemas import AuthResponse, LoginRequest, RefreshResponse, RefreshTokenRequest, RegisterRequest
from .service import AuthResult, AuthService

logger = logging.getLogger(__name__)

auth_router = APIRouter(prefix="/auth", tags=["Authentication"])


def _client_ip(request: Request) -> Optional[str]:
    return request.client.host if request.client else None


def _auth_payload(result: AuthResult) -> AuthResponse:
    return AuthResponse(
        user=result.user,
        token=result.tokens.token,
        refresh_token=result.tokens.refresh_token,
        expires_in=result.tokens.expires_in,
    )


@auth_router.post("/register", response_model=ApiResponse[AuthResponse], status_code=status.HTTP_201_CREATED)
async def register(body: RegisterRequest, request: Request, db: AsyncSession = Depends(get_db)):
    """Create an account and sign it in."""
    try:
        result = await AuthService(db).register(
            email=body.email,
            username=body.username,
            password=body.password,
            name=body.name,
            phone=body.phone,
            client_ip=_client_ip(request),
        )
    except ConflictError as exc:
        raise exc.with_code("REGISTRATION_FAILED", status.HTTP_400_BAD_REQUEST)
    return ApiResponse(data=_auth_payload(result))


@auth_router.post("/login", response_model=ApiResponse[AuthResponse])
async def login(body: LoginRequest, request: Request, db: AsyncSession = Depends(get_db)):
    """Authenticate with email and password."""
    try:
        result = await AuthService(db).login(body.email, body.password, client_ip=_client_ip(request))
    except UnauthorizedError as exc:
        raise exc.with_code("LOGIN_FAILED")
    return ApiResponse(data=_auth_payload(result))


@auth_router.post("/refresh", response_model=ApiResponse[RefreshResponse])
async def refresh(body: RefreshTokenRequest, request: Request, db: AsyncSession = Depends(get_db)):
    """Rotate a refresh token. The submitted token can never be used again."""
    try:
        tokens = await AuthService(db).refresh(body.refresh_token, client_ip=_client_ip(request))
    except UnauthorizedError as exc:
        raise exc.with_code("REFRESH_FAILED")
    return ApiResponse(
        data=RefreshResponse(token=tokens.token, refresh_token=tokens.refresh_token, expires_in=tokens.expires_in)
    )


@auth_router.post("/logout", response_model=ApiResponse[MessageResponse])
async def logout(body: RefreshTokenRequest, request: Request, db: AsyncSession = Depends(get_db)):
    """Revoke one refresh token. Safe to repeat."""
    await AuthService(db).logout(body.refresh_token, client_ip=_client_ip(request))
    return ApiResponse(data=MessageResponse(message="Successfully logged out"))


@auth_router.post("/logout-all", response_model=ApiResponse[MessageResponse])
async def logout_all(
    request: Request,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    """Revoke every refresh token of the caller."""
    await AuthService(db).logout_all(auth.user_id, client_ip=_client_ip(request))
    return ApiResponse(data=MessageResponse(message="Successfully logged out from all devices"))


@auth_router.get("/me", response_model=ApiResponse[UserWithRoles])
async def me(auth: AuthContext = Depends(get_auth_context), db: AsyncSession = Depends(get_db)):
    """Current user with roles and permissions."""
    profile = await AuthService(db).get_current_user(auth.user_id)
    if not profile:
        raise NotFoundError("User not found", code="USER_NOT_FOUND")
    return ApiResponse(data=profile)
