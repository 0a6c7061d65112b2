"""
User Management API Routes

Listing and lookup for any authenticated user; updates and deletes are
restricted to admins.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from halolight.auth.dependencies import AuthContext, get_auth_context, require_role
from halolight.database.models import UserStatus
from halolight.dependencies import PaginationParams, get_db, get_pagination
from halolight.schemas.responses import ApiResponse, MessageResponse, PageMeta, PaginatedResponse

from .schemas import UserPublic, UserUpdate
from .service import UserService

user_router = APIRouter(
    prefix="/users",
    tags=["User Management"],
    dependencies=[Depends(get_auth_context)],
)


@user_router.get("", response_model=PaginatedResponse[UserPublic])
async def list_users(
    pagination: PaginationParams = Depends(get_pagination),
    status: Optional[UserStatus] = Query(None, description="Filter by account status"),
    db: AsyncSession = Depends(get_db),
):
    """Get users, newest first, with optional search and status filter."""
    users, total = await UserService(db).list_users(
        page=pagination.page,
        page_size=pagination.page_size,
        search=pagination.search,
        status=status,
    )
    return PaginatedResponse(data=users, meta=PageMeta.create(pagination.page, pagination.page_size, total))


@user_router.get("/{user_id}", response_model=ApiResponse[UserPublic])
async def get_user(user_id: str, db: AsyncSession = Depends(get_db)):
    """Get specific user by ID."""
    return ApiResponse(data=await UserService(db).get_user(user_id))


@user_router.put("/{user_id}", response_model=ApiResponse[UserPublic])
async def update_user(
    user_id: str,
    body: UserUpdate,
    _: AuthContext = Depends(require_role("admin")),
    db: AsyncSession = Depends(get_db),
):
    """Update a user (admin only)."""
    return ApiResponse(data=await UserService(db).update_user(user_id, body))


@user_router.delete("/{user_id}", response_model=ApiResponse[MessageResponse])
async def delete_user(
    user_id: str,
    auth: AuthContext = Depends(require_role("admin")),
    db: AsyncSession = Depends(get_db),
):
    """Delete a user (admin only). Admins cannot delete themselves."""
    await UserService(db).delete_user(user_id, actor_id=auth.user_id)
    return ApiResponse(data=MessageResponse(message="User deleted successfully"))
