"""
Role API Routes

Reads are open to any authenticated user; changes require the admin role.
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from halolight.auth.dependencies import get_auth_context, require_role
from halolight.dependencies import get_db
from halolight.schemas.responses import ApiResponse, MessageResponse

from .schemas import RoleCreate, RoleOut, RolePermissionsUpdate, RoleUpdate
from .service import RoleService

role_router = APIRouter(
    prefix="/roles",
    tags=["Roles"],
    dependencies=[Depends(get_auth_context)],
)

admin_only = [Depends(require_role("admin"))]


@role_router.get("", response_model=ApiResponse[List[RoleOut]])
async def list_roles(db: AsyncSession = Depends(get_db)):
    """All roles with their permissions and user counts."""
    return ApiResponse(data=await RoleService(db).list_roles())


@role_router.get("/{role_id}", response_model=ApiResponse[RoleOut])
async def get_role(role_id: str, db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=await RoleService(db).get_role(role_id))


@role_router.post("", response_model=ApiResponse[RoleOut], status_code=status.HTTP_201_CREATED, dependencies=admin_only)
async def create_role(body: RoleCreate, db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=await RoleService(db).create_role(body))


@role_router.patch("/{role_id}", response_model=ApiResponse[RoleOut], dependencies=admin_only)
async def update_role(role_id: str, body: RoleUpdate, db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=await RoleService(db).update_role(role_id, body))


@role_router.post("/{role_id}/permissions", response_model=ApiResponse[RoleOut], dependencies=admin_only)
async def set_role_permissions(role_id: str, body: RolePermissionsUpdate, db: AsyncSession = Depends(get_db)):
    """Replace the permission set of a role."""
    return ApiResponse(data=await RoleService(db).set_permissions(role_id, body.permission_ids))


@role_router.delete("/{role_id}", response_model=ApiResponse[MessageResponse], dependencies=admin_only)
async def delete_role(role_id: str, db: AsyncSession = Depends(get_db)):
    """Delete a role that no user holds."""
    await RoleService(db).delete_role(role_id)
    return ApiResponse(data=MessageResponse(message="Role deleted successfully"))
