"""Permission API Routes."""

from typing import Dict, List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from halolight.auth.dependencies import get_auth_context, require_role
from halolight.dependencies import get_db
from halolight.schemas.responses import ApiResponse, MessageResponse

from .schemas import PermissionCreate, PermissionOut
from .service import PermissionService

permission_router = APIRouter(
    prefix="/permissions",
    tags=["Permissions"],
    dependencies=[Depends(get_auth_context)],
)


@permission_router.get("", response_model=ApiResponse[List[PermissionOut]])
async def list_permissions(db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=await PermissionService(db).list_permissions())


@permission_router.get("/grouped", response_model=ApiResponse[Dict[str, List[PermissionOut]]])
async def grouped_permissions(db: AsyncSession = Depends(get_db)):
    """Permissions grouped by resource."""
    return ApiResponse(data=await PermissionService(db).grouped())


@permission_router.get("/{permission_id}", response_model=ApiResponse[PermissionOut])
async def get_permission(permission_id: str, db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=await PermissionService(db).get_permission(permission_id))


@permission_router.post(
    "",
    response_model=ApiResponse[PermissionOut],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_role("admin"))],
)
async def create_permission(body: PermissionCreate, db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=await PermissionService(db).create_permission(body))


@permission_router.delete(
    "/{permission_id}",
    response_model=ApiResponse[MessageResponse],
    dependencies=[Depends(require_role("admin"))],
)
async def delete_permission(permission_id: str, db: AsyncSession = Depends(get_db)):
    await PermissionService(db).delete_permission(permission_id)
    return ApiResponse(data=MessageResponse(message="Permission deleted successfully"))
