"""Permission catalogue service."""

import logging
from typing import Dict, List

from sqlalchemy.ext.asyncio import AsyncSession

from halolight.database.repository import PermissionRepository
from halolight.exceptions import ConflictError, NotFoundError

from .schemas import PermissionCreate, PermissionOut

logger = logging.getLogger(__name__)


class PermissionService:
    def __init__(self, session: AsyncSession):
        self.permissions = PermissionRepository(session)

    async def list_permissions(self) -> List[PermissionOut]:
        return [PermissionOut.model_validate(p) for p in await self.permissions.list_ordered()]

    async def grouped(self) -> Dict[str, List[PermissionOut]]:
        """Permissions keyed by resource."""
        groups: Dict[str, List[PermissionOut]] = {}
        for permission in await self.list_permissions():
            groups.setdefault(permission.resource, []).append(permission)
        return groups

    async def get_permission(self, permission_id: str) -> PermissionOut:
        permission = await self.permissions.get(permission_id)
        if not permission:
            raise NotFoundError("Permission not found")
        return PermissionOut.model_validate(permission)

    async def create_permission(self, data: PermissionCreate) -> PermissionOut:
        if await self.permissions.get_by_code(data.resource, data.action):
            raise ConflictError("Permission already exists")
        permission = await self.permissions.create(data.model_dump())
        logger.info(f"Created permission {permission.code}")
        return PermissionOut.model_validate(permission)

    async def delete_permission(self, permission_id: str) -> None:
        if not await self.permissions.delete_with_links(permission_id):
            raise NotFoundError("Permission not found")
        logger.info(f"Deleted permission {permission_id}")
