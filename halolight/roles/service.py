"""Role management service."""

import logging
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from halolight.database.models import Role
from halolight.database.repository import PermissionRepository, RoleRepository
from halolight.exceptions import ConflictError, NotFoundError, ValidationError
from halolight.permissions.schemas import PermissionOut

from .schemas import RoleCreate, RoleOut, RoleUpdate

logger = logging.getLogger(__name__)


class RoleService:
    def __init__(self, session: AsyncSession):
        self.roles = RoleRepository(session)
        self.permissions = PermissionRepository(session)

    async def _to_out(self, role: Role) -> RoleOut:
        out = RoleOut.model_validate(role)
        out.permissions = [PermissionOut.model_validate(p) for p in await self.roles.get_permissions(role.id)]
        out.user_count = await self.roles.count_users(role.id)
        return out

    async def _get_or_404(self, role_id: str) -> Role:
        role = await self.roles.get(role_id)
        if not role:
            raise NotFoundError("Role not found")
        return role

    async def list_roles(self) -> List[RoleOut]:
        return [await self._to_out(role) for role in await self.roles.list_ordered()]

    async def get_role(self, role_id: str) -> RoleOut:
        return await self._to_out(await self._get_or_404(role_id))

    async def create_role(self, data: RoleCreate) -> RoleOut:
        if await self.roles.get_by_name(data.name):
            raise ConflictError("Role name already exists")
        role = await self.roles.create(data.model_dump())
        logger.info(f"Created role {role.name}")
        return await self._to_out(role)

    async def update_role(self, role_id: str, data: RoleUpdate) -> RoleOut:
        await self._get_or_404(role_id)
        role = await self.roles.update(role_id, data.model_dump(exclude_unset=True))
        if not role:
            raise NotFoundError("Role not found")
        return await self._to_out(role)

    async def set_permissions(self, role_id: str, permission_ids: List[str]) -> RoleOut:
        """Replace the role's permission set."""
        role = await self._get_or_404(role_id)

        unique_ids = list(dict.fromkeys(permission_ids))
        found = {p.id for p in await self.permissions.get_many(unique_ids)}
        missing = [pid for pid in unique_ids if pid not in found]
        if missing:
            raise ValidationError("Unknown permission ids", details={"permissionIds": missing})

        await self.roles.replace_permissions(role_id, unique_ids)
        logger.info(f"Role {role.name} now has {len(unique_ids)} permissions")
        return await self._to_out(role)

    async def delete_role(self, role_id: str) -> None:
        await self._get_or_404(role_id)
        if await self.roles.count_users(role_id) > 0:
            raise ValidationError("Cannot delete role with assigned users", code="ROLE_IN_USE")
        await self.roles.delete(role_id)
        logger.info(f"Deleted role {role_id}")
