"""Role schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from halolight.permissions.schemas import PermissionOut
from halolight.schemas.base import BaseSchema


class RoleOut(BaseSchema):
    id: str
    name: str
    label: Optional[str] = None
    description: Optional[str] = None
    permissions: List[PermissionOut] = []
    user_count: int = 0
    created_at: datetime
    updated_at: datetime


class RoleCreate(BaseSchema):
    name: str = Field(..., min_length=1, max_length=100)
    label: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None


class RoleUpdate(BaseSchema):
    """Only display fields are editable; a role's name is fixed at creation."""
    label: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None


class RolePermissionsUpdate(BaseSchema):
    permission_ids: List[str]
