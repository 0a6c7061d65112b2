"""Permission schemas."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from halolight.schemas.base import BaseSchema


class PermissionOut(BaseSchema):
    id: str
    action: str
    resource: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None


class PermissionCreate(BaseSchema):
    action: str = Field(..., min_length=1, max_length=100, pattern=r"^[^:\s]+$")
    resource: str = Field(..., min_length=1, max_length=100, pattern=r"^[^:\s]+$")
    description: Optional[str] = None
