"""Document and tag schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from halolight.database.models import SharePermission
from halolight.schemas.base import BaseSchema, reject_null
from halolight.users.schemas import UserSummary


class TagOut(BaseSchema):
    id: str
    name: str
    color: Optional[str] = None


class TagCreate(BaseSchema):
    name: str = Field(..., min_length=1, max_length=100)
    color: Optional[str] = Field(None, max_length=20)


class DocumentShareOut(BaseSchema):
    id: str
    shared_with_user_id: Optional[str] = None
    shared_with_team_id: Optional[str] = None
    permission: SharePermission
    expires_at: Optional[datetime] = None
    created_at: datetime


class DocumentOut(BaseSchema):
    id: str
    title: str
    content: str
    folder: Optional[str] = None
    type: str
    size: int
    views: int
    owner_id: str
    team_id: Optional[str] = None
    owner: Optional[UserSummary] = None
    tags: List[TagOut] = []
    shares: Optional[List[DocumentShareOut]] = None
    created_at: datetime
    updated_at: datetime


class DocumentCreate(BaseSchema):
    title: str = Field(..., min_length=1, max_length=255)
    content: str = ""
    folder: Optional[str] = Field(None, max_length=255)
    type: str = Field("document", min_length=1, max_length=50)
    team_id: Optional[str] = None
    tag_ids: List[str] = []


class DocumentUpdate(BaseSchema):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    content: Optional[str] = None
    folder: Optional[str] = Field(None, max_length=255)
    type: Optional[str] = Field(None, min_length=1, max_length=50)
    team_id: Optional[str] = None

    @field_validator("title", "type")
    @classmethod
    def not_null(cls, value):
        return reject_null(value)


class DocumentRename(BaseSchema):
    title: str = Field(..., min_length=1, max_length=255)


class DocumentMove(BaseSchema):
    folder: Optional[str] = Field(None, max_length=255)


class DocumentTagsUpdate(BaseSchema):
    tag_ids: List[str]


class DocumentShareCreate(BaseSchema):
    user_id: str = Field(..., min_length=1)
    permission: SharePermission = SharePermission.READ


class DocumentUnshare(BaseSchema):
    user_id: str = Field(..., min_length=1)


class BatchDeleteRequest(BaseSchema):
    ids: List[str] = Field(..., min_length=1)


class BatchDeleteResult(BaseSchema):
    deleted: int
