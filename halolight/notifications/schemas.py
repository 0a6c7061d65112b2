"""Notification schemas."""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import Field

from halolight.schemas.base import BaseSchema
from halolight.schemas.responses import PageMeta


class NotificationOut(BaseSchema):
    id: str
    user_id: str
    type: str
    title: str
    content: str
    link: Optional[str] = None
    payload: Optional[Dict[str, Any]] = None
    read: bool
    read_at: Optional[datetime] = None
    created_at: datetime


class NotificationCreate(BaseSchema):
    user_id: str = Field(..., min_length=1)
    type: str = Field("system", min_length=1, max_length=20)
    title: str = Field(..., min_length=1, max_length=255)
    content: str = ""
    link: Optional[str] = Field(None, max_length=500)
    payload: Optional[Dict[str, Any]] = None


class NotificationPageMeta(PageMeta):
    unread_count: int


class UnreadCount(BaseSchema):
    unread_count: int


class ReadAllResult(BaseSchema):
    count: int
