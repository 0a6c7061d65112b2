"""Dashboard response schemas."""

from datetime import datetime
from typing import Optional

from halolight.schemas.base import BaseSchema


class UserStats(BaseSchema):
    total: int
    active: int
    new_this_month: int


class DocumentStats(BaseSchema):
    total: int
    created_this_week: int


class TeamStats(BaseSchema):
    total: int


class FileStats(BaseSchema):
    total: int
    total_size: int


class EventStats(BaseSchema):
    total: int
    upcoming: int


class NotificationStats(BaseSchema):
    unread: int


class DashboardStats(BaseSchema):
    users: UserStats
    documents: DocumentStats
    teams: TeamStats
    files: FileStats
    events: EventStats
    notifications: NotificationStats


class VisitTrend(BaseSchema):
    date: str
    visits: int
    unique_visitors: int


class SalesTrend(BaseSchema):
    month: str
    sales: int
    orders: int


class ActivityActor(BaseSchema):
    id: str
    name: Optional[str] = None


class ActivityOut(BaseSchema):
    id: str
    action: str
    target_type: str
    target_id: Optional[str] = None
    created_at: datetime
    actor: Optional[ActivityActor] = None


class PieSlice(BaseSchema):
    name: str
    value: int
    color: str


class TaskItem(BaseSchema):
    id: str
    title: str
    status: str
    priority: str
    due_date: str


class SystemInfo(BaseSchema):
    uptime: float
    platform: str
    python_version: str


class DashboardOverview(BaseSchema):
    stats: DashboardStats
    system: SystemInfo
