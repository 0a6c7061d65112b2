"""
Dashboard service.

Statistics are counted from the database. Visit, sales and task series are
generated demo data until those sources exist.
"""

import logging
import platform
import random
from datetime import date, timedelta
from typing import List

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from halolight.database.models import CalendarEvent, Document, File, Notification, Team, User, UserStatus
from halolight.database.repository import ActivityLogRepository
from halolight.utils.datetime import uptime_seconds, utcnow

from .schemas import (
    ActivityActor,
    ActivityOut,
    DashboardOverview,
    DashboardStats,
    DocumentStats,
    EventStats,
    FileStats,
    NotificationStats,
    PieSlice,
    SalesTrend,
    SystemInfo,
    TaskItem,
    TeamStats,
    UserStats,
    VisitTrend,
)

logger = logging.getLogger(__name__)

STORAGE_BREAKDOWN = [
    ("Documents", 35, "#3b82f6"),
    ("Images", 25, "#10b981"),
    ("Videos", 20, "#f59e0b"),
    ("Audio", 10, "#ef4444"),
    ("Others", 10, "#8b5cf6"),
]

TASK_TITLES = [
    "Review project documentation",
    "Update user interface",
    "Fix authentication bug",
    "Deploy to production",
    "Write unit tests",
    "Code review",
    "Database optimization",
    "API documentation",
]
TASK_STATUSES = ["pending", "in_progress", "completed"]
TASK_PRIORITIES = ["low", "medium", "high"]


class DashboardService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def _count(self, query) -> int:
        result = await self.session.execute(query)
        return int(result.scalar_one() or 0)

    async def get_stats(self, user_id: str) -> DashboardStats:
        now = utcnow()
        start_of_month = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        week_ago = now - timedelta(days=7)

        return DashboardStats(
            users=UserStats(
                total=await self._count(select(func.count(User.id))),
                active=await self._count(select(func.count(User.id)).where(User.status == UserStatus.ACTIVE)),
                new_this_month=await self._count(
                    select(func.count(User.id)).where(User.created_at >= start_of_month)
                ),
            ),
            documents=DocumentStats(
                total=await self._count(select(func.count(Document.id))),
                created_this_week=await self._count(
                    select(func.count(Document.id)).where(Document.created_at >= week_ago)
                ),
            ),
            teams=TeamStats(total=await self._count(select(func.count(Team.id)))),
            files=FileStats(
                total=await self._count(select(func.count(File.id))),
                total_size=await self._count(select(func.coalesce(func.sum(File.size), 0))),
            ),
            events=EventStats(
                total=await self._count(select(func.count(CalendarEvent.id))),
                upcoming=await self._count(
                    select(func.count(CalendarEvent.id)).where(CalendarEvent.start_at >= now)
                ),
            ),
            notifications=NotificationStats(
                unread=await self._count(
                    select(func.count(Notification.id)).where(
                        Notification.user_id == user_id, Notification.read.is_(False)
                    )
                )
            ),
        )

    def get_visit_trends(self) -> List[VisitTrend]:
        """Last seven days, oldest first."""
        today = date.today()
        return [
            VisitTrend(
                date=(today - timedelta(days=offset)).isoformat(),
                visits=random.randint(500, 1499),
                unique_visitors=random.randint(200, 699),
            )
            for offset in range(6, -1, -1)
        ]

    def get_sales_trends(self) -> List[SalesTrend]:
        """Last six months, oldest first."""
        today = date.today()
        trends = []
        for offset in range(5, -1, -1):
            month_index = today.year * 12 + today.month - 1 - offset
            month_start = date(month_index // 12, month_index % 12 + 1, 1)
            trends.append(
                SalesTrend(
                    month=month_start.strftime("%b %Y"),
                    sales=random.randint(10000, 59999),
                    orders=random.randint(100, 599),
                )
            )
        return trends

    async def get_recent_activities(self, limit: int = 20) -> List[ActivityOut]:
        rows = await ActivityLogRepository(self.session).recent_with_actor(limit)
        return [
            ActivityOut(
                id=log.id,
                action=log.action,
                target_type=log.target_type,
                target_id=log.target_id,
                created_at=log.created_at,
                actor=ActivityActor(id=log.actor_id, name=actor.name if actor else None) if log.actor_id else None,
            )
            for log, actor in rows
        ]

    def get_pie_chart(self) -> List[PieSlice]:
        return [PieSlice(name=name, value=value, color=color) for name, value, color in STORAGE_BREAKDOWN]

    def get_tasks(self) -> List[TaskItem]:
        today = date.today()
        return [
            TaskItem(
                id=f"task-{i + 1}",
                title=TASK_TITLES[i % len(TASK_TITLES)],
                status=random.choice(TASK_STATUSES),
                priority=random.choice(TASK_PRIORITIES),
                due_date=(today + timedelta(days=random.randint(-3, 10))).isoformat(),
            )
            for i in range(15)
        ]

    async def get_overview(self, user_id: str) -> DashboardOverview:
        return DashboardOverview(
            stats=await self.get_stats(user_id),
            system=SystemInfo(
                uptime=round(uptime_seconds(), 3),
                platform=platform.platform(),
                python_version=platform.python_version(),
            ),
        )
