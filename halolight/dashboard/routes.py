"""Dashboard API Routes."""

from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from halolight.auth.dependencies import AuthContext, get_auth_context
from halolight.dependencies import get_db
from halolight.schemas.responses import ApiResponse

from .schemas import ActivityOut, DashboardOverview, DashboardStats, PieSlice, SalesTrend, TaskItem, VisitTrend
from .service import DashboardService

dashboard_router = APIRouter(
    prefix="/dashboard",
    tags=["Dashboard"],
    dependencies=[Depends(get_auth_context)],
)


@dashboard_router.get("/stats", response_model=ApiResponse[DashboardStats])
async def get_stats(auth: AuthContext = Depends(get_auth_context), db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=await DashboardService(db).get_stats(auth.user_id))


@dashboard_router.get("/visits", response_model=ApiResponse[List[VisitTrend]])
async def get_visits(db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=DashboardService(db).get_visit_trends())


@dashboard_router.get("/sales", response_model=ApiResponse[List[SalesTrend]])
async def get_sales(db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=DashboardService(db).get_sales_trends())


@dashboard_router.get("/activities", response_model=ApiResponse[List[ActivityOut]])
async def get_activities(limit: int = Query(20, ge=1, le=100), db: AsyncSession = Depends(get_db)):
    """Most recent activity log entries with their actor."""
    return ApiResponse(data=await DashboardService(db).get_recent_activities(limit))


@dashboard_router.get("/pie", response_model=ApiResponse[List[PieSlice]])
async def get_pie(db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=DashboardService(db).get_pie_chart())


@dashboard_router.get("/tasks", response_model=ApiResponse[List[TaskItem]])
async def get_tasks(db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=DashboardService(db).get_tasks())


@dashboard_router.get("/overview", response_model=ApiResponse[DashboardOverview])
async def get_overview(auth: AuthContext = Depends(get_auth_context), db: AsyncSession = Depends(get_db)):
    """Statistics plus runtime information about the server."""
    return ApiResponse(data=await DashboardService(db).get_overview(auth.user_id))
