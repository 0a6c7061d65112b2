"""Team API Routes."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from halolight.auth.dependencies import AuthContext, get_auth_context
from halolight.dependencies import PaginationParams, get_db, get_pagination
from halolight.schemas.responses import ApiResponse, MessageResponse, PageMeta, PaginatedResponse

from .schemas import TeamCreate, TeamMemberAdd, TeamOut, TeamUpdate
from .service import TeamService

team_router = APIRouter(prefix="/teams", tags=["Teams"])


@team_router.get("", response_model=PaginatedResponse[TeamOut])
async def list_teams(
    pagination: PaginationParams = Depends(get_pagination),
    _: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    teams, total = await TeamService(db).list_teams(
        page=pagination.page, page_size=pagination.page_size, search=pagination.search
    )
    return PaginatedResponse(data=teams, meta=PageMeta.create(pagination.page, pagination.page_size, total))


@team_router.get("/{team_id}", response_model=ApiResponse[TeamOut])
async def get_team(team_id: str, _: AuthContext = Depends(get_auth_context), db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=await TeamService(db).get_team(team_id))


@team_router.post("", response_model=ApiResponse[TeamOut], status_code=status.HTTP_201_CREATED)
async def create_team(body: TeamCreate, auth: AuthContext = Depends(get_auth_context), db: AsyncSession = Depends(get_db)):
    """Create a team owned by the caller."""
    return ApiResponse(data=await TeamService(db).create_team(body, owner_id=auth.user_id))


@team_router.patch("/{team_id}", response_model=ApiResponse[TeamOut])
async def update_team(
    team_id: str,
    body: TeamUpdate,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    return ApiResponse(data=await TeamService(db).update_team(team_id, body, user_id=auth.user_id))


@team_router.delete("/{team_id}", response_model=ApiResponse[MessageResponse])
async def delete_team(team_id: str, auth: AuthContext = Depends(get_auth_context), db: AsyncSession = Depends(get_db)):
    await TeamService(db).delete_team(team_id, user_id=auth.user_id)
    return ApiResponse(data=MessageResponse(message="Team deleted successfully"))


@team_router.post("/{team_id}/members", response_model=ApiResponse[TeamOut])
async def add_team_member(
    team_id: str,
    body: TeamMemberAdd,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    return ApiResponse(data=await TeamService(db).add_member(team_id, body.user_id, body.role, user_id=auth.user_id))


@team_router.delete("/{team_id}/members/{member_id}", response_model=ApiResponse[TeamOut])
async def remove_team_member(
    team_id: str,
    member_id: str,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    return ApiResponse(data=await TeamService(db).remove_member(team_id, member_id, user_id=auth.user_id))
