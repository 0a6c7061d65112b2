"""Team management service. Changes to a team are limited to its owner."""

import logging
from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from halolight.database.activity import record_activity
from halolight.database.models import Team
from halolight.database.repository import TeamRepository, UserRepository
from halolight.exceptions import ForbiddenError, NotFoundError, ValidationError
from halolight.users.schemas import UserSummary

from .schemas import TeamCreate, TeamMemberOut, TeamOut, TeamUpdate

logger = logging.getLogger(__name__)

OWNER_TEAM_ROLE = "owner"


class TeamService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.teams = TeamRepository(session)
        self.users = UserRepository(session)

    async def _owner_summary(self, team: Team) -> Optional[UserSummary]:
        owner = await self.users.get(team.owner_id)
        return UserSummary.model_validate(owner) if owner else None

    async def _get_or_404(self, team_id: str) -> Team:
        team = await self.teams.get(team_id)
        if not team:
            raise NotFoundError("Team not found")
        return team

    async def _get_owned(self, team_id: str, user_id: str) -> Team:
        team = await self._get_or_404(team_id)
        if team.owner_id != user_id:
            raise ForbiddenError("Only the team owner can modify this team")
        return team

    async def list_teams(self, *, page: int, page_size: int, search: Optional[str] = None) -> Tuple[List[TeamOut], int]:
        teams, total = await self.teams.list_teams(skip=(page - 1) * page_size, limit=page_size, search=search)
        counts = await self.teams.member_counts([team.id for team in teams])

        items = []
        for team in teams:
            out = TeamOut.model_validate(team)
            out.owner = await self._owner_summary(team)
            out.member_count = counts.get(team.id, 0)
            items.append(out)
        return items, total

    async def get_team(self, team_id: str) -> TeamOut:
        """Team with owner summary and full member list."""
        team = await self._get_or_404(team_id)
        members = [
            TeamMemberOut(
                user_id=member.user_id,
                role=member.role_id,
                joined_at=member.joined_at,
                user=UserSummary.model_validate(user),
            )
            for member, user in await self.teams.get_members(team_id)
        ]

        out = TeamOut.model_validate(team)
        out.owner = await self._owner_summary(team)
        out.members = members
        out.member_count = len(members)
        return out

    async def create_team(self, data: TeamCreate, owner_id: str) -> TeamOut:
        """Create a team owned by ``owner_id``, who also becomes its first member."""
        team = await self.teams.create({**data.model_dump(), "owner_id": owner_id})
        await self.teams.add_member(team.id, owner_id, OWNER_TEAM_ROLE)
        await record_activity(self.session, owner_id, "create", "team", team.id, {"name": team.name})
        logger.info(f"Team {team.id} created by {owner_id}")
        return await self.get_team(team.id)

    async def update_team(self, team_id: str, data: TeamUpdate, user_id: str) -> TeamOut:
        await self._get_owned(team_id, user_id)
        await self.teams.update(team_id, data.model_dump(exclude_unset=True))
        return await self.get_team(team_id)

    async def delete_team(self, team_id: str, user_id: str) -> None:
        team = await self._get_owned(team_id, user_id)
        await self.teams.delete(team_id)
        await record_activity(self.session, user_id, "delete", "team", team_id, {"name": team.name})
        logger.info(f"Team {team_id} deleted by {user_id}")

    async def add_member(self, team_id: str, member_id: str, role: str, user_id: str) -> TeamOut:
        """Add a member. Adding an existing member changes nothing."""
        await self._get_owned(team_id, user_id)
        if not await self.users.exists(member_id):
            raise NotFoundError("User not found", code="USER_NOT_FOUND")
        await self.teams.add_member(team_id, member_id, role)
        return await self.get_team(team_id)

    async def remove_member(self, team_id: str, member_id: str, user_id: str) -> TeamOut:
        team = await self._get_owned(team_id, user_id)
        if member_id == team.owner_id:
            raise ValidationError("Cannot remove the team owner", code="CANNOT_REMOVE_OWNER")
        await self.teams.remove_member(team_id, member_id)
        return await self.get_team(team_id)
