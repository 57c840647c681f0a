"""Administrator-only management of teams, memberships and skills."""

from __future__ import annotations

from typing import List

from support_routing.models.directory import (
    EmployeeSkillRequest,
    Skill,
    SkillCreateRequest,
    Team,
    TeamCreateRequest,
    TeamMemberRequest,
)
from support_routing.repositories.base import DirectoryStore, ProfileStore
from support_routing.utils.error_handling import ForbiddenError, NotFoundError
from support_routing.utils.logging_config import get_logger

logger = get_logger(__name__)


class TeamAdminService:
    """Every operation first checks that the caller is an administrator."""

    def __init__(self, directory: DirectoryStore, profiles: ProfileStore):
        self.directory = directory
        self.profiles = profiles

    def list_teams(self, admin_id: str) -> List[Team]:
        self._require_admin(admin_id)
        return self.directory.list_teams()

    def create_team(self, admin_id: str, request: TeamCreateRequest) -> Team:
        self._require_admin(admin_id)
        team = self.directory.create_team(request)
        logger.info(
            "Team created",
            extra={"team_id": team.id, "focus_area": team.focus_area},
        )
        return team

    def delete_team(self, admin_id: str, team_id: str) -> None:
        self._require_admin(admin_id)
        if not self.directory.delete_team(team_id):
            raise NotFoundError("Team not found")
        logger.info("Team deleted", extra={"team_id": team_id})

    def add_team_member(self, admin_id: str, request: TeamMemberRequest) -> None:
        self._require_admin(admin_id)
        self.directory.add_team_member(request.team_id, request.user_id)
        logger.info(
            "Agent added to team",
            extra={"team_id": request.team_id, "user_id": request.user_id},
        )

    def remove_team_member(self, admin_id: str, request: TeamMemberRequest) -> None:
        self._require_admin(admin_id)
        if not self.directory.remove_team_member(request.team_id, request.user_id):
            raise NotFoundError("Team membership not found")

    def list_skills(self, admin_id: str) -> List[Skill]:
        self._require_admin(admin_id)
        return self.directory.list_skills()

    def create_skill(self, admin_id: str, request: SkillCreateRequest) -> Skill:
        self._require_admin(admin_id)
        return self.directory.create_skill(request.skill_name)

    def add_employee_skill(self, admin_id: str, request: EmployeeSkillRequest) -> None:
        self._require_admin(admin_id)
        self.directory.add_employee_skill(request.user_id, request.skill_id)

    def remove_employee_skill(self, admin_id: str, request: EmployeeSkillRequest) -> None:
        self._require_admin(admin_id)
        if not self.directory.remove_employee_skill(request.user_id, request.skill_id):
            raise NotFoundError("Skill assignment not found")

    def _require_admin(self, user_id: str) -> None:
        profile = self.profiles.get_profile(user_id)
        if profile is None or not profile.is_admin:
            raise ForbiddenError("Only administrators can manage teams and skills.")
