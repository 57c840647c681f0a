"""
Pytest configuration and in-memory store fakes.

The src/ directory is put on sys.path so tests run from a plain checkout as
well as from an editable install. The fakes implement the same store
interfaces as the SQL repositories, with per-operation failure injection.
"""

import os
import sys
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set
import uuid

import pytest


def _ensure_paths_on_sys_path() -> None:
    """Add src/ to sys.path if missing."""
    src_root = Path(__file__).resolve().parents[1] / "src"
    src_str = str(src_root)
    if src_str not in sys.path:
        sys.path.insert(0, src_str)


_ensure_paths_on_sys_path()

# Offline-friendly defaults so tests never reach AWS or a database.
os.environ.setdefault("AWS_REGION", "eu-west-2")
os.environ.setdefault("AWS_DEFAULT_REGION", "eu-west-2")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "test")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "test")
os.environ.setdefault("ENVIRONMENT", "dev")
os.environ.pop("DATABASE_URL", None)
os.environ.pop("DB_SECRET_ARN", None)

from support_routing.models.directory import (  # noqa: E402
    CoverageWindow,
    Skill,
    Team,
    TeamCreateRequest,
)
from support_routing.models.profile import Profile, UserRole  # noqa: E402
from support_routing.models.ticket import (  # noqa: E402
    OPEN_STATUSES,
    Ticket,
    TicketCreateRequest,
    TicketStatus,
)
from support_routing.utils.error_handling import NotFoundError, StoreUnavailableError  # noqa: E402


class _Failing:
    """Mixin: raise StoreUnavailableError for operations listed in fail_on."""

    def __init__(self):
        self.fail_on: Set[str] = set()
        self.calls: List[str] = []

    def _op(self, name: str) -> None:
        self.calls.append(name)
        if name in self.fail_on:
            raise StoreUnavailableError(f"{name} failed", name)


class FakeTicketStore(_Failing):
    def __init__(self):
        super().__init__()
        self.tickets: Dict[str, Ticket] = {}
        self.failing_counts: Set[str] = set()

    def add(self, ticket_id: str, **fields) -> Ticket:
        ticket = Ticket(id=ticket_id, title=fields.pop("title", "Help"), **fields)
        self.tickets[ticket_id] = ticket
        return ticket

    def add_open_tickets(self, agent_id: str, count: int, status: str = "open") -> None:
        for _ in range(count):
            self.add(str(uuid.uuid4()), assigned_to=agent_id, status=status)

    def get_ticket(self, ticket_id: str) -> Optional[Ticket]:
        self._op("get_ticket")
        return self.tickets.get(ticket_id)

    def update_ticket_assignee(self, ticket_id: str, agent_id: str) -> None:
        self._op("update_ticket_assignee")
        if ticket_id not in self.tickets:
            raise NotFoundError(f"Ticket {ticket_id} not found")
        self.tickets[ticket_id] = self.tickets[ticket_id].model_copy(
            update={"assigned_to": agent_id}
        )

    def count_open_tickets_for_assignee(self, agent_id: str) -> int:
        self._op("count_open_tickets_for_assignee")
        if agent_id in self.failing_counts:
            raise StoreUnavailableError("count failed", "count_open_tickets_for_assignee")
        return sum(
            1
            for t in self.tickets.values()
            if t.assigned_to == agent_id and t.status in OPEN_STATUSES
        )

    def create_ticket(self, user_id: str, request: TicketCreateRequest) -> Ticket:
        self._op("create_ticket")
        return self.add(
            str(uuid.uuid4()),
            user_id=user_id,
            title=request.title,
            description=request.description,
            priority=request.priority,
            tags=request.tags,
        )

    def claim_ticket(self, ticket_id: str, agent_id: str) -> None:
        self._op("claim_ticket")
        self.tickets[ticket_id] = self.tickets[ticket_id].model_copy(
            update={"assigned_to": agent_id, "status": TicketStatus.IN_PROGRESS}
        )


class FakeDirectoryStore(_Failing):
    def __init__(self):
        super().__init__()
        self.teams: List[Team] = []
        self.members: List[tuple] = []
        self.skills: List[Skill] = []
        self.employee_skills: Set[tuple] = set()

    def add_team(self, team_id: str, focus_area: str, members: Iterable[str] = (), **fields) -> Team:
        team = Team(id=team_id, name=fields.pop("name", team_id), focus_area=focus_area, **fields)
        self.teams.append(team)
        for user_id in members:
            self.members.append((team_id, user_id))
        return team

    def add_skill(self, skill_id: str, skill_name: str, holders: Iterable[str] = ()) -> Skill:
        skill = Skill(id=skill_id, skill_name=skill_name)
        self.skills.append(skill)
        for user_id in holders:
            self.employee_skills.add((user_id, skill_id))
        return skill

    def find_team_by_focus_area(self, focus_area: str) -> Optional[Team]:
        self._op("find_team_by_focus_area")
        for team in self.teams:
            if team.focus_area.lower() == focus_area.lower():
                return team
        return None

    def find_skill_by_name(self, skill_name: str) -> Optional[Skill]:
        self._op("find_skill_by_name")
        for skill in self.skills:
            if skill.skill_name.lower() == skill_name.lower():
                return skill
        return None

    def list_team_members(self, team_id: str) -> List[str]:
        self._op("list_team_members")
        return sorted({user_id for tid, user_id in self.members if tid == team_id})

    def list_skilled_users(self, skill_id: str, candidates: Iterable[str]) -> Set[str]:
        self._op("list_skilled_users")
        return {
            user_id
            for user_id in candidates
            if (user_id, skill_id) in self.employee_skills
        }

    def get_team_coverage(self, team_id: str) -> Optional[CoverageWindow]:
        self._op("get_team_coverage")
        for team in self.teams:
            if team.id == team_id:
                return team.coverage
        return None

    def list_teams(self) -> List[Team]:
        self._op("list_teams")
        return list(self.teams)

    def create_team(self, request: TeamCreateRequest) -> Team:
        self._op("create_team")
        return self.add_team(
            f"team-{len(self.teams) + 1}",
            request.focus_area,
            name=request.name,
            coverage_start_time_utc=request.coverage_start_time_utc,
            coverage_end_time_utc=request.coverage_end_time_utc,
        )

    def delete_team(self, team_id: str) -> bool:
        self._op("delete_team")
        before = len(self.teams)
        self.teams = [team for team in self.teams if team.id != team_id]
        return len(self.teams) < before

    def add_team_member(self, team_id: str, user_id: str) -> None:
        self._op("add_team_member")
        if (team_id, user_id) not in self.members:
            self.members.append((team_id, user_id))

    def remove_team_member(self, team_id: str, user_id: str) -> bool:
        self._op("remove_team_member")
        if (team_id, user_id) in self.members:
            self.members.remove((team_id, user_id))
            return True
        return False

    def list_skills(self) -> List[Skill]:
        self._op("list_skills")
        return sorted(self.skills, key=lambda s: s.skill_name)

    def create_skill(self, skill_name: str) -> Skill:
        self._op("create_skill")
        return self.add_skill(f"skill-{len(self.skills) + 1}", skill_name)

    def add_employee_skill(self, user_id: str, skill_id: str) -> None:
        self._op("add_employee_skill")
        self.employee_skills.add((user_id, skill_id))

    def remove_employee_skill(self, user_id: str, skill_id: str) -> bool:
        self._op("remove_employee_skill")
        if (user_id, skill_id) in self.employee_skills:
            self.employee_skills.remove((user_id, skill_id))
            return True
        return False


class FakeProfileStore:
    def __init__(self):
        self.profiles: Dict[str, Profile] = {}

    def add(self, user_id: str, role: str, **flags) -> Profile:
        profile = Profile(id=user_id, role=role, **flags)
        self.profiles[user_id] = profile
        return profile

    def get_profile(self, user_id: str) -> Optional[Profile]:
        return self.profiles.get(user_id)

    def list_pending_profiles(self, company_name: str) -> List[Profile]:
        return sorted(
            (
                p for p in self.profiles.values()
                if p.company_name == company_name and not p.is_approved
            ),
            key=lambda p: p.id,
        )

    def approve_profile(self, user_id: str, role: UserRole) -> bool:
        profile = self.profiles.get(user_id)
        if profile is None:
            return False
        flag = "employee_approved" if role is UserRole.EMPLOYEE else "customer_approved"
        self.profiles[user_id] = profile.model_copy(update={flag: True})
        return True


class FixedClock:
    """Always reports the same UTC hour."""

    def __init__(self, hour: int = 12):
        self.hour = hour

    def current_utc_hour(self) -> int:
        return self.hour


@pytest.fixture
def ticket_store() -> FakeTicketStore:
    return FakeTicketStore()


@pytest.fixture
def directory() -> FakeDirectoryStore:
    return FakeDirectoryStore()


@pytest.fixture
def profiles() -> FakeProfileStore:
    return FakeProfileStore()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(12)


@pytest.fixture
def router(ticket_store, directory, clock):
    from support_routing.services.routing_service import TicketRouter

    return TicketRouter(ticket_store, directory, clock)
