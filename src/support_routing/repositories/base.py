"""Store interfaces the services depend on.

Concrete SQL implementations live beside this module; tests supply in-memory
fakes with the same shape.
"""

from typing import Iterable, List, Optional, Protocol, Set

from support_routing.models.directory import (
    CoverageWindow,
    Skill,
    Team,
    TeamCreateRequest,
)
from support_routing.models.profile import Profile, UserRole
from support_routing.models.ticket import Ticket, TicketCreateRequest


class TicketStore(Protocol):
    def get_ticket(self, ticket_id: str) -> Optional[Ticket]: ...

    def update_ticket_assignee(self, ticket_id: str, agent_id: str) -> None: ...

    def count_open_tickets_for_assignee(self, agent_id: str) -> int: ...

    def create_ticket(self, user_id: str, request: TicketCreateRequest) -> Ticket: ...

    def claim_ticket(self, ticket_id: str, agent_id: str) -> None: ...


class DirectoryStore(Protocol):
    def find_team_by_focus_area(self, focus_area: str) -> Optional[Team]: ...

    def find_skill_by_name(self, skill_name: str) -> Optional[Skill]: ...

    def list_team_members(self, team_id: str) -> List[str]: ...

    def list_skilled_users(self, skill_id: str, candidates: Iterable[str]) -> Set[str]: ...

    def get_team_coverage(self, team_id: str) -> Optional[CoverageWindow]: ...

    def list_teams(self) -> List[Team]: ...

    def create_team(self, request: TeamCreateRequest) -> Team: ...

    def delete_team(self, team_id: str) -> bool: ...

    def add_team_member(self, team_id: str, user_id: str) -> None: ...

    def remove_team_member(self, team_id: str, user_id: str) -> bool: ...

    def list_skills(self) -> List[Skill]: ...

    def create_skill(self, skill_name: str) -> Skill: ...

    def add_employee_skill(self, user_id: str, skill_id: str) -> None: ...

    def remove_employee_skill(self, user_id: str, skill_id: str) -> bool: ...


class ProfileStore(Protocol):
    def get_profile(self, user_id: str) -> Optional[Profile]: ...

    def list_pending_profiles(self, company_name: str) -> List[Profile]: ...

    def approve_profile(self, user_id: str, role: UserRole) -> bool: ...
