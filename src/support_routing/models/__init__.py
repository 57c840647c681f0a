"""Pydantic models for tickets, teams, profiles and routing outcomes."""

from support_routing.models.directory import (  # noqa: F401
    CoverageWindow,
    EmployeeSkillRequest,
    SkillCreateRequest,
    Skill,
    Team,
    TeamCreateRequest,
    TeamMemberRequest,
)
from support_routing.models.profile import Profile, UserApprovalRequest, UserRole  # noqa: F401
from support_routing.models.routing import (  # noqa: F401
    Lookup,
    LookupStatus,
    RoutingOutcome,
    RoutingStatus,
)
from support_routing.models.ticket import (  # noqa: F401
    OPEN_STATUSES,
    Ticket,
    TicketCreateRequest,
    TicketPriority,
    TicketStatus,
)
