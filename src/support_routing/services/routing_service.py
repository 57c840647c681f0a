"""
Ticket auto-assignment.

Picks a team by rule (priority, then billing tag, then general), narrows its
members by the skill implied by the ticket's first tag, and assigns the member
with the fewest open tickets. Everything is read fresh from the stores on each
call; the router keeps no state between tickets.

Only the initial ticket read and the final assignment write raise. Every other
lookup that fails is logged and treated as "no match", so a store hiccup leaves
the ticket unassigned rather than failing the caller.
"""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Optional, TypeVar

from support_routing.models.directory import CoverageWindow, Skill, Team
from support_routing.models.routing import Lookup, RoutingOutcome, RoutingStatus
from support_routing.models.ticket import Ticket, TicketPriority
from support_routing.repositories.base import DirectoryStore, TicketStore
from support_routing.utils.clock import Clock, SystemClock
from support_routing.utils.error_handling import StoreUnavailableError
from support_routing.utils.logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

PRIORITY_FOCUS_AREA = "priority"
BILLING_FOCUS_AREA = "billing"
GENERAL_FOCUS_AREA = "general"
BILLING_TAG = "billing"


def select_least_loaded(candidates: Iterable[str], workloads: Dict[str, int]) -> Optional[str]:
    """Return the candidate with the strictly smallest workload.

    Ties go to whichever candidate comes first; candidates without a workload
    entry are ignored.
    """
    best_agent: Optional[str] = None
    best_count: Optional[int] = None
    for agent_id in candidates:
        if agent_id not in workloads:
            continue
        count = workloads[agent_id]
        if best_count is None or count < best_count:
            best_agent, best_count = agent_id, count
    return best_agent


class TicketRouter:
    """Assigns unassigned tickets to the least-loaded qualified agent."""

    def __init__(
        self,
        tickets: TicketStore,
        directory: DirectoryStore,
        clock: Optional[Clock] = None,
    ):
        self.tickets = tickets
        self.directory = directory
        self.clock = clock or SystemClock()

    def route_ticket(self, ticket_id: str) -> RoutingOutcome:
        """
        Route one ticket and record the assignment.

        Safe to call repeatedly: an assigned ticket is never touched again.
        Raises StoreUnavailableError (or NotFoundError if the row vanished
        before the write) only for the ticket read and the assignment write.
        """
        ticket = self.tickets.get_ticket(ticket_id)
        if ticket is None:
            return self._finish(ticket_id, RoutingStatus.TICKET_NOT_FOUND, "ticket not found")
        if ticket.is_assigned:
            return self._finish(
                ticket_id,
                RoutingStatus.ALREADY_ASSIGNED,
                "ticket already assigned",
                agent_id=ticket.assigned_to,
            )

        team = self._select_team(ticket)
        if team is None:
            return self._finish(ticket_id, RoutingStatus.NO_TEAM, "no matching team")

        skill = self._required_skill(ticket)
        skill_id = skill.id if skill else None

        members = self._lookup(
            "list_team_members", self.directory.list_team_members, team.id
        )
        candidates: List[str] = list(members.value or [])
        if not candidates:
            return self._finish(
                ticket_id,
                RoutingStatus.NO_CANDIDATES,
                "team has no members",
                team_id=team.id,
                required_skill_id=skill_id,
            )

        if skill is not None:
            holders = self._lookup(
                "list_skilled_users", self.directory.list_skilled_users, skill.id, candidates
            )
            skilled = holders.value or set()
            candidates = [user_id for user_id in candidates if user_id in skilled]
            if not candidates:
                return self._finish(
                    ticket_id,
                    RoutingStatus.NO_SKILLED_CANDIDATES,
                    f"no team member holds skill {skill.skill_name!r}",
                    team_id=team.id,
                    required_skill_id=skill_id,
                )

        within_coverage = self._check_coverage(team)
        # Out-of-coverage teams still receive assignments; the result is only reported.

        workloads = self._workloads(candidates)
        agent_id = select_least_loaded(candidates, workloads)
        if agent_id is None:
            return self._finish(
                ticket_id,
                RoutingStatus.NO_CANDIDATES,
                "workload unavailable for every candidate",
                team_id=team.id,
                required_skill_id=skill_id,
                candidate_ids=candidates,
                within_coverage=within_coverage,
            )

        try:
            self.tickets.update_ticket_assignee(ticket.id, agent_id)
        except StoreUnavailableError:
            logger.error(
                "Routing: failed to assign ticket",
                extra={"ticket_id": ticket_id, "agent_id": agent_id},
            )
            raise

        return self._finish(
            ticket_id,
            RoutingStatus.ASSIGNED,
            "assigned to least-loaded agent",
            team_id=team.id,
            required_skill_id=skill_id,
            candidate_ids=candidates,
            workloads=workloads,
            agent_id=agent_id,
            within_coverage=within_coverage,
        )

    def _select_team(self, ticket: Ticket) -> Optional[Team]:
        focus_area: Optional[str] = None
        if ticket.priority is TicketPriority.HIGH:
            focus_area = PRIORITY_FOCUS_AREA
        elif BILLING_TAG in ticket.tags:
            focus_area = BILLING_FOCUS_AREA

        team: Optional[Team] = None
        if focus_area:
            team = self._find_team(focus_area)
        if team is None:
            team = self._find_team(GENERAL_FOCUS_AREA)
        return team

    def _find_team(self, focus_area: str) -> Optional[Team]:
        result = self._lookup(
            "find_team_by_focus_area", self.directory.find_team_by_focus_area, focus_area
        )
        if not result.is_found:
            logger.info(
                "Routing: no team for focus area",
                extra={"focus_area": focus_area, "lookup": result.status.value},
            )
        return result.value

    def _required_skill(self, ticket: Ticket) -> Optional[Skill]:
        """Only the first tag implies a skill; other tags are never consulted."""
        if not ticket.tags:
            return None
        result = self._lookup(
            "find_skill_by_name", self.directory.find_skill_by_name, ticket.tags[0]
        )
        return result.value

    def _check_coverage(self, team: Team) -> bool:
        result = self._lookup(
            "get_team_coverage", self.directory.get_team_coverage, team.id
        )
        window = result.value or CoverageWindow()
        hour = self.clock.current_utc_hour()
        within = window.contains(hour)
        if not within:
            logger.info(
                "Routing: team outside coverage hours",
                extra={
                    "team_id": team.id,
                    "hour_utc": hour,
                    "coverage_start": window.start_hour,
                    "coverage_end": window.end_hour,
                },
            )
        return within

    def _workloads(self, candidates: List[str]) -> Dict[str, int]:
        workloads: Dict[str, int] = {}
        for agent_id in candidates:
            result = self._lookup(
                "count_open_tickets_for_assignee",
                self.tickets.count_open_tickets_for_assignee,
                agent_id,
            )
            if result.is_found:
                workloads[agent_id] = result.value
        return workloads

    def _lookup(self, operation: str, fn: Callable[..., Optional[T]], *args) -> Lookup[T]:
        try:
            value = fn(*args)
        except StoreUnavailableError as exc:
            logger.warning(
                "Routing: lookup failed, treating as no match",
                extra={"operation": operation, "error": str(exc)},
            )
            return Lookup.store_error(exc)
        if value is None:
            return Lookup.not_found()
        return Lookup.found(value)

    def _finish(self, ticket_id: str, status: RoutingStatus, reason: str, **fields) -> RoutingOutcome:
        outcome = RoutingOutcome(ticket_id=ticket_id, status=status, reason=reason, **fields)
        log = logger.info if outcome.assigned or status is RoutingStatus.ALREADY_ASSIGNED else logger.warning
        log(
            "Routing finished",
            extra={
                "ticket_id": ticket_id,
                "status": status.value,
                "team_id": outcome.team_id,
                "agent_id": outcome.agent_id,
                "reason": reason,
            },
        )
        return outcome
