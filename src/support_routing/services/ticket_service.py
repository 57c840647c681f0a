"""Ticket intake and manual claiming."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from support_routing.models.profile import Profile
from support_routing.models.routing import RoutingOutcome
from support_routing.models.ticket import Ticket, TicketCreateRequest
from support_routing.repositories.base import ProfileStore, TicketStore
from support_routing.services.routing_service import TicketRouter
from support_routing.utils.error_handling import (
    AppError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
)
from support_routing.utils.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class TicketCreationResult:
    """Created ticket plus what routing did with it."""

    ticket: Ticket
    routing: Optional[RoutingOutcome] = None
    routing_error: Optional[str] = None


class TicketService:
    """Encapsulates ticket creation and claiming."""

    def __init__(self, tickets: TicketStore, profiles: ProfileStore, router: TicketRouter):
        self.tickets = tickets
        self.profiles = profiles
        self.router = router

    def create_ticket(self, user_id: str, request: TicketCreateRequest) -> TicketCreationResult:
        """
        Insert a ticket for an approved user and try to auto-assign it.

        A routing failure does not undo the insert; the ticket simply waits
        unassigned for an agent to claim it.
        """
        profile = self._require_profile(user_id, "Unable to verify your profile")
        if not profile.can_open_tickets:
            raise ForbiddenError(
                f"Your {profile.role.value} account has not been approved by an administrator."
            )

        ticket = self.tickets.create_ticket(user_id, request)
        logger.info(
            "Ticket created",
            extra={"ticket_id": ticket.id, "priority": request.priority.value},
        )

        try:
            outcome = self.router.route_ticket(ticket.id)
        except AppError as exc:
            logger.error(
                "Auto-assignment failed; ticket left unassigned",
                extra={"ticket_id": ticket.id, "error": str(exc)},
            )
            return TicketCreationResult(ticket=ticket, routing_error=str(exc))

        if outcome.assigned:
            ticket = ticket.model_copy(update={"assigned_to": outcome.agent_id})
        return TicketCreationResult(ticket=ticket, routing=outcome)

    def claim_ticket(self, user_id: str, ticket_id: str) -> Ticket:
        """Assign an unassigned ticket to the calling agent and start work on it."""
        profile = self._require_profile(user_id, "Not authorized")
        if not profile.can_work_tickets:
            raise ForbiddenError("Not authorized")

        ticket = self.tickets.get_ticket(ticket_id)
        if ticket is None:
            raise NotFoundError("Ticket not found")
        if ticket.is_assigned:
            raise ConflictError("Ticket is already assigned")

        self.tickets.claim_ticket(ticket_id, user_id)
        logger.info("Ticket claimed", extra={"ticket_id": ticket_id, "agent_id": user_id})
        return self.tickets.get_ticket(ticket_id) or ticket

    def _require_profile(self, user_id: str, message: str) -> Profile:
        profile = self.profiles.get_profile(user_id)
        if profile is None:
            raise ForbiddenError(message)
        return profile
