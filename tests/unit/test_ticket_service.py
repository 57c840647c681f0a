"""TicketService tests: intake with auto-assignment, and manual claiming."""

import pytest

from support_routing.models.routing import RoutingStatus
from support_routing.models.ticket import TicketCreateRequest, TicketStatus
from support_routing.services.ticket_service import TicketService
from support_routing.utils.error_handling import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
)


@pytest.fixture
def service(ticket_store, profiles, router):
    return TicketService(ticket_store, profiles, router)


def _request(**overrides) -> TicketCreateRequest:
    fields = dict(title="Card declined", description="My invoice payment failed", priority="normal")
    fields.update(overrides)
    return TicketCreateRequest(**fields)


class TestCreateTicket:
    def test_created_ticket_is_auto_assigned(self, service, profiles, directory, ticket_store):
        profiles.add("cust", "customer", customer_approved=True)
        directory.add_team("team-billing", "billing", members=["agent-1"])

        result = service.create_ticket("cust", _request(tags=["billing"]))

        assert result.routing.status is RoutingStatus.ASSIGNED
        assert result.ticket.assigned_to == "agent-1"
        assert ticket_store.tickets[result.ticket.id].user_id == "cust"
        assert ticket_store.tickets[result.ticket.id].status is TicketStatus.OPEN

    def test_unroutable_ticket_is_still_created(self, service, profiles, ticket_store):
        profiles.add("cust", "customer", customer_approved=True)

        result = service.create_ticket("cust", _request())

        assert result.routing.status is RoutingStatus.NO_TEAM
        assert result.ticket.assigned_to is None
        assert result.ticket.id in ticket_store.tickets

    def test_routing_failure_is_reported_not_raised(self, service, profiles, directory, ticket_store):
        profiles.add("emp", "employee", employee_approved=True)
        directory.add_team("team-general", "general", members=["agent-1"])
        ticket_store.fail_on.add("update_ticket_assignee")

        result = service.create_ticket("emp", _request())

        assert result.routing is None
        assert "update_ticket_assignee" in result.routing_error
        assert ticket_store.tickets[result.ticket.id].assigned_to is None

    def test_unapproved_customer_rejected(self, service, profiles, ticket_store):
        profiles.add("cust", "customer", customer_approved=False)

        with pytest.raises(ForbiddenError):
            service.create_ticket("cust", _request())
        assert "create_ticket" not in ticket_store.calls

    def test_unknown_profile_rejected(self, service):
        with pytest.raises(ForbiddenError):
            service.create_ticket("ghost", _request())


class TestClaimTicket:
    def test_approved_employee_claims_ticket(self, service, profiles, ticket_store):
        profiles.add("emp", "employee", employee_approved=True)
        ticket_store.add("t1")

        ticket = service.claim_ticket("emp", "t1")

        assert ticket.assigned_to == "emp"
        assert ticket.status is TicketStatus.IN_PROGRESS

    def test_admin_can_claim(self, service, profiles, ticket_store):
        profiles.add("boss", "administrator")
        ticket_store.add("t1")

        assert service.claim_ticket("boss", "t1").assigned_to == "boss"

    def test_customer_cannot_claim(self, service, profiles, ticket_store):
        profiles.add("cust", "customer", customer_approved=True)
        ticket_store.add("t1")

        with pytest.raises(ForbiddenError):
            service.claim_ticket("cust", "t1")

    def test_unapproved_employee_cannot_claim(self, service, profiles, ticket_store):
        profiles.add("emp", "employee", employee_approved=False)
        ticket_store.add("t1")

        with pytest.raises(ForbiddenError):
            service.claim_ticket("emp", "t1")

    def test_missing_ticket(self, service, profiles):
        profiles.add("emp", "employee", employee_approved=True)

        with pytest.raises(NotFoundError):
            service.claim_ticket("emp", "nope")

    def test_already_assigned_ticket_cannot_be_claimed(self, service, profiles, ticket_store):
        profiles.add("emp", "employee", employee_approved=True)
        ticket_store.add("t1", assigned_to="other")

        with pytest.raises(ConflictError):
            service.claim_ticket("emp", "t1")
        assert ticket_store.tickets["t1"].assigned_to == "other"
