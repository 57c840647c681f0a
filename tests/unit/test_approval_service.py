"""UserApprovalService tests."""

import pytest

from support_routing.models.profile import UserApprovalRequest
from support_routing.services.approval_service import UserApprovalService
from support_routing.utils.error_handling import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)


@pytest.fixture
def service(profiles):
    profiles.add("admin", "administrator", company_name="Acme")
    profiles.add("emp", "employee", company_name="Acme")
    profiles.add("cust", "customer", company_name="Acme")
    profiles.add("done", "employee", company_name="Acme", employee_approved=True)
    profiles.add("other", "employee", company_name="Globex")
    return UserApprovalService(profiles)


def test_lists_unapproved_users_of_own_company(service):
    pending = service.list_pending("admin")
    assert [p.id for p in pending] == ["cust", "emp"]


def test_admin_without_company_sees_nothing(service, profiles):
    profiles.add("lone-admin", "administrator")
    assert service.list_pending("lone-admin") == []


def test_non_admin_cannot_list(service):
    with pytest.raises(ForbiddenError):
        service.list_pending("emp")


def test_approve_employee_sets_employee_flag(service, profiles):
    approved = service.approve_user("admin", UserApprovalRequest(user_id="emp"))

    assert approved.employee_approved
    assert profiles.get_profile("emp").can_work_tickets
    assert [p.id for p in service.list_pending("admin")] == ["cust"]


def test_approve_customer_lets_them_open_tickets(service, profiles):
    service.approve_user("admin", UserApprovalRequest(user_id="cust"))
    assert profiles.get_profile("cust").can_open_tickets


def test_cannot_approve_other_company(service, profiles):
    with pytest.raises(ForbiddenError):
        service.approve_user("admin", UserApprovalRequest(user_id="other"))
    assert not profiles.get_profile("other").employee_approved


def test_unknown_user(service):
    with pytest.raises(NotFoundError):
        service.approve_user("admin", UserApprovalRequest(user_id="ghost"))


def test_already_approved(service):
    with pytest.raises(ConflictError):
        service.approve_user("admin", UserApprovalRequest(user_id="done"))


def test_administrators_are_not_approved(service, profiles):
    profiles.add("admin-2", "administrator", company_name="Acme")
    with pytest.raises(ValidationError):
        service.approve_user("admin", UserApprovalRequest(user_id="admin-2"))


def test_only_admins_approve(service):
    with pytest.raises(ForbiddenError):
        service.approve_user("done", UserApprovalRequest(user_id="emp"))
