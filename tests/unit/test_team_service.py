"""TeamAdminService tests."""

import pytest

from support_routing.models.directory import (
    EmployeeSkillRequest,
    SkillCreateRequest,
    TeamCreateRequest,
    TeamMemberRequest,
)
from support_routing.services.team_service import TeamAdminService
from support_routing.utils.error_handling import ForbiddenError, NotFoundError


@pytest.fixture
def service(directory, profiles):
    profiles.add("admin", "administrator")
    profiles.add("emp", "employee", employee_approved=True)
    return TeamAdminService(directory, profiles)


def test_non_admin_is_rejected(service, directory):
    with pytest.raises(ForbiddenError):
        service.create_team("emp", TeamCreateRequest(name="Billing"))
    assert directory.teams == []


def test_unknown_user_is_rejected(service):
    with pytest.raises(ForbiddenError):
        service.list_teams("ghost")


def test_create_and_list_teams(service):
    team = service.create_team(
        "admin",
        TeamCreateRequest(name="Night shift", focus_area="priority", coverage_start_time_utc=22),
    )

    assert team.focus_area == "priority"
    assert team.coverage.start_hour == 22
    assert service.list_teams("admin") == [team]


def test_delete_missing_team(service):
    with pytest.raises(NotFoundError):
        service.delete_team("admin", "nope")


def test_membership_changes_feed_routing(service, directory):
    team = service.create_team("admin", TeamCreateRequest(name="General"))
    request = TeamMemberRequest(team_id=team.id, user_id="emp")

    service.add_team_member("admin", request)
    assert directory.list_team_members(team.id) == ["emp"]

    service.remove_team_member("admin", request)
    assert directory.list_team_members(team.id) == []
    with pytest.raises(NotFoundError):
        service.remove_team_member("admin", request)


def test_skill_assignment(service, directory):
    skill = service.create_skill("admin", SkillCreateRequest(skill_name=" Java "))
    assert skill.skill_name == "Java"

    request = EmployeeSkillRequest(user_id="emp", skill_id=skill.id)
    service.add_employee_skill("admin", request)
    assert directory.list_skilled_users(skill.id, ["emp", "other"]) == {"emp"}

    service.remove_employee_skill("admin", request)
    assert directory.list_skilled_users(skill.id, ["emp"]) == set()
    assert service.list_skills("admin") == [skill]
