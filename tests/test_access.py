from datetime import datetime
from types import SimpleNamespace

from portal.models import Interview, Role
from portal.services.access import (PermissionSet, build_permissions, can_access_application,
                                    can_access_interview, can_access_system, can_access_team,
                                    can_annotate_interview, can_create_system, can_manage_user,
                                    can_read_people, can_review_application)
from portal.services.policy import Action


def actor(role, id=1, team_id=None, system_id=None):
    return SimpleNamespace(id=id, role=role, team_id=team_id, system_id=system_id, is_authenticated=True)


def test_admin_gets_wildcard():
    perms = build_permissions(actor(Role.ADMIN))
    assert perms.permission_for_resource("team:99", Action.DELETE)
    assert perms.permission_for_resource("anything", Action.ANY)


def test_team_management_grants():
    perms = build_permissions(actor(Role.TEAM_MANAGEMENT, team_id=3))
    assert perms.permission_for_resource("team:3", Action.DELETE)
    assert not perms.permission_for_resource("team:4", Action.READ)
    # system wildcard covers systems of any team
    assert perms.permission_for_resource("system:42", Action.ANY)
    assert perms.permission_for_resource("users", Action.READ)


def test_system_leader_grants():
    perms = build_permissions(actor(Role.SYSTEM_LEADER, team_id=3, system_id=7))
    assert perms.permission_for_resource("team:3", Action.READ)
    assert not perms.permission_for_resource("team:3", Action.UPDATE)
    assert perms.permission_for_resource("system:7", Action.UPDATE)
    assert not perms.permission_for_resource("system:7", Action.CREATE)
    assert not perms.permission_for_resource("system:8", Action.READ)


def test_member_and_applicant_grants():
    member = build_permissions(actor(Role.MEMBER, id=5, team_id=3, system_id=7))
    assert member.permission_for_resource("system:7", Action.READ)
    assert not member.permission_for_resource("system:7", Action.UPDATE)
    assert member.permission_for_resource("user:5", Action.UPDATE)

    applicant = build_permissions(actor(Role.APPLICANT, id=6))
    assert not applicant.permission_for_resource("users", Action.READ)
    assert applicant.permission_for_resource("user:6", Action.UPDATE)
    assert not applicant.permission_for_resource("user:5", Action.READ)


def test_unauthenticated_actor_has_nothing():
    assert build_permissions(None).grants == {}
    anon = SimpleNamespace(id=None, role=None, is_authenticated=False)
    assert build_permissions(anon).grants == {}


def test_grant_keeps_the_stronger_action():
    perms = PermissionSet()
    perms.grant("team:1", Action.DELETE)
    perms.grant("team:1", Action.READ)
    assert perms.permission_for_resource("team:1", Action.DELETE)


def test_permissions_follow_role_changes_immediately(app, make_team, make_system, make_user,
                                                      make_cycle, make_application):
    team = make_team()
    system = make_system(team)
    staff = make_user(Role.MEMBER, team=team, system=system)
    applicant = make_user()
    application = make_application(applicant, team, make_cycle(), system=system)

    assert not can_review_application(staff, application)
    staff.role = Role.SYSTEM_LEADER
    assert can_review_application(staff, application)
    staff.system_id = None
    staff.team_id = None
    assert not can_review_application(staff, application)


def test_application_access(app, make_team, make_system, make_user, make_cycle, make_application):
    team = make_team()
    other_team = make_team("Hardware")
    system = make_system(team)
    owner = make_user()
    stranger = make_user()
    member = make_user(Role.MEMBER, team=team, system=system)
    outsider = make_user(Role.MEMBER, team=other_team)
    application = make_application(owner, team, make_cycle(), system=system)

    assert can_access_application(owner, application)
    assert can_access_application(owner, application, Action.UPDATE)
    assert not can_access_application(stranger, application)
    assert can_access_application(member, application)
    assert not can_access_application(member, application, Action.UPDATE)
    assert not can_access_application(outsider, application)
    # ownership does not make an applicant a reviewer
    assert not can_review_application(owner, application)


def test_interview_access_and_notes(app, make_team, make_system, make_user, make_cycle, make_application):
    team = make_team()
    system = make_system(team)
    owner = make_user()
    member = make_user(Role.MEMBER, team=team, system=system)
    application = make_application(owner, team, make_cycle(), system=system)
    interview = Interview(application_id=application.id, system_id=system.id, duration=30,
                          scheduled_at=datetime(2030, 1, 21, 9, 0), created_by_id=owner.id)

    assert can_access_interview(owner, interview)
    assert not can_access_interview(owner, interview, Action.UPDATE)
    assert can_access_interview(member, interview)
    assert can_annotate_interview(member, interview)
    assert not can_annotate_interview(owner, interview)


def test_orphaned_interview_is_admin_only(app, make_user):
    interview = Interview(application_id=None, system_id=None, duration=30, created_by_id=1)
    assert can_access_interview(make_user(Role.ADMIN), interview)
    assert not can_access_interview(make_user(Role.TEAM_MANAGEMENT), interview)


def test_team_and_system_management(app, make_team, make_system, make_user):
    team = make_team()
    other = make_team("Hardware")
    system = make_system(team)
    foreign_system = make_system(other, "Chassis")
    manager = make_user(Role.TEAM_MANAGEMENT, team=team)
    leader = make_user(Role.SYSTEM_LEADER, team=team, system=system)

    assert can_access_team(manager, team.id, Action.UPDATE)
    assert not can_access_team(manager, other.id, Action.UPDATE)
    assert can_create_system(manager, team.id)
    assert not can_create_system(manager, other.id)
    assert can_access_system(manager, foreign_system, Action.DELETE)

    assert can_access_system(leader, system, Action.UPDATE)
    assert not can_access_system(leader, system, Action.DELETE)
    assert not can_access_team(leader, team.id, Action.UPDATE)
    assert not can_create_system(leader, team.id)


def test_people_listing(app, make_user):
    assert can_read_people(make_user(Role.MEMBER))
    assert can_read_people(make_user(Role.ADMIN))
    assert not can_read_people(make_user(Role.APPLICANT))


def test_role_mutation_rules(app, make_team, make_user):
    team = make_team()
    manager = make_user(Role.TEAM_MANAGEMENT, team=team)
    admin = make_user(Role.ADMIN)
    member = make_user(Role.MEMBER, team=team)
    applicant = make_user()

    assert can_manage_user(manager, applicant, new_role=Role.MEMBER, new_team_id=team.id)
    assert can_manage_user(manager, member, new_role=Role.TEAM_MANAGEMENT)
    assert not can_manage_user(manager, member, new_role=Role.ADMIN)
    assert not can_manage_user(manager, admin, new_role=Role.MEMBER)
    assert not can_manage_user(member, applicant, new_role=Role.MEMBER)
    assert can_manage_user(admin, manager, new_role=Role.APPLICANT)
    # own profile edits are fine, promoting yourself is not
    assert can_manage_user(applicant, applicant)
    assert not can_manage_user(applicant, applicant, new_role=Role.ADMIN)
