from datetime import datetime

import pytest

from portal.errors import AuthorizationError, NotFoundError, StateError, ValidationError
from portal.extensions import db
from portal.models import Event, Role
from portal.services import events
from portal.services.policy import SELF, Action, is_allowed

START = datetime(2030, 2, 1, 18, 0)
END = datetime(2030, 2, 1, 20, 0)


def test_anyone_signed_in_can_host_an_event(app, make_user):
    applicant = make_user()
    event = events.create_event(applicant, "Study group", START, END, location="Library")
    assert event.created_by_id == applicant.id
    assert events.get_event(applicant, event.id) is event

    with pytest.raises(ValidationError):
        events.create_event(applicant, "Backwards", END, START)


def test_owner_rights_do_not_pass_up_the_hierarchy(app, make_team, make_user):
    team = make_team()
    applicant = make_user()
    manager = make_user(Role.TEAM_MANAGEMENT, team=team)
    admin = make_user(Role.ADMIN)
    event = events.create_event(applicant, "Study group", START, END)

    # the owner may edit, a team manager may read but not edit someone else's event
    events.update_event(applicant, event.id, name="Study group (moved)")
    assert events.get_event(manager, event.id).name == "Study group (moved)"
    with pytest.raises(AuthorizationError):
        events.update_event(manager, event.id, name="Taken over")
    with pytest.raises(AuthorizationError):
        events.delete_event(manager, event.id)
    assert is_allowed(Role.TEAM_MANAGEMENT, "event", Action.UPDATE, SELF)

    events.update_event(admin, event.id, location="Hall B")
    assert event.location == "Hall B"


def test_members_only_see_their_own_events(app, make_team, make_user):
    team = make_team()
    member = make_user(Role.MEMBER, team=team)
    other = make_user(Role.MEMBER, team=team)
    manager = make_user(Role.TEAM_MANAGEMENT, team=team)
    hosted = events.create_event(member, "Kickoff", START, END)
    foreign = events.create_event(other, "Workshop", START, END)
    joined = events.create_event(manager, "Info night", START, END)
    events.add_attendee(member, joined.id, member.id)

    with pytest.raises(AuthorizationError):
        events.get_event(member, foreign.id)
    assert {e.id for e in events.list_events(member)} == {hosted.id, joined.id}
    assert len(events.list_events(manager)) == 3


def test_join_and_leave(app, make_user):
    host = make_user(Role.ADMIN)
    applicant = make_user()
    event = events.create_event(host, "Open day", START, END)

    events.add_attendee(applicant, event.id, applicant.id)
    assert applicant in event.attendees
    with pytest.raises(StateError):
        events.add_attendee(applicant, event.id, applicant.id)
    assert [e.id for e in events.events_for_user(applicant, applicant.id)] == [event.id]

    events.remove_attendee(applicant, event.id, applicant.id)
    assert applicant not in event.attendees
    with pytest.raises(StateError):
        events.remove_attendee(applicant, event.id, applicant.id)


def test_adding_other_people_needs_team_management(app, make_team, make_user):
    team = make_team()
    manager = make_user(Role.TEAM_MANAGEMENT, team=team)
    leader = make_user(Role.SYSTEM_LEADER, team=team)
    applicant = make_user()
    event = events.create_event(manager, "Open day", START, END)

    with pytest.raises(AuthorizationError):
        events.add_attendee(leader, event.id, applicant.id)
    with pytest.raises(AuthorizationError):
        events.list_attendees(leader, event.id)
    with pytest.raises(AuthorizationError):
        events.events_for_user(leader, applicant.id)

    events.add_attendee(manager, event.id, applicant.id)
    assert [u.id for u in events.list_attendees(manager, event.id)] == [applicant.id]
    events.remove_attendee(manager, event.id, applicant.id)
    assert events.list_attendees(manager, event.id) == []

    with pytest.raises(NotFoundError):
        events.add_attendee(manager, event.id, 9999)


def test_deleting_an_event_drops_attendance(app, make_user):
    owner = make_user()
    event = events.create_event(owner, "Study group", START, END)
    events.add_attendee(owner, event.id, owner.id)
    events.delete_event(owner, event.id)
    assert db.session.get(Event, event.id) is None
    assert events.events_for_user(owner, owner.id) == []


def test_events_api(app, make_user):
    applicant = make_user()
    client = app.test_client(user=applicant)

    res = client.post("/events", json={"name": "Study group", "start_time": "2030-02-01T18:00",
                                       "end_time": "2030-02-01T20:00"})
    assert res.status_code == 201
    event_id = res.get_json()["id"]

    assert client.post(f"/events/{event_id}/join").status_code == 200
    assert client.post(f"/events/{event_id}/join").status_code == 409
    assert client.get(f"/events/{event_id}/attendees").status_code == 403
    assert [e["id"] for e in client.get(f"/events/users/{applicant.id}").get_json()] == [event_id]

    res = client.patch(f"/events/{event_id}", json={"location": "Library"})
    assert res.get_json()["location"] == "Library"

    stranger = app.test_client(user=make_user())
    assert stranger.get(f"/events/{event_id}").status_code == 403
    assert stranger.delete(f"/events/{event_id}").status_code == 403

    assert client.post(f"/events/{event_id}/leave").status_code == 200
    assert client.delete(f"/events/{event_id}").status_code == 204
