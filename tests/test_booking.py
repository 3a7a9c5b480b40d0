from datetime import datetime

import pytest

from portal.errors import (AuthenticationError, AuthorizationError, DuplicateBookingError, NotFoundError,
                           SlotConflictError, StageError, ValidationError)
from portal.extensions import db
from portal.models import Availability, Interview, InterviewStatus, Notification, Role, Stage
from portal.services.booking import book_interview, bookable_systems, slots_for

BEFORE = datetime(2030, 1, 1)
NINE = datetime(2030, 1, 22, 9, 0)
TEN = datetime(2030, 1, 22, 10, 0)


@pytest.fixture
def setup(app, make_team, make_system, make_user, make_cycle, make_application):
    def _setup(multi=False, cycle_stage=Stage.INTERVIEW, internal_status=Stage.INTERVIEW):
        team = make_team("Solar" if multi else "Software", multi=multi)
        backend = make_system(team, "Backend")
        frontend = make_system(team, "Frontend")
        leader = make_user(Role.SYSTEM_LEADER, team=team, system=backend)
        applicant = make_user()
        cycle = make_cycle(cycle_stage)
        application = make_application(applicant, team, cycle, internal_status=internal_status,
                                       data={"system1": "Backend", "system2": "Frontend"})
        for system in (backend, frontend):
            db.session.add(Availability(user_id=leader.id, system_id=system.id,
                                        start=datetime(2030, 1, 22, 9), end=datetime(2030, 1, 22, 12)))
        db.session.commit()
        return {"team": team, "backend": backend, "frontend": frontend, "leader": leader,
                "applicant": applicant, "cycle": cycle, "application": application}
    return _setup


def book(ctx, system="backend", start=NINE, actor=None):
    return book_interview(actor or ctx["applicant"], ctx["application"].id, ctx[system].id, start, now=BEFORE)


def test_booking_persists_the_interview(setup):
    ctx = setup()
    interview = book(ctx)

    assert interview.id is not None
    assert interview.scheduled_at == NINE
    assert interview.duration == 30
    assert interview.status == InterviewStatus.SCHEDULED
    assert interview.interviewer_id == ctx["leader"].id
    assert interview.location == "Video Call"
    assert interview.created_by_id == ctx["applicant"].id


def test_booking_without_mail_config_is_still_booked(setup):
    ctx = setup()
    interview = book(ctx)
    note = Notification.query.filter_by(idempotency_key=f"interview-booked:{interview.id}").one()
    assert note.status == "skipped"


def test_confirmation_carries_a_calendar_invite(setup, monkeypatch):
    sent = []

    def fake_send(to_email, subject, body, ics=None):
        sent.append((to_email, subject, body, ics))
        return 202, "msg-1"

    monkeypatch.setattr('portal.jobs.notify.send_mail', fake_send)
    ctx = setup()
    interview = book(ctx)

    (to_email, subject, body, ics), = sent
    assert to_email == ctx["applicant"].email
    assert "30 minutes" in body
    assert "Video Call" in body
    assert "DTSTART:20300122T090000Z" in ics
    assert "DTEND:20300122T093000Z" in ics
    assert f"UID:interview-{interview.id}@" in ics
    note = Notification.query.filter_by(idempotency_key=f"interview-booked:{interview.id}").one()
    assert note.status == "sent"
    assert note.provider_message_id == "msg-1"


def test_failed_notification_does_not_undo_the_booking(setup, monkeypatch):
    def broken(*args, **kwargs):
        raise RuntimeError("provider down")

    monkeypatch.setattr('portal.jobs.notify.send_mail', broken)
    ctx = setup()
    interview = book(ctx)

    assert db.session.get(Interview, interview.id) is not None
    note = Notification.query.filter_by(idempotency_key=f"interview-booked:{interview.id}").one()
    assert note.status == "failed"
    assert "provider down" in note.error


def test_requires_a_signed_in_actor(setup):
    ctx = setup()
    with pytest.raises(AuthenticationError):
        book_interview(None, ctx["application"].id, ctx["backend"].id, NINE, now=BEFORE)


def test_only_the_owner_can_book(setup, make_user):
    ctx = setup()
    with pytest.raises(AuthorizationError):
        book(ctx, actor=make_user())
    # staff cannot book on an applicant's behalf either
    with pytest.raises(AuthorizationError):
        book(ctx, actor=make_user(Role.ADMIN))


def test_missing_records(setup):
    ctx = setup()
    with pytest.raises(NotFoundError):
        book_interview(ctx["applicant"], 9999, ctx["backend"].id, NINE, now=BEFORE)
    with pytest.raises(NotFoundError):
        book_interview(ctx["applicant"], ctx["application"].id, 9999, NINE, now=BEFORE)


def test_cycle_must_be_in_interview_stage(setup):
    ctx = setup(cycle_stage=Stage.APPLICATION)
    with pytest.raises(StageError):
        book(ctx)


def test_application_must_be_in_interview_stage(setup):
    ctx = setup(internal_status=Stage.APPLICATION)
    with pytest.raises(StageError):
        book(ctx)


def test_second_booking_for_same_system_is_a_duplicate(setup):
    ctx = setup(multi=True)
    book(ctx)
    with pytest.raises(DuplicateBookingError):
        book(ctx, start=TEN)


def test_second_system_needs_a_multi_system_team(setup):
    ctx = setup()
    book(ctx)
    # single-system teams only offer the first preference
    with pytest.raises(AuthorizationError):
        book(ctx, system="frontend", start=TEN)
    # even after the preference changes, one interview per application
    ctx["application"].data = {"system1": "Frontend"}
    db.session.commit()
    with pytest.raises(DuplicateBookingError):
        book(ctx, system="frontend", start=TEN)


def test_second_preference_is_not_bookable_on_single_system_team(setup):
    ctx = setup()
    with pytest.raises(AuthorizationError):
        book(ctx, system="frontend")
    assert Interview.query.count() == 0


def test_system_of_another_team_is_not_bookable(setup, make_team, make_system, make_user):
    ctx = setup()
    other_team = make_team("Hardware")
    chassis = make_system(other_team, "Chassis")
    db.session.add(Availability(user_id=make_user(Role.MEMBER, team=other_team, system=chassis).id,
                                system_id=chassis.id, start=NINE, end=TEN))
    db.session.commit()
    with pytest.raises(AuthorizationError):
        book_interview(ctx["applicant"], ctx["application"].id, chassis.id, NINE, now=BEFORE)

    # a system sharing a preferred name but owned by another team does not count either
    backend_elsewhere = make_system(other_team, "Backend")
    with pytest.raises(AuthorizationError):
        book_interview(ctx["applicant"], ctx["application"].id, backend_elsewhere.id, NINE, now=BEFORE)


def test_start_must_be_an_offered_slot(setup):
    ctx = setup()
    # outside every window
    with pytest.raises(ValidationError, match="not an offered interview slot"):
        book(ctx, start=datetime(2030, 1, 22, 3, 17))
    # inside the window but off the half-hour grid
    with pytest.raises(ValidationError, match="not an offered interview slot"):
        book(ctx, start=datetime(2030, 1, 22, 9, 15))
    # would run past the end of the 09:00-12:00 window
    with pytest.raises(ValidationError, match="not an offered interview slot"):
        book(ctx, start=datetime(2030, 1, 22, 11, 45))
    assert Interview.query.count() == 0

    last = book(ctx, start=datetime(2030, 1, 22, 11, 30))
    assert last.interviewer_id == ctx["leader"].id


def test_slot_listing_needs_the_interview_stage(setup):
    ctx = setup(cycle_stage=Stage.APPLICATION)
    with pytest.raises(StageError):
        slots_for(ctx["applicant"], ctx["backend"].id, NINE.date(), now=BEFORE)


def test_applicants_only_list_slots_of_bookable_systems(setup, make_user):
    ctx = setup()
    slots = slots_for(ctx["applicant"], ctx["backend"].id, NINE.date(), now=BEFORE)
    assert len(slots) == 6
    with pytest.raises(AuthorizationError):
        slots_for(ctx["applicant"], ctx["frontend"].id, NINE.date(), now=BEFORE)
    # an applicant without an application in the cycle sees nothing
    with pytest.raises(AuthorizationError):
        slots_for(make_user(), ctx["backend"].id, NINE.date(), now=BEFORE)
    # staff of the team can look at any of its systems
    assert len(slots_for(ctx["leader"], ctx["frontend"].id, NINE.date(), now=BEFORE)) == 6


def test_multi_system_team_books_each_system_once(setup):
    ctx = setup(multi=True)
    book(ctx)
    second = book(ctx, system="frontend", start=TEN)
    assert second.system_id == ctx["frontend"].id
    assert Interview.query.filter_by(application_id=ctx["application"].id).count() == 2


def test_taken_slot_is_a_conflict(setup, make_user, make_application):
    ctx = setup()
    other = make_user()
    other_app = make_application(other, ctx["team"], ctx["cycle"], data={"system1": "Backend"})
    book_interview(other, other_app.id, ctx["backend"].id, NINE, now=BEFORE)

    with pytest.raises(SlotConflictError):
        book(ctx)


def test_past_slots_cannot_be_booked(setup):
    ctx = setup()
    with pytest.raises(ValidationError):
        book_interview(ctx["applicant"], ctx["application"].id, ctx["backend"].id, NINE, now=NINE)


def test_concurrent_bookings_of_one_slot(setup, make_user, make_application, monkeypatch):
    ctx = setup()
    other = make_user()
    other_app = make_application(other, ctx["team"], ctx["cycle"], data={"system1": "Backend"})
    # both requests pass the re-check before either has committed
    monkeypatch.setattr('portal.services.booking.conflicts_with_any', lambda *a, **kw: False)

    outcomes = []
    for actor, application in ((ctx["applicant"], ctx["application"]), (other, other_app)):
        try:
            book_interview(actor, application.id, ctx["backend"].id, NINE, now=BEFORE)
            outcomes.append("booked")
        except SlotConflictError:
            outcomes.append("conflict")

    assert sorted(outcomes) == ["booked", "conflict"]
    assert Interview.query.filter_by(system_id=ctx["backend"].id, scheduled_at=NINE).count() == 1


def test_constraint_on_application_and_system_reports_duplicate(setup, monkeypatch):
    ctx = setup(multi=True)
    book(ctx)
    monkeypatch.setattr('portal.services.booking.interviews_for_application', lambda *a, **kw: [])
    with pytest.raises(DuplicateBookingError):
        book(ctx, start=TEN)


def test_bookable_systems_first_preference_only(setup):
    ctx = setup()
    assert [s.name for s in bookable_systems(ctx["application"])] == ["Backend"]


def test_bookable_systems_all_preferences_for_multi_system_team(setup):
    ctx = setup(multi=True)
    assert [s.name for s in bookable_systems(ctx["application"])] == ["Backend", "Frontend"]
