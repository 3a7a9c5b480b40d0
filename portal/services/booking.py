"""Interview booking.

``book_interview`` re-validates everything the slot listing showed the
applicant, in a fixed order, and then inserts the Interview. The unique
constraints on ``interviews`` are the final word on conflicts: a concurrent
booking that slips past the re-check fails on insert and is reported the same
way.
"""
from flask import current_app
from sqlalchemy.exc import IntegrityError

from ..extensions import db, rq
from ..jobs.notify import notify_interview_booked
from ..errors import (AuthorizationError, DuplicateBookingError, NotFoundError, SlotConflictError,
                      StageError, ValidationError)
from ..models.application import Application
from ..models.cycle import ApplicationCycle
from ..models.enums import InterviewStatus, Role, Stage
from ..models.interview import Interview
from ..models.system import System
from ..models.team import Team
from ..utils.timeutil import floor_minute, to_naive_utc, utcnow
from .access import can_access_system, require_actor
from .availability_store import interviews_for_application, interviews_on
from .policy import Action
from .slots import SLOT, SLOT_MINUTES, available_slots, conflicts_with_any, find_slot
from .stages import active_cycle


def _team_allows_multiple(application):
    team = db.session.get(Team, application.team_id)
    return bool(team and team.allows_multiple_system_interviews)


def bookable_systems(application):
    """Systems the applicant may book: every preference for multi-system teams, otherwise system1 only."""
    names = application.preferred_system_names()
    if not names:
        return []
    systems = (System.query
               .filter(System.team_id == application.team_id, System.name.in_(names))
               .order_by(System.id.asc())
               .all())
    if _team_allows_multiple(application):
        by_name = {s.name: s for s in systems}
        return [by_name[n] for n in names if n in by_name]
    first = (application.data or {}).get("system1")
    return [s for s in systems if s.name == first][:1]


def can_book_system(application, system):
    return any(s.id == system.id for s in bookable_systems(application))


def interview_cycle(now=None):
    cycle = active_cycle(stage=Stage.INTERVIEW, now=now)
    if cycle is None:
        raise StageError("Interview booking is only available during the interview stage of an active cycle.")
    return cycle


def own_applications(actor, cycle):
    return (Application.query
            .filter_by(user_id=actor.id, application_cycle_id=cycle.id)
            .order_by(Application.id.asc())
            .all())


def slots_for(actor, system_id, day, now=None):
    """Slots of one system on ``day``, for an actor allowed to see them.

    Applicants only see systems they could book with an application in the
    current interview-stage cycle; staff need read access to the system.
    """
    require_actor(actor)
    system = db.session.get(System, system_id)
    if system is None:
        raise NotFoundError(f"System {system_id} not found.")
    cycle = interview_cycle(now=now)
    if Role(actor.role) == Role.APPLICANT:
        if not any(can_book_system(a, system) for a in own_applications(actor, cycle)):
            raise AuthorizationError("You cannot book interviews for this system.")
    elif not can_access_system(actor, system, Action.READ):
        raise AuthorizationError()
    return available_slots(system.id, day, now=now)


def book_interview(actor, application_id, system_id, start, now=None):
    require_actor(actor)

    application = db.session.get(Application, application_id)
    if application is None:
        raise NotFoundError(f"Application {application_id} not found.")
    if application.user_id != actor.id:
        raise AuthorizationError("You can only book interviews for your own application.")
    system = db.session.get(System, system_id)
    if system is None:
        raise NotFoundError(f"System {system_id} not found.")
    if not can_book_system(application, system):
        raise AuthorizationError(f"System {system.name} is not one of the systems you can book.")

    cycle = db.session.get(ApplicationCycle, application.application_cycle_id)
    if cycle is None or cycle.stage != Stage.INTERVIEW:
        raise StageError("Interviews can only be booked while the cycle is in the interview stage.")
    if application.internal_status != Stage.INTERVIEW:
        raise StageError("Your application has not reached the interview stage.")

    if interviews_for_application(application.id, system.id):
        raise DuplicateBookingError("You already have an interview scheduled for this system.")
    if not _team_allows_multiple(application) and interviews_for_application(application.id):
        raise DuplicateBookingError("You already have an interview scheduled. "
                                    "Only one interview per application is allowed for this team.")

    start = floor_minute(to_naive_utc(start))
    end = start + SLOT
    now = floor_minute(now or utcnow())
    if start <= now:
        raise ValidationError("Interviews cannot be booked in the past.")
    slot = find_slot(system.id, start, now=now)
    if slot is None:
        raise ValidationError(f"{start:%Y-%m-%d %H:%M} is not an offered interview slot for {system.name}. "
                              "Pick a start time from the slot list.")
    if conflicts_with_any(start, end, interviews_on(start)):
        current_app.logger.info("Slot %s for system %s already taken", start.isoformat(), system.id)
        raise SlotConflictError()

    interview = Interview(
        application_id=application.id,
        system_id=system.id,
        interviewer_id=slot.interviewer_id,
        scheduled_at=start,
        duration=SLOT_MINUTES,
        status=InterviewStatus.SCHEDULED,
        location=current_app.config.get("INTERVIEW_LOCATION"),
        created_by_id=actor.id,
    )
    db.session.add(interview)
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        current_app.logger.info("Booking for application %s lost the race: %s", application.id, e.orig)
        if "application" in str(e.orig):
            raise DuplicateBookingError("You already have an interview scheduled for this system.")
        raise SlotConflictError()

    current_app.logger.info("Interview %s booked for application %s at %s",
                            interview.id, application.id, start.isoformat())
    rq.enqueue(notify_interview_booked, interview.id)
    return interview
