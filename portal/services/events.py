"""Recruitment events (info sessions, workshops) and who attends them.

Every check goes through the shared policy table: owners hold the ``self``
grants on their own events and attendance, the ``any`` grants belong to
team management and admins.
"""
from flask import current_app
from sqlalchemy import or_

from ..extensions import db
from ..errors import NotFoundError, StateError, ValidationError
from ..models.event import Event, event_attendees
from ..models.user import User
from .access import can, require, require_actor
from .policy import Action

EDITABLE = ("name", "description", "start_time", "end_time", "location")


def _check_times(start_time, end_time):
    if start_time is None or end_time is None:
        raise ValidationError("Event start and end times are required.")
    if end_time <= start_time:
        raise ValidationError("Event end time must be after its start time.")


def _get_event(event_id):
    event = db.session.get(Event, event_id)
    if event is None:
        raise NotFoundError(f"Event {event_id} not found.")
    return event


def _get_user(user_id):
    user = db.session.get(User, user_id)
    if user is None:
        raise NotFoundError(f"User {user_id} not found.")
    return user


def create_event(actor, name, start_time, end_time, description=None, location=None):
    require_actor(actor)
    require(can(actor, "event", Action.CREATE, owner_id=actor.id), "You cannot create events.")
    if not name:
        raise ValidationError("Event name is required.")
    _check_times(start_time, end_time)
    event = Event(name=name, description=description, start_time=start_time, end_time=end_time,
                  location=location, created_by_id=actor.id)
    db.session.add(event)
    db.session.commit()
    current_app.logger.info("User %s created event %s", actor.id, event.id)
    return event


def get_event(actor, event_id):
    require_actor(actor)
    event = _get_event(event_id)
    require(can(actor, "event", Action.READ, owner_id=event.created_by_id), "You cannot view this event.")
    return event


def list_events(actor):
    """Every event for readers of any event; otherwise the ones the actor created or joined."""
    require_actor(actor)
    q = Event.query
    if not can(actor, "event", Action.READ):
        joined = db.select(event_attendees.c.event_id).where(event_attendees.c.user_id == actor.id)
        q = q.filter(or_(Event.created_by_id == actor.id, Event.id.in_(joined)))
    return q.order_by(Event.start_time.asc()).all()


def events_for_user(actor, user_id):
    """Events ``user_id`` has joined."""
    require_actor(actor)
    require(can(actor, "event", Action.READ, owner_id=user_id), "You cannot view this user's events.")
    return (Event.query
            .join(event_attendees, event_attendees.c.event_id == Event.id)
            .filter(event_attendees.c.user_id == user_id)
            .order_by(Event.start_time.asc())
            .all())


def update_event(actor, event_id, **changes):
    require_actor(actor)
    event = _get_event(event_id)
    require(can(actor, "event", Action.UPDATE, owner_id=event.created_by_id), "You cannot edit this event.")
    unknown = set(changes) - set(EDITABLE)
    if unknown:
        raise ValidationError(f"Unknown event fields: {', '.join(sorted(unknown))}.")
    if "name" in changes and not changes["name"]:
        raise ValidationError("Event name is required.")
    _check_times(changes.get("start_time", event.start_time), changes.get("end_time", event.end_time))
    for key, value in changes.items():
        setattr(event, key, value)
    db.session.commit()
    return event


def delete_event(actor, event_id):
    require_actor(actor)
    event = _get_event(event_id)
    require(can(actor, "event", Action.DELETE, owner_id=event.created_by_id), "You cannot delete this event.")
    db.session.delete(event)
    db.session.commit()
    current_app.logger.info("User %s deleted event %s", actor.id, event_id)


def add_attendee(actor, event_id, user_id):
    """Join (``user_id`` is the actor) or add someone else to an event."""
    require_actor(actor)
    event = _get_event(event_id)
    user = _get_user(user_id)
    require(can(actor, "event_attendee", Action.CREATE, owner_id=user.id),
            "You can only add yourself to events.")
    if user in event.attendees:
        raise StateError(f"User {user.id} is already attending this event.")
    event.attendees.append(user)
    db.session.commit()
    return event


def remove_attendee(actor, event_id, user_id):
    """Leave (``user_id`` is the actor) or remove someone else from an event."""
    require_actor(actor)
    event = _get_event(event_id)
    user = _get_user(user_id)
    require(can(actor, "event_attendee", Action.DELETE, owner_id=user.id),
            "You can only remove yourself from events.")
    if user not in event.attendees:
        raise StateError(f"User {user.id} is not attending this event.")
    event.attendees.remove(user)
    db.session.commit()
    return event


def list_attendees(actor, event_id):
    require_actor(actor)
    event = _get_event(event_id)
    require(can(actor, "event_attendee", Action.READ), "You cannot view who is attending this event.")
    return list(event.attendees)
