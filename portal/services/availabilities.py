from flask import current_app

from ..extensions import db
from ..errors import NotFoundError, ValidationError
from ..models.availability import Availability
from ..models.system import System
from .access import can, require, require_actor
from .policy import Action


def _check_window(start, end):
    if start is None or end is None:
        raise ValidationError("Availability start and end are required.")
    if end <= start:
        raise ValidationError("Availability end must be after its start.")


def _get_system(system_id):
    system = db.session.get(System, system_id)
    if system is None:
        raise NotFoundError(f"System {system_id} not found.")
    return system


def _get_own(actor, availability_id, action):
    availability = db.session.get(Availability, availability_id)
    if availability is None:
        raise NotFoundError(f"Availability {availability_id} not found.")
    require(can(actor, "availability", action, owner_id=availability.user_id),
            "You can only change your own availability.")
    return availability


def list_mine(actor):
    require_actor(actor)
    require(can(actor, "availability", Action.READ, owner_id=actor.id),
            "Only staff members declare interview availability.")
    return (Availability.query.filter_by(user_id=actor.id)
            .order_by(Availability.start.asc()).all())


def list_for_system(actor, system_id):
    require_actor(actor)
    system = _get_system(system_id)
    require(can(actor, "availability", Action.READ, team_id=system.team_id, system_id=system.id),
            "You cannot view availability for this system.")
    return (Availability.query.filter_by(system_id=system.id)
            .order_by(Availability.start.asc()).all())


def create_availability(actor, system_id, start, end):
    require_actor(actor)
    require(can(actor, "availability", Action.CREATE, owner_id=actor.id),
            "Only staff members declare interview availability.")
    _check_window(start, end)
    system = _get_system(system_id)
    availability = Availability(user_id=actor.id, system_id=system.id, start=start, end=end)
    db.session.add(availability)
    db.session.commit()
    return availability


def replace_availabilities(actor, windows):
    """Swap every window of ``actor`` for ``windows`` in one commit."""
    require_actor(actor)
    require(can(actor, "availability", Action.CREATE, owner_id=actor.id),
            "Only staff members declare interview availability.")
    rows = []
    for w in windows:
        _check_window(w.get("start"), w.get("end"))
        system = _get_system(w.get("system_id"))
        rows.append(Availability(user_id=actor.id, system_id=system.id, start=w["start"], end=w["end"]))
    Availability.query.filter_by(user_id=actor.id).delete()
    db.session.add_all(rows)
    db.session.commit()
    current_app.logger.info("User %s replaced availability with %d windows", actor.id, len(rows))
    return rows


def update_availability(actor, availability_id, start=None, end=None):
    require_actor(actor)
    availability = _get_own(actor, availability_id, Action.UPDATE)
    new_start = start or availability.start
    new_end = end or availability.end
    _check_window(new_start, new_end)
    availability.start = new_start
    availability.end = new_end
    db.session.commit()
    return availability


def delete_availability(actor, availability_id):
    require_actor(actor)
    availability = _get_own(actor, availability_id, Action.DELETE)
    db.session.delete(availability)
    db.session.commit()
