from flask import jsonify
from flask_login import current_user, login_required

from . import bp
from .forms import AttendeeForm, EventForm, EventUpdateForm
from ...services import events
from ...utils.forms import load, submitted


@bp.get("")
@login_required
def index():
    return jsonify([e.to_dict() for e in events.list_events(current_user)])


@bp.post("")
@login_required
def create():
    form = load(EventForm)
    event = events.create_event(current_user, form.name.data, form.start_time.data, form.end_time.data,
                                description=form.description.data, location=form.location.data)
    return jsonify(event.to_dict()), 201


@bp.get("/<int:event_id>")
@login_required
def detail(event_id):
    return jsonify(events.get_event(current_user, event_id).to_dict())


@bp.patch("/<int:event_id>")
@login_required
def update(event_id):
    form = load(EventUpdateForm)
    event = events.update_event(current_user, event_id, **submitted(form))
    return jsonify(event.to_dict())


@bp.delete("/<int:event_id>")
@login_required
def delete(event_id):
    events.delete_event(current_user, event_id)
    return "", 204


@bp.post("/<int:event_id>/join")
@login_required
def join(event_id):
    events.add_attendee(current_user, event_id, current_user.id)
    return jsonify({"ok": True})


@bp.post("/<int:event_id>/leave")
@login_required
def leave(event_id):
    events.remove_attendee(current_user, event_id, current_user.id)
    return jsonify({"ok": True})


@bp.get("/<int:event_id>/attendees")
@login_required
def attendees(event_id):
    return jsonify([u.to_dict() for u in events.list_attendees(current_user, event_id)])


@bp.post("/<int:event_id>/attendees")
@login_required
def add_attendee(event_id):
    form = load(AttendeeForm)
    events.add_attendee(current_user, event_id, form.user_id.data)
    return jsonify({"ok": True}), 201


@bp.delete("/<int:event_id>/attendees/<int:user_id>")
@login_required
def remove_attendee(event_id, user_id):
    events.remove_attendee(current_user, event_id, user_id)
    return "", 204


@bp.get("/users/<int:user_id>")
@login_required
def for_user(user_id):
    return jsonify([e.to_dict() for e in events.events_for_user(current_user, user_id)])
