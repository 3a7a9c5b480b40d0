from flask import jsonify
from flask_login import current_user, login_required

from . import bp
from .forms import AvailabilityForm, AvailabilityUpdateForm
from ...errors import ValidationError
from ...services import availabilities
from ...utils.forms import json_body, load


@bp.get("")
@login_required
def my_availabilities():
    return jsonify([a.to_dict() for a in availabilities.list_mine(current_user)])


@bp.get("/system/<int:system_id>")
@login_required
def system_availabilities(system_id):
    return jsonify([a.to_dict() for a in availabilities.list_for_system(current_user, system_id)])


@bp.post("")
@login_required
def create_availability():
    form = load(AvailabilityForm)
    availability = availabilities.create_availability(current_user, form.system_id.data,
                                                      form.start.data, form.end.data)
    return jsonify(availability.to_dict()), 201


@bp.put("")
@login_required
def replace_availabilities():
    """Replace every window of the current user with the posted list."""
    items = json_body().get("windows")
    if not isinstance(items, list):
        raise ValidationError("Expected a list of windows.", fields={"windows": ["Expected a list."]})
    windows = []
    for item in items:
        if not isinstance(item, dict):
            raise ValidationError("Each window must be an object.")
        form = load(AvailabilityForm, source=item)
        windows.append({"system_id": form.system_id.data, "start": form.start.data, "end": form.end.data})
    rows = availabilities.replace_availabilities(current_user, windows)
    return jsonify([a.to_dict() for a in rows])


@bp.patch("/<int:availability_id>")
@login_required
def update_availability(availability_id):
    form = load(AvailabilityUpdateForm)
    availability = availabilities.update_availability(current_user, availability_id,
                                                      start=form.start.data, end=form.end.data)
    return jsonify(availability.to_dict())


@bp.delete("/<int:availability_id>")
@login_required
def delete_availability(availability_id):
    availabilities.delete_availability(current_user, availability_id)
    return "", 204
