from flask import jsonify, request
from flask_login import current_user, login_required

from . import bp
from .forms import ApplicationFilterForm, ApplicationForm, DraftForm, ReviewForm, StageOverrideForm
from ...errors import ValidationError
from ...services import applications
from ...services.access import can_review_application
from ...utils.forms import json_body, load


def _data_payload():
    data = json_body().get("data")
    if data is not None and not isinstance(data, dict):
        raise ValidationError("Application data must be an object.", fields={"data": ["Expected an object."]})
    return data


def _out(application):
    return application.to_dict(staff=can_review_application(current_user, application))


@bp.get("")
@login_required
def applications_index():
    form = load(ApplicationFilterForm, source=request.args.to_dict())
    rows = applications.list_applications(current_user, cycle_id=form.cycle_id.data, team_id=form.team_id.data,
                                          system_id=form.system_id.data, user_id=form.user_id.data)
    return jsonify([_out(a) for a in rows])


@bp.post("")
@login_required
def create_application():
    form = load(ApplicationForm)
    application = applications.create_application(current_user, form.team_id.data, form.system_id.data,
                                                  data=_data_payload())
    return jsonify(_out(application)), 201


@bp.get("/<int:application_id>")
@login_required
def application_detail(application_id):
    return jsonify(_out(applications.get_application(current_user, application_id)))


@bp.patch("/<int:application_id>")
@login_required
def update_application(application_id):
    form = load(DraftForm)
    application = applications.update_draft(current_user, application_id, data=_data_payload(),
                                            submit=bool(form.submit.data))
    return jsonify(_out(application))


@bp.post("/<int:application_id>/review")
@login_required
def review_application(application_id):
    form = load(ReviewForm)
    application = applications.review(current_user, application_id, status=form.status.data or None,
                                      decision=form.decision.data or None)
    return jsonify(_out(application))


@bp.post("/<int:application_id>/advance")
@login_required
def advance_application(application_id):
    stage = applications.advance(current_user, application_id)
    return jsonify({"id": application_id, "internal_status": stage.value})


@bp.post("/<int:application_id>/stage")
@login_required
def override_stage(application_id):
    form = load(StageOverrideForm)
    application = applications.override_stage(current_user, application_id, form.stage.data)
    return jsonify(_out(application))


@bp.delete("/<int:application_id>")
@login_required
def delete_application(application_id):
    applications.delete_application(current_user, application_id)
    return "", 204
