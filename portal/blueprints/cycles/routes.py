from flask import jsonify
from flask_login import login_required

from . import bp
from .forms import CycleForm, StageForm, StageWindowForm
from ...errors import NotFoundError
from ...models.cycle import ApplicationCycle
from ...services import stages
from ...utils.decorators import admin_required
from ...utils.forms import load


@bp.get("/active")
@login_required
def active():
    cycle = stages.active_cycle()
    if cycle is None:
        raise NotFoundError("There is no active application cycle.")
    return jsonify(cycle.to_dict(stages=stages.stages_of(cycle.id)))


@bp.get("")
@admin_required
def cycles_index():
    cycles = ApplicationCycle.query.order_by(ApplicationCycle.start_date.desc()).all()
    return jsonify([c.to_dict(stages=stages.stages_of(c.id)) for c in cycles])


@bp.post("")
@admin_required
def create_cycle():
    form = load(CycleForm)
    cycle = stages.create_cycle(form.name.data, form.start_date.data, form.end_date.data)
    return jsonify(cycle.to_dict(stages=stages.stages_of(cycle.id))), 201


@bp.patch("/stages/<int:stage_id>")
@admin_required
def update_stage(stage_id):
    form = load(StageWindowForm)
    stage = stages.update_stage_window(stage_id, form.start_date.data, form.end_date.data)
    return jsonify(stage.to_dict())


@bp.post("/<int:cycle_id>/stage")
@admin_required
def set_stage(cycle_id):
    form = load(StageForm)
    cycle = stages.set_cycle_stage(cycle_id, form.stage.data)
    return jsonify(cycle.to_dict())


@bp.delete("/<int:cycle_id>")
@admin_required
def delete_cycle(cycle_id):
    stages.delete_cycle(cycle_id)
    return "", 204
