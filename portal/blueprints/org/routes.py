from flask import jsonify, request
from flask_login import current_user, login_required

from . import bp
from .forms import SystemForm, SystemUpdateForm, TeamForm, TeamUpdateForm
from ...services import org
from ...utils.forms import load, submitted


@bp.get("/teams")
@login_required
def teams_index():
    return jsonify([t.to_dict() for t in org.list_teams()])


@bp.get("/teams/<int:team_id>")
@login_required
def team_detail(team_id):
    team = org.get_team(team_id)
    out = team.to_dict()
    out["systems"] = [s.to_dict() for s in org.list_systems(team.id)]
    return jsonify(out)


@bp.post("/teams")
@login_required
def create_team():
    form = load(TeamForm)
    team = org.create_team(current_user, form.name.data, form.description.data,
                           form.allows_multiple_system_interviews.data)
    return jsonify(team.to_dict()), 201


@bp.patch("/teams/<int:team_id>")
@login_required
def update_team(team_id):
    form = load(TeamUpdateForm)
    team = org.update_team(current_user, team_id, **submitted(form))
    return jsonify(team.to_dict())


@bp.delete("/teams/<int:team_id>")
@login_required
def delete_team(team_id):
    org.delete_team(current_user, team_id)
    return "", 204


@bp.get("/systems")
@login_required
def systems_index():
    team_id = request.args.get("team_id", type=int)
    return jsonify([s.to_dict() for s in org.list_systems(team_id)])


@bp.get("/systems/<int:system_id>")
@login_required
def system_detail(system_id):
    return jsonify(org.get_system(system_id).to_dict())


@bp.post("/systems")
@login_required
def create_system():
    form = load(SystemForm)
    system = org.create_system(current_user, form.team_id.data, form.name.data, form.description.data)
    return jsonify(system.to_dict()), 201


@bp.patch("/systems/<int:system_id>")
@login_required
def update_system(system_id):
    form = load(SystemUpdateForm)
    system = org.update_system(current_user, system_id, **submitted(form))
    return jsonify(system.to_dict())


@bp.delete("/systems/<int:system_id>")
@login_required
def delete_system(system_id):
    org.delete_system(current_user, system_id)
    return "", 204
