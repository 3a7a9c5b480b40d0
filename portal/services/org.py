from ..extensions import db
from ..errors import NotFoundError, StateError, ValidationError
from ..models.system import System
from ..models.team import Team
from .access import can, can_access_system, can_access_team, can_create_system, require, require_actor
from .policy import Action


def get_team(team_id):
    team = db.session.get(Team, team_id)
    if team is None:
        raise NotFoundError(f"Team {team_id} not found.")
    return team


def get_system(system_id):
    system = db.session.get(System, system_id)
    if system is None:
        raise NotFoundError(f"System {system_id} not found.")
    return system


def list_teams():
    return Team.query.order_by(Team.name.asc()).all()


def list_systems(team_id=None):
    q = System.query
    if team_id is not None:
        q = q.filter(System.team_id == team_id)
    return q.order_by(System.name.asc()).all()


def create_team(actor, name, description=None, allows_multiple_system_interviews=False):
    require_actor(actor)
    require(can(actor, "team", Action.CREATE), "Only team management can create teams.")
    if not name:
        raise ValidationError("Team name is required.")
    team = Team(name=name, description=description,
                allows_multiple_system_interviews=bool(allows_multiple_system_interviews))
    db.session.add(team)
    db.session.commit()
    return team


def update_team(actor, team_id, name=None, description=None, allows_multiple_system_interviews=None):
    require_actor(actor)
    team = get_team(team_id)
    require(can_access_team(actor, team.id, Action.UPDATE), "You cannot edit this team.")
    if name is not None:
        if not name:
            raise ValidationError("Team name is required.")
        team.name = name
    if description is not None:
        team.description = description
    if allows_multiple_system_interviews is not None:
        team.allows_multiple_system_interviews = bool(allows_multiple_system_interviews)
    db.session.commit()
    return team


def delete_team(actor, team_id):
    require_actor(actor)
    team = get_team(team_id)
    require(can_access_team(actor, team.id, Action.DELETE), "You cannot delete this team.")
    if System.query.filter_by(team_id=team.id).count():
        raise StateError("Delete the team's systems first.")
    db.session.delete(team)
    db.session.commit()


def create_system(actor, team_id, name, description=None):
    require_actor(actor)
    team = get_team(team_id)
    require(can_create_system(actor, team.id), "You cannot add systems to this team.")
    if not name:
        raise ValidationError("System name is required.")
    system = System(team_id=team.id, name=name, description=description)
    db.session.add(system)
    db.session.commit()
    return system


def update_system(actor, system_id, name=None, description=None):
    require_actor(actor)
    system = get_system(system_id)
    require(can_access_system(actor, system, Action.UPDATE), "You cannot edit this system.")
    if name is not None:
        if not name:
            raise ValidationError("System name is required.")
        system.name = name
    if description is not None:
        system.description = description
    db.session.commit()
    return system


def delete_system(actor, system_id):
    require_actor(actor)
    system = get_system(system_id)
    require(can_access_system(actor, system, Action.DELETE), "You cannot delete this system.")
    db.session.delete(system)
    db.session.commit()
