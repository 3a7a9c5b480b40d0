from flask import current_app

from ..extensions import db
from ..errors import NotFoundError, ValidationError
from ..models.enums import Role
from ..models.system import System
from ..models.team import Team
from ..models.user import User
from .access import can_manage_user, can_read_people, require, require_actor


def list_people(actor):
    require_actor(actor)
    require(can_read_people(actor), "You cannot list users.")
    return User.query.order_by(User.id.asc()).all()


def update_user(actor, user_id, role=None, team_id=None, system_id=None):
    """Change a user's role and affiliations.

    A system implies its team, so assigning a system also moves the user into
    that system's team.
    """
    require_actor(actor)
    target = db.session.get(User, user_id)
    if target is None:
        raise NotFoundError(f"User {user_id} not found.")
    if role is not None:
        try:
            role = Role(role)
        except ValueError:
            raise ValidationError(f"Unknown role: {role}.")
    if team_id is not None and db.session.get(Team, team_id) is None:
        raise NotFoundError(f"Team {team_id} not found.")
    if system_id is not None:
        system = db.session.get(System, system_id)
        if system is None:
            raise NotFoundError(f"System {system_id} not found.")
        if team_id is not None and team_id != system.team_id:
            raise ValidationError("The system does not belong to the chosen team.")
        team_id = system.team_id

    affiliation_change = system_id is not None and system_id != target.system_id
    allowed = can_manage_user(actor, target, new_role=role, new_team_id=team_id)
    if allowed and affiliation_change and actor.id == target.id and Role(actor.role) != Role.ADMIN:
        allowed = False
    require(allowed, "You cannot change this user's role or affiliation.")

    if role is not None:
        target.role = role
    if team_id is not None:
        target.team_id = team_id
    if system_id is not None:
        target.system_id = system_id
    db.session.commit()
    current_app.logger.info("User %s updated user %s: role=%s team=%s system=%s",
                            actor.id, target.id, target.role.value, target.team_id, target.system_id)
    return target


def update_profile(actor, name=None, password=None):
    require_actor(actor)
    require(can_manage_user(actor, actor), "You cannot edit your profile.")
    if name is not None:
        actor.name = name
    if password:
        if len(password) < 8:
            raise ValidationError("Password must be at least 8 characters.")
        actor.set_password(password)
    db.session.commit()
    return actor
