"""Access evaluator.

``build_permissions`` derives a ``PermissionSet`` from an actor's role and
affiliations; the ``can_*`` helpers resolve which team/system owns a resource
and then combine the shared policy table with that set. Nothing is cached:
a permission set is rebuilt on every call so role and affiliation changes
apply to the very next request.
"""
from ..extensions import db
from ..errors import AuthorizationError, AuthenticationError
from ..models.application import Application
from ..models.enums import Role
from ..models.system import System
from .policy import Action, ANY, SELF, is_allowed, is_at_least

WILDCARD = "*"
USERS = "users"


def team_key(team_id):
    return f"team:{team_id}"


def system_key(system_id):
    return f"system:{system_id}"


def user_key(user_id):
    return f"user:{user_id}"


class PermissionSet:
    def __init__(self, grants=None):
        self.grants = dict(grants or {})

    def grant(self, resource, action):
        action = Action(action)
        current = self.grants.get(resource)
        if current is None or action.rank > current.rank:
            self.grants[resource] = action

    def permission_for_resource(self, resource, action):
        if WILDCARD in self.grants:
            return True
        granted = self.grants.get(resource)
        if granted is None and ":" in resource:
            # "system:*" style grants cover every id of that type
            granted = self.grants.get(resource.split(":", 1)[0] + ":*")
        return granted is not None and granted.satisfies(action)

    def __contains__(self, resource):
        return resource in self.grants

    def __repr__(self):
        return f"<PermissionSet {self.grants!r}>"


def _authenticated(actor):
    return actor is not None and getattr(actor, "is_authenticated", True) and getattr(actor, "id", None) is not None


def build_permissions(actor):
    perms = PermissionSet()
    if not _authenticated(actor):
        return perms
    role = Role(actor.role)
    team_id = getattr(actor, "team_id", None)
    system_id = getattr(actor, "system_id", None)

    if role == Role.ADMIN:
        perms.grant(WILDCARD, Action.ANY)
    elif role == Role.TEAM_MANAGEMENT:
        if team_id is not None:
            perms.grant(team_key(team_id), Action.ANY)
        perms.grant("system:*", Action.ANY)
    elif role == Role.SYSTEM_LEADER:
        if team_id is not None:
            perms.grant(team_key(team_id), Action.READ)
        if system_id is not None:
            perms.grant(system_key(system_id), Action.UPDATE)
    elif role == Role.MEMBER:
        if team_id is not None:
            perms.grant(team_key(team_id), Action.READ)
        if system_id is not None:
            perms.grant(system_key(system_id), Action.READ)

    if role not in (Role.APPLICANT, Role.ADMIN):
        perms.grant(USERS, Action.READ)
    perms.grant(user_key(actor.id), Action.UPDATE)
    return perms


def can(actor, resource_type, action, owner_id=None, team_id=None, system_id=None):
    """Whether ``actor`` may perform ``action`` on one resource.

    ``owner_id`` enables the policy's self entries; ``team_id``/``system_id``
    scope the policy's any entries to the actor's affiliations. An unscoped
    resource only needs the policy entry.
    """
    if not _authenticated(actor):
        return False
    action = Action(action)
    if owner_id is not None and owner_id == actor.id and is_allowed(actor.role, resource_type, action, SELF):
        return True
    if not is_allowed(actor.role, resource_type, action, ANY):
        return False
    if team_id is None and system_id is None:
        return True
    perms = build_permissions(actor)
    if team_id is not None and perms.permission_for_resource(team_key(team_id), action):
        return True
    if system_id is not None and perms.permission_for_resource(system_key(system_id), action):
        return True
    return False


def require(allowed, message=None):
    if not allowed:
        raise AuthorizationError(message)


def require_actor(actor):
    if not _authenticated(actor):
        raise AuthenticationError()
    return actor


def can_access_application(actor, application, action=Action.READ):
    return can(actor, "application", action, owner_id=application.user_id,
               team_id=application.team_id, system_id=application.system_id)


def can_access_interview(actor, interview, action=Action.READ):
    owner_id = None
    team_id = None
    if interview.application_id is not None:
        application = db.session.get(Application, interview.application_id)
        if application is not None:
            owner_id = application.user_id
            team_id = application.team_id
    if team_id is None and interview.system_id is not None:
        system = db.session.get(System, interview.system_id)
        team_id = system.team_id if system else None
    if team_id is None and interview.system_id is None:
        # an orphaned interview is visible to admins only
        return _authenticated(actor) and Role(actor.role) == Role.ADMIN
    return can(actor, "interview", action, owner_id=owner_id, team_id=team_id, system_id=interview.system_id)


def can_annotate_interview(actor, interview):
    if not _authenticated(actor) or not is_allowed(actor.role, "interview_note", Action.CREATE):
        return False
    return can_access_interview(actor, interview, Action.READ)


def can_access_team(actor, team_id, action):
    return can(actor, "team", action, team_id=team_id)


def can_access_system(actor, system, action):
    return can(actor, "system", action, team_id=system.team_id, system_id=system.id)


def can_create_system(actor, team_id):
    if not _authenticated(actor) or not is_allowed(actor.role, "system", Action.CREATE):
        return False
    return build_permissions(actor).permission_for_resource(team_key(team_id), Action.CREATE)


def can_read_people(actor):
    if not _authenticated(actor) or not is_allowed(actor.role, "user", Action.READ):
        return False
    return build_permissions(actor).permission_for_resource(USERS, Action.READ)


def can_manage_user(actor, target, new_role=None, new_team_id=None):
    """Role/affiliation changes need an actor at least as privileged as both
    the target's current role and the role being assigned. Profile edits on
    one's own record are always allowed.
    """
    if not _authenticated(actor):
        return False
    role_change = new_role is not None and Role(new_role) != Role(target.role)
    team_change = new_team_id is not None and new_team_id != target.team_id
    if actor.id == target.id and not role_change and not team_change:
        return build_permissions(actor).permission_for_resource(user_key(target.id), Action.UPDATE)
    if not is_allowed(actor.role, "user", Action.UPDATE, ANY):
        return False
    if not is_at_least(actor.role, target.role):
        return False
    if new_role is not None and not is_at_least(actor.role, new_role):
        return False
    if team_change and Role(actor.role) != Role.ADMIN and new_team_id != actor.team_id:
        return False
    return True


def can_review_application(actor, application):
    """Staff-side update (stage, status, decision); ownership does not count."""
    return can(actor, "application", Action.UPDATE, team_id=application.team_id, system_id=application.system_id)
