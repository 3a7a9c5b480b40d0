"""Role hierarchy and the shared permission table.

Every module asks this table whether a role may perform an action on a
resource type. Entries give the minimum role, so a grant to one role is a
grant to every role above it. ``self`` entries additionally require the actor
to own the resource; the access evaluator enforces that part.
"""
import enum

from ..models.enums import Role

ROLE_ORDER = tuple(Role)
_ROLE_RANK = {role: i for i, role in enumerate(ROLE_ORDER)}


class Action(str, enum.Enum):
    # declaration order is the privilege order
    READ = "read"
    UPDATE = "update"
    CREATE = "create"
    DELETE = "delete"
    ANY = "any"

    @property
    def rank(self):
        return _ACTION_RANK[self]

    def satisfies(self, requested):
        return self.rank >= Action(requested).rank


_ACTION_RANK = {action: i for i, action in enumerate(Action)}

ANY = "any"
SELF = "self"

# (resource_type, action, scope) -> minimum role
POLICY = {
    ("application", Action.CREATE, SELF): Role.APPLICANT,
    ("application", Action.READ, SELF): Role.APPLICANT,
    ("application", Action.UPDATE, SELF): Role.APPLICANT,
    ("application", Action.READ, ANY): Role.MEMBER,
    ("application", Action.UPDATE, ANY): Role.SYSTEM_LEADER,
    ("application", Action.DELETE, ANY): Role.ADMIN,

    ("availability", Action.CREATE, SELF): Role.MEMBER,
    ("availability", Action.READ, SELF): Role.MEMBER,
    ("availability", Action.UPDATE, SELF): Role.MEMBER,
    ("availability", Action.DELETE, SELF): Role.MEMBER,
    ("availability", Action.READ, ANY): Role.SYSTEM_LEADER,
    ("availability", Action.DELETE, ANY): Role.ADMIN,

    ("interview", Action.CREATE, SELF): Role.APPLICANT,
    ("interview", Action.READ, SELF): Role.APPLICANT,
    ("interview", Action.READ, ANY): Role.MEMBER,
    ("interview", Action.UPDATE, ANY): Role.SYSTEM_LEADER,
    ("interview", Action.DELETE, ANY): Role.ADMIN,

    ("interview_note", Action.READ, ANY): Role.MEMBER,
    ("interview_note", Action.CREATE, ANY): Role.MEMBER,
    ("interview_note", Action.UPDATE, SELF): Role.MEMBER,
    ("interview_note", Action.DELETE, SELF): Role.MEMBER,
    ("interview_note", Action.DELETE, ANY): Role.ADMIN,

    ("cycle", Action.READ, ANY): Role.APPLICANT,
    ("cycle", Action.CREATE, ANY): Role.ADMIN,
    ("cycle", Action.UPDATE, ANY): Role.ADMIN,
    ("cycle", Action.DELETE, ANY): Role.ADMIN,

    ("team", Action.READ, ANY): Role.APPLICANT,
    ("team", Action.CREATE, ANY): Role.TEAM_MANAGEMENT,
    ("team", Action.UPDATE, ANY): Role.SYSTEM_LEADER,
    ("team", Action.DELETE, ANY): Role.TEAM_MANAGEMENT,

    ("system", Action.READ, ANY): Role.APPLICANT,
    ("system", Action.CREATE, ANY): Role.TEAM_MANAGEMENT,
    ("system", Action.UPDATE, ANY): Role.SYSTEM_LEADER,
    ("system", Action.DELETE, ANY): Role.TEAM_MANAGEMENT,

    ("user", Action.READ, SELF): Role.APPLICANT,
    ("user", Action.UPDATE, SELF): Role.APPLICANT,
    ("user", Action.READ, ANY): Role.MEMBER,
    ("user", Action.UPDATE, ANY): Role.TEAM_MANAGEMENT,

    # owners manage their own events; only admins touch other people's
    ("event", Action.CREATE, SELF): Role.APPLICANT,
    ("event", Action.READ, SELF): Role.APPLICANT,
    ("event", Action.UPDATE, SELF): Role.APPLICANT,
    ("event", Action.DELETE, SELF): Role.APPLICANT,
    ("event", Action.READ, ANY): Role.TEAM_MANAGEMENT,
    ("event", Action.UPDATE, ANY): Role.ADMIN,
    ("event", Action.DELETE, ANY): Role.ADMIN,

    # self = joining or leaving; any = adding or removing someone else
    ("event_attendee", Action.CREATE, SELF): Role.APPLICANT,
    ("event_attendee", Action.DELETE, SELF): Role.APPLICANT,
    ("event_attendee", Action.READ, ANY): Role.TEAM_MANAGEMENT,
    ("event_attendee", Action.CREATE, ANY): Role.TEAM_MANAGEMENT,
    ("event_attendee", Action.DELETE, ANY): Role.TEAM_MANAGEMENT,

    ("message", Action.READ, SELF): Role.APPLICANT,
    ("message", Action.UPDATE, SELF): Role.APPLICANT,
    ("message", Action.DELETE, SELF): Role.APPLICANT,
    ("message", Action.CREATE, ANY): Role.MEMBER,
    ("message", Action.READ, ANY): Role.ADMIN,
    ("message", Action.DELETE, ANY): Role.ADMIN,
}


def role_rank(role):
    return _ROLE_RANK[Role(role)]


def is_at_least(actor_role, required_role):
    if actor_role is None:
        return False
    return role_rank(actor_role) >= role_rank(required_role)


def is_allowed(role, resource_type, action, scope=ANY):
    minimum = POLICY.get((resource_type, Action(action), scope))
    if minimum is None:
        return False
    return is_at_least(role, minimum)
