from functools import wraps
from flask_login import current_user
from ..errors import AuthenticationError, AuthorizationError
from ..models.enums import Role
from ..services.policy import is_at_least


def role_required(required_role):
    def decorator(view):
        @wraps(view)
        def wrapped(*args, **kwargs):
            if not current_user.is_authenticated:
                raise AuthenticationError()
            if not is_at_least(getattr(current_user, "role", None), required_role):
                raise AuthorizationError(f"This action requires the {required_role.value} role or higher.")
            return view(*args, **kwargs)
        return wrapped
    return decorator


admin_required = role_required(Role.ADMIN)
