"""Typed failures raised by the services and rendered by the app error handler."""


class PortalError(Exception):
    code = "error"
    status_code = 400
    default_message = "Request failed"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self):
        return {"error": self.code, "message": self.message}


class AuthenticationError(PortalError):
    code = "authentication_required"
    status_code = 401
    default_message = "You must be signed in to do this."


class AuthorizationError(PortalError):
    code = "forbidden"
    status_code = 403
    default_message = "You do not have permission to do this."


class NotFoundError(PortalError):
    code = "not_found"
    status_code = 404
    default_message = "Resource not found."


class StateError(PortalError):
    """Action attempted outside its legal cycle or application stage."""
    code = "invalid_state"
    status_code = 409
    default_message = "This action is not allowed at the current stage."


class StageError(StateError):
    code = "wrong_stage"


class DuplicateBookingError(PortalError):
    code = "duplicate_booking"
    status_code = 409
    default_message = "An interview is already scheduled for this application."


class SlotConflictError(PortalError):
    code = "slot_conflict"
    status_code = 409
    default_message = "This time slot is no longer available. Refresh the slot list and pick another time."


class ValidationError(PortalError):
    code = "invalid_input"
    status_code = 400
    default_message = "Invalid input."

    def __init__(self, message=None, fields=None):
        super().__init__(message)
        self.fields = fields or {}

    def to_dict(self):
        out = super().to_dict()
        if self.fields:
            out["fields"] = self.fields
        return out
