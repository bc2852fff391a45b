"""Error taxonomy for the complaint tracker.

Every error carries a user-facing message and the HTTP status the API layer
renders it with. Routes never build error responses by hand; they let these
propagate to the handlers registered in ``campus_repair.main``.
"""


class CampusRepairError(Exception):
    """Base class for all expected application errors."""

    status_code: int = 500
    default_message: str = "Server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_response(self) -> dict:
        return {"success": False, "message": self.message}


class ValidationError(CampusRepairError):
    status_code = 400
    default_message = "Please provide all required fields"


class DuplicateEmail(CampusRepairError):
    # Reported as 400 to stay compatible with existing clients.
    status_code = 400
    default_message = "Email already registered"


class Unauthorized(CampusRepairError):
    status_code = 401
    default_message = "Not authorized, no token"


class InvalidToken(Unauthorized):
    default_message = "Not authorized, token failed"


class InvalidCredentials(CampusRepairError):
    status_code = 401
    default_message = "Invalid credentials"


class Forbidden(CampusRepairError):
    status_code = 403
    default_message = "Not authorized for this action"


class NotFound(CampusRepairError):
    status_code = 404
    default_message = "Complaint not found"


class OwnerNotFound(CampusRepairError):
    status_code = 404
    default_message = "Student not found"


class PhotoStorageError(CampusRepairError):
    status_code = 500
    default_message = "Unable to store uploaded photo"


class StoreUnavailable(CampusRepairError):
    status_code = 503
    default_message = "Database unavailable. Please try again later."
