class CheckinError(Exception):
    """Base class for failures surfaced to the caller of a check-in operation."""

    status_code = 400
    default_message = "Request could not be completed"

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class ValidationError(CheckinError):
    default_message = "Invalid input"


class MissingFieldsError(ValidationError):
    def __init__(self, fields):
        super().__init__("Missing required fields")
        self.fields = fields


class UnauthenticatedError(CheckinError):
    status_code = 401
    default_message = "Not authenticated"


class NotFoundError(CheckinError):
    status_code = 404
    default_message = "Not found"


class EventNotFoundOrInactiveError(CheckinError):
    status_code = 404
    default_message = "Event not found or inactive"


class CapacityExceededError(CheckinError):
    status_code = 409
    default_message = "Event has reached maximum capacity"


class AlreadyRegisteredError(CheckinError):
    status_code = 409
    default_message = "Attendee has already been registered for this event"


class NotRegisteredError(CheckinError):
    status_code = 404
    default_message = "Attendee is not registered for this event"


class AlreadyAttendedError(CheckinError):
    status_code = 409
    default_message = "Attendance already recorded for this attendee"
