"""Custom application exceptions."""


class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, status_code: int = 500):
        """Initialize exception with message and status code."""
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class NotFoundException(AppException):
    """Resource not found exception."""

    def __init__(self, message: str = "Resource not found"):
        """Initialize with 404 status code."""
        super().__init__(message, status_code=404)


class ConflictException(AppException):
    """Conflict exception."""

    def __init__(self, message: str = "Conflict"):
        """Initialize with 409 status code."""
        super().__init__(message, status_code=409)


class ValidationException(AppException):
    """Validation error exception."""

    def __init__(self, message: str = "Validation error"):
        """Initialize with 422 status code."""
        super().__init__(message, status_code=422)


class InvalidInputException(ValidationException):
    """Malformed identifier, missing reference or inconsistent range."""


class DuplicateParticipantException(ConflictException):
    """A patient or doctor with the same contact data is already registered."""


# ============================================================================
# Scheduling rule violations
# ============================================================================


class IneligiblePatientException(ValidationException):
    """Inactive patients cannot book appointments."""

    def __init__(self, message: str = "Inactive patient cannot book appointments"):
        super().__init__(message)


class IneligibleProviderException(ValidationException):
    """Inactive doctors cannot receive appointments."""

    def __init__(self, message: str = "Inactive doctor cannot receive appointments"):
        super().__init__(message)


class PastDateRejectedException(ValidationException):
    """Appointments cannot be created on a past date."""

    def __init__(self, message: str = "Appointment date cannot be in the past"):
        super().__init__(message)


class SlotConflictException(ConflictException):
    """The doctor already has a scheduled appointment at that time."""

    def __init__(self, message: str = "Time slot already taken for this doctor"):
        super().__init__(message)


class InvalidTransitionException(ConflictException):
    """Only scheduled appointments can be completed or cancelled."""

    def __init__(self, message: str = "Only scheduled appointments can change status"):
        super().__init__(message)


class PastAppointmentLockException(ConflictException):
    """Appointments dated before today cannot be cancelled."""

    def __init__(self, message: str = "Past appointments cannot be cancelled"):
        super().__init__(message)


class ReasonRequiredException(ValidationException):
    """A cancellation must state its reason."""

    def __init__(self, message: str = "Cancellation reason is required"):
        super().__init__(message)
