"""Custom exceptions for service request management.

Each exception carries the HTTP status it maps to and a stable ``error_code``;
``common.exceptions.api_exception_handler`` renders them.
"""


class ServiceRequestError(Exception):
    """Base class for domain failures of the request lifecycle."""
    status_code = 400
    error_code = "bad_request"
    default_message = "Invalid request"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


# ===================== NotFound =====================

class NotFoundError(ServiceRequestError):
    status_code = 404
    error_code = "not_found"
    default_message = "Not found"


class RequestNotFoundError(NotFoundError):
    """Raised when a service request id is unknown."""
    default_message = "Service request not found"


class MechanicProfileNotFoundError(NotFoundError):
    """Raised when the caller has no mechanic profile."""
    default_message = "Mechanic profile not found"


# ===================== Forbidden =====================

class ForbiddenError(ServiceRequestError):
    status_code = 403
    error_code = "forbidden"
    default_message = "You are not allowed to perform this action"


class NotRequestOwnerError(ForbiddenError):
    default_message = "You can only cancel your own requests"


class NotAssignedMechanicError(ForbiddenError):
    default_message = "You are not assigned to this request"


class RequestAccessDeniedError(ForbiddenError):
    default_message = "You do not have access to this request"


# ===================== Conflict =====================

class ConflictError(ServiceRequestError):
    """State precondition violated. Deterministic: callers must re-query, not retry."""
    error_code = "conflict"
    default_message = "Request state has changed"


class ActiveRequestExistsError(ConflictError):
    default_message = "You already have an active service request"


class RequestNotPendingError(ConflictError):
    """Raised to every accept attempt that loses the race."""
    default_message = "Request is no longer pending"


class InvalidTransitionError(ConflictError):
    default_message = "Transition not allowed from the current status"


class RequestAlreadyTerminalError(ConflictError):
    default_message = "Request is already completed or cancelled"


class TransitionConflictError(ConflictError):
    """The live record no longer matches the expected precondition."""
    default_message = "Request was modified concurrently"


# ===================== BadRequest =====================

class MechanicNotEligibleError(ServiceRequestError):
    error_code = "mechanic_not_eligible"
    default_message = "Mechanic is not available to accept requests"


class RequestValidationError(ServiceRequestError):
    """Aggregated per-field validation failures, raised before any state change."""
    error_code = "validation_error"
    default_message = "Validation failed"

    def __init__(self, errors, message=None):
        self.errors = errors
        super().__init__(message)
