"""
Service request lifecycle: persistence with conditional transitions and the
state machine on top of it.
"""

from .store import RequestStore, Precondition
from .lifecycle import LifecycleController
from .exceptions import (
    ServiceRequestError,
    NotFoundError,
    RequestNotFoundError,
    MechanicProfileNotFoundError,
    ForbiddenError,
    NotRequestOwnerError,
    NotAssignedMechanicError,
    RequestAccessDeniedError,
    ConflictError,
    ActiveRequestExistsError,
    RequestNotPendingError,
    InvalidTransitionError,
    RequestAlreadyTerminalError,
    TransitionConflictError,
    MechanicNotEligibleError,
    RequestValidationError,
)

__all__ = [
    "RequestStore",
    "Precondition",
    "LifecycleController",
    # Exceptions
    "ServiceRequestError",
    "NotFoundError",
    "RequestNotFoundError",
    "MechanicProfileNotFoundError",
    "ForbiddenError",
    "NotRequestOwnerError",
    "NotAssignedMechanicError",
    "RequestAccessDeniedError",
    "ConflictError",
    "ActiveRequestExistsError",
    "RequestNotPendingError",
    "InvalidTransitionError",
    "RequestAlreadyTerminalError",
    "TransitionConflictError",
    "MechanicNotEligibleError",
    "RequestValidationError",
]
