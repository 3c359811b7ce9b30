"""
Service request state machine.

    PENDING -> ACCEPTED -> IN_PROGRESS -> COMPLETED
    PENDING | ACCEPTED | IN_PROGRESS -> CANCELLED
    ACCEPTED -> PENDING (reject)

Every transition is one conditional write through ``RequestStore.try_transition``
guarded by the status and mechanic the caller expects. Notifications are queued
on the hub and only leave the process once the write has committed.
"""

import logging

from django.db import transaction
from django.utils import timezone

from service_requests.models import ServiceRequest
from .exceptions import (
    InvalidTransitionError,
    NotAssignedMechanicError,
    NotRequestOwnerError,
    RequestAlreadyTerminalError,
    RequestNotPendingError,
    TransitionConflictError,
)
from .store import Precondition

logger = logging.getLogger(__name__)


class LifecycleController:
    def __init__(self, store, directory, hub, match_engine=None):
        self.store = store
        self.directory = directory
        self.hub = hub
        self.match_engine = match_engine

    # ===================== Requester Operations =====================

    def create(self, requester_id, *, issue_type, latitude, longitude, description="", address=""):
        """
        Open a PENDING request for ``requester_id``.

        Raises:
            ActiveRequestExistsError: If the requester already has an active request
        """
        with transaction.atomic():
            request = self.store.create(
                requester_id,
                issue_type=issue_type,
                description=description,
                latitude=latitude,
                longitude=longitude,
                address=address,
            )

            nearest = []
            if self.match_engine is not None:
                nearest = [c.mechanic_id for c in self.match_engine.nearest_mechanics(latitude, longitude)]

            self.hub.notify_new_request(request, nearest)

        logger.info("Request %s created by user %s (%s)", request.id, requester_id, issue_type)
        return request

    def cancel(self, request_id, requester_id):
        """
        Cancel an active request. The assigned mechanic, if any, is released and told.

        Raises:
            NotRequestOwnerError: caller did not create the request
            RequestAlreadyTerminalError: request is COMPLETED or CANCELLED
        """
        request = self.store.get(request_id)
        # Checked before ownership: a finished request is a conflict for every caller
        if request.status in ServiceRequest.TERMINAL_STATUSES:
            raise RequestAlreadyTerminalError(f"Cannot cancel - request is already {request.status}")
        if request.requester_id != requester_id:
            raise NotRequestOwnerError()

        previous_mechanic_id = request.mechanic_id
        try:
            cancelled = self.store.try_transition(
                request_id,
                Precondition(statuses=(request.status,), mechanic_id=previous_mechanic_id),
                {
                    "status": ServiceRequest.CANCELLED,
                    "mechanic_id": None,
                    "cancelled_at": timezone.now(),
                },
            )
        except TransitionConflictError:
            current = self.store.get(request_id)
            if current.status in ServiceRequest.TERMINAL_STATUSES:
                raise RequestAlreadyTerminalError(f"Cannot cancel - request is already {current.status}")
            raise

        self.hub.notify_request_cancelled(cancelled, previous_mechanic_id)
        logger.info("Request %s cancelled by requester (mechanic was %s)", request_id, previous_mechanic_id)
        return cancelled

    # ===================== Mechanic Operations =====================

    def accept(self, request_id, mechanic_id, estimated_arrival=None):
        """
        Claim a PENDING, unassigned request for ``mechanic_id``.

        Exactly one of any number of concurrent callers succeeds; every other
        one gets RequestNotPendingError.
        """
        try:
            accepted = self.store.try_transition(
                request_id,
                Precondition(statuses=(ServiceRequest.PENDING,), mechanic_id=None),
                {
                    "status": ServiceRequest.ACCEPTED,
                    "mechanic_id": mechanic_id,
                    "accepted_at": timezone.now(),
                    "estimated_arrival": estimated_arrival,
                },
            )
        except TransitionConflictError:
            logger.info("Mechanic %s lost accept on request %s", mechanic_id, request_id)
            raise RequestNotPendingError()

        self.hub.notify_status_update(accepted)
        logger.info("Request %s accepted by mechanic %s", request_id, mechanic_id)
        return accepted

    def reject(self, request_id, mechanic_id):
        """
        Hand an ACCEPTED request back to the pool.

        A no-op returning the unchanged request when ``mechanic_id`` is not the
        assigned mechanic.

        Only ACCEPTED can be rejected, not every assigned status. IN_PROGRESS
        raises InvalidTransitionError: reopening started work would leave a
        PENDING request with ``started_at`` set. A cancel still releases the mechanic.
        """
        request = self.store.get(request_id)
        if request.mechanic_id != mechanic_id:
            logger.info("Ignoring reject of request %s by unassigned mechanic %s", request_id, mechanic_id)
            return request
        if request.status != ServiceRequest.ACCEPTED:
            raise InvalidTransitionError("Can only reject an accepted request")

        try:
            rejected = self.store.try_transition(
                request_id,
                Precondition(statuses=(ServiceRequest.ACCEPTED,), mechanic_id=mechanic_id),
                {
                    "status": ServiceRequest.PENDING,
                    "mechanic_id": None,
                    "accepted_at": None,
                    "estimated_arrival": None,
                },
            )
        except TransitionConflictError:
            current = self.store.get(request_id)
            if current.mechanic_id != mechanic_id:
                return current
            raise InvalidTransitionError("Can only reject an accepted request")

        self.hub.notify_status_update(rejected)
        logger.info("Request %s rejected by mechanic %s, back to pending", request_id, mechanic_id)
        return rejected

    def start(self, request_id, mechanic_id):
        """ACCEPTED -> IN_PROGRESS by the assigned mechanic."""
        started = self._advance(
            request_id, mechanic_id,
            from_status=ServiceRequest.ACCEPTED,
            changes={"status": ServiceRequest.IN_PROGRESS, "started_at": timezone.now()},
            error_message="Can only start an accepted request",
        )
        self.hub.notify_status_update(started)
        logger.info("Request %s started by mechanic %s", request_id, mechanic_id)
        return started

    def complete(self, request_id, mechanic_id):
        """IN_PROGRESS -> COMPLETED by the assigned mechanic; credits the job to their profile."""
        with transaction.atomic():
            completed = self._advance(
                request_id, mechanic_id,
                from_status=ServiceRequest.IN_PROGRESS,
                changes={"status": ServiceRequest.COMPLETED, "completed_at": timezone.now()},
                error_message="Can only complete an in-progress request",
            )
            self.directory.increment_total_jobs(mechanic_id)
            self.hub.notify_status_update(completed)

        logger.info("Request %s completed by mechanic %s", request_id, mechanic_id)
        return completed

    def _advance(self, request_id, mechanic_id, from_status, changes, error_message):
        request = self.store.get(request_id)
        if request.mechanic_id != mechanic_id:
            raise NotAssignedMechanicError()
        if request.status != from_status:
            raise InvalidTransitionError(error_message)

        try:
            return self.store.try_transition(
                request_id,
                Precondition(statuses=(from_status,), mechanic_id=mechanic_id),
                changes,
            )
        except TransitionConflictError:
            current = self.store.get(request_id)
            if current.mechanic_id != mechanic_id:
                raise NotAssignedMechanicError()
            raise InvalidTransitionError(error_message)
