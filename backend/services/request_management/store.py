"""
Persistence boundary for service requests.

``RequestStore.try_transition`` is the only write path for an existing
request. It compiles the expected precondition into the WHERE clause of a
single UPDATE, so concurrent writers on the same row are serialized by the
database and at most one of them sees its precondition hold.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from django.db import IntegrityError, transaction
from django.db.models import F, Q
from django.utils import timezone

from service_requests.models import ServiceRequest
from .exceptions import (
    ActiveRequestExistsError,
    RequestNotFoundError,
    TransitionConflictError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Precondition:
    """
    Expected live state of a request.

    ``mechanic_id=None`` means "no mechanic assigned".
    """
    statuses: Tuple[str, ...]
    mechanic_id: Optional[int]

    def as_q(self) -> Q:
        condition = Q(status__in=self.statuses)
        if self.mechanic_id is None:
            condition &= Q(mechanic__isnull=True)
        else:
            condition &= Q(mechanic_id=self.mechanic_id)
        return condition


class RequestStore:
    """Owns ServiceRequest rows: lookups, creation and conditional transitions."""

    model = ServiceRequest

    # ===================== Reads =====================

    def get(self, request_id) -> ServiceRequest:
        try:
            return self.model.objects.get(pk=request_id)
        except self.model.DoesNotExist:
            raise RequestNotFoundError(f"Service request {request_id} not found")

    def find_active_by_requester(self, requester_id) -> Optional[ServiceRequest]:
        return self.model.objects.filter(
            requester_id=requester_id,
            status__in=ServiceRequest.ACTIVE_STATUSES,
        ).first()

    def find_active_by_mechanic(self, mechanic_id) -> List[ServiceRequest]:
        return list(self.model.objects.filter(
            mechanic_id=mechanic_id,
            status__in=ServiceRequest.WORKING_STATUSES,
        ))

    def find_pending_unassigned(self):
        """Unclaimed requests, oldest first."""
        return self.model.objects.filter(
            status=ServiceRequest.PENDING,
            mechanic__isnull=True,
        ).order_by('created_at', 'id')

    def find_by_requester(self, requester_id):
        return self.model.objects.filter(requester_id=requester_id).order_by('-created_at', '-id')

    def find_by_mechanic(self, mechanic_id):
        return self.model.objects.filter(mechanic_id=mechanic_id).order_by('-created_at', '-id')

    # ===================== Writes =====================

    def create(self, requester_id, **fields) -> ServiceRequest:
        """
        Insert a PENDING request.

        Raises:
            ActiveRequestExistsError: the requester already has an active
                request, whether seen up front or caught by the partial
                unique index when two creates race.
        """
        if self.find_active_by_requester(requester_id) is not None:
            raise ActiveRequestExistsError()

        try:
            with transaction.atomic():
                return self.model.objects.create(
                    requester_id=requester_id,
                    status=ServiceRequest.PENDING,
                    mechanic=None,
                    **fields,
                )
        except IntegrityError:
            logger.info("Concurrent create rejected for requester %s", requester_id)
            raise ActiveRequestExistsError()

    def try_transition(self, request_id, precondition: Precondition, changes: Dict[str, Any]) -> ServiceRequest:
        """
        Apply ``changes`` only if the live row still satisfies ``precondition``.

        Returns the committed row. Raises RequestNotFoundError when the id is
        unknown and TransitionConflictError when another writer got there
        first; in both cases nothing was written.
        """
        updated = self.model.objects.filter(pk=request_id).filter(precondition.as_q()).update(
            version=F('version') + 1,
            updated_at=timezone.now(),
            **changes,
        )

        if updated == 0:
            if not self.model.objects.filter(pk=request_id).exists():
                raise RequestNotFoundError(f"Service request {request_id} not found")
            logger.info("Transition on request %s lost: precondition %s no longer holds", request_id, precondition)
            raise TransitionConflictError()

        return self.get(request_id)
