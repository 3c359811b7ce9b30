"""
Accept orchestration.

Eligibility is re-read from the mechanic's live profile at accept time, so a
pool listing that went stale (mechanic went offline meanwhile) is caught
here rather than by locking the candidate pool.
"""

import logging
from typing import List, Optional

from django.db import transaction

from services.request_management.exceptions import MechanicNotEligibleError
from .match_engine import MatchCandidate

logger = logging.getLogger(__name__)


class DispatchCoordinator:
    def __init__(self, lifecycle, match_engine, directory, store):
        self.lifecycle = lifecycle
        self.match_engine = match_engine
        self.directory = directory
        self.store = store

    def accept(self, request_id, mechanic_id):
        """
        Assign ``request_id`` to ``mechanic_id`` if nobody else got it first.

        Raises:
            MechanicProfileNotFoundError: caller has no mechanic profile
            MechanicNotEligibleError: mechanic unavailable, unverified or inactive
            RequestNotFoundError: unknown request
            RequestNotPendingError: request already claimed, or no longer pending
        """
        with transaction.atomic():
            # Row lock keeps availability from flipping between check and commit
            profile = self.directory.get_profile(mechanic_id, for_update=True)
            if not self.directory.can_accept(profile):
                logger.info("Mechanic %s not eligible to accept request %s", mechanic_id, request_id)
                raise MechanicNotEligibleError()

            request = self.store.get(request_id)
            estimated_arrival = self.match_engine.estimate_arrival(profile, request.latitude, request.longitude)

            return self.lifecycle.accept(request_id, mechanic_id, estimated_arrival=estimated_arrival)

    def candidate_pool(self, request_id, limit: Optional[int] = None) -> List[MatchCandidate]:
        """The k nearest eligible mechanics for a request's location."""
        request = self.store.get(request_id)
        return self.match_engine.nearest_mechanics(request.latitude, request.longitude, limit)
