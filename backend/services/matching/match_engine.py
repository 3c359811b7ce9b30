"""
Select and rank mechanic candidates for a location.

The database ranks eligible profiles closest first by the planar squared
coordinate delta and applies the limit. Ties are broken by profile id so the
order is deterministic. Reported distances and ETAs use the great-circle
distance.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from datetime import datetime, timedelta
from typing import List, Optional

from django.utils import timezone

from mechanics.models import MechanicProfile
from common.utils.geo import (
    AVERAGE_SPEED_KMH,
    estimate_arrival_minutes,
    haversine_km,
)

logger = logging.getLogger(__name__)

# Slightly under the 111.19 km a degree of latitude spans on a 6371 km sphere,
# so the latitude band in mechanics_within_radius never drops an in-range mechanic
KM_PER_DEGREE_LATITUDE = 110.5


@dataclass
class MatchCandidate:
    """A ranked mechanic with its distance and travel estimate."""
    profile: MechanicProfile
    distance_km: float
    eta_minutes: int

    @property
    def mechanic_id(self):
        return self.profile.user_id


class MatchEngine:
    def __init__(self, directory, average_speed_kmh: float = AVERAGE_SPEED_KMH, default_limit: int = 5):
        self.directory = directory
        self.average_speed_kmh = average_speed_kmh
        self.default_limit = default_limit

    def _candidate(self, profile, latitude, longitude) -> MatchCandidate:
        distance = haversine_km(latitude, longitude, profile.current_latitude, profile.current_longitude)
        return MatchCandidate(
            profile=profile,
            distance_km=distance,
            eta_minutes=estimate_arrival_minutes(distance, self.average_speed_kmh),
        )

    def nearest_mechanics(self, latitude, longitude, limit: Optional[int] = None) -> List[MatchCandidate]:
        """
        k-nearest eligible mechanics.

        Args:
            latitude: Point latitude
            longitude: Point longitude
            limit: Max candidates (defaults to the configured pool size)

        Returns:
            Up to ``limit`` candidates ordered by squared coordinate delta
        """
        limit = self.default_limit if limit is None else limit
        if limit <= 0:
            return []

        profiles = list(self.directory.find_eligible_near(latitude, longitude)[:limit])

        logger.debug("Nearest %d mechanics for (%s, %s): %s", limit, latitude, longitude, [p.id for p in profiles])
        return [self._candidate(profile, latitude, longitude) for profile in profiles]

    def mechanics_within_radius(self, latitude, longitude, radius_km: float) -> List[MatchCandidate]:
        """Eligible mechanics within ``radius_km`` great-circle distance, ranked like the k-nearest pool."""
        band = radius_km / KM_PER_DEGREE_LATITUDE
        profiles = self.directory.find_eligible_near(latitude, longitude).filter(
            current_latitude__gte=Decimal(str(float(latitude) - band)),
            current_latitude__lte=Decimal(str(float(latitude) + band)),
        )
        candidates = [self._candidate(profile, latitude, longitude) for profile in profiles]
        return [c for c in candidates if c.distance_km <= radius_km]

    def estimate_arrival(self, profile: MechanicProfile, latitude, longitude) -> Optional[datetime]:
        """Arrival timestamp for ``profile`` travelling to the point, or None without a known location."""
        if not profile.has_location:
            return None
        minutes = self._candidate(profile, latitude, longitude).eta_minutes
        return timezone.now() + timedelta(minutes=minutes)
