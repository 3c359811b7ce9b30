"""Mutations a mechanic performs on their own profile."""

import logging

from django.db import transaction
from django.utils import timezone

from mechanics.models import MechanicProfile
from services.registry import get_services

logger = logging.getLogger(__name__)


def update_location(profile: MechanicProfile, latitude, longitude, services=None):
    """
    Store the mechanic's position and stream it to the requests they are working.

    Used by:
    - HTTP ``PUT /api/mechanic/location/``
    - WebSocket ``location_update`` messages
    """
    services = services or get_services()

    with transaction.atomic():
        profile.current_latitude = latitude
        profile.current_longitude = longitude
        profile.location_updated_at = timezone.now()
        profile.save(update_fields=["current_latitude", "current_longitude", "location_updated_at", "updated_at"])

        active = services.store.find_active_by_mechanic(profile.user_id)
        for request in active:
            services.hub.notify_location_update(request.id, profile.user_id, latitude, longitude)

    logger.debug("Mechanic %s moved to (%s, %s); %d active requests notified",
                 profile.user_id, latitude, longitude, len(active))
    return profile


def set_availability(profile: MechanicProfile, is_available: bool):
    profile.is_available = is_available
    profile.save(update_fields=["is_available", "updated_at"])
    logger.info("Mechanic %s availability -> %s", profile.user_id, is_available)
    return profile


def update_profile(profile: MechanicProfile, specializations=None, is_available=None):
    """Partial update; ``None`` leaves a field untouched."""
    fields = ["updated_at"]
    if specializations is not None:
        profile.specializations = list(specializations)
        fields.append("specializations")
    if is_available is not None:
        profile.is_available = is_available
        fields.append("is_available")
    profile.save(update_fields=fields)
    return profile
