"""Mechanic WebSocket consumer: new-work feed, personal events and location ticks."""

import logging
from typing import Any, Dict

from channels.db import database_sync_to_async

from .base import BaseConsumer
from realtime.notifications import MECHANICS_TOPIC, mechanic_topic

logger = logging.getLogger(__name__)


class MechanicConsumer(BaseConsumer):
    """
    WebSocket consumer for mechanics.

    Handles:
        - NEW_REQUEST broadcasts (mechanics.pending)
        - REQUEST_CANCELLED for requests they were assigned (mechanic.<id>)
        - location_update messages, same effect as PUT /api/mechanic/location/
    """
    allowed_roles = ("mechanic",)

    def get_groups(self):
        return [MECHANICS_TOPIC, mechanic_topic(self.user_id)]

    async def on_connect(self):
        await self.send_json({
            "type": "connection_established",
            "user_id": self.user_id,
            "role": self.role,
            "message": "Mechanic connected successfully",
        })

    async def handle_message(self, msg_type: str, data: Dict[str, Any]):
        if msg_type == "location_update":
            await self._handle_location_update(data)
        else:
            await self.send_error(f"Unknown message type: {msg_type}")

    # ---------------------- Message Handlers ----------------------

    async def _handle_location_update(self, data: Dict[str, Any]):
        from service_requests.serializers import CoordinatesSerializer

        serializer = CoordinatesSerializer(data=data)
        if not serializer.is_valid():
            await self.send_json({
                "type": "error",
                "message": "location_update requires valid latitude and longitude",
                "errors": serializer.errors,
            })
            return

        lat = serializer.validated_data["latitude"]
        lon = serializer.validated_data["longitude"]

        updated = await self._update_location_db(lat, lon)
        if not updated:
            await self.send_error("Mechanic profile not found")
            return

        await self.send_success("location_updated", latitude=str(lat), longitude=str(lon))

    # ---------------------- Database Helpers ----------------------

    @database_sync_to_async
    def _update_location_db(self, lat, lon) -> bool:
        from mechanics import services
        from mechanics.models import MechanicProfile

        profile = MechanicProfile.objects.filter(user_id=self.user_id).first()
        if profile is None:
            return False
        services.update_location(profile, lat, lon)
        return True
