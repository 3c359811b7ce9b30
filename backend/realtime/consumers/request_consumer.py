"""Per-request observer WebSocket consumer."""

import logging
from typing import Any, Dict

from channels.db import database_sync_to_async

from .base import BaseConsumer
from realtime.notifications import request_topic

logger = logging.getLogger(__name__)


class RequestConsumer(BaseConsumer):
    """
    Used by both requesters and mechanics to follow one request:
    STATUS_UPDATE and LOCATION_UPDATE events on request.<id>.

    Messages:
        {"type": "subscribe", "request_id": 12}
        {"type": "unsubscribe", "request_id": 12}
    """

    async def handle_message(self, msg_type: str, data: Dict[str, Any]):
        if msg_type == "subscribe":
            await self._handle_subscribe(data)
        elif msg_type == "unsubscribe":
            await self._handle_unsubscribe(data)
        else:
            await self.send_error(f"Unknown message type: {msg_type}")

    async def _handle_subscribe(self, data: Dict[str, Any]):
        request_id = data.get("request_id")
        if request_id is None:
            await self.send_error("subscribe requires request_id")
            return

        if not await self._is_participant(request_id):
            await self.send_error("You are not authorized to follow this request")
            return

        await self._join_group(request_topic(request_id))
        await self.send_success("subscribed", request_id=request_id)

    async def _handle_unsubscribe(self, data: Dict[str, Any]):
        request_id = data.get("request_id")
        if request_id is None:
            return

        await self._leave_group(request_topic(request_id))
        await self.send_success("unsubscribed", request_id=request_id)

    @database_sync_to_async
    def _is_participant(self, request_id) -> bool:
        from service_requests.models import ServiceRequest

        try:
            request_id = int(request_id)
        except (TypeError, ValueError):
            return False

        return ServiceRequest.objects.filter(id=request_id).filter(
            requester_id=self.user_id
        ).exists() or ServiceRequest.objects.filter(id=request_id, mechanic_id=self.user_id).exists()
