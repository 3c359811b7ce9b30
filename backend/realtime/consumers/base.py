"""Base WebSocket consumer with shared functionality for all consumers."""

import logging
from typing import Any, Dict, Iterable, Set

from channels.generic.websocket import AsyncJsonWebsocketConsumer

logger = logging.getLogger(__name__)

# Close code sent when an authenticated user has the wrong role
CLOSE_FORBIDDEN = 4003


class BaseConsumer(AsyncJsonWebsocketConsumer):
    """
    Base consumer with shared connection management and helper methods.

    Subclasses should override:
        - allowed_roles: roles accepted on this endpoint (empty = any)
        - get_groups(): topics to join on connect
        - handle_message(msg_type, data): handle incoming messages
    """
    allowed_roles: Iterable[str] = ()

    async def connect(self):
        self.user = self.scope.get("user")
        # Track joined groups for cleanup
        self.joined_groups: Set[str] = set()

        if self.user is None or self.user.is_anonymous:
            await self.close()
            return

        self.user_id = getattr(self.user, "id", None)
        self.role = getattr(self.user, "role", None)

        if self.allowed_roles and self.role not in self.allowed_roles:
            logger.info("Rejecting %s socket for user %s with role %s",
                        type(self).__name__, self.user_id, self.role)
            await self.close(code=CLOSE_FORBIDDEN)
            return

        for group in self.get_groups():
            await self._join_group(group)

        await self.accept()
        await self.on_connect()

    def get_groups(self):
        return []

    async def on_connect(self):
        """Override in subclass for custom connect logic."""
        await self.send_json({
            "type": "connection_established",
            "user_id": self.user_id,
            "role": self.role,
        })

    async def disconnect(self, close_code):
        """Leave all joined groups on disconnect."""
        try:
            for group in list(self.joined_groups):
                await self._leave_group(group)
        except Exception:
            logger.exception("Error during disconnect for user %s", getattr(self, 'user_id', 'unknown'))

    async def receive_json(self, content: Dict[str, Any], **kwargs):
        """Route incoming messages to appropriate handlers."""
        msg_type = content.get("type") if isinstance(content, dict) else None
        if not msg_type:
            await self.send_error("Message type is required")
            return

        try:
            await self.handle_message(msg_type, content)
        except Exception:
            logger.exception("Error handling message type %s", msg_type)
            await self.send_error(f"Error processing {msg_type}")

    async def handle_message(self, msg_type: str, data: Dict[str, Any]):
        """Override in subclass to handle specific message types."""
        await self.send_error(f"Unknown message type: {msg_type}")

    # ---------------------- Group Management Helpers ----------------------

    async def _join_group(self, group_name: str):
        """Join a channel group and track it."""
        await self.channel_layer.group_add(group_name, self.channel_name)
        self.joined_groups.add(group_name)

    async def _leave_group(self, group_name: str):
        """Leave a channel group and untrack it."""
        await self.channel_layer.group_discard(group_name, self.channel_name)
        self.joined_groups.discard(group_name)

    # ---------------------- Response Helpers ----------------------

    async def send_error(self, message: str):
        """Send an error message to the client."""
        await self.send_json({
            "type": "error",
            "message": message,
        })

    async def send_success(self, event_type: str, **kwargs):
        """Send a success response to the client."""
        await self.send_json({
            "type": event_type,
            **kwargs,
        })

    # ---------------------- Hub Events ----------------------

    async def hub_event(self, event):
        """Forward a NotificationHub message unchanged."""
        await self.send_json(event["event"])
