"""
Push channel backed by the Channels layer.

A topic is a channel-layer group; consumers that joined the group receive
every message through their ``hub_event`` handler.
"""

import logging
from typing import Any, Dict

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer

logger = logging.getLogger(__name__)

# Channel-layer message type; dispatched to ``BaseConsumer.hub_event``
HUB_EVENT = "hub.event"


class ChannelLayerPushChannel:
    def __init__(self, channel_layer=None):
        self._channel_layer = channel_layer

    @property
    def channel_layer(self):
        return self._channel_layer or get_channel_layer()

    def publish(self, topic: str, message: Dict[str, Any]) -> bool:
        """Fire-and-forget send to every subscriber of ``topic``."""
        channel_layer = self.channel_layer
        if channel_layer is None:
            logger.warning("No channel layer configured; dropping %s for %s", message.get("type"), topic)
            return False

        logger.debug("WS -> %s: %s", topic, message.get("type"))
        async_to_sync(channel_layer.group_send)(topic, {"type": HUB_EVENT, "event": message})
        return True
