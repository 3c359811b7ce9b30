"""Requester WebSocket consumer: status updates for the caller's own requests."""

from .base import BaseConsumer
from realtime.notifications import user_topic


class RequesterConsumer(BaseConsumer):
    allowed_roles = ("user",)

    def get_groups(self):
        return [user_topic(self.user_id)]
