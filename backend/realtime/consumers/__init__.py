"""Realtime consumers for WebSocket communication."""

from .base import BaseConsumer
from .mechanic_consumer import MechanicConsumer
from .requester_consumer import RequesterConsumer
from .request_consumer import RequestConsumer

__all__ = [
    "BaseConsumer",
    "MechanicConsumer",
    "RequesterConsumer",
    "RequestConsumer",
]
