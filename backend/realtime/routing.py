"""WebSocket URL routing for the realtime app."""

from django.urls import re_path

from .consumers.mechanic_consumer import MechanicConsumer
from .consumers.requester_consumer import RequesterConsumer
from .consumers.request_consumer import RequestConsumer

websocket_urlpatterns = [
    # URL: ws://localhost:8000/ws/mechanic/
    re_path(
        r"ws/mechanic/$",
        MechanicConsumer.as_asgi(),
        name="mechanic-ws"
    ),

    # URL: ws://localhost:8000/ws/requester/
    re_path(
        r"ws/requester/$",
        RequesterConsumer.as_asgi(),
        name="requester-ws"
    ),

    # Request observers (shared by both roles)
    # URL: ws://localhost:8000/ws/requests/
    re_path(
        r"ws/requests/$",
        RequestConsumer.as_asgi(),
        name="request-ws"
    ),
]
