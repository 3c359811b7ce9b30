"""
NotificationHub: fans lifecycle and location events out to topics.

Topics:
    mechanics.pending   every connected mechanic (new work)
    user.<id>           a requester's private topic
    request.<id>        observers of one request
    mechanic.<id>       a mechanic's private topic

Every message is ``{"type", "payload", "timestamp"}`` (epoch milliseconds).
Events are published only after the surrounding transaction commits and a
failed publish is logged, never raised: delivery is at-most-once and must
not undo or block the transition that produced it.
"""

import logging
import time
from typing import Any, Callable, Dict, Iterable, Optional

from django.db import transaction

logger = logging.getLogger(__name__)

NEW_REQUEST = "NEW_REQUEST"
STATUS_UPDATE = "STATUS_UPDATE"
REQUEST_CANCELLED = "REQUEST_CANCELLED"
LOCATION_UPDATE = "LOCATION_UPDATE"

MECHANICS_TOPIC = "mechanics.pending"


def user_topic(user_id) -> str:
    return f"user.{user_id}"


def request_topic(request_id) -> str:
    return f"request.{request_id}"


def mechanic_topic(mechanic_id) -> str:
    return f"mechanic.{mechanic_id}"


def build_message(event_type: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "type": event_type,
        "payload": payload,
        "timestamp": int(time.time() * 1000),
    }


class NotificationHub:
    """
    Args:
        push_channel: object with ``publish(topic, message)``
        mechanic_alert: optional ``callable(mechanic_id, text)`` for a secondary
            out-of-band channel (Telegram)
    """

    def __init__(self, push_channel, mechanic_alert: Optional[Callable[[int, str], Any]] = None):
        self.push_channel = push_channel
        self.mechanic_alert = mechanic_alert

    @staticmethod
    def serialize(request, detailed=False) -> Dict[str, Any]:
        from service_requests.serializers import ServiceRequestDetailSerializer, ServiceRequestSerializer
        serializer_class = ServiceRequestDetailSerializer if detailed else ServiceRequestSerializer
        return dict(serializer_class(request).data)

    # ---------------------- Delivery ----------------------

    def publish(self, topic: str, message: Dict[str, Any]) -> bool:
        try:
            return bool(self.push_channel.publish(topic, message))
        except Exception:
            logger.exception("Failed to publish %s to %s", message.get("type"), topic)
            return False

    def alert_mechanic(self, mechanic_id, text: str) -> bool:
        if self.mechanic_alert is None:
            return False
        try:
            self.mechanic_alert(mechanic_id, text)
            return True
        except Exception:
            logger.exception("Failed to queue alert for mechanic %s", mechanic_id)
            return False

    @staticmethod
    def _after_commit(callback):
        transaction.on_commit(callback)

    # ---------------------- Events ----------------------

    def notify_new_request(self, request, nearest_mechanic_ids: Iterable[int] = ()):
        """Broadcast a fresh PENDING request to all mechanics and ping the nearest ones."""
        message = build_message(NEW_REQUEST, self.serialize(request))
        nearest = list(nearest_mechanic_ids)
        text = (
            f"New {request.get_issue_type_display()} request #{request.id} near you"
            f"{': ' + request.address if request.address else ''}."
        )

        def send():
            self.publish(MECHANICS_TOPIC, message)
            for mechanic_id in nearest:
                self.alert_mechanic(mechanic_id, text)
            logger.debug("Notified mechanics about new request %s", request.id)

        self._after_commit(send)

    def notify_status_update(self, request):
        """
        Status change: requester's topic and the request's observers.

        Carries the assigned mechanic and their last position so the requester
        sees who took the job.
        """
        message = build_message(STATUS_UPDATE, self.serialize(request, detailed=True))
        requester_id = request.requester_id

        def send():
            self.publish(user_topic(requester_id), message)
            self.publish(request_topic(request.id), message)
            logger.debug("Sent status update for request %s: %s", request.id, request.status)

        self._after_commit(send)

    def notify_request_cancelled(self, request, previous_mechanic_id=None):
        """Tell the mechanic that was assigned, if any. Nobody else is notified."""
        if previous_mechanic_id is None:
            return
        message = build_message(REQUEST_CANCELLED, self.serialize(request))
        text = f"Request #{request.id} was cancelled by the requester."

        def send():
            self.publish(mechanic_topic(previous_mechanic_id), message)
            self.alert_mechanic(previous_mechanic_id, text)

        self._after_commit(send)

    def notify_location_update(self, request_id, mechanic_id, latitude, longitude):
        message = build_message(LOCATION_UPDATE, {
            "request_id": request_id,
            "mechanic_id": mechanic_id,
            "latitude": str(latitude),
            "longitude": str(longitude),
        })
        self._after_commit(lambda: self.publish(request_topic(request_id), message))
