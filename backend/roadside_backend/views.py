import redis
from django.conf import settings
from django.db import connection
from django.utils import timezone
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework import status
from channels.layers import get_channel_layer

from realtime.tasks import notify_mechanic_telegram_task
from .celery import app as celery_app


def _database():
    with connection.cursor() as cursor:
        cursor.execute("SELECT 1")


def _redis():
    redis.Redis(host=settings.REDIS_HOST, port=settings.REDIS_PORT, db=0, socket_timeout=3).ping()


def _channel_layer():
    if get_channel_layer() is None:
        raise RuntimeError("no channel layer configured")


def _celery():
    if notify_mechanic_telegram_task.name not in celery_app.tasks:
        raise RuntimeError("telegram task not registered")


HEALTH_CHECKS = (
    ("database", _database),
    ("redis", _redis),
    ("channels", _channel_layer),
    ("celery", _celery),
)


@api_view(["GET"])
@permission_classes([AllowAny])
def health_check(request):
    """Probe each backing service; 503 if any of them is down."""
    services = {}
    for name, check in HEALTH_CHECKS:
        try:
            check()
            services[name] = "healthy"
        except Exception as e:
            services[name] = f"unhealthy: {e}"

    healthy = all(state == "healthy" for state in services.values())
    return Response(
        {
            "status": "healthy" if healthy else "unhealthy",
            "timestamp": timezone.now().isoformat(),
            "services": services,
        },
        status=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
    )
