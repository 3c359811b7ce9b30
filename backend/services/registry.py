"""
Composition root for the request services.

Components are built once per process and wired by reference; views,
consumers and tasks fetch them with ``get_services()``.
"""

from dataclasses import dataclass
from typing import Optional

from django.conf import settings

from mechanics.directory import MechanicDirectory
from realtime.notifications import NotificationHub
from realtime.push import ChannelLayerPushChannel
from .matching import DispatchCoordinator, MatchEngine
from .request_management import LifecycleController, RequestStore


@dataclass
class ServiceContainer:
    store: RequestStore
    directory: MechanicDirectory
    match_engine: MatchEngine
    hub: NotificationHub
    lifecycle: LifecycleController
    dispatch: DispatchCoordinator


def build_services(push_channel=None, mechanic_alert=None) -> ServiceContainer:
    from realtime.tasks import queue_mechanic_telegram

    store = RequestStore()
    directory = MechanicDirectory()
    match_engine = MatchEngine(
        directory,
        average_speed_kmh=settings.ROADSIDE_AVERAGE_SPEED_KMH,
        default_limit=settings.ROADSIDE_NEAREST_MECHANICS_LIMIT,
    )
    hub = NotificationHub(
        push_channel or ChannelLayerPushChannel(),
        mechanic_alert=mechanic_alert or queue_mechanic_telegram,
    )
    lifecycle = LifecycleController(store, directory, hub, match_engine=match_engine)
    dispatch = DispatchCoordinator(lifecycle, match_engine, directory, store)

    return ServiceContainer(
        store=store,
        directory=directory,
        match_engine=match_engine,
        hub=hub,
        lifecycle=lifecycle,
        dispatch=dispatch,
    )


# Singleton instance
_services: Optional[ServiceContainer] = None


def get_services() -> ServiceContainer:
    """Get or create the process-wide service container."""
    global _services
    if _services is None:
        _services = build_services()
    return _services


def reset_services():
    """Drop the cached container (tests swap settings or push channels)."""
    global _services
    _services = None
