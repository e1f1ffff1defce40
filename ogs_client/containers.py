# ogs_client/containers.py
"""
Defines the Dependency Injection (DI) container for the library.

This module uses the `punq` library to wire the services around the two
collaborators the application supplies: a `Transport` for REST calls and an
`EventStream` for realtime events.
"""

from typing import Optional

import punq

from ogs_client.client import OgsClient
from ogs_client.config.settings import Settings, settings as default_settings
from ogs_client.services.realtime_service import RealtimeService
from ogs_client.services.rest_service import RestService
from ogs_client.types import EventStream, Transport


def get_container(
    transport: Transport, event_stream: EventStream, settings: Optional[Settings] = None
) -> punq.Container:
    """
    Initializes and returns a DI container for one authenticated connection.

    Args:
        transport: The request/response collaborator.
        event_stream: The connected publish/subscribe collaborator.
        settings: Library settings; the environment-loaded singleton is used when omitted.
    """
    container = punq.Container()
    resolved_settings = settings or default_settings

    # Register instances that are created outside the container's control.
    container.register(Settings, instance=resolved_settings)
    container.register(Transport, instance=transport)
    container.register(EventStream, instance=event_stream)

    # A single RestService per container, so its time-control cache is shared.
    container.register(
        RestService, factory=lambda: RestService(transport, resolved_settings), scope=punq.Scope.singleton
    )
    container.register(
        RealtimeService, factory=lambda: RealtimeService(event_stream), scope=punq.Scope.singleton
    )
    # `punq` injects OgsClient's dependencies from its type hints.
    container.register(OgsClient, scope=punq.Scope.singleton)

    return container


def create_client(
    transport: Transport, event_stream: EventStream, settings: Optional[Settings] = None
) -> OgsClient:
    """Convenience wrapper resolving an `OgsClient` from a fresh container."""
    return get_container(transport, event_stream, settings).resolve(OgsClient)
