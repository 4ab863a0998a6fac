# -*- coding: utf-8 -*-
"""
Application Container Module

Defines the dependency container for the wear bridge, holding all service
instances centrally.

Design Principles:
- The host application holds the complete AppContainer
- Services never look each other up through the container
- cleanup() is the single shutdown path
"""

from __future__ import annotations

import logging
from concurrent.futures import Executor
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, List

if TYPE_CHECKING:
    from app.protocols import IConfigService, IEventBus, IMainThreadExecutor
    from core.database import DatabaseManager
    from services.browse_catalog import BrowseCatalogAdapter
    from services.command_receiver import WearCommandReceiver
    from services.device_library import DeviceMusicScanner
    from services.playback_dispatcher import PlaybackCommandDispatcher
    from services.peer_client import WearBrowseClient, WearRemoteControl, WearStateRepository
    from services.state_publisher import WearStatePublisher
    from services.volume_adapter import VolumeAdapter

logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    """Application Dependency Container

    Holds all service instances centrally, serving as the composition root
    for dependency injection.

    Usage Example:
        container = AppContainerFactory.create(
            controller_builder=build_controller,
            volume_service=system_volume,
        )
        ...
        container.cleanup()
    """

    # === Public Attributes ===
    config: "IConfigService"
    event_bus: "IEventBus"
    db: "DatabaseManager"
    main_thread: "IMainThreadExecutor"
    transport: Any
    browse_adapter: "BrowseCatalogAdapter"
    dispatcher: "PlaybackCommandDispatcher"
    volume_adapter: "VolumeAdapter"
    state_publisher: "WearStatePublisher"
    receiver: "WearCommandReceiver"
    node_id: str = "phone"

    # === Internal ===
    _executors: List[Executor] = field(default_factory=list, repr=False)
    _cleaned_up: bool = field(default=False, repr=False)

    def cleanup(self) -> None:
        """Clean up all resources

        Should be called when the application exits. Safe to call twice.
        """
        if self._cleaned_up:
            return
        self._cleaned_up = True
        logger.info("Shutting down wear bridge...")

        # Stop inbound traffic first
        self.transport.remove_message_listener(self.node_id, self.receiver.on_message_received)
        self.state_publisher.detach(self.event_bus)

        # Cancels queued handlers and releases the controller
        self.receiver.shutdown()

        for executor in self._executors:
            executor.shutdown(wait=False, cancel_futures=True)

        # Let the posted release run before the main thread goes away
        if not self.main_thread.flush():
            logger.warning("Main thread did not drain before shutdown")
        self.main_thread.shutdown()

        # Shutdown event bus
        self.event_bus.shutdown()

        # Close database
        self.db.close()


@dataclass
class WatchContainer:
    """Watch-side clients sharing one transport

    Usage Example:
        watch = AppContainerFactory.create_watch(transport)
        items = watch.browse_client.browse(BrowseType.ALBUMS)
        watch.remote.play()
        watch.cleanup()
    """

    config: "IConfigService"
    transport: Any
    browse_client: "WearBrowseClient"
    remote: "WearRemoteControl"
    state: "WearStateRepository"
    device_scanner: "DeviceMusicScanner"
    node_id: str = "watch"

    _cleaned_up: bool = field(default=False, repr=False)

    def cleanup(self) -> None:
        """Stop receiving browse responses. Safe to call twice."""
        if self._cleaned_up:
            return
        self._cleaned_up = True
        self.transport.remove_message_listener(self.node_id, self.browse_client.on_message_received)
