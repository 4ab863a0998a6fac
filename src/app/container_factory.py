# -*- coding: utf-8 -*-
"""
Container Factory Module

Responsible for creating and assembling all wear bridge dependencies.

This is the **only** instance creation point (Composition Root) for the bridge.
All service instance creation should be done here, not within individual services.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from app.container import AppContainer, WatchContainer
    from app.protocols import ControllerBuilder, IVolumeService
    from core.transport import LoopbackTransport

logger = logging.getLogger(__name__)


class AppContainerFactory:
    """Application Container Factory

    Usage Example:
        # In the host application (Qt event loop running)
        container = AppContainerFactory.create(
            controller_builder=build_controller,
            volume_service=system_volume,
            transport=transport,
        )

        # In tests (no Qt)
        container = AppContainerFactory.create_for_testing(
            config_path=str(tmp_path / "config.yaml"),
            db_path=str(tmp_path / "catalog.db"),
            controller_builder=fake_builder,
            volume_service=fake_volume,
        )
    """

    @staticmethod
    def create(
        controller_builder: "ControllerBuilder",
        volume_service: "IVolumeService",
        transport: Optional["LoopbackTransport"] = None,
        config_path: str = "config/default_config.yaml",
        use_qt_dispatcher: bool = True,
        node_id: str = "phone",
        db_path: Optional[str] = None,
    ) -> "AppContainer":
        """Create Application Container

        Args:
            controller_builder: Builds the remote media controller asynchronously
            volume_service: System media volume
            transport: Message/data transport (defaults to a LoopbackTransport)
            config_path: Configuration file path
            use_qt_dispatcher: Whether controller work runs on the Qt main thread
                              - True: QtMainThreadExecutor (needs a QApplication)
                              - False: pure Python MainThreadExecutor
            node_id: Node id this side listens on
            db_path: Catalog database path (overrides library.database_path)

        Returns:
            A configured AppContainer instance
        """
        from core.logging_setup import setup_logging
        from services.config_service import ConfigService

        config = ConfigService(config_path)
        setup_logging(config.get("logging.level", "INFO"))

        if use_qt_dispatcher:
            from ui.qt_main_thread import QtMainThreadExecutor
            main_thread = QtMainThreadExecutor()
            logger.debug("Using QtMainThreadExecutor")
        else:
            from core.main_thread import MainThreadExecutor
            main_thread = MainThreadExecutor()
            logger.debug("Using pure MainThreadExecutor (Non-Qt mode)")

        return AppContainerFactory._assemble(
            config=config,
            main_thread=main_thread,
            controller_builder=controller_builder,
            volume_service=volume_service,
            transport=transport,
            node_id=node_id,
            db_path=db_path or config.get("library.database_path") or None,
        )

    @staticmethod
    def create_for_testing(
        config_path: str,
        db_path: str,
        controller_builder: "ControllerBuilder",
        volume_service: "IVolumeService",
        transport: Optional["LoopbackTransport"] = None,
        node_id: str = "phone",
    ) -> "AppContainer":
        """Create a container for testing

        Uses a pure Python main thread executor, independent of Qt. db_path
        must be a file: connections are per thread, so ":memory:" would give
        every thread its own empty catalog.
        """
        from core.main_thread import MainThreadExecutor
        from services.config_service import ConfigService

        return AppContainerFactory._assemble(
            config=ConfigService(config_path),
            main_thread=MainThreadExecutor(),
            controller_builder=controller_builder,
            volume_service=volume_service,
            transport=transport,
            node_id=node_id,
            db_path=db_path,
        )

    @staticmethod
    def create_watch(
        transport: "LoopbackTransport",
        config_path: str = "config/default_config.yaml",
        node_id: str = "watch",
        phone_node_id: str = "phone",
    ) -> "WatchContainer":
        """Create the watch-side clients

        The browse client is registered for browse responses on node_id;
        commands and browse requests go to phone_node_id.
        """
        from app.container import WatchContainer
        from core.codec import WearCodec
        from services.config_service import ConfigService
        from services.device_library import DeviceMusicScanner
        from services.peer_client import WearBrowseClient, WearRemoteControl, WearStateRepository

        config = ConfigService(config_path)
        codec = WearCodec()
        message_client = transport.client_for(node_id)

        browse_client = WearBrowseClient(
            message_client,
            phone_node_id,
            codec=codec,
            timeout=float(config.get("wear.transport.browse_timeout_seconds", 15.0)),
        )
        transport.add_message_listener(node_id, browse_client.on_message_received)

        watch = WatchContainer(
            config=config,
            transport=transport,
            browse_client=browse_client,
            remote=WearRemoteControl(
                message_client,
                phone_node_id,
                codec=codec,
                send_timeout=float(config.get("wear.transport.send_timeout_seconds", 10.0)),
            ),
            state=WearStateRepository(transport.get_data_item, codec=codec),
            device_scanner=DeviceMusicScanner(config.get("library.device_directories") or []),
            node_id=node_id,
        )
        logger.info("Watch clients created for node %s", node_id)
        return watch

    @staticmethod
    def _assemble(config, main_thread, controller_builder, volume_service, transport, node_id, db_path):
        from app.container import AppContainer
        from core.codec import WearCodec
        from core.database import DatabaseManager
        from core.event_bus import EventBus
        from core.transport import LoopbackTransport
        from services.album_art import AlbumArtEncoder
        from services.browse_catalog import BrowseCatalogAdapter
        from services.catalog_service import SqliteMusicCatalog, SqlitePlaylistStore
        from services.command_receiver import WearCommandReceiver
        from services.playback_dispatcher import MediaControllerConnector, PlaybackCommandDispatcher
        from services.state_publisher import WearStatePublisher
        from services.volume_adapter import VolumeAdapter

        logger.info("Creating wear bridge container...")

        # === 1. Infrastructure Layer ===
        db = DatabaseManager(db_path)
        event_bus = EventBus()
        transport = transport or LoopbackTransport()
        codec = WearCodec()
        send_timeout = float(config.get("wear.transport.send_timeout_seconds", 10.0))
        max_workers = int(config.get("wear.workers.max_workers", 16))

        # === 2. Catalog ===
        browse_adapter = BrowseCatalogAdapter(
            SqliteMusicCatalog(db),
            SqlitePlaylistStore(db),
            max_songs=int(config.get("wear.browse.max_songs", 500)),
            max_albums=int(config.get("wear.browse.max_albums", 200)),
            max_artists=int(config.get("wear.browse.max_artists", 200)),
        )

        # === 3. Command side ===
        connector = MediaControllerConnector(controller_builder, main_thread)
        dispatcher = PlaybackCommandDispatcher(connector, browse_adapter)
        volume_adapter = VolumeAdapter(volume_service)
        receiver = WearCommandReceiver(
            dispatcher,
            volume_adapter,
            browse_adapter,
            transport.client_for(node_id),
            ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="WearReceiver"),
            codec=codec,
            send_timeout=send_timeout,
            command_executor=ThreadPoolExecutor(max_workers=1, thread_name_prefix="WearCommands"),
        )
        transport.add_message_listener(node_id, receiver.on_message_received)

        # === 4. State side ===
        publisher_executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="WearPublisher")
        art_encoder = AlbumArtEncoder(
            max_dimension=int(config.get("wear.album_art.max_dimension", 720)),
            max_bytes=int(config.get("wear.album_art.max_bytes", 900_000)),
            quality=int(config.get("wear.album_art.jpeg_quality", 95)),
        )
        state_publisher = WearStatePublisher(
            transport,
            volume_service,
            publisher_executor,
            art_encoder=art_encoder,
            codec=codec,
            send_timeout=send_timeout,
        )
        state_publisher.attach(event_bus)

        container = AppContainer(
            config=config,
            event_bus=event_bus,
            db=db,
            main_thread=main_thread,
            transport=transport,
            browse_adapter=browse_adapter,
            dispatcher=dispatcher,
            volume_adapter=volume_adapter,
            state_publisher=state_publisher,
            receiver=receiver,
            node_id=node_id,
            _executors=[publisher_executor],
        )

        logger.info("Wear bridge container creation complete")
        return container
