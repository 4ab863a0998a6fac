"""
Integration Tests

Phone container and watch clients wired over one LoopbackTransport.
"""

from __future__ import annotations

import time
from pathlib import Path

import pytest

from core.event_bus import EventType
from core.transport import LoopbackTransport
from core.wear_paths import WearDataPaths
from models.player_info import PlayerInfo, PlayerStateChange
from models.wear_messages import BrowseType, PlaybackAction, PlaybackCommand


def _wait_until(predicate, timeout: float = 5.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


@pytest.fixture
def container(tmp_path: Path, controller_factory, volume_service, seed):
    from app.container_factory import AppContainerFactory
    from services.config_service import ConfigService

    ConfigService.reset_instance()
    controller_factory.auto_complete = True
    container = AppContainerFactory.create_for_testing(
        config_path=str(tmp_path / "config.yaml"),
        db_path=str(tmp_path / "catalog.db"),
        controller_builder=controller_factory,
        volume_service=volume_service,
        transport=LoopbackTransport(),
    )
    seed(container.db)
    yield container
    container.cleanup()
    ConfigService.reset_instance()


@pytest.fixture
def watch(container, tmp_path: Path):
    from app.container_factory import AppContainerFactory

    watch = AppContainerFactory.create_watch(container.transport, config_path=str(tmp_path / "config.yaml"))
    yield watch.browse_client, watch.remote, watch.state
    watch.cleanup()


def test_browse_then_play_from_the_same_listing(container, watch, controller_factory):
    browse, remote, _ = watch

    playlists = browse.browse(BrowseType.PLAYLISTS)
    songs = browse.browse(BrowseType.PLAYLIST_SONGS, playlists[0].id)
    remote.play_from_browse(songs[2].id, BrowseType.PLAYLIST_SONGS, playlists[0].id)

    assert _wait_until(lambda: controller_factory.controllers and controller_factory.controllers[0].calls)
    container.main_thread.flush()
    assert controller_factory.controllers[0].calls == [
        ("set_media_items", ["3", "1", "4"], 2, 0),
        ("prepare",),
        ("play",),
    ]


def test_state_events_reach_the_watch(container, watch):
    _, _, state = watch

    container.event_bus.publish(
        EventType.PLAYER_STATE_CHANGED,
        PlayerStateChange("3", PlayerInfo(song_title="Red", is_playing=True)),
    )

    assert _wait_until(lambda: state.current_state() is not None)
    assert state.current_state().snapshot.song_title == "Red"


def test_cleanup_releases_controller_once(tmp_path: Path, controller_factory, volume_service):
    from app.container_factory import AppContainerFactory
    from services.config_service import ConfigService

    ConfigService.reset_instance()
    controller_factory.auto_complete = True
    container = AppContainerFactory.create_for_testing(
        config_path=str(tmp_path / "config.yaml"),
        db_path=str(tmp_path / "catalog.db"),
        controller_builder=controller_factory,
        volume_service=volume_service,
    )
    try:
        container.dispatcher.dispatch(PlaybackCommand(PlaybackAction.PLAY))
        container.main_thread.flush()

        container.cleanup()
        container.cleanup()

        assert controller_factory.controllers[0].release_count == 1
        assert container.transport.get_data_item(WearDataPaths.PLAYER_STATE) is None
    finally:
        ConfigService.reset_instance()


def test_cleanup_without_controller(tmp_path: Path, controller_factory, volume_service):
    from app.container_factory import AppContainerFactory
    from services.config_service import ConfigService

    ConfigService.reset_instance()
    try:
        container = AppContainerFactory.create_for_testing(
            config_path=str(tmp_path / "config.yaml"),
            db_path=str(tmp_path / "catalog.db"),
            controller_builder=controller_factory,
            volume_service=volume_service,
        )
        container.cleanup()

        assert controller_factory.build_calls == 0
    finally:
        ConfigService.reset_instance()


def test_watch_clients_follow_config(tmp_path: Path):
    import yaml

    from app.container_factory import AppContainerFactory
    from services.config_service import ConfigService

    music_dir = tmp_path / "music"
    music_dir.mkdir()
    config_path = tmp_path / "watch.yaml"
    config_path.write_text(yaml.safe_dump({
        "wear": {"transport": {"browse_timeout_seconds": 3.5}},
        "library": {"device_directories": [str(music_dir)]},
    }), encoding="utf-8")

    ConfigService.reset_instance()
    try:
        transport = LoopbackTransport()
        watch = AppContainerFactory.create_watch(transport, config_path=str(config_path))

        assert watch.browse_client.timeout == 3.5
        assert watch.device_scanner.scan() == []

        watch.cleanup()
        watch.cleanup()

        future = transport.client_for("phone").send_message("watch", WearDataPaths.BROWSE_RESPONSE, b"{}")
        with pytest.raises(ConnectionError):
            future.result(timeout=1)
    finally:
        ConfigService.reset_instance()
