"""
Watch-side client tests

Phone and watch talk over one LoopbackTransport.
"""

from __future__ import annotations

import itertools
from concurrent.futures import ThreadPoolExecutor

import pytest

from core.codec import WearCodec
from core.errors import BrowseTimeoutError, TransportError
from core.transport import LoopbackTransport, WearMessage
from core.wear_paths import WearDataPaths
from models.player_info import PlayerInfo
from models.wear_messages import (
    BrowseResponse,
    BrowseType,
    ContextType,
    PlaybackAction,
    PlaybackCommand,
    VolumeCommand,
    VolumeDirection,
)


def _sequential_ids():
    counter = itertools.count(1)
    return lambda: f"req-{next(counter)}"


@pytest.fixture
def transport():
    return LoopbackTransport()


@pytest.fixture
def phone(transport, browse_adapter, volume_service):
    from services.command_receiver import WearCommandReceiver
    from services.volume_adapter import VolumeAdapter

    class NullDispatcher:
        def dispatch(self, command):
            pass

        def release(self):
            pass

    executor = ThreadPoolExecutor(max_workers=2)
    receiver = WearCommandReceiver(
        NullDispatcher(), VolumeAdapter(volume_service), browse_adapter,
        transport.client_for("phone"), executor,
    )
    transport.add_message_listener("phone", receiver.on_message_received)
    yield receiver
    executor.shutdown(wait=True)


@pytest.fixture
def browse_client(transport):
    from services.peer_client import WearBrowseClient

    client = WearBrowseClient(transport.client_for("watch"), "phone", timeout=5.0, id_factory=_sequential_ids())
    transport.add_message_listener("watch", client.on_message_received)
    return client


class TestWearBrowseClient:
    """Request/response correlation"""

    def test_browse_round_trip(self, phone, browse_client):
        items = browse_client.browse(BrowseType.PLAYLIST_SONGS, "p1")

        assert [item.id for item in items] == ["3", "1", "4"]
        assert browse_client.pending_count == 0

    def test_error_response_raises_transport_error(self, phone, browse_client):
        with pytest.raises(TransportError, match="nope"):
            browse_client.browse(BrowseType.PLAYLIST_SONGS, "nope")

    def test_timeout_when_phone_never_answers(self, transport):
        from services.peer_client import WearBrowseClient

        transport.add_message_listener("phone", lambda message: None)
        client = WearBrowseClient(transport.client_for("watch"), "phone", timeout=0.05)

        with pytest.raises(BrowseTimeoutError):
            client.browse(BrowseType.ROOT)
        assert client.pending_count == 0

    def test_unreachable_phone_fails_request(self, transport):
        from services.peer_client import WearBrowseClient

        client = WearBrowseClient(transport.client_for("watch"), "phone")

        with pytest.raises(TransportError):
            client.request(BrowseType.ROOT).result(timeout=1)
        assert client.pending_count == 0

    def test_responses_are_matched_by_request_id(self, transport):
        from services.peer_client import WearBrowseClient

        transport.add_message_listener("phone", lambda message: None)
        client = WearBrowseClient(transport.client_for("watch"), "phone", id_factory=_sequential_ids())
        first = client.request(BrowseType.ALBUMS)
        second = client.request(BrowseType.ARTISTS)
        codec = WearCodec()

        # Answer out of order
        client.on_message_received(WearMessage(
            WearDataPaths.BROWSE_RESPONSE, codec.encode(BrowseResponse("req-2")), "phone"))
        client.on_message_received(WearMessage(
            WearDataPaths.BROWSE_RESPONSE, codec.encode(BrowseResponse("req-1", error="x")), "phone"))

        assert second.result(timeout=1).request_id == "req-2"
        assert first.result(timeout=1).error == "x"

    def test_late_and_unknown_responses_are_dropped(self, browse_client):
        codec = WearCodec()

        browse_client.on_message_received(WearMessage(
            WearDataPaths.BROWSE_RESPONSE, codec.encode(BrowseResponse("never-sent")), "phone"))
        browse_client.on_message_received(WearMessage(WearDataPaths.BROWSE_RESPONSE, b"{", "phone"))
        browse_client.on_message_received(WearMessage(
            WearDataPaths.BROWSE_RESPONSE, b"[" * 100_000 + b"]" * 100_000, "phone"))

        assert browse_client.pending_count == 0


def test_sub_browse_type():
    from services.peer_client import sub_browse_type

    assert sub_browse_type(BrowseType.ALBUMS) == BrowseType.ALBUM_SONGS
    assert sub_browse_type(BrowseType.ARTISTS) == BrowseType.ARTIST_SONGS
    assert sub_browse_type(BrowseType.PLAYLISTS) == BrowseType.PLAYLIST_SONGS
    assert sub_browse_type(BrowseType.FAVORITES) == BrowseType.FAVORITES


class TestWearRemoteControl:
    """Outbound commands"""

    def setup_method(self):
        from services.peer_client import WearRemoteControl

        self.transport = LoopbackTransport()
        self.received = []
        self.transport.add_message_listener("phone", self.received.append)
        self.remote = WearRemoteControl(self.transport.client_for("watch"), "phone")
        self.codec = WearCodec()

    def _last_command(self):
        return self.codec.decode(self.received[-1].data, PlaybackCommand)

    @pytest.mark.parametrize("browse_type,context_id,expected_type,expected_id", [
        (BrowseType.ALBUM_SONGS, "10", ContextType.ALBUM, "10"),
        (BrowseType.ARTIST_SONGS, "2", ContextType.ARTIST, "2"),
        (BrowseType.PLAYLIST_SONGS, "p1", ContextType.PLAYLIST, "p1"),
        (BrowseType.FAVORITES, "favorites", ContextType.FAVORITES, None),
        (BrowseType.ALL_SONGS, None, ContextType.ALL_SONGS, None),
        (BrowseType.ALBUM_SONGS, "none", ContextType.ALBUM, None),
    ])
    def test_play_from_browse_maps_context(self, browse_type, context_id, expected_type, expected_id):
        self.remote.play_from_browse("7", browse_type, context_id)

        command = self._last_command()
        assert self.received[-1].path == WearDataPaths.PLAYBACK_COMMAND
        assert command.action == PlaybackAction.PLAY_FROM_CONTEXT
        assert command.song_id == "7"
        assert command.context_type == expected_type
        assert command.context_id == expected_id

    def test_play_from_non_song_listing_is_rejected(self):
        with pytest.raises(ValueError):
            self.remote.play_from_browse("7", BrowseType.ALBUMS)

    def test_volume_commands(self):
        self.remote.volume_up()
        self.remote.set_volume_percent(140)

        decoded = [self.codec.decode(m.data, VolumeCommand) for m in self.received]
        assert decoded == [VolumeCommand(direction=VolumeDirection.UP), VolumeCommand(value=100)]
        assert all(m.path == WearDataPaths.VOLUME_COMMAND for m in self.received)

    def test_transport_failure_raises(self):
        self.transport.remove_message_listener("phone", self.received.append)

        with pytest.raises(TransportError):
            self.remote.toggle_play_pause()


class TestWearStateRepository:
    """Reading the published player state"""

    def test_nothing_published(self):
        from services.peer_client import WearStateRepository

        assert WearStateRepository(LoopbackTransport().get_data_item).current_state() is None

    def test_reads_what_the_publisher_wrote(self, volume_service):
        from services.peer_client import WearStateRepository
        from services.state_publisher import WearStatePublisher

        transport = LoopbackTransport()
        with ThreadPoolExecutor(max_workers=1) as executor:
            publisher = WearStatePublisher(transport, volume_service, executor)
            publisher.publish_state("3", PlayerInfo(song_title="Red", is_playing=True)).result(timeout=5)

        state = WearStateRepository(transport.get_data_item).current_state()

        assert state.snapshot.song_id == "3"
        assert state.snapshot.is_playing is True
        assert state.album_art is None
        assert state.timestamp > 0

    def test_cleared_marker_has_no_snapshot(self):
        from services.peer_client import WearStateRepository

        state = WearStateRepository(lambda path: {"state_json": "", "timestamp": 5}).current_state()

        assert state.snapshot is None
        assert state.timestamp == 5

    def test_corrupt_state_is_ignored(self):
        from services.peer_client import WearStateRepository

        assert WearStateRepository(lambda path: {"state_json": "{oops"}).current_state() is None
