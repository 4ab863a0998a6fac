"""
Wear Peer Client Module

The watch half of the protocol: correlated browse requests, playback and
volume commands, and reading the published player state.
"""

from __future__ import annotations

import logging
import threading
import uuid
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from app.protocols import IMessageClient
from core.codec import WearCodec
from core.errors import BrowseTimeoutError, DecodeError, TransportError
from core.transport import WearMessage
from core.wear_paths import WearDataPaths
from models.wear_messages import (
    BrowseRequest,
    BrowseResponse,
    BrowseType,
    ContextType,
    LibraryItem,
    PlaybackAction,
    PlaybackCommand,
    PlayerStateSnapshot,
    VolumeCommand,
    VolumeDirection,
)

logger = logging.getLogger(__name__)


_SUB_BROWSE_TYPES = {
    BrowseType.ALBUMS: BrowseType.ALBUM_SONGS,
    BrowseType.ARTISTS: BrowseType.ARTIST_SONGS,
    BrowseType.PLAYLISTS: BrowseType.PLAYLIST_SONGS,
}

_CONTEXT_FOR_BROWSE = {
    BrowseType.ALBUM_SONGS: ContextType.ALBUM,
    BrowseType.ARTIST_SONGS: ContextType.ARTIST,
    BrowseType.PLAYLIST_SONGS: ContextType.PLAYLIST,
    BrowseType.FAVORITES: ContextType.FAVORITES,
    BrowseType.ALL_SONGS: ContextType.ALL_SONGS,
}


def sub_browse_type(browse_type: BrowseType) -> BrowseType:
    """Browse type to request when an item of a listing is opened"""
    return _SUB_BROWSE_TYPES.get(browse_type, browse_type)


def context_type_for_browse(browse_type: BrowseType) -> Optional[ContextType]:
    """Play context matching a song listing, or None for non-song listings"""
    return _CONTEXT_FOR_BROWSE.get(browse_type)


class WearBrowseClient:
    """
    Wear Browse Client

    Usage example:
        client = WearBrowseClient(transport.client_for("watch"), "phone")
        transport.add_message_listener("watch", client.on_message_received)

        items = client.browse(BrowseType.ALBUMS)
    """

    def __init__(
        self,
        message_client: IMessageClient,
        node_id: str,
        codec: Optional[WearCodec] = None,
        timeout: float = 15.0,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
    ):
        self._message_client = message_client
        self._node_id = node_id
        self._codec = codec or WearCodec()
        self._timeout = timeout
        self._id_factory = id_factory
        self._lock = threading.Lock()
        self._pending: Dict[str, Future] = {}

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending)

    def request(self, browse_type: BrowseType, context_id: Optional[str] = None) -> Future:
        """
        Send a browse request

        Returns:
            Future resolving to the BrowseResponse with the same request id
        """
        request = BrowseRequest(self._id_factory(), browse_type, context_id)
        future: Future = Future()
        with self._lock:
            self._pending[request.request_id] = future

        try:
            self._message_client.send_message(
                self._node_id, WearDataPaths.BROWSE_REQUEST, self._codec.encode(request)
            ).result(timeout=self._timeout)
        except Exception as e:
            self._forget(request.request_id)
            future.set_exception(TransportError(f"Failed to send browse request: {e}"))
            return future

        logger.debug("Sent browse request %s: %s", request.request_id, browse_type.value)
        future.add_done_callback(lambda _: self._forget(request.request_id))
        return future

    def browse(self, browse_type: BrowseType, context_id: Optional[str] = None) -> List[LibraryItem]:
        """
        Browse and wait for the items

        Raises:
            BrowseTimeoutError: no response within the timeout
            TransportError: the request could not be sent or the phone reported an error
        """
        future = self.request(browse_type, context_id)
        try:
            response = future.result(timeout=self._timeout)
        except FutureTimeoutError:
            future.cancel()
            raise BrowseTimeoutError(f"Browse request timed out: {browse_type.value}") from None

        if response.is_error:
            raise TransportError(response.error)
        return response.items

    def on_message_received(self, message: WearMessage) -> None:
        """Transport callback for the watch node"""
        if message.path != WearDataPaths.BROWSE_RESPONSE:
            return

        try:
            response = self._codec.decode(message.data, BrowseResponse)
        except DecodeError as e:
            logger.error("Failed to parse browse response: %s", e)
            return

        with self._lock:
            future = self._pending.pop(response.request_id, None)
        if future is None or not future.set_running_or_notify_cancel():
            logger.debug("Dropping late or unknown browse response: %s", response.request_id)
            return
        future.set_result(response)

    def _forget(self, request_id: str) -> None:
        with self._lock:
            self._pending.pop(request_id, None)


class WearRemoteControl:
    """Sends playback and volume commands to the phone"""

    def __init__(
        self,
        message_client: IMessageClient,
        node_id: str,
        codec: Optional[WearCodec] = None,
        send_timeout: Optional[float] = 10.0,
    ):
        self._message_client = message_client
        self._node_id = node_id
        self._codec = codec or WearCodec()
        self._send_timeout = send_timeout

    def send_playback_command(self, command: PlaybackCommand) -> None:
        self._send(WearDataPaths.PLAYBACK_COMMAND, self._codec.encode(command))

    def send_volume_command(self, command: VolumeCommand) -> None:
        self._send(WearDataPaths.VOLUME_COMMAND, self._codec.encode(command))

    def play(self) -> None:
        self.send_playback_command(PlaybackCommand(PlaybackAction.PLAY))

    def pause(self) -> None:
        self.send_playback_command(PlaybackCommand(PlaybackAction.PAUSE))

    def toggle_play_pause(self) -> None:
        self.send_playback_command(PlaybackCommand(PlaybackAction.TOGGLE_PLAY_PAUSE))

    def next(self) -> None:
        self.send_playback_command(PlaybackCommand(PlaybackAction.NEXT))

    def previous(self) -> None:
        self.send_playback_command(PlaybackCommand(PlaybackAction.PREVIOUS))

    def volume_up(self) -> None:
        self.send_volume_command(VolumeCommand(direction=VolumeDirection.UP))

    def volume_down(self) -> None:
        self.send_volume_command(VolumeCommand(direction=VolumeDirection.DOWN))

    def set_volume_percent(self, value: int) -> None:
        self.send_volume_command(VolumeCommand(value=max(0, min(100, value))))

    def play_from_browse(self, song_id: str, browse_type: BrowseType, context_id: Optional[str] = None) -> None:
        """
        Play a song tapped in a song listing within that listing's context

        Raises:
            ValueError: browse_type is not a song listing
        """
        context_type = context_type_for_browse(browse_type)
        if context_type is None:
            raise ValueError(f"Not a song listing: {browse_type.value}")

        if context_type in (ContextType.FAVORITES, ContextType.ALL_SONGS) or context_id == "none":
            context_id = None

        self.send_playback_command(PlaybackCommand(
            action=PlaybackAction.PLAY_FROM_CONTEXT,
            song_id=song_id,
            context_type=context_type,
            context_id=context_id,
        ))

    def _send(self, path: str, data: bytes) -> None:
        try:
            self._message_client.send_message(self._node_id, path, data).result(timeout=self._send_timeout)
        except FutureTimeoutError as e:
            raise TransportError(f"Timed out sending {path}") from e
        except Exception as e:
            raise TransportError(f"Sending {path} failed: {e}") from e


@dataclass
class PeerPlayerState:
    """Player state as seen by the watch; snapshot is None when nothing plays"""

    snapshot: Optional[PlayerStateSnapshot]
    album_art: Optional[bytes] = None
    timestamp: int = 0


class WearStateRepository:
    """Reads the /player_state record published by the phone"""

    def __init__(self, data_source: Callable[[str], Optional[Dict[str, Any]]], codec: Optional[WearCodec] = None):
        self._data_source = data_source
        self._codec = codec or WearCodec()

    def current_state(self) -> Optional[PeerPlayerState]:
        """
        Decode the current record

        Returns:
            None if nothing was ever published or the record is unreadable
        """
        record = self._data_source(WearDataPaths.PLAYER_STATE)
        if record is None:
            return None
        return self.from_record(record)

    def from_record(self, record: Dict[str, Any]) -> Optional[PeerPlayerState]:
        album_art = record.get(WearDataPaths.KEY_ALBUM_ART)
        try:
            snapshot = self._codec.decode_player_state(
                record.get(WearDataPaths.KEY_STATE_JSON) or "", album_art
            )
        except DecodeError as e:
            logger.error("Failed to parse player state: %s", e)
            return None
        return PeerPlayerState(
            snapshot=snapshot,
            album_art=album_art,
            timestamp=int(record.get(WearDataPaths.KEY_TIMESTAMP) or 0),
        )
