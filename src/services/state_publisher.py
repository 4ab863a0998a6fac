"""
Wear State Publisher Module

Publishes the current player state to the watch as one replace-semantics
data item at /player_state, with the album art as a separate attachment.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Executor, Future
from typing import Callable, List, Optional

from app.protocols import IDataClient, IEventBus, IVolumeService
from core.codec import WearCodec
from core.event_bus import EventType
from core.transport import DataItemRequest
from core.wear_paths import WearDataPaths
from models.player_info import PlayerInfo, PlayerStateChange
from models.wear_messages import PlayerStateSnapshot
from services.album_art import AlbumArtEncoder

logger = logging.getLogger(__name__)


class WearStatePublisher:
    """
    Wear State Publisher

    No batching or debouncing happens here; callers rate-limit upstream.

    Usage example:
        publisher = WearStatePublisher(data_client, volume_service, executor)
        publisher.attach(event_bus)  # publish on PLAYER_STATE_CHANGED, clear on PLAYBACK_STOPPED

        publisher.publish_state("42", player_info)
        publisher.clear_state()
    """

    def __init__(
        self,
        data_client: IDataClient,
        volume_service: IVolumeService,
        executor: Executor,
        art_encoder: Optional[AlbumArtEncoder] = None,
        codec: Optional[WearCodec] = None,
        send_timeout: Optional[float] = 10.0,
        clock: Callable[[], float] = time.time,
    ):
        self._data_client = data_client
        self._volume = volume_service
        self._executor = executor
        self._art_encoder = art_encoder or AlbumArtEncoder()
        self._codec = codec or WearCodec()
        self._send_timeout = send_timeout
        self._clock = clock
        self._timestamp_lock = threading.Lock()
        self._last_timestamp = 0
        self._subscriptions: List[str] = []

    def attach(self, event_bus: IEventBus) -> None:
        """Follow playback state events"""
        self._subscriptions.append(
            event_bus.subscribe(EventType.PLAYER_STATE_CHANGED, self._on_state_changed)
        )
        self._subscriptions.append(
            event_bus.subscribe(EventType.PLAYBACK_STOPPED, lambda _: self.clear_state())
        )

    def detach(self, event_bus: IEventBus) -> None:
        for subscription_id in self._subscriptions:
            event_bus.unsubscribe(subscription_id)
        self._subscriptions = []

    def publish_state(self, song_id: Optional[str], player_info: PlayerInfo) -> Future:
        """
        Publish the player state in the background

        Returns:
            Future that completes once the item was handed to the transport;
            it never carries an exception.
        """
        return self._submit(self._publish_state_internal, song_id, player_info)

    def clear_state(self) -> Future:
        """Publish the empty-state marker so the watch knows nothing is playing"""
        return self._submit(self._clear_state_internal)

    def build_snapshot(self, song_id: Optional[str], player_info: PlayerInfo) -> PlayerStateSnapshot:
        """Reduce full player info to the lightweight snapshot"""
        return PlayerStateSnapshot(
            song_id=song_id or "",
            song_title=player_info.song_title,
            artist_name=player_info.artist_name,
            album_name=player_info.album_name,
            is_playing=player_info.is_playing,
            current_position_ms=player_info.current_position_ms,
            total_duration_ms=player_info.total_duration_ms,
            is_favorite=player_info.is_favorite,
            is_shuffle_enabled=player_info.is_shuffle_enabled,
            repeat_mode=player_info.repeat_mode,
            volume_level=self._volume.get_volume(),
            volume_max=self._volume.get_max_volume(),
        )

    def _on_state_changed(self, change: PlayerStateChange) -> None:
        self.publish_state(change.song_id, change.player_info)

    def _submit(self, task: Callable, *args) -> Future:
        try:
            return self._executor.submit(self._run_safely, task, *args)
        except RuntimeError as e:
            logger.warning("State publisher is shut down: %s", e)
            future: Future = Future()
            future.set_result(None)
            return future

    def _run_safely(self, task: Callable, *args) -> None:
        try:
            task(*args)
        except Exception as e:
            logger.warning("Failed to publish state to Wear Data Layer: %s", e, exc_info=True)

    def _publish_state_internal(self, song_id: Optional[str], player_info: PlayerInfo) -> None:
        snapshot = self.build_snapshot(song_id, player_info)

        data_map = {
            WearDataPaths.KEY_STATE_JSON: self._codec.encode_player_state(snapshot),
            WearDataPaths.KEY_TIMESTAMP: self._next_timestamp(),
        }
        # No art means the key is absent, which removes any previous image
        art = self._art_encoder.encode(player_info.album_art_data)
        if art is not None:
            data_map[WearDataPaths.KEY_ALBUM_ART] = art

        self._put(DataItemRequest(WearDataPaths.PLAYER_STATE, data_map, urgent=True))
        logger.debug(
            "Published state to Wear: %s (playing=%s)", snapshot.song_title, snapshot.is_playing
        )

    def _clear_state_internal(self) -> None:
        data_map = {
            WearDataPaths.KEY_STATE_JSON: self._codec.encode_player_state(None),
            WearDataPaths.KEY_TIMESTAMP: self._next_timestamp(),
        }
        self._put(DataItemRequest(WearDataPaths.PLAYER_STATE, data_map, urgent=True))
        logger.debug("Cleared Wear player state")

    def _put(self, request: DataItemRequest) -> None:
        self._data_client.put_data_item(request).result(timeout=self._send_timeout)

    def _next_timestamp(self) -> int:
        """Wall-clock milliseconds, strictly increasing across publishes"""
        with self._timestamp_lock:
            now = int(self._clock() * 1000)
            self._last_timestamp = max(now, self._last_timestamp + 1)
            return self._last_timestamp
