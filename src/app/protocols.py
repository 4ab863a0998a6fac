# -*- coding: utf-8 -*-
"""
Protocols Definition Module

Defines the interface protocols (Protocol) for the external collaborators the
wear bridge consumes: transport, media controller, catalog, playlist store,
system volume and the designated main thread.

Design Decisions:
- Default to using Protocol + @runtime_checkable
- Collaborators are injected by AppContainerFactory, never created by services
- Runtime checks are performed as one-time assertions during container assembly or testing
"""

from __future__ import annotations

from concurrent.futures import Future
from enum import Enum
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    List,
    Optional,
    Protocol,
    runtime_checkable,
)

if TYPE_CHECKING:
    from core.transport import DataItemRequest
    from models.album import Album
    from models.artist import Artist
    from models.session_command import SessionCommand
    from models.song import Song
    from models.user_playlist import UserPlaylist


# =============================================================================
# Execution Context Protocol
# =============================================================================

@runtime_checkable
class IMainThreadExecutor(Protocol):
    """Single designated execution context

    Implementations: MainThreadExecutor (pure Python), QtMainThreadExecutor (Qt).
    """

    def is_main_thread(self) -> bool:
        ...

    def run(self, block: Callable[[], None]) -> None:
        """Run synchronously when on the main thread, post otherwise"""
        ...

    def flush(self, timeout: Optional[float] = 5.0) -> bool:
        ...

    def shutdown(self, wait: bool = True) -> None:
        ...


# =============================================================================
# Transport Protocols
# =============================================================================

@runtime_checkable
class IMessageClient(Protocol):
    """One-way message channel between paired nodes"""

    def send_message(self, node_id: str, path: str, data: bytes) -> Future:
        """Send a message

        Returns:
            Future completed once the transport accepted the message
        """
        ...


@runtime_checkable
class IDataClient(Protocol):
    """Replace-semantics data items shared between paired nodes"""

    def put_data_item(self, request: "DataItemRequest") -> Future:
        """Replace the record at request.path with request.data_map"""
        ...


# =============================================================================
# Media Controller Protocol
# =============================================================================

@runtime_checkable
class IMediaController(Protocol):
    """Handle to the remote media session

    Not safe for concurrent use: only touch it from the main thread executor.
    """

    @property
    def is_connected(self) -> bool:
        ...

    @property
    def is_playing(self) -> bool:
        ...

    def play(self) -> None:
        ...

    def pause(self) -> None:
        ...

    def seek_to_next(self) -> None:
        ...

    def seek_to_previous(self) -> None:
        ...

    def set_media_items(self, items: List["Song"], start_index: int, start_position_ms: int) -> None:
        """Replace the whole queue"""
        ...

    def prepare(self) -> None:
        ...

    def send_custom_command(self, command: "SessionCommand") -> None:
        ...

    def release(self) -> None:
        ...


# Builds a controller asynchronously; the future resolves to an IMediaController
ControllerBuilder = Callable[[], Future]


# =============================================================================
# Catalog Protocols
# =============================================================================

@runtime_checkable
class IMusicCatalog(Protocol):
    """Read-only song/album/artist catalog keyed by numeric id"""

    def get_all_songs(self) -> List["Song"]:
        ...

    def get_favorite_songs(self) -> List["Song"]:
        ...

    def get_all_albums(self) -> List["Album"]:
        ...

    def get_all_artists(self) -> List["Artist"]:
        ...

    def get_songs_for_album(self, album_id: int) -> List["Song"]:
        ...

    def get_songs_for_artist(self, artist_id: int) -> List["Song"]:
        ...

    def get_songs_by_ids(self, song_ids: List[str]) -> List["Song"]:
        """Bulk fetch; the result order is unspecified"""
        ...


@runtime_checkable
class IPlaylistStore(Protocol):
    """User playlists keyed by string id"""

    def get_user_playlists(self) -> List["UserPlaylist"]:
        ...


# =============================================================================
# System Volume Protocol
# =============================================================================

@runtime_checkable
class IVolumeService(Protocol):
    """System media volume in device steps"""

    def get_max_volume(self) -> int:
        ...

    def get_volume(self) -> int:
        ...

    def set_volume(self, level: int) -> None:
        ...

    def adjust_volume(self, steps: int) -> None:
        """Raise (positive) or lower (negative) by device steps"""
        ...


# =============================================================================
# Event Bus / Configuration Protocols
# =============================================================================

@runtime_checkable
class IEventBus(Protocol):
    """Event Bus Interface"""

    def subscribe(self, event_type: Enum, callback: Callable[[Any], None]) -> str:
        ...

    def unsubscribe(self, subscription_id: str) -> bool:
        ...

    def publish(self, event_type: Enum, data: Any = None) -> None:
        ...

    def shutdown(self) -> None:
        ...


@runtime_checkable
class IConfigService(Protocol):
    """Configuration Service Interface"""

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value

        Args:
            key: Dot-separated key, e.g. "wear.browse.max_songs"
            default: Default value
        """
        ...

    def set(self, key: str, value: Any) -> None:
        ...
