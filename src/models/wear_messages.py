"""
Wear message data models

Typed payloads exchanged between the phone and the watch. Wire keys are
camelCase; attributes are snake_case.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class PlaybackAction(Enum):
    """Playback command actions"""
    PLAY = "play"
    PAUSE = "pause"
    TOGGLE_PLAY_PAUSE = "toggle_play_pause"
    NEXT = "next"
    PREVIOUS = "previous"
    TOGGLE_SHUFFLE = "toggle_shuffle"
    CYCLE_REPEAT = "cycle_repeat"
    TOGGLE_FAVORITE = "toggle_favorite"
    PLAY_FROM_CONTEXT = "play_from_context"


class ContextType(Enum):
    """Named scopes that define an ordered song set"""
    ALBUM = "album"
    ARTIST = "artist"
    PLAYLIST = "playlist"
    FAVORITES = "favorites"
    ALL_SONGS = "all_songs"


class VolumeDirection(Enum):
    """Relative volume steps"""
    UP = "up"
    DOWN = "down"


class BrowseType(Enum):
    """Browse queries understood by the phone"""
    ROOT = "root"
    ALBUMS = "albums"
    ARTISTS = "artists"
    PLAYLISTS = "playlists"
    FAVORITES = "favorites"
    ALL_SONGS = "all_songs"
    ALBUM_SONGS = "album_songs"
    ARTIST_SONGS = "artist_songs"
    PLAYLIST_SONGS = "playlist_songs"

    @property
    def requires_context(self) -> bool:
        return self in (BrowseType.ALBUM_SONGS, BrowseType.ARTIST_SONGS, BrowseType.PLAYLIST_SONGS)


class LibraryItemType(Enum):
    """Kinds of browse items"""
    CATEGORY = "category"
    ALBUM = "album"
    ARTIST = "artist"
    PLAYLIST = "playlist"
    SONG = "song"


def _require_str(data: dict, key: str) -> str:
    value = data[key]
    if not isinstance(value, str):
        raise TypeError(f"{key} must be a string")
    return value


def _optional_str(data: dict, key: str) -> Optional[str]:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise TypeError(f"{key} must be a string")
    return value


def _optional_bool(data: dict, key: str) -> Optional[bool]:
    value = data.get(key)
    if value is not None and not isinstance(value, bool):
        raise TypeError(f"{key} must be a boolean")
    return value


def _optional_int(data: dict, key: str) -> Optional[int]:
    value = data.get(key)
    # bool is an int subclass; reject it explicitly
    if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
        raise TypeError(f"{key} must be an integer")
    return value


def _int_or(data: dict, key: str, default: int) -> int:
    value = _optional_int(data, key)
    return default if value is None else value


def _bool_or(data: dict, key: str, default: bool) -> bool:
    value = _optional_bool(data, key)
    return default if value is None else value


def _str_or(data: dict, key: str, default: str) -> str:
    value = _optional_str(data, key)
    return default if value is None else value


@dataclass
class PlaybackCommand:
    """
    Playback command (watch -> phone)

    PLAY_FROM_CONTEXT requires song_id and context_type. For TOGGLE_FAVORITE,
    target_enabled=None means "toggle the current state".
    """

    action: PlaybackAction
    song_id: Optional[str] = None
    context_type: Optional[ContextType] = None
    context_id: Optional[str] = None
    target_enabled: Optional[bool] = None

    def to_dict(self) -> dict:
        data: dict = {'action': self.action.value}
        if self.song_id is not None:
            data['songId'] = self.song_id
        if self.context_type is not None:
            data['contextType'] = self.context_type.value
        if self.context_id is not None:
            data['contextId'] = self.context_id
        if self.target_enabled is not None:
            data['targetEnabled'] = self.target_enabled
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'PlaybackCommand':
        action = PlaybackAction(_require_str(data, 'action'))
        context_type = _optional_str(data, 'contextType')
        command = cls(
            action=action,
            song_id=_optional_str(data, 'songId'),
            context_type=ContextType(context_type) if context_type is not None else None,
            context_id=_optional_str(data, 'contextId'),
            target_enabled=_optional_bool(data, 'targetEnabled'),
        )
        if action == PlaybackAction.PLAY_FROM_CONTEXT and (
            command.song_id is None or command.context_type is None
        ):
            raise ValueError("play_from_context requires songId and contextType")
        return command


@dataclass
class VolumeCommand:
    """Volume command; an absolute value overrides the direction"""

    direction: Optional[VolumeDirection] = None
    value: Optional[int] = None

    def to_dict(self) -> dict:
        data: dict = {}
        if self.direction is not None:
            data['direction'] = self.direction.value
        if self.value is not None:
            data['value'] = self.value
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'VolumeCommand':
        direction = _optional_str(data, 'direction')
        value = _optional_int(data, 'value')
        if value is not None and not 0 <= value <= 100:
            raise ValueError("value must be within 0..100")
        return cls(
            direction=VolumeDirection(direction) if direction is not None else None,
            value=value,
        )


@dataclass
class BrowseRequest:
    """Correlated browse query; request_id is generated by the caller"""

    request_id: str
    browse_type: BrowseType
    context_id: Optional[str] = None

    def to_dict(self) -> dict:
        data: dict = {'requestId': self.request_id, 'browseType': self.browse_type.value}
        if self.context_id is not None:
            data['contextId'] = self.context_id
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'BrowseRequest':
        return cls(
            request_id=_require_str(data, 'requestId'),
            browse_type=BrowseType(_require_str(data, 'browseType')),
            context_id=_optional_str(data, 'contextId'),
        )


@dataclass
class LibraryItem:
    """Browse item; identity is (type, id)"""

    id: str
    title: str
    subtitle: str
    type: LibraryItemType

    @property
    def key(self) -> tuple:
        return (self.type, self.id)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'title': self.title,
            'subtitle': self.subtitle,
            'type': self.type.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'LibraryItem':
        return cls(
            id=_require_str(data, 'id'),
            title=_str_or(data, 'title', ''),
            subtitle=_str_or(data, 'subtitle', ''),
            type=LibraryItemType(_require_str(data, 'type')),
        )


@dataclass
class BrowseResponse:
    """Browse result echoing the request id; items is empty when error is set"""

    request_id: str
    items: List[LibraryItem] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def to_dict(self) -> dict:
        data: dict = {
            'requestId': self.request_id,
            'items': [item.to_dict() for item in self.items],
        }
        if self.error is not None:
            data['error'] = self.error
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'BrowseResponse':
        raw_items = data.get('items') or []
        if not isinstance(raw_items, list):
            raise TypeError("items must be a list")
        return cls(
            request_id=_require_str(data, 'requestId'),
            items=[LibraryItem.from_dict(item) for item in raw_items],
            error=_optional_str(data, 'error'),
        )


@dataclass
class PlayerStateSnapshot:
    """
    Point-in-time player state published to the watch.

    Replaced wholesale on every publish. cover_image travels as a separate
    binary attachment, never inside the JSON body.
    """

    song_id: str = ""
    song_title: str = ""
    artist_name: str = ""
    album_name: str = ""
    is_playing: bool = False
    current_position_ms: int = 0
    total_duration_ms: int = 0
    is_favorite: bool = False
    is_shuffle_enabled: bool = False
    repeat_mode: int = 0
    volume_level: int = 0
    volume_max: int = 0
    cover_image: Optional[bytes] = field(default=None, repr=False)

    def to_dict(self) -> dict:
        return {
            'songId': self.song_id,
            'songTitle': self.song_title,
            'artistName': self.artist_name,
            'albumName': self.album_name,
            'isPlaying': self.is_playing,
            'currentPositionMs': self.current_position_ms,
            'totalDurationMs': self.total_duration_ms,
            'isFavorite': self.is_favorite,
            'isShuffleEnabled': self.is_shuffle_enabled,
            'repeatMode': self.repeat_mode,
            'volumeLevel': self.volume_level,
            'volumeMax': self.volume_max,
        }

    @classmethod
    def from_dict(cls, data: dict, cover_image: Optional[bytes] = None) -> 'PlayerStateSnapshot':
        return cls(
            song_id=_str_or(data, 'songId', ''),
            song_title=_str_or(data, 'songTitle', ''),
            artist_name=_str_or(data, 'artistName', ''),
            album_name=_str_or(data, 'albumName', ''),
            is_playing=_bool_or(data, 'isPlaying', False),
            current_position_ms=_int_or(data, 'currentPositionMs', 0),
            total_duration_ms=_int_or(data, 'totalDurationMs', 0),
            is_favorite=_bool_or(data, 'isFavorite', False),
            is_shuffle_enabled=_bool_or(data, 'isShuffleEnabled', False),
            repeat_mode=_int_or(data, 'repeatMode', 0),
            volume_level=_int_or(data, 'volumeLevel', 0),
            volume_max=_int_or(data, 'volumeMax', 0),
            cover_image=cover_image,
        )


