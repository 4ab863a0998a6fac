"""
Player info model

Full player state as seen by the playback service, before it is reduced to
the lightweight snapshot sent to the watch.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class PlayerInfo:
    """Current playback information"""

    song_title: str = ""
    artist_name: str = ""
    album_name: str = ""
    is_playing: bool = False
    current_position_ms: int = 0
    total_duration_ms: int = 0
    is_favorite: bool = False
    is_shuffle_enabled: bool = False
    repeat_mode: int = 0
    album_art_data: Optional[bytes] = field(default=None, repr=False)


@dataclass
class PlayerStateChange:
    """Event payload for EventType.PLAYER_STATE_CHANGED"""

    song_id: Optional[str]
    player_info: PlayerInfo
