"""
Data Models Module
"""

from .song import Song
from .album import Album
from .artist import Artist
from .user_playlist import UserPlaylist
from .player_info import PlayerInfo, PlayerStateChange
from .session_command import SessionCommand
from .device_song import DeviceSong
from .wear_messages import (
    PlaybackAction,
    ContextType,
    VolumeDirection,
    BrowseType,
    LibraryItemType,
    PlaybackCommand,
    VolumeCommand,
    BrowseRequest,
    BrowseResponse,
    LibraryItem,
    PlayerStateSnapshot,
)

__all__ = [
    'Song', 'Album', 'Artist', 'UserPlaylist', 'PlayerInfo', 'PlayerStateChange',
    'SessionCommand', 'DeviceSong',
    'PlaybackAction', 'ContextType', 'VolumeDirection', 'BrowseType', 'LibraryItemType',
    'PlaybackCommand', 'VolumeCommand', 'BrowseRequest', 'BrowseResponse', 'LibraryItem',
    'PlayerStateSnapshot',
]
