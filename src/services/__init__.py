"""
Service Layer Module
"""

from .config_service import ConfigService
from .catalog_service import SqliteMusicCatalog, SqlitePlaylistStore
from .browse_catalog import BrowseCatalogAdapter
from .playback_dispatcher import MediaControllerConnector, PlaybackCommandDispatcher, ControllerState
from .volume_adapter import VolumeAdapter
from .album_art import AlbumArtEncoder
from .state_publisher import WearStatePublisher
from .command_receiver import WearCommandReceiver
from .peer_client import WearBrowseClient, WearRemoteControl, WearStateRepository, PeerPlayerState
from .device_library import DeviceMusicScanner

__all__ = [
    'ConfigService',
    'SqliteMusicCatalog',
    'SqlitePlaylistStore',
    'BrowseCatalogAdapter',
    'MediaControllerConnector',
    'PlaybackCommandDispatcher',
    'ControllerState',
    'VolumeAdapter',
    'AlbumArtEncoder',
    'WearStatePublisher',
    'WearCommandReceiver',
    'WearBrowseClient',
    'WearRemoteControl',
    'WearStateRepository',
    'PeerPlayerState',
    'DeviceMusicScanner',
]
