"""
Wear Bridge Core Module
"""

from .event_bus import EventBus, EventType
from .database import DatabaseManager
from .codec import WearCodec
from .errors import (
    WearProtocolError,
    DecodeError,
    InvalidArgumentError,
    NotFoundError,
    ControllerUnavailableError,
    TransportError,
    BrowseTimeoutError,
)
from .main_thread import MainThreadExecutor
from .transport import LoopbackTransport, WearMessage, DataItemRequest
from .wear_paths import WearDataPaths

__all__ = [
    'EventBus',
    'EventType',
    'DatabaseManager',
    'WearCodec',
    'WearProtocolError',
    'DecodeError',
    'InvalidArgumentError',
    'NotFoundError',
    'ControllerUnavailableError',
    'TransportError',
    'BrowseTimeoutError',
    'MainThreadExecutor',
    'LoopbackTransport',
    'WearMessage',
    'DataItemRequest',
    'WearDataPaths',
]
