# -*- coding: utf-8 -*-
"""
Event Bus Module - Publish-Subscribe Pattern Implementation

Provides loose-coupled communication between the playback service and the
wear state publisher.

Design Notes:
- This is a pure Python implementation, does not depend on any UI framework
- The bus is owned by AppContainer; there is no process-global instance
"""

from typing import Dict, Callable, Any
from enum import Enum
import threading
import uuid
import logging
from concurrent.futures import ThreadPoolExecutor

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Event type enumeration"""

    # Playback events
    PLAYER_STATE_CHANGED = "player_state_changed"  # data: PlayerStateChange
    PLAYBACK_STOPPED = "playback_stopped"          # nothing is playing anymore


class EventBus:
    """
    Event Bus

    Provides publish-subscribe pattern event system, supports asynchronous event handling.

    Usage example:
        event_bus = EventBus()

        # Subscribe to event
        def on_state_changed(change):
            logger.info("Now playing: %s", change.player_info.song_title)

        sub_id = event_bus.subscribe(EventType.PLAYER_STATE_CHANGED, on_state_changed)

        # Publish event
        event_bus.publish(EventType.PLAYER_STATE_CHANGED, change)

        # Unsubscribe
        event_bus.unsubscribe(sub_id)
    """

    def __init__(self, max_workers: int = 4):
        self._subscribers: Dict[EventType, Dict[str, Callable]] = {}
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="EventBus")
        self._sub_lock = threading.Lock()

    def subscribe(
        self,
        event_type: EventType,
        callback: Callable[[Any], None]
    ) -> str:
        """
        Subscribe to event

        Args:
            event_type: Event type
            callback: Callback function, receiving event data as an argument

        Returns:
            str: Subscription ID, used for unsubscription
        """
        subscription_id = str(uuid.uuid4())

        with self._sub_lock:
            self._subscribers.setdefault(event_type, {})[subscription_id] = callback

        return subscription_id

    def unsubscribe(self, subscription_id: str) -> bool:
        """
        Unsubscribe

        Args:
            subscription_id: The ID returned when subscribing

        Returns:
            bool: Whether the unsubscription was successful
        """
        with self._sub_lock:
            for callbacks in self._subscribers.values():
                if subscription_id in callbacks:
                    del callbacks[subscription_id]
                    return True
        return False

    def publish(self, event_type: EventType, data: Any = None) -> None:
        """
        Publish event asynchronously

        The callback function will be executed asynchronously in the thread pool.
        """
        with self._sub_lock:
            callbacks = list(self._subscribers.get(event_type, {}).values())

        for callback in callbacks:
            try:
                self._executor.submit(self._safe_call, callback, data)
            except RuntimeError:
                logger.debug("Event bus is shut down, dropping %s", event_type.value)

    def publish_sync(self, event_type: EventType, data: Any = None) -> None:
        """Publish event, executing all callbacks in the current thread"""
        with self._sub_lock:
            callbacks = list(self._subscribers.get(event_type, {}).values())

        for callback in callbacks:
            self._safe_call(callback, data)

    def _safe_call(self, callback: Callable, data: Any) -> None:
        """Safely call a callback function"""
        try:
            callback(data)
        except Exception as e:
            logger.error("Event callback execution error: %s", e)

    def clear(self) -> None:
        """Clear all subscriptions"""
        with self._sub_lock:
            self._subscribers.clear()

    def shutdown(self) -> None:
        """Shutdown the event bus"""
        self._executor.shutdown(wait=True)
