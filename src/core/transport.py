# -*- coding: utf-8 -*-
"""
Wear Transport Module

Data types for the message/data layer and an in-memory loopback transport.

The loopback delivers messages to listeners registered per node and keeps
one replace-semantics record per data path. It is used for local wiring and
tests; a real deployment injects its own IMessageClient/IDataClient.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class WearMessage:
    """Inbound message event"""

    path: str
    data: bytes
    source_node_id: str


@dataclass
class DataItemRequest:
    """Replace-record request for a data path"""

    path: str
    data_map: Dict[str, Any] = field(default_factory=dict)
    urgent: bool = False


MessageListener = Callable[[WearMessage], None]


class LoopbackTransport:
    """
    In-memory Wear transport

    Usage example:
        transport = LoopbackTransport()
        transport.add_message_listener("phone", receiver.on_message_received)

        watch = transport.client_for("watch")
        watch.send_message("phone", WearDataPaths.BROWSE_REQUEST, payload)
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._listeners: Dict[str, List[MessageListener]] = {}
        self._records: Dict[str, Dict[str, Any]] = {}
        self._data_listeners: List[Callable[[str, Optional[Dict[str, Any]]], None]] = []
        self.sent_messages: List[WearMessage] = []

    # ===== Message layer =====

    def add_message_listener(self, node_id: str, listener: MessageListener) -> None:
        with self._lock:
            self._listeners.setdefault(node_id, []).append(listener)

    def remove_message_listener(self, node_id: str, listener: MessageListener) -> None:
        with self._lock:
            listeners = self._listeners.get(node_id, [])
            if listener in listeners:
                listeners.remove(listener)

    def client_for(self, node_id: str) -> "LoopbackMessageClient":
        """Message client that stamps node_id as the source of every message"""
        return LoopbackMessageClient(self, node_id)

    def deliver(self, source_node_id: str, target_node_id: str, path: str, data: bytes) -> Future:
        future: Future = Future()
        message = WearMessage(path=path, data=bytes(data), source_node_id=source_node_id)
        with self._lock:
            listeners = list(self._listeners.get(target_node_id, []))
            self.sent_messages.append(message)

        if not listeners:
            future.set_exception(ConnectionError(f"Node not reachable: {target_node_id}"))
            return future

        for listener in listeners:
            try:
                listener(message)
            except Exception as e:
                logger.error("Message listener failed for %s: %s", path, e)
        future.set_result(None)
        return future

    # ===== Data layer =====

    def put_data_item(self, request: DataItemRequest) -> Future:
        """Replace the record at request.path"""
        future: Future = Future()
        record = dict(request.data_map)
        with self._lock:
            self._records[request.path] = record
            listeners = list(self._data_listeners)

        for listener in listeners:
            try:
                listener(request.path, dict(record))
            except Exception as e:
                logger.error("Data listener failed for %s: %s", request.path, e)
        future.set_result(None)
        return future

    def get_data_item(self, path: str) -> Optional[Dict[str, Any]]:
        """Point-in-time copy of the record at path"""
        with self._lock:
            record = self._records.get(path)
            return dict(record) if record is not None else None

    def add_data_listener(self, listener: Callable[[str, Optional[Dict[str, Any]]], None]) -> None:
        with self._lock:
            self._data_listeners.append(listener)


class LoopbackMessageClient:
    """IMessageClient bound to a source node"""

    def __init__(self, transport: LoopbackTransport, node_id: str):
        self._transport = transport
        self._node_id = node_id

    @property
    def node_id(self) -> str:
        return self._node_id

    def send_message(self, node_id: str, path: str, data: bytes) -> Future:
        return self._transport.deliver(self._node_id, node_id, path, data)
