"""
Wear Command Receiver Module

Routes inbound watch messages by path to the playback dispatcher, the volume
adapter or the browse catalog, and sends browse responses back to the
originating node.

The transport callback neither decodes nor blocks. Playback and volume
commands go to a single-worker lane so they reach the controller in arrival
order; browse requests are handled on the parallel pool.
"""

from __future__ import annotations

import logging
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Callable, Dict, Optional, Tuple

from app.protocols import IMessageClient
from core.codec import WearCodec
from core.errors import DecodeError, TransportError, WearProtocolError
from core.transport import WearMessage
from core.wear_paths import WearDataPaths
from models.wear_messages import BrowseRequest, BrowseResponse, PlaybackCommand, VolumeCommand
from services.browse_catalog import BrowseCatalogAdapter
from services.playback_dispatcher import PlaybackCommandDispatcher
from services.volume_adapter import VolumeAdapter

logger = logging.getLogger(__name__)


class WearCommandReceiver:
    """
    Wear Command Receiver

    Usage example:
        receiver = WearCommandReceiver(dispatcher, volume, browse, message_client, browse_pool)
        transport.add_message_listener("phone", receiver.on_message_received)
    """

    def __init__(
        self,
        dispatcher: PlaybackCommandDispatcher,
        volume_adapter: VolumeAdapter,
        browse_adapter: BrowseCatalogAdapter,
        message_client: IMessageClient,
        executor: Executor,
        codec: Optional[WearCodec] = None,
        send_timeout: Optional[float] = 10.0,
        command_executor: Optional[Executor] = None,
    ):
        self._dispatcher = dispatcher
        self._volume = volume_adapter
        self._browse = browse_adapter
        self._message_client = message_client
        self._executor = executor
        self._command_executor = command_executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="WearCommands"
        )
        self._codec = codec or WearCodec()
        self._send_timeout = send_timeout
        # Path -> (handler, executor). Commands must keep arrival order.
        self._handlers: Dict[str, Tuple[Callable[[WearMessage], None], Executor]] = {
            WearDataPaths.PLAYBACK_COMMAND: (self._handle_playback_command, self._command_executor),
            WearDataPaths.VOLUME_COMMAND: (self._handle_volume_command, self._command_executor),
            WearDataPaths.BROWSE_REQUEST: (self._handle_browse_request, self._executor),
        }

    def on_message_received(self, message: WearMessage) -> Optional[Future]:
        """
        Transport delivery callback; returns immediately

        Returns:
            Future of the background handling task, or None if the message
            was not scheduled (unknown path or shutdown).
        """
        logger.debug("Received message on path: %s", message.path)

        route = self._handlers.get(message.path)
        if route is None:
            logger.warning("Unknown message path: %s", message.path)
            return None

        handler, executor = route
        try:
            return executor.submit(self._run_handler, handler, message)
        except RuntimeError:
            logger.warning("Receiver is shut down, dropping message on %s", message.path)
            return None

    def _run_handler(self, handler: Callable[[WearMessage], None], message: WearMessage) -> None:
        try:
            handler(message)
        except Exception as e:
            logger.error("Failed to handle message on %s: %s", message.path, e, exc_info=True)

    # ===== Playback / volume =====

    def _handle_playback_command(self, message: WearMessage) -> None:
        try:
            command = self._codec.decode(message.data, PlaybackCommand)
        except DecodeError as e:
            logger.error("Failed to parse playback command: %s", e)
            return

        logger.debug("Playback command: %s", command.action.value)
        self._dispatcher.dispatch(command)

    def _handle_volume_command(self, message: WearMessage) -> None:
        try:
            command = self._codec.decode(message.data, VolumeCommand)
        except DecodeError as e:
            logger.error("Failed to parse volume command: %s", e)
            return

        logger.debug("Volume command: direction=%s, value=%s", command.direction, command.value)
        self._volume.apply(command)

    # ===== Browse =====

    def _handle_browse_request(self, message: WearMessage) -> None:
        try:
            request = self._codec.decode(message.data, BrowseRequest)
        except DecodeError as e:
            # No response: the watch applies its own timeout
            logger.error("Failed to parse browse request: %s", e)
            return

        logger.debug(
            "Browse request: type=%s, contextId=%s", request.browse_type.value, request.context_id
        )

        response = self.build_browse_response(request)
        try:
            self._send(message.source_node_id, WearDataPaths.BROWSE_RESPONSE, self._codec.encode(response))
            logger.debug(
                "Sent browse response: %d items for %s", len(response.items), request.browse_type.value
            )
        except TransportError as e:
            logger.error("Failed to send browse response: %s", e)

    def build_browse_response(self, request: BrowseRequest) -> BrowseResponse:
        """Resolve a browse request; failures become an error response"""
        try:
            items = self._browse.resolve(request.browse_type, request.context_id)
            return BrowseResponse(request_id=request.request_id, items=items)
        except WearProtocolError as e:
            logger.warning("Browse request %s rejected: %s", request.request_id, e)
            return BrowseResponse(request_id=request.request_id, error=str(e))
        except Exception as e:
            logger.error("Failed to process browse request: %s", e, exc_info=True)
            return BrowseResponse(request_id=request.request_id, error=str(e) or "Unknown error")

    def _send(self, node_id: str, path: str, data: bytes) -> None:
        """Send and wait for the transport, bounded by the send timeout"""
        try:
            self._message_client.send_message(node_id, path, data).result(timeout=self._send_timeout)
        except FutureTimeoutError as e:
            raise TransportError(f"Timed out sending {path} to {node_id}") from e
        except Exception as e:
            raise TransportError(f"Sending {path} to {node_id} failed: {e}") from e

    # ===== Lifecycle =====

    def shutdown(self) -> None:
        """Cancel pending background work and release the controller"""
        self._command_executor.shutdown(wait=False, cancel_futures=True)
        self._executor.shutdown(wait=False, cancel_futures=True)
        self._dispatcher.release()
