"""
Playback Dispatcher Module

Turns playback commands into actions on the remote media controller.

The controller handle is built lazily and at most once at a time:

    ABSENT --request--> CONNECTING --built--> READY
       ^                    |                   |
       +------failed--------+   <--disconnected-+

Requests that arrive while a build is in flight wait on that same build and
run in arrival order once it completes. All state transitions and every
controller call happen on the main thread executor.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future
from enum import Enum
from typing import Callable, Dict, List, Optional

from app.protocols import ControllerBuilder, IMainThreadExecutor, IMediaController
from core.errors import ControllerUnavailableError
from models.session_command import SessionCommand
from models.song import Song
from models.wear_messages import PlaybackAction, PlaybackCommand
from services.browse_catalog import BrowseCatalogAdapter

logger = logging.getLogger(__name__)

ControllerAction = Callable[[IMediaController], None]


class ControllerState(Enum):
    """Lifecycle of the controller handle"""
    ABSENT = "absent"
    CONNECTING = "connecting"
    READY = "ready"


class MediaControllerConnector:
    """
    Lazily built, shared media controller handle

    Usage example:
        connector = MediaControllerConnector(build_controller, main_thread)
        connector.with_controller(lambda controller: controller.play())
    """

    def __init__(self, builder: ControllerBuilder, main_thread: IMainThreadExecutor):
        self._builder = builder
        self._main = main_thread

        # Only touched on the main thread
        self._state = ControllerState.ABSENT
        self._controller: Optional[IMediaController] = None
        self._pending: Optional[Future] = None
        self._waiters: List[ControllerAction] = []
        self._build_count = 0
        self._released = False

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def build_count(self) -> int:
        """Number of build attempts started so far"""
        return self._build_count

    def with_controller(self, action: ControllerAction) -> None:
        """Run action against the controller, building it first if needed"""
        self._main.run(lambda: self._with_controller_on_main(action))

    def release(self) -> None:
        """Release the controller; safe to call when none was ever built"""
        self._main.run(self._release_on_main)

    def _with_controller_on_main(self, action: ControllerAction) -> None:
        if self._released:
            logger.debug("Controller released, ignoring action")
            return

        if self._state == ControllerState.READY:
            if self._controller is not None and self._controller.is_connected:
                self._invoke(action, self._controller)
                return
            logger.info("Media controller disconnected, rebuilding")
            self._controller = None
            self._state = ControllerState.ABSENT

        self._waiters.append(action)
        if self._state == ControllerState.ABSENT:
            self._start_build()

    def _start_build(self) -> None:
        self._state = ControllerState.CONNECTING
        self._build_count += 1
        logger.debug("Building media controller (attempt %d)", self._build_count)

        try:
            future = self._builder()
        except Exception as e:
            self._fail_build(e, self._take_waiters())
            return

        self._pending = future
        # A future that is already done calls back immediately, on this thread
        future.add_done_callback(
            lambda done: self._main.run(lambda: self._on_build_done(done))
        )

    def _on_build_done(self, future: Future) -> None:
        if future is not self._pending:
            # Released while the build was in flight
            self._discard_late_controller(future)
            return

        self._pending = None
        waiters = self._take_waiters()
        try:
            controller = future.result()
        except Exception as e:
            self._fail_build(e, waiters)
            return

        self._controller = controller
        self._state = ControllerState.READY
        logger.info("Media controller connected, running %d queued action(s)", len(waiters))
        for action in waiters:
            self._invoke(action, controller)

    def _fail_build(self, error: Exception, waiters: List[ControllerAction]) -> None:
        self._state = ControllerState.ABSENT
        self._pending = None
        logger.error("Failed to build MediaController: %s", error)
        failure = ControllerUnavailableError(str(error))
        for action in waiters:
            logger.error("Dropping queued controller action %s: %s", _action_name(action), failure)

    def _take_waiters(self) -> List[ControllerAction]:
        waiters, self._waiters = self._waiters, []
        return waiters

    def _invoke(self, action: ControllerAction, controller: IMediaController) -> None:
        try:
            action(controller)
        except Exception as e:
            logger.error("Controller action %s failed: %s", _action_name(action), e, exc_info=True)

    def _release_on_main(self) -> None:
        controller, self._controller = self._controller, None
        pending, self._pending = self._pending, None
        self._waiters = []
        self._state = ControllerState.ABSENT
        self._released = True

        if pending is not None:
            pending.cancel()
        if controller is not None:
            try:
                controller.release()
            except Exception as e:
                logger.warning("Failed to release MediaController: %s", e)

    @staticmethod
    def _discard_late_controller(future: Future) -> None:
        if future.cancelled() or future.exception() is not None:
            return
        try:
            future.result().release()
        except Exception as e:
            logger.warning("Failed to release late MediaController: %s", e)


def _action_name(action: ControllerAction) -> str:
    return getattr(action, "__name__", repr(action))


class PlaybackCommandDispatcher:
    """
    Playback Command Dispatcher

    Usage example:
        dispatcher = PlaybackCommandDispatcher(connector, browse_adapter)
        dispatcher.dispatch(PlaybackCommand(PlaybackAction.TOGGLE_PLAY_PAUSE))
    """

    def __init__(self, connector: MediaControllerConnector, browse_adapter: BrowseCatalogAdapter):
        self._connector = connector
        self._browse = browse_adapter
        self._actions: Dict[PlaybackAction, Callable[[PlaybackCommand], ControllerAction]] = {
            PlaybackAction.PLAY: lambda command: _play,
            PlaybackAction.PAUSE: lambda command: _pause,
            PlaybackAction.TOGGLE_PLAY_PAUSE: lambda command: _toggle_play_pause,
            PlaybackAction.NEXT: lambda command: _seek_to_next,
            PlaybackAction.PREVIOUS: lambda command: _seek_to_previous,
            PlaybackAction.TOGGLE_SHUFFLE: lambda command: _custom(SessionCommand(SessionCommand.TOGGLE_SHUFFLE)),
            PlaybackAction.CYCLE_REPEAT: lambda command: _custom(SessionCommand(SessionCommand.CYCLE_REPEAT_MODE)),
            PlaybackAction.TOGGLE_FAVORITE: _favorite_action,
        }

    @property
    def handled_actions(self) -> frozenset:
        """Actions served by the generic table (PLAY_FROM_CONTEXT is separate)"""
        return frozenset(self._actions)

    def dispatch(self, command: PlaybackCommand) -> None:
        """Dispatch a command without waiting for the controller"""
        if command.action == PlaybackAction.PLAY_FROM_CONTEXT:
            self.play_from_context(command)
            return

        build_action = self._actions.get(command.action)
        if build_action is None:
            logger.warning("Unknown playback action: %s", command.action)
            return
        self._connector.with_controller(build_action(command))

    def play_from_context(self, command: PlaybackCommand) -> None:
        """
        Replace the queue with a context's songs and start at the requested one

        Resolves the context on the calling thread, then runs
        set-queue/prepare/play as one action on the main thread.
        """
        if command.song_id is None or command.context_type is None:
            logger.warning("PLAY_FROM_CONTEXT missing songId or contextType")
            return

        songs = self._browse.songs_for_context(command.context_type, command.context_id)
        if not songs:
            logger.warning(
                "No songs found for context: %s / %s",
                command.context_type.value, command.context_id
            )
            return

        # Unknown song ids still play the context from its first song
        start_index = next((i for i, song in enumerate(songs) if song.id == command.song_id), 0)
        context_label = command.context_type.value

        def start_queue(controller: IMediaController) -> None:
            _start_queue(controller, songs, start_index)
            logger.debug(
                "Playing from context: %s, song=%s, queue size=%d",
                context_label, songs[start_index].title, len(songs)
            )

        self._connector.with_controller(start_queue)

    def release(self) -> None:
        """Release the shared controller handle"""
        self._connector.release()


# ===== Controller actions =====

def _play(controller: IMediaController) -> None:
    controller.play()


def _pause(controller: IMediaController) -> None:
    controller.pause()


def _toggle_play_pause(controller: IMediaController) -> None:
    if controller.is_playing:
        controller.pause()
    else:
        controller.play()


def _seek_to_next(controller: IMediaController) -> None:
    controller.seek_to_next()


def _seek_to_previous(controller: IMediaController) -> None:
    controller.seek_to_previous()


def _custom(command: SessionCommand) -> ControllerAction:
    def send_custom_command(controller: IMediaController) -> None:
        controller.send_custom_command(command)
    return send_custom_command


def _favorite_action(command: PlaybackCommand) -> ControllerAction:
    if command.target_enabled is None:
        return _custom(SessionCommand(SessionCommand.LIKE))
    return _custom(SessionCommand(
        SessionCommand.SET_FAVORITE_STATE,
        {SessionCommand.EXTRA_FAVORITE_ENABLED: command.target_enabled},
    ))


def _start_queue(controller: IMediaController, songs: List[Song], start_index: int) -> None:
    controller.set_media_items(songs, start_index, 0)
    controller.prepare()
    controller.play()
