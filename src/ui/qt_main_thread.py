# -*- coding: utf-8 -*-
"""
Qt Main Thread Executor

Runs controller work on the Qt application thread, so the media controller
shares the thread that owns the rest of the UI.

Design Principles:
- The core layer's MainThreadExecutor remains pure Python and does not depend on Qt.
- This adapter implements the same run/flush/shutdown contract with a queued signal.
- run() executes synchronously when already on the Qt main thread.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from PyQt6.QtCore import QCoreApplication, QObject, Qt, QThread, pyqtSignal

logger = logging.getLogger(__name__)


class QtMainThreadExecutor(QObject):
    """Qt Main Thread Executor

    Usage Example:
        app = QApplication(sys.argv)
        main = QtMainThreadExecutor()

        # From any thread; the callable runs on the Qt main thread
        main.run(lambda: controller.play())
    """

    # Asynchronous dispatch signal
    _dispatch_signal = pyqtSignal(object)
    # Flush marker (with completion event)
    _flush_signal = pyqtSignal(object)

    def __init__(self):
        """Initialize the executor.

        Raises:
            RuntimeError: If no Qt application instance is running.
        """
        super().__init__()

        app = QCoreApplication.instance()
        if app is None:
            raise RuntimeError(
                "QtMainThreadExecutor requires a running QCoreApplication instance. "
                "Please create the application before initializing the executor."
            )

        main_thread = app.thread()
        if QThread.currentThread() != main_thread:
            self.moveToThread(main_thread)
            logger.debug("QtMainThreadExecutor moved to Qt main thread")

        self._shutdown = False

        # QueuedConnection guarantees execution in the main thread's event loop
        self._dispatch_signal.connect(self._on_dispatch, Qt.ConnectionType.QueuedConnection)
        self._flush_signal.connect(self._on_flush, Qt.ConnectionType.QueuedConnection)

    def is_main_thread(self) -> bool:
        """Check whether the caller is on the Qt main thread."""
        app = QCoreApplication.instance()
        return app is not None and QThread.currentThread() == app.thread()

    def run(self, block: Callable[[], None]) -> None:
        """Run a callable on the Qt main thread.

        Executes directly if already there, otherwise posts it via signal.
        """
        if self.is_main_thread():
            self._on_dispatch(block)
            return
        if self._shutdown:
            logger.debug("Qt main thread executor is shut down, dropping task")
            return
        self._dispatch_signal.emit(block)

    def flush(self, timeout: Optional[float] = 5.0) -> bool:
        """Wait until previously posted callables have run.

        On the main thread this pumps the event loop instead of blocking it.
        """
        if self.is_main_thread():
            QCoreApplication.processEvents()
            return True
        done_event = threading.Event()
        self._flush_signal.emit(done_event)
        return done_event.wait(timeout=timeout)

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting work."""
        self._shutdown = True

    def _on_dispatch(self, block: Callable[[], None]) -> None:
        """Dispatch slot; executes in the Qt main thread."""
        try:
            block()
        except Exception as e:
            logger.error("Qt main thread task failed: %s", e, exc_info=True)

    def _on_flush(self, done_event: threading.Event) -> None:
        done_event.set()
