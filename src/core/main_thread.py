# -*- coding: utf-8 -*-
"""
Main Thread Executor Module

A single designated execution context for work that must never run in
parallel, such as every interaction with the remote media controller.

Design Notes:
- This is a pure Python implementation backed by one dedicated worker thread
- Qt main thread dispatch lives in QtMainThreadExecutor in ui/qt_main_thread.py
- Callables posted from other threads run strictly in FIFO order
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class MainThreadExecutor:
    """
    Main Thread Executor

    Usage example:
        main = MainThreadExecutor()

        # Runs synchronously when already on the main thread, posts otherwise
        main.run(lambda: controller.play())

        # Wait for everything posted so far
        main.flush()
    """

    def __init__(self, name: str = "WearMain"):
        self._thread_ident: Optional[int] = None
        self._executor = ThreadPoolExecutor(
            max_workers=1,
            thread_name_prefix=name,
            initializer=self._remember_thread,
        )
        self._shutdown = False

    def _remember_thread(self) -> None:
        self._thread_ident = threading.get_ident()

    def is_main_thread(self) -> bool:
        """Check whether the caller is running on the designated thread"""
        return self._thread_ident is not None and threading.get_ident() == self._thread_ident

    def run(self, block: Callable[[], None]) -> None:
        """
        Run a callable on the main thread

        Executes synchronously if already on it, otherwise posts it.
        Errors are logged and never propagate to the caller.
        """
        if self.is_main_thread():
            self._safe_call(block)
            return
        if self._shutdown:
            logger.debug("Main thread executor is shut down, dropping task")
            return
        try:
            self._executor.submit(self._safe_call, block)
        except RuntimeError:
            logger.debug("Main thread executor rejected task during shutdown")

    def flush(self, timeout: Optional[float] = 5.0) -> bool:
        """
        Wait until every previously posted callable has run

        Returns:
            bool: True if the queue drained before the timeout
        """
        if self.is_main_thread():
            return True
        marker: Future = Future()
        try:
            self._executor.submit(marker.set_result, True)
        except RuntimeError:
            return True
        try:
            marker.result(timeout=timeout)
            return True
        except FutureTimeoutError:
            return False

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting work and stop the thread"""
        self._shutdown = True
        self._executor.shutdown(wait=wait)

    def _safe_call(self, block: Callable[[], None]) -> None:
        try:
            block()
        except Exception as e:
            logger.error("Main thread task failed: %s", e, exc_info=True)
