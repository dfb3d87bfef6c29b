"""Services for application infrastructure management.

Separates infrastructure concerns (exception handling, cleanup) from
application logic.
"""
from __future__ import annotations

import atexit
import sys
import threading
import traceback
from typing import Callable, List, Tuple

from loguru import logger

from core.error_handler import handle_exceptions


class ExceptionHandlerService:
    """Global exception handling for the main thread and worker threads.

    Uncaught exceptions (including ones raised inside speech capture
    callbacks) are logged and mirrored into the session log before the
    original hook runs.
    """

    def __init__(self, session_logger=None):
        self.session_logger = session_logger
        self._original_excepthook = sys.excepthook
        self._original_thread_excepthook = threading.excepthook

    def install(self) -> None:
        def excepthook(exc_type, exc_value, exc_traceback):
            try:
                tb = "".join(traceback.format_exception(exc_type, exc_value, exc_traceback))
                logger.error("Uncaught exception:\n{}", tb)
                if self.session_logger:
                    self.session_logger.log(tb)
            finally:
                self._original_excepthook(exc_type, exc_value, exc_traceback)

        def thread_excepthook(args: threading.ExceptHookArgs) -> None:
            excepthook(args.exc_type, args.exc_value, args.exc_traceback)

        sys.excepthook = excepthook
        threading.excepthook = thread_excepthook

    def uninstall(self) -> None:
        """Restore original exception handlers."""
        sys.excepthook = self._original_excepthook
        threading.excepthook = self._original_thread_excepthook


class CleanupService:
    """Runs registered cleanup handlers exactly once, in registration order."""

    def __init__(self):
        self._cleanup_handlers: List[Tuple[Callable[[], None], str]] = []
        self._cleaned_up = False

    def register(self, handler: Callable[[], None], name: str = "") -> None:
        self._cleanup_handlers.append((handler, name))

    @property
    def cleaned_up(self) -> bool:
        return self._cleaned_up

    @handle_exceptions(logger_instance=logger, message="Cleanup failed")
    def cleanup(self) -> None:
        """Execute all registered cleanup handlers.

        Failures in individual handlers are logged but don't prevent
        subsequent handlers from running. Calling this more than once has no
        additional effect.
        """
        if self._cleaned_up:
            return

        self._cleaned_up = True
        logger.debug("Starting cleanup...")

        for handler, name in self._cleanup_handlers:
            try:
                logger.debug(f"Cleaning up: {name or handler.__name__}")
                handler()
            except Exception as e:
                logger.warning(f"Cleanup handler {name} failed: {e}")

        logger.debug("Cleanup completed")

    def install_atexit(self) -> None:
        atexit.register(self.cleanup)


class SpeechCaptureCleanupService:
    """Stops an active speech capture session on shutdown."""

    def __init__(self, capture):
        self.capture = capture

    @handle_exceptions(logger_instance=logger, message="Speech capture cleanup failed")
    def cleanup(self) -> None:
        if self.capture is None:
            return
        if self.capture.is_listening:
            logger.info("Stopping active speech capture session")
        self.capture.stop()
