from __future__ import annotations

import threading
from typing import Callable, Optional

from loguru import logger

ResultCallback = Callable[[str], None]
ErrorCallback = Callable[[str], None]

NOT_SUPPORTED = "not_supported"
NO_SPEECH = "no_speech"


class SpeechCapture:
    """
    Base class for single-shot speech capture sessions.

    A session is started with ``start(on_result, on_error)`` and runs on its
    own worker thread until the engine produces one transcript, fails, or the
    session is stopped. Per session at most one terminal callback fires:

    - ``on_result(transcript)`` after a successful recognition
    - ``on_error(code)`` when the engine fails; the code is passed through
      verbatim for user messaging
    - nothing at all when the session was cancelled with ``stop()``

    Starting a new session while one is active stops the prior session first.
    When the engine is unavailable ``start`` calls ``on_error("not_supported")``
    synchronously and returns False instead of raising.

    Subclasses implement ``_check_support()`` and ``_listen_once(stop_event)``.
    """

    JOIN_TIMEOUT_S = 2.0

    def __init__(self, language: str = "en-US") -> None:
        self.language = language
        self._lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self._stop_event: Optional[threading.Event] = None
        self._supported: Optional[bool] = None

    # ---- Capability ----

    @property
    def is_supported(self) -> bool:
        if self._supported is None:
            try:
                self._supported = bool(self._check_support())
            except Exception as e:
                logger.warning(f"Speech support check failed: {e}")
                self._supported = False
        return self._supported

    @property
    def is_listening(self) -> bool:
        with self._lock:
            return (
                self._thread is not None
                and self._thread.is_alive()
                and self._stop_event is not None
                and not self._stop_event.is_set()
            )

    def _check_support(self) -> bool:
        raise NotImplementedError("Subclasses must implement _check_support()")

    def _listen_once(self, stop_event: threading.Event) -> Optional[str]:
        """Block until one transcript is recognized or ``stop_event`` is set.

        Returns:
            The transcript, or None when nothing was recognized

        Raises:
            Exception: Any engine failure; its message becomes the error code
        """
        raise NotImplementedError("Subclasses must implement _listen_once()")

    # ---- Session control ----

    def start(self, on_result: ResultCallback, on_error: Optional[ErrorCallback] = None) -> bool:
        """Begin a listening session.

        Returns:
            bool: True if a session was started
        """
        if not self.is_supported:
            logger.warning("Speech capture not supported in this environment")
            if on_error:
                on_error(NOT_SUPPORTED)
            return False

        self.stop()

        stop_event = threading.Event()
        thread = threading.Thread(
            target=self._run_session,
            args=(stop_event, on_result, on_error),
            name=f"{type(self).__name__}-session",
            daemon=True,
        )
        with self._lock:
            self._stop_event = stop_event
            self._thread = thread
        try:
            thread.start()
        except RuntimeError as e:
            logger.error(f"Error starting speech capture: {e}")
            stop_event.set()
            if on_error:
                on_error(str(e))
            return False

        logger.info("Speech capture listening")
        return True

    def stop(self) -> None:
        """Cancel the active session, if any, without delivering a result."""
        with self._lock:
            thread, stop_event = self._thread, self._stop_event
            self._thread = None
            self._stop_event = None
        if stop_event is None or thread is None:
            return

        if not stop_event.is_set():
            stop_event.set()
            logger.info("Speech capture stopped")
        if thread.is_alive() and thread is not threading.current_thread():
            thread.join(self.JOIN_TIMEOUT_S)
            if thread.is_alive():
                logger.warning("Speech capture worker did not exit in time")

    def _run_session(
        self,
        stop_event: threading.Event,
        on_result: ResultCallback,
        on_error: Optional[ErrorCallback],
    ) -> None:
        transcript: Optional[str] = None
        error: Optional[str] = None
        try:
            transcript = self._listen_once(stop_event)
        except Exception as e:
            logger.error(f"Speech recognition error: {e}")
            error = str(e) or type(e).__name__

        # Claim the session end; a concurrent stop() wins and suppresses delivery
        with self._lock:
            cancelled = stop_event.is_set()
            stop_event.set()
        if cancelled:
            return

        if error is not None:
            if on_error:
                on_error(error)
        elif transcript and transcript.strip():
            logger.info(f"Voice input: '{transcript}'")
            on_result(transcript.strip())
        elif on_error:
            on_error(NO_SPEECH)
