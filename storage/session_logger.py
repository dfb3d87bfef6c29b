import json
import logging
import os
from datetime import datetime
from typing import Optional

from loguru import logger as loguru_logger


class SessionLogger:
    """Per-run session log file.

    Session markers and key/value dumps are written directly; everything the
    application logs through loguru at ``level`` or above is mirrored into the
    same file through a loguru sink.
    """

    def __init__(self, log_dir: str = "logs/sessions", level: str = "INFO", auto_start: bool = True):
        """
        Args:
            log_dir: Directory for session logs
            level: Minimum loguru level mirrored into the file
            auto_start: Whether to write the session start marker immediately
        """
        self.log_dir = log_dir
        self.level = level
        os.makedirs(self.log_dir, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        self.log_path = os.path.join(self.log_dir, f"workout_session_{timestamp}.log")

        self._py_logger = logging.getLogger(f"WorkoutSessionLogger_{timestamp}")
        self._py_logger.setLevel(logging.INFO)
        self._py_logger.propagate = False
        self._file_handler = logging.FileHandler(self.log_path, encoding="utf-8")
        formatter = logging.Formatter('[%(asctime)s] %(message)s', datefmt='%Y-%m-%d %H:%M:%S')
        self._file_handler.setFormatter(formatter)
        self._py_logger.handlers = [self._file_handler]

        self._sink_id: Optional[int] = None
        self.attach_loguru_sink()

        self._ended: bool = False
        if auto_start:
            self.log("=== SESSION START ===")

    def attach_loguru_sink(self) -> None:
        """Mirror loguru records into the session file."""
        if self._sink_id is None:
            self._sink_id = loguru_logger.add(
                self.log_path,
                format="[{time:YYYY-MM-DD HH:mm:ss}] {level}: {message}",
                level=self.level,
            )

    def detach_loguru_sink(self) -> None:
        if self._sink_id is not None:
            try:
                loguru_logger.remove(self._sink_id)
            except ValueError:
                # Sink already removed, e.g. by a global logger.remove()
                pass
            finally:
                self._sink_id = None

    def log(self, message: str) -> None:
        self._py_logger.info(message)

    def log_kv(self, key: str, value) -> None:
        """Log a key-value pair such as the active configuration."""
        if isinstance(value, (dict, list)):
            value_str = json.dumps(value, indent=2, default=str)
        else:
            value_str = str(value)
        self.log(f"{key}: {value_str}")

    def log_end(self) -> None:
        """Mark session end (idempotent)."""
        if not self._ended:
            self._ended = True
            self.log("=== SESSION END ===")
            self.detach_loguru_sink()
            self._file_handler.close()
            self._py_logger.removeHandler(self._file_handler)
