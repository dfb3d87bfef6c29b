"""JSON-file persistence for the custom exercise layer."""
from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from threading import Lock
from typing import Dict, List, Mapping, Optional, Sequence

from loguru import logger

from core.exceptions import PersistenceError


class JsonCustomExerciseStore:
    """Stores the whole custom layer as one JSON object.

    Every save overwrites the file with the complete mapping. The new content
    is written to a temporary file in the same directory and moved over the
    old one, so a failed save never leaves a half-written catalog behind.
    """

    def __init__(self, file_path: Optional[str] = None) -> None:
        self.file_path = Path(file_path) if file_path else Path("data/custom_exercises.json")
        self.lock = Lock()

    def get_custom_exercises(self) -> Dict[str, List[str]]:
        with self.lock:
            if not self.file_path.exists():
                return {}
            try:
                with open(self.file_path, "r", encoding="utf-8") as f:
                    data = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                raise PersistenceError(f"Failed to load {self.file_path}: {e}") from e

        if not isinstance(data, dict):
            raise PersistenceError(f"Expected an object in {self.file_path}, got {type(data).__name__}")
        for name, aliases in data.items():
            if not isinstance(aliases, list):
                raise PersistenceError(f"Aliases of '{name}' in {self.file_path} must be a list")
        return {str(name): [str(a) for a in aliases] for name, aliases in data.items()}

    def save_custom_exercises(self, exercises: Mapping[str, Sequence[str]]) -> None:
        payload = {name: list(aliases) for name, aliases in exercises.items()}
        with self.lock:
            tmp_name = None
            try:
                self.file_path.parent.mkdir(parents=True, exist_ok=True)
                fd, tmp_name = tempfile.mkstemp(
                    prefix=".custom_exercises.", suffix=".tmp", dir=str(self.file_path.parent)
                )
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(payload, f, indent=2, ensure_ascii=False)
                os.replace(tmp_name, self.file_path)
                tmp_name = None
            except OSError as e:
                raise PersistenceError(f"Failed to save {self.file_path}: {e}") from e
            finally:
                if tmp_name is not None and os.path.exists(tmp_name):
                    os.remove(tmp_name)
        logger.debug(f"Saved {len(payload)} custom exercises to {self.file_path}")
