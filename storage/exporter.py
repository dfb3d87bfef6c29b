"""JSON backup and restore of workouts plus the custom exercise layer."""
from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Union

from loguru import logger

from core.exceptions import PersistenceError, ValidationError
from .workout_logger import ExcelWorkoutLogger, WorkoutEntry

EXPORT_VERSION = 1


class DataExporter:
    """
    Builds and restores backup documents of the form
    ``{version, exportDate, workouts, customExercises}``.

    Custom exercises are read from and written through the resolver when one
    is given, so an import is visible to resolution immediately. Without a
    resolver the custom exercise store is used directly.
    """

    def __init__(self, workout_logger: ExcelWorkoutLogger, resolver=None, custom_store=None):
        self.workout_logger = workout_logger
        self.resolver = resolver
        self.custom_store = custom_store

    def _custom_exercises(self) -> Dict[str, Any]:
        if self.resolver is not None:
            return self.resolver.custom
        if self.custom_store is not None:
            return self.custom_store.get_custom_exercises()
        return {}

    def export_data(self) -> Dict[str, Any]:
        workouts = [w.to_dict() for w in self.workout_logger.get_all_workouts()]
        return {
            "version": EXPORT_VERSION,
            "exportDate": datetime.now().isoformat(timespec="seconds"),
            "workouts": workouts,
            "customExercises": self._custom_exercises(),
        }

    def write(self, path: Union[str, Path]) -> Path:
        """Write a backup file and return its path."""
        target = Path(path)
        data = self.export_data()
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with open(target, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise PersistenceError(f"Failed to write backup {target}: {e}") from e
        logger.info(f"Exported {len(data['workouts'])} workouts to {target}")
        return target

    def import_data(self, data: Dict[str, Any]) -> int:
        """
        Restore a backup document.

        Workouts are appended with fresh ids; the custom exercise layer is
        replaced wholesale when the document carries one.

        Returns:
            int: Number of workouts imported

        Raises:
            ValidationError: If the document or one of its workouts is malformed
            PersistenceError: If writing to storage fails
        """
        if not isinstance(data, dict):
            raise ValidationError("Backup must be a JSON object")

        # Validate everything before writing anything
        custom = data.get("customExercises")
        if custom:
            if not isinstance(custom, dict):
                raise ValidationError("customExercises must be an object")
            for name, aliases in custom.items():
                if not isinstance(aliases, list) or not all(isinstance(a, str) for a in aliases):
                    raise ValidationError(f"Aliases of '{name}' must be a list of strings")

        entries = []
        workouts = data.get("workouts")
        if isinstance(workouts, list):
            for raw in workouts:
                if not isinstance(raw, dict):
                    raise ValidationError(f"Invalid workout record: {raw!r}")
                record = {k: v for k, v in raw.items() if k != "id"}
                try:
                    entries.append(WorkoutEntry.from_dict(record))
                except (TypeError, ValueError) as e:
                    raise ValidationError(f"Invalid workout record {record!r}: {e}") from e

        imported = self.workout_logger.import_workouts(entries) if entries else 0
        if custom:
            self._replace_custom(custom)

        logger.info(f"Imported {imported} workouts")
        return imported

    def _replace_custom(self, custom: Dict[str, Any]) -> None:
        if self.resolver is not None:
            self.resolver.replace_custom(custom)
        elif self.custom_store is not None:
            self.custom_store.save_custom_exercises(custom)

    def read(self, path: Union[str, Path]) -> int:
        """Import a backup file written by ``write``."""
        source = Path(path)
        try:
            with open(source, "r", encoding="utf-8") as f:
                data: Optional[Dict[str, Any]] = json.load(f)
        except OSError as e:
            raise PersistenceError(f"Failed to read backup {source}: {e}") from e
        except json.JSONDecodeError as e:
            raise ValidationError(f"Backup {source} is not valid JSON: {e}") from e
        return self.import_data(data)
