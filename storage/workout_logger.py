from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date as date_type, datetime
from pathlib import Path
from threading import Lock
from zipfile import BadZipFile
from typing import Any, Dict, Iterable, List, Optional, Union

from loguru import logger
from openpyxl import Workbook, load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from core.exceptions import PersistenceError

HEADER = ["Id", "Date", "Exercise", "Sets", "Reps", "Weight", "Notes", "Timestamp"]
WORKOUTS_SHEET = "Workouts"
META_SHEET = "Meta"

DateLike = Union[str, date_type, datetime]


@dataclass
class WorkoutEntry:
    """One confirmed, persisted workout record."""
    exercise: str
    sets: int
    reps: int
    weight: Optional[float] = None
    notes: str = ""
    date: str = field(default_factory=lambda: datetime.now().isoformat(timespec="seconds"))
    timestamp: int = field(default_factory=lambda: int(datetime.now().timestamp() * 1000))
    id: Optional[int] = None

    @property
    def day(self) -> str:
        """Calendar day (YYYY-MM-DD) the workout belongs to."""
        return _day_of(self.date)

    @property
    def volume(self) -> float:
        return (self.sets or 0) * (self.reps or 0) * (self.weight or 0)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WorkoutEntry":
        entry = cls(
            exercise=str(data.get("exercise", "")),
            sets=int(data.get("sets") or 0),
            reps=int(data.get("reps") or 0),
            weight=float(data["weight"]) if data.get("weight") not in (None, "") else None,
            notes=str(data.get("notes") or ""),
            id=int(data["id"]) if data.get("id") is not None else None,
        )
        if data.get("date"):
            entry.date = normalize_iso_date(data["date"])
        if data.get("timestamp") is not None:
            entry.timestamp = int(data["timestamp"])
        return entry


def normalize_iso_date(value: DateLike) -> str:
    """Naive local ISO timestamp for a date, datetime or ISO string.

    Accepts the "Z"-suffixed UTC form browsers export
    ("2026-10-01T10:00:00.000Z"); aware values are converted to local time.

    Raises:
        ValueError: If the string is not an ISO date
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date_type):
        parsed = datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed.isoformat(timespec="seconds")


def _day_of(value: DateLike) -> str:
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date_type):
        return value.isoformat()
    return datetime.fromisoformat(str(value)).date().isoformat()


class ExcelWorkoutLogger:
    """Workout history kept in an Excel workbook.

    Rows live on the "Workouts" sheet; the "Meta" sheet holds the next id so
    ids are never reused after a delete.
    """

    def __init__(self, file_path: Optional[str] = None) -> None:
        self.file_path = Path(file_path) if file_path else Path("data/workouts.xlsx")
        self.lock = Lock()
        self._ensure_workbook()

    def _ensure_workbook(self) -> None:
        with self.lock:
            if not self.file_path.exists():
                self.file_path.parent.mkdir(parents=True, exist_ok=True)
                wb = Workbook()
                ws = wb.active
                ws.title = WORKOUTS_SHEET
                ws.append(HEADER)
                meta = wb.create_sheet(META_SHEET)
                meta.append(["next_id", 1])
                wb.save(self.file_path)
                logger.info(f"Created workout log {self.file_path}")

    def _load(self):
        try:
            return load_workbook(self.file_path)
        except (OSError, InvalidFileException, BadZipFile, KeyError) as e:
            raise PersistenceError(f"Failed to open workout log {self.file_path}: {e}") from e

    def _save(self, wb) -> None:
        try:
            wb.save(self.file_path)
        except OSError as e:
            raise PersistenceError(f"Failed to save workout log {self.file_path}: {e}") from e

    @staticmethod
    def _row_to_entry(row) -> WorkoutEntry:
        row_id, day, exercise, sets, reps, weight, notes, timestamp = row[:8]
        return WorkoutEntry(
            id=int(row_id),
            date=str(day),
            exercise=str(exercise or ""),
            sets=int(sets or 0),
            reps=int(reps or 0),
            weight=float(weight) if weight is not None else None,
            notes=str(notes or ""),
            timestamp=int(timestamp or 0),
        )

    @staticmethod
    def _entry_to_row(entry: WorkoutEntry) -> list:
        return [entry.id, entry.date, entry.exercise, entry.sets, entry.reps,
                entry.weight, entry.notes, entry.timestamp]

    def _append(self, wb, entry: WorkoutEntry) -> int:
        meta = wb[META_SHEET]
        next_id = int(meta["B1"].value or 1)
        entry.id = next_id
        wb[WORKOUTS_SHEET].append(self._entry_to_row(entry))
        meta["B1"] = next_id + 1
        return next_id

    def add_workout(self, entry: WorkoutEntry) -> int:
        with self.lock:
            wb = self._load()
            workout_id = self._append(wb, entry)
            self._save(wb)
        logger.info(f"Logged workout #{workout_id}: {entry.exercise} {entry.sets}x{entry.reps}")
        return workout_id

    def import_workouts(self, entries: Iterable[WorkoutEntry]) -> int:
        """Append entries in one write, assigning fresh ids."""
        count = 0
        with self.lock:
            wb = self._load()
            for entry in entries:
                self._append(wb, entry)
                count += 1
            self._save(wb)
        return count

    def get_all_workouts(self) -> List[WorkoutEntry]:
        with self.lock:
            wb = self._load()
            ws = wb[WORKOUTS_SHEET]
            return [
                self._row_to_entry(row)
                for row in ws.iter_rows(min_row=2, values_only=True)
                if row and row[0] is not None
            ]

    def get_workout(self, workout_id: int) -> Optional[WorkoutEntry]:
        for entry in self.get_all_workouts():
            if entry.id == workout_id:
                return entry
        return None

    def get_workouts_by_date(self, day: DateLike) -> List[WorkoutEntry]:
        target = _day_of(day)
        return [w for w in self.get_all_workouts() if w.day == target]

    def get_todays_workouts(self) -> List[WorkoutEntry]:
        return self.get_workouts_by_date(datetime.now())

    def get_workouts_by_day(self) -> Dict[str, List[WorkoutEntry]]:
        """Workouts grouped by day, most recent day first."""
        grouped: Dict[str, List[WorkoutEntry]] = {}
        for workout in self.get_all_workouts():
            grouped.setdefault(workout.day, []).append(workout)
        return {day: grouped[day] for day in sorted(grouped, reverse=True)}

    def get_workouts_by_exercise(self, exercise: str) -> List[WorkoutEntry]:
        matching = [w for w in self.get_all_workouts() if w.exercise == exercise]
        return sorted(matching, key=lambda w: w.date)

    def update_workout(self, workout_id: int, updates: Dict[str, Any]) -> WorkoutEntry:
        with self.lock:
            wb = self._load()
            ws = wb[WORKOUTS_SHEET]
            for row in ws.iter_rows(min_row=2):
                if row[0].value == workout_id:
                    entry = self._row_to_entry([c.value for c in row])
                    for key, value in updates.items():
                        if key != "id" and hasattr(entry, key):
                            setattr(entry, key, value)
                    for cell, value in zip(row, self._entry_to_row(entry)):
                        cell.value = value
                    self._save(wb)
                    logger.info(f"Updated workout #{workout_id}")
                    return entry
        raise PersistenceError(f"Workout not found: {workout_id}")

    def delete_workout(self, workout_id: int) -> bool:
        with self.lock:
            wb = self._load()
            ws = wb[WORKOUTS_SHEET]
            for index, row in enumerate(ws.iter_rows(min_row=2, values_only=True), start=2):
                if row[0] == workout_id:
                    ws.delete_rows(index, 1)
                    self._save(wb)
                    logger.info(f"Deleted workout #{workout_id}")
                    return True
        return False

    def clear_all_workouts(self) -> None:
        with self.lock:
            wb = self._load()
            ws = wb[WORKOUTS_SHEET]
            if ws.max_row > 1:
                ws.delete_rows(2, ws.max_row - 1)
            self._save(wb)
        logger.info("Cleared all workouts")

    def cancel_last(self) -> bool:
        with self.lock:
            wb = self._load()
            ws = wb[WORKOUTS_SHEET]
            if ws.max_row <= 1:
                return False
            ws.delete_rows(ws.max_row, 1)
            self._save(wb)
            return True
