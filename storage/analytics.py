"""Aggregate statistics over the workout history.

Builds a pandas DataFrame from logged WorkoutEntry records and derives the
numbers shown on the stats screen: training days, total sets, total volume,
favorite exercise, weekly volume and per-exercise progress.
"""
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd
from loguru import logger

from .workout_logger import WorkoutEntry

WEEKS_OF_HISTORY = 8
COLUMNS = ["id", "date", "exercise", "sets", "reps", "weight"]


class WorkoutAnalytics:
    """Read-only analytics over a snapshot of workouts."""

    def __init__(self, workouts: Iterable[WorkoutEntry]):
        self.df = self._to_frame(list(workouts))

    @staticmethod
    def _to_frame(workouts: List[WorkoutEntry]) -> pd.DataFrame:
        rows = [
            {
                "id": w.id,
                "date": w.date,
                "exercise": w.exercise,
                "sets": w.sets,
                "reps": w.reps,
                "weight": w.weight,
            }
            for w in workouts
        ]
        df = pd.DataFrame(rows, columns=COLUMNS)
        # Aware values such as "Z" exports become naive UTC; naive values are kept as-is
        df["date"] = pd.to_datetime(df["date"], errors="coerce", utc=True, format="ISO8601").dt.tz_convert(None)
        for col in ("sets", "reps", "weight"):
            df[col] = pd.to_numeric(df[col], errors="coerce").fillna(0)
        invalid = int(df["date"].isna().sum())
        if invalid:
            logger.warning(f"Ignoring {invalid} workouts with unreadable dates")
            df = df.dropna(subset=["date"])
        df["day"] = df["date"].dt.normalize()
        df["volume"] = df["sets"] * df["reps"] * df["weight"]
        return df

    def summary(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Headline numbers for the stats screen.

        Args:
            now: Reference time for the weekly window (defaults to the current time)

        Returns:
            Dict with total_workouts (distinct training days), total_sets,
            total_volume (rounded), favorite_exercise ("-" when there is no
            history) and weekly_volume
        """
        df = self.df
        return {
            "total_workouts": int(df["day"].nunique()),
            "total_sets": int(df["sets"].sum()),
            "total_volume": int(round(float(df["volume"].sum()))),
            "favorite_exercise": self.favorite_exercise(),
            "weekly_volume": self.weekly_volume(now),
        }

    def favorite_exercise(self) -> str:
        if self.df.empty:
            return "-"
        # First-seen order breaks ties
        counts = self.df.groupby("exercise", sort=False).size()
        return str(counts.idxmax())

    def weekly_volume(self, now: Optional[datetime] = None) -> Dict[str, float]:
        """Volume per week (weeks start on Sunday) for the last eight weeks, oldest first."""
        now = now or datetime.now()
        cutoff = pd.Timestamp(now) - timedelta(weeks=WEEKS_OF_HISTORY)
        recent = self.df[self.df["date"] >= cutoff]
        if recent.empty:
            return {}

        # Monday is weekday 0; shift so that Sunday starts the week
        offset = pd.to_timedelta((recent["day"].dt.weekday + 1) % 7, unit="D")
        week_start = (recent["day"] - offset).dt.strftime("%Y-%m-%d")
        weekly = recent.groupby(week_start)["volume"].sum().sort_index()
        return {week: float(volume) for week, volume in weekly.items()}

    def exercise_progress(self, exercise: str) -> List[Dict[str, Any]]:
        """Heaviest weight per day for one exercise, sorted by date."""
        subset = self.df[self.df["exercise"] == exercise]
        if subset.empty:
            return []
        daily = subset.groupby("day")["weight"].max().sort_index()
        return [
            {"date": day.strftime("%Y-%m-%d"), "max_weight": float(weight)}
            for day, weight in daily.items()
        ]
