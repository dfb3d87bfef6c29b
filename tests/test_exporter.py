"""Tests for JSON backup and restore."""
import json
from datetime import datetime

import pytest

from core.exceptions import ValidationError
from parser.exercise_resolver import ExerciseResolver
from storage import DataExporter, ExcelWorkoutLogger, JsonCustomExerciseStore, WorkoutAnalytics, WorkoutEntry


@pytest.fixture
def workout_logger(tmp_path):
    return ExcelWorkoutLogger(str(tmp_path / "workouts.xlsx"))


@pytest.fixture
def store(tmp_path):
    return JsonCustomExerciseStore(str(tmp_path / "custom.json"))


class TestExport:
    def test_document_shape(self, workout_logger, store):
        # Arrange
        workout_logger.add_workout(WorkoutEntry(exercise="Squats", sets=5, reps=5, weight=225.0,
                                                date="2024-03-04T09:00:00"))
        store.save_custom_exercises({"Zercher Squat": ["zercher"]})
        exporter = DataExporter(workout_logger, custom_store=store)

        # Act
        data = exporter.export_data()

        # Assert
        assert data["version"] == 1
        assert "exportDate" in data
        assert data["customExercises"] == {"Zercher Squat": ["zercher"]}
        assert len(data["workouts"]) == 1
        assert data["workouts"][0]["exercise"] == "Squats"
        assert data["workouts"][0]["id"] == 1

    def test_write_creates_file(self, workout_logger, tmp_path):
        exporter = DataExporter(workout_logger)

        target = exporter.write(tmp_path / "backups" / "backup.json")

        assert json.loads(target.read_text(encoding="utf-8"))["workouts"] == []


class TestImport:
    def test_round_trip_into_fresh_storage(self, workout_logger, store, tmp_path):
        # Arrange
        workout_logger.add_workout(WorkoutEntry(exercise="Bench Press", sets=3, reps=10, weight=135.0,
                                                date="2024-03-04T09:00:00", notes="ok"))
        store.save_custom_exercises({"JM Press": ["jm"]})
        path = DataExporter(workout_logger, custom_store=store).write(tmp_path / "backup.json")

        fresh_logger = ExcelWorkoutLogger(str(tmp_path / "restored.xlsx"))
        fresh_logger.add_workout(WorkoutEntry(exercise="Plank", sets=1, reps=1))
        resolver = ExerciseResolver(store=JsonCustomExerciseStore(str(tmp_path / "restored.json")))

        # Act
        imported = DataExporter(fresh_logger, resolver=resolver).read(path)

        # Assert
        assert imported == 1
        restored = fresh_logger.get_workouts_by_exercise("Bench Press")[0]
        assert restored.id == 2
        assert (restored.sets, restored.reps, restored.weight, restored.notes) == (3, 10, 135.0, "ok")
        assert resolver.resolve("jm") == "JM Press"

    def test_missing_sections_are_skipped(self, workout_logger, store):
        store.save_custom_exercises({"JM Press": ["jm"]})
        exporter = DataExporter(workout_logger, custom_store=store)

        assert exporter.import_data({"version": 1}) == 0
        assert store.get_custom_exercises() == {"JM Press": ["jm"]}

    @pytest.mark.parametrize("document", [
        [],
        {"workouts": ["bench"]},
        {"workouts": [{"exercise": "Squats", "sets": "many", "reps": 5}]},
        {"customExercises": ["JM Press"]},
    ])
    def test_malformed_documents_rejected(self, workout_logger, document):
        with pytest.raises(ValidationError):
            DataExporter(workout_logger).import_data(document)

    def test_invalid_json_file(self, workout_logger, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{", encoding="utf-8")

        with pytest.raises(ValidationError):
            DataExporter(workout_logger).read(path)


class TestBrowserBackups:
    """Backups whose dates carry a UTC "Z" suffix."""

    def test_utc_dates_are_stored_naive_and_summarized(self, workout_logger):
        # Arrange
        document = {
            "version": 1,
            "workouts": [
                {"id": 7, "exercise": "Squats", "sets": 5, "reps": 5, "weight": 225,
                 "date": "2026-10-01T10:00:00.000Z", "timestamp": 1790848800000},
            ],
        }

        # Act
        imported = DataExporter(workout_logger).import_data(document)
        workouts = workout_logger.get_all_workouts()
        summary = WorkoutAnalytics(workouts).summary(now=datetime(2026, 10, 17))

        # Assert
        assert imported == 1
        assert not workouts[0].date.endswith("Z")
        assert "+" not in workouts[0].date
        assert summary["total_workouts"] == 1
        assert summary["total_volume"] == 5625
        assert sum(summary["weekly_volume"].values()) == 5625.0

    def test_malformed_aliases_rejected_before_anything_is_written(self, workout_logger, store):
        # Arrange
        document = {
            "workouts": [{"exercise": "Squats", "sets": 5, "reps": 5}],
            "customExercises": {"Zercher Squat": "zercher"},
        }

        # Act / Assert
        with pytest.raises(ValidationError):
            DataExporter(workout_logger, custom_store=store).import_data(document)
        assert workout_logger.get_all_workouts() == []
        assert store.get_custom_exercises() == {}
