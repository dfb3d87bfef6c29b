"""End-to-end tests for the command-line interface."""
import json

import pytest

import app.startup as startup
from app.startup import run_application

ENV_VARS = ("WORKOUT_DATA_DIR", "SPEECH_ENGINE", "SPEECH_MODEL_PATH", "DEBUG", "LOG_LEVEL")


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # Keep the global loguru handlers untouched between tests
    monkeypatch.setattr(startup, "configure_logging", lambda config_service: None)
    return tmp_path


def run(workspace, *argv):
    return run_application(["--data-dir", str(workspace / "data"), *argv])


class TestLogAndHistory:
    def test_log_transcript_then_history(self, workspace, capsys):
        # Act
        code = run(workspace, "log", "3 sets of 10 reps bench press at 135 pounds", "--date", "2024-03-04T09:00:00")
        history_code = run(workspace, "history")

        # Assert
        out = capsys.readouterr().out
        assert code == 0
        assert history_code == 0
        assert "Logged #1    Bench Press  3x10 @ 135" in out
        assert "2024-03-04" in out
        assert (workspace / "data" / "workouts.xlsx").exists()

    def test_field_overrides(self, workspace, capsys):
        code = run(workspace, "log", "squats 5 5 225", "--reps", "3", "--notes", "heavy")

        out = capsys.readouterr().out
        assert code == 0
        assert "Squats  5x3 @ 225  (heavy)" in out

    def test_incomplete_workout_not_logged(self, workspace, capsys):
        # Act
        code = run(workspace, "log", "bench press at 135 pounds")
        run(workspace, "history")

        # Assert
        out = capsys.readouterr().out
        assert code == 1
        assert "Please enter sets and reps" in out
        assert "No workouts logged yet." in out

    def test_history_by_exercise(self, workspace, capsys):
        run(workspace, "log", "deadlift 1 5 315", "--date", "2024-03-05T09:00:00")
        run(workspace, "log", "squats 5 5 225", "--date", "2024-03-05T09:30:00")
        capsys.readouterr()

        run(workspace, "history", "--exercise", "Deadlift")

        out = capsys.readouterr().out
        assert "Deadlift  1x5 @ 315" in out
        assert "Squats" not in out

    def test_cancel(self, workspace, capsys):
        run(workspace, "log", "squats 5 5 225")

        assert run(workspace, "cancel") == 0
        assert run(workspace, "cancel") == 0

        out = capsys.readouterr().out
        assert "Removed the last workout." in out
        assert "Nothing to remove." in out


class TestParse:
    def test_parse_shows_fields_without_logging(self, workspace, capsys):
        # Act
        code = run(workspace, "parse", "bench", "press", "10", "reps")

        # Assert
        out = capsys.readouterr().out
        assert code == 0
        assert "Exercise: Bench Press" in out
        assert "Sets:     -" in out
        assert "Missing:  sets" in out
        assert not (workspace / "data" / "workouts.xlsx").exists()


class TestExercises:
    def test_add_and_list_custom(self, workspace, capsys):
        # Act
        add_code = run(workspace, "exercises", "add", "zercher squat", "--aliases", "zercher, zs")
        run(workspace, "exercises", "list", "--custom")
        run(workspace, "parse", "zs 3 sets 5 reps")

        # Assert
        out = capsys.readouterr().out
        assert add_code == 0
        assert "Added Zercher Squat" in out
        assert "Zercher Squat (zercher, zs) [custom]" in out
        assert "Exercise: Zercher Squat" in out
        stored = json.loads((workspace / "data" / "custom_exercises.json").read_text())
        assert stored == {"Zercher Squat": ["zercher", "zs"]}

    def test_delete_builtin_refused(self, workspace, capsys):
        code = run(workspace, "exercises", "delete", "Bench Press")

        assert code == 1
        assert "builtin exercises cannot be deleted" in capsys.readouterr().out

    def test_suggest(self, workspace, capsys):
        code = run(workspace, "exercises", "suggest", "bench", "--limit", "2")

        out = capsys.readouterr().out
        assert code == 0
        assert len(out.strip().splitlines()) <= 2


class TestStats:
    def test_stats_summary(self, workspace, capsys):
        run(workspace, "log", "bench press 3 10 100")
        run(workspace, "log", "bench press 3 10 120")
        capsys.readouterr()

        code = run(workspace, "stats", "--exercise", "Bench Press")

        out = capsys.readouterr().out
        assert code == 0
        assert "Workouts:          1" in out
        assert "Total sets:        6" in out
        assert "Total volume:      6600" in out
        assert "Favorite exercise: Bench Press" in out
        assert "Bench Press - Max Weight:" in out

    def test_stats_empty(self, workspace, capsys):
        run(workspace, "stats")

        assert "Favorite exercise: -" in capsys.readouterr().out


class TestBackup:
    def test_export_then_import(self, workspace, capsys):
        # Arrange
        run(workspace, "log", "squats 5 5 225")
        run(workspace, "exercises", "add", "jm press", "--aliases", "jm")
        backup = workspace / "backup.json"

        # Act
        export_code = run(workspace, "export", str(backup))
        import_code = run_application(["--data-dir", str(workspace / "restored"), "import", str(backup)])

        # Assert
        out = capsys.readouterr().out
        assert export_code == 0
        assert import_code == 0
        assert "Imported 1 workouts" in out
        restored = json.loads((workspace / "restored" / "custom_exercises.json").read_text())
        assert restored == {"JM Press": ["jm"]}

    def test_invalid_backup_is_an_error(self, workspace, capsys):
        broken = workspace / "broken.json"
        broken.write_text("{")

        code = run(workspace, "import", str(broken))

        assert code == 1
        assert "not valid JSON" in capsys.readouterr().err


class TestStartup:
    def test_listen_without_model_reports_not_supported(self, workspace, capsys):
        code = run(workspace, "listen")

        assert code == 1
        assert "Voice input is not available" in capsys.readouterr().out

    def test_configuration_error_exit_code(self, workspace, monkeypatch, capsys):
        monkeypatch.setenv("SPEECH_ENGINE", "whisper")

        code = run(workspace, "history")

        assert code == 2
        assert "Configuration error" in capsys.readouterr().err

    def test_session_log_written(self, workspace):
        run(workspace, "history")

        logs = list((workspace / "logs" / "sessions").glob("workout_session_*.log"))
        assert len(logs) == 1
        text = logs[0].read_text(encoding="utf-8")
        assert "CONFIG" in text
        assert "=== SESSION END ===" in text
