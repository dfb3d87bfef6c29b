"""Tests for application wiring and lifecycle."""
import threading

import pytest
from unittest.mock import Mock

from app.application import Application
from app.cli import build_parser, dispatch
from config.config import AppConfig, CatalogConfig, SpeechConfig, StorageConfig
from config.service import ConfigurationService
from core.container import Container
from speech.base_capture import SpeechCapture


class ScriptedCapture(SpeechCapture):
    def __init__(self, transcript):
        super().__init__()
        self.transcript = transcript

    def _check_support(self):
        return True

    def _listen_once(self, stop_event: threading.Event):
        return self.transcript


@pytest.fixture
def config(tmp_path):
    return ConfigurationService(AppConfig(
        speech=SpeechConfig(),
        storage=StorageConfig(
            workouts_path=str(tmp_path / "workouts.xlsx"),
            custom_exercises_path=str(tmp_path / "custom.json"),
            session_log_dir=str(tmp_path / "sessions"),
        ),
        catalog=CatalogConfig(),
    ))


def make_app(config, **services):
    container = Container()
    for name, instance in services.items():
        container.register(name, instance)
    return Application(config, container=container, session_logger=Mock(), install_handlers=False)


class TestWiring:
    def test_services_are_lazy(self, config, tmp_path):
        # Act
        application = make_app(config)

        # Assert
        assert application.container.built() == []
        assert not (tmp_path / "workouts.xlsx").exists()

    def test_parser_shares_resolver(self, config):
        application = make_app(config)

        parser = application.get("parser")

        assert parser.resolver is application.get("resolver")

    def test_registered_fakes_are_kept(self, config):
        fake_logger = Mock()
        application = make_app(config, workout_logger=fake_logger)

        assert application.get("log_workout").workout_logger is fake_logger

    def test_custom_builtin_catalog(self, tmp_path):
        # Arrange
        catalog = tmp_path / "catalog.json"
        catalog.write_text('{"groups": [{"group": "legs", "items": [{"name": "Box Squat", "aliases": ["box"]}]}]}')
        config = ConfigurationService(AppConfig(
            speech=SpeechConfig(),
            storage=StorageConfig(custom_exercises_path=str(tmp_path / "custom.json")),
            catalog=CatalogConfig(builtin_path=str(catalog)),
        ))

        # Act
        resolver = make_app(config).get("resolver")

        # Assert
        assert list(resolver.list_all()) == ["Box Squat"]


class TestListen:
    def test_listen_and_log(self, config, capsys):
        # Arrange
        application = make_app(config, speech_capture=ScriptedCapture("squats 5 5 225"))
        args = build_parser().parse_args(["listen", "--log"])

        # Act
        code = dispatch(application, args)

        # Assert
        out = capsys.readouterr().out
        assert code == 0
        assert 'Heard: "squats 5 5 225"' in out
        assert "Logged #1" in out
        assert application.get("workout_logger").get_workout(1).exercise == "Squats"

    def test_incomplete_voice_input_not_logged(self, config, capsys):
        application = make_app(config, speech_capture=ScriptedCapture("bench press"))
        args = build_parser().parse_args(["listen", "--log"])

        code = dispatch(application, args)

        assert code == 1
        assert "Not logged" in capsys.readouterr().out

    def test_no_speech(self, config, capsys):
        application = make_app(config, speech_capture=ScriptedCapture(None))
        args = build_parser().parse_args(["listen"])

        code = dispatch(application, args)

        assert code == 1
        assert "No speech was detected" in capsys.readouterr().out


class TestCleanup:
    def test_cleanup_stops_built_capture_and_ends_session(self, config):
        # Arrange
        capture = Mock()
        capture.is_listening = False
        application = make_app(config, speech_capture=capture)

        # Act
        application.cleanup()
        application.cleanup()

        # Assert
        capture.stop.assert_called_once()
        application.session.log_end.assert_called_once()

    def test_cleanup_does_not_build_capture(self, config):
        application = make_app(config)

        application.cleanup()

        assert "speech_capture" not in application.container.built()
