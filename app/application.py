"""Application initialization and lifecycle."""
from __future__ import annotations

import sys
from typing import Optional

from app.services import CleanupService, ExceptionHandlerService, SpeechCaptureCleanupService
from app.use_cases import (
    AddExerciseUseCase,
    CancelLastWorkoutUseCase,
    DeleteExerciseUseCase,
    LogWorkoutUseCase,
    ParseTranscriptUseCase,
    UpdateExerciseUseCase,
)
from config.service import ConfigurationService
from core.container import Container
from parser.catalog import load_builtin_exercises
from parser.exercise_resolver import ExerciseResolver
from parser.transcript_parser import TranscriptParser
from speech.factory import create_speech_capture
from speech.vosk_capture import build_speech_vocabulary
from storage.analytics import WorkoutAnalytics
from storage.custom_exercise_store import JsonCustomExerciseStore
from storage.exporter import DataExporter
from storage.session_logger import SessionLogger
from storage.workout_logger import ExcelWorkoutLogger


class Application:
    """Owns the application's collaborators and their lifecycle.

    Collaborators are registered in a Container as lazy factories, so a
    command that only parses text never opens the workbook or loads a speech
    model. Cleanup handlers run once, at exit or on an explicit ``cleanup``.

    Attributes:
        config: Configuration facade
        container: Registry of collaborators
        cleanup_service: Manages cleanup handlers
        exception_handler: Global exception handling
    """

    def __init__(
        self,
        config: ConfigurationService,
        container: Optional[Container] = None,
        session_logger: Optional[SessionLogger] = None,
        install_handlers: bool = True,
    ):
        """
        Args:
            config: Loaded configuration
            container: Pre-populated container (tests register fakes here)
            session_logger: Session log; None creates one under session_log_dir
            install_handlers: Install global exception hooks and the atexit cleanup
        """
        self.config = config
        self.container = container or Container()
        self.session = session_logger or SessionLogger(config.session_log_dir, level=config.log_level)

        self.cleanup_service = CleanupService()
        self.exception_handler = ExceptionHandlerService(self.session)

        self._register_services()

        if install_handlers:
            self.exception_handler.install()
            self.cleanup_service.install_atexit()

        self.cleanup_service.register(self._stop_speech_capture, "speech_capture")
        self.cleanup_service.register(self.session.log_end, "session_logger")

    def _register(self, name: str, factory) -> None:
        if not self.container.has(name):
            self.container.register_factory(name, factory)

    def _register_services(self) -> None:
        c = self.container
        cfg = self.config
        self._register("custom_store", lambda: JsonCustomExerciseStore(cfg.custom_exercises_path))
        self._register("workout_logger", lambda: ExcelWorkoutLogger(cfg.workouts_path))
        self._register("resolver", self._create_resolver)
        self._register("parser", lambda: TranscriptParser(c.get("resolver")))
        self._register("speech_capture", self._create_speech_capture)
        self._register("exporter", lambda: DataExporter(c.get("workout_logger"), resolver=c.get("resolver")))

        self._register("parse_transcript", lambda: ParseTranscriptUseCase(c.get("parser"), self.session))
        self._register("log_workout", lambda: LogWorkoutUseCase(c.get("workout_logger"), self.session))
        self._register("cancel_last", lambda: CancelLastWorkoutUseCase(c.get("workout_logger")))
        self._register("add_exercise", lambda: AddExerciseUseCase(c.get("resolver")))
        self._register("update_exercise", lambda: UpdateExerciseUseCase(c.get("resolver")))
        self._register("delete_exercise", lambda: DeleteExerciseUseCase(c.get("resolver")))

    def _create_resolver(self) -> ExerciseResolver:
        builtin = None
        if self.config.builtin_catalog_path:
            builtin = load_builtin_exercises(self.config.builtin_catalog_path)
        return ExerciseResolver(store=self.container.get("custom_store"), builtin=builtin)

    def _create_speech_capture(self):
        resolver: ExerciseResolver = self.container.get("resolver")
        phrases = []
        for name, aliases in resolver.list_all().items():
            phrases.append(name)
            phrases.extend(aliases)
        return create_speech_capture(
            self.config.engine,
            model_path=self.config.model_path,
            sample_rate=self.config.sample_rate,
            language=self.config.language,
            vocabulary=build_speech_vocabulary(phrases),
        )

    def get(self, name: str):
        """Shortcut for ``container.get``."""
        return self.container.get(name)

    def analytics(self) -> WorkoutAnalytics:
        """Analytics over a fresh snapshot of the workout log."""
        return WorkoutAnalytics(self.get("workout_logger").get_all_workouts())

    def log_session_info(self) -> None:
        self.session.log_kv(
            "APP",
            {
                "engine": self.config.engine,
                "python": sys.version.split(" ")[0],
            },
        )
        self.session.log_kv("CONFIG", self.config.to_dict())

    def _stop_speech_capture(self) -> None:
        # Only stop a capture that was actually built
        if "speech_capture" in self.container.built():
            SpeechCaptureCleanupService(self.container.get("speech_capture")).cleanup()

    def cleanup(self) -> None:
        """Execute cleanup through the cleanup service."""
        self.cleanup_service.cleanup()
        self.exception_handler.uninstall()
