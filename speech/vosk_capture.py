from __future__ import annotations

import importlib.util
import json
import os
import queue
import threading
from typing import Any, Iterable, List, Optional

import numpy as np
from loguru import logger

from parser.config import DEFAULT_VOCABULARY, ParserVocabulary
from parser.text_utils import tokenize_text
from .base_capture import SpeechCapture
from .number_words import NUMBER_WORDS, spoken_numbers_to_digits


def build_speech_vocabulary(
    exercise_phrases: Iterable[str],
    vocabulary: ParserVocabulary = DEFAULT_VOCABULARY,
) -> List[str]:
    """Words the recognizer may emit: catalog words, number words, labels and fillers.

    Args:
        exercise_phrases: Canonical names and aliases from the exercise catalog
        vocabulary: Parser vocabulary contributing labels and filler words
    """
    words = set(NUMBER_WORDS)
    words.update(vocabulary.speech_words())
    for phrase in exercise_phrases:
        words.update(tokenize_text(phrase))
    return sorted(words)


class VoskSpeechCapture(SpeechCapture):
    """
    Offline speech capture using a Vosk model and the default microphone.

    The model is loaded lazily on the first session and reused afterwards.
    When a vocabulary is given the recognizer is constrained to it, which
    keeps exercise names and numbers from drifting into similar sounding
    everyday words. Spelled-out numbers in the recognized text are converted
    to digits before delivery.
    """

    CHANNELS = 1
    BLOCK_MS = 100
    DEFAULT_MODEL_PATH = "models/vosk/vosk-model-small-en-us-0.15"

    def __init__(
        self,
        model_path: Optional[str] = None,
        sample_rate: int = 16000,
        vocabulary: Optional[List[str]] = None,
        language: str = "en-US",
    ) -> None:
        super().__init__(language=language)
        self.model_path = model_path or self.DEFAULT_MODEL_PATH
        self.sample_rate = sample_rate
        self.vocabulary = list(vocabulary) if vocabulary else []
        self._model: Optional[Any] = None  # vosk.Model at runtime
        self._chunk_frames = int(self.sample_rate * self.BLOCK_MS / 1000)

    def _check_support(self) -> bool:
        if not os.path.isdir(self.model_path):
            logger.warning(f"No Vosk model found in {self.model_path}")
            return False
        for module in ("vosk", "sounddevice"):
            if importlib.util.find_spec(module) is None:
                logger.warning(f"Speech capture requires the '{module}' package")
                return False
        return True

    def _create_recognizer(self):
        from vosk import KaldiRecognizer, Model  # type: ignore

        if self._model is None:
            logger.info(f"Loading Vosk model: {self.model_path}")
            self._model = Model(model_path=self.model_path)
        recognizer = KaldiRecognizer(self._model, self.sample_rate)
        if self.vocabulary:
            try:
                recognizer.SetGrammar(json.dumps(self.vocabulary + ["[unk]"]))
                logger.info(f"Applied word list constraint with {len(self.vocabulary)} words")
            except Exception as e:
                logger.warning(f"SetGrammar failed: {e}, using unrestricted model")
        return recognizer

    def _listen_once(self, stop_event: threading.Event) -> Optional[str]:
        import sounddevice as sd  # type: ignore

        recognizer = self._create_recognizer()
        audio: "queue.Queue[np.ndarray]" = queue.Queue()

        def _audio_callback(indata: np.ndarray, frames: int, time_info, status) -> None:
            if status:
                logger.debug(f"Audio status: {status}")
            # float32 mono -> PCM16 for Kaldi
            audio.put((indata[:, 0] * 32767).astype(np.int16))

        stream = sd.InputStream(
            samplerate=self.sample_rate,
            channels=self.CHANNELS,
            blocksize=self._chunk_frames,
            dtype="float32",
            callback=_audio_callback,
        )
        with stream:
            while not stop_event.is_set():
                try:
                    chunk = audio.get(timeout=0.1)
                except queue.Empty:
                    continue
                if recognizer.AcceptWaveform(chunk.tobytes()):
                    text = (json.loads(recognizer.Result()).get("text") or "").strip()
                    text = text.replace("[unk]", "").strip()
                    if text:
                        logger.debug(f"Vosk recognized: '{text}'")
                        return spoken_numbers_to_digits(text)
        return None
