"""
Voice narration for camera status.

Speech runs on its own worker thread so announcing never blocks the
event loop or the capture path.
"""

import queue
import threading
from abc import ABC, abstractmethod
from typing import Optional

import pyttsx3

from visionmate.core.config import NarrationConfig
from visionmate.utils.logger import get_logger

logger = get_logger(__name__)

# pyttsx3's default speaking rate in words per minute
_BASE_WORDS_PER_MINUTE = 200


class Narrator(ABC):
    """Speaks short status messages to the user."""

    @abstractmethod
    def announce(self, message: str) -> None:
        """Queue a message for speech. Must not block."""

    def close(self) -> None:
        """Release speech resources."""


class NullNarrator(Narrator):
    """Narrator that only logs."""

    def announce(self, message: str) -> None:
        logger.debug(f"Narration suppressed: {message}")


class Pyttsx3Narrator(Narrator):
    """
    Offline text-to-speech through pyttsx3.

    Messages are spoken in order by a single daemon worker.
    """

    def __init__(self, config: NarrationConfig):
        self._config = config
        self._engine = pyttsx3.init()
        self._engine.setProperty("rate", int(_BASE_WORDS_PER_MINUTE * config.rate))
        self._engine.setProperty("volume", config.volume)

        self._queue: "queue.Queue[Optional[str]]" = queue.Queue()
        self._worker = threading.Thread(
            target=self._speech_worker, name="narrator", daemon=True
        )
        self._worker.start()
        logger.info("Speech narration enabled")

    def announce(self, message: str) -> None:
        if message:
            self._queue.put(message)

    def close(self) -> None:
        if self._worker.is_alive():
            self._queue.put(None)
            self._worker.join(timeout=5.0)

    def _speech_worker(self) -> None:
        while True:
            text = self._queue.get()
            if text is None:
                break
            try:
                self._engine.say(text)
                self._engine.runAndWait()
            except RuntimeError as e:
                logger.warning(f"Speech failed: {e}")
            finally:
                self._queue.task_done()


def create_narrator(config: NarrationConfig) -> Narrator:
    """
    Build the narrator for a configuration.

    Falls back to NullNarrator when narration is disabled or the speech
    engine cannot start (no audio driver).
    """
    if not config.enabled:
        return NullNarrator()

    try:
        return Pyttsx3Narrator(config)
    except (OSError, RuntimeError) as e:
        logger.warning(f"Speech engine unavailable, narration disabled: {e}")
        return NullNarrator()
