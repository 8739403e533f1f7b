"""Interfaces for the speech-to-text and translation services."""

from abc import ABC, abstractmethod
from typing import List

from .models import Track


class Transcriber(ABC):
    """Abstract base class for transcription services."""

    @abstractmethod
    def transcribe(self, audio_path: str, episode_id: str, title: str = "", duration: str = "") -> Track:
        """
        Transcribes the given audio file into a timestamped track.

        Args:
            audio_path: Path to the audio file.
            episode_id: Id recorded on the resulting track.
            title: Episode title recorded on the track.
            duration: Feed-reported duration recorded on the track.

        Returns:
            A Track whose segment ids start at 0.

        Raises:
            TranscriptionError: If transcription fails.
            FileNotFoundError: If the audio file doesn't exist.
        """
        pass


class Translator(ABC):
    """Abstract base class for Arabic to English translation services."""

    @abstractmethod
    def translate(self, text: str) -> str:
        """
        Translates a single string.

        Raises:
            TranslationError: If translation fails.
        """
        pass

    def translate_batch(self, texts: List[str]) -> List[str]:
        """
        Translates several strings, returning results in the same order.

        Subclasses that can batch natively should override this.

        Raises:
            TranslationError: If translation fails.
        """
        return [self.translate(text) for text in texts]
