"""Handles Speech-to-Text transcription using Whisper."""

import whisper
import logging
import torch
from typing import Any, Dict
import os

from .base import Transcriber
from .models import Track, Segment
from .exceptions import TranscriptionError

logger = logging.getLogger(__name__)

# Podcasts are Arabic; Whisper's own detection is unreliable because of English ads at the start
TRACK_LANGUAGE = "arabic"
WHISPER_LANGUAGE = "ar"

def track_from_whisper_result(result: Dict[str, Any], episode_id: str, title: str = "", duration: str = "") -> Track:
    """Builds a Track from a Whisper-style result dict (`segments` with start/end/text)."""
    segments = []
    for seg_data in result.get('segments') or []:
        if 'start' in seg_data and 'end' in seg_data and 'text' in seg_data:
            segments.append(Segment(
                id=len(segments),
                start=float(seg_data['start']),
                end=float(seg_data['end']),
                text=seg_data['text'].strip(),
            ))
        else:
            logger.warning(f"Skipping incomplete segment data: {seg_data}")

    total = result.get('duration')
    if total is None and segments:
        total = segments[-1].end
    return Track(
        id=episode_id,
        title=title,
        duration=duration,
        language=TRACK_LANGUAGE,
        transcription_duration=float(total) if total is not None else None,
        segments=segments,
    )

class WhisperTranscriber(Transcriber):
    """Implements transcription using OpenAI's Whisper model."""

    def __init__(self, model_name: str = "medium", device: str = "cuda", fp16: bool = True):
        """
        Initializes the WhisperTranscriber.

        Args:
            model_name: The name of the Whisper model to use. Must be multilingual (no ".en").
            device: The device to run the model on ("cuda" or "cpu").
            fp16: Whether to use float16 precision (faster on compatible GPUs).

        Raises:
            ValueError: If the specified device or model is invalid.
            TranscriptionError: If the model fails to load.
        """
        self.model_name = model_name
        self.device = device
        self.fp16 = fp16

        if self.model_name.endswith(".en"):
            raise ValueError(f"Whisper model '{self.model_name}' is English-only and cannot transcribe Arabic.")
        if self.device == "cuda" and not torch.cuda.is_available():
            logger.warning("CUDA device requested but not available. Falling back to CPU.")
            self.device = "cpu"
        elif self.device not in ["cuda", "cpu"]:
            raise ValueError(f"Invalid device specified: {self.device}. Choose 'cuda' or 'cpu'.")

        logger.info(f"Initializing WhisperTranscriber with model '{self.model_name}' on device '{self.device}' (FP16: {self.fp16})")
        try:
            self.model = whisper.load_model(self.model_name, device=self.device)
            logger.info(f"Whisper model '{self.model_name}' loaded successfully.")
        except Exception as e:
            logger.error(f"Failed to load Whisper model '{self.model_name}': {e}", exc_info=True)
            raise TranscriptionError(f"Failed to load Whisper model '{self.model_name}': {e}") from e

    def transcribe(self, audio_path: str, episode_id: str, title: str = "", duration: str = "") -> Track:
        """
        Transcribes the audio file using the loaded Whisper model.

        Args:
            audio_path: Path to the audio file (WAV format recommended).
            episode_id: Id recorded on the resulting track.
            title: Episode title recorded on the track.
            duration: Feed-reported duration recorded on the track.

        Returns:
            A Track tagged as Arabic.

        Raises:
            FileNotFoundError: If the audio file doesn't exist.
            TranscriptionError: If transcription fails during processing.
        """
        logger.info(f"Starting transcription for: {audio_path}")
        if not os.path.exists(audio_path):
            raise FileNotFoundError(f"Audio file not found: {audio_path}")

        try:
            result = self.model.transcribe(
                audio_path,
                language=WHISPER_LANGUAGE,
                fp16=self.fp16 if self.device == "cuda" else False, # FP16 only works on CUDA
                verbose=None
            )
        except Exception as e:
            logger.error(f"Error during Whisper transcription process for {audio_path}: {e}", exc_info=True)
            raise TranscriptionError(f"Whisper transcription failed for {audio_path}: {e}") from e

        if 'segments' not in result:
            logger.warning("Transcription result did not contain 'segments'.")
        track = track_from_whisper_result(result, episode_id, title, duration)
        logger.info(f"Processed {len(track.segments)} segments from transcription.")
        return track
