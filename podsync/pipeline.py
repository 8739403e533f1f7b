"""Orchestrates feed ingestion, transcription and translation of episodes."""

import logging
import os
import time
from typing import List, Optional

from .ad_boundary import detect_boundary
from .audio_extractor import AudioExtractor
from .base import Transcriber, Translator
from .episode_store import EpisodeStore
from .exceptions import PodSyncError
from .models import Episode, Track
from .rss_feed import fetch_feed, parse_feed
from .sync import trim_to_boundary
from .transcript_store import ARABIC, ENGLISH, TranscriptStore
from .translation import translate_episode, translate_track
from .utils import ensure_dir_exists

logger = logging.getLogger(__name__)

class EpisodePipeline:
    """
    Manages the end-to-end processing of podcast episodes.

    The transcriber and translator load large models, so they are optional:
    steps that need a missing one raise PodSyncError.
    """

    def __init__(
        self,
        config: dict,
        episode_store: EpisodeStore,
        transcript_store: TranscriptStore,
        audio_extractor: Optional[AudioExtractor] = None,
        transcriber: Optional[Transcriber] = None,
        translator: Optional[Translator] = None,
    ):
        """
        Initializes the EpisodePipeline.

        Args:
            config: A dictionary containing configuration settings.
            episode_store: Where episode metadata lives.
            transcript_store: Where transcript tracks live.
            audio_extractor: Downloads and converts episode audio.
            transcriber: Speech-to-text for Arabic audio.
            translator: Arabic to English translation.
        """
        self.config = config
        self.episode_store = episode_store
        self.transcript_store = transcript_store
        self.audio_extractor = audio_extractor
        self.transcriber = transcriber
        self.translator = translator

        self.temp_dir = config.get('temp_dir')
        if not self.temp_dir:
            raise PodSyncError("Configuration missing 'temp_dir'.")
        self.latin_marker = config.get('latin_marker', 'bbc news')
        self.native_marker = config.get('native_marker', 'بي بي سي نيوز عربي')
        self.batch_size = int(config.get('translation_batch_size', 10))

    def ingest_feed(self, translate_metadata: bool = False) -> List[Episode]:
        """
        Fetches the RSS feed and stores episodes not seen before.

        Args:
            translate_metadata: Also fill in English titles and descriptions.

        Returns:
            The newly added episodes, newest first.
        """
        xml = fetch_feed(self.config['rss_url'], timeout=self.config.get('request_timeout', 60))
        existing = self.episode_store.load()
        new_episodes = parse_feed(xml, existing, max_new=self.config.get('max_new_episodes', 25))
        if not new_episodes:
            logger.info("No new episodes in feed.")
            return []

        if translate_metadata:
            translator = self._require(self.translator, "translator")
            new_episodes = [translate_episode(episode, translator) for episode in new_episodes]

        self.episode_store.add(new_episodes)
        return new_episodes

    def _require(self, component, name: str):
        if component is None:
            raise PodSyncError(f"This step needs a {name}, but none was configured.")
        return component

    def _cleanup_temp_files(self, *file_paths: Optional[str]) -> None:
        """Removes temporary files specified."""
        for file_path in file_paths:
            if file_path and os.path.exists(file_path):
                try:
                    os.remove(file_path)
                    logger.info(f"Cleaned up temporary file: {file_path}")
                except OSError as e:
                    logger.warning(f"Could not remove temporary file {file_path}: {e}")

    def transcribe(self, episode_id: str) -> Track:
        """
        Downloads, transcribes and cleans one episode's Arabic transcript.

        Returns:
            The saved Arabic track, with any leading ad block removed.

        Raises:
            EpisodeNotFoundError: If the episode is not stored.
            PodSyncError: For any download, conversion or transcription failure.
        """
        audio_extractor = self._require(self.audio_extractor, "audio extractor")
        transcriber = self._require(self.transcriber, "transcriber")
        episode = self.episode_store.get(episode_id)
        logger.info(f"--- Transcribing episode {episode_id}: {episode.title_arabic} ---")
        start_time = time.time()
        ensure_dir_exists(self.temp_dir)

        mp3_path = None
        wav_path = None
        try:
            mp3_path = audio_extractor.download(episode.mp3_url, self.temp_dir, f"{episode_id}_temp.mp3")
            wav_path = audio_extractor.extract_audio(mp3_path, self.temp_dir, f"{episode_id}_temp")
            track = transcriber.transcribe(
                wav_path,
                episode_id=episode_id,
                title=episode.title_arabic,
                duration=episode.duration_seconds,
            )
        except (PodSyncError, FileNotFoundError) as e:
            logger.error(f"Transcription of {episode_id} failed: {e}")
            raise
        finally:
            self._cleanup_temp_files(mp3_path, wav_path)

        if not track.segments:
            raise PodSyncError(f"Transcription of {episode_id} produced no segments.")

        track = detect_boundary(track, self.latin_marker, self.native_marker).track
        self.transcript_store.save(track, ARABIC)
        self.transcript_store.save_plain_text(track)
        logger.info(f"--- Transcription of {episode_id} completed in {time.time() - start_time:.2f} seconds ---")
        return track

    def translate(self, episode_id: str) -> Track:
        """
        Translates the stored Arabic transcript into an English track.

        Raises:
            TranscriptNotFoundError: If the episode has not been transcribed.
        """
        translator = self._require(self.translator, "translator")
        arabic = self.transcript_store.load(episode_id, ARABIC)
        logger.info(f"--- Translating transcript {episode_id} ({len(arabic.segments)} segments) ---")
        english = translate_track(arabic, translator, batch_size=self.batch_size)
        if arabic.segments:
            english = trim_to_boundary(english, arabic.first_segment_start)
        self.transcript_store.save(english, ENGLISH)
        return english

    def process(self, episode_id: str) -> None:
        """Transcribes and then translates one episode."""
        self.transcribe(episode_id)
        self.translate(episode_id)

    def pending_episodes(self) -> List[Episode]:
        """Stored episodes that do not have an Arabic transcript yet."""
        return [ep for ep in self.episode_store.load() if not self.transcript_store.exists(ep.id, ARABIC)]
