"""Removes leading ad segments from stored transcripts, keeping both languages aligned."""

import logging

from tqdm import tqdm

from .ad_boundary import DEFAULT_LATIN_MARKER, DEFAULT_NATIVE_MARKER, detect_boundary
from .exceptions import PodSyncError
from .models import CleanupDetail, CleanupReport
from .sync import trim_to_boundary
from .transcript_store import ARABIC, ENGLISH, TranscriptStore

logger = logging.getLogger(__name__)


class TranscriptCleaner:
    """Applies ad-boundary detection to transcripts already on disk."""

    def __init__(
        self,
        store: TranscriptStore,
        latin_marker: str = DEFAULT_LATIN_MARKER,
        native_marker: str = DEFAULT_NATIVE_MARKER,
    ):
        self.store = store
        self.latin_marker = latin_marker
        self.native_marker = native_marker

    def clean_episode(self, episode_id: str) -> CleanupDetail:
        """
        Cleans one episode's Arabic transcript and, if present, its English one.

        The Arabic track decides the boundary. The English track is cut at
        the same timestamp and only rewritten if it actually lost segments.

        Raises:
            TranscriptNotFoundError: If the Arabic transcript does not exist.
            StoreError: If a transcript cannot be read or written.
        """
        arabic = self.store.load(episode_id, ARABIC)
        original_count = len(arabic.segments)

        result = detect_boundary(arabic, self.latin_marker, self.native_marker)
        cleaned = result.track
        if not result.trimmed or len(cleaned.segments) == original_count:
            logger.info(f"{episode_id}: no cleaning needed")
            return CleanupDetail(
                id=episode_id,
                original_segments=original_count,
                cleaned_segments=original_count,
                status="skipped",
            )

        self.store.save(cleaned, ARABIC)
        self.store.save_plain_text(cleaned)
        removed = original_count - len(cleaned.segments)
        logger.info(f"{episode_id}: Arabic removed {removed} segments ({original_count} -> {len(cleaned.segments)})")

        english_original = 0
        english_removed = 0
        if self.store.exists(episode_id, ENGLISH):
            english = self.store.load(episode_id, ENGLISH)
            english_original = len(english.segments)
            trimmed = trim_to_boundary(english, result.boundary_time)
            english_removed = english_original - len(trimmed.segments)
            if english_removed:
                self.store.save(trimmed, ENGLISH)
            else:
                logger.info(f"{episode_id}: English transcript already clean")
        else:
            logger.info(f"{episode_id}: no English transcript to clean")

        return CleanupDetail(
            id=episode_id,
            original_segments=original_count + (english_original if english_removed else 0),
            cleaned_segments=len(cleaned.segments) + (english_original - english_removed if english_removed else 0),
            removed=removed + english_removed,
            status="cleaned",
        )

    def clean_all(self, show_progress: bool = False) -> CleanupReport:
        """
        Cleans every Arabic transcript in the store.

        A failure on one episode is logged and counted; it does not stop the run.
        """
        report = CleanupReport()
        episode_ids = self.store.list_ids(ARABIC)
        logger.info(f"Found {len(episode_ids)} Arabic transcript(s) to process")

        for episode_id in tqdm(episode_ids, unit="transcript", desc="Cleaning", disable=not show_progress):
            try:
                detail = self.clean_episode(episode_id)
            except PodSyncError as e:
                logger.error(f"Error cleaning transcript {episode_id}: {e}")
                detail = CleanupDetail(id=episode_id, status="error")
            report.record(detail)

        logger.info(
            f"Bulk cleanup complete: processed={report.processed} cleaned={report.cleaned} "
            f"skipped={report.skipped} errors={report.errors}"
        )
        return report
