"""Translates whole tracks and episode metadata with any Translator."""

import logging
from dataclasses import replace
from typing import List

from .base import Translator
from .exceptions import TranslationError
from .models import Episode, Segment, Track

logger = logging.getLogger(__name__)

TRANSLATED_LANGUAGE = "en"


def translate_segments(segments: List[Segment], translator: Translator) -> List[Segment]:
    """
    Translates one batch of segments, keeping their ids and timestamps.

    If the batch fails the segments are retried one by one; a segment that
    still fails keeps its source text.
    """
    texts = [segment.text.strip() for segment in segments]
    try:
        translated = translator.translate_batch(texts)
        if len(translated) != len(texts):
            raise TranslationError(f"Expected {len(texts)} translations, got {len(translated)}")
    except TranslationError as e:
        logger.warning(f"Batch translation failed ({e}), retrying segments individually")
        translated = []
        for segment, text in zip(segments, texts):
            try:
                translated.append(translator.translate(text))
            except TranslationError as seg_error:
                logger.warning(f"Keeping source text for segment {segment.id}: {seg_error}")
                translated.append("")

    return [
        Segment(id=segment.id, start=segment.start, end=segment.end, text=english or segment.text)
        for segment, english in zip(segments, translated)
    ]


def translate_track(track: Track, translator: Translator, batch_size: int = 10) -> Track:
    """
    Produces the English counterpart of an Arabic track.

    Segment boundaries are copied from the source, so the two tracks share
    ids and timestamps.
    """
    if batch_size < 1:
        raise ValueError("batch_size must be at least 1")
    total = len(track.segments)
    total_batches = (total + batch_size - 1) // batch_size
    logger.info(f"Translating {total} segments of {track.id!r} in {total_batches} batch(es)")

    translated: List[Segment] = []
    for batch_num, i in enumerate(range(0, total, batch_size), start=1):
        batch = track.segments[i:i + batch_size]
        logger.info(
            f"Batch {batch_num}/{total_batches}: {batch[0].start:.1f}s - {batch[-1].end:.1f}s "
            f"({len(batch)} segments)"
        )
        translated.extend(translate_segments(batch, translator))

    return track.with_segments(translated, language=TRANSLATED_LANGUAGE)


def translate_episode(episode: Episode, translator: Translator) -> Episode:
    """Returns a copy of `episode` with the English title and description filled in."""
    try:
        title, description = translator.translate_batch([episode.title_arabic, episode.description_arabic])
    except TranslationError as e:
        logger.error(f"Could not translate metadata for episode {episode.id}: {e}")
        raise
    logger.info(f"Translated metadata for episode {episode.id}: '{title[:50]}'")
    return replace(episode, title_english=title, description_english=description)
