"""Detects and strips the advertisement block at the start of a transcript."""

import logging
from typing import List

from .models import BoundaryResult, Segment, Track

logger = logging.getLogger(__name__)

DEFAULT_LATIN_MARKER = "bbc news"
DEFAULT_NATIVE_MARKER = "بي بي سي نيوز عربي"


def renumber(segments: List[Segment]) -> List[Segment]:
    """Returns copies of `segments` with ids reassigned to 0..n-1, order preserved."""
    return [
        Segment(id=index, start=segment.start, end=segment.end, text=segment.text)
        for index, segment in enumerate(segments)
    ]


def _total_duration(track: Track) -> float:
    if track.transcription_duration:
        return track.transcription_duration
    return track.segments[-1].end if track.segments else 0.0


def find_marker_indices(
    segments: List[Segment],
    latin_marker: str = DEFAULT_LATIN_MARKER,
    native_marker: str = DEFAULT_NATIVE_MARKER,
) -> List[int]:
    """
    Returns the indices of every segment mentioning either marker phrase.

    The Latin-script marker is matched case-insensitively, the native-script
    marker as an exact substring.
    """
    latin = latin_marker.lower()
    matches = []
    for index, segment in enumerate(segments):
        text = segment.text
        if (latin and latin in text.lower()) or (native_marker and native_marker in text):
            matches.append(index)
    return matches


def detect_boundary(
    track: Track,
    latin_marker: str = DEFAULT_LATIN_MARKER,
    native_marker: str = DEFAULT_NATIVE_MARKER,
) -> BoundaryResult:
    """
    Finds where real content begins in a track and drops everything before it.

    Only marker mentions that start in the first half of the episode count,
    and of those the last one is taken as the boundary: an ad block may name
    the show several times before the programme itself starts. When no
    qualifying mention exists the track is returned untouched.

    Preconditions: segments are sorted by start and do not overlap.

    Args:
        track: The track to clean. It is not modified.
        latin_marker: Marker phrase in Latin script, matched case-insensitively.
        native_marker: Marker phrase in the track's own script, matched exactly.

    Returns:
        A BoundaryResult holding the trimmed track, the absolute start time of
        the cutoff segment and its index in the untrimmed track. On the no-op
        paths the input track is returned with no boundary.
    """
    if not track.segments:
        return BoundaryResult(track=track)

    midpoint = _total_duration(track) / 2
    matches = find_marker_indices(track.segments, latin_marker, native_marker)
    if not matches:
        logger.warning(f"Marker not found in transcript {track.id!r}, skipping cleanup")
        return BoundaryResult(track=track)

    first_half = [i for i in matches if track.segments[i].start < midpoint]
    if not first_half:
        logger.warning(f"Marker only found in second half of transcript {track.id!r}, skipping cleanup")
        return BoundaryResult(track=track)

    cutoff_index = first_half[-1]
    cutoff = track.segments[cutoff_index]
    logger.info(
        f"Found {len(matches)} marker match(es), {len(first_half)} in first half. "
        f"Using segment {cutoff_index} (start: {cutoff.start:.1f}s) as cutoff"
    )

    kept = renumber(track.segments[cutoff_index:])
    trimmed = track.with_segments(
        kept,
        transcription_duration=kept[-1].end - kept[0].start,
    )
    logger.info(f"Removed {cutoff_index} segments ({len(track.segments)} -> {len(kept)})")
    return BoundaryResult(track=trimmed, boundary_time=cutoff.start, cutoff_index=cutoff_index)
