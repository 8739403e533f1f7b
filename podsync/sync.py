"""Keeps the translated track and the audio player in step with the primary transcript."""

import logging
from dataclasses import dataclass
from typing import Optional

from .ad_boundary import renumber
from .models import Segment, Track

logger = logging.getLogger(__name__)

# Absorbs float error when an audio position is mapped back onto the transcript clock
TIME_EPSILON = 1e-6


def trim_to_boundary(track: Track, boundary_time: float) -> Track:
    """
    Drops every segment that starts before `boundary_time`.

    The boundary is a timestamp, not an index, so it can be applied to a
    track whose segmentation differs from the one it was detected on.
    Retained segments are renumbered from 0. An empty result is valid.
    """
    kept = [segment for segment in track.segments if segment.start >= boundary_time]
    removed = len(track.segments) - len(kept)
    if removed:
        logger.info(
            f"Trimmed {removed} segments before {boundary_time:.1f}s from {track.language or 'track'} "
            f"{track.id!r} ({len(track.segments)} -> {len(kept)})"
        )
    return track.with_segments(renumber(kept))


def to_transcript_time(audio_time: float, playback_offset: float, first_segment_start: float) -> float:
    """Maps a position on the audio file's clock onto the recording's absolute clock."""
    return (audio_time - playback_offset) + first_segment_start


def compute_active_segment(
    track: Track,
    audio_time: float,
    playback_offset: float = 0.0,
    current_id: int = 0,
    first_segment_start: Optional[float] = None,
) -> int:
    """
    Returns the id of the segment playing at `audio_time`.

    If no segment contains the mapped time (a gap, or outside the track)
    `current_id` is returned unchanged rather than jumping to the nearest
    segment. When segments overlap the first one in order wins.
    """
    if first_segment_start is None:
        first_segment_start = track.first_segment_start
    target = to_transcript_time(audio_time, playback_offset, first_segment_start)
    segment = find_segment_at(track, target)
    return segment.id if segment is not None else current_id


def find_segment_at(track: Track, target: float) -> Optional[Segment]:
    """
    Returns the first segment with start <= target <= end, or None.

    Overlapping segments resolve to the earlier one. A time shared by two
    touching segments belongs to the later one, so that seeking to a
    segment's start always lands on that segment.
    """
    segments = track.segments
    for index, segment in enumerate(segments):
        if not segment.start - TIME_EPSILON <= target <= segment.end + TIME_EPSILON:
            continue
        following = segments[index + 1] if index + 1 < len(segments) else None
        if (following is not None
                and following.start >= segment.end - TIME_EPSILON
                and target >= following.start - TIME_EPSILON):
            return following
        return segment
    return None


def compute_seek_target(segment: Segment, first_segment_start: float, playback_offset: float = 0.0) -> float:
    """Returns the audio position at which `segment` begins. Inverse of compute_active_segment."""
    return playback_offset + (segment.start - first_segment_start)


@dataclass
class PlaybackSession:
    """
    Alignment state for one open episode.

    Sessions share nothing, so several episodes can be followed at once.
    Position updates for a session must arrive one at a time.
    """
    track: Track
    playback_offset: float = 0.0
    current_segment_id: int = 0

    @property
    def first_segment_start(self) -> float:
        return self.track.first_segment_start

    @property
    def current_segment(self) -> Optional[Segment]:
        for segment in self.track.segments:
            if segment.id == self.current_segment_id:
                return segment
        return None

    def on_position(self, audio_time: float) -> bool:
        """Updates the active segment for a new player position. Returns True on a transition."""
        segment_id = compute_active_segment(
            self.track,
            audio_time,
            self.playback_offset,
            self.current_segment_id,
            self.first_segment_start,
        )
        if segment_id == self.current_segment_id:
            return False
        logger.debug(f"Active segment {self.current_segment_id} -> {segment_id} at {audio_time:.2f}s")
        self.current_segment_id = segment_id
        return True

    def seek_to(self, segment_id: int) -> float:
        """Returns the audio position to jump to for `segment_id`."""
        for segment in self.track.segments:
            if segment.id == segment_id:
                return compute_seek_target(segment, self.first_segment_start, self.playback_offset)
        raise KeyError(f"No segment with id {segment_id} in track {self.track.id!r}")

    def set_offset(self, playback_offset: float) -> None:
        self.playback_offset = float(playback_offset)
