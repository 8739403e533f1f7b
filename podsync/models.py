"""Data models for PodSync."""

from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, List, Optional


@dataclass
class Segment:
    """A single timestamped utterance within a track."""
    id: int
    start: float  # seconds on the source recording's clock
    end: float
    text: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "start": self.start, "end": self.end, "text": self.text}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Segment":
        text = data.get("text")
        if text is None:
            text = ""
        elif not isinstance(text, str):
            raise TypeError(f"Segment text must be a string, got {type(text).__name__}")
        return cls(
            id=int(data["id"]),
            start=float(data["start"]),
            end=float(data["end"]),
            text=text,
        )


@dataclass
class Track:
    """
    One language's full timestamped transcript for an episode.

    Segment timestamps stay absolute (relative to the start of the original
    recording) even after leading segments have been trimmed away.
    """
    id: str
    title: str = ""
    duration: str = ""  # episode duration as reported by the feed
    language: str = ""
    transcription_duration: Optional[float] = None
    segments: List[Segment] = field(default_factory=list)

    @property
    def first_segment_start(self) -> float:
        return self.segments[0].start if self.segments else 0.0

    def with_segments(self, segments: List[Segment], **changes: Any) -> "Track":
        """Returns a copy of this track holding `segments` instead of the current ones."""
        return replace(self, segments=list(segments), **changes)

    def plain_text(self) -> str:
        return " ".join(segment.text for segment in self.segments)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "duration": self.duration,
            "language": self.language,
            "transcription_duration": self.transcription_duration,
            "segments": [segment.to_dict() for segment in self.segments],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Track":
        duration = data.get("transcription_duration")
        return cls(
            id=str(data.get("id", "")),
            title=data.get("title") or "",
            duration=str(data.get("duration") or ""),
            language=data.get("language") or "",
            transcription_duration=float(duration) if duration is not None else None,
            segments=[Segment.from_dict(s) for s in data.get("segments") or []],
        )


@dataclass
class BoundaryResult:
    """Outcome of ad-boundary detection on a single track."""
    track: Track
    boundary_time: Optional[float] = None
    cutoff_index: Optional[int] = None

    @property
    def trimmed(self) -> bool:
        return self.boundary_time is not None


@dataclass
class Episode:
    """Podcast episode metadata as stored in the episodes file."""
    id: str
    title_arabic: str
    description_arabic: str
    mp3_url: str
    published: str
    duration_seconds: str
    audio_type: str = "audio/mpeg"
    title_english: Optional[str] = None
    description_english: Optional[str] = None
    title_arabic_diacritics: Optional[str] = None
    description_arabic_diacritics: Optional[str] = None
    playback_offset: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        # Unset optional fields are left out so raw and enriched episodes share one file
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Episode":
        known = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in data.items() if k in known}
        kwargs.setdefault("audio_type", "audio/mpeg")
        if kwargs.get("playback_offset") is not None:
            kwargs["playback_offset"] = float(kwargs["playback_offset"])
        return cls(**kwargs)


@dataclass
class CleanupDetail:
    id: str
    original_segments: int = 0
    cleaned_segments: int = 0
    removed: int = 0
    status: str = "skipped"  # "cleaned" | "skipped" | "error"


@dataclass
class CleanupReport:
    """Summary of a bulk transcript cleanup run."""
    processed: int = 0
    cleaned: int = 0
    skipped: int = 0
    errors: int = 0
    details: List[CleanupDetail] = field(default_factory=list)

    def record(self, detail: CleanupDetail) -> None:
        self.details.append(detail)
        if detail.status == "cleaned":
            self.cleaned += 1
            self.processed += 1
        elif detail.status == "skipped":
            self.skipped += 1
            self.processed += 1
        else:
            self.errors += 1
