"""Shared fixtures and helpers for PodSync tests."""

import pytest

from podsync.base import Translator
from podsync.exceptions import TranslationError
from podsync.models import Episode, Segment, Track

BBC_AR = "بي بي سي نيوز عربي"


def make_track(spans, texts=None, episode_id="ep1", language="arabic", transcription_duration=None):
    """Builds a track from (start, end) pairs; ids follow list order."""
    texts = texts or ["" for _ in spans]
    segments = [
        Segment(id=i, start=float(start), end=float(end), text=text)
        for i, ((start, end), text) in enumerate(zip(spans, texts))
    ]
    return Track(
        id=episode_id,
        title="حلقة",
        duration="1200",
        language=language,
        transcription_duration=transcription_duration,
        segments=segments,
    )


def make_episode(episode_id="p0abc123", **overrides):
    data = dict(
        id=episode_id,
        title_arabic="عنوان الحلقة",
        description_arabic="وصف الحلقة",
        mp3_url=f"http://open.live.bbc.co.uk/mediaselector/6/redir/version/2.0/mediaset/audio-nondrm-download/proto/http/vpid/{episode_id}.mp3",
        published="Mon, 06 Oct 2025 05:00:00 GMT",
        duration_seconds="1500",
    )
    data.update(overrides)
    return Episode(**data)


class FakeTranslator(Translator):
    """Prefixes text with 'EN:'; fails on any text listed in `failing`."""

    def __init__(self, failing=(), fail_batches=False):
        self.failing = set(failing)
        self.fail_batches = fail_batches
        self.batch_calls = 0

    def translate(self, text):
        if text in self.failing:
            raise TranslationError(f"cannot translate {text!r}")
        return f"EN:{text}" if text else ""

    def translate_batch(self, texts):
        self.batch_calls += 1
        if self.fail_batches:
            raise TranslationError("batch endpoint down")
        return [self.translate(text) for text in texts]


@pytest.fixture
def scenario_track():
    """Ad, marker intro, then content; transcription lasts 20s."""
    return make_track(
        [(0, 5), (5, 8), (8, 20)],
        ["ad", "BBC News intro", "real content"],
        transcription_duration=20,
    )
