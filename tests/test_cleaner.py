import json

import pytest

from conftest import BBC_AR, make_track

from podsync.cleaner import TranscriptCleaner
from podsync.exceptions import TranscriptNotFoundError
from podsync.transcript_store import ARABIC, ENGLISH, TranscriptStore


@pytest.fixture
def store(tmp_path):
    return TranscriptStore(str(tmp_path / "transcripts"))


def arabic_with_ads(episode_id="p1"):
    return make_track(
        [(0, 4), (4, 9), (9, 12), (12, 60), (60, 100)],
        ["Advert one", "Advert two", f"{BBC_AR} تقدم", "المحتوى", "الختام"],
        episode_id=episode_id,
        transcription_duration=100,
    )


def english_for(episode_id="p1"):
    return make_track(
        [(0, 4), (4, 9), (9, 12), (12, 30), (30, 60), (60, 100)],
        ["ad", "ad", "BBC News Arabic presents", "content", "more", "end"],
        episode_id=episode_id,
        language="en",
        transcription_duration=100,
    )


def test_cleans_both_languages(store):
    store.save(arabic_with_ads(), ARABIC)
    store.save(english_for(), ENGLISH)

    detail = TranscriptCleaner(store).clean_episode("p1")

    assert detail.status == "cleaned"
    assert detail.removed == 2 + 2
    assert detail.original_segments == 5 + 6
    assert detail.cleaned_segments == 3 + 4

    arabic = store.load("p1", ARABIC)
    english = store.load("p1", ENGLISH)
    assert arabic.segments[0].start == english.segments[0].start == 9
    assert [s.id for s in english.segments] == [0, 1, 2, 3]
    assert arabic.transcription_duration == 91
    with open(store.text_path("p1"), encoding="utf-8") as f:
        assert f.read().startswith(BBC_AR)


def test_without_english_track(store):
    store.save(arabic_with_ads(), ARABIC)
    detail = TranscriptCleaner(store).clean_episode("p1")

    assert detail.status == "cleaned"
    assert detail.removed == 2
    assert detail.original_segments == 5
    assert not store.exists("p1", ENGLISH)


def test_skips_clean_transcript(store):
    track = make_track([(0, 10), (10, 50)], ["BBC News", "content"], episode_id="p1", transcription_duration=50)
    store.save(track, ARABIC)

    detail = TranscriptCleaner(store).clean_episode("p1")

    assert detail.status == "skipped"
    assert detail.removed == 0
    assert not store.exists("p1", ENGLISH)


def test_missing_transcript_raises(store):
    with pytest.raises(TranscriptNotFoundError):
        TranscriptCleaner(store).clean_episode("missing")


def test_clean_all_counts_every_outcome(store, tmp_path):
    store.save(arabic_with_ads("a1"), ARABIC)
    store.save(make_track([(0, 5)], ["no marker"], episode_id="b2"), ARABIC)
    (tmp_path / "transcripts" / "c3_arabic_timestamps.json").write_text("{broken", encoding="utf-8")

    report = TranscriptCleaner(store).clean_all()

    assert (report.processed, report.cleaned, report.skipped, report.errors) == (2, 1, 1, 1)
    assert {d.id: d.status for d in report.details} == {"a1": "cleaned", "b2": "skipped", "c3": "error"}


def test_clean_all_is_idempotent(store):
    store.save(arabic_with_ads(), ARABIC)
    store.save(english_for(), ENGLISH)
    cleaner = TranscriptCleaner(store)
    cleaner.clean_all()

    report = cleaner.clean_all()
    assert report.cleaned == 0
    assert report.skipped == 1


def test_clean_all_continues_past_malformed_segments(store, tmp_path):
    bad = {"id": "a", "segments": [{"id": 0, "start": 0, "end": 4, "text": 5}]}
    (tmp_path / "transcripts").mkdir()
    (tmp_path / "transcripts" / "a_arabic_timestamps.json").write_text(json.dumps(bad), encoding="utf-8")
    store.save(arabic_with_ads("b"), ARABIC)

    report = TranscriptCleaner(store).clean_all()

    assert (report.processed, report.cleaned, report.errors) == (1, 1, 1)
    assert {d.id: d.status for d in report.details} == {"a": "error", "b": "cleaned"}
