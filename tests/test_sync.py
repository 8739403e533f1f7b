import pytest

from conftest import make_track

from podsync.ad_boundary import detect_boundary
from podsync.sync import (
    PlaybackSession,
    compute_active_segment,
    compute_seek_target,
    find_segment_at,
    trim_to_boundary,
)


@pytest.fixture
def trimmed_track():
    # Absolute timestamps as left behind by trimming a 100s ad block
    return make_track(
        [(100, 104), (104, 110), (112, 118.5), (118.5, 125)],
        ["a", "b", "c", "d"],
    )


class TestTrimToBoundary:
    def test_keeps_segments_at_or_after_boundary(self):
        english = make_track([(0, 3), (3, 4.9), (5, 9), (9, 20)], ["ad", "ad", "intro", "content"], language="en")
        trimmed = trim_to_boundary(english, 5)

        assert [s.text for s in trimmed.segments] == ["intro", "content"]
        assert [s.id for s in trimmed.segments] == [0, 1]
        assert trimmed.segments[0].start == 5
        assert trimmed.language == "en"

    def test_segment_straddling_boundary_is_dropped(self):
        english = make_track([(0, 6), (6, 10)], ["spans boundary", "after"])
        assert [s.text for s in trim_to_boundary(english, 5).segments] == ["after"]

    def test_no_segments_after_boundary_gives_empty_track(self):
        english = make_track([(0, 1), (1, 2)], ["a", "b"])
        trimmed = trim_to_boundary(english, 50)
        assert trimmed.segments == []
        assert trimmed.id == english.id

    def test_input_is_not_mutated(self):
        english = make_track([(0, 1), (1, 2), (2, 3)], ["a", "b", "c"])
        trim_to_boundary(english, 1)
        assert [s.id for s in english.segments] == [0, 1, 2]

    def test_both_tracks_start_at_same_instant(self, scenario_track):
        # Translation segmented differently from the source
        english = make_track([(0, 2.5), (2.5, 5), (5, 6), (6, 8), (8, 14), (14, 20)], ["x"] * 6, language="en")
        result = detect_boundary(scenario_track)
        trimmed = trim_to_boundary(english, result.boundary_time)

        assert trimmed.segments[0].start == result.track.segments[0].start
        assert [s.start for s in trimmed.segments] == [5, 6, 8, 14]


class TestComputeActiveSegment:
    def test_maps_audio_time_through_offset_and_first_start(self, trimmed_track):
        # audio 7s, offset 2s -> transcript 5s -> absolute 105s
        assert compute_active_segment(trimmed_track, 7, playback_offset=2) == 1

    def test_zero_offset_start_of_audio_is_first_segment(self, trimmed_track):
        assert compute_active_segment(trimmed_track, 0, current_id=3) == 0

    def test_gap_leaves_current_segment_unchanged(self):
        track = make_track([(0, 10), (12, 20)], ["A", "B"])
        assert compute_active_segment(track, 11, current_id=0) == 0

    def test_before_first_and_after_last_leave_current_unchanged(self, trimmed_track):
        assert compute_active_segment(trimmed_track, 1, playback_offset=5, current_id=2) == 2
        assert compute_active_segment(trimmed_track, 500, current_id=1) == 1

    def test_end_of_segment_is_inclusive(self):
        track = make_track([(0, 10), (12, 20)], ["A", "B"])
        assert compute_active_segment(track, 10, current_id=1) == 0
        assert compute_active_segment(track, 20, current_id=0) == 1

    def test_overlap_first_segment_wins(self):
        track = make_track([(0, 10), (5, 15)], ["A", "B"])
        assert compute_active_segment(track, 7, current_id=1) == 0
        assert compute_active_segment(track, 10, current_id=-1) == 0
        assert find_segment_at(track, 9.9999995).id == 0
        assert compute_active_segment(track, 12, current_id=0) == 1

    def test_empty_track_keeps_current(self):
        assert compute_active_segment(make_track([]), 3, current_id=4) == 4

    def test_explicit_first_segment_start(self, trimmed_track):
        assert compute_active_segment(trimmed_track, 5, first_segment_start=110) == 2


class TestSeek:
    def test_seek_target_is_relative_to_first_segment(self, trimmed_track):
        segment = trimmed_track.segments[2]
        assert compute_seek_target(segment, 100, playback_offset=3) == pytest.approx(15)

    @pytest.mark.parametrize("offset", [0.0, 0.3, 2.75, -1.2, 17.1])
    def test_seek_round_trip(self, trimmed_track, offset):
        first = trimmed_track.first_segment_start
        for segment in trimmed_track.segments:
            position = compute_seek_target(segment, first, offset)
            assert compute_active_segment(trimmed_track, position, offset, current_id=-1) == segment.id

    def test_round_trip_on_contiguous_float_timestamps(self):
        spans = []
        start = 37.42
        for i in range(40):
            end = round(start + 1.1 + (i % 3) * 0.7, 2)
            spans.append((start, end))
            start = end
        track = make_track(spans)
        for segment in track.segments:
            position = compute_seek_target(segment, track.first_segment_start, 0.1)
            assert compute_active_segment(track, position, 0.1) == segment.id


class TestPlaybackSession:
    def test_initial_segment_is_zero(self, trimmed_track):
        session = PlaybackSession(track=trimmed_track)
        assert session.current_segment_id == 0
        assert session.current_segment.text == "a"

    def test_transitions_are_signalled_once(self, trimmed_track):
        session = PlaybackSession(track=trimmed_track, playback_offset=1)

        assert session.on_position(1.5) is False  # still segment 0
        assert session.on_position(6) is True
        assert session.current_segment_id == 1
        assert session.on_position(7) is False
        assert session.on_position(11.5) is False  # gap between 110 and 112
        assert session.current_segment_id == 1
        assert session.on_position(13.5) is True
        assert session.current_segment_id == 2

    def test_seek_then_update_selects_segment(self, trimmed_track):
        session = PlaybackSession(track=trimmed_track, playback_offset=4.2)
        position = session.seek_to(3)
        assert session.on_position(position) is True
        assert session.current_segment_id == 3

    def test_seek_unknown_segment_raises(self, trimmed_track):
        with pytest.raises(KeyError):
            PlaybackSession(track=trimmed_track).seek_to(99)

    def test_sessions_are_independent(self, trimmed_track):
        first = PlaybackSession(track=trimmed_track)
        second = PlaybackSession(track=trimmed_track, playback_offset=10)
        first.on_position(20)
        assert first.current_segment_id == 3
        assert second.current_segment_id == 0

    def test_offset_change_applies_to_next_update(self, trimmed_track):
        session = PlaybackSession(track=trimmed_track)
        session.set_offset("5")
        session.on_position(10)  # transcript time 5 -> absolute 105
        assert session.current_segment_id == 1
        assert session.playback_offset == 5.0


def test_find_segment_at_touching_boundary_prefers_later_segment():
    track = make_track([(0, 5), (5, 8)], ["a", "b"])
    assert find_segment_at(track, 5).id == 1
    assert find_segment_at(track, 8).id == 1
    assert find_segment_at(track, 9) is None
