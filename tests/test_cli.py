import pytest
import yaml

from conftest import make_episode, make_track

from podsync import cli
from podsync.episode_store import EpisodeStore
from podsync.transcript_store import ARABIC, TranscriptStore


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    monkeypatch.setattr(cli, "setup_logging", lambda **kwargs: None)
    data_dir = tmp_path / "data"
    config_path = tmp_path / "config.yaml"
    config_path.write_text(yaml.safe_dump({
        "data_dir": str(data_dir),
        "temp_dir": str(tmp_path / "temp"),
        "log_dir": str(tmp_path / "logs"),
    }), encoding="utf-8")

    episodes = EpisodeStore(str(data_dir / "latest_episodes.json"))
    episodes.add([make_episode("p1")])
    transcripts = TranscriptStore(str(data_dir / "transcripts"))
    transcripts.save(
        make_track([(100, 104), (104, 110), (112, 120)], ["أ", "ب", "ج"], episode_id="p1"),
        ARABIC,
    )
    return str(config_path), episodes


def run(config_path, *args):
    return cli.CLIHandler().run(["-c", config_path, *args])


def test_set_offset_persists(workspace):
    config_path, episodes = workspace
    assert run(config_path, "set-offset", "p1", "2.5") == 0
    assert episodes.get_playback_offset("p1") == 2.5


def test_locate_uses_stored_offset(workspace, capsys):
    config_path, episodes = workspace
    episodes.set_playback_offset("p1", 2)
    assert run(config_path, "locate", "p1", "7") == 0
    assert capsys.readouterr().out.strip() == "[1] 0:04 ب"


def test_seek_prints_audio_position(workspace, capsys):
    config_path, _ = workspace
    assert run(config_path, "seek", "p1", "2", "--offset", "1.5") == 0
    assert capsys.readouterr().out.strip() == "13.50"


def test_seek_unknown_segment_fails(workspace):
    config_path, _ = workspace
    assert run(config_path, "seek", "p1", "9") == 1


def test_list_shows_transcript_status(workspace, capsys):
    config_path, _ = workspace
    assert run(config_path, "list") == 0
    assert capsys.readouterr().out.startswith("p1\tA-\t")


def test_unknown_episode_exits_with_error(workspace):
    config_path, _ = workspace
    assert run(config_path, "set-offset", "missing", "1") == 1


def test_clean_all_reports_summary(workspace, capsys):
    config_path, _ = workspace
    assert run(config_path, "clean-all") == 0
    assert "skipped=1" in capsys.readouterr().out


def test_missing_config_file(tmp_path, monkeypatch):
    monkeypatch.setattr(cli, "setup_logging", lambda **kwargs: None)
    assert run(str(tmp_path / "nope.yaml"), "list") == 1
