import subprocess
import threading
from unittest import mock

import pytest

from ytmusic_tui.models import Track
from ytmusic_tui.player import Player, PlayerError, parse_duration, watch_url
from ytmusic_tui.queue import PlaybackMode


def _ytdlp_result(stdout: bytes, returncode: int = 0):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout)


def _mpv_calls(popen):
    return [c.args[0] for c in popen.call_args_list]


def test_watch_url_appends_id():
    assert watch_url("abc123") == "https://www.youtube.com/watch?v=abc123"


def test_parse_duration_two_and_three_parts_agree():
    assert parse_duration("1:00:00") == parse_duration("60:00")
    assert parse_duration("0:02:05") == parse_duration("2:05")


def test_parse_duration_minutes_seconds():
    assert parse_duration("3:45") == 225


@pytest.mark.parametrize("text", ["", "42", "a:b:c:d", "1:2:3:4"])
def test_parse_duration_unrecognised_is_zero(text):
    assert parse_duration(text) == 0


def test_parse_duration_strips_surrounding_whitespace():
    assert parse_duration("  2:05\n") == parse_duration("2:05")


def test_parse_duration_bad_component_counts_as_zero():
    assert parse_duration("x:30") == parse_duration("0:30")


def test_new_player_is_idle():
    player = Player(False)
    assert player.is_playing is False
    assert player.current_pos == 0
    assert player.duration == 0
    assert player.queue.current_track() is None


@mock.patch("subprocess.Popen")
@mock.patch("subprocess.run")
def test_play_uses_ytdlp_duration(run, popen):
    run.return_value = _ytdlp_result(b"3:45\n")
    player = Player(False)
    player.play(watch_url("abc"), 10)
    assert player.is_playing is True
    assert player.current_pos == 0
    assert player.duration == parse_duration("3:45")
    assert _mpv_calls(popen) == [["mpv", "--no-video", "--no-terminal", watch_url("abc")]]


@mock.patch("subprocess.Popen")
@mock.patch("subprocess.run")
def test_play_keeps_given_duration_when_ytdlp_fails(run, popen):
    run.return_value = _ytdlp_result(b"", returncode=1)
    player = Player(False)
    player.play("some-url", 180)
    assert player.duration == 180


@mock.patch("subprocess.Popen")
@mock.patch("subprocess.run", side_effect=FileNotFoundError("yt-dlp"))
def test_play_keeps_given_duration_when_ytdlp_missing(run, popen):
    player = Player(False)
    player.play("some-url", 240)
    assert player.duration == 240
    assert player.is_playing is True


@mock.patch("subprocess.Popen", side_effect=FileNotFoundError("mpv"))
@mock.patch("subprocess.run", side_effect=FileNotFoundError("yt-dlp"))
def test_play_raises_when_mpv_missing(run, popen):
    player = Player(False)
    with pytest.raises(PlayerError):
        player.play("some-url", 100)
    assert player.is_playing is False


@mock.patch("subprocess.Popen")
@mock.patch("subprocess.run", side_effect=FileNotFoundError("yt-dlp"))
def test_play_twice_kills_first_process(run, popen):
    first, second = mock.MagicMock(), mock.MagicMock()
    popen.side_effect = [first, second]
    player = Player(False)
    player.play("one", 500)
    player.play("two", 450)
    assert first.kill.call_count == 1
    assert second.kill.call_count == 0
    assert player.is_playing is True
    assert player.duration == 450
    assert _mpv_calls(popen)[-1][-1] == "two"


@mock.patch("subprocess.Popen")
@mock.patch("subprocess.run", side_effect=FileNotFoundError("yt-dlp"))
def test_stop_kills_process(run, popen):
    process = mock.MagicMock()
    popen.return_value = process
    player = Player(False)
    player.play("one", 500)
    player.stop()
    assert player.is_playing is False
    assert process.kill.call_count == 1


def test_stop_without_process_is_idle():
    player = Player(False)
    player.stop()
    assert player.is_playing is False


@mock.patch("subprocess.Popen")
@mock.patch("subprocess.run", side_effect=FileNotFoundError("yt-dlp"))
def test_finished_track_calls_next_callback(run, popen):
    finished = threading.Event()
    player = Player(False)
    player.set_next_callback(finished.set)
    player.play("short", 1)
    assert finished.wait(5)
    assert player.is_playing is False


def test_toggle_pause_without_process_flips_state():
    player = Player(False)
    player.toggle_pause()
    assert player.is_playing is True
    player.toggle_pause()
    assert player.is_playing is False


def test_play_next_on_empty_queue_raises():
    player = Player(False)
    with pytest.raises(PlayerError, match="no next track available"):
        player.play_next()


def test_play_previous_on_empty_queue_raises():
    player = Player(False)
    with pytest.raises(PlayerError, match="no previous track available"):
        player.play_previous()


def test_play_current_track_without_track_raises():
    player = Player(False)
    with pytest.raises(PlayerError, match="no track to play"):
        player.play_current_track()


def test_play_track_invalid_index_raises():
    player = Player(False)
    player.queue.add_tracks([Track("a", "A")])
    with pytest.raises(PlayerError, match="invalid track index: 5"):
        player.play_track(5)


@mock.patch("subprocess.Popen")
@mock.patch("subprocess.run", side_effect=FileNotFoundError("yt-dlp"))
def test_play_track_plays_watch_url_of_chosen_track(run, popen):
    player = Player(False)
    player.queue.add_tracks([Track("a", "A", duration=300), Track("b", "B", duration=400)])
    player.play_track(1)
    assert player.queue.current_track().id == "b"
    assert _mpv_calls(popen)[-1][-1] == watch_url("b")
    assert player.duration == 400


@mock.patch("subprocess.Popen")
@mock.patch("subprocess.run", side_effect=FileNotFoundError("yt-dlp"))
def test_play_next_and_previous_move_through_queue(run, popen):
    player = Player(False)
    player.queue.add_tracks([Track("a", "A", duration=300), Track("b", "B", duration=300)])
    player.play_next()
    assert _mpv_calls(popen)[-1][-1] == watch_url("b")
    player.play_previous()
    assert _mpv_calls(popen)[-1][-1] == watch_url("a")


def test_cycle_repeat_mode_goes_through_queue():
    player = Player(False)
    assert player.cycle_repeat_mode() is PlaybackMode.REPEAT_ONE
    assert player.queue.repeat_mode is PlaybackMode.REPEAT_ONE


def test_toggle_shuffle_switches_queue_mode():
    player = Player(False)
    player.toggle_shuffle()
    assert player.queue.shuffle_mode is True
    player.toggle_shuffle()
    assert player.queue.shuffle_mode is False


def test_debug_mode_writes_log_file(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USERPROFILE", str(tmp_path))
    log_dir = tmp_path / ".ytmusic" / "logs"
    log_dir.mkdir(parents=True)
    player = Player(True)
    player.log_debug("hello %d", 5)
    player.stop()
    assert player.is_playing is False
    files = list(log_dir.glob("player_*.log"))
    assert len(files) == 1
    content = files[0].read_text(encoding="utf-8")
    assert "hello 5" in content
    assert "Stopping playback" in content
    assert content.index("hello 5") < content.index("Stopping playback")


def test_debug_mode_without_log_directory_reports_error(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USERPROFILE", str(tmp_path))
    player = Player(True)
    player.log_debug("ignored")
    assert "Error opening player log file" in capsys.readouterr().out
    assert not (tmp_path / ".ytmusic").exists()