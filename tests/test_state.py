from unittest import mock

import pytest

from ytmusic_tui.client import ApiError
from ytmusic_tui.models import Playlist, Track
from ytmusic_tui.player import Player
from ytmusic_tui.state import (
    CookieReset,
    LoginStatus,
    Model,
    PlaylistsResult,
    PlaylistTracksResult,
    ProgressTick,
    SearchResult,
    SelectList,
    SpinnerTick,
    StreamUrl,
    TextInput,
    ViewMode,
    check_login_cmd,
    get_playlist_tracks_cmd,
    get_playlists_cmd,
    get_stream_url_cmd,
    progress_tick_cmd,
    reset_cookies_cmd,
    search_cmd,
)

TRACKS = [Track("t1", "First", "Ann", 100), Track("t2", "Second", "Bob", 200)]
PLAYLISTS = [Playlist("p1", "Mix", author="Ann", track_count=2)]


class StubApi:
    def __init__(self, logged_in=True, failure=None):
        self.is_logged_in = logged_in
        self.failure = failure
        self.calls = []

    def _record(self, *call):
        self.calls.append(call)
        if self.failure is not None:
            raise self.failure

    def search(self, query):
        self._record("search", query)
        return list(TRACKS)

    def get_user_playlists(self):
        self._record("playlists")
        return list(PLAYLISTS)

    def get_playlist_tracks(self, playlist_id):
        self._record("playlist_tracks", playlist_id)
        return list(TRACKS)

    def get_stream_url(self, track_id):
        self._record("stream", track_id)
        return "stream:" + track_id

    def reset_cookies(self):
        self._record("reset")


def make_model(logged_in=True):
    return Model(StubApi(logged_in), Player(False), False)


def test_login_mode_follows_api_login():
    assert make_model(logged_in=False).login_mode is True
    assert make_model(logged_in=True).login_mode is False


def test_model_defaults():
    model = make_model()
    assert model.view_mode is ViewMode.TRACKS
    assert model.search_input.placeholder == "Search for music..."
    assert model.search_input.char_limit == 50
    assert model.track_list.title == "YouTube Music - Tracks"
    assert model.playlist_list.title == "YouTube Music - Playlists"
    assert (model.width, model.height) == (80, 24)


def test_active_list_follows_view_mode():
    model = make_model()
    assert model.active_list is model.track_list
    model.view_mode = ViewMode.PLAYLISTS
    assert model.active_list is model.playlist_list


def test_init_commands_produce_spinner_and_login_messages():
    model = make_model(logged_in=False)
    with mock.patch("ytmusic_tui.state.time.sleep") as sleep:
        messages = [command() for command in model.init()]
    assert messages == [SpinnerTick(), LoginStatus(is_logged_in=False)]
    assert sleep.called


def test_check_login_cmd():
    assert check_login_cmd(StubApi(True))() == LoginStatus(is_logged_in=True)


def test_search_cmd_success():
    api = StubApi()
    result = search_cmd(api, "song")()
    assert result == SearchResult(tracks=TRACKS)
    assert api.calls == [("search", "song")]


def test_search_cmd_error_becomes_message():
    failure = ApiError("not logged in")
    result = search_cmd(StubApi(failure=failure), "song")()
    assert result.error is failure
    assert result.tracks == []


def test_get_playlists_cmd():
    assert get_playlists_cmd(StubApi())() == PlaylistsResult(playlists=PLAYLISTS)
    failure = ApiError("boom")
    assert get_playlists_cmd(StubApi(failure=failure))().error is failure


def test_get_playlist_tracks_cmd_passes_id():
    api = StubApi()
    assert get_playlist_tracks_cmd(api, "p1")() == PlaylistTracksResult(tracks=TRACKS)
    assert api.calls == [("playlist_tracks", "p1")]


def test_get_stream_url_cmd():
    assert get_stream_url_cmd(StubApi(), "t1")() == StreamUrl(url="stream:t1")
    failure = ApiError("not logged in")
    result = get_stream_url_cmd(StubApi(failure=failure), "t1")()
    assert result.error is failure and result.url == ""


def test_reset_cookies_cmd():
    assert reset_cookies_cmd(StubApi())() == CookieReset(success=True)
    failure = OSError("denied")
    result = reset_cookies_cmd(StubApi(failure=failure))()
    assert result.success is False
    assert result.error is failure


def test_progress_tick_cmd_waits_one_second():
    with mock.patch("ytmusic_tui.state.time.sleep") as sleep:
        assert progress_tick_cmd()() == ProgressTick()
    sleep.assert_called_once_with(1.0)


def test_select_list_selection_and_move():
    items = SelectList("t")
    assert items.selected_item() is None
    items.set_items(TRACKS)
    assert items.selected_item() == TRACKS[0]
    items.move(5)
    assert items.selected_item() == TRACKS[-1]
    items.move(-10)
    assert items.index == 0


def test_select_list_set_items_clamps_index():
    items = SelectList("t")
    items.set_items(TRACKS)
    items.move(1)
    items.set_items(TRACKS[:1])
    assert items.selected_item() == TRACKS[0]
    items.set_items([])
    assert items.index == 0


def test_select_list_set_size():
    items = SelectList("t")
    items.set_size(50, 10)
    assert (items.width, items.height) == (50, 10)


def test_text_input_respects_char_limit():
    field = TextInput(char_limit=50)
    field.insert("x" * 60)
    assert len(field.value) == 50
    field.insert("y")
    assert field.value == "x" * 50


@pytest.mark.parametrize("text", ["abc", "hello world"])
def test_text_input_insert_and_backspace(text):
    field = TextInput()
    field.insert(text)
    field.backspace()
    assert field.value == text[:-1]


def test_text_input_focus_and_blur():
    field = TextInput()
    field.focus()
    assert field.focused is True
    field.blur()
    assert field.focused is False