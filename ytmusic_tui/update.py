"""Applies key presses and command results to the interface model."""

from __future__ import annotations

import dataclasses
import threading
from collections.abc import Callable
from typing import Any

from ytmusic_tui.models import Playlist, Track
from ytmusic_tui.player import PlayerError
from ytmusic_tui.queue import PlaybackMode
from ytmusic_tui.state import (
    CookieReset,
    Key,
    LoginStatus,
    Model,
    PlaylistsResult,
    PlaylistTracksResult,
    ProgressTick,
    SearchResult,
    SelectList,
    SpinnerTick,
    StreamUrl,
    ViewMode,
    WindowSize,
    get_playlist_tracks_cmd,
    get_playlists_cmd,
    get_stream_url_cmd,
    progress_tick_cmd,
    reset_cookies_cmd,
    search_cmd,
)

QUIT: Any = object()
"""Marker placed among the returned commands when the program should end."""

_REPEAT_NAMES = {
    PlaybackMode.REPEAT_NONE: "Repeat: Off",
    PlaybackMode.REPEAT_ONE: "Repeat: One",
    PlaybackMode.REPEAT_ALL: "Repeat: All",
}

_PREVIOUS_PAGE_KEYS = frozenset({"left", "h", "pgup", "u"})
_NEXT_PAGE_KEYS = frozenset({"right", "l", "pgdown", "f", "d"})


class _LoginCommand:
    """Runs the interactive cookie login; needs the plain terminal."""

    interactive = True

    def __init__(self, api: Any) -> None:
        self._api = api

    def __call__(self) -> LoginStatus:
        try:
            self._api.initiate_login()
        except Exception:
            pass
        return LoginStatus(is_logged_in=self._api.is_logged_in)


def _navigate(select_list: SelectList, name: str) -> None:
    page = max(1, (select_list.height - 2) // 3)
    everything = len(select_list.items)
    if name in ("up", "k"):
        select_list.move(-1)
    elif name in ("down", "j"):
        select_list.move(1)
    elif name in _PREVIOUS_PAGE_KEYS:
        select_list.move(-page)
    elif name in _NEXT_PAGE_KEYS:
        select_list.move(page)
    elif name in ("home", "g"):
        select_list.move(-everything)
    elif name in ("end", "G"):
        select_list.move(everything)


def _edit_input(model: Model, name: str) -> None:
    if name == "backspace":
        model.search_input.backspace()
    elif len(name) == 1:
        model.search_input.insert(name)


def _reset_key(model: Model, name: str) -> list[Any]:
    if name in ("y", "Y"):
        model.is_loading = True
        return [reset_cookies_cmd(model.api)]
    if name in ("n", "N", "esc", "q", "ctrl+c"):
        model.reset_mode = False
    return []


def _login_key(model: Model, name: str) -> list[Any]:
    if name == "l":
        return [_LoginCommand(model.api)]
    if name in ("q", "ctrl+c"):
        return [QUIT]
    return []


def _search_key(model: Model, name: str) -> list[Any]:
    if name == "esc":
        model.search_mode = False
        model.search_input.blur()
        return []
    if name == "enter":
        model.search_mode = False
        model.is_loading = True
        model.error_msg = ""
        query = model.search_input.value
        if not query:
            model.is_loading = False
            model.error_msg = "Please enter a search term"
            return []
        model.view_mode = ViewMode.TRACKS
        return [model.spinner.tick_cmd(), search_cmd(model.api, query)]
    _edit_input(model, name)
    return []


def _play_step(model: Model, step: Callable[[], None], label: str) -> list[Any]:
    model.error_msg = ""
    try:
        step()
    except PlayerError as exc:
        model.error_msg = f"Error playing {label} track: {exc}"
    return [progress_tick_cmd()]


def _select(model: Model) -> list[Any]:
    active = model.active_list
    if not active.items:
        return []
    model.error_msg = ""

    if model.view_mode is ViewMode.TRACKS:
        selected = active.selected_item()
        if not isinstance(selected, Track):
            return []
        all_tracks = [item for item in model.track_list.items if isinstance(item, Track)]
        index = model.track_list.index
        queue = model.player.queue
        queue.clear()
        queue.add_tracks(all_tracks[index:])
        if queue.repeat_mode is PlaybackMode.REPEAT_ALL and index > 0:
            queue.add_tracks(all_tracks[:index])
        model.is_loading = True
        return [model.spinner.tick_cmd(), get_stream_url_cmd(model.api, selected.id)]

    if model.view_mode is ViewMode.PLAYLISTS:
        selected = active.selected_item()
        if not isinstance(selected, Playlist):
            return []
        model.is_loading = True
        return [
            model.spinner.tick_cmd(),
            get_playlist_tracks_cmd(model.api, selected.id),
        ]
    return []


def _normal_key(model: Model, name: str) -> list[Any]:
    player = model.player
    match name:
        case "ctrl+c" | "q":
            player.stop()
            return [QUIT]
        case "r":
            model.error_msg = _REPEAT_NAMES.get(player.cycle_repeat_mode(), "")
            return []
        case "s":
            player.toggle_shuffle()
            model.error_msg = "Shuffle: On" if player.queue.shuffle_mode else "Shuffle: Off"
            return []
        case "n":
            return _play_step(model, player.play_next, "next")
        case "b":
            return _play_step(model, player.play_previous, "previous")
        case "p":
            if model.view_mode is ViewMode.TRACKS:
                model.view_mode = ViewMode.PLAYLISTS
                if not model.playlists:
                    model.is_loading = True
                    return [model.spinner.tick_cmd(), get_playlists_cmd(model.api)]
            else:
                model.view_mode = ViewMode.TRACKS
            return []
        case "R":
            model.reset_mode = True
            return []
        case "/":
            model.search_mode = True
            model.search_input.focus()
            return []
        case " ":
            if player.is_playing or player.queue.current_track() is not None:
                player.toggle_pause()
                if player.is_playing:
                    return [progress_tick_cmd()]
            return []
        case "enter":
            return _select(model)
    _navigate(model.active_list, name)
    return []


def _on_key(model: Model, msg: Key) -> list[Any]:
    if model.reset_mode:
        return _reset_key(model, msg.name)
    if model.login_mode:
        return _login_key(model, msg.name)
    if model.is_loading:
        return [QUIT] if msg.name in ("ctrl+c", "q") else []
    if model.search_mode:
        return _search_key(model, msg.name)
    return _normal_key(model, msg.name)


def _on_login_status(model: Model, msg: LoginStatus) -> list[Any]:
    model.login_mode = not msg.is_logged_in
    if model.login_mode:
        return []
    model.is_loading = True
    return [model.spinner.tick_cmd(), get_playlists_cmd(model.api)]


def _on_search_result(model: Model, msg: SearchResult) -> list[Any]:
    model.is_loading = False
    if msg.error is not None:
        model.error_msg = f"Search error: {msg.error}"
        model.search_results = 0
        return []
    if not msg.tracks:
        model.error_msg = "No results found for: " + model.search_input.value
        model.search_results = 0
        return []
    model.view_mode = ViewMode.TRACKS
    model.track_list.set_items(msg.tracks)
    model.search_input.value = ""
    model.search_results = len(msg.tracks)
    return []


def _on_playlists(model: Model, msg: PlaylistsResult) -> list[Any]:
    model.is_loading = False
    if msg.error is not None:
        model.error_msg = f"Error fetching playlists: {msg.error}"
        return []
    if not msg.playlists:
        model.error_msg = "No playlists found"
        return []
    model.playlists = list(msg.playlists)
    model.playlist_list.set_items(msg.playlists)
    return []


def _on_playlist_tracks(model: Model, msg: PlaylistTracksResult) -> list[Any]:
    model.is_loading = False
    if msg.error is not None:
        model.error_msg = f"Error fetching playlist tracks: {msg.error}"
        return []
    if not msg.tracks:
        model.error_msg = "No tracks found in playlist"
        return []
    model.view_mode = ViewMode.TRACKS
    model.track_list.set_items(msg.tracks)
    model.search_results = len(msg.tracks)

    selected = model.playlist_list.selected_item()
    if isinstance(selected, Playlist):
        model.error_msg = f"Loaded {selected.title} with {model.search_results} tracks"
    else:
        model.error_msg = f"Loaded playlist with {model.search_results} tracks"
    return []


def _on_stream_url(model: Model, msg: StreamUrl) -> list[Any]:
    model.is_loading = False
    if msg.error is not None:
        model.error_msg = f"Error getting stream: {msg.error}"
        return []

    player = model.player
    queue = player.queue
    current = queue.current_track()
    if current is None:
        model.error_msg = "Error: No track in queue"
        return []

    try:
        player.play(msg.url, current.duration)
    except PlayerError as exc:
        model.error_msg = f"Error playing track: {exc}"
        return []

    model.current_track = dataclasses.replace(current)
    if player.duration > 0 and player.duration != model.current_track.duration:
        model.current_track = dataclasses.replace(
            model.current_track, duration=player.duration
        )
        for index, queued in enumerate(queue.tracks):
            if queued.id == model.current_track.id:
                queue.tracks[index] = dataclasses.replace(queued, duration=player.duration)
                break
    return [progress_tick_cmd()]


def _on_cookie_reset(model: Model, msg: CookieReset) -> list[Any]:
    model.is_loading = False
    model.reset_mode = False
    if msg.error is not None:
        model.error_msg = f"Error resetting cookies: {msg.error}"
        return []
    model.login_mode = True
    return []


def _play_in_background(model: Model, track: Track) -> None:
    def work() -> None:
        try:
            url = model.api.get_stream_url(track.id)
        except Exception:
            return
        try:
            model.player.play(url, track.duration)
        except PlayerError:
            pass
        model.current_track = track

    threading.Thread(target=work, daemon=True).start()


def _on_progress(model: Model, msg: ProgressTick) -> list[Any]:
    player = model.player
    if not player.is_playing:
        return []
    player.current_pos += 1
    if player.current_pos >= player.duration:
        player.current_pos = 0
        next_track = player.queue.next_track()
        if next_track is not None:
            _play_in_background(model, next_track)
        else:
            player.is_playing = False
    return [progress_tick_cmd()] if player.is_playing else []


def _on_window_size(model: Model, msg: WindowSize) -> list[Any]:
    model.width = msg.width
    model.height = msg.height
    list_width = max(msg.width - 6, 20)
    list_height = max(msg.height - 12, 5)
    model.track_list.set_size(list_width, list_height)
    model.playlist_list.set_size(list_width, list_height)
    model.progress_width = max(msg.width - 10, 10)
    return []


def _on_spinner(model: Model, msg: SpinnerTick) -> list[Any]:
    model.spinner.advance()
    return [model.spinner.tick_cmd()] if model.is_loading else []


_HANDLERS: dict[type, Callable[[Model, Any], list[Any]]] = {
    Key: _on_key,
    LoginStatus: _on_login_status,
    SearchResult: _on_search_result,
    PlaylistsResult: _on_playlists,
    PlaylistTracksResult: _on_playlist_tracks,
    StreamUrl: _on_stream_url,
    CookieReset: _on_cookie_reset,
    ProgressTick: _on_progress,
    WindowSize: _on_window_size,
    SpinnerTick: _on_spinner,
}


def update(model: Model, msg: Any) -> list[Any]:
    """Apply ``msg`` to ``model`` and return the commands to run next.

    The list may hold ``QUIT``, meaning the program should end.
    """
    handler = _HANDLERS.get(type(msg))
    if handler is None:
        return []
    return handler(model, msg)