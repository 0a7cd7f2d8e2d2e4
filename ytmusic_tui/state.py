"""Application state for the terminal interface: widgets, messages and commands."""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from ytmusic_tui.models import Playlist, Track
from ytmusic_tui.player import Player, PlayerError

_SPINNER_FRAMES = ("⣾ ", "⣽ ", "⣻ ", "⢿ ", "⡿ ", "⣟ ", "⣯ ", "⣷ ")
_SPINNER_INTERVAL = 0.1
_PROGRESS_INTERVAL = 1.0


class ViewMode(Enum):
    """Which list the main screen shows."""

    SEARCH = 0
    TRACKS = 1
    PLAYLISTS = 2


@dataclass
class SelectList:
    """A titled list of items with a cursor and a display size."""

    title: str
    items: list[Any] = field(default_factory=list)
    index: int = 0
    width: int = 80
    height: int = 20

    def set_items(self, items: Iterable[Any]) -> None:
        """Replace the items, keeping the cursor inside the new range."""
        self.items = list(items)
        self.index = min(self.index, max(len(self.items) - 1, 0))

    def selected_item(self) -> Any | None:
        """Return the item under the cursor, or None when the list is empty."""
        if not self.items:
            return None
        return self.items[self.index]

    def move(self, delta: int) -> None:
        """Move the cursor by ``delta``, stopping at either end."""
        if not self.items:
            self.index = 0
            return
        self.index = min(max(self.index + delta, 0), len(self.items) - 1)

    def set_size(self, width: int, height: int) -> None:
        """Set the area the list is drawn in."""
        self.width = width
        self.height = height


@dataclass
class TextInput:
    """A single-line text field; a ``char_limit`` of 0 means no limit."""

    placeholder: str = ""
    char_limit: int = 0
    width: int = 0
    value: str = ""
    focused: bool = False

    def insert(self, text: str) -> None:
        """Append ``text``, cutting it off at the character limit."""
        if self.char_limit > 0:
            text = text[: max(self.char_limit - len(self.value), 0)]
        self.value += text

    def backspace(self) -> None:
        """Remove the last character, if any."""
        self.value = self.value[:-1]

    def focus(self) -> None:
        """Give the field keyboard focus."""
        self.focused = True

    def blur(self) -> None:
        """Take keyboard focus away from the field."""
        self.focused = False


@dataclass(frozen=True)
class LoginStatus:
    is_logged_in: bool


@dataclass(frozen=True)
class SearchResult:
    tracks: list[Track] = field(default_factory=list)
    error: BaseException | None = None


@dataclass(frozen=True)
class PlaylistsResult:
    playlists: list[Playlist] = field(default_factory=list)
    error: BaseException | None = None


@dataclass(frozen=True)
class PlaylistTracksResult:
    tracks: list[Track] = field(default_factory=list)
    error: BaseException | None = None


@dataclass(frozen=True)
class StreamUrl:
    url: str = ""
    error: BaseException | None = None


@dataclass(frozen=True)
class ProgressTick:
    pass


@dataclass(frozen=True)
class CookieReset:
    success: bool
    error: BaseException | None = None


@dataclass(frozen=True)
class SpinnerTick:
    pass


@dataclass(frozen=True)
class Key:
    """A key press, named like ``"a"``, ``"enter"``, ``"esc"`` or ``"ctrl+c"``."""

    name: str


@dataclass(frozen=True)
class WindowSize:
    width: int
    height: int


Message = Union[
    LoginStatus,
    SearchResult,
    PlaylistsResult,
    PlaylistTracksResult,
    StreamUrl,
    ProgressTick,
    CookieReset,
    SpinnerTick,
    Key,
    WindowSize,
]
Command = Callable[[], Message]


class _Spinner:
    """Frame counter for the loading animation."""

    def __init__(self) -> None:
        self.frame = 0

    def view(self) -> str:
        return _SPINNER_FRAMES[self.frame]

    def advance(self) -> None:
        self.frame = (self.frame + 1) % len(_SPINNER_FRAMES)

    def tick_cmd(self) -> Command:
        def tick() -> Message:
            time.sleep(_SPINNER_INTERVAL)
            return SpinnerTick()

        return tick


class Model:
    """Everything the interface shows and the services it drives."""

    def __init__(self, api: Any, player: Player, debug_mode: bool = False) -> None:
        self.api = api
        self.player = player
        self.debug_mode = debug_mode

        self.track_list = SelectList("YouTube Music - Tracks")
        self.playlist_list = SelectList("YouTube Music - Playlists")
        self.search_input = TextInput(
            placeholder="Search for music...", char_limit=50, width=30
        )
        self.progress_width = 70
        self.spinner = _Spinner()

        self.current_track: Track | None = None
        self.width = 80
        self.height = 24
        self.search_mode = False
        self.login_mode = not api.is_logged_in
        self.reset_mode = False
        self.is_loading = False
        self.error_msg = ""
        self.search_results = 0
        self.playlists: list[Playlist] = []
        self.view_mode = ViewMode.TRACKS

        self.player.set_next_callback(self._on_track_end)

    def _on_track_end(self) -> None:
        try:
            self.player.play_next()
        except PlayerError as exc:
            self.error_msg = f"Error playing next track: {exc}"

    def init(self) -> list[Command]:
        """Commands to run when the interface starts."""
        return [self.spinner.tick_cmd(), check_login_cmd(self.api)]

    @property
    def active_list(self) -> SelectList:
        """The list that the current view mode shows."""
        if self.view_mode is ViewMode.PLAYLISTS:
            return self.playlist_list
        return self.track_list


def initial_model(debug_mode: bool = False) -> Model:
    """Build the starting model with a real API client and player."""
    from ytmusic_tui.client import YouTubeMusicAPI

    return Model(YouTubeMusicAPI(debug_mode), Player(debug_mode), debug_mode)


def check_login_cmd(api: Any) -> Command:
    """Command reporting whether the API holds a login."""
    return lambda: LoginStatus(is_logged_in=api.is_logged_in)


# Commands turn any failure into a message so the update loop can show it.


def search_cmd(api: Any, query: str) -> Command:
    """Command searching for ``query``."""

    def run() -> Message:
        try:
            return SearchResult(tracks=api.search(query))
        except Exception as exc:
            return SearchResult(error=exc)

    return run


def get_playlists_cmd(api: Any) -> Command:
    """Command fetching the user's playlists."""

    def run() -> Message:
        try:
            return PlaylistsResult(playlists=api.get_user_playlists())
        except Exception as exc:
            return PlaylistsResult(error=exc)

    return run


def get_playlist_tracks_cmd(api: Any, playlist_id: str) -> Command:
    """Command fetching the tracks of one playlist."""

    def run() -> Message:
        try:
            return PlaylistTracksResult(tracks=api.get_playlist_tracks(playlist_id))
        except Exception as exc:
            return PlaylistTracksResult(error=exc)

    return run


def get_stream_url_cmd(api: Any, track_id: str) -> Command:
    """Command looking up the stream URL of a track."""

    def run() -> Message:
        try:
            return StreamUrl(url=api.get_stream_url(track_id))
        except Exception as exc:
            return StreamUrl(error=exc)

    return run


def reset_cookies_cmd(api: Any) -> Command:
    """Command removing the saved login."""

    def run() -> Message:
        try:
            api.reset_cookies()
        except Exception as exc:
            return CookieReset(success=False, error=exc)
        return CookieReset(success=True)

    return run


def progress_tick_cmd() -> Command:
    """Command that waits one second and then reports a progress tick."""

    def run() -> Message:
        time.sleep(_PROGRESS_INTERVAL)
        return ProgressTick()

    return run