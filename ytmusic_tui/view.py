"""Renders the interface model as styled terminal text."""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from typing import Any

from ytmusic_tui.queue import PlaybackMode
from ytmusic_tui.state import Model, SelectList, TextInput, ViewMode

_ANSI = re.compile(r"\x1b\[[0-9;]*m")


def _char_width(ch: str) -> int:
    if (
        unicodedata.combining(ch)
        or unicodedata.category(ch) in ("Mn", "Me", "Cf")
        or 0xFE00 <= ord(ch) <= 0xFE0F
    ):
        return 0
    return 2 if unicodedata.east_asian_width(ch) in ("W", "F") else 1


def _width(text: str) -> int:
    return sum(_char_width(ch) for ch in _ANSI.sub("", text))


def _rgb(color: str) -> tuple[int, int, int]:
    color = color.lstrip("#")
    return int(color[0:2], 16), int(color[2:4], 16), int(color[4:6], 16)


@dataclass(frozen=True)
class _Style:
    fg: str | None = None
    bg: str | None = None
    bold: bool = False
    italic: bool = False
    pad: int = 0

    def render(self, text: str) -> str:
        codes = []
        if self.bold:
            codes.append("1")
        if self.italic:
            codes.append("3")
        if self.fg:
            codes.append("38;2;%d;%d;%d" % _rgb(self.fg))
        if self.bg:
            codes.append("48;2;%d;%d;%d" % _rgb(self.bg))
        lines = []
        for line in text.split("\n"):
            padded = " " * self.pad + line + " " * self.pad
            if codes:
                padded = f"\x1b[{';'.join(codes)}m{padded}\x1b[0m"
            lines.append(padded)
        return "\n".join(lines)


_BORDER = _Style(fg="#ff0000")
_TITLE = _Style(fg="#FFFFFF", bg="#ff0000", bold=True, pad=1)
_STATUS_BAR = _Style(fg="#000000", bg="#EEEEEE", pad=1)
_PLAYING = _Style(fg="#00FF00", bold=True)
_INFO = _Style(fg="#FFFFFF")
_ERROR = _Style(fg="#FF0000", bold=True)
_WARNING = _Style(fg="#FFAA00", bold=True)
_RESULT_INFO = _Style(fg="#AAAAAA", italic=True)
_NORMAL_TITLE = _Style(fg="#FFFFFF", bold=True)
_NORMAL_DESC = _Style(fg="#AAAAAA")
_SELECTED_TITLE = _Style(fg="#000000", bg="#ff0000", bold=True)
_SELECTED_DESC = _Style(fg="#000000", bg="#ff0000")
_DIM = _Style(fg="#777777")
_GRADIENT = ("#5A56E0", "#EE6FF8")
_EMPTY_BAR = _Style(fg="#606060")

_REPEAT_ICONS = {
    PlaybackMode.REPEAT_NONE: "🔁 Off",
    PlaybackMode.REPEAT_ONE: "🔂 One",
    PlaybackMode.REPEAT_ALL: "🔁 All",
}


def _frame(body: str) -> str:
    lines = body.split("\n")
    inner = max(_width(line) for line in lines) + 4
    side = _BORDER.render("│")
    rows = [" " * inner]
    rows += [f"  {line}{' ' * (inner - 4 - _width(line))}  " for line in lines]
    rows.append(" " * inner)
    return "\n".join(
        [
            _BORDER.render("╭" + "─" * inner + "╮"),
            *(side + row + side for row in rows),
            _BORDER.render("╰" + "─" * inner + "╯"),
        ]
    )


def _truncate(text: str, width: int) -> str:
    if width <= 0 or len(text) <= width:
        return text
    return text[: max(width - 1, 0)] + "…"


def _render_list(select_list: SelectList) -> str:
    lines = [_TITLE.render(select_list.title), ""]
    if not select_list.items:
        lines.append(_DIM.render("No items."))
        return "\n".join(lines)

    per_page = max(1, (select_list.height - 2) // 3)
    page = select_list.index // per_page
    pages = (len(select_list.items) + per_page - 1) // per_page
    start = page * per_page
    text_width = select_list.width - 2

    for offset, item in enumerate(select_list.items[start : start + per_page]):
        title = _truncate(item.title, text_width)
        desc = _truncate(item.description(), text_width)
        if start + offset == select_list.index:
            lines.append("│ " + _SELECTED_TITLE.render(title))
            lines.append("│ " + _SELECTED_DESC.render(desc))
        else:
            lines.append("  " + _NORMAL_TITLE.render(title))
            lines.append("  " + _NORMAL_DESC.render(desc))
        lines.append("")

    if pages > 1:
        dots = "".join(
            _INFO.render("•") if number == page else _DIM.render("•")
            for number in range(pages)
        )
        lines.append("  " + dots)
    return "\n".join(lines)


def _render_input(text_input: TextInput) -> str:
    if text_input.value:
        shown = text_input.value
        if text_input.width > 0:
            shown = shown[-text_input.width :]
        if text_input.focused:
            shown += "█"
        return "> " + shown
    return "> " + _DIM.render(text_input.placeholder)


def _blend(start: str, end: str, t: float) -> str:
    a, b = _rgb(start), _rgb(end)
    return "#" + "".join(f"{round(x + (y - x) * t):02X}" for x, y in zip(a, b))


def _render_progress(width: int, percent: float) -> str:
    percent = min(max(percent, 0.0), 1.0)
    label = f" {percent * 100:3.0f}%"
    bar_width = max(0, width - len(label))
    filled = int(bar_width * percent + 0.5)
    cells = []
    for position in range(filled):
        t = position / (filled - 1) if filled > 1 else 0.5
        cells.append(_Style(fg=_blend(*_GRADIENT, t)).render("█"))
    cells.append(_EMPTY_BAR.render("░" * (bar_width - filled)))
    return "".join(cells) + label


def format_time(seconds: int) -> str:
    """Format a number of seconds as ``MM:SS``."""
    minutes, secs = divmod(seconds, 60)
    return f"{minutes:02d}:{secs:02d}"


def render_playing_info(model: Model) -> str:
    """Describe the current track with its progress bar, or say nothing plays."""
    player = model.player
    queue = player.queue
    track = queue.current_track()
    if track is None:
        return "No song playing"

    play_status = "▶️" if player.is_playing else "⏸️"
    repeat_icon = _REPEAT_ICONS.get(queue.repeat_mode, "")
    shuffle_icon = "🔀 On" if queue.shuffle_mode else "🔀 Off"
    time_info = f"{format_time(player.current_pos)} / {format_time(player.duration)}"
    percent = player.current_pos / player.duration if player.duration > 0 else 0.0
    progress_bar = _render_progress(model.progress_width, percent)

    queue_info = ""
    if queue.tracks:
        position = next(
            (i + 1 for i, queued in enumerate(queue.tracks) if queued.id == track.id),
            0,
        )
        queue_info = f" ({position}/{len(queue.tracks)} in queue)"

    return (
        f"{play_status} {_PLAYING.render(track.title)} - "
        f"{_INFO.render(track.artist)}{queue_info}\n"
        f"{progress_bar}\n"
        f"{time_info}  {repeat_icon}  {shuffle_icon}"
    )


def render_status_bar(model: Model) -> str:
    """List the key bindings in a status bar."""
    controls = [
        "[q] Quit",
        "[↑/↓] Navigate",
        "[Enter] Play/Select",
        "[Space] Pause/Play",
        "[/] Search",
        "[n] Next",
        "[b] Previous",
        "[r] Repeat Mode",
        "[s] Shuffle",
        "[p] Show Tracks"
        if model.view_mode is ViewMode.PLAYLISTS
        else "[p] Show Playlists",
        "[R] Reset Cookie",
    ]
    return _STATUS_BAR.render("  ".join(controls))


def render(model: Model) -> str:
    """Render the whole screen for the model's current state."""
    if model.reset_mode:
        return _frame(
            _TITLE.render("Reset YouTube Music Cookie")
            + "\n\n"
            + _WARNING.render("Are you sure you want to reset your login credentials?")
            + "\n"
            + "This will remove the current cookie and require you to log in again.\n\n"
            + "Press 'y' to confirm or 'n' to cancel."
        )

    if model.login_mode:
        return _frame(
            _TITLE.render("YouTube Music TUI")
            + "\n\n"
            + "You need to authenticate with YouTube Music to use this application.\n\n"
            + _WARNING.render("Recommended: OAuth Authentication")
            + "\n"
            + "1. Follow the OAuth setup guide in the README.md\n"
            + "2. Run: ytmusicapi oauth --file ~/.ytmusic/oauth_auth.json\n\n"
            + _WARNING.render("Alternative: Browser Authentication")
            + "\n"
            + "1. Run: ytmusicapi browser --file ~/.ytmusic/headers_auth.json\n"
            + "2. Follow the browser header copying instructions\n\n"
            + "Then restart this application.\n\n"
            + "Press 'q' to quit."
        )

    if model.is_loading:
        return _frame(
            _TITLE.render("YouTube Music TUI")
            + "\n\n"
            + model.spinner.view()
            + " Loading..."
        )

    parts: list[str] = []
    if model.error_msg:
        parts.append(_ERROR.render(model.error_msg) + "\n\n")

    if model.view_mode is ViewMode.PLAYLISTS:
        list_view = _render_list(model.playlist_list)
    else:
        if model.search_results > 0 and not model.search_mode:
            parts.append(
                _RESULT_INFO.render(
                    f"Found {model.search_results} tracks. "
                    "Use ↑/↓ to navigate and Enter to play.\n\n"
                )
            )
        list_view = _render_list(model.track_list)

    if model.search_mode:
        parts.append(
            f"{_TITLE.render('YouTube Music - Search')}\n\n"
            f"{_render_input(model.search_input)}\n\n{list_view}"
        )
    else:
        parts.append(
            f"{list_view}\n\n{render_playing_info(model)}\n\n{render_status_bar(model)}"
        )

    return _frame("".join(parts))


def _items_of(model: Model) -> list[Any]:
    return model.active_list.items