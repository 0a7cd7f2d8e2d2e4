"""Play queue with history, shuffle and repeat modes."""

from __future__ import annotations

import random
from collections.abc import Callable, Iterable
from enum import IntEnum
from typing import Any

from ytmusic_tui.models import Track

Logger = Callable[..., Any]


class PlaybackMode(IntEnum):
    """Repeat behaviour of the queue."""

    REPEAT_NONE = 0
    REPEAT_ONE = 1
    REPEAT_ALL = 2


_NEXT_REPEAT_MODE = {
    PlaybackMode.REPEAT_NONE: PlaybackMode.REPEAT_ONE,
    PlaybackMode.REPEAT_ONE: PlaybackMode.REPEAT_ALL,
    PlaybackMode.REPEAT_ALL: PlaybackMode.REPEAT_NONE,
}


class Queue:
    """Tracks waiting to be played, the current position and how to move on."""

    def __init__(self, logger: Logger | None = None) -> None:
        self.tracks: list[Track] = []
        self.current_index = -1
        self.shuffle_mode = False
        self.repeat_mode = PlaybackMode.REPEAT_NONE
        self.history: list[int] = []
        self.shuffle_order: list[int] = []
        self._logger = logger

    def _log(self, message: str, *args: Any) -> None:
        if self._logger is not None:
            self._logger(message, *args)

    def _track_at(self, index: int) -> Track:
        if not 0 <= index < len(self.tracks):
            raise IndexError(f"track index out of range: {index}")
        return self.tracks[index]

    def current_track(self) -> Track | None:
        """Return the current track, or None when there is none."""
        if 0 <= self.current_index < len(self.tracks):
            return self.tracks[self.current_index]
        return None

    def clear(self) -> None:
        """Empty the queue and forget history and shuffle order."""
        self._log("Clearing queue")
        self.tracks = []
        self.current_index = -1
        self.history = []
        self.shuffle_order = []

    def add(self, track: Track) -> None:
        """Append one track; the first track added becomes current."""
        self._log("Adding track to queue: %s - %s", track.title, track.artist)
        self.tracks.append(track)
        if self.shuffle_mode:
            self.shuffle_order.append(len(self.tracks) - 1)
            if len(self.tracks) == 1:
                self.current_index = 0
        elif self.current_index == -1 and len(self.tracks) == 1:
            self.current_index = 0

    def add_tracks(self, tracks: Iterable[Track]) -> None:
        """Append several tracks, shuffling only the new ones in shuffle mode."""
        tracks = list(tracks)
        self._log("Adding %d tracks to queue", len(tracks))
        if not tracks:
            return
        original_length = len(self.tracks)
        self.tracks.extend(tracks)
        if self.shuffle_mode:
            self.shuffle_order.extend(range(original_length, len(self.tracks)))
            self._shuffle_segment(original_length, len(self.tracks) - 1)
        if self.current_index == -1:
            self.current_index = 0

    def set_tracks(self, tracks: Iterable[Track]) -> None:
        """Replace the queue's contents with ``tracks``."""
        tracks = list(tracks)
        self._log("Setting queue to %d tracks", len(tracks))
        self.clear()
        self.add_tracks(tracks)

    def play_track(self, index: int) -> bool:
        """Make ``index`` current; return False if it is out of range."""
        if not 0 <= index < len(self.tracks):
            self._log("Cannot play track with index %d, out of bounds", index)
            return False
        self._log("Playing track at index %d", index)
        if self.current_index != -1:
            self.history.append(self.current_index)
        self.current_index = index
        return True

    def next_track(self) -> Track | None:
        """Advance according to shuffle and repeat modes; None at the end."""
        if not self.tracks:
            self._log("Cannot play next track, queue is empty")
            return None

        if self.current_index != -1:
            self.history.append(self.current_index)

        if self.repeat_mode is PlaybackMode.REPEAT_ONE and self.current_index != -1:
            self._log("Repeat One mode: replaying current track")
            return self._track_at(self.current_index)

        if self.shuffle_mode:
            try:
                position = self.shuffle_order.index(self.current_index)
            except ValueError:
                position = -1
            if position == -1 or position == len(self.shuffle_order) - 1:
                if self.repeat_mode is not PlaybackMode.REPEAT_ALL:
                    self._log("End of shuffle order reached with no repeat")
                    return None
                next_index = self.shuffle_order[0]
                self._log(
                    "Repeat All mode (shuffle): returning to first track in shuffle order"
                )
            else:
                next_index = self.shuffle_order[position + 1]
                self._log("Playing next track in shuffle order: %d", next_index)
        elif self.current_index == -1 or self.current_index == len(self.tracks) - 1:
            if self.repeat_mode is not PlaybackMode.REPEAT_ALL:
                self._log("End of queue reached with no repeat")
                return None
            next_index = 0
            self._log("Repeat All mode: returning to first track")
        else:
            next_index = self.current_index + 1
            self._log("Playing next track: %d", next_index)

        self.current_index = next_index
        return self._track_at(next_index)

    def previous_track(self) -> Track | None:
        """Step back through history, or sequentially when there is none."""
        if not self.tracks:
            self._log("Cannot play previous track, queue is empty")
            return None

        if self.history:
            self.current_index = self.history.pop()
            self._log(
                "Going back to previous track from history: %d", self.current_index
            )
            return self._track_at(self.current_index)

        if self.shuffle_mode:
            self._log("Cannot go back in shuffle mode without history")
            return self._track_at(self.current_index)

        if self.current_index <= 0:
            if self.repeat_mode is PlaybackMode.REPEAT_ALL:
                self.current_index = len(self.tracks) - 1
                self._log("Repeat All mode: wrapping to last track")
            else:
                self._log("Already at the first track")
            return self._track_at(self.current_index)

        self.current_index -= 1
        self._log("Playing previous track: %d", self.current_index)
        return self._track_at(self.current_index)

    def toggle_shuffle_mode(self) -> None:
        """Switch shuffle on or off, keeping the current track and clearing history."""
        self.shuffle_mode = not self.shuffle_mode
        self._log("Shuffle mode toggled to: %s", self.shuffle_mode)

        if self.shuffle_mode:
            original = self.current_track()
            self.shuffle_order = list(range(len(self.tracks)))
            random.shuffle(self.shuffle_order)
            if original is not None:
                position = self.shuffle_order.index(self.current_index)
                order = self.shuffle_order
                order[position], order[0] = order[0], order[position]
                self.current_index = order[0]
        else:
            track = self.current_track() if self.current_index != -1 else None
            if track is not None:
                self.current_index = next(
                    (i for i, t in enumerate(self.tracks) if t.id == track.id),
                    self.current_index,
                )
            self.shuffle_order = []

        self.history = []

    def _shuffle_segment(self, start: int, end: int) -> None:
        if start >= end or end >= len(self.shuffle_order):
            return
        segment = self.shuffle_order[start : end + 1]
        random.shuffle(segment)
        self.shuffle_order[start : end + 1] = segment

    def cycle_repeat_mode(self) -> PlaybackMode:
        """Move to the next repeat mode: none, one, all, and round again."""
        self.repeat_mode = _NEXT_REPEAT_MODE[self.repeat_mode]
        self._log("Repeat mode changed to: %d", int(self.repeat_mode))
        return self.repeat_mode