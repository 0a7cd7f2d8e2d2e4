"""Playback of tracks through external mpv and yt-dlp processes."""

from __future__ import annotations

import logging
import os
import re
import signal
import subprocess
import sys
import threading
from collections.abc import Callable
from datetime import date
from pathlib import Path
from typing import Any

from ytmusic_tui.queue import PlaybackMode, Queue

_WATCH_URL = "https://www.youtube.com/watch?v="
_INTEGER = re.compile(r"[+-]?\d+")


class PlayerError(RuntimeError):
    """Raised when playback cannot be started."""


def watch_url(track_id: str) -> str:
    """Return the watch page URL for a video id; mpv can play it directly."""
    return _WATCH_URL + track_id


def _atoi(text: str) -> int:
    return int(text) if _INTEGER.fullmatch(text) else 0


def parse_duration(text: str) -> int:
    """Parse ``MM:SS`` or ``HH:MM:SS`` into seconds; anything else gives 0."""
    parts = [_atoi(part) for part in text.strip().split(":")]
    if len(parts) == 2:
        minutes, seconds = parts
        return minutes * 60 + seconds
    if len(parts) == 3:
        hours, minutes, seconds = parts
        return hours * 3600 + minutes * 60 + seconds
    return 0


def _open_logger(debug_mode: bool) -> logging.Logger | None:
    if not debug_mode:
        return None
    log_file = Path.home() / ".ytmusic" / "logs" / f"player_{date.today():%Y-%m-%d}.log"
    try:
        handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    except OSError as exc:
        print(f"Error opening player log file: {exc}")
        return None
    handler.setFormatter(
        logging.Formatter(
            "Player: %(asctime)s %(filename)s:%(lineno)d: %(message)s",
            datefmt="%Y/%m/%d %H:%M:%S",
        )
    )
    logger = logging.Logger("Player", logging.DEBUG)
    logger.addHandler(handler)
    return logger


class Player:
    """Plays one track at a time with mpv and keeps the play queue."""

    def __init__(self, debug_mode: bool = False) -> None:
        self._logger = _open_logger(debug_mode)
        self._process: subprocess.Popen[bytes] | None = None
        self._next_callback: Callable[[], Any] | None = None
        self.is_playing = False
        self.current_pos = 0
        self.duration = 0
        self.queue = Queue(self.log_debug)

    def log_debug(self, message: str, *args: Any) -> None:
        """Write a %-style message to the debug log, if there is one."""
        if self._logger is not None:
            self._logger.debug(message, *args)

    def set_next_callback(self, callback: Callable[[], Any] | None) -> None:
        """Set the function called when a track finishes on its own."""
        self._next_callback = callback

    def _probe_duration(self, url: str) -> int:
        self.log_debug("Trying to get accurate duration with yt-dlp")
        try:
            result = subprocess.run(
                ["yt-dlp", "--get-duration", url],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
                check=False,
            )
        except OSError as exc:
            self.log_debug("Failed to get duration with yt-dlp: %s", exc)
            return 0
        if result.returncode != 0:
            self.log_debug(
                "Failed to get duration with yt-dlp: exit status %d", result.returncode
            )
            return 0
        text = result.stdout.decode("utf-8", errors="replace").strip()
        self.log_debug("Got duration string from yt-dlp: %s", text)
        return parse_duration(text)

    def play(self, url: str, duration: int) -> None:
        """Start playing ``url``, stopping whatever is playing first."""
        if self.is_playing:
            self.stop()

        self.log_debug("Playing URL: %s, initial duration: %d", url, duration)

        probed = self._probe_duration(url)
        if probed > 0:
            self.log_debug(
                "Setting new duration: %d seconds (was %d seconds)", probed, duration
            )
            duration = probed

        try:
            process = subprocess.Popen(
                ["mpv", "--no-video", "--no-terminal", url],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as exc:
            self.log_debug("Error starting mpv: %s", exc)
            raise PlayerError(f"could not start mpv: {exc}") from exc

        self._process = process
        self.is_playing = True
        self.current_pos = 0
        self.duration = duration

        threading.Thread(
            target=self._monitor_playback, args=(process,), daemon=True
        ).start()

    def _monitor_playback(self, process: subprocess.Popen[bytes]) -> None:
        process.wait()
        if self.is_playing and self.current_pos >= self.duration - 1:
            self.log_debug("Track finished naturally, advancing to next")
            self.is_playing = False
            if self._next_callback is not None:
                self._next_callback()
        else:
            self.log_debug("Track was stopped manually or still playing")

    def stop(self) -> None:
        """Stop the current playback."""
        self.log_debug("Stopping playback")
        if self.is_playing and self._process is not None:
            self._process.kill()
            self._process.wait()
        self.is_playing = False

    def toggle_pause(self) -> None:
        """Pause or resume the player process and flip ``is_playing``."""
        self.log_debug("Toggling pause state, current state: %s", self.is_playing)
        if self._process is not None and sys.platform != "win32":
            sig = signal.SIGTSTP if self.is_playing else signal.SIGCONT
            try:
                os.kill(self._process.pid, sig)
            except OSError as exc:
                self.log_debug("Could not signal player process: %s", exc)
        self.is_playing = not self.is_playing

    def play_track(self, index: int) -> None:
        """Make queue entry ``index`` current and play it."""
        if not self.queue.play_track(index):
            raise PlayerError(f"invalid track index: {index}")
        self.play_current_track()

    def play_current_track(self) -> None:
        """Play the queue's current track."""
        track = self.queue.current_track()
        if track is None:
            raise PlayerError("no track to play")
        self.play(watch_url(track.id), track.duration)

    def play_next(self) -> None:
        """Advance the queue and play the track it lands on."""
        track = self.queue.next_track()
        if track is None:
            raise PlayerError("no next track available")
        self.play(watch_url(track.id), track.duration)

    def play_previous(self) -> None:
        """Step the queue back and play the track it lands on."""
        track = self.queue.previous_track()
        if track is None:
            raise PlayerError("no previous track available")
        self.play(watch_url(track.id), track.duration)

    def toggle_shuffle(self) -> None:
        """Switch the queue's shuffle mode."""
        self.queue.toggle_shuffle_mode()

    def cycle_repeat_mode(self) -> PlaybackMode:
        """Move the queue to its next repeat mode and return it."""
        return self.queue.cycle_repeat_mode()