"""Runs the ytmusicapi helper script and decodes its JSON replies."""

from __future__ import annotations

import json
import os
import shutil
import subprocess
from collections.abc import Callable, Mapping, Sequence
from typing import Any, Protocol

from ytmusic_tui.models import Playlist, Track

Logger = Callable[..., Any]

_SCRIPT_NAME = "ytmusic_bridge.py"


class BridgeError(RuntimeError):
    """Raised when the helper script is missing, fails or replies badly."""


class _CookieSource(Protocol):
    is_logged_in: bool

    def secure_cookie(self) -> str | None: ...


def _find_python() -> tuple[str, bool]:
    for name in ("python3", "python"):
        if shutil.which(name):
            return name, True
    return "python", False


def _field(data: Mapping[str, Any], key: str, kind: type, default: Any) -> Any:
    value = data.get(key)
    if value is None:
        return default
    if kind is int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"field {key!r} is not an integer")
    elif not isinstance(value, kind):
        raise ValueError(f"field {key!r} has the wrong type")
    return value


def _items(data: Mapping[str, Any], key: str) -> list[Mapping[str, Any]]:
    items = _field(data, key, list, [])
    if not all(isinstance(item, Mapping) for item in items):
        raise ValueError(f"entries of {key!r} must be objects")
    return items


def _decode_track(data: Mapping[str, Any]) -> Track:
    return Track(
        id=_field(data, "id", str, ""),
        title=_field(data, "title", str, ""),
        artist=_field(data, "artist", str, ""),
        duration=_field(data, "duration", int, 0),
    )


def _decode_playlist(data: Mapping[str, Any]) -> Playlist:
    return Playlist(
        id=_field(data, "id", str, ""),
        title=_field(data, "title", str, ""),
        desc=_field(data, "description", str, ""),
        track_count=_field(data, "track_count", int, 0),
        author=_field(data, "author", str, ""),
    )


class PythonBridge:
    """Talks to the ``ytmusic_bridge.py`` helper through a child interpreter."""

    def __init__(self, config_path: str | os.PathLike[str], logger: Logger | None = None) -> None:
        self._logger = logger
        self._api: _CookieSource | None = None

        self.python_path, found = _find_python()
        if not found:
            self._log("Warning: Python not found in PATH")

        candidates = [
            "scripts/ytmusic_bridge.py",
            "../scripts/ytmusic_bridge.py",
            "../../scripts/ytmusic_bridge.py",
            os.path.join(os.fspath(config_path), _SCRIPT_NAME),
        ]
        self.script_path = next((p for p in candidates if os.path.exists(p)), "")
        if not self.script_path:
            self._log("Warning: ytmusic_bridge.py script not found")

    def _log(self, message: str, *args: Any) -> None:
        if self._logger is not None:
            self._logger(message, *args)

    def set_api(self, api: _CookieSource | None) -> None:
        """Set the API object that supplies the login cookie."""
        self._api = api

    def is_available(self) -> bool:
        """Report whether both the script and an interpreter can be found."""
        if not self.script_path or not os.path.exists(self.script_path):
            return False
        return shutil.which(self.python_path) is not None

    def _cookie(self) -> str:
        if self._api is None or not self._api.is_logged_in:
            return ""
        return self._api.secure_cookie() or ""

    def _run(self, args: Sequence[str]) -> bytes:
        if not self.is_available():
            raise BridgeError("Python bridge not available")

        command = [self.script_path, *args]
        cookie = self._cookie()
        if cookie:
            command += ["--cookie", cookie]

        self._log("Running Python bridge command: %s %s", self.python_path, " ".join(command))
        try:
            result = subprocess.run(
                [self.python_path, *command],
                stdin=subprocess.DEVNULL,
                capture_output=True,
                check=False,
            )
        except OSError as exc:
            raise BridgeError(f"Python bridge command failed: {exc}") from exc

        if result.returncode != 0:
            self._log(
                "Python bridge stderr: %s",
                result.stderr.decode("utf-8", errors="replace"),
            )
            raise BridgeError(
                f"Python bridge command failed: exit status {result.returncode}"
            )

        self._log("Python bridge output length: %d bytes", len(result.stdout))
        return result.stdout

    def _request(
        self,
        args: Sequence[str],
        key: str,
        decode: Callable[[Mapping[str, Any]], Any],
        parse_label: str,
        fail_label: str,
    ) -> list[Any]:
        output = self._run(args)
        try:
            response = json.loads(output)
            if not isinstance(response, Mapping):
                raise ValueError("response is not an object")
            success = _field(response, "success", bool, False)
            error = _field(response, "error", str, "")
            items = [decode(item) for item in _items(response, key)]
        except ValueError as exc:
            self._log("Error unmarshaling %s response: %s", parse_label, exc)
            raise BridgeError(f"failed to parse {parse_label} response: {exc}") from exc

        if not success:
            self._log("%s failed: %s", fail_label.capitalize(), error)
            raise BridgeError(f"{fail_label} failed: {error}")
        return items

    def search(self, query: str) -> list[Track]:
        """Search for songs matching ``query``."""
        tracks = self._request(
            ["search", "--query", query, "--filter", "songs", "--limit", "20"],
            "tracks",
            _decode_track,
            "search",
            "search",
        )
        self._log("Search returned %d tracks", len(tracks))
        return tracks

    def get_playlists(self) -> list[Playlist]:
        """Fetch the signed-in user's playlists."""
        playlists = self._request(
            ["playlists", "--limit", "25"],
            "playlists",
            _decode_playlist,
            "playlists",
            "get playlists",
        )
        self._log("Get playlists returned %d playlists", len(playlists))
        return playlists

    def get_playlist_tracks(self, playlist_id: str) -> list[Track]:
        """Fetch the tracks of one playlist."""
        tracks = self._request(
            ["playlist_tracks", "--playlist-id", playlist_id, "--limit", "100"],
            "tracks",
            _decode_track,
            "playlist tracks",
            "get playlist tracks",
        )
        self._log("Get playlist tracks returned %d tracks", len(tracks))
        return tracks

    def get_liked_songs(self) -> list[Track]:
        """Fetch the signed-in user's liked songs."""
        tracks = self._request(
            ["liked_songs", "--limit", "100"],
            "tracks",
            _decode_track,
            "liked songs",
            "get liked songs",
        )
        self._log("Get liked songs returned %d tracks", len(tracks))
        return tracks