"""Access to YouTube Music through the helper bridge, with cookie-based login."""

from __future__ import annotations

import json
import logging
import os
from datetime import date
from pathlib import Path
from typing import Any

from ytmusic_tui import utils
from ytmusic_tui.bridge import PythonBridge
from ytmusic_tui.models import Playlist, Track
from ytmusic_tui.player import watch_url

SECURE_COOKIE_NAME = "__Secure-3PSID"
_COOKIE_FILE = "cookies.json"
_HOME_URL = "https://music.youtube.com"
_ZERO_TIME = "0001-01-01T00:00:00Z"

_BOX_WIDE = "─" * 67
_BOX_NARROW = "─" * 57


class ApiError(RuntimeError):
    """Raised when a request to the music service cannot be made."""


class NotLoggedInError(ApiError):
    """Raised when a request needs a login that is not there."""

    def __init__(self, message: str = "not logged in") -> None:
        super().__init__(message)


def _open_logger(log_dir: Path, debug_mode: bool) -> logging.Logger | None:
    if not debug_mode:
        return None
    log_file = log_dir / f"ytmusic_{date.today():%Y-%m-%d}.log"
    try:
        handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    except OSError as exc:
        print(f"Error opening log file: {exc}")
        return None
    handler.setFormatter(
        logging.Formatter(
            "YTMusic: %(asctime)s %(filename)s:%(lineno)d: %(message)s",
            datefmt="%Y/%m/%d %H:%M:%S",
        )
    )
    logger = logging.Logger("YTMusic", logging.DEBUG)
    logger.addHandler(handler)
    return logger


def _stored_cookie(name: str, value: str) -> dict[str, Any]:
    return {
        "Name": name,
        "Value": value,
        "Path": "",
        "Domain": "",
        "Expires": _ZERO_TIME,
        "RawExpires": "",
        "MaxAge": 0,
        "Secure": False,
        "HttpOnly": False,
        "SameSite": 0,
        "Raw": "",
        "Unparsed": None,
    }


class YouTubeMusicAPI:
    """Client for YouTube Music that keeps the login cookie and uses the bridge."""

    def __init__(
        self,
        debug_mode: bool = False,
        config_path: str | os.PathLike[str] | None = None,
    ) -> None:
        self.config_path = (
            Path(config_path) if config_path is not None else Path.home() / ".ytmusic"
        )
        self.config_path.mkdir(parents=True, exist_ok=True)
        log_dir = self.config_path / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)

        self._logger = _open_logger(log_dir, debug_mode)
        self._cookies: dict[str, dict[str, Any]] = {}
        self.is_logged_in = False

        self.bridge = PythonBridge(self.config_path, self.log_debug)
        self.bridge.set_api(self)

        self._load_cookies()

        if debug_mode and self._logger is not None:
            self.log_debug("YouTubeMusicAPI initialized")
            self.log_debug("Login status: %s", self.is_logged_in)
            self.log_debug("Python bridge available: %s", self.bridge.is_available())

    @property
    def _cookie_file(self) -> Path:
        return self.config_path / _COOKIE_FILE

    def log_debug(self, message: str, *args: Any) -> None:
        """Write a %-style message to the debug log, if there is one."""
        if self._logger is not None:
            self._logger.debug(message, *args)

    def secure_cookie(self) -> str | None:
        """Return the value of the login cookie, or None when it is not set."""
        cookie = self._cookies.get(SECURE_COOKIE_NAME)
        return None if cookie is None else cookie["Value"]

    def _set_cookie(self, name: str, value: str, **attributes: Any) -> None:
        self._cookies[name] = {"Name": name, "Value": value, **attributes}

    def _load_cookies(self) -> None:
        path = self._cookie_file
        if not path.exists():
            self.log_debug("No cookies file found at %s", path)
            return
        try:
            data = path.read_bytes()
        except OSError as exc:
            self.log_debug("Error reading cookies file: %s", exc)
            return
        try:
            entries = json.loads(data)
            if entries is None:
                entries = []
            if not isinstance(entries, list) or not all(
                isinstance(entry, dict) for entry in entries
            ):
                raise ValueError("cookies must be a list of objects")
            cookies = [
                (str(entry.get("Name") or ""), str(entry.get("Value") or ""))
                for entry in entries
            ]
        except ValueError as exc:
            self.log_debug("Error unmarshalling cookies: %s", exc)
            return

        if any(name == SECURE_COOKIE_NAME for name, _ in cookies):
            self.is_logged_in = True
            self.log_debug("Found valid __Secure-3PSID cookie, setting logged in")

        if self.is_logged_in:
            for name, value in cookies:
                if name:
                    self._set_cookie(name, value)
            self.log_debug("Loaded %d cookies into client", len(cookies))

    def _save_cookies(self) -> None:
        cookies = [
            _stored_cookie(cookie["Name"], cookie["Value"])
            for cookie in self._cookies.values()
        ]
        self.log_debug("Saving %d cookies", len(cookies))
        self._cookie_file.write_text(json.dumps(cookies), encoding="utf-8")

    def _require_login(self) -> None:
        if not self.is_logged_in:
            raise NotLoggedInError()

    def search(self, query: str) -> list[Track]:
        """Search for songs; gives placeholder results when the bridge is missing."""
        self._require_login()
        self.log_debug("Searching for: %s", query)

        if not self.bridge.is_available():
            self.log_debug(
                "Python bridge not available, falling back to placeholder results"
            )
            return [
                Track(
                    id="dQw4w9WgXcQ",
                    title="Sample: " + query,
                    artist="Python bridge not available",
                    duration=180,
                ),
                Track(
                    id="xvFZjo5PgG0",
                    title="Install ytmusicapi",
                    artist="pip install ytmusicapi",
                    duration=240,
                ),
            ]

        try:
            tracks = self.bridge.search(query)
        except Exception as exc:
            self.log_debug("Python bridge search failed: %s", exc)
            raise
        self.log_debug("Found %d tracks via Python bridge", len(tracks))
        return tracks

    def get_user_playlists(self) -> list[Playlist]:
        """Fetch the user's playlists; placeholders when the bridge is missing."""
        self._require_login()
        self.log_debug("Fetching user playlists via Python bridge")

        if not self.bridge.is_available():
            self.log_debug("Python bridge not available, returning placeholder playlists")
            return [
                Playlist(
                    id="PLACEHOLDER_1",
                    title="Python Bridge Not Available",
                    desc="Install ytmusicapi",
                    track_count=0,
                    author="System",
                ),
                Playlist(
                    id="PLACEHOLDER_2",
                    title="Install Dependencies",
                    desc="pip install ytmusicapi",
                    track_count=0,
                    author="System",
                ),
            ]

        try:
            playlists = self.bridge.get_playlists()
        except Exception as exc:
            self.log_debug("Python bridge get playlists failed: %s", exc)
            raise
        self.log_debug("Found %d playlists via Python bridge", len(playlists))
        return playlists

    def get_playlist_tracks(self, playlist_id: str) -> list[Track]:
        """Fetch the tracks of a playlist; a placeholder when the bridge is missing."""
        self._require_login()
        self.log_debug(
            "Fetching playlist tracks for ID: %s via Python bridge", playlist_id
        )

        if not self.bridge.is_available():
            self.log_debug("Python bridge not available, returning placeholder tracks")
            return [
                Track(
                    id="dQw4w9WgXcQ",
                    title="Python Bridge Required",
                    artist="Install ytmusicapi",
                    duration=180,
                )
            ]

        try:
            tracks = self.bridge.get_playlist_tracks(playlist_id)
        except Exception as exc:
            self.log_debug("Python bridge get playlist tracks failed: %s", exc)
            raise
        self.log_debug("Found %d tracks in playlist via Python bridge", len(tracks))
        return tracks

    def get_stream_url(self, track_id: str) -> str:
        """Return a URL for the track that the player can stream."""
        self._require_login()
        self.log_debug("Getting stream URL for track ID: %s", track_id)
        url = watch_url(track_id)
        self.log_debug("Returning stream URL: %s", url)
        return url

    def reset_cookies(self) -> None:
        """Forget all cookies, log out and delete the saved cookie file."""
        self.log_debug("Resetting cookies")
        self._cookies = {}
        self.is_logged_in = False

        path = self._cookie_file
        if path.exists():
            self.log_debug("Removing cookies file at %s", path)
            try:
                path.unlink()
            except OSError as exc:
                self.log_debug("Error removing cookies file: %s", exc)
                raise

    def _store_login_cookie(self, cookie: str) -> None:
        self._set_cookie(
            SECURE_COOKIE_NAME, cookie, Domain=".youtube.com", Path="/", Secure=True
        )
        self.is_logged_in = True

    def manual_login(self, cookie: str) -> None:
        """Log in with a given ``__Secure-3PSID`` cookie value and save it."""
        if not cookie:
            raise ApiError("no cookie provided")
        self.log_debug("Manual login attempt with cookie length: %d", len(cookie))
        self._store_login_cookie(cookie)
        self._save_cookies()

    def initiate_login(self) -> None:
        """Walk the user through copying the login cookie from a browser."""
        self.log_debug("Initiating login process")

        utils.clear_screen()
        print(f"┌{_BOX_WIDE}┐")
        print("│ Attempting to open YouTube Music in your browser...               │")
        print(f"└{_BOX_WIDE}┘")

        browser_opened = utils.open_browser(_HOME_URL)

        utils.clear_screen()
        if not browser_opened:
            print(f"┌{_BOX_WIDE}┐")
            print("│ Could not open browser automatically.                             │")
            print(f"└{_BOX_WIDE}┘")
            print()
            print("To get your cookie manually:")
            print(f"  1. Open {_HOME_URL} in your browser")
            print("  2. Log in if you're not already logged in")
            print("  3. Open developer tools (F12 or right-click > Inspect)")
            print("  4. Go to Application/Storage tab > Cookies > music.youtube.com")
            print("  5. Find the '__Secure-3PSID' cookie and copy its value")
        else:
            print(f"┌{_BOX_WIDE}┐")
            print("│ Browser opened to YouTube Music.                                  │")
            print(f"└{_BOX_WIDE}┘")
            print()
            print("Please follow these steps:")
            print("  1. Log in if you're not already logged in")
            print("  2. Open developer tools (F12 or right-click > Inspect)")
            print("  3. Go to Application/Storage tab > Cookies > music.youtube.com")
            print("  4. Find the '__Secure-3PSID' cookie and copy its value")

        print()
        print("IMPORTANT: Make sure you're getting the cookie from music.youtube.com,")
        print("not from google.com. The correct domain is .youtube.com")
        print()
        print(f"┌{_BOX_WIDE}┐")

        try:
            line = input("│ Paste the cookie value here: ")
        except EOFError:
            line = ""
        words = line.split()
        cookie = words[0] if words else ""

        if not cookie:
            self.log_debug("No cookie provided during login")
            raise ApiError("no cookie provided")

        self.log_debug("Received cookie input with length: %d", len(cookie))
        print(f"└{_BOX_NARROW}┘")

        self._store_login_cookie(cookie)
        utils.clear_screen()
        print(f"┌{_BOX_NARROW}┐")
        print("│ Login successful! Press any key to continue.            │")
        print(f"└{_BOX_NARROW}┘")
        self._save_cookies()