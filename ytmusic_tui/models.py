"""Track and playlist records, and helpers that read video ids from renderer payloads."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any


class TrackIdNotFound(LookupError):
    """Raised when a renderer payload does not lead to a video id."""


@dataclass
class Track:
    """A single music track; ``duration`` is in seconds."""

    id: str
    title: str
    artist: str = ""
    duration: int = 0

    def filter_value(self) -> str:
        """Text used when filtering a list of tracks."""
        return f"{self.title} {self.artist}"

    def description(self) -> str:
        """Second line shown under the title in a list."""
        return self.artist


@dataclass
class Playlist:
    """A playlist with its summary information and, optionally, its tracks."""

    id: str
    title: str
    desc: str = ""
    track_count: int = 0
    author: str = ""
    tracks: list[Track] = field(default_factory=list)

    def filter_value(self) -> str:
        """Text used when filtering a list of playlists."""
        return f"{self.title} {self.author}"

    def description(self) -> str:
        """Second line shown under the title in a list."""
        return f"by {self.author} ({self.track_count} tracks)"


_Step = tuple[str, str, str]

_OVERLAY_PATH: tuple[_Step, ...] = (
    ("overlay", "no overlay found", "overlay is not a map"),
    (
        "musicItemThumbnailOverlayRenderer",
        "no thumbnail overlay found",
        "thumbnail overlay is not a map",
    ),
    ("content", "no content found in thumbnail overlay", "content is not a map"),
    ("musicPlayButtonRenderer", "no play button found", "play button is not a map"),
    (
        "playNavigationEndpoint",
        "no navigation endpoint found",
        "navigation endpoint is not a map",
    ),
    ("watchEndpoint", "no watch endpoint found", "watch endpoint is not a map"),
)

_MENU_PATH: tuple[_Step, ...] = (
    ("menu", "no menu found", "menu is not a map"),
    ("menuRenderer", "no menu renderer found", "menu renderer is not a map"),
)

_MENU_ITEM_PATH = ("menuServiceItemRenderer", "serviceEndpoint", "watchEndpoint")


def _descend(node: Mapping[str, Any], steps: Iterable[_Step]) -> Mapping[str, Any]:
    for key, missing, not_a_map in steps:
        if key not in node:
            raise TrackIdNotFound(missing)
        node = node[key]
        if not isinstance(node, Mapping):
            raise TrackIdNotFound(not_a_map)
    return node


def _follow(node: Any, keys: Iterable[str]) -> Mapping[str, Any] | None:
    for key in keys:
        if not isinstance(node, Mapping):
            return None
        node = node.get(key)
    return node if isinstance(node, Mapping) else None


def extract_track_id_from_overlay(renderer: Mapping[str, Any]) -> str:
    """Return the video id behind a renderer's thumbnail play button."""
    watch = _descend(renderer, _OVERLAY_PATH)
    video_id = watch.get("videoId")
    if not isinstance(video_id, str):
        raise TrackIdNotFound("no video ID found")
    return video_id


def extract_track_id_from_menu(renderer: Mapping[str, Any]) -> str:
    """Return the first video id found among a renderer's menu service items."""
    menu_renderer = _descend(renderer, _MENU_PATH)
    items = menu_renderer.get("items")
    if not isinstance(items, list) or not items:
        raise TrackIdNotFound("no menu items found")
    for item in items:
        watch = _follow(item, _MENU_ITEM_PATH)
        if watch is None:
            continue
        video_id = watch.get("videoId")
        if isinstance(video_id, str):
            return video_id
    raise TrackIdNotFound("no video ID found in menu")