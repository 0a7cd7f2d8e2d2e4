"""Small terminal and desktop helpers."""

from __future__ import annotations

import subprocess
import sys


def clear_screen() -> None:
    """Clear the terminal; failures are ignored."""
    command = ["cmd", "/c", "cls"] if sys.platform == "win32" else ["clear"]
    try:
        subprocess.run(command, check=False)
    except OSError:
        pass


def open_browser(url: str) -> bool:
    """Open ``url`` in the system browser and report whether that succeeded."""
    if sys.platform == "darwin":
        command = ["open", url]
    elif sys.platform == "win32":
        command = ["cmd", "/c", "start", url]
    else:
        command = ["xdg-open", url]
    try:
        result = subprocess.run(command, check=False)
    except OSError:
        return False
    return result.returncode == 0