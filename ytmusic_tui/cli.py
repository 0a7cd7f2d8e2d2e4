"""Command-line entry point and the terminal event loop."""

from __future__ import annotations

import argparse
import logging
import queue
import threading
from datetime import date
from pathlib import Path
from typing import Any

from blessed import Terminal

from ytmusic_tui import utils
from ytmusic_tui.state import Key, Model, WindowSize, initial_model
from ytmusic_tui.update import QUIT, update
from ytmusic_tui.view import render

_HELP_LINES = (
    "YouTube Music TUI",
    "----------------",
    "A terminal user interface for YouTube Music",
    "",
    "Usage:",
    "  ytmusic [options]",
    "",
    "Options:",
    "  -debug    Enable debug logging",
    "  -help     Show this help message",
    "",
    "Controls:",
    "  q         Quit",
    "  l         Login (when not logged in)",
    "  r         Reset cookies/credentials",
    "  /         Search",
    "  Enter     Play selected track",
    "  Space     Pause/resume playback",
    "  ↑/↓       Navigate up/down",
    "",
)

_SEQUENCE_NAMES = {
    "KEY_ENTER": "enter",
    "KEY_ESCAPE": "esc",
    "KEY_BACKSPACE": "backspace",
    "KEY_DELETE": "backspace",
    "KEY_UP": "up",
    "KEY_DOWN": "down",
    "KEY_LEFT": "left",
    "KEY_RIGHT": "right",
    "KEY_PGUP": "pgup",
    "KEY_PGDOWN": "pgdown",
    "KEY_HOME": "home",
    "KEY_END": "end",
    "KEY_TAB": "tab",
}

_CHAR_NAMES = {
    "\r": "enter",
    "\n": "enter",
    "\x1b": "esc",
    "\x7f": "backspace",
    "\x08": "backspace",
    "\x03": "ctrl+c",
    "\t": "tab",
}

_KEY_TIMEOUT = 0.05


def help_text() -> str:
    """Return the usage and key binding summary."""
    return "\n".join(_HELP_LINES)


def _key_name(key: Any) -> str:
    if key.is_sequence and key.name:
        return _SEQUENCE_NAMES.get(key.name, key.name.lower())
    text = str(key)
    return _CHAR_NAMES.get(text, text)


def _start(command: Any, inbox: queue.Queue[Any]) -> None:
    def work() -> None:
        message = command()
        if message is not None:
            inbox.put(message)

    threading.Thread(target=work, daemon=True).start()


def _next_message(term: Terminal, inbox: queue.Queue[Any]) -> Any:
    try:
        return inbox.get_nowait()
    except queue.Empty:
        pass
    key = term.inkey(timeout=_KEY_TIMEOUT)
    if not key:
        return None
    return Key(_key_name(key))


def run(model: Model) -> None:
    """Drive ``model`` in the full-screen terminal until the user quits."""
    term = Terminal()
    inbox: queue.Queue[Any] = queue.Queue()
    pending: list[Any] = list(model.init())
    try:
        while True:
            interactive = None
            with term.fullscreen(), term.cbreak(), term.hidden_cursor():
                size: tuple[int, int] | None = None
                dirty = True
                while interactive is None:
                    while pending:
                        command = pending.pop(0)
                        if command is QUIT:
                            return
                        if getattr(command, "interactive", False):
                            interactive = command
                            break
                        _start(command, inbox)
                    if interactive is not None:
                        break

                    current_size = (term.width, term.height)
                    if current_size != size:
                        size = current_size
                        pending.extend(update(model, WindowSize(*current_size)))
                        dirty = True
                        continue

                    if dirty:
                        print(term.home + term.clear + render(model), end="", flush=True)
                        dirty = False

                    message = _next_message(term, inbox)
                    if message is not None:
                        pending.extend(update(model, message))
                        dirty = True
            # Interactive commands read from the plain terminal.
            inbox.put(interactive())
    except KeyboardInterrupt:
        model.player.stop()


def _setup_logging() -> None:
    log_dir = Path.home() / ".ytmusic" / "logs"
    log_file = log_dir / f"ytmusic_{date.today():%Y-%m-%d}.log"
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    except OSError as exc:
        print(f"Error opening log file: {exc}\nContinuing without logging...")
        return
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s %(filename)s:%(lineno)d: %(message)s",
            datefmt="%Y/%m/%d %H:%M:%S",
        )
    )
    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(logging.DEBUG)
    logging.getLogger(__name__).debug(
        "Starting YouTube Music TUI with debug mode enabled"
    )


def main(argv: list[str] | None = None) -> int:
    """Parse the options, then run the interface; returns the exit status."""
    parser = argparse.ArgumentParser(prog="ytmusic", add_help=False)
    parser.add_argument("-debug", "--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("-help", "--help", action="store_true", help="Show help information")
    options = parser.parse_args(argv)

    if options.help:
        print(help_text())
        return 0

    if options.debug:
        _setup_logging()

    utils.clear_screen()

    try:
        run(initial_model(options.debug))
    except Exception as exc:
        print(f"Error running program: {exc}", end="")
        return 1
    return 0