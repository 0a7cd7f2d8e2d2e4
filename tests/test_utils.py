import subprocess
import sys
from unittest import mock

import pytest

from ytmusic_tui.utils import clear_screen, open_browser

URL = "https://music.youtube.com"


def completed(returncode):
    return subprocess.CompletedProcess(args=[], returncode=returncode)


@pytest.mark.parametrize(
    "platform, command",
    [
        ("darwin", ["open", URL]),
        ("win32", ["cmd", "/c", "start", URL]),
        ("linux", ["xdg-open", URL]),
    ],
)
def test_open_browser_uses_platform_command(platform, command):
    with mock.patch.object(sys, "platform", platform), mock.patch(
        "subprocess.run", return_value=completed(0)
    ) as run:
        assert open_browser(URL) is True
    assert run.call_args.args[0] == command


def test_open_browser_reports_failure_exit():
    with mock.patch.object(sys, "platform", "linux"), mock.patch(
        "subprocess.run", return_value=completed(3)
    ):
        assert open_browser(URL) is False


def test_open_browser_reports_missing_program():
    with mock.patch.object(sys, "platform", "linux"), mock.patch(
        "subprocess.run", side_effect=FileNotFoundError("xdg-open")
    ):
        assert open_browser(URL) is False


@pytest.mark.parametrize(
    "platform, command",
    [("win32", ["cmd", "/c", "cls"]), ("linux", ["clear"]), ("darwin", ["clear"])],
)
def test_clear_screen_command(platform, command):
    with mock.patch.object(sys, "platform", platform), mock.patch(
        "subprocess.run", return_value=completed(0)
    ) as run:
        assert clear_screen() is None
    assert run.call_args.args[0] == command


def test_clear_screen_ignores_missing_program():
    with mock.patch.object(sys, "platform", "linux"), mock.patch(
        "subprocess.run", side_effect=FileNotFoundError("clear")
    ) as run:
        assert clear_screen() is None
    assert run.call_count == 1