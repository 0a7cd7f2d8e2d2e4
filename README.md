# ytmusic_tui

A full-screen terminal interface for YouTube Music. You can search for songs,
browse your playlists and play tracks. The play queue supports repeat and
shuffle modes.

## Requirements

- Python 3.10 or later. The only library it needs is `blessed`.
- `mpv` on your `PATH`. It plays the audio.
- `yt-dlp` on your `PATH`. It looks up the exact length of a track before the
  track plays. If it is missing, the length reported by the search is used.
- A helper script named `ytmusic_bridge.py`, run by a Python interpreter that
  has `ytmusicapi` installed. This is needed for real search and playlist
  results. See "What is not included" below.

## Installation

```
pip install .
```

For the tests:

```
pip install .[test]
pytest
```

## Usage

```
ytmusic [options]
```

| Option               | Meaning                                         |
|----------------------|-------------------------------------------------|
| `-debug`, `--debug`  | Write debug logs to `~/.ytmusic/logs/`          |
| `-help`, `--help`    | Print the usage and key summary, then exit      |

The command exits with status 1 if the interface stops because of an error.

## Logging in

The login is a `__Secure-3PSID` cookie stored in `~/.ytmusic/cookies.json`.
If no such cookie is stored, the program starts on a login screen. On that
screen:

- `l` starts the login. The program tries to open music.youtube.com in your
  browser, shows how to copy the `__Secure-3PSID` cookie from the browser's
  developer tools, and asks you to paste the cookie's value. Take the cookie
  from the `.youtube.com` domain. The value is saved to `cookies.json`.
- `q` quits.

The login screen also mentions `ytmusicapi` OAuth and browser-header files.
This program does not read those files. It uses only `cookies.json`.

Once you are logged in, the program loads your playlists.

## Controls

Main screen:

| Key                              | Action                                          |
|----------------------------------|-------------------------------------------------|
| `q`, `Ctrl+C`                    | Stop playback and quit                          |
| `↑` / `k`, `↓` / `j`             | Move the cursor                                 |
| `←` `h` `PgUp` `u`               | Previous page                                   |
| `→` `l` `PgDn` `f` `d`           | Next page                                       |
| `Home` `g`, `End` `G`            | First / last item                               |
| `Enter`                          | Play the selected track, or open the playlist   |
| `Space`                          | Pause or resume                                 |
| `/`                              | Search                                          |
| `n`                              | Next track                                      |
| `b`                              | Previous track                                  |
| `r`                              | Cycle repeat mode: off, one, all                |
| `s`                              | Toggle shuffle                                  |
| `p`                              | Switch between the track list and playlists     |
| `R`                              | Reset the stored login (asks `y`/`n`)           |

Search mode:

- Type the query. It is limited to 50 characters.
- `Backspace` deletes a character.
- `Enter` runs the search.
- `Esc` leaves search mode.

When you press Enter on a track, the queue is filled with that track and every
track after it in the list. With repeat-all on, the tracks before it are added
to the end of the queue. When a track's time runs out, the next track in the
queue starts.

Pausing sends `SIGTSTP` / `SIGCONT` to the `mpv` process. On Windows the
program only changes the paused flag shown on screen; the audio is not paused.

## The helper script

The program looks for `ytmusic_bridge.py` in these places, in order:

1. `scripts/`
2. `../scripts/`
3. `../../scripts/`
4. `~/.ytmusic/`

It runs the script with `python3`, or with `python` if `python3` is not
found. These are the calls it makes:

```
ytmusic_bridge.py search --query Q --filter songs --limit 20
ytmusic_bridge.py playlists --limit 25
ytmusic_bridge.py playlist_tracks --playlist-id ID --limit 100
ytmusic_bridge.py liked_songs --limit 100
```

When you are logged in, `--cookie VALUE` is added to each call.

The script must print one JSON object with these keys:

- `success` (boolean)
- `error` (string, used when `success` is false)
- `tracks`: a list of objects with `id`, `title`, `artist` and `duration`
  (the duration is in seconds)
- `playlists`: a list of objects with `id`, `title`, `description`,
  `track_count` and `author`

If the script or the interpreter cannot be found, the program still runs. In
that case search and playlists show placeholder entries.

## Using it as a library

- `ytmusic_tui.client.YouTubeMusicAPI` holds the login and has these methods:
  - `search()`
  - `get_user_playlists()`
  - `get_playlist_tracks()`
  - `get_stream_url()`
  - `manual_login(cookie)`
  - `initiate_login()`
  - `reset_cookies()`

  Requests made without a login raise `NotLoggedInError`.
- `ytmusic_tui.bridge.PythonBridge` runs the helper script. Besides the calls
  the client uses, it also offers `get_liked_songs()`. Failures raise
  `BridgeError`.
- `ytmusic_tui.queue.Queue` manages the play order, history, shuffle and
  `PlaybackMode` repeat modes. It does not need any external program.
- `ytmusic_tui.player.Player` plays URLs with `mpv` and keeps a `Queue`.
  `parse_duration()` turns `MM:SS` or `HH:MM:SS` into seconds.
- `ytmusic_tui.models` defines `Track`, `Playlist` and two functions that read
  video ids from renderer payloads:
  - `extract_track_id_from_overlay`
  - `extract_track_id_from_menu`
- `ytmusic_tui.state`, `ytmusic_tui.update` and `ytmusic_tui.view` hold the
  interface model, the handling of keys and results, and the screen rendering.
  `ytmusic_tui.cli.run()` drives these in the terminal.

## What is not included

- The `ytmusic_bridge.py` helper script is not part of this package. Real
  search results, playlists and liked songs depend on you supplying it.
- Tracks are streamed from their watch page URL, which `mpv` resolves. The
  package does not extract direct audio stream URLs itself.
- Liked songs are available through `PythonBridge.get_liked_songs()` only.
  The interface has no screen for them.

## Files

Everything is stored under `~/.ytmusic/`:

- `cookies.json` holds the saved login cookie.
- `logs/` holds the daily log files `ytmusic_YYYY-MM-DD.log` and
  `player_YYYY-MM-DD.log`. They are written only with `-debug`.