[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ytmusic_tui"
version = "0.1.0"
description = "A terminal user interface for searching, browsing and playing YouTube Music"
requires-python = ">=3.10"
keywords = ["youtube-music", "tui", "terminal", "music", "player", "mpv", "queue"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio :: Players",
]
dependencies = [
    "blessed",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
ytmusic = "ytmusic_tui.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["ytmusic_tui"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
