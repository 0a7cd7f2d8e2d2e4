"""Terminal user interface for searching, browsing and playing YouTube Music."""

__version__ = "0.1.0"