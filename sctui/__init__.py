"""sc-tui: terminal board for Shortcut stories."""

__version__ = "0.3.0"
