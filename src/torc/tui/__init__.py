"""Terminal user interface components for torc."""

from torc.tui.console import MENU_ACTIONS, TUI, console

__all__ = [
    "MENU_ACTIONS",
    "TUI",
    "console",
]
