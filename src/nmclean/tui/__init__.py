"""Interactive TUI for nmclean."""

from nmclean.tui.app import CleanerApp, run_tui

__all__ = ["CleanerApp", "run_tui"]
