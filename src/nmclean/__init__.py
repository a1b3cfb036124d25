"""nmclean - find and remove dependency folders interactively."""

__version__ = "0.1.0"
