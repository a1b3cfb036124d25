"""Exceptions raised by nmclean."""


class NmcleanError(Exception):
    """Base class for nmclean errors."""


class PathOutsideRootError(NmcleanError, ValueError):
    """A path was handed to the tree that does not live under the scan root."""

    def __init__(self, path: str, root: str):
        super().__init__(f"{path} is not inside scan root {root}")
        self.path = path
        self.root = root


class ConfigError(NmcleanError):
    """Configuration file or option could not be used."""
