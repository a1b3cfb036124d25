"""Data models for nmclean.

These are the plain values that cross thread boundaries: scanner events
going into the UI loop and deletion results coming back out of a batch.
Tree nodes themselves live in :mod:`nmclean.tree`.
"""

from typing import Optional

from pydantic import BaseModel, Field


class TargetFound(BaseModel):
    """A matched target directory discovered by the scanner."""

    path: str = Field(..., description="Absolute path of the matched directory")
    size_bytes: int = Field(..., ge=0, description="Total bytes of regular files beneath it")
    file_count: int = Field(0, description="Number of regular files counted")


class ScanFinished(BaseModel):
    """Terminal scanner event, emitted exactly once per scan."""

    found_count: int = Field(0, description="Number of target directories found")
    total_bytes: int = Field(0, description="Sum of all discovered sizes")
    cancelled: bool = Field(False, description="Whether the walk was stopped early")


ScanEvent = TargetFound | ScanFinished


class DeletionOutcome(BaseModel):
    """Result of removing a single target directory."""

    path: str = Field(..., description="Path that was removed")
    success: bool = Field(True, description="Whether removal succeeded")
    bytes_freed: int = Field(0, description="Bytes freed by removal")
    error: Optional[str] = Field(None, description="Error message if removal failed")
    dry_run: bool = Field(False, description="Whether this was a dry run")


class DeletionBatch(BaseModel):
    """All outcomes of one deletion batch, delivered together."""

    outcomes: list[DeletionOutcome] = Field(default_factory=list)

    @property
    def succeeded(self) -> list[DeletionOutcome]:
        """Outcomes that removed their directory."""
        return [o for o in self.outcomes if o.success]

    @property
    def failed(self) -> list[DeletionOutcome]:
        """Outcomes that left their directory on disk."""
        return [o for o in self.outcomes if not o.success]

    @property
    def bytes_freed(self) -> int:
        """Total bytes freed in this batch."""
        return sum(o.bytes_freed for o in self.succeeded)


class SelectionStats(BaseModel):
    """Footer statistics over the currently visible list."""

    visible_count: int = 0
    selected_count: int = 0
    selected_bytes: int = 0
    total_bytes: int = 0
