"""Tests for data models."""

import pytest
from pydantic import ValidationError

from nmclean.models import DeletionBatch, DeletionOutcome, ScanFinished, TargetFound


class TestTargetFound:
    def test_defaults(self):
        event = TargetFound(path="/p/node_modules", size_bytes=10)
        assert event.file_count == 0

    def test_negative_size_rejected(self):
        with pytest.raises(ValidationError):
            TargetFound(path="/p/node_modules", size_bytes=-1)


class TestScanFinished:
    def test_defaults(self):
        event = ScanFinished()
        assert event.found_count == 0
        assert event.total_bytes == 0
        assert not event.cancelled


class TestDeletionBatch:
    def test_split_by_success(self):
        batch = DeletionBatch(
            outcomes=[
                DeletionOutcome(path="/a", bytes_freed=100),
                DeletionOutcome(path="/b", success=False, error="Permission denied: /b"),
                DeletionOutcome(path="/c", bytes_freed=50),
            ]
        )
        assert [o.path for o in batch.succeeded] == ["/a", "/c"]
        assert [o.path for o in batch.failed] == ["/b"]
        assert batch.bytes_freed == 150

    def test_empty(self):
        batch = DeletionBatch()
        assert batch.succeeded == []
        assert batch.failed == []
        assert batch.bytes_freed == 0
