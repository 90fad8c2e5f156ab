"""
ROA Dataset Assembly

Aggregates resolved ROA entries with generation and expiry timestamps. The
validity window is fixed at seven days after generation.
"""

import time
from typing import Iterable

from ..models import DatasetMetadata, ROADataset, ROAEntry

CACHE_EXPIRY = 7 * 24 * 60 * 60


class SystemClock:
    """Wall-clock time source in whole seconds since the epoch"""

    def now(self) -> int:
        return int(time.time())


class FixedClock:
    """Clock that always reports the same instant"""

    def __init__(self, timestamp: int):
        self.timestamp = int(timestamp)

    def now(self) -> int:
        return self.timestamp


class DatasetAssembler:
    """Build the output dataset from an ordered sequence of entries"""

    def __init__(self, clock=None):
        self.clock = clock or SystemClock()

    def assemble(self, entries: Iterable[ROAEntry]) -> ROADataset:
        entries = tuple(entries)
        now = self.clock.now()

        metadata = DatasetMetadata(
            count=len(entries),
            generated_at=now,
            valid_until=now + CACHE_EXPIRY,
        )

        return ROADataset(metadata=metadata, entries=entries)
