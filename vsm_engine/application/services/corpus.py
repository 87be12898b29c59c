from __future__ import annotations
from typing import List

from vsm_engine.application.services.documents import TrainedRecord
from vsm_engine.application.services.term_stats import ReadWriteLock


class DocumentCorpus:
    """Append-only, ordered list of TrainedRecord. Not persistent.

    Insertion order is training order; an index never changes once assigned.
    """

    def __init__(self):
        self._lock = ReadWriteLock()
        self._records: List[TrainedRecord] = []
        # published after each append; read without taking the lock
        self._total = 0

    def append(self, record: TrainedRecord) -> int:
        """Add a record and return its index."""
        if not isinstance(record, TrainedRecord):
            raise TypeError(f"Unsupported corpus record type: {type(record)}")
        with self._lock.write_locked():
            self._records.append(record)
            index = len(self._records) - 1
            self._total = len(self._records)
        return index

    def snapshot(self) -> List[TrainedRecord]:
        """Point-in-time copy of the records, safe to scan without a lock."""
        with self._lock.read_locked():
            return list(self._records)

    def count(self) -> int:
        # single attribute read, consistent with the last completed append
        return self._total

    def __len__(self) -> int:
        return self.count()
