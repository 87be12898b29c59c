from __future__ import annotations
from contextlib import contextmanager
from typing import Dict, Iterator, List, Tuple
import threading

from vsm_engine.application.services.documents import TermStatistic


class ReadWriteLock:
    """Many concurrent readers, or one writer.

    Waiting writers block new readers so a steady flow of searches
    can't starve training.
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()


class TermStatistics:
    """Concurrency-safe map: normalized term -> document frequency.

    Entries are created on first sighting and never removed.
    """

    def __init__(self):
        self._lock = ReadWriteLock()
        # term -> number of distinct trained documents containing it
        self._doc_freq: Dict[str, int] = {}

    def get(self, term: str) -> Tuple[TermStatistic, bool]:
        """Returns (statistic, found). A missing term gives (TermStatistic(0), False)."""
        with self._lock.read_locked():
            count = self._doc_freq.get(term)
        if count is None:
            return TermStatistic(), False
        return TermStatistic(doc_frequency=count), True

    def doc_frequency(self, term: str) -> int:
        with self._lock.read_locked():
            return self._doc_freq.get(term, 0)

    def increment_doc_frequency(self, term: str) -> int:
        """Create the entry at 0 if absent, add one, return the new count."""
        with self._lock.write_locked():
            count = self._doc_freq.get(term, 0) + 1
            self._doc_freq[term] = count
        return count

    def terms(self) -> List[str]:
        with self._lock.read_locked():
            return list(self._doc_freq)

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._doc_freq)

    def __contains__(self, term: object) -> bool:
        with self._lock.read_locked():
            return term in self._doc_freq
