from __future__ import annotations
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterator, List, Mapping, Optional, Tuple


@dataclass(frozen=True)
class Document:
    """A labeled sentence. `label` is the class/tag returned by a search."""
    text: str
    label: str

    def copy(self) -> "Document":
        # fresh instance so callers never share the corpus' object
        return Document(text=self.text, label=self.label)


@dataclass(frozen=True)
class TermStatistic:
    # number of distinct trained documents containing the term
    doc_frequency: int = 0


@dataclass(frozen=True)
class TrainedRecord:
    """Corpus entry: a copy of the trained Document plus its term frequencies.

    Built once at training time and never mutated afterwards.
    """
    document: Document
    _term_freq: Mapping[str, int] = field(repr=False)

    @classmethod
    def create(cls, document: Document, term_freq: Mapping[str, int]) -> "TrainedRecord":
        # e.g. term_freq = {"shipment": 1, "of": 1, "gold": 1, "fire.": 1}
        return cls(document=document.copy(), _term_freq=MappingProxyType(dict(term_freq)))

    @property
    def text(self) -> str:
        return self.document.text

    @property
    def label(self) -> str:
        return self.document.label

    def term_counts(self) -> List[Tuple[str, int]]:
        """(term, occurrences) pairs in first-seen order; a fresh list per call."""
        return list(self._term_freq.items())

    def frequency(self, term: str) -> int:
        return self._term_freq.get(term, 0)

    def terms(self) -> Iterator[str]:
        return iter(self._term_freq)


@dataclass(frozen=True)
class TrainingOutcome:
    """Result of training one streamed document.

    The terminal outcome of a cancelled stream has `document=None`
    and a CancellationError as `error`; an input that raises ends the
    stream the same way, carrying its exception.
    """
    document: Optional[Document]
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None
