from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional, Union
import queue
import threading
import time

from loguru import logger

from vsm_engine.application.services.corpus import DocumentCorpus
from vsm_engine.application.services.documents import Document, TrainedRecord, TrainingOutcome
from vsm_engine.application.services.errors import CancellationError, VSMError
from vsm_engine.application.services.normalizer import Normalizer, normalize, term_frequencies, tokenize
from vsm_engine.application.services.term_stats import TermStatistics


# Put this on an input queue to tell the stream no more documents are coming.
END_OF_STREAM = object()

# yielded by the input reader when cancellation wins
_CANCELLED = object()

DocumentSource = Union["queue.Queue", Iterable[Document]]


@dataclass
class TrainingEngine:
    """Adds documents to the corpus and keeps the term statistics in step."""
    stats: TermStatistics
    corpus: DocumentCorpus
    normalizer: Optional[Normalizer] = None
    stream_poll_interval: float = 0.05

    def train_one(self, document: Document) -> None:
        """Train a single document.

        All or nothing: if normalization fails, NormalizationError is raised
        and neither the statistics nor the corpus are touched.
        """
        if not isinstance(document, Document):
            raise TypeError(f"Unsupported document type: {type(document)}")

        sentence = normalize(self.normalizer, document.text)

        # e.g. "Shipment of gold damaged in a fire." ->
        # {"shipment": 1, "of": 1, "gold": 1, "damaged": 1, "in": 1, "a": 1, "fire.": 1}
        term_freq = term_frequencies(tokenize(sentence))

        # each unique term counts once for this document, however often it occurs
        for term in term_freq:
            self.stats.increment_doc_frequency(term)

        index = self.corpus.append(TrainedRecord.create(document, term_freq))
        logger.debug(
            "Trained document label='{}' index={} unique_terms={}",
            document.label, index, len(term_freq),
        )

    def train_many(self, documents: Iterable[Document]) -> int:
        """Train documents in order; stops at (and raises) the first error.

        Returns the number of documents trained.
        """
        trained = 0
        for doc in documents:
            self.train_one(doc)
            trained += 1
        logger.info("Trained {} document(s)", trained)
        return trained

    def train_stream(
        self,
        documents: DocumentSource,
        cancel: Optional[threading.Event] = None,
    ) -> "TrainingStream":
        """Train documents in the background as they arrive.

        `documents` is either a queue.Queue (finish it with END_OF_STREAM) or any
        iterable. Returns a TrainingStream yielding one TrainingOutcome per document.
        """
        stream = TrainingStream(
            engine=self,
            source=documents,
            cancel=cancel if cancel is not None else threading.Event(),
            poll_interval=self.stream_poll_interval,
        )
        stream.start()
        return stream


@dataclass
class TrainingStream:
    """Output side of a streaming training run.

    Iterate it to receive TrainingOutcome values in input order. Iteration ends
    when the input is exhausted, right after an outcome carrying the error the
    input raised, or right after the single outcome carrying CancellationError
    once `cancel` is set. Publishing blocks until a consumer takes the previous
    outcome, except once cancelled: then the worker never waits on a consumer.
    """
    engine: TrainingEngine
    source: DocumentSource
    cancel: threading.Event
    poll_interval: float = 0.05

    _out: "queue.Queue" = field(init=False, repr=False)
    _done: threading.Event = field(init=False, repr=False)
    _thread: threading.Thread = field(init=False, repr=False)
    _exhausted: bool = field(init=False, default=False)

    def __post_init__(self):
        # one-slot hand-off: the worker can't run ahead of its consumer
        self._out = queue.Queue(maxsize=1)
        # set by the worker after its last outcome is in the slot
        self._done = threading.Event()
        self._thread = threading.Thread(target=self._run, name="vsm-training-stream", daemon=True)

    def start(self) -> None:
        self._thread.start()

    def close(self) -> None:
        """Ask the worker to stop after the document it is training."""
        self.cancel.set()

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the worker; True if it has finished."""
        self._thread.join(timeout)
        return not self._thread.is_alive()

    @property
    def running(self) -> bool:
        return self._thread.is_alive()

    def get(self, timeout: Optional[float] = None) -> Optional[TrainingOutcome]:
        """Next outcome, or None once the stream is closed.

        Raises queue.Empty if `timeout` elapses first.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        while not self._exhausted:
            wait = self.poll_interval
            if deadline is not None:
                wait = min(wait, max(deadline - time.monotonic(), 0.0))
            try:
                return self._out.get(timeout=wait)
            except queue.Empty:
                pass
            if self._done.is_set():
                # the worker's last put happens before _done is set
                try:
                    return self._out.get_nowait()
                except queue.Empty:
                    self._exhausted = True
            elif deadline is not None and time.monotonic() >= deadline:
                raise queue.Empty
        return None

    def __iter__(self) -> Iterator[TrainingOutcome]:
        while True:
            outcome = self.get()
            if outcome is None:
                return
            yield outcome

    # ---------------- worker ----------------

    def _run(self) -> None:
        logger.info("Training stream started")
        trained = 0
        try:
            for doc in self._documents():
                if doc is _CANCELLED:
                    # cancelled while waiting for input
                    self._publish_cancelled()
                    return

                try:
                    self.engine.train_one(doc)
                    outcome = TrainingOutcome(document=doc)
                    trained += 1
                except (VSMError, TypeError) as e:
                    logger.warning("Streamed document failed to train: {}", e)
                    outcome = TrainingOutcome(document=doc, error=e)

                if not self._publish(outcome):
                    # nobody took the outcome before cancellation
                    self._publish_cancelled()
                    return
        except Exception as e:
            # input (or training) broke: the consumer gets the error as the last outcome
            logger.exception("Training stream input failed")
            if not self._publish(TrainingOutcome(document=None, error=e)):
                self._publish_cancelled()
        finally:
            logger.info("Training stream stopped after {} trained document(s)", trained)
            self._done.set()

    def _documents(self) -> Iterator[object]:
        """Yield input documents; yields _CANCELLED when cancellation wins the race."""
        if isinstance(self.source, queue.Queue):
            while True:
                if self.cancel.is_set():
                    yield _CANCELLED
                    return
                try:
                    item = self.source.get(timeout=self.poll_interval)
                except queue.Empty:
                    continue
                if item is END_OF_STREAM:
                    return
                yield item
        else:
            # plain iterables can't be interrupted inside next(); cancellation
            # is checked before asking for each item
            items = iter(self.source)
            while True:
                if self.cancel.is_set():
                    yield _CANCELLED
                    return
                item = next(items, END_OF_STREAM)
                if item is END_OF_STREAM:
                    return
                yield item

    def _publish(self, outcome: TrainingOutcome) -> bool:
        while True:
            try:
                self._out.put(outcome, timeout=self.poll_interval)
                return True
            except queue.Full:
                if self.cancel.is_set():
                    return False

    def _publish_cancelled(self) -> None:
        """Put the terminal CancellationError outcome without waiting on a consumer.

        An outcome still sitting unread in the slot is dropped to make room.
        """
        logger.info("Training stream cancelled")
        outcome = TrainingOutcome(document=None, error=CancellationError())
        try:
            self._out.put(outcome, timeout=self.poll_interval)
            return
        except queue.Full:
            pass
        while True:
            try:
                self._out.get_nowait()
            except queue.Empty:
                pass
            try:
                self._out.put_nowait(outcome)
                return
            except queue.Full:
                continue
