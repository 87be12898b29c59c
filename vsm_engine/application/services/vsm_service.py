from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Optional
import threading

from loguru import logger

from vsm_engine.application.settings import Settings
from vsm_engine.application.services.corpus import DocumentCorpus
from vsm_engine.application.services.documents import Document
from vsm_engine.application.services.normalizer import Normalizer, chain, map_chars, replace_hyphens
from vsm_engine.application.services.ranker import RankingEngine
from vsm_engine.application.services.term_stats import TermStatistics
from vsm_engine.application.services.trainer import DocumentSource, TrainingEngine, TrainingStream


@dataclass
class VectorSpaceModel:
    """Corpus + term statistics, with training and search on top.

    Everything lives in memory for the lifetime of the instance.
    """
    stats: TermStatistics
    corpus: DocumentCorpus
    trainer: TrainingEngine
    ranker: RankingEngine

    @classmethod
    def create(
        cls,
        normalizer: Optional[Normalizer] = None,
        stream_poll_interval: float = 0.05,
    ) -> "VectorSpaceModel":
        # the same normalizer is applied to every trained sentence and every query
        stats = TermStatistics()
        corpus = DocumentCorpus()
        trainer = TrainingEngine(
            stats=stats,
            corpus=corpus,
            normalizer=normalizer,
            stream_poll_interval=stream_poll_interval,
        )
        ranker = RankingEngine(stats=stats, corpus=corpus, normalizer=normalizer)
        return cls(stats=stats, corpus=corpus, trainer=trainer, ranker=ranker)

    @classmethod
    def build(cls, settings: Settings) -> "VectorSpaceModel":
        normalizer = cls.normalizer_from_settings(settings)
        return cls.create(normalizer=normalizer, stream_poll_interval=settings.stream_poll_interval)

    @staticmethod
    def normalizer_from_settings(settings: Settings) -> Optional[Normalizer]:
        steps: list[Normalizer] = []
        if settings.normalize_hyphens:
            logger.info("Normalizer: hyphens -> spaces")
            steps.append(replace_hyphens)
        if settings.normalize_map_chars and settings.normalize_map_to:
            logger.info(
                "Normalizer: map {!r} -> {!r}",
                settings.normalize_map_chars,
                settings.normalize_map_to[0],
            )
            steps.append(map_chars(settings.normalize_map_chars, settings.normalize_map_to))
        if not steps:
            # identity
            return None
        return chain(*steps)

    def train(self, document: Document) -> None:
        self.trainer.train_one(document)

    def train_many(self, documents: Iterable[Document]) -> int:
        return self.trainer.train_many(documents)

    def train_stream(
        self,
        documents: DocumentSource,
        cancel: Optional[threading.Event] = None,
    ) -> TrainingStream:
        return self.trainer.train_stream(documents, cancel=cancel)

    def search(self, query: str) -> Optional[Document]:
        return self.ranker.search(query)

    def count(self) -> int:
        """Number of trained documents."""
        return self.corpus.count()

    def term_count(self) -> int:
        return len(self.stats)
