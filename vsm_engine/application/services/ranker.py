"""TF-IDF weighted cosine-similarity ranking over the trained corpus.

Documents and queries are sparse vectors over the shared term space:

    w(t, d) = tf(t, d) * idf(t)        idf(t) = ln(N / df(t))

and a document's similarity to the query q is the cosine of their angle:

    cos(d, q) = d . q / (||d|| * ||q||)

Only the single best document is returned.
See: http://www.minerazzi.com/tutorials/term-vector-1.pdf
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Optional
import math

from loguru import logger

from vsm_engine.application.services.corpus import DocumentCorpus
from vsm_engine.application.services.documents import Document
from vsm_engine.application.services.normalizer import Normalizer, normalize, term_frequencies, tokenize
from vsm_engine.application.services.term_stats import TermStatistics


def idf(total_docs: int, doc_frequency: int) -> Optional[float]:
    """ln(N / df), or None when the weight would be undefined or infinite."""
    if total_docs <= 0 or doc_frequency <= 0:
        return None
    value = math.log(total_docs / doc_frequency)
    if not math.isfinite(value):
        return None
    return value


@dataclass
class RankingEngine:
    stats: TermStatistics
    corpus: DocumentCorpus
    normalizer: Optional[Normalizer] = None

    def search(self, query: str) -> Optional[Document]:
        """Return a copy of the most similar trained document, or None for no match.

        Raises NormalizationError if the query can't be normalized.
        """
        sentence = normalize(self.normalizer, query)
        query_freq = term_frequencies(tokenize(sentence))

        total_docs = self.corpus.count()
        if total_docs == 0:
            logger.debug("Search on empty corpus: query={!r}", query)
            return None

        # idf of every term looked up during this search
        idf_cache: Dict[str, Optional[float]] = {}

        def term_idf(term: str) -> Optional[float]:
            if term not in idf_cache:
                stat, found = self.stats.get(term)
                # unknown terms can't discriminate between documents
                idf_cache[term] = idf(total_docs, stat.doc_frequency) if found else None
            return idf_cache[term]

        query_sum = 0.0
        for term, freq in query_freq.items():
            term_idf_value = term_idf(term)
            if term_idf_value is None:
                continue
            query_sum += (freq * term_idf_value) ** 2

        query_mag = math.sqrt(query_sum)
        if query_mag == 0.0 or not math.isfinite(query_mag):
            logger.debug("Query has no weighted terms: query={!r}", query)
            return None

        best: Optional[Document] = None
        best_sim = 0.0

        # scan the documents that existed when total_docs was read
        records = self.corpus.snapshot()[:total_docs]
        for record in records:
            doc_sum = 0.0
            coeff = 0.0

            for term, freq in record.term_counts():
                term_idf_value = term_idf(term)
                if term_idf_value is None:
                    continue
                weight = freq * term_idf_value
                doc_sum += weight ** 2
                coeff += weight * query_freq.get(term, 0) * term_idf_value

            doc_mag = math.sqrt(doc_sum)
            if doc_mag == 0.0:
                continue

            sim = coeff / (doc_mag * query_mag)
            # strict: the earliest trained document keeps ties
            if sim > best_sim:
                best, best_sim = record.document, sim

        logger.debug(
            "Search query={!r} terms={} scanned={} best_score={:.4f}",
            query, len(query_freq), len(records), best_sim,
        )
        if best is None:
            return None
        return best.copy()
