import math

import pytest

from conftest import failing_normalizer
from vsm_engine.application.services import ranker
from vsm_engine.application.services.documents import Document
from vsm_engine.application.services.errors import NormalizationError
from vsm_engine.application.services.normalizer import replace_hyphens
from vsm_engine.application.services.ranker import idf
from vsm_engine.application.services.vsm_service import VectorSpaceModel


@pytest.mark.parametrize(
    "query, expected",
    [
        ("gold silver truck.", Document("Delivery of silver arrived in a silver truck.", "d2")),
        ("shipment gold fire.", Document("Shipment of gold damaged in a fire.", "d1")),
        ("this query should result an empty document.", None),
    ],
)
def test_search(trained_vsm, query, expected):
    assert trained_vsm.search(query) == expected


def test_search_with_hyphen_normalizer():
    vsm = VectorSpaceModel.create(normalizer=replace_hyphens)
    vsm.train(Document("Shipment of gold damaged in a fire.", "d1"))
    vsm.train(Document("Delivery of silver arrived in a silver truck.", "d2"))
    vsm.train(Document("Shipment-of-gold-arrived in a truck.", "d3"))

    got = vsm.search("shipment gold in a flying truck.")

    # the original, un-normalized text comes back
    assert got == Document("Shipment-of-gold-arrived in a truck.", "d3")


def test_empty_corpus_never_takes_a_log(vsm, monkeypatch):
    def no_log(*args):
        raise AssertionError("log evaluated on an empty corpus")

    monkeypatch.setattr(ranker.math, "log", no_log)
    assert vsm.search("gold silver truck.") is None


def test_unknown_terms_only(trained_vsm):
    assert trained_vsm.search("platinum boat") is None
    assert trained_vsm.search("") is None


def test_single_document_corpus_has_no_discriminating_terms(vsm):
    # every term appears in every (one) document: idf = ln(1) = 0
    vsm.train(Document("gold truck", "d1"))
    assert vsm.search("gold truck") is None


def test_search_is_repeatable(trained_vsm):
    first = trained_vsm.search("gold silver truck.")
    assert trained_vsm.search("gold silver truck.") == first
    assert trained_vsm.search("Gold SILVER Truck.") == first


def test_ties_go_to_the_earliest_document(vsm):
    vsm.train(Document("alpha beta", "first"))
    vsm.train(Document("alpha beta", "second"))
    vsm.train(Document("gamma delta", "third"))

    assert vsm.search("alpha").label == "first"
    assert vsm.search("delta").label == "third"


def test_result_is_a_copy(trained_vsm):
    got = trained_vsm.search("gold silver truck.")
    stored = trained_vsm.corpus.snapshot()[1].document
    assert got == stored
    assert got is not stored


def test_later_training_changes_ranking(trained_vsm):
    before = trained_vsm.search("gold silver truck.")
    trained_vsm.train(Document("Gold silver truck.", "d4"))
    after = trained_vsm.search("gold silver truck.")
    assert before.label == "d2"
    assert after.label == "d4"
    # the earlier result is unaffected
    assert before == Document("Delivery of silver arrived in a silver truck.", "d2")


def test_failing_normalizer_on_query():
    vsm = VectorSpaceModel.create(normalizer=failing_normalizer)
    with pytest.raises(NormalizationError):
        vsm.search("testing")


class TestIdf:
    def test_value(self):
        assert idf(3, 1) == pytest.approx(math.log(3))
        assert idf(3, 3) == 0.0

    @pytest.mark.parametrize("total, df", [(0, 0), (0, 1), (3, 0), (3, -1)])
    def test_undefined(self, total, df):
        assert idf(total, df) is None


def test_zero_document_frequency_only_drops_that_term(trained_vsm, monkeypatch):
    # corrupt one statistic; the other query terms still rank
    real_get = trained_vsm.stats.get

    def get(term):
        stat, found = real_get(term)
        if term == "gold":
            return type(stat)(doc_frequency=0), True
        return stat, found

    monkeypatch.setattr(trained_vsm.stats, "get", get)
    assert trained_vsm.search("gold silver truck.").label == "d2"
