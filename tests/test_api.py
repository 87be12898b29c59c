import pytest
from fastapi.testclient import TestClient

from conftest import failing_normalizer
from vsm_engine.application.api.main import app, vsm_dep
from vsm_engine.application.services.vsm_service import VectorSpaceModel


SHIPMENT_ITEMS = [
    {"text": "Shipment of gold damaged in a fire.", "label": "d1"},
    {"text": "Delivery of silver arrived in a silver truck.", "label": "d2"},
    {"text": "Shipment of gold arrived in a truck.", "label": "d3"},
]


@pytest.fixture
def model():
    return VectorSpaceModel.create()


@pytest.fixture
def client(model):
    app.dependency_overrides[vsm_dep] = lambda: model
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_root(client):
    resp = client.get("/")
    assert resp.status_code == 200
    body = resp.json()
    assert body["ok"] is True
    assert body["documents"] == 0


def test_train_and_search(client):
    resp = client.post("/train", json=SHIPMENT_ITEMS)
    assert resp.status_code == 200
    assert resp.json() == {"trained": 3}

    resp = client.get("/search", params={"q": "gold silver truck."})
    assert resp.status_code == 200
    assert resp.json() == {
        "query": "gold silver truck.",
        "match": {"text": "Delivery of silver arrived in a silver truck.", "label": "d2"},
    }

    resp = client.get("/stats")
    assert resp.json()["documents"] == 3


def test_search_without_match(client):
    resp = client.get("/search", params={"q": "anything"})
    assert resp.status_code == 200
    assert resp.json()["match"] is None


def test_search_requires_query(client):
    assert client.get("/search").status_code == 422


def test_normalization_errors_are_422(client, model):
    model.trainer.normalizer = failing_normalizer
    model.ranker.normalizer = failing_normalizer

    resp = client.post("/train", json=SHIPMENT_ITEMS[:1])
    assert resp.status_code == 422
    assert "d1" in resp.json()["detail"]
    assert model.count() == 0

    resp = client.get("/search", params={"q": "gold"})
    assert resp.status_code == 422
