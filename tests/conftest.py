import pytest

from vsm_engine.application.services.documents import Document
from vsm_engine.application.services.vsm_service import VectorSpaceModel


SHIPMENT_DOCS = [
    Document(text="Shipment of gold damaged in a fire.", label="d1"),
    Document(text="Delivery of silver arrived in a silver truck.", label="d2"),
    Document(text="Shipment of gold arrived in a truck.", label="d3"),
]


def failing_normalizer(sentence):
    raise ValueError("Testing Error")


@pytest.fixture
def shipment_docs():
    return list(SHIPMENT_DOCS)


@pytest.fixture
def vsm():
    return VectorSpaceModel.create(stream_poll_interval=0.01)


@pytest.fixture
def trained_vsm(vsm, shipment_docs):
    for doc in shipment_docs:
        vsm.train(doc)
    return vsm
