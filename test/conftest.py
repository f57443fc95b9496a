import pika
import pika.spec
import pytest

from peekmq.structures import DeliveryEnvelope, EntryKind, PropertySet, TableEntry


@pytest.fixture
def envelope() -> DeliveryEnvelope:
    return DeliveryEnvelope(
        consumer_tag="ctag1.0",
        delivery_tag=42,
        redelivered=False,
        exchange="amq.topic",
        routing_key="weather.wind",
    )


@pytest.fixture
def json_props() -> PropertySet:
    return PropertySet(
        content_type="application/json",
        headers={"x": TableEntry(EntryKind.LONG_INT, 1)},
    )


@pytest.fixture
def deliver_frame() -> pika.spec.Basic.Deliver:
    return pika.spec.Basic.Deliver(
        consumer_tag="ctag1.0",
        delivery_tag=7,
        redelivered=True,
        exchange="amq.fanout",
        routing_key="",
    )


@pytest.fixture
def cfg_file(tmp_path, monkeypatch):
    path = tmp_path / "variables.json"
    monkeypatch.setenv("PEEKMQ_CONFIG", str(path))
    return path
