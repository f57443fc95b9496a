"""
peekmq.adapter
~~~~~~~~~~~~~~

Glue between pika deliveries and PeekMQ structures.

pika decodes field tables into plain python values, this module infers an
AMQP kind for each of them and renders the delivery a pika consumer callback
receives. Nothing here talks to a broker.
"""

import calendar
import datetime
import decimal
import logging
from typing import Any, Callable, Mapping

import pika
import pika.spec

from .output import DEFAULT_INDENT, compose
from .structures import (
    INT_RANGES,
    AttributeTable,
    DecimalValue,
    DeliveryEnvelope,
    EntryKind,
    PropertySet,
    TableEntry,
)
from .table import MAX_DEPTH

LOGGER = logging.getLogger("peekmq")

# narrowest kind first
_INT_KINDS = (EntryKind.LONG_INT, EntryKind.LONG_LONG_INT, EntryKind.LONG_LONG_UINT)


def _int_entry(value: int) -> TableEntry:
    for kind in _INT_KINDS:
        low, high = INT_RANGES[kind]
        if low <= value <= high:
            return TableEntry(kind, value)
    raise ValueError(f"integer {value} doesn't fit in any AMQP integer type")


def _decimal_entry(value: decimal.Decimal) -> TableEntry:
    exponent = value.as_tuple().exponent
    if not isinstance(exponent, int):
        raise ValueError(f"cannot store {value} as an AMQP decimal")
    scale = max(0, -exponent)
    return TableEntry(EntryKind.DECIMAL, DecimalValue(scale, int(value.scaleb(scale))))


def _timestamp_entry(value: datetime.datetime) -> TableEntry:
    # pika hands out naive datetimes in UTC
    return TableEntry(EntryKind.TIMESTAMP, calendar.timegm(value.utctimetuple()))


def entry_from_python(value: Any) -> TableEntry:
    """Infer the AMQP field type of a python value decoded by pika."""
    if isinstance(value, TableEntry):
        return value
    if value is None:
        return TableEntry(EntryKind.VOID)
    if isinstance(value, bool):
        return TableEntry(EntryKind.BOOL, value)
    if isinstance(value, int):
        return _int_entry(value)
    if isinstance(value, float):
        return TableEntry(EntryKind.DOUBLE, value)
    if isinstance(value, str):
        return TableEntry(EntryKind.LONG_STRING, value)
    if isinstance(value, (bytes, bytearray)):
        return TableEntry(EntryKind.LONG_STRING, bytes(value).decode("utf-8", errors="replace"))
    if isinstance(value, decimal.Decimal):
        return _decimal_entry(value)
    if isinstance(value, datetime.datetime):
        return _timestamp_entry(value)
    if isinstance(value, Mapping):
        return TableEntry(EntryKind.FIELD_TABLE, table_from_python(value))
    if isinstance(value, (list, tuple)):
        return TableEntry(EntryKind.FIELD_ARRAY, [entry_from_python(item) for item in value])
    raise TypeError(f"Cannot map {type(value).__name__} to an AMQP field type")


def table_from_python(mapping: Mapping[str, Any]) -> AttributeTable:
    return {str(key): entry_from_python(val) for key, val in mapping.items()}


def envelope_from_pika(method: pika.spec.Basic.Deliver) -> DeliveryEnvelope:
    return DeliveryEnvelope(
        consumer_tag=method.consumer_tag or "",
        delivery_tag=method.delivery_tag or 0,
        redelivered=bool(method.redelivered),
        exchange=method.exchange or "",
        routing_key=method.routing_key or "",
    )


def properties_from_pika(properties: pika.BasicProperties) -> PropertySet:
    headers = properties.headers
    return PropertySet(
        content_type=properties.content_type,
        headers=table_from_python(headers) if headers is not None else None,
    )


def render_delivery(
    method: pika.spec.Basic.Deliver,
    properties: pika.BasicProperties,
    body: bytes,
    info: bool = False,
    indent: int = DEFAULT_INDENT,
    max_depth: int = MAX_DEPTH,
) -> bytes:
    return compose(
        info,
        envelope_from_pika(method),
        properties_from_pika(properties),
        body,
        indent=indent,
        max_depth=max_depth,
    )


def message_renderer(
    write: Callable[[bytes], Any],
    info: bool = False,
    indent: int = DEFAULT_INDENT,
    max_depth: int = MAX_DEPTH,
) -> Callable:
    """Create an ``on_message_callback`` that writes every rendered delivery.

    Messages are never acknowledged here and rendering errors propagate to
    pika, the consumer decides what happens to a message that can't be shown.
    """

    def on_message(_channel, method, properties, body) -> None:
        LOGGER.debug(f"Received delivery {method.delivery_tag} on '{method.routing_key}'")
        write(render_delivery(method, properties, body, info=info, indent=indent, max_depth=max_depth))

    return on_message
