"""
peekmq.output
~~~~~~~~~~~~~

Build the output for a received message, either a JSON document describing
the whole delivery or the (reformatted) body on its own.
"""

import json
import logging
from typing import Any, Dict

from .body import JSON_CONTENT_TYPE, decode
from .structures import DeliveryEnvelope, PropertySet
from .table import MAX_DEPTH, translate

LOGGER = logging.getLogger("peekmq")

DEFAULT_INDENT = 2


def _dump(value: Any, indent: int) -> bytes:
    return json.dumps(value, indent=indent, ensure_ascii=False, allow_nan=False).encode("utf-8")


def build_document(
    envelope: DeliveryEnvelope,
    props: PropertySet,
    body: bytes,
    max_depth: int = MAX_DEPTH,
) -> Dict[str, Any]:
    """Describe a delivery as a dict with ``deliver``, ``props`` and ``data`` keys.

    Raises a :class:`~peekmq.exceptions.ComposeError` if the body or headers
    can't be rendered, nothing is returned in that case.
    """
    content_type = props.content_type or ""
    headers = translate(props.headers, max_depth=max_depth) if props.headers is not None else {}
    data = decode(content_type, body)
    return {
        "deliver": {
            "consumer_tag": envelope.consumer_tag,
            "delivery_tag": envelope.delivery_tag,
            "redelivered": envelope.redelivered,
            "exchange": envelope.exchange,
            "routing_key": envelope.routing_key,
        },
        "props": {
            "content_type": content_type,
            "headers": headers,
        },
        "data": data,
    }


def compose(
    info: bool,
    envelope: DeliveryEnvelope,
    props: PropertySet,
    body: bytes,
    indent: int = DEFAULT_INDENT,
    max_depth: int = MAX_DEPTH,
) -> bytes:
    """Produce the bytes to show for a message.

    With ``info`` the whole delivery is rendered as pretty printed JSON.
    Otherwise JSON bodies are pretty printed and any other body is returned
    untouched.
    """
    if info:
        document = build_document(envelope, props, body, max_depth=max_depth)
        LOGGER.debug(f"Rendered delivery {envelope.delivery_tag} from '{envelope.exchange}'")
        return _dump(document, indent)

    content_type = props.content_type or ""
    if content_type == JSON_CONTENT_TYPE:
        return _dump(decode(content_type, body), indent)
    return body
