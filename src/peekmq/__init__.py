import logging

from .__version__ import __author__, __version__
from .adapter import render_delivery, message_renderer
from .body import decode
from .config import configure
from .exceptions import (
    ComposeError,
    DecodeError,
    JsonParseError,
    PeekMQError,
    TableDepthError,
    Utf8DecodeError,
)
from .output import build_document, compose
from .structures import DecimalValue, DeliveryEnvelope, EntryKind, PropertySet, TableEntry
from .table import translate

__all__ = [
    "compose",
    "build_document",
    "decode",
    "translate",
    "configure",
    "render_delivery",
    "message_renderer",
    "DeliveryEnvelope",
    "PropertySet",
    "TableEntry",
    "EntryKind",
    "DecimalValue",
    "PeekMQError",
    "ComposeError",
    "DecodeError",
    "Utf8DecodeError",
    "JsonParseError",
    "TableDepthError",
    "__version__",
    "__author__",
]

logging.getLogger("peekmq").addHandler(logging.NullHandler())
