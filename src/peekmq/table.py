"""
peekmq.table
~~~~~~~~~~~~

Translate AMQP field tables into JSON compatible python objects.
"""

import logging
import math
from typing import Any, Callable, Dict

from .exceptions import TableDepthError
from .structures import AttributeTable, EntryKind, TableEntry

LOGGER = logging.getLogger("peekmq")

MAX_DEPTH = 64

# largest integer a double holds exactly, bigger 64-bit values become strings
MAX_SAFE_INT = 2**53 - 1

JSONType = Any


def _plain(entry: TableEntry, depth: int, max_depth: int) -> JSONType:
    return entry.value


def _safe_int(entry: TableEntry, depth: int, max_depth: int) -> JSONType:
    if -MAX_SAFE_INT <= entry.value <= MAX_SAFE_INT:
        return entry.value
    LOGGER.debug(f"{entry.kind.name} value {entry.value} rendered as a string")
    return str(entry.value)


def _real(entry: TableEntry, depth: int, max_depth: int) -> JSONType:
    if not math.isfinite(entry.value):
        return None
    return entry.value


def _decimal(entry: TableEntry, depth: int, max_depth: int) -> JSONType:
    scale, value = entry.value
    return value / 10**scale


def _table(entry: TableEntry, depth: int, max_depth: int) -> JSONType:
    return _translate_table(entry.value, depth + 1, max_depth)


def _array(entry: TableEntry, depth: int, max_depth: int) -> JSONType:
    _check_depth(depth + 1, max_depth)
    return [_translate_entry(item, depth + 1, max_depth) for item in entry.value]


_CONVERTERS: Dict[EntryKind, Callable[[TableEntry, int, int], JSONType]] = {
    EntryKind.BOOL: _plain,
    EntryKind.SHORT_SHORT_INT: _plain,
    EntryKind.SHORT_SHORT_UINT: _plain,
    EntryKind.SHORT_INT: _plain,
    EntryKind.SHORT_UINT: _plain,
    EntryKind.LONG_INT: _plain,
    EntryKind.LONG_UINT: _plain,
    EntryKind.LONG_LONG_INT: _safe_int,
    EntryKind.LONG_LONG_UINT: _safe_int,
    EntryKind.FLOAT: _real,
    EntryKind.DOUBLE: _real,
    EntryKind.LONG_STRING: _plain,
    EntryKind.VOID: _plain,
    EntryKind.FIELD_TABLE: _table,
    EntryKind.TIMESTAMP: _plain,
    EntryKind.FIELD_ARRAY: _array,
    EntryKind.DECIMAL: _decimal,
}

_missing = set(EntryKind) - set(_CONVERTERS)
if _missing:
    raise TypeError(f"No JSON converter for entry kind(s): {sorted(k.name for k in _missing)}")


def _check_depth(depth: int, max_depth: int) -> None:
    if depth > max_depth:
        raise TableDepthError(max_depth=max_depth)


def _translate_entry(entry: TableEntry, depth: int, max_depth: int) -> JSONType:
    return _CONVERTERS[entry.kind](entry, depth, max_depth)


def _translate_table(table: AttributeTable, depth: int, max_depth: int) -> Dict[str, JSONType]:
    _check_depth(depth, max_depth)
    return {key: _translate_entry(table[key], depth, max_depth) for key in sorted(table)}


def translate(table: AttributeTable, max_depth: int = MAX_DEPTH) -> Dict[str, JSONType]:
    """Convert a field table into a JSON object.

    Keys come out sorted so the output does not depend on how the table was
    built. ``max_depth`` limits how many tables/arrays may be nested inside
    ``table``; going past it raises :class:`TableDepthError`.
    """
    return _translate_table(table, 0, max_depth)
