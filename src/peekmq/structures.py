"""
peekmq.structures
~~~~~~~~~~~~~~~~~

Message abstractions handed to PeekMQ: the delivery envelope, the property
set and the typed values stored in AMQP field tables.
"""

import math
import struct
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Callable, Dict, NamedTuple, Optional, Tuple


class EntryKind(Enum):
    BOOL = auto()
    SHORT_SHORT_INT = auto()
    SHORT_SHORT_UINT = auto()
    SHORT_INT = auto()
    SHORT_UINT = auto()
    LONG_INT = auto()
    LONG_UINT = auto()
    LONG_LONG_INT = auto()
    LONG_LONG_UINT = auto()
    FLOAT = auto()
    DOUBLE = auto()
    LONG_STRING = auto()
    VOID = auto()
    FIELD_TABLE = auto()
    TIMESTAMP = auto()
    FIELD_ARRAY = auto()
    DECIMAL = auto()


# inclusive bounds of every integer kind
INT_RANGES: Dict[EntryKind, Tuple[int, int]] = {
    EntryKind.SHORT_SHORT_INT: (-(2**7), 2**7 - 1),
    EntryKind.SHORT_SHORT_UINT: (0, 2**8 - 1),
    EntryKind.SHORT_INT: (-(2**15), 2**15 - 1),
    EntryKind.SHORT_UINT: (0, 2**16 - 1),
    EntryKind.LONG_INT: (-(2**31), 2**31 - 1),
    EntryKind.LONG_UINT: (0, 2**32 - 1),
    EntryKind.LONG_LONG_INT: (-(2**63), 2**63 - 1),
    EntryKind.LONG_LONG_UINT: (0, 2**64 - 1),
    EntryKind.TIMESTAMP: (0, 2**64 - 1),
}


class DecimalValue(NamedTuple):
    """Fixed point number worth ``value / 10 ** scale``"""

    scale: int
    value: int


def _check_int(kind: EntryKind, value: Any) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{kind.name} entry needs an int, got {type(value).__name__}")
    low, high = INT_RANGES[kind]
    if not low <= value <= high:
        raise ValueError(f"{value} is out of range for {kind.name} [{low}, {high}]")
    return value


def _check_bool(value: Any) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"BOOL entry needs a bool, got {type(value).__name__}")
    return value


def _check_real(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"floating point entry needs a number, got {type(value).__name__}")
    return float(value)


def _check_float32(value: Any) -> float:
    value = _check_real(value)
    if not math.isfinite(value):
        return value
    try:
        return struct.unpack(">f", struct.pack(">f", value))[0]
    except OverflowError:
        raise ValueError(f"{value} does not fit in a 32-bit float")


def _check_str(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"LONG_STRING entry needs a str, got {type(value).__name__}")
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        raise ValueError(f"LONG_STRING entry {value!r} is not valid UTF-8")
    return value


def _check_void(value: Any) -> None:
    if value is not None:
        raise TypeError("VOID entry cannot hold a value")
    return None


def _check_table(value: Any) -> Dict[str, "TableEntry"]:
    if not isinstance(value, dict):
        raise TypeError(f"FIELD_TABLE entry needs a dict, got {type(value).__name__}")
    for key, entry in value.items():
        if not isinstance(key, str):
            raise TypeError(f"field table keys must be str, got {key!r}")
        if not isinstance(entry, TableEntry):
            raise TypeError(f"field table value for {key!r} is not a TableEntry")
    return dict(value)


def _check_array(value: Any) -> Tuple["TableEntry", ...]:
    if not isinstance(value, (list, tuple)):
        raise TypeError(f"FIELD_ARRAY entry needs a list, got {type(value).__name__}")
    for entry in value:
        if not isinstance(entry, TableEntry):
            raise TypeError(f"field array element {entry!r} is not a TableEntry")
    return tuple(value)


def _check_decimal(value: Any) -> DecimalValue:
    try:
        scale, unscaled = value
    except (TypeError, ValueError):
        raise TypeError("DECIMAL entry needs a (scale, value) pair")
    scale = _check_int(EntryKind.SHORT_SHORT_UINT, scale)
    unscaled = _check_int(EntryKind.LONG_INT, unscaled)
    return DecimalValue(scale, unscaled)


# Callables normalize the value and raise TypeError/ValueError if it doesn't fit
VERIFY_VALUE: Dict[EntryKind, Callable[[Any], Any]] = {
    EntryKind.BOOL: _check_bool,
    EntryKind.FLOAT: _check_float32,
    EntryKind.DOUBLE: _check_real,
    EntryKind.LONG_STRING: _check_str,
    EntryKind.VOID: _check_void,
    EntryKind.FIELD_TABLE: _check_table,
    EntryKind.FIELD_ARRAY: _check_array,
    EntryKind.DECIMAL: _check_decimal,
}
for _kind in INT_RANGES:
    VERIFY_VALUE[_kind] = lambda value, kind=_kind: _check_int(kind, value)


@dataclass(frozen=True)
class TableEntry:
    """A single typed value of an AMQP field table or field array.

    Nested tables are stored as a private ``dict`` copy and arrays as a
    ``tuple``, so an entry can never end up containing itself.
    """

    kind: EntryKind
    value: Any = None

    def __post_init__(self) -> None:
        if not isinstance(self.kind, EntryKind):
            raise TypeError(f"unknown entry kind {self.kind!r}")
        object.__setattr__(self, "value", VERIFY_VALUE[self.kind](self.value))


AttributeTable = Dict[str, TableEntry]


@dataclass(frozen=True)
class DeliveryEnvelope:
    consumer_tag: str
    delivery_tag: int
    redelivered: bool
    exchange: str
    routing_key: str

    def __post_init__(self) -> None:
        _check_int(EntryKind.LONG_LONG_UINT, self.delivery_tag)


@dataclass(frozen=True)
class PropertySet:
    content_type: Optional[str] = None
    headers: Optional[AttributeTable] = None
