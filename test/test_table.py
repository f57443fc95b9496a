import json

import pytest

from peekmq import table
from peekmq.exceptions import TableDepthError
from peekmq.structures import DecimalValue, EntryKind, TableEntry
from peekmq.table import MAX_SAFE_INT, translate


def test_empty():
    assert translate({}) == {}


def test_decimal():
    assert translate({"x": TableEntry(EntryKind.DECIMAL, DecimalValue(2, 1234))}) == {"x": 12.34}


def test_decimal_no_scale():
    assert translate({"x": TableEntry(EntryKind.DECIMAL, DecimalValue(0, -5))}) == {"x": -5.0}


def test_nested_table():
    tbl = {
        "outer": TableEntry(
            EntryKind.FIELD_TABLE,
            {
                "name": TableEntry(EntryKind.LONG_STRING, "inner"),
                "flag": TableEntry(EntryKind.BOOL, False),
            },
        )
    }
    assert translate(tbl) == {"outer": {"name": "inner", "flag": False}}


def test_array_order():
    tbl = {
        "list": TableEntry(
            EntryKind.FIELD_ARRAY,
            [
                TableEntry(EntryKind.LONG_INT, 3),
                TableEntry(EntryKind.LONG_STRING, "two"),
                TableEntry(EntryKind.FIELD_TABLE, {"one": TableEntry(EntryKind.VOID)}),
            ],
        )
    }
    assert translate(tbl) == {"list": [3, "two", {"one": None}]}


@pytest.mark.parametrize(
    "kind,value",
    [
        (EntryKind.SHORT_SHORT_INT, -128),
        (EntryKind.SHORT_SHORT_UINT, 255),
        (EntryKind.SHORT_INT, -32768),
        (EntryKind.SHORT_UINT, 65535),
        (EntryKind.LONG_INT, -(2**31)),
        (EntryKind.LONG_UINT, 2**32 - 1),
        (EntryKind.LONG_LONG_INT, -MAX_SAFE_INT),
        (EntryKind.LONG_LONG_UINT, MAX_SAFE_INT),
        (EntryKind.TIMESTAMP, 1700000000),
    ],
)
def test_integers(kind, value):
    assert translate({"n": TableEntry(kind, value)}) == {"n": value}


@pytest.mark.parametrize(
    "kind,value",
    [
        (EntryKind.LONG_LONG_UINT, 2**64 - 1),
        (EntryKind.LONG_LONG_UINT, MAX_SAFE_INT + 1),
        (EntryKind.LONG_LONG_INT, -(2**63)),
    ],
)
def test_large_ints_as_strings(kind, value):
    assert translate({"n": TableEntry(kind, value)}) == {"n": str(value)}


def test_scalars():
    tbl = {
        "b": TableEntry(EntryKind.BOOL, True),
        "s": TableEntry(EntryKind.LONG_STRING, "héllo"),
        "v": TableEntry(EntryKind.VOID),
        "d": TableEntry(EntryKind.DOUBLE, 2.5),
        "f": TableEntry(EntryKind.FLOAT, 0.5),
    }
    assert translate(tbl) == {"b": True, "s": "héllo", "v": None, "d": 2.5, "f": 0.5}


def test_non_finite_floats():
    tbl = {
        "nan": TableEntry(EntryKind.DOUBLE, float("nan")),
        "inf": TableEntry(EntryKind.FLOAT, float("inf")),
    }
    assert translate(tbl) == {"nan": None, "inf": None}


def test_sorted_keys():
    tbl = {
        "b": TableEntry(EntryKind.VOID),
        "a": TableEntry(EntryKind.VOID),
        "c": TableEntry(EntryKind.VOID),
    }
    assert list(translate(tbl)) == ["a", "b", "c"]


def test_output_is_json():
    tbl = {
        "d": TableEntry(EntryKind.DECIMAL, (3, 1)),
        "a": TableEntry(EntryKind.FIELD_ARRAY, [TableEntry(EntryKind.TIMESTAMP, 0)]),
    }
    assert json.loads(json.dumps(translate(tbl))) == {"d": 0.001, "a": [0]}


def _nest(levels: int) -> dict:
    tbl = {"leaf": TableEntry(EntryKind.BOOL, True)}
    for _ in range(levels):
        tbl = {"t": TableEntry(EntryKind.FIELD_TABLE, tbl)}
    return tbl


def test_depth_limit():
    assert translate(_nest(3), max_depth=3) is not None
    with pytest.raises(TableDepthError):
        translate(_nest(4), max_depth=3)


def test_depth_limit_arrays():
    arr = TableEntry(EntryKind.VOID)
    for _ in range(5):
        arr = TableEntry(EntryKind.FIELD_ARRAY, [arr])
    with pytest.raises(TableDepthError):
        translate({"a": arr}, max_depth=4)
    assert translate({"a": arr}, max_depth=5) == {"a": [[[[[None]]]]]}


def test_every_kind_has_converter():
    assert set(table._CONVERTERS) == set(EntryKind)
