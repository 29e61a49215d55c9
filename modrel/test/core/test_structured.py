"""Tests for modrel.core.structured helpers."""

from modrel.core.structured import (
    as_obj_list,
    as_str_dict,
    get_int,
    get_str,
    get_str_list,
    get_table,
)


def test_get_str_strips_and_rejects_empty() -> None:
    data: dict[str, object] = {"a": "  x ", "b": "   ", "c": 3}
    assert get_str(data, "a") == "x"
    assert get_str(data, "b") is None
    assert get_str(data, "c") is None
    assert get_str(data, "missing") is None


def test_get_int_rejects_bool_and_str() -> None:
    data: dict[str, object] = {"a": 3, "b": True, "c": "3"}
    assert get_int(data, "a") == 3
    assert get_int(data, "b") is None
    assert get_int(data, "c") is None


def test_tables_and_lists() -> None:
    data: dict[str, object] = {"t": {"k": 1}, "l": ["a", " ", 2, "b "]}
    assert get_table(data, "t") == {"k": 1}
    assert get_table(data, "l") is None
    assert get_str_list(data, "l") == ["a", "b"]
    assert get_str_list(data, "t") is None


def test_as_helpers() -> None:
    assert as_str_dict({1: "x"}) is None
    assert as_str_dict({"x": 1}) == {"x": 1}
    assert as_obj_list((1, 2)) is None
    assert as_obj_list([1, 2]) == [1, 2]
