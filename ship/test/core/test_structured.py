from __future__ import annotations

from ship.core.structured import (
    as_obj_list,
    as_str_dict,
    get_bool,
    get_int,
    get_str,
    get_str_list,
    get_table,
)


def test_as_str_dict() -> None:
    assert as_str_dict({"a": 1}) == {"a": 1}
    assert as_str_dict({1: "a"}) is None
    assert as_str_dict([]) is None


def test_as_obj_list() -> None:
    assert as_obj_list(["6", 1]) == ["6", 1]
    assert as_obj_list({"tags": []}) is None


def test_get_str_strips_and_rejects_blank() -> None:
    table: dict[str, object] = {"a": " pets ", "b": "  ", "c": 3}
    assert get_str(table, "a") == "pets"
    assert get_str(table, "b") is None
    assert get_str(table, "c") is None
    assert get_str(table, "missing") is None


def test_get_int_rejects_bool() -> None:
    table: dict[str, object] = {"n": 30, "flag": True}
    assert get_int(table, "n") == 30
    assert get_int(table, "flag") is None


def test_get_bool() -> None:
    assert get_bool({"x": False}, "x") is False
    assert get_bool({"x": "false"}, "x") is None


def test_get_table() -> None:
    assert get_table({"cluster": {"namespace": "pets"}}, "cluster") == {"namespace": "pets"}
    assert get_table({"cluster": "pets"}, "cluster") is None


def test_get_str_list() -> None:
    assert get_str_list({"m": [" a.yaml", "b.yaml"]}, "m") == ["a.yaml", "b.yaml"]
    assert get_str_list({"m": ["a.yaml", 3]}, "m") is None
    assert get_str_list({"m": ["a.yaml", " "]}, "m") is None
    assert get_str_list({}, "m") is None
