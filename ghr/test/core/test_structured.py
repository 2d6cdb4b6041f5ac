from __future__ import annotations

from ghr.core.structured import (
    as_str_dict,
    get_bool,
    get_int,
    get_raw_str,
    get_str,
    get_table,
    is_str_dict,
)


def test_is_str_dict_requires_string_keys() -> None:
    assert is_str_dict({"tag": "v1"}) is True
    assert is_str_dict({1: "v1"}) is False
    assert is_str_dict(["tag"]) is False


def test_as_str_dict_returns_none_for_non_mapping() -> None:
    assert as_str_dict("tag: v1") is None
    assert as_str_dict({"a": 1}) == {"a": 1}


def test_get_str_strips_and_rejects_empty() -> None:
    table: dict[str, object] = {"tag": "  v1.0.0 ", "empty": "   ", "num": 1}
    assert get_str(table, "tag") == "v1.0.0"
    assert get_str(table, "empty") is None
    assert get_str(table, "num") is None
    assert get_str(table, "missing") is None


def test_get_raw_str_keeps_whitespace() -> None:
    table: dict[str, object] = {"body": "  line\n"}
    assert get_raw_str(table, "body") == "  line\n"


def test_get_int_rejects_bool() -> None:
    table: dict[str, object] = {"id": 12, "flag": True}
    assert get_int(table, "id") == 12
    assert get_int(table, "flag") is None


def test_get_bool() -> None:
    table: dict[str, object] = {"prerelease": False, "text": "true"}
    assert get_bool(table, "prerelease") is False
    assert get_bool(table, "text") is None


def test_get_table() -> None:
    table: dict[str, object] = {"head": {"sha": "abc"}, "base": "abc"}
    assert get_table(table, "head") == {"sha": "abc"}
    assert get_table(table, "base") is None
