"""Tests for waypoint.history.query — immutable QueryParams."""

import pytest

from waypoint.history.query import QueryParams


class TestQueryParams:
    def test_getitem(self) -> None:
        q = QueryParams("q=hello&page=2")
        assert q["q"] == "hello"
        assert q["page"] == "2"

    def test_missing_key_raises(self) -> None:
        q = QueryParams("q=hello")
        with pytest.raises(KeyError):
            q["missing"]

    def test_contains(self) -> None:
        q = QueryParams("q=hello")
        assert "q" in q
        assert "missing" not in q

    def test_len(self) -> None:
        q = QueryParams("a=1&b=2&c=3")
        assert len(q) == 3

    def test_iter(self) -> None:
        q = QueryParams("a=1&b=2")
        assert set(q) == {"a", "b"}

    def test_get_with_default(self) -> None:
        q = QueryParams("q=hello")
        assert q.get("q") == "hello"
        assert q.get("missing") is None
        assert q.get("missing", "fallback") == "fallback"

    def test_get_list(self) -> None:
        q = QueryParams("tag=python&tag=rust&q=hello")
        assert q.get_list("tag") == ["python", "rust"]
        assert q.get_list("q") == ["hello"]
        assert q.get_list("missing") == []

    def test_percent_encoded_values(self) -> None:
        q = QueryParams("redirect=%2Fprivate&name=a+b")
        assert q["redirect"] == "/private"
        assert q["name"] == "a b"

    def test_blank_values_kept(self) -> None:
        q = QueryParams("flag=&other=1")
        assert q["flag"] == ""

    def test_empty(self) -> None:
        q = QueryParams()
        assert len(q) == 0
        assert q.raw == ""

    def test_raw(self) -> None:
        assert QueryParams("a=1&b=2").raw == "a=1&b=2"

    def test_equality_by_content(self) -> None:
        assert QueryParams("a=1") == QueryParams("a=1")
        assert QueryParams("a=1") == {"a": "1"}
        assert QueryParams("a=1") != QueryParams("a=2")

    def test_repr(self) -> None:
        assert repr(QueryParams("a=1")) == "QueryParams({'a': '1'})"


class TestSplit:
    def test_path_and_query(self) -> None:
        path, q = QueryParams.split("/login?redirect=%2Fprivate")
        assert path == "/login"
        assert q["redirect"] == "/private"

    def test_no_query(self) -> None:
        path, q = QueryParams.split("RouteA/42")
        assert path == "RouteA/42"
        assert len(q) == 0

    def test_splits_on_first_question_mark(self) -> None:
        path, q = QueryParams.split("a?b=c?d")
        assert path == "a"
        assert q["b"] == "c?d"

    def test_trailing_question_mark(self) -> None:
        path, q = QueryParams.split("page?")
        assert path == "page"
        assert q.raw == ""
