"""Tests for restfluent.http.headers — immutable, case-insensitive Headers."""

import pytest

from restfluent.http.headers import Headers


def _h(*pairs: tuple[str, str]) -> Headers:
    return Headers(pairs)


class TestHeaders:
    def test_getitem(self) -> None:
        assert _h(("Content-Type", "text/html"))["Content-Type"] == "text/html"

    def test_case_insensitive(self) -> None:
        h = _h(("Content-Type", "text/html"))
        assert h["content-type"] == "text/html"
        assert h["CONTENT-TYPE"] == "text/html"

    def test_missing_key_raises(self) -> None:
        with pytest.raises(KeyError):
            _h(("Accept", "*/*"))["X-Missing"]

    def test_contains(self) -> None:
        h = _h(("Accept", "*/*"))
        assert "accept" in h
        assert "Accept" in h
        assert "x-missing" not in h
        assert 42 not in h  # type: ignore[operator]

    def test_len_deduplicates(self) -> None:
        assert len(_h(("X-Forwarded-For", "a"), ("X-Forwarded-For", "b"))) == 1

    def test_iter_yields_unique_lowercase_keys(self) -> None:
        h = _h(("Accept", "*/*"), ("Content-Type", "text/html"), ("Accept", "text/xml"))
        assert list(h) == ["accept", "content-type"]

    def test_get_with_default(self) -> None:
        h = _h(("Accept", "*/*"))
        assert h.get("accept") == "*/*"
        assert h.get("x-missing") is None
        assert h.get("x-missing", "fallback") == "fallback"

    def test_get_list(self) -> None:
        h = _h(("X-Forwarded-For", "a"), ("X-Forwarded-For", "b"), ("Accept", "*/*"))
        assert h.get_list("x-forwarded-for") == ["a", "b"]
        assert h.get_list("x-missing") == []

    def test_from_mapping(self) -> None:
        h = Headers({"X-Real-IP": "1.2.3.4"})
        assert h["x-real-ip"] == "1.2.3.4"
        assert h.raw == (("X-Real-IP", "1.2.3.4"),)

    def test_repr(self) -> None:
        assert repr(_h(("A", "1"))) == "Headers({'a': '1'})"
