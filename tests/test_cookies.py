"""Tests for restfluent.http.cookies — parse_cookies."""

from restfluent.http.cookies import parse_cookies


class TestParseCookies:
    def test_empty_string(self) -> None:
        assert parse_cookies("") == {}

    def test_single_cookie(self) -> None:
        assert parse_cookies("restfluent_session=abc123") == {"restfluent_session": "abc123"}

    def test_multiple_cookies(self) -> None:
        result = parse_cookies("session=abc; theme=dark; lang=en")
        assert result == {"session": "abc", "theme": "dark", "lang": "en"}

    def test_whitespace_handling(self) -> None:
        result = parse_cookies("  session = abc ;  theme = dark  ")
        assert result == {"session": "abc", "theme": "dark"}

    def test_value_with_equals(self) -> None:
        """Signed values end in base64 padding."""
        result = parse_cookies("token=abc=def=")
        assert result == {"token": "abc=def="}

    def test_no_equals_ignored(self) -> None:
        result = parse_cookies("session=abc; broken; theme=dark")
        assert result == {"session": "abc", "theme": "dark"}

    def test_duplicate_keys_last_wins(self) -> None:
        assert parse_cookies("a=1; a=2") == {"a": "2"}
