"""Tests for restfluent.config — RestConfig frozen dataclass."""

import dataclasses

import pytest

from restfluent.config import RestConfig


class TestRestConfig:
    def test_defaults(self) -> None:
        cfg = RestConfig()

        assert cfg.prefix == "v1"
        assert cfg.content_type == "application/json"
        assert cfg.status == 200
        assert cfg.data_key == "data"
        assert cfg.status_key == "status"
        assert cfg.headers_key == "headers"

    def test_override(self) -> None:
        cfg = RestConfig(prefix="shop/v2", status=201)

        assert cfg.prefix == "shop/v2"
        assert cfg.status == 201
        assert cfg.content_type == "application/json"

    def test_frozen(self) -> None:
        cfg = RestConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            cfg.prefix = "v2"  # type: ignore[misc]
