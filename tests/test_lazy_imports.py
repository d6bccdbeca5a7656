"""Tests for restfluent.__init__ — lazy imports cover all public names."""

import pytest

import restfluent


@pytest.mark.parametrize("name", restfluent.__all__)
def test_all_names_resolve(name: str) -> None:
    """Every name in __all__ must resolve via __getattr__ without error."""
    obj = getattr(restfluent, name)
    assert obj is not None, f"restfluent.{name} resolved to None"


def test_unknown_name_raises_attribute_error() -> None:
    with pytest.raises(AttributeError, match="no attribute"):
        restfluent.__getattr__("ThisDoesNotExist")
