"""Unit tests for the package's lazy public surface."""

from __future__ import annotations

import pytest

import dingtalk_alert
from dingtalk_alert.config import DingtalkConfig
from dingtalk_alert.errors import DingtalkRemoteError
from dingtalk_alert.service import DingtalkService


def test_version() -> None:
    assert dingtalk_alert.__version__ == "1.0.0"


@pytest.mark.parametrize("name", dingtalk_alert.__all__)
def test_all_names_resolve(name: str) -> None:
    """Test every exported name is importable from the package root."""
    assert getattr(dingtalk_alert, name) is not None


def test_lazy_names_are_the_module_objects() -> None:
    assert dingtalk_alert.DingtalkService is DingtalkService
    assert dingtalk_alert.DingtalkConfig is DingtalkConfig
    assert dingtalk_alert.DingtalkRemoteError is DingtalkRemoteError


def test_unknown_attribute() -> None:
    with pytest.raises(AttributeError, match="has no attribute 'Nope'"):
        _ = dingtalk_alert.Nope  # type: ignore[attr-defined]


def test_unknown_error_name() -> None:
    with pytest.raises(AttributeError):
        _ = dingtalk_alert.DingtalkMissingError  # type: ignore[attr-defined]
