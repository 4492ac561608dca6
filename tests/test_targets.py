"""Tests for the fuzz target catalog."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from eth2fuzz.core.exceptions import RegistryError, UnknownTargetError
from eth2fuzz.targets import BUILTIN_TARGETS, RUST, SIMPLE_TEMPLATE, STATE_TEMPLATE, TargetRegistry

from _helpers import make_target


def test_builtin_catalog() -> None:
    registry = TargetRegistry()
    assert len(registry) == len(BUILTIN_TARGETS)
    assert "process_voluntary_exit" in registry
    deposit = registry.get("process_deposit")
    assert deposit.language == RUST
    assert deposit.corpora == "deposit"
    assert deposit.template == STATE_TEMPLATE


def test_ssz_target_uses_simple_template() -> None:
    target = TargetRegistry().get("ssz_beaconstate")
    assert target.template == SIMPLE_TEMPLATE
    assert target.corpora == "beaconstate"


def test_names_keep_order() -> None:
    registry = TargetRegistry([make_target(name="b"), make_target(name="a")])
    assert registry.names() == ["b", "a"]
    assert [t.name for t in registry] == ["b", "a"]


def test_for_language() -> None:
    registry = TargetRegistry()
    rust = registry.for_language(RUST)
    assert rust
    assert all(t.language == RUST for t in rust)
    assert [t.name for t in registry.for_language("js")] == ["lodestar_voluntary_exit"]


def test_unknown_target() -> None:
    with pytest.raises(UnknownTargetError, match="no_such_target"):
        TargetRegistry().get("no_such_target")


def test_duplicate_names_rejected() -> None:
    with pytest.raises(RegistryError, match="Duplicate"):
        TargetRegistry([make_target(), make_target()])


def test_targets_are_immutable() -> None:
    target = make_target()
    with pytest.raises(ValidationError):
        target.name = "other"  # type: ignore[misc]
