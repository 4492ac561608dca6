"""Tests for HealthChecker."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

from eth2fuzz.core.health import HealthChecker
from eth2fuzz.core.layout import WorkspaceLayout
from eth2fuzz.core.registry import ComponentRegistry
from eth2fuzz.engines import register_builtin_engines

from _helpers import FakeRunner


def _checker(layout: WorkspaceLayout, runner: FakeRunner) -> HealthChecker:
    registry = ComponentRegistry()
    register_builtin_engines(registry)
    return HealthChecker(registry=registry, layout=layout, runner=runner)


def test_engines_checked_independently(layout: WorkspaceLayout, runner: FakeRunner) -> None:
    runner.set_result("afl --version", 1)
    results = {r.name: r for r in _checker(layout, runner).check_engines()}
    assert results["hfuzz"].ok
    assert results["libfuzzer"].ok
    assert not results["afl"].ok
    assert results["afl"].message == "Afl++ not available"
    assert "cargo install afl" in results["afl"].suggestion


def test_layout_ok(layout: WorkspaceLayout, runner: FakeRunner) -> None:
    result = _checker(layout, runner).check_layout()
    assert result.ok
    assert str(layout.root) in result.message


def test_layout_missing_state(tmp_path: Path, runner: FakeRunner) -> None:
    (tmp_path / "fuzzers").mkdir()
    (tmp_path / "targets").mkdir()
    result = _checker(WorkspaceLayout(root=tmp_path), runner).check_layout()
    assert not result.ok
    assert "beaconstate" in result.message
    assert "fuzzers" not in result.message


@patch("eth2fuzz.core.health._run_cmd", return_value=(True, "cargo 1.80.0-nightly"))
def test_check_all(mock_run, layout: WorkspaceLayout, runner: FakeRunner) -> None:
    results = _checker(layout, runner).check_all()
    assert [r.name for r in results] == ["cargo", "layout", "hfuzz", "afl", "libfuzzer"]
    assert results[0].message == "cargo 1.80.0-nightly"
    assert all(r.ok for r in results)


@patch("eth2fuzz.core.health._run_cmd", return_value=(False, "command not found"))
def test_check_all_skips(mock_run, layout: WorkspaceLayout, runner: FakeRunner) -> None:
    results = _checker(layout, runner).check_all(skip_engines=True, skip_layout=True)
    assert len(results) == 1
    assert not results[0].ok
    assert "rustup" in results[0].suggestion
    assert runner.calls == []
