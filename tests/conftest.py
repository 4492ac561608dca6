"""Shared pytest fixtures for eth2fuzz tests.

Factory functions live in ``_helpers.py``; this module re-exports them as
pytest fixtures so tests can receive them via dependency injection.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from eth2fuzz.core.layout import WorkspaceLayout
from eth2fuzz.core.schema import FuzzTarget

from _helpers import FakeRunner, make_source_tree, make_target


@pytest.fixture()
def runner() -> FakeRunner:
    """A recording process runner; every command exits 0 unless configured."""
    return FakeRunner()


@pytest.fixture()
def layout(tmp_path: Path) -> WorkspaceLayout:
    """Workspace layout over a tmp tree holding engine sources, targets and fixtures."""
    return make_source_tree(tmp_path)


@pytest.fixture()
def voluntary_exit() -> FuzzTarget:
    return make_target()


@pytest.fixture()
def js_target() -> FuzzTarget:
    return make_target(name="lodestar_voluntary_exit", language="js", template="template.js")
