"""Tests for workspace preparation."""

from __future__ import annotations

from pathlib import Path

import pytest

from eth2fuzz.core.exceptions import WorkspaceError
from eth2fuzz.core.layout import WorkspaceLayout
from eth2fuzz.workspace import (
    copy_dir,
    copy_file,
    ensure_dir,
    prepare_targets_workspace,
    prepare_workspace,
    reset_dir,
)

from _helpers import snapshot

FILES = ("Cargo.toml", "template.rs", "simple_template.rs", "src/lib.rs")


def test_prepare_workspace_copies_manifest(layout: WorkspaceLayout) -> None:
    src = layout.fuzzers_dir / "rust-honggfuzz"
    dst = layout.workspace_dir / "hfuzz"
    prepare_workspace(src, dst, FILES)
    for rel in FILES:
        assert (dst / rel).read_bytes() == (src / rel).read_bytes()


def test_prepare_workspace_twice_is_identical(layout: WorkspaceLayout) -> None:
    src = layout.fuzzers_dir / "rust-honggfuzz"
    dst = layout.workspace_dir / "hfuzz"
    prepare_workspace(src, dst, FILES)
    once = snapshot(dst)
    prepare_workspace(src, dst, FILES)
    assert snapshot(dst) == once


def test_prepare_workspace_overwrites_local_edits(layout: WorkspaceLayout) -> None:
    src = layout.fuzzers_dir / "rust-honggfuzz"
    dst = layout.workspace_dir / "hfuzz"
    prepare_workspace(src, dst, FILES)
    (dst / "template.rs").write_text("edited in workspace")
    prepare_workspace(src, dst, FILES)
    assert (dst / "template.rs").read_bytes() == (src / "template.rs").read_bytes()


def test_prepare_workspace_keeps_unlisted_files(layout: WorkspaceLayout) -> None:
    src = layout.fuzzers_dir / "rust-honggfuzz"
    dst = layout.workspace_dir / "hfuzz"
    queue = dst / "hfuzz_workspace" / "queue"
    queue.mkdir(parents=True)
    (queue / "input").write_bytes(b"keep")
    prepare_workspace(src, dst, FILES)
    assert (queue / "input").read_bytes() == b"keep"


def test_prepare_workspace_missing_source_reports_destination(tmp_path: Path) -> None:
    src = tmp_path / "src"
    src.mkdir()
    with pytest.raises(WorkspaceError) as exc:
        prepare_workspace(src, tmp_path / "dst", ["Cargo.toml"])
    assert exc.value.path == tmp_path / "dst" / "Cargo.toml"


def test_copy_file_creates_parent(tmp_path: Path) -> None:
    src = tmp_path / "a.txt"
    src.write_text("a")
    copy_file(src, tmp_path / "x" / "y" / "a.txt")
    assert (tmp_path / "x" / "y" / "a.txt").read_text() == "a"


def test_copy_dir_merges_and_overwrites(tmp_path: Path) -> None:
    src = tmp_path / "src"
    (src / "sub").mkdir(parents=True)
    (src / "sub" / "f.txt").write_text("new")
    dst = tmp_path / "dst"
    (dst / "sub").mkdir(parents=True)
    (dst / "sub" / "f.txt").write_text("old")
    (dst / "other.txt").write_text("untouched")

    copy_dir(src, dst)
    assert (dst / "sub" / "f.txt").read_text() == "new"
    assert (dst / "other.txt").read_text() == "untouched"


def test_copy_dir_missing_source(tmp_path: Path) -> None:
    with pytest.raises(WorkspaceError, match="does not exist"):
        copy_dir(tmp_path / "nope", tmp_path / "dst")


def test_ensure_dir_under_file_fails(tmp_path: Path) -> None:
    blocker = tmp_path / "file"
    blocker.write_text("x")
    with pytest.raises(WorkspaceError) as exc:
        ensure_dir(blocker / "child")
    assert exc.value.path == blocker / "child"


def test_reset_dir_empties(tmp_path: Path) -> None:
    d = tmp_path / "fuzz_targets"
    d.mkdir()
    (d / "old.rs").write_text("x")
    reset_dir(d)
    assert d.is_dir()
    assert list(d.iterdir()) == []


def test_reset_dir_creates_missing(tmp_path: Path) -> None:
    assert reset_dir(tmp_path / "new").is_dir()


def test_prepare_targets_workspace(layout: WorkspaceLayout) -> None:
    dest = prepare_targets_workspace(layout)
    assert dest == layout.workspace_dir / "targets"
    assert (dest / "lighthouse" / "src" / "lib.rs").is_file()


def test_prepare_targets_workspace_missing_targets(tmp_path: Path) -> None:
    with pytest.raises(WorkspaceError):
        prepare_targets_workspace(WorkspaceLayout(root=tmp_path))
