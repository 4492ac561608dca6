"""Workspace preparation: copy engine sources into workspace/ without ever deleting corpora.

Every operation here is idempotent. Directories are created if absent and
files are overwritten, so edits to the canonical templates under fuzzers/
reach the workspace on the next run.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Iterable
from pathlib import Path

from eth2fuzz.core.exceptions import WorkspaceError
from eth2fuzz.core.layout import WorkspaceLayout

log = logging.getLogger(__name__)


def ensure_dir(path: Path) -> Path:
    """Create ``path`` and its parents if needed."""
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise WorkspaceError(f"unable to create dir ({e.strerror or e})", path) from e
    return path


def copy_file(src: Path, dst: Path) -> None:
    """Copy one file, replacing any existing copy at ``dst``."""
    ensure_dir(dst.parent)
    try:
        shutil.copyfile(src, dst)
    except OSError as e:
        raise WorkspaceError(f"unable to copy {src} ({e.strerror or e})", dst) from e


def copy_dir(src: Path, dst: Path) -> None:
    """Copy the tree ``src`` onto ``dst``, overwriting files that already exist."""
    if not src.is_dir():
        raise WorkspaceError(f"source dir {src} does not exist, cannot populate", dst)
    try:
        shutil.copytree(src, dst, dirs_exist_ok=True)
    except (OSError, shutil.Error) as e:
        raise WorkspaceError(f"unable to copy {src} ({e})", dst) from e


def reset_dir(path: Path) -> Path:
    """Empty ``path`` by removing and recreating it. Only used for generated sources."""
    shutil.rmtree(path, ignore_errors=True)
    return ensure_dir(path)


def prepare_workspace(source_dir: Path, work_dir: Path, files: Iterable[str]) -> None:
    """Populate ``work_dir`` with the listed files (paths relative to ``source_dir``)."""
    ensure_dir(work_dir)
    for rel in files:
        copy_file(source_dir / rel, work_dir / rel)
    log.debug("Prepared workspace %s from %s", work_dir, source_dir)


def prepare_targets_workspace(layout: WorkspaceLayout) -> Path:
    """Copy the shared targets/ crate into workspace/targets for the engine manifests to reference."""
    dest = layout.workspace_dir / "targets"
    ensure_dir(layout.workspace_dir)
    copy_dir(layout.targets_dir, dest)
    return dest
