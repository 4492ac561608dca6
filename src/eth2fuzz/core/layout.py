"""Filesystem layout shared by every engine: sources, workspace, corpora and fixtures."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel

from eth2fuzz.core.config import AppConfig


class WorkspaceLayout(BaseModel):
    """Paths rooted at the directory eth2fuzz is invoked from.

    ``fuzzers/<src>/`` holds the canonical engine templates (read-only),
    ``workspace/`` receives everything generated, and the corpora root keeps
    one subdirectory per target corpus.
    """

    root: Path
    corpora: Path | None = None
    state: Path | None = None

    @classmethod
    def from_config(
        cls,
        config: AppConfig | None = None,
        root: Path | None = None,
        *,
        fallback: Path | None = None,
    ) -> WorkspaceLayout:
        """Build the layout from config.

        The root is ``root`` if given, else ``workspace.root``, else ``fallback``, else cwd.
        """
        ws = config.workspace if config else None
        base = root or (Path(ws.root) if ws and ws.root else None) or fallback or Path.cwd()
        base = Path(base).resolve()
        corpora = Path(ws.corpora_dir) if ws and ws.corpora_dir else None
        state = Path(ws.state_dir) if ws and ws.state_dir else None
        return cls(
            root=base,
            corpora=_anchor(corpora, base),
            state=_anchor(state, base),
        )

    @property
    def fuzzers_dir(self) -> Path:
        return self.root / "fuzzers"

    @property
    def targets_dir(self) -> Path:
        return self.root / "targets"

    @property
    def workspace_dir(self) -> Path:
        return self.root / "workspace"

    @property
    def corpora_dir(self) -> Path:
        return self.corpora or self.workspace_dir / "corpora"

    @property
    def state_dir(self) -> Path:
        """Directory of fixed BeaconState inputs loaded by the harnesses."""
        return self.state or self.corpora_dir / "beaconstate"

    @property
    def plugins_dir(self) -> Path:
        return self.root / "plugins"

    def engine_source_dir(self, source: str) -> Path:
        return self.fuzzers_dir / source

    def engine_work_dir(self, engine: str) -> Path:
        return self.workspace_dir / engine

    def corpus_dir(self, corpora: str) -> Path:
        return self.corpora_dir / corpora


def _anchor(path: Path | None, base: Path) -> Path | None:
    if path is None:
        return None
    return path if path.is_absolute() else base / path
