"""Corpus input resolution.

Flat engines are always seeded from ``<corpora>/<target corpus>``. Engines
that persist a queue across runs (AFL) must resume from it once it holds
anything, otherwise the coverage they accumulated would be thrown away.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

log = logging.getLogger(__name__)

#: afl-fuzz ``-i`` value meaning "resume from the output directory".
RESUME_SENTINEL = "-"


@dataclass(frozen=True)
class FreshCorpus:
    """Seed a new session from a flat corpus directory."""

    path: Path

    def as_arg(self) -> str:
        return str(self.path)


@dataclass(frozen=True)
class ResumeCorpus:
    """Continue from the engine's own persisted state."""

    def as_arg(self) -> str:
        return RESUME_SENTINEL


CorpusInput = FreshCorpus | ResumeCorpus


def has_entries(path: Path) -> bool:
    """True if ``path`` is a directory containing at least one entry."""
    if not path.is_dir():
        return False
    return next(path.iterdir(), None) is not None


def resolve_corpus(queue_dir: Path, seed_dir: Path) -> CorpusInput:
    """Resume when a previous session left a non-empty queue, else seed from ``seed_dir``."""
    if has_entries(queue_dir):
        log.info("Resuming from existing queue %s", queue_dir)
        return ResumeCorpus()
    return FreshCorpus(seed_dir)
