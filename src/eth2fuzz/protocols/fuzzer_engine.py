"""Protocol for fuzzing engines."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from eth2fuzz.core.schema import FuzzTarget, RunOutcome


class FuzzerEngine(Protocol):
    """Protocol for fuzzing engines (honggfuzz-rs, afl.rs, cargo-fuzz).

    Attributes:
        name: Registry key (``hfuzz``, ``afl``, ``libfuzzer``).
        display_name: Human-readable name used in messages.
        supports_build: True when the engine has a compile step separate from ``run``.
    """

    name: str
    display_name: str
    supports_build: bool
    work_dir: Path
    workspace_dir: Path

    @classmethod
    def is_available(cls, runner: object | None = None) -> None:
        """Probe the engine toolchain; raise AvailabilityError when it is missing."""
        ...

    def run(self, target: FuzzTarget) -> RunOutcome:
        """Prepare the workspace, write the harness and fuzz until the engine exits."""
        ...

    def build(self, target: FuzzTarget) -> None:
        """Compile the harness for ``target`` without fuzzing."""
        ...
