"""Pydantic models and data structures for the framework."""

from __future__ import annotations

import shlex
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class FuzzTarget(BaseModel):
    """A fuzz target: one state-transition entry point exercised by the engines."""

    model_config = ConfigDict(frozen=True)

    name: str
    language: str
    corpora: str = Field(description="Corpus subdirectory under the corpora root")
    template: str = Field(description="Harness template filename in the engine source dir")


class CommandSpec(BaseModel):
    """A subprocess to launch: program, arguments, environment overrides and working dir."""

    program: str
    args: list[str] = Field(default_factory=list)
    env: dict[str, str] = Field(default_factory=dict)
    cwd: Path | None = None

    def argv(self) -> list[str]:
        """Full argument vector, program first."""
        return [self.program, *self.args]

    def describe(self) -> str:
        """Shell-like rendering for logs and error messages."""
        env = " ".join(f"{k}={shlex.quote(v)}" for k, v in sorted(self.env.items()))
        cmd = shlex.join(self.argv())
        return f"{env} {cmd}" if env else cmd


RunStatus = Literal["succeeded", "quit", "spawn_error", "incompatible", "error"]


class RunOutcome(BaseModel):
    """Terminal result of one engine/target run."""

    engine: str
    target: str
    status: RunStatus = "succeeded"
    returncode: int | None = 0
    message: str = ""
    duration_seconds: float = 0.0

    @property
    def success(self) -> bool:
        return self.status == "succeeded"


class PluginInfo(BaseModel):
    """Metadata about a discovered plugin."""

    name: str
    path: Path
    module_name: str
    plugin_type: str = ""
