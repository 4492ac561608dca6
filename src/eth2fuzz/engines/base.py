"""Shared engine lifecycle: availability, workspace, harness, corpus, supervised run."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import ClassVar

from eth2fuzz.core.config import FuzzerConfigModel
from eth2fuzz.core.exceptions import AvailabilityError, EngineError, TargetIncompatibleError
from eth2fuzz.core.layout import WorkspaceLayout
from eth2fuzz.core.schema import CommandSpec, FuzzTarget, RunOutcome
from eth2fuzz.corpus import CorpusInput
from eth2fuzz.process import ProcessRunner, probe, subprocess_runner, supervise
from eth2fuzz.targets import RUST
from eth2fuzz.workspace import ensure_dir, prepare_targets_workspace, prepare_workspace

log = logging.getLogger(__name__)

#: Variable naming the BeaconState fixture directory read by every harness.
STATE_ENV = "ETH2FUZZ_BEACONSTATE"


class BaseEngine(ABC):
    """Base class for cargo-driven fuzzing engines.

    Subclasses set the class attributes and supply the policy hooks
    (``write_target``, ``resolve_corpus``, ``build_command``). ``run`` drives
    the lifecycle::

        language gate -> targets + engine workspace -> harness -> corpus -> launch

    Nothing is written before the language gate passes, and a failure at any
    step leaves the workspace as it is.
    """

    name: ClassVar[str]
    display_name: ClassVar[str]
    #: Directory under fuzzers/ holding the canonical sources.
    source_name: ClassVar[str]
    #: cargo subcommand that proves the engine is installed.
    probe_args: ClassVar[tuple[str, ...]]
    install_hint: ClassVar[str]
    language: ClassVar[str] = RUST
    supports_build: ClassVar[bool] = False
    #: Files copied from the source dir into the work dir before each run.
    workspace_files: ClassVar[tuple[str, ...]] = ()

    def __init__(
        self,
        timeout: int | None = None,
        thread: int | None = None,
        *,
        layout: WorkspaceLayout | None = None,
        runner: ProcessRunner | None = None,
        fuzzer_config: FuzzerConfigModel | None = None,
    ) -> None:
        self._runner = runner or subprocess_runner
        type(self).is_available(self._runner)

        self.config = fuzzer_config or FuzzerConfigModel()
        self.layout = layout or WorkspaceLayout.from_config()
        self.timeout = timeout if timeout is not None else self.config.timeout
        self.thread = thread if thread is not None else self.config.thread
        self.dir: Path = self.layout.engine_source_dir(self.source_name)
        self.work_dir: Path = self.layout.engine_work_dir(self.name)
        self.workspace_dir: Path = self.work_dir / f"{self.name}_workspace"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(work_dir={self.work_dir!s}, timeout={self.timeout}, thread={self.thread})"

    @classmethod
    def probe_command(cls) -> CommandSpec:
        return CommandSpec(program="cargo", args=list(cls.probe_args))

    @classmethod
    def is_available(cls, runner: ProcessRunner | None = None) -> None:
        """Raise AvailabilityError unless the engine's cargo subcommand answers."""
        if not probe(cls.probe_command(), runner):
            raise AvailabilityError(cls.display_name, cls.install_hint)

    # ------------------------------------------------------------------
    # Command helpers
    # ------------------------------------------------------------------

    def cargo(
        self,
        *args: str,
        env: dict[str, str] | None = None,
        cwd: Path | None = None,
    ) -> CommandSpec:
        """A cargo invocation on the configured toolchain (``+nightly`` by default)."""
        toolchain = [self.config.toolchain] if self.config.toolchain else []
        return CommandSpec(
            program="cargo",
            args=[*toolchain, *args],
            env=env or {},
            cwd=cwd or self.work_dir,
        )

    def base_env(self) -> dict[str, str]:
        """Environment every fuzzer process gets: configured extras plus the fixture dir."""
        env = dict(self.config.env)
        env[STATE_ENV] = str(self.layout.state_dir)
        return env

    def seed_corpus_dir(self, target: FuzzTarget) -> Path:
        """Flat corpus for ``target``, created if absent and never removed."""
        return ensure_dir(self.layout.corpus_dir(target.corpora))

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def check_compatible(self, target: FuzzTarget) -> None:
        if target.language != self.language:
            raise TargetIncompatibleError(self.display_name, target.name, target.language)

    def prepare_fuzzer_workspace(self) -> None:
        """Copy the engine's file manifest into its work dir."""
        prepare_workspace(self.dir, self.work_dir, self.workspace_files)

    def prepare(self, target: FuzzTarget) -> Path:
        """Populate targets/ and the engine work dir, then write the harness for ``target``."""
        prepare_targets_workspace(self.layout)
        self.prepare_fuzzer_workspace()
        path = self.write_target(target)
        log.info("%s: %s created", self.display_name, target.name)
        return path

    def before_launch(self, target: FuzzTarget) -> None:
        """Hook run between harness generation and corpus resolution."""

    def run(self, target: FuzzTarget) -> RunOutcome:
        """Fuzz ``target`` until the engine exits (timeout, interrupt or failure)."""
        self.check_compatible(target)
        self.prepare(target)
        self.before_launch(target)
        corpus = self.resolve_corpus(target)
        command = self.build_command(target, corpus)
        return self.launch(command, target)

    def launch(self, command: CommandSpec, target: FuzzTarget) -> RunOutcome:
        return supervise(command, engine=self.display_name, target=target.name, runner=self._runner)

    def build(self, target: FuzzTarget) -> None:
        raise EngineError(f"{self.display_name} has no separate build step; use run")

    @abstractmethod
    def write_target(self, target: FuzzTarget) -> Path:
        """Write the concrete harness source for ``target``; return its path."""

    @abstractmethod
    def resolve_corpus(self, target: FuzzTarget) -> CorpusInput:
        """Decide where the engine reads its input corpus from."""

    @abstractmethod
    def build_command(self, target: FuzzTarget, corpus: CorpusInput) -> CommandSpec:
        """Compose the fuzzing command for ``target``."""
