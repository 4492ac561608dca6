"""afl.rs engine (https://github.com/rust-fuzz/afl.rs).

AFL needs the instrumented binary compiled before ``afl fuzz`` starts, and
keeps its queue in ``afl_workspace`` between runs so a later session can
resume with ``-i -`` instead of reseeding.
"""

from __future__ import annotations

import logging
from pathlib import Path

from eth2fuzz.core.schema import CommandSpec, FuzzTarget
from eth2fuzz.corpus import CorpusInput, resolve_corpus
from eth2fuzz.engines.base import BaseEngine
from eth2fuzz.engines.honggfuzz import CARGO_WORKSPACE_FILES
from eth2fuzz.templates import write_fuzzer_target
from eth2fuzz.workspace import ensure_dir

log = logging.getLogger(__name__)

#: Checks afl-fuzz would otherwise abort on (CPU governor, crashing seeds).
AFL_ENV = {
    "AFL_SKIP_CPUFREQ": "1",
    "AFL_SKIP_CRASHES": "1",
    "AFL_I_DONT_CARE_ABOUT_MISSING_CRASHES": "1",
}


class AflEngine(BaseEngine):
    name = "afl"
    display_name = "Afl++"
    source_name = "rust-afl"
    probe_args = ("afl", "--version")
    install_hint = "install with `cargo install afl`"
    supports_build = True
    workspace_files = CARGO_WORKSPACE_FILES
    queue_subdir = "queue"

    def write_target(self, target: FuzzTarget) -> Path:
        return write_fuzzer_target(self.dir, self.work_dir, target)

    def build_target_command(self, target: FuzzTarget) -> CommandSpec:
        return self.cargo("afl", "build", "--bin", target.name)

    def compile(self, target: FuzzTarget) -> None:
        """Compile the already-written harness; a failed build raises FuzzerQuit."""
        self.launch(self.build_target_command(target), target)

    def build(self, target: FuzzTarget) -> None:
        """Prepare the workspace and compile ``target`` with afl instrumentation."""
        self.check_compatible(target)
        self.prepare(target)
        self.compile(target)

    def before_launch(self, target: FuzzTarget) -> None:
        self.compile(target)
        ensure_dir(self.workspace_dir)

    def resolve_corpus(self, target: FuzzTarget) -> CorpusInput:
        return resolve_corpus(self.workspace_dir / self.queue_subdir, self.seed_corpus_dir(target))

    def build_command(self, target: FuzzTarget, corpus: CorpusInput) -> CommandSpec:
        args = ["afl", "fuzz"]
        if self.timeout is not None:
            args += ["-V", str(self.timeout)]
        if self.thread is not None:
            log.warning("%s ignores thread=%s; run one instance per core instead", self.display_name, self.thread)
        args += [
            "-m", "none",
            "-i", corpus.as_arg(),
            "-o", str(self.workspace_dir),
            "--", f"./target/debug/{target.name}",
        ]
        env = self.base_env()
        env.update(AFL_ENV)
        return self.cargo(*args, env=env)
