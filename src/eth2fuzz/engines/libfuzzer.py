"""cargo-fuzz / libFuzzer engine (https://github.com/rust-fuzz/cargo-fuzz).

cargo-fuzz only builds targets listed as ``[[bin]]`` in ``fuzz/Cargo.toml``,
so each target is first added with ``cargo fuzz add`` and its harness then
written to ``fuzz/fuzz_targets/<name>.rs``.
"""

from __future__ import annotations

import logging
from pathlib import Path

from eth2fuzz.core.exceptions import SpawnError
from eth2fuzz.core.schema import CommandSpec, FuzzTarget
from eth2fuzz.corpus import CorpusInput, FreshCorpus
from eth2fuzz.engines.base import BaseEngine
from eth2fuzz.templates import write_libfuzzer_target
from eth2fuzz.workspace import copy_dir, ensure_dir, reset_dir

log = logging.getLogger(__name__)


class LibFuzzerEngine(BaseEngine):
    name = "libfuzzer"
    display_name = "Libfuzzer"
    source_name = "rust-libfuzzer"
    probe_args = ("fuzz", "--version")
    install_hint = "install with `cargo install cargo-fuzz`"

    @property
    def fuzz_dir(self) -> Path:
        return self.work_dir / "fuzz"

    def prepare_fuzzer_workspace(self) -> None:
        """Copy the whole source tree, then start from an empty fuzz_targets/."""
        copy_dir(self.dir, self.work_dir)
        ensure_dir(self.fuzz_dir)
        reset_dir(self.fuzz_dir / "fuzz_targets")

    def register_target(self, target: FuzzTarget) -> bool:
        """Run ``cargo fuzz add``; True if it succeeded."""
        command = self.cargo("fuzz", "add", target.name)
        try:
            returncode = self._runner(command, quiet=True)
        except OSError as e:
            raise SpawnError(self.display_name, target.name, f"cargo fuzz add: {e}") from e
        if returncode != 0:
            log.info("cargo fuzz add %s exited with status %d", target.name, returncode)
        return returncode == 0

    def write_target(self, target: FuzzTarget) -> Path:
        return write_libfuzzer_target(self.work_dir, target, self.register_target)

    def resolve_corpus(self, target: FuzzTarget) -> CorpusInput:
        return FreshCorpus(self.seed_corpus_dir(target))

    def build_command(self, target: FuzzTarget, corpus: CorpusInput) -> CommandSpec:
        args = ["fuzz", "run"]
        if self.thread is not None:
            args += ["--jobs", str(self.thread)]
        args += [target.name, corpus.as_arg()]
        if self.timeout is not None:
            args += ["--", f"-max_total_time={self.timeout}"]
        return self.cargo(*args, env=self.base_env(), cwd=self.fuzz_dir)
