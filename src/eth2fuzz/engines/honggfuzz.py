"""honggfuzz-rs engine (https://github.com/rust-fuzz/honggfuzz-rs).

``cargo hfuzz run`` builds and fuzzes in one step; every tuning flag travels
through ``HFUZZ_RUN_ARGS`` and the seed corpus through ``HFUZZ_INPUT``.
"""

from __future__ import annotations

import os
from pathlib import Path

from eth2fuzz.core.schema import CommandSpec, FuzzTarget
from eth2fuzz.corpus import CorpusInput, FreshCorpus
from eth2fuzz.engines.base import BaseEngine
from eth2fuzz.templates import write_fuzzer_target

CARGO_WORKSPACE_FILES = ("Cargo.toml", "template.rs", "simple_template.rs", "src/lib.rs")


class HonggfuzzEngine(BaseEngine):
    name = "hfuzz"
    display_name = "Honggfuzz"
    source_name = "rust-honggfuzz"
    probe_args = ("hfuzz", "version")
    install_hint = "install with `cargo install honggfuzz`"
    workspace_files = CARGO_WORKSPACE_FILES

    def write_target(self, target: FuzzTarget) -> Path:
        return write_fuzzer_target(self.dir, self.work_dir, target)

    def resolve_corpus(self, target: FuzzTarget) -> CorpusInput:
        return FreshCorpus(self.seed_corpus_dir(target))

    def run_args(self) -> str:
        """Value of HFUZZ_RUN_ARGS.

        A caller-provided HFUZZ_RUN_ARGS is appended last, taken from
        ``fuzzer.env`` when configured there, else from the process environment.
        """
        parts: list[str] = []
        if self.timeout is not None:
            parts.append(f"--run_time {self.timeout}")
        parts.append(f"-t {self.config.hfuzz_testcase_timeout}")
        if self.thread is not None:
            parts.append(f"-n {self.thread}")
        extra = self.config.env.get("HFUZZ_RUN_ARGS") or os.environ.get("HFUZZ_RUN_ARGS", "")
        extra = extra.strip()
        if extra:
            parts.append(extra)
        return " ".join(parts)

    def build_command(self, target: FuzzTarget, corpus: CorpusInput) -> CommandSpec:
        env = self.base_env()
        env["HFUZZ_RUN_ARGS"] = self.run_args()
        env["HFUZZ_INPUT"] = corpus.as_arg()
        return self.cargo("hfuzz", "run", target.name, env=env)
