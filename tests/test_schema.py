"""Tests for schema models."""

from __future__ import annotations

from pathlib import Path

from eth2fuzz.core.schema import CommandSpec, RunOutcome


def test_command_argv_and_describe() -> None:
    cmd = CommandSpec(
        program="cargo",
        args=["+nightly", "hfuzz", "run", "process_deposit"],
        env={"HFUZZ_RUN_ARGS": "-t 60 -n 2", "A": "1"},
        cwd=Path("/w"),
    )
    assert cmd.argv() == ["cargo", "+nightly", "hfuzz", "run", "process_deposit"]
    assert cmd.describe() == "A=1 HFUZZ_RUN_ARGS='-t 60 -n 2' cargo +nightly hfuzz run process_deposit"


def test_command_defaults_are_not_shared() -> None:
    a = CommandSpec(program="cargo")
    b = CommandSpec(program="cargo")
    a.args.append("x")
    a.env["K"] = "v"
    assert b.args == []
    assert b.env == {}
    assert a.describe() == "K=v cargo x"


def test_run_outcome_success() -> None:
    assert RunOutcome(engine="Afl++", target="t").success
    assert not RunOutcome(engine="Afl++", target="t", status="quit", returncode=1).success
