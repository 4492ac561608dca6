"""Process supervision: launch a composed command, wait for it and map its exit status."""

from __future__ import annotations

import logging
import os
import subprocess
import time
from typing import Protocol

from eth2fuzz.core.exceptions import FuzzerQuit, SpawnError
from eth2fuzz.core.schema import CommandSpec, RunOutcome

log = logging.getLogger(__name__)


class ProcessRunner(Protocol):
    """Runs a command to completion and returns its exit status.

    Must raise ``OSError`` when the process cannot be started at all.
    """

    def __call__(self, command: CommandSpec, *, quiet: bool = False) -> int:
        ...


def _wait_for_exit(proc: subprocess.Popen) -> int:
    while True:
        try:
            return proc.wait()
        except KeyboardInterrupt:
            continue


def subprocess_runner(command: CommandSpec, *, quiet: bool = False) -> int:
    """Default runner: ``subprocess.Popen`` with the terminal inherited unless ``quiet``.

    The child shares the terminal's process group, so Ctrl-C reaches it
    directly. On KeyboardInterrupt the child is never killed: we wait for it to
    finish its own shutdown, then re-raise.
    """
    env = os.environ.copy()
    env.update(command.env)
    proc = subprocess.Popen(
        command.argv(),
        env=env,
        cwd=str(command.cwd) if command.cwd else None,
        stdout=subprocess.DEVNULL if quiet else None,
        stderr=subprocess.DEVNULL if quiet else None,
    )
    try:
        return proc.wait()
    except KeyboardInterrupt:
        log.info("Interrupted, waiting for %s to exit", command.program)
        _wait_for_exit(proc)
        raise


def probe(command: CommandSpec, runner: ProcessRunner | None = None) -> bool:
    """True if ``command`` starts and exits 0. Output is discarded."""
    run = runner or subprocess_runner
    try:
        return run(command, quiet=True) == 0
    except OSError as e:
        log.debug("Probe %s failed to start: %s", command.describe(), e)
        return False


def supervise(
    command: CommandSpec,
    *,
    engine: str,
    target: str,
    runner: ProcessRunner | None = None,
) -> RunOutcome:
    """Run ``command`` and block until it exits.

    Raises:
        SpawnError: the process could not be started.
        FuzzerQuit: the process ran and exited with a non-zero status.
    """
    run = runner or subprocess_runner
    log.info("%s: %s", engine, command.describe())
    started = time.monotonic()
    try:
        returncode = run(command)
    except OSError as e:
        raise SpawnError(engine, target, str(e)) from e
    duration = time.monotonic() - started

    if returncode != 0:
        log.warning("%s running %s exited with status %d", engine, target, returncode)
        raise FuzzerQuit(engine, target, returncode)
    return RunOutcome(engine=engine, target=target, returncode=0, duration_seconds=duration)
