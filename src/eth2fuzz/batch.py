"""Drive engines over one or many targets and turn failures into RunOutcome records."""

from __future__ import annotations

import itertools
import logging
from collections.abc import Iterable, Iterator

from eth2fuzz.core.exceptions import (
    Eth2FuzzError,
    FuzzerQuit,
    SpawnError,
    TargetIncompatibleError,
)
from eth2fuzz.core.schema import FuzzTarget, RunOutcome
from eth2fuzz.protocols import FuzzerEngine

log = logging.getLogger(__name__)


def run_target(engine: FuzzerEngine, target: FuzzTarget) -> RunOutcome:
    """Run one target and report the result instead of raising.

    Only eth2fuzz errors are converted; anything else is a bug and propagates.
    """
    name = engine.display_name
    try:
        return engine.run(target)
    except TargetIncompatibleError as e:
        return RunOutcome(engine=name, target=target.name, status="incompatible", returncode=None, message=str(e))
    except FuzzerQuit as e:
        return RunOutcome(engine=name, target=target.name, status="quit", returncode=e.returncode, message=str(e))
    except SpawnError as e:
        return RunOutcome(engine=name, target=target.name, status="spawn_error", returncode=None, message=str(e))
    except Eth2FuzzError as e:
        log.error("%s: %s failed: %s", name, target.name, e)
        return RunOutcome(engine=name, target=target.name, status="error", returncode=None, message=str(e))


def run_continuously(
    engine: FuzzerEngine,
    targets: Iterable[FuzzTarget],
    *,
    infinite: bool = False,
) -> Iterator[RunOutcome]:
    """Run ``targets`` one after the other, yielding each outcome.

    A failing target never stops the batch. With ``infinite`` the list is
    cycled until the caller stops iterating (or the process is interrupted).
    """
    todo = list(targets)
    if not todo:
        return
    sequence = itertools.cycle(todo) if infinite else todo
    for target in sequence:
        log.info("%s: fuzzing %s", engine.display_name, target.name)
        yield run_target(engine, target)
