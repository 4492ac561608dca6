"""Catalog of fuzz targets shared by every engine."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from eth2fuzz.core.exceptions import RegistryError, UnknownTargetError
from eth2fuzz.core.schema import FuzzTarget

RUST = "rust"

#: Harness template for targets fed a BeaconState fixture plus a fuzzed container.
STATE_TEMPLATE = "template.rs"
#: Harness template for targets that decode the fuzzed input on its own.
SIMPLE_TEMPLATE = "simple_template.rs"


def _rust(name: str, corpora: str, template: str = STATE_TEMPLATE) -> FuzzTarget:
    return FuzzTarget(name=name, language=RUST, corpora=corpora, template=template)


BUILTIN_TARGETS: tuple[FuzzTarget, ...] = (
    _rust("process_attestation", "attestation"),
    _rust("process_attester_slashing", "attester_slashing"),
    _rust("process_block", "block"),
    _rust("process_block_header", "block_header"),
    _rust("process_deposit", "deposit"),
    _rust("process_proposer_slashing", "proposer_slashing"),
    _rust("process_voluntary_exit", "voluntary_exit"),
    _rust("ssz_beaconstate", "beaconstate", SIMPLE_TEMPLATE),
    FuzzTarget(name="lodestar_voluntary_exit", language="js", corpora="voluntary_exit", template="template.js"),
    FuzzTarget(name="nimbus_voluntary_exit", language="nim", corpora="voluntary_exit", template="template.nim"),
    FuzzTarget(name="prysm_voluntary_exit", language="go", corpora="voluntary_exit", template="template.go"),
)


class TargetRegistry:
    """Read-only, ordered collection of fuzz targets keyed by name."""

    def __init__(self, targets: Iterable[FuzzTarget] = BUILTIN_TARGETS) -> None:
        self._targets: dict[str, FuzzTarget] = {}
        for target in targets:
            if target.name in self._targets:
                raise RegistryError(f"Duplicate fuzz target: {target.name}")
            self._targets[target.name] = target

    def __iter__(self) -> Iterator[FuzzTarget]:
        return iter(self._targets.values())

    def __len__(self) -> int:
        return len(self._targets)

    def __contains__(self, name: object) -> bool:
        return name in self._targets

    def get(self, name: str) -> FuzzTarget:
        try:
            return self._targets[name]
        except KeyError:
            raise UnknownTargetError(name) from None

    def names(self) -> list[str]:
        return list(self._targets)

    def for_language(self, language: str) -> list[FuzzTarget]:
        """Targets written in ``language``, in registry order."""
        return [t for t in self._targets.values() if t.language == language]
