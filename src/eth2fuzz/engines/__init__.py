"""Built-in fuzzing engines."""

from eth2fuzz.engines.afl import AflEngine
from eth2fuzz.engines.base import BaseEngine
from eth2fuzz.engines.honggfuzz import HonggfuzzEngine
from eth2fuzz.engines.libfuzzer import LibFuzzerEngine


def register_builtin_engines(registry) -> None:
    """Register built-in engines on the given registry."""
    registry.register_fuzzer(HonggfuzzEngine.name, HonggfuzzEngine)
    registry.register_fuzzer(AflEngine.name, AflEngine)
    registry.register_fuzzer(LibFuzzerEngine.name, LibFuzzerEngine)


__all__ = [
    "AflEngine",
    "BaseEngine",
    "HonggfuzzEngine",
    "LibFuzzerEngine",
    "register_builtin_engines",
]
