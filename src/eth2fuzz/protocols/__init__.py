"""Protocol interfaces for pluggable components."""

from eth2fuzz.protocols.fuzzer_engine import FuzzerEngine

__all__ = [
    "FuzzerEngine",
]
