"""Central registry for fuzzing engines."""

from __future__ import annotations

import logging
from typing import Any

from eth2fuzz.core.exceptions import RegistryError
from eth2fuzz.protocols import FuzzerEngine

log = logging.getLogger(__name__)


class ComponentRegistry:
    """Central registry for pluggable fuzzing engines."""

    def __init__(self) -> None:
        self._fuzzer_engines: dict[str, type[FuzzerEngine]] = {}
        self._fuzzer_options: dict[str, dict[str, Any]] = {}

    def register_fuzzer(self, name: str, cls: type[FuzzerEngine], **options: Any) -> None:
        """Register a fuzzer engine class."""
        if name in self._fuzzer_engines:
            log.warning("Overwriting fuzzer engine registration: %s", name)
        self._fuzzer_engines[name] = cls
        if options:
            self._fuzzer_options[name] = options

    def get_fuzzer_class(self, name: str) -> type[FuzzerEngine]:
        """Return the registered engine class without instantiating it."""
        if name not in self._fuzzer_engines:
            raise RegistryError(
                f"Unknown fuzzer engine: {name}. Available: {', '.join(self._fuzzer_engines) or 'none'}"
            )
        return self._fuzzer_engines[name]

    def get_fuzzer(self, name: str, **kwargs: Any) -> FuzzerEngine:
        """Get a fuzzer engine instance by name.

        Instantiation probes the engine toolchain, so this raises
        AvailabilityError when the engine is not installed.
        """
        cls = self.get_fuzzer_class(name)
        opts = {**self._fuzzer_options.get(name, {}), **kwargs}
        return cls(**opts)  # type: ignore[call-arg]

    def list_available(self) -> dict[str, list[str]]:
        """Return all registered component names by category."""
        return {
            "fuzzer_engines": list(self._fuzzer_engines),
        }
