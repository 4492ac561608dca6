"""Custom exception hierarchy for eth2fuzz."""

from __future__ import annotations

from pathlib import Path


class Eth2FuzzError(Exception):
    """Base exception for eth2fuzz."""

    pass


class ConfigError(Eth2FuzzError):
    """Raised when configuration loading or validation fails."""

    pass


class RegistryError(Eth2FuzzError):
    """Raised when a component is not found or registration fails."""

    pass


class UnknownTargetError(RegistryError):
    """Raised when a fuzz target name is not in the target registry."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown fuzz target: {name}")
        self.name = name


class PluginLoadError(Eth2FuzzError):
    """Raised when a plugin fails to load."""

    pass


class EngineError(Eth2FuzzError):
    """Raised when an engine is asked for something it cannot do."""

    pass


class AvailabilityError(EngineError):
    """Raised when a fuzzing engine's toolchain is not installed."""

    def __init__(self, engine: str, hint: str) -> None:
        super().__init__(f"{engine} not available, {hint}")
        self.engine = engine
        self.hint = hint


class WorkspaceError(Eth2FuzzError):
    """Raised when a workspace directory or file cannot be created, copied or written."""

    def __init__(self, message: str, path: Path) -> None:
        super().__init__(f"{message}: {path}")
        self.path = path


class TargetIncompatibleError(EngineError):
    """Raised when an engine does not support the target's language."""

    def __init__(self, engine: str, target: str, language: str) -> None:
        super().__init__(f"{engine} incompatible for target {target} (language: {language})")
        self.engine = engine
        self.target = target
        self.language = language


class TargetRegistrationError(EngineError):
    """Raised when a target could not be added to an engine's build manifest."""

    pass


class SpawnError(EngineError):
    """Raised when the fuzzer process could not be started at all."""

    def __init__(self, engine: str, target: str, reason: str = "") -> None:
        message = f"error starting {engine} to run {target}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.engine = engine
        self.target = target


class FuzzerQuit(EngineError):
    """Raised when the fuzzer process started and exited with a failure status."""

    def __init__(self, engine: str, target: str, returncode: int) -> None:
        super().__init__(f"{engine} quit while running {target} (exit status {returncode})")
        self.engine = engine
        self.target = target
        self.returncode = returncode
