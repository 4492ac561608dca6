"""Health checks for cargo, the fuzzing engines and the workspace layout."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass

from eth2fuzz.core.config import ConfigManager
from eth2fuzz.core.exceptions import AvailabilityError
from eth2fuzz.core.layout import WorkspaceLayout
from eth2fuzz.core.registry import ComponentRegistry
from eth2fuzz.process import ProcessRunner


@dataclass
class HealthCheckResult:
    """Result of a single health check."""

    name: str
    ok: bool
    message: str = ""
    suggestion: str = ""


def _run_cmd(cmd: list[str], timeout: int = 10) -> tuple[bool, str]:
    """Run command, return (success, output_or_error)."""
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout)
    except FileNotFoundError:
        return False, "command not found"
    except subprocess.TimeoutExpired:
        return False, "timeout"
    except OSError as e:
        return False, str(e)
    if result.returncode == 0:
        return True, (result.stdout or "").strip()
    return False, (result.stderr or result.stdout or f"exit code {result.returncode}").strip()


class HealthChecker:
    """Check that cargo, each registered engine and the workspace layout are usable.

    Engines are checked independently: one missing toolchain never hides the
    state of the others.
    """

    def __init__(
        self,
        config: ConfigManager | None = None,
        registry: ComponentRegistry | None = None,
        layout: WorkspaceLayout | None = None,
        runner: ProcessRunner | None = None,
    ) -> None:
        self._config = config or ConfigManager()
        self._registry = registry or ComponentRegistry()
        self._layout = layout or WorkspaceLayout.from_config(
            self._config.config, fallback=self._config.project_root
        )
        self._runner = runner

    def check_cargo(self) -> HealthCheckResult:
        ok, out = _run_cmd(["cargo", "--version"])
        if ok:
            return HealthCheckResult(name="cargo", ok=True, message=out or "OK")
        return HealthCheckResult(
            name="cargo",
            ok=False,
            message=out,
            suggestion="Install Rust with rustup (https://rustup.rs) and add the nightly toolchain: "
            "`rustup toolchain install nightly`.",
        )

    def check_engine(self, name: str) -> HealthCheckResult:
        cls = self._registry.get_fuzzer_class(name)
        try:
            cls.is_available(self._runner)
        except AvailabilityError as e:
            return HealthCheckResult(
                name=name,
                ok=False,
                message=f"{e.engine} not available",
                suggestion=e.hint,
            )
        return HealthCheckResult(name=name, ok=True, message=f"{cls.display_name} OK")

    def check_engines(self) -> list[HealthCheckResult]:
        return [self.check_engine(n) for n in self._registry.list_available()["fuzzer_engines"]]

    def check_layout(self) -> HealthCheckResult:
        """Check the read-only inputs: engine sources, targets crate and BeaconState fixtures."""
        layout = self._layout
        missing = [
            str(p)
            for p in (layout.fuzzers_dir, layout.targets_dir, layout.state_dir)
            if not p.is_dir()
        ]
        if missing:
            return HealthCheckResult(
                name="layout",
                ok=False,
                message=f"Missing: {', '.join(missing)}",
                suggestion="Run eth2fuzz from the repository root (containing fuzzers/ and targets/), "
                "or set workspace.root / ETH2FUZZ_BEACONSTATE.",
            )
        return HealthCheckResult(name="layout", ok=True, message=f"workspace root {layout.root}")

    def check_all(
        self,
        *,
        skip_engines: bool = False,
        skip_layout: bool = False,
    ) -> list[HealthCheckResult]:
        """Run all enabled checks."""
        results: list[HealthCheckResult] = [self.check_cargo()]
        if not skip_layout:
            results.append(self.check_layout())
        if not skip_engines:
            results.extend(self.check_engines())
        return results
