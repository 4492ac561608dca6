"""Harness generation: turn a fuzz target into a concrete source file from a template."""

from __future__ import annotations

import logging
import tomllib
from collections.abc import Callable
from pathlib import Path

from eth2fuzz.core.exceptions import TargetRegistrationError, WorkspaceError
from eth2fuzz.core.schema import FuzzTarget
from eth2fuzz.workspace import ensure_dir

log = logging.getLogger(__name__)

#: Token replaced by the target name. Templates without it render unchanged.
PLACEHOLDER = "###TARGET###"

#: Extension of generated harness sources.
HARNESS_SUFFIX = ".rs"


def render_template(template: str, target_name: str) -> str:
    """Replace the placeholder token with ``target_name``; no other byte changes."""
    return template.replace(PLACEHOLDER, target_name)


def read_template(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise WorkspaceError(f"error reading template file ({e.strerror or e})", path) from e
    except UnicodeDecodeError as e:
        raise WorkspaceError(f"template file is not valid UTF-8 ({e.reason} at byte {e.start})", path) from e


def write_source(path: Path, source: str) -> Path:
    """Write ``source`` to ``path``, truncating any previous content."""
    ensure_dir(path.parent)
    try:
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(source)
    except OSError as e:
        raise WorkspaceError(f"error writing fuzz target ({e.strerror or e})", path) from e
    return path


def write_fuzzer_target(source_dir: Path, work_dir: Path, target: FuzzTarget) -> Path:
    """Render ``target`` into ``work_dir/src/bin/<name>.rs``.

    Used by engines whose cargo project builds every ``src/bin`` file and picks
    the binary by name at run time.
    """
    template = read_template(source_dir / target.template)
    path = work_dir / "src" / "bin" / f"{target.name}{HARNESS_SUFFIX}"
    return write_source(path, render_template(template, target.name))


def manifest_declares_target(manifest: Path, name: str) -> bool:
    """True if the cargo manifest at ``manifest`` has a ``[[bin]]`` named ``name``."""
    try:
        with open(manifest, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        log.warning("Cannot read manifest %s: %s", manifest, e)
        return False
    bins = data.get("bin", [])
    return any(isinstance(b, dict) and b.get("name") == name for b in bins)


def write_libfuzzer_target(
    work_dir: Path,
    target: FuzzTarget,
    register: Callable[[FuzzTarget], bool],
) -> Path:
    """Register ``target`` in the cargo-fuzz manifest and render ``fuzz/fuzz_targets/<name>.rs``.

    ``register`` runs the engine's add-target command and returns whether it
    succeeded. A failed registration is accepted only when ``fuzz/Cargo.toml``
    already declares the target (left over from an earlier run); otherwise the
    harness would never be built.
    """
    fuzz_dir = work_dir / "fuzz"
    template = read_template(work_dir / target.template)

    if not register(target):
        if manifest_declares_target(fuzz_dir / "Cargo.toml", target.name):
            log.info("%s already registered in %s", target.name, fuzz_dir / "Cargo.toml")
        else:
            raise TargetRegistrationError(
                f"could not register {target.name} in {fuzz_dir / 'Cargo.toml'}"
            )

    path = fuzz_dir / "fuzz_targets" / f"{target.name}{HARNESS_SUFFIX}"
    return write_source(path, render_template(template, target.name))
