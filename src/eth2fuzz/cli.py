"""CLI entry point for eth2fuzz."""

from __future__ import annotations

import contextlib
from dataclasses import dataclass, field
from pathlib import Path
from typing import NoReturn

import click

from eth2fuzz import __version__
from eth2fuzz.batch import run_continuously, run_target
from eth2fuzz.core.config import ConfigManager
from eth2fuzz.core.exceptions import Eth2FuzzError, RegistryError
from eth2fuzz.core.health import HealthChecker
from eth2fuzz.core.layout import WorkspaceLayout
from eth2fuzz.core.plugin_loader import PluginLoader
from eth2fuzz.core.registry import ComponentRegistry
from eth2fuzz.core.run_log import run_log_context, setup_console_logging
from eth2fuzz.core.schema import FuzzTarget, RunOutcome
from eth2fuzz.engines import register_builtin_engines
from eth2fuzz.protocols import FuzzerEngine
from eth2fuzz.targets import RUST, TargetRegistry

#: Per-target fuzzing time for ``continuously`` when none is given.
DEFAULT_CONTINUOUS_TIMEOUT = 10


@dataclass
class _App:
    config: ConfigManager
    registry: ComponentRegistry
    layout: WorkspaceLayout
    targets: TargetRegistry = field(default_factory=TargetRegistry)
    verbose: bool = False


def _load_env_and_plugins(root: Path | None = None) -> _App:
    """Load config, register built-in engines and any plugins under <root>/plugins."""
    config = ConfigManager(project_root=root)
    config.load()
    layout = WorkspaceLayout.from_config(config.config, root, fallback=config.project_root)
    registry = ComponentRegistry()
    register_builtin_engines(registry)
    if layout.plugins_dir.is_dir():
        PluginLoader([layout.plugins_dir], registry).load_all()
    return _App(config=config, registry=registry, layout=layout)


def _fail(message: str) -> NoReturn:
    click.echo(f"[eth2fuzz] {message}", err=True)
    raise SystemExit(1)


def _get_target(app: _App, name: str) -> FuzzTarget:
    try:
        return app.targets.get(name)
    except RegistryError as e:
        _fail(f"{e}. Run `eth2fuzz list` to see the available targets.")


def _make_engine(app: _App, engine_name: str | None, timeout: int | None, thread: int | None) -> FuzzerEngine:
    cfg = app.config.config
    name = engine_name or cfg.fuzzer_engine
    try:
        return app.registry.get_fuzzer(
            name,
            timeout=timeout,
            thread=thread,
            layout=app.layout,
            fuzzer_config=cfg.fuzzer,
        )
    except Eth2FuzzError as e:
        _fail(str(e))


def _log_file(log_file: Path | None, verbose: bool) -> contextlib.AbstractContextManager:
    if log_file is None:
        return contextlib.nullcontext()
    return run_log_context(log_file.resolve(), verbose=verbose)


def _echo_outcome(outcome: RunOutcome) -> None:
    if outcome.success:
        click.echo(f"[eth2fuzz] {outcome.engine}: {outcome.target} finished ({outcome.duration_seconds:.0f}s)")
    else:
        click.echo(f"[eth2fuzz] {outcome.engine}: {outcome.target} {outcome.status}: {outcome.message}", err=True)


ENGINE_OPTION = click.option(
    "--fuzzer", "-f", "engine_name", default=None, help="Fuzzing engine (hfuzz, afl, libfuzzer). Default from config."
)
TIMEOUT_OPTION = click.option(
    "--timeout", "-t", type=click.IntRange(min=1), default=None, help="Seconds to fuzz before the engine stops."
)
THREAD_OPTION = click.option(
    "--thread", "-n", type=click.IntRange(min=1), default=None, help="Number of fuzzing threads/jobs."
)
LOG_FILE_OPTION = click.option(
    "--log-file", type=click.Path(path_type=Path, dir_okay=False), default=None, help="Also write the run log here."
)


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Debug logging.")
@click.option(
    "--root",
    type=click.Path(path_type=Path, file_okay=False, exists=True),
    default=None,
    help="Workspace root containing fuzzers/ and targets/ (default: search upward from cwd).",
)
@click.pass_context
def main(ctx: click.Context, verbose: bool, root: Path | None) -> None:
    """eth2fuzz: run Rust fuzzing engines against Eth2 state-transition targets."""
    setup_console_logging(verbose)
    app = _load_env_and_plugins(root.resolve() if root else None)
    app.verbose = verbose
    ctx.obj = app


@main.command("list")
@click.pass_obj
def list_targets(app: _App) -> None:
    """List fuzz targets."""
    click.echo("Targets:")
    for t in app.targets:
        note = "" if t.language == RUST else "  (not supported by the Rust engines)"
        click.echo(f"  {t.name:<28} {t.language:<5} corpus={t.corpora}{note}")


@main.command()
@click.pass_obj
def engines(app: _App) -> None:
    """List registered fuzzing engines and whether they are installed."""
    click.echo("Engines:")
    for name in app.registry.list_available()["fuzzer_engines"]:
        cls = app.registry.get_fuzzer_class(name)
        try:
            cls.is_available()
            status = "available"
        except Eth2FuzzError as e:
            status = f"missing ({e})"
        click.echo(f"  {name:<10} {cls.display_name:<10} {status}")


@main.command()
@click.option("--skip-engines", is_flag=True, help="Skip fuzzing engine checks.")
@click.option("--skip-layout", is_flag=True, help="Skip workspace layout check.")
@click.pass_obj
def check(app: _App, skip_engines: bool, skip_layout: bool) -> None:
    """Verify cargo, the engines and the workspace layout; show suggestions for failures."""
    checker = HealthChecker(config=app.config, registry=app.registry, layout=app.layout)
    results = checker.check_all(skip_engines=skip_engines, skip_layout=skip_layout)
    for r in results:
        status = "OK" if r.ok else "FAIL"
        click.echo(f"  {r.name}: {status}")
        if app.verbose or not r.ok:
            click.echo(f"    {r.message}")
        if not r.ok and r.suggestion:
            click.echo(f"    → {r.suggestion}")
    if all(r.ok for r in results):
        click.echo("All checks passed.")
    else:
        click.echo("Some checks failed. Fix the issues above or follow the suggested steps.", err=True)
        raise SystemExit(1)


@main.command()
@click.argument("name")
@ENGINE_OPTION
@TIMEOUT_OPTION
@THREAD_OPTION
@LOG_FILE_OPTION
@click.pass_obj
def target(
    app: _App,
    name: str,
    engine_name: str | None,
    timeout: int | None,
    thread: int | None,
    log_file: Path | None,
) -> None:
    """Fuzz one target until the engine stops."""
    fuzz_target = _get_target(app, name)
    engine = _make_engine(app, engine_name, timeout, thread)
    with _log_file(log_file, app.verbose):
        outcome = run_target(engine, fuzz_target)
    _echo_outcome(outcome)
    if not outcome.success:
        raise SystemExit(1)


@main.command()
@click.argument("name")
@ENGINE_OPTION
@click.pass_obj
def build(app: _App, name: str, engine_name: str | None) -> None:
    """Compile a target's harness without fuzzing (engines with a separate build step)."""
    fuzz_target = _get_target(app, name)
    engine = _make_engine(app, engine_name, None, None)
    if not engine.supports_build:
        _fail(f"{engine.display_name} has no separate build step; use `eth2fuzz target`.")
    try:
        engine.build(fuzz_target)
    except Eth2FuzzError as e:
        _fail(f"{engine.display_name}: {e}")
    click.echo(f"[eth2fuzz] {engine.display_name}: {fuzz_target.name} built")


@main.command()
@ENGINE_OPTION
@TIMEOUT_OPTION
@THREAD_OPTION
@click.option("--infinite", "-i", is_flag=True, help="Loop over the targets until interrupted.")
@click.option("--only", "only", multiple=True, help="Restrict to these targets (repeatable).")
@LOG_FILE_OPTION
@click.pass_obj
def continuously(
    app: _App,
    engine_name: str | None,
    timeout: int | None,
    thread: int | None,
    infinite: bool,
    only: tuple[str, ...],
    log_file: Path | None,
) -> None:
    """Fuzz every compatible target in turn for TIMEOUT seconds each."""
    engine = _make_engine(app, engine_name, timeout or DEFAULT_CONTINUOUS_TIMEOUT, thread)
    selected = [_get_target(app, n) for n in only] if only else app.targets.for_language(RUST)
    if not selected:
        _fail("No targets to fuzz.")

    outcomes: list[RunOutcome] = []
    with _log_file(log_file, app.verbose):
        try:
            for outcome in run_continuously(engine, selected, infinite=infinite):
                _echo_outcome(outcome)
                outcomes.append(outcome)
        except KeyboardInterrupt:
            click.echo("[eth2fuzz] interrupted", err=True)

    failed = [o for o in outcomes if not o.success]
    click.echo(f"[eth2fuzz] {len(outcomes)} run(s), {len(outcomes) - len(failed)} OK, {len(failed)} failed")
    if failed:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
