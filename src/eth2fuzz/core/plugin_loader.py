"""Discovery and loading of extra engine plugins from plugins/.

A plugin is any public ``.py`` file under a plugin directory exposing
``register(registry)``; it typically calls ``registry.register_fuzzer``.
"""

from __future__ import annotations

import importlib.util
import logging
import sys
from pathlib import Path

from eth2fuzz.core.exceptions import PluginLoadError
from eth2fuzz.core.registry import ComponentRegistry
from eth2fuzz.core.schema import PluginInfo

log = logging.getLogger(__name__)

MODULE_PREFIX = "eth2fuzz_plugin"


def _module_name(plugin_dir: Path, path: Path) -> str:
    try:
        rel = path.relative_to(plugin_dir).with_suffix("")
        parts = rel.parts
    except ValueError:
        parts = (path.stem,)
    return ".".join([MODULE_PREFIX, *parts]).replace("-", "_")


def _iter_plugin_files(plugin_dir: Path) -> list[Path]:
    if not plugin_dir.is_dir():
        return []
    return sorted(p for p in plugin_dir.rglob("*.py") if not p.name.startswith("_"))


class PluginLoader:
    """Loads engine plugins into a ComponentRegistry."""

    def __init__(self, plugin_dirs: list[Path], registry: ComponentRegistry) -> None:
        self._plugin_dirs = [Path(d).resolve() for d in plugin_dirs]
        self._registry = registry
        self._loaded: list[PluginInfo] = []
        self.load_errors: list[tuple[Path, PluginLoadError]] = []

    def discover_plugins(self) -> list[PluginInfo]:
        """List plugin modules without importing them."""
        found: list[PluginInfo] = []
        for plugin_dir in self._plugin_dirs:
            for path in _iter_plugin_files(plugin_dir):
                found.append(
                    PluginInfo(
                        name=path.stem,
                        path=path,
                        module_name=_module_name(plugin_dir, path),
                        plugin_type=path.parent.name if path.parent != plugin_dir else "root",
                    )
                )
        return found

    def load_plugin(self, plugin_path: Path, module_name: str | None = None) -> PluginInfo:
        """Import one plugin file and call its register(registry)."""
        path = Path(plugin_path).resolve()
        if not path.is_file():
            raise PluginLoadError(f"Plugin path does not exist: {path}")

        name = module_name or f"{MODULE_PREFIX}.{path.stem}"
        spec = importlib.util.spec_from_file_location(name, path)
        if spec is None or spec.loader is None:
            raise PluginLoadError(f"Could not load spec for: {path}")

        mod = importlib.util.module_from_spec(spec)
        sys.modules[name] = mod
        try:
            spec.loader.exec_module(mod)
        except Exception as e:
            sys.modules.pop(name, None)
            raise PluginLoadError(f"Failed to import plugin {path}: {e}") from e

        register = getattr(mod, "register", None)
        if not callable(register):
            raise PluginLoadError(f"Plugin has no register() function: {path}")
        try:
            register(self._registry)
        except Exception as e:
            raise PluginLoadError(f"Plugin register() failed for {path}: {e}") from e

        info = PluginInfo(name=path.stem, path=path, module_name=name, plugin_type=path.parent.name)
        self._loaded.append(info)
        log.debug("Loaded plugin %s from %s", name, path)
        return info

    def load_all(self) -> list[PluginInfo]:
        """Load every discovered plugin; failures are logged and kept in ``load_errors``."""
        self._loaded = []
        self.load_errors = []
        for info in self.discover_plugins():
            try:
                self.load_plugin(info.path, info.module_name)
            except PluginLoadError as e:
                log.warning("Failed to load plugin %s: %s", info.path, e)
                self.load_errors.append((info.path, e))
        return list(self._loaded)
