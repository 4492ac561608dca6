"""Tests for PluginLoader."""

from __future__ import annotations

from pathlib import Path

import pytest

from eth2fuzz.core.exceptions import PluginLoadError
from eth2fuzz.core.plugin_loader import MODULE_PREFIX, PluginLoader
from eth2fuzz.core.registry import ComponentRegistry

PLUGIN = '''
class CustomEngine:
    name = "custom"
    display_name = "Custom"
    supports_build = False


def register(registry):
    registry.register_fuzzer("custom", CustomEngine)
'''


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


def test_discover_skips_private_files(tmp_path: Path) -> None:
    _write(tmp_path / "fuzzers" / "custom.py", PLUGIN)
    _write(tmp_path / "fuzzers" / "_helper.py", "")
    _write(tmp_path / "top.py", PLUGIN)
    found = PluginLoader([tmp_path], ComponentRegistry()).discover_plugins()
    assert [p.name for p in found] == ["custom", "top"]
    assert found[0].module_name == f"{MODULE_PREFIX}.fuzzers.custom"
    assert found[0].plugin_type == "fuzzers"
    assert found[1].plugin_type == "root"


def test_missing_plugin_dir(tmp_path: Path) -> None:
    assert PluginLoader([tmp_path / "nope"], ComponentRegistry()).discover_plugins() == []


def test_load_all_registers_engine(tmp_path: Path) -> None:
    _write(tmp_path / "custom-engine.py", PLUGIN)
    registry = ComponentRegistry()
    loaded = PluginLoader([tmp_path], registry).load_all()
    assert [p.module_name for p in loaded] == [f"{MODULE_PREFIX}.custom_engine"]
    assert "custom" in registry.list_available()["fuzzer_engines"]


def test_load_all_collects_errors(tmp_path: Path) -> None:
    _write(tmp_path / "a_good.py", PLUGIN)
    _write(tmp_path / "b_broken.py", "raise RuntimeError('boom')\n")
    _write(tmp_path / "c_noregister.py", "X = 1\n")
    loader = PluginLoader([tmp_path], ComponentRegistry())
    loaded = loader.load_all()
    assert [p.name for p in loaded] == ["a_good"]
    assert [p.name for p, _ in loader.load_errors] == ["b_broken.py", "c_noregister.py"]


def test_load_plugin_missing_file(tmp_path: Path) -> None:
    with pytest.raises(PluginLoadError, match="does not exist"):
        PluginLoader([], ComponentRegistry()).load_plugin(tmp_path / "missing.py")


def test_load_plugin_register_failure(tmp_path: Path) -> None:
    path = _write(tmp_path / "bad_register.py", "def register(registry):\n    raise ValueError('nope')\n")
    with pytest.raises(PluginLoadError, match="register\\(\\) failed"):
        PluginLoader([], ComponentRegistry()).load_plugin(path)


def test_load_plugin_without_register(tmp_path: Path) -> None:
    path = _write(tmp_path / "plain.py", "VALUE = 1\n")
    with pytest.raises(PluginLoadError, match="no register"):
        PluginLoader([], ComponentRegistry()).load_plugin(path)
