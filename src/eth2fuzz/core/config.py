"""Configuration loading from .env and YAML."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import dotenv_values
from pydantic import BaseModel, Field, ValidationError

from eth2fuzz.core.exceptions import ConfigError

log = logging.getLogger(__name__)

#: Engine variables read from .env and forwarded through ``fuzzer.env``.
PASSTHROUGH_ENV = ("HFUZZ_RUN_ARGS",)


def _find_project_root(start: Path | None = None) -> Path:
    """Find the workspace root by looking upward for a fuzzers/ directory."""
    current = Path(start or Path.cwd()).resolve()
    for _ in range(10):
        if (current / "fuzzers").is_dir():
            return current
        parent = current.parent
        if parent == current:
            break
        current = parent
    return Path.cwd().resolve()


def _process_overrides() -> dict[str, str]:
    """ETH2FUZZ_* variables from the process environment; they win over .env."""
    return {k: v for k, v in os.environ.items() if k.startswith("ETH2FUZZ_")}


class FuzzerConfigModel(BaseModel):
    """Fuzzer section of config."""

    timeout: int | None = None
    thread: int | None = None
    toolchain: str = "+nightly"
    hfuzz_testcase_timeout: int = 60
    env: dict[str, str] = Field(default_factory=dict)


class WorkspaceConfigModel(BaseModel):
    """Workspace section of config. Relative paths are taken from the workspace root."""

    root: str | None = None
    corpora_dir: str | None = None
    state_dir: str | None = None


class AppConfig(BaseModel):
    """Full application configuration."""

    fuzzer_engine: str = "hfuzz"
    fuzzer: FuzzerConfigModel = Field(default_factory=FuzzerConfigModel)
    workspace: WorkspaceConfigModel = Field(default_factory=WorkspaceConfigModel)


class ConfigManager:
    """Load and merge configuration from .env and YAML."""

    def __init__(
        self,
        project_root: Path | None = None,
        env_path: Path | None = None,
        config_path: Path | None = None,
    ) -> None:
        self._root = Path(project_root or _find_project_root()).resolve()
        self._env_path = Path(env_path) if env_path else self._root / ".env"
        self._config_path = Path(config_path) if config_path else self._root / "config" / "default.yaml"
        self._config: AppConfig | None = None
        self._env: dict[str, str] = {}

    def load_env(self) -> dict[str, str]:
        """Load .env file into a dict (without modifying os.environ)."""
        if not self._env_path.exists():
            self._env = {}
            return self._env
        try:
            self._env = {k: v for k, v in dotenv_values(self._env_path).items() if v is not None}
        except OSError as e:
            log.warning("Failed to read .env file %s: %s", self._env_path, e)
            self._env = {}
        return self._env

    def load_yaml(self) -> dict[str, Any]:
        """Load YAML config file if it exists."""
        if not self._config_path.exists():
            return {}
        try:
            with open(self._config_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except OSError as e:
            log.warning("Failed to read config file %s: %s", self._config_path, e)
            return {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Malformed YAML in {self._config_path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {self._config_path} must contain a mapping")
        return data

    def load(self) -> AppConfig:
        """Load .env and YAML, merge with defaults, return AppConfig."""
        env = {**self.load_env(), **_process_overrides()}
        yaml_data = self.load_yaml()

        config_dict: dict[str, Any] = {
            "fuzzer_engine": yaml_data.get("fuzzer_engine", "hfuzz"),
            "fuzzer": dict(yaml_data.get("fuzzer") or {}),
            "workspace": dict(yaml_data.get("workspace") or {}),
        }
        # Environment variables override YAML values
        if env.get("ETH2FUZZ_ENGINE"):
            config_dict["fuzzer_engine"] = env["ETH2FUZZ_ENGINE"]
        env_mapping = {
            "ETH2FUZZ_WORKSPACE": "root",
            "ETH2FUZZ_CORPORA": "corpora_dir",
            "ETH2FUZZ_BEACONSTATE": "state_dir",
        }
        for env_key, config_key in env_mapping.items():
            if env.get(env_key):
                config_dict["workspace"][config_key] = env[env_key]
        # Engine variables from .env reach the fuzzer like fuzzer.env entries
        for key in PASSTHROUGH_ENV:
            if self._env.get(key):
                fuzzer_env = dict(config_dict["fuzzer"].get("env") or {})
                fuzzer_env[key] = self._env[key]
                config_dict["fuzzer"]["env"] = fuzzer_env

        try:
            self._config = AppConfig(**config_dict)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e
        return self._config

    @property
    def config(self) -> AppConfig:
        """Return loaded config; load if not yet loaded."""
        if self._config is None:
            self.load()
        if self._config is None:
            raise RuntimeError("ConfigManager.load() failed to produce a config")
        return self._config

    @property
    def env(self) -> dict[str, str]:
        """Return loaded env dict."""
        if not self._env and self._env_path.exists():
            self.load_env()
        return self._env

    @property
    def project_root(self) -> Path:
        return self._root
