"""Framework core: config, layout, registry, plugin loader, schema, health."""

from eth2fuzz.core.config import AppConfig, ConfigManager
from eth2fuzz.core.health import HealthChecker, HealthCheckResult
from eth2fuzz.core.layout import WorkspaceLayout
from eth2fuzz.core.plugin_loader import PluginLoader
from eth2fuzz.core.registry import ComponentRegistry
from eth2fuzz.core.schema import CommandSpec, FuzzTarget, PluginInfo, RunOutcome

__all__ = [
    "AppConfig",
    "CommandSpec",
    "ComponentRegistry",
    "ConfigManager",
    "FuzzTarget",
    "HealthCheckResult",
    "HealthChecker",
    "PluginInfo",
    "PluginLoader",
    "RunOutcome",
    "WorkspaceLayout",
]
