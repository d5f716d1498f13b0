"""Dependency plugin registry.

Maps a dependency name to a :class:`DependencyInstaller`.  Installers come
from two places:

* static registration through :meth:`PluginRegistry.register`, and
* plugin files ``<plugins_dir>/<name>.yaml`` whose top-level key ``<name>``
  holds a :class:`PluginManifest` definition.

Plugin files are parsed, never executed.
"""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import ValidationError as PydanticValidationError

from ..config import Config
from ..descriptor import ProjectDescriptor, validate_name
from ..errors import (
    EntryPointMissing,
    PluginError,
    PluginNotFound,
    PluginsDirMissing,
    ProjectNotFound,
    ValidationError,
)
from ..probe import EnvironmentProbe
from ..runtime import ContainerRuntime
from .installer import DependencyInstaller, ManifestInstaller
from .manifest import PluginManifest
from .patcher import ConfigPatcher

PLUGIN_SUFFIXES = (".yaml", ".yml")


class PluginRegistry:
    """Discovers, validates, and dispatches dependency plugins."""

    def __init__(
        self,
        config: Config,
        runtime: ContainerRuntime | None = None,
        probe: EnvironmentProbe | None = None,
        patcher: ConfigPatcher | None = None,
    ) -> None:
        self.plugins_dir = Path(config.plugins_dir)
        self.runtime = runtime or ContainerRuntime(config)
        self.probe = probe or EnvironmentProbe(self.runtime)
        self.patcher = patcher or ConfigPatcher(self.runtime, self.probe)
        self._static: dict[str, DependencyInstaller] = {}

    def register(self, name: str, installer: DependencyInstaller) -> None:
        """Register a Python installer under *name*.  Overrides plugin files."""
        self._static[validate_name(name)] = installer

    def available(self) -> list[str]:
        """Return every installable dependency name, sorted."""
        names = set(self._static)
        if self.plugins_dir.is_dir():
            names.update(
                p.stem
                for p in self.plugins_dir.iterdir()
                if p.is_file() and p.suffix in PLUGIN_SUFFIXES
            )
        return sorted(names)

    def plugin_path(self, name: str) -> Path | None:
        for suffix in PLUGIN_SUFFIXES:
            candidate = self.plugins_dir / f"{name}{suffix}"
            if candidate.is_file():
                return candidate
        return None

    def load(self, name: str) -> DependencyInstaller:
        """Return the installer for *name*.

        Raises:
            PluginsDirMissing: If the plugins directory does not exist.
            PluginNotFound: If there is no plugin file for *name*.
            EntryPointMissing: If the file defines no entry named *name*.
            PluginError: If the file is unreadable or the definition is malformed.
        """
        if name in self._static:
            return self._static[name]

        if not self.plugins_dir.is_dir():
            raise PluginsDirMissing(f"Plugins directory '{self.plugins_dir}' does not exist.")

        path = self.plugin_path(name)
        if path is None:
            raise PluginNotFound(
                f"Dependency plugin '{name}' not found in '{self.plugins_dir}'."
            )

        try:
            source = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise PluginError(f"Plugin file '{path}' could not be read: {exc}") from None

        try:
            definitions = yaml.safe_load(source)
        except yaml.YAMLError as exc:
            raise PluginError(f"Plugin file '{path}' is not valid YAML: {exc}") from None

        if not isinstance(definitions, dict) or name not in definitions:
            raise EntryPointMissing(
                f"Plugin file '{path}' does not define an entry named '{name}'."
            )

        definition = definitions[name] or {}
        if not isinstance(definition, dict):
            raise PluginError(f"Plugin '{name}' in '{path}' must be a mapping.")

        try:
            manifest = PluginManifest.model_validate({**definition, "name": name})
        except PydanticValidationError as exc:
            raise PluginError(f"Plugin '{name}' in '{path}' is invalid:\n{exc}") from None

        return ManifestInstaller(manifest, self.runtime, self.probe, self.patcher)

    async def install(self, plugin_name: str, descriptor: ProjectDescriptor) -> None:
        """Validate the plugin convention and run the installer.

        Checks, in order: non-empty name, project directory, plugins
        directory, plugin file, entry point.  The installer is responsible
        for its own further preconditions.
        """
        if not plugin_name or not plugin_name.strip():
            raise ValidationError("Dependency name must not be empty.")
        validate_name(plugin_name)

        if not self.probe.directory_exists(descriptor):
            raise ProjectNotFound(f"Project directory '{descriptor.directory}' does not exist.")

        installer = self.load(plugin_name)
        await installer.install(descriptor)
