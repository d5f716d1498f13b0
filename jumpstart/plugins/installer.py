"""Installers: the typed handlers the plugin registry dispatches to."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from rich.console import Console
from rich.markup import escape

from ..descriptor import ProjectDescriptor
from ..errors import ContainerNotRunning, PatchFailure, TargetFileMissing
from ..probe import EnvironmentProbe
from ..runtime import ContainerRuntime
from .manifest import PatchAction, PatchStep, PluginManifest
from .patcher import ConfigPatcher

console = Console()


@runtime_checkable
class DependencyInstaller(Protocol):
    """Anything that can install a dependency into a project."""

    name: str

    async def install(self, descriptor: ProjectDescriptor) -> None: ...


class ManifestInstaller:
    """Installs a dependency described by a :class:`PluginManifest`.

    Steps run in order and stop at the first failure.  Edits already
    written to other files stay in place.
    """

    def __init__(
        self,
        manifest: PluginManifest,
        runtime: ContainerRuntime,
        probe: EnvironmentProbe,
        patcher: ConfigPatcher,
    ) -> None:
        self.manifest = manifest
        self.name = manifest.name
        self.runtime = runtime
        self.probe = probe
        self.patcher = patcher

    async def install(self, descriptor: ProjectDescriptor) -> None:
        container = descriptor.container_name

        if self.manifest.requires_running and not await self.probe.container_is_running(container):
            raise ContainerNotRunning(
                f"Container '{container}' is not running. "
                f"Run the project before installing '{self.name}'."
            )

        for alternatives in self.manifest.requires_files:
            await self._first_existing(container, alternatives)

        if self.manifest.packages:
            console.print(
                f"[cyan]Installing[/cyan] {escape(' '.join(self.manifest.packages))} "
                f"in [bold]{container}[/bold]..."
            )
            returncode, _, stderr = await self.runtime.exec(
                container, "npm", "install", *self.manifest.packages
            )
            if returncode != 0:
                raise PatchFailure(
                    f"npm install failed (exit {returncode}) for '{self.name}'.\n{stderr}",
                    command=f"npm install {' '.join(self.manifest.packages)}",
                    stderr=stderr,
                )

        for step in self.manifest.patches:
            await self._apply_step(container, step)

        console.print(f"[green]{self.name} installed in {descriptor.name}.[/green]")

    async def _apply_step(self, container: str, step: PatchStep) -> None:
        path = await self._first_existing(container, step.file)

        if step.skip_if_present and await self._already_applied(container, path, step):
            console.print(
                f"  [dim]{escape(path)} already contains {escape(repr(step.text))}, skipping[/dim]"
            )
            return

        if step.action is PatchAction.INSERT_BEFORE_FIRST_LINE:
            await self.patcher.insert_before_first_line(container, path, step.text)
        else:
            await self.patcher.insert_into_bracket_group(container, path, step.anchor, step.text)
        console.print(f"  [green]+[/green] {escape(path)}")

    async def _already_applied(self, container: str, path: str, step: PatchStep) -> bool:
        if step.action is PatchAction.INSERT_INTO_BRACKET_GROUP:
            return await self.patcher.group_contains(container, path, step.anchor, step.text)
        return await self.patcher.contains(container, path, step.text)

    async def _first_existing(self, container: str, alternatives: list[str]) -> str:
        for path in alternatives:
            if await self.probe.file_exists_in_container(container, path):
                return path
        raise TargetFileMissing(
            f"None of {', '.join(repr(p) for p in alternatives)} exists "
            f"in container '{container}'."
        )
