"""Project lifecycle management.

Drives a project through ``ABSENT -> CREATED -> RUNNING`` and back to
``ABSENT`` by calling the external scaffolding generator and the container
runtime.  Every operation checks its precondition with the
:class:`EnvironmentProbe` before touching anything.
"""

from __future__ import annotations

import asyncio
import os
import shutil
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from .config import Config
from .descriptor import ProjectDescriptor
from .errors import (
    ContainerNotRunning,
    DirectoryMissing,
    FilesystemError,
    ProjectExists,
    ProjectNotFound,
    RuntimeCommandFailed,
    ScaffoldFailure,
)
from .probe import EnvironmentProbe
from .runtime import ContainerRuntime
from .scaffolder import DockerGenerator, TemplateRenderer
from .utils import print_success, print_warning

console = Console()


class LifecycleManager:
    """Creates, starts, attaches to, and tears down projects.

    The project directory is always taken from the descriptor; the process
    working directory is never changed.
    """

    def __init__(
        self,
        config: Config,
        runtime: ContainerRuntime | None = None,
        probe: EnvironmentProbe | None = None,
        docker_gen: DockerGenerator | None = None,
    ) -> None:
        self.config = config
        self.runtime = runtime or ContainerRuntime(config)
        self.probe = probe or EnvironmentProbe(self.runtime)
        self.docker_gen = docker_gen or DockerGenerator(TemplateRenderer())

    # -- create ------------------------------------------------------------

    async def create(self, descriptor: ProjectDescriptor) -> Path:
        """Scaffold a new project and write its container artifacts.

        Returns:
            The project directory.

        Raises:
            ProjectExists: If the directory is already there.
            ScaffoldFailure: If the generator exits non-zero.
            DirectoryMissing: If the generator succeeded but produced no
                project directory.
            FilesystemError: If the workspace or an artifact cannot be written.
        """
        if self.probe.directory_exists(descriptor):
            raise ProjectExists(
                f"Project directory '{descriptor.directory}' already exists. "
                f"Run 'cleanup {descriptor.name}' first or pick another name."
            )

        workspace = descriptor.directory.parent.resolve()
        try:
            await asyncio.to_thread(workspace.mkdir, parents=True, exist_ok=True)
        except OSError as exc:
            raise FilesystemError(f"Could not create workspace '{workspace}': {exc}") from None

        console.print(
            f"[cyan]Scaffolding[/cyan] [bold]{descriptor.name}[/bold] "
            f"with create-vite ([green]{escape(self.config.scaffold.template)}[/green])..."
        )

        cmd = self._scaffold_args(descriptor, workspace)
        returncode, _, stderr = await self.runtime.run(
            *cmd, timeout=self.config.scaffold.timeout
        )
        if returncode != 0:
            raise ScaffoldFailure(
                f"Project generator failed (exit {returncode}) for '{descriptor.name}'.\n{stderr}",
                command=" ".join([self.runtime.docker, *cmd]),
                stderr=stderr,
            )

        if not self.probe.directory_exists(descriptor):
            raise DirectoryMissing(
                f"Project generator finished but '{descriptor.directory}' was not created."
            )

        context = DockerGenerator.build_context(descriptor, self.config)
        try:
            written = await self.docker_gen.generate_all(descriptor.directory, context)
        except OSError as exc:
            raise FilesystemError(
                f"Could not write container files into '{descriptor.directory}': {exc}"
            ) from None

        console.print(
            Panel(
                f"[green]Project created[/green]\n"
                f"  Path:      {escape(str(descriptor.directory))}\n"
                f"  Container: {descriptor.container_name}\n"
                f"  Port:      {descriptor.port}\n"
                f"  Files:     {', '.join(written)}",
                title="Project Ready",
                border_style="green",
            )
        )
        return descriptor.directory

    def _scaffold_args(self, descriptor: ProjectDescriptor, workspace: Path) -> list[str]:
        """Arguments for a throwaway node container running ``npm create vite``."""
        workdir = self.config.container_workdir
        args = ["run", "--rm"]
        if self.config.scaffold.run_as_user and hasattr(os, "getuid"):
            args += [
                "--user", f"{os.getuid()}:{os.getgid()}",
                "-e", "HOME=/tmp",
                "-e", "npm_config_cache=/tmp/.npm",
            ]
        args += [
            "-v", f"{workspace}:{workdir}",
            "-w", workdir,
            self.config.scaffold.node_image,
            "npm", "create", "--yes", "vite@latest", descriptor.name,
            "--", "--template", self.config.scaffold.template,
        ]
        return args

    # -- start -------------------------------------------------------------

    async def start(self, descriptor: ProjectDescriptor) -> None:
        """Bring the project up in the foreground.

        Blocks until the compose process exits.  If the container is
        already running compose simply attaches to it.

        Raises:
            ProjectNotFound: If the project directory does not exist.  No
                runtime call is made in that case.
        """
        if not self.probe.directory_exists(descriptor):
            raise ProjectNotFound(f"Project directory '{descriptor.directory}' does not exist.")

        console.print(
            f"[cyan]Starting[/cyan] [bold]{descriptor.name}[/bold] on "
            f"http://localhost:{descriptor.port} (Ctrl-C to stop)..."
        )
        await self.runtime.compose_attach(descriptor.directory, "up", "--build")

    # -- terminal ----------------------------------------------------------

    async def open_terminal(self, container_name: str) -> None:
        """Open an interactive shell inside a running container.

        Raises:
            ContainerNotRunning: If no running container has exactly this name.
        """
        if not await self.probe.container_is_running(container_name):
            raise ContainerNotRunning(
                f"Container '{container_name}' is not running. Start it with 'run {container_name}'."
            )
        await self.runtime.attach("exec", "-it", container_name, "sh")

    # -- teardown ----------------------------------------------------------

    async def teardown(self, descriptor: ProjectDescriptor) -> None:
        """Stop and remove the container, its network and volumes, then
        delete the project directory.  Irreversible.

        Raises:
            ProjectNotFound: If the project directory does not exist.
            RuntimeCommandFailed: If ``compose down`` fails; the directory
                is left in place.
            FilesystemError: If the directory cannot be removed.
        """
        if not self.probe.directory_exists(descriptor):
            raise ProjectNotFound(f"Project directory '{descriptor.directory}' does not exist.")

        console.print(f"[yellow]Cleaning up project[/yellow] [bold]{descriptor.name}[/bold]...")

        if (descriptor.directory / "docker-compose.yml").is_file():
            returncode, _, stderr = await self.runtime.compose(
                descriptor.directory, "down", "--volumes", "--remove-orphans"
            )
            if returncode != 0:
                raise RuntimeCommandFailed(
                    f"Could not stop '{descriptor.name}' (exit {returncode}).\n{stderr}",
                    command="compose down",
                    stderr=stderr,
                )
        else:
            # A create that failed halfway leaves no compose file behind.
            print_warning("No docker-compose.yml found, skipping container removal.")

        try:
            await asyncio.to_thread(shutil.rmtree, descriptor.directory)
        except OSError as exc:
            raise FilesystemError(
                f"Could not remove '{descriptor.directory}': {exc}. "
                "Files created inside the container may be owned by root."
            ) from None
        print_success(f"Removed project: {descriptor.name}")
