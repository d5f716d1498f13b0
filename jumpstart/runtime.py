"""Thin async wrapper around the container runtime CLI.

Every call to ``docker`` or ``docker compose`` goes through
:class:`ContainerRuntime`, which turns a missing binary into
:class:`RuntimeUnavailable` and keeps the command line for error reports.
"""

from __future__ import annotations

from pathlib import Path

from .config import Config
from .errors import RuntimeCommandFailed, RuntimeUnavailable
from .utils import run_attached, run_command


class ContainerRuntime:
    """Executes runtime commands for one configuration."""

    def __init__(self, config: Config) -> None:
        self.config = config
        self.docker = config.runtime.docker
        self.compose_cmd = list(config.runtime.compose)
        self.timeout = config.runtime.command_timeout

    # -- Captured execution ------------------------------------------------

    async def run(
        self,
        *args: str,
        input: str | None = None,
        timeout: float | None = None,
        strict: bool = False,
    ) -> tuple[int, str, str]:
        """Run ``docker <args>`` and return ``(returncode, stdout, stderr)``."""
        return await self._run([self.docker, *args], input=input, timeout=timeout, strict=strict)

    async def exec(
        self,
        container_name: str,
        *args: str,
        input: str | None = None,
        strict: bool = False,
    ) -> tuple[int, str, str]:
        """Run a command inside *container_name*'s working directory."""
        flags = ["-i"] if input is not None else []
        return await self.run(
            "exec",
            *flags,
            "-w",
            self.config.container_workdir,
            container_name,
            *args,
            input=input,
            strict=strict,
        )

    async def compose(self, project_dir: Path, *args: str) -> tuple[int, str, str]:
        """Run a compose subcommand against the project's compose file."""
        return await self._run(self._compose_prefix(project_dir) + list(args))

    async def running_names(self) -> list[str]:
        """Return the names of all running containers.

        Raises:
            RuntimeUnavailable: If the daemon does not answer.
        """
        returncode, stdout, stderr = await self.run("ps", "--format", "{{.Names}}")
        if returncode != 0:
            raise RuntimeUnavailable(
                f"Container runtime is not reachable: {stderr or 'docker ps failed'}",
                command=f"{self.docker} ps",
                stderr=stderr,
            )
        return [line.strip() for line in stdout.splitlines() if line.strip()]

    # -- Attached execution ------------------------------------------------

    async def attach(self, *args: str) -> None:
        """Run ``docker <args>`` attached to the terminal."""
        await self._attach([self.docker, *args])

    async def compose_attach(self, project_dir: Path, *args: str) -> None:
        """Run a compose subcommand attached to the terminal."""
        await self._attach(self._compose_prefix(project_dir) + list(args))

    # -- Internal helpers --------------------------------------------------

    def _compose_prefix(self, project_dir: Path) -> list[str]:
        return [
            *self.compose_cmd,
            "--project-directory",
            str(project_dir),
            "-f",
            str(project_dir / "docker-compose.yml"),
        ]

    async def _run(
        self,
        cmd: list[str],
        input: str | None = None,
        timeout: float | None = None,
        strict: bool = False,
    ) -> tuple[int, str, str]:
        try:
            return await run_command(
                cmd,
                input=input,
                timeout=timeout if timeout is not None else self.timeout,
                strict=strict,
            )
        except FileNotFoundError:
            raise RuntimeUnavailable(
                f"Container runtime executable not found: {cmd[0]}",
                command=" ".join(cmd),
            ) from None

    async def _attach(self, cmd: list[str]) -> None:
        cmd_str = " ".join(cmd)
        try:
            returncode = await run_attached(cmd)
        except FileNotFoundError:
            raise RuntimeUnavailable(
                f"Container runtime executable not found: {cmd[0]}",
                command=cmd_str,
            ) from None
        if returncode != 0:
            raise RuntimeCommandFailed(
                f"Command failed (exit {returncode}): {cmd_str}",
                command=cmd_str,
            )
