"""Read-only queries against the host filesystem and the container runtime."""

from __future__ import annotations

from enum import Enum

from .descriptor import ProjectDescriptor
from .errors import ContainerNotRunning, RuntimeUnavailable
from .runtime import ContainerRuntime


class ProjectState(str, Enum):
    """Derived lifecycle state of a project.  Computed fresh on every call."""

    ABSENT = "absent"
    CREATED = "created"
    RUNNING = "running"


class EnvironmentProbe:
    """Answers 'what exists right now' for the lifecycle and plugin layers."""

    def __init__(self, runtime: ContainerRuntime) -> None:
        self.runtime = runtime

    def directory_exists(self, descriptor: ProjectDescriptor) -> bool:
        return descriptor.directory.is_dir()

    async def container_is_running(self, container_name: str) -> bool:
        """Return ``True`` only if a running container has exactly this name.

        ``demo`` must not match a running ``demo-2``.
        """
        return container_name in await self.runtime.running_names()

    async def file_exists_in_container(self, container_name: str, relative_path: str) -> bool:
        """Return whether *relative_path* is a regular file in the container.

        ``test -f`` exits 1 silently when the file is absent.  Anything else
        means the check itself could not run.

        Raises:
            ContainerNotRunning: If the container is stopped or unknown.
            RuntimeUnavailable: If ``docker exec`` failed for another reason.
        """
        returncode, _, stderr = await self.runtime.exec(
            container_name, "test", "-f", relative_path
        )
        if returncode == 0:
            return True
        if returncode == 1 and not stderr:
            return False

        message = stderr or f"docker exec exited with {returncode}"
        lowered = stderr.lower()
        if "is not running" in lowered or "no such container" in lowered:
            raise ContainerNotRunning(
                f"Container '{container_name}' is not running.",
                command=f"exec {container_name} test -f {relative_path}",
                stderr=stderr,
            )
        raise RuntimeUnavailable(
            f"Could not check '{relative_path}' in container '{container_name}': {message}",
            command=f"exec {container_name} test -f {relative_path}",
            stderr=stderr,
        )

    async def state(self, descriptor: ProjectDescriptor) -> ProjectState:
        if await self.container_is_running(descriptor.container_name):
            return ProjectState.RUNNING
        if self.directory_exists(descriptor):
            return ProjectState.CREATED
        return ProjectState.ABSENT
