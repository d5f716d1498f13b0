"""Shared pytest fixtures for the Jumpstart test suite.

Provides reusable fixtures for:
- Temporary workspaces and plugin directories
- A ``Config`` pointing at them
- Mock subprocess helpers
- ``FakeRuntime``: a ``ContainerRuntime`` whose subprocess layer is replaced
  by an in-memory container, so argument building stays real
"""

from __future__ import annotations

import textwrap
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from jumpstart.config import Config, RuntimeConfig
from jumpstart.descriptor import ProjectDescriptor, resolve
from jumpstart.runtime import ContainerRuntime

VITE_CONFIG = textwrap.dedent(
    """\
    import { defineConfig } from 'vite'
    import react from '@vitejs/plugin-react'

    // https://vite.dev/config/
    export default defineConfig({
      plugins: [react()],
    })
    """
)

APP_CSS = "#root {\n  max-width: 1280px;\n}\n"


# ---------------------------------------------------------------------------
# Fake container runtime
# ---------------------------------------------------------------------------


class FakeRuntime(ContainerRuntime):
    """In-memory stand-in for the ``docker`` CLI.

    Attributes:
        running: Names reported by ``docker ps``.
        files: Container file system, ``{relative_path: content}``.  Content
            given as ``bytes`` is decoded the way ``run_command`` would.
        calls: Every command line that reached the subprocess layer.
        attached: Command lines run attached to the terminal.
    """

    def __init__(self, config: Config) -> None:
        super().__init__(config)
        self.running: list[str] = []
        self.files: dict[str, str | bytes] = {}
        self.calls: list[list[str]] = []
        self.attached: list[list[str]] = []
        self.installed: list[str] = []
        self.ps_returncode = 0
        self.scaffold_returncode = 0
        self.scaffold_creates_directory = True
        self.npm_returncode = 0
        self.down_returncode = 0
        self.write_returncode = 0
        self.exec_failure: tuple[int, str] | None = None

    @property
    def mutations(self) -> list[list[str]]:
        """Calls that can change container or project state."""
        return [c for c in self.calls if not self._is_query(c)]

    def _is_query(self, cmd: list[str]) -> bool:
        if cmd[1] == "ps":
            return True
        return cmd[1] == "exec" and self._exec_parts(cmd)[1][0] in ("test", "cat")

    @staticmethod
    def _exec_parts(cmd: list[str]) -> tuple[str, list[str]]:
        args = cmd[2:]
        if args[0] == "-i":
            args = args[1:]
        assert args[0] == "-w"
        return args[2], args[3:]

    async def _run(self, cmd, input=None, timeout=None, strict=False):
        self.calls.append(list(cmd))
        if cmd[: len(self.compose_cmd)] == self.compose_cmd:
            return self._compose(cmd)
        verb = cmd[1]
        if verb == "ps":
            if self.ps_returncode != 0:
                return (self.ps_returncode, "", "Cannot connect to the Docker daemon")
            return (0, "".join(f"{name}\n" for name in self.running), "")
        if verb == "run":
            return self._scaffold(cmd)
        if verb == "exec":
            return self._exec(cmd, input, strict)
        raise AssertionError(f"unexpected command: {cmd}")

    async def _attach(self, cmd):
        self.attached.append(list(cmd))

    # -- command emulation -------------------------------------------------

    def _compose(self, cmd):
        if "down" in cmd:
            return (self.down_returncode, "", "" if self.down_returncode == 0 else "boom")
        return (0, "", "")

    def _scaffold(self, cmd):
        if self.scaffold_returncode != 0:
            return (self.scaffold_returncode, "", "npm ERR! create-vite failed")
        volume = cmd[cmd.index("-v") + 1]
        workspace = Path(volume.rsplit(":", 1)[0])
        name = cmd[cmd.index("vite@latest") + 1]
        if self.scaffold_creates_directory:
            project = workspace / name
            (project / "src").mkdir(parents=True)
            (project / "vite.config.js").write_text(VITE_CONFIG, encoding="utf-8")
            (project / "package.json").write_text('{"name": "%s"}\n' % name, encoding="utf-8")
        return (0, "", "")

    def _exec(self, cmd, input, strict=False):
        container, command = self._exec_parts(cmd)
        if self.exec_failure is not None:
            returncode, stderr = self.exec_failure
            return (returncode, "", stderr)
        if container not in self.running:
            return (1, "", f"Error response from daemon: container {container} is not running")
        if command[:2] == ["test", "-f"]:
            return (0 if command[2] in self.files else 1, "", "")
        if command[0] == "cat":
            if command[1] not in self.files:
                return (1, "", f"cat: {command[1]}: No such file or directory")
            content = self.files[command[1]]
            if isinstance(content, bytes):
                content = content.decode("utf-8", errors="strict" if strict else "replace")
            return (0, content, "")
        if command[:2] == ["sh", "-c"]:
            if self.write_returncode != 0:
                return (self.write_returncode, "", "sh: permission denied")
            self.files[command[-1]] = input
            return (0, "", "")
        if command[:2] == ["npm", "install"]:
            if self.npm_returncode != 0:
                return (self.npm_returncode, "", "npm ERR! network")
            self.installed.extend(command[2:])
            return (0, "", "")
        raise AssertionError(f"unexpected exec: {command}")


# ---------------------------------------------------------------------------
# Paths & configuration
# ---------------------------------------------------------------------------


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Directory that holds generated projects."""
    path = tmp_path / "workspace"
    path.mkdir()
    return path


@pytest.fixture
def plugins_dir(tmp_path: Path) -> Path:
    """Empty plugins directory."""
    path = tmp_path / "deps"
    path.mkdir()
    return path


@pytest.fixture
def config(workspace: Path, plugins_dir: Path) -> Config:
    return Config(
        workspace=workspace,
        plugins_dir=plugins_dir,
        runtime=RuntimeConfig(docker="docker", compose=["docker", "compose"]),
    )


@pytest.fixture
def fake_runtime(config: Config) -> FakeRuntime:
    return FakeRuntime(config)


@pytest.fixture
def descriptor(workspace: Path) -> ProjectDescriptor:
    """Descriptor for a project named ``demo``; its directory is not created."""
    return resolve("demo", 4000, workspace=workspace)


@pytest.fixture
def existing_project(descriptor: ProjectDescriptor) -> ProjectDescriptor:
    """``demo`` with its directory and compose file on disk."""
    descriptor.directory.mkdir()
    (descriptor.directory / "docker-compose.yml").write_text("services: {}\n", encoding="utf-8")
    return descriptor


@pytest.fixture
def running_project(existing_project: ProjectDescriptor, fake_runtime: FakeRuntime) -> ProjectDescriptor:
    """``demo`` running, with a freshly scaffolded file set in its container."""
    fake_runtime.running.append(existing_project.container_name)
    fake_runtime.files.update({"vite.config.js": VITE_CONFIG, "src/App.css": APP_CSS})
    return existing_project


# ---------------------------------------------------------------------------
# Subprocess helpers
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing command execution.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=proc)):
                ...
    """
    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory


@pytest.fixture
def write_plugin(plugins_dir: Path):
    """Return a helper that writes a plugin file into *plugins_dir*."""
    def _write(name: str, body: str, suffix: str = ".yaml") -> Path:
        path = plugins_dir / f"{name}{suffix}"
        path.write_text(textwrap.dedent(body), encoding="utf-8")
        return path

    return _write
