"""End-to-end lifecycle: create, run, install, cleanup.

Runs every component for real except the subprocess layer, which is the
in-memory ``FakeRuntime``.  The container file system is seeded from the
scaffolded project on disk, the way the bind mount would expose it.
"""

from __future__ import annotations

import pytest
import yaml

from jumpstart.config import Config
from jumpstart.errors import ContainerNotRunning, ProjectNotFound
from jumpstart.lifecycle import LifecycleManager
from jumpstart.plugins import PluginRegistry
from jumpstart.probe import ProjectState

from conftest import APP_CSS

pytestmark = pytest.mark.integration


@pytest.fixture
def bundled_config(workspace) -> Config:
    """Configuration that uses the plugins shipped with the package."""
    return Config(workspace=workspace)


def _mount(fake_runtime, descriptor) -> None:
    """Expose the scaffolded files inside the fake container."""
    fake_runtime.files["vite.config.js"] = (descriptor.directory / "vite.config.js").read_text(
        encoding="utf-8"
    )
    fake_runtime.files["src/App.css"] = APP_CSS


async def test_full_lifecycle(bundled_config, fake_runtime, descriptor):
    manager = LifecycleManager(bundled_config, runtime=fake_runtime)
    registry = PluginRegistry(bundled_config, runtime=fake_runtime)

    # create
    await manager.create(descriptor)
    assert await manager.probe.state(descriptor) is ProjectState.CREATED
    compose = yaml.safe_load(
        (descriptor.directory / "docker-compose.yml").read_text(encoding="utf-8")
    )
    service = compose["services"][descriptor.name]
    assert service["container_name"] == descriptor.container_name
    assert service["ports"] == [f"{descriptor.port}:{descriptor.port}"]
    assert f"EXPOSE {descriptor.port}" in (descriptor.directory / "Dockerfile").read_text(
        encoding="utf-8"
    )

    # install before run is refused
    with pytest.raises(ContainerNotRunning):
        await registry.install("tailwind", descriptor)

    # run
    await manager.start(descriptor)
    fake_runtime.running.append(descriptor.container_name)
    _mount(fake_runtime, descriptor)
    assert await manager.probe.state(descriptor) is ProjectState.RUNNING

    # install twice; the second pass changes nothing
    await registry.install("tailwind", descriptor)
    patched = dict(fake_runtime.files)
    await registry.install("tailwind", descriptor)
    assert fake_runtime.files == patched
    assert "plugins: [react(), tailwindcss()]" in patched["vite.config.js"]
    assert patched["vite.config.js"].startswith('import tailwindcss from "@tailwindcss/vite";\n')
    assert patched["src/App.css"].startswith('@import "tailwindcss";\n')

    # cleanup
    fake_runtime.running.clear()
    await manager.teardown(descriptor)
    assert await manager.probe.state(descriptor) is ProjectState.ABSENT
    with pytest.raises(ProjectNotFound):
        await manager.start(descriptor)


async def test_hello_plugin_only_installs_packages(bundled_config, fake_runtime, descriptor):
    manager = LifecycleManager(bundled_config, runtime=fake_runtime)
    await manager.create(descriptor)
    fake_runtime.running.append(descriptor.container_name)

    await PluginRegistry(bundled_config, runtime=fake_runtime).install("hello", descriptor)

    assert fake_runtime.installed
    assert fake_runtime.files == {}
