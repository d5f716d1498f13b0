"""Jumpstart configuration.

Centralised, typed configuration for every command.  All settings use
Pydantic v2 models so they are validated at construction time and can be
built from environment variables without boiler-plate.
"""

from __future__ import annotations

import os
import shlex
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

_BUNDLED_PLUGINS_DIR = Path(__file__).parent / "deps"


class RuntimeConfig(BaseModel):
    """How to reach the external container runtime."""

    docker: str = Field(default="docker", description="Container runtime CLI")
    compose: list[str] = Field(
        default_factory=lambda: ["docker", "compose"],
        min_length=1,
        description="Compose invocation, e.g. ['docker-compose']",
    )
    command_timeout: int = Field(
        default=120, ge=1, description="Timeout in seconds for non-attached runtime calls"
    )


class ScaffoldConfig(BaseModel):
    """Inputs for the external project generator and the generated artifacts."""

    node_image: str = Field(default="node:18")
    template: str = Field(default="react", description="create-vite template name")
    timeout: int = Field(default=600, ge=30, description="Scaffold timeout in seconds")
    run_as_user: bool = Field(
        default=True,
        description="Run the generator as the invoking user so the host owns the files",
    )


class Config(BaseModel):
    """Global Jumpstart configuration.

    Instances are created once by the CLI entry point and then passed
    explicitly to every component.
    """

    workspace: Path = Field(default_factory=Path.cwd)
    plugins_dir: Path = Field(default=_BUNDLED_PLUGINS_DIR)
    container_workdir: str = Field(default="/app")
    runtime: RuntimeConfig = Field(default_factory=RuntimeConfig)
    scaffold: ScaffoldConfig = Field(default_factory=ScaffoldConfig)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            JUMPSTART_WORKSPACE, JUMPSTART_PLUGINS_DIR, JUMPSTART_DOCKER,
            JUMPSTART_COMPOSE, JUMPSTART_NODE_IMAGE, JUMPSTART_TEMPLATE,
            JUMPSTART_SCAFFOLD_TIMEOUT, JUMPSTART_COMMAND_TIMEOUT.
        """
        runtime_kwargs: dict[str, Any] = {}
        if os.environ.get("JUMPSTART_DOCKER"):
            runtime_kwargs["docker"] = os.environ["JUMPSTART_DOCKER"]
        if os.environ.get("JUMPSTART_COMPOSE"):
            runtime_kwargs["compose"] = shlex.split(os.environ["JUMPSTART_COMPOSE"])
        if os.environ.get("JUMPSTART_COMMAND_TIMEOUT"):
            runtime_kwargs["command_timeout"] = int(os.environ["JUMPSTART_COMMAND_TIMEOUT"])

        scaffold_kwargs: dict[str, Any] = {}
        if os.environ.get("JUMPSTART_NODE_IMAGE"):
            scaffold_kwargs["node_image"] = os.environ["JUMPSTART_NODE_IMAGE"]
        if os.environ.get("JUMPSTART_TEMPLATE"):
            scaffold_kwargs["template"] = os.environ["JUMPSTART_TEMPLATE"]
        if os.environ.get("JUMPSTART_SCAFFOLD_TIMEOUT"):
            scaffold_kwargs["timeout"] = int(os.environ["JUMPSTART_SCAFFOLD_TIMEOUT"])

        kwargs: dict[str, Any] = {}
        if os.environ.get("JUMPSTART_WORKSPACE"):
            kwargs["workspace"] = Path(os.environ["JUMPSTART_WORKSPACE"])
        if os.environ.get("JUMPSTART_PLUGINS_DIR"):
            kwargs["plugins_dir"] = Path(os.environ["JUMPSTART_PLUGINS_DIR"])

        return cls(
            runtime=RuntimeConfig(**runtime_kwargs),
            scaffold=ScaffoldConfig(**scaffold_kwargs),
            **kwargs,
        )
