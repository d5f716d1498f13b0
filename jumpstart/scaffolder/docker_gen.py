"""Dockerfile and Docker Compose generation for a scaffolded project.

Uses the Jinja2 templates ``Dockerfile.j2`` and ``docker-compose.yml.j2`` to
produce the build and orchestration definitions.  Both files are rendered
from the same context so the exposed port and the port mapping always agree.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from ..config import Config
from ..descriptor import ProjectDescriptor
from .templates import TemplateRenderer


class DockerGenerator:
    """Generates the container build and orchestration definitions."""

    # Template name -> output file name
    _FILES: dict[str, str] = {
        "Dockerfile.j2": "Dockerfile",
        "docker-compose.yml.j2": "docker-compose.yml",
    }

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    @staticmethod
    def build_context(descriptor: ProjectDescriptor, config: Config) -> dict[str, Any]:
        """Build the template context for *descriptor*."""
        return {
            "project_name": descriptor.name,
            "container_name": descriptor.container_name,
            "port": descriptor.port,
            "node_image": config.scaffold.node_image,
            "workdir": config.container_workdir,
        }

    async def generate_all(
        self,
        output_dir: Path,
        context: dict[str, Any],
    ) -> dict[str, Path]:
        """Render every artifact into *output_dir*.

        Returns:
            Mapping of output file name to written path, e.g.
            ``{"Dockerfile": Path(".../Dockerfile"), ...}``.
        """
        result: dict[str, Path] = {}
        for template_name, output_name in self._FILES.items():
            result[output_name] = await self.renderer.render_to_file(
                template_name, output_dir / output_name, context
            )
        return result
