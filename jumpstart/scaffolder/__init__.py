"""Jumpstart scaffolder -- renders the container artifacts of a project.

Quick usage::

    from jumpstart.scaffolder import DockerGenerator, TemplateRenderer

    generator = DockerGenerator(TemplateRenderer())
    context = DockerGenerator.build_context(descriptor, config)
    await generator.generate_all(descriptor.directory, context)
"""

from jumpstart.scaffolder.docker_gen import DockerGenerator
from jumpstart.scaffolder.templates import TemplateRenderer

__all__ = [
    "DockerGenerator",
    "TemplateRenderer",
]
