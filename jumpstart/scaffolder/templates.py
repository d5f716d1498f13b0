"""Jinja2 rendering for the container artifacts written into a new project.

Templates live in ``jumpstart/scaffolder/templates/`` and are rendered with a
plain dict built by :meth:`DockerGenerator.build_context`.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined

_BUNDLED_TEMPLATES = Path(__file__).parent / "templates"


class TemplateRenderer:
    """Loads ``.j2`` templates from one directory and renders them.

    Output is never HTML-escaped.  A variable missing from the context raises
    :class:`jinja2.UndefinedError` rather than rendering as an empty string.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        self.template_dir = Path(template_dir) if template_dir else _BUNDLED_TEMPLATES
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=False,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, template_name: str, context: dict[str, Any]) -> str:
        """Render *template_name* (relative to the template directory)."""
        return self.env.get_template(template_name).render(**context)

    async def render_to_file(
        self,
        template_name: str,
        output_path: str | Path,
        context: dict[str, Any],
    ) -> Path:
        """Render *template_name* and write it to *output_path*.

        Missing parent directories are created.  An existing file is replaced.
        """
        target = Path(output_path)
        await asyncio.to_thread(_write_text, target, self.render(template_name, context))
        return target

    def list_templates(self) -> list[str]:
        if not self.template_dir.is_dir():
            return []
        return sorted(p.name for p in self.template_dir.glob("*.j2"))


def _write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
