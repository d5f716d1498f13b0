"""Typed description of a dependency plugin.

A plugin file is a YAML mapping from plugin name to definition::

    tailwind:
      description: Tailwind CSS through the official Vite plugin
      requires_running: true
      packages: [tailwindcss, "@tailwindcss/vite"]
      patches:
        - action: insert_before_first_line
          file: [vite.config.js, vite.config.ts]
          text: import tailwindcss from "@tailwindcss/vite";

Each definition is validated into a :class:`PluginManifest`.  ``file`` and
``requires_files`` entries may list alternatives; the first one that exists
in the container is used.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, field_validator, model_validator


def _as_alternatives(value: str | list[str]) -> list[str]:
    alternatives = [value] if isinstance(value, str) else list(value)
    if not alternatives or any(not a.strip() for a in alternatives):
        raise ValueError("file paths must be non-empty")
    return alternatives


class PatchAction(str, Enum):
    INSERT_BEFORE_FIRST_LINE = "insert_before_first_line"
    INSERT_INTO_BRACKET_GROUP = "insert_into_bracket_group"


class PatchStep(BaseModel):
    """One anchor-based insertion into one file."""

    action: PatchAction
    file: list[str] = Field(..., description="Target path relative to the project root")
    text: str = Field(..., min_length=1)
    anchor: str | None = Field(
        default=None, description="Regex locating the line that opens the bracket group"
    )
    skip_if_present: bool = Field(
        default=True, description="Leave the file alone if it already contains the text"
    )

    @field_validator("file", mode="before")
    @classmethod
    def _normalise_file(cls, value: str | list[str]) -> list[str]:
        return _as_alternatives(value)

    @model_validator(mode="after")
    def _anchor_required_for_groups(self) -> "PatchStep":
        if self.action is PatchAction.INSERT_INTO_BRACKET_GROUP and not self.anchor:
            raise ValueError("insert_into_bracket_group requires an 'anchor'")
        return self


class PluginManifest(BaseModel):
    """A validated plugin definition."""

    name: str
    description: str = ""
    requires_running: bool = True
    requires_files: list[list[str]] = Field(default_factory=list)
    packages: list[str] = Field(default_factory=list)
    patches: list[PatchStep] = Field(default_factory=list)

    @field_validator("requires_files", mode="before")
    @classmethod
    def _normalise_required(cls, value: list[str | list[str]] | None) -> list[list[str]]:
        return [_as_alternatives(entry) for entry in value or []]
