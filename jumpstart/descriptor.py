"""Project identity resolution.

Turns raw command-line input into a validated :class:`ProjectDescriptor`.
This is the only place the default project name and port are declared.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from .errors import InvalidName, InvalidPort

DEFAULT_NAME = "jumpstart"
DEFAULT_PORT = 5173

_NAME_PATTERN = re.compile(r"[A-Za-z0-9_-]+")


@dataclass(frozen=True)
class ProjectDescriptor:
    """Canonical identity of one project for one command invocation."""

    name: str
    directory: Path
    port: int

    @property
    def container_name(self) -> str:
        return self.name


def validate_name(name: str) -> str:
    """Return *name* unchanged if it is a valid project name.

    Raises:
        InvalidName: If *name* contains anything besides letters, digits,
            ``-`` and ``_``.
    """
    if not _NAME_PATTERN.fullmatch(name):
        raise InvalidName(
            f"Invalid project name '{name}': use only letters, digits, '-' and '_'."
        )
    return name


def validate_port(port: int | str) -> int:
    """Coerce *port* to an int and check it is a usable TCP port."""
    try:
        value = int(port)
    except (TypeError, ValueError):
        raise InvalidPort(f"Invalid port '{port}': must be an integer.") from None
    if not 0 < value < 65536:
        raise InvalidPort(f"Invalid port {value}: must be between 1 and 65535.")
    return value


def resolve(
    raw_name: str | None = None,
    raw_port: int | str | None = None,
    *,
    workspace: str | Path,
) -> ProjectDescriptor:
    """Build a :class:`ProjectDescriptor`, applying defaults for missing input.

    Performs no I/O: the project directory is computed, not checked.
    """
    name = validate_name(raw_name if raw_name else DEFAULT_NAME)
    port = validate_port(raw_port if raw_port not in (None, "") else DEFAULT_PORT)
    return ProjectDescriptor(name=name, directory=Path(workspace) / name, port=port)
