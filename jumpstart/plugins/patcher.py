"""Anchor-based text insertion into files inside a running container.

The edits themselves are plain functions over file content.  The
:class:`ConfigPatcher` checks that the target exists, reads it through
``docker exec``, applies one edit in memory, and writes the result back in a
single call, so a failed check or edit never leaves a half-written file.

Neither edit is idempotent: applying one twice inserts the text twice.
"""

from __future__ import annotations

import re
from collections.abc import Callable

from ..errors import PatchFailure, TargetFileMissing
from ..probe import EnvironmentProbe
from ..runtime import ContainerRuntime

# ---------------------------------------------------------------------------
# Pure edits
# ---------------------------------------------------------------------------


def insert_line_at_top(content: str, text: str) -> str:
    """Return *content* with *text* added as its new first line."""
    return f"{text}\n{content}"


def insert_bracket_entry(content: str, anchor_pattern: str, text: str) -> str:
    """Append *text* as the last entry of the bracket group opened on the
    first line matching *anchor_pattern*.

    ``plugins: [react()]`` becomes ``plugins: [react(), tailwindcss()]`` and
    ``plugins: []`` becomes ``plugins: [tailwindcss()]``.  Everything after
    the closing bracket is preserved.  The group may span several lines.

    Raises:
        PatchFailure: If the anchor is invalid or not found, or its bracket
            group is not closed.
    """
    opening, closing = _locate_group(content, anchor_pattern)
    inner = content[opening + 1 : closing]
    head = inner.rstrip()
    trailing = inner[len(head) :]
    if not head.strip():
        new_inner = text + trailing if "\n" in trailing else text
    elif head.endswith(","):
        new_inner = f"{head} {text}{trailing}"
    else:
        new_inner = f"{head}, {text}{trailing}"
    return content[: opening + 1] + new_inner + content[closing:]


def bracket_group_contents(content: str, anchor_pattern: str) -> str:
    """Return the text between the brackets of the group that
    :func:`insert_bracket_entry` would extend."""
    opening, closing = _locate_group(content, anchor_pattern)
    return content[opening + 1 : closing]


def _locate_group(content: str, anchor_pattern: str) -> tuple[int, int]:
    try:
        anchor = re.compile(anchor_pattern)
    except re.error as exc:
        raise PatchFailure(f"Invalid anchor pattern '{anchor_pattern}': {exc}") from None

    offset = 0
    for line in content.splitlines(keepends=True):
        match = anchor.search(line)
        if match:
            break
        offset += len(line)
    else:
        raise PatchFailure(f"No line matches anchor '{anchor_pattern}'.")

    line_end = offset + len(line)
    opening = content.find("[", offset + match.start(), line_end)
    if opening == -1:
        raise PatchFailure(f"Line matching '{anchor_pattern}' opens no '[' group.")

    closing = _matching_bracket(content, opening)
    if closing == -1:
        raise PatchFailure(f"Bracket group after '{anchor_pattern}' is never closed.")
    return opening, closing


def _matching_bracket(content: str, opening: int) -> int:
    depth = 0
    for index in range(opening, len(content)):
        char = content[index]
        if char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
            if depth == 0:
                return index
    return -1


# ---------------------------------------------------------------------------
# Container-side patcher
# ---------------------------------------------------------------------------


class ConfigPatcher:
    """Applies the pure edits to files inside a running container."""

    def __init__(self, runtime: ContainerRuntime, probe: EnvironmentProbe) -> None:
        self.runtime = runtime
        self.probe = probe

    async def insert_before_first_line(self, container_name: str, path: str, text: str) -> None:
        await self._apply(container_name, path, lambda content: insert_line_at_top(content, text))

    async def insert_into_bracket_group(
        self, container_name: str, path: str, anchor_pattern: str, text: str
    ) -> None:
        await self._apply(
            container_name,
            path,
            lambda content: insert_bracket_entry(content, anchor_pattern, text),
        )

    async def contains(self, container_name: str, path: str, text: str) -> bool:
        """Return ``True`` if the file at *path* already contains *text*."""
        return text in await self.read(container_name, path)

    async def group_contains(
        self, container_name: str, path: str, anchor_pattern: str, text: str
    ) -> bool:
        """Return ``True`` if the bracket group located by *anchor_pattern*
        already contains *text*.  Text elsewhere in the file is ignored."""
        content = await self.read(container_name, path)
        return text in bracket_group_contents(content, anchor_pattern)

    async def read(self, container_name: str, path: str) -> str:
        """Return the file at *path*, which must be valid UTF-8.

        Raises:
            PatchFailure: If the file cannot be read or is not UTF-8 text.
        """
        try:
            returncode, stdout, stderr = await self.runtime.exec(
                container_name, "cat", path, strict=True
            )
        except UnicodeDecodeError as exc:
            raise PatchFailure(
                f"'{path}' in container '{container_name}' is not UTF-8 text ({exc.reason}).",
                command=f"cat {path}",
            ) from None
        if returncode != 0:
            raise PatchFailure(
                f"Could not read '{path}' in container '{container_name}'.\n{stderr}",
                command=f"cat {path}",
                stderr=stderr,
            )
        return stdout

    async def write(self, container_name: str, path: str, content: str) -> None:
        returncode, _, stderr = await self.runtime.exec(
            container_name, "sh", "-c", 'cat > "$1"', "sh", path, input=content
        )
        if returncode != 0:
            raise PatchFailure(
                f"Could not write '{path}' in container '{container_name}'.\n{stderr}",
                command=f"cat > {path}",
                stderr=stderr,
            )

    async def _apply(
        self, container_name: str, path: str, edit: Callable[[str], str]
    ) -> None:
        if not await self.probe.file_exists_in_container(container_name, path):
            raise TargetFileMissing(
                f"File '{path}' does not exist in container '{container_name}'."
            )
        content = await self.read(container_name, path)
        await self.write(container_name, path, edit(content))
