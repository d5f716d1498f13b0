"""Shared utility functions for Jumpstart.

Provides async command execution (captured and terminal-attached) and the
Rich-based operator output helpers used by every command.
"""

from __future__ import annotations

import asyncio
import os
from pathlib import Path

from rich.console import Console
from rich.table import Table

console = Console()

# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


async def run_command(
    cmd: list[str],
    cwd: str | Path | None = None,
    timeout: float | None = 120,
    input: str | None = None,
    env: dict[str, str] | None = None,
    strict: bool = False,
) -> tuple[int, str, str]:
    """Run a command asynchronously and capture its output.

    Args:
        cmd: Program and arguments.
        cwd: Working directory for the child process.
        timeout: Maximum wall-clock seconds before the process is killed.
            ``None`` waits indefinitely.
        input: Optional text written to the child's stdin.
        env: Optional extra environment variables merged on top of ``os.environ``.
        strict: Decode stdout as strict UTF-8 instead of replacing invalid
            bytes.  Use this when the output is written back somewhere.

    Returns:
        A ``(returncode, stdout, stderr)`` tuple.  A timeout is reported as
        returncode ``-1`` with an explanatory stderr.

    Raises:
        FileNotFoundError: If the program itself does not exist.
        UnicodeDecodeError: If *strict* is set and stdout is not valid UTF-8.
    """
    merged_env: dict[str, str] | None = None
    if env:
        merged_env = {**os.environ, **env}

    process = await asyncio.create_subprocess_exec(
        *cmd,
        stdin=asyncio.subprocess.PIPE if input is not None else None,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        cwd=str(cwd) if cwd else None,
        env=merged_env,
    )

    payload = input.encode("utf-8") if input is not None else None
    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(payload), timeout=timeout
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return (-1, "", f"Command timed out after {timeout}s: {' '.join(cmd)}")

    stdout_str = (stdout_bytes or b"").decode("utf-8", errors="strict" if strict else "replace")
    stderr_str = (stderr_bytes or b"").decode("utf-8", errors="replace").strip()
    return (process.returncode or 0, stdout_str, stderr_str)


async def run_attached(cmd: list[str], cwd: str | Path | None = None) -> int:
    """Run a command with the terminal's stdin/stdout/stderr and wait for it.

    The child shares the foreground process group, so Ctrl-C reaches it
    directly.  If the awaiting task is cancelled (``asyncio.run`` does this
    on SIGINT) we keep waiting until the child has finished its own shutdown
    and then let the cancellation propagate.

    Returns:
        The child's exit code.
    """
    process = await asyncio.create_subprocess_exec(
        *cmd,
        cwd=str(cwd) if cwd else None,
    )
    try:
        return await process.wait()
    except asyncio.CancelledError:
        await asyncio.shield(process.wait())
        raise


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")
