"""Jumpstart command-line interface.

Usage::

    jumpstart create my-app 4000
    jumpstart run my-app
    jumpstart terminal my-app
    jumpstart install tailwind in my-app
    jumpstart cleanup my-app
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from pydantic import ValidationError as PydanticValidationError
from rich.markup import escape

from .config import Config
from .descriptor import DEFAULT_NAME, DEFAULT_PORT, resolve
from .errors import JumpstartError
from .lifecycle import LifecycleManager
from .plugins import PluginRegistry
from .probe import EnvironmentProbe, ProjectState
from .runtime import ContainerRuntime
from .utils import console, print_error, print_summary_table

_STATE_STYLES = {
    ProjectState.ABSENT: "dim",
    ProjectState.CREATED: "yellow",
    ProjectState.RUNNING: "green",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jumpstart",
        description=(
            "Create, run, and manage a Dockerized React project with Vite, "
            "and install dependencies into it while it runs."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  jumpstart create my-app          # scaffold on port 5173\n"
            "  jumpstart create my-app 4000     # scaffold on port 4000\n"
            "  jumpstart run my-app             # start the dev container (foreground)\n"
            "  jumpstart terminal my-app        # shell inside the running container\n"
            "  jumpstart install tailwind in my-app\n"
            "  jumpstart cleanup my-app         # remove containers and the project\n"
        ),
    )
    commands = parser.add_subparsers(dest="command", required=True, metavar="command")

    name_help = f"Project name (default: {DEFAULT_NAME})"

    create = commands.add_parser("create", help="Create a new React + Vite project with Docker setup")
    create.add_argument("name", nargs="?", help=name_help)
    create.add_argument("port", nargs="?", help=f"Dev server port (default: {DEFAULT_PORT})")

    run = commands.add_parser("run", help="Run the project's dev container in the foreground")
    run.add_argument("name", nargs="?", help=name_help)

    terminal = commands.add_parser("terminal", help="Open a shell in the running container")
    terminal.add_argument("name", nargs="?", help="Container name (same as the project name)")

    cleanup = commands.add_parser(
        "cleanup", help="Stop and remove the containers, then delete the project"
    )
    cleanup.add_argument("name", nargs="?", help=name_help)

    install = commands.add_parser(
        "install",
        help="Install a dependency plugin into a running project",
        usage="jumpstart install <dependency> in <app>",
    )
    install.add_argument("dependency", help="Plugin name, e.g. tailwind")
    install.add_argument("keyword", metavar="in", help="The literal word 'in'")
    install.add_argument("app", help="Project / container name")

    status = commands.add_parser("status", help="Show whether a project is absent, created, or running")
    status.add_argument("name", nargs="?", help=name_help)

    commands.add_parser("plugins", help="List installable dependency plugins")

    return parser


async def _dispatch(args: argparse.Namespace, config: Config) -> None:
    runtime = ContainerRuntime(config)
    probe = EnvironmentProbe(runtime)
    manager = LifecycleManager(config, runtime=runtime, probe=probe)
    workspace = config.workspace

    if args.command == "create":
        await manager.create(resolve(args.name, args.port, workspace=workspace))
    elif args.command == "run":
        await manager.start(resolve(args.name, workspace=workspace))
    elif args.command == "terminal":
        await manager.open_terminal(resolve(args.name, workspace=workspace).container_name)
    elif args.command == "cleanup":
        await manager.teardown(resolve(args.name, workspace=workspace))
    elif args.command == "install":
        registry = PluginRegistry(config, runtime=runtime, probe=probe)
        await registry.install(args.dependency, resolve(args.app, workspace=workspace))
    elif args.command == "status":
        descriptor = resolve(args.name, workspace=workspace)
        state = await probe.state(descriptor)
        style = _STATE_STYLES[state]
        print_summary_table(
            {
                "Project": descriptor.name,
                "Directory": escape(str(descriptor.directory)),
                "State": f"[{style}]{state.value}[/{style}]",
            },
            title="Project Status",
        )
    elif args.command == "plugins":
        registry = PluginRegistry(config, runtime=runtime, probe=probe)
        names = registry.available()
        if not names:
            console.print(f"No plugins found in {escape(str(config.plugins_dir))}")
        for name in names:
            console.print(f"  {escape(name)}")


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``jumpstart`` and ``python -m jumpstart``."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "install" and args.keyword != "in":
        parser.error("usage: install <dependency> in <app> (expected the word 'in')")

    try:
        config = Config.from_env()
    except (PydanticValidationError, ValueError) as exc:
        print_error(f"Error (Configuration): {escape(str(exc))}")
        sys.exit(1)

    try:
        asyncio.run(_dispatch(args, config))
    except JumpstartError as exc:
        print_error(f"Error ({exc.label}): {escape(str(exc))}")
        sys.exit(1)
    except KeyboardInterrupt:
        console.print("[yellow]Interrupted.[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    main()
