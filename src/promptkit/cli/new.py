"""Scaffolding subcommand group: create skeleton component files."""

from pathlib import Path
from typing import Annotated, Any, NoReturn

import typer
from rich.console import Console
from rich.markup import escape

from promptkit.core.command_loader import (
    MODE_NAMESPACE,
    CommandLoader,
    format_command_id,
    split_command_id,
)
from promptkit.core.component_def import is_valid_id
from promptkit.core.skill_loader import SKILL_FILENAME
from promptkit.utils.config import Config
from promptkit.utils.def_loader import (
    InvalidDefError,
    UnsafePathError,
    safe_join,
    split_qualified_id,
    write_definition,
)

new_app = typer.Typer(
    help="Create skeleton commands, agents, skills and workflows",
    no_args_is_help=True,
    add_completion=True,
)
console = Console()

DescriptionOption = Annotated[
    str, typer.Option("--description", "-d", help="Frontmatter description")
]


def _title(name: str) -> str:
    return name.replace("-", " ").replace("_", " ").title()


def _fail(message: str) -> NoReturn:
    console.print(f"[red]{escape(message)}[/red]")
    raise typer.Exit(1)


def _check_id(kind: str, def_id: str) -> None:
    if not is_valid_id(kind, def_id):
        _fail(f"Invalid {kind} id: {def_id}")


def _scaffold(
    kind: str,
    def_id: str,
    def_file: Path,
    frontmatter: dict[str, Any],
    body: str,
) -> None:
    if def_file.exists():
        _fail(f"{kind.capitalize()} already exists: {def_file}")

    write_definition(def_file, frontmatter, body)
    console.print(f"[green]✓ Created {kind} {escape(def_id)}[/green]")
    console.print(f"  {escape(str(def_file))}")


@new_app.command("command")
def new_command(
    ctx: typer.Context,
    command_id: Annotated[str, typer.Argument(help="Command id, e.g. /dev:fix")],
    description: DescriptionOption = "",
    argument_hint: Annotated[
        str | None,
        typer.Option("--argument-hint", help="Usage hint; adds an $ARGUMENTS section"),
    ] = None,
) -> None:
    """Create commands/<namespace>/<name>.md."""
    config: Config = ctx.obj["config"]
    loader = CommandLoader.from_config(config)
    try:
        namespace, name = split_command_id(command_id)
        def_id = format_command_id(namespace, name)
        _check_id("command", def_id)
        if namespace == MODE_NAMESPACE:
            def_file = safe_join(loader.modes_path, f"{name}.md")
        else:
            def_file = safe_join(loader.commands_path, namespace, f"{name}.md")
    except (InvalidDefError, UnsafePathError) as e:
        _fail(str(e))

    frontmatter: dict[str, Any] = {"description": description or f"{_title(name)} command"}
    body = f"# {_title(name)}\n\nDescribe what this command should do."
    if argument_hint:
        frontmatter["argument-hint"] = argument_hint
        body += "\n\n## Input\n\n$ARGUMENTS"

    _scaffold("command", def_id, def_file, frontmatter, body)


@new_app.command("agent")
def new_agent(
    ctx: typer.Context,
    agent_id: Annotated[str, typer.Argument(help="Agent id, e.g. code-reviewer")],
    description: DescriptionOption = "",
) -> None:
    """Create agents/<name>.md."""
    config: Config = ctx.obj["config"]
    _check_id("agent", agent_id)
    try:
        def_file = safe_join(config.plugin_path / "agents", f"{agent_id}.md")
    except UnsafePathError as e:
        _fail(str(e))

    frontmatter = {
        "name": agent_id,
        "description": description or f"{_title(agent_id)} agent",
        "tools": "Read, Grep, Glob",
        "skills": [],
        "commands": [],
    }
    body = f"# {_title(agent_id)}\n\nDescribe the agent's role and responsibilities."
    _scaffold("agent", agent_id, def_file, frontmatter, body)


@new_app.command("skill")
def new_skill(
    ctx: typer.Context,
    skill_id: Annotated[str, typer.Argument(help="Skill id, e.g. languages/python")],
    description: DescriptionOption = "",
) -> None:
    """Create skills/<category>/<name>/SKILL.md."""
    config: Config = ctx.obj["config"]
    try:
        category, name = split_qualified_id("skill", skill_id)
        def_id = f"{category}/{name}"
        _check_id("skill", def_id)
        def_file = safe_join(config.plugin_path / "skills", category, name, SKILL_FILENAME)
    except (InvalidDefError, UnsafePathError) as e:
        _fail(str(e))

    frontmatter = {
        "name": name,
        "description": description or f"{_title(name)} skill",
    }
    body = f"# {_title(name)}\n\n## Quick Start\n\nDescribe when and how to apply this skill."
    _scaffold("skill", def_id, def_file, frontmatter, body)


@new_app.command("workflow")
def new_workflow(
    ctx: typer.Context,
    workflow_id: Annotated[str, typer.Argument(help="Workflow id, e.g. development/feature")],
    description: DescriptionOption = "",
) -> None:
    """Create workflows/<category>/<name>.md."""
    config: Config = ctx.obj["config"]
    try:
        category, name = split_qualified_id("workflow", workflow_id)
        name = name.removesuffix(".md")
        def_id = f"{category}/{name}"
        _check_id("workflow", def_id)
        def_file = safe_join(config.plugin_path / "workflows", category, f"{name}.md")
    except (InvalidDefError, UnsafePathError) as e:
        _fail(str(e))

    frontmatter = {
        "name": _title(name),
        "description": description or f"{_title(name)} workflow",
        "agents": [],
        "skills": [],
        "commands": [],
    }
    body = f"# {_title(name)}\n\n## Steps\n\n1. Describe the first step."
    _scaffold("workflow", def_id, def_file, frontmatter, body)
