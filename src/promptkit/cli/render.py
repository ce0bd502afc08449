"""Render CLI command: load a template, substitute arguments, emit the prompt."""

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from promptkit.core.command_loader import CommandLoader
from promptkit.core.component_def import CommandDef
from promptkit.core.renderer import render_command as render_prompt
from promptkit.utils.config import Config
from promptkit.utils.def_loader import (
    DefNotFoundError,
    InvalidDefError,
    UnsafePathError,
    get_template_variables,
)

logger = logging.getLogger(__name__)

err_console = Console(stderr=True)


def parse_vars(pairs: list[str]) -> dict[str, str]:
    """
    Parse NAME=VALUE pairs from --var options.

    Raises:
        typer.BadParameter: A pair has no '=' or an empty name
    """
    variables = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name.strip():
            raise typer.BadParameter(f"expected NAME=VALUE, got {pair!r}", param_hint="--var")
        variables[name.strip()] = value
    return variables


def load_template(config: Config, target: str) -> CommandDef:
    """
    Resolve a render target.

    An existing .md path is loaded directly; anything else is treated as a
    command id inside the plugin.
    """
    candidate = Path(target).expanduser()
    if candidate.suffix == ".md" and candidate.is_file():
        return CommandLoader.load_file(candidate)
    return CommandLoader.from_config(config).load(target)


def emit(text: str, output: Path | None) -> None:
    """Write the prompt to stdout, or to a file when output is given."""
    if output is None:
        typer.echo(text, nl=False)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    err_console.print(f"[green]Wrote {escape(str(output))}[/green]")


def render_command(
    ctx: typer.Context,
    target: str,
    arguments: list[str],
    output: Path | None = None,
    extra_vars: list[str] | None = None,
    include_frontmatter: bool = False,
) -> None:
    """Render a command template and emit it."""
    config: Config = ctx.obj["config"]
    variables = get_template_variables(config)
    variables.update(parse_vars(extra_vars or []))

    try:
        command = load_template(config, target)
    except (DefNotFoundError, InvalidDefError, UnsafePathError) as e:
        err_console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)

    rendered = render_prompt(
        command,
        arguments,
        variables=variables,
        include_frontmatter=include_frontmatter,
    )
    logger.info(f"Rendered {command.id} ({len(rendered.text)} chars)")

    try:
        emit(rendered.text, output)
    except OSError as e:
        err_console.print(f"[red]Cannot write {escape(str(output))}: {escape(str(e))}[/red]")
        raise typer.Exit(1)
