"""Config subcommand group for promptkit CLI."""

from typing import Annotated

import typer
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from promptkit.utils.config import Config

config_app = typer.Typer(
    help="Read and change workspace configuration",
    no_args_is_help=True,
    add_completion=True,
)
console = Console()


def _format(value) -> str:
    if isinstance(value, (dict, list)):
        return yaml.dump(value, default_flow_style=False, sort_keys=False).rstrip()
    return str(value)


@config_app.command("get")
def get(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Config key, e.g. validation.strict")],
) -> None:
    """Print one configuration value."""
    config: Config = ctx.obj["config"]
    try:
        value = config.get_value(key)
    except KeyError:
        console.print(f"[red]Unknown config key: {escape(key)}[/red]")
        raise typer.Exit(1)
    typer.echo(_format(value))


@config_app.command("set")
def set_value(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Config key, e.g. variables.team")],
    value: Annotated[str, typer.Argument(help="New value, parsed as YAML")],
    runtime: Annotated[
        bool,
        typer.Option("--runtime", help="Write to promptkit.runtime.yaml instead"),
    ] = False,
) -> None:
    """Write a configuration value to the workspace YAML."""
    config: Config = ctx.obj["config"]
    try:
        parsed = yaml.safe_load(value)
    except yaml.YAMLError:
        parsed = value

    try:
        if runtime:
            config.set_runtime(key, parsed)
        else:
            config.set_user(key, parsed)
    except KeyError:
        console.print(f"[red]Unknown config key: {escape(key)}[/red]")
        raise typer.Exit(1)
    except ValidationError as e:
        console.print(f"[red]Invalid value for {escape(key)}: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]✓ {escape(key)} = {escape(_format(config.get_value(key)))}[/green]")


@config_app.command("reset")
def reset_value(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Config key, e.g. variables.team")],
    runtime: Annotated[
        bool,
        typer.Option("--runtime", help="Remove from promptkit.runtime.yaml instead"),
    ] = False,
) -> None:
    """Remove a key from the workspace YAML so its default applies again."""
    config: Config = ctx.obj["config"]
    try:
        removed = config.reset_runtime(key) if runtime else config.reset_user(key)
    except KeyError:
        console.print(f"[red]Unknown config key: {escape(key)}[/red]")
        raise typer.Exit(1)
    except ValidationError as e:
        console.print(f"[red]Cannot reset {escape(key)}: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    if not removed:
        console.print(f"[yellow]{escape(key)} is not set[/yellow]")
        return
    try:
        current = _format(config.get_value(key))
    except KeyError:
        console.print(f"[green]✓ {escape(key)} removed[/green]")
    else:
        console.print(f"[green]✓ {escape(key)} reset to {escape(current)}[/green]")


@config_app.command("list")
def list_values(ctx: typer.Context) -> None:
    """Print the effective configuration."""
    config: Config = ctx.obj["config"]
    typer.echo(_format(config.model_dump(mode="json")))
