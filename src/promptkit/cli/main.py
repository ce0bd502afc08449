"""CLI interface for promptkit using Typer."""

from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from promptkit.cli.catalog import docs_command, graph_command, list_command, show_command
from promptkit.cli.config import config_app
from promptkit.cli.install import doctor_command, install_command, uninstall_command
from promptkit.cli.new import new_app
from promptkit.cli.render import render_command
from promptkit.cli.validate import validate_command
from promptkit.utils.config import Config
from promptkit.utils.logging import setup_logging

app = typer.Typer(
    name="promptkit",
    help="promptkit: render, lint and install markdown prompt templates",
    no_args_is_help=True,
    add_completion=True,
)
app.add_typer(config_app, name="config")
app.add_typer(new_app, name="new")

console = Console(stderr=True)


def get_version() -> str:
    try:
        return version("promptkit")
    except PackageNotFoundError:
        return "0.0.0"


@app.callback()
def main(
    ctx: typer.Context,
    workspace: Annotated[
        Path,
        typer.Option(
            "--workspace",
            "-w",
            help="Project directory holding promptkit.user.yaml and the plugin/ tree",
        ),
    ] = Path("."),
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log progress to stderr")
    ] = False,
) -> None:
    """
    promptkit: render, lint and install markdown prompt templates.

    Configuration is loaded from promptkit.user.yaml and promptkit.runtime.yaml
    in the workspace (current directory by default).
    """
    try:
        config = Config.load(workspace)
    except FileNotFoundError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)
    except ValidationError as e:
        console.print(f"[red]Invalid configuration: {escape(str(e))}[/red]")
        raise typer.Exit(1)
    except Exception as e:
        console.print(f"[red]Error loading config: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    setup_logging(config, console_output=verbose, file_output=False)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["verbose"] = verbose


@app.command()
def render(
    ctx: typer.Context,
    target: Annotated[
        str, typer.Argument(help="Command id (/dev:fix, dev:fix) or path to a .md file")
    ],
    arguments: Annotated[
        list[str] | None,
        typer.Argument(help="Text substituted for $ARGUMENTS"),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the prompt to a file instead of stdout"),
    ] = None,
    var: Annotated[
        list[str] | None,
        typer.Option("--var", help="Extra {{variable}} as NAME=VALUE (repeatable)"),
    ] = None,
    with_frontmatter: Annotated[
        bool,
        typer.Option("--with-frontmatter", help="Include the YAML frontmatter block"),
    ] = False,
) -> None:
    """Render a command template with arguments substituted."""
    render_command(
        ctx,
        target,
        arguments or [],
        output=output,
        extra_vars=var or [],
        include_frontmatter=with_frontmatter,
    )


@app.command()
def show(
    ctx: typer.Context,
    kind: Annotated[str, typer.Argument(help="command, agent, skill or workflow")],
    component_id: Annotated[str, typer.Argument(help="Component id")],
) -> None:
    """Show a component's metadata and body."""
    show_command(ctx, kind, component_id)


@app.command("list")
def list_components(
    ctx: typer.Context,
    kind: Annotated[
        str | None,
        typer.Argument(help="command, agent, skill, workflow (default: all)"),
    ] = None,
) -> None:
    """List components in the plugin."""
    list_command(ctx, kind)


@app.command()
def validate(
    ctx: typer.Context,
    strict: Annotated[
        bool | None,
        typer.Option("--strict/--no-strict", help="Treat warnings as failures"),
    ] = None,
) -> None:
    """Lint frontmatter, references and the registry."""
    validate_command(ctx, strict)


@app.command()
def graph(
    ctx: typer.Context,
    component_id: Annotated[
        str | None, typer.Argument(help="Show the tree for one component")
    ] = None,
) -> None:
    """Show dependency statistics or one component's dependency tree."""
    graph_command(ctx, component_id)


@app.command()
def docs(
    ctx: typer.Context,
    output_dir: Annotated[
        Path, typer.Option("--output", "-o", help="Directory to write markdown into")
    ] = Path("docs"),
) -> None:
    """Generate a markdown command reference and component index."""
    docs_command(ctx, output_dir)


@app.command()
def install(ctx: typer.Context) -> None:
    """Install the plugin into the assistant's configuration directory."""
    install_command(ctx)


@app.command()
def uninstall(
    ctx: typer.Context,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")] = False,
) -> None:
    """Remove files installed by `install`."""
    uninstall_command(ctx, yes)


@app.command()
def doctor(ctx: typer.Context) -> None:
    """Check installation status."""
    doctor_command(ctx)


@app.command("version")
def show_version() -> None:
    """Show version."""
    typer.echo(f"promptkit v{get_version()}")


if __name__ == "__main__":
    app()
