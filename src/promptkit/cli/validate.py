"""Validate CLI command."""

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from promptkit.core.catalog import Catalog
from promptkit.core.validator import validate_plugin
from promptkit.utils.config import Config

console = Console()

SEVERITY_STYLES = {"error": "red", "warning": "yellow"}


def validate_command(ctx: typer.Context, strict: bool | None) -> None:
    """Run the lint checks and exit non-zero when the plugin is not clean."""
    config: Config = ctx.obj["config"]
    if strict is None:
        strict = config.validation.strict

    catalog = Catalog.from_config(config)
    if not catalog.plugin_path.exists():
        console.print(
            f"[red]Plugin directory not found: {escape(str(catalog.plugin_path))}[/red]"
        )
        raise typer.Exit(1)

    report = validate_plugin(catalog)
    checked = sum(report.checked.values())

    if report.issues:
        table = Table(show_lines=False)
        table.add_column("Severity")
        table.add_column("Code", no_wrap=True)
        table.add_column("Component", style="cyan", no_wrap=True)
        table.add_column("Message")
        for issue in report.issues:
            style = SEVERITY_STYLES[issue.severity]
            table.add_row(
                f"[{style}]{issue.severity}[/{style}]",
                issue.code,
                escape(f"{issue.kind} {issue.component}"),
                escape(issue.message),
            )
        console.print(table)

    summary = (
        f"Checked {checked} files: "
        f"{len(report.errors)} errors, {len(report.warnings)} warnings"
    )
    if report.ok(strict):
        console.print(f"[green]✓ {summary}[/green]")
        return

    console.print(f"[red]✗ {summary}[/red]")
    if strict and not report.errors:
        console.print("[yellow]Warnings fail validation in strict mode[/yellow]")
    raise typer.Exit(1)
