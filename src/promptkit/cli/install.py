"""Install, uninstall and doctor CLI commands."""

import questionary
import typer
from rich.console import Console
from rich.markup import escape

from promptkit.core.installer import Installer, InstallError
from promptkit.utils.config import Config
from promptkit.utils.logging import setup_logging

console = Console()


def _installer(ctx: typer.Context) -> Installer:
    config: Config = ctx.obj["config"]
    setup_logging(config, console_output=ctx.obj.get("verbose", False))
    return Installer.from_config(config)


def install_command(ctx: typer.Context) -> None:
    """Copy the plugin into claude_home."""
    installer = _installer(ctx)
    layout = installer.layout

    console.print(f"[magenta]Installing {escape(layout.plugin_name)}...[/magenta]")
    try:
        result = installer.install()
    except InstallError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)

    counts = result.counts
    console.print("[green]✓ Plugin installed successfully![/green]")
    console.print(
        f"  [cyan]Commands:[/cyan] {counts['commands']} commands + {counts['modes']} modes"
    )
    console.print(f"  [cyan]Skills:[/cyan]   {counts['skills']} skills")
    console.print(f"  [cyan]Agents:[/cyan]   {counts['agents']} agents")
    console.print(f"  [cyan]Backup:[/cyan]   {escape(str(result.backup_path))}")
    console.print("\nRestart the assistant to load the new commands.")


def uninstall_command(ctx: typer.Context, yes: bool) -> None:
    """Remove the files a previous install put in place."""
    installer = _installer(ctx)
    layout = installer.layout

    if not layout.backup_path.exists():
        console.print(f"[yellow]{escape(layout.plugin_name)} is not installed.[/yellow]")
        return

    if not yes:
        proceed = questionary.confirm(
            f"Remove {layout.plugin_name} from {layout.claude_home}?",
            default=False,
        ).ask()
        if not proceed:
            console.print("[yellow]Uninstall cancelled.[/yellow]")
            raise typer.Exit(1)

    try:
        result = installer.uninstall()
    except InstallError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)
    counts = result.counts
    console.print(
        f"[green]✓ Removed {counts['commands']} commands, {counts['modes']} modes, "
        f"{counts['skills']} skills, {counts['agents']} agents[/green]"
    )


def doctor_command(ctx: typer.Context) -> None:
    """Report installation status."""
    config: Config = ctx.obj["config"]
    report = Installer.from_config(config).doctor()

    console.print("[bold]Backup Plugin Location[/bold]")
    if report.backup_installed:
        console.print(f"[green]✓[/green] Backup at {escape(str(report.backup_path))}")
        for name, present in report.components.items():
            mark = "[green]✓[/green]" if present else "[yellow]missing[/yellow]"
            console.print(f"    {name.capitalize()}: {mark}")
    else:
        console.print("[yellow]⚠ Backup not found[/yellow]")

    console.print("\n[bold]Assistant Integration[/bold]")
    for kind, expected in report.expected.items():
        installed = report.installed[kind]
        style = "green" if installed == expected and expected else "yellow"
        console.print(f"[{style}]{kind.capitalize()}: {installed}/{expected} installed[/{style}]")

    if report.is_installed:
        console.print(f"\n[green]✓ {escape(config.plugin_name)} is installed[/green]")
    else:
        console.print(f"\n[red]✗ {escape(config.plugin_name)} is not installed[/red]")
        console.print("Run: promptkit install")
