"""Catalog CLI commands: list, show, graph, docs."""

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from promptkit.core.catalog import KINDS, Catalog
from promptkit.core.component_def import CommandDef, ComponentDef
from promptkit.core.docs import write_docs
from promptkit.core.graph import GraphNode, build_dependency_graph
from promptkit.utils.def_loader import DefNotFoundError, InvalidDefError, UnsafePathError

console = Console()
err_console = Console(stderr=True)

TITLES = {
    "command": "Commands",
    "agent": "Agents",
    "skill": "Skills",
    "workflow": "Workflows",
}


def _check_kind(kind: str) -> str:
    kind = kind.lower().rstrip("s")
    if kind not in KINDS:
        err_console.print(
            f"[red]Unknown component kind: {escape(kind)}[/red] "
            f"(expected one of: {', '.join(KINDS)})"
        )
        raise typer.Exit(1)
    return kind


def list_command(ctx: typer.Context, kind: str | None) -> None:
    """List components, grouped by kind."""
    catalog = Catalog.from_config(ctx.obj["config"])
    kinds = [_check_kind(kind)] if kind and kind != "all" else list(KINDS)

    if not catalog.plugin_path.exists():
        err_console.print(
            f"[red]Plugin directory not found: {escape(str(catalog.plugin_path))}[/red]"
        )
        raise typer.Exit(1)

    components = catalog.discover_all()
    for name in kinds:
        items = components[name]
        table = Table(title=f"{TITLES[name]} ({len(items)})", title_justify="left")
        table.add_column("ID", style="cyan", no_wrap=True)
        table.add_column("Description")
        if name == "command":
            table.add_column("Arguments", style="green")
        for component in items:
            row = [component.id, component.description]
            if isinstance(component, CommandDef):
                row.append(component.argument_hint or "")
            table.add_row(*(escape(cell) for cell in row))
        console.print(table)


def _load(catalog: Catalog, kind: str, component_id: str) -> ComponentDef:
    try:
        return catalog.get(kind, component_id)
    except (DefNotFoundError, InvalidDefError, UnsafePathError) as e:
        err_console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)


def show_command(ctx: typer.Context, kind: str, component_id: str) -> None:
    """Print a component's metadata followed by its body."""
    catalog = Catalog.from_config(ctx.obj["config"])
    component = _load(catalog, _check_kind(kind), component_id)

    console.print(
        f"[bold cyan]{component.kind.capitalize()}: {escape(component.id)}[/bold cyan]"
    )
    console.print(f"Name: {escape(component.name)}")
    if component.description:
        console.print(f"Description: {escape(component.description)}")
    console.print(f"File: {escape(str(component.path))}")

    for target_kind, targets in component.references().items():
        if targets:
            console.print(f"{target_kind.capitalize()} references: {escape(', '.join(targets))}")

    if isinstance(component, CommandDef):
        if component.argument_hint:
            console.print(f"Usage: {escape(component.id)} {escape(component.argument_hint)}")
        if component.allowed_tools:
            console.print(f"Allowed tools: {escape(', '.join(component.allowed_tools))}")
        if component.testing is not None:
            console.print(
                f"Testing: default={component.testing.default} "
                f"configurable={component.testing.configurable}"
            )

    console.print()
    console.print(component.body, markup=False, highlight=False, soft_wrap=True)


def _add_edges(tree: Tree, label: str, edges: dict[str, list[str]]) -> None:
    for kind, targets in edges.items():
        if not targets:
            continue
        branch = tree.add(f"[bold]{label} {TITLES.get(kind, kind)} ({len(targets)})[/bold]")
        for target in targets:
            branch.add(escape(target))


def _node_tree(node: GraphNode) -> Tree:
    tree = Tree(f"[bold cyan]{node.kind}: {escape(node.id)}[/bold cyan]")
    if node.description:
        tree.add(escape(node.description))
    _add_edges(tree, "Depends on", node.depends_on)
    _add_edges(tree, "Used by", node.used_by)
    if node.dangling:
        branch = tree.add("[bold red]Unresolved[/bold red]")
        for kind, target in node.dangling:
            branch.add(f"[red]{kind}: {escape(target)}[/red]")
    return tree


def graph_command(ctx: typer.Context, component_id: str | None) -> None:
    """Print graph statistics, or the tree for one component."""
    catalog = Catalog.from_config(ctx.obj["config"])
    graph = build_dependency_graph(catalog.discover_all())

    if component_id is None:
        stats = graph.stats()
        table = Table(title="Dependency Graph", title_justify="left")
        table.add_column("Metric")
        table.add_column("Count", justify="right")
        for kind in KINDS:
            table.add_row(TITLES[kind], str(stats.counts.get(kind, 0)))
        table.add_row("Skill refs", str(stats.skill_refs))
        table.add_row("Command refs", str(stats.command_refs))
        table.add_row("Agent refs", str(stats.agent_refs))
        console.print(table)
        return

    nodes = graph.find(component_id)
    if not nodes and not component_id.startswith("/"):
        nodes = graph.find(f"/{component_id}")
    if not nodes:
        err_console.print(f"[red]Component not found: {escape(component_id)}[/red]")
        raise typer.Exit(1)

    for node in nodes:
        console.print(_node_tree(node))


def docs_command(ctx: typer.Context, output_dir: Path) -> None:
    """Write the markdown reference files."""
    config = ctx.obj["config"]
    catalog = Catalog.from_config(config)
    if not output_dir.is_absolute():
        output_dir = config.workspace / output_dir

    try:
        written = write_docs(catalog.discover_all(), output_dir)
    except OSError as e:
        err_console.print(f"[red]Cannot write docs: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    for path in written:
        console.print(f"[green]Wrote {escape(str(path))}[/green]")
