"""Markdown reference generation."""

from itertools import groupby
from pathlib import Path

from promptkit.core.component_def import (
    AgentDef,
    CommandDef,
    ComponentDef,
    ComponentKind,
    SkillDef,
    WorkflowDef,
)


def _cell(text: str) -> str:
    """Escape a value for a markdown table cell."""
    return " ".join(text.split()).replace("|", "\\|")


def command_reference(commands: list[CommandDef]) -> str:
    """One section per namespace, one subsection per command."""
    lines = ["# Command Reference", ""]
    ordered = sorted(commands, key=lambda c: (c.namespace, c.name))
    for namespace, group in groupby(ordered, key=lambda c: c.namespace):
        lines += [f"## {namespace}", ""]
        for command in group:
            lines += [f"### `{command.id}`", ""]
            if command.description:
                lines += [command.description.strip(), ""]
            usage = command.id
            if command.argument_hint:
                usage = f"{usage} {command.argument_hint}"
            lines += ["```", usage, "```", ""]
            if command.allowed_tools:
                tools = ", ".join(f"`{tool}`" for tool in command.allowed_tools)
                lines += [f"**Allowed tools:** {tools}", ""]
            if command.related_skills:
                skills = ", ".join(f"`{skill}`" for skill in command.related_skills)
                lines += [f"**Related skills:** {skills}", ""]
            if command.related_commands:
                related = ", ".join(f"`{cmd}`" for cmd in command.related_commands)
                lines += [f"**Related commands:** {related}", ""]
            if command.testing is not None:
                state = "on" if command.testing.default else "off"
                configurable = " (configurable)" if command.testing.configurable else ""
                lines += [f"**Testing:** {state} by default{configurable}", ""]
    return "\n".join(lines).rstrip() + "\n"


def _table(title: str, components: list[ComponentDef]) -> list[str]:
    lines = [f"## {title} ({len(components)})", ""]
    if not components:
        return lines + ["_None._", ""]
    lines += ["| ID | Description |", "| --- | --- |"]
    for component in sorted(components, key=lambda c: c.id):
        lines.append(f"| `{component.id}` | {_cell(component.description)} |")
    return lines + [""]


def catalog_index(components: dict[ComponentKind, list[ComponentDef]]) -> str:
    """Summary tables of agents, skills, workflows and command counts."""
    commands = components.get("command", [])
    lines = ["# Plugin Index", ""]
    lines += [f"- Commands: {len(commands)}"]
    for kind, title in (("agent", "Agents"), ("skill", "Skills"), ("workflow", "Workflows")):
        lines.append(f"- {title}: {len(components.get(kind, []))}")
    lines.append("")
    lines += _table("Agents", [c for c in components.get("agent", []) if isinstance(c, AgentDef)])
    lines += _table("Skills", [c for c in components.get("skill", []) if isinstance(c, SkillDef)])
    lines += _table(
        "Workflows", [c for c in components.get("workflow", []) if isinstance(c, WorkflowDef)]
    )
    return "\n".join(lines).rstrip() + "\n"


def write_docs(
    components: dict[ComponentKind, list[ComponentDef]], output_dir: Path
) -> list[Path]:
    """Write commands.md and index.md into output_dir."""
    output_dir.mkdir(parents=True, exist_ok=True)
    commands = [c for c in components.get("command", []) if isinstance(c, CommandDef)]

    written = []
    for filename, content in (
        ("commands.md", command_reference(commands)),
        ("index.md", catalog_index(components)),
    ):
        path = output_dir / filename
        path.write_text(content, encoding="utf-8")
        written.append(path)
    return written
