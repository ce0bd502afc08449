"""Workflow playbook loader."""

from pathlib import Path
from typing import TYPE_CHECKING

from promptkit.core.component_def import WorkflowDef, build_component
from promptkit.utils.def_loader import (
    discover_files,
    load_definition,
    parse_frontmatter,
    safe_join,
    split_qualified_id,
)

if TYPE_CHECKING:
    from promptkit.utils.config import Config


class WorkflowLoader:
    """Loads workflows from workflows/<category>/<name>.md files."""

    @staticmethod
    def from_config(config: "Config") -> "WorkflowLoader":
        return WorkflowLoader(config.plugin_path)

    def __init__(self, plugin_path: Path):
        self.workflows_path = plugin_path / "workflows"

    def load(self, workflow_id: str) -> WorkflowDef:
        """
        Load workflow by ID.

        Args:
            workflow_id: "category/name"

        Raises:
            DefNotFoundError: Workflow file doesn't exist
            InvalidDefError: Workflow file is malformed
        """
        category, name = split_qualified_id("workflow", workflow_id)
        name = name.removesuffix(".md")
        workflow_file = safe_join(self.workflows_path, category, f"{name}.md")
        return load_definition(
            "workflow", f"{category}/{name}", workflow_file, self._parse_workflow
        )

    def discover(
        self, errors: list[tuple[Path, Exception]] | None = None
    ) -> list[WorkflowDef]:
        """Scan workflows directory and return list of valid WorkflowDef."""
        return discover_files(
            self.workflows_path, "*/*.md", self._parse_workflow, errors
        )

    def _parse_workflow(self, def_file: Path, content: str) -> WorkflowDef:
        frontmatter, body = parse_frontmatter(content)
        category = def_file.parent.name
        return build_component(
            WorkflowDef,
            frontmatter,
            id=f"{category}/{def_file.stem}",
            category=category,
            name=frontmatter.get("name") or def_file.stem,
            path=def_file,
            body=body.strip(),
        )
