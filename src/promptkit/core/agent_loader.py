"""Agent definition loader."""

from pathlib import Path
from typing import TYPE_CHECKING

from promptkit.core.component_def import AgentDef, build_component
from promptkit.utils.def_loader import (
    discover_files,
    load_definition,
    parse_frontmatter,
    safe_join,
)

if TYPE_CHECKING:
    from promptkit.utils.config import Config


class AgentLoader:
    """Loads agent personas from agents/<name>.md files."""

    @staticmethod
    def from_config(config: "Config") -> "AgentLoader":
        return AgentLoader(config.plugin_path)

    def __init__(self, plugin_path: Path):
        """
        Initialize AgentLoader.

        Args:
            plugin_path: Plugin root containing the agents/ directory
        """
        self.agents_path = plugin_path / "agents"

    def load(self, agent_id: str) -> AgentDef:
        """
        Load agent by ID.

        Args:
            agent_id: Agent file name without the .md suffix

        Returns:
            AgentDef

        Raises:
            DefNotFoundError: Agent file doesn't exist
            InvalidDefError: Agent file is malformed
        """
        agent_id = agent_id.removesuffix(".md")
        agent_file = safe_join(self.agents_path, f"{agent_id}.md")
        return load_definition("agent", agent_id, agent_file, self._parse_agent_def)

    def discover(
        self, errors: list[tuple[Path, Exception]] | None = None
    ) -> list[AgentDef]:
        """Scan agents directory and return list of valid AgentDef."""
        return discover_files(
            self.agents_path, "*.md", self._parse_agent_def, errors
        )

    def _parse_agent_def(self, def_file: Path, content: str) -> AgentDef:
        """Parse agent definition (callback for discover_files/load_definition)."""
        frontmatter, body = parse_frontmatter(content)
        return build_component(
            AgentDef,
            frontmatter,
            id=def_file.stem,
            name=frontmatter.get("name") or def_file.stem,
            path=def_file,
            body=body.strip(),
        )
