"""Catalog of every component in one plugin directory."""

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from promptkit.core.agent_loader import AgentLoader
from promptkit.core.command_loader import CommandLoader
from promptkit.core.component_def import ComponentDef, ComponentKind
from promptkit.core.skill_loader import SkillLoader
from promptkit.core.workflow_loader import WorkflowLoader

if TYPE_CHECKING:
    from promptkit.utils.config import Config

logger = logging.getLogger(__name__)

KINDS: tuple[ComponentKind, ...] = ("command", "agent", "skill", "workflow")


class Catalog:
    """Bundles the per-kind loaders for a plugin directory."""

    @staticmethod
    def from_config(config: "Config") -> "Catalog":
        return Catalog(config.plugin_path)

    def __init__(self, plugin_path: Path):
        self.plugin_path = plugin_path
        self.commands = CommandLoader(plugin_path)
        self.agents = AgentLoader(plugin_path)
        self.skills = SkillLoader(plugin_path)
        self.workflows = WorkflowLoader(plugin_path)
        self._cache: dict[ComponentKind, list[ComponentDef]] | None = None

    def loader(self, kind: str) -> CommandLoader | AgentLoader | SkillLoader | WorkflowLoader:
        loaders = {
            "command": self.commands,
            "agent": self.agents,
            "skill": self.skills,
            "workflow": self.workflows,
        }
        if kind not in loaders:
            raise ValueError(f"Unknown component kind: {kind}")
        return loaders[kind]

    def discover_all(self, refresh: bool = False) -> dict[ComponentKind, list[ComponentDef]]:
        """
        Discover every component, grouped by kind.

        Results are cached per Catalog; pass refresh=True to rescan.
        """
        if self._cache is None or refresh:
            if not self.plugin_path.exists():
                logger.warning(f"Plugin directory not found: {self.plugin_path}")
            self._cache = {
                kind: list(self.loader(kind).discover()) for kind in KINDS
            }
        return self._cache

    def get(self, kind: str, def_id: str) -> ComponentDef:
        """
        Load a single component.

        Raises:
            DefNotFoundError / InvalidDefError / UnsafePathError from the loader
        """
        return self.loader(kind).load(def_id)

    def ids(self, kind: ComponentKind) -> set[str]:
        return {component.id for component in self.discover_all()[kind]}

    def counts(self) -> dict[ComponentKind, int]:
        return {kind: len(items) for kind, items in self.discover_all().items()}
