"""Core component loading, rendering and linting."""

from .agent_loader import AgentLoader
from .catalog import Catalog
from .command_loader import CommandLoader
from .component_def import AgentDef, CommandDef, SkillDef, TestingDefaults, WorkflowDef
from .renderer import RenderedPrompt, render_command
from .skill_loader import SkillLoader
from .validator import Issue, ValidationReport, validate_plugin
from .workflow_loader import WorkflowLoader

__all__ = [
    "AgentDef",
    "AgentLoader",
    "Catalog",
    "CommandDef",
    "CommandLoader",
    "Issue",
    "RenderedPrompt",
    "SkillDef",
    "SkillLoader",
    "TestingDefaults",
    "ValidationReport",
    "WorkflowDef",
    "WorkflowLoader",
    "render_command",
    "validate_plugin",
]
