"""Component definition models."""

import re
from pathlib import Path
from typing import Any, ClassVar, Literal, TypeVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

ComponentKind = Literal["command", "agent", "skill", "workflow"]

ARGUMENT_PLACEHOLDER = re.compile(r"\$(?:ARGUMENTS|[1-9](?![0-9]))")

ID_FORMATS: dict[str, re.Pattern[str]] = {
    "skill": re.compile(r"^[a-z][a-z0-9-]*/[a-z0-9][a-z0-9-]*$"),
    "workflow": re.compile(r"^[a-z][a-z0-9-]*/[a-z0-9][a-z0-9-]*$"),
    "command": re.compile(r"^/[a-z][a-z0-9-]*:[a-z0-9][a-z0-9-]*$"),
    "agent": re.compile(r"^[a-z][a-z0-9-]*$"),
    "mcp": re.compile(r"^[a-z][a-z0-9-]*$"),
}


def is_valid_id(kind: str, value: Any) -> bool:
    """Check a reference against the identifier format for its kind."""
    return isinstance(value, str) and bool(ID_FORMATS[kind].match(value))


def normalize_keys(frontmatter: dict[str, Any]) -> dict[str, Any]:
    """Map kebab-case frontmatter keys (allowed-tools) to snake_case."""
    return {str(key).replace("-", "_"): value for key, value in frontmatter.items()}


def _as_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    if isinstance(value, (list, tuple)):
        return [str(item).strip() for item in value if str(item).strip()]
    raise ValueError(f"expected a list or comma separated string, got {type(value).__name__}")


class TestingDefaults(BaseModel):
    """Default testing behaviour advertised by a command."""

    __test__ = False

    model_config = ConfigDict(extra="forbid")

    # some templates spell the default "enabled"
    default: bool = Field(default=False, validation_alias=AliasChoices("default", "enabled"))
    configurable: bool = True


class ComponentDef(BaseModel):
    """Fields shared by every markdown component."""

    kind: ClassVar[ComponentKind]

    id: str
    name: str
    description: str = ""
    tags: list[str] = Field(default_factory=list)
    path: Path
    body: str
    frontmatter: dict[str, Any] = Field(default_factory=dict)

    @field_validator("tags", mode="before")
    @classmethod
    def coerce_tags(cls, v: Any) -> list[str]:
        return _as_list(v)

    @field_validator("description", mode="before")
    @classmethod
    def empty_description(cls, v: Any) -> Any:
        return "" if v is None else v

    @property
    def takes_arguments(self) -> bool:
        """True when the body contains $ARGUMENTS or a positional $1..$9."""
        return bool(ARGUMENT_PLACEHOLDER.search(self.body))

    def references(self) -> dict[str, list[str]]:
        """Forward references to other components, keyed by target kind."""
        return {}


class CommandDef(ComponentDef):
    """Slash command prompt template."""

    kind: ClassVar[ComponentKind] = "command"

    namespace: str
    allowed_tools: list[str] = Field(default_factory=list)
    argument_hint: str | None = None
    related_skills: list[str] = Field(default_factory=list)
    related_commands: list[str] = Field(default_factory=list)
    testing: TestingDefaults | None = None
    category: str | None = None

    @field_validator(
        "allowed_tools", "related_skills", "related_commands", mode="before"
    )
    @classmethod
    def coerce_lists(cls, v: Any) -> list[str]:
        return _as_list(v)

    @property
    def command_name(self) -> str:
        """Name as typed in the assistant, e.g. dev:fix."""
        return self.id.lstrip("/")

    def references(self) -> dict[str, list[str]]:
        return {"skill": self.related_skills, "command": self.related_commands}


class AgentDef(ComponentDef):
    """Agent persona description."""

    kind: ClassVar[ComponentKind] = "agent"

    tools: list[str] = Field(default_factory=list)
    model: str | None = None
    skills: list[str] = Field(default_factory=list)
    commands: list[str] = Field(default_factory=list)
    mcps: list[str] = Field(default_factory=list)

    @field_validator("tools", "skills", "commands", "mcps", mode="before")
    @classmethod
    def coerce_lists(cls, v: Any) -> list[str]:
        return _as_list(v)

    def references(self) -> dict[str, list[str]]:
        return {"skill": self.skills, "command": self.commands}


class SkillDef(ComponentDef):
    """Skill reference document."""

    kind: ClassVar[ComponentKind] = "skill"

    category: str
    commands: list[str] = Field(default_factory=list)
    mcps: list[str] = Field(default_factory=list)

    @field_validator("commands", "mcps", mode="before")
    @classmethod
    def coerce_lists(cls, v: Any) -> list[str]:
        return _as_list(v)

    def references(self) -> dict[str, list[str]]:
        return {"command": self.commands}


class WorkflowDef(ComponentDef):
    """Multi-step workflow playbook."""

    kind: ClassVar[ComponentKind] = "workflow"

    category: str
    agents: list[str] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    commands: list[str] = Field(default_factory=list)
    mcps: list[str] = Field(default_factory=list)

    @field_validator("agents", "skills", "commands", "mcps", mode="before")
    @classmethod
    def coerce_lists(cls, v: Any) -> list[str]:
        return _as_list(v)

    def references(self) -> dict[str, list[str]]:
        return {"agent": self.agents, "skill": self.skills, "command": self.commands}


C = TypeVar("C", bound=ComponentDef)


def build_component(
    model: type[C],
    frontmatter: dict[str, Any],
    **fields: Any,
) -> C:
    """
    Construct a component from frontmatter plus loader-derived fields.

    Known frontmatter keys become model fields; the raw mapping is kept in
    `frontmatter`. Loader-derived fields (id, path, body...) always win.
    """
    known = set(model.model_fields) - {"frontmatter"}
    data = {
        key: value
        for key, value in normalize_keys(frontmatter).items()
        if key in known
    }
    data.update(fields)
    data["frontmatter"] = frontmatter
    return model.model_validate(data)
