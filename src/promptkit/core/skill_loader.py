"""Skill loader for discovering and loading skills."""

from pathlib import Path
from typing import TYPE_CHECKING

from promptkit.core.component_def import SkillDef, build_component
from promptkit.utils.def_loader import (
    InvalidDefError,
    discover_files,
    load_definition,
    parse_frontmatter,
    safe_join,
    split_qualified_id,
)

if TYPE_CHECKING:
    from promptkit.utils.config import Config


SKILL_FILENAME = "SKILL.md"


class SkillLoader:
    """Load skill definitions from skills/<category>/<name>/SKILL.md."""

    @staticmethod
    def from_config(config: "Config") -> "SkillLoader":
        """Create SkillLoader from config."""
        return SkillLoader(config.plugin_path)

    def __init__(self, plugin_path: Path):
        self.skills_path = plugin_path / "skills"

    def discover(
        self, errors: list[tuple[Path, Exception]] | None = None
    ) -> list[SkillDef]:
        """Scan skills directory and return list of valid SkillDef."""
        return discover_files(
            self.skills_path, f"*/*/{SKILL_FILENAME}", self._parse_skill, errors
        )

    def load(self, skill_id: str) -> SkillDef:
        """Load full skill definition by ID.

        Args:
            skill_id: "category/name"

        Returns:
            SkillDef with full content

        Raises:
            DefNotFoundError: If skill doesn't exist
            InvalidDefError: If skill is invalid (malformed, missing fields)
        """
        category, name = split_qualified_id("skill", skill_id)
        skill_file = safe_join(self.skills_path, category, name, SKILL_FILENAME)
        return load_definition(
            "skill", f"{category}/{name}", skill_file, self._parse_skill
        )

    def _parse_skill(self, def_file: Path, content: str) -> SkillDef:
        """Parse skill from SKILL.md (callback for discover_files/load_definition)."""
        frontmatter, body = parse_frontmatter(content)
        skill_dir = def_file.parent
        category = skill_dir.parent.name
        if not frontmatter:
            raise InvalidDefError(
                "skill", f"{category}/{skill_dir.name}", "no valid frontmatter"
            )

        return build_component(
            SkillDef,
            frontmatter,
            id=f"{category}/{skill_dir.name}",
            category=category,
            name=frontmatter.get("name") or skill_dir.name,
            path=def_file,
            body=body.strip(),
        )
