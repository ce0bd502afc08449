"""Slash command loader."""

from pathlib import Path
from typing import TYPE_CHECKING

from promptkit.core.component_def import CommandDef, build_component
from promptkit.utils.def_loader import (
    InvalidDefError,
    discover_files,
    load_definition,
    parse_frontmatter,
    safe_join,
)

if TYPE_CHECKING:
    from promptkit.utils.config import Config


MODE_NAMESPACE = "mode"


def split_command_id(command_id: str) -> tuple[str, str]:
    """
    Split a command reference into (namespace, name).

    Accepts "/dev:fix", "dev:fix" and "dev/fix".

    Raises:
        InvalidDefError: Reference has no namespace or name
    """
    raw = command_id.strip().lstrip("/")
    separator = ":" if ":" in raw else "/"
    namespace, _, name = raw.partition(separator)
    if name.endswith(".md"):
        name = name[:-3]
    if not namespace or not name:
        raise InvalidDefError(
            "command", command_id, "expected a /namespace:name reference"
        )
    return namespace, name


def format_command_id(namespace: str, name: str) -> str:
    return f"/{namespace}:{name}"


class CommandLoader:
    """Loads slash commands from commands/<namespace>/<name>.md and modes/<name>.md."""

    @staticmethod
    def from_config(config: "Config") -> "CommandLoader":
        return CommandLoader(config.plugin_path)

    def __init__(self, plugin_path: Path):
        self.commands_path = plugin_path / "commands"
        self.modes_path = plugin_path / "modes"

    def resolve_path(self, command_id: str) -> Path:
        """
        Map a command reference to its markdown file.

        Mode commands fall back to modes/<name>.md when there is no
        commands/mode/<name>.md.
        """
        namespace, name = split_command_id(command_id)
        path = safe_join(self.commands_path, namespace, f"{name}.md")
        if namespace == MODE_NAMESPACE and not path.exists():
            path = safe_join(self.modes_path, f"{name}.md")
        return path

    def load(self, command_id: str) -> CommandDef:
        """
        Load command by reference.

        Args:
            command_id: Command reference, e.g. "/dev:fix"

        Returns:
            CommandDef with frontmatter metadata and body

        Raises:
            DefNotFoundError: Command file doesn't exist
            InvalidDefError: Command file is malformed
            UnsafePathError: Reference escapes the plugin directory
        """
        namespace, name = split_command_id(command_id)
        def_id = format_command_id(namespace, name)
        return load_definition(
            "command", def_id, self.resolve_path(command_id), self._parse_command
        )

    def discover(
        self, errors: list[tuple[Path, Exception]] | None = None
    ) -> list[CommandDef]:
        """Scan commands (and modes, if present) and return all valid commands."""
        commands = discover_files(
            self.commands_path, "*/*.md", self._parse_command, errors
        )
        if self.modes_path.exists():
            commands.extend(
                discover_files(self.modes_path, "*.md", self._parse_mode, errors)
            )
        return commands

    def _parse_mode(self, def_file: Path, content: str) -> CommandDef | None:
        """Parse modes/<name>.md unless commands/mode/<name>.md shadows it."""
        if (self.commands_path / MODE_NAMESPACE / def_file.name).is_file():
            return None
        return self._parse_command(def_file, content)

    def _parse_command(self, def_file: Path, content: str) -> CommandDef:
        """Parse a command file (callback for discover_files/load_definition)."""
        if def_file.parent == self.modes_path:
            namespace = MODE_NAMESPACE
        else:
            namespace = def_file.parent.name
        return self.parse_file(def_file, content, namespace)

    @staticmethod
    def parse_file(
        def_file: Path, content: str, namespace: str | None = None
    ) -> CommandDef:
        """
        Parse any markdown file as a command.

        The namespace defaults to the parent directory name.
        """
        frontmatter, body = parse_frontmatter(content)
        namespace = namespace or def_file.parent.name or "local"
        name = def_file.stem
        return build_component(
            CommandDef,
            frontmatter,
            id=format_command_id(namespace, name),
            namespace=namespace,
            name=frontmatter.get("name") or name,
            path=def_file,
            body=body.strip(),
        )

    @staticmethod
    def load_file(def_file: Path) -> CommandDef:
        """
        Load an arbitrary markdown template by path.

        Raises:
            DefNotFoundError: File doesn't exist
            InvalidDefError: File is malformed
        """
        return load_definition(
            "template", str(def_file), def_file, CommandLoader.parse_file
        )
