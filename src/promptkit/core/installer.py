"""Install a plugin tree into the assistant's configuration directory."""

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from promptkit.utils.config import Config

logger = logging.getLogger(__name__)


class InstallError(Exception):
    """Installation could not be performed."""


@dataclass
class InstallLayout:
    """Where each component kind lands under claude_home."""

    claude_home: Path
    plugin_name: str

    @property
    def backup_path(self) -> Path:
        return self.claude_home / "plugins" / self.plugin_name

    @property
    def commands_path(self) -> Path:
        return self.claude_home / "commands"

    @property
    def skills_path(self) -> Path:
        return self.claude_home / "skills"

    @property
    def agents_path(self) -> Path:
        return self.claude_home / "agents"


@dataclass
class InstalledFiles:
    """Destination names computed from a plugin tree."""

    commands: list[str] = field(default_factory=list)
    modes: list[str] = field(default_factory=list)
    skills: list[str] = field(default_factory=list)
    agents: list[str] = field(default_factory=list)


@dataclass
class InstallResult:
    backup_path: Path
    counts: dict[str, int]


@dataclass
class UninstallResult:
    backup_removed: bool
    counts: dict[str, int]


@dataclass
class DoctorReport:
    backup_path: Path
    backup_installed: bool
    components: dict[str, bool]
    installed: dict[str, int]
    expected: dict[str, int]

    @property
    def is_installed(self) -> bool:
        return any(self.installed.values())


def _subdirs(path: Path) -> list[Path]:
    if not path.is_dir():
        return []
    return sorted(p for p in path.iterdir() if p.is_dir())


def _markdown_files(path: Path) -> list[Path]:
    if not path.is_dir():
        return []
    return sorted(p for p in path.glob("*.md") if p.is_file())


def plan_files(plugin_path: Path) -> InstalledFiles:
    """
    Compute the flattened destination names for a plugin tree.

    commands/<ns>/<name>.md -> commands/<ns>:<name>.md
    modes/<name>.md -> commands/mode:<name>.md
    skills/<category>/<name>/ -> skills/<category>-<name>/
    agents/<name>.md -> agents/<name>.md
    """
    files = InstalledFiles()
    for namespace in _subdirs(plugin_path / "commands"):
        for command in _markdown_files(namespace):
            files.commands.append(f"{namespace.name}:{command.name}")
    for mode in _markdown_files(plugin_path / "modes"):
        files.modes.append(f"mode:{mode.name}")
    for category in _subdirs(plugin_path / "skills"):
        for skill in _subdirs(category):
            files.skills.append(f"{category.name}-{skill.name}")
    for agent in _markdown_files(plugin_path / "agents"):
        files.agents.append(agent.name)
    return files


class Installer:
    """Copies a plugin tree into claude_home and removes it again."""

    @staticmethod
    def from_config(config: "Config") -> "Installer":
        return Installer(
            config.plugin_path,
            InstallLayout(config.claude_home, config.plugin_name),
        )

    def __init__(self, plugin_path: Path, layout: InstallLayout):
        self.plugin_path = plugin_path
        self.layout = layout

    def install(self) -> InstallResult:
        """
        Install the plugin.

        Copies the whole tree to the backup location, then flattens commands,
        modes, skills and agents into the assistant's directories. Existing
        files with the same names are overwritten.

        Raises:
            InstallError: Plugin source doesn't exist or copying failed
        """
        if not self.plugin_path.is_dir():
            raise InstallError(f"Plugin source not found: {self.plugin_path}")

        layout = self.layout
        counts = {"commands": 0, "modes": 0, "skills": 0, "agents": 0}

        try:
            logger.info(f"Copying plugin to {layout.backup_path}")
            if layout.backup_path.exists():
                shutil.rmtree(layout.backup_path)
            shutil.copytree(self.plugin_path, layout.backup_path)

            for namespace in _subdirs(self.plugin_path / "commands"):
                for command in _markdown_files(namespace):
                    self._copy_file(
                        command, layout.commands_path / f"{namespace.name}:{command.name}"
                    )
                    counts["commands"] += 1

            for mode in _markdown_files(self.plugin_path / "modes"):
                self._copy_file(mode, layout.commands_path / f"mode:{mode.name}")
                counts["modes"] += 1

            for category in _subdirs(self.plugin_path / "skills"):
                for skill in _subdirs(category):
                    dest = layout.skills_path / f"{category.name}-{skill.name}"
                    if dest.exists():
                        shutil.rmtree(dest)
                    shutil.copytree(skill, dest)
                    counts["skills"] += 1

            for agent in _markdown_files(self.plugin_path / "agents"):
                self._copy_file(agent, layout.agents_path / agent.name)
                counts["agents"] += 1
        except OSError as e:
            raise InstallError(f"Installation failed: {e}") from e

        logger.info(f"Installed {counts} into {layout.claude_home}")
        return InstallResult(backup_path=layout.backup_path, counts=counts)

    def uninstall(self) -> UninstallResult:
        """
        Remove everything a previous install() put in place.

        The file list is derived from the backup copy, so files that belong
        to other plugins are left alone.

        Raises:
            InstallError: A file or directory could not be removed
        """
        layout = self.layout
        counts = {"commands": 0, "modes": 0, "skills": 0, "agents": 0}

        if not layout.backup_path.exists():
            logger.info(f"No backup at {layout.backup_path}, nothing to uninstall")
            return UninstallResult(backup_removed=False, counts=counts)

        files = plan_files(layout.backup_path)
        targets = {
            "commands": [layout.commands_path / name for name in files.commands],
            "modes": [layout.commands_path / name for name in files.modes],
            "skills": [layout.skills_path / name for name in files.skills],
            "agents": [layout.agents_path / name for name in files.agents],
        }
        try:
            for kind, paths in targets.items():
                for path in paths:
                    if path.is_dir():
                        shutil.rmtree(path)
                    elif path.exists():
                        path.unlink()
                    else:
                        continue
                    counts[kind] += 1

            shutil.rmtree(layout.backup_path)
        except OSError as e:
            raise InstallError(f"Uninstall failed: {e}") from e

        logger.info(f"Uninstalled {counts} from {layout.claude_home}")
        return UninstallResult(backup_removed=True, counts=counts)

    def doctor(self) -> DoctorReport:
        """Check how much of this plugin is present in claude_home."""
        layout = self.layout
        source = self.plugin_path if self.plugin_path.is_dir() else layout.backup_path
        files = plan_files(source)

        expected = {
            "commands": len(files.commands) + len(files.modes),
            "skills": len(files.skills),
            "agents": len(files.agents),
        }
        installed = {
            "commands": sum(
                (layout.commands_path / name).exists()
                for name in files.commands + files.modes
            ),
            "skills": sum((layout.skills_path / name).is_dir() for name in files.skills),
            "agents": sum((layout.agents_path / name).exists() for name in files.agents),
        }
        components = {
            name: (layout.backup_path / name).exists()
            for name in ("commands", "agents", "skills", "modes")
        }

        return DoctorReport(
            backup_path=layout.backup_path,
            backup_installed=layout.backup_path.exists(),
            components=components,
            installed=installed,
            expected=expected,
        )

    @staticmethod
    def _copy_file(src: Path, dest: Path) -> None:
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(src, dest)
