"""Lint checks for plugin markdown files."""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

import yaml

from promptkit.core.catalog import KINDS, Catalog
from promptkit.core.component_def import (
    ARGUMENT_PLACEHOLDER,
    CommandDef,
    ComponentDef,
    ComponentKind,
    is_valid_id,
)
from promptkit.core.graph import build_dependency_graph
from promptkit.utils.def_loader import InvalidDefError, split_frontmatter

logger = logging.getLogger(__name__)

Severity = Literal["error", "warning"]

REGISTRY_FILENAME = "registry.yaml"
HEADING = re.compile(r"^# \S", re.MULTILINE)

REQUIRED_FIELDS: dict[str, tuple[str, ...]] = {
    "command": ("description",),
    "agent": ("name", "description"),
    "skill": ("name", "description"),
    "workflow": ("name", "description"),
}

# Registry entry kind -> reference kinds compared against frontmatter
REGISTRY_SECTIONS: dict[str, tuple[str, ...]] = {
    "agent": ("skill", "command"),
    "workflow": ("agent", "skill", "command"),
}


@dataclass
class Issue:
    severity: Severity
    code: str
    kind: str
    component: str
    message: str
    path: Path | None = None


@dataclass
class ValidationReport:
    issues: list[Issue] = field(default_factory=list)
    checked: dict[str, int] = field(default_factory=dict)

    @property
    def errors(self) -> list[Issue]:
        return [issue for issue in self.issues if issue.severity == "error"]

    @property
    def warnings(self) -> list[Issue]:
        return [issue for issue in self.issues if issue.severity == "warning"]

    def ok(self, strict: bool = False) -> bool:
        """No errors; in strict mode, no warnings either."""
        if self.errors:
            return False
        return not (strict and self.warnings)


class Validator:
    """Runs every lint check over a plugin directory."""

    def __init__(self, catalog: Catalog):
        self.catalog = catalog
        self.report = ValidationReport()

    def run(self) -> ValidationReport:
        self.report = ValidationReport()
        components: dict[ComponentKind, list[ComponentDef]] = {}

        for kind in KINDS:
            failures: list[tuple[Path, Exception]] = []
            components[kind] = list(self.catalog.loader(kind).discover(failures))
            for def_file, error in failures:
                if isinstance(error, InvalidDefError) and not _has_frontmatter(def_file):
                    self._add(
                        "error",
                        "missing-frontmatter",
                        kind,
                        error.def_id,
                        "no frontmatter",
                        def_file,
                    )
                    continue
                self._add(
                    "error",
                    "invalid-frontmatter",
                    kind,
                    self._relative(def_file),
                    f"cannot parse frontmatter: {_first_line(error)}",
                    def_file,
                )
            self.report.checked[kind] = len(components[kind]) + len(failures)

        for items in components.values():
            for component in items:
                self.check_component(component)

        self.check_references(components)
        self.check_registry(components)

        logger.info(
            f"Validated {sum(self.report.checked.values())} files: "
            f"{len(self.report.errors)} errors, {len(self.report.warnings)} warnings"
        )
        return self.report

    def check_component(self, component: ComponentDef) -> None:
        """Frontmatter presence, required fields and body conventions."""
        kind = component.kind
        if not component.frontmatter:
            self._issue("error", "missing-frontmatter", component, "no frontmatter")
            return

        for field_name in REQUIRED_FIELDS[kind]:
            value = component.frontmatter.get(field_name)
            if value is None or (isinstance(value, str) and not value.strip()):
                self._issue(
                    "error",
                    "missing-field",
                    component,
                    f"missing required field: {field_name}",
                )

        if isinstance(component, CommandDef):
            self._check_command_body(component)

    def _check_command_body(self, command: CommandDef) -> None:
        if not HEADING.search(command.body):
            self._issue("warning", "missing-heading", command, "body has no level-1 heading")

        uses_arguments = bool(ARGUMENT_PLACEHOLDER.search(command.body))
        if command.argument_hint and not uses_arguments:
            self._issue(
                "warning",
                "unused-argument-hint",
                command,
                "argument-hint is declared but the body has no $ARGUMENTS placeholder",
            )
        if uses_arguments and not command.argument_hint:
            self._issue(
                "warning",
                "missing-argument-hint",
                command,
                "body uses $ARGUMENTS but no argument-hint is declared",
            )

    def check_references(
        self, components: dict[ComponentKind, list[ComponentDef]]
    ) -> None:
        """Every reference must be well-formed and point at an existing component."""
        graph = build_dependency_graph(components)
        by_key = {
            (kind, component.id): component
            for kind, items in components.items()
            for component in items
        }

        for node, target_kind, target_id in graph.dangling():
            component = by_key[(node.kind, node.id)]
            if not is_valid_id(target_kind, target_id):
                self._issue(
                    "error",
                    "bad-reference",
                    component,
                    f"{target_kind} reference {target_id!r} is not a valid {target_kind} id",
                )
            else:
                self._issue(
                    "error",
                    "unknown-reference",
                    component,
                    f"references unknown {target_kind} {target_id}",
                )

        # mcps are never resolved, only format-checked
        for component in by_key.values():
            for mcp in getattr(component, "mcps", []):
                if not is_valid_id("mcp", mcp):
                    self._issue(
                        "error",
                        "bad-reference",
                        component,
                        f"mcp reference {mcp!r} is not a valid mcp id",
                    )

    def check_registry(
        self, components: dict[ComponentKind, list[ComponentDef]]
    ) -> None:
        """Compare registry.yaml (if present) with component frontmatter."""
        registry_file = self.catalog.plugin_path / REGISTRY_FILENAME
        if not registry_file.exists():
            return

        try:
            registry = yaml.safe_load(registry_file.read_text(encoding="utf-8")) or {}
            if not isinstance(registry, dict):
                raise ValueError("registry must be a mapping")
            for kind in REGISTRY_SECTIONS:
                section = registry.get(f"{kind}s")
                if section is not None and not isinstance(section, dict):
                    raise ValueError(f"{kind}s must be a mapping of id to entry")
        except (yaml.YAMLError, ValueError) as e:
            self._add(
                "error",
                "registry-invalid",
                "registry",
                REGISTRY_FILENAME,
                f"cannot parse: {_first_line(e)}",
                registry_file,
            )
            return

        for kind, compared in REGISTRY_SECTIONS.items():
            section: dict[str, Any] = registry.get(f"{kind}s") or {}
            actual = {component.id: component for component in components[kind]}

            for entry_id, entry in section.items():
                component = actual.get(entry_id)
                if component is None:
                    self._add(
                        "error",
                        "registry-orphaned",
                        kind,
                        entry_id,
                        f"{kind} is in {REGISTRY_FILENAME} but has no file",
                        registry_file,
                    )
                    continue

                if not isinstance(entry, dict):
                    entry = {}
                references = component.references()
                for ref_kind in compared:
                    expected = set(entry.get(f"{ref_kind}s") or [])
                    found = set(references.get(ref_kind, []))
                    if expected == found:
                        continue
                    details = []
                    if expected - found:
                        details.append(f"missing {sorted(expected - found)}")
                    if found - expected:
                        details.append(f"extra {sorted(found - expected)}")
                    self._issue(
                        "error",
                        "registry-mismatch",
                        component,
                        f"{ref_kind}s differ from {REGISTRY_FILENAME}: {', '.join(details)}",
                    )

        # Only agents must all be registered; workflows may be partially documented
        registered_agents = registry.get("agents") or {}
        for component in components["agent"]:
            if component.id not in registered_agents:
                self._issue(
                    "error",
                    "registry-missing",
                    component,
                    f"agent exists but is not in {REGISTRY_FILENAME}",
                )

    def _issue(
        self, severity: Severity, code: str, component: ComponentDef, message: str
    ) -> None:
        self._add(severity, code, component.kind, component.id, message, component.path)

    def _add(
        self,
        severity: Severity,
        code: str,
        kind: str,
        component: str,
        message: str,
        path: Path | None,
    ) -> None:
        self.report.issues.append(
            Issue(
                severity=severity,
                code=code,
                kind=kind,
                component=component,
                message=message,
                path=path,
            )
        )

    def _relative(self, path: Path) -> str:
        try:
            return str(path.relative_to(self.catalog.plugin_path))
        except ValueError:
            return str(path)


def _has_frontmatter(def_file: Path) -> bool:
    frontmatter_text, _ = split_frontmatter(def_file.read_text(encoding="utf-8"))
    return bool(frontmatter_text and frontmatter_text.strip())


def _first_line(error: Exception) -> str:
    return str(error).strip().splitlines()[0] if str(error).strip() else type(error).__name__


def validate_plugin(catalog: Catalog) -> ValidationReport:
    """Run all checks and return the report."""
    return Validator(catalog).run()
