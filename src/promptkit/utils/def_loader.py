"""Shared utilities for loading definition files (commands, agents, skills, workflows)."""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, TypeVar

import yaml

if TYPE_CHECKING:
    from promptkit.utils.config import Config

T = TypeVar("T")
logger = logging.getLogger(__name__)

FRONTMATTER_DELIMITER = "---"


class DefNotFoundError(Exception):
    """Definition file doesn't exist."""

    def __init__(self, kind: str, def_id: str):
        super().__init__(f"{kind.capitalize()} not found: {def_id}")
        self.kind = kind
        self.def_id = def_id


class InvalidDefError(Exception):
    """Definition file is malformed."""

    def __init__(self, kind: str, def_id: str, reason: str):
        super().__init__(f"Invalid {kind} '{def_id}': {reason}")
        self.kind = kind
        self.def_id = def_id
        self.reason = reason


class UnsafePathError(ValueError):
    """Identifier would resolve outside of its base directory."""

    def __init__(self, value: str):
        super().__init__(f"Unsafe path: {value!r}")
        self.value = value


def get_template_variables(config: "Config") -> dict[str, str]:
    """
    Get template variables from config for definition body substitution.

    User-defined variables override the built-in path variables.

    Args:
        config: Config object with workspace and path settings

    Returns:
        Dict of variable names to strings
    """
    variables = {
        "workspace": str(config.workspace),
        "plugin_path": str(config.plugin_path),
        "claude_home": str(config.claude_home),
    }
    variables.update(config.variables)
    return variables


def substitute_template(body: str, variables: dict[str, str]) -> str:
    """
    Replace {{variable}} placeholders in template body.

    Args:
        body: Template string with {{variable}} placeholders
        variables: Dict of variable names to values

    Returns:
        Body with all matching placeholders replaced
    """
    result = body
    # Sort by key length descending to handle overlapping names correctly
    for key in sorted(variables.keys(), key=len, reverse=True):
        value = variables[key]
        result = result.replace(f"{{{{{key}}}}}", value)
    return result


def split_frontmatter(content: str) -> tuple[str | None, str]:
    """
    Split raw file content into frontmatter text and body.

    Returns:
        (frontmatter_text, body). frontmatter_text is None when the file has
        no delimited frontmatter block.
    """
    content = content.replace("\r\n", "\n")
    lines = content.split("\n")
    if not lines or lines[0].rstrip() != FRONTMATTER_DELIMITER:
        return None, content

    for index in range(1, len(lines)):
        if lines[index].rstrip() == FRONTMATTER_DELIMITER:
            frontmatter_text = "\n".join(lines[1:index])
            body = "\n".join(lines[index + 1 :])
            return frontmatter_text, body

    return None, content


def parse_frontmatter(content: str) -> tuple[dict[str, Any], str]:
    """
    Parse YAML frontmatter + markdown body.

    Args:
        content: Raw file content

    Returns:
        Tuple of (frontmatter dict, body string)

    Raises:
        yaml.YAMLError: Frontmatter is not valid YAML
        ValueError: Frontmatter is valid YAML but not a mapping
    """
    frontmatter_text, body = split_frontmatter(content)
    if frontmatter_text is None:
        return {}, body

    raw = yaml.safe_load(frontmatter_text)
    if raw is None:
        return {}, body
    if not isinstance(raw, dict):
        raise ValueError(
            f"frontmatter must be a mapping, got {type(raw).__name__}"
        )
    return raw, body


def parse_definition(
    content: str,
    def_id: str,
    parse_fn: Callable[[str, dict[str, Any], str], T],
) -> T:
    """
    Parse YAML frontmatter + markdown body with type conversion.

    Args:
        content: Raw file content
        def_id: Definition ID (passed to parse_fn for context)
        parse_fn: Callback(def_id, frontmatter, body) -> typed object

    Returns:
        The typed object returned by parse_fn

    Raises:
        Whatever parse_fn raises (e.g., ValidationError)
    """
    frontmatter, body = parse_frontmatter(content)
    return parse_fn(def_id, frontmatter, body)


def load_definition(
    kind: str,
    def_id: str,
    def_file: Path,
    parse_fn: Callable[[Path, str], T],
) -> T:
    """
    Read and parse a single definition file.

    Args:
        kind: Component kind, used in error messages
        def_id: Definition ID, used in error messages
        def_file: File to read
        parse_fn: Callback(file_path, content) -> typed object

    Raises:
        DefNotFoundError: File doesn't exist
        InvalidDefError: File is malformed
    """
    if not def_file.is_file():
        raise DefNotFoundError(kind, def_id)

    try:
        content = def_file.read_text(encoding="utf-8")
        return parse_fn(def_file, content)
    except InvalidDefError:
        raise
    except Exception as e:
        raise InvalidDefError(kind, def_id, str(e))


def split_qualified_id(kind: str, def_id: str) -> tuple[str, str]:
    """
    Split a "category/name" identifier.

    Raises:
        InvalidDefError: Identifier is not of the form category/name
    """
    category, _, name = def_id.strip().strip("/").partition("/")
    if not category or not name:
        raise InvalidDefError(kind, def_id, "expected a category/name reference")
    return category, name


def safe_join(base: Path, *parts: str) -> Path:
    """
    Join path parts under base, refusing anything that escapes it.

    Raises:
        UnsafePathError: A part is absolute, contains '..' or a NUL byte
    """
    for part in parts:
        if not part or "\x00" in part or ".." in part.split("/"):
            raise UnsafePathError(part)
        if part.startswith(("/", "\\")) or Path(part).is_absolute():
            raise UnsafePathError(part)

    candidate = base.joinpath(*parts)
    resolved_base = base.resolve()
    resolved = candidate.resolve()
    if resolved != resolved_base and resolved_base not in resolved.parents:
        raise UnsafePathError("/".join(parts))
    return candidate


def discover_files(
    path: Path,
    pattern: str,
    parse_fn: Callable[[Path, str], T | None],
    errors: list[tuple[Path, Exception]] | None = None,
) -> list[T]:
    """
    Scan a directory for definition files matching a glob pattern.

    Args:
        path: Directory to scan
        pattern: Glob relative to path (e.g., "*/*.md", "*/*/SKILL.md")
        parse_fn: Callback(file_path, content) -> typed object or None
        errors: Optional list collecting (file, exception) for skipped files

    Returns:
        List of objects from successful parses, ordered by file path
    """
    if not path.exists():
        logger.warning(f"Definitions directory not found: {path}")
        return []

    results = []
    for def_file in sorted(path.glob(pattern)):
        if not def_file.is_file():
            continue

        try:
            content = def_file.read_text(encoding="utf-8")
            result = parse_fn(def_file, content)
            if result is not None:
                results.append(result)
        except Exception as e:
            logger.warning(f"Failed to parse {def_file.relative_to(path)}: {e}")
            if errors is not None:
                errors.append((def_file, e))
            continue

    return results


def write_definition(
    def_file: Path,
    frontmatter: dict[str, Any],
    body: str,
) -> Path:
    """
    Write a definition file with YAML frontmatter and markdown body.

    Args:
        def_file: File to write
        frontmatter: Dict of YAML frontmatter fields
        body: Markdown body content

    Returns:
        Path to the written file
    """
    def_file.parent.mkdir(parents=True, exist_ok=True)

    # Build file content with YAML frontmatter
    yaml_content = yaml.dump(
        frontmatter, default_flow_style=False, sort_keys=False, allow_unicode=True
    )
    content = f"---\n{yaml_content}---\n\n{body.strip()}\n"

    def_file.write_text(content, encoding="utf-8")

    return def_file
