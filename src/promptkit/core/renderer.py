"""Prompt rendering: argument and template-variable substitution."""

import logging
import re
from dataclasses import dataclass

import yaml

from promptkit.core.component_def import ARGUMENT_PLACEHOLDER, CommandDef
from promptkit.utils.def_loader import substitute_template

logger = logging.getLogger(__name__)

ARGUMENTS_TOKEN = "$ARGUMENTS"
POSITIONAL_TOKEN = re.compile(r"\$([1-9])(?![0-9])")


@dataclass
class RenderedPrompt:
    """Result of rendering a command template."""

    command: CommandDef
    text: str
    arguments: str
    arguments_consumed: bool


def join_arguments(arguments: str | list[str] | tuple[str, ...] | None) -> str:
    """Join CLI words into the single argument string."""
    if arguments is None:
        return ""
    if isinstance(arguments, str):
        return arguments.strip()
    return " ".join(word for word in arguments if word).strip()


def substitute_arguments(body: str, arguments: str) -> str:
    """
    Replace $ARGUMENTS and positional $1..$9 placeholders.

    $ARGUMENTS is replaced first so its value is never rescanned for
    positional tokens. Missing positional words become empty strings.
    """
    words = arguments.split()
    parts = body.split(ARGUMENTS_TOKEN)

    def positional(match: re.Match[str]) -> str:
        index = int(match.group(1)) - 1
        return words[index] if index < len(words) else ""

    substituted = [POSITIONAL_TOKEN.sub(positional, part) for part in parts]
    return arguments.join(substituted)


def render_command(
    command: CommandDef,
    arguments: str | list[str] | None = None,
    variables: dict[str, str] | None = None,
    include_frontmatter: bool = False,
) -> RenderedPrompt:
    """
    Render a command body into a prompt.

    Args:
        command: Loaded command definition
        arguments: User-supplied argument text (or list of words)
        variables: {{variable}} substitutions
        include_frontmatter: Prefix the output with the command's frontmatter

    Returns:
        RenderedPrompt. When the template has no argument placeholder but
        arguments were given, they are appended as an ARGUMENTS paragraph.
    """
    argument_text = join_arguments(arguments)
    text = substitute_template(command.body, variables or {})

    consumed = bool(ARGUMENT_PLACEHOLDER.search(text))
    if consumed:
        text = substitute_arguments(text, argument_text)
    elif argument_text:
        logger.debug(f"{command.id} has no argument placeholder, appending arguments")
        text = f"{text}\n\nARGUMENTS: {argument_text}"

    if include_frontmatter and command.frontmatter:
        text = f"{frontmatter_block(command)}\n{text}"

    return RenderedPrompt(
        command=command,
        text=text.rstrip() + "\n",
        arguments=argument_text,
        arguments_consumed=consumed,
    )


def frontmatter_block(command: CommandDef) -> str:
    """Return the command's frontmatter as a delimited YAML block."""
    if not command.frontmatter:
        return ""
    dumped = yaml.dump(
        command.frontmatter,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )
    return f"---\n{dumped}---\n"
