"""Tests for prompt rendering."""

from pathlib import Path

import pytest

from promptkit.core.component_def import CommandDef
from promptkit.core.renderer import (
    frontmatter_block,
    join_arguments,
    render_command,
    substitute_arguments,
)


def make_command(body: str, frontmatter: dict | None = None) -> CommandDef:
    return CommandDef(
        id="/dev:fix",
        name="fix",
        namespace="dev",
        path=Path("fix.md"),
        body=body,
        frontmatter=frontmatter or {},
    )


class TestJoinArguments:
    def test_none(self):
        assert join_arguments(None) == ""

    def test_words(self):
        assert join_arguments(["login", "bug", ""]) == "login bug"

    def test_string_is_stripped(self):
        assert join_arguments("  login bug ") == "login bug"


class TestSubstituteArguments:
    def test_every_occurrence_replaced(self):
        body = "Task: $ARGUMENTS\n\nAgain: $ARGUMENTS"

        assert substitute_arguments(body, "fix login") == "Task: fix login\n\nAgain: fix login"

    def test_positional(self):
        assert substitute_arguments("from $1 to $2", "a b") == "from a to b"

    def test_missing_positional_is_empty(self):
        assert substitute_arguments("[$1][$3]", "only") == "[only][]"

    def test_argument_value_not_rescanned(self):
        """A $1 inside the argument text is left as typed."""
        assert substitute_arguments("$ARGUMENTS / $1", "cost $1") == "cost $1 / cost"

    def test_dollar_amounts_untouched(self):
        assert substitute_arguments("pay $10 for $1", "x") == "pay $10 for x"


class TestRenderCommand:
    def test_substitutes_arguments(self):
        rendered = render_command(make_command("# Fix\n\nFix: $ARGUMENTS"), ["login", "bug"])

        assert rendered.text == "# Fix\n\nFix: login bug\n"
        assert rendered.arguments == "login bug"
        assert rendered.arguments_consumed is True

    def test_placeholder_with_no_arguments_becomes_empty(self):
        rendered = render_command(make_command("Fix: $ARGUMENTS"))

        assert rendered.text == "Fix:\n"

    def test_arguments_appended_when_no_placeholder(self):
        rendered = render_command(make_command("# Review\n\nReview the code."), "src/app.py")

        assert rendered.text == "# Review\n\nReview the code.\n\nARGUMENTS: src/app.py\n"
        assert rendered.arguments_consumed is False

    def test_no_arguments_and_no_placeholder(self):
        rendered = render_command(make_command("# Review"))

        assert rendered.text == "# Review\n"

    def test_template_variables_applied_first(self):
        rendered = render_command(
            make_command("Root: {{workspace}}\n$ARGUMENTS"),
            "go",
            variables={"workspace": "/repo"},
        )

        assert rendered.text == "Root: /repo\ngo\n"

    def test_variable_may_introduce_placeholder(self):
        rendered = render_command(
            make_command("{{task}}"), "now", variables={"task": "Do $ARGUMENTS"}
        )

        assert rendered.text == "Do now\n"

    def test_include_frontmatter(self):
        command = make_command("Body", {"description": "Fix a bug"})

        rendered = render_command(command, include_frontmatter=True)

        assert rendered.text == "---\ndescription: Fix a bug\n---\n\nBody\n"

    def test_include_frontmatter_without_frontmatter(self):
        rendered = render_command(make_command("Body"), include_frontmatter=True)

        assert rendered.text == "Body\n"


@pytest.mark.parametrize("frontmatter,expected", [({}, ""), ({"a": 1}, "---\na: 1\n---\n")])
def test_frontmatter_block(frontmatter, expected):
    assert frontmatter_block(make_command("", frontmatter)) == expected
