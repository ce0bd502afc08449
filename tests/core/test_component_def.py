"""Tests for component models and identifier formats."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from promptkit.core.component_def import (
    AgentDef,
    CommandDef,
    WorkflowDef,
    build_component,
    is_valid_id,
    normalize_keys,
)


class TestIdFormats:
    @pytest.mark.parametrize(
        "kind,value",
        [
            ("command", "/dev:fix"),
            ("command", "/mode:brainstorm"),
            ("skill", "languages/python"),
            ("skill", "frameworks/nextjs-15"),
            ("workflow", "development/bugfix"),
            ("agent", "code-reviewer"),
            ("mcp", "context7"),
        ],
    )
    def test_valid(self, kind, value):
        assert is_valid_id(kind, value)

    @pytest.mark.parametrize(
        "kind,value",
        [
            ("command", "dev:fix"),
            ("command", "/Dev:fix"),
            ("command", "/dev/fix"),
            ("skill", "python"),
            ("skill", "languages/python/extra"),
            ("workflow", "Development/bugfix"),
            ("agent", "code_reviewer"),
            ("agent", "-leading"),
            ("mcp", "some mcp"),
            ("agent", 42),
        ],
    )
    def test_invalid(self, kind, value):
        assert not is_valid_id(kind, value)


def test_normalize_keys():
    assert normalize_keys({"allowed-tools": "Read", "argument-hint": "<x>"}) == {
        "allowed_tools": "Read",
        "argument_hint": "<x>",
    }


class TestBuildComponent:
    def test_loader_fields_win_over_frontmatter(self):
        command = build_component(
            CommandDef,
            {"id": "/spoofed:id", "description": "D", "namespace": "other"},
            id="/dev:fix",
            namespace="dev",
            name="fix",
            path=Path("fix.md"),
            body="",
        )

        assert command.id == "/dev:fix"
        assert command.namespace == "dev"
        assert command.frontmatter["id"] == "/spoofed:id"

    def test_unknown_keys_only_in_frontmatter(self):
        agent = build_component(
            AgentDef,
            {"name": "a", "description": "d", "color": "blue"},
            id="a",
            name="a",
            path=Path("a.md"),
            body="",
        )

        assert agent.frontmatter["color"] == "blue"
        assert not hasattr(agent, "color")

    def test_null_description_becomes_empty(self):
        workflow = build_component(
            WorkflowDef,
            {"description": None, "tags": "fast, simple"},
            id="a/b",
            name="b",
            category="a",
            path=Path("b.md"),
            body="",
        )

        assert workflow.description == ""
        assert workflow.tags == ["fast", "simple"]

    def test_wrong_type_fails_validation(self):
        with pytest.raises(ValidationError):
            build_component(
                AgentDef,
                {"skills": {"not": "a list"}},
                id="a",
                name="a",
                path=Path("a.md"),
                body="",
            )


@pytest.mark.parametrize(
    "body,expected",
    [
        ("Use $ARGUMENTS here", True),
        ("First word: $1", True),
        ("Costs $10 or more", False),
        ("No placeholders", False),
    ],
)
def test_takes_arguments(body, expected):
    command = CommandDef(
        id="/a:b", name="b", namespace="a", path=Path("b.md"), body=body
    )
    assert command.takes_arguments is expected
