"""Tests for the dependency graph."""

import pytest

from promptkit.core.catalog import Catalog
from promptkit.core.graph import build_dependency_graph


@pytest.fixture
def graph(catalog):
    return build_dependency_graph(catalog.discover_all())


def test_forward_edges(graph):
    workflow = graph.get("workflow", "development/bugfix")

    assert workflow.depends_on == {
        "agent": ["debugger"],
        "skill": ["languages/python"],
        "command": ["/dev:fix"],
    }
    assert workflow.description == "Fix a reported bug end to end"


def test_reverse_edges(graph):
    skill = graph.get("skill", "languages/python")
    command = graph.get("command", "/dev:fix")

    assert skill.used_by == {
        "command": ["/dev:fix"],
        "agent": ["debugger"],
        "workflow": ["development/bugfix"],
    }
    assert command.used_by == {
        "command": ["/dev:review"],
        "agent": ["debugger"],
        "workflow": ["development/bugfix"],
    }


def test_nodes_without_references(graph):
    mode = graph.get("command", "/mode:brainstorm")

    assert mode.depends_on == {}
    assert mode.used_by == {}
    assert graph.dangling() == []


def test_dangling_references(catalog, plugin_dir, make_file):
    make_file(
        plugin_dir / "agents" / "planner.md",
        "---\nname: planner\ndescription: Plans\nskills:\n  - methodology/planning\n---\n",
    )

    graph = build_dependency_graph(catalog.discover_all(refresh=True))
    planner = graph.get("agent", "planner")

    assert planner.dangling == [("skill", "methodology/planning")]
    assert graph.get("skill", "methodology/planning") is None
    assert [(node.id, kind, target) for node, kind, target in graph.dangling()] == [
        ("planner", "skill", "methodology/planning")
    ]


def test_find_and_of_kind(graph):
    assert [node.kind for node in graph.find("debugger")] == ["agent"]
    assert graph.find("nothing") == []
    assert {node.id for node in graph.of_kind("command")} == {
        "/dev:fix",
        "/dev:review",
        "/mode:brainstorm",
    }


def test_stats(graph):
    stats = graph.stats()

    assert stats.counts == {"command": 3, "agent": 1, "skill": 1, "workflow": 1}
    # refs are counted from agents and workflows only
    assert stats.skill_refs == 2
    assert stats.command_refs == 2
    assert stats.agent_refs == 1


def test_duplicate_reference_recorded_once(tmp_path, make_file):
    make_file(tmp_path / "agents" / "a.md", "---\nname: a\ndescription: d\n---\n")
    make_file(
        tmp_path / "workflows" / "x" / "y.md",
        "---\nname: y\ndescription: d\nagents: [a, a]\n---\n",
    )

    graph = build_dependency_graph(Catalog(tmp_path).discover_all())

    assert graph.get("agent", "a").used_by == {"workflow": ["x/y"]}
