"""Tests for AgentLoader."""

import pytest

from promptkit.core.agent_loader import AgentLoader
from promptkit.core.component_def import AgentDef
from promptkit.utils.def_loader import DefNotFoundError, InvalidDefError, UnsafePathError


class TestAgentLoaderLoad:
    def test_load_agent(self, plugin_dir):
        agent = AgentLoader(plugin_dir).load("debugger")

        assert isinstance(agent, AgentDef)
        assert agent.id == "debugger"
        assert agent.name == "debugger"
        assert agent.description == "Investigates failures"
        assert agent.tools == ["Read", "Grep", "Bash"]
        assert agent.skills == ["languages/python"]
        assert agent.commands == ["/dev:fix"]
        assert agent.body.startswith("# Debugger")

    def test_load_accepts_md_suffix(self, plugin_dir):
        assert AgentLoader(plugin_dir).load("debugger.md").id == "debugger"

    def test_references(self, plugin_dir):
        agent = AgentLoader(plugin_dir).load("debugger")

        assert agent.references() == {
            "skill": ["languages/python"],
            "command": ["/dev:fix"],
        }

    def test_missing_agent(self, plugin_dir):
        with pytest.raises(DefNotFoundError):
            AgentLoader(plugin_dir).load("nobody")

    def test_path_traversal(self, plugin_dir):
        with pytest.raises(UnsafePathError):
            AgentLoader(plugin_dir).load("../registry")

    def test_tools_of_wrong_type(self, plugin_dir, make_file):
        make_file(
            plugin_dir / "agents" / "odd.md",
            "---\nname: odd\ndescription: Odd\ntools: 42\n---\n# Odd\n",
        )

        with pytest.raises(InvalidDefError):
            AgentLoader(plugin_dir).load("odd")


class TestAgentLoaderDiscover:
    def test_discover(self, plugin_dir, make_file):
        make_file(
            plugin_dir / "agents" / "architect.md",
            "---\nname: architect\ndescription: Designs systems\nmodel: opus\n---\n# Architect\n",
        )

        agents = AgentLoader(plugin_dir).discover()

        assert [a.id for a in agents] == ["architect", "debugger"]
        assert agents[0].model == "opus"

    def test_discover_missing_directory(self, tmp_path):
        assert AgentLoader(tmp_path).discover() == []
