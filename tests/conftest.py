"""Shared test fixtures for promptkit test suite."""

from pathlib import Path

import pytest

from promptkit.core.catalog import Catalog
from promptkit.utils.config import Config

FIX_COMMAND = """---
description: Fix a bug
argument-hint: "<issue>"
allowed-tools: Read, Edit, Bash
related_skills:
  - languages/python
---

# Fix

Fix this issue: $ARGUMENTS
"""

REVIEW_COMMAND = """---
description: Review code changes
related_commands:
  - /dev:fix
---

# Review

Review the changes in {{workspace}}.
"""

BRAINSTORM_MODE = """---
description: Brainstorming mode
---

# Brainstorm Mode

Think broadly before narrowing down.
"""

DEBUGGER_AGENT = """---
name: debugger
description: Investigates failures
tools: Read, Grep, Bash
skills:
  - languages/python
commands:
  - /dev:fix
---

# Debugger

Find the root cause first.
"""

PYTHON_SKILL = """---
name: python
description: Python conventions
---

# Python

Prefer the standard library.
"""

BUGFIX_WORKFLOW = """---
name: Bug Fix
description: Fix a reported bug end to end
agents:
  - debugger
skills:
  - languages/python
commands:
  - /dev:fix
---

# Bug Fix

1. Reproduce.
2. Fix.
"""

REGISTRY = """agents:
  debugger:
    skills:
      - languages/python
    commands:
      - /dev:fix
workflows:
  development/bugfix:
    agents:
      - debugger
    skills:
      - languages/python
    commands:
      - /dev:fix
"""


def write_file(path: Path, content: str) -> Path:
    """Write content, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def make_file():
    """The write_file helper, for tests that build their own trees."""
    return write_file


@pytest.fixture
def test_config(tmp_path: Path) -> Config:
    """Config with workspace pointing to tmp_path."""
    return Config(workspace=tmp_path, claude_home=tmp_path / "claude")


@pytest.fixture
def plugin_dir(test_config: Config) -> Path:
    """A small, fully consistent plugin tree."""
    root = test_config.plugin_path
    write_file(root / "commands" / "dev" / "fix.md", FIX_COMMAND)
    write_file(root / "commands" / "dev" / "review.md", REVIEW_COMMAND)
    write_file(root / "modes" / "brainstorm.md", BRAINSTORM_MODE)
    write_file(root / "agents" / "debugger.md", DEBUGGER_AGENT)
    write_file(root / "skills" / "languages" / "python" / "SKILL.md", PYTHON_SKILL)
    write_file(root / "workflows" / "development" / "bugfix.md", BUGFIX_WORKFLOW)
    write_file(root / "registry.yaml", REGISTRY)
    return root


@pytest.fixture
def catalog(plugin_dir: Path) -> Catalog:
    """Catalog over the fixture plugin tree."""
    return Catalog(plugin_dir)
