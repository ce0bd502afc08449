"""Utilities package."""

from promptkit.utils.def_loader import (
    DefNotFoundError,
    InvalidDefError,
    UnsafePathError,
    parse_frontmatter,
)
from promptkit.utils.logging import setup_logging

__all__ = [
    "DefNotFoundError",
    "InvalidDefError",
    "UnsafePathError",
    "parse_frontmatter",
    "setup_logging",
]
