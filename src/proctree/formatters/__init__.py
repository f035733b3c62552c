"""Formatters package for proctree.

This package contains the formatters that turn a process tree into output:

- JsonFormatter: JSON output for machine-readable data
- TreeFormatter: indented tree for terminals
"""

from collections.abc import Sequence

from proctree.formatters.base import Formatter
from proctree.formatters.json_formatter import JsonFormatter
from proctree.formatters.tree_formatter import TreeFormatter

__all__ = [
    "Formatter",
    "JsonFormatter",
    "TreeFormatter",
    "get_formatter",
]


def get_formatter(
    name: str,
    pretty_print: bool = True,
    columns: Sequence[str] | None = None,
) -> Formatter:
    """Get a formatter by name.

    ``pretty_print`` applies to JSON output, ``columns`` selects the stats
    shown in tree output (None for all of them).

    Raises:
        ValueError: If the format is not recognized
    """
    if name == "json":
        return JsonFormatter(pretty_print=pretty_print)
    if name == "tree":
        return TreeFormatter(columns=columns)
    raise ValueError(f"Unknown format: {name}. Available: json, tree")
