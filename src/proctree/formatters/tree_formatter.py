"""Tree formatter for proctree.

Renders the process hierarchy with rich's Tree widget, one process per
line: the pid followed by the values of the selected 'ps' columns.
"""

from __future__ import annotations

from collections.abc import Sequence
from io import StringIO

from rich.console import Console
from rich.text import Text
from rich.tree import Tree

from proctree.formatters.base import Formatter
from proctree.models import ProcNode


class TreeFormatter(Formatter):
    """Indented tree output.

    Attributes:
        columns: Stats keys to show after the pid, None for all of them
        width: Console width used for rendering
    """

    name = "tree"

    def __init__(self, columns: Sequence[str] | None = None, width: int = 200) -> None:
        self.columns = list(columns) if columns is not None else None
        self.width = width

    def label(self, node: ProcNode) -> Text:
        """Build the label for one node."""
        keys = self.columns if self.columns is not None else list(node.stats)
        values = [node.stats[k] for k in keys if k in node.stats]
        # Text() keeps names like '[kworker/0:1]' from being read as markup
        label = Text(str(node.pid), style="bold")
        if values:
            label.append(" " + " ".join(values))
        return label

    def build(self, root: ProcNode, host: str | None = None) -> Tree:
        """Build the rich Tree for a process tree."""
        tree = Tree(Text(host or "localhost", style="cyan"))

        # path[d] is the branch new nodes at depth d are added to
        path: list[Tree] = [tree]

        for depth, node in root.walk():
            del path[depth + 1 :]
            path.append(path[depth].add(self.label(node)))

        return tree

    def format(self, root: ProcNode, host: str | None = None) -> str:
        buffer = StringIO()
        console = Console(file=buffer, width=self.width, color_system=None, highlight=False)
        console.print(self.build(root, host))
        return buffer.getvalue().rstrip("\n")
