"""Base class for proctree output formatters."""

from __future__ import annotations

from abc import ABC, abstractmethod

from proctree.models import ProcNode


class Formatter(ABC):
    """Turns a process tree into printable text.

    Class Attributes:
        name: Format identifier used by the CLI and config (``output.format``)
    """

    name: str = "unnamed"

    @abstractmethod
    def format(self, root: ProcNode, host: str | None = None) -> str:
        """Format the tree rooted at ``root``.

        Args:
            root: Root of the tree (or subtree) to print
            host: Host the snapshot was taken on, None for the local machine

        Returns:
            The formatted text, without a trailing newline
        """
        ...
