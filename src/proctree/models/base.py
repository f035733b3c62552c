"""Pydantic data models for proctree.

This module defines the process tree node and its traversal helpers:
- Record: one parsed line of listing output (column name -> raw value)
- ProcNode: one process with its stats and owned children
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

Record = dict[str, str]
"""One data line of the listing output, keyed by header column name."""

ROOT_PID = 1
"""Identifier of the process every tree is anchored at."""


class ProcNode(BaseModel):
    """A node of the process tree.

    Nodes are built once from a single listing pass and are frozen afterwards:
    attribute assignment is rejected, so structural links cannot be rewired.
    Traversal callbacks may still read and write the ``stats`` mapping.

    Attributes:
        pid: Process ID (non-negative, unique within one tree)
        parent_pid: Parent process ID; 0 means the process has no parent
        stats: Columns reported by ``ps`` for this process, minus PID and PPID
        children: Child nodes in the order they were discovered
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    pid: int = Field(..., ge=0, description="Process ID")
    parent_pid: int = Field(default=0, ge=0, description="Parent process ID")
    stats: Record = Field(default_factory=dict, description="Raw 'ps' columns")
    children: list[ProcNode] = Field(default_factory=list, description="Child processes")

    def find(self, predicate: Callable[[ProcNode], bool]) -> ProcNode | None:
        """Return the first node, in depth-first pre-order, matching the predicate.

        A node is tested before its children, and siblings are visited in the
        order of the ``children`` list. The search stops at the first match.

        Args:
            predicate: Called once per visited node

        Returns:
            The first matching node, or None if nothing matches
        """
        if predicate(self):
            return self

        # no cycle check, a tree built by build_tree has no loops
        stack: list[Iterator[ProcNode]] = [iter(self.children)]

        while stack:
            node = next(stack[-1], None)

            if node is None:
                stack.pop()
                continue

            if predicate(node):
                return node

            if node.children:
                stack.append(iter(node.children))

        return None

    def for_each(self, visitor: Callable[[ProcNode], Any]) -> None:
        """Apply the visitor to every node of the tree in depth-first pre-order."""

        def visit(node: ProcNode) -> bool:
            visitor(node)
            return False

        self.find(visit)

    def walk(self) -> Iterator[tuple[int, ProcNode]]:
        """Yield ``(depth, node)`` pairs in depth-first pre-order.

        The root has depth 0. Like ``find`` this keeps an explicit stack, so
        deep chains do not run into the recursion limit.
        """
        yield 0, self

        stack: list[Iterator[ProcNode]] = [iter(self.children)]

        while stack:
            node = next(stack[-1], None)

            if node is None:
                stack.pop()
                continue

            yield len(stack), node

            if node.children:
                stack.append(iter(node.children))

    def count(self) -> int:
        """Return the number of nodes in this subtree, including this one."""
        total = 0

        def inc(_: ProcNode) -> None:
            nonlocal total
            total += 1

        self.for_each(inc)
        return total

    def sorted(self) -> ProcNode:
        """Return a copy of this subtree with children ordered by pid."""
        copies: dict[int, ProcNode] = {}

        # reversed pre-order sees every child before its parent
        for _, node in reversed(list(self.walk())):
            children = [copies[id(child)] for child in node.children]
            copies[id(node)] = ProcNode(
                pid=node.pid,
                parent_pid=node.parent_pid,
                stats=dict(node.stats),
                children=sorted(children, key=lambda n: n.pid),
            )

        return copies[id(self)]
