"""Process tree construction.

This module turns parsed 'ps' records into a ProcNode tree:
- get_pid: validated extraction of PID/PPID values
- build_tree: index records by pid, link children to parents, return pid 1
- tree_from_command / proc_tree: the full run -> parse -> build pipeline

Only processes that descend from pid 1 are part of the result. Anything else,
kernel threads under kthreadd (pid 2) in particular, is dropped without an
error. Callers should not read a smaller process count as lost data.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from contextlib import closing
import logging
import re

from proctree.command import ps_command
from proctree.errors import MissingFieldError, NegativeValueError, NumberFormatError, RootNotFoundError
from proctree.models import ROOT_PID, ProcNode, Record
from proctree.parser import TableParser, non_empty_lines
from proctree.runner import iter_command_lines

logger = logging.getLogger(__name__)

PID_KEY = "PID"
PPID_KEY = "PPID"

_INT_LITERAL = re.compile(r"^[+-]?[0-9]+$")


def get_pid(record: Record, key: str) -> int:
    """Read a pid-like non-negative integer from a record.

    Args:
        record: Parsed 'ps' line
        key: Column name, e.g. "PID" or "PPID"

    Returns:
        The parsed value

    Raises:
        MissingFieldError: If the column is absent or empty
        NumberFormatError: If the value is not a base-10 integer
        NegativeValueError: If the value is negative
    """
    value = record.get(key)
    if not value:
        raise MissingFieldError(key, value)

    if not _INT_LITERAL.match(value):
        raise NumberFormatError(key, value)

    pid = int(value)
    if pid < 0:
        raise NegativeValueError(key, value)

    return pid


def build_tree(records: Iterable[Record]) -> ProcNode:
    """Build the process tree rooted at pid 1.

    Nodes are indexed by pid first, then a second pass attaches every node to
    its parent. A node whose parent is not in the index is unreachable and is
    left out, together with its whole subtree. When two records share a pid
    the later one replaces the earlier one.

    Args:
        records: Records as produced by the table parser

    Returns:
        The root node (pid 1)

    Raises:
        IdentifierError: If a PID or PPID value is missing or invalid
        RootNotFoundError: If there is no process with pid 1
    """
    index: dict[int, Record] = {}

    for record in records:
        pid = get_pid(record, PID_KEY)
        if pid in index:
            logger.debug("Duplicate pid %d, keeping the later record", pid)
        index[pid] = record

    nodes: dict[int, ProcNode] = {}

    for pid, record in index.items():
        stats = {k: v for k, v in record.items() if k not in (PID_KEY, PPID_KEY)}
        nodes[pid] = ProcNode(pid=pid, parent_pid=get_pid(record, PPID_KEY), stats=stats)

    detached = 0
    for node in nodes.values():
        # the root is never re-parented, so the result stays acyclic
        if node.pid == ROOT_PID:
            continue

        parent = nodes.get(node.parent_pid)
        if parent is not None and parent is not node:
            parent.children.append(node)
        else:
            detached += 1

    root = nodes.get(ROOT_PID)
    if root is None:
        raise RootNotFoundError(ROOT_PID)

    logger.debug("Built process tree from %d records, %d detached", len(nodes), detached)
    return root


def tree_from_command(cmd: Sequence[str]) -> ProcNode:
    """Run a command printing a 'ps'-style table and build the tree from it.

    Args:
        cmd: Command vector; its standard output must be a 'ps' table

    Returns:
        The root node (pid 1)

    Raises:
        ProcTreeError: On any execution, parsing or tree building failure
    """
    parser = TableParser()
    with closing(iter_command_lines(list(cmd))) as lines:
        for line in non_empty_lines(lines):
            parser.feed(line)

    return build_tree(parser.records)


def proc_tree(ssh: Sequence[str] | None = None, columns: Iterable[str] = ()) -> ProcNode:
    """Take a snapshot of the process tree, locally or on a remote host.

    Args:
        ssh: Command prefix from ``ssh_command()``, or None to run 'ps' locally
        columns: 'ps' columns to collect (see ``ps_command()``); PID and PPID
            are always included. Values are returned as 'ps' prints them.

    Returns:
        The root node (pid 1) with every process that descends from it

    Raises:
        ProcTreeError: On any execution, parsing or tree building failure
    """
    return tree_from_command([*(ssh or ()), *ps_command(columns)])
