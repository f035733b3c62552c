"""proctree - process tree snapshots of local or remote Linux hosts.

Runs 'ps' (optionally over ssh), parses its table and links the processes
into a tree rooted at pid 1.

Usage:
    from proctree import proc_tree, ssh_command

    root = proc_tree(ssh_command("192.168.0.16", "pi", timeout=5), ["%cpu", "%mem", "cmd"])
    root.for_each(lambda node: print(node.pid, node.stats["CMD"]))
"""

import logging

from proctree.command import ps_command, ssh_command
from proctree.errors import (
    ExecutionError,
    HeaderError,
    IdentifierError,
    MissingFieldError,
    NegativeValueError,
    NumberFormatError,
    ProcTreeError,
    RootNotFoundError,
    RowShapeError,
)
from proctree.models import ROOT_PID, ProcNode, Record
from proctree.parser import TableParser, non_empty_lines, parse_table
from proctree.tree import build_tree, get_pid, proc_tree, tree_from_command

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    "ProcNode",
    "Record",
    "ROOT_PID",
    "TableParser",
    "build_tree",
    "get_pid",
    "non_empty_lines",
    "parse_table",
    "proc_tree",
    "ps_command",
    "ssh_command",
    "tree_from_command",
    # Errors
    "ProcTreeError",
    "HeaderError",
    "RowShapeError",
    "IdentifierError",
    "MissingFieldError",
    "NumberFormatError",
    "NegativeValueError",
    "RootNotFoundError",
    "ExecutionError",
]
