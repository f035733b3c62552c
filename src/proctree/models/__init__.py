"""Pydantic data models for proctree.

This module provides the core data models used throughout proctree:
- Record: one parsed line of 'ps' output
- ProcNode: a process tree node with find/for_each traversal
- ROOT_PID: the identifier every tree is rooted at
"""

from proctree.models.base import ROOT_PID, ProcNode, Record

__all__ = [
    "ProcNode",
    "Record",
    "ROOT_PID",
]
