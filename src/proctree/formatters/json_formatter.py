"""JSON formatter for proctree.

Serializes a process tree as nested JSON using pydantic's model_dump().
The document carries the snapshot time, the host, the number of processes
and the tree itself:

    {
      "timestamp": "2024-01-15T10:30:00.000000+00:00",
      "host": "localhost",
      "count": 42,
      "root": {"pid": 1, "parent_pid": 0, "stats": {...}, "children": [...]}
    }
"""

from __future__ import annotations

from datetime import UTC, datetime
import json
from typing import Any

from proctree.formatters.base import Formatter
from proctree.models import ProcNode


def _utcnow() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(UTC)


class JsonFormatter(Formatter):
    """JSON output, pretty-printed or compact.

    Attributes:
        pretty_print: Whether to indent the output (default: True)
    """

    name = "json"

    def __init__(self, pretty_print: bool = True) -> None:
        self.pretty_print = pretty_print

    def to_dict(self, root: ProcNode, host: str | None = None) -> dict[str, Any]:
        """Build the JSON document as plain Python data."""
        return {
            "timestamp": _utcnow().isoformat(),
            "host": host or "localhost",
            "count": root.count(),
            "root": root.model_dump(mode="json"),
        }

    def format(self, root: ProcNode, host: str | None = None) -> str:
        output = self.to_dict(root, host)
        if self.pretty_print:
            return json.dumps(output, indent=2, ensure_ascii=False)
        return json.dumps(output, ensure_ascii=False, separators=(",", ":"))
