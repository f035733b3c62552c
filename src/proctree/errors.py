"""Exceptions raised while building a process tree.

Every failure in the pipeline is terminal for the current call:
- HeaderError / RowShapeError: the listing output is not a well-formed table
- IdentifierError and subclasses: a PID or PPID value cannot be used
- RootNotFoundError: the table has no process with pid 1
- ExecutionError: the listing command could not run or exited non-zero

Records that are not connected to pid 1 are dropped silently and do not
raise anything.
"""

from __future__ import annotations


class ProcTreeError(Exception):
    """Base exception for all proctree failures."""


class HeaderError(ProcTreeError):
    """Error for a missing or too short table header."""

    def __init__(self, fields: list[str]) -> None:
        self.fields = fields
        super().__init__(f"Invalid header in 'ps' output: {' '.join(fields)!r}")


class RowShapeError(ProcTreeError):
    """Error for a data line with the wrong number of columns.

    Attributes:
        fields: The pieces the line was split into
        expected: Number of columns in the header
        line_number: 1-based position of the line in the table (header is 1)
    """

    def __init__(self, fields: list[str], expected: int, line_number: int | None = None) -> None:
        self.fields = fields
        self.expected = expected
        self.line_number = line_number
        message = (
            f"Invalid number of columns ({len(fields)} instead of {expected}): "
            f"{' '.join(fields)!r}"
        )
        if line_number is not None:
            message = f"Line {line_number}: {message}"
        super().__init__(message)


class IdentifierError(ProcTreeError):
    """Base error for a process identifier that cannot be extracted.

    Attributes:
        key: Column name that was looked up (e.g. "PID")
        value: Raw value found in the record, or None when absent
    """

    def __init__(self, key: str, value: str | None, message: str) -> None:
        self.key = key
        self.value = value
        super().__init__(message)


class MissingFieldError(IdentifierError):
    """The identifier column is absent or empty."""

    def __init__(self, key: str, value: str | None = None) -> None:
        super().__init__(key, value, f"Metric {key!r} is not found or empty")


class NumberFormatError(IdentifierError):
    """The identifier is not a base-10 integer literal."""

    def __init__(self, key: str, value: str) -> None:
        super().__init__(key, value, f"Parsing metric {key} {value!r}: invalid syntax")


class NegativeValueError(IdentifierError):
    """The identifier parsed to a negative number."""

    def __init__(self, key: str, value: str) -> None:
        super().__init__(key, value, f"Parsing metric {key} {value!r}: negative value")


class RootNotFoundError(ProcTreeError):
    """No record carries the root pid."""

    def __init__(self, root_pid: int = 1) -> None:
        self.root_pid = root_pid
        super().__init__(f"Root process with pid {root_pid} is not found")


class ExecutionError(ProcTreeError):
    """The external command failed to launch or exited with a non-zero status.

    Attributes:
        message: Normalized, user-presentable diagnostic
        command: The argument vector that was run
        returncode: Exit status, or None if the command never started
    """

    def __init__(
        self,
        message: str,
        *,
        command: list[str] | None = None,
        returncode: int | None = None,
    ) -> None:
        self.message = message
        self.command = command
        self.returncode = returncode
        super().__init__(message)
