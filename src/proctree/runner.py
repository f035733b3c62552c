"""Command execution for proctree.

This module runs the listing command and streams its standard output
line by line. Failures to launch and non-zero exit statuses are turned into
ExecutionError with a cleaned-up diagnostic taken from standard error.
"""

from __future__ import annotations

from collections.abc import Iterator
import logging
import re
import subprocess
import tempfile
from typing import IO, cast

from proctree.errors import ExecutionError

logger = logging.getLogger(__name__)

# Program name prefix such as "ps: " or "ssh: "
_ERR_PREFIX = re.compile(r"^[A-Za-z]+:\s+")


def cut_error_prefix(message: str) -> str:
    """Strip a leading ``<word>: `` prefix from a diagnostic message."""
    match = _ERR_PREFIX.match(message)
    if match:
        return message[match.end() :]
    return message


def map_command_error(diagnostic: str) -> str:
    """Normalize a command diagnostic into a one-line, user-presentable message.

    Only the first line is kept, which drops the usage text tools like ``ps``
    print after the actual error, then the program name prefix is removed.

    Args:
        diagnostic: Raw text from the command's standard error

    Returns:
        The cleaned message
    """
    message = diagnostic.strip()
    first, sep, _ = message.partition("\n")
    if sep:
        message = first.strip()
    return cut_error_prefix(message)


def iter_command_lines(cmd: list[str]) -> Iterator[str]:
    """Run a command and yield its standard output line by line.

    Lines are yielded as soon as the command produces them. Standard error
    is spooled to a temporary file and used as the error message when the
    command exits with a non-zero status. If the consumer stops early the
    command is killed.

    Args:
        cmd: Command vector, program first

    Yields:
        Output lines with the trailing newline removed

    Raises:
        ExecutionError: If the command cannot be started or fails
    """
    if not cmd:
        raise ExecutionError("Empty command", command=cmd)

    logger.debug("Running %s", cmd[0])

    with tempfile.TemporaryFile() as stderr:
        try:
            proc = subprocess.Popen(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=stderr,
                text=True,
                errors="replace",
            )
        except OSError as e:
            raise ExecutionError(
                map_command_error(e.strerror or str(e)) + f": {cmd[0]}",
                command=cmd,
            ) from e

        try:
            for line in cast(IO[str], proc.stdout):
                yield line.rstrip("\n")
            returncode = proc.wait()
        finally:
            if proc.poll() is None:
                proc.kill()
                proc.wait()
            if proc.stdout is not None:
                proc.stdout.close()

        if returncode != 0:
            stderr.seek(0)
            diagnostic = stderr.read().decode("utf-8", "replace")
            message = map_command_error(diagnostic) or f"Command exited with status {returncode}"
            logger.warning("%s exited with status %d: %s", cmd[0], returncode, message)
            raise ExecutionError(message, command=cmd, returncode=returncode)
