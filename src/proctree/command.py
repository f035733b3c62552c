"""Command vector builders for proctree.

This module composes the argument vectors proctree runs:
- ssh_command: the ``ssh`` (or ``sshpass ... ssh``) prefix for a remote host
- ps_command: the ``ps`` invocation for a list of requested columns

Neither function validates its input. A bad host, user or column name is
passed through verbatim and reported by the command itself when it runs.
"""

from __future__ import annotations

from collections.abc import Iterable

# Identifier columns, always emitted first and in this order
ID_COLUMNS = ("pid", "ppid")

# Aliases of the free-form command line column
CMD_COLUMNS = frozenset({"args", "cmd", "command"})

DEFAULT_PS_COMMAND = ["ps", "-ewwF"]


def ssh_command(host: str, user: str, password: str = "", timeout: int = 0) -> list[str]:
    """Build an ssh command prefix for running a program on a remote host.

    With a non-empty password the command starts with ``sshpass -p <password>``.
    A timeout of 0 keeps the ssh default; since that default can be very high,
    setting a few seconds is recommended for hosts on a local network.

    Args:
        host: Remote host name or address
        user: Login user name
        password: Optional password (requires ``sshpass`` on the local host)
        timeout: SSH connection timeout in seconds, 0 for the ssh default

    Returns:
        The command vector, ending with ``user@host``
    """
    if password:
        cmd = ["sshpass", "-p", password, "ssh"]
    else:
        cmd = ["ssh"]

    if timeout > 0:
        cmd += ["-o", f"ConnectTimeout={timeout}"]

    cmd.append(f"{user}@{host}")
    return cmd


def column_name(column: str) -> str:
    """Return the bare column name, without width (``:N``) or header (``=NAME``) suffix."""
    for sep in (":", "="):
        column = column.split(sep, 1)[0]
    return column.strip()


def ps_command(columns: Iterable[str] = ()) -> list[str]:
    """Build the ``ps`` invocation for the requested columns.

    An empty column list selects the full format (``ps -ewwF``). Otherwise
    ``pid`` and ``ppid`` come first, followed by the other requested columns
    in request order with duplicates dropped, and finally the command line
    column if any of its aliases was requested. The command column must be
    last because ``ps`` truncates every column but the last one.

    Args:
        columns: Column specifiers as accepted by ``ps -o``

    Returns:
        The command vector
    """
    columns = [c for c in columns if c.strip()]
    if not columns:
        return list(DEFAULT_PS_COMMAND)

    middle: dict[str, str] = {}
    cmd_column: str | None = None

    for column in columns:
        name = column_name(column)

        if name in CMD_COLUMNS:
            # keep a width or header override, otherwise normalize to 'cmd'
            cmd_column = column.strip() if column.strip() != name else "cmd"
        elif name in ID_COLUMNS:
            continue
        elif name not in middle:
            middle[name] = column.strip()

    selected = [*ID_COLUMNS, *middle.values()]
    if cmd_column is not None:
        selected.append(cmd_column)

    return ["ps", "-ewwo", ",".join(selected)]
