"""Command-line interface for proctree.

This module provides:
- Typer-based CLI application
- Config file loading with CLI overrides
- Local or ssh-based process tree snapshots
- Tree or JSON output

Usage:
    proctree                          # Local process tree
    proctree 192.168.0.16 -u pi       # Remote process tree over ssh
    proctree -C %cpu,%mem,cmd --json  # Selected columns as JSON
    proctree --pid 1234               # Subtree of one process
    proctree -S CMD                   # Tree with the command line only

Examples:
    # Remote host with password authentication (needs sshpass)
    PROCTREE_PASSWORD=raspberry proctree 192.168.0.16 -u pi -t 5

    # Use a custom configuration file
    proctree --config ~/.config/proctree/custom.yaml
"""

from enum import Enum
from pathlib import Path
from typing import Annotated, Any

from rich.console import Console
from rich.markup import escape
import typer

from proctree import __version__
from proctree.command import ssh_command
from proctree.config import Config, load_config
from proctree.errors import ProcTreeError
from proctree.formatters import get_formatter
from proctree.log import configure_logging
from proctree.models import ProcNode
from proctree.tree import proc_tree

app = typer.Typer(
    name="proctree",
    help="Process tree snapshots of local or remote Linux hosts",
    no_args_is_help=False,
    add_completion=True,
    rich_markup_mode="rich",
)

# Diagnostics go to stderr, the tree itself to stdout
console = Console(stderr=True)


class OutputFormat(str, Enum):
    """Output format options."""

    TREE = "tree"
    JSON = "json"


def version_callback(value: bool) -> None:
    """Display version and exit."""
    if value:
        console.print(f"proctree version {__version__}")
        raise typer.Exit()


def parse_columns_option(columns: list[str] | None) -> list[str] | None:
    """Flatten repeated and comma-separated --column or --show values.

    Returns:
        List of column specifiers, or None if none were given
    """
    if not columns:
        return None

    result: list[str] = []
    for item in columns:
        for name in item.split(","):
            name = name.strip()
            if name:
                result.append(name)

    return result or None


def build_cli_overrides(
    host: str | None = None,
    user: str | None = None,
    password: str | None = None,
    timeout: int | None = None,
    columns: list[str] | None = None,
    format_: OutputFormat | None = None,
    pretty: bool | None = None,
    sort: bool = False,
    show: list[str] | None = None,
) -> dict[str, Any]:
    """Build config override dict from CLI flags.

    Only flags that were actually given end up in the overrides.
    """
    overrides: dict[str, Any] = {}

    ssh: dict[str, Any] = {}
    if host is not None:
        ssh["host"] = host
    if user is not None:
        ssh["user"] = user
    if password is not None:
        ssh["password"] = password
    if timeout is not None:
        ssh["timeout"] = timeout
    if ssh:
        overrides["ssh"] = ssh

    if columns is not None:
        overrides["columns"] = columns

    output: dict[str, Any] = {}
    if format_ is not None:
        output["format"] = format_.value
    if pretty is not None:
        output["pretty_print"] = pretty
    if sort:
        output["sort_children"] = True
    if show is not None:
        output["show"] = show
    if output:
        overrides["output"] = output

    return overrides


def take_snapshot(config: Config) -> ProcNode:
    """Run 'ps' as configured and return the process tree."""
    ssh = None
    if config.ssh.host:
        ssh = ssh_command(config.ssh.host, config.ssh.user, config.ssh.password, config.ssh.timeout)

    return proc_tree(ssh, config.columns)


def render(node: ProcNode, config: Config) -> str:
    """Format a tree according to the output settings."""
    if config.output.sort_children:
        node = node.sorted()

    formatter = get_formatter(
        config.output.format,
        pretty_print=config.output.pretty_print,
        columns=config.output.show or None,
    )
    return formatter.format(node, config.ssh.host)


HostArgument = Annotated[
    str | None,
    typer.Argument(help="Remote host to inspect over ssh; omit for the local machine"),
]

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="Path to custom config file",
        envvar="PROCTREE_CONFIG_PATH",
        exists=False,  # We handle existence check ourselves
    ),
]

UserOption = Annotated[
    str | None,
    typer.Option("--user", "-u", help="Login user on the remote host"),
]

PasswordOption = Annotated[
    str | None,
    typer.Option(
        "--password",
        help="Password for the remote host (uses sshpass)",
        envvar="PROCTREE_PASSWORD",
        show_envvar=True,
    ),
]

TimeoutOption = Annotated[
    int | None,
    typer.Option(
        "--timeout",
        "-t",
        help="SSH connection timeout in seconds, 0 for the ssh default",
        min=0,
        max=3600,
    ),
]

ColumnOption = Annotated[
    list[str] | None,
    typer.Option(
        "--column",
        "-C",
        help="'ps' column to collect; repeat or separate with commas (see 'ps L')",
    ),
]

FormatOption = Annotated[
    OutputFormat | None,
    typer.Option("--format", "-f", help="Output format"),
]

JsonOption = Annotated[
    bool,
    typer.Option("--json", "-j", help="Output in JSON format (same as --format json)"),
]

PrettyOption = Annotated[
    bool | None,
    typer.Option("--pretty/--no-pretty", help="Pretty-print JSON output (default: True)"),
]

ShowOption = Annotated[
    list[str] | None,
    typer.Option(
        "--show",
        "-S",
        help="Column to show in tree output, by its 'ps' header name (e.g. CMD); repeatable",
    ),
]

SortOption = Annotated[
    bool,
    typer.Option("--sort", "-s", help="Order children by pid"),
]

PidOption = Annotated[
    int | None,
    typer.Option("--pid", "-p", help="Only show the subtree rooted at this pid", min=0),
]

VersionOption = Annotated[
    bool | None,
    typer.Option(
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
]


@app.command()
def main(
    host: HostArgument = None,
    config: ConfigOption = None,
    user: UserOption = None,
    password: PasswordOption = None,
    timeout: TimeoutOption = None,
    column: ColumnOption = None,
    format_: FormatOption = None,
    json_format: JsonOption = False,
    pretty: PrettyOption = None,
    sort: SortOption = False,
    show: ShowOption = None,
    pid: PidOption = None,
    version: VersionOption = None,
) -> None:
    """proctree - print the process tree of a Linux host.

    Runs 'ps' locally, or on HOST over ssh, and prints every process that
    descends from pid 1. Kernel threads are not part of the tree.
    """
    if json_format:
        format_ = OutputFormat.JSON

    overrides = build_cli_overrides(
        host=host,
        user=user,
        password=password,
        timeout=timeout,
        columns=parse_columns_option(column),
        format_=format_,
        pretty=pretty,
        sort=sort,
        show=parse_columns_option(show),
    )

    try:
        config_path = str(config) if config else None
        cfg = load_config(config_path=config_path, cli_overrides=overrides)
    except FileNotFoundError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e
    except Exception as e:
        console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e

    configure_logging(cfg.logging)

    try:
        root = take_snapshot(cfg)
    except ProcTreeError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e

    node = root if pid is None else root.find(lambda n: n.pid == pid)
    if node is None:
        console.print(f"[red]Error:[/red] Process {pid} is not in the tree rooted at pid {root.pid}")
        raise typer.Exit(1)

    print(render(node, cfg))


def cli_main() -> None:
    """Entry point for the CLI application."""
    app()
