"""Default configuration values for proctree.

This module defines the default configuration used when no config file exists
or when config values are not specified. All configuration options are documented
here for reference.

Environment Variables:
    PROCTREE_CONFIG_PATH: Override default config file path
    Any config value can reference environment variables using ${VAR} syntax

Config File Locations (in order of precedence):
    1. Path specified via --config CLI flag
    2. Path specified via PROCTREE_CONFIG_PATH environment variable
    3. ~/.config/proctree/config.yaml (XDG default)
    4. ~/.proctree/config.yaml (legacy location)
"""

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    # Remote host access; host None means run 'ps' locally
    "ssh": {
        "host": None,
        "user": "${USER:-root}",
        "password": "",  # Non-empty password switches to sshpass
        "timeout": 5,  # ConnectTimeout in seconds, 0 for the ssh default
    },
    # 'ps' columns to collect, empty for the full 'ps -ewwF' format
    "columns": [],
    # Output settings
    "output": {
        "format": "tree",  # "tree" or "json"
        "pretty_print": True,  # Indent JSON output
        "sort_children": False,  # Order children by pid instead of 'ps' order
        "show": [],  # Stats keys shown in tree output, e.g. ["%CPU", "CMD"]; empty for all
    },
    # Logging configuration (for debugging)
    "logging": {
        "enabled": False,
        "level": "INFO",  # DEBUG, INFO, WARNING, ERROR
        "file": "~/.proctree/proctree.log",
    },
}
