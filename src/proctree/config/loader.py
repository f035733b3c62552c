"""Configuration loading and validation for proctree.

This module provides:
- Pydantic models for configuration validation
- YAML config file discovery and loading
- Environment variable expansion in config values
- Merging of config file with defaults and CLI overrides
- Readable error messages for broken config files
"""

from copy import deepcopy
from difflib import get_close_matches
import os
from pathlib import Path
import re
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
import yaml

from proctree.config.defaults import DEFAULT_CONFIG


class ConfigError(Exception):
    """Base exception for configuration errors.

    Attributes:
        message: The main error message
        file_path: Path to the config file (if applicable)
        line_number: Line number where the error occurred (if known)
        suggestion: Hint for fixing the error
    """

    def __init__(
        self,
        message: str,
        *,
        file_path: str | None = None,
        line_number: int | None = None,
        column: int | None = None,
        suggestion: str | None = None,
        context_lines: list[str] | None = None,
    ) -> None:
        self.message = message
        self.file_path = file_path
        self.line_number = line_number
        self.column = column
        self.suggestion = suggestion
        self.context_lines = context_lines
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with location, context and suggestion."""
        if self.file_path:
            location = f"Error in {self.file_path}"
            if self.line_number:
                location += f" line {self.line_number}"
            parts = [location + ":"]
        else:
            parts = ["Configuration error:"]

        parts.append(f"  {self.message}")

        if self.context_lines and self.column:
            parts.append("")
            parts.extend(f"    {line}" for line in self.context_lines)
            parts.append(" " * (self.column + 3) + "^")

        if self.suggestion:
            parts.append("")
            parts.append(f"  Suggestion: {self.suggestion}")

        return "\n".join(parts)


class ConfigSyntaxError(ConfigError):
    """Error for YAML syntax issues."""


class ConfigValidationError(ConfigError):
    """Error for configuration value validation failures."""


class ConfigKeyError(ConfigError):
    """Error for unknown or invalid configuration keys."""


# Known keys per section, used to suggest fixes for typos
VALID_KEYS: dict[tuple[str, ...], set[str]] = {
    (): {"ssh", "columns", "output", "logging"},
    ("ssh",): {"host", "user", "password", "timeout"},
    ("output",): {"format", "pretty_print", "sort_children", "show"},
    ("logging",): {"enabled", "level", "file"},
}

# Environment variable pattern: ${VAR} or ${VAR:-default}
ENV_VAR_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-([^}]*))?\}")


def _suggest_key(unknown_key: str, valid_keys: set[str]) -> str | None:
    """Suggest the closest valid key for an unknown one."""
    matches = get_close_matches(unknown_key, sorted(valid_keys), n=1, cutoff=0.6)
    if matches:
        return f"Did you mean '{matches[0]}'?"
    return None


def _describe(value: Any) -> str:
    """Get a human-readable type description for a value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return f'string "{value}"'
    if isinstance(value, list):
        return "list"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _lookup(data: Any, loc: tuple[Any, ...]) -> Any:
    """Follow a pydantic error location into the raw config data."""
    for key in loc:
        if isinstance(data, dict):
            data = data.get(key)
        elif isinstance(data, list) and isinstance(key, int) and key < len(data):
            data = data[key]
        else:
            return None
    return data


def _format_pydantic_error(
    error: ValidationError,
    config_data: dict[str, Any],
    file_path: str | None = None,
) -> ConfigValidationError:
    """Convert a pydantic ValidationError into a ConfigValidationError.

    Only the first error is reported, with a suggestion where one applies.
    """
    errors = error.errors()
    if not errors:
        return ConfigValidationError("Configuration validation failed", file_path=file_path)

    first = errors[0]
    loc = tuple(first.get("loc", ()))
    error_type = first.get("type", "")
    ctx = first.get("ctx", {}) or {}
    path = ".".join(str(part) for part in loc)
    actual = _lookup(config_data, loc)
    suggestion = None

    if error_type == "literal_error":
        message = f"Invalid value for '{path}': got {_describe(actual)}"
        suggestion = f"Expected one of: {ctx.get('expected', '')}"
    elif error_type in ("greater_than_equal", "less_than_equal"):
        message = f"Value for '{path}' is out of range: {actual}"
        if error_type == "greater_than_equal":
            suggestion = f"Value must be at least {ctx.get('ge')}"
        else:
            suggestion = f"Value must be at most {ctx.get('le')}"
    elif error_type in ("int_parsing", "int_type", "float_parsing"):
        message = f"Invalid number for '{path}': got {_describe(actual)}"
        suggestion = "Please provide a valid number"
    elif error_type in ("bool_type", "bool_parsing"):
        message = f"Expected boolean for '{path}': got {_describe(actual)}"
        suggestion = "Use 'true' or 'false'"
    elif error_type == "list_type":
        message = f"Expected list for '{path}': got {_describe(actual)}"
        suggestion = "Please provide a list (e.g., [pid, '%cpu'])"
    elif error_type == "extra_forbidden":
        message = f"Unknown configuration key '{path}'"
        valid = VALID_KEYS.get(loc[:-1])
        if valid and loc:
            suggestion = _suggest_key(str(loc[-1]), valid)
        suggestion = suggestion or "Check the documentation for valid configuration options"
    else:
        message = f"Invalid value for '{path}': {first.get('msg', 'Invalid value')}"

    return ConfigValidationError(message, file_path=file_path, suggestion=suggestion)


def _format_yaml_error(
    error: yaml.YAMLError,
    file_path: str | None = None,
    content: str | None = None,
) -> ConfigSyntaxError:
    """Convert a YAML error into a ConfigSyntaxError with position and context."""
    line_number = None
    column = None
    context_lines = None

    mark = getattr(error, "problem_mark", None)
    if mark is not None:
        line_number = mark.line + 1
        column = mark.column + 1
        if content:
            lines = content.splitlines()
            if 0 <= mark.line < len(lines):
                context_lines = [lines[mark.line]]

    error_str = str(error).lower()
    suggestion = None
    if "could not find expected ':'" in error_str:
        suggestion = "Check for missing colons after keys (e.g., 'key: value')"
    elif "found character" in error_str and "tab" in error_str:
        suggestion = "Use spaces instead of tabs for indentation"
    elif "mapping values are not allowed" in error_str:
        suggestion = "Check your indentation - make sure nested keys are properly indented"

    problem = getattr(error, "problem", None)
    message = f"YAML syntax error: {problem}" if problem else "Invalid YAML syntax"

    return ConfigSyntaxError(
        message,
        file_path=file_path,
        line_number=line_number,
        column=column,
        context_lines=context_lines,
        suggestion=suggestion,
    )


def expand_env_vars(value: Any) -> Any:
    """Recursively expand ${VAR} and ${VAR:-default} in config values.

    Unset variables without a default are left as written.
    """
    if isinstance(value, str):

        def replace(match: re.Match[str]) -> str:
            env_value = os.environ.get(match.group(1))
            if env_value is not None:
                return env_value
            if match.group(2) is not None:
                return match.group(2)
            return match.group(0)

        return ENV_VAR_PATTERN.sub(replace, value)
    if isinstance(value, dict):
        return {k: expand_env_vars(v) for k, v in value.items()}
    if isinstance(value, list):
        return [expand_env_vars(item) for item in value]
    return value


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _split_csv(value: Any) -> Any:
    """Split a comma-separated string into a list, leave anything else alone."""
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return value


# Pydantic Configuration Models


class SSHConfig(BaseModel):
    """Remote host access settings."""

    model_config = ConfigDict(extra="forbid")

    host: str | None = None
    user: str = "root"
    password: str = ""
    timeout: int = Field(default=5, ge=0, le=3600)

    @field_validator("host", mode="before")
    @classmethod
    def empty_host_is_local(cls, v: Any) -> Any:
        """Treat an empty host string as 'run locally'."""
        if isinstance(v, str) and not v.strip():
            return None
        return v


class OutputConfig(BaseModel):
    """Output settings."""

    model_config = ConfigDict(extra="forbid")

    format: Literal["tree", "json"] = "tree"
    pretty_print: bool = True
    sort_children: bool = False
    show: list[str] = Field(default_factory=list)

    @field_validator("show", mode="before")
    @classmethod
    def split_show(cls, v: Any) -> Any:
        """Accept a comma-separated string as well as a list of stats keys."""
        return _split_csv(v)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(extra="forbid")

    enabled: bool = False
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    file: str = "~/.proctree/proctree.log"


class Config(BaseModel):
    """Main configuration model for proctree.

    Loaded from YAML and overridden by CLI flags.
    """

    model_config = ConfigDict(extra="forbid")

    ssh: SSHConfig = Field(default_factory=SSHConfig)
    columns: list[str] = Field(default_factory=list)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("columns", mode="before")
    @classmethod
    def split_columns(cls, v: Any) -> Any:
        """Accept a comma-separated string as well as a list of columns."""
        return _split_csv(v)


def get_config_path(custom_path: str | None = None) -> Path | None:
    """Determine the configuration file path.

    Checks locations in this order:
    1. Custom path (if provided via --config flag)
    2. PROCTREE_CONFIG_PATH environment variable
    3. ~/.config/proctree/config.yaml (XDG standard)
    4. ~/.proctree/config.yaml (legacy location)

    Returns:
        Path to config file if found, None otherwise

    Raises:
        FileNotFoundError: If a custom path is given but does not exist
    """
    if custom_path:
        path = Path(custom_path).expanduser()
        if path.exists():
            return path
        raise FileNotFoundError(f"Config file not found: {custom_path}")

    env_path = os.environ.get("PROCTREE_CONFIG_PATH")
    if env_path:
        path = Path(env_path).expanduser()
        return path if path.exists() else None

    for path in (
        Path.home() / ".config" / "proctree" / "config.yaml",
        Path.home() / ".proctree" / "config.yaml",
    ):
        if path.exists():
            return path

    return None


def load_config(
    config_path: str | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> Config:
    """Load and validate configuration.

    Configuration is merged in this order (later overrides earlier):
    1. Default configuration
    2. Config file (if found)
    3. CLI overrides (if provided)

    Environment variables are expanded in the defaults and the config file,
    not in CLI overrides.

    Args:
        config_path: Optional custom config file path
        cli_overrides: Optional dict of CLI argument overrides

    Returns:
        Validated Config object

    Raises:
        FileNotFoundError: If custom config path doesn't exist
        ConfigSyntaxError: If config file has invalid YAML syntax
        ConfigValidationError: If config values are invalid
    """
    config_data = deepcopy(DEFAULT_CONFIG)
    path = get_config_path(config_path)

    if path:
        content = path.read_text()
        try:
            file_config = yaml.safe_load(content) or {}
        except yaml.YAMLError as e:
            raise _format_yaml_error(e, str(path), content) from e

        if not isinstance(file_config, dict):
            raise ConfigKeyError(
                f"Expected a mapping at the top level, got {_describe(file_config)}",
                file_path=str(path),
            )
        config_data = deep_merge(config_data, file_config)

    config_data = expand_env_vars(config_data)

    if cli_overrides:
        config_data = deep_merge(config_data, cli_overrides)

    try:
        return Config(**config_data)
    except ValidationError as e:
        raise _format_pydantic_error(e, config_data, str(path) if path else None) from e
