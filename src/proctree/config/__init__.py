"""Configuration module for proctree.

This module provides:
- Pydantic models for configuration validation
- YAML config file loading and discovery
- Default configuration values
- Environment variable expansion
- Clear error messages for config issues
"""

from proctree.config.defaults import DEFAULT_CONFIG
from proctree.config.loader import (
    Config,
    ConfigError,
    ConfigKeyError,
    ConfigSyntaxError,
    ConfigValidationError,
    LoggingConfig,
    OutputConfig,
    SSHConfig,
    get_config_path,
    load_config,
)

__all__ = [
    "Config",
    "ConfigError",
    "ConfigKeyError",
    "ConfigSyntaxError",
    "ConfigValidationError",
    "LoggingConfig",
    "OutputConfig",
    "SSHConfig",
    "DEFAULT_CONFIG",
    "get_config_path",
    "load_config",
]
