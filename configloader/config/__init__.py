# configloader/config/__init__.py

"""
Configuration loading for applications.

This package handles loading configuration from a YAML, JSON or TOML file
and environment variables, decoding it into an immutable Configuration, and
sharing the result through a holder or a contextvars context.
"""

from .models import (
    SCHEMA_VERSION,
    ApplicationConfig,
    Configuration,
    DatabaseConfig,
    HTTPConfig,
    OAuth2Config,
    RedisConfig,
    TokenConfig,
    config_keys,
)
from .durations import format_duration, parse_duration
from .loaders import LoadOptions, env_var_name, find_config_file, load_configuration
from .holder import (
    ConfigHolder,
    HolderState,
    attach_to_context,
    default_holder,
    from_context,
    get_current,
    initialize,
    reset,
    use_configuration,
)

__all__ = [
    "SCHEMA_VERSION",
    "ApplicationConfig",
    "Configuration",
    "DatabaseConfig",
    "HTTPConfig",
    "OAuth2Config",
    "RedisConfig",
    "TokenConfig",
    "config_keys",
    "format_duration",
    "parse_duration",
    "LoadOptions",
    "env_var_name",
    "find_config_file",
    "load_configuration",
    "ConfigHolder",
    "HolderState",
    "attach_to_context",
    "default_holder",
    "from_context",
    "get_current",
    "initialize",
    "reset",
    "use_configuration",
]
