# configloader/__init__.py

"""
configloader: layered application configuration.

Typical startup:

    from configloader import LoadOptions, initialize, get_current

    initialize(LoadOptions(config_name="config", config_type="yaml",
                           config_paths=[".", "/etc/myapp"], env_prefix="MYAPP"))
    config = get_current()
"""

from .config import (
    SCHEMA_VERSION,
    ApplicationConfig,
    ConfigHolder,
    Configuration,
    DatabaseConfig,
    HolderState,
    HTTPConfig,
    LoadOptions,
    OAuth2Config,
    RedisConfig,
    TokenConfig,
    attach_to_context,
    config_keys,
    default_holder,
    env_var_name,
    find_config_file,
    format_duration,
    from_context,
    get_current,
    initialize,
    load_configuration,
    parse_duration,
    reset,
    use_configuration,
)
from .errors import (
    ConfigDecodeError,
    ConfigFileReadError,
    ConfigLoaderError,
    ConfigNotInitializedError,
    ConfigParseError,
)
from .utils.logging_config import setup_logging
from .version import __version__

__all__ = [
    "SCHEMA_VERSION",
    "ApplicationConfig",
    "ConfigHolder",
    "Configuration",
    "DatabaseConfig",
    "HolderState",
    "HTTPConfig",
    "LoadOptions",
    "OAuth2Config",
    "RedisConfig",
    "TokenConfig",
    "attach_to_context",
    "config_keys",
    "default_holder",
    "env_var_name",
    "find_config_file",
    "format_duration",
    "from_context",
    "get_current",
    "initialize",
    "load_configuration",
    "parse_duration",
    "reset",
    "use_configuration",
    "ConfigDecodeError",
    "ConfigFileReadError",
    "ConfigLoaderError",
    "ConfigNotInitializedError",
    "ConfigParseError",
    "setup_logging",
    "__version__",
]
