# configloader/config/loaders.py

"""
Functions for locating, reading and merging configuration sources.

Precedence (highest first):
1. Environment Variables ([PREFIX_]SECTION_FIELD)
2. The config file (<config_name>.<config_type>, first match in config_paths)
3. Zero values (from the Pydantic models)
"""

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import toml
import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from configloader.errors import ConfigDecodeError, ConfigFileReadError, ConfigParseError
from .models import Configuration, config_keys

logger = logging.getLogger(__name__)

# --- Constants ---
SUPPORTED_CONFIG_TYPES = ("yaml", "yml", "json", "toml")
KEY_DELIMITER = "."
ENV_KEY_SEPARATOR = "_"

# --- YAML ---

class _YAMLLoader(yaml.SafeLoader):
    """
    SafeLoader with YAML 1.2 scalar rules: only true/false are booleans and
    dates stay strings, so `environment: on` or `version: 2024-01-01` read as text.
    """

_BOOL_TAG = "tag:yaml.org,2002:bool"
_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"

_YAMLLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag not in (_BOOL_TAG, _TIMESTAMP_TAG)]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
_YAMLLoader.add_implicit_resolver(
    _BOOL_TAG, re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"), list("tTfF")
)

# --- Options ---

class LoadOptions(BaseModel):
    """Where to look for the config file and how to read environment overrides."""
    model_config = ConfigDict(frozen=True)

    config_name: str  # e.g. "config"
    config_type: str  # e.g. "yaml", "json"
    config_paths: List[Path]  # e.g. [".", "/etc/myapp"], searched in order
    env_prefix: str = ""  # e.g. "MYAPP"

    @field_validator("config_type")
    @classmethod
    def check_config_type(cls, value: str) -> str:
        """Validate the config type and normalise it to lower case."""
        lower_value = value.lower().lstrip(".")
        if lower_value not in SUPPORTED_CONFIG_TYPES:
            raise ValueError(f"Unsupported config type '{value}'. Must be one of {SUPPORTED_CONFIG_TYPES}")
        return lower_value

    @property
    def file_name(self) -> str:
        return f"{self.config_name}.{self.config_type}"

# --- Helper Functions ---

def env_var_name(key: str, prefix: str = "") -> str:
    """
    Maps a dotted key to its environment variable name.

    >>> env_var_name("database.max_connections", "myapp")
    'MYAPP_DATABASE_MAX_CONNECTIONS'
    """
    name = key.replace(KEY_DELIMITER, ENV_KEY_SEPARATOR)
    if prefix:
        name = f"{prefix}{ENV_KEY_SEPARATOR}{name}"
    return name.upper()


def _check_env_key_table() -> None:
    """Fails at import time if two declared keys would share an environment variable."""
    seen: Dict[str, str] = {}
    for key in config_keys():
        name = env_var_name(key)
        if name in seen:
            raise RuntimeError(f"Config keys '{seen[name]}' and '{key}' both map to {name}")
        seen[name] = key

_check_env_key_table()


def _deep_merge_dicts(base: Dict, update: Dict) -> Dict:
    """Recursively merges 'update' dict into 'base' dict."""
    merged = base.copy()
    for key, value in update.items():
        if isinstance(value, dict) and key in merged and isinstance(merged[key], dict):
            merged[key] = _deep_merge_dicts(merged[key], value)
        else:
            # Update takes precedence
            merged[key] = value
    return merged


def find_config_file(options: LoadOptions) -> Optional[Path]:
    """Returns the first <config_name>.<config_type> found in config_paths, or None."""
    for directory in options.config_paths:
        candidate = Path(directory).expanduser() / options.file_name
        logger.debug(f"Looking for config file: {candidate}")
        try:
            found = candidate.is_file()
        except OSError as e:  # e.g. an untraversable directory or an over-long name
            logger.debug(f"Skipping {candidate}: {e}")
            continue
        if found:
            return candidate
    return None


def _parse_document(text: str, config_type: str) -> Any:
    """Parses the raw file contents according to the config type."""
    if config_type in ("yaml", "yml"):
        return yaml.load(text, Loader=_YAMLLoader)
    if config_type == "json":
        return json.loads(text)
    return toml.loads(text)


def _lowercase_keys(value: Any) -> Any:
    """Recursively lower-cases mapping keys; keys are case-insensitive like env variable names."""
    if isinstance(value, dict):
        return {str(key).lower(): _lowercase_keys(item) for key, item in value.items()}
    return value


def _load_config_file(path: Path, config_type: str) -> Dict[str, Any]:
    """
    Reads and parses a config file.

    Raises:
        ConfigFileReadError: If the file cannot be read.
        ConfigParseError: If the file contents are not valid for config_type.
        ConfigDecodeError: If the document is not a mapping at the top level.
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            text = f.read()
    except OSError as e:
        raise ConfigFileReadError(path, f"Could not read config file: {e}") from e

    try:
        document = _parse_document(text, config_type)
    except (yaml.YAMLError, json.JSONDecodeError, toml.TomlDecodeError) as e:
        raise ConfigParseError(path, f"Malformed {config_type} in config file: {e}") from e

    if document is None:  # Empty file
        return {}
    if not isinstance(document, dict):
        raise ConfigDecodeError(
            f"Config file '{path}' must contain a mapping at the top level, got {type(document).__name__}"
        )
    return _lowercase_keys(document)


def _get_config_from_env(prefix: str, environ: Mapping[str, str]) -> Dict[str, Any]:
    """Collects overrides for every declared key from environment variables."""
    env_config: Dict[str, Any] = {}
    for key in config_keys():
        name = env_var_name(key, prefix)
        value = environ.get(name)
        if not value:  # Unset and empty variables are ignored
            continue
        logger.debug(f"Environment variable {name} overrides '{key}'")

        # Build nested dictionary structure
        d = env_config
        parts = key.split(KEY_DELIMITER)
        for part in parts[:-1]:
            d = d.setdefault(part, {})
        d[parts[-1]] = value
    return env_config

# --- Main Loading Function ---

def load_configuration(
    options: LoadOptions,
    environ: Optional[Mapping[str, str]] = None,
) -> Configuration:
    """
    Loads the configuration from the config file and environment variables.

    A missing config file is not an error: the result then holds only
    environment values and zero values.

    Args:
        options: Config file name, type, search paths and environment prefix.
        environ: Environment to read overrides from. Defaults to os.environ.

    Returns:
        A validated, immutable Configuration object.

    Raises:
        ConfigFileReadError: If the config file exists but cannot be read or parsed.
        ConfigDecodeError: If the merged values do not fit the Configuration schema.
    """
    if environ is None:
        environ = os.environ

    merged_config_dict: Dict[str, Any] = {}

    # 1. Config file (optional)
    config_path = find_config_file(options)
    if config_path is None:
        logger.debug(
            f"Config file '{options.file_name}' not found in {[str(p) for p in options.config_paths]}; "
            "continuing without it."
        )
    else:
        merged_config_dict = _load_config_file(config_path, options.config_type)
        logger.info(f"Loaded configuration file {config_path}")

    # 2. Environment variables (highest precedence)
    env_cfg = _get_config_from_env(options.env_prefix, environ)
    if env_cfg:
        merged_config_dict = _deep_merge_dicts(merged_config_dict, env_cfg)

    # 3. Validate and instantiate the Pydantic model
    try:
        config = Configuration.model_validate(merged_config_dict)
    except ValidationError as e:
        logger.debug(f"Configuration validation failed:\n{e}")
        raise ConfigDecodeError(f"Could not decode configuration: {e}") from e

    logger.debug("Configuration loaded and validated successfully.")
    return config
