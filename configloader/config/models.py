# configloader/config/models.py

"""
Pydantic models for the application configuration.

Each section model maps to one top-level key of the config document; each
field maps to the key of the same name inside that section. Uses Pydantic V2
syntax.
"""

from datetime import date, time, timedelta
from typing import Annotated, Any, List, Tuple

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationInfo, field_validator, model_validator

from .durations import to_timedelta

# Every `port` is numeric and Database carries driver/port.
SCHEMA_VERSION = 1

# Accepts "1h30m"-style strings, plain seconds or a timedelta
Duration = Annotated[timedelta, BeforeValidator(to_timedelta)]


class _Section(BaseModel):
    """Common behaviour for configuration sections."""
    model_config = ConfigDict(
        frozen=True,  # Instances are read-only once decoded
        extra="ignore",  # Unknown source keys are dropped
        coerce_numbers_to_str=True,  # `password: 1234` decodes to "1234"
    )

    @model_validator(mode="before")
    @classmethod
    def drop_null_values(cls, data: Any) -> Any:
        """Treats explicit nulls (e.g. `name:` in YAML) as missing keys."""
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data

    @field_validator("*", mode="before")
    @classmethod
    def render_scalars_as_text(cls, value: Any, info: ValidationInfo) -> Any:
        """String fields also take booleans and dates (TOML datetimes, JSON true/false) as their text."""
        if cls.model_fields[info.field_name].annotation is not str:
            return value
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (date, time)):  # datetime is a date subclass
            return value.isoformat()
        return value


class ApplicationConfig(_Section):
    """General application settings."""
    name: str = ""
    environment: str = ""
    port: int = 0
    version: str = ""
    project_root: str = ""
    generation_root: str = ""


class DatabaseConfig(_Section):
    """Database connection and pool settings."""
    driver: str = ""
    user: str = ""
    password: str = ""
    host: str = ""
    port: int = 0
    name: str = ""
    max_connections: int = 0
    min_connections: int = 0
    max_connection_life_time: Duration = timedelta(0)
    max_connection_idle_time: Duration = timedelta(0)
    health_check_period: Duration = timedelta(0)


class HTTPConfig(_Section):
    """HTTP server settings."""
    port: int = 0
    allowed_origins: str = Field("", description="Comma-joined list of allowed CORS origins.")

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def join_origin_list(cls, value: Any) -> Any:
        """Accepts a YAML/JSON list of origins as well as the comma-joined form."""
        if isinstance(value, (list, tuple)):
            return ",".join(str(item) for item in value)
        return value

    @property
    def origins(self) -> List[str]:
        """The allowed origins as a list, blanks removed."""
        return [part.strip() for part in self.allowed_origins.split(",") if part.strip()]


class RedisConfig(_Section):
    """Redis connection settings."""
    address: str = ""
    password: str = ""


class OAuth2Config(_Section):
    """OAuth2 client settings."""
    client_id: str = ""
    client_secret: str = ""
    redirect_uri: str = ""
    session_secret: str = ""


class TokenConfig(_Section):
    """Token issuing settings."""
    duration: Duration = timedelta(0)


class Configuration(BaseModel):
    """Root configuration model. Immutable after construction."""
    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,  # Allows Configuration(oauth2=...) besides the source key
    )

    application: ApplicationConfig = Field(default_factory=ApplicationConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    http: HTTPConfig = Field(default_factory=HTTPConfig)
    redis: RedisConfig = Field(default_factory=RedisConfig)
    oauth2: OAuth2Config = Field(default_factory=OAuth2Config, alias="google_oauth2")
    tokens: TokenConfig = Field(default_factory=TokenConfig)

    @model_validator(mode="before")
    @classmethod
    def drop_null_sections(cls, data: Any) -> Any:
        """An empty section (`redis:` with nothing under it) decodes to its zero value."""
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


def config_keys() -> Tuple[str, ...]:
    """
    Returns the dotted source key of every declared field, in declaration order.

    Example: ("application.name", ..., "database.max_connections", ...,
    "google_oauth2.client_id", ..., "tokens.duration").
    """
    keys = []
    for name, field in Configuration.model_fields.items():
        section_key = field.alias or name
        for field_name in field.annotation.model_fields:
            keys.append(f"{section_key}.{field_name}")
    return tuple(keys)
