"""
Environment-driven settings for the configkit library itself.

These settings never describe the configuration being validated; they control
how configkit behaves (which environment-scoped rule blocks apply, the default
URL probe timeout, logging bootstrap).
"""

import os
from functools import lru_cache
from typing import Callable, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

T = TypeVar('T')

ENVIRONMENT_VARIABLES = ("CONFIGKIT_ENVIRONMENT", "APP_ENV", "ENVIRONMENT")
DEFAULT_ENVIRONMENT = "Production"
DEFAULT_URL_TIMEOUT = 5.0


def get_env_var(
    name: str,
    default: Optional[str] = None,
    required: bool = False
) -> Optional[str]:
    """
    Get an environment variable with consistent error handling.

    Raises:
        ValueError: If required is True and the variable is not set

    Example:
        >>> get_env_var("NONEXISTENT_VAR", default="/tmp")
        '/tmp'
    """
    value = os.environ.get(name)

    if value is None:
        if required:
            raise ValueError(f"Required environment variable {name} is not set")
        return default

    return value


def get_env_var_as_type(
    name: str,
    default: Optional[T] = None,
    required: bool = False,
    converter: Callable[[str], T] = str,
    error_msg: Optional[str] = None
) -> Optional[T]:
    """
    Get an environment variable and convert it to a specific type.

    Raises:
        ValueError: If the variable is required and missing, or conversion fails
    """
    value = get_env_var(name, default=None, required=required)

    if value is None:
        return default

    try:
        return converter(value)
    except Exception as e:
        msg = error_msg or f"Failed to convert environment variable {name}={value} using {converter.__name__}"
        raise ValueError(f"{msg}: {str(e)}") from e


def get_env_bool(
    name: str,
    default: Optional[bool] = None,
    required: bool = False
) -> Optional[bool]:
    """
    Get an environment variable as a boolean value.

    Treats "1", "true", "yes", "y", "on" as True and "0", "false", "no", "n",
    "off" as False (case insensitive).

    Raises:
        ValueError: If the value cannot be interpreted as a boolean
    """
    value = get_env_var(name, default=None, required=required)

    if value is None:
        return default

    value = value.strip().lower()
    if value in ("1", "true", "yes", "y", "on"):
        return True
    elif value in ("0", "false", "no", "n", "off"):
        return False
    else:
        raise ValueError(
            f"Cannot convert environment variable {name}={value} to boolean. "
            f"Expected one of: 1, true, yes, y, on, 0, false, no, n, off"
        )


def get_env_float(
    name: str,
    default: Optional[float] = None,
    required: bool = False,
    min_value: Optional[float] = None,
) -> Optional[float]:
    """
    Get an environment variable as a float, optionally bounded below (exclusive).

    Raises:
        ValueError: If the value is not a number or is not above ``min_value``
    """
    def convert_and_validate(value: str) -> float:
        result = float(value)
        if min_value is not None and result <= min_value:
            raise ValueError(f"Value {result} must be greater than {min_value}")
        return result

    return get_env_var_as_type(
        name,
        default=default,
        required=required,
        converter=convert_and_validate,
        error_msg=f"Failed to get valid number from environment variable {name}"
    )


class ConfigKitSettings(BaseModel):
    """Runtime switches for configkit, normally read from the environment."""

    model_config = ConfigDict(frozen=True)

    environment: str = Field(
        default=DEFAULT_ENVIRONMENT,
        description="Name of the hosting environment (Development, Staging, Production, ...)",
    )
    log_level: str = Field(default="WARNING")
    url_timeout: float = Field(default=DEFAULT_URL_TIMEOUT, gt=0)
    auto_logging: bool = Field(default=True)

    @field_validator("environment")
    @classmethod
    def _strip_environment(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("environment cannot be empty")
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.strip().upper()

    def is_environment(self, name: str) -> bool:
        return self.environment.lower() == name.strip().lower()

    @classmethod
    def from_env(cls) -> "ConfigKitSettings":
        environment = DEFAULT_ENVIRONMENT
        for variable in ENVIRONMENT_VARIABLES:
            candidate = get_env_var(variable)
            if candidate and candidate.strip():
                environment = candidate
                break

        disable_auto = get_env_bool("CONFIGKIT_DISABLE_AUTO_LOGGING", default=False)
        return cls(
            environment=environment,
            log_level=get_env_var("CONFIGKIT_LOG_LEVEL", default="WARNING"),
            url_timeout=get_env_float("CONFIGKIT_URL_TIMEOUT", default=DEFAULT_URL_TIMEOUT, min_value=0),
            auto_logging=not disable_auto,
        )


@lru_cache(maxsize=1)
def get_settings() -> ConfigKitSettings:
    """Settings read from the environment on first use."""
    return ConfigKitSettings.from_env()


def reload_settings() -> ConfigKitSettings:
    """Drop the cached settings and read the environment again."""
    get_settings.cache_clear()
    return get_settings()
