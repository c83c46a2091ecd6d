"""
ConfigKit - fail-fast validation for strongly-typed configuration objects.

This module owns the Loguru sink management used across the package and
re-exports the public validation API. Submodules import the shared logger via
``from configkit import logger`` so the logger is defined before any of them
are loaded.
"""

__version__ = "0.1.0"

import os
import sys
import warnings
from pathlib import Path
from typing import Dict, List, Optional, TextIO, Union

from loguru import logger

# Library code stays silent until an application opts in.
logger.disable("configkit")


# --- Logger Configuration Classes and Types ---

class LoggingConfigError(Exception):
    """Exception raised when logging configuration fails validation or setup."""
    pass


class LoggerState:
    """
    Tracks the sinks configkit has installed so they can be removed again.

    Only sinks added through this module are tracked; sinks added directly on
    the Loguru logger by the host application are never touched by
    ``reset_logging``.
    """

    def __init__(self):
        self._initialized = False
        self._test_mode = False
        self._sink_ids: List[int] = []

    def is_initialized(self) -> bool:
        return self._initialized

    def is_test_mode(self) -> bool:
        return self._test_mode

    def mark_initialized(self, test_mode: bool = False):
        self._initialized = True
        self._test_mode = test_mode

    def add_sink_id(self, sink_id: int):
        self._sink_ids.append(sink_id)

    def sink_ids(self) -> List[int]:
        return list(self._sink_ids)

    def reset(self):
        self._initialized = False
        self._test_mode = False
        self._sink_ids.clear()


_logger_state = LoggerState()


# --- Configuration Validation Functions ---

def validate_log_level(level: str) -> str:
    """
    Validate a Loguru level name.

    Args:
        level: Log level string to validate

    Returns:
        Upper-cased level name

    Raises:
        LoggingConfigError: If log level is invalid
    """
    valid_levels = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}
    if not isinstance(level, str):
        raise LoggingConfigError(f"Log level must be a string, got {type(level).__name__}")

    level_upper = level.upper()
    if level_upper not in valid_levels:
        raise LoggingConfigError(
            f"Invalid log level '{level}'. Must be one of: {', '.join(sorted(valid_levels))}"
        )
    return level_upper


def validate_output_destination(destination: Union[str, Path, TextIO, None]) -> Union[str, TextIO, None]:
    """
    Validate a sink destination, creating the parent directory of file sinks.

    Raises:
        LoggingConfigError: If destination is invalid
    """
    if destination is None:
        return None

    if hasattr(destination, "write"):
        return destination

    try:
        path_dest = Path(destination)
        if not path_dest.parent.exists():
            try:
                path_dest.parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise LoggingConfigError(
                    f"Cannot create directory for log destination '{destination}': {e}"
                ) from e
        return str(path_dest)
    except (TypeError, ValueError) as e:
        raise LoggingConfigError(f"Invalid output destination '{destination}': {e}") from e


# --- Core Logging Configuration Functions ---

def configure_console_logging(
    level: str = "INFO",
    format_template: Optional[str] = None,
    colorize: bool = True,
    destination: TextIO = sys.stderr
) -> int:
    """
    Add a console sink for configkit log records.

    Args:
        level: Log level for console output
        format_template: Custom format template (uses default if None)
        colorize: Enable colored console output
        destination: Console destination (default: sys.stderr)

    Returns:
        Sink ID for tracking and cleanup

    Raises:
        LoggingConfigError: If configuration fails
    """
    try:
        validated_level = validate_log_level(level)

        if format_template is None:
            format_template = (
                "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{module}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
            )

        logger.enable("configkit")
        sink_id = logger.add(
            destination,
            level=validated_level,
            format=format_template,
            colorize=colorize
        )
        _logger_state.add_sink_id(sink_id)
        return sink_id

    except LoggingConfigError:
        raise
    except Exception as e:
        raise LoggingConfigError(f"Failed to configure console logging: {e}") from e


def configure_file_logging(
    log_file_path: Union[str, Path],
    level: str = "DEBUG",
    rotation: str = "10 MB",
    retention: str = "7 days",
    format_template: Optional[str] = None,
    encoding: str = "utf-8",
) -> int:
    """
    Add a rotating file sink for configkit log records.

    Returns:
        Sink ID for tracking and cleanup

    Raises:
        LoggingConfigError: If configuration fails
    """
    try:
        validated_level = validate_log_level(level)
        validated_path = validate_output_destination(log_file_path)

        if format_template is None:
            format_template = (
                "{time:YYYY-MM-DD HH:mm:ss.SSS} | "
                "{level: <8} | "
                "{name}:{function}:{line} - {message}"
            )

        logger.enable("configkit")
        sink_id = logger.add(
            validated_path,
            rotation=rotation,
            retention=retention,
            level=validated_level,
            format=format_template,
            encoding=encoding
        )
        _logger_state.add_sink_id(sink_id)
        return sink_id

    except LoggingConfigError:
        raise
    except Exception as e:
        raise LoggingConfigError(f"Failed to configure file logging: {e}") from e


# --- Test-Specific Entry Points ---

def configure_test_logging(
    console_level: str = "DEBUG",
    console_destination: Optional[TextIO] = None,
) -> Dict[str, int]:
    """
    Configure logging for test runs: a single uncolored console sink.

    Raises:
        LoggingConfigError: If test logging configuration fails
    """
    reset_logging()

    sink_ids = {}
    destination = console_destination if console_destination is not None else sys.stderr
    sink_ids["console"] = configure_console_logging(
        level=console_level,
        destination=destination,
        colorize=False,
    )
    _logger_state.mark_initialized(test_mode=True)
    return sink_ids


def reset_logging():
    """
    Remove every sink installed through configkit and silence the package again.

    Raises:
        LoggingConfigError: If reset fails
    """
    try:
        for sink_id in _logger_state.sink_ids():
            try:
                logger.remove(sink_id)
            except ValueError:
                # Already removed by the host application.
                continue
        _logger_state.reset()
        logger.disable("configkit")
    except Exception as e:
        raise LoggingConfigError(f"Failed to reset logging configuration: {e}") from e


# --- Application Logging Initialization ---

def initialize_logging(
    console_level: str = "WARNING",
    log_file: Optional[Union[str, Path]] = None,
    file_level: str = "DEBUG",
) -> Dict[str, int]:
    """
    Initialize configkit logging for an application.

    A console sink is always installed; a file sink only when ``log_file`` is
    given.

    Raises:
        LoggingConfigError: If initialization fails
    """
    sink_ids = {}
    sink_ids["console"] = configure_console_logging(level=console_level)

    if log_file is not None:
        sink_ids["file"] = configure_file_logging(log_file_path=log_file, level=file_level)

    _logger_state.mark_initialized(test_mode=False)
    logger.debug("--- ConfigKit Logger Initialized ---")
    return sink_ids


def get_logger_state() -> LoggerState:
    return _logger_state


def is_logging_initialized() -> bool:
    return _logger_state.is_initialized()


def is_test_mode() -> bool:
    return _logger_state.is_test_mode()


def _is_pytest_running() -> bool:
    return "pytest" in sys.modules or "PYTEST_CURRENT_TEST" in os.environ


def _auto_initialize_logging():
    """
    Install the console sink requested through the environment.

    Skipped under pytest and when ``CONFIGKIT_DISABLE_AUTO_LOGGING`` is set.
    """
    from configkit.settings import get_settings

    if _logger_state.is_initialized() or _is_pytest_running():
        return

    try:
        settings = get_settings()
    except ValueError as e:
        warnings.warn(f"Invalid configkit environment settings: {e}. Logging stays disabled.")
        return

    if not settings.auto_logging:
        return

    try:
        initialize_logging(console_level=settings.log_level)
    except LoggingConfigError as e:
        warnings.warn(f"Failed to initialize configkit logging: {e}. Logging stays disabled.")


# --- Public API ---

from configkit.exceptions import (  # noqa: E402
    ConfigKitError,
    InvalidSelectorError,
    RuleConfigurationError,
    StartupValidationError,
)
from configkit.errors import ConfigValidationError, format_errors  # noqa: E402
from configkit.accessors import PropertyAccessor, fields  # noqa: E402
from configkit.security import (  # noqa: E402
    SecretFormat,
    SecurityLevel,
    is_likely_secret,
    is_secure_reference,
)
from configkit.rules import (  # noqa: E402
    ConditionalRule,
    DefaultValueWarningRule,
    DirectoryExistsRule,
    FileExistsRule,
    GreaterThanRule,
    LessThanRule,
    MaximumRule,
    MinimumRule,
    NoPlainTextSecretRule,
    NotEmptyRule,
    NotNullRule,
    PortAvailableRule,
    RangeRule,
    RegexRule,
    SecretFormatRule,
    UrlReachableRule,
    ValidationRule,
)
from configkit.builder import ConditionalScope, ValidationBuilder, validator_for  # noqa: E402
from configkit.results import (  # noqa: E402
    ErrorsResult,
    Result,
    ResultError,
    to_error_code,
    to_errors_result,
    to_result,
    to_result_error,
    to_result_errors,
    to_validation_result,
)
from configkit.startup import StartupValidator, validate_on_startup  # noqa: E402

_auto_initialize_logging()

__all__ = [
    "__version__",
    "logger",
    "LoggingConfigError",
    "LoggerState",
    "configure_console_logging",
    "configure_file_logging",
    "configure_test_logging",
    "initialize_logging",
    "reset_logging",
    "get_logger_state",
    "is_logging_initialized",
    "is_test_mode",
    "validate_log_level",
    "ConfigKitError",
    "InvalidSelectorError",
    "RuleConfigurationError",
    "StartupValidationError",
    "ConfigValidationError",
    "format_errors",
    "PropertyAccessor",
    "fields",
    "SecretFormat",
    "SecurityLevel",
    "is_likely_secret",
    "is_secure_reference",
    "ValidationRule",
    "ConditionalRule",
    "DefaultValueWarningRule",
    "DirectoryExistsRule",
    "FileExistsRule",
    "GreaterThanRule",
    "LessThanRule",
    "MaximumRule",
    "MinimumRule",
    "NoPlainTextSecretRule",
    "NotEmptyRule",
    "NotNullRule",
    "PortAvailableRule",
    "RangeRule",
    "RegexRule",
    "SecretFormatRule",
    "UrlReachableRule",
    "ConditionalScope",
    "ValidationBuilder",
    "validator_for",
    "ErrorsResult",
    "Result",
    "ResultError",
    "to_error_code",
    "to_errors_result",
    "to_result",
    "to_result_error",
    "to_result_errors",
    "to_validation_result",
    "StartupValidator",
    "validate_on_startup",
]
