"""
ConfigKit Exception Hierarchy

Only construction-time and startup-abort conditions are raised as exceptions.
Rule failures discovered while validating a configuration object are returned
as ``ConfigValidationError`` values (see ``configkit.errors``) and never raised.

The hierarchy:
- ConfigKitError: Base exception for all ConfigKit-specific errors
- InvalidSelectorError: A property selector is not a simple top-level field
- RuleConfigurationError: A rule or builder was constructed with bad arguments
- StartupValidationError: Validation produced errors and startup must abort

Usage Examples:
    >>> try:
    ...     builder.not_empty("database.host")
    ... except InvalidSelectorError as e:
    ...     if e.error_code == "SELECTOR_001":
    ...         ...

    >>> raise RuleConfigurationError("Pattern is invalid", "RULE_002").with_context({
    ...     "pattern": "[a-z",
    ... })
"""

from typing import Any, Dict, Optional, Sequence, TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from configkit.errors import ConfigValidationError


class ConfigKitError(Exception):
    """
    Base exception class for all ConfigKit-specific errors.

    Attributes:
        error_code (str): Unique identifier for programmatic error handling
        context (Dict[str, Any]): Additional context information for debugging

    Error Codes:
        CONFIGKIT_001: Generic ConfigKit error
    """

    def __init__(
        self,
        message: str,
        error_code: str = "CONFIGKIT_001",
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = dict(context or {})

    def with_context(self, context: Dict[str, Any]) -> 'ConfigKitError':
        """
        Add additional context to the exception and return self for chaining.

        Example:
            >>> raise ConfigKitError("Operation failed").with_context({
            ...     "section": "Database",
            ... })
        """
        self.context.update(context)
        return self

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} [Error Code: {self.error_code}, Context: {context_str}]"
        return f"{self.message} [Error Code: {self.error_code}]"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"context={self.context!r})"
        )


class InvalidSelectorError(ConfigKitError, ValueError):
    """
    Raised when a property selector cannot produce a stable error key.

    Error Codes:
        SELECTOR_001: Selector is not a simple top-level identifier
        SELECTOR_002: Selector names a field the bound model type does not declare
        SELECTOR_003: Selector is missing or of an unsupported type
    """

    def __init__(
        self,
        message: str,
        error_code: str = "SELECTOR_001",
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(message, error_code, context)


class RuleConfigurationError(ConfigKitError, ValueError):
    """
    Raised when a rule or builder receives invalid construction arguments.

    Error Codes:
        RULE_001: Required argument is missing
        RULE_002: Regular expression pattern does not compile
        RULE_003: Threshold, timeout or enum argument is invalid
        RULE_004: Conditional scope opened or closed out of order
    """

    def __init__(
        self,
        message: str,
        error_code: str = "RULE_001",
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(message, error_code, context)


class StartupValidationError(ConfigKitError):
    """
    Raised by the startup integration when configuration validation fails.

    The message concatenates the rendered form of every error so the host
    process prints all of them before it aborts.

    Error Codes:
        STARTUP_001: One or more configuration sections failed validation
    """

    def __init__(
        self,
        errors: Sequence["ConfigValidationError"],
        error_code: str = "STARTUP_001",
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        self.errors = list(errors)
        header = f"Configuration validation failed with {len(self.errors)} error(s):"
        rendered = "\n".join(error.render() for error in self.errors)
        context_data = dict(context or {})
        context_data.setdefault("error_count", len(self.errors))
        super().__init__(f"{header}\n{rendered}", error_code, context_data)
