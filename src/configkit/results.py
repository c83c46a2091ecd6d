"""
Adapter from validation errors to a railway-style result convention.

Each ``ConfigValidationError`` maps to a ``ResultError`` whose code is derived
from the key: ``"Database.ConnectionString"`` becomes
``"VALIDATION_DATABASE_CONNECTIONSTRING"`` and ``"App:Name"`` becomes
``"VALIDATION_APP_NAME"``. Messages are carried over verbatim.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from configkit.errors import ConfigValidationError
from configkit.exceptions import RuleConfigurationError

if TYPE_CHECKING:  # pragma: no cover
    from configkit.builder import ValidationBuilder

ERROR_CODE_PREFIX = "VALIDATION_"
_SEPARATOR = ": "


class ResultError(BaseModel):
    """An error code plus message; renders as ``"CODE: message"``."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str

    @classmethod
    def create(cls, code: str, message: str) -> "ResultError":
        return cls(code=code, message=message)

    @classmethod
    def parse(cls, text: str) -> "ResultError":
        """Inverse of ``str(error)``; text without a code yields an empty code."""
        code, separator, message = text.partition(_SEPARATOR)
        if not separator:
            return cls(code="", message=text)
        return cls(code=code, message=message)

    def __str__(self) -> str:
        return f"{self.code}{_SEPARATOR}{self.message}"


class Result(BaseModel):
    """Either a success (optionally carrying a value) or a single error."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    is_success: bool
    value: Any = None
    error: Optional[ResultError] = None

    @model_validator(mode="after")
    def _check_state(self) -> "Result":
        if self.is_success and self.error is not None:
            raise ValueError("A successful result cannot carry an error")
        if not self.is_success and self.error is None:
            raise ValueError("A failed result must carry an error")
        return self

    @classmethod
    def success(cls, value: Any = None) -> "Result":
        return cls(is_success=True, value=value)

    @classmethod
    def failure(cls, error: ResultError) -> "Result":
        return cls(is_success=False, error=error)

    @property
    def is_failure(self) -> bool:
        return not self.is_success


class ErrorsResult(BaseModel):
    """Success, or failure carrying every error in validation order."""

    model_config = ConfigDict(frozen=True)

    is_success: bool
    errors: Tuple[ResultError, ...] = Field(default_factory=tuple)

    @classmethod
    def success(cls) -> "ErrorsResult":
        return cls(is_success=True)

    @classmethod
    def failure(cls, errors: Iterable[ResultError]) -> "ErrorsResult":
        return cls(is_success=False, errors=tuple(errors))

    @property
    def is_failure(self) -> bool:
        return not self.is_success


def to_error_code(key: str) -> str:
    """Upper-case the key, turn ``.`` and ``:`` into ``_`` and prefix it."""
    return ERROR_CODE_PREFIX + key.replace(".", "_").replace(":", "_").upper()


def to_result_error(error: ConfigValidationError) -> ResultError:
    if error is None:
        raise RuleConfigurationError("'error' is required", "RULE_001")
    return ResultError.create(to_error_code(error.key), error.message)


def to_result_errors(errors: Iterable[ConfigValidationError]) -> List[ResultError]:
    return [to_result_error(error) for error in errors]


def _errors_for(builder: "ValidationBuilder", instance: Any) -> List[ConfigValidationError]:
    if builder is None:
        raise RuleConfigurationError("'builder' is required", "RULE_001")
    if instance is None:
        raise RuleConfigurationError("'instance' is required", "RULE_001")
    return builder.collect(instance)


def to_result(builder: "ValidationBuilder", instance: Any) -> Result:
    """The instance on success, otherwise the first error."""
    errors = _errors_for(builder, instance)
    if not errors:
        return Result.success(instance)
    return Result.failure(to_result_error(errors[0]))


def to_errors_result(builder: "ValidationBuilder", instance: Any) -> ErrorsResult:
    """Every error, in validation order."""
    errors = _errors_for(builder, instance)
    if not errors:
        return ErrorsResult.success()
    return ErrorsResult.failure(to_result_errors(errors))


def to_validation_result(builder: "ValidationBuilder", instance: Any) -> Result:
    """Like ``to_result`` but a success carries no value."""
    errors = _errors_for(builder, instance)
    if not errors:
        return Result.success()
    return Result.failure(to_result_error(errors[0]))
