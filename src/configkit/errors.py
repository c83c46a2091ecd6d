"""Structured result of a failed validation rule."""
from __future__ import annotations

from typing import Any, Iterable, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

REDACTED = "[REDACTED]"


class ConfigValidationError(BaseModel):
    """
    A single configuration validation failure.

    Attributes:
        key: Configuration key in ``"{section}:{property}"`` form
        message: Human-readable description of what is wrong
        current_value: The offending value, or ``"[REDACTED]"`` for secrets
        suggestions: Ordered remediation hints

    This is a value, not an exception: rules return it and the builder yields
    it. Instances are immutable.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    key: str
    message: str
    current_value: Any = None
    suggestions: Tuple[str, ...] = Field(default_factory=tuple)

    def __init__(
        self,
        key: str,
        message: str,
        current_value: Any = None,
        suggestions: Optional[Iterable[str]] = None,
        **data: Any,
    ) -> None:
        super().__init__(
            key=key,
            message=message,
            current_value=current_value,
            suggestions=suggestions,
            **data,
        )

    @field_validator("suggestions", mode="before")
    @classmethod
    def _coerce_suggestions(cls, value: Any) -> Tuple[str, ...]:
        if value is None:
            return ()
        if isinstance(value, str):
            return (value,)
        return tuple(str(item) for item in value)

    def render(self) -> str:
        """Multi-line console form: key and message, current value, suggestions."""
        lines = [f"  ✗ {self.key}: {self.message}"]
        if self.current_value is not None:
            lines.append(f"    Current value: {self.current_value}")
        for suggestion in self.suggestions:
            lines.append(f"    → {suggestion}")
        return "\n".join(lines) + "\n"

    def __str__(self) -> str:
        return self.render()


def format_errors(errors: Iterable[ConfigValidationError]) -> str:
    """Render a sequence of errors as one block of text, in order."""
    return "".join(error.render() for error in errors)
