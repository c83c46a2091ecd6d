"""Core contract shared by every validation rule."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Iterable, Optional, Union

from configkit import logger
from configkit.accessors import PropertyAccessor
from configkit.errors import ConfigValidationError

Selector = Union[str, PropertyAccessor]


class ValidationRule(ABC):
    """
    One check against a configuration object.

    ``validate`` returns None when the check passes and a
    ``ConfigValidationError`` when it fails. Rules never raise for invalid
    configuration values and never mutate the object they inspect.
    """

    @abstractmethod
    def validate(self, instance: Any, section_name: str) -> Optional[ConfigValidationError]:
        """Validate ``instance``, building error keys under ``section_name``."""


def log_rule_failure(rule: str, key: str, message: str, **context: Any) -> None:
    """Emit a debug record for a rule failure without the offending value."""
    log_message = f"Validation failure in {rule}: {message} | validator={rule} | key={key}"
    context_parts = ", ".join(f"{name}={value}" for name, value in context.items())
    if context_parts:
        log_message = f"{log_message} | {context_parts}"
    logger.debug(log_message)


def environment_variable_for(key: str) -> str:
    """``Database:Host`` becomes ``DATABASE__HOST``."""
    return key.replace(":", "__").upper()


class PropertyRule(ValidationRule):
    """
    Base for rules bound to a single property.

    The selector is resolved once, at construction, so an invalid selector
    fails before any validation runs.
    """

    def __init__(
        self,
        selector: Selector,
        message: Optional[str] = None,
        *,
        model_type: Optional[type] = None,
    ) -> None:
        self.accessor = PropertyAccessor.resolve(selector, model_type)
        self.custom_message = message

    @property
    def property_name(self) -> str:
        return self.accessor.config_name

    def get_value(self, instance: Any) -> Any:
        return self.accessor.get(instance)

    def key_for(self, section_name: str) -> str:
        return f"{section_name}:{self.property_name}"

    def fail(
        self,
        section_name: str,
        default_message: str,
        current_value: Any = None,
        suggestions: Iterable[str] = (),
        *,
        use_custom_message: bool = True,
    ) -> ConfigValidationError:
        key = self.key_for(section_name)
        message = default_message
        if use_custom_message and self.custom_message is not None:
            message = self.custom_message
        log_rule_failure(type(self).__name__, key, message)
        return ConfigValidationError(key, message, current_value, suggestions)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.property_name!r})"
