"""Rules requiring a property to be set."""
from __future__ import annotations

from collections.abc import Sized
from typing import Any, List, Optional

from configkit.errors import ConfigValidationError

from .base import PropertyRule, environment_variable_for


def _how_to_set(key: str) -> List[str]:
    return [
        f"Set it in the '{key.split(':', 1)[0]}' section of your configuration file",
        f"Or set environment variable: {environment_variable_for(key)}",
        "Or provide it through your secret store",
    ]


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, Sized):
        return len(value) == 0
    return False


class NotEmptyRule(PropertyRule):
    """Fails for None, empty or whitespace-only strings and empty collections."""

    def validate(self, instance: Any, section_name: str) -> Optional[ConfigValidationError]:
        value = self.get_value(instance)
        if is_blank(value):
            return self.fail(
                section_name,
                f"{self.property_name} must not be empty",
                value,
                _how_to_set(self.key_for(section_name)),
            )
        return None


class NotNullRule(PropertyRule):
    """Fails only when the property is None; works for any property type."""

    def validate(self, instance: Any, section_name: str) -> Optional[ConfigValidationError]:
        if self.get_value(instance) is None:
            return self.fail(
                section_name,
                f"{self.property_name} must not be null",
                None,
                _how_to_set(self.key_for(section_name)),
            )
        return None
