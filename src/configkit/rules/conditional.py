"""Predicate-gated rule wrapper."""
from __future__ import annotations

from typing import Any, Callable, Optional

from configkit.errors import ConfigValidationError
from configkit.exceptions import RuleConfigurationError

from .base import ValidationRule

Predicate = Callable[[Any], bool]


class ConditionalRule(ValidationRule):
    """
    Runs ``inner_rule`` only when ``predicate(instance)`` is truthy.

    When the predicate is false the inner rule is not invoked at all and no
    error is produced. Nested conditions are built by wrapping a
    ``ConditionalRule`` in another one, which composes them with AND.
    """

    def __init__(self, predicate: Predicate, inner_rule: ValidationRule) -> None:
        if predicate is None or not callable(predicate):
            raise RuleConfigurationError("ConditionalRule requires a callable predicate", "RULE_001")
        if inner_rule is None:
            raise RuleConfigurationError("ConditionalRule requires an inner rule", "RULE_001")
        self.predicate = predicate
        self.inner_rule = inner_rule

    def validate(self, instance: Any, section_name: str) -> Optional[ConfigValidationError]:
        if not self.predicate(instance):
            return None
        return self.inner_rule.validate(instance, section_name)

    def __repr__(self) -> str:
        return f"ConditionalRule({self.inner_rule!r})"
