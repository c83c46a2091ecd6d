"""
Threshold rules over any totally ordered value type.

Numbers, dates, datetimes, timedeltas, Decimals and any other type supporting
``<``, ``>`` and ``==`` go through the same three-way comparison. Values that
cannot be compared with the bound (None, mismatched types, NaN) fail the rule.
"""
from __future__ import annotations

from abc import abstractmethod
from typing import Any, List, Optional

from configkit.errors import ConfigValidationError
from configkit.exceptions import RuleConfigurationError

from .base import PropertyRule, Selector


def compare(left: Any, right: Any) -> Optional[int]:
    """Return -1, 0 or 1, or None when the values have no defined order."""
    try:
        if left < right:
            return -1
        if left > right:
            return 1
        if left == right:
            return 0
    except TypeError:
        return None
    return None


def _require_bound(name: str, value: Any, rule: str) -> None:
    if value is None:
        raise RuleConfigurationError(
            f"{rule} requires a '{name}' bound",
            "RULE_001",
            {"rule": rule, "argument": name},
        )


class _ThresholdRule(PropertyRule):
    """Compare the property with one bound; subclasses name the accepted order."""

    bound_name = "bound"

    def __init__(
        self,
        selector: Selector,
        bound: Any,
        message: Optional[str] = None,
        *,
        model_type: Optional[type] = None,
    ) -> None:
        _require_bound(self.bound_name, bound, type(self).__name__)
        super().__init__(selector, message, model_type=model_type)
        self.bound = bound

    @abstractmethod
    def accepts(self, order: int) -> bool:
        """True when the three-way comparison result satisfies the rule."""

    @abstractmethod
    def describe(self, value: Any) -> str:
        """Default failure message for ``value``."""

    @abstractmethod
    def hint(self) -> str:
        """First suggestion shown with a failure."""

    def validate(self, instance: Any, section_name: str) -> Optional[ConfigValidationError]:
        value = self.get_value(instance)
        order = compare(value, self.bound)
        if order is None or not self.accepts(order):
            return self.fail(
                section_name,
                self.describe(value),
                value,
                [self.hint(), f"Current value: {value}"],
            )
        return None


class GreaterThanRule(_ThresholdRule):
    """Exclusive lower bound."""

    bound_name = "minimum"

    def accepts(self, order: int) -> bool:
        return order > 0

    def describe(self, value: Any) -> str:
        return f"{self.property_name} must be > {self.bound} (current: {value})"

    def hint(self) -> str:
        return f"Must be greater than {self.bound}"


class LessThanRule(_ThresholdRule):
    """Exclusive upper bound."""

    bound_name = "maximum"

    def accepts(self, order: int) -> bool:
        return order < 0

    def describe(self, value: Any) -> str:
        return f"{self.property_name} must be < {self.bound} (current: {value})"

    def hint(self) -> str:
        return f"Must be less than {self.bound}"


class MinimumRule(_ThresholdRule):
    """Inclusive lower bound."""

    bound_name = "minimum"

    def accepts(self, order: int) -> bool:
        return order >= 0

    def describe(self, value: Any) -> str:
        return f"{self.property_name} must be at least {self.bound} (current: {value})"

    def hint(self) -> str:
        return f"Must be at least {self.bound}"


class MaximumRule(_ThresholdRule):
    """Inclusive upper bound."""

    bound_name = "maximum"

    def accepts(self, order: int) -> bool:
        return order <= 0

    def describe(self, value: Any) -> str:
        return f"{self.property_name} must be at most {self.bound} (current: {value})"

    def hint(self) -> str:
        return f"Must be at most {self.bound}"


class RangeRule(PropertyRule):
    """Both bounds inclusive."""

    def __init__(
        self,
        selector: Selector,
        minimum: Any,
        maximum: Any,
        message: Optional[str] = None,
        *,
        model_type: Optional[type] = None,
    ) -> None:
        _require_bound("minimum", minimum, "RangeRule")
        _require_bound("maximum", maximum, "RangeRule")
        order = compare(minimum, maximum)
        if order is None or order > 0:
            raise RuleConfigurationError(
                f"RangeRule bounds are invalid: minimum {minimum!r} must not exceed maximum {maximum!r}",
                "RULE_003",
                {"minimum": minimum, "maximum": maximum},
            )
        super().__init__(selector, message, model_type=model_type)
        self.minimum = minimum
        self.maximum = maximum

    def validate(self, instance: Any, section_name: str) -> Optional[ConfigValidationError]:
        value = self.get_value(instance)
        below = compare(value, self.minimum)
        above = compare(value, self.maximum)
        if below is None or above is None or below < 0 or above > 0:
            suggestions: List[str] = [
                f"Valid range: {self.minimum}-{self.maximum}",
                f"Current value: {value}",
            ]
            return self.fail(
                section_name,
                f"{self.property_name} must be between {self.minimum} and {self.maximum} (current: {value})",
                value,
                suggestions,
            )
        return None
