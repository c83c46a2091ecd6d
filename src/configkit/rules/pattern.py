"""Regular expression rule."""
from __future__ import annotations

import re
from typing import Any, Optional, Union

from configkit import logger
from configkit.errors import ConfigValidationError
from configkit.exceptions import RuleConfigurationError

from .base import PropertyRule, Selector


class RegexRule(PropertyRule):
    """
    Fails when a set value does not match ``pattern``.

    Matching is a search, so anchor the pattern to constrain the whole value.
    A None value passes: absence is not a pattern violation.
    """

    def __init__(
        self,
        selector: Selector,
        pattern: Union[str, re.Pattern],
        message: Optional[str] = None,
        *,
        model_type: Optional[type] = None,
    ) -> None:
        if pattern is None:
            raise RuleConfigurationError("RegexRule requires a pattern", "RULE_001")
        super().__init__(selector, message, model_type=model_type)
        if isinstance(pattern, re.Pattern):
            self.regex = pattern
        else:
            try:
                self.regex = re.compile(pattern)
            except re.error as exc:
                logger.error(f"Invalid regex pattern for {self.property_name}: {exc}")
                raise RuleConfigurationError(
                    f"Invalid regex pattern '{pattern}': {exc}",
                    "RULE_002",
                    {"pattern": pattern, "property": self.property_name},
                ) from exc
        self.pattern = self.regex.pattern

    def validate(self, instance: Any, section_name: str) -> Optional[ConfigValidationError]:
        value = self.get_value(instance)
        if value is None:
            return None

        text = value if isinstance(value, str) else str(value)
        if not self.regex.search(text):
            return self.fail(
                section_name,
                f"{self.property_name} does not match required pattern",
                value,
                [f"Required pattern: {self.pattern}", f"Current value: {value}"],
            )
        return None
