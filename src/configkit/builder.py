"""
Fluent builder that collects validation rules for one configuration section.

Rules run in registration order and every rule always runs; ``validate``
yields each error as it is produced. Conditional blocks wrap the rules added
inside them in ``ConditionalRule`` once the block closes, keeping their
positions, so nested blocks compose by AND.

Example:
    >>> builder = (
    ...     validator_for(DatabaseConfig, "Database")
    ...     .not_empty("connection_string")
    ...     .in_range("max_pool_size", 1, 1000)
    ...     .when(lambda c: c.use_tls, lambda b: b.file_exists("certificate_path"))
    ... )
    >>> errors = list(builder.validate(config))

A builder is meant to be configured once and then only read. Concurrent
``validate`` calls are safe once no more rules are being added; adding rules
from several threads is not.
"""
from __future__ import annotations

import re
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Callable, Iterator, List, Optional, Tuple, Union

from configkit import logger
from configkit.errors import ConfigValidationError
from configkit.exceptions import RuleConfigurationError
from configkit.rules import (
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
from configkit.rules.base import Selector
from configkit.security import SecretFormat, SecurityLevel
from configkit.settings import get_settings

Predicate = Callable[[Any], bool]
Configure = Callable[["ValidationBuilder"], Any]


@dataclass(frozen=True)
class ConditionalScope:
    """Handle returned by ``begin_conditional``; pass it back to ``end_conditional``."""

    predicate: Predicate
    start: int
    depth: int


def _require(value: Any, name: str) -> None:
    if value is None:
        raise RuleConfigurationError(f"'{name}' is required", "RULE_001", {"argument": name})


class ValidationBuilder:
    """
    Ordered collection of rules bound to one section name.

    Args:
        section_name: Configuration section the object was bound from; used
            as the first half of every error key
        model_type: Optional configuration class. When given, selectors are
            checked against its declared fields as rules are added.
    """

    def __init__(self, section_name: str, model_type: Optional[type] = None) -> None:
        _require(section_name, "section_name")
        if not isinstance(section_name, str) or not section_name.strip():
            raise RuleConfigurationError(
                "Section name must be a non-empty string",
                "RULE_001",
                {"section_name": repr(section_name)},
            )
        self._section_name = section_name
        self._model_type = model_type
        self._rules: List[ValidationRule] = []
        self._scopes: List[ConditionalScope] = []

    @property
    def section_name(self) -> str:
        return self._section_name

    @property
    def model_type(self) -> Optional[type]:
        return self._model_type

    @property
    def rules(self) -> Tuple[ValidationRule, ...]:
        return tuple(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"ValidationBuilder(section_name={self._section_name!r}, rules={len(self._rules)})"

    # --- Rule registration ---

    def add_rule(self, rule: ValidationRule) -> "ValidationBuilder":
        """Append a rule. Any object with a ``validate(instance, section_name)`` method is accepted."""
        _require(rule, "rule")
        if not callable(getattr(rule, "validate", None)):
            raise RuleConfigurationError(
                f"Rule must define validate(instance, section_name), got {type(rule).__name__}",
                "RULE_001",
            )
        self._rules.append(rule)
        return self

    # --- Evaluation ---

    def validate(self, instance: Any) -> Iterator[ConfigValidationError]:
        """
        Run every rule against ``instance`` in registration order.

        Returns a lazy iterator over the errors produced. Each call starts a
        fresh pass; the rule list is read, never modified.
        """
        _require(instance, "instance")
        return self._run(instance, tuple(self._rules))

    def _run(self, instance: Any, rules: Tuple[ValidationRule, ...]) -> Iterator[ConfigValidationError]:
        failures = 0
        for rule in rules:
            error = rule.validate(instance, self._section_name)
            if error is not None:
                failures += 1
                yield error

        if failures:
            logger.warning(
                f"Section '{self._section_name}' failed {failures} of {len(rules)} validation rule(s)"
            )
        else:
            logger.debug(f"Section '{self._section_name}' passed {len(rules)} validation rule(s)")

    def collect(self, instance: Any) -> List[ConfigValidationError]:
        return list(self.validate(instance))

    def first_error(self, instance: Any) -> Optional[ConfigValidationError]:
        return next(self.validate(instance), None)

    def is_valid(self, instance: Any) -> bool:
        return self.first_error(instance) is None

    # --- Conditional scopes ---

    def begin_conditional(self, predicate: Predicate) -> ConditionalScope:
        """Open a scope; rules added until the matching ``end_conditional`` become conditional."""
        _require(predicate, "predicate")
        if not callable(predicate):
            raise RuleConfigurationError("Predicate must be callable", "RULE_001")
        scope = ConditionalScope(predicate=predicate, start=len(self._rules), depth=len(self._scopes))
        self._scopes.append(scope)
        logger.trace(f"Opened conditional scope at depth {scope.depth} for '{self._section_name}'")
        return scope

    def end_conditional(self, scope: ConditionalScope) -> "ValidationBuilder":
        """Close the innermost scope, wrapping each rule added inside it in place."""
        if not self._scopes or self._scopes[-1] is not scope:
            raise RuleConfigurationError(
                "Conditional scopes must be closed innermost first",
                "RULE_004",
                {"open_scopes": len(self._scopes)},
            )
        self._scopes.pop()

        added = self._rules[scope.start:]
        self._rules[scope.start:] = [ConditionalRule(scope.predicate, rule) for rule in added]
        logger.debug(
            f"Closed conditional scope at depth {scope.depth} for '{self._section_name}': "
            f"{len(added)} rule(s) wrapped"
        )
        return self

    @contextmanager
    def conditional(self, predicate: Predicate) -> Iterator["ValidationBuilder"]:
        """Context-manager form of ``begin_conditional`` / ``end_conditional``."""
        scope = self.begin_conditional(predicate)
        try:
            yield self
        finally:
            self.end_conditional(scope)

    def when(self, predicate: Predicate, configure: Configure) -> "ValidationBuilder":
        """Apply the rules ``configure`` adds only when ``predicate(instance)`` holds."""
        _require(predicate, "predicate")
        _require(configure, "configure")
        with self.conditional(predicate):
            configure(self)
        return self

    # --- Environment-scoped blocks ---

    def when_environment(self, environment_name: str, configure: Configure) -> "ValidationBuilder":
        """
        Add the rules from ``configure`` only when running in ``environment_name``.

        Decided once, while building, against the configured environment
        (case-insensitive). Matching rules are added unwrapped.
        """
        _require(environment_name, "environment_name")
        _require(configure, "configure")
        settings = get_settings()
        if settings.is_environment(environment_name):
            configure(self)
        else:
            logger.debug(
                f"Skipping {environment_name} rules for '{self._section_name}' "
                f"(environment is {settings.environment})"
            )
        return self

    def when_development(self, configure: Configure) -> "ValidationBuilder":
        return self.when_environment("Development", configure)

    def when_staging(self, configure: Configure) -> "ValidationBuilder":
        return self.when_environment("Staging", configure)

    def when_production(self, configure: Configure) -> "ValidationBuilder":
        return self.when_environment("Production", configure)

    # --- Rule shortcuts ---

    def not_empty(self, selector: Selector, message: Optional[str] = None) -> "ValidationBuilder":
        return self.add_rule(NotEmptyRule(selector, message, model_type=self._model_type))

    def not_null(self, selector: Selector, message: Optional[str] = None) -> "ValidationBuilder":
        return self.add_rule(NotNullRule(selector, message, model_type=self._model_type))

    def greater_than(self, selector: Selector, minimum: Any, message: Optional[str] = None) -> "ValidationBuilder":
        return self.add_rule(GreaterThanRule(selector, minimum, message, model_type=self._model_type))

    def less_than(self, selector: Selector, maximum: Any, message: Optional[str] = None) -> "ValidationBuilder":
        return self.add_rule(LessThanRule(selector, maximum, message, model_type=self._model_type))

    def minimum(self, selector: Selector, minimum: Any, message: Optional[str] = None) -> "ValidationBuilder":
        return self.add_rule(MinimumRule(selector, minimum, message, model_type=self._model_type))

    def maximum(self, selector: Selector, maximum: Any, message: Optional[str] = None) -> "ValidationBuilder":
        return self.add_rule(MaximumRule(selector, maximum, message, model_type=self._model_type))

    def in_range(
        self, selector: Selector, minimum: Any, maximum: Any, message: Optional[str] = None
    ) -> "ValidationBuilder":
        return self.add_rule(RangeRule(selector, minimum, maximum, message, model_type=self._model_type))

    def matches_pattern(
        self, selector: Selector, pattern: Union[str, re.Pattern], message: Optional[str] = None
    ) -> "ValidationBuilder":
        return self.add_rule(RegexRule(selector, pattern, message, model_type=self._model_type))

    def no_plain_text_secrets(self, selector: Selector, message: Optional[str] = None) -> "ValidationBuilder":
        return self.add_rule(NoPlainTextSecretRule(selector, message, model_type=self._model_type))

    def validate_secret_format(
        self, selector: Selector, expected_format: Union[SecretFormat, str], message: Optional[str] = None
    ) -> "ValidationBuilder":
        return self.add_rule(SecretFormatRule(selector, expected_format, message, model_type=self._model_type))

    def warn_if_default_value(
        self,
        selector: Selector,
        default_value: str,
        level: Union[SecurityLevel, str] = SecurityLevel.WARNING,
        message: Optional[str] = None,
    ) -> "ValidationBuilder":
        return self.add_rule(
            DefaultValueWarningRule(selector, default_value, level, message, model_type=self._model_type)
        )

    def file_exists(self, selector: Selector, message: Optional[str] = None) -> "ValidationBuilder":
        return self.add_rule(FileExistsRule(selector, message, model_type=self._model_type))

    def directory_exists(self, selector: Selector, message: Optional[str] = None) -> "ValidationBuilder":
        return self.add_rule(DirectoryExistsRule(selector, message, model_type=self._model_type))

    def url_reachable(
        self,
        selector: Selector,
        timeout: Union[float, timedelta, None] = None,
        message: Optional[str] = None,
    ) -> "ValidationBuilder":
        return self.add_rule(UrlReachableRule(selector, timeout, message, model_type=self._model_type))

    def port_available(self, selector: Selector, message: Optional[str] = None) -> "ValidationBuilder":
        return self.add_rule(PortAvailableRule(selector, message, model_type=self._model_type))


def validator_for(model_type: type, section_name: Optional[str] = None) -> ValidationBuilder:
    """Builder for ``model_type``; the section defaults to the class name."""
    _require(model_type, "model_type")
    return ValidationBuilder(section_name or model_type.__name__, model_type)
