"""Validation rule variants."""
from .base import PropertyRule, ValidationRule, environment_variable_for
from .comparison import (
    GreaterThanRule,
    LessThanRule,
    MaximumRule,
    MinimumRule,
    RangeRule,
    compare,
)
from .conditional import ConditionalRule
from .infrastructure import (
    DirectoryExistsRule,
    FileExistsRule,
    PortAvailableRule,
    UrlReachableRule,
    probe_port,
)
from .pattern import RegexRule
from .presence import NotEmptyRule, NotNullRule
from .secrets import DefaultValueWarningRule, NoPlainTextSecretRule, SecretFormatRule

__all__ = [
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
    "PropertyRule",
    "RangeRule",
    "RegexRule",
    "SecretFormatRule",
    "UrlReachableRule",
    "ValidationRule",
    "compare",
    "environment_variable_for",
    "probe_port",
]
