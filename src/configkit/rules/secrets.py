"""Rules guarding secret-bearing properties. Offending values are always redacted."""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from configkit.errors import REDACTED, ConfigValidationError
from configkit.exceptions import RuleConfigurationError
from configkit.security import (
    SecretFormat,
    SecurityLevel,
    is_likely_secret,
    matches_secret_format,
)

from .base import PropertyRule, Selector

FORMAT_SUGGESTIONS: Dict[SecretFormat, List[str]] = {
    SecretFormat.AZURE_KEY_VAULT: ["Use format: @Microsoft.KeyVault(SecretUri=https://...)"],
    SecretFormat.AWS_SECRETS_MANAGER: ["Use format: arn:aws:secretsmanager:region:account:secret:name"],
    SecretFormat.ENVIRONMENT_VARIABLE: ["Use format: ${VARIABLE_NAME}"],
    SecretFormat.USER_SECRETS: ["Keep the value out of committed files and load it from a local secret store"],
}


def _text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, str):
        return value
    return str(value)


def _coerce_enum(enum_type, value, argument: str):
    if isinstance(value, enum_type):
        return value
    if isinstance(value, str):
        for member in enum_type:
            if value.strip().lower() in (member.name.lower(), member.value.lower()):
                return member
    raise RuleConfigurationError(
        f"Invalid {argument}: {value!r}",
        "RULE_003",
        {"argument": argument, "allowed": [member.name for member in enum_type]},
    )


class NoPlainTextSecretRule(PropertyRule):
    """Fails when the secret heuristic flags the value as a plain-text secret."""

    def validate(self, instance: Any, section_name: str) -> Optional[ConfigValidationError]:
        value = _text(self.get_value(instance))
        if value is None or not value.strip():
            return None

        if is_likely_secret(value, self.property_name):
            return self.fail(
                section_name,
                f"{self.property_name} appears to contain a plain-text secret",
                REDACTED,
                [
                    "Use Azure Key Vault: @Microsoft.KeyVault(SecretUri=...)",
                    "Use AWS Secrets Manager: arn:aws:secretsmanager:...",
                    "Use environment variables for sensitive data: ${VARIABLE_NAME}",
                ],
            )
        return None


class SecretFormatRule(PropertyRule):
    """
    Requires a set value to use exactly one secure storage format.

    Matching a different secure format than the expected one still fails.
    """

    def __init__(
        self,
        selector: Selector,
        expected_format: Union[SecretFormat, str],
        message: Optional[str] = None,
        *,
        model_type: Optional[type] = None,
    ) -> None:
        if expected_format is None:
            raise RuleConfigurationError("SecretFormatRule requires an expected format", "RULE_001")
        self.expected_format = _coerce_enum(SecretFormat, expected_format, "expected_format")
        super().__init__(selector, message, model_type=model_type)

    def validate(self, instance: Any, section_name: str) -> Optional[ConfigValidationError]:
        value = _text(self.get_value(instance))
        if value is None or not value.strip():
            return None

        if not matches_secret_format(value, self.expected_format, self.property_name):
            return self.fail(
                section_name,
                f"{self.property_name} does not follow {self.expected_format.value} format",
                REDACTED,
                FORMAT_SUGGESTIONS[self.expected_format],
            )
        return None


class DefaultValueWarningRule(PropertyRule):
    """
    Flags a property still set to a known insecure default.

    The severity only tags the message; every severity fails the same way.
    """

    def __init__(
        self,
        selector: Selector,
        default_value: str,
        level: Union[SecurityLevel, str] = SecurityLevel.WARNING,
        message: Optional[str] = None,
        *,
        model_type: Optional[type] = None,
    ) -> None:
        if default_value is None:
            raise RuleConfigurationError("DefaultValueWarningRule requires a default value", "RULE_001")
        self.default_value = default_value
        self.level = _coerce_enum(SecurityLevel, level, "level")
        super().__init__(selector, message, model_type=model_type)

    def validate(self, instance: Any, section_name: str) -> Optional[ConfigValidationError]:
        value = _text(self.get_value(instance))
        if value is not None and value.lower() == self.default_value.lower():
            return self.fail(
                section_name,
                f"[{self.level.value}] {self.property_name} is using default/insecure value",
                REDACTED,
                [
                    "Change to a secure value",
                    f"Default value '{self.default_value}' should not be used in production",
                ],
            )
        return None
