"""
Plain-text secret detection.

The detector only looks at values of properties whose name suggests secret
material (password, token, api key, ...). Values that point at an external
secret store are always accepted.
"""
from __future__ import annotations

import re
from enum import Enum
from typing import Optional, Tuple

KEY_VAULT_PREFIX = "@Microsoft.KeyVault"
SECRETS_MANAGER_PREFIX = "arn:aws:secretsmanager"
PLACEHOLDER_PREFIX = "${"

SECRET_KEYWORDS: Tuple[str, ...] = (
    "password",
    "passwd",
    "pwd",
    "secret",
    "token",
    "apikey",
    "api_key",
    "private_key",
    "privatekey",
    "client_secret",
    "clientsecret",
)

# Anchored patterns must match the whole value. The access-key pattern is a
# substring search: such keys are usually embedded in longer strings.
SECRET_PATTERNS: Tuple[re.Pattern, ...] = (
    re.compile(r"^sk-[a-zA-Z0-9]{20,}$"),
    re.compile(r"^[a-zA-Z0-9]{32,}$"),
    re.compile(r"^Bearer\s+[a-zA-Z0-9\-._~+/]+=*$", re.IGNORECASE),
    re.compile(r"^[a-f0-9]{64}$"),
    re.compile(r"^AIza[0-9A-Za-z\-_]{35}$"),
    re.compile(r"AKIA[0-9A-Z]{16}"),
)


class SecretFormat(Enum):
    """Secure storage format a secret-bearing property is required to use."""

    AZURE_KEY_VAULT = "AzureKeyVault"
    AWS_SECRETS_MANAGER = "AwsSecretsManager"
    ENVIRONMENT_VARIABLE = "EnvironmentVariable"
    USER_SECRETS = "UserSecrets"


class SecurityLevel(Enum):
    """Advisory severity attached to default-value warnings."""

    CRITICAL = "CRITICAL"
    WARNING = "WARNING"
    INFO = "INFO"


def _starts_with_ignore_case(value: str, prefix: str) -> bool:
    return value[:len(prefix)].lower() == prefix.lower()


def is_secure_reference(value: str) -> bool:
    """
    True when ``value`` points at externally stored secret material.

    Recognises key vault references, secrets manager ARNs and ``${...}``
    placeholders. Only the ``${`` opener is checked for placeholders.
    """
    if value is None:
        raise ValueError("value is required")

    return (
        _starts_with_ignore_case(value, KEY_VAULT_PREFIX)
        or _starts_with_ignore_case(value, SECRETS_MANAGER_PREFIX)
        or value.startswith(PLACEHOLDER_PREFIX)
    )


def is_secret_property(property_name: str) -> bool:
    lowered = property_name.lower()
    return any(keyword in lowered for keyword in SECRET_KEYWORDS)


def is_likely_secret(value: Optional[str], property_name: str) -> bool:
    """
    Decide whether ``value`` looks like a plain-text secret.

    Args:
        value: Configured value to inspect
        property_name: Name of the property the value belongs to

    Returns:
        True only if the property name contains a secret keyword, the value is
        not a secure reference, and the value matches a known secret shape.
    """
    if property_name is None:
        raise ValueError("property_name is required")

    if value is None or not value.strip():
        return False

    if not is_secret_property(property_name):
        return False

    if is_secure_reference(value):
        return False

    return any(pattern.search(value) for pattern in SECRET_PATTERNS)


def matches_secret_format(value: str, expected: SecretFormat, property_name: str) -> bool:
    """
    Check ``value`` against exactly one secure format.

    The environment variable format requires the closing ``}``, unlike
    ``is_secure_reference``.
    """
    if expected is SecretFormat.AZURE_KEY_VAULT:
        return _starts_with_ignore_case(value, KEY_VAULT_PREFIX)
    if expected is SecretFormat.AWS_SECRETS_MANAGER:
        return _starts_with_ignore_case(value, SECRETS_MANAGER_PREFIX)
    if expected is SecretFormat.ENVIRONMENT_VARIABLE:
        return value.startswith(PLACEHOLDER_PREFIX) and value.endswith("}")
    if expected is SecretFormat.USER_SECRETS:
        return not is_likely_secret(value, property_name)
    return False
