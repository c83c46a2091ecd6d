"""Tests for the ConfigValidationError value and the exception hierarchy."""

import pytest
from pydantic import ValidationError

from configkit.errors import REDACTED, ConfigValidationError, format_errors
from configkit.exceptions import (
    ConfigKitError,
    InvalidSelectorError,
    RuleConfigurationError,
    StartupValidationError,
)


class TestConfigValidationError:

    def test_positional_construction(self):
        error = ConfigValidationError("App:Name", "Name must not be empty", "", ["Set it"])

        assert error.key == "App:Name"
        assert error.message == "Name must not be empty"
        assert error.current_value == ""
        assert error.suggestions == ("Set it",)

    def test_suggestions_default_to_empty_tuple(self):
        error = ConfigValidationError("App:Name", "broken")
        assert error.suggestions == ()
        assert error.current_value is None

    def test_single_string_suggestion_is_not_split(self):
        error = ConfigValidationError("App:Name", "broken", suggestions="Only one")
        assert error.suggestions == ("Only one",)

    def test_suggestions_from_iterable(self):
        error = ConfigValidationError("App:Name", "broken", None, (hint for hint in ["a", "b"]))
        assert error.suggestions == ("a", "b")

    def test_is_immutable(self):
        error = ConfigValidationError("App:Name", "broken")
        with pytest.raises(ValidationError):
            error.message = "fixed"

    def test_render_full(self):
        error = ConfigValidationError(
            "Database:max_pool_size",
            "max_pool_size must be between 1 and 1000 (current: 0)",
            0,
            ["Valid range: 1-1000", "Current value: 0"],
        )

        assert error.render() == (
            "  ✗ Database:max_pool_size: max_pool_size must be between 1 and 1000 (current: 0)\n"
            "    Current value: 0\n"
            "    → Valid range: 1-1000\n"
            "    → Current value: 0\n"
        )

    def test_render_omits_missing_value(self):
        error = ConfigValidationError("App:Name", "Name must not be null")
        assert error.render() == "  ✗ App:Name: Name must not be null\n"

    def test_render_keeps_falsy_value(self):
        error = ConfigValidationError("App:Port", "bad", 0)
        assert "Current value: 0" in error.render()

    def test_str_is_render(self):
        error = ConfigValidationError("App:Password", "leaked", REDACTED)
        assert str(error) == error.render()
        assert "[REDACTED]" in str(error)

    def test_equality_is_by_value(self):
        assert ConfigValidationError("A:b", "m", 1, ["s"]) == ConfigValidationError("A:b", "m", 1, ["s"])

    def test_format_errors_preserves_order(self):
        first = ConfigValidationError("A:one", "first")
        second = ConfigValidationError("A:two", "second")

        text = format_errors([first, second])

        assert text.index("A:one") < text.index("A:two")
        assert text == first.render() + second.render()

    def test_format_errors_empty(self):
        assert format_errors([]) == ""


class TestExceptions:

    def test_base_error_defaults(self):
        error = ConfigKitError("Something failed")
        assert error.error_code == "CONFIGKIT_001"
        assert error.context == {}
        assert str(error) == "Something failed [Error Code: CONFIGKIT_001]"

    def test_with_context_chains(self):
        error = ConfigKitError("Failed").with_context({"section": "Database"})
        assert error.context == {"section": "Database"}
        assert "section=Database" in str(error)

    def test_repr_names_class(self):
        error = RuleConfigurationError("bad", "RULE_002")
        assert repr(error).startswith("RuleConfigurationError(")
        assert "RULE_002" in repr(error)

    @pytest.mark.parametrize("exc_type", [InvalidSelectorError, RuleConfigurationError])
    def test_construction_errors_are_value_errors(self, exc_type):
        error = exc_type("bad")
        assert isinstance(error, ValueError)
        assert isinstance(error, ConfigKitError)

    def test_default_codes(self):
        assert InvalidSelectorError("x").error_code == "SELECTOR_001"
        assert RuleConfigurationError("x").error_code == "RULE_001"

    def test_startup_error_renders_every_error(self):
        errors = [
            ConfigValidationError("App:Name", "Name must not be empty", ""),
            ConfigValidationError("Db:port", "Port 80 is already in use", 80),
        ]

        exc = StartupValidationError(errors)

        assert exc.error_code == "STARTUP_001"
        assert exc.errors == errors
        assert exc.context["error_count"] == 2
        assert exc.message.startswith("Configuration validation failed with 2 error(s):")
        assert "App:Name: Name must not be empty" in exc.message
        assert "Db:port: Port 80 is already in use" in exc.message
