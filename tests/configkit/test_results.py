"""Tests for the result-convention adapter."""

import pytest
from pydantic import ValidationError

from configkit.builder import ValidationBuilder, validator_for
from configkit.errors import ConfigValidationError
from configkit.exceptions import RuleConfigurationError
from configkit.results import (
    ErrorsResult,
    Result,
    ResultError,
    to_error_code,
    to_errors_result,
    to_result,
    to_result_error,
    to_result_errors,
    to_validation_result,
)
from tests.utils import AppConfig, FixedRule


@pytest.mark.parametrize("key, code", [
    ("Database.ConnectionString", "VALIDATION_DATABASE_CONNECTIONSTRING"),
    ("App:Name", "VALIDATION_APP_NAME"),
    ("api.base_url", "VALIDATION_API_BASE_URL"),
])
def test_to_error_code(key, code):
    assert to_error_code(key) == code


def test_message_is_carried_verbatim():
    error = ConfigValidationError("Database.ConnectionString", "ConnectionString must not be empty: (see docs)")

    result_error = to_result_error(error)

    assert result_error.code == "VALIDATION_DATABASE_CONNECTIONSTRING"
    assert result_error.message == "ConnectionString must not be empty: (see docs)"
    assert str(result_error) == (
        "VALIDATION_DATABASE_CONNECTIONSTRING: ConnectionString must not be empty: (see docs)"
    )


def test_result_error_parse_splits_on_first_separator():
    parsed = ResultError.parse("VALIDATION_APP_NAME: Name: must not be empty")
    assert parsed == ResultError.create("VALIDATION_APP_NAME", "Name: must not be empty")


def test_result_error_parse_without_code():
    assert ResultError.parse("plain message") == ResultError(code="", message="plain message")


def test_to_result_errors_preserves_order():
    errors = [ConfigValidationError("A:one", "1"), ConfigValidationError("A:two", "2")]
    assert [e.code for e in to_result_errors(errors)] == ["VALIDATION_A_ONE", "VALIDATION_A_TWO"]


def test_to_result_error_requires_error():
    with pytest.raises(RuleConfigurationError):
        to_result_error(None)


class TestResultTypes:

    def test_success_cannot_carry_error(self):
        with pytest.raises(ValidationError):
            Result(is_success=True, error=ResultError.create("X", "y"))

    def test_failure_requires_error(self):
        with pytest.raises(ValidationError):
            Result(is_success=False)

    def test_failure_flags(self):
        result = Result.failure(ResultError.create("X", "y"))
        assert result.is_failure
        assert not result.is_success

    def test_errors_result_defaults(self):
        assert ErrorsResult.success().errors == ()


class TestBuilderAdapters:

    def _builder(self, *pattern):
        builder = ValidationBuilder("App")
        for index, fails in enumerate(pattern):
            builder.add_rule(FixedRule(f"rule{index}", fails))
        return builder

    def test_to_result_success_carries_instance(self):
        config = AppConfig()
        result = to_result(self._builder(False), config)
        assert result.is_success
        assert result.value is config

    def test_to_result_failure_carries_first_error(self):
        result = to_result(self._builder(False, True, True), AppConfig())
        assert result.is_failure
        assert result.error.code == "VALIDATION_APP_RULE1"
        assert result.error.message == "rule1 failed"

    def test_to_errors_result_carries_every_error(self):
        result = to_errors_result(self._builder(True, False, True), AppConfig())
        assert [error.code for error in result.errors] == ["VALIDATION_APP_RULE0", "VALIDATION_APP_RULE2"]

    def test_to_errors_result_success(self):
        result = to_errors_result(self._builder(False), AppConfig())
        assert result.is_success
        assert result.errors == ()

    def test_to_validation_result_has_no_value(self):
        result = to_validation_result(self._builder(False), AppConfig())
        assert result.is_success
        assert result.value is None

    def test_real_rule(self):
        builder = validator_for(AppConfig, "App").not_empty("name")
        result = to_validation_result(builder, AppConfig(name=""))
        assert str(result.error) == "VALIDATION_APP_NAME: name must not be empty"

    @pytest.mark.parametrize("adapter", [to_result, to_errors_result, to_validation_result])
    def test_arguments_are_required(self, adapter):
        with pytest.raises(RuleConfigurationError):
            adapter(None, AppConfig())
        with pytest.raises(RuleConfigurationError):
            adapter(self._builder(), None)
