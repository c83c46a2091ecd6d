"""Tests for the fail-fast startup integration."""

import pytest

from configkit.builder import ValidationBuilder, validator_for
from configkit.exceptions import RuleConfigurationError, StartupValidationError
from configkit.startup import StartupValidator, validate_on_startup
from tests.utils import AppConfig, DatabaseConfig, FixedRule


def test_run_passes_when_every_section_is_valid(caplog, app_config, database_config):
    validator = (
        StartupValidator()
        .register(validator_for(AppConfig, "App").not_empty("name"), app_config)
        .register(validator_for(DatabaseConfig, "Database").not_empty("connection_string"), database_config)
    )

    validator.run()

    assert len(validator) == 2
    assert "Configuration validated: 2 section(s) passed" in caplog.text


def test_run_aborts_with_every_error():
    validator = (
        StartupValidator()
        .register(validator_for(AppConfig, "App").not_empty("name").in_range("port", 1, 100), AppConfig(name=""))
        .register(validator_for(DatabaseConfig, "Database").not_empty("connection_string"), DatabaseConfig())
    )

    with pytest.raises(StartupValidationError) as exc_info:
        validator.run()

    exc = exc_info.value
    assert [error.key for error in exc.errors] == ["App:name", "App:port", "Database:connection_string"]
    assert "failed with 3 error(s)" in exc.message
    assert "App:name: name must not be empty" in exc.message
    assert "Database:connection_string" in exc.message
    assert exc.context["sections"] == "App, Database"


def test_errors_are_logged_before_raising(caplog):
    builder = ValidationBuilder("App").add_rule(FixedRule("broken", fails=True))

    with pytest.raises(StartupValidationError):
        StartupValidator().register(builder, AppConfig()).run()

    assert "App:broken: broken failed" in caplog.text
    assert "Configuration validation failed with 1 error(s) in: App" in caplog.text


def test_callable_source_is_resolved_at_run_time():
    calls = []

    def provider():
        calls.append(1)
        return AppConfig(name="Orders")

    validator = StartupValidator().register(validator_for(AppConfig, "App").not_empty("name"), provider)
    assert calls == []

    validator.run()
    assert calls == [1]


def test_explicit_lazy_flag_overrides_detection():
    class CallableConfig:
        name = "configured"

        def __call__(self):
            raise AssertionError("must not be called")

    builder = ValidationBuilder("App").not_empty("name")
    StartupValidator().register(builder, CallableConfig(), lazy=False).run()


def test_register_requires_arguments():
    with pytest.raises(RuleConfigurationError):
        StartupValidator().register(None, AppConfig())
    with pytest.raises(RuleConfigurationError):
        StartupValidator().register(ValidationBuilder("App"), None)


def test_validate_on_startup_returns_instance(app_config):
    assert validate_on_startup(validator_for(AppConfig, "App").not_empty("name"), app_config) is app_config


def test_validate_on_startup_raises():
    with pytest.raises(StartupValidationError) as exc_info:
        validate_on_startup(validator_for(AppConfig, "App").port_available("port"), AppConfig(port=0))
    assert exc_info.value.error_code == "STARTUP_001"
