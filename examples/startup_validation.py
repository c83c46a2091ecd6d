"""
Example script validating several configuration sections before startup.

Each section is a pydantic model or dataclass the host application has
already bound from its configuration files and environment. The script
builds one validator per section and aborts with every error at once.
"""

import sys
import tempfile
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional, Tuple

from loguru import logger
from pydantic import BaseModel, Field

from configkit import (
    StartupValidationError,
    StartupValidator,
    ValidationBuilder,
    fields,
    initialize_logging,
    to_errors_result,
    validator_for,
)


class ApplicationConfig(BaseModel):
    name: str = ""
    version: str = "1.0"
    max_concurrent_requests: int = 100
    request_timeout_seconds: int = 30


class DatabaseConfig(BaseModel):
    connection_string: str = ""
    command_timeout_seconds: int = 30
    max_pool_size: int = 100
    require_ssl: bool = False


class ExternalApiConfig(BaseModel):
    base_url: str = Field(default="", alias="BaseUrl")
    api_key: str = Field(default="", alias="ApiKey")
    timeout_seconds: int = Field(default=30, alias="TimeoutSeconds")
    max_retries: int = Field(default=3, alias="MaxRetries")


@dataclass
class LoggingConfig:
    log_directory: str = ""
    retention_days: int = 30


@dataclass
class CampaignConfig:
    name: str = ""
    start_date: date = date.today()
    minimum_purchase_amount: Decimal = Decimal("0.01")
    maximum_discount_percentage: Decimal = Decimal("0.25")
    cache_duration: timedelta = timedelta(hours=1)
    admin_password: Optional[str] = None


def build_validator(log_directory: str) -> Tuple[StartupValidator, ValidationBuilder]:
    application = (
        validator_for(ApplicationConfig, "Application")
        .not_empty("name", "Application name is required")
        .matches_pattern("version", r"^\d+\.\d+\.\d+$", "Version must be in format X.Y.Z")
        .minimum("max_concurrent_requests", 1)
        .maximum("max_concurrent_requests", 1000)
        .in_range("request_timeout_seconds", 5, 300)
    )

    database = (
        validator_for(DatabaseConfig, "Database")
        .not_empty("connection_string", "Database connection string is required")
        .in_range("command_timeout_seconds", 1, 600)
        .in_range("max_pool_size", 1, 1000)
        .when(
            lambda c: c.require_ssl,
            lambda b: b.matches_pattern(
                "connection_string",
                "Encrypt=True|Encrypt=true",
                "SSL is required but connection string does not specify Encrypt=True",
            ),
        )
    )

    api_fields = fields(ExternalApiConfig)
    external_api = (
        validator_for(ExternalApiConfig, "ExternalApi")
        .not_empty(api_fields.base_url)
        .not_empty(api_fields.api_key)
        .no_plain_text_secrets(api_fields.api_key)
        .greater_than(api_fields.timeout_seconds, 0)
        .less_than(api_fields.timeout_seconds, 600)
        .in_range(api_fields.max_retries, 0, 10)
    )

    logging_section = (
        validator_for(LoggingConfig, "CustomLogging")
        .not_empty("log_directory")
        .directory_exists("log_directory")
        .in_range("retention_days", 1, 365)
    )

    campaign = (
        validator_for(CampaignConfig, "Campaign")
        .not_empty("name")
        .minimum("start_date", date.today())
        .minimum("minimum_purchase_amount", Decimal("0.01"))
        .maximum("maximum_discount_percentage", Decimal("0.75"))
        .maximum("cache_duration", timedelta(hours=24))
        .when_production(lambda b: b.warn_if_default_value("admin_password", "admin"))
    )

    return (
        StartupValidator()
        .register(application, ApplicationConfig(name="Orders", version="1.4"))
        .register(database, DatabaseConfig(connection_string="Server=db", require_ssl=True))
        .register(
            external_api,
            ExternalApiConfig(BaseUrl="https://api.example.com", ApiKey="sk-" + "a" * 32),
        )
        .register(logging_section, lambda: LoggingConfig(log_directory=log_directory))
        .register(campaign, CampaignConfig(name="Spring", admin_password="admin"))
    ), external_api


def main() -> int:
    initialize_logging(console_level="INFO")

    with tempfile.TemporaryDirectory() as log_directory:
        validator, external_api = build_validator(log_directory)

        logger.info("=== Result-style view of one section ===")
        result = to_errors_result(
            external_api,
            ExternalApiConfig(BaseUrl="https://api.example.com", ApiKey="sk-" + "a" * 32),
        )
        for error in result.errors:
            logger.info(str(error))

        logger.info("=== Startup validation ===")
        try:
            validator.run()
        except StartupValidationError as exc:
            print(exc.message, file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
