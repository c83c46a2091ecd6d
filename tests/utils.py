"""Sample configuration types shared by the configkit tests."""

from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from configkit.errors import ConfigValidationError
from configkit.rules import ValidationRule


class DatabaseConfig(BaseModel):
    connection_string: Optional[str] = None
    max_pool_size: int = 100
    command_timeout: timedelta = timedelta(seconds=30)
    use_tls: bool = False
    certificate_path: Optional[str] = None
    password: Optional[str] = None


class ApiConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    base_url: Optional[str] = Field(default=None, alias="BaseUrl")
    api_key: Optional[str] = Field(default=None, alias="ApiKey")
    port: int = Field(default=8080, alias="Port")


@dataclass
class AppConfig:
    name: Optional[str] = None
    environment: str = "Production"
    port: int = 8080
    admin_password: Optional[str] = None
    tags: Optional[list] = None

    @property
    def display_name(self) -> str:
        return (self.name or "").title()


class FixedRule(ValidationRule):
    """Test double: fails (or passes) unconditionally and counts its calls."""

    def __init__(self, label: str, fails: bool) -> None:
        self.label = label
        self.fails = fails
        self.calls = 0

    def validate(self, instance: Any, section_name: str) -> Optional[ConfigValidationError]:
        self.calls += 1
        if self.fails:
            return ConfigValidationError(f"{section_name}:{self.label}", f"{self.label} failed")
        return None
