"""
Fail-fast integration for application startup.

Register every builder together with the bound configuration object (or a
zero-argument callable producing it) and call ``run`` before the application
starts serving. Any error aborts startup with every rendered error in the
exception message. Binding configuration sources into objects is left to the
host application.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Union

from configkit import logger
from configkit.builder import ValidationBuilder
from configkit.errors import ConfigValidationError
from configkit.exceptions import RuleConfigurationError, StartupValidationError

InstanceSource = Union[Any, Callable[[], Any]]


@dataclass(frozen=True)
class _Registration:
    builder: ValidationBuilder
    source: InstanceSource
    lazy: bool

    def instance(self) -> Any:
        return self.source() if self.lazy else self.source


class StartupValidator:
    """Validates every registered section and aborts when any of them fails."""

    def __init__(self) -> None:
        self._registrations: List[_Registration] = []

    def register(self, builder: ValidationBuilder, source: InstanceSource, *, lazy: Optional[bool] = None) -> "StartupValidator":
        """
        Register ``builder`` to run against ``source``.

        ``source`` is treated as a provider when it is callable and not an
        instance of the builder's model type, unless ``lazy`` says otherwise.
        """
        if builder is None:
            raise RuleConfigurationError("'builder' is required", "RULE_001")
        if source is None:
            raise RuleConfigurationError("'source' is required", "RULE_001")

        if lazy is None:
            model_type = builder.model_type
            is_instance = model_type is not None and isinstance(source, model_type)
            lazy = callable(source) and not is_instance and not isinstance(source, type)

        self._registrations.append(_Registration(builder, source, lazy))
        return self

    def __len__(self) -> int:
        return len(self._registrations)

    def collect(self) -> List[ConfigValidationError]:
        """Errors from every registration, in registration order."""
        errors: List[ConfigValidationError] = []
        for registration in self._registrations:
            errors.extend(registration.builder.validate(registration.instance()))
        return errors

    def run(self) -> None:
        """
        Raise ``StartupValidationError`` if any registered section is invalid.

        Every error is logged before the exception is raised.
        """
        errors = self.collect()
        if not errors:
            logger.info(f"Configuration validated: {len(self._registrations)} section(s) passed")
            return

        for error in errors:
            logger.error(error.render().rstrip("\n"))
        sections = sorted({error.key.split(":", 1)[0] for error in errors})
        logger.error(
            f"Configuration validation failed with {len(errors)} error(s) in: {', '.join(sections)}"
        )
        raise StartupValidationError(errors, context={"sections": ", ".join(sections)})


def validate_on_startup(builder: ValidationBuilder, instance: Any) -> Any:
    """Validate one section and return ``instance`` if it passes."""
    StartupValidator().register(builder, instance, lazy=False).run()
    return instance
