"""
Property selectors.

Rules address one top-level field of the configuration object. A selector is
a field name (``"max_pool_size"``), a ``PropertyAccessor``, or a reference
taken from ``fields(ModelType)``. Nested paths, calls and computed expressions
are rejected when the rule is built so every error key stays stable and
readable.
"""
from __future__ import annotations

import dataclasses
import keyword
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel

from configkit import logger
from configkit.exceptions import InvalidSelectorError


def _declared_fields(model_type: Optional[type]) -> Optional[Dict[str, str]]:
    """
    Map declared field names of ``model_type`` to their configuration names.

    Returns None when the type does not declare its fields in a way that can
    be inspected, in which case selectors are not checked against it.
    """
    if model_type is None:
        return None

    if isinstance(model_type, type) and issubclass(model_type, BaseModel):
        return {
            name: info.alias or name
            for name, info in model_type.model_fields.items()
        }

    if dataclasses.is_dataclass(model_type):
        return {field.name: field.name for field in dataclasses.fields(model_type)}

    declared: Dict[str, str] = {}
    for klass in reversed(getattr(model_type, "__mro__", ())):
        for name in getattr(klass, "__annotations__", {}):
            declared.setdefault(name, name)
    return declared or None


def _is_property(model_type: Optional[type], name: str) -> bool:
    return model_type is not None and isinstance(getattr(model_type, name, None), property)


@dataclass(frozen=True)
class PropertyAccessor:
    """
    A resolved selector: the field to read and the name used in error keys.

    Attributes:
        name: Attribute name on the configuration object
        config_name: Name shown in error keys (pydantic alias when declared)
    """

    name: str
    config_name: str

    def get(self, instance: Any) -> Any:
        """Read the field; unset members read as None."""
        if isinstance(instance, Mapping):
            if self.name in instance:
                return instance[self.name]
            return instance.get(self.config_name)
        return getattr(instance, self.name, None)

    def __call__(self, instance: Any) -> Any:
        return self.get(instance)

    @classmethod
    def resolve(
        cls,
        selector: Union[str, "PropertyAccessor"],
        model_type: Optional[type] = None,
    ) -> "PropertyAccessor":
        """
        Turn a selector into an accessor, checking it against ``model_type``.

        Raises:
            InvalidSelectorError: If the selector is not a simple top-level
                field of the configuration type
        """
        if selector is None:
            raise InvalidSelectorError("Selector is required", "SELECTOR_003")

        if isinstance(selector, PropertyAccessor):
            name = selector.name
        elif isinstance(selector, str):
            name = selector
        else:
            raise InvalidSelectorError(
                "Selector must be a field name or a field reference, "
                f"got {type(selector).__name__}",
                "SELECTOR_003",
                {"selector": repr(selector)},
            )

        if not name.isidentifier() or keyword.iskeyword(name):
            logger.error(f"Rejected selector {name!r}: not a simple top-level field")
            raise InvalidSelectorError(
                "Selector must be a property expression naming a single top-level field",
                "SELECTOR_001",
                {"selector": name},
            )

        declared = _declared_fields(model_type)
        if declared is None:
            config_name = selector.config_name if isinstance(selector, PropertyAccessor) else name
            return cls(name=name, config_name=config_name)

        if name in declared:
            return cls(name=name, config_name=declared[name])
        if _is_property(model_type, name):
            return cls(name=name, config_name=name)

        logger.error(f"Rejected selector {name!r}: {model_type.__name__} declares no such field")
        raise InvalidSelectorError(
            f"{model_type.__name__} has no field named '{name}'",
            "SELECTOR_002",
            {"selector": name, "model_type": model_type.__name__},
        )


class FieldRefs:
    """
    Attribute-style field references for a configuration type.

    ``fields(DatabaseConfig).port`` resolves to a ``PropertyAccessor`` and
    fails immediately for names the type does not declare.
    """

    def __init__(self, model_type: type):
        self._model_type = model_type

    def __getattr__(self, name: str) -> PropertyAccessor:
        if name.startswith("_"):
            raise AttributeError(name)
        return PropertyAccessor.resolve(name, self._model_type)

    def __repr__(self) -> str:
        return f"fields({self._model_type.__name__})"


def fields(model_type: type) -> FieldRefs:
    return FieldRefs(model_type)
