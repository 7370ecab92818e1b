"""
Required-field validation and typed projection of inbound payloads.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Type, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .errors import MissingField

logger = logging.getLogger(__name__)

# A default is either a constant or a zero-argument factory (e.g. a time-derived id)
Default = Union[Any, Callable[[], Any]]


def is_missing(value: Any) -> bool:
    """Absent, null, empty string and empty lists count as missing. Empty mappings do not."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False


@dataclass(frozen=True)
class FieldRule:
    """A single required field and the client-facing message when it is missing."""
    name: str
    message: Optional[str] = None


@dataclass
class Validator:
    """
    Checks required fields, fills defaults and projects the payload onto a model.

    Attributes:
        model: pydantic model describing the validated request
        required: fields that must be present and non-empty
        defaults: values for optional fields that are missing
    """
    model: Type[BaseModel]
    required: Tuple[FieldRule, ...] = ()
    defaults: Dict[str, Default] = field(default_factory=dict)

    def __call__(self, payload: Mapping[str, Any]) -> BaseModel:
        return self.validate(payload)

    def validate(self, payload: Mapping[str, Any]) -> BaseModel:
        payload = payload or {}
        for rule in self.required:
            if is_missing(payload.get(rule.name)):
                logger.info(f"Validation failed - missing field: {rule.name}")
                raise MissingField(rule.name, rule.message)

        values = {}
        for name in self.model.model_fields:
            value = payload.get(name)
            if is_missing(value) and name in self.defaults:
                default = self.defaults[name]
                value = default() if callable(default) else default
            if value is not None:
                values[name] = value

        try:
            return self.model.model_validate(values)
        except PydanticValidationError as e:
            first = e.errors()[0] if e.errors() else {}
            name = str(first.get("loc", ("payload",))[0])
            logger.info(f"Validation failed - invalid field {name}: {first.get('msg')}")
            raise MissingField(name, f"Invalid {name}") from e


def required(*names: str) -> Tuple[FieldRule, ...]:
    """Shorthand for required fields using the default 'Missing <name>' message."""
    return tuple(FieldRule(name) for name in names)
