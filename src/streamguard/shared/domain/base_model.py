"""
Base domain model with camelCase JSON support.

Python side uses snake_case fields, JSON side uses camelCase keys.
All StreamGuard value objects inherit from BaseDomainModel.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Type, TypeVar

T = TypeVar("T", bound="BaseDomainModel")


def to_camel_case(snake_str: str) -> str:
    """
    Convert snake_case to camelCase.

    Examples:
        >>> to_camel_case("rule_id")
        'ruleId'
        >>> to_camel_case("operation_kind")
        'operationKind'
    """
    head, *rest = snake_str.split("_")
    return head + "".join(part.title() for part in rest)


def to_snake_case(camel_str: str) -> str:
    """
    Convert camelCase to snake_case.

    Examples:
        >>> to_snake_case("ruleId")
        'rule_id'
        >>> to_snake_case("elementCount")
        'element_count'
    """
    chars = [camel_str[0].lower()]
    for char in camel_str[1:]:
        if char.isupper():
            chars.append("_")
        chars.append(char.lower())
    return "".join(chars)


def _encode(value: Any) -> Any:
    """Encode a single field value for JSON output."""
    if isinstance(value, BaseDomainModel):
        return value.to_json()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [_encode(item) for item in value]
    if isinstance(value, (dict, MappingProxyType)):
        return {to_camel_case(str(k)): _encode(v) for k, v in value.items()}
    return value


@dataclass(frozen=True)
class BaseDomainModel:
    """
    Base class for all domain models.

    - to_json() serializes to camelCase
    - from_json() reads camelCase back into snake_case fields
    - Enums are serialized by value, nested models recursively

    Subclasses with nested or enum fields override from_json.
    """

    def to_json(self) -> Dict[str, Any]:
        """Serialize to camelCase JSON-compatible dict."""
        return {to_camel_case(f.name): _encode(getattr(self, f.name)) for f in fields(self)}

    @classmethod
    def from_json(cls: Type[T], data: Mapping[str, Any]) -> T:
        """
        Deserialize from camelCase JSON.

        Raises:
            ValueError: If a required field is missing
        """
        kwargs: Dict[str, Any] = {}
        for f in fields(cls):
            json_key = to_camel_case(f.name)
            if json_key in data:
                kwargs[f.name] = data[json_key]
        try:
            return cls(**kwargs)
        except TypeError as e:
            raise ValueError(f"Cannot build {cls.__name__} from JSON: {e}") from e
