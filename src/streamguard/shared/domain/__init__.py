"""Shared domain primitives."""

from streamguard.shared.domain.base_model import BaseDomainModel, to_camel_case, to_snake_case
from streamguard.shared.domain.exceptions import (
    ConfigurationError,
    InvalidPipeline,
    StreamGuardError,
)

__all__ = [
    "BaseDomainModel",
    "ConfigurationError",
    "InvalidPipeline",
    "StreamGuardError",
    "to_camel_case",
    "to_snake_case",
]
