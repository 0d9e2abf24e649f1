"""
Pipeline domain models.

A Pipeline is the simplified, pre-parsed form of one stream call chain:
an ordered, immutable tuple of Operations plus an optional declared intent.
Front-ends build pipelines (directly, through PipelineBuilder, or from
camelCase JSON) and hand them to the checker by value.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, Union

from pydantic import ValidationError

from streamguard.pipeline.domain.enums import MetadataKey, OperationKind, PipelineIntent
from streamguard.pipeline.validators.input_validator import OperationInput, PipelineInput
from streamguard.shared.domain.base_model import BaseDomainModel, to_camel_case, to_snake_case
from streamguard.shared.domain.exceptions import InvalidPipeline

MetadataKeyLike = Union[MetadataKey, str]

_EMPTY: Mapping[str, Any] = MappingProxyType({})


def _freeze_metadata(metadata: Optional[Mapping[Any, Any]]) -> Mapping[str, Any]:
    """Copy metadata into a read-only mapping with plain string keys."""
    if not metadata:
        return _EMPTY
    frozen: Dict[str, Any] = {}
    for key, value in metadata.items():
        name = key.value if isinstance(key, MetadataKey) else str(key)
        frozen[name] = value
    return MappingProxyType(frozen)


_KNOWN_KEYS = frozenset(k.value for k in MetadataKey)


def _metadata_to_json(metadata: Mapping[str, Any]) -> Dict[str, Any]:
    # Only well-known keys are camel-cased; free-form keys pass through untouched
    return {
        (to_camel_case(k) if k in _KNOWN_KEYS else k): (v.value if isinstance(v, Enum) else v)
        for k, v in metadata.items()
    }


def _metadata_from_json(data: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    result: Dict[str, Any] = {}
    for key, value in (data or {}).items():
        snake = to_snake_case(key) if key else key
        result[snake if snake in _KNOWN_KEYS else key] = value
    return result


def _validation_error(what: str, error: Exception, data: Any) -> InvalidPipeline:
    return InvalidPipeline(
        f"Invalid {what} JSON: {error}",
        context={"type": type(data).__name__},
    )


def _key(key: MetadataKeyLike) -> str:
    return key.value if isinstance(key, MetadataKey) else key


@dataclass(frozen=True)
class Operation(BaseDomainModel):
    """
    One stage of a call chain.

    Attributes:
        kind: Stage kind (filter, map, sort, ...)
        metadata: Free-form, read-only annotations. See MetadataKey for
            the keys the rules read.
    """

    kind: OperationKind
    metadata: Mapping[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.kind, OperationKind):
            try:
                object.__setattr__(self, "kind", OperationKind(self.kind))
            except ValueError as e:
                raise InvalidPipeline(
                    f"Unknown operation kind: {self.kind!r}",
                    context={"kind": self.kind},
                ) from e
        object.__setattr__(self, "metadata", _freeze_metadata(self.metadata))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Operation):
            return NotImplemented
        return self.kind == other.kind and dict(self.metadata) == dict(other.metadata)

    def __hash__(self) -> int:
        return hash((self.kind, tuple(sorted(self.metadata))))

    def get(self, key: MetadataKeyLike, default: Any = None) -> Any:
        """Read a metadata value."""
        return self.metadata.get(_key(key), default)

    def flag(self, key: MetadataKeyLike) -> bool:
        """Read a boolean metadata flag; absent means False."""
        return self.get(key) is True

    def to_json(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "metadata": _metadata_to_json(self.metadata)}

    @classmethod
    def from_json(cls, data: Any) -> "Operation":
        """
        Parse camelCase JSON into an Operation.

        Raises:
            InvalidPipeline: If the JSON is not a valid operation
        """
        try:
            parsed = OperationInput.model_validate(data)
        except ValidationError as e:
            raise _validation_error("operation", e, data) from e
        return cls._from_input(parsed)

    @classmethod
    def _from_input(cls, parsed: OperationInput) -> "Operation":
        return cls(kind=parsed.kind, metadata=_metadata_from_json(parsed.metadata))


@dataclass(frozen=True)
class Pipeline(BaseDomainModel):
    """
    Ordered, immutable sequence of operations from source to terminal stage.

    Attributes:
        operations: Stages in call order. Position matters for most rules.
        intent: Declared goal, read only by heuristic rules.
        metadata: Pipeline-level annotations (element_count, cost).
    """

    operations: Tuple[Operation, ...] = ()
    intent: PipelineIntent = PipelineIntent.UNKNOWN
    metadata: Mapping[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "operations", tuple(self.operations))
        if not isinstance(self.intent, PipelineIntent):
            try:
                object.__setattr__(self, "intent", PipelineIntent(self.intent))
            except ValueError as e:
                raise InvalidPipeline(
                    f"Unknown pipeline intent: {self.intent!r}",
                    context={"intent": self.intent},
                ) from e
        object.__setattr__(self, "metadata", _freeze_metadata(self.metadata))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Pipeline):
            return NotImplemented
        return (
            self.operations == other.operations
            and self.intent == other.intent
            and dict(self.metadata) == dict(other.metadata)
        )

    def __hash__(self) -> int:
        return hash((self.operations, self.intent))

    def __len__(self) -> int:
        return len(self.operations)

    def __iter__(self) -> Iterator[Operation]:
        return iter(self.operations)

    def __getitem__(self, index: int) -> Operation:
        return self.operations[index]

    @classmethod
    def of(
        cls,
        *kinds: Union[OperationKind, Operation],
        intent: PipelineIntent = PipelineIntent.UNKNOWN,
        **metadata: Any,
    ) -> "Pipeline":
        """
        Shorthand constructor.

        Example:
            >>> Pipeline.of(OperationKind.FILTER, OperationKind.LIMIT, OperationKind.SORT)
        """
        operations = [k if isinstance(k, Operation) else Operation(k) for k in kinds]
        return cls(operations=tuple(operations), intent=intent, metadata=metadata)

    def get(self, key: MetadataKeyLike, default: Any = None) -> Any:
        """Read a pipeline-level metadata value."""
        return self.metadata.get(_key(key), default)

    def indices_of(self, *kinds: OperationKind) -> List[int]:
        """Positions of all operations whose kind is one of `kinds`."""
        return [i for i, op in enumerate(self.operations) if op.kind in kinds]

    def has(self, *kinds: OperationKind) -> bool:
        return any(op.kind in kinds for op in self.operations)

    @property
    def last(self) -> Optional[Operation]:
        return self.operations[-1] if self.operations else None

    def to_json(self) -> Dict[str, Any]:
        return {
            "operations": [op.to_json() for op in self.operations],
            "intent": self.intent.value,
            "metadata": _metadata_to_json(self.metadata),
        }

    @classmethod
    def from_json(cls, data: Any) -> "Pipeline":
        """
        Parse camelCase JSON into a Pipeline.

        Raises:
            InvalidPipeline: If the JSON is not a valid pipeline
        """
        try:
            parsed = PipelineInput.model_validate(data)
        except ValidationError as e:
            raise _validation_error("pipeline", e, data) from e
        return cls(
            operations=tuple(Operation._from_input(op) for op in parsed.operations),
            intent=parsed.intent,
            metadata=_metadata_from_json(parsed.metadata),
        )


class PipelineBuilder:
    """
    Append-only construction path for pipelines.

    Built pipelines are snapshots: appending afterwards does not affect them.
    """

    def __init__(self, intent: PipelineIntent = PipelineIntent.UNKNOWN):
        self._operations: List[Operation] = []
        self._intent = intent
        self._metadata: Dict[str, Any] = {}

    def add(self, kind: OperationKind, **metadata: Any) -> "PipelineBuilder":
        self._operations.append(Operation(kind, metadata))
        return self

    def append(self, operation: Operation) -> "PipelineBuilder":
        self._operations.append(operation)
        return self

    def with_intent(self, intent: PipelineIntent) -> "PipelineBuilder":
        self._intent = intent
        return self

    def with_metadata(self, **metadata: Any) -> "PipelineBuilder":
        self._metadata.update(metadata)
        return self

    def build(self) -> Pipeline:
        return Pipeline(
            operations=tuple(self._operations),
            intent=self._intent,
            metadata=dict(self._metadata),
        )

    def __len__(self) -> int:
        return len(self._operations)
