"""Structural validation of pipelines handed over by front-ends."""

from typing import Any, List

from streamguard.pipeline.domain.enums import (
    CostProfile,
    MetadataKey,
    OperationKind,
    PipelineIntent,
    ResultAccess,
)
from streamguard.pipeline.domain.models import Operation, Pipeline
from streamguard.shared.domain.exceptions import InvalidPipeline

_BOOLEAN_KEYS = (MetadataKey.MUTATES_EXTERNAL, MetadataKey.NULL_EXCLUSION, MetadataKey.SCOPED)


def _is_int(value: Any) -> bool:
    # bool is an int subclass; True is not a count
    return isinstance(value, int) and not isinstance(value, bool)


def _check_enum_value(enum_cls: type, value: Any, key: MetadataKey, where: dict) -> None:
    if value is None:
        return
    try:
        enum_cls(value)
    except ValueError as e:
        raise InvalidPipeline(
            f"Invalid {key.value} value: {value!r}",
            context={**where, "key": key.value, "value": value},
        ) from e


def _check_shared_metadata(source: Any, where: dict) -> None:
    """element_count and cost may sit on a PARALLEL operation or on the pipeline."""
    count = source.get(MetadataKey.ELEMENT_COUNT)
    if count is not None and (not _is_int(count) or count < 0):
        raise InvalidPipeline(
            f"element_count must be a non-negative integer, got {count!r}",
            context={**where, "key": MetadataKey.ELEMENT_COUNT.value},
        )
    _check_enum_value(CostProfile, source.get(MetadataKey.COST), MetadataKey.COST, where)


def _check_operation(pipeline: Pipeline, index: int, operation: Any) -> None:
    where = {"index": index}
    if not isinstance(operation, Operation):
        raise InvalidPipeline(
            f"Pipeline element at index {index} is not an Operation",
            context={**where, "type": type(operation).__name__},
        )
    if not isinstance(operation.kind, OperationKind):
        raise InvalidPipeline(f"Unknown operation kind at index {index}", context=where)

    for key in _BOOLEAN_KEYS:
        value = operation.get(key)
        if value is not None and not isinstance(value, bool):
            raise InvalidPipeline(
                f"{key.value} must be a boolean, got {value!r}",
                context={**where, "key": key.value},
            )

    _check_shared_metadata(operation, where)
    _check_enum_value(ResultAccess, operation.get(MetadataKey.RESULT_ACCESS), MetadataKey.RESULT_ACCESS, where)

    opened_at = operation.get(MetadataKey.OPENED_AT)
    if opened_at is None:
        return
    if operation.kind is not OperationKind.FILE_STREAM_CLOSE:
        raise InvalidPipeline(
            "opened_at is only valid on file_stream_close",
            context={**where, "kind": operation.kind.value},
        )
    if not _is_int(opened_at) or not 0 <= opened_at < index:
        raise InvalidPipeline(
            f"opened_at {opened_at!r} does not reference an earlier operation",
            context={**where, "opened_at": opened_at, "length": len(pipeline)},
        )
    if pipeline[opened_at].kind is not OperationKind.FILE_STREAM_OPEN:
        raise InvalidPipeline(
            f"opened_at {opened_at} references a {pipeline[opened_at].kind.value} operation",
            context={**where, "opened_at": opened_at},
        )


def pair_file_streams(pipeline: Pipeline) -> List[int]:
    """
    Pair every file_stream_close with the open it releases.

    A close carrying opened_at releases that open; a bare close releases the
    most recent open still pending. Scoped opens take part in pairing like
    any other open.

    Returns:
        Positions of opens left without a close, ascending

    Raises:
        InvalidPipeline: If a close has no pending open to release
    """
    pending: List[int] = []
    for index, operation in enumerate(pipeline.operations):
        if operation.kind is OperationKind.FILE_STREAM_OPEN:
            pending.append(index)
        elif operation.kind is OperationKind.FILE_STREAM_CLOSE:
            opened_at = operation.get(MetadataKey.OPENED_AT)
            if opened_at is None:
                if not pending:
                    raise InvalidPipeline(
                        f"file_stream_close at index {index} has no open stream to close",
                        context={"index": index},
                    )
                pending.pop()
            elif opened_at in pending:
                pending.remove(opened_at)
            else:
                raise InvalidPipeline(
                    f"File stream opened at {opened_at} is already closed",
                    context={"index": index, "opened_at": opened_at},
                )
    return pending


def validate_pipeline(pipeline: Any) -> Pipeline:
    """
    Reject malformed pipelines before any rule runs.

    Args:
        pipeline: Value received from a front-end

    Returns:
        The same pipeline, typed

    Raises:
        InvalidPipeline: On any structural or metadata inconsistency
    """
    if pipeline is None:
        raise InvalidPipeline("Pipeline must not be None")
    if not isinstance(pipeline, Pipeline):
        raise InvalidPipeline(
            f"Expected a Pipeline, got {type(pipeline).__name__}",
            context={"type": type(pipeline).__name__},
        )
    if not isinstance(pipeline.intent, PipelineIntent):
        raise InvalidPipeline("Unknown pipeline intent", context={"intent": pipeline.intent})

    _check_shared_metadata(pipeline, {"index": None})

    for index, operation in enumerate(pipeline.operations):
        _check_operation(pipeline, index, operation)
    pair_file_streams(pipeline)

    return pipeline
