"""
Rule predicates.

Each predicate is a stateless function over an immutable pipeline that
yields the positions of offending operations in ascending order. Predicates
never mutate the pipeline and never read anything but the pipeline and the
checker configuration.

Heuristic predicates (3, 8, 9) only fire on an explicitly declared intent;
PipelineIntent.UNKNOWN never matches.
"""

from typing import Callable, Dict, Iterator

from streamguard.pipeline.domain.enums import (
    CostProfile,
    MetadataKey,
    OperationKind,
    PipelineIntent,
    ResultAccess,
)
from streamguard.pipeline.domain.models import Pipeline
from streamguard.pipeline.validators.pipeline_validator import pair_file_streams
from streamguard.rules.domain.enums import RuleId
from streamguard.rules.domain.models import RuleConfig

Predicate = Callable[[Pipeline, RuleConfig], Iterator[int]]

_SHAPING_KINDS = (OperationKind.FILTER, OperationKind.MAP, OperationKind.SORT)


def unsafe_first_access(pipeline: Pipeline, config: RuleConfig) -> Iterator[int]:
    """find-first result unwrapped without a presence check."""
    for index in pipeline.indices_of(OperationKind.FIND_FIRST):
        if pipeline[index].get(MetadataKey.RESULT_ACCESS) == ResultAccess.UNWRAP:
            yield index


def external_mutation_instead_of_collect(pipeline: Pipeline, config: RuleConfig) -> Iterator[int]:
    """Results pushed into an outside collection instead of collected."""
    last = pipeline.last
    if last is not None and last.kind.is_collecting_terminal:
        return
    for index, operation in enumerate(pipeline):
        if operation.kind is OperationKind.EXTERNAL_MUTATION:
            yield index
        # Mutating filters belong to side_effecting_filter
        elif operation.kind is not OperationKind.FILTER and operation.flag(MetadataKey.MUTATES_EXTERNAL):
            yield index


def trivial_iteration_misuse(pipeline: Pipeline, config: RuleConfig) -> Iterator[int]:
    """Bare for-each where the code was meant to transform elements."""
    if pipeline.intent is not PipelineIntent.TRANSFORM:
        return
    if pipeline.has(*_SHAPING_KINDS):
        return
    yield from pipeline.indices_of(OperationKind.FOR_EACH)


def missing_close(pipeline: Pipeline, config: RuleConfig) -> Iterator[int]:
    """File-backed stream opened outside a scoped block and never closed."""
    for index in pair_file_streams(pipeline):
        if not pipeline[index].flag(MetadataKey.SCOPED):
            yield index


def limit_before_sort(pipeline: Pipeline, config: RuleConfig) -> Iterator[int]:
    """limit() applied before sorted(): truncates an unsorted stream."""
    sorts = pipeline.indices_of(OperationKind.SORT)
    if not sorts:
        return
    last_sort = sorts[-1]
    for index in pipeline.indices_of(OperationKind.LIMIT):
        if index < last_sort:
            yield index


def side_effecting_filter(pipeline: Pipeline, config: RuleConfig) -> Iterator[int]:
    """filter() predicate writes to external state."""
    for index in pipeline.indices_of(OperationKind.FILTER):
        if pipeline[index].flag(MetadataKey.MUTATES_EXTERNAL):
            yield index


def missing_null_check(pipeline: Pipeline, config: RuleConfig) -> Iterator[int]:
    """map() over elements that were never filtered for null."""
    guarded = False
    for index, operation in enumerate(pipeline):
        if operation.kind is OperationKind.NULL_CHECK:
            guarded = True
        elif operation.kind is OperationKind.FILTER and operation.flag(MetadataKey.NULL_EXCLUSION):
            guarded = True
        elif operation.kind is OperationKind.MAP and not guarded:
            yield index


def single_operation_pipeline(pipeline: Pipeline, config: RuleConfig) -> Iterator[int]:
    """A stream built for one step where a descriptive chain was declared."""
    if pipeline.intent is not PipelineIntent.DESCRIPTIVE:
        return
    intermediates = [i for i, op in enumerate(pipeline) if op.kind.is_intermediate]
    if len(intermediates) == 1:
        yield intermediates[0]


def foreach_without_collect(pipeline: Pipeline, config: RuleConfig) -> Iterator[int]:
    """Terminal for-each when the result was supposed to be stored."""
    if pipeline.intent is not PipelineIntent.STORE_RESULT:
        return
    last = pipeline.last
    if last is not None and last.kind is OperationKind.FOR_EACH:
        yield len(pipeline) - 1


def unconditional_parallel(pipeline: Pipeline, config: RuleConfig) -> Iterator[int]:
    """parallel() on a small or I/O-bound workload."""
    for index in pipeline.indices_of(OperationKind.PARALLEL):
        operation = pipeline[index]
        count = operation.get(MetadataKey.ELEMENT_COUNT, pipeline.get(MetadataKey.ELEMENT_COUNT))
        cost = operation.get(MetadataKey.COST, pipeline.get(MetadataKey.COST))
        if cost == CostProfile.IO_BOUND:
            yield index
        elif count is not None and count < config.parallel_threshold:
            yield index


# Evaluation order is reporting order
RULE_PREDICATES: Dict[RuleId, Predicate] = {
    RuleId.UNSAFE_FIRST_ACCESS: unsafe_first_access,
    RuleId.EXTERNAL_MUTATION_INSTEAD_OF_COLLECT: external_mutation_instead_of_collect,
    RuleId.TRIVIAL_ITERATION_MISUSE: trivial_iteration_misuse,
    RuleId.MISSING_CLOSE: missing_close,
    RuleId.LIMIT_BEFORE_SORT: limit_before_sort,
    RuleId.SIDE_EFFECTING_FILTER: side_effecting_filter,
    RuleId.MISSING_NULL_CHECK: missing_null_check,
    RuleId.SINGLE_OPERATION_PIPELINE: single_operation_pipeline,
    RuleId.FOREACH_WITHOUT_COLLECT_WHEN_STORE_INTENDED: foreach_without_collect,
    RuleId.UNCONDITIONAL_PARALLEL: unconditional_parallel,
}
