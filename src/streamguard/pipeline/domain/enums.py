"""
Pipeline domain enums.

Operation kinds and the metadata vocabulary the rules understand.
"""

from enum import Enum


class OperationKind(str, Enum):
    """Stage of a stream call chain."""

    FILTER = "filter"
    MAP = "map"
    SORT = "sort"
    LIMIT = "limit"
    FOR_EACH = "for_each"
    COLLECT = "collect"
    TO_LIST = "to_list"
    PARALLEL = "parallel"
    FIND_FIRST = "find_first"
    NULL_CHECK = "null_check"
    FILE_STREAM_OPEN = "file_stream_open"
    FILE_STREAM_CLOSE = "file_stream_close"
    EXTERNAL_MUTATION = "external_mutation"

    @property
    def is_intermediate(self) -> bool:
        """Stages that transform the stream without terminating it."""
        return self in INTERMEDIATE_KINDS

    @property
    def is_collecting_terminal(self) -> bool:
        return self in (OperationKind.COLLECT, OperationKind.TO_LIST)


INTERMEDIATE_KINDS = frozenset(
    {
        OperationKind.FILTER,
        OperationKind.MAP,
        OperationKind.SORT,
        OperationKind.LIMIT,
        OperationKind.NULL_CHECK,
    }
)


class PipelineIntent(str, Enum):
    """
    Declared goal of a pipeline.

    Only heuristic rules read it. UNKNOWN never triggers a finding.
    """

    UNKNOWN = "unknown"
    SIDE_EFFECT = "side_effect"  # Result is printed/sent, not kept
    STORE_RESULT = "store_result"  # Result should end up in a collection
    TRANSFORM = "transform"  # Elements are meant to be reshaped
    DESCRIPTIVE = "descriptive"  # Chain should read as a sequence of steps


class ResultAccess(str, Enum):
    """How the Optional returned by find-first is consumed."""

    UNKNOWN = "unknown"
    UNWRAP = "unwrap"  # get() without checking
    PRESENCE_CHECK = "presence_check"  # isPresent()/ifPresent()
    DEFAULTED = "defaulted"  # orElse()/orElseGet()


class CostProfile(str, Enum):
    """Per-element cost of the work a stage performs."""

    UNKNOWN = "unknown"
    CPU_BOUND = "cpu_bound"
    IO_BOUND = "io_bound"


class MetadataKey(str, Enum):
    """Well-known operation and pipeline metadata keys."""

    PREDICATE = "predicate"
    MUTATES_EXTERNAL = "mutates_external"
    NULL_EXCLUSION = "null_exclusion"
    RESULT_ACCESS = "result_access"
    SCOPED = "scoped"
    OPENED_AT = "opened_at"
    ELEMENT_COUNT = "element_count"
    COST = "cost"
