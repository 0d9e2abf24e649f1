"""Pipeline domain: operations, pipelines and their metadata vocabulary."""

from streamguard.pipeline.domain.enums import (
    CostProfile,
    MetadataKey,
    OperationKind,
    PipelineIntent,
    ResultAccess,
)
from streamguard.pipeline.domain.models import Operation, Pipeline, PipelineBuilder

__all__ = [
    "CostProfile",
    "MetadataKey",
    "Operation",
    "OperationKind",
    "Pipeline",
    "PipelineBuilder",
    "PipelineIntent",
    "ResultAccess",
]
