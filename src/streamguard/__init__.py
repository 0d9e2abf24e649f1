"""
StreamGuard - stream pipeline anti-pattern checker.

Recognises ten common mistakes in functional collection-processing call
chains, operating on a pre-parsed Pipeline rather than on source text.
"""

from streamguard.pipeline.domain import (
    CostProfile,
    MetadataKey,
    Operation,
    OperationKind,
    Pipeline,
    PipelineBuilder,
    PipelineIntent,
    ResultAccess,
)
from streamguard.rules.application.checker import PipelinePatternChecker, check
from streamguard.rules.domain import Finding, FindingSeverity, RuleConfig, RuleDefinition, RuleId
from streamguard.shared.domain.exceptions import ConfigurationError, InvalidPipeline, StreamGuardError

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "CostProfile",
    "Finding",
    "FindingSeverity",
    "InvalidPipeline",
    "MetadataKey",
    "Operation",
    "OperationKind",
    "Pipeline",
    "PipelineBuilder",
    "PipelineIntent",
    "PipelinePatternChecker",
    "ResultAccess",
    "RuleConfig",
    "RuleDefinition",
    "RuleId",
    "StreamGuardError",
    "check",
]
