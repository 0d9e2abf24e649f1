"""Input validation for pipelines received as JSON from front-ends."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from streamguard.pipeline.domain.enums import OperationKind, PipelineIntent


class OperationInput(BaseModel):
    """Validated operation JSON."""

    model_config = ConfigDict(extra="forbid")

    kind: OperationKind
    metadata: Optional[Dict[str, Any]] = None

    @field_validator("metadata")
    @classmethod
    def validate_metadata(cls, v):
        return v or {}


class PipelineInput(BaseModel):
    """Validated pipeline JSON."""

    model_config = ConfigDict(extra="forbid")

    operations: List[OperationInput] = Field(default_factory=list)
    intent: PipelineIntent = PipelineIntent.UNKNOWN
    metadata: Optional[Dict[str, Any]] = None

    @field_validator("metadata")
    @classmethod
    def validate_metadata(cls, v):
        return v or {}
