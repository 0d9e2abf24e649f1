"""Domain models for pipeline rules and their findings.

All models are frozen and serialize to camelCase JSON.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Mapping, Optional

from streamguard.pipeline.domain.enums import OperationKind
from streamguard.rules.domain.enums import FindingSeverity, RuleId
from streamguard.shared.domain.base_model import BaseDomainModel
from streamguard.shared.infrastructure.config import DEFAULT_PARALLEL_THRESHOLD


@dataclass(frozen=True)
class RuleDefinition(BaseDomainModel):
    """Catalog entry for one rule.

    Attributes:
        rule_id: Stable numeric id (1-10)
        name: Kebab-case slug
        title: Short human-readable title
        message: Message attached to every finding of this rule
        enabled: Whether the rule runs by default
        heuristic: True for rules that depend on declared intent
    """

    rule_id: RuleId
    name: str
    title: str
    message: str
    enabled: bool = True
    heuristic: bool = False

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "RuleDefinition":
        rule_id = RuleId.parse(data["ruleId"])
        return cls(
            rule_id=rule_id,
            name=data.get("name", rule_id.slug),
            title=data.get("title", rule_id.slug),
            message=data["message"],
            enabled=data.get("enabled", True),
            heuristic=data.get("heuristic", False),
        )


@dataclass(frozen=True)
class Finding(BaseDomainModel):
    """
    A matched anti-pattern.

    JSON:
        {
            "ruleId": 5,
            "ruleName": "limit-before-sort",
            "severity": "warning",
            "message": "...",
            "index": 1,
            "operationKind": "limit"
        }
    """

    rule_id: int
    rule_name: str
    message: str
    index: int  # Position of the offending operation in the pipeline
    operation_kind: OperationKind
    severity: FindingSeverity = FindingSeverity.WARNING

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "Finding":
        return cls(
            rule_id=data["ruleId"],
            rule_name=data["ruleName"],
            message=data["message"],
            index=data["index"],
            operation_kind=OperationKind(data["operationKind"]),
            severity=FindingSeverity(data.get("severity", FindingSeverity.WARNING.value)),
        )


@dataclass(frozen=True)
class RuleConfig(BaseDomainModel):
    """Effective configuration of a checker.

    Attributes:
        definitions: Rule catalog keyed by id
        disabled: Ids switched off on top of the catalog defaults
        parallel_threshold: Element count below which a parallel stage is flagged
    """

    definitions: Mapping[RuleId, RuleDefinition] = field(default_factory=dict)
    disabled: FrozenSet[RuleId] = frozenset()
    parallel_threshold: int = DEFAULT_PARALLEL_THRESHOLD

    def is_enabled(self, rule_id: RuleId) -> bool:
        if rule_id in self.disabled:
            return False
        definition = self.definitions.get(rule_id)
        return definition.enabled if definition else True

    def definition(self, rule_id: RuleId) -> Optional[RuleDefinition]:
        return self.definitions.get(rule_id)

    def to_json(self) -> Dict[str, Any]:
        return {
            "definitions": [d.to_json() for _, d in sorted(self.definitions.items())],
            "disabled": sorted(int(r) for r in self.disabled),
            "parallelThreshold": self.parallel_threshold,
        }

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "RuleConfig":
        definitions = [RuleDefinition.from_json(d) for d in data.get("definitions", [])]
        return cls(
            definitions={d.rule_id: d for d in sorted(definitions, key=lambda d: d.rule_id)},
            disabled=frozenset(RuleId.parse(r) for r in data.get("disabled", [])),
            parallel_threshold=data.get("parallelThreshold", DEFAULT_PARALLEL_THRESHOLD),
        )
