"""
Pipeline pattern checker.

Runs every enabled rule predicate over one pipeline and streams findings
in rule-id order, then in pipeline-position order within a rule.

Usage:
    checker = PipelinePatternChecker()
    for finding in checker.check(pipeline):
        ...
"""

from typing import Any, Iterator, Optional

from streamguard.pipeline.domain.models import Pipeline
from streamguard.pipeline.validators.pipeline_validator import validate_pipeline
from streamguard.rules.application.predicates import RULE_PREDICATES
from streamguard.rules.defaults.loader import DefaultRulesLoader
from streamguard.rules.domain.enums import FindingSeverity, RuleId
from streamguard.rules.domain.models import Finding, RuleConfig
from streamguard.shared.domain.exceptions import InvalidPipeline
from streamguard.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


class PipelinePatternChecker:
    """
    Detects stream pipeline anti-patterns.

    The checker only holds immutable configuration, so one instance can be
    shared between threads checking different pipelines.
    """

    def __init__(self, config: Optional[RuleConfig] = None):
        """
        Args:
            config: Effective rule configuration. Defaults to the bundled
                catalog merged with Settings and any configured rules file.
        """
        self.config = config if config is not None else DefaultRulesLoader().load_config()

    @property
    def enabled_rules(self) -> list[RuleId]:
        return [rule_id for rule_id in RULE_PREDICATES if self.config.is_enabled(rule_id)]

    def check(self, pipeline: Any) -> Iterator[Finding]:
        """
        Check a pipeline.

        Validation runs before the iterator is handed back, so a malformed
        pipeline fails here and never produces a partial sequence.

        Args:
            pipeline: Pipeline to check

        Returns:
            Lazy, single-pass iterator of findings

        Raises:
            InvalidPipeline: If the pipeline is malformed
        """
        try:
            validate_pipeline(pipeline)
        except InvalidPipeline as e:
            logger.warning("pipeline_rejected", reason=str(e), **e.context)
            raise

        logger.debug(
            "pipeline_check_started",
            operations=len(pipeline),
            intent=pipeline.intent.value,
            rules=len(self.enabled_rules),
        )
        return self._iter_findings(pipeline)

    def _iter_findings(self, pipeline: Pipeline) -> Iterator[Finding]:
        total = 0
        for rule_id in self.enabled_rules:
            predicate = RULE_PREDICATES[rule_id]
            for index in predicate(pipeline, self.config):
                total += 1
                logger.debug("rule_matched", rule_id=int(rule_id), index=index)
                yield self._build_finding(rule_id, pipeline, index)

        logger.debug("pipeline_check_completed", operations=len(pipeline), findings=total)

    def _build_finding(self, rule_id: RuleId, pipeline: Pipeline, index: int) -> Finding:
        definition = self.config.definition(rule_id)
        return Finding(
            rule_id=int(rule_id),
            rule_name=definition.name if definition else rule_id.slug,
            message=definition.message if definition else rule_id.slug.replace("-", " "),
            index=index,
            operation_kind=pipeline[index].kind,
            severity=FindingSeverity.WARNING,
        )


def check(pipeline: Any, config: Optional[RuleConfig] = None) -> list[Finding]:
    """Check a pipeline and return all findings as a list."""
    return list(PipelinePatternChecker(config).check(pipeline))
