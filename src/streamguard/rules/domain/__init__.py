"""Rule domain: ids, catalog entries, findings."""

from streamguard.rules.domain.enums import FindingSeverity, RuleId
from streamguard.rules.domain.models import Finding, RuleConfig, RuleDefinition

__all__ = ["Finding", "FindingSeverity", "RuleConfig", "RuleDefinition", "RuleId"]
