"""
Rule domain enums.

Rule ids are stable: reports and override files refer to them.
"""

from enum import Enum, IntEnum


class RuleId(IntEnum):
    """The ten stream pipeline anti-patterns, in reporting order."""

    UNSAFE_FIRST_ACCESS = 1
    EXTERNAL_MUTATION_INSTEAD_OF_COLLECT = 2
    TRIVIAL_ITERATION_MISUSE = 3
    MISSING_CLOSE = 4
    LIMIT_BEFORE_SORT = 5
    SIDE_EFFECTING_FILTER = 6
    MISSING_NULL_CHECK = 7
    SINGLE_OPERATION_PIPELINE = 8
    FOREACH_WITHOUT_COLLECT_WHEN_STORE_INTENDED = 9
    UNCONDITIONAL_PARALLEL = 10

    @property
    def slug(self) -> str:
        """Kebab-case rule name, e.g. 'limit-before-sort'."""
        return self.name.lower().replace("_", "-")

    @classmethod
    def parse(cls, value: "int | str | RuleId") -> "RuleId":
        """
        Resolve a rule reference by id, slug or enum name.

        Raises:
            ValueError: If nothing matches
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            return cls(value)
        text = str(value).strip()
        if text.isdigit():
            return cls(int(text))
        key = text.upper().replace("-", "_")
        if key in cls.__members__:
            return cls[key]
        raise ValueError(f"Unknown rule: {value!r}")


class FindingSeverity(str, Enum):
    """Severity of a finding. Every pipeline rule reports warnings."""

    WARNING = "warning"
