"""Tests for camelCase conversion and BaseDomainModel."""

from dataclasses import dataclass
from typing import Optional

import pytest

from streamguard.shared.domain.base_model import BaseDomainModel, to_camel_case, to_snake_case


@dataclass(frozen=True)
class _Sample(BaseDomainModel):
    rule_name: str
    element_count: int
    note: Optional[str] = None


class TestCaseConversion:
    @pytest.mark.parametrize(
        "snake,camel",
        [("rule_id", "ruleId"), ("operation_kind", "operationKind"), ("index", "index")],
    )
    def test_round_trip(self, snake, camel):
        assert to_camel_case(snake) == camel
        assert to_snake_case(camel) == snake


class TestBaseDomainModel:
    def test_to_json_keys_are_camel_case(self):
        assert _Sample("limit-before-sort", 3).to_json() == {
            "ruleName": "limit-before-sort",
            "elementCount": 3,
            "note": None,
        }

    def test_from_json_uses_defaults(self):
        sample = _Sample.from_json({"ruleName": "x", "elementCount": 1})
        assert sample == _Sample("x", 1)

    def test_from_json_missing_field(self):
        with pytest.raises(ValueError):
            _Sample.from_json({"ruleName": "x"})
