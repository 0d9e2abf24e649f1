"""Shared test fixtures for the StreamGuard test suite."""

import pytest

from streamguard.pipeline.domain import OperationKind, Pipeline
from streamguard.rules.application.checker import PipelinePatternChecker
from streamguard.rules.defaults.loader import DefaultRulesLoader


@pytest.fixture(scope="session")
def default_config():
    """Catalog defaults, no overrides."""
    return DefaultRulesLoader().load_config()


@pytest.fixture
def checker(default_config):
    """Checker with the bundled catalog."""
    return PipelinePatternChecker(default_config)


@pytest.fixture
def rule_hits(checker):
    """Return the offending indices a single rule reports for a pipeline."""

    def _hits(pipeline, rule_id):
        return [f.index for f in checker.check(pipeline) if f.rule_id == rule_id]

    return _hits


@pytest.fixture
def limit_before_sort_pipeline():
    """filter -> limit -> sort"""
    return Pipeline.of(OperationKind.FILTER, OperationKind.LIMIT, OperationKind.SORT)
