"""Tests for Operation, Pipeline and PipelineBuilder."""

import dataclasses

import pytest

from streamguard.pipeline.domain import (
    MetadataKey,
    Operation,
    OperationKind,
    Pipeline,
    PipelineBuilder,
    PipelineIntent,
)
from streamguard.shared.domain.exceptions import InvalidPipeline

K = OperationKind


class TestOperation:
    """Operation construction and metadata access."""

    def test_kind_is_coerced_from_string(self):
        assert Operation("map").kind is K.MAP

    def test_unknown_kind_is_rejected(self):
        with pytest.raises(InvalidPipeline):
            Operation("flatMapToSomething")

    def test_metadata_is_read_only(self):
        operation = Operation(K.FILTER, {"null_exclusion": True})
        with pytest.raises(TypeError):
            operation.metadata["null_exclusion"] = False

    def test_metadata_is_copied(self):
        source = {"predicate": "x -> x != null"}
        operation = Operation(K.FILTER, source)
        source["predicate"] = "changed"
        assert operation.get(MetadataKey.PREDICATE) == "x -> x != null"

    def test_enum_keys_are_normalized(self):
        operation = Operation(K.FILTER, {MetadataKey.NULL_EXCLUSION: True})
        assert operation.flag("null_exclusion")
        assert operation.flag(MetadataKey.NULL_EXCLUSION)

    def test_flag_requires_true(self):
        assert not Operation(K.FILTER).flag(MetadataKey.MUTATES_EXTERNAL)

    def test_operations_are_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            Operation(K.MAP).kind = K.SORT


class TestPipeline:
    """Pipeline immutability and helpers."""

    def test_operations_become_a_tuple(self):
        pipeline = Pipeline(operations=[Operation(K.MAP)])
        assert isinstance(pipeline.operations, tuple)

    def test_pipeline_is_frozen(self):
        pipeline = Pipeline.of(K.MAP)
        with pytest.raises(dataclasses.FrozenInstanceError):
            pipeline.intent = PipelineIntent.TRANSFORM

    def test_default_intent_is_unknown(self):
        assert Pipeline().intent is PipelineIntent.UNKNOWN

    def test_intent_is_coerced_from_string(self):
        assert Pipeline(intent="store_result").intent is PipelineIntent.STORE_RESULT

    def test_unknown_intent_is_rejected(self):
        with pytest.raises(InvalidPipeline):
            Pipeline(intent="whatever")

    def test_sequence_helpers(self):
        pipeline = Pipeline.of(K.FILTER, K.LIMIT, K.SORT, K.LIMIT)

        assert len(pipeline) == 4
        assert pipeline[1].kind is K.LIMIT
        assert pipeline.indices_of(K.LIMIT) == [1, 3]
        assert pipeline.has(K.SORT)
        assert not pipeline.has(K.MAP)
        assert pipeline.last.kind is K.LIMIT
        assert Pipeline().last is None

    def test_equality_includes_metadata(self):
        a = Pipeline.of(K.PARALLEL, element_count=10)
        b = Pipeline.of(K.PARALLEL, element_count=10)
        c = Pipeline.of(K.PARALLEL, element_count=20)

        assert a == b
        assert hash(a) == hash(b)
        assert a != c


class TestPipelineBuilder:
    """Append-only construction."""

    def test_builder_appends_in_order(self):
        pipeline = PipelineBuilder().add(K.FILTER, null_exclusion=True).add(K.MAP).add(K.TO_LIST).build()
        assert [op.kind for op in pipeline] == [K.FILTER, K.MAP, K.TO_LIST]
        assert pipeline[0].flag(MetadataKey.NULL_EXCLUSION)

    def test_built_pipeline_is_a_snapshot(self):
        builder = PipelineBuilder().add(K.MAP)
        first = builder.build()
        builder.add(K.SORT)

        assert len(first) == 1
        assert len(builder.build()) == 2

    def test_intent_and_metadata(self):
        pipeline = (
            PipelineBuilder()
            .with_intent(PipelineIntent.DESCRIPTIVE)
            .with_metadata(element_count=5)
            .append(Operation(K.MAP))
            .build()
        )
        assert pipeline.intent is PipelineIntent.DESCRIPTIVE
        assert pipeline.get(MetadataKey.ELEMENT_COUNT) == 5


class TestPipelineJson:
    """camelCase JSON exchange with front-ends."""

    def test_from_json(self):
        data = {
            "operations": [
                {"kind": "filter", "metadata": {"nullExclusion": True}},
                {"kind": "map"},
                {"kind": "parallel", "metadata": {"elementCount": 50}},
            ],
            "intent": "transform",
        }

        pipeline = Pipeline.from_json(data)

        assert [op.kind for op in pipeline] == [K.FILTER, K.MAP, K.PARALLEL]
        assert pipeline[0].flag(MetadataKey.NULL_EXCLUSION)
        assert pipeline[2].get(MetadataKey.ELEMENT_COUNT) == 50
        assert pipeline.intent is PipelineIntent.TRANSFORM

    def test_to_json_uses_camel_case(self):
        pipeline = PipelineBuilder().add(K.FILE_STREAM_OPEN, scoped=True).with_metadata(element_count=3).build()

        assert pipeline.to_json() == {
            "operations": [{"kind": "file_stream_open", "metadata": {"scoped": True}}],
            "intent": "unknown",
            "metadata": {"elementCount": 3},
        }

    def test_json_round_trip(self):
        pipeline = (
            PipelineBuilder(PipelineIntent.STORE_RESULT)
            .add(K.FILE_STREAM_OPEN)
            .add(K.MAP, predicate="String::trim")
            .add(K.FILE_STREAM_CLOSE, opened_at=0)
            .build()
        )
        assert Pipeline.from_json(pipeline.to_json()) == pipeline

    def test_operation_without_kind_is_rejected(self):
        with pytest.raises(InvalidPipeline):
            Pipeline.from_json({"operations": [{"metadata": {}}]})

    @pytest.mark.parametrize(
        "data",
        [
            {"operations": ["map"]},
            {"operations": None},
            {"operations": [{"kind": "map", "metadata": "x"}]},
            {"operations": [{"kind": "warp"}]},
            {"operations": [], "intent": "whatever"},
            ["map", "sort"],
            "map",
            None,
        ],
    )
    def test_malformed_json_raises_invalid_pipeline(self, data):
        with pytest.raises(InvalidPipeline):
            Pipeline.from_json(data)

    @pytest.mark.parametrize("data", ["map", {"kind": "map", "metadata": [1]}, {}])
    def test_malformed_operation_json_raises_invalid_pipeline(self, data):
        with pytest.raises(InvalidPipeline):
            Operation.from_json(data)

    def test_free_form_metadata_keys_survive_round_trip(self):
        pipeline = (
            PipelineBuilder()
            .add(K.MAP, lambdaText="s -> s.trim()", source_line=12, null_exclusion=False)
            .build()
        )

        data = pipeline.to_json()
        restored = Pipeline.from_json(data)

        assert data["operations"][0]["metadata"] == {
            "lambdaText": "s -> s.trim()",
            "source_line": 12,
            "nullExclusion": False,
        }
        assert restored == pipeline
        assert restored[0].get("lambdaText") == "s -> s.trim()"
        assert restored[0].get("source_line") == 12
