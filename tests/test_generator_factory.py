import logging

import pytest

from conftest import H_400, rect_section
from exceptions.custom_errors import GeometryEngineError, SkipReason
from geometryEngine.generator_factory import (
    GENERATOR_TABLE,
    GeometryGeneratorFactory,
    generate_solids,
)
from geometryEngine.generators import (
    ElementGenerator,
    FoundationColumnGenerator,
    StripFootingGenerator,
)
from geometryEngine.records import (
    BeamRecord,
    ColumnRecord,
    FootingRecord,
    FoundationColumnRecord,
    SectionRecord,
    SlabRecord,
    StripFootingRecord,
)


class ExplodingGenerator(ElementGenerator):
    def generate(self, record, context):
        raise RuntimeError("boom")


@pytest.fixture
def context(make_context):
    return make_context(
        rect_section(),
        SectionRecord(id="G1", shape=H_400),
        SectionRecord(id="F1", dimensions={"width_X": 2000, "width_Y": 2000, "depth": 800}),
    )


def mixed_records():
    return [
        ColumnRecord(id="1", section_id="C1", bottom_node="1", top_node="2"),
        ColumnRecord(id="2", section_id="C1", bottom_node="1", top_node="404"),
        BeamRecord(id="3", section_id="G1", start_node="2", end_node="3"),
        BeamRecord(id="4", section_id="missing", start_node="2", end_node="3"),
        FootingRecord(id="5", section_id="F1", node="1", level_bottom=-800),
        SlabRecord(id="6", section_id="C1", node_ids=("1", "2")),
    ]


def test_failures_are_isolated_per_element(context, caplog):
    with caplog.at_level(logging.WARNING):
        result = generate_solids(mixed_records(), context)

    assert [s.element_id for s in result.solids] == ["1", "3", "5"]
    assert {(s.element_id, s.reason) for s in result.skipped} == {
        ("2", SkipReason.MISSING_NODES),
        ("4", SkipReason.MISSING_SECTION),
        ("6", SkipReason.MISSING_NODES),
    }
    assert not result.cancelled
    assert "スキップします" in caplog.text


def test_summary(context):
    summary = generate_solids(mixed_records(), context).to_summary()
    assert summary["solid_count"] == 3
    assert summary["solids_by_type"] == {"Column": 1, "Beam": 1, "Footing": 1}
    assert summary["skipped_by_reason"] == {"missing-nodes": 2, "missing-section": 1}
    assert summary["skipped"][0]["element_id"] == "2"


def test_unexpected_error_becomes_generation_error(context):
    table = dict(GENERATOR_TABLE)
    table[ColumnRecord] = ExplodingGenerator
    factory = GeometryGeneratorFactory(context, table)
    result = factory.generate(mixed_records())

    exploded = [s for s in result.skipped if s.reason is SkipReason.GENERATION_ERROR]
    assert [s.element_id for s in exploded] == ["1", "2"]
    assert exploded[0].message == "boom"
    assert [s.element_id for s in result.solids] == ["3", "5"]


def test_incomplete_table_is_rejected(context):
    table = dict(GENERATOR_TABLE)
    del table[SlabRecord]
    with pytest.raises(GeometryEngineError):
        GeometryGeneratorFactory(context, table)


def test_unknown_record_type(context):
    factory = GeometryGeneratorFactory(context)
    with pytest.raises(GeometryEngineError):
        factory.generator_for(object())


def test_cancellation_stops_remaining_elements(context):
    calls = []

    def should_cancel():
        calls.append(1)
        return len(calls) > 2

    result = generate_solids(mixed_records(), context, should_cancel)
    assert result.cancelled
    assert len(result.solids) + len(result.skipped) == 2


def test_empty_batch(context):
    result = generate_solids([], context)
    assert result.solids == []
    assert result.skipped == []
    assert result.to_summary()["solid_count"] == 0


def test_generation_is_deterministic(context):
    first = generate_solids(mixed_records(), context)
    second = generate_solids(mixed_records(), context)
    assert [s.placement.center for s in first.solids] == [s.placement.center for s in second.solids]
    assert [s.profile.vertices for s in first.solids] == [s.profile.vertices for s in second.solids]


def test_foundation_kinds_are_dispatched(context):
    factory = GeometryGeneratorFactory(context)
    assert isinstance(factory.generator_for(StripFootingRecord(id="7")), StripFootingGenerator)
    assert isinstance(factory.generator_for(FoundationColumnRecord(id="8")), FoundationColumnGenerator)

    records = [
        StripFootingRecord(id="7", section_id="F1", start_node="2", end_node="3", level=0),
        FoundationColumnRecord(id="8", section_id="C1", node="1", length_fd=1200),
    ]
    result = generate_solids(records, context)
    assert not result.skipped
    assert result.to_summary()["solids_by_type"] == {"StripFooting": 1, "FoundationColumn": 1}
