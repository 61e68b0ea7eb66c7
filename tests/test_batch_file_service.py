import json

import pytest

from common.geometry import Vector3
from core.batch_file_service import BatchFileService
from core.conversion_service import ConversionService, filter_records, normalize_categories
from config.settings import GeneratorConfig
from exceptions.custom_errors import InputDataError
from geometryEngine.records import (
    BeamRecord,
    ColumnRecord,
    FoundationColumnRecord,
    PileRecord,
    StripFootingRecord,
    WallOpening,
    WallRecord,
)

BATCH = {
    "nodes": {"1": [0, 0, 0], "2": {"x": 0, "y": 0, "z": 3000}, "3": [6000, 0, 3000]},
    "sections": [
        {"id": "C1", "dimensions": {"width_X": 600, "width_Y": 600}},
        {
            "id": "G1",
            "variant_markup": '<StbSecSteelFigureBeam_S><StbSecSteelBeam_S_Straight shape="H-400x200x8x13"/></StbSecSteelFigureBeam_S>',
            "is_reference_direction": "false",
        },
        {"id": "BAD", "variant_markup": "<broken"},
    ],
    "steel_shapes": [
        {"name": "H-400x200x8x13", "shape_type": "H", "dimensions": {"A": 400, "B": 200, "t1": 8, "t2": 13}}
    ],
    "elements": [
        {"kind": "column", "id": 1, "section_id": "C1", "bottom_node": 1, "top_node": 2, "colour": "red"},
        {"kind": "Girder", "section_id": "G1", "start_node": "2", "end_node": "3", "offset_start": [0, 0, -50]},
        {"kind": "pile", "id": "P1", "section_id": "C1", "node": "1", "level_top": "-500", "offset": [10, 20]},
        {
            "kind": "wall",
            "id": "W1",
            "section_id": "C1",
            "coords": [[0, 0, 0], [5000, 0, 0], [5000, 0, 3000], [0, 0, 3000]],
            "openings": [{"position_x": 1000, "length_x": 900, "length_y": 2000, "id": "O1"}],
        },
        {"kind": "truss", "id": "T1"},
        {"kind": "beam", "id": "B9", "offset_start": "abc"},
    ],
}


@pytest.fixture
def service():
    return BatchFileService()


def write_batch(tmp_path, data=BATCH):
    path = tmp_path / "batch.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_parse_batch_tables(service):
    batch = service.parse_batch(BATCH)
    assert batch.nodes["2"] == Vector3(0, 0, 3000)
    assert set(batch.sections) == {"C1", "G1", "BAD"}
    assert batch.sections["G1"].variant_markup is not None
    assert batch.sections["BAD"].variant_markup is None
    assert batch.sections["G1"].is_reference_direction == "false"
    assert batch.steel_shapes["H-400x200x8x13"].shape_type == "H"


def test_parse_batch_records(service):
    batch = service.parse_batch(BATCH)
    column, girder, pile, wall = batch.records

    assert isinstance(column, ColumnRecord)
    assert column.id == "1"
    assert column.bottom_node == "1"

    assert isinstance(girder, BeamRecord)
    assert girder.element_type == "Girder"
    assert girder.id == "girder-1"
    assert girder.offset_start == Vector3(0, 0, -50)

    assert isinstance(pile, PileRecord)
    assert pile.level_top == -500.0
    assert pile.offset == (10.0, 20.0)

    assert isinstance(wall, WallRecord)
    assert len(wall.coords) == 4
    assert wall.openings == (WallOpening(1000.0, 0.0, 900.0, 2000.0, id="O1"),)


def test_invalid_elements_are_rejected_individually(service):
    batch = service.parse_batch(BATCH)
    assert [item["index"] for item in batch.rejected] == [4, 5]
    assert "truss" in batch.rejected[0]["message"]


def test_placement_mode_is_normalized(service):
    record = service.parse_element(
        {"kind": "beam", "id": "B1", "start_node": "2", "end_node": "3", "placement_mode": " TOP "}
    )
    assert record.placement_mode == "top-aligned"


def test_unknown_placement_mode_is_rejected(service):
    with pytest.raises(InputDataError, match="placement_mode"):
        service.parse_element({"kind": "girder", "id": "G9", "placement_mode": "bottom"})

    batch = service.parse_batch(
        {"elements": [{"kind": "beam", "id": "B2", "placement_mode": "upside"}]}
    )
    assert batch.records == []
    assert [item["index"] for item in batch.rejected] == [0]


def test_foundation_kinds(service):
    strip = service.parse_element(
        {
            "kind": "StripFooting",
            "id": "SF1",
            "start_node": 1,
            "end_node": 2,
            "level": "-200",
            "lateral_offset": 50,
        }
    )
    assert isinstance(strip, StripFootingRecord)
    assert strip.element_type == "StripFooting"
    assert strip.start_node == "1"
    assert strip.level == -200.0
    assert strip.lateral_offset == 50.0

    column = service.parse_element(
        {
            "kind": "foundation_column",
            "id": "FC1",
            "section_id": "C1",
            "section_wr_id": 5,
            "node": "1",
            "length_fd": "1500",
            "length_wr": 500,
            "offset": [100, 0],
        }
    )
    assert isinstance(column, FoundationColumnRecord)
    assert column.section_wr_id == "5"
    assert column.length_fd == 1500.0
    assert column.offset == (100.0, 0.0)


def test_node_list_format(service):
    batch = service.parse_batch({"nodes": [{"id": 7, "x": 1, "y": 2, "z": 3}]})
    assert batch.nodes == {"7": Vector3(1, 2, 3)}


def test_invalid_node_raises(service):
    with pytest.raises(InputDataError):
        service.parse_batch({"nodes": {"1": [0]}})
    with pytest.raises(InputDataError):
        service.parse_batch({"nodes": [{"x": 1}]})


def test_batch_must_be_object(service):
    with pytest.raises(InputDataError):
        service.parse_batch([1, 2, 3])


def test_load_batch_file(service, tmp_path):
    batch = service.load_batch_file(write_batch(tmp_path))
    assert len(batch.records) == 4


def test_load_missing_file(service, tmp_path):
    with pytest.raises(InputDataError):
        service.load_batch_file(tmp_path / "missing.json")


def test_load_invalid_json(service, tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{nodes:", encoding="utf-8")
    with pytest.raises(InputDataError):
        service.load_batch_file(path)


def test_load_oversized_file(service, tmp_path, monkeypatch):
    monkeypatch.setattr(BatchFileService, "MAX_FILE_SIZE", 10)
    with pytest.raises(InputDataError):
        service.load_batch_file(write_batch(tmp_path))


class TestCategories:
    def test_normalize_categories(self):
        assert normalize_categories(None) is None
        assert normalize_categories([]) is None
        assert normalize_categories([" Column", "beam", ""]) == {"Column", "Beam"}

    def test_unknown_category(self):
        with pytest.raises(ValueError):
            normalize_categories(["roof"])

    def test_filter_records(self, service):
        records = service.parse_batch(BATCH).records
        assert [r.id for r in filter_records(records, {"Wall"})] == ["W1"]
        assert len(filter_records(records, None)) == 4


class TestConversionService:
    def test_convert_file_default_output(self, tmp_path):
        config = GeneratorConfig(default_output_dir=tmp_path / "out")
        summary = ConversionService(config).convert_file(write_batch(tmp_path))

        output = tmp_path / "out" / "batch.ifc"
        assert summary["output_file"] == str(output)
        assert output.exists()
        assert summary["solid_count"] == 4
        assert summary["solids_by_type"] == {"Column": 1, "Girder": 1, "Pile": 1, "Wall": 1}
        assert len(summary["rejected"]) == 2
        assert summary["ifc_failed"] == []
        assert summary["ifc_entities"]["IfcColumn"] == 1

    def test_convert_file_with_categories_and_summary(self, tmp_path):
        config = GeneratorConfig(default_output_dir=tmp_path / "out")
        summary_path = tmp_path / "summary" / "summary.json"
        summary = ConversionService(config).convert_file(
            write_batch(tmp_path), tmp_path / "model.ifc", summary_path, ["column"]
        )
        assert summary["solid_count"] == 1
        saved = json.loads(summary_path.read_text(encoding="utf-8"))
        assert saved["solids_by_type"] == {"Column": 1}
        assert saved["output_file"] == str(tmp_path / "model.ifc")
