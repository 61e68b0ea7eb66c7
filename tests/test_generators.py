import logging
import math

import pytest

from common.geometry import Vector3
from conftest import H_400, H_500, figure, rect_section
from exceptions.custom_errors import ElementSkippedError, SkipReason
from geometryEngine.generators import (
    BeamGenerator,
    BraceGenerator,
    ColumnGenerator,
    FootingGenerator,
    FoundationColumnGenerator,
    PileGenerator,
    SlabGenerator,
    StripFootingGenerator,
    WallGenerator,
)
from geometryEngine.generator_factory import generate_solids
from geometryEngine.profile_parameter_mapper import HParams, RectangleParams
from geometryEngine.records import (
    BeamRecord,
    BraceRecord,
    ColumnRecord,
    FootingRecord,
    FoundationColumnRecord,
    PileRecord,
    SectionRecord,
    SlabRecord,
    StripFootingRecord,
    WallOpening,
    WallRecord,
)
from geometryEngine.section_classifier import SectionFamily


def skip_reason(generator, record, context):
    with pytest.raises(ElementSkippedError) as excinfo:
        generator.generate(record, context)
    assert excinfo.value.element_id == record.id
    return excinfo.value.reason


class TestColumnGenerator:
    def test_rectangular_column(self, make_context):
        context = make_context(rect_section())
        record = ColumnRecord(id="1", section_id="C1", bottom_node="1", top_node="2", guid="g-1")
        solids = ColumnGenerator().generate(record, context)

        assert len(solids) == 1
        solid = solids[0]
        assert solid.element_type == "Column"
        assert solid.section_family is SectionFamily.RECTANGLE
        assert solid.length == pytest.approx(3000)
        assert solid.placement.center.is_close(Vector3(0, 0, 1500))
        assert solid.profile_params == RectangleParams(600, 600)
        assert solid.part == "main"
        assert solid.guid == "g-1"
        assert solid.metadata["profile_meta"]["profile_source"] == "calculator"
        assert solid.metadata["section_mode"] == "single"
        assert solid.metadata["section_data_original"]["id"] == "C1"

    def test_raw_coordinates_take_priority(self, make_context):
        context = make_context(rect_section())
        record = ColumnRecord(
            id="1",
            section_id="C1",
            bottom_node="1",
            top_node="2",
            bottom_coord=Vector3(1000, 0, 0),
            top_coord=Vector3(1000, 0, 4000),
        )
        solid = ColumnGenerator().generate(record, context)[0]
        assert solid.length == pytest.approx(4000)
        assert solid.placement.center.is_close(Vector3(1000, 0, 2000))

    def test_steel_column_from_shape(self, make_context):
        context = make_context(SectionRecord(id="SC1", shape=H_400))
        record = ColumnRecord(id="2", section_id="SC1", bottom_node="1", top_node="2")
        solid = ColumnGenerator().generate(record, context)[0]
        assert solid.section_family is SectionFamily.H
        assert solid.profile_params == HParams(400, 200, 8, 13)
        assert solid.metadata["profile_meta"]["profile_source"] == "ifc-equivalent"

    def test_missing_node(self, make_context):
        record = ColumnRecord(id="1", section_id="C1", bottom_node="1", top_node="99")
        assert skip_reason(ColumnGenerator(), record, make_context(rect_section())) is SkipReason.MISSING_NODES

    def test_missing_section(self, make_context):
        record = ColumnRecord(id="1", section_id="NONE", bottom_node="1", top_node="2")
        assert skip_reason(ColumnGenerator(), record, make_context()) is SkipReason.MISSING_SECTION

    def test_zero_length(self, make_context):
        record = ColumnRecord(id="1", section_id="C1", bottom_node="1", top_node="1")
        assert skip_reason(ColumnGenerator(), record, make_context(rect_section())) is SkipReason.INVALID_LENGTH

    def test_reference_direction_false_adds_quarter_turn(self, make_context):
        context = make_context(rect_section(is_reference_direction=False))
        record = ColumnRecord(id="1", section_id="C1", bottom_node="1", top_node="2")
        solid = ColumnGenerator().generate(record, context)[0]
        assert solid.placement.roll_angle == pytest.approx(math.radians(90))

    def test_not_same_column_is_multi_section(self, make_context):
        markup = figure(
            "StbSecSteelFigureColumn_S",
            ("StbSecSteelColumn_S_NotSame", {"pos": "BOTTOM", "shape": H_500}),
            ("StbSecSteelColumn_S_NotSame", {"pos": "TOP", "shape": H_400}),
        )
        context = make_context(SectionRecord(id="SC2", variant_markup=markup))
        record = ColumnRecord(id="3", section_id="SC2", bottom_node="1", top_node="2")
        solids = ColumnGenerator().generate(record, context)

        assert len(solids) == 1
        solid = solids[0]
        assert solid.is_multi_section
        assert len(solid.mesh.stations) == 2
        assert solid.metadata["section_mode"] == "multi"
        assert solid.metadata["section_count"] == 2

    def test_cross_h_column_has_two_arms(self, make_context):
        section = SectionRecord(id="X1", dimensions={"crossH_shapeX": H_400, "crossH_shapeY": H_500})
        record = ColumnRecord(id="4", section_id="X1", bottom_node="1", top_node="2", guid="g-4")
        solids = ColumnGenerator().generate(record, make_context(section))

        assert [s.part for s in solids] == ["cross_h_x", "cross_h_y"]
        assert all(s.section_family is SectionFamily.H for s in solids)
        assert solids[0].guid == "g-4"
        assert solids[1].guid is None
        assert solids[1].placement.roll_angle == pytest.approx(math.radians(90))

    def test_cross_h_with_missing_shape_falls_back_to_single(self, make_context):
        section = SectionRecord(id="X2", dimensions={"crossH_shapeX": H_400, "crossH_shapeY": "H-missing"})
        record = ColumnRecord(id="5", section_id="X2", bottom_node="1", top_node="2")
        solids = ColumnGenerator().generate(record, make_context(section))
        assert [s.part for s in solids] == ["main"]

    def test_base_plate(self, make_context):
        section = rect_section(base_plate={"B_X": 500, "B_Y": 500, "t": 25})
        record = ColumnRecord(id="6", section_id="C1", bottom_node="1", top_node="2")
        solids = ColumnGenerator().generate(record, make_context(section))

        plate = solids[-1]
        assert plate.part == "base_plate"
        assert plate.length == pytest.approx(25)
        assert plate.placement.center.is_close(Vector3(0, 0, -12.5))
        assert plate.profile_params == RectangleParams(500, 500)
        assert plate.guid is None

    def test_invalid_base_plate_is_ignored(self, make_context):
        section = rect_section(base_plate={"B_X": 500, "B_Y": 0, "t": 25})
        record = ColumnRecord(id="6", section_id="C1", bottom_node="1", top_node="2")
        solids = ColumnGenerator().generate(record, make_context(section))
        assert [s.part for s in solids] == ["main"]

    def test_src_concrete_part(self, make_context):
        section = SectionRecord(id="SRC1", shape=H_400, concrete={"width_X": 800, "width_Y": 800})
        record = ColumnRecord(id="7", section_id="SRC1", bottom_node="1", top_node="2")
        solids = ColumnGenerator().generate(record, make_context(section))

        assert [s.part for s in solids] == ["main", "concrete"]
        assert solids[1].section_family is SectionFamily.RECTANGLE
        assert solids[1].profile_params == RectangleParams(800, 800)


class TestBeamGenerator:
    def test_center_beam(self, make_context):
        context = make_context(SectionRecord(id="G1", shape=H_400))
        record = BeamRecord(id="10", section_id="G1", start_node="2", end_node="3", kind="Girder")
        solid = BeamGenerator().generate(record, context)[0]

        assert solid.element_type == "Girder"
        assert solid.length == pytest.approx(6000)
        assert solid.placement.center.is_close(Vector3(3000, 0, 3000))
        assert solid.metadata["placement_mode"] == "center"
        assert solid.metadata["section_height"] == 400
        assert not solid.metadata["multi_section"]

    def test_top_aligned_beam(self, make_context):
        context = make_context(SectionRecord(id="G1", shape=H_400))
        record = BeamRecord(
            id="11", section_id="G1", start_node="2", end_node="3", placement_mode="top-aligned"
        )
        solid = BeamGenerator().generate(record, context)[0]
        assert solid.placement.center.is_close(Vector3(3000, 0, 2800))

    def test_config_default_placement_mode(self, make_context):
        context = make_context(SectionRecord(id="G1", shape=H_400), default_placement_mode="top-aligned")
        record = BeamRecord(id="12", section_id="G1", start_node="2", end_node="3")
        solid = BeamGenerator().generate(record, context)[0]
        assert solid.metadata["placement_mode"] == "top-aligned"

    def test_placement_mode_is_case_insensitive(self, make_context):
        context = make_context(SectionRecord(id="G1", shape=H_400))
        record = BeamRecord(id="14", section_id="G1", start_node="2", end_node="3", placement_mode="TOP")
        solid = BeamGenerator().generate(record, context)[0]
        assert solid.metadata["placement_mode"] == "top-aligned"
        assert solid.placement.center.is_close(Vector3(3000, 0, 2800))

    def test_unknown_placement_mode_falls_back(self, make_context, caplog):
        context = make_context(
            SectionRecord(id="G1", shape=H_400), default_placement_mode="sideways"
        )
        record = BeamRecord(id="15", section_id="G1", start_node="2", end_node="3", placement_mode="upside")
        with caplog.at_level(logging.WARNING):
            solid = BeamGenerator().generate(record, context)[0]
        assert solid.metadata["placement_mode"] == "center"
        assert "upside" in caplog.text
        assert "sideways" in caplog.text

    def test_haunch_beam(self, make_context):
        markup = figure(
            "StbSecSteelFigureBeam_S",
            ("StbSecSteelBeam_S_Haunch", {"pos": "START", "shape": H_500}),
            ("StbSecSteelBeam_S_Haunch", {"pos": "CENTER", "shape": H_400}),
            ("StbSecSteelBeam_S_Haunch", {"pos": "END", "shape": H_500}),
        )
        context = make_context(SectionRecord(id="G2", variant_markup=markup))
        record = BeamRecord(
            id="13", section_id="G2", start_node="2", end_node="3", haunch_start=1000, haunch_end=1000
        )
        solid = BeamGenerator().generate(record, context)[0]

        assert solid.is_multi_section
        assert len(solid.mesh.stations) == 6
        assert [s.position for s in solid.mesh.stations] == pytest.approx(
            [0, 999.9, 1000, 5000, 5000.1, 6000]
        )
        assert solid.metadata["multi_section"] is True
        assert solid.metadata["section_count"] == 3

    def test_joint_lengths_are_used_without_haunch(self, make_context):
        markup = figure(
            "StbSecSteelFigureBeam_S",
            ("StbSecSteelBeam_S_Joint", {"pos": "START", "shape": H_500}),
            ("StbSecSteelBeam_S_Joint", {"pos": "CENTER", "shape": H_400}),
            ("StbSecSteelBeam_S_Joint", {"pos": "END", "shape": H_500}),
        )
        context = make_context(SectionRecord(id="G3", variant_markup=markup))
        record = BeamRecord(
            id="14", section_id="G3", start_node="2", end_node="3", joint_start=500, joint_end=500
        )
        solid = BeamGenerator().generate(record, context)[0]
        assert solid.mesh.stations[2].position == pytest.approx(500)

    def test_missing_haunch_shapes(self, make_context):
        markup = figure(
            "StbSecSteelFigureBeam_S",
            ("StbSecSteelBeam_S_Haunch", {"pos": "START", "shape": "H-missing-1"}),
            ("StbSecSteelBeam_S_Haunch", {"pos": "END", "shape": "H-missing-2"}),
        )
        context = make_context(SectionRecord(id="G4", variant_markup=markup))
        record = BeamRecord(id="15", section_id="G4", start_node="2", end_node="3")
        assert skip_reason(BeamGenerator(), record, context) is SkipReason.INSUFFICIENT_SECTIONS

    def test_same_start_and_end_node(self, make_context):
        context = make_context(SectionRecord(id="G1", shape=H_400))
        record = BeamRecord(id="16", section_id="G1", start_node="3", end_node="3")
        assert skip_reason(BeamGenerator(), record, context) is SkipReason.INVALID_LENGTH


class TestBraceGenerator:
    def test_brace_is_centered_and_uniform(self, make_context):
        markup = figure(
            "StbSecSteelFigureBrace_S",
            ("StbSecSteelBrace_S_NotSame", {"pos": "BOTTOM", "shape": H_500}),
            ("StbSecSteelBrace_S_NotSame", {"pos": "TOP", "shape": H_400}),
        )
        context = make_context(
            SectionRecord(id="V1", variant_markup=markup), default_placement_mode="top-aligned"
        )
        record = BraceRecord(id="20", section_id="V1", start_node="1", end_node="3")
        solid = BraceGenerator().generate(record, context)[0]

        assert solid.element_type == "Brace"
        assert solid.length == pytest.approx(math.hypot(6000, 3000))
        assert solid.metadata["placement_mode"] == "center"
        assert not solid.is_multi_section
        assert solid.placement.center.is_close(Vector3(3000, 0, 1500))


class TestPileGenerator:
    def test_single_node_pile(self, make_context):
        context = make_context(SectionRecord(id="P1", dimensions={"D": 1000}))
        record = PileRecord(id="30", section_id="P1", node="1", level_top=-500, length_all=10000)
        solid = PileGenerator().generate(record, context)[0]

        assert solid.section_family is SectionFamily.CIRCLE
        assert solid.length == pytest.approx(10000)
        assert solid.placement.center.is_close(Vector3(0, 0, -5500))
        assert solid.metadata["pile_format"] == "1node"

    def test_estimated_length(self, make_context, caplog):
        context = make_context(SectionRecord(id="P1", dimensions={"D": 1000}))
        record = PileRecord(id="31", section_id="P1", node="1", level_top=0)
        with caplog.at_level("WARNING"):
            solid = PileGenerator().generate(record, context)[0]
        assert solid.length == pytest.approx(20000)
        assert "推定" in caplog.text

    def test_section_length_is_used(self, make_context):
        context = make_context(SectionRecord(id="P2", dimensions={"D": 800, "length_pile": 12000}))
        record = PileRecord(id="32", section_id="P2", node="1")
        assert PileGenerator().generate(record, context)[0].length == pytest.approx(12000)

    def test_offset_applied_once(self, make_context):
        context = make_context(SectionRecord(id="P1", dimensions={"D": 1000}))
        record = PileRecord(
            id="33", section_id="P1", node="1", level_top=0, length_all=5000, offset=(200, 100)
        )
        solid = PileGenerator().generate(record, context)[0]
        assert solid.placement.center.is_close(Vector3(200, 100, -2500))

    def test_extended_foot_pile(self, make_context):
        dims = {
            "D_axial": 1000,
            "D_extended_foot": 1400,
            "length_extended_foot": 1500,
            "angle_extended_foot_taper": 12,
        }
        context = make_context(SectionRecord(id="P3", dimensions=dims))
        record = PileRecord(id="34", section_id="P3", node="1", level_top=0, length_all=15000)
        solid = PileGenerator().generate(record, context)[0]

        assert solid.is_multi_section
        stations = solid.mesh.stations
        assert len(stations) == 4
        assert stations[1].position == pytest.approx(1500)
        assert stations[2].position == pytest.approx(1500 + 200 / math.tan(math.radians(12)))
        assert solid.metadata["pile_type"] == "ExtendedFoot"
        assert solid.section_family is SectionFamily.CIRCLE

    def test_extended_foot_without_angle_tapers_over_whole_pile(self, make_context):
        dims = {"D_axial": 1000, "D_extended_foot": 1400, "length_extended_foot": 1500}
        context = make_context(SectionRecord(id="P4", dimensions=dims))
        record = PileRecord(id="37", section_id="P4", node="1", level_top=0, length_all=15000)
        mesh = PileGenerator().generate(record, context)[0].mesh

        assert [s.position for s in mesh.stations] == pytest.approx([0, 15000])
        x_min, _, x_max, _ = mesh.section_at(7500).bounding_box()
        assert x_max - x_min == pytest.approx(1200, abs=1.0)

    def test_extended_top_foot_without_angle_keeps_enlarged_lengths(self, make_context):
        dims = {
            "D_axial": 1000,
            "D_extended_foot": 1400,
            "length_extended_foot": 1500,
            "D_extended_top": 1200,
            "length_extended_top": 2000,
        }
        context = make_context(SectionRecord(id="P5", dimensions=dims))
        record = PileRecord(id="38", section_id="P5", node="1", level_top=0, length_all=15000)
        mesh = PileGenerator().generate(record, context)[0].mesh

        assert [s.position for s in mesh.stations] == pytest.approx(
            [0, 1500, 1500.1, 12999.9, 13000, 15000]
        )

    def test_two_node_pile(self, make_context):
        context = make_context(SectionRecord(id="P1", dimensions={"D": 1000}))
        record = PileRecord(id="35", section_id="P1", bottom_node="1", top_node="2")
        solid = PileGenerator().generate(record, context)[0]
        assert solid.metadata["pile_format"] == "2node"
        assert solid.length == pytest.approx(3000)

    def test_missing_pile_node(self, make_context):
        context = make_context(SectionRecord(id="P1", dimensions={"D": 1000}))
        record = PileRecord(id="36", section_id="P1", node="99")
        assert skip_reason(PileGenerator(), record, context) is SkipReason.MISSING_NODES


class TestFootingGenerator:
    def test_footing_box(self, make_context):
        section = SectionRecord(id="F1", dimensions={"width_X": 2000, "width_Y": 2500, "depth": 1000})
        record = FootingRecord(id="40", section_id="F1", node="1", level_bottom=-2000)
        solid = FootingGenerator().generate(record, make_context(section))[0]

        assert solid.length == pytest.approx(1000)
        assert solid.placement.center.is_close(Vector3(0, 0, -1500))
        assert solid.profile_params == RectangleParams(2000, 2500)
        assert solid.metadata["depth"] == 1000
        assert solid.metadata["level_bottom"] == -2000

    def test_footing_defaults(self, make_context):
        record = FootingRecord(id="41", section_id="F2", node="1")
        solid = FootingGenerator().generate(record, make_context(SectionRecord(id="F2")))[0]
        assert solid.profile_params == RectangleParams(1000, 1000)
        assert solid.length == pytest.approx(1500)
        assert solid.metadata["profile_meta"]["profile_source"] == "fallback"


class TestStripFootingGenerator:
    def test_strip_footing_hangs_below_level(self, make_context):
        section = SectionRecord(id="SF1", dimensions={"width_X": 800, "depth": 500})
        record = StripFootingRecord(
            id="45", section_id="SF1", start_node="2", end_node="3", level=-200
        )
        solid = StripFootingGenerator().generate(record, make_context(section))[0]

        assert solid.element_type == "StripFooting"
        assert solid.length == pytest.approx(6000)
        assert solid.placement.center.is_close(Vector3(3000, 0, -450))
        assert solid.profile_params == RectangleParams(800, 500)
        assert solid.metadata["level"] == -200

    def test_lateral_offset_moves_to_left_of_axis(self, make_context):
        section = SectionRecord(id="SF1", dimensions={"width_X": 800, "depth": 500})
        record = StripFootingRecord(
            id="46", section_id="SF1", start_node="2", end_node="3", lateral_offset=100
        )
        solid = StripFootingGenerator().generate(record, make_context(section))[0]
        assert solid.placement.center.is_close(Vector3(3000, 100, 2750))

    def test_strip_footing_defaults(self, make_context):
        record = StripFootingRecord(id="47", section_id="SF2", start_node="2", end_node="3")
        solid = StripFootingGenerator().generate(record, make_context(SectionRecord(id="SF2")))[0]
        assert solid.profile_params == RectangleParams(600, 400)
        assert solid.metadata["profile_meta"]["profile_source"] == "fallback"

    def test_vertical_nodes_collapse_at_level(self, make_context):
        record = StripFootingRecord(
            id="48", section_id="SF2", start_node="1", end_node="2", level=0
        )
        context = make_context(SectionRecord(id="SF2"))
        assert skip_reason(StripFootingGenerator(), record, context) is SkipReason.INVALID_LENGTH


class TestFoundationColumnGenerator:
    def test_foundation_and_wall_rise(self, make_context):
        context = make_context(rect_section("FC1", 1000, 1000), rect_section("FW1", 600, 600))
        record = FoundationColumnRecord(
            id="60",
            section_id="FC1",
            section_wr_id="FW1",
            node="1",
            length_fd=1500,
            length_wr=500,
            guid="g-60",
        )
        main, wall_rise = FoundationColumnGenerator().generate(record, context)

        assert main.part == "main"
        assert main.guid == "g-60"
        assert main.length == pytest.approx(1500)
        assert main.placement.center.is_close(Vector3(0, 0, -1250))
        assert main.profile_params == RectangleParams(1000, 1000)
        assert wall_rise.part == "wall_rise"
        assert wall_rise.guid is None
        assert wall_rise.length == pytest.approx(500)
        assert wall_rise.placement.center.is_close(Vector3(0, 0, -250))
        assert wall_rise.profile_params == RectangleParams(600, 600)
        assert wall_rise.metadata["length_fd"] == 1500

    def test_foundation_only_with_offset(self, make_context):
        context = make_context(rect_section("FC1", 1000, 1000))
        record = FoundationColumnRecord(
            id="61", section_id="FC1", node="1", length_fd=1000, offset=(100, 50)
        )
        solids = FoundationColumnGenerator().generate(record, context)
        assert len(solids) == 1
        assert solids[0].placement.center.is_close(Vector3(100, 50, -500))

    def test_missing_wall_rise_section_keeps_foundation(self, make_context, caplog):
        context = make_context(rect_section("FC1", 1000, 1000))
        record = FoundationColumnRecord(
            id="62", section_id="FC1", section_wr_id="NONE", node="1", length_fd=1000, length_wr=400
        )
        with caplog.at_level(logging.WARNING):
            solids = FoundationColumnGenerator().generate(record, context)
        assert len(solids) == 1
        assert solids[0].placement.center.is_close(Vector3(0, 0, -900))
        assert "立上り部" in caplog.text

    def test_missing_foundation_length(self, make_context):
        context = make_context(rect_section("FC1", 1000, 1000))
        record = FoundationColumnRecord(id="63", section_id="FC1", node="1")
        assert skip_reason(FoundationColumnGenerator(), record, context) is SkipReason.INVALID_LENGTH


class TestSlabGenerator:
    def test_rectangular_slab(self, make_context):
        coords = (
            Vector3(0, 0, 3000),
            Vector3(6000, 0, 3000),
            Vector3(6000, 4000, 3000),
            Vector3(0, 4000, 3000),
        )
        section = SectionRecord(id="S1", dimensions={"depth": 200})
        record = SlabRecord(id="50", section_id="S1", coords=coords)
        solid = SlabGenerator().generate(record, make_context(section))[0]

        assert solid.length == pytest.approx(200)
        assert solid.placement.center.is_close(Vector3(3000, 2000, 2900))
        assert solid.profile.area() == pytest.approx(6000 * 4000)
        assert solid.metadata["vertex_count"] == 4

    def test_slab_offsets_by_node(self, make_context, nodes):
        nodes["4"] = Vector3(6000, 4000, 3000)
        nodes["5"] = Vector3(0, 4000, 3000)
        context = make_context(SectionRecord(id="S1", dimensions={"depth": 200}))
        lift = Vector3(0, 0, 100)
        record = SlabRecord(
            id="51",
            section_id="S1",
            node_ids=("2", "3", "4", "5"),
            offsets={"2": lift, "3": lift, "4": lift, "5": lift},
        )
        solid = SlabGenerator().generate(record, context)[0]
        assert solid.placement.center.is_close(Vector3(3000, 2000, 3000))

    def test_slab_requires_three_points(self, make_context):
        record = SlabRecord(id="52", section_id="S1", coords=(Vector3(), Vector3(1000, 0, 0)))
        context = make_context(SectionRecord(id="S1"))
        assert skip_reason(SlabGenerator(), record, context) is SkipReason.MISSING_NODES

    def test_collinear_slab(self, make_context):
        coords = (Vector3(0, 0, 0), Vector3(1000, 0, 0), Vector3(2000, 0, 0))
        record = SlabRecord(id="53", section_id="S1", coords=coords)
        context = make_context(SectionRecord(id="S1"))
        assert skip_reason(SlabGenerator(), record, context) is SkipReason.DEGENERATE_GEOMETRY


class TestWallGenerator:
    COORDS = (
        Vector3(0, 0, 0),
        Vector3(5000, 0, 0),
        Vector3(5000, 0, 3000),
        Vector3(0, 0, 3000),
    )

    def test_wall_with_opening(self, make_context):
        section = SectionRecord(id="W1", dimensions={"t": 200})
        record = WallRecord(
            id="60",
            section_id="W1",
            coords=self.COORDS,
            openings=(WallOpening(1000, 0, 900, 2000, id="O1"),),
        )
        solid = WallGenerator().generate(record, make_context(section))[0]

        assert solid.length == pytest.approx(200)
        assert len(solid.profile.holes) == 1
        assert solid.placement.center.is_close(Vector3(2500, 0, 1500))
        assert solid.metadata["width"] == pytest.approx(5000)
        assert solid.metadata["height"] == pytest.approx(3000)
        assert solid.metadata["opening_count"] == 1
        assert solid.metadata["wall_thickness"] == pytest.approx(200)

    def test_wall_through_factory_is_not_skipped(self, make_context):
        section = SectionRecord(id="W1", dimensions={"t": 250})
        record = WallRecord(id="63", section_id="W1", coords=self.COORDS)
        result = generate_solids([record], make_context(section))
        assert result.skipped == []
        assert [s.element_id for s in result.solids] == ["63"]
        assert result.solids[0].length == pytest.approx(250)

    def test_small_opening_is_dropped(self, make_context):
        section = SectionRecord(id="W1", dimensions={"t": 200})
        record = WallRecord(
            id="61",
            section_id="W1",
            coords=self.COORDS,
            openings=(WallOpening(1000, 1000, 5, 5),),
        )
        solid = WallGenerator().generate(record, make_context(section))[0]
        assert solid.profile.holes == ()

    def test_default_thickness(self, make_context):
        record = WallRecord(id="62", section_id="W2", coords=self.COORDS)
        solid = WallGenerator().generate(record, make_context(SectionRecord(id="W2")))[0]
        assert solid.length == pytest.approx(200)
        assert solid.metadata["profile_meta"]["profile_source"] == "fallback"
