import xml.etree.ElementTree as ET

import pytest

from stbParser.variant_expander import (
    VARIANT_FALLBACK,
    VARIANT_MULTI_SECTION,
    VARIANT_NOT_SAME,
    VARIANT_SAME,
    expand_section_variants,
    local_name,
    parse_variant_markup,
)


def test_local_name():
    assert local_name("{https://www.building-smart.or.jp/dl}StbSecSteelColumn_S_Same") == "StbSecSteelColumn_S_Same"
    assert local_name("stb:StbSecSteelBeam_S_Haunch") == "StbSecSteelBeam_S_Haunch"
    assert local_name("Plain") == "Plain"


def test_none_figure_expands_to_empty():
    expansion = expand_section_variants(None)
    assert expansion.is_empty()
    assert not expansion.is_multi_section


def test_same_has_priority_over_not_same():
    figure = parse_variant_markup(
        "<StbSecSteelFigureColumn_S>"
        '<StbSecSteelColumn_S_NotSame pos="BOTTOM" shape="H-500"/>'
        '<StbSecSteelColumn_S_Same shape="H-400" strength_main="SN490B"/>'
        "</StbSecSteelFigureColumn_S>"
    )
    expansion = expand_section_variants(figure)
    assert expansion.uniform.shape == "H-400"
    assert expansion.uniform.variant_type == VARIANT_SAME
    assert expansion.uniform.position == "SAME"
    assert expansion.uniform.strength_main == "SN490B"
    assert expansion.primary_shape == "H-400"
    assert not expansion.is_multi_section


def test_not_same_defaults_to_top():
    figure = parse_variant_markup(
        "<StbSecSteelFigureColumn_S>"
        '<StbSecSteelColumn_S_NotSame pos="BOTTOM" shape="H-500"/>'
        '<StbSecSteelColumn_S_NotSame shape="H-400"/>'
        "</StbSecSteelFigureColumn_S>"
    )
    expansion = expand_section_variants(figure)
    assert [d.position for d in expansion.variants] == ["BOTTOM", "TOP"]
    assert all(d.variant_type == VARIANT_NOT_SAME for d in expansion.variants)
    assert expansion.is_multi_section
    assert expansion.positioned == expansion.variants


def test_namespaced_tags_are_matched():
    ns = "https://www.building-smart.or.jp/dl"
    figure = parse_variant_markup(
        f'<StbSecSteelFigureBeam_S xmlns="{ns}">'
        '<StbSecSteelBeam_S_Straight shape="H-400"/>'
        "</StbSecSteelFigureBeam_S>"
    )
    assert expand_section_variants(figure).uniform.shape == "H-400"


def test_haunch_positions():
    figure = parse_variant_markup(
        "<StbSecSteelFigureBeam_S>"
        '<StbSecSteelBeam_S_Haunch pos="START" shape="H-500"/>'
        '<StbSecSteelBeam_S_Haunch pos="CENTER" shape="H-400"/>'
        '<StbSecSteelBeam_S_Haunch pos="END" shape="H-500"/>'
        "</StbSecSteelFigureBeam_S>"
    )
    expansion = expand_section_variants(figure)
    assert [(d.position, d.shape) for d in expansion.multi_section] == [
        ("START", "H-500"),
        ("CENTER", "H-400"),
        ("END", "H-500"),
    ]
    assert all(d.variant_type == VARIANT_MULTI_SECTION for d in expansion.multi_section)
    assert expansion.positioned == expansion.multi_section


def test_multi_section_default_position_is_center():
    figure = parse_variant_markup(
        "<StbSecSteelFigureBeam_S>"
        '<StbSecSteelBeam_S_Joint shape="H-400"/>'
        "</StbSecSteelFigureBeam_S>"
    )
    assert expand_section_variants(figure).multi_section[0].position == "CENTER"


def test_taper_expands_to_start_and_end():
    figure = parse_variant_markup(
        "<StbSecSteelFigureBeam_S>"
        '<StbSecSteelBeam_S_Taper start_shape="H-400" end_shape="H-600"/>'
        "</StbSecSteelFigureBeam_S>"
    )
    expansion = expand_section_variants(figure)
    assert [(d.position, d.shape) for d in expansion.multi_section] == [
        ("START", "H-400"),
        ("END", "H-600"),
    ]


def test_v210_wrappers_are_ordered():
    figure = parse_variant_markup(
        "<StbSecSteelFigureBeam_S>"
        '<StbSecSteelBeam_S_Shape order="3"><StbSecSteelBeamStraightShape shape="H-500"/></StbSecSteelBeam_S_Shape>'
        '<StbSecSteelBeam_S_Shape order="1"><StbSecSteelBeamStraightShape shape="H-500"/></StbSecSteelBeam_S_Shape>'
        '<StbSecSteelBeam_S_Shape order="2"><StbSecSteelBeamStraightShape shape="H-400"/></StbSecSteelBeam_S_Shape>'
        "</StbSecSteelFigureBeam_S>"
    )
    expansion = expand_section_variants(figure)
    assert [(d.position, d.shape) for d in expansion.multi_section] == [
        ("START", "H-500"),
        ("CENTER", "H-400"),
        ("END", "H-500"),
    ]


def test_single_v210_wrapper_is_uniform():
    figure = parse_variant_markup(
        "<StbSecSteelFigureColumn_S>"
        '<StbSecSteelColumn_S_Shape><StbSecSteelColumnShape shape="BOX-300"/></StbSecSteelColumn_S_Shape>'
        "</StbSecSteelFigureColumn_S>"
    )
    expansion = expand_section_variants(figure)
    assert expansion.uniform.shape == "BOX-300"
    assert expansion.uniform.position == "SAME"


def test_fallback_takes_first_shape_attribute():
    figure = parse_variant_markup(
        "<StbSecSteelFigureBrace_S>"
        '<Unknown><Inner shape="L-65x65x6"/></Unknown>'
        '<Other shape="L-90x90x7"/>'
        "</StbSecSteelFigureBrace_S>"
    )
    expansion = expand_section_variants(figure)
    assert expansion.fallback.shape == "L-65x65x6"
    assert expansion.fallback.variant_type == VARIANT_FALLBACK


def test_figure_without_shapes_logs_warning(caplog):
    figure = ET.Element("StbSecSteelFigureBeam_S")
    with caplog.at_level("WARNING"):
        expansion = expand_section_variants(figure)
    assert expansion.is_empty()
    assert "形状名が見つかりません" in caplog.text


def test_parse_variant_markup():
    assert parse_variant_markup(None) is None
    assert parse_variant_markup("   ") is None
    with pytest.raises(ET.ParseError):
        parse_variant_markup("<broken")
