"""寸法属性キーのエイリアス定義

ST-Bridge の XML 属性・JSON 寸法オブジェクトでは同じ物理量に対して
複数の命名が混在します。ここでは正規化時に参照する優先順位付きの
キー一覧をまとめて定義します（先頭ほど優先）。
"""

import re

WIDTH_KEYS = (
    "width", "Width", "WIDTH",
    "B", "b",
    "outer_width", "overall_width",
    "X", "x",
)

HEIGHT_KEYS = (
    "height", "Height", "HEIGHT",
    "H", "h",
    "depth", "Depth",
    "overall_depth", "overall_height",
    "Y", "y",
    "A", "a",
)

DIAMETER_KEYS = ("D", "d", "diameter", "Diameter", "outer_diameter")

# 正規化時に thickness として採用するキー
PRIMARY_THICKNESS_KEYS = ("t", "thickness", "t1")

# get_thickness() で参照するキー
THICKNESS_KEYS = (
    "thickness", "Thickness",
    "t", "T", "t1", "t2",
    "wall_thickness", "web_thickness", "flange_thickness",
    "tw", "tf",
)

RADIUS_KEYS = ("radius", "Radius", "r_outer")

LENGTH_PILE_KEYS = ("length_pile", "pile_length")

# 拡径杭
EXTENDED_PILE_KEYS = (
    "D_axial",
    "D_extended_foot",
    "D_extended_top",
    "length_extended_foot",
    "length_extended_top",
    "angle_extended_foot_taper",
    "angle_extended_top_taper",
)

WIDTH_PATTERN = re.compile(r"^width_?X$", re.IGNORECASE)
HEIGHT_PATTERN = re.compile(r"^width_?Y$", re.IGNORECASE)
