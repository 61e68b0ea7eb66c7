import uuid

import ifcopenshell.guid


def create_ifc_guid() -> str:
    """新しいIFC GUID を生成します。

    Returns:
        str: IFC形式の圧縮されたGUID（22文字）
    """
    return ifcopenshell.guid.compress(uuid.uuid4().hex)


def convert_stb_guid_to_ifc(stb_guid: str) -> str:
    """ST-Bridge の GUID（32桁16進、ハイフン可）を IFC 圧縮形式に変換

    Raises:
        ValueError: 空、または16進32桁でない場合
    """
    if not stb_guid:
        raise ValueError("STB GUID を指定してください")
    hex_str = stb_guid.replace("-", "").strip()
    if len(hex_str) != 32:
        raise ValueError(f"STB GUID の形式が不正です: {stb_guid}")
    try:
        int(hex_str, 16)
    except ValueError as e:
        raise ValueError(f"STB GUID の形式が不正です: {stb_guid}") from e
    return ifcopenshell.guid.compress(hex_str)
