import json

import pytest

from ui.cli_interface import CliInterface

BATCH = {
    "nodes": {"1": [0, 0, 0], "2": [0, 0, 3000], "3": [6000, 0, 3000]},
    "sections": [{"id": "C1", "dimensions": {"width_X": 600, "width_Y": 600}}],
    "elements": [
        {"kind": "column", "id": "1", "section_id": "C1", "bottom_node": "1", "top_node": "2"},
        {"kind": "beam", "id": "2", "section_id": "C1", "start_node": "2", "end_node": "3"},
        {"kind": "beam", "id": "3", "section_id": "missing", "start_node": "2", "end_node": "3"},
    ],
}


@pytest.fixture
def workspace(tmp_path):
    batch = tmp_path / "batch.json"
    batch.write_text(json.dumps(BATCH), encoding="utf-8")
    config = tmp_path / "config.json"
    config.write_text(
        json.dumps({"default_output_dir": str(tmp_path / "out")}), encoding="utf-8"
    )
    return tmp_path, batch, config


def test_convert_with_summary(workspace, capsys):
    tmp_path, batch, config = workspace
    output = tmp_path / "model.ifc"
    summary = tmp_path / "summary.json"

    exit_code = CliInterface().run(
        [str(batch), "-o", str(output), "--summary", str(summary), "--config", str(config)]
    )

    assert exit_code == 0
    assert output.exists()
    saved = json.loads(summary.read_text(encoding="utf-8"))
    assert saved["solids_by_type"] == {"Column": 1, "Beam": 1}
    assert saved["skipped_by_reason"] == {"missing-section": 1}
    out = capsys.readouterr().out
    assert "ソリッド: 2" in out
    assert "missing-section: 1" in out


def test_default_output_from_config(workspace):
    tmp_path, batch, config = workspace
    assert CliInterface().run([str(batch), "--config", str(config)]) == 0
    assert (tmp_path / "out" / "batch.ifc").exists()


def test_category_filter(workspace, capsys):
    tmp_path, batch, config = workspace
    summary = tmp_path / "summary.json"
    exit_code = CliInterface().run(
        [
            str(batch),
            "--config",
            str(config),
            "--summary",
            str(summary),
            "--categories",
            "column",
        ]
    )
    assert exit_code == 0
    assert json.loads(summary.read_text(encoding="utf-8"))["solid_count"] == 1
    assert "変換対象カテゴリ: column" in capsys.readouterr().out


def test_unknown_category_fails(workspace, capsys):
    _, batch, config = workspace
    exit_code = CliInterface().run([str(batch), "--config", str(config), "--categories", "roof"])
    assert exit_code == 1
    assert "エラー" in capsys.readouterr().err


def test_missing_input_fails(workspace, capsys):
    tmp_path, _, config = workspace
    exit_code = CliInterface().run([str(tmp_path / "none.json"), "--config", str(config)])
    assert exit_code == 1
    assert "エラー" in capsys.readouterr().err


def test_invalid_config_fails(workspace):
    tmp_path, batch, _ = workspace
    config = tmp_path / "broken.json"
    config.write_text("{", encoding="utf-8")
    assert CliInterface().run([str(batch), "--config", str(config)]) == 1
