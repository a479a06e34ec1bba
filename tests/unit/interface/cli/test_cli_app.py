from __future__ import annotations

"""
Unit tests for the CLI Application Controller.

Runs main() in-process against temporary data files and checks exit
codes and stdout output.
"""

import json
from pathlib import Path
from typing import Any, Callable, List

import pytest

from symboltree.interface.cli.app import main


@pytest.fixture
def data_file(tmp_path: Path, sample_feed: bytes) -> Path:
    path = tmp_path / "sizes.ndjson"
    path.write_bytes(sample_feed)
    return path


def test_json_output(data_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = main([str(data_file), "--use-defaults", "--json"])

    out = json.loads(capsys.readouterr().out)
    assert code == 0
    assert out["percent"] == 1.0
    assert out["error"] is None
    assert out["root"]["size"] == 722


def test_tree_output(data_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = main([str(data_file), "--use-defaults", "--collapse", "--depth", "1"])

    lines = capsys.readouterr().out.splitlines()
    assert code == 0
    assert lines[0] == "/ [Dt] 722"
    assert lines[1] == "├── base/files [Dt] 450"
    assert len(lines) == 4


def test_flags_override_config_file(
        data_file: Path,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
) -> None:
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps({"group_by": "component", "types": "t"}), encoding="utf-8")

    code = main([str(data_file), "--config", str(config_file), "--types", "v", "--json"])

    root = json.loads(capsys.readouterr().out)["root"]
    assert code == 0
    assert root["size"] == 40
    assert [c["short_name"] for c in root["children"]] == ["UI"]


def test_dump_config(capsys: pytest.CaptureFixture[str]) -> None:
    code = main(["--use-defaults", "--dump-config", "--method-count"])

    cfg = json.loads(capsys.readouterr().out)
    assert code == 0
    assert cfg["method_count"] is True
    assert cfg["group_by"] == "source_path"


def test_invalid_config_exits_with_2(data_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = main([str(data_file), "--use-defaults", "--types", "t,dd"])

    assert code == 2
    assert "ERROR" in capsys.readouterr().err


def test_missing_data_file_exits_with_2(tmp_path: Path) -> None:
    assert main([str(tmp_path / "absent.ndjson"), "--use-defaults"]) == 2


def test_missing_data_argument_exits_with_2() -> None:
    assert main(["--use-defaults"]) == 2


def test_broken_feed_exits_with_1(
        tmp_path: Path,
        encode_ndjson: Callable[[List[Any]], bytes],
        capsys: pytest.CaptureFixture[str],
) -> None:
    path = tmp_path / "broken.ndjson"
    path.write_bytes(encode_ndjson([{"total": 10}]) + b"not json\n")

    code = main([str(path), "--use-defaults"])

    assert code == 1
    assert "line 2" in capsys.readouterr().err
