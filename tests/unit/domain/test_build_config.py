from __future__ import annotations

"""
Unit tests for the Config Domain.

Verifies:
1. Default configuration generation.
2. Loading overrides from disk, limited to known keys.
3. Resilience against missing and corrupted config files.
"""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from symboltree.domain.config import get_default_config, get_default_config_path, load_config
from symboltree.domain.constants import ALL_SYMBOL_TYPES


@pytest.fixture
def mock_user_data_dir(tmp_path: Path):
    """Redirect the user data directory to a temporary folder."""
    config_dir = tmp_path / "SymbolTree"
    config_dir.mkdir()

    with patch("symboltree.domain.config.get_user_data_dir", return_value=str(config_dir)):
        yield config_dir


def test_default_config_values() -> None:
    cfg = get_default_config()

    assert cfg["group_by"] == "source_path"
    assert cfg["method_count"] is False
    assert cfg["collapse_chains"] is False
    assert cfg["types"] == list(ALL_SYMBOL_TYPES)
    assert cfg["snapshot_interval"] == 5.0


def test_default_config_is_a_fresh_copy() -> None:
    first = get_default_config()
    first["types"].append("Z")

    assert "Z" not in get_default_config()["types"]


def test_missing_file_returns_defaults(mock_user_data_dir: Path) -> None:
    assert get_default_config_path() == str(mock_user_data_dir / "config.json")
    assert load_config() == get_default_config()


def test_overrides_are_merged(tmp_path: Path) -> None:
    path = tmp_path / "custom.json"
    path.write_text(json.dumps({"group_by": "component", "legacy_key": 1}), encoding="utf-8")

    cfg = load_config(str(path))

    assert cfg["group_by"] == "component"
    assert cfg["types"] == list(ALL_SYMBOL_TYPES)
    assert "legacy_key" not in cfg


@pytest.mark.parametrize("content", ["{ broken json", "[1, 2, 3]"])
def test_corrupted_file_returns_defaults(tmp_path: Path, content: str) -> None:
    path = tmp_path / "config.json"
    path.write_text(content, encoding="utf-8")

    assert load_config(str(path)) == get_default_config()
