"""Tests for configuration loading."""
import pytest

from collada_export.utils.common import save_yaml
from collada_export.utils.config import DEFAULTS, default_config, load_config, resolve_config


def test_default_config_is_a_copy():
    cfg = default_config()
    cfg["author"] = "someone"
    assert DEFAULTS["author"] != "someone"


def test_load_config_fills_defaults(tmp_path):
    path = tmp_path / "export.yaml"
    save_yaml({"indent_unit": "\t", "write_empty_libraries": False}, path)

    cfg = load_config(str(path))
    assert cfg["indent_unit"] == "\t"
    assert cfg["write_empty_libraries"] is False
    assert cfg["file_extension"] == ".dae"


def test_load_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "nope.yaml"))


def test_load_config_rejects_unknown_keys(tmp_path):
    path = tmp_path / "export.yaml"
    save_yaml({"indent": 2}, path)
    with pytest.raises(ValueError):
        load_config(str(path))


@pytest.mark.parametrize("overrides", [
    {"indent_unit": ""},
    {"indent_unit": "--"},
    {"line_end": "\r"},
    {"file_extension": "dae"},
    {"material_symbol": ""},
    {"write_empty_libraries": "yes"},
    {"unknown": 1},
])
def test_resolve_config_rejects_invalid_values(overrides):
    with pytest.raises(ValueError):
        resolve_config(overrides)


def test_resolve_config_merges_overrides():
    cfg = resolve_config({"author": "Jane"})
    assert cfg["author"] == "Jane"
    assert cfg["material_symbol"] == "defaultMaterial"
