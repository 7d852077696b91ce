"""
Configuration loading and validation utilities.
"""

import os
import copy
import logging
from typing import Optional

from .common import load_yaml

logger = logging.getLogger(__name__)

# Default configuration values
DEFAULTS = {
    "indent_unit": "  ",
    "line_end": "\n",
    "file_extension": ".dae",
    "author": "collada_export",
    "authoring_tool": "collada_export COLLADA writer",
    "unit_name": "meter",
    "write_empty_libraries": True,
    "texture_file_infix": "_texture_",
    "default_skeleton_root": "skeleton_root",
    "material_symbol": "defaultMaterial",
}

VALID_LINE_ENDS = ("\n", "\r\n")


def default_config() -> dict:
    """Return a fresh copy of the default configuration."""
    return copy.deepcopy(DEFAULTS)


def resolve_config(overrides: Optional[dict] = None) -> dict:
    """Merge caller overrides over the defaults and validate the result."""
    cfg = default_config()
    if overrides:
        unknown = sorted(set(overrides) - set(DEFAULTS))
        if unknown:
            raise ValueError(f"Unknown config keys: {unknown}. Choose from: {list(DEFAULTS.keys())}")
        cfg.update(overrides)
    validate_config(cfg)
    return cfg


def load_config(config_path: str) -> dict:
    """Load a YAML config file, fill missing keys with defaults, and validate."""
    if not os.path.isfile(config_path):
        raise FileNotFoundError(f"Config file not found: {config_path}")

    cfg = load_yaml(config_path) or {}

    unknown = sorted(set(cfg) - set(DEFAULTS))
    if unknown:
        raise ValueError(f"Unknown config keys: {unknown}. Choose from: {list(DEFAULTS.keys())}")

    # Fill defaults for missing keys
    for key, default_val in DEFAULTS.items():
        if key not in cfg:
            cfg[key] = default_val
            logger.debug("Config key '%s' not found, using default: %r", key, default_val)

    validate_config(cfg)
    return cfg


def validate_config(cfg: dict) -> None:
    """Validate configuration values."""
    indent = cfg["indent_unit"]
    if not isinstance(indent, str) or not indent or indent.strip(" \t"):
        raise ValueError(f"'indent_unit' must be non-empty spaces or tabs, got {indent!r}")

    if cfg["line_end"] not in VALID_LINE_ENDS:
        raise ValueError(f"'line_end' must be one of {VALID_LINE_ENDS}, got {cfg['line_end']!r}")

    ext = cfg["file_extension"]
    if not isinstance(ext, str) or not ext.startswith(".") or len(ext) < 2:
        raise ValueError(f"'file_extension' must start with '.', got {ext!r}")

    # Values written into the document as ids or names
    for key in ["author", "authoring_tool", "unit_name", "texture_file_infix",
                "default_skeleton_root", "material_symbol"]:
        if not isinstance(cfg[key], str) or not cfg[key]:
            raise ValueError(f"'{key}' must be a non-empty string, got {cfg[key]!r}")

    if not isinstance(cfg["write_empty_libraries"], bool):
        raise ValueError(
            f"'write_empty_libraries' must be a boolean, got {cfg['write_empty_libraries']!r}"
        )
