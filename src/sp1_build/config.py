"""Build defaults from an optional sp1-build.yaml next to the program's Cargo.toml."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import yaml

from sp1_build.errors import ConfigurationError
from sp1_build.options import DEFAULT_OUTPUT_DIR, DEFAULT_TAG

CONFIG_FILE_NAME = "sp1-build.yaml"

# Keys match the CLI flags; override in sp1-build.yaml under `build:`.
DEFAULT_BUILD_CONFIG: dict[str, Any] = {
    "docker": False,
    "tag": DEFAULT_TAG,
    "features": [],
    "no_default_features": False,
    "ignore_rust_version": False,
    "locked": False,
    "binary": "",
    "elf_name": "",
    "output_directory": DEFAULT_OUTPUT_DIR,
}


def split_features(value: Any) -> list[str]:
    """Features from a list or a comma/space separated string. Order and duplicates kept."""
    if value is None:
        return []
    items = [value] if isinstance(value, str) else list(value)
    out: list[str] = []
    for item in items:
        out.extend(f for f in re.split(r"[,\s]+", str(item)) if f)
    return out


def resolve_build_config(config: dict[str, Any] | None) -> dict[str, Any]:
    """Return config dict with defaults filled. Unknown keys are ignored."""
    out = dict(DEFAULT_BUILD_CONFIG)
    if config:
        out.update({k: v for k, v in config.items() if k in out})
    out["features"] = split_features(out["features"])
    return out


def load_build_config(program_dir: Path, config_path: Path | None = None) -> dict[str, Any]:
    """Read the `build:` section of the config file. A missing default file yields the defaults."""
    path = config_path if config_path is not None else program_dir / CONFIG_FILE_NAME
    if not path.exists():
        if config_path is not None:
            raise ConfigurationError("Config file not found", context={"config": path})
        return resolve_build_config(None)
    try:
        with path.open() as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(
            "Could not read config file", context={"config": path, "error": e}
        ) from e
    if not isinstance(data, dict):
        raise ConfigurationError("Config file must be a mapping", context={"config": path})
    section = data.get("build") or {}
    if not isinstance(section, dict):
        raise ConfigurationError("`build` must be a mapping", context={"config": path})
    return resolve_build_config(section)
