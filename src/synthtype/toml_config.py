"""TOML-based configuration for synthtype.

Usage:
    from synthtype.toml_config import load_toml_config, find_config_file

    config_path = find_config_file(Path.cwd())
    if config_path:
        config = load_toml_config(config_path)

Example synthtype.toml:
    [synthtype]
    generated_module = "tests.generated"
    seed_defaults = true

    [logging]
    level = "DEBUG"
    format = "json"

In pyproject.toml the same keys live under [tool.synthtype] and
[tool.synthtype.logging].
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from synthtype.config import SynthConfig, get_config, set_config
from synthtype.logging import LogFormat

# Config file names to search for (in order of preference)
CONFIG_FILE_NAMES = ["synthtype.toml", ".synthtyperc.toml", "pyproject.toml"]


def find_config_file(
    start_dir: Path,
    config_names: list[str] | None = None,
) -> Path | None:
    """Find a config file by searching up the directory hierarchy.

    Args:
        start_dir: Directory to start searching from
        config_names: Config file names to search for (default: CONFIG_FILE_NAMES)

    Returns:
        Path to the config file, or None if not found
    """
    config_names = config_names or CONFIG_FILE_NAMES
    current = start_dir.resolve()

    while True:
        for name in config_names:
            config_path = current / name
            if config_path.exists():
                if name == "pyproject.toml":
                    if _has_synthtype_section(config_path):
                        return config_path
                else:
                    return config_path

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def _has_synthtype_section(pyproject_path: Path) -> bool:
    """Check if pyproject.toml has a [tool.synthtype] section."""
    try:
        with open(pyproject_path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError):
        return False
    return "synthtype" in data.get("tool", {})


def load_toml_config(path: Path) -> SynthConfig:
    """Load a SynthConfig from a TOML file.

    Supports synthtype.toml (full file) and pyproject.toml (under
    [tool.synthtype]).

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If pyproject.toml has no [tool.synthtype] section, or a
            value has the wrong type
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "rb") as f:
        data = tomllib.load(f)

    if path.name == "pyproject.toml":
        if "synthtype" not in data.get("tool", {}):
            raise ValueError(f"No [tool.synthtype] section in {path}")
        section = dict(data["tool"]["synthtype"])
        logging_section = section.pop("logging", {})
    else:
        section = data.get("synthtype", {})
        logging_section = data.get("logging", {})

    config = _build_config_from_dict(section, logging_section)
    config.source = path
    return config


def _build_config_from_dict(data: dict[str, Any], logging_data: dict[str, Any]) -> SynthConfig:
    config = SynthConfig()

    if "generated_module" in data:
        config.generated_module = _expect(data, "generated_module", str)
    if "seed_defaults" in data:
        config.seed_defaults = _expect(data, "seed_defaults", bool)

    if "level" in logging_data:
        config.log_level = _expect(logging_data, "level", str).upper()
    if "format" in logging_data:
        fmt = _expect(logging_data, "format", str)
        try:
            config.log_format = LogFormat(fmt.lower())
        except ValueError:
            raise ValueError(f"Unknown log format: {fmt}") from None

    return config


def _expect(data: dict[str, Any], key: str, kind: type) -> Any:
    value = data[key]
    if not isinstance(value, kind):
        raise ValueError(f"'{key}' must be a {kind.__name__}, got {type(value).__name__}")
    return value


def configure(path: Path | None = None, start_dir: Path | None = None) -> SynthConfig:
    """Load, install and apply configuration.

    With no path, searches upward from ``start_dir`` (default: cwd). When no
    file is found the current configuration is kept.
    """
    if path is None:
        path = find_config_file(start_dir or Path.cwd())

    if path is None:
        config = get_config()
    else:
        config = load_toml_config(path)
        set_config(config)

    config.apply_logging()
    return config
