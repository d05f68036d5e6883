#  Copyright (c) 2025 Tom Villani, Ph.D.

"""Configuration file discovery and loading for the pagereflow CLI.

A configuration file holds up to two sections, ``extract`` and ``reflow``,
whose keys are the fields of :class:`~pagereflow.options.ExtractOptions` and
:class:`~pagereflow.options.ReflowOptions`::

    # .pagereflow.toml
    [extract]
    include_first_marker = false

    [reflow]
    font_size = 10
    margin_left = 54

The same sections may live under ``[tool.pagereflow]`` in pyproject.toml.
"""

import argparse
import json
import sys
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found,unused-ignore]
from typing import Any, Dict, Optional, Tuple

import yaml

from pagereflow.exceptions import ValidationError
from pagereflow.options import ExtractOptions, ReflowOptions

DEDICATED_CONFIG_FILENAMES = [".pagereflow.toml", ".pagereflow.yaml", ".pagereflow.yml", ".pagereflow.json"]
CONFIG_SECTIONS = ("extract", "reflow")


def _load_pyproject_section(pyproject_path: Path) -> Dict[str, Any]:
    """Return the ``[tool.pagereflow]`` table of a pyproject.toml, or an empty dict.

    Raises
    ------
    argparse.ArgumentTypeError
        If pyproject.toml cannot be parsed or the section is not a table

    """
    try:
        with open(pyproject_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise argparse.ArgumentTypeError(f"Invalid TOML in pyproject.toml {pyproject_path}: {e}") from e
    except OSError as e:
        raise argparse.ArgumentTypeError(f"Error reading pyproject.toml {pyproject_path}: {e}") from e

    config = data.get("tool", {}).get("pagereflow", {})
    if not isinstance(config, dict):
        raise argparse.ArgumentTypeError(
            f"[tool.pagereflow] section in {pyproject_path} must be a table, got {type(config).__name__}"
        )
    return config


def find_config_in_parents(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Find the nearest configuration file from ``start_dir`` up to the filesystem root.

    In each directory the dedicated files are checked first, then a
    pyproject.toml that has a ``[tool.pagereflow]`` section.

    Parameters
    ----------
    start_dir : Path, optional
        Starting directory, defaults to the current working directory

    Returns
    -------
    Path or None
        The first configuration file found

    """
    current = (start_dir or Path.cwd()).resolve()

    while True:
        for filename in DEDICATED_CONFIG_FILENAMES:
            config_path = current / filename
            if config_path.is_file():
                return config_path

        pyproject_path = current / "pyproject.toml"
        if pyproject_path.is_file():
            try:
                if _load_pyproject_section(pyproject_path):
                    return pyproject_path
            except argparse.ArgumentTypeError:
                # A broken pyproject.toml is not ours to report
                pass

        parent = current.parent
        if parent == current:
            return None
        current = parent


def discover_config_file(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Discover a configuration file in the parent directories, then in the home directory."""
    found = find_config_in_parents(start_dir)
    if found:
        return found

    home = Path.home()
    for filename in DEDICATED_CONFIG_FILENAMES:
        config_path = home / filename
        if config_path.is_file():
            return config_path
    return None


def _load_toml_config(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise argparse.ArgumentTypeError(f"Invalid TOML in config file {config_path}: {e}") from e


def _load_json_config(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = json.load(f)
    except json.JSONDecodeError as e:
        raise argparse.ArgumentTypeError(f"Invalid JSON in config file {config_path}: {e}") from e

    if not isinstance(config, dict):
        raise argparse.ArgumentTypeError(f"JSON config file must contain an object, got {type(config).__name__}")
    return config


def _load_yaml_config(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise argparse.ArgumentTypeError(f"Invalid YAML in config file {config_path}: {e}") from e

    # An empty YAML file loads as None
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise argparse.ArgumentTypeError(f"YAML config file must contain a mapping, got {type(config).__name__}")
    return config


def load_config_file(config_path: Path | str) -> Dict[str, Any]:
    """Load a configuration file, choosing the parser from its name.

    ``pyproject.toml`` yields its ``[tool.pagereflow]`` table; other files are
    read as TOML, YAML or JSON by extension.

    Raises
    ------
    argparse.ArgumentTypeError
        If the file does not exist or cannot be parsed

    Examples
    --------
    >>> config = load_config_file(".pagereflow.toml")
    >>> config["reflow"]["font_size"]
    10

    """
    config_path = Path(config_path)
    if not config_path.is_file():
        raise argparse.ArgumentTypeError(f"Configuration file does not exist: {config_path}")

    ext = config_path.suffix.lower()
    try:
        if config_path.name.lower() == "pyproject.toml":
            return _load_pyproject_section(config_path)
        if ext == ".toml":
            return _load_toml_config(config_path)
        if ext in (".yaml", ".yml"):
            return _load_yaml_config(config_path)
        if ext == ".json":
            return _load_json_config(config_path)
    except argparse.ArgumentTypeError:
        raise
    except OSError as e:
        raise argparse.ArgumentTypeError(f"Error reading config file {config_path}: {e}") from e

    raise argparse.ArgumentTypeError(f"Unsupported config file format: {ext}. Use .toml, .yaml or .json")


def load_config_with_priority(
    explicit_path: Optional[str] = None, env_var_path: Optional[str] = None
) -> Dict[str, Any]:
    """Load configuration with proper priority handling.

    Priority order (highest to lowest):
    1. Explicit config file path (--config flag)
    2. Environment variable config path (PAGEREFLOW_CONFIG)
    3. Auto-discovered config file

    Returns
    -------
    dict
        Loaded configuration (empty if no file was found)

    """
    if explicit_path:
        return load_config_file(explicit_path)
    if env_var_path:
        return load_config_file(env_var_path)

    discovered = discover_config_file()
    if discovered:
        return load_config_file(discovered)
    return {}


def build_options(config: Dict[str, Any]) -> Tuple[ExtractOptions, ReflowOptions]:
    """Turn a loaded configuration into option objects.

    Raises
    ------
    ValidationError
        If the configuration has an unknown section or setting, or a
        setting has an invalid value

    """
    unknown = sorted(set(config) - set(CONFIG_SECTIONS))
    if unknown:
        raise ValidationError(
            f"Unknown configuration section(s): {', '.join(unknown)}; expected {', '.join(CONFIG_SECTIONS)}",
            parameter_name="config",
            parameter_value=unknown,
        )

    sections = {}
    for name in CONFIG_SECTIONS:
        section = config.get(name, {})
        if not isinstance(section, dict):
            raise ValidationError(
                f"Configuration section '{name}' must be a table, got {type(section).__name__}",
                parameter_name=name,
                parameter_value=section,
            )
        sections[name] = section

    return ExtractOptions.from_mapping(sections["extract"]), ReflowOptions.from_mapping(sections["reflow"])
