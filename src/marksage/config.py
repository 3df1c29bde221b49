#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/marksage/config.py
"""Configuration file discovery and loading.

Settings are layered, lowest priority first:

1. Defaults of :class:`~marksage.options.MarksageOptions`
2. The first configuration file found walking up from the vault (or the
   working directory): ``.marksage.toml``, ``.marksage.yaml``,
   ``.marksage.yml``, ``.marksage.json`` or a ``[tool.marksage]`` table in
   ``pyproject.toml``
3. ``MARKSAGE_*`` environment variables, e.g. ``MARKSAGE_DRY_RUN=1``
4. Command line flags

Keys may be written with dashes or underscores (``ntfy-url`` or
``ntfy_url``).
"""

from __future__ import annotations

import json
import logging
import os
import sys
from dataclasses import MISSING, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found,unused-ignore]

import yaml

from marksage.constants import CONFIG_FILENAMES, ENV_PREFIX
from marksage.exceptions import ValidationError
from marksage.options import MarksageOptions

logger = logging.getLogger(__name__)

_TRUE_VALUES = ("true", "1", "yes", "on")
_FALSE_VALUES = ("false", "0", "no", "off", "")


def _load_pyproject_section(pyproject_path: Path) -> Dict[str, Any]:
    """Return the ``[tool.marksage]`` table of a pyproject.toml, or an empty dict."""
    with open(pyproject_path, "rb") as f:
        data = tomllib.load(f)

    config = data.get("tool", {}).get("marksage", {})
    if not isinstance(config, dict):
        raise ValidationError(
            f"[tool.marksage] in {pyproject_path} must be a table, got {type(config).__name__}",
            parameter_name="tool.marksage",
        )
    return config


def find_config_in_parents(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Find the nearest configuration file at or above a directory.

    Parameters
    ----------
    start_dir : Path, optional
        Directory to start from, defaults to the current working directory

    Returns
    -------
    Path or None
        First configuration file found, or None

    """
    current = (start_dir or Path.cwd()).resolve()

    while True:
        for filename in CONFIG_FILENAMES:
            candidate = current / filename
            if candidate.is_file():
                return candidate

        pyproject = current / "pyproject.toml"
        if pyproject.is_file():
            try:
                if _load_pyproject_section(pyproject):
                    return pyproject
            except (OSError, tomllib.TOMLDecodeError, ValidationError) as e:
                logger.debug("Ignoring unreadable %s: %s", pyproject, e)

        if current.parent == current:
            return None
        current = current.parent


def load_config_file(config_path: Path | str) -> Dict[str, Any]:
    """Load settings from a TOML, YAML, JSON or pyproject.toml file.

    Parameters
    ----------
    config_path : Path or str
        Configuration file; the format is chosen by its name and extension

    Returns
    -------
    dict
        Settings with keys normalized to option field names

    Raises
    ------
    ValidationError
        If the file cannot be read or parsed, or does not hold a mapping

    """
    config_path = Path(config_path)
    ext = config_path.suffix.lower()

    try:
        if config_path.name.lower() == "pyproject.toml":
            config: Any = _load_pyproject_section(config_path)
        elif ext == ".toml":
            with open(config_path, "rb") as f:
                config = tomllib.load(f)
        elif ext in (".yaml", ".yml"):
            with open(config_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f) or {}
        elif ext == ".json":
            with open(config_path, "r", encoding="utf-8") as f:
                config = json.load(f)
        else:
            raise ValidationError(
                f"Unsupported config file format: {ext}. Use .toml, .yaml or .json",
                parameter_name="config",
                parameter_value=str(config_path),
            )
    except ValidationError:
        raise
    except (OSError, tomllib.TOMLDecodeError, yaml.YAMLError, json.JSONDecodeError) as e:
        raise ValidationError(
            f"Error reading config file {config_path}: {e}",
            parameter_name="config",
            parameter_value=str(config_path),
            original_error=e,
        ) from e

    if not isinstance(config, dict):
        raise ValidationError(
            f"Config file {config_path} must contain a mapping, got {type(config).__name__}",
            parameter_name="config",
            parameter_value=str(config_path),
        )

    return {str(key).replace("-", "_"): value for key, value in config.items()}


def _coerce(name: str, raw: str) -> Any:
    """Convert an environment string to the type of the option's default."""
    option = next(f for f in fields(MarksageOptions) if f.name == name)
    default = option.default if option.default is not MISSING else None

    if isinstance(default, bool):
        lowered = raw.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise ValueError(f"expected a boolean, got {raw!r}")
    if isinstance(default, float):
        return float(raw)
    if name == "jobs":
        return int(raw)
    return raw


def options_from_env(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Collect ``MARKSAGE_*`` environment variables that name an option.

    Parameters
    ----------
    environ : Mapping[str, str], optional
        Environment to read, defaults to ``os.environ``

    Returns
    -------
    dict
        Typed option values keyed by field name

    Raises
    ------
    ValidationError
        If a value cannot be converted to the option's type

    """
    environ = os.environ if environ is None else environ
    values: Dict[str, Any] = {}
    for name in MarksageOptions.field_names():
        env_key = f"{ENV_PREFIX}{name.upper()}"
        if env_key not in environ:
            continue
        try:
            values[name] = _coerce(name, environ[env_key])
        except ValueError as e:
            raise ValidationError(
                f"Invalid environment variable {env_key}={environ[env_key]!r}: {e}",
                parameter_name=name,
                parameter_value=environ[env_key],
                original_error=e,
            ) from e
    return values


def load_options(
    cli_values: Optional[Mapping[str, Any]] = None,
    config_path: Optional[Path | str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> MarksageOptions:
    """Build options from config file, environment and command line values.

    Parameters
    ----------
    cli_values : Mapping[str, Any], optional
        Values given on the command line; None entries count as unset
    config_path : Path or str, optional
        Explicit configuration file, skipping discovery
    environ : Mapping[str, str], optional
        Environment to read, defaults to ``os.environ``

    Returns
    -------
    MarksageOptions
        Merged options

    Raises
    ------
    ValidationError
        If any layer holds an unknown key or an invalid value

    """
    cli = {key: value for key, value in (cli_values or {}).items() if value is not None}
    env = options_from_env(environ)

    if config_path is None:
        vault = cli.get("vault_path") or env.get("vault_path")
        start = Path(vault) if vault and Path(vault).is_dir() else None
        config_path = find_config_in_parents(start)

    file_values: Dict[str, Any] = {}
    if config_path is not None:
        logger.debug("Loading configuration from %s", config_path)
        file_values = load_config_file(config_path)

    merged = {**file_values, **env, **cli}
    return MarksageOptions().create_updated(**merged)
