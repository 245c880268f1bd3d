"""Locate, read and validate the YAML configuration file."""

from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from .exceptions import ConfigurationError
from .models import AppConfig
from .validators import check_for_warnings, emit_warnings

DEFAULT_CONFIG_CANDIDATES = (
    Path("config.yaml"),
    Path("config") / "config.yaml",
)

_SCALAR_TYPES = {
    "string_type": "a string",
    "int_type": "an integer",
    "int_parsing": "an integer",
    "float_type": "a number",
    "float_parsing": "a number",
    "bool_type": "a boolean",
    "bool_parsing": "a boolean",
    "list_type": "a list",
    "dict_type": "a mapping",
}


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """
    Read the configuration file and return a validated AppConfig.

    When config_path is None, ``config.yaml`` and then ``config/config.yaml``
    are tried relative to the working directory.

    Raises:
        ConfigurationError: If no file is found, it cannot be read or parsed,
            or its contents fail validation
    """
    path = _find_config_file(config_path)

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Could not parse {path} as YAML",
            errors=[str(e)],
            suggestions=["Indent with spaces only and check for unbalanced quotes"],
        ) from e
    except OSError as e:
        raise ConfigurationError(f"Could not read {path}: {e}") from e

    if raw is None:
        raise ConfigurationError(
            f"{path} is empty",
            suggestions=["Start from config.example.yaml"],
        )

    return parse_config(raw, base_dir=path.parent)


def parse_config(config_dict: dict, base_dir: Optional[Path] = None) -> AppConfig:
    """
    Validate an already-loaded configuration mapping.

    Relative vocabulary_path values are resolved against base_dir.
    """
    if not isinstance(config_dict, dict):
        raise ConfigurationError(
            f"Expected a mapping at the top level, got {type(config_dict).__name__}"
        )

    warnings = check_for_warnings(config_dict)
    if warnings:
        emit_warnings(warnings)

    try:
        app_config = AppConfig.model_validate(config_dict)
    except ValidationError as e:
        raise ConfigurationError(
            "Configuration is invalid",
            errors=[_describe(error) for error in e.errors()],
            suggestions=["Compare against config.example.yaml"],
        ) from e

    vocabulary_path = app_config.vocabulary_path
    if vocabulary_path and base_dir and not vocabulary_path.is_absolute():
        app_config = app_config.model_copy(update={"vocabulary_path": base_dir / vocabulary_path})

    return app_config


def _describe(error: dict) -> str:
    location = ".".join(str(part) for part in error["loc"]) or "<root>"
    kind = error["type"]
    if kind == "missing":
        return f"{location}: required field is missing"
    if kind in _SCALAR_TYPES:
        return f"{location}: expected {_SCALAR_TYPES[kind]}, got {error.get('input')!r}"
    return f"{location}: {error['msg']}"


def _find_config_file(config_path: Optional[Path] = None) -> Path:
    if config_path is not None:
        if not config_path.is_file():
            raise ConfigurationError(f"Configuration file not found: {config_path}")
        return config_path

    found = next((c for c in DEFAULT_CONFIG_CANDIDATES if c.is_file()), None)
    if found is None:
        raise ConfigurationError(
            "Configuration file not found",
            errors=[f"looked for {c}" for c in DEFAULT_CONFIG_CANDIDATES],
            suggestions=["Pass --config or set JOBHONTER_CONFIG"],
        )
    return found
