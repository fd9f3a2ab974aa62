"""
Configuration file loader.

This module provides the public API for loading and validating
configuration files from disk or YAML strings.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from .models import AssertConfig, merge_config
from .store import ConfigStore, assert_config
from .validation import ConfigValidator, ValidationResult

logger = logging.getLogger(__name__)


def load_config(path: str | Path) -> tuple[AssertConfig | None, ValidationResult]:
    """
    Load and validate a configuration from a YAML file.

    Settings absent from the file keep their built-in defaults.

    Args:
        path: Path to the YAML configuration file

    Returns:
        Tuple of (AssertConfig or None, ValidationResult)
        If validation fails, AssertConfig will be None.

    Example:
        config, result = load_config("wirecheck.yaml")
        if not result.is_valid:
            print(result)
    """
    data, result = _read_settings(Path(path))
    if data is None:
        return None, result

    return merge_config(AssertConfig(), data), result


def validate_config_yaml(yaml_string: str) -> tuple[AssertConfig | None, ValidationResult]:
    """
    Validate a configuration from a YAML string (useful for testing).

    Args:
        yaml_string: YAML content as a string

    Returns:
        Tuple of (AssertConfig or None, ValidationResult)
    """
    try:
        data = yaml.safe_load(yaml_string)
    except yaml.YAMLError as e:
        return None, ValidationResult.rejected("<yaml>", f"Invalid YAML syntax: {e}")

    data, result = _validate_settings("<yaml>", data)
    if data is None:
        return None, result

    return merge_config(AssertConfig(), data), result


def apply_config_file(
    path: str | Path,
    store: ConfigStore | None = None,
) -> ValidationResult:
    """
    Load a YAML configuration file and merge it into a store.

    Only the settings present in the file are changed.

    Args:
        path: Path to the YAML configuration file
        store: Store to update (defaults to the process-wide store)

    Returns:
        The ValidationResult; the store is left untouched when invalid
    """
    store = store if store is not None else assert_config
    data, result = _read_settings(Path(path))
    if data is None:
        logger.warning(f"Configuration file {path} rejected: {len(result.errors)} error(s)")
        return result

    store.update(data)
    logger.info(f"Applied configuration from {path}: {', '.join(sorted(data)) or 'no settings'}")
    return result


def _read_settings(path: Path) -> tuple[dict[str, Any] | None, ValidationResult]:
    """Read a YAML file and validate its raw settings."""
    if not path.exists():
        return None, ValidationResult.rejected(
            str(path),
            "File not found",
            suggestion="Check the file path is correct"
        )

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        return None, ValidationResult.rejected(
            str(path),
            f"Invalid YAML syntax: {e}",
            suggestion="Check YAML formatting (indentation, colons, etc.)"
        )

    return _validate_settings(str(path), data)


def _validate_settings(source: str, data: Any) -> tuple[dict[str, Any] | None, ValidationResult]:
    # An empty document is a valid, empty configuration
    if data is None:
        data = {}

    if not isinstance(data, dict):
        return None, ValidationResult.rejected(
            source,
            "Configuration must be a YAML object (not a list or scalar)",
            value=type(data).__name__
        )

    validator = ConfigValidator(data, source)
    result = validator.validate()
    if not result.is_valid:
        return None, result

    return data, result
