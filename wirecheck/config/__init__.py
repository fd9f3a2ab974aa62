"""
Configuration for the assertion engine

This package holds the process-wide default configuration, the typed
configuration snapshot handed to every root context, and YAML loading.

Usage:
    from wirecheck.config import assert_config, load_config

    # Adjust the process-wide defaults
    assert_config.max_compare_depth = 20
    assert_config.reset()

    # Snapshot with per-evaluation overrides
    opts = assert_config.clone({"is_verbose": True})

    # Load from file
    config, result = load_config("wirecheck.yaml")
    if not result.is_valid:
        print(result)
"""

# Public API
from .loader import apply_config_file, load_config, validate_config_yaml

# Models
from .models import AssertConfig, FormatOptions, Formatter

# Store
from .store import ConfigStore, Removable, assert_config

# Validation
from .validation import ConfigValidator, ValidationError, ValidationResult

__all__ = [
    # Loader functions
    "load_config",
    "validate_config_yaml",
    "apply_config_file",
    # Models
    "AssertConfig",
    "FormatOptions",
    "Formatter",
    # Store
    "ConfigStore",
    "Removable",
    "assert_config",
    # Validation
    "ConfigValidator",
    "ValidationError",
    "ValidationResult",
]
