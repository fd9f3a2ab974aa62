"""
Typed configuration structures.

This module contains the dataclasses describing the engine configuration
and the defaults every fresh configuration starts from.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Callable


# ─────────────────────────────────────────────────────────────────────────────
# Formatting
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Formatter:
    """
    A pluggable per-type value formatter.

    The function returns the rendered text, or None to let the next
    formatter (and finally the generic fallback) handle the value.
    """
    name: str
    fn: Callable[[Any], str | None]


@dataclass
class FormatOptions:
    """Options controlling how values are rendered in failure messages."""
    max_props: int = 8  # Items shown per container
    max_format_depth: int = 50
    max_string: int = 80
    max_length: int = 200
    formatters: list[Formatter] = field(default_factory=list)


# ─────────────────────────────────────────────────────────────────────────────
# Engine configuration
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class AssertConfig:
    """Configuration snapshot used by a single evaluation."""
    is_verbose: bool = False
    full_stack: bool = False
    def_assert_msg: str = "assertion failure"
    def_fatal_msg: str = "fatal assertion failure"
    show_diff: bool = True
    max_compare_depth: int = 100
    max_compare_check_depth: int = 50
    format: FormatOptions = field(default_factory=FormatOptions)


CONFIG_FIELDS = tuple(f.name for f in fields(AssertConfig))
FORMAT_FIELDS = tuple(f.name for f in fields(FormatOptions))


def copy_config(config: AssertConfig) -> AssertConfig:
    """Copy a config so the copy shares no mutable state with the source."""
    fmt = config.format
    return AssertConfig(
        is_verbose=config.is_verbose,
        full_stack=config.full_stack,
        def_assert_msg=config.def_assert_msg,
        def_fatal_msg=config.def_fatal_msg,
        show_diff=config.show_diff,
        max_compare_depth=config.max_compare_depth,
        max_compare_check_depth=config.max_compare_check_depth,
        format=FormatOptions(
            max_props=fmt.max_props,
            max_format_depth=fmt.max_format_depth,
            max_string=fmt.max_string,
            max_length=fmt.max_length,
            formatters=list(fmt.formatters),
        ),
    )


def merge_config(target: AssertConfig, overrides: AssertConfig | dict[str, Any]) -> AssertConfig:
    """
    Merge overrides into target in place.

    A dict only replaces the keys it names; the nested ``format`` entry is
    merged key by key. An AssertConfig replaces every value.

    Raises:
        KeyError: If the dict names an unknown setting
    """
    if isinstance(overrides, AssertConfig):
        merged = copy_config(overrides)
        for name in CONFIG_FIELDS:
            setattr(target, name, getattr(merged, name))
        return target

    for key, value in overrides.items():
        if key not in CONFIG_FIELDS:
            raise KeyError(f"Unknown configuration setting '{key}'")
        if key == "format":
            _merge_format(target.format, value)
        else:
            setattr(target, key, value)

    return target


def _merge_format(target: FormatOptions, overrides: FormatOptions | dict[str, Any] | None) -> None:
    if overrides is None:
        return
    if isinstance(overrides, FormatOptions):
        overrides = {name: getattr(overrides, name) for name in FORMAT_FIELDS}

    for key, value in overrides.items():
        if key not in FORMAT_FIELDS:
            raise KeyError(f"Unknown format setting '{key}'")
        if key == "formatters":
            value = list(value)
        setattr(target, key, value)
