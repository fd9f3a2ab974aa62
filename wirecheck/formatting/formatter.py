"""
Value formatting for failure messages.

Values are rendered by the registered per-type formatters first and by a
bounded ``rich`` pretty representation otherwise. Formatting never raises.
"""

from __future__ import annotations

import logging
from typing import Any

from rich.pretty import pretty_repr

from ..config.models import FormatOptions, Formatter
from ..config.store import default_format_options

logger = logging.getLogger(__name__)

# Wide enough that pretty_repr keeps values on a single line
_SINGLE_LINE_WIDTH = 1_000_000


def format_value(value: Any, options: FormatOptions | None = None) -> str:
    """
    Format a value for display, truncating if too long.

    Args:
        value: Any value
        options: Format options (defaults to the process-wide options)

    Returns:
        The rendered text
    """
    options = options or default_format_options()

    for formatter in options.formatters:
        text = _apply_formatter(formatter, value)
        if text is not None:
            return _truncate(text, options.max_length)

    return _truncate(_generic_format(value, options), options.max_length)


def _apply_formatter(formatter: Formatter, value: Any) -> str | None:
    try:
        text = formatter.fn(value)
    except Exception as e:
        logger.debug(f"Formatter {formatter.name} failed for {type(value).__name__}: {e}")
        return None

    return text if isinstance(text, str) else None


def _generic_format(value: Any, options: FormatOptions) -> str:
    try:
        return pretty_repr(
            value,
            max_width=_SINGLE_LINE_WIDTH,
            max_length=options.max_props,
            max_string=options.max_string,
            max_depth=options.max_format_depth,
        )
    except Exception as e:
        logger.debug(f"Pretty repr failed for {type(value).__name__}: {e}")

    try:
        return repr(value)
    except Exception:
        return f"<{type(value).__name__} object>"


def _truncate(text: str, max_length: int) -> str:
    if max_length and len(text) > max_length:
        return text[: max_length - 3] + "..."
    return text
