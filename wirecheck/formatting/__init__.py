"""
Value formatting

Renders values for failure messages and ``{token}`` substitution.

Usage:
    from wirecheck.config import assert_config
    from wirecheck.formatting import Formatter, format_value

    format_value({"a": [1, 2, 3]})

    # Custom rendering for a type, tried before the generic fallback
    handle = assert_config.add_formatter(
        Formatter("money", lambda v: f"${v.amount:.2f}" if isinstance(v, Money) else None)
    )
    handle.rm()
"""

from ..config.models import Formatter
from .formatter import format_value

__all__ = [
    "Formatter",
    "format_value",
]
