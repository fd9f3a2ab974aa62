"""
Message templates.

A template is plain text with ``{token}`` placeholders. ``{{`` is an
escaped literal ``{``. Tokens that cannot be resolved, and a ``{`` with no
closing brace, are kept verbatim.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Callable, Union


@dataclass(frozen=True)
class Literal:
    """Text copied to the output unchanged."""
    text: str


@dataclass(frozen=True)
class Lookup:
    """A ``{token}`` placeholder."""
    token: str

    @property
    def raw(self) -> str:
        return "{" + self.token + "}"


Segment = Union[Literal, Lookup]

# Resolver returns (found, value) for a token
Resolver = Callable[[str], "tuple[bool, Any]"]


@lru_cache(maxsize=512)
def parse_template(text: str) -> tuple[Segment, ...]:
    """
    Split a template into literal and lookup segments.

    The result is cached, so a message reused across many failures is
    only scanned once.
    """
    segments: list[Segment] = []
    buffer: list[str] = []
    pos = 0

    while pos < len(text):
        open_pos = text.find("{", pos)
        if open_pos == -1:
            buffer.append(text[pos:])
            break

        buffer.append(text[pos:open_pos])

        if text.startswith("{{", open_pos):
            buffer.append("{")
            pos = open_pos + 2
            continue

        close_pos = text.find("}", open_pos)
        if close_pos == -1:
            buffer.append(text[open_pos:])
            break

        if buffer:
            segments.append(Literal("".join(buffer)))
            buffer = []
        segments.append(Lookup(text[open_pos + 1:close_pos]))
        pos = close_pos + 1

    if buffer and "".join(buffer):
        segments.append(Literal("".join(buffer)))

    return tuple(seg for seg in segments if not (isinstance(seg, Literal) and not seg.text))


def render_template(
    text: str,
    resolve: Resolver,
    format_fn: Callable[[Any], str] = str,
) -> str:
    """
    Substitute every resolvable token in a template.

    Args:
        text: The template text
        resolve: Called with each token name; returns (found, value)
        format_fn: Renders a resolved value as text

    Returns:
        The rendered message
    """
    if "{" not in text:
        return text

    parts = []
    for segment in parse_template(text):
        if isinstance(segment, Literal):
            parts.append(segment.text)
            continue

        found, value = resolve(segment.token)
        parts.append(format_fn(value) if found else segment.raw)

    return "".join(parts)
