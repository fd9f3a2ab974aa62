"""
Expression parser.

This module splits a dot-path expression such as ``"not.deep.include"``
or ``"has.any.keys({0})"`` into StepDef segments. Every malformed form is
rejected here, before the expression is ever evaluated.
"""

from __future__ import annotations

import re
from typing import Sequence

from ..errors import InvalidExpressionError
from .models import ArgKind, StepArg, StepDef

Expression = str | Sequence[str]


class ExpressionParser:
    """Parses an expression string or segment list into StepDefs."""

    # name or name(args); the group is the trailing part of the segment
    SEGMENT_PATTERN = re.compile(r"^([A-Za-z_$][A-Za-z0-9_$]*)(?:\(([^()]*)\))?$")
    IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
    INDEX_PATTERN = re.compile(r"^\d+$")

    def __init__(self, expression: Expression):
        self.expression = expression

    @property
    def text(self) -> str:
        if isinstance(self.expression, str):
            return self.expression
        return ".".join(str(part) for part in self.expression)

    def parse(self) -> tuple[StepDef, ...]:
        """Convert the expression to StepDefs, raising InvalidExpressionError."""
        segments = self._split()
        if not segments:
            self._invalid()
        return tuple(self._parse_segment(segment) for segment in segments)

    def _invalid(self):
        __tracebackhide__ = True
        raise InvalidExpressionError(self.expression)

    def _split(self) -> list[str]:
        if not isinstance(self.expression, str):
            parts = list(self.expression)
            if not all(isinstance(part, str) for part in parts):
                self._invalid()
            return parts

        parts: list[str] = []
        current: list[str] = []
        depth = 0
        for char in self.expression:
            if char == "(":
                depth += 1
                if depth > 1:
                    self._invalid()
            elif char == ")":
                depth -= 1
                if depth < 0:
                    self._invalid()
            elif char == "." and depth == 0:
                parts.append("".join(current))
                current = []
                continue
            current.append(char)

        if depth != 0:
            self._invalid()

        parts.append("".join(current))
        return parts if self.expression else []

    def _parse_segment(self, segment: str) -> StepDef:
        match = self.SEGMENT_PATTERN.match(segment)
        if not match:
            self._invalid()

        name, group = match.group(1), match.group(2)
        if group is None:
            return StepDef(name)
        if group == "":
            return StepDef(name, ())

        return StepDef(name, tuple(self._parse_arg(arg) for arg in group.split(",")))

    def _parse_arg(self, arg: str) -> StepArg:
        if arg.startswith("{") and arg.endswith("}") and len(arg) >= 2:
            value = arg[1:-1]
            if "{" in value or "}" in value:
                self._invalid()
            if self.INDEX_PATTERN.match(value):
                return StepArg(ArgKind.INDEX, int(value))
            return StepArg(ArgKind.LITERAL, value)

        # Bare words name a context value; spaces are only allowed in {literals}
        if not self.IDENTIFIER_PATTERN.match(arg):
            self._invalid()
        return StepArg(ArgKind.NAMED, arg)


def parse_expression(expression: Expression) -> tuple[StepDef, ...]:
    """
    Parse an expression into StepDefs.

    Args:
        expression: Dot-path string or ordered list of segment strings

    Returns:
        The parsed segments, in order

    Raises:
        InvalidExpressionError: If the expression is malformed
    """
    return ExpressionParser(expression).parse()
