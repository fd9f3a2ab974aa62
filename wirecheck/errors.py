"""
Structured failure types.

This module defines the throwable types raised by the assertion engine:
assertion failures (expectation not met), fatal evaluation errors
(malformed input to an assertion), and expression compilation errors.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Iterable


class FailureKind(str, Enum):
    """Kind of a raised assertion failure."""
    FAILURE = "failure"
    FATAL = "fatal"  # e.g., bad operator string, depth exceeded


# Keys rendered on their own line ahead of the remaining details
_LEADING_KEYS = ("op_path", "actual", "expected")


class AssertionFailure(AssertionError):
    """
    Raised when an expectation is not met.

    Attributes:
        message: The fully resolved failure message
        details: Snapshot of the tracked context values at the time of failure
        stack_markers: Callables marking where user-relevant frames begin,
            or None when full-stack mode is enabled
        caused_by: The exception that triggered this failure, if any
        show_diff: Whether the rendered failure lists the actual and
            expected values
    """

    kind: FailureKind = FailureKind.FAILURE

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        stack_markers: Iterable[Callable] | None = None,
        caused_by: BaseException | None = None,
        show_diff: bool = True,
    ):
        super().__init__(message)
        self.message = message
        self.details = dict(details) if details else {}
        self.stack_markers = tuple(stack_markers) if stack_markers is not None else None
        self.caused_by = caused_by
        self.show_diff = show_diff
        if caused_by is not None:
            self.__cause__ = caused_by

    @property
    def is_fatal(self) -> bool:
        return self.kind == FailureKind.FATAL

    @property
    def marker_names(self) -> list[str]:
        """Names of the stack markers, in trimming order."""
        if not self.stack_markers:
            return []
        return [_callable_name(fn) for fn in self.stack_markers]

    def __str__(self) -> str:
        """Format as a human-readable string."""
        from .formatting import format_value

        lines = [self.message]

        op_path = self.details.get("op_path")
        if op_path:
            if isinstance(op_path, (list, tuple)):
                op_path = "->".join(str(op) for op in op_path)
            lines.append(f"   Running: {op_path}")

        if self.show_diff and "actual" in self.details:
            lines.append(f"   Actual:   {format_value(self.details['actual'])}")

        if self.show_diff and "expected" in self.details:
            lines.append(f"   Expected: {format_value(self.details['expected'])}")

        for key, value in self.details.items():
            if key in _LEADING_KEYS or key == "operation" or key.startswith("$"):
                continue
            lines.append(f"   {key}: {format_value(value)}")

        if self.caused_by is not None:
            lines.append(f"   Caused by: {type(self.caused_by).__name__}: {self.caused_by}")

        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dict."""
        from .formatting import format_value

        return {
            "kind": self.kind.value,
            "message": self.message,
            "details": {key: format_value(value) for key, value in self.details.items()},
            "stack_markers": self.marker_names if self.stack_markers is not None else None,
            "caused_by": repr(self.caused_by) if self.caused_by is not None else None,
        }


class AssertionFatal(AssertionFailure):
    """Raised when an assertion cannot be evaluated at all."""

    kind = FailureKind.FATAL


class ExpressionError(ValueError):
    """Base class for expression compilation and resolution errors."""

    def __init__(self, message: str, expression: str | None = None):
        super().__init__(message)
        self.expression = expression


class InvalidExpressionError(ExpressionError):
    """The expression text is malformed."""

    def __init__(self, expression: str | list[str] | tuple[str, ...]):
        if not isinstance(expression, str):
            expression = ".".join(str(part) for part in expression)
        super().__init__(f"Invalid expression: {expression}", expression)


class InvalidStepError(ExpressionError):
    """A step name cannot be resolved, or is not valid in its position."""

    def __init__(self, step: str, expression: str | None = None, reason: str | None = None):
        message = f"Invalid step: {step}"
        if expression:
            message += f" in {expression!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message, expression)
        self.step = step


def _callable_name(fn: Any) -> str:
    return getattr(fn, "__qualname__", None) or getattr(fn, "__name__", None) or repr(fn)
