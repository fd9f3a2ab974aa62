"""
Expression data structures.

This module contains the dataclasses produced by parsing a dot-path
expression and by resolving its segments into executable steps.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Sequence

if TYPE_CHECKING:
    from ..scope.context import ScopeContext


class ArgKind(str, Enum):
    """Where a step argument takes its value from."""
    INDEX = "index"  # {0} -> positional call argument
    LITERAL = "literal"  # {text} -> the text itself
    NAMED = "named"  # word -> context.get("word")


@dataclass(frozen=True)
class StepArg:
    """One argument of a ``name(arg, ...)`` segment."""
    kind: ArgKind
    value: int | str

    def resolve(self, context: ScopeContext, call_args: Sequence[Any]) -> Any:
        if self.kind == ArgKind.INDEX:
            index = int(self.value)
            return call_args[index] if index < len(call_args) else None
        if self.kind == ArgKind.NAMED:
            return context.get(str(self.value))
        return self.value

    def __str__(self) -> str:
        if self.kind == ArgKind.NAMED:
            return str(self.value)
        return "{" + str(self.value) + "}"


@dataclass(frozen=True)
class StepDef:
    """
    A parsed expression segment.

    ``args`` is None when the segment has no argument group, and a
    (possibly empty) tuple when it does.
    """
    name: str
    args: tuple[StepArg, ...] | None = None

    def __str__(self) -> str:
        if self.args is None:
            return self.name
        return f"{self.name}({','.join(str(arg) for arg in self.args)})"


class StepKind(str, Enum):
    """How a resolved step takes part in an evaluation."""
    MODIFIER = "modifier"  # Sets a flag or negates, produces no outcome
    TERMINAL = "terminal"  # Built-in evaluating step
    CUSTOM = "custom"  # Looked up in the step registry when called


@dataclass(frozen=True)
class Step:
    """A resolved expression segment."""
    name: str
    kind: StepKind
    args: tuple[StepArg, ...] | None = None
    fn: Callable[..., Any] | None = None  # Terminal scope function

    @property
    def is_modifier(self) -> bool:
        return self.kind == StepKind.MODIFIER

    def __str__(self) -> str:
        return str(StepDef(self.name, self.args))
