"""
Modifier grammar.

Modifiers are the expression segments that change how the terminal step
evaluates without producing an outcome of their own.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..scope.context import ALL, ANY, DEEP, OWN
from ..scope.scope import AssertScope, negate

FLAGS = (DEEP, OWN, ANY, ALL)


@dataclass(frozen=True)
class Modifier:
    """
    A modifier segment.

    Attributes:
        name: Segment name
        flag: Context flag set to True, if any
        structural: Whether it changes the shape of the check (a custom
            step may not follow a structural modifier)
        negates: Installs the negating overrides
        requires: Segment that must immediately precede this one
    """
    name: str
    flag: str | None = None
    structural: bool = False
    negates: bool = False
    requires: str | None = None

    def apply(self, scope: AssertScope) -> None:
        if self.negates:
            negate(scope)
        elif self.flag:
            scope.context.set(self.flag, True)


MODIFIERS: dict[str, Modifier] = {
    "not": Modifier("not", negates=True),
    "deep": Modifier("deep", flag=DEEP, structural=True),
    "own": Modifier("own", flag=OWN, structural=True),
    "has": Modifier("has", structural=True),
    "any": Modifier("any", flag=ANY, structural=True, requires="has"),
    "all": Modifier("all", flag=ALL, structural=True, requires="has"),
    # Fillers for readability
    "to": Modifier("to"),
    "be": Modifier("be"),
    "a": Modifier("a"),
    "an": Modifier("an"),
    "is": Modifier("is"),
    "exist": Modifier("exist"),
}

# Final segment that checks the subject when no terminal function is given
EXIST = "exist"
