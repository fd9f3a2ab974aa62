"""
Custom step registry.

Named steps added at runtime are held in a mutable registry consulted by
direct calls and, at call time, by compiled expressions. Expressions keep
a reference to the registry, never a copy, so a step registered after an
expression was compiled is still found.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Mapping, Sequence

from ..config.models import AssertConfig
from ..errors import InvalidStepError
from ..funcs import TERMINALS
from ..scope import AssertScope, MsgSource, create_context
from .modifiers import MODIFIERS
from .parser import ExpressionParser

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StepDescriptor:
    """
    A registered custom step.

    Attributes:
        name: Step name used in expressions and direct calls
        scope_fn: Scope function run for the step (None for an alias)
        n_args: Number of call arguments the step expects, if known
        alias: Name of another registered step this one forwards to
    """
    name: str
    scope_fn: Callable[..., Any] | None = None
    n_args: int | None = None
    alias: str | None = None

    def __post_init__(self):
        if (self.scope_fn is None) == (self.alias is None):
            raise InvalidStepError(self.name, reason="exactly one of scope_fn or alias is required")
        if self.scope_fn is not None and not callable(self.scope_fn):
            raise InvalidStepError(self.name, reason="scope_fn is not callable")


StepDefinition = Callable[..., Any] | str | Sequence[str] | StepDescriptor


class StepRegistry:
    """
    Mutable name -> StepDescriptor mapping.

    Example:
        registry = StepRegistry()
        registry.register(StepDescriptor("isPositive", is_positive))
        registry.run("isPositive", 5)
    """

    def __init__(self):
        self._steps: dict[str, StepDescriptor] = {}

    def register(self, descriptor: StepDescriptor) -> StepDescriptor:
        """
        Add or replace a step.

        Raises:
            InvalidStepError: If the name is not an identifier or is a
                modifier or built-in terminal name
        """
        _check_name(descriptor.name)
        self._steps[descriptor.name] = descriptor
        logger.debug(f"Registered step: {descriptor.name}")
        return descriptor

    def register_many(self, descriptors: Sequence[StepDescriptor]) -> list[StepDescriptor]:
        return [self.register(descriptor) for descriptor in descriptors]

    def unregister(self, name: str) -> bool:
        removed = self._steps.pop(name, None) is not None
        if removed:
            logger.debug(f"Unregistered step: {name}")
        return removed

    def get(self, name: str) -> StepDescriptor | None:
        return self._steps.get(name)

    def resolve(self, name: str) -> StepDescriptor | None:
        """Look up a step, following aliases to the descriptor with a function."""
        seen: set[str] = set()
        descriptor = self._steps.get(name)
        while descriptor is not None and descriptor.alias is not None:
            if descriptor.name in seen:
                raise InvalidStepError(name, reason="alias cycle")
            seen.add(descriptor.name)
            descriptor = self._steps.get(descriptor.alias)
        return descriptor

    def names(self) -> list[str]:
        return sorted(self._steps)

    def clear(self) -> None:
        self._steps.clear()

    def run(
        self,
        name: str,
        value: Any,
        *args: Any,
        init_msg: MsgSource = None,
        config: AssertConfig | dict[str, Any] | None = None,
    ) -> Any:
        """
        Call a registered step directly against a value.

        Args:
            name: Registered step name
            value: The subject value
            *args: Arguments passed to the step's scope function
            init_msg: Message prefixed to any failure
            config: Configuration overrides for this call

        Returns:
            The scope function's result

        Raises:
            InvalidStepError: If the step is not registered
            AssertionFailure: If the step's check fails
        """
        __tracebackhide__ = True
        descriptor = self.resolve(name)
        if descriptor is None:
            raise InvalidStepError(name, reason="not registered")

        context = create_context(value, init_msg, self.run, args, config)
        context.set_op(f"{name}()")
        return AssertScope(context).exec(descriptor.scope_fn, args, name)

    def __contains__(self, name: object) -> bool:
        return name in self._steps

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self._steps)

    def __repr__(self) -> str:
        return f"StepRegistry({', '.join(self.names())})"


def _check_name(name: str) -> None:
    if not isinstance(name, str) or not ExpressionParser.IDENTIFIER_PATTERN.match(name):
        raise InvalidStepError(str(name), reason="not a valid step name")
    if name in MODIFIERS or name in TERMINALS:
        raise InvalidStepError(name, reason="reserved step name")


# The registry shared by the whole process
default_registry = StepRegistry()


def to_descriptor(name: str, definition: StepDefinition, registry: StepRegistry | None = None) -> StepDescriptor:
    """Build a StepDescriptor from any accepted definition form."""
    from .compiler import CompiledExpression

    if isinstance(definition, StepDescriptor):
        if definition.name != name:
            return StepDescriptor(name, definition.scope_fn, definition.n_args, definition.alias)
        return definition

    if isinstance(definition, str) or (
        isinstance(definition, Sequence) and all(isinstance(part, str) for part in definition)
    ):
        return StepDescriptor(name, CompiledExpression(definition, registry=registry))

    if callable(definition):
        return StepDescriptor(name, definition)

    raise InvalidStepError(name, reason=f"unsupported definition {type(definition).__name__}")


def add_assert_func(
    name: str,
    definition: StepDefinition,
    registry: StepRegistry | None = None,
) -> StepDescriptor:
    """
    Register a custom step.

    Args:
        name: Step name
        definition: A scope function, an expression string or segment
            list, or a StepDescriptor
        registry: Target registry (defaults to the process-wide one)

    Returns:
        The registered descriptor
    """
    registry = registry if registry is not None else default_registry
    return registry.register(to_descriptor(name, definition, registry))


def add_assert_funcs(
    definitions: Mapping[str, StepDefinition],
    registry: StepRegistry | None = None,
) -> list[StepDescriptor]:
    """Register several custom steps at once."""
    return [add_assert_func(name, definition, registry) for name, definition in definitions.items()]
