"""
Expression compiler.

This module turns a dot-path expression such as ``"not.deep.own.include"``
into a CompiledExpression: an immutable, reusable scope function that
applies the modifier steps to the caller's scope and then runs exactly one
terminal step.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from ..config.models import AssertConfig
from ..errors import InvalidExpressionError, InvalidStepError
from ..formatting import format_value
from ..funcs import TERMINALS, exists_func
from ..scope import AssertScope, MsgSource, callable_name, create_context
from .models import Step, StepDef, StepKind
from .modifiers import EXIST, MODIFIERS
from .parser import Expression, ExpressionParser
from .registry import StepRegistry, default_registry

logger = logging.getLogger(__name__)


class CompiledExpression:
    """
    A validated expression, callable as a scope function.

    Everything that can be checked without a registry lookup is checked
    when the expression is constructed. Custom steps are looked up in the
    registry on every call, so steps registered later are still found.
    No state is kept between calls.

    Example:
        is_not_deep_equal = CompiledExpression("not.deep.equal")
        is_not_deep_equal.evaluate([1, 2], [1, 3])     # passes
        is_not_deep_equal(scope, [1, 2])               # as a scope function
    """

    def __init__(
        self,
        expression: Expression,
        scope_fn: Callable[..., Any] | None = None,
        registry: StepRegistry | None = None,
    ):
        parser = ExpressionParser(expression)
        self._expression = parser.text
        self._scope_fn = scope_fn
        self._registry = registry if registry is not None else default_registry
        self._steps = self._resolve_steps(parser.parse())

        if scope_fn is not None and not self._steps[-1].is_modifier:
            # A supplied function is the terminal; the expression may only modify
            raise InvalidExpressionError(self._expression)

        self.__name__ = callable_name(scope_fn) if scope_fn is not None else self._steps[-1].name
        logger.debug(f"Compiled expression: {self._expression} ({len(self._steps)} steps)")

    @property
    def expression(self) -> str:
        return self._expression

    @property
    def steps(self) -> tuple[Step, ...]:
        return self._steps

    @property
    def scope_fn(self) -> Callable[..., Any] | None:
        return self._scope_fn

    @property
    def registry(self) -> StepRegistry:
        return self._registry

    # ─────────────────────────────────────────────────────────────────────
    # Compilation
    # ─────────────────────────────────────────────────────────────────────

    def _resolve_steps(self, step_defs: tuple[StepDef, ...]) -> tuple[Step, ...]:
        steps: list[Step] = []
        last = len(step_defs) - 1

        for index, step_def in enumerate(step_defs):
            name = step_def.name
            modifier = MODIFIERS.get(name)

            if modifier is not None:
                if step_def.args is not None:
                    self._invalid_step(name, "modifiers take no arguments")
                if modifier.requires and (not steps or steps[-1].name != modifier.requires):
                    self._invalid_step(name, f"must follow '{modifier.requires}'")
                steps.append(Step(name, StepKind.MODIFIER))
                continue

            if index != last:
                self._invalid_step(name, "only the last step may evaluate")

            terminal = TERMINALS.get(name)
            if terminal is not None:
                steps.append(Step(name, StepKind.TERMINAL, step_def.args, terminal))
            else:
                steps.append(Step(name, StepKind.CUSTOM, step_def.args))

        return tuple(steps)

    def _invalid_step(self, name: str, reason: str):
        __tracebackhide__ = True
        raise InvalidStepError(name, self._expression, reason)

    # ─────────────────────────────────────────────────────────────────────
    # Evaluation
    # ─────────────────────────────────────────────────────────────────────

    def __call__(self, scope: AssertScope, *args: Any) -> Any:
        """Run the expression against a scope with the call arguments."""
        __tracebackhide__ = True
        context = scope.context
        context.stack_markers.push(CompiledExpression.__call__)
        verbose = context.opts.is_verbose

        if verbose:
            context.set_op(f'[["{self._expression}"]]')

        for step in self._steps:
            if not step.is_modifier:
                break
            MODIFIERS[step.name].apply(scope)
            if verbose:
                scope.context.set_op(step.name)

        return self._run_final(scope, args, verbose)

    def _run_final(self, scope: AssertScope, args: tuple, verbose: bool) -> Any:
        __tracebackhide__ = True
        final = self._steps[-1]

        if self._scope_fn is not None:
            if verbose:
                scope.context.set_op(f"[[p:{callable_name(self._scope_fn)}]]")
            fn, name, call_args = self._scope_fn, None, args
        elif final.kind == StepKind.TERMINAL:
            fn, name, call_args = final.fn, final.name, self._step_args(final, scope, args)
        elif final.kind == StepKind.CUSTOM:
            fn, name, call_args = self._resolve_custom(final), final.name, self._step_args(final, scope, args)
        elif final.name == EXIST:
            fn, name, call_args = exists_func, EXIST, args
        else:
            return scope.that

        result = scope.exec(fn, call_args, name)
        if verbose:
            scope.context.set_op(f"=>[[r:{format_value(result, scope.context.opts.format)}]]")
        return result

    def _step_args(self, step: Step, scope: AssertScope, args: tuple) -> tuple:
        if step.args is None:
            return args
        return tuple(arg.resolve(scope.context, args) for arg in step.args)

    def _resolve_custom(self, step: Step) -> Callable[..., Any]:
        __tracebackhide__ = True
        structural = [s.name for s in self._steps if s.is_modifier and MODIFIERS[s.name].structural]
        if structural:
            self._invalid_step(step.name, f"custom step cannot follow '{structural[-1]}'")

        descriptor = self._registry.resolve(step.name)
        if descriptor is None:
            self._invalid_step(step.name, "not registered")

        logger.debug(f"Resolved custom step {step.name} for {self._expression}")
        return descriptor.scope_fn

    def evaluate(
        self,
        value: Any,
        *args: Any,
        init_msg: MsgSource = None,
        config: AssertConfig | dict[str, Any] | None = None,
    ) -> Any:
        """
        Evaluate the expression against a value with a new root context.

        Args:
            value: The subject value
            *args: Call arguments passed to the terminal step
            init_msg: Message prefixed to any failure
            config: Configuration overrides for this evaluation

        Returns:
            The terminal step's result

        Raises:
            AssertionFailure: If the check fails
        """
        __tracebackhide__ = True
        context = create_context(value, init_msg, self.evaluate, args, config)
        return self(AssertScope(context), *args)

    def __repr__(self) -> str:
        return f"CompiledExpression({self._expression!r})"


def create_expr_adapter(
    expression: Expression,
    scope_fn: Callable[..., Any] | None = None,
    registry: StepRegistry | None = None,
) -> CompiledExpression:
    """
    Compile an expression into a reusable scope function.

    Args:
        expression: Dot-path string or ordered list of segment strings
        scope_fn: Optional terminal scope function run after the modifiers
        registry: Registry for custom steps (defaults to the process-wide one)

    Raises:
        InvalidExpressionError: If the expression is malformed
        InvalidStepError: If a step is invalid in its position
    """
    return CompiledExpression(expression, scope_fn, registry)
