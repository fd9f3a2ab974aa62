"""
Scope context.

A ScopeContext carries the subject value of one assertion call together
with the named values tracked while it runs, message templating and the
stack markers attached to raised failures. Nested and negated steps run
against child contexts: a child reads through to its parent but never
writes to it.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Callable, Iterable, NoReturn, Union

from ..config.models import AssertConfig
from ..config.store import assert_config
from ..errors import AssertionFailure, AssertionFatal
from ..formatting import format_value
from .template import render_template

MsgSource = Union[str, Callable[[], str], None]

# Reserved context keys
OPERATION = "operation"
OP_PATH = "op_path"
EXEC = "$exec"

# Modifier flags
DEEP = "$deep"
OWN = "$own"
ANY = "$any"
ALL = "$all"


class StackMarkers(list):
    """
    Ordered, de-duplicating list of stack marker callables.

    ``push`` ignores a marker that is already present; ``unshift`` moves an
    existing marker to the front instead of adding it twice.
    """

    def __init__(self, markers: Iterable[Callable] = ()):
        super().__init__()
        self.push(*markers)

    def push(self, *markers: Callable) -> int:
        for marker in markers:
            if marker not in self:
                super().append(marker)
        return len(self)

    def unshift(self, *markers: Callable) -> int:
        for marker in markers:
            if marker in self:
                self.remove(marker)
            self.insert(0, marker)
        return len(self)

    def append(self, marker: Callable) -> None:
        self.push(marker)


@dataclass
class ContextOverrides:
    """
    Replacement functions installed on a child context.

    Each replacement is called as ``fn(context, *args)`` where ``context``
    is the context the call was made on. Calling the same method on that
    context from inside the replacement reaches the inherited behaviour.
    """
    get_message: Callable[..., str] | None = None
    get_eval_message: Callable[..., str] | None = None
    get_details: Callable[..., dict] | None = None
    eval: Callable[..., Any] | None = None
    fail: Callable[..., NoReturn] | None = None


OVERRIDE_SLOTS = tuple(f.name for f in fields(ContextOverrides))

# Slots whose second positional argument is the skip_overrides flag
_MESSAGE_SLOTS = ("get_message", "get_eval_message")


class _OverrideSlot:
    """An installed replacement plus its re-entrancy flag."""

    __slots__ = ("fn", "active")

    def __init__(self, fn: Callable):
        self.fn = fn
        self.active = False


class ScopeContext:
    """
    Per-call assertion state.

    Create root contexts with :func:`create_context` and children with
    :meth:`new`.
    """

    def __init__(
        self,
        value: Any = None,
        parent: ScopeContext | None = None,
        overrides: ContextOverrides | dict[str, Callable] | None = None,
        init_msg: MsgSource = None,
        stack_marker: Callable | None = None,
        org_args: tuple | list | None = None,
        config: AssertConfig | dict[str, Any] | None = None,
    ):
        self._value = value
        self._parent = parent
        self._values: dict[str, Any] = {}
        self._slots = _build_slots(overrides)
        self._stack_marker = stack_marker

        if parent is None:
            self._root = self
            self._init_msg = init_msg
            self._init_text: str | None = None
            self._org_args = tuple(org_args) if org_args is not None else None
            self._config = config
            self._opts: AssertConfig | None = None
            self.stack_markers = StackMarkers()
        else:
            self._root = parent._root
            self.stack_markers = StackMarkers(parent.stack_markers)

        if stack_marker is not None:
            self.stack_markers.push(stack_marker)

    # ─────────────────────────────────────────────────────────────────────
    # Properties
    # ─────────────────────────────────────────────────────────────────────

    @property
    def value(self) -> Any:
        """The subject value."""
        return self._value

    @property
    def parent(self) -> ScopeContext | None:
        return self._parent

    @property
    def opts(self) -> AssertConfig:
        """Configuration snapshot, cloned from the defaults on first access."""
        root = self._root
        if root._opts is None:
            root._opts = assert_config.clone(root._config)
        return root._opts

    @property
    def org_args(self) -> tuple | None:
        return self._root._org_args

    # ─────────────────────────────────────────────────────────────────────
    # Named values
    # ─────────────────────────────────────────────────────────────────────

    def get(self, name: str) -> Any:
        """
        Read a named value.

        A child that inherits a list or dict from its parent stores a
        shallow copy locally on first read, so mutating the result never
        changes the parent's value.
        """
        if name in self._values:
            return self._values[name]

        if self._parent is None:
            return None

        value = self._parent.get(name)
        if type(value) is list:
            value = list(value)
            self._values[name] = value
        elif type(value) is dict:
            value = dict(value)
            self._values[name] = value

        return value

    def set(self, name: str, value: Any) -> ScopeContext:
        self._values[name] = value
        return self

    def keys(self) -> list[str]:
        """Names of all tracked values, inherited ones first."""
        if self._parent is None:
            return list(self._values)

        names = self._parent.keys()
        names.extend(key for key in self._values if key not in names)
        return names

    def new(self, value: Any, overrides: ContextOverrides | dict[str, Callable] | None = None) -> ScopeContext:
        """Create a child context for a new subject value."""
        return ScopeContext(value, parent=self, overrides=overrides, stack_marker=self._root._stack_marker)

    def set_op(self, name: str) -> ScopeContext:
        """Record an operation name as the current operation and in the path."""
        self.set(OPERATION, name)

        path = self.get(OP_PATH)
        if path is None:
            path = []
            self.set(OP_PATH, path)

        path.append(name)
        return self

    # ─────────────────────────────────────────────────────────────────────
    # Overridable behaviour
    # ─────────────────────────────────────────────────────────────────────

    def get_message(self, msg: MsgSource = None, skip_overrides: bool = False) -> str:
        """Resolve the full failure message, prefixed by the initial message."""
        return self._dispatch("get_message", self, msg, skip_overrides)

    def get_eval_message(self, msg: MsgSource = None, skip_overrides: bool = False) -> str:
        """Resolve a message, falling back to the recorded operation path."""
        return self._dispatch("get_eval_message", self, msg, skip_overrides)

    def get_details(self) -> dict[str, Any]:
        """Snapshot of the subject (as ``actual``) and every tracked value."""
        return self._dispatch("get_details", self)

    def eval(self, expr: Any, msg: MsgSource = None, caused_by: BaseException | None = None) -> ScopeContext:
        """Fail unless ``expr`` is truthy; returns the context for chaining."""
        __tracebackhide__ = True
        return self._dispatch("eval", self, expr, msg, caused_by)

    def fail(
        self,
        msg: MsgSource = None,
        details: dict[str, Any] | None = None,
        stack_markers: Callable | Iterable[Callable] | None = None,
        caused_by: BaseException | None = None,
    ) -> NoReturn:
        """Raise an AssertionFailure with the resolved message."""
        __tracebackhide__ = True
        self._dispatch("fail", self, msg, details, stack_markers, caused_by)
        raise AssertionError("fail override returned instead of raising")

    def fatal(self, msg: MsgSource = None, details: dict[str, Any] | None = None) -> NoReturn:
        """Raise an AssertionFatal; used for malformed input to an assertion."""
        __tracebackhide__ = True
        message = self.get_message(msg or self.opts.def_fatal_msg, True)
        raise AssertionFatal(
            message,
            details or self.get_details(),
            self.failure_markers(),
            show_diff=self.opts.show_diff,
        )

    def _dispatch(self, name: str, ctx: ScopeContext, *args: Any) -> Any:
        __tracebackhide__ = True
        slot = self._slots.get(name)
        skip = name in _MESSAGE_SLOTS and len(args) >= 2 and bool(args[1])

        if slot is not None and not slot.active and not skip:
            slot.active = True
            try:
                return slot.fn(ctx, *args)
            finally:
                slot.active = False

        if self._parent is not None:
            return self._parent._dispatch(name, ctx, *args)

        return _IMPLEMENTATIONS[name](ctx, *args)

    # ─────────────────────────────────────────────────────────────────────
    # Base implementations, run against the context the call was made on
    # ─────────────────────────────────────────────────────────────────────

    def _impl_get_message(self, msg: MsgSource, skip_overrides: bool) -> str:
        init_text = self._resolved_init_msg()
        message = self.get_eval_message(msg, skip_overrides)
        if init_text:
            return init_text + (": " + message if message else "")
        return message

    def _impl_get_eval_message(self, msg: MsgSource, skip_overrides: bool) -> str:
        message = self._resolve_message(msg)
        if message:
            return message

        path = self.get(OP_PATH)
        return " ".join(str(op) for op in path) if path else ""

    def _impl_get_details(self) -> dict[str, Any]:
        details = {"actual": self.value}
        for key in self.keys():
            details[key] = self.get(key)
        return details

    def _impl_eval(self, expr: Any, msg: MsgSource, caused_by: BaseException | None) -> ScopeContext:
        __tracebackhide__ = True
        if not expr:
            self.fail(msg, self.get_details(), None, caused_by)
        return self

    def _impl_fail(
        self,
        msg: MsgSource,
        details: dict[str, Any] | None,
        stack_markers: Callable | Iterable[Callable] | None,
        caused_by: BaseException | None,
    ) -> NoReturn:
        __tracebackhide__ = True
        markers = self.failure_markers(stack_markers)
        message = self.get_message(msg) or self.opts.def_assert_msg
        raise AssertionFailure(
            message,
            details or self.get_details(),
            markers,
            caused_by,
            show_diff=self.opts.show_diff,
        )

    # ─────────────────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────────────────

    def failure_markers(self, extra: Callable | Iterable[Callable] | None = None) -> StackMarkers | None:
        if self.opts.full_stack:
            return None

        markers = StackMarkers(self.stack_markers)
        if callable(extra):
            markers.push(extra)
        elif extra is not None:
            markers.push(*extra)
        return markers

    def _resolved_init_msg(self) -> str:
        root = self._root
        if root._init_msg is None:
            return ""
        # Tokens resolve against the root subject and are cached there
        if root._init_text is None:
            root._init_text = root._resolve_message(root._init_msg)
        return root._init_text

    def _resolve_message(self, msg: MsgSource) -> str:
        text = (msg() if callable(msg) else msg) or ""
        if "{" not in text:
            return text

        details: dict[str, Any] | None = None

        def resolve(token: str) -> tuple[bool, Any]:
            nonlocal details
            if details is None:
                details = self.get_details()
            if token in details:
                return True, details[token]
            if token == "value":
                return True, details.get("actual")
            if token == "path":
                path = self.get(OP_PATH) or []
                return True, " ".join(str(op) for op in path)
            return False, None

        fmt = self.opts.format
        return render_template(text, resolve, lambda value: format_value(value, fmt))

    def __repr__(self) -> str:
        kind = "root" if self._parent is None else "child"
        return f"ScopeContext({kind}, value={format_value(self._value)})"


_IMPLEMENTATIONS: dict[str, Callable[..., Any]] = {
    "get_message": ScopeContext._impl_get_message,
    "get_eval_message": ScopeContext._impl_get_eval_message,
    "get_details": ScopeContext._impl_get_details,
    "eval": ScopeContext._impl_eval,
    "fail": ScopeContext._impl_fail,
}


def _build_slots(overrides: ContextOverrides | dict[str, Callable] | None) -> dict[str, _OverrideSlot]:
    if overrides is None:
        return {}

    if isinstance(overrides, ContextOverrides):
        items = {name: getattr(overrides, name) for name in OVERRIDE_SLOTS}
    else:
        unknown = set(overrides) - set(OVERRIDE_SLOTS)
        if unknown:
            raise ValueError(f"Unknown context override(s): {', '.join(sorted(unknown))}")
        items = dict(overrides)

    return {name: _OverrideSlot(fn) for name, fn in items.items() if fn is not None}


def create_context(
    value: Any = None,
    init_msg: MsgSource = None,
    stack_marker: Callable | None = None,
    org_args: tuple | list | None = None,
    config: AssertConfig | dict[str, Any] | None = None,
) -> ScopeContext:
    """
    Create a root context.

    Args:
        value: The subject value
        init_msg: Message (or callable returning one) prefixed to every
            failure message raised from this context or its children
        stack_marker: Callable marking where user frames begin
        org_args: The original arguments of the assertion call
        config: Overrides applied on top of the process-wide defaults

    Returns:
        A new root ScopeContext
    """
    return ScopeContext(
        value,
        init_msg=init_msg,
        stack_marker=stack_marker,
        org_args=org_args,
        config=config,
    )
