"""
Process-wide configuration store.

The store holds the default configuration every root context clones
lazily. It is plain shared state: the engine is synchronous and
single-threaded, so concurrent writers simply win in order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from .models import (
    CONFIG_FIELDS,
    AssertConfig,
    FormatOptions,
    Formatter,
    copy_config,
    merge_config,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Removable:
    """Handle returned by registrations that can be undone."""
    rm: Callable[[], None]


def _noop() -> None:
    pass


class ConfigStore:
    """
    Mutable holder of the default configuration.

    Every AssertConfig field is readable and writable as an attribute;
    assigning None restores that field's default.

    Example:
        assert_config.max_compare_depth = 5
        snapshot = assert_config.clone({"is_verbose": True})
        assert_config.reset()
    """

    def __init__(self, defaults: AssertConfig | None = None):
        object.__setattr__(self, "_defaults", copy_config(defaults or AssertConfig()))
        object.__setattr__(self, "_values", copy_config(self._defaults))

    def __getattr__(self, name: str) -> Any:
        if name in CONFIG_FIELDS:
            return getattr(self._values, name)
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    def __setattr__(self, name: str, value: Any) -> None:
        if name not in CONFIG_FIELDS:
            raise AttributeError(f"Unknown configuration setting '{name}'")

        if name == "format":
            if value is None:
                self._values.format = copy_config(self._defaults).format
            else:
                merge_config(self._values, {"format": value})
            return

        if value is None:
            value = getattr(self._defaults, name)
        setattr(self._values, name, value)

    def reset(self) -> None:
        """Restore every setting, including formatters, to the defaults."""
        object.__setattr__(self, "_values", copy_config(self._defaults))

    def clone(self, overrides: AssertConfig | dict[str, Any] | None = None) -> AssertConfig:
        """
        Create an independent snapshot of the current settings.

        Args:
            overrides: Optional settings merged on top of the snapshot

        Returns:
            A new AssertConfig sharing no mutable state with the store
        """
        snapshot = copy_config(self._values)
        if overrides:
            merge_config(snapshot, overrides)
        return snapshot

    def snapshot(self) -> AssertConfig:
        return self.clone()

    def update(self, overrides: AssertConfig | dict[str, Any]) -> None:
        """Merge several settings into the store at once."""
        merge_config(self._values, overrides)

    def add_formatter(self, formatter: Formatter) -> Removable:
        """
        Register a formatter ahead of the generic fallback.

        Returns:
            Removable whose ``rm()`` unregisters the formatter; adding a
            formatter that is already registered returns a no-op handle
        """
        formatters = self._values.format.formatters
        if formatter in formatters:
            return Removable(rm=_noop)

        formatters.append(formatter)
        logger.debug(f"Added formatter: {formatter.name}")
        return Removable(rm=lambda: self.remove_formatter(formatter))

    def remove_formatter(self, formatter: Formatter) -> None:
        formatters = self._values.format.formatters
        if formatter in formatters:
            formatters.remove(formatter)
            logger.debug(f"Removed formatter: {formatter.name}")

    def __repr__(self) -> str:
        return f"ConfigStore({self._values!r})"


# The default configuration shared by the whole process
assert_config = ConfigStore()


def default_format_options() -> FormatOptions:
    """Current format options of the process-wide store."""
    return assert_config.format
