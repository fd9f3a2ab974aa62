"""
Validation for configuration files.

This module checks raw parsed YAML against the configuration schema and
reports errors with helpful messages.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .models import CONFIG_FIELDS, FORMAT_FIELDS


# ─────────────────────────────────────────────────────────────────────────────
# Validation Result Types
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ValidationError:
    """One rejected setting, or a problem with the document as a whole."""
    path: str  # e.g., "format.max_props"; empty for the whole document
    message: str
    value: Any = None
    suggestion: str | None = None

    def __str__(self) -> str:
        text = f"❌ {self.path or '(document)'}: {self.message}"
        if self.value is not None:
            text += f" (got {self.value!r})"
        if self.suggestion:
            text += f"\n   💡 {self.suggestion}"
        return text


@dataclass
class ValidationResult:
    """Outcome of validating one configuration source."""
    source: str = "<yaml>"
    errors: list[ValidationError] = field(default_factory=list)

    @classmethod
    def rejected(
        cls,
        source: str,
        message: str,
        value: Any = None,
        suggestion: str | None = None,
    ) -> ValidationResult:
        """A result for a source that could not be read as settings at all."""
        result = cls(source)
        result.add_error("", message, value, suggestion)
        return result

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def add_error(
        self,
        path: str,
        message: str,
        value: Any = None,
        suggestion: str | None = None
    ) -> None:
        self.errors.append(ValidationError(path, message, value, suggestion))

    def __str__(self) -> str:
        if self.is_valid:
            return f"✅ {self.source}: configuration is valid"
        lines = [f"{self.source}: {len(self.errors)} invalid setting(s)"]
        lines.extend(str(e) for e in self.errors)
        return "\n".join(lines)


# ─────────────────────────────────────────────────────────────────────────────
# Config Validator
# ─────────────────────────────────────────────────────────────────────────────

class ConfigValidator:
    """Validates raw parsed YAML against the configuration schema."""

    BOOL_FIELDS = {"is_verbose", "full_stack", "show_diff"}
    STRING_FIELDS = {"def_assert_msg", "def_fatal_msg"}
    LIMIT_FIELDS = {"max_compare_depth", "max_compare_check_depth"}
    FORMAT_LIMIT_FIELDS = {"max_props", "max_format_depth", "max_string", "max_length"}

    def __init__(self, data: dict[str, Any], source: str = "<yaml>"):
        self.data = data
        self.result = ValidationResult(source)

    def validate(self) -> ValidationResult:
        """Run all validation checks and return result."""
        self._validate_keys()
        for key in self.BOOL_FIELDS:
            self._validate_bool(key)
        for key in self.STRING_FIELDS:
            self._validate_string(key)
        for key in self.LIMIT_FIELDS:
            self._validate_limit(self.data, key, key)
        self._validate_format()

        return self.result

    def _validate_keys(self) -> None:
        """Check for unknown top-level keys."""
        unknown = set(self.data.keys()) - set(CONFIG_FIELDS)
        for key in sorted(unknown, key=str):
            self.result.add_error(
                str(key),
                f"Unknown configuration setting '{key}'",
                suggestion=f"Valid settings are: {', '.join(sorted(CONFIG_FIELDS))}"
            )

    def _validate_bool(self, key: str) -> None:
        if key in self.data and not isinstance(self.data[key], bool):
            self.result.add_error(
                key,
                "Must be a boolean",
                value=self.data[key],
                suggestion=f"Use '{key}: true' or '{key}: false'"
            )

    def _validate_string(self, key: str) -> None:
        if key not in self.data:
            return
        value = self.data[key]
        if not isinstance(value, str):
            self.result.add_error(key, "Must be a string", value=value)
        elif not value.strip():
            self.result.add_error(
                key,
                "Cannot be empty",
                suggestion="Provide the message used when no other message applies"
            )

    def _validate_limit(self, data: dict[str, Any], key: str, path: str) -> None:
        if key not in data:
            return
        value = data[key]
        # bool is an int subclass, but never a valid limit
        if not isinstance(value, int) or isinstance(value, bool):
            self.result.add_error(path, "Must be an integer", value=value)
        elif value < 1:
            self.result.add_error(path, "Must be >= 1", value=value)

    def _validate_format(self) -> None:
        fmt = self.data.get("format")
        if fmt is None:
            return
        if not isinstance(fmt, dict):
            self.result.add_error("format", "Must be an object", value=fmt)
            return

        # Formatters are code, they cannot come from a file
        allowed = set(FORMAT_FIELDS) - {"formatters"}
        for key in sorted(set(fmt.keys()) - allowed, key=str):
            self.result.add_error(
                f"format.{key}",
                f"Unknown format setting '{key}'",
                suggestion=f"Valid format settings are: {', '.join(sorted(allowed))}"
            )

        for key in self.FORMAT_LIMIT_FIELDS:
            self._validate_limit(fmt, key, f"format.{key}")
