"""Error kinds raised by the binding engine and its collaborators.

INVARIANT: Per-field failures (unsupported type, conversion, assignment,
missing value, nested failure) are accumulated into a FailureReport and
never raised mid-pass. Source-load and persistence failures propagate
immediately; they are preconditions/postconditions, not field outcomes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from propbind.binding.binder import FailureReport


class PropbindError(Exception):
    """Base class for every error raised by propbind."""


# --- Source / persistence (propagate immediately) ---


class SourceUnreadableError(PropbindError, OSError):
    """A settings source could not be read or decoded."""


class PersistenceError(PropbindError, OSError):
    """Rendered settings could not be written to their target."""


class SerializationError(PropbindError, ValueError):
    """One or more field values have no converter to text."""


# --- Per-field outcomes (accumulated) ---


class UnsupportedTypeError(PropbindError, TypeError):
    """No registered converter resolves for a type."""


class AmbiguousConverterError(UnsupportedTypeError):
    """Several unrelated registered supertypes match equally well."""


class ConversionFailedError(PropbindError, ValueError):
    """A raw string could not be parsed into the field's type."""


class FieldUnassignableError(PropbindError, AttributeError):
    """The bound object refused the assignment (frozen or read-only)."""


class NestedBindFailedError(PropbindError):
    """A nested config reported missing or errored fields."""

    def __init__(self, field_name: str, report: FailureReport) -> None:
        self.field_name = field_name
        self.report = report
        super().__init__(f"nested config {field_name!r} failed: {report.describe()}")


# --- Aggregate / declaration ---


class BindingError(PropbindError, ValueError):
    """Aggregate failure of one strict binding pass."""

    def __init__(self, report: FailureReport) -> None:
        self.report = report
        super().__init__(report.describe())


class MissingRequiredValueError(BindingError):
    """Strict pass failed with at least one non-optional field left without a value."""


class ConfigDeclarationError(PropbindError, TypeError):
    """A config class carries inconsistent binding metadata."""


class NestingCycleError(ConfigDeclarationError):
    """A nested config type contains itself somewhere below."""
