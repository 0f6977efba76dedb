"""Binder — fills a Config from a SettingsStore, field by field.

Per field, in resolver order:
  1. key = descriptor or field name
  2. raw = store value, or the field default when absent/empty
  3. no usable raw: non-optional -> ``missing``; optional -> skipped
  4. convert via the registry; failures -> ``errored`` unless optional
  5. assign, overwriting whatever the field held

Nested fields get a prefix view of the store, a fresh default instance of
their type and a child registry scope. The instance is assigned whatever
the nested outcome; a nested failure is recorded against the containing
field.

INVARIANT: One pass reports every problem. Nothing field-related raises
before the pass is over; only the caller decides whether the report is
fatal (``fill``) or suppressed (``stump``).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from propbind.binding.converters import ConverterRegistry, default_registry, type_name
from propbind.binding.errors import (
    BindingError,
    FieldUnassignableError,
    MissingRequiredValueError,
    NestedBindFailedError,
    NestingCycleError,
    PropbindError,
)
from propbind.binding.fields import BindableField, ordered_bindable_fields
from propbind.binding.model import Config
from propbind.binding.store import SettingsStore

logger = logging.getLogger(__name__)


@dataclass
class FailureReport:
    """Outcome of one binding pass.

    Attributes:
        missing: Names of non-optional fields without a usable value.
        errored: Field name -> error message for conversion, assignment,
            unsupported-type and nested failures.
    """

    missing: list[str] = field(default_factory=list)
    errored: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.missing and not self.errored

    def describe(self) -> str:
        parts: list[str] = []
        if self.missing:
            parts.append("The following non-optional settings are missing: " + ", ".join(self.missing))
        if self.errored:
            pairs = ", ".join(f"{name} ({message})" for name, message in self.errored.items())
            parts.append(f"The following settings caused exceptions: {pairs}")
        return "; ".join(parts) if parts else "no failures"

    def raise_for_failures(self) -> None:
        """Raise the aggregate :class:`BindingError` if anything failed."""
        if self.missing:
            raise MissingRequiredValueError(self)
        if self.errored:
            raise BindingError(self)

    def to_dict(self) -> dict[str, Any]:
        return {"missing": list(self.missing), "errored": dict(self.errored)}


def assign(config: Config, name: str, value: Any) -> None:
    """Set *name* on *config*, mapping refusals to FieldUnassignableError."""
    try:
        setattr(config, name, value)
    except (ValidationError, AttributeError, TypeError) as exc:
        msg = f"cannot assign {type(config).__qualname__}.{name}: {exc}"
        raise FieldUnassignableError(msg) from exc


class Binder:
    """Runs binding passes against one converter registry scope."""

    def __init__(self, registry: ConverterRegistry | None = None, *, _stack: list[type] | None = None) -> None:
        self._registry = registry if registry is not None else default_registry()
        self._stack: list[type] = _stack if _stack is not None else []

    @property
    def registry(self) -> ConverterRegistry:
        return self._registry

    def bind(self, config: Config, store: SettingsStore) -> FailureReport:
        """Populate *config* from *store* and report what could not be bound.

        Raises:
            NestingCycleError: A nested config type contains itself.
            ConfigDeclarationError: The config class metadata is inconsistent.
        """
        config_type = type(config)
        if config_type in self._stack:
            msg = f"{config_type.__qualname__} is nested inside itself"
            raise NestingCycleError(msg)

        report = FailureReport()
        self._stack.append(config_type)
        try:
            for bindable in ordered_bindable_fields(config_type):
                if bindable.is_nested:
                    self._bind_nested(config, bindable, store, report)
                else:
                    self._bind_setting(config, bindable, store, report)
        finally:
            self._stack.pop()

        if not report.ok:
            logger.debug(
                "Binding %s incomplete: missing=%s errored=%s",
                config_type.__qualname__,
                report.missing,
                list(report.errored),
            )
        return report

    def _bind_setting(
        self,
        config: Config,
        bindable: BindableField,
        store: SettingsStore,
        report: FailureReport,
    ) -> None:
        setting = bindable.setting
        assert setting is not None
        raw = store.get(bindable.key, setting.default)
        if not raw:
            if setting.optional:
                logger.debug("Optional setting %r absent, keeping %s", bindable.key, bindable.name)
                return
            logger.debug("Missing %s: no value for %r", bindable.name, bindable.key)
            report.missing.append(bindable.name)
            return

        try:
            value = self._registry.to_value(bindable.annotation, raw)
            assign(config, bindable.name, value)
        except PropbindError as exc:
            if setting.optional:
                logger.debug("Skipping optional %s: %s", bindable.name, exc)
                return
            report.errored[bindable.name] = str(exc)
            return
        logger.debug("Bound %s from %r", bindable.name, bindable.key)

    def _bind_nested(
        self,
        config: Config,
        bindable: BindableField,
        store: SettingsStore,
        report: FailureReport,
    ) -> None:
        nested_type = bindable.value_type
        if nested_type in self._stack:
            msg = f"{bindable.owner.__qualname__}.{bindable.name} nests {type_name(nested_type)}, which contains it"
            raise NestingCycleError(msg)

        assert bindable.nested is not None
        sub_store = store.prefix_view(bindable.nested.prefix)
        instance = nested_type.model_construct()
        nested_report = Binder(self._registry.child(), _stack=self._stack).bind(instance, sub_store)

        try:
            assign(config, bindable.name, instance)
        except FieldUnassignableError as exc:
            report.errored[bindable.name] = str(exc)
            return
        if not nested_report.ok:
            report.errored[bindable.name] = str(NestedBindFailedError(bindable.name, nested_report))


def bind(config: Config, store: SettingsStore, registry: ConverterRegistry | None = None) -> FailureReport:
    """Best-effort binding pass; the report is returned, never raised."""
    return Binder(registry).bind(config, store)


def bind_strict(config: Config, store: SettingsStore, registry: ConverterRegistry | None = None) -> Config:
    """Binding pass that raises :class:`BindingError` on any failure."""
    bind(config, store, registry).raise_for_failures()
    return config
