"""BindService — CLI-facing operations over a settings file and a Config class.

Every method returns a ServiceResult. Source and persistence failures,
unknown model paths and strict binding failures become error results
with stable codes instead of exceptions.
"""

from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from propbind.binding.errors import (
    BindingError,
    ConfigDeclarationError,
    PersistenceError,
    SerializationError,
    SourceUnreadableError,
)
from propbind.binding.model import Config
from propbind.services.preparer import ConfigPreparer
from propbind.services.result import ServiceResult

if TYPE_CHECKING:
    from propbind.config.settings import PropbindSettings
    from propbind.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class ModelNotFoundError(LookupError):
    """A ``module:Class`` reference does not name a Config subclass."""


def resolve_model(reference: str) -> type[Config]:
    """Import the Config subclass named by ``package.module:ClassName``."""
    module_name, sep, attr_path = reference.partition(":")
    if not sep or not module_name or not attr_path:
        msg = f"Model reference {reference!r} must look like 'package.module:ClassName'"
        raise ModelNotFoundError(msg)
    try:
        found: Any = importlib.import_module(module_name)
    except ImportError as exc:
        msg = f"Cannot import {module_name!r}: {exc}"
        raise ModelNotFoundError(msg) from exc
    for attr in attr_path.split("."):
        found = getattr(found, attr, None)
    if not (isinstance(found, type) and issubclass(found, Config)):
        msg = f"{reference!r} is not a propbind Config class"
        raise ModelNotFoundError(msg)
    return found


class BindService:
    """Binds settings files onto Config classes for the command layer."""

    def __init__(self, settings: PropbindSettings, plugins: PluginManager | None = None) -> None:
        self._settings = settings
        self._plugins = plugins

    def _preparer(self, source: Path, encoding: str | None) -> ConfigPreparer:
        preparer = ConfigPreparer(comment=self._settings.comment, trim=self._settings.trim)
        if self._plugins is not None:
            self._plugins.apply_converters(preparer.registry)
        return preparer.add_source(source, encoding=encoding or self._settings.encoding)

    def _prepare(
        self, op: str, source: Path, model: str, encoding: str | None
    ) -> tuple[ConfigPreparer, Config] | ServiceResult:
        try:
            model_cls = resolve_model(model)
        except ModelNotFoundError as exc:
            return ServiceResult.failure(op, "MODEL_NOT_FOUND", exc, model=model)
        try:
            preparer = self._preparer(source, encoding)
        except SourceUnreadableError as exc:
            return ServiceResult.failure(op, "SOURCE_UNREADABLE", exc, source=str(source))
        return preparer, model_cls.model_construct()

    def show(
        self, source: Path, model: str, *, stump: bool = False, encoding: str | None = None
    ) -> ServiceResult:
        """Bind *source* onto *model* and return the merged settings view."""
        op = "show"
        prepared = self._prepare(op, source, model, encoding)
        if isinstance(prepared, ServiceResult):
            return prepared
        preparer, config = prepared
        try:
            report = preparer.bind(config)
            if not stump:
                report.raise_for_failures()
            merged = config.merged_settings()
        except (ConfigDeclarationError, SerializationError) as exc:
            return ServiceResult.failure(op, "INVALID_MODEL", exc, model=model)
        except BindingError as exc:
            return ServiceResult.failure(op, "BINDING_FAILED", exc, **exc.report.to_dict())

        warnings = [] if report.ok else [report.describe()]
        return ServiceResult.success(
            op,
            {
                "source": str(source),
                "model": model,
                "encoding": preparer.encoding,
                "complete": report.ok,
                "settings": {key: merged[key] for key in sorted(merged)},
            },
            warnings=warnings,
        )

    def check(self, source: Path, model: str, *, encoding: str | None = None) -> ServiceResult:
        """Strictly bind *source* onto *model* and report every failing field."""
        op = "check"
        prepared = self._prepare(op, source, model, encoding)
        if isinstance(prepared, ServiceResult):
            return prepared
        preparer, config = prepared
        try:
            report = preparer.bind(config)
        except ConfigDeclarationError as exc:
            return ServiceResult.failure(op, "INVALID_MODEL", exc, model=model)

        if not report.ok:
            logger.warning("Binding %s from %s failed: %s", model, source, report.describe())
            return ServiceResult.failure(op, "BINDING_FAILED", report.describe(), **report.to_dict())
        return ServiceResult.success(op, {"source": str(source), "model": model, "missing": [], "errored": {}})

    def template(
        self, source: Path, model: str, output: Path, *, encoding: str | None = None
    ) -> ServiceResult:
        """Best-effort bind and persist the merged view for a human to complete."""
        op = "template"
        prepared = self._prepare(op, source, model, encoding)
        if isinstance(prepared, ServiceResult):
            return prepared
        preparer, config = prepared
        try:
            report = preparer.bind(config)
            written = config.store(output)
        except (ConfigDeclarationError, SerializationError) as exc:
            return ServiceResult.failure(op, "INVALID_MODEL", exc, model=model)
        except PersistenceError as exc:
            return ServiceResult.failure(op, "PERSISTENCE_FAILED", exc, path=str(output))

        return ServiceResult.success(
            op,
            {
                "path": str(written),
                "encoding": config.settings_encoding,
                "missing": list(report.missing),
                "errored": dict(report.errored),
            },
        )
