"""ConfigPreparer — collects settings sources and converters, then fills configs.

Typical use::

    config = ConfigPreparer(Path("app.cfg")).fill(AppConfig())

or, to produce a template for a human to complete::

    stump = ConfigPreparer(Path("app.cfg")).stump(AppConfig())
    stump.store(Path("app.template.cfg"))

Both ``fill`` and ``stump`` attach the store, registry, encoding and the
last file source to the config, so ``config.store()`` writes back to where
the settings came from.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, TypeAlias, TypeVar

from propbind.binding.binder import Binder, FailureReport
from propbind.binding.converters import Converter, ConverterRegistry, default_registry
from propbind.binding.fields import ordered_bindable_fields
from propbind.binding.model import DEFAULT_ENCODING, DEFAULT_FILE_NAME, Config
from propbind.binding.store import SettingsStore
from propbind.infrastructure.source import COMMENT_DESIGNATOR, read_source

logger = logging.getLogger(__name__)

SettingsSource: TypeAlias = str | os.PathLike[str] | Mapping[str, Any] | SettingsStore

C = TypeVar("C", bound=Config)


class ConfigPreparer:
    """Builder for one binding: sources, converters and parsing options."""

    def __init__(
        self,
        source: SettingsSource | None = None,
        *,
        encoding: str | None = None,
        registry: ConverterRegistry | None = None,
        comment: str = COMMENT_DESIGNATOR,
        trim: bool = True,
    ) -> None:
        self._store = SettingsStore()
        self._registry = (registry or default_registry()).child()
        self._encoding = DEFAULT_ENCODING
        self._target = Path(DEFAULT_FILE_NAME)
        self._comment = comment
        self._trim = trim
        if source is not None:
            self.add_source(source, encoding=encoding)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def settings(self) -> SettingsStore:
        return self._store

    @property
    def registry(self) -> ConverterRegistry:
        return self._registry

    @property
    def encoding(self) -> str:
        return self._encoding

    @property
    def target(self) -> Path:
        return self._target

    def add_source(self, source: SettingsSource, *, encoding: str | None = None) -> ConfigPreparer:
        """Merge *source* into the settings; later sources win.

        A path (``str`` or ``PathLike``) is parsed with the current comment
        and trim options and becomes the default persistence target.

        Raises:
            SourceUnreadableError: A file source cannot be read.
        """
        if isinstance(source, (str, os.PathLike)):
            data = read_source(Path(source), encoding, comment=self._comment, trim=self._trim)
            self._store.load(data.settings)
            self._encoding = data.encoding
            self._target = data.path
            logger.debug("Loaded %d settings from %s (%s)", len(data.settings), data.path, data.encoding)
        else:
            self._store.load(source, registry=self._registry)
        return self

    def add_setting(self, key: str, value: Any) -> ConfigPreparer:
        """Add or overwrite a single setting."""
        self._store.load({key: value}, registry=self._registry)
        return self

    def register_converter(self, tp: type, converter: Converter) -> ConfigPreparer:
        self._registry.register(tp, converter)
        return self

    def register_converters(self, converters: Mapping[type, Converter]) -> ConfigPreparer:
        self._registry.register_many(converters)
        return self

    def with_comment_designator(self, comment: str) -> ConfigPreparer:
        """Set the prefix marking comment lines in file sources added later."""
        self._comment = comment
        return self

    def with_trim(self, trim: bool) -> ConfigPreparer:
        """Set whether values of file sources added later are trimmed."""
        self._trim = trim
        return self

    # ------------------------------------------------------------------
    # Binding
    # ------------------------------------------------------------------

    def fill(self, config: C) -> C:
        """Bind *config* strictly.

        Raises:
            MissingRequiredValueError: Non-optional fields had no value.
            BindingError: Fields failed conversion or assignment.
        """
        report = self.bind(config)
        report.raise_for_failures()
        return config

    def stump(self, config: C) -> C:
        """Bind *config* as far as possible, suppressing the failure report.

        The result may be incomplete and should not be used for normal
        processing; it is meant for inspection or for storing a template
        whose blanks a human fills in.
        """
        report = self.bind(config)
        if not report.ok:
            logger.info("Returning incomplete %s: %s", type(config).__qualname__, report.describe())
        return config

    def bind(self, config: Config) -> FailureReport:
        """Run one binding pass and attach the binding context to *config*."""
        report = Binder(self._registry).bind(config, self._store)
        snapshot = SettingsStore(self._store.as_dict())
        config.attach_settings(snapshot, self._registry, encoding=self._encoding, target=self._target)
        _attach_nested(config, snapshot, self._registry, self._encoding)
        return report

    def __str__(self) -> str:
        return self._store.to_text()


def _attach_nested(config: Config, store: SettingsStore, registry: ConverterRegistry, encoding: str) -> None:
    """Give every bound nested config the prefix view it was filled from."""
    for bindable in ordered_bindable_fields(type(config)):
        if bindable.nested is None:
            continue
        nested = getattr(config, bindable.name, None)
        if not isinstance(nested, Config):
            continue
        sub_store = store.prefix_view(bindable.nested.prefix)
        nested.attach_settings(sub_store, registry, encoding=encoding)
        _attach_nested(nested, sub_store, registry, encoding)
