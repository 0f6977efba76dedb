"""Config base model — the bindable object graph.

Attributes annotated with :class:`Setting` map to settings keys the way
Pydantic Settings maps fields to environment variables; attributes
annotated with :class:`Nested` hold a sub-config fed from a key prefix.
Private attributes (leading underscore) never bind.

After a :class:`ConfigPreparer` fills an instance, the instance keeps the
store, registry, encoding and target path it was filled from, so it can
persist itself with :meth:`Config.store`.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, PrivateAttr

from propbind.binding.converters import ConverterRegistry, default_registry
from propbind.binding.store import SettingsStore

DEFAULT_FILE_NAME = "config.cfg"
DEFAULT_ENCODING = "utf-8"


class Config(BaseModel):
    """Base class for user-declared configuration objects."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    _settings: SettingsStore = PrivateAttr(default_factory=SettingsStore)
    _registry: ConverterRegistry | None = PrivateAttr(default=None)
    _encoding: str = PrivateAttr(default=DEFAULT_ENCODING)
    _target: Path = PrivateAttr(default_factory=lambda: Path(DEFAULT_FILE_NAME))

    def attach_settings(
        self,
        settings: SettingsStore,
        registry: ConverterRegistry,
        *,
        encoding: str = DEFAULT_ENCODING,
        target: Path | None = None,
    ) -> None:
        """Remember the context this config was bound from."""
        self._settings = settings
        self._registry = registry
        self._encoding = encoding
        if target is not None:
            self._target = target

    @property
    def settings_registry(self) -> ConverterRegistry:
        if self._registry is None:
            self._registry = default_registry()
        return self._registry

    @property
    def settings_encoding(self) -> str:
        return self._encoding

    @property
    def settings_path(self) -> Path:
        return self._target

    def get_setting(self, key: str, default: str | None = None) -> str | None:
        """Raw setting value; *default* replaces absent or empty values."""
        return self._settings.get(key, default)

    def get_settings(self, prefix: str) -> dict[str, str]:
        """Raw settings starting with *prefix*, prefix stripped."""
        return self._settings.prefix_view(prefix).as_dict()

    def merged_settings(self) -> dict[str, str]:
        """Source settings overlaid with the live field values."""
        from propbind.binding.serializer import dump

        merged = self._settings.as_dict()
        merged.update(dump(self, self.settings_registry))
        return merged

    def to_text(self) -> str:
        """Render :meth:`merged_settings` as sorted ``key=value`` lines."""
        from propbind.binding.serializer import render

        return render(self.merged_settings())

    def store(self, path: Path | str | None = None) -> Path:
        """Persist the merged settings to *path* (or the remembered target)."""
        from propbind.infrastructure.persistence import write_atomic

        destination = Path(path) if path is not None else self._target
        return write_atomic(destination, self.to_text(), encoding=self._encoding)

    def __str__(self) -> str:
        return self._settings.to_text()
