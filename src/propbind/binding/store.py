"""Settings store — flat ``key -> raw string`` mapping fed by one or more sources.

Later sources overwrite earlier keys. During binding the store is only
read; prefix views share values with their parent and are never mutated
by the binder.
"""

from __future__ import annotations

import os
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from propbind.binding.converters import ConverterRegistry


class SettingsStore:
    """Ordered ``str -> str`` settings with prefix scoping."""

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(
        self,
        source: Mapping[str, Any] | SettingsStore | os.PathLike[str],
        *,
        registry: ConverterRegistry | None = None,
    ) -> None:
        """Merge *source* into the store, overwriting existing keys.

        Mapping values that are not strings are converted through
        *registry* (the built-in registry when omitted); ``None`` becomes an
        empty string. A path is read with :func:`read_source` and raises
        :class:`SourceUnreadableError` when it cannot be read.
        """
        if isinstance(source, SettingsStore):
            self._data.update(source._data)
            return
        if isinstance(source, os.PathLike):
            from propbind.infrastructure.source import read_source

            self._data.update(read_source(Path(source)).settings)
            return
        self._data.update(_stringify(source, registry))

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, key: str, default: str | None = None) -> str | None:
        """Return the raw value for *key*.

        With a *default*, absent and empty values both yield the default.
        """
        value = self._data.get(key)
        if default is not None and not value:
            return default
        return value

    def prefix_view(self, prefix: str) -> SettingsStore:
        """Keys starting with *prefix*, with the prefix stripped."""
        cut = len(prefix)
        return SettingsStore({key[cut:]: value for key, value in self._data.items() if key.startswith(prefix)})

    def as_dict(self) -> dict[str, str]:
        return dict(self._data)

    def to_text(self) -> str:
        from propbind.binding.serializer import render

        return render(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._data))

    def __repr__(self) -> str:
        return f"SettingsStore({len(self._data)} keys)"


def _stringify(source: Mapping[str, Any], registry: ConverterRegistry | None) -> dict[str, str]:
    if registry is None:
        from propbind.binding.converters import default_registry

        registry = default_registry()
    converted: dict[str, str] = {}
    for key, value in source.items():
        if value is None:
            converted[str(key)] = ""
        elif isinstance(value, str):
            converted[str(key)] = value
        else:
            converted[str(key)] = registry.to_string(value)
    return converted
