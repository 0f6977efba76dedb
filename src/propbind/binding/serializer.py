"""Serializer — the inverse of the binder.

Walks the same field order, converts current values to text and renders
them as ``key=value`` lines sorted by key. Nested configs are dumped
recursively and their keys re-prefixed; an unset nested field is dumped
from a fresh default instance so templates always list every key.
"""

from __future__ import annotations

from collections.abc import Mapping

from propbind.binding.converters import ConverterRegistry, default_registry, type_name
from propbind.binding.errors import (
    ConversionFailedError,
    NestingCycleError,
    SerializationError,
    UnsupportedTypeError,
)
from propbind.binding.fields import ordered_bindable_fields
from propbind.binding.model import Config


def dump(config: Config, registry: ConverterRegistry | None = None) -> dict[str, str]:
    """Return ``key -> text`` for every bindable field of *config*.

    ``None`` values become empty strings. When several fields share a key,
    the one later in resolver order (the most derived) wins.

    Raises:
        SerializationError: Some values have no converter.
    """
    unconvertible: dict[str, str] = {}
    result = _dump(config, registry or default_registry(), (), "", unconvertible)
    if unconvertible:
        listing = ", ".join(f"{key}({name})" for key, name in sorted(unconvertible.items()))
        msg = f"The following settings could not be converted to text: {listing}"
        raise SerializationError(msg)
    return result


def _dump(
    config: Config,
    registry: ConverterRegistry,
    stack: tuple[type, ...],
    path: str,
    unconvertible: dict[str, str],
) -> dict[str, str]:
    config_type = type(config)
    if config_type in stack:
        msg = f"{config_type.__qualname__} is nested inside itself"
        raise NestingCycleError(msg)

    out: dict[str, str] = {}
    for bindable in ordered_bindable_fields(config_type):
        value = getattr(config, bindable.name, None)
        if bindable.nested is not None:
            nested = value if value is not None else bindable.value_type.model_construct()
            prefix = bindable.nested.prefix
            for key, text in _dump(nested, registry, (*stack, config_type), path + prefix, unconvertible).items():
                out[prefix + key] = text
            continue

        if value is None:
            out[bindable.key] = ""
            continue
        try:
            out[bindable.key] = registry.to_string(value)
        except (UnsupportedTypeError, ConversionFailedError):
            unconvertible[path + bindable.key] = type_name(type(value))
    return out


def render(settings: Mapping[str, str]) -> str:
    """Render *settings* as ``key=value`` lines sorted by key."""
    return "\n".join(f"{key}={settings[key]}" for key in sorted(settings))
