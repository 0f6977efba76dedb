"""Converter registry — string/value conversion by nearest registered supertype.

Resolution rules:
  1. An exact registration for the requested type always wins.
  2. Otherwise every registered strict supertype is a candidate; candidates
     that are supertypes of another candidate are dropped.
  3. Exactly one survivor is returned. None raises UnsupportedTypeError,
     several unrelated survivors raise AmbiguousConverterError.

Registries are values: each binding pass receives one, and nested passes
get a ``child()`` scope whose registrations never leak into the parent.
"""

from __future__ import annotations

import builtins
import importlib
import types
from collections import ChainMap
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import Annotated, Any, Union, get_args, get_origin, get_type_hints

from pydantic import AnyUrl, TypeAdapter

from propbind.binding.errors import (
    AmbiguousConverterError,
    ConversionFailedError,
    PropbindError,
    UnsupportedTypeError,
)

LIST_SEPARATOR = ","

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

_TRUE_WORDS = frozenset({"true", "yes", "on", "1"})
_FALSE_WORDS = frozenset({"false", "no", "off", "0"})


@dataclass(frozen=True, slots=True)
class Converter:
    """Pair of pure functions converting a value to text and back."""

    to_string: Callable[[Any], str]
    to_value: Callable[[str], Any]


def declared_type(annotation: Any) -> Any:
    """Strip ``Annotated`` and ``Optional`` wrappers, keeping generic arguments.

    ``Annotated[list[int] | None, ...]`` becomes ``list[int]``.
    """
    origin = get_origin(annotation)
    if origin is Annotated:
        return declared_type(get_args(annotation)[0])
    if origin is Union or origin is types.UnionType:
        members = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(members) == 1:
            return declared_type(members[0])
    return annotation


def value_type(annotation: Any) -> Any:
    """Reduce a field annotation to the type used for converter lookup.

    ``X | None`` and ``Optional[X]`` become ``X``; ``Annotated[X, ...]``
    becomes ``X``; parametrised generics become their origin
    (``list[str]`` -> ``list``, ``type[Any]`` -> ``type``).
    """
    declared = declared_type(annotation)
    origin = get_origin(declared)
    if origin is None or origin is Union or origin is types.UnionType:
        return declared
    return origin


def type_name(tp: Any) -> str:
    """Readable, fully-qualified name for error messages."""
    if isinstance(tp, type):
        if tp.__module__ == "builtins":
            return tp.__qualname__
        return f"{tp.__module__}.{tp.__qualname__}"
    return repr(tp)


class ConverterRegistry:
    """Maps value types to converters with supertype fallback."""

    def __init__(
        self,
        converters: Mapping[type, Converter] | None = None,
        *,
        _chain: ChainMap[type, Converter] | None = None,
    ) -> None:
        self._converters: ChainMap[type, Converter] = _chain if _chain is not None else ChainMap({})
        if converters:
            self.register_many(converters)

    def register(self, tp: type, converter: Converter) -> ConverterRegistry:
        """Register *converter* for exactly *tp*, replacing any previous one."""
        if not isinstance(tp, type):
            msg = f"Converters can only be registered for classes, got {tp!r}"
            raise TypeError(msg)
        self._converters[tp] = converter
        return self

    def register_many(self, converters: Mapping[type, Converter]) -> ConverterRegistry:
        for tp, converter in converters.items():
            self.register(tp, converter)
        return self

    def child(self) -> ConverterRegistry:
        """Return a fresh scope that inherits every converter of this one."""
        return ConverterRegistry(_chain=self._converters.new_child())

    def registered_types(self) -> list[type]:
        return sorted(self._converters, key=type_name)

    def __contains__(self, tp: object) -> bool:
        return tp in self._converters

    def resolve(self, tp: Any) -> Converter:
        """Return the converter for *tp* or its nearest registered supertype."""
        target = value_type(tp)
        exact = self._converters.get(target)
        if exact is not None:
            return exact
        if not isinstance(target, type):
            msg = f"Type {type_name(target)} is not supported"
            raise UnsupportedTypeError(msg)

        candidates = [registered for registered in self._converters if issubclass(target, registered)]
        most_specific = [
            candidate
            for candidate in candidates
            if not any(other is not candidate and issubclass(other, candidate) for other in candidates)
        ]
        if not most_specific:
            msg = f"Type {type_name(target)} is not supported"
            raise UnsupportedTypeError(msg)
        if len(most_specific) > 1:
            names = ", ".join(sorted(type_name(c) for c in most_specific))
            msg = f"Type {type_name(target)} matches several unrelated converters: {names}"
            raise AmbiguousConverterError(msg)
        return self._converters[most_specific[0]]

    def to_value(self, tp: Any, raw: str) -> Any:
        """Convert *raw* into *tp*, wrapping converter failures.

        A supertype converter's result is coerced into the declared type by
        calling the type on it, and list or tuple items are converted to their
        declared item types. Results that cannot be coerced are conversion
        failures, never silently kept.
        """
        converter = self.resolve(tp)
        try:
            return self._coerce(declared_type(tp), converter.to_value(raw))
        except PropbindError:
            raise
        except Exception as exc:
            msg = f"cannot convert {raw!r} to {type_name(value_type(tp))}: {exc}"
            raise ConversionFailedError(msg) from exc

    def _coerce(self, target: Any, value: Any) -> Any:
        origin = get_origin(target)
        if origin is not None:
            args = get_args(target)
            value = self._coerce(origin, value)
            if origin is type and args and isinstance(args[0], type) and not issubclass(value, args[0]):
                msg = f"{type_name(value)} is not a subclass of {type_name(args[0])}"
                raise TypeError(msg)
            if origin in (list, tuple) and args:
                return origin(self._coerce_items(origin, args, value))
            return value
        if not isinstance(target, type) or isinstance(value, target):
            return value
        if issubclass(target, tuple) and hasattr(target, "_fields"):
            hints = get_type_hints(target)
            items = zip(target._fields, value, strict=True)
            return target._make(self._item(hints.get(name, Any), item) for name, item in items)
        return target(value)

    def _coerce_items(self, origin: type, args: tuple[Any, ...], items: Any) -> list[Any]:
        if origin is tuple and not (len(args) == 2 and args[1] is Ellipsis):
            if len(args) != len(items):
                msg = f"expected {len(args)} items, got {len(items)}"
                raise ValueError(msg)
            item_types = args
        else:
            item_types = (args[0],) * len(items)
        return [self._item(tp, item) for tp, item in zip(item_types, items, strict=True)]

    def _item(self, tp: Any, item: Any) -> Any:
        if tp is Any:
            return item
        if isinstance(item, str):
            return self.to_value(tp, item)
        return self._coerce(declared_type(tp), item)

    def to_string(self, value: Any) -> str:
        """Convert *value* to text using the converter for its runtime type."""
        converter = self.resolve(type(value))
        try:
            return converter.to_string(value)
        except Exception as exc:
            msg = f"cannot convert {type_name(type(value))} value to text: {exc}"
            raise ConversionFailedError(msg) from exc


# ---------------------------------------------------------------------------
# Built-in conversions
# ---------------------------------------------------------------------------


def parse_int(raw: str) -> int:
    value = int(raw.strip())
    if not _INT64_MIN <= value <= _INT64_MAX:
        msg = f"{value} is outside the signed 64-bit range"
        raise ValueError(msg)
    return value


def parse_bool(raw: str) -> bool:
    word = raw.strip().lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    msg = f"{raw!r} is not a boolean"
    raise ValueError(msg)


def format_bool(value: bool) -> str:
    return "true" if value else "false"


def split_list(raw: str) -> list[str]:
    # Not quote-aware: values containing the separator cannot round-trip.
    return raw.split(LIST_SEPARATOR)


def join_items(items: Any) -> str:
    return LIST_SEPARATOR.join(str(item) for item in items)


def load_type(name: str) -> type:
    """Look up a class by fully-qualified name (``pathlib.Path``).

    Names without a module part resolve against :mod:`builtins`.
    """
    parts = name.strip().split(".")
    if len(parts) == 1:
        found = getattr(builtins, parts[0], None)
    else:
        found = None
        for split in range(len(parts) - 1, 0, -1):
            try:
                found = importlib.import_module(".".join(parts[:split]))
            except ImportError:
                continue
            for attr in parts[split:]:
                found = getattr(found, attr, None)
            break
    if not isinstance(found, type):
        msg = f"no class named {name!r}"
        raise ValueError(msg)
    return found


def format_type(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


_URL_ADAPTER: TypeAdapter[AnyUrl] = TypeAdapter(AnyUrl)


def parse_url(raw: str) -> AnyUrl:
    return _URL_ADAPTER.validate_python(raw.strip())


def builtin_converters() -> dict[type, Converter]:
    """Converters every registry starts with."""
    return {
        int: Converter(str, parse_int),
        bool: Converter(format_bool, parse_bool),
        float: Converter(repr, float),
        str: Converter(str, str),
        list: Converter(join_items, split_list),
        tuple: Converter(join_items, lambda raw: tuple(split_list(raw))),
        type: Converter(format_type, load_type),
        PurePath: Converter(str, PurePath),
        Path: Converter(str, Path),
        AnyUrl: Converter(str, parse_url),
    }


def default_registry() -> ConverterRegistry:
    """Create a new registry pre-populated with the built-in converters."""
    return ConverterRegistry(builtin_converters())
