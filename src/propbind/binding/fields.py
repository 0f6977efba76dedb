"""Field resolver — the ordered table of bindable fields per config class.

Ordering: fields declared on an ancestor come before fields declared on a
descendant; fields of one class keep declaration order. A field redeclared
by a descendant moves to the descendant's position. When several fields
resolve to the same key, the last one in this order wins on serialization.

The table is built once per class from ``model_fields`` and cached.
"""

from __future__ import annotations

import functools
import inspect
from dataclasses import dataclass
from typing import Any

from propbind.binding.converters import type_name, value_type
from propbind.binding.errors import ConfigDeclarationError
from propbind.binding.metadata import Nested, Setting
from propbind.binding.model import Config


@dataclass(frozen=True, slots=True)
class BindableField:
    """One resolved field of a config class."""

    name: str
    key: str
    annotation: Any
    value_type: Any
    owner: type[Config]
    setting: Setting | None = None
    nested: Nested | None = None

    @property
    def is_nested(self) -> bool:
        return self.nested is not None

    @property
    def optional(self) -> bool:
        return self.setting is not None and self.setting.optional


def _declaration_order(config_type: type[Config]) -> list[tuple[str, type]]:
    """``(field name, declaring class)`` pairs, ancestors first."""
    fields = config_type.model_fields
    order: dict[str, type] = {}
    for klass in reversed(config_type.__mro__):
        for name in inspect.get_annotations(klass):
            if name not in fields:
                continue
            # A redeclaration moves the field behind everything declared before it.
            order.pop(name, None)
            order[name] = klass
    return list(order.items())


def _markers(config_type: type[Config], name: str) -> tuple[Setting | None, Nested | None]:
    setting: Setting | None = None
    nested: Nested | None = None
    for marker in config_type.model_fields[name].metadata:
        if isinstance(marker, Setting):
            setting = marker
        elif isinstance(marker, Nested):
            nested = marker
    return setting, nested


@functools.cache
def ordered_bindable_fields(config_type: type[Config]) -> tuple[BindableField, ...]:
    """Return the bindable fields of *config_type* in binding order.

    Raises:
        ConfigDeclarationError: A field carries both markers, or a
            ``Nested`` field is not typed as a Config subclass.
    """
    resolved: list[BindableField] = []
    for name, owner in _declaration_order(config_type):
        setting, nested = _markers(config_type, name)
        if setting is None and nested is None:
            continue
        qualified = f"{config_type.__qualname__}.{name}"
        if setting is not None and nested is not None:
            msg = f"{qualified} is marked both Setting and Nested"
            raise ConfigDeclarationError(msg)

        annotation = config_type.model_fields[name].annotation
        target = value_type(annotation)
        if nested is not None:
            if not (isinstance(target, type) and issubclass(target, Config)):
                msg = f"{qualified} is Nested but typed {type_name(target)}, not a Config"
                raise ConfigDeclarationError(msg)
            key = nested.prefix
        else:
            assert setting is not None
            key = setting.key_for(name)

        resolved.append(
            BindableField(
                name=name,
                key=key,
                annotation=annotation,
                value_type=target,
                owner=owner,
                setting=setting,
                nested=nested,
            )
        )
    return tuple(resolved)
