"""Binding engine — converters, settings store, field resolution, binder, serializer.

This layer depends on stdlib and pydantic; file reading and writing are
imported lazily from infrastructure.
It must never import from services, commands, output or plugins.
"""

from propbind.binding.binder import Binder, FailureReport, bind, bind_strict
from propbind.binding.converters import Converter, ConverterRegistry, default_registry
from propbind.binding.fields import BindableField, ordered_bindable_fields
from propbind.binding.metadata import Nested, Setting
from propbind.binding.model import Config
from propbind.binding.serializer import dump, render
from propbind.binding.store import SettingsStore

__all__ = [
    "BindableField",
    "Binder",
    "Config",
    "Converter",
    "ConverterRegistry",
    "FailureReport",
    "Nested",
    "Setting",
    "SettingsStore",
    "bind",
    "bind_strict",
    "default_registry",
    "dump",
    "ordered_bindable_fields",
    "render",
]
