"""propbind — bind ``key=value`` settings files onto typed pydantic configs."""

from propbind.binding import (
    Binder,
    Config,
    Converter,
    ConverterRegistry,
    FailureReport,
    Nested,
    Setting,
    SettingsStore,
    bind,
    bind_strict,
    default_registry,
    dump,
    render,
)
from propbind.binding.errors import (
    AmbiguousConverterError,
    BindingError,
    ConfigDeclarationError,
    ConversionFailedError,
    FieldUnassignableError,
    MissingRequiredValueError,
    NestedBindFailedError,
    NestingCycleError,
    PersistenceError,
    PropbindError,
    SerializationError,
    SourceUnreadableError,
    UnsupportedTypeError,
)
from propbind.services.preparer import ConfigPreparer

__version__ = "0.1.0"

__all__ = [
    "AmbiguousConverterError",
    "Binder",
    "BindingError",
    "Config",
    "ConfigDeclarationError",
    "ConfigPreparer",
    "ConversionFailedError",
    "Converter",
    "ConverterRegistry",
    "FailureReport",
    "FieldUnassignableError",
    "MissingRequiredValueError",
    "Nested",
    "NestedBindFailedError",
    "NestingCycleError",
    "PersistenceError",
    "PropbindError",
    "SerializationError",
    "Setting",
    "SettingsStore",
    "SourceUnreadableError",
    "UnsupportedTypeError",
    "__version__",
    "bind",
    "bind_strict",
    "default_registry",
    "dump",
    "render",
]
