"""Field markers attached with ``typing.Annotated``.

Binding metadata travels in the field annotation (the same place Pydantic
keeps constraints), so a config class reads like any other model::

    class ServerConfig(Config):
        port: Annotated[int, Setting(descriptor="server_port", default="8080")] = 0
        tls: Annotated[TlsConfig | None, Nested(prefix="tls.")] = None
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Setting:
    """Bind a field to one settings key.

    Attributes:
        descriptor: Key in the settings source. Empty or None means the
            field's own name is used.
        default: Raw string used when the key is absent or empty.
        optional: Missing or malformed values are skipped silently.
    """

    descriptor: str | None = None
    default: str | None = None
    optional: bool = False

    def key_for(self, field_name: str) -> str:
        return self.descriptor or field_name


@dataclass(frozen=True, slots=True)
class Nested:
    """Populate a nested config from the keys starting with *prefix*.

    The prefix is stripped before the nested config sees the keys.
    """

    prefix: str
