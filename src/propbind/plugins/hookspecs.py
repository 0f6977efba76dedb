"""Pluggy hook specifications for propbind converter plugins.

One setup-time hook lets installed packages contribute converters for
their own value types.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from propbind.binding.converters import Converter

hookspec = pluggy.HookspecMarker("propbind")
hookimpl = pluggy.HookimplMarker("propbind")


class PropbindHookSpec:
    """Hook specifications for the propbind plugin system."""

    @hookspec
    def register_converters(self) -> Mapping[type, Converter] | None:
        """Return ``{value type: Converter}`` to add to converter registries.

        Plugin converters replace built-ins registered for the same exact type.
        """
