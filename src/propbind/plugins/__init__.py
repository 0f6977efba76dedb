"""Extension layer — converter plugins via pluggy.

Discovery: entry_points (pip-installed) in the ``propbind.converters`` group.
INVARIANT: Plugin failures are warnings, never errors.
"""

from propbind.plugins.hookspecs import hookimpl
from propbind.plugins.manager import PluginManager

__all__ = ["PluginManager", "hookimpl"]
