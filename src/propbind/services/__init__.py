"""Service layer — preparer facade and CLI-facing operations returning ServiceResult.

Services may import from binding, infrastructure and plugins.
They must never import from commands or output.
"""

from propbind.services.preparer import ConfigPreparer

__all__ = ["ConfigPreparer"]
