"""Atomic persistence of rendered settings.

The text is written to a temporary sibling file which then replaces the
target in one ``os.replace`` call, so readers never observe a half-written
file. Parent directories are created on demand.

The replacement keeps the permission bits of the file it replaces; a new
file gets the mode a plain ``open`` would give it under the current umask.
"""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from pathlib import Path

from propbind.binding.errors import PersistenceError
from propbind.binding.model import DEFAULT_ENCODING

logger = logging.getLogger(__name__)


def _target_mode(path: Path) -> int:
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def write_atomic(path: Path, text: str, *, encoding: str = DEFAULT_ENCODING) -> Path:
    """Write *text* to *path* with *encoding*, ending with a newline.

    Returns the written path.

    Raises:
        PersistenceError: The directory is not writable, the codec is
            unknown, or the text cannot be encoded with it.
    """
    if text and not text.endswith("\n"):
        text += "\n"
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = text.encode(encoding)
        mode = _target_mode(path)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(payload)
            os.chmod(tmp_name, mode)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except (OSError, LookupError, UnicodeEncodeError) as exc:
        msg = f"Cannot write settings to {path}: {exc}"
        raise PersistenceError(msg) from exc
    logger.debug("Stored %d bytes to %s", len(payload), path)
    return path
