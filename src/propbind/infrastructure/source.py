"""Settings source loading — ``key=value`` line parsing with encoding reload.

File format:
  - one ``key=value`` pair per line, split on the first ``=``
    (values may contain ``=``)
  - lines whose stripped text starts with the comment sentinel are skipped
  - blank lines and lines without ``=`` are skipped
  - a U+FEFF byte order mark (e.g. "UTF-8 with BOM" editors) is dropped
  - keys are always trimmed; values are trimmed unless ``trim=False``

A reserved ``encoding`` entry whose codec differs from UTF-8 triggers a
second full read of the same file under that codec, before any binding.
"""

from __future__ import annotations

import codecs
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from propbind.binding.errors import SourceUnreadableError
from propbind.binding.model import DEFAULT_ENCODING

ENCODING_ENTRY = "encoding"
COMMENT_DESIGNATOR = "#"

_BOM = "\ufeff"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceData:
    """Parsed settings of one file plus the encoding they were read with."""

    path: Path
    encoding: str
    settings: dict[str, str]


def parse_lines(
    lines: Iterable[str],
    *,
    comment: str = COMMENT_DESIGNATOR,
    trim: bool = True,
) -> dict[str, str]:
    """Parse ``key=value`` lines into a dict; later keys overwrite earlier ones."""
    settings: dict[str, str] = {}
    for line in lines:
        line = line.rstrip("\r\n").replace(_BOM, "")
        stripped = line.strip()
        if not stripped or (comment and stripped.startswith(comment)):
            continue
        key, sep, value = line.partition("=")
        key = key.strip()
        if not sep or not key:
            continue
        settings[key] = value.strip() if trim else value
    return settings


def codec_name(encoding: str) -> str:
    """Canonical codec name, raising SourceUnreadableError for unknown codecs."""
    try:
        return codecs.lookup(encoding).name
    except LookupError as exc:
        msg = f"Unknown encoding {encoding!r}"
        raise SourceUnreadableError(msg) from exc


def _read(path: Path, encoding: str, *, comment: str, trim: bool, errors: str = "strict") -> dict[str, str]:
    try:
        with path.open(encoding=encoding, errors=errors) as handle:
            return parse_lines(handle, comment=comment, trim=trim)
    except (OSError, UnicodeDecodeError) as exc:
        msg = f"Cannot read settings from {path}: {exc}"
        raise SourceUnreadableError(msg) from exc


def read_source(
    path: Path,
    encoding: str | None = None,
    *,
    comment: str = COMMENT_DESIGNATOR,
    trim: bool = True,
) -> SourceData:
    """Read and parse the settings file at *path*.

    With an explicit *encoding* the file is read once with it. Otherwise it
    is read as UTF-8 (undecodable bytes replaced) and, if it declares a
    different codec in its ``encoding`` entry, read again with that codec.

    Raises:
        SourceUnreadableError: The file is missing, unreadable, undecodable
            or declares an unknown codec.
    """
    if encoding is not None:
        name = codec_name(encoding)
        return SourceData(path, name, _read(path, name, comment=comment, trim=trim))

    default = codec_name(DEFAULT_ENCODING)
    settings = _read(path, default, comment=comment, trim=trim, errors="replace")
    declared = settings.get(ENCODING_ENTRY, "")
    if declared and codec_name(declared) != default:
        name = codec_name(declared)
        logger.debug("Reloading %s with declared encoding %s", path, name)
        return SourceData(path, name, _read(path, name, comment=comment, trim=trim))
    return SourceData(path, default, settings)
