"""Tests for atomic persistence of rendered settings."""

from __future__ import annotations

import os
import stat
from pathlib import Path

import pytest

from propbind.binding.errors import PersistenceError
from propbind.infrastructure.persistence import write_atomic


class TestWriteAtomic:
    def test_writes_with_trailing_newline(self, tmp_path: Path) -> None:
        target = tmp_path / "out.cfg"
        assert write_atomic(target, "a=1\nb=2") == target
        assert target.read_text(encoding="utf-8") == "a=1\nb=2\n"

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        target = tmp_path / "deep" / "er" / "out.cfg"
        write_atomic(target, "a=1")
        assert target.is_file()

    def test_replaces_existing_file(self, tmp_path: Path) -> None:
        target = tmp_path / "out.cfg"
        target.write_text("old=1\n", encoding="utf-8")
        write_atomic(target, "new=2")
        assert target.read_text(encoding="utf-8") == "new=2\n"
        assert [p.name for p in tmp_path.iterdir()] == ["out.cfg"]

    def test_encoding(self, tmp_path: Path) -> None:
        target = tmp_path / "out.cfg"
        write_atomic(target, "k=äö", encoding="latin-1")
        assert target.read_bytes() == "k=äö\n".encode("latin-1")

    def test_unencodable_text(self, tmp_path: Path) -> None:
        with pytest.raises(PersistenceError):
            write_atomic(tmp_path / "out.cfg", "k=€", encoding="latin-1")
        assert list(tmp_path.iterdir()) == []

    def test_unknown_codec(self, tmp_path: Path) -> None:
        with pytest.raises(PersistenceError):
            write_atomic(tmp_path / "out.cfg", "k=v", encoding="klingon-8")

    def test_empty_text(self, tmp_path: Path) -> None:
        target = tmp_path / "empty.cfg"
        write_atomic(target, "")
        assert target.read_text(encoding="utf-8") == ""


@pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
class TestFileMode:
    def test_existing_mode_is_kept(self, tmp_path: Path) -> None:
        target = tmp_path / "shared.cfg"
        target.write_text("old=1\n", encoding="utf-8")
        target.chmod(0o644)
        write_atomic(target, "new=2")
        assert stat.S_IMODE(target.stat().st_mode) == 0o644

    def test_restrictive_mode_is_kept(self, tmp_path: Path) -> None:
        target = tmp_path / "secret.cfg"
        target.write_text("old=1\n", encoding="utf-8")
        target.chmod(0o600)
        write_atomic(target, "new=2")
        assert stat.S_IMODE(target.stat().st_mode) == 0o600

    def test_new_file_follows_umask(self, tmp_path: Path) -> None:
        umask = os.umask(0o022)
        try:
            target = write_atomic(tmp_path / "fresh.cfg", "a=1")
        finally:
            os.umask(umask)
        assert stat.S_IMODE(target.stat().st_mode) == 0o644
