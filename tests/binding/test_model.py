"""Tests for the Config base model and its attached settings context."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

from propbind.binding.converters import default_registry
from propbind.binding.metadata import Setting
from propbind.binding.model import DEFAULT_ENCODING, DEFAULT_FILE_NAME, Config
from propbind.binding.store import SettingsStore


class Plain(Config):
    name: Annotated[str | None, Setting()] = None


class TestDefaults:
    def test_unattached_context(self) -> None:
        config = Plain()
        assert config.settings_encoding == DEFAULT_ENCODING
        assert config.settings_path == Path(DEFAULT_FILE_NAME)
        assert config.get_setting("name") is None
        assert config.get_settings("x.") == {}

    def test_merged_settings_without_store(self) -> None:
        assert Plain(name="n").merged_settings() == {"name": "n"}


class TestAttachedSettings:
    def _attached(self) -> Plain:
        config = Plain(name="live")
        store = SettingsStore({"name": "raw", "extra.a": "1", "extra.b": "", "other": "o"})
        config.attach_settings(store, default_registry(), encoding="latin-1", target=Path("out.cfg"))
        return config

    def test_raw_access(self) -> None:
        config = self._attached()
        assert config.get_setting("other") == "o"
        assert config.get_setting("extra.b", "fallback") == "fallback"
        assert config.get_settings("extra.") == {"a": "1", "b": ""}

    def test_context_properties(self) -> None:
        config = self._attached()
        assert config.settings_encoding == "latin-1"
        assert config.settings_path == Path("out.cfg")

    def test_live_values_overlay_store(self) -> None:
        merged = self._attached().merged_settings()
        assert merged["name"] == "live"
        assert merged["other"] == "o"

    def test_to_text_and_str(self) -> None:
        config = self._attached()
        assert config.to_text().splitlines()[-2:] == ["name=live", "other=o"]
        assert "name=raw" in str(config)

    def test_store_writes_merged_view(self, tmp_path: Path) -> None:
        config = self._attached()
        written = config.store(tmp_path / "saved.cfg")
        text = written.read_text(encoding="latin-1")
        assert text.endswith("\n")
        assert "name=live\n" in text
        assert "extra.a=1\n" in text
