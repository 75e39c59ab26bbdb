"""Tests for ConversionSettings and SettingsLoader."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from pathlib import Path

from promptshape.core.config import ConversionSettings, SettingsLoader
from promptshape.core.errors import SettingsError

_VALID_YAML = """\
model: gemini-1.5-pro
use_system_prompt: false
prefill: "Sure,"
names:
  user_name: Bob
  char_name: Carl
  group_names: [Dana]
params:
  temperature: 0.5
  top_k: 32
"""


class TestConversionSettings:
    def test_defaults(self) -> None:
        settings = ConversionSettings()
        assert settings.use_system_prompt is True
        assert settings.use_tool_calling is False
        assert settings.api_format == "openai"
        assert settings.params.temperature == 0.8
        assert settings.params.max_tokens == 8000

    def test_format_detected_from_model(self) -> None:
        assert ConversionSettings(model="claude-3-haiku").api_format == "claude"

    def test_explicit_format_wins(self) -> None:
        assert ConversionSettings(model="gemini-pro", format="openai").api_format == "openai"


class TestSettingsLoader:
    def test_load_valid(self, tmp_path: Path) -> None:
        f = tmp_path / "settings.yaml"
        f.write_text(_VALID_YAML)
        settings = SettingsLoader(f).load()
        assert settings.model == "gemini-1.5-pro"
        assert settings.use_system_prompt is False
        assert settings.names.char_name == "Carl"
        assert settings.names.starts_with_group_name("Dana: hi")
        assert settings.params.temperature == 0.5
        assert settings.params.top_k == 32
        assert settings.params.max_tokens == 8000

    def test_env_var_interpolation(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CHAR_NAME", "Zed")
        f = tmp_path / "settings.yaml"
        f.write_text(_VALID_YAML.replace("Carl", "${CHAR_NAME}"))
        assert SettingsLoader(f).load().names.char_name == "Zed"

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        f = tmp_path / "settings.yaml"
        f.write_text("")
        assert SettingsLoader(f).load() == ConversionSettings()

    def test_file_not_found(self, tmp_path: Path) -> None:
        with pytest.raises(SettingsError, match="Cannot read"):
            SettingsLoader(tmp_path / "missing.yaml").load()

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        f = tmp_path / "bad.yaml"
        f.write_text("{{{{invalid")
        with pytest.raises(SettingsError, match="YAML parse error"):
            SettingsLoader(f).load()

    def test_yaml_not_mapping(self, tmp_path: Path) -> None:
        f = tmp_path / "list.yaml"
        f.write_text("- item1\n- item2\n")
        with pytest.raises(SettingsError, match="must be a mapping"):
            SettingsLoader(f).load()

    def test_unknown_format_rejected(self, tmp_path: Path) -> None:
        f = tmp_path / "settings.yaml"
        f.write_text("format: mistral\n")
        with pytest.raises(SettingsError):
            SettingsLoader(f).load()
