"""Tests for TOML configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from shared.config import ElfscopeConfig


def test_defaults() -> None:
    cfg = ElfscopeConfig()
    assert cfg.global_settings.log_level == "INFO"
    assert cfg.global_settings.log_file == ""
    assert cfg.global_settings.max_workers == 4
    assert cfg.elfscope.max_file_size == 256 * 1024 * 1024
    assert cfg.elfscope.strict_file_type is False
    assert cfg.elfscope.show_program_headers is True


def test_load_sections(tmp_path: Path) -> None:
    path = tmp_path / "elfscope.toml"
    path.write_text(
        "[global]\n"
        'log_level = "DEBUG"\n'
        "max_workers = 2\n"
        "\n"
        "[elfscope]\n"
        "strict_file_type = true\n"
        "show_section_headers = false\n"
        "colour_scheme = \"dark\"\n",
        encoding="utf-8",
    )
    cfg = ElfscopeConfig.load(path)
    assert cfg.global_settings.log_level == "DEBUG"
    assert cfg.global_settings.max_workers == 2
    assert cfg.elfscope.strict_file_type is True
    assert cfg.elfscope.show_section_headers is False
    # untouched keys keep defaults
    assert cfg.elfscope.show_program_headers is True


def test_missing_explicit_path(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        ElfscopeConfig.load(tmp_path / "absent.toml")


def test_to_dict() -> None:
    data = ElfscopeConfig().to_dict()
    assert set(data) == {"global_settings", "elfscope"}
    assert data["elfscope"]["strict_file_type"] is False
