"""Tests for render configuration."""

from __future__ import annotations

import pytest

from rmexport.config import DEFAULT_CONFIG, ExportConfig, load_config
from rmexport.constants import DEVICE_HEIGHT, DEVICE_WIDTH


class TestExportConfig:
    def test_defaults(self) -> None:
        assert DEFAULT_CONFIG.page_width == DEVICE_WIDTH
        assert DEFAULT_CONFIG.page_height == DEVICE_HEIGHT
        assert DEFAULT_CONFIG.line_cap == "round"
        assert DEFAULT_CONFIG.line_join == "round"
        assert DEFAULT_CONFIG.width_scale == 1.0

    def test_frozen(self) -> None:
        with pytest.raises(AttributeError):
            DEFAULT_CONFIG.width_scale = 2.0

    @pytest.mark.parametrize("kwargs", [
        {"line_cap": "pointy"},
        {"line_join": "pointy"},
        {"page_width": 0},
        {"page_height": -1},
    ])
    def test_invalid(self, kwargs) -> None:
        with pytest.raises(ValueError):
            ExportConfig(**kwargs)


class TestLoadConfig:
    def test_partial_override(self, tmp_path) -> None:
        path = tmp_path / "render.toml"
        path.write_text('[page]\nwidth = 500\n\n[stroke]\nwidth_scale = 0.2\n')
        config = load_config(path)
        assert config.page_width == 500.0
        assert config.page_height == DEVICE_HEIGHT
        assert config.width_scale == pytest.approx(0.2)
        assert config.line_cap == "round"

    def test_empty_file(self, tmp_path) -> None:
        path = tmp_path / "render.toml"
        path.write_text("")
        assert load_config(path) == DEFAULT_CONFIG

    def test_invalid_style(self, tmp_path) -> None:
        path = tmp_path / "render.toml"
        path.write_text('[stroke]\nline_join = "spiky"\n')
        with pytest.raises(ValueError):
            load_config(path)
