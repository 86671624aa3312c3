"""Tests for perch.config: AppConfig frozen dataclass."""

from pathlib import Path

import pytest

from perch.config import AppConfig


class TestAppConfig:
    def test_defaults(self) -> None:
        cfg = AppConfig()
        assert cfg.template_dir == "templates"
        assert cfg.template_suffix == ".html"
        assert cfg.style_dir == "style"
        assert cfg.render_filename == "current.html"
        assert cfg.render_dir == Path.home() / "perch-external"
        assert cfg.database is None
        assert cfg.autoescape is True

    def test_frozen(self) -> None:
        cfg = AppConfig()
        with pytest.raises(AttributeError):
            cfg.echo = True  # type: ignore[misc]

    def test_render_path_adds_suffix(self, tmp_path: Path) -> None:
        cfg = AppConfig(render_dir=tmp_path, render_filename="view")
        assert cfg.render_path == tmp_path / "view.html"

    def test_render_path_expands_home(self) -> None:
        cfg = AppConfig(render_dir="~/views")
        assert cfg.render_path == Path.home() / "views" / "current.html"
