"""Tests for perch.bridge: file render bridge and script form bridge."""

import json
from pathlib import Path

import pytest

from perch.bridge.files import FileRenderBridge
from perch.bridge.script import ScriptFormBridge
from perch.config import AppConfig


@pytest.fixture
def config(tmp_path: Path) -> AppConfig:
    templates = tmp_path / "templates"
    templates.mkdir()
    (templates / "index.html").write_text("<html><head></head><body>hi</body></html>", encoding="utf-8")
    style = tmp_path / "style"
    style.mkdir()
    (style / "main.css").write_text("body { color: red; }", encoding="utf-8")
    return AppConfig(
        template_dir=templates,
        style_dir=style,
        render_dir=tmp_path / "render",
    )


class TestFileRenderBridge:
    def test_read_template_adds_suffix(self, config: AppConfig) -> None:
        bridge = FileRenderBridge(config)
        assert bridge.read_template("index") == bridge.read_template("index.html")
        assert "hi" in bridge.read_template("index")

    def test_missing_template(self, config: AppConfig) -> None:
        assert FileRenderBridge(config).read_template("nope") is None

    def test_refuses_paths_outside_template_dir(self, config: AppConfig) -> None:
        assert FileRenderBridge(config).read_template("../style/main.css") is None

    def test_write_and_load(self, config: AppConfig) -> None:
        loaded: list[str] = []
        bridge = FileRenderBridge(config, loader=loaded.append)
        location = bridge.current_render_surface_location()
        assert location is not None
        assert bridge.write_render_surface("<p>x</p>") is True
        bridge.load_render_surface()
        assert config.render_path.read_text(encoding="utf-8") == "<p>x</p>"
        assert loaded == [location]
        assert location.startswith("file://")

    def test_add_stylesheet_before_head_close(self, config: AppConfig) -> None:
        bridge = FileRenderBridge(config)
        bridge.current_render_surface_location()
        bridge.write_render_surface("<html><head></head><body></body></html>")
        assert bridge.add_stylesheet("main") is True
        content = config.render_path.read_text(encoding="utf-8")
        assert '<link rel="stylesheet"' in content
        assert content.index("main.css") < content.index("</head>")

    def test_add_stylesheet_without_head(self, config: AppConfig) -> None:
        bridge = FileRenderBridge(config)
        bridge.current_render_surface_location()
        bridge.write_render_surface("<p>bare</p>")
        assert bridge.add_stylesheet("main.css") is True
        assert config.render_path.read_text(encoding="utf-8").startswith("<link")

    def test_add_missing_stylesheet(self, config: AppConfig) -> None:
        assert FileRenderBridge(config).add_stylesheet("nope") is False

    def test_copy_stylesheet(self, config: AppConfig) -> None:
        bridge = FileRenderBridge(config)
        assert bridge.copy_stylesheet("main") is True
        copied = Path(config.render_dir) / "style" / "main.css"
        assert copied.read_text(encoding="utf-8") == "body { color: red; }"


class TestScriptFormBridge:
    def test_passes_container_id_as_json(self) -> None:
        scripts: list[str] = []

        def evaluate(script: str) -> list[list[str]]:
            scripts.append(script)
            return [["name", "Ada"], ["age", None]]

        bridge = ScriptFormBridge(evaluate)
        assert bridge.query_inputs('con"tact') == [("name", "Ada"), ("age", "")]
        assert json.dumps('con"tact') in scripts[0]
        assert "querySelectorAll" in scripts[0]

    def test_empty_result(self) -> None:
        assert ScriptFormBridge(lambda script: None).query_inputs("x") == []
