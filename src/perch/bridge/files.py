"""File-backed render bridge.

Templates live under ``AppConfig.template_dir``. The render surface is a
single HTML file under ``AppConfig.render_dir``; after each write the
host's *loader* is called with the file's URI so the embedded view
(re)loads it.

Usage::

    bridge = FileRenderBridge(config, loader=window.load_url)
"""

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

from perch.config import AppConfig

logger = logging.getLogger("perch.render")


def _resolve_under(base: Path, name: str, suffix: str) -> Path | None:
    """Resolve *name* (suffix added if missing) inside *base*, or ``None``."""
    if not name.endswith(suffix):
        name += suffix
    root = base.resolve()
    candidate = (root / name).resolve()
    if not candidate.is_relative_to(root):
        logger.warning("Refusing path outside %s: %r", root, name)
        return None
    return candidate


class FileRenderBridge:
    """Render bridge writing views to a file the embedded view loads."""

    __slots__ = ("_config", "_loader")

    def __init__(self, config: AppConfig, loader: Callable[[str], Any] | None = None) -> None:
        self._config = config
        self._loader = loader

    @property
    def surface_path(self) -> Path:
        return self._config.render_path.resolve()

    # -- RenderBridge --

    def read_template(self, name: str) -> str | None:
        path = _resolve_under(
            Path(self._config.template_dir), name, self._config.template_suffix
        )
        if path is None:
            return None
        if not path.is_file():
            logger.warning("Template %r could not be found in %s", name, self._config.template_dir)
            return None
        try:
            return path.read_text(encoding="utf-8")
        except OSError:
            logger.exception("Could not read template %s", path)
            return None

    def write_render_surface(self, content: str) -> bool:
        try:
            self.surface_path.write_text(content, encoding="utf-8")
        except OSError:
            logger.exception("Could not write render surface %s", self.surface_path)
            return False
        return True

    def load_render_surface(self) -> None:
        if self._loader is not None:
            self._loader(self.surface_path.as_uri())

    def current_render_surface_location(self) -> str | None:
        path = self.surface_path
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError:
            logger.exception("Could not create render directory %s", path.parent)
            return None
        return path.as_uri()

    # -- Stylesheets --

    def _stylesheet(self, name: str) -> Path | None:
        path = _resolve_under(Path(self._config.style_dir), name, self._config.style_suffix)
        if path is None or not path.is_file():
            logger.warning("Stylesheet %r could not be found in %s", name, self._config.style_dir)
            return None
        return path

    def add_stylesheet(self, name: str) -> bool:
        """Link a stylesheet into the current render surface.

        The ``<link>`` goes right before ``</head>``, or at the top when
        the document has no head.
        """
        stylesheet = self._stylesheet(name)
        if stylesheet is None:
            return False
        try:
            content = self.surface_path.read_text(encoding="utf-8")
        except OSError:
            logger.exception("Could not read render surface %s", self.surface_path)
            return False

        link = f'<link rel="stylesheet" type="text/css" href="{stylesheet.as_uri()}">'
        if "</head>" in content:
            content = content.replace("</head>", f"{link}\n</head>", 1)
        else:
            content = link + content
        return self.write_render_surface(content)

    def copy_stylesheet(self, name: str) -> bool:
        """Copy a stylesheet into ``<render_dir>/style/`` for relative links."""
        stylesheet = self._stylesheet(name)
        if stylesheet is None:
            return False
        target = self.surface_path.parent / "style" / stylesheet.name
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(stylesheet.read_text(encoding="utf-8"), encoding="utf-8")
        except OSError:
            logger.exception("Could not copy stylesheet %s", stylesheet)
            return False
        return True
