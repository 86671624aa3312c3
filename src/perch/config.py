"""Application configuration.

AppConfig is a frozen dataclass, immutable after creation, constructed
once and passed to the app, the bridges, and storage. Nothing in perch
reads module-level directory or connection state.
"""

from dataclasses import dataclass, field
from pathlib import Path


def _default_render_dir() -> Path:
    return Path.home() / "perch-external"


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(template_dir="views", database="sqlite:///app.db")
    """

    # Templates
    template_dir: str | Path = "templates"
    template_suffix: str = ".html"
    autoescape: bool = True

    # Stylesheets
    style_dir: str | Path = "style"
    style_suffix: str = ".css"

    # Render surface (the file the embedded view displays)
    render_dir: str | Path = field(default_factory=_default_render_dir)
    render_filename: str = "current.html"

    # Storage
    database: str | None = None
    echo: bool = False

    @property
    def render_path(self) -> Path:
        """Absolute path of the render surface file."""
        name = self.render_filename
        if not name.endswith(self.template_suffix):
            name += self.template_suffix
        return Path(self.render_dir).expanduser() / name
