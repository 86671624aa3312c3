"""Shared fakes for perch tests."""

import pytest

from perch.routing.navigator import Navigator


class FakeRenderBridge:
    """In-memory render bridge recording every write and load."""

    def __init__(self, templates: dict[str, str] | None = None) -> None:
        self.templates = dict(templates or {})
        self.surface: str | None = None
        self.loads: list[str | None] = []
        self.writable = True
        self.available = True
        self.load_error: Exception | None = None

    def read_template(self, name: str) -> str | None:
        return self.templates.get(name)

    def write_render_surface(self, content: str) -> bool:
        if not self.writable:
            return False
        self.surface = content
        return True

    def load_render_surface(self) -> None:
        if self.load_error is not None:
            raise self.load_error
        self.loads.append(self.surface)

    def current_render_surface_location(self) -> str | None:
        return "memory://surface" if self.available else None


class FakeFormBridge:
    """Form bridge returning canned inputs per container id."""

    def __init__(self, forms: dict[str, list[tuple[str, str]]] | None = None) -> None:
        self.forms = dict(forms or {})
        self.queried: list[str] = []

    def query_inputs(self, container_id: str) -> list[tuple[str, str]]:
        self.queried.append(container_id)
        return list(self.forms.get(container_id, []))


@pytest.fixture
def render_bridge() -> FakeRenderBridge:
    return FakeRenderBridge(
        {
            "A": "<p>A</p>",
            "B": "<p>B</p>",
            "C": "<p>C</p>",
            "hello": "<p>Hello {{ name }}</p>",
        }
    )


@pytest.fixture
def form_bridge() -> FakeFormBridge:
    return FakeFormBridge()


@pytest.fixture
def navigator(render_bridge: FakeRenderBridge, form_bridge: FakeFormBridge) -> Navigator:
    return Navigator(render_bridge, form_bridge)
