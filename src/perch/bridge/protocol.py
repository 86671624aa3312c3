"""Bridge protocols: what the navigator needs from the host.

A render bridge reads templates and owns the render surface (the file
or DOM the embedded view displays). A form bridge reads input values out
of the displayed view. No base class required; the navigator checks the
shape, not the lineage.
"""

from collections.abc import Sequence
from typing import Protocol


class RenderBridge(Protocol):
    """Template source and render surface.

    ``read_template`` returns ``None`` when the template does not exist.
    ``current_render_surface_location`` returns ``None`` when the surface
    cannot be used. ``write_render_surface`` reports success.
    """

    def read_template(self, name: str) -> str | None: ...

    def write_render_surface(self, content: str) -> bool: ...

    def load_render_surface(self) -> None: ...

    def current_render_surface_location(self) -> str | None: ...


class FormBridge(Protocol):
    """Input values scoped under a container element.

    Returns ``(element_id, value)`` pairs in document order.
    """

    def query_inputs(self, container_id: str) -> Sequence[tuple[str, str]]: ...
