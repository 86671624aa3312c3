"""Perch exception hierarchy.

Shared across the navigator, bridges, and storage so every module
raises and catches the same types.

Lookups and coercions never raise: they return ``None``. These types
cover startup mistakes and the faults the navigator catches at its
boundary and reports.
"""


class PerchError(Exception):
    """Base for all perch-specific errors."""


class ConfigurationError(PerchError):
    """Raised when app configuration is invalid.

    Typically raised during endpoint registration or ``App.start()``.
    """


class RenderError(PerchError):
    """A view could not be rendered to the render surface.

    Raised inside the navigator and caught before any history mutation.
    """


class DispatchError(PerchError):
    """An endpoint could not be invoked.

    Unknown name, arity mismatch, or a handler that is not callable.
    """

    def __init__(self, endpoint: str, detail: str) -> None:
        self.endpoint = endpoint
        self.detail = detail
        super().__init__(f"{endpoint!r}: {detail}")
