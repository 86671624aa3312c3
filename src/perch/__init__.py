"""Perch: single-page navigation for HTML views embedded in native apps.

Views are HTML templates rendered into a surface an embedded web view
displays. Forms and scripted calls in the view dispatch to Python
endpoints, which read schema-less records and navigate onward.

Basic usage::

    from perch import App, DynamicRecord

    app = App()

    @app.endpoint("greet")
    def greet(data: DynamicRecord) -> None:
        app.navigator.navigate("hello", {"name": data.get("name", str)})

    app.start("index", loader=window.load_url, evaluate=window.evaluate_js)

Storage (stdlib ``sqlite3``)::

    from perch.data import Storage
    storage = Storage("sqlite:///app.db")
    rows = storage.get_all("contacts", "name = ?", "Ada")
"""

__version__ = "0.1.0.dev0"
__all__ = [
    "App",
    "AppConfig",
    "ConfigurationError",
    "DispatchError",
    "DynamicRecord",
    "EndpointRegistry",
    "Navigator",
    "PerchError",
    "RenderError",
    "bind",
    "endpoint",
    "validate_shape",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import perch`` fast while providing a clean top-level API.
    """
    if name == "App":
        from perch.app import App

        return App

    if name == "AppConfig":
        from perch.config import AppConfig

        return AppConfig

    if name in ("ConfigurationError", "DispatchError", "PerchError", "RenderError"):
        import perch.errors

        return getattr(perch.errors, name)

    if name in ("DynamicRecord", "bind", "validate_shape"):
        import perch.data

        return getattr(perch.data, name)

    if name in ("EndpointRegistry", "Navigator", "endpoint"):
        import perch.routing

        return getattr(perch.routing, name)

    msg = f"module 'perch' has no attribute {name!r}"
    raise AttributeError(msg)
