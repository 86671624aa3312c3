"""Perch application class.

Mutable during setup (endpoint registration, handler modules).
Frozen when ``app.start()`` or ``app.build()`` creates the navigator.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from perch.bridge.files import FileRenderBridge
from perch.bridge.protocol import FormBridge, RenderBridge
from perch.bridge.script import ScriptFormBridge
from perch.config import AppConfig
from perch.data.storage import Storage
from perch.routing.endpoints import Handler
from perch.routing.navigator import Navigator
from perch.routing.registry import EndpointRegistry
from perch.templating import create_environment


@dataclass(slots=True)
class _PendingEndpoint:
    """An endpoint waiting to be registered."""

    name: str
    handler: Handler
    arity: int | None


class App:
    """The perch application.

    Usage::

        app = App(AppConfig(template_dir="templates"))

        @app.endpoint("save")
        def save(data: DynamicRecord) -> None:
            app.navigator.navigate("saved", data)

        app.include(handlers)          # module with @endpoint functions
        app.start("index", loader=window.load_url, evaluate=window.evaluate_js)
    """

    __slots__ = ("_frozen", "_navigator", "_pending", "_sources", "_storage", "config")

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config: AppConfig = config or AppConfig()
        self._pending: list[_PendingEndpoint] = []
        self._sources: list[Any] = []
        self._storage: Storage | None = None
        self._navigator: Navigator | None = None
        self._frozen: bool = False

    # -- Setup --

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = "Cannot modify the app after it has started."
            raise RuntimeError(msg)

    def endpoint(self, name: str, *, arity: int | None = None) -> Callable[[Handler], Handler]:
        """Register the decorated function as endpoint *name*."""
        self._check_not_frozen()

        def decorator(handler: Handler) -> Handler:
            self._pending.append(_PendingEndpoint(name=name, handler=handler, arity=arity))
            return handler

        return decorator

    def include(self, *sources: Any) -> None:
        """Scan modules (or functions) for ``@endpoint`` handlers at build time."""
        self._check_not_frozen()
        self._sources.extend(sources)

    # -- Runtime --

    @property
    def navigator(self) -> Navigator:
        """The navigator. Raises ``RuntimeError`` before ``start()``."""
        if self._navigator is None:
            msg = "The app has not started; call app.start() first."
            raise RuntimeError(msg)
        return self._navigator

    @property
    def storage(self) -> Storage:
        """Storage for ``AppConfig.database``, opened on first use."""
        if self._storage is None:
            self._storage = Storage.from_config(self.config)
        return self._storage

    def build(self, render: RenderBridge, forms: FormBridge | None = None) -> Navigator:
        """Freeze the app and create its navigator over the given bridges.

        Decorated endpoints register first, in declaration order, then
        included sources. The first registration of a name wins.
        """
        self._check_not_frozen()
        registry = EndpointRegistry()
        for pending in self._pending:
            registry.register(pending.name, pending.handler, pending.arity)
        registry.discover(*self._sources)

        self._navigator = Navigator(
            render,
            forms,
            endpoints=registry,
            env=create_environment(self.config),
        )
        self._frozen = True
        return self._navigator

    def start(
        self,
        initial_view: str,
        *,
        loader: Callable[[str], Any] | None = None,
        evaluate: Callable[[str], Any] | None = None,
    ) -> Navigator:
        """Build file and script bridges, then render *initial_view*.

        *loader* receives the render surface URI after each render;
        *evaluate* runs JavaScript in the view and returns its result.
        Check ``navigator.initialized`` to see whether the first render
        succeeded.
        """
        forms = ScriptFormBridge(evaluate) if evaluate is not None else None
        navigator = self.build(FileRenderBridge(self.config, loader), forms)
        navigator.init(initial_view)
        return navigator

    def close(self) -> None:
        if self._storage is not None:
            self._storage.close()
