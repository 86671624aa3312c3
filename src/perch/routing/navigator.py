"""Navigator: renders views, keeps history, dispatches UI events.

State is one history stack (tail = displayed view) and a flag that
suppresses the next push while ``go_back()`` re-renders an older entry.

Every public method reports failures through the ``perch.router``
logger and returns ``False`` instead of raising:

- render failures (missing template, unusable surface, bad payload)
  leave history and the surface untouched;
- dispatch failures (unknown endpoint, arity mismatch, handler not
  callable) are no-ops;
- faults raised inside a handler are caught here; whatever the handler
  already rendered stays rendered;
- a host loader that raises after a successful write is logged, and
  history still records the written view.

Handlers run synchronously on the calling (UI) thread and may call
``navigate()`` or ``go_back()`` themselves. Calls from several threads
must be serialized by the caller.
"""

import json
import logging
from collections.abc import Mapping
from typing import Any

from kida import Environment

from perch._internal.invoke import invoke
from perch.bridge.protocol import FormBridge, RenderBridge
from perch.data.coerce import record_from_json_text
from perch.data.record import DynamicRecord
from perch.errors import DispatchError, RenderError
from perch.routing.endpoints import Endpoint, Handler
from perch.routing.history import HistoryEntry, HistoryStack
from perch.routing.registry import EndpointRegistry
from perch.templating import create_environment, render_view

logger = logging.getLogger("perch.router")

# View data: a mapping (records included), JSON object text, or nothing
type ViewData = Mapping[str, Any] | str | None


def _json_default(value: Any) -> Any:
    if isinstance(value, DynamicRecord):
        return value.to_dict()
    msg = f"{type(value).__name__} is not JSON serializable"
    raise TypeError(msg)


def serialize_payload(data: ViewData) -> str | None:
    """Turn view data into the JSON text stored in history.

    Raises ``RenderError`` if a mapping holds values JSON cannot encode.
    """
    if data is None or isinstance(data, str):
        return data
    try:
        return json.dumps(dict(data), default=_json_default)
    except (TypeError, ValueError) as exc:
        msg = f"view data cannot be serialized: {exc}"
        raise RenderError(msg) from exc


class Navigator:
    """Single-page navigation over an embedded view.

    Usage::

        navigator = Navigator(FileRenderBridge(config, window.load_url),
                              ScriptFormBridge(window.evaluate_js))
        navigator.register_endpoint("save", save_contact)
        navigator.init("index")
        navigator.navigate("detail", {"name": "Ada"})
        navigator.go_back()
    """

    __slots__ = ("_endpoints", "_env", "_forms", "_history", "_render", "_suppress_next_push")

    def __init__(
        self,
        render: RenderBridge,
        forms: FormBridge | None = None,
        *,
        endpoints: EndpointRegistry | None = None,
        env: Environment | None = None,
    ) -> None:
        self._render = render
        self._forms = forms
        self._endpoints = endpoints if endpoints is not None else EndpointRegistry()
        self._env = env if env is not None else create_environment()
        self._history = HistoryStack()
        self._suppress_next_push = False

    # -- Introspection --

    @property
    def history(self) -> HistoryStack:
        return self._history

    @property
    def current(self) -> HistoryEntry | None:
        """The entry currently displayed."""
        return self._history.current

    @property
    def initialized(self) -> bool:
        return len(self._history) > 0

    @property
    def endpoints(self) -> EndpointRegistry:
        return self._endpoints

    def register_endpoint(self, name: str, handler: Handler, arity: int | None = None) -> bool:
        """Register a handler under *name*. The first registration wins."""
        return self._endpoints.register(name, handler, arity)

    # -- Rendering --

    def init(self, initial_view: str) -> bool:
        """Render the first view and make it the bottom of history."""
        if self.initialized:
            logger.warning("Navigator already initialized at %r", self._history.views[0])
            return False
        if not self.navigate(initial_view):
            logger.error("Initial view %r could not be rendered", initial_view)
            return False
        return True

    def navigate(self, view: str, data: ViewData = None) -> bool:
        """Render *view* (with optional *data*) and push it onto history.

        Nothing changes if the view cannot be rendered.
        """
        try:
            payload = serialize_payload(data)
            self._show(view, payload)
        except RenderError as exc:
            logger.error("Could not render %r: %s", view, exc)
            return False
        except Exception:
            logger.exception("Unexpected error rendering %r", view)
            return False

        if self._suppress_next_push:
            self._suppress_next_push = False
        else:
            self._history.push(HistoryEntry(view=view, payload=payload))
        return True

    def go_back(self) -> bool:
        """Re-render the previous entry and drop the current one.

        No-op with a single entry. If the previous view fails to render,
        history stays as it was.
        """
        previous = self._history.previous
        if previous is None:
            return False

        self._suppress_next_push = True
        try:
            rendered = self.navigate(previous.view, previous.payload)
        finally:
            self._suppress_next_push = False

        if rendered:
            self._history.pop()
        return rendered

    def _show(self, view: str, payload: str | None) -> None:
        source = self._render.read_template(view)
        if source is None:
            msg = "template not found"
            raise RenderError(msg)
        if self._render.current_render_surface_location() is None:
            msg = "render surface is unavailable"
            raise RenderError(msg)
        content = render_view(self._env, source, payload)
        if not self._render.write_render_surface(content):
            msg = "render surface could not be written"
            raise RenderError(msg)
        # Surface already written; history follows it even if the reload fails
        try:
            self._render.load_render_surface()
        except Exception:
            logger.exception("Host could not load the render surface for %r", view)

    # -- Dispatch --

    def dispatch_form(self, container_id: str, endpoint_name: str) -> bool:
        """Collect the inputs under *container_id* and call the endpoint.

        Each input's id becomes a key; empty values become ``None``.
        Arity-1 handlers receive the record, arity-0 handlers nothing.
        """
        endpoint = self._resolve(endpoint_name)
        if endpoint is None:
            return False
        if self._forms is None:
            self._report(DispatchError(endpoint_name, "no form bridge is configured"))
            return False

        try:
            inputs = self._forms.query_inputs(container_id)
        except Exception:
            logger.exception("Could not read inputs of #%s for %r", container_id, endpoint_name)
            return False

        record = DynamicRecord()
        for element_id, value in inputs:
            if not element_id:
                continue
            record.put(element_id, None if value == "" else value)

        if endpoint.arity == 0:
            return self._call(endpoint)
        return self._call(endpoint, record)

    def dispatch_route(self, endpoint_name: str, json_payload: str | None = None) -> bool:
        """Call an endpoint directly, optionally with a JSON object payload.

        Without a payload the endpoint must take no arguments; with one
        it must take a single record.
        """
        endpoint = self._resolve(endpoint_name)
        if endpoint is None:
            return False

        if json_payload is None:
            if endpoint.arity != 0:
                self._report(DispatchError(endpoint_name, "expects a payload but none was given"))
                return False
            return self._call(endpoint)

        record = record_from_json_text(json_payload)
        if record is None:
            self._report(DispatchError(endpoint_name, "payload is not a JSON object"))
            return False
        if endpoint.arity != 1:
            self._report(DispatchError(endpoint_name, "takes no payload but one was given"))
            return False
        return self._call(endpoint, record)

    def _resolve(self, name: str) -> Endpoint | None:
        endpoint = self._endpoints.resolve(name)
        if endpoint is None:
            self._report(DispatchError(name, "does not exist or is not registered"))
        return endpoint

    def _call(self, endpoint: Endpoint, *args: Any) -> bool:
        if not callable(endpoint.handler):
            self._report(DispatchError(endpoint.name, "handler is not callable"))
            return False
        try:
            invoke(endpoint.handler, *args)
        except Exception:
            logger.exception("Endpoint %r raised", endpoint.name)
            return False
        return True

    def _report(self, error: DispatchError) -> None:
        logger.warning("Dispatch failed for endpoint %s", error)
