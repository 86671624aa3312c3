"""Endpoint registry: name to handler table.

Built once at startup. The first registration for a name wins; later
duplicates are logged and dropped, never overwritten.
"""

import logging
import types
from collections.abc import Iterator
from typing import Any

from perch.errors import ConfigurationError
from perch.routing.endpoints import ENDPOINT_ATTR, Endpoint, Handler, infer_arity

logger = logging.getLogger("perch.endpoints")


class EndpointRegistry:
    """Endpoint table with first-wins registration.

    Usage::

        registry = EndpointRegistry()
        registry.register("save", save_contact, 1)
        registry.discover(handlers_module)
        registry.resolve("save")   # Endpoint(name="save", ...)
    """

    __slots__ = ("_endpoints",)

    def __init__(self) -> None:
        self._endpoints: dict[str, Endpoint] = {}

    def register(self, name: str, handler: Handler, arity: int | None = None) -> bool:
        """Add an endpoint unless *name* is taken. Returns whether it was added.

        *arity* is inferred from the signature when omitted. Raises
        ``ConfigurationError`` for an arity other than 0 or 1.
        """
        existing = self._endpoints.get(name)
        if existing is not None:
            logger.warning(
                "Endpoint %r is already bound to %s; ignoring %s",
                name,
                _describe(existing.handler),
                _describe(handler),
            )
            return False

        if arity is None:
            arity = infer_arity(handler)
        if arity not in (0, 1):
            msg = f"Endpoint {name!r} declares arity {arity}; expected 0 or 1."
            raise ConfigurationError(msg)

        self._endpoints[name] = Endpoint(name=name, handler=handler, arity=arity)
        logger.debug("Registered endpoint %r -> %s", name, _describe(handler))
        return True

    def discover(self, *sources: Any) -> int:
        """Register every ``@endpoint``-marked function in *sources*.

        A source is a module (its own functions are scanned in definition
        order) or a single function. Returns how many were added.
        """
        added = 0
        for source in sources:
            if isinstance(source, types.ModuleType):
                candidates = [
                    value
                    for value in vars(source).values()
                    if getattr(value, "__module__", None) == source.__name__
                ]
            else:
                candidates = [source]

            for candidate in candidates:
                name = getattr(candidate, ENDPOINT_ATTR, None)
                if isinstance(name, str) and self.register(name, candidate):
                    added += 1
        return added

    def resolve(self, name: str) -> Endpoint | None:
        """Look up an endpoint by name. Returns ``None`` if not found."""
        return self._endpoints.get(name)

    @property
    def names(self) -> list[str]:
        return list(self._endpoints)

    def __len__(self) -> int:
        return len(self._endpoints)

    def __contains__(self, name: object) -> bool:
        return name in self._endpoints

    def __iter__(self) -> Iterator[Endpoint]:
        return iter(self._endpoints.values())


def _describe(handler: Any) -> str:
    module = getattr(handler, "__module__", None)
    qualname = getattr(handler, "__qualname__", None)
    if module and qualname:
        return f"{module}.{qualname}"
    return repr(handler)
