"""Endpoint frozen dataclass and the ``@endpoint`` marker."""

import inspect
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from perch.errors import ConfigurationError

type Handler = Callable[..., Any]

# Attribute set by @endpoint; read by EndpointRegistry.discover()
ENDPOINT_ATTR = "__perch_endpoint__"


@dataclass(frozen=True, slots=True)
class Endpoint:
    """A frozen endpoint definition.

    ``arity`` is 0 for handlers called without arguments and 1 for
    handlers that receive a ``DynamicRecord``.
    """

    name: str
    handler: Handler
    arity: int


def endpoint[F: Handler](name: str) -> Callable[[F], F]:
    """Mark a function as the handler for endpoint *name*.

    Marking does not register anything; pass the module (or function)
    to ``EndpointRegistry.discover()`` or ``App.include()``::

        @endpoint("save-contact")
        def save_contact(data: DynamicRecord) -> None:
            ...
    """

    def decorator(handler: F) -> F:
        setattr(handler, ENDPOINT_ATTR, name)
        return handler

    return decorator


def infer_arity(handler: Handler) -> int:
    """Return 0 or 1 from the handler's positional parameters.

    Raises ``ConfigurationError`` if the handler needs more than one
    argument or has no inspectable signature.
    """
    try:
        signature = inspect.signature(handler)
    except (TypeError, ValueError) as exc:
        msg = f"Cannot inspect the signature of {handler!r}; pass arity explicitly."
        raise ConfigurationError(msg) from exc

    positional = [
        p
        for p in signature.parameters.values()
        if p.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
    ]
    required = [p for p in positional if p.default is inspect.Parameter.empty]
    if len(required) > 1:
        msg = (
            f"Endpoint handler {getattr(handler, '__qualname__', handler)!r} requires "
            f"{len(required)} arguments. Handlers take no arguments or a single record."
        )
        raise ConfigurationError(msg)
    has_varargs = any(p.kind is inspect.Parameter.VAR_POSITIONAL for p in signature.parameters.values())
    return 1 if positional or has_varargs else 0
