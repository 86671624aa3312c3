"""View rendering with kida.

A view's template source is rendered with its history payload (a JSON
object) as the context. One environment is created per app from
``AppConfig`` so ``{% extends %}`` and ``{% include %}`` resolve against
the template directory.

Plain placeholders in the view source (``{{ name }}``, ``{{ user.name }}``,
``{{ items[0] }}``) are optional: a name the payload does not provide
renders as empty text. Expressions with filters or operators are left to
kida as written.
"""

import json
import re

from kida import Environment, FileSystemLoader
from kida.environment.exceptions import (
    TemplateNotFoundError,
    TemplateRuntimeError,
    TemplateSyntaxError,
    UndefinedError,
)

from perch.config import AppConfig
from perch.errors import RenderError

_TEMPLATE_ERRORS = (
    TemplateNotFoundError,
    TemplateRuntimeError,
    TemplateSyntaxError,
    UndefinedError,
)

# {{ name }}, {{ user.name }}, {{ items[0] }}, {{ row["key"] }}; whitespace control kept
_PLACEHOLDER = re.compile(
    r"""\{\{(?P<open>-?)\s*
        (?P<path>[A-Za-z_]\w*(?:\.[A-Za-z_]\w*|\[\d+\]|\[(?:"[^"\]]*"|'[^'\]]*')\])*)
        \s*(?P<close>-?)\}\}""",
    re.VERBOSE,
)


def optional_placeholders(source: str) -> str:
    """Rewrite plain placeholders so missing names render as ``""``.

    Usage::

        optional_placeholders("<p>{{ name }}</p>")
        # "<p>{{ name | default('') }}</p>"
    """
    return _PLACEHOLDER.sub(
        lambda m: f"{{{{{m['open']} {m['path']} | default('') {m['close']}}}}}",
        source,
    )


def create_environment(config: AppConfig | None = None) -> Environment:
    """Create a kida Environment for view rendering.

    Without a config the environment has no loader; views can still be
    rendered from source, they just cannot extend or include others.
    """
    if config is None:
        return Environment(autoescape=True)
    return Environment(
        loader=FileSystemLoader(str(config.template_dir)),
        autoescape=config.autoescape,
    )


def render_view(env: Environment, source: str, payload: str | None = None) -> str:
    """Render template *source* with *payload* (JSON object text) as context.

    Raises ``RenderError`` if the payload is not a JSON object or the
    template fails to compile or render.
    """
    context: dict = {}
    if payload is not None:
        try:
            parsed = json.loads(payload)
        except ValueError as exc:
            msg = f"view payload is not valid JSON: {exc}"
            raise RenderError(msg) from exc
        if not isinstance(parsed, dict):
            msg = f"view payload must be a JSON object, got {type(parsed).__name__}"
            raise RenderError(msg)
        context = parsed

    try:
        return env.from_string(optional_placeholders(source)).render(context)
    except _TEMPLATE_ERRORS as exc:
        raise RenderError(str(exc)) from exc
