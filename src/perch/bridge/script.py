"""Script-backed form bridge.

Reads form inputs by evaluating a JavaScript snippet in the embedded
view. *evaluate* is the host's script runner (for example a webview
window's ``evaluate_js``) and must return the snippet's value as Python
data.
"""

import json
from collections.abc import Callable
from typing import Any

_QUERY_INPUTS = """\
(function (id) {
  var root = document.getElementById(id);
  if (!root) { return []; }
  return Array.from(root.querySelectorAll("input, select, textarea")).map(
    function (el) { return [el.id, el.value]; }
  );
})(%s)"""


class ScriptFormBridge:
    """Form bridge that queries the DOM through a script runner."""

    __slots__ = ("_evaluate",)

    def __init__(self, evaluate: Callable[[str], Any]) -> None:
        self._evaluate = evaluate

    def query_inputs(self, container_id: str) -> list[tuple[str, str]]:
        result = self._evaluate(_QUERY_INPUTS % json.dumps(container_id))
        if not result:
            return []
        return [
            (str(element_id or ""), "" if value is None else str(value))
            for element_id, value in result
        ]
