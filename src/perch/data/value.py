"""Value kinds for schema-less records.

A record value is one of: absent (``None``), a primitive
(``str | int | float | bool``), a nested ``DynamicRecord``, or a list of
values. Anything else is kept as-is and treated as string-like.

``kind_of()`` is the single place that classifies a value, so path
resolution and coercion can ``match`` on the result exhaustively.
"""

from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from perch.data.record import DynamicRecord

type Primitive = str | int | float | bool
type Value = Primitive | DynamicRecord | list[Value] | None


class ValueKind(Enum):
    """Tag of a record value."""

    ABSENT = "absent"
    PRIMITIVE = "primitive"
    RECORD = "record"
    LIST = "list"
    OPAQUE = "opaque"


def kind_of(value: Any) -> ValueKind:
    """Classify *value* into its ``ValueKind``."""
    from perch.data.record import DynamicRecord

    match value:
        case None:
            return ValueKind.ABSENT
        case bool() | int() | float() | str():
            return ValueKind.PRIMITIVE
        case DynamicRecord():
            return ValueKind.RECORD
        case list() | tuple():
            return ValueKind.LIST
        case _:
            return ValueKind.OPAQUE
