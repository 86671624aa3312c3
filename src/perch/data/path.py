"""Path expressions over nested records.

Grammar: segments separated by ``.``; a segment is a bare key or
``key[index]``. Non-final segments must lead to a record (``key[index]``
picks the record at that list position). The final segment returns
whatever value sits there, list elements included. A path without a
``.`` is a plain key lookup.

Any failure along the way (missing key, wrong shape, index out of range,
malformed segment) makes the whole lookup return ``None``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Any

from perch.data.value import ValueKind, kind_of

if TYPE_CHECKING:
    from perch.data.record import DynamicRecord

_INDEXED = re.compile(r"(?P<key>[^\[\]]*)\[(?P<index>\d+)\]")


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a path expression.

    Key:      ``user``      (index=None)
    Indexed:  ``items[2]``  (index=2)
    """

    key: str
    index: int | None = None


@lru_cache(maxsize=512)
def parse_path(path: str) -> tuple[PathSegment, ...] | None:
    """Parse a path expression into segments, or ``None`` if malformed.

    Examples::

        "user.name"        -> (PathSegment("user"), PathSegment("name"))
        "items[0].sku"     -> (PathSegment("items", 0), PathSegment("sku"))
        "items[x].sku"     -> None
    """
    segments: list[PathSegment] = []
    for part in path.split("."):
        if "[" in part or "]" in part:
            match = _INDEXED.fullmatch(part)
            if match is None:
                return None
            segments.append(PathSegment(match["key"], int(match["index"])))
        else:
            segments.append(PathSegment(part))
    return tuple(segments)


def resolve(record: DynamicRecord, path: str) -> Any:
    """Evaluate *path* against *record*. Returns ``None`` on any failure."""
    if "." not in path:
        return record.get(path)

    segments = parse_path(path)
    if segments is None:
        return None

    *parents, last = segments
    current = record
    for segment in parents:
        value = _fetch(current, segment)
        if kind_of(value) is not ValueKind.RECORD:
            return None
        current = value
    return _fetch(current, last)


def _fetch(record: DynamicRecord, segment: PathSegment) -> Any:
    value = record.get(segment.key)
    if segment.index is None:
        return value
    if kind_of(value) is not ValueKind.LIST or segment.index >= len(value):
        return None
    return value[segment.index]
