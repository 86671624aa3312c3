"""Schema-less nested records.

``DynamicRecord`` is a mutable mapping of string keys to values (see
``perch.data.value``). Reads never raise for missing or mistyped data:
every accessor returns ``None`` instead.

Usage::

    record = DynamicRecord.from_json({"user": {"name": "Bob", "age": "30"}})
    record.find("user.name")          # "Bob"
    record.get_record("user").get("age", int)   # 30
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, MutableMapping
from typing import Any, overload

from perch.data.path import resolve
from perch.data.value import ValueKind, kind_of


class DynamicRecord(MutableMapping[str, Any]):
    """Schema-less key/value container with typed and path-addressed reads.

    ``get(key)`` returns the raw value; ``get(key, T)`` coerces it and
    returns ``None`` when coercion fails.
    """

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = dict(data) if data else {}

    @classmethod
    def from_json(cls, obj: Mapping[str, Any]) -> DynamicRecord:
        """Build a record from a parsed JSON object, nesting recursively."""
        from perch.data.coerce import json_to_record

        return json_to_record(obj)

    @classmethod
    def from_json_text(cls, text: str) -> DynamicRecord | None:
        """Parse JSON object text into a record, or ``None``."""
        from perch.data.coerce import record_from_json_text

        return record_from_json_text(text)

    # -- Mapping protocol --

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._data[key] = value

    def __delitem__(self, key: str) -> None:
        del self._data[key]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {v!r}" for k, v in self._data.items())
        return f"DynamicRecord({{{items}}})"

    # -- Reads --

    @overload
    def get(self, key: str) -> Any: ...
    @overload
    def get[T](self, key: str, as_type: type[T]) -> T | None: ...
    @overload
    def get(self, key: str, as_type: str) -> Any: ...

    def get(self, key: str, as_type: Any = None) -> Any:  # type: ignore[override]
        """Return the value for *key*, coerced to *as_type* when given."""
        value = self._data.get(key)
        if as_type is None:
            return value
        from perch.data.coerce import coerce

        return coerce(as_type, value)

    def get_list(self, key: str) -> list[Any] | None:
        """Return the value only if it is already a list."""
        value = self._data.get(key)
        if kind_of(value) is not ValueKind.LIST:
            return None
        return value if isinstance(value, list) else list(value)

    def get_record(self, key: str) -> DynamicRecord | None:
        """Return the value only if it is a nested record."""
        value = self._data.get(key)
        if kind_of(value) is not ValueKind.RECORD:
            return None
        return value

    def get_list_as_strings(self, key: str) -> list[str] | None:
        """Read *key* as a list of strings.

        String values must have the literal form ``"[a, b, c]"``. List
        values are converted element by element.
        """
        from perch.data.coerce import coerce, parse_literal_list, stringify

        value = self._data.get(key)
        match kind_of(value):
            case ValueKind.ABSENT | ValueKind.RECORD:
                return None
            case ValueKind.LIST:
                items = [coerce(str, item) for item in value]
                if any(item is None for item in items):
                    return None
                return items
            case ValueKind.PRIMITIVE | ValueKind.OPAQUE:
                return parse_literal_list(stringify(value), str)

    def find(self, path: str) -> Any:
        """Evaluate a path expression like ``"order.items[2].sku"``."""
        return resolve(self, path)

    def iter_values(self) -> Iterator[Any]:
        """Lazily yield the record's immediate values (single pass)."""
        return (value for value in self._data.values())

    # -- Writes --

    def put(self, key: str, value: Any) -> None:
        """Store *value* under *key*, replacing any previous value."""
        self._data[key] = value

    # -- Export --

    def to_dict(self) -> dict[str, Any]:
        """Return a plain nested ``dict`` (records and lists converted)."""
        return {key: _export(value) for key, value in self._data.items()}


def _export(value: Any) -> Any:
    match kind_of(value):
        case ValueKind.RECORD:
            return value.to_dict()
        case ValueKind.LIST:
            return [_export(item) for item in value]
        case _:
            return value
