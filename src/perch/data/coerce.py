"""Runtime type coercion for schema-less record values.

Every function here fails closed: a value that cannot be converted
yields ``None``, never an exception. ``validate_shape`` escalates a
single failed field into a failed record, so callers never see a
partial projection.

Targets are Python types (``str``, ``int``, ``float``, ``bool``,
``DynamicRecord``, ``list``) or converter names from ``COERCIONS``::

    coerce(int, " 42 ")       # 42
    coerce("long", "3.9")     # 3 (parsed as a float, truncated toward zero)
    coerce(bool, "TRUE")      # True
    coerce(int, "4x")         # None
"""

import dataclasses
import json
import re
import types
from collections.abc import Callable, Mapping
from typing import Any, get_args, get_origin, get_type_hints

from perch.data.record import DynamicRecord
from perch.data.value import ValueKind, kind_of

type Target = type | str

_INTEGER = re.compile(r"[+-]?\d+")
_DECIMAL = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def _to_int(text: str) -> int:
    if not _INTEGER.fullmatch(text):
        msg = f"not a base-10 integer: {text!r}"
        raise ValueError(msg)
    return int(text)


def _to_float(text: str) -> float:
    if not _DECIMAL.fullmatch(text):
        msg = f"not a decimal number: {text!r}"
        raise ValueError(msg)
    return float(text)


def _to_long(text: str) -> int:
    return int(_to_float(text))


# (converter) for each supported target name
COERCIONS: dict[str, Callable[[str], Any]] = {
    "str": lambda v: v,
    "int": _to_int,
    "long": _to_long,
    "float": _to_float,
    "double": _to_float,
    "bool": lambda v: v.lower() == "true",
}

_TYPE_NAMES: dict[type, str] = {
    str: "str",
    int: "int",
    float: "float",
    bool: "bool",
}


def stringify(value: Any) -> str:
    """Render a primitive the way it arrives from a form or JSON text."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def coerce(target: Target, raw: Any) -> Any:
    """Convert *raw* to *target*, or return ``None``.

    Records and lists only satisfy the matching structured target and
    are returned unchanged. Everything else is stringified, trimmed, and
    parsed. Targets without a converter keep the trimmed text.
    """
    match kind_of(raw):
        case ValueKind.ABSENT:
            return None
        case ValueKind.RECORD:
            return raw if target is DynamicRecord else None
        case ValueKind.LIST:
            return list(raw) if target is list else None
        case ValueKind.PRIMITIVE | ValueKind.OPAQUE:
            pass

    if target is DynamicRecord or target is list:
        return None

    text = stringify(raw).strip()
    name = target if isinstance(target, str) else _TYPE_NAMES.get(target)
    converter = COERCIONS.get(name) if name is not None else None
    if converter is None:
        return text
    try:
        return converter(text)
    except (ValueError, OverflowError):
        return None


def parse_literal_list(text: str | None, element_type: Target = str) -> list[Any] | None:
    """Parse ``"[v1, v2, ...]"`` into a list of coerced elements.

    Double quotes are dropped, commas end an element, and every element
    goes through ``coerce()``. One bad element voids the whole list.
    ``"[]"`` (or brackets around whitespace) is the empty list.
    """
    if text is None:
        return None
    text = text.strip()
    if len(text) < 2 or not text.startswith("[") or not text.endswith("]"):
        return None

    inner = text[1:-1]
    if not inner.strip():
        return []

    tokens: list[str] = []
    current: list[str] = []
    for ch in inner:
        if ch == '"':
            continue
        if ch == ",":
            tokens.append("".join(current))
            current = []
            continue
        current.append(ch)
    tokens.append("".join(current))

    result: list[Any] = []
    for token in tokens:
        value = coerce(element_type, token)
        if value is None:
            return None
        result.append(value)
    return result


def unwrap_optional(hint: Any) -> Any:
    """Extract the base type from ``X | None`` or plain ``X``."""
    if isinstance(hint, types.UnionType):
        args = [a for a in get_args(hint) if a is not type(None)]
        if len(args) == 1:
            return args[0]
        return str
    return hint


def _field_target(hint: Any) -> Target:
    base = unwrap_optional(hint)
    if get_origin(base) in (list, tuple):
        return list
    if isinstance(base, type) and dataclasses.is_dataclass(base):
        return DynamicRecord
    if isinstance(base, (type, str)):
        return base
    return str


def shape_fields(shape: Any) -> dict[str, Target]:
    """Return ``{field_name: target}`` for a dataclass type or a mapping."""
    if isinstance(shape, Mapping):
        return dict(shape)
    if isinstance(shape, type) and dataclasses.is_dataclass(shape):
        hints = get_type_hints(shape)
        return {f.name: _field_target(hints.get(f.name, str)) for f in dataclasses.fields(shape)}
    msg = f"{shape!r} is not a dataclass or a mapping of field names to types"
    raise TypeError(msg)


def validate_shape(shape: Any, record: Mapping[str, Any] | None) -> DynamicRecord | None:
    """Project *record* onto the fields declared by *shape*.

    Declared fields present in *record* are coerced to their declared
    type; absent ones are left out (never defaulted). Undeclared keys are
    dropped. If any present field fails to coerce, the result is ``None``.
    """
    if record is None:
        return None
    validated = DynamicRecord()
    for name, target in shape_fields(shape).items():
        raw = record.get(name)
        if raw is None:
            continue
        value = coerce(target, raw)
        if value is None:
            return None
        validated.put(name, value)
    return validated


def bind[T](shape: type[T], record: Mapping[str, Any] | None) -> T | None:
    """Validate *record* against a dataclass and instantiate it.

    Missing fields take the dataclass defaults. Returns ``None`` when
    validation fails or a required field is missing.
    """
    if not (isinstance(shape, type) and dataclasses.is_dataclass(shape)):
        msg = f"{shape!r} is not a dataclass"
        raise TypeError(msg)

    validated = validate_shape(shape, record)
    if validated is None:
        return None

    hints = get_type_hints(shape)
    kwargs: dict[str, Any] = {}
    for f in dataclasses.fields(shape):
        if f.name not in validated:
            continue
        value = validated[f.name]
        base = unwrap_optional(hints.get(f.name, str))
        if isinstance(base, type) and dataclasses.is_dataclass(base):
            value = bind(base, value)
            if value is None:
                return None
        kwargs[f.name] = value

    try:
        return shape(**kwargs)
    except TypeError:
        return None


def json_to_record(obj: Mapping[str, Any]) -> DynamicRecord:
    """Mirror a parsed JSON object into a ``DynamicRecord``.

    Objects become nested records and arrays become lists, recursively.
    Scalars are stored as-is; consumers coerce them on read.
    """
    record = DynamicRecord()
    for key, value in obj.items():
        record.put(key, _from_json(value))
    return record


def _from_json(value: Any) -> Any:
    match value:
        case Mapping():
            return json_to_record(value)
        case list() | tuple():
            return [_from_json(item) for item in value]
        case _:
            return value


def record_from_json_text(text: str) -> DynamicRecord | None:
    """Parse JSON text that must hold an object. ``None`` otherwise."""
    try:
        parsed = json.loads(text)
    except (ValueError, TypeError):
        return None
    if not isinstance(parsed, dict):
        return None
    return json_to_record(parsed)
