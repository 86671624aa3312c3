"""Schema-less records, type coercion, and storage.

Basic usage::

    from perch.data import DynamicRecord, validate_shape

    record = DynamicRecord.from_json({"name": "Bob", "age": "30", "extra": "x"})
    validate_shape({"name": str, "age": int}, record)   # {"name": "Bob", "age": 30}

Storage (stdlib ``sqlite3``)::

    from perch.data import Storage
    storage = Storage("sqlite:///app.db")
"""

from perch.data.coerce import (
    COERCIONS,
    bind,
    coerce,
    json_to_record,
    parse_literal_list,
    validate_shape,
)
from perch.data.errors import DataError, StorageError
from perch.data.path import PathSegment, parse_path
from perch.data.record import DynamicRecord
from perch.data.storage import Storage
from perch.data.value import ValueKind, kind_of

__all__ = [
    "COERCIONS",
    "DataError",
    "DynamicRecord",
    "PathSegment",
    "Storage",
    "StorageError",
    "ValueKind",
    "bind",
    "coerce",
    "json_to_record",
    "kind_of",
    "parse_literal_list",
    "parse_path",
    "validate_shape",
]
