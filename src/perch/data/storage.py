"""Synchronous SQLite storage for endpoint handlers.

Handlers run to completion on the UI thread, so storage is a plain
blocking ``sqlite3`` wrapper. SQL in, ``DynamicRecord`` out. Not an ORM.

Tables are declared with dataclasses. Fields annotated ``X | None`` are
nullable; fields with ``field(metadata={"ignore": True})`` are not stored.
Every table gets an ``id INTEGER PRIMARY KEY AUTOINCREMENT`` column::

    @dataclass
    class Contact:
        name: str
        email: str
        phone: str | None = None

    storage = Storage("sqlite:///contacts.db")
    storage.create_table("contacts", Contact)
    storage.insert("contacts", Contact("Ada", "ada@example.com"))
    storage.get_all("contacts", "name = ?", "Ada")

Failures are logged and reported as ``False`` (writes) or ``None``
(reads); nothing here raises into a handler.
"""

from __future__ import annotations

import dataclasses
import logging
import re
import sqlite3
import sys
import time
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, get_type_hints

from perch.config import AppConfig
from perch.data.coerce import unwrap_optional
from perch.data.errors import StorageError
from perch.data.record import DynamicRecord

logger = logging.getLogger("perch.data")

_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

_SQL_TYPES: dict[type, str] = {
    str: "TEXT",
    int: "INTEGER",
    float: "REAL",
    bool: "BOOLEAN",
}


@dataclass(frozen=True, slots=True)
class Column:
    """A stored column derived from a dataclass field."""

    name: str
    sql_type: str
    nullable: bool


def columns_for(shape: type) -> list[Column]:
    """Derive table columns from a dataclass type.

    Raises ``StorageError`` if *shape* is not a dataclass.
    """
    if not (isinstance(shape, type) and dataclasses.is_dataclass(shape)):
        msg = f"{shape!r} is not a dataclass; tables are declared with dataclasses"
        raise StorageError(msg)

    hints = get_type_hints(shape)
    columns: list[Column] = []
    for f in dataclasses.fields(shape):
        if f.metadata.get("ignore") or f.name == "id":
            continue
        hint = hints.get(f.name, str)
        base = unwrap_optional(hint)
        columns.append(
            Column(
                name=f.name,
                sql_type=_SQL_TYPES.get(base, "TEXT"),
                nullable=base is not hint,
            )
        )
    return columns


def _database_path(url: str) -> str:
    """Extract the filesystem path from a ``sqlite:///`` URL."""
    if url.startswith("sqlite:///"):
        return url[len("sqlite:///") :]
    msg = f"Unsupported database URL scheme: {url!r}. Use sqlite:///path/to/file.db"
    raise StorageError(msg)


def _valid_identifier(name: Any) -> bool:
    if isinstance(name, str) and _IDENTIFIER.fullmatch(name):
        return True
    logger.error("Invalid table or column name: %r", name)
    return False


class Storage:
    """Blocking SQLite access returning ``DynamicRecord`` rows.

    Usage::

        storage = Storage("sqlite:///app.db", echo=True)
        row = storage.get("contacts", 1)
        if row is not None:
            email = row.get("email", str)
    """

    __slots__ = ("_conn", "_echo", "_path", "_url")

    def __init__(self, url: str, /, *, echo: bool = False) -> None:
        self._url = url
        self._path = _database_path(url)
        self._echo = echo
        self._conn: sqlite3.Connection | None = None

    @classmethod
    def from_config(cls, config: AppConfig) -> Storage:
        """Build storage from ``AppConfig.database``.

        Raises ``StorageError`` if no database is configured.
        """
        if config.database is None:
            msg = "No database configured. Set AppConfig(database='sqlite:///app.db')."
            raise StorageError(msg)
        return cls(config.database, echo=config.echo)

    # -- Connection management --

    @property
    def connected(self) -> bool:
        return self._conn is not None

    def connect(self) -> sqlite3.Connection:
        """Open the connection (once) and return it. Called automatically on first use."""
        if self._conn is not None:
            return self._conn
        path = self._path
        if path != ":memory:":
            db_file = Path(path).expanduser()
            db_file.parent.mkdir(parents=True, exist_ok=True)
            path = str(db_file)
        conn = sqlite3.connect(path)
        conn.row_factory = sqlite3.Row
        self._conn = conn
        return conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> Storage:
        self.connect()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            return self.connect()
        return self._conn

    # -- Echo / query logging --

    def _log_query(self, sql: str, params: Sequence[Any], elapsed: float) -> None:
        """Log a query to stderr when echo is enabled."""
        if not self._echo:
            return
        ms = elapsed * 1000
        param_str = f"  params={tuple(params)!r}" if params else ""
        print(f"[perch.data] {ms:6.1f}ms  {sql}{param_str}", file=sys.stderr)

    def _write(self, sql: str, params: Sequence[Any] = ()) -> bool:
        """Run one statement in its own transaction."""
        conn = self._connection()
        t0 = time.perf_counter()
        try:
            with conn:
                conn.execute(sql, params)
            return True
        except sqlite3.Error:
            logger.exception("Storage write failed: %s", sql)
            return False
        finally:
            self._log_query(sql, params, time.perf_counter() - t0)

    def _read(self, sql: str, params: Sequence[Any] = ()) -> list[DynamicRecord] | None:
        conn = self._connection()
        t0 = time.perf_counter()
        try:
            rows = conn.execute(sql, params).fetchall()
        except sqlite3.Error:
            logger.exception("Storage read failed: %s", sql)
            return None
        finally:
            self._log_query(sql, params, time.perf_counter() - t0)
        return [DynamicRecord(dict(row)) for row in rows]

    # -- Tables --

    def create_table(self, table: str, shape: type) -> bool:
        """Create *table* from a dataclass if it does not exist."""
        if not _valid_identifier(table):
            return False
        columns = columns_for(shape)
        defs = ["id INTEGER PRIMARY KEY AUTOINCREMENT"]
        for column in columns:
            null = "" if column.nullable else " NOT NULL"
            defs.append(f"{column.name} {column.sql_type}{null}")
        return self._write(f"CREATE TABLE IF NOT EXISTS {table} ({', '.join(defs)})")

    def drop_table(self, table: str) -> bool:
        if not _valid_identifier(table):
            return False
        return self._write(f"DROP TABLE IF EXISTS {table}")

    def delete_all(self, table: str) -> bool:
        """Remove every row from *table*, keeping the table."""
        if not _valid_identifier(table):
            return False
        return self._write(f"DELETE FROM {table}")

    # -- Rows --

    def insert(self, table: str, record: Any) -> bool:
        """Insert a dataclass instance (or a mapping) as one row.

        ``None`` values are left to the column default. A ``None`` in a
        non-nullable dataclass field refuses the insert.
        """
        if record is None:
            logger.error("Insert into %s refused: record is None", table)
            return False
        if not _valid_identifier(table):
            return False

        values: dict[str, Any] = {}
        if dataclasses.is_dataclass(record) and not isinstance(record, type):
            for column in columns_for(type(record)):
                value = getattr(record, column.name)
                if value is None:
                    if not column.nullable:
                        logger.error(
                            "Insert into %s refused: None for non-nullable field %r",
                            table,
                            column.name,
                        )
                        return False
                    continue
                values[column.name] = value
        elif isinstance(record, Mapping):
            values = {k: v for k, v in record.items() if v is not None}
        else:
            logger.error("Insert into %s refused: %r is not a dataclass or mapping", table, record)
            return False

        if not all(_valid_identifier(name) for name in values):
            return False
        names = ", ".join(values)
        placeholders = ", ".join("?" for _ in values)
        sql = f"INSERT INTO {table} ({names}) VALUES ({placeholders})"
        return self._write(sql, list(values.values()))

    def get(self, table: str, id: int | str | None) -> DynamicRecord | None:  # noqa: A002
        """Return the row whose ``id`` matches, or ``None``."""
        if id is None or not str(id).strip():
            logger.error("Invalid id %r for %s", id, table)
            return None
        if not _valid_identifier(table):
            return None
        rows = self._read(f"SELECT * FROM {table} WHERE id = ?", (id,))
        if not rows:
            return None
        return rows[0]

    def get_all(
        self, table: str, where: str | None = None, /, *values: Any
    ) -> list[DynamicRecord] | None:
        """Return rows of *table*, optionally filtered by a ``?``-parameterized clause.

        Usage::

            storage.get_all("contacts")
            storage.get_all("contacts", "name = ? AND email = ?", "Ada", "ada@example.com")

        Returns ``None`` when the clause or any value is blank, or when the
        number of ``?`` placeholders differs from the number of values.
        """
        if not _valid_identifier(table):
            return None
        if where is None:
            if values:
                logger.error("get_all(%s) got values without a where clause", table)
                return None
            return self._read(f"SELECT * FROM {table}")

        if not where.strip():
            logger.error("get_all(%s) got a blank where clause", table)
            return None
        if any(value is None or not str(value).strip() for value in values):
            logger.error("get_all(%s) got a blank value", table)
            return None
        if where.count("?") != len(values):
            logger.error(
                "get_all(%s): %d placeholders but %d values",
                table,
                where.count("?"),
                len(values),
            )
            return None
        return self._read(f"SELECT * FROM {table} WHERE {where}", values)

    def format_table(self, table: str) -> str | None:
        """Render *table* as tab-separated text (header line first)."""
        if not _valid_identifier(table):
            return None
        conn = self._connection()
        try:
            cursor = conn.execute(f"SELECT * FROM {table}")
        except sqlite3.Error:
            logger.exception("Could not read table %s", table)
            return None
        header = "\t".join(col[0] for col in cursor.description)
        lines = [header]
        lines.extend("\t".join(str(value) for value in row) for row in cursor.fetchall())
        return "\n".join(lines)
