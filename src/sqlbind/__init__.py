"""sqlbind — dataclass ⇄ row mapping over DB-API connections.

Map dataclass fields to columns with :func:`column`, then insert, update,
delete and select them through a :class:`DB`::

    import sqlite3
    from dataclasses import dataclass
    from sqlbind import column, get_sqlite_db

    @dataclass
    class User:
        id: int | None = column("id", seq="users_id_seq", default=None)
        name: str = column("name", default="")
        email: str | None = column("email", default=None)

    with get_sqlite_db(sqlite3.connect("app.db")) as db:
        user = User(name="ann")
        db.insert(user, "users")            # user.id filled in
        users: list[User] = []
        db.select(users, User, "select * from users where name = ?1", "ann")

Modules:
    schema      dataclass → column bindings
    convert     driver value → field type coercion
    builder     INSERT / UPDATE / DELETE / SELECT * text generation
    operations  struct and map operations over any executor
    db          DB executor facade (raises on error)
    safe        SafeDB facade (returns Ok / Err)
    dialect     placeholder dialects (PostgreSQL, Oracle, SQLite)
    settings    SQLBIND_* environment configuration
    logging     structlog setup
"""

from sqlbind.db import DB, ExecResult, get_oracle_db, get_postgres_db, get_sqlite_db
from sqlbind.dialect import (
    Dialect,
    OracleDialect,
    PostgreSQLDialect,
    SQLiteDialect,
    get_dialect,
    register_dialect,
)
from sqlbind.errors import (
    ArgumentError,
    ConversionError,
    DatabaseError,
    NoRowsError,
    PlaceholderError,
    PrimaryKeyError,
    SchemaError,
    SequenceError,
    SqlBindError,
)
from sqlbind.operations import (
    RowValue,
    delete_struct,
    insert_map,
    insert_struct,
    select_int,
    select_maps,
    select_struct,
    update_map,
    update_struct,
)
from sqlbind.result import Err, Ok, Result
from sqlbind.safe import SafeDB, get_oracle_safe_db, get_postgres_safe_db, get_sqlite_safe_db
from sqlbind.schema import StructData, StructField, column, get_struct_data

__version__ = "0.1.0"

__all__ = [
    # Facades
    "DB",
    "SafeDB",
    "ExecResult",
    "get_postgres_db",
    "get_oracle_db",
    "get_sqlite_db",
    "get_postgres_safe_db",
    "get_oracle_safe_db",
    "get_sqlite_safe_db",
    # Mapping
    "column",
    "StructData",
    "StructField",
    "get_struct_data",
    "RowValue",
    # Operations
    "select_maps",
    "select_struct",
    "select_int",
    "insert_map",
    "update_map",
    "insert_struct",
    "update_struct",
    "delete_struct",
    # Dialects
    "Dialect",
    "PostgreSQLDialect",
    "OracleDialect",
    "SQLiteDialect",
    "get_dialect",
    "register_dialect",
    # Results
    "Ok",
    "Err",
    "Result",
    # Errors
    "SqlBindError",
    "ArgumentError",
    "SchemaError",
    "PrimaryKeyError",
    "ConversionError",
    "PlaceholderError",
    "DatabaseError",
    "SequenceError",
    "NoRowsError",
]
