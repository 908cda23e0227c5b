"""
Database Helper Functions

Provides context managers and helper functions for SQLite database operations.

Usage:
    from reaxmlfeed.core.database import get_connection, transaction, fetch_one

    with get_connection() as conn:
        with transaction(conn):
            execute(conn, "UPDATE listings SET status = ?", ("sold",), commit=False)
"""

import json
import sqlite3
from contextlib import contextmanager
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Generator, List, Optional, Tuple, Union

from reaxmlfeed.config import get_config
from reaxmlfeed.exceptions import DatabaseConnectionError, DatabaseError
from reaxmlfeed.logging_config import get_logger

logger = get_logger(__name__)

# Type aliases
Row = Dict[str, Any]
Params = Union[Tuple, Dict[str, Any], None]

MEMORY_DB = ":memory:"


def dict_factory(cursor: sqlite3.Cursor, row: tuple) -> Dict[str, Any]:
    """Convert SQLite row to dictionary."""
    return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}


def to_db_value(value: Any) -> Any:
    """Convert a Python value to its SQLite storage form.

    Datetimes become ISO-8601 strings, dicts and lists become JSON and
    booleans become 0/1. Everything else is passed through.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (dict, list)):
        return json.dumps(value, sort_keys=True)
    return value


@contextmanager
def get_connection(
    db_path: Optional[str] = None,
    as_dict: bool = True,
) -> Generator[sqlite3.Connection, None, None]:
    """Context manager for database connections.

    Foreign keys are enabled on every connection so child rows cascade
    with their listing.

    Args:
        db_path: Path to database file. Uses config default if not specified.
        as_dict: If True, rows are returned as dictionaries.

    Yields:
        SQLite connection object.

    Raises:
        DatabaseConnectionError: If unable to connect to the database.
    """
    if db_path is None:
        db_path = get_config().database.path

    if db_path != MEMORY_DB:
        # Ensure parent directory exists
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = None
    try:
        conn = sqlite3.connect(db_path)
        conn.execute("PRAGMA foreign_keys = ON")
    except sqlite3.Error as e:
        logger.error("Database connection error: %s", e)
        raise DatabaseConnectionError(f"Failed to connect to database: {e}") from e

    try:
        if as_dict:
            conn.row_factory = dict_factory
        else:
            conn.row_factory = sqlite3.Row
        logger.debug("Connected to database: %s", db_path)
        yield conn
    finally:
        conn.close()
        logger.debug("Closed database connection")


@contextmanager
def transaction(conn: sqlite3.Connection) -> Generator[sqlite3.Connection, None, None]:
    """Run the enclosed statements as one atomic unit.

    Commits when the block exits normally; rolls back and re-raises on any
    exception. Statements inside should be executed with ``commit=False``.

    Raises:
        DatabaseError: If the commit itself fails.
    """
    try:
        yield conn
    except BaseException:
        conn.rollback()
        logger.debug("Transaction rolled back")
        raise

    try:
        conn.commit()
    except sqlite3.Error as e:
        conn.rollback()
        logger.error("Commit failed: %s", e)
        raise DatabaseError(f"Commit failed: {e}") from e


def fetch_all(
    conn: sqlite3.Connection,
    query: str,
    params: Params = None,
) -> List[Row]:
    """Execute a query and fetch all results.

    Args:
        conn: Database connection.
        query: SQL query string.
        params: Query parameters (tuple or dict).

    Returns:
        List of result rows as dictionaries.

    Raises:
        DatabaseError: If query execution fails.
    """
    try:
        cursor = conn.cursor()
        if params:
            cursor.execute(query, params)
        else:
            cursor.execute(query)
        return cursor.fetchall()
    except sqlite3.Error as e:
        logger.error("Query failed: %s - Error: %s", query[:100], e)
        raise DatabaseError(f"Query failed: {e}") from e


def fetch_one(
    conn: sqlite3.Connection,
    query: str,
    params: Params = None,
) -> Optional[Row]:
    """Execute a query and fetch one result.

    Returns:
        Single result row as dictionary, or None if no results.

    Raises:
        DatabaseError: If query execution fails.
    """
    try:
        cursor = conn.cursor()
        if params:
            cursor.execute(query, params)
        else:
            cursor.execute(query)
        return cursor.fetchone()
    except sqlite3.Error as e:
        logger.error("Query failed: %s - Error: %s", query[:100], e)
        raise DatabaseError(f"Query failed: {e}") from e


def execute(
    conn: sqlite3.Connection,
    query: str,
    params: Params = None,
    commit: bool = True,
) -> int:
    """Execute a query (INSERT, UPDATE, DELETE).

    Args:
        conn: Database connection.
        query: SQL query string.
        params: Query parameters (tuple or dict).
        commit: If True, commit the transaction.

    Returns:
        Number of rows affected.

    Raises:
        DatabaseError: If query execution fails.
    """
    try:
        cursor = conn.cursor()
        if params:
            cursor.execute(query, params)
        else:
            cursor.execute(query)
        if commit:
            conn.commit()
        return cursor.rowcount
    except (sqlite3.Error, OverflowError, ValueError, TypeError) as e:
        # Binding errors (e.g. integers beyond 64 bits) are not sqlite3.Error
        logger.error("Execute failed: %s - Error: %s", query[:100], e)
        raise DatabaseError(f"Execute failed: {e}") from e


def execute_many(
    conn: sqlite3.Connection,
    query: str,
    params_list: List[Params],
    commit: bool = True,
) -> int:
    """Execute a query multiple times with different parameters.

    Returns:
        Total number of rows affected.

    Raises:
        DatabaseError: If query execution fails.
    """
    try:
        cursor = conn.cursor()
        cursor.executemany(query, params_list)
        if commit:
            conn.commit()
        return cursor.rowcount
    except (sqlite3.Error, OverflowError, ValueError, TypeError) as e:
        logger.error("Execute many failed: %s - Error: %s", query[:100], e)
        raise DatabaseError(f"Execute many failed: {e}") from e


def insert_row(
    conn: sqlite3.Connection,
    table_name: str,
    row: Row,
    commit: bool = True,
) -> int:
    """Insert one row given as a column -> value mapping.

    Values go through :func:`to_db_value` first.

    Returns:
        Number of rows inserted.
    """
    columns = list(row.keys())
    placeholders = ", ".join("?" for _ in columns)
    query = f"INSERT INTO {table_name} ({', '.join(columns)}) VALUES ({placeholders})"
    return execute(conn, query, tuple(to_db_value(row[c]) for c in columns), commit=commit)


def insert_rows(
    conn: sqlite3.Connection,
    table_name: str,
    rows: List[Row],
    commit: bool = True,
) -> int:
    """Insert several rows sharing the same columns.

    Returns:
        Number of rows inserted (0 for an empty list).
    """
    if not rows:
        return 0

    columns = list(rows[0].keys())
    placeholders = ", ".join("?" for _ in columns)
    query = f"INSERT INTO {table_name} ({', '.join(columns)}) VALUES ({placeholders})"
    params_list = [tuple(to_db_value(row[c]) for c in columns) for row in rows]
    return execute_many(conn, query, params_list, commit=commit)


def table_exists(conn: sqlite3.Connection, table_name: str) -> bool:
    """Check if a table exists in the database.

    Args:
        conn: Database connection.
        table_name: Name of the table to check.

    Returns:
        True if table exists, False otherwise.
    """
    result = fetch_one(
        conn,
        "SELECT name FROM sqlite_master WHERE type='table' AND name=?",
        (table_name,),
    )
    return result is not None


def get_table_info(conn: sqlite3.Connection, table_name: str) -> List[Row]:
    """Get column information for a table."""
    return fetch_all(conn, f"PRAGMA table_info({table_name})")
