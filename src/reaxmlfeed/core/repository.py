"""
Listing storage handle.

Wraps one SQLite connection and exposes the narrow set of reads and writes
the ingestion pipeline needs, plus agency registration and read-back
helpers used by the CLI, API and tests.

Usage:
    from reaxmlfeed.core.repository import open_repository

    with open_repository() as repo:
        repo.register_agency("XNWXNW", "Example Realty")
"""

import json
import sqlite3
import uuid
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, Generator, List, Optional

from reaxmlfeed.core.constants import (
    CHILD_TABLES,
    TABLE_ADDRESSES,
    TABLE_AGENCIES,
    TABLE_AGENTS,
    TABLE_FEATURES,
    TABLE_IMAGES,
    TABLE_INSPECTIONS,
    TABLE_LISTINGS,
)
from reaxmlfeed.core.database import (
    Row,
    execute,
    fetch_all,
    fetch_one,
    get_connection,
    insert_row,
    insert_rows,
    to_db_value,
    transaction,
)
from reaxmlfeed.core.models import MappedListing
from reaxmlfeed.core.schema import init_schema
from reaxmlfeed.exceptions import ValidationError
from reaxmlfeed.logging_config import get_logger

logger = get_logger(__name__)

# Child tables ordered for read-back
_CHILD_ORDER = {
    TABLE_ADDRESSES: "id",
    TABLE_FEATURES: "listing_id",
    TABLE_IMAGES: "sort_order, id",
    TABLE_INSPECTIONS: "id",
    TABLE_AGENTS: "position",
}


def _now() -> str:
    return datetime.now().isoformat(timespec="seconds")


class ListingRepository:
    """Storage operations over a single open connection.

    Write methods never commit on their own; callers group them inside
    :meth:`transaction` so one listing is written atomically.
    """

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    @contextmanager
    def transaction(self) -> Generator["ListingRepository", None, None]:
        """Group writes into one commit; roll back on any exception."""
        with transaction(self.conn):
            yield self

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def find_agency(self, agent_code: str) -> Optional[Row]:
        """Find a registered agency by its feed agency code."""
        return fetch_one(
            self.conn,
            f"SELECT id, agent_id_code, name FROM {TABLE_AGENCIES} WHERE agent_id_code = ?",
            (agent_code,),
        )

    def find_listing(self, agent_code: str, unique_id: str) -> Optional[Row]:
        """Find a listing by natural key. Returns ``{"id", "status"}`` or None."""
        return fetch_one(
            self.conn,
            f"""
            SELECT id, status FROM {TABLE_LISTINGS}
            WHERE crm_agent_id = ? AND crm_unique_id = ?
            """,
            (agent_code, unique_id),
        )

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def insert_listing(self, row: Dict[str, Any]) -> str:
        """Insert a parent listing row and return its id."""
        values = dict(row)
        values.setdefault("id", str(uuid.uuid4()))
        now = _now()
        values.setdefault("created_at", now)
        values.setdefault("updated_at", now)

        insert_row(self.conn, TABLE_LISTINGS, values, commit=False)
        return values["id"]

    def update_listing(self, listing_id: str, values: Dict[str, Any]) -> int:
        """Overwrite the given columns of a listing and bump ``updated_at``.

        Returns:
            Number of rows updated (0 when the listing does not exist).
        """
        values = {k: v for k, v in values.items() if k not in ("id", "created_at")}
        values["updated_at"] = _now()

        assignments = ", ".join(f"{column} = ?" for column in values)
        params = tuple(to_db_value(v) for v in values.values()) + (listing_id,)
        return execute(
            self.conn,
            f"UPDATE {TABLE_LISTINGS} SET {assignments} WHERE id = ?",
            params,
            commit=False,
        )

    def delete_children(self, listing_id: str) -> int:
        """Delete every child row of a listing.

        Returns:
            Total number of rows deleted.
        """
        deleted = 0
        for table_name in CHILD_TABLES:
            deleted += execute(
                self.conn,
                f"DELETE FROM {table_name} WHERE listing_id = ?",
                (listing_id,),
                commit=False,
            )
        return deleted

    def insert_children(self, mapped: MappedListing) -> None:
        """Insert the child rows of a mapped listing."""
        if mapped.address:
            insert_row(self.conn, TABLE_ADDRESSES, mapped.address, commit=False)
        if mapped.features:
            insert_row(self.conn, TABLE_FEATURES, mapped.features, commit=False)
        insert_rows(self.conn, TABLE_IMAGES, mapped.images, commit=False)
        insert_rows(self.conn, TABLE_INSPECTIONS, mapped.inspections, commit=False)
        insert_rows(self.conn, TABLE_AGENTS, mapped.agents, commit=False)

    # ------------------------------------------------------------------
    # Agencies
    # ------------------------------------------------------------------

    def register_agency(self, agent_code: str, name: str) -> str:
        """Register an agency so its feed listings are accepted.

        Re-registering an existing code renames it and keeps its id, so
        listings already keyed on that code stay reachable.

        Raises:
            ValidationError: If the code or name is blank.
        """
        agent_code = (agent_code or "").strip()
        name = (name or "").strip()
        if not agent_code:
            raise ValidationError("Agency code is required", field="agent_id_code")
        if not name:
            raise ValidationError("Agency name is required", field="name", value=name)

        existing = self.find_agency(agent_code)
        with self.transaction():
            if existing:
                execute(
                    self.conn,
                    f"UPDATE {TABLE_AGENCIES} SET name = ?, updated_at = ? WHERE id = ?",
                    (name, _now(), existing["id"]),
                    commit=False,
                )
                logger.info("Updated agency %s (%s)", agent_code, name)
                return existing["id"]

            agency_id = str(uuid.uuid4())
            now = _now()
            insert_row(
                self.conn,
                TABLE_AGENCIES,
                {
                    "id": agency_id,
                    "agent_id_code": agent_code,
                    "name": name,
                    "is_active": True,
                    "created_at": now,
                    "updated_at": now,
                },
                commit=False,
            )
        logger.info("Registered agency %s (%s)", agent_code, name)
        return agency_id

    def list_agencies(self) -> List[Row]:
        return fetch_all(
            self.conn,
            f"SELECT id, agent_id_code, name, is_active, created_at FROM {TABLE_AGENCIES} "
            "ORDER BY agent_id_code",
        )

    # ------------------------------------------------------------------
    # Read-back
    # ------------------------------------------------------------------

    def get_listing(self, listing_id: str) -> Optional[Row]:
        """Fetch a listing row with ``rural_features`` decoded."""
        row = fetch_one(
            self.conn,
            f"SELECT * FROM {TABLE_LISTINGS} WHERE id = ?",
            (listing_id,),
        )
        if row and row.get("rural_features"):
            row["rural_features"] = json.loads(row["rural_features"])
        return row

    def get_children(self, listing_id: str) -> Dict[str, List[Row]]:
        """Fetch every child row of a listing, keyed by table name."""
        return {
            table_name: fetch_all(
                self.conn,
                f"SELECT * FROM {table_name} WHERE listing_id = ? ORDER BY {order_by}",
                (listing_id,),
            )
            for table_name, order_by in _CHILD_ORDER.items()
        }

    def count_listings(self) -> int:
        row = fetch_one(self.conn, f"SELECT COUNT(*) AS total FROM {TABLE_LISTINGS}")
        return row["total"] if row else 0


@contextmanager
def open_repository(db_path: Optional[str] = None) -> Generator[ListingRepository, None, None]:
    """Open a connection, make sure the schema exists, and yield a repository."""
    with get_connection(db_path) as conn:
        init_schema(conn)
        yield ListingRepository(conn)
