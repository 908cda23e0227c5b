"""
Core modules for the REAXML feed ingester.

Contains database helpers, the storage schema and repository, data models,
and shared constants.
"""

from reaxmlfeed.core.database import (
    get_connection,
    transaction,
    fetch_all,
    fetch_one,
    execute,
)
from reaxmlfeed.core.models import (
    ListingRecord,
    MappedListing,
    IngestionResult,
    IngestionReport,
)
from reaxmlfeed.core.repository import ListingRepository, open_repository
from reaxmlfeed.core.schema import init_schema

__all__ = [
    "get_connection",
    "transaction",
    "fetch_all",
    "fetch_one",
    "execute",
    "ListingRecord",
    "MappedListing",
    "IngestionResult",
    "IngestionReport",
    "ListingRepository",
    "open_repository",
    "init_schema",
]
