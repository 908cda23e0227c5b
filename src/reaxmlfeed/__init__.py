"""
REAXML Feed Ingester

Ingests real-estate listing feeds in the REAXML interchange format,
normalises the six property-type dialects into one listing record,
validates it, and reconciles it against stored listings.

Main components:
- reaxml: parser, validator, mapper and ingestion pipeline
- core: storage schema, repository and data models
- api: Flask REST API server
- cli: Command-line interfaces

Usage:
    from reaxmlfeed.core.repository import open_repository
    from reaxmlfeed.reaxml import ingest_reaxml
"""

__version__ = "1.0.0"

from reaxmlfeed.config import get_config
from reaxmlfeed.logging_config import setup_logging

__all__ = [
    "__version__",
    "get_config",
    "setup_logging",
]
