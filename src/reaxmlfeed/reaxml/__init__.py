"""
REAXML ingestion pipeline.

Parser, validator, mapper and the ingestion orchestrator that composes them.
"""

from reaxmlfeed.reaxml.parser import parse_reaxml, xml_to_tree
from reaxmlfeed.reaxml.validator import validate_listing, validate_listings
from reaxmlfeed.reaxml.mapper import map_listing, format_address
from reaxmlfeed.reaxml.ingestion import ingest_reaxml

__all__ = [
    "parse_reaxml",
    "xml_to_tree",
    "validate_listing",
    "validate_listings",
    "map_listing",
    "format_address",
    "ingest_reaxml",
]
