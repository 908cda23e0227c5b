"""
REAXML Ingestion

Runs a REAXML document through the whole pipeline: parse, then for each
listing validate, resolve the agency, decide create / status-only update /
full replace, map and write. Every listing ends up as one result in the
report; a bad listing never stops the ones after it.

Usage:
    from reaxmlfeed.core.repository import open_repository
    from reaxmlfeed.reaxml.ingestion import ingest_reaxml

    with open_repository() as repo:
        report = ingest_reaxml(xml_text, repo)
        print(report.successful, report.failed)
"""

import time
import uuid
from typing import Any, Dict, Optional, Union

from reaxmlfeed.core.constants import (
    ACTION_CREATED,
    ACTION_SKIPPED,
    ACTION_STATUS_CHANGED,
    ACTION_UPDATED,
    CODE_INVALID_DOCUMENT,
    CODE_STORAGE_ERROR,
    CODE_UNKNOWN_AGENCY,
    CODE_VALIDATION_FAILED,
)
from reaxmlfeed.core.models import IngestionReport, IngestionResult, ListingRecord
from reaxmlfeed.core.repository import ListingRepository
from reaxmlfeed.exceptions import DatabaseError, ParsingError
from reaxmlfeed.logging_config import get_logger
from reaxmlfeed.reaxml.mapper import listing_values, map_listing, status_update_values
from reaxmlfeed.reaxml.parser import parse_reaxml
from reaxmlfeed.reaxml.validator import validate_listing

logger = get_logger(__name__)

UNKNOWN = "unknown"


def ingest_reaxml(xml: Union[str, bytes], repository: ListingRepository) -> IngestionReport:
    """Ingest every listing in a REAXML document.

    Args:
        xml: Raw ``<propertyList>`` document.
        repository: Storage handle the listings are written through.

    Returns:
        IngestionReport with one result per parsed listing. A document that
        cannot be parsed gives a report with a single synthetic failure.
    """
    started = time.perf_counter()

    try:
        records = parse_reaxml(xml)
    except ParsingError as e:
        logger.warning("Rejected REAXML document: %s", e.message)
        failure = IngestionResult(
            agent_id=UNKNOWN,
            unique_id=UNKNOWN,
            property_type=UNKNOWN,
            status=UNKNOWN,
            success=False,
            action=ACTION_SKIPPED,
            error=e.message,
            code=CODE_INVALID_DOCUMENT,
        )
        return IngestionReport(results=[failure], total_processed=0)

    report = IngestionReport(results=[process_listing(r, repository) for r in records])

    logger.info(
        "Ingested %d listings: %d successful, %d failed (%.2fs)",
        report.total_processed,
        report.successful,
        report.failed,
        time.perf_counter() - started,
    )
    return report


def process_listing(record: ListingRecord, repository: ListingRepository) -> IngestionResult:
    """Validate, resolve and write one listing, returning its outcome."""
    verdict = validate_listing(record)
    warnings = list(verdict.warnings)

    if not verdict.valid:
        messages = "; ".join(f"{e.field}: {e.message}" for e in verdict.errors)
        return _skipped(
            record,
            f"Validation failed: {messages}",
            CODE_VALIDATION_FAILED,
            warnings,
            details={e.field: e.message for e in verdict.errors},
        )

    try:
        # Lookup and writes for one listing commit or roll back together
        with repository.transaction():
            agency = repository.find_agency(record.agent_id)
            if agency is None:
                return _skipped(
                    record,
                    f"Unknown agency code: {record.agent_id}. "
                    "Agency must be registered before importing listings.",
                    CODE_UNKNOWN_AGENCY,
                    warnings,
                )

            existing = repository.find_listing(record.agent_id, record.unique_id)
            if existing is None:
                action = _create_listing(record, agency["id"], repository)
            else:
                action = _update_listing(record, agency["id"], existing, repository)
    except DatabaseError as e:
        return _skipped(record, e.message, CODE_STORAGE_ERROR, warnings)

    logger.debug("%s %s/%s", action, record.agent_id, record.unique_id)
    return IngestionResult(
        agent_id=record.agent_id,
        unique_id=record.unique_id,
        property_type=record.property_type,
        status=record.status,
        success=True,
        action=action,
        warnings=warnings,
    )


def _create_listing(record: ListingRecord, agency_id: str, repository: ListingRepository) -> str:
    mapped = map_listing(record, agency_id, str(uuid.uuid4()))
    repository.insert_listing(mapped.listing)
    repository.insert_children(mapped)
    return ACTION_CREATED


def _update_listing(
    record: ListingRecord,
    agency_id: str,
    existing: Dict[str, Any],
    repository: ListingRepository,
) -> str:
    listing_id = existing["id"]

    if record.is_status_only():
        # Child rows are left as they are
        repository.update_listing(listing_id, status_update_values(record))
        if existing["status"] != record.status:
            return ACTION_STATUS_CHANGED
        return ACTION_UPDATED

    values = listing_values(record)
    values["agency_id"] = agency_id
    repository.update_listing(listing_id, values)
    repository.delete_children(listing_id)
    repository.insert_children(map_listing(record, agency_id, listing_id))
    return ACTION_UPDATED


def _skipped(
    record: ListingRecord,
    error: str,
    code: str,
    warnings: list,
    details: Optional[Dict[str, str]] = None,
) -> IngestionResult:
    logger.warning("Skipped %s/%s: %s", record.agent_id, record.unique_id, error)
    return IngestionResult(
        agent_id=record.agent_id,
        unique_id=record.unique_id,
        property_type=record.property_type,
        status=record.status,
        success=False,
        action=ACTION_SKIPPED,
        error=error,
        code=code,
        details=details,
        warnings=warnings,
    )
