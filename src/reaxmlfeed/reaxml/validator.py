"""
REAXML Listing Validator

Checks canonical listing records against business and data-quality rules.
Validation never raises: it returns a verdict carrying field-tagged errors,
which block persistence, and plain-text warnings, which do not.

Usage:
    from reaxmlfeed.reaxml.validator import validate_listing

    verdict = validate_listing(record)
    if not verdict.valid:
        for error in verdict.errors:
            print(error.field, error.code, error.message)
"""

import re
from dataclasses import dataclass, field
from typing import List, Union

from reaxmlfeed.core.constants import (
    CODE_INVALID_ADDRESS,
    CODE_INVALID_AGENT,
    CODE_INVALID_BOND,
    CODE_INVALID_FIELD,
    CODE_INVALID_PRICE,
    CODE_INVALID_RENT,
    CODE_MISSING_ADDRESS,
    CODE_MISSING_AGENT,
    LISTING_STATUSES,
    LISTING_TYPES,
    PROPERTY_TYPES,
    STATUS_CURRENT,
    STATUS_SOLD,
)
from reaxmlfeed.core.models import ListingRecord

# Australian phone numbers: +61 or 0 prefix, area digit 2-9, grouped digits
PHONE_PATTERN = re.compile(
    r"(?:\b(?:\+?61|0)\s*[2-9]\d{0,2}[\s-]?\d{3,4}[\s-]?\d{3,4}\b)",
    re.IGNORECASE,
)
EMAIL_IN_TEXT_PATTERN = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

CONTACT_POLICY = "Contact information should only appear in agent details."


@dataclass
class FieldError:
    """A blocking problem with one field."""

    field: str
    message: str
    code: str


@dataclass
class ValidationSuccess:
    record: ListingRecord
    warnings: List[str] = field(default_factory=list)
    valid: bool = field(default=True, init=False)

    @property
    def errors(self) -> List[FieldError]:
        return []


@dataclass
class ValidationFailure:
    errors: List[FieldError]
    warnings: List[str] = field(default_factory=list)
    valid: bool = field(default=False, init=False)


ValidationVerdict = Union[ValidationSuccess, ValidationFailure]


def validate_listing(record: ListingRecord) -> ValidationVerdict:
    """Validate one listing record.

    Base fields, pricing and the description policy scan apply to every
    record; ``current`` listings additionally need an address and at least
    one agent, and ``sold`` listings get warnings for missing sale details.

    Args:
        record: Parsed listing.

    Returns:
        ValidationSuccess when there are no errors, otherwise
        ValidationFailure. Both carry the warnings.
    """
    errors: List[FieldError] = []
    warnings: List[str] = []

    _check_base_fields(record, errors)

    if record.status == STATUS_CURRENT:
        _check_current_listing(record, errors, warnings)
    elif record.status == STATUS_SOLD:
        _check_sold_listing(record, warnings)

    _check_pricing(record, errors)
    _check_contact_policy(record, warnings)

    if errors:
        return ValidationFailure(errors=errors, warnings=warnings)
    return ValidationSuccess(record=record, warnings=warnings)


def validate_listings(records: List[ListingRecord]) -> List[ValidationVerdict]:
    """Validate each record independently, preserving order."""
    return [validate_listing(record) for record in records]


def _check_base_fields(record: ListingRecord, errors: List[FieldError]) -> None:
    if not record.agent_id:
        errors.append(FieldError("agentId", "Agent ID (agency code) is required", CODE_INVALID_FIELD))
    if not record.unique_id:
        errors.append(FieldError("uniqueId", "Unique ID is required", CODE_INVALID_FIELD))

    enumerations = (
        ("propertyType", record.property_type, PROPERTY_TYPES),
        ("status", record.status, LISTING_STATUSES),
        ("listingType", record.listing_type, LISTING_TYPES),
    )
    for name, value, allowed in enumerations:
        if value not in allowed:
            errors.append(FieldError(
                name,
                f"Invalid value '{value}'. Expected one of: {', '.join(sorted(allowed))}",
                CODE_INVALID_FIELD,
            ))


def _check_current_listing(
    record: ListingRecord,
    errors: List[FieldError],
    warnings: List[str],
) -> None:
    address = record.address
    if address is None:
        errors.append(FieldError(
            "address", "Address is required for active listings", CODE_MISSING_ADDRESS
        ))
    else:
        if not address.street:
            errors.append(FieldError("address.street", "Street is required", CODE_INVALID_ADDRESS))
        if not address.suburb:
            errors.append(FieldError("address.suburb", "Suburb is required", CODE_INVALID_ADDRESS))
        if not address.country:
            errors.append(FieldError("address.country", "Country is required", CODE_INVALID_ADDRESS))

    if not record.agents:
        errors.append(FieldError(
            "agents", "At least one listing agent is required", CODE_MISSING_AGENT
        ))

    for idx, agent in enumerate(record.agents):
        prefix = f"agents[{idx}]"
        if not agent.name:
            errors.append(FieldError(f"{prefix}.name", "Agent name is required", CODE_INVALID_AGENT))
        if agent.email is not None and not EMAIL_PATTERN.match(agent.email):
            errors.append(FieldError(f"{prefix}.email", "Invalid email", CODE_INVALID_AGENT))
        if not isinstance(agent.position, int) or agent.position <= 0:
            errors.append(FieldError(
                f"{prefix}.position", "Position must be a positive integer", CODE_INVALID_AGENT
            ))

    if not record.description:
        warnings.append("Listing has no description")
    if not record.headline:
        warnings.append("Listing has no headline")
    if not record.images:
        warnings.append("Listing has no images")


def _check_sold_listing(record: ListingRecord, warnings: List[str]) -> None:
    # Sold notifications are commonly partial, so nothing here blocks
    sold = record.sold_details
    if sold is None:
        warnings.append("Sold listing is missing sold details (price, date)")
        return

    if sold.price is None:
        warnings.append("Sold listing has no sold price")
    if sold.date is None:
        warnings.append("Sold listing has no sold date")


def _check_pricing(record: ListingRecord, errors: List[FieldError]) -> None:
    if record.price is not None and record.price < 0:
        errors.append(FieldError("price", "Price cannot be negative", CODE_INVALID_PRICE))
    if record.rent_amount is not None and record.rent_amount < 0:
        errors.append(FieldError("rentAmount", "Rent amount cannot be negative", CODE_INVALID_RENT))
    if record.bond is not None and record.bond < 0:
        errors.append(FieldError("bond", "Bond cannot be negative", CODE_INVALID_BOND))


def _check_contact_policy(record: ListingRecord, warnings: List[str]) -> None:
    """Warn when the description carries phone numbers or email addresses."""
    if not record.description:
        return

    phones = [m.group(0) for m in PHONE_PATTERN.finditer(record.description)]
    if phones:
        warnings.append(
            f"Description may contain phone number(s): {', '.join(phones)}. {CONTACT_POLICY}"
        )

    emails = EMAIL_IN_TEXT_PATTERN.findall(record.description)
    if emails:
        warnings.append(
            f"Description may contain email address(es): {', '.join(emails)}. {CONTACT_POLICY}"
        )
