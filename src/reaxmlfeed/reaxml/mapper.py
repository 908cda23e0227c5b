"""
REAXML Mapper

Turns a canonical listing record into storage rows: one ``listings`` row
plus address, features, image, inspection and agent rows, each keyed by
column name and carrying the listing id.

Decimal columns are stored as text so values survive a round trip
unchanged; ``None`` stays ``None`` rather than becoming ``"0"``.
"""

from dataclasses import asdict
from typing import Any, Dict, Optional

from reaxmlfeed.core.models import (
    Address,
    Agent,
    Features,
    Image,
    Inspection,
    ListingRecord,
    MappedListing,
)


def map_listing(record: ListingRecord, agency_id: str, listing_id: str) -> MappedListing:
    """Map a record to storage rows.

    Args:
        record: A record that has already passed validation.
        agency_id: Internal id of the owning agency.
        listing_id: Id of the listing row, new or existing.

    Returns:
        MappedListing with the parent row and all child rows.
    """
    listing = listing_values(record)
    listing["id"] = listing_id
    listing["agency_id"] = agency_id
    listing["crm_agent_id"] = record.agent_id
    listing["crm_unique_id"] = record.unique_id

    return MappedListing(
        listing=listing,
        address=map_address(record.address, listing_id) if record.address else None,
        features=map_features(record.features, listing_id) if record.features else None,
        images=[map_image(image, listing_id) for image in record.images],
        inspections=[map_inspection(inspection, listing_id) for inspection in record.inspections],
        agents=[map_agent(agent, listing_id) for agent in record.agents],
    )


def listing_values(record: ListingRecord) -> Dict[str, Any]:
    """Parent-row column values, without keys or timestamps.

    Used as-is for the full-replace update.
    """
    sold = record.sold_details
    return {
        "property_type": record.property_type,
        "category": record.category,
        "listing_type": record.listing_type,
        "status": record.status,
        "authority": record.authority,
        "headline": record.headline,
        "description": record.description,
        "price": numeric_to_string(record.price),
        "price_display": record.price_display,
        "price_view": record.price_view,
        "price_tax": record.price_tax,
        "rent_amount": numeric_to_string(record.rent_amount),
        "rent_period": record.rent_period,
        "rent_display": record.rent_display,
        "bond": numeric_to_string(record.bond),
        "date_available": record.date_available,
        "commercial_rent": numeric_to_string(record.commercial_rent),
        "outgoings": numeric_to_string(record.outgoings),
        "return_percent": numeric_to_string(record.return_percent),
        "current_lease_end": record.current_lease_end,
        "tenancy": record.tenancy,
        "property_extent": record.property_extent,
        "car_spaces": record.car_spaces,
        "zone": record.zone,
        "further_options": record.further_options,
        "land_area": numeric_to_string(record.land_area),
        "land_area_unit": record.land_area_unit,
        "building_area": numeric_to_string(record.building_area),
        "building_area_unit": record.building_area_unit,
        "frontage": numeric_to_string(record.frontage),
        "energy_rating": numeric_to_string(record.energy_rating),
        "under_offer": record.under_offer,
        "is_new_construction": record.is_new_construction,
        "is_home_land_package": record.is_home_land_package,
        "deposit_taken": record.deposit_taken,
        "year_built": record.year_built,
        "year_renovated": record.year_renovated,
        "auction_date": record.auction_date,
        "sold_price": numeric_to_string(sold.price) if sold else None,
        "sold_price_display": sold.price_display if sold else None,
        "sold_date": sold.date if sold else None,
        "external_link": record.external_link,
        "video_link": record.video_link,
        "rural_features": record.rural_features.to_dict() if record.rural_features else None,
        "mod_time": record.mod_time,
    }


def status_update_values(record: ListingRecord) -> Dict[str, Any]:
    """Columns written for a status-only notification.

    Sold columns are only included when the notification carries them, so
    an existing sale result is never blanked out.
    """
    values: Dict[str, Any] = {
        "status": record.status,
        "mod_time": record.mod_time,
    }

    sold = record.sold_details
    if sold is not None:
        if sold.price is not None:
            values["sold_price"] = numeric_to_string(sold.price)
        if sold.price_display is not None:
            values["sold_price_display"] = sold.price_display
        if sold.date is not None:
            values["sold_date"] = sold.date
    return values


def map_address(address: Address, listing_id: str) -> Dict[str, Any]:
    row = asdict(address)
    row["listing_id"] = listing_id
    row["formatted"] = format_address(address)
    return row


def map_features(features: Features, listing_id: str) -> Dict[str, Any]:
    row = asdict(features)
    row["listing_id"] = listing_id
    # Legacy column, superseded by inside_spa/outside_spa
    row["spa"] = False
    return row


def map_image(image: Image, listing_id: str) -> Dict[str, Any]:
    row = asdict(image)
    row["listing_id"] = listing_id
    return row


def map_inspection(inspection: Inspection, listing_id: str) -> Dict[str, Any]:
    row = asdict(inspection)
    row["listing_id"] = listing_id
    return row


def map_agent(agent: Agent, listing_id: str) -> Dict[str, Any]:
    row = asdict(agent)
    row["listing_id"] = listing_id
    return row


def numeric_to_string(value: Optional[float]) -> Optional[str]:
    """Stringify a decimal for storage.

    Example:
        >>> numeric_to_string(500000.0)
        '500000'
        >>> numeric_to_string(11.2)
        '11.2'
        >>> numeric_to_string(None) is None
        True
    """
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return repr(value) if isinstance(value, float) else str(value)


def format_address(address: Address) -> str:
    """Compose a one-line display address.

    Example:
        >>> format_address(Address(street="Main Road", suburb="RICHMOND",
        ...     sub_number="2", street_number="39", state="vic", postcode="3121"))
        '2/39 Main Road, RICHMOND VIC 3121'
    """
    parts = []

    if address.sub_number:
        parts.append(f"{address.sub_number}/")
    if address.lot_number and not address.street_number:
        parts.append(f"Lot {address.lot_number} ")
    if address.street_number:
        parts.append(f"{address.street_number} ")

    parts.append(address.street)
    parts.append(f", {address.suburb}")

    if address.state:
        parts.append(f" {address.state.upper()}")
    if address.postcode:
        parts.append(f" {address.postcode}")

    return "".join(parts)
