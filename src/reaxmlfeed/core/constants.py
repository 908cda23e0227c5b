"""
Shared Constants for the REAXML feed ingester

Contains all constant values used across the application.
"""

from typing import Dict, FrozenSet, Tuple

# REAXML dialect containers, in the order they are read from <propertyList>
PROPERTY_TYPES: Tuple[str, ...] = (
    "residential",
    "rental",
    "commercial",
    "land",
    "rural",
    "holidayRental",
)

# Element holding the category name for each dialect
CATEGORY_ELEMENTS: Dict[str, str] = {
    "residential": "category",
    "rental": "category",
    "holidayRental": "category",
    "commercial": "commercialCategory",
    "land": "landCategory",
    "rural": "ruralCategory",
}

# Listing status values (@status attribute)
STATUS_CURRENT: str = "current"
STATUS_WITHDRAWN: str = "withdrawn"
STATUS_OFFMARKET: str = "offmarket"
STATUS_SOLD: str = "sold"
STATUS_LEASED: str = "leased"
STATUS_DELETED: str = "deleted"

LISTING_STATUSES: FrozenSet[str] = frozenset({
    STATUS_CURRENT,
    STATUS_WITHDRAWN,
    STATUS_OFFMARKET,
    STATUS_SOLD,
    STATUS_LEASED,
    STATUS_DELETED,
})

# Derived listing types
LISTING_TYPE_SALE: str = "sale"
LISTING_TYPE_RENT: str = "rent"
LISTING_TYPE_LEASE: str = "lease"
LISTING_TYPE_BOTH: str = "both"

LISTING_TYPES: FrozenSet[str] = frozenset({
    LISTING_TYPE_SALE,
    LISTING_TYPE_RENT,
    LISTING_TYPE_LEASE,
    LISTING_TYPE_BOTH,
})

# Image kinds
IMAGE_PHOTO: str = "photo"
IMAGE_FLOORPLAN: str = "floorplan"
IMAGE_DOCUMENT: str = "document"

# Area units
AREA_UNIT_SQM: str = "sqm"
AREA_UNIT_SQUARE: str = "square"
AREA_UNIT_ACRE: str = "acre"
AREA_UNIT_HECTARE: str = "hectare"

# 1 Australian "square" = 9.29 square metres
SQUARE_TO_SQM: float = 9.29

DEFAULT_COUNTRY: str = "AUS"
DEFAULT_PRICE_TAX: str = "unknown"

# Database table names
TABLE_AGENCIES: str = "agencies"
TABLE_LISTINGS: str = "listings"
TABLE_ADDRESSES: str = "listing_addresses"
TABLE_FEATURES: str = "listing_features"
TABLE_IMAGES: str = "listing_images"
TABLE_INSPECTIONS: str = "listing_inspections"
TABLE_AGENTS: str = "listing_agents"

CHILD_TABLES: Tuple[str, ...] = (
    TABLE_ADDRESSES,
    TABLE_FEATURES,
    TABLE_IMAGES,
    TABLE_INSPECTIONS,
    TABLE_AGENTS,
)

# Ingestion outcomes
ACTION_CREATED: str = "created"
ACTION_UPDATED: str = "updated"
ACTION_STATUS_CHANGED: str = "status_changed"
ACTION_SKIPPED: str = "skipped"

# Validation error codes
CODE_INVALID_FIELD: str = "INVALID_FIELD"
CODE_MISSING_ADDRESS: str = "MISSING_ADDRESS"
CODE_INVALID_ADDRESS: str = "INVALID_ADDRESS"
CODE_MISSING_AGENT: str = "MISSING_AGENT"
CODE_INVALID_AGENT: str = "INVALID_AGENT"
CODE_INVALID_PRICE: str = "INVALID_PRICE"
CODE_INVALID_RENT: str = "INVALID_RENT"
CODE_INVALID_BOND: str = "INVALID_BOND"

# Per-listing outcome codes
CODE_INVALID_DOCUMENT: str = "INVALID_DOCUMENT"
CODE_VALIDATION_FAILED: str = "VALIDATION_FAILED"
CODE_UNKNOWN_AGENCY: str = "UNKNOWN_AGENCY"
CODE_STORAGE_ERROR: str = "STORAGE_ERROR"
