"""
Data Models for the REAXML feed ingester

Dataclass definitions for the canonical listing record produced by the
parser, and for the ingestion report returned to callers.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Any, Dict, List, Optional

from reaxmlfeed.core.constants import (
    DEFAULT_COUNTRY,
    DEFAULT_PRICE_TAX,
    LISTING_TYPE_SALE,
    STATUS_CURRENT,
)


@dataclass
class Address:
    """Street address of a listing."""

    street: str
    suburb: str
    display: bool = True
    site_name: Optional[str] = None
    sub_number: Optional[str] = None
    lot_number: Optional[str] = None
    street_number: Optional[str] = None
    suburb_display: bool = True
    state: Optional[str] = None
    postcode: Optional[str] = None
    region: Optional[str] = None
    country: str = DEFAULT_COUNTRY
    municipality: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


@dataclass
class Features:
    """Room counts and amenity flags from <features> and <allowances>."""

    # Counts
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    ensuites: Optional[int] = None
    garages: Optional[int] = None
    carports: Optional[int] = None
    open_spaces: Optional[int] = None
    toilets: Optional[int] = None
    living_areas: Optional[int] = None

    # Parking and security
    remote_garage: bool = False
    secure_parking: bool = False
    alarm_system: bool = False
    intercom: bool = False

    # Climate
    air_conditioning: bool = False
    ducted_cooling: bool = False
    ducted_heating: bool = False
    evap_cooling: bool = False
    gas_heating: bool = False
    hydronic_heating: bool = False
    reverse_cycle: bool = False
    split_system_ac: bool = False
    split_system_heat: bool = False
    open_fireplace: bool = False
    heating_type: Optional[str] = None
    hot_water_type: Optional[str] = None

    # Outdoor
    pool_inground: bool = False
    pool_above: bool = False
    inside_spa: bool = False
    outside_spa: bool = False
    tennis_court: bool = False
    balcony: bool = False
    deck: bool = False
    courtyard: bool = False
    outdoor_ent: bool = False
    shed: bool = False
    fully_fenced: bool = False

    # Indoor
    vacuum_system: bool = False
    broadband: bool = False
    built_in_robes: bool = False
    dishwasher: bool = False
    floorboards: bool = False
    gym: bool = False
    pay_tv: bool = False
    rumpus_room: bool = False
    study: bool = False
    workshop: bool = False
    other_features: Optional[str] = None

    # Rental allowances
    pet_friendly: bool = False
    furnished: bool = False
    smokers_allowed: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


@dataclass
class Agent:
    """A <listingAgent> entry."""

    position: int
    name: str
    email: Optional[str] = None
    phone_mobile: Optional[str] = None
    phone_office: Optional[str] = None
    agent_id_code: Optional[str] = None
    twitter_url: Optional[str] = None
    facebook_url: Optional[str] = None
    linkedin_url: Optional[str] = None


@dataclass
class Image:
    """A photo, floorplan or document reference."""

    type: str  # "photo", "floorplan" or "document"
    url: str
    sort_order: int
    original_id: Optional[str] = None
    format: Optional[str] = None
    mod_time: Optional[datetime] = None


@dataclass
class Inspection:
    """An open-for-inspection slot."""

    description: str
    starts_at: Optional[datetime] = None
    ends_at: Optional[datetime] = None


@dataclass
class SoldDetails:
    """Sale result carried by sold notifications."""

    price: Optional[float] = None
    price_display: Optional[str] = None
    date: Optional[datetime] = None


@dataclass
class RuralFeatures:
    """Free-text rural attributes, only present for the rural dialect."""

    fencing: Optional[str] = None
    annual_rainfall: Optional[str] = None
    soil_types: Optional[str] = None
    improvements: Optional[str] = None
    council_rates: Optional[str] = None
    irrigation: Optional[str] = None
    carrying_capacity: Optional[str] = None
    services: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


@dataclass
class ListingRecord:
    """Canonical listing, the single shape all six REAXML dialects parse into.

    ``property_type`` comes from the XML container the listing was found in
    and is never read from the listing body.
    """

    # Identity (natural key)
    agent_id: str
    unique_id: str

    # Classification
    property_type: str
    category: Optional[str] = None
    listing_type: str = LISTING_TYPE_SALE
    status: str = STATUS_CURRENT
    authority: Optional[str] = None

    # Content
    headline: Optional[str] = None
    description: Optional[str] = None

    # Sale pricing
    price: Optional[float] = None
    price_display: bool = True
    price_view: Optional[str] = None
    price_tax: Optional[str] = DEFAULT_PRICE_TAX

    # Rental
    rent_amount: Optional[float] = None
    rent_period: Optional[str] = None
    rent_display: bool = True
    bond: Optional[float] = None
    date_available: Optional[datetime] = None

    # Commercial
    commercial_rent: Optional[float] = None
    outgoings: Optional[float] = None
    return_percent: Optional[float] = None
    current_lease_end: Optional[datetime] = None
    tenancy: Optional[str] = None
    property_extent: Optional[str] = None
    car_spaces: Optional[int] = None
    zone: Optional[str] = None
    further_options: Optional[str] = None

    # Land / building (areas always in their normalised unit)
    land_area: Optional[float] = None
    land_area_unit: Optional[str] = None
    building_area: Optional[float] = None
    building_area_unit: Optional[str] = None
    frontage: Optional[float] = None
    energy_rating: Optional[float] = None

    # Flags
    under_offer: bool = False
    is_new_construction: bool = False
    is_home_land_package: bool = False
    deposit_taken: bool = False

    # Dates
    year_built: Optional[int] = None
    year_renovated: Optional[int] = None
    auction_date: Optional[datetime] = None
    mod_time: Optional[datetime] = None

    # Links
    external_link: Optional[str] = None
    video_link: Optional[str] = None

    # Terminal state and dialect extras
    sold_details: Optional[SoldDetails] = None
    rural_features: Optional[RuralFeatures] = None

    # Nested structures
    address: Optional[Address] = None
    features: Optional[Features] = None
    agents: List[Agent] = field(default_factory=list)
    images: List[Image] = field(default_factory=list)
    inspections: List[Inspection] = field(default_factory=list)

    @property
    def natural_key(self) -> tuple:
        """(agency code, feed unique id), the deduplication key."""
        return (self.agent_id, self.unique_id)

    def is_status_only(self) -> bool:
        """Whether this looks like a minimal status-change notification."""
        return (
            self.status != STATUS_CURRENT
            and not self.headline
            and not self.description
            and self.address is None
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


@dataclass
class MappedListing:
    """Storage rows for one listing, each a column -> value dict.

    Every child row already carries the listing id it belongs to.
    """

    listing: Dict[str, Any]
    address: Optional[Dict[str, Any]] = None
    features: Optional[Dict[str, Any]] = None
    images: List[Dict[str, Any]] = field(default_factory=list)
    inspections: List[Dict[str, Any]] = field(default_factory=list)
    agents: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class IngestionResult:
    """Outcome of one listing in an ingestion run."""

    agent_id: str
    unique_id: str
    property_type: str
    status: str
    success: bool
    action: str  # "created", "updated", "status_changed" or "skipped"
    error: Optional[str] = None
    code: Optional[str] = None
    details: Optional[Dict[str, str]] = None
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase shape returned over the wire."""
        result: Dict[str, Any] = {
            "agentId": self.agent_id,
            "uniqueId": self.unique_id,
            "propertyType": self.property_type,
            "status": self.status,
            "success": self.success,
            "action": self.action,
        }
        if self.error is not None:
            result["error"] = self.error
        if self.code is not None:
            result["code"] = self.code
        if self.details:
            result["details"] = dict(self.details)
        if self.warnings:
            result["warnings"] = list(self.warnings)
        return result


@dataclass
class IngestionReport:
    """Aggregate of an ingestion run."""

    results: List[IngestionResult] = field(default_factory=list)
    total_processed: Optional[int] = None

    def __post_init__(self):
        if self.total_processed is None:
            self.total_processed = len(self.results)

    @property
    def successful(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failed(self) -> int:
        return len(self.results) - self.successful

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase shape returned over the wire."""
        return {
            "totalProcessed": self.total_processed,
            "successful": self.successful,
            "failed": self.failed,
            "results": [r.to_dict() for r in self.results],
        }
