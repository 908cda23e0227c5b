"""
Storage schema for ingested listings.

One parent ``listings`` table keyed by the feed's natural key
(agency code, unique id), five child tables that are replaced wholesale on
every full update, and the ``agencies`` table that feeds must be
registered in before their listings are accepted.
"""

import sqlite3
from typing import Dict, List

from reaxmlfeed.core.constants import (
    TABLE_ADDRESSES,
    TABLE_AGENCIES,
    TABLE_AGENTS,
    TABLE_FEATURES,
    TABLE_IMAGES,
    TABLE_INSPECTIONS,
    TABLE_LISTINGS,
)
from reaxmlfeed.core.database import execute, table_exists
from reaxmlfeed.logging_config import get_logger

logger = get_logger(__name__)


TABLES: Dict[str, str] = {
    TABLE_AGENCIES: f"""
        CREATE TABLE {TABLE_AGENCIES} (
            id TEXT PRIMARY KEY,
            agent_id_code TEXT NOT NULL UNIQUE,
            name TEXT NOT NULL,
            is_active INTEGER NOT NULL DEFAULT 1,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )
    """,
    TABLE_LISTINGS: f"""
        CREATE TABLE {TABLE_LISTINGS} (
            id TEXT PRIMARY KEY,
            agency_id TEXT NOT NULL REFERENCES {TABLE_AGENCIES}(id),
            crm_agent_id TEXT NOT NULL,
            crm_unique_id TEXT NOT NULL,
            property_type TEXT NOT NULL,
            category TEXT,
            listing_type TEXT NOT NULL,
            status TEXT NOT NULL DEFAULT 'current',
            authority TEXT,
            headline TEXT,
            description TEXT,
            price TEXT,
            price_display INTEGER DEFAULT 1,
            price_view TEXT,
            price_tax TEXT,
            rent_amount TEXT,
            rent_period TEXT,
            rent_display INTEGER DEFAULT 1,
            bond TEXT,
            date_available TEXT,
            commercial_rent TEXT,
            outgoings TEXT,
            return_percent TEXT,
            current_lease_end TEXT,
            tenancy TEXT,
            property_extent TEXT,
            car_spaces INTEGER,
            zone TEXT,
            further_options TEXT,
            land_area TEXT,
            land_area_unit TEXT,
            building_area TEXT,
            building_area_unit TEXT,
            frontage TEXT,
            energy_rating TEXT,
            under_offer INTEGER DEFAULT 0,
            is_new_construction INTEGER DEFAULT 0,
            is_home_land_package INTEGER DEFAULT 0,
            deposit_taken INTEGER DEFAULT 0,
            year_built INTEGER,
            year_renovated INTEGER,
            auction_date TEXT,
            sold_price TEXT,
            sold_price_display TEXT,
            sold_date TEXT,
            external_link TEXT,
            video_link TEXT,
            rural_features TEXT,
            mod_time TEXT,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL,
            UNIQUE (crm_agent_id, crm_unique_id)
        )
    """,
    TABLE_ADDRESSES: f"""
        CREATE TABLE {TABLE_ADDRESSES} (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            listing_id TEXT NOT NULL UNIQUE
                REFERENCES {TABLE_LISTINGS}(id) ON DELETE CASCADE,
            display INTEGER DEFAULT 1,
            site_name TEXT,
            sub_number TEXT,
            lot_number TEXT,
            street_number TEXT,
            street TEXT NOT NULL,
            suburb TEXT NOT NULL,
            suburb_display INTEGER DEFAULT 1,
            state TEXT,
            postcode TEXT,
            region TEXT,
            country TEXT DEFAULT 'AUS',
            municipality TEXT,
            formatted TEXT
        )
    """,
    TABLE_FEATURES: f"""
        CREATE TABLE {TABLE_FEATURES} (
            listing_id TEXT PRIMARY KEY
                REFERENCES {TABLE_LISTINGS}(id) ON DELETE CASCADE,
            bedrooms INTEGER,
            bathrooms INTEGER,
            ensuites INTEGER,
            garages INTEGER,
            carports INTEGER,
            open_spaces INTEGER,
            toilets INTEGER,
            living_areas INTEGER,
            remote_garage INTEGER,
            secure_parking INTEGER,
            air_conditioning INTEGER,
            alarm_system INTEGER,
            vacuum_system INTEGER,
            intercom INTEGER,
            pool_inground INTEGER,
            pool_above INTEGER,
            spa INTEGER,
            tennis_court INTEGER,
            balcony INTEGER,
            deck INTEGER,
            courtyard INTEGER,
            outdoor_ent INTEGER,
            shed INTEGER,
            fully_fenced INTEGER,
            open_fireplace INTEGER,
            heating_type TEXT,
            hot_water_type TEXT,
            inside_spa INTEGER,
            outside_spa INTEGER,
            broadband INTEGER,
            built_in_robes INTEGER,
            dishwasher INTEGER,
            ducted_cooling INTEGER,
            ducted_heating INTEGER,
            evap_cooling INTEGER,
            floorboards INTEGER,
            gas_heating INTEGER,
            gym INTEGER,
            hydronic_heating INTEGER,
            pay_tv INTEGER,
            reverse_cycle INTEGER,
            rumpus_room INTEGER,
            split_system_ac INTEGER,
            split_system_heat INTEGER,
            study INTEGER,
            workshop INTEGER,
            other_features TEXT,
            pet_friendly INTEGER,
            furnished INTEGER,
            smokers_allowed INTEGER
        )
    """,
    TABLE_IMAGES: f"""
        CREATE TABLE {TABLE_IMAGES} (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            listing_id TEXT NOT NULL
                REFERENCES {TABLE_LISTINGS}(id) ON DELETE CASCADE,
            type TEXT NOT NULL,
            sort_order INTEGER NOT NULL DEFAULT 0,
            original_id TEXT,
            url TEXT NOT NULL,
            format TEXT,
            mod_time TEXT
        )
    """,
    TABLE_INSPECTIONS: f"""
        CREATE TABLE {TABLE_INSPECTIONS} (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            listing_id TEXT NOT NULL
                REFERENCES {TABLE_LISTINGS}(id) ON DELETE CASCADE,
            description TEXT NOT NULL,
            starts_at TEXT,
            ends_at TEXT
        )
    """,
    TABLE_AGENTS: f"""
        CREATE TABLE {TABLE_AGENTS} (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            listing_id TEXT NOT NULL
                REFERENCES {TABLE_LISTINGS}(id) ON DELETE CASCADE,
            position INTEGER NOT NULL,
            name TEXT NOT NULL,
            email TEXT,
            phone_mobile TEXT,
            phone_office TEXT,
            agent_id_code TEXT,
            twitter_url TEXT,
            facebook_url TEXT,
            linkedin_url TEXT,
            UNIQUE (listing_id, position)
        )
    """,
}

INDEXES: List[str] = [
    f"CREATE INDEX IF NOT EXISTS idx_listings_agency ON {TABLE_LISTINGS}(agency_id)",
    f"CREATE INDEX IF NOT EXISTS idx_listings_status ON {TABLE_LISTINGS}(status)",
    f"CREATE INDEX IF NOT EXISTS idx_images_listing ON {TABLE_IMAGES}(listing_id, sort_order)",
    f"CREATE INDEX IF NOT EXISTS idx_inspections_listing ON {TABLE_INSPECTIONS}(listing_id)",
]


def init_schema(conn: sqlite3.Connection) -> List[str]:
    """Create any missing tables and indexes.

    Safe to call on every start-up.

    Returns:
        Names of the tables that were created.
    """
    created = []
    for table_name, ddl in TABLES.items():
        if not table_exists(conn, table_name):
            execute(conn, ddl)
            created.append(table_name)
            logger.info("Created %s table", table_name)

    for ddl in INDEXES:
        execute(conn, ddl)

    return created
