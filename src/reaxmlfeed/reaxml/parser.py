"""
REAXML Parser

Converts a REAXML ``<propertyList>`` document into canonical
:class:`~reaxmlfeed.core.models.ListingRecord` objects, one per
``<residential>``, ``<rental>``, ``<commercial>``, ``<land>``, ``<rural>``
and ``<holidayRental>`` element.

The document is first turned into a plain tree of dicts, lists and strings
(see :func:`xml_to_tree`); every field extractor then reads that tree through
the helpers in :mod:`reaxmlfeed.utils.coerce`.

Usage:
    from reaxmlfeed.reaxml.parser import parse_reaxml

    records = parse_reaxml(xml_text)
"""

import re
from typing import Any, Dict, List, Optional, Tuple, Union

from lxml import etree

from reaxmlfeed.core.constants import (
    AREA_UNIT_SQM,
    AREA_UNIT_SQUARE,
    CATEGORY_ELEMENTS,
    DEFAULT_COUNTRY,
    DEFAULT_PRICE_TAX,
    IMAGE_DOCUMENT,
    IMAGE_FLOORPLAN,
    IMAGE_PHOTO,
    LISTING_TYPE_BOTH,
    LISTING_TYPE_LEASE,
    LISTING_TYPE_RENT,
    LISTING_TYPE_SALE,
    PROPERTY_TYPES,
    STATUS_CURRENT,
)
from reaxmlfeed.core.models import (
    Address,
    Agent,
    Features,
    Image,
    Inspection,
    ListingRecord,
    RuralFeatures,
    SoldDetails,
)
from reaxmlfeed.exceptions import ParsingError
from reaxmlfeed.logging_config import get_logger
from reaxmlfeed.utils.coerce import (
    ATTRIBUTE_PREFIX,
    TEXT_KEY,
    as_list,
    coerce_boolean,
    coerce_float,
    coerce_int,
    coerce_string,
    extract_text,
    get_attribute,
    get_child,
    has_attribute,
    normalise_area_unit,
    squares_to_sqm,
)
from reaxmlfeed.utils.date_parser import parse_inspection_time, parse_rea_date

logger = get_logger(__name__)

ROOT_ELEMENT = "propertyList"

# Elements always converted to lists, even when they occur once
REPEATABLE_ELEMENTS = frozenset({
    *PROPERTY_TYPES,
    "listingAgent",
    "img",
    "floorplan",
    "document",
    "inspection",
    "telephone",
})

_XML_DECLARATION = re.compile(r"^\s*<\?xml[^>]*\?>")

# Entities are never expanded and nothing is fetched over the network
_XML_PARSER = etree.XMLParser(
    resolve_entities=False,
    no_network=True,
    remove_comments=True,
    remove_pis=True,
)

Node = Union[str, Dict[str, Any], List[Any], None]


# ============================================================
# Document to tree conversion
# ============================================================


def _local_name(tag: str) -> str:
    return etree.QName(tag).localname


def _element_text(element: etree._Element) -> str:
    parts = [element.text or ""]
    parts.extend(child.tail or "" for child in element)
    return "".join(parts).strip()


def _element_to_node(element: etree._Element) -> Node:
    """Convert one element into a string or a dict node."""
    attributes = {
        ATTRIBUTE_PREFIX + _local_name(name): value.strip()
        for name, value in element.attrib.items()
    }
    children = [child for child in element if isinstance(child.tag, str)]
    text = _element_text(element)

    if not attributes and not children:
        return text

    node: Dict[str, Any] = dict(attributes)
    for child in children:
        name = _local_name(child.tag)
        value = _element_to_node(child)

        if name in node:
            if not isinstance(node[name], list):
                node[name] = [node[name]]
            node[name].append(value)
        elif name in REPEATABLE_ELEMENTS:
            node[name] = [value]
        else:
            node[name] = value

    if text:
        node[TEXT_KEY] = text
    return node


def xml_to_tree(xml: Union[str, bytes]) -> Dict[str, Any]:
    """Parse an XML document into ``{root_name: node}``.

    Elements without attributes or children become trimmed strings; all
    others become dicts with ``@attribute`` keys, child keys and an optional
    ``#text`` payload. Namespaces are stripped.

    Raises:
        ParsingError: If the document is empty or not well-formed.
    """
    if isinstance(xml, str):
        # lxml refuses str input that still carries an encoding declaration
        xml = _XML_DECLARATION.sub("", xml, count=1)

    if not xml or not xml.strip():
        raise ParsingError("Invalid REAXML: document is empty")

    try:
        root = etree.fromstring(xml, parser=_XML_PARSER)
    except (etree.XMLSyntaxError, ValueError) as e:
        raise ParsingError(f"Invalid REAXML: {e}") from e

    return {_local_name(root.tag): _element_to_node(root)}


# ============================================================
# Public API
# ============================================================


def parse_reaxml(xml: Union[str, bytes]) -> List[ListingRecord]:
    """Parse a REAXML document into canonical listing records.

    Listings are returned dialect by dialect (residential, rental,
    commercial, land, rural, holidayRental), each in document order.
    Elements without a non-empty ``agentID`` and ``uniqueID`` are dropped.

    Args:
        xml: The full ``<propertyList>`` document.

    Returns:
        List of records; empty when the property list holds no listings.

    Raises:
        ParsingError: If the document is malformed or its root is not
            ``<propertyList>``.
    """
    tree = xml_to_tree(xml)
    if ROOT_ELEMENT not in tree:
        raise ParsingError(
            f"Invalid REAXML: missing <{ROOT_ELEMENT}> root element",
            source=next(iter(tree), None),
        )

    property_list = tree[ROOT_ELEMENT]
    if not isinstance(property_list, dict):
        return []

    records = []
    for property_type in PROPERTY_TYPES:
        for raw in as_list(property_list.get(property_type)):
            if not isinstance(raw, dict):
                continue

            record = map_raw_listing(raw, property_type)
            if record is None:
                logger.debug("Dropped %s listing without agentID/uniqueID", property_type)
                continue
            records.append(record)

    logger.debug("Parsed %d listings", len(records))
    return records


def map_raw_listing(raw: Dict[str, Any], property_type: str) -> Optional[ListingRecord]:
    """Build a record from one listing element's tree.

    Returns None when either identity field is missing.
    """
    agent_id = _text(raw, "agentID")
    unique_id = _text(raw, "uniqueID")
    if not agent_id or not unique_id:
        return None

    price = _one(raw.get("price"))
    rent = _one(raw.get("rent"))
    land_details = _one(raw.get("landDetails"))
    building_details = _one(raw.get("buildingDetails"))
    land_area, land_area_unit = _extract_area(land_details)
    building_area, building_area_unit = _extract_area(building_details)

    return ListingRecord(
        agent_id=agent_id,
        unique_id=unique_id,
        property_type=property_type,
        category=_attr(raw.get(CATEGORY_ELEMENTS[property_type]), "name"),
        listing_type=_derive_listing_type(raw, property_type),
        status=_attr(raw, "status") or STATUS_CURRENT,
        authority=_attr(raw.get("authority"), "value")
        or _attr(raw.get("commercialAuthority"), "value"),

        headline=_text(raw, "headline"),
        description=_text(raw, "description"),

        price=coerce_float(extract_text(price)),
        price_display=_display_flag(price),
        price_view=_text(raw, "priceView"),
        price_tax=_attr(price, "tax") or DEFAULT_PRICE_TAX,

        rent_amount=coerce_float(extract_text(rent)),
        rent_period=_attr(rent, "period"),
        rent_display=_display_flag(rent),
        bond=_number(raw, "bond"),
        date_available=_date(raw, "dateAvailable"),

        commercial_rent=_number(raw, "commercialRent"),
        outgoings=_number(raw, "outgoings"),
        return_percent=_number(raw, "return"),
        current_lease_end=_date(raw, "currentLeaseEndDate"),
        tenancy=_text(raw, "tenancy"),
        property_extent=_text(raw, "propertyExtent"),
        car_spaces=coerce_int(_text(raw, "carSpaces")),
        zone=_text(raw, "zone"),
        further_options=_text(raw, "furtherOptions"),

        land_area=land_area,
        land_area_unit=land_area_unit,
        building_area=building_area,
        building_area_unit=building_area_unit,
        frontage=_number(land_details, "frontage"),
        energy_rating=_number(building_details, "energyRating"),

        under_offer=coerce_boolean(_attr(raw.get("underOffer"), "value")),
        is_new_construction=_flag(raw.get("newConstruction")),
        is_home_land_package=coerce_boolean(_attr(raw.get("isHomeLandPackage"), "value")),
        deposit_taken=coerce_boolean(_attr(raw.get("depositTaken"), "value")),

        year_built=_year(raw.get("yearBuilt")),
        year_renovated=_year(raw.get("yearLastRenovated")),
        auction_date=parse_rea_date(_attr(raw.get("auction"), "date")),
        mod_time=parse_rea_date(_attr(raw, "modTime")),

        external_link=_attr(raw.get("externalLink"), "href"),
        video_link=_attr(raw.get("videoLink"), "href"),

        sold_details=_extract_sold_details(raw),
        rural_features=_extract_rural_features(raw),

        address=_extract_address(raw),
        features=_extract_features(raw),
        agents=_extract_agents(raw),
        images=_extract_images(raw),
        inspections=_extract_inspections(raw),
    )


# ============================================================
# Node helpers
# ============================================================


def _one(node: Node) -> Node:
    """First occurrence of a node that may have been repeated."""
    if isinstance(node, list):
        return node[0] if node else None
    return node


def _text(node: Node, name: str) -> Optional[str]:
    """Trimmed text of child ``name``, or None."""
    return coerce_string(extract_text(_one(get_child(node, name))))


def _attr(node: Node, name: str) -> Optional[str]:
    return coerce_string(get_attribute(_one(node), name))


def _number(node: Node, name: str) -> Optional[float]:
    return coerce_float(_text(node, name))


def _date(node: Node, name: str):
    return parse_rea_date(_text(node, name))


def _flag(node: Node) -> bool:
    return coerce_boolean(extract_text(_one(node)))


def _display_flag(node: Node) -> bool:
    """``display`` attribute of a price/rent element; absent means shown."""
    if not has_attribute(node, "display"):
        return True
    return coerce_boolean(get_attribute(node, "display"))


def _year(node: Node) -> Optional[int]:
    """Year from ``<yearBuilt value="1990"/>`` or ``<yearBuilt>1990</yearBuilt>``."""
    node = _one(node)
    return coerce_int(get_attribute(node, "value") or extract_text(node))


# ============================================================
# Classification
# ============================================================


def _derive_listing_type(raw: Dict[str, Any], property_type: str) -> str:
    if property_type in ("rental", "holidayRental"):
        return LISTING_TYPE_RENT

    if property_type == "commercial":
        value = (_attr(raw.get("commercialListingType"), "value") or "").lower()
        if value == LISTING_TYPE_LEASE:
            return LISTING_TYPE_LEASE
        if value == LISTING_TYPE_BOTH:
            return LISTING_TYPE_BOTH

    return LISTING_TYPE_SALE


# ============================================================
# Areas
# ============================================================


def _extract_area(details: Node) -> Tuple[Optional[float], Optional[str]]:
    """Return (area, unit) from a landDetails/buildingDetails container.

    Squares are converted to square metres so the pair always matches.
    """
    area = _one(get_child(details, "area"))
    if area is None:
        return None, None

    value = coerce_float(extract_text(area))
    if value is None:
        return None, None

    unit = normalise_area_unit(get_attribute(area, "unit"))
    if unit == AREA_UNIT_SQUARE:
        return squares_to_sqm(value), AREA_UNIT_SQM
    return value, unit


# ============================================================
# Terminal state and rural extras
# ============================================================


def _extract_sold_details(raw: Dict[str, Any]) -> Optional[SoldDetails]:
    sold = _one(raw.get("soldDetails"))
    if not sold:
        return None

    price = _one(get_child(sold, "price"))
    return SoldDetails(
        price=coerce_float(extract_text(price)),
        price_display=_attr(price, "display"),
        date=_date(sold, "date"),
    )


def _extract_rural_features(raw: Dict[str, Any]) -> Optional[RuralFeatures]:
    rural = _one(raw.get("ruralFeatures"))
    if not rural:
        return None

    return RuralFeatures(
        fencing=_text(rural, "fencing"),
        annual_rainfall=_text(rural, "annualRainfall"),
        soil_types=_text(rural, "soilTypes"),
        improvements=_text(rural, "improvements"),
        council_rates=_text(rural, "councilRates"),
        irrigation=_text(rural, "irrigation"),
        carrying_capacity=_text(rural, "carryingCapacity"),
        services=_text(rural, "services"),
    )


# ============================================================
# Address
# ============================================================


def _extract_address(raw: Dict[str, Any]) -> Optional[Address]:
    """Address, or None unless both street and suburb are present."""
    addr = _one(raw.get("address"))
    if not isinstance(addr, dict):
        return None

    street = _text(addr, "street")
    suburb_node = _one(addr.get("suburb"))
    suburb = coerce_string(extract_text(suburb_node))
    if not street or not suburb:
        return None

    return Address(
        street=street,
        suburb=suburb,
        display=_display_flag(addr),
        site_name=_text(addr, "site"),
        sub_number=_text(addr, "subNumber"),
        lot_number=_text(addr, "lotNumber"),
        street_number=_text(addr, "streetNumber"),
        suburb_display=_display_flag(suburb_node),
        state=_text(addr, "state"),
        postcode=_text(addr, "postcode"),
        region=_text(addr, "region"),
        country=_text(addr, "country") or DEFAULT_COUNTRY,
        municipality=_text(raw, "municipality"),
    )


# ============================================================
# Features
# ============================================================

# Plain yes/no feature elements: element name -> Features attribute
_FEATURE_FLAGS = {
    "remoteGarage": "remote_garage",
    "secureParking": "secure_parking",
    "airConditioning": "air_conditioning",
    "alarmSystem": "alarm_system",
    "vacuumSystem": "vacuum_system",
    "intercom": "intercom",
    "tennisCourt": "tennis_court",
    "balcony": "balcony",
    "deck": "deck",
    "courtyard": "courtyard",
    "outdoorEnt": "outdoor_ent",
    "shed": "shed",
    "fullyFenced": "fully_fenced",
    "openFirePlace": "open_fireplace",
    "outsideSpa": "outside_spa",
    "broadband": "broadband",
    "builtInRobes": "built_in_robes",
    "dishwasher": "dishwasher",
    "ductedCooling": "ducted_cooling",
    "ductedHeating": "ducted_heating",
    "evapCooling": "evap_cooling",
    "floorboards": "floorboards",
    "gasHeating": "gas_heating",
    "gym": "gym",
    "hydronicHeating": "hydronic_heating",
    "payTv": "pay_tv",
    "reverseCycle": "reverse_cycle",
    "rumpusRoom": "rumpus_room",
    "splitSystemAc": "split_system_ac",
    "splitSystemHeat": "split_system_heat",
    "study": "study",
    "workshop": "workshop",
}

_FEATURE_COUNTS = {
    "bedrooms": "bedrooms",
    "bathrooms": "bathrooms",
    "ensuite": "ensuites",
    "garages": "garages",
    "carports": "carports",
    "openSpaces": "open_spaces",
    "toilets": "toilets",
    "livingAreas": "living_areas",
}

# <allowances> element, <features> fallback, Features attribute
_ALLOWANCES = (
    ("petFriendly", "petFriendly", "pet_friendly"),
    ("furnished", "furnished", "furnished"),
    ("smoker", "smokers", "smokers_allowed"),
)


def _extract_features(raw: Dict[str, Any]) -> Optional[Features]:
    features = _one(raw.get("features"))
    if not isinstance(features, dict):
        return None

    allowances = _one(raw.get("allowances"))
    if not isinstance(allowances, dict):
        allowances = {}

    values: Dict[str, Any] = {
        attribute: coerce_int(_text(features, element))
        for element, attribute in _FEATURE_COUNTS.items()
    }
    values.update({
        attribute: _flag(features.get(element))
        for element, attribute in _FEATURE_FLAGS.items()
    })

    for allowance, fallback, attribute in _ALLOWANCES:
        node = allowances.get(allowance)
        if node is None:
            node = features.get(fallback)
        values[attribute] = _flag(node)

    return Features(
        pool_inground=_pool_inground(features),
        pool_above=_pool_above(features),
        inside_spa=_inside_spa(features),
        heating_type=_attr(features.get("heating"), "type"),
        hot_water_type=_attr(features.get("hotWaterService"), "type"),
        other_features=_text(features, "otherFeatures"),
        **values,
    )


def _pool_inground(features: Dict[str, Any]) -> bool:
    """``<pool type="inground">`` or an untyped ``<pool>``, else ``<poolInGround>``."""
    pool = _one(features.get("pool"))
    if not pool:
        return _flag(features.get("poolInGround"))

    if get_attribute(pool, "type") in (None, "inground"):
        return _flag(pool)
    return _flag(features.get("poolInGround"))


def _pool_above(features: Dict[str, Any]) -> bool:
    pool = _one(features.get("pool"))
    if get_attribute(pool, "type") == "aboveground":
        return _flag(pool)
    return _flag(features.get("poolAboveGround"))


def _inside_spa(features: Dict[str, Any]) -> bool:
    """``<insideSpa>`` wins; otherwise an untyped or in-ground ``<spa>``."""
    if "insideSpa" in features:
        return _flag(features["insideSpa"])

    spa = _one(features.get("spa"))
    if get_attribute(spa, "type") not in (None, "inground"):
        return False
    return _flag(spa)


# ============================================================
# Agents
# ============================================================


def _extract_agents(raw: Dict[str, Any]) -> List[Agent]:
    agents = []
    for idx, node in enumerate(as_list(raw.get("listingAgent"))):
        agent_code = _attr(node, "id")
        position = coerce_int(agent_code)
        mobile, office = _extract_phones(get_child(node, "telephone"))

        agents.append(Agent(
            position=idx + 1 if position is None else position,
            name=_text(node, "name") or "Unknown",
            email=_text(node, "email"),
            phone_mobile=mobile,
            phone_office=office,
            agent_id_code=agent_code,
            twitter_url=_text(node, "twitterURL"),
            facebook_url=_text(node, "facebookURL"),
            linkedin_url=_text(node, "linkedInURL"),
        ))
    return agents


def _extract_phones(telephones: Node) -> Tuple[Optional[str], Optional[str]]:
    """Return (mobile, office) from one or many ``<telephone type=...>``.

    Untyped or unrecognised numbers fill mobile first, then office.
    """
    mobile = office = None
    for item in as_list(telephones):
        number = coerce_string(extract_text(item))
        if not number:
            continue

        phone_type = _attr(item, "type")
        if phone_type == "mobile":
            mobile = number
        elif phone_type in ("office", "BH"):
            office = number
        elif mobile is None:
            mobile = number
        elif office is None:
            office = number
    return mobile, office


# ============================================================
# Images
# ============================================================


def _extract_images(raw: Dict[str, Any]) -> List[Image]:
    """Photos, then floorplans, then documents on one shared sort order."""
    images = _one(raw.get("images"))
    objects = _one(raw.get("objects"))
    streams = (
        (IMAGE_PHOTO, get_child(images, "img")),
        (IMAGE_FLOORPLAN, get_child(objects, "floorplan")),
        (IMAGE_DOCUMENT, get_child(objects, "document")),
    )

    result = []
    for image_type, nodes in streams:
        for node in as_list(nodes):
            url = _attr(node, "url")
            if not url:
                continue

            result.append(Image(
                type=image_type,
                url=url,
                sort_order=len(result),
                original_id=_attr(node, "id"),
                format=_attr(node, "format"),
                mod_time=parse_rea_date(_attr(node, "modTime")),
            ))
    return result


# ============================================================
# Inspections
# ============================================================


def _extract_inspections(raw: Dict[str, Any]) -> List[Inspection]:
    inspections = []
    nodes = get_child(_one(raw.get("inspectionTimes")), "inspection")
    for node in as_list(nodes):
        description = coerce_string(extract_text(node))
        if not description:
            continue

        starts_at, ends_at = parse_inspection_time(description)
        inspections.append(Inspection(
            description=description,
            starts_at=starts_at,
            ends_at=ends_at,
        ))
    return inspections
