"""
Unit tests for the REAXML parser.
"""

from datetime import datetime

import pytest

from reaxmlfeed.exceptions import ParsingError
from reaxmlfeed.reaxml.parser import REPEATABLE_ELEMENTS, parse_reaxml, xml_to_tree


def wrap(listing_xml: str) -> str:
    return f"<propertyList>{listing_xml}</propertyList>"


def residential(body: str, attrs: str = 'status="current"') -> str:
    return wrap(
        f"<residential {attrs}><agentID>AG1</agentID><uniqueID>U1</uniqueID>{body}</residential>"
    )


def parse_one(xml: str):
    records = parse_reaxml(xml)
    assert len(records) == 1
    return records[0]


class TestXmlToTree:
    """Tests for xml_to_tree function."""

    def test_plain_element_is_string(self):
        tree = xml_to_tree("<root><name> Jane </name></root>")
        assert tree == {"root": {"name": "Jane"}}

    def test_attributes_and_text(self):
        tree = xml_to_tree('<root><price display="no">500000</price></root>')
        assert tree["root"]["price"] == {"@display": "no", "#text": "500000"}

    def test_repeatable_element_always_list(self):
        tree = xml_to_tree("<root><images><img url='a'/></images></root>")
        assert isinstance(tree["root"]["images"]["img"], list)
        assert "img" in REPEATABLE_ELEMENTS

    def test_repeated_element_becomes_list(self):
        tree = xml_to_tree("<root><rent>1</rent><rent>2</rent></root>")
        assert tree["root"]["rent"] == ["1", "2"]

    def test_namespaces_stripped(self):
        tree = xml_to_tree('<p:root xmlns:p="urn:x"><p:name>x</p:name></p:root>')
        assert tree == {"root": {"name": "x"}}

    def test_comments_ignored(self):
        tree = xml_to_tree("<root><!-- note --><name>x</name></root>")
        assert tree == {"root": {"name": "x"}}

    def test_bytes_input(self):
        tree = xml_to_tree(b'<?xml version="1.0" encoding="UTF-8"?><root><a>1</a></root>')
        assert tree == {"root": {"a": "1"}}

    def test_malformed_raises(self):
        with pytest.raises(ParsingError):
            xml_to_tree("<root><unclosed></root>")

    def test_empty_raises(self):
        with pytest.raises(ParsingError):
            xml_to_tree("   ")

    def test_entities_not_expanded(self):
        xml = (
            '<?xml version="1.0"?>'
            '<!DOCTYPE root [<!ENTITY secret SYSTEM "file:///etc/passwd">]>'
            "<root><a>&secret;</a></root>"
        )
        tree = xml_to_tree(xml)
        assert "root" not in tree["root"].get("a", "")


class TestDocumentStructure:
    """Tests for document-level behaviour."""

    def test_wrong_root_raises(self):
        with pytest.raises(ParsingError, match="missing <propertyList> root element"):
            parse_reaxml("<listings><residential/></listings>")

    def test_empty_property_list(self):
        assert parse_reaxml("<propertyList/>") == []
        assert parse_reaxml('<propertyList date="2009-01-01-12:30:00"></propertyList>') == []

    def test_missing_identity_dropped(self, load_fixture):
        records = parse_reaxml(load_fixture("missing_agency_code.xml"))
        assert [r.unique_id for r in records] == ["RES-9001"]

    def test_dialect_order(self, load_fixture):
        records = parse_reaxml(load_fixture("all_dialects.xml"))
        assert [r.property_type for r in records] == [
            "residential", "rental", "commercial", "land", "rural", "holidayRental",
        ]

    def test_status_defaults_to_current(self):
        record = parse_one(residential("", attrs=""))
        assert record.status == "current"


class TestClassification:
    """Tests for category and listing type."""

    @pytest.fixture
    def by_id(self, load_fixture):
        return {r.unique_id: r for r in parse_reaxml(load_fixture("all_dialects.xml"))}

    def test_category_per_dialect(self, by_id):
        assert by_id["RES-2001"].category == "Townhouse"
        assert by_id["COM-4001"].category == "Offices"
        assert by_id["LAN-6001"].category == "Residential"
        assert by_id["RUR-7001"].category == "Cropping"

    def test_rentals_are_rent(self, by_id):
        assert by_id["REN-3001"].listing_type == "rent"
        assert by_id["HOL-5001"].listing_type == "rent"

    def test_commercial_lease(self, by_id):
        assert by_id["COM-4001"].listing_type == "lease"
        assert by_id["COM-4001"].authority == "forSale"

    def test_commercial_both_and_default(self):
        body = "<agentID>A</agentID><uniqueID>C</uniqueID>"
        both = parse_one(wrap(f'<commercial>{body}<commercialListingType value="both"/></commercial>'))
        sale = parse_one(wrap(f"<commercial>{body}</commercial>"))
        assert both.listing_type == "both"
        assert sale.listing_type == "sale"

    def test_other_dialects_are_sale(self, by_id):
        assert by_id["RES-2001"].listing_type == "sale"
        assert by_id["LAN-6001"].listing_type == "sale"
        assert by_id["RUR-7001"].listing_type == "sale"


class TestResidentialListing:
    """Field extraction from the full residential sample."""

    @pytest.fixture
    def record(self, load_fixture):
        return parse_one(load_fixture("residential.xml"))

    def test_identity(self, record):
        assert record.agent_id == "XNWXNW"
        assert record.unique_id == "RES-1001"
        assert record.property_type == "residential"
        assert record.mod_time == datetime(2009, 1, 1, 12, 30)

    def test_pricing(self, record):
        assert record.price == 500000.0
        assert record.price_display is True
        assert record.price_tax == "inclusive"
        assert record.price_view == "Between $400,000 and $600,000"

    def test_wrapped_flags_read_attribute(self, record):
        assert record.under_offer is False
        assert record.authority == "exclusive"

    def test_square_area_converted(self, record):
        assert record.land_area == pytest.approx(557.4)
        assert record.land_area_unit == "sqm"
        assert record.frontage == 20.0

    def test_building_details(self, record):
        assert record.building_area == 180.0
        assert record.building_area_unit == "sqm"
        assert record.energy_rating == 4.5

    def test_dates_and_years(self, record):
        assert record.auction_date == datetime(2009, 2, 4, 12, 30)
        assert record.year_built == 1995
        assert record.year_renovated == 2008

    def test_links(self, record):
        assert record.external_link == "http://www.example.com/listing/RES-1001"
        assert record.video_link == "http://www.youtube.com/watch?v=abc123"

    def test_address(self, record):
        address = record.address
        assert address.sub_number == "2"
        assert address.street_number == "39"
        assert address.street == "Main Road"
        assert address.suburb == "RICHMOND"
        assert address.suburb_display is False
        assert address.display is True
        assert address.state == "vic"
        assert address.country == "AUS"
        assert address.municipality == "Yarra"

    def test_features(self, record):
        features = record.features
        assert features.bedrooms == 4
        assert features.ensuites == 1
        assert features.carports == 0
        assert features.air_conditioning is True
        assert features.alarm_system is True
        assert features.open_fireplace is True
        assert features.pool_inground is True
        assert features.pool_above is False
        assert features.inside_spa is False
        assert features.outside_spa is True
        assert features.heating_type == "gas"
        assert features.hot_water_type == "solar"
        assert features.other_features == "Solar panels, water tank"

    def test_agents(self, record):
        first, second = record.agents
        assert first.position == 1
        assert first.agent_id_code == "1"
        assert first.phone_mobile == "0400 123 456"
        assert first.phone_office == "05 8888 6666"
        assert first.twitter_url == "https://twitter.com/jdoe"
        assert second.position == 2
        assert second.agent_id_code is None

    def test_untyped_phones_fill_mobile_then_office(self, record):
        second = record.agents[1]
        assert second.phone_mobile == "0411 222 333"
        assert second.phone_office == "03 9999 0000"

    def test_image_sort_order(self, record):
        assert [(i.type, i.sort_order) for i in record.images] == [
            ("photo", 0),
            ("photo", 1),
            ("floorplan", 2),
            ("document", 3),
        ]
        hero = record.images[0]
        assert hero.original_id == "m"
        assert hero.format == "jpg"
        assert hero.mod_time == datetime(2009, 1, 1, 12, 30)

    def test_inspections(self, record):
        first, second, third = record.inspections
        assert first.starts_at == datetime(2009, 12, 21, 11, 0)
        assert first.ends_at == datetime(2009, 12, 21, 12, 0)
        assert second.starts_at == datetime(2009, 12, 22, 12, 15)
        assert second.ends_at == datetime(2009, 12, 22, 13, 0)
        assert third.description == "By appointment"
        assert third.starts_at is None
        assert third.ends_at is None

    def test_no_sold_or_rural(self, record):
        assert record.sold_details is None
        assert record.rural_features is None


class TestDialectFields:
    """Dialect-specific extraction from the all-dialects sample."""

    @pytest.fixture
    def by_id(self, load_fixture):
        return {r.unique_id: r for r in parse_reaxml(load_fixture("all_dialects.xml"))}

    def test_rental(self, by_id):
        rental = by_id["REN-3001"]
        assert rental.rent_amount == 450.0
        assert rental.rent_period == "week"
        assert rental.rent_display is False
        assert rental.bond == 1950.0
        assert rental.date_available == datetime(2009, 3, 15)
        assert rental.agents[0].position == 2
        assert rental.agents[0].phone_office == "03 9999 1111"

    def test_allowances_override_features(self, by_id):
        features = by_id["REN-3001"].features
        assert features.pet_friendly is True
        assert features.furnished is True
        assert features.smokers_allowed is False

    def test_commercial(self, by_id):
        commercial = by_id["COM-4001"]
        assert commercial.commercial_rent == 85000.0
        assert commercial.outgoings == 12000.0
        assert commercial.return_percent == 6.5
        assert commercial.current_lease_end == datetime(2012, 6, 30)
        assert commercial.tenancy == "vacant"
        assert commercial.car_spaces == 8
        assert commercial.zone == "Commercial 1"
        assert commercial.features is None

    def test_land_keeps_hectares(self, by_id):
        land = by_id["LAN-6001"]
        assert land.land_area == 0.06
        assert land.land_area_unit == "hectare"
        assert land.address.lot_number == "45"

    def test_rural_features(self, by_id):
        rural = by_id["RUR-7001"]
        assert rural.rural_features.fencing == "Fully fenced"
        assert rural.rural_features.annual_rainfall == "700mm"
        assert rural.rural_features.irrigation is None
        assert rural.land_area_unit == "acre"

    def test_holiday_rental_above_ground_pool(self, by_id):
        features = by_id["HOL-5001"].features
        assert features.pool_above is True
        assert features.pool_inground is False

    def test_new_construction(self, by_id):
        assert by_id["RES-2001"].is_new_construction is True

    def test_area_units_never_square(self, by_id):
        for record in by_id.values():
            assert record.land_area_unit != "square"
            assert record.building_area_unit != "square"


class TestFieldEdgeCases:
    """Edge cases of individual extractors."""

    def test_price_display_defaults_true(self):
        record = parse_one(residential("<price>100</price>"))
        assert record.price_display is True
        assert record.price_tax == "unknown"

    def test_price_display_no(self):
        record = parse_one(residential('<price display="no">100</price>'))
        assert record.price_display is False

    def test_unknown_area_unit_not_converted(self):
        record = parse_one(residential('<landDetails><area unit="furlong">5</area></landDetails>'))
        assert record.land_area == 5.0
        assert record.land_area_unit == "sqm"

    def test_untyped_pool_is_inground(self):
        record = parse_one(residential("<features><pool>yes</pool></features>"))
        assert record.features.pool_inground is True
        assert record.features.pool_above is False

    def test_pool_fallback_elements(self):
        record = parse_one(residential(
            "<features><poolInGround>yes</poolInGround><poolAboveGround>1</poolAboveGround></features>"
        ))
        assert record.features.pool_inground is True
        assert record.features.pool_above is True

    def test_above_ground_pool_uses_in_ground_fallback(self):
        record = parse_one(residential(
            '<features><pool type="aboveground">yes</pool><poolInGround>no</poolInGround></features>'
        ))
        assert record.features.pool_inground is False
        assert record.features.pool_above is True

    def test_inside_spa_takes_precedence(self):
        record = parse_one(residential(
            '<features><insideSpa>no</insideSpa><spa type="inground">yes</spa></features>'
        ))
        assert record.features.inside_spa is False

    def test_spa_inground(self):
        record = parse_one(residential('<features><spa type="inground">yes</spa></features>'))
        assert record.features.inside_spa is True

    def test_typed_non_inground_spa_is_not_inside(self):
        record = parse_one(residential('<features><spa type="aboveground">yes</spa></features>'))
        assert record.features.inside_spa is False

    def test_untyped_spa_reads_text(self):
        record = parse_one(residential("<features><spa>yes</spa></features>"))
        assert record.features.inside_spa is True

    def test_no_spa(self):
        record = parse_one(residential("<features><bedrooms>1</bedrooms></features>"))
        assert record.features.inside_spa is False

    def test_address_without_street_is_absent(self):
        record = parse_one(residential("<address><suburb>RICHMOND</suburb></address>"))
        assert record.address is None

    def test_address_country_defaults(self):
        record = parse_one(residential(
            "<address><street>Main Road</street><suburb>RICHMOND</suburb></address>"
        ))
        assert record.address.country == "AUS"
        assert record.address.display is True

    def test_agent_without_name(self):
        record = parse_one(residential("<listingAgent><email>a@b.com</email></listingAgent>"))
        assert record.agents[0].name == "Unknown"
        assert record.agents[0].position == 1

    def test_images_without_url_skipped(self):
        record = parse_one(residential('<images><img id="m"/><img id="a" url="http://x/a.jpg"/></images>'))
        assert len(record.images) == 1
        assert record.images[0].sort_order == 0

    def test_sold_details(self):
        record = parse_one(residential(
            '<soldDetails><price display="no">580000</price><date>2009-02-04</date></soldDetails>',
            attrs='status="sold"',
        ))
        assert record.status == "sold"
        assert record.sold_details.price == 580000.0
        assert record.sold_details.price_display == "no"
        assert record.sold_details.date == datetime(2009, 2, 4)

    def test_under_offer_reads_value_attribute(self):
        record = parse_one(residential('<underOffer value="yes"/>'))
        assert record.under_offer is True
