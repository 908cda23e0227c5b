"""
Unit tests for the listing repository.
"""

import pytest

from reaxmlfeed.core.repository import open_repository
from reaxmlfeed.exceptions import ValidationError
from reaxmlfeed.reaxml.mapper import map_listing


class TestAgencies:
    """Tests for agency registration."""

    def test_register_and_find(self, repository):
        agency_id = repository.register_agency("XNWXNW", "Example Realty")
        agency = repository.find_agency("XNWXNW")
        assert agency == {"id": agency_id, "agent_id_code": "XNWXNW", "name": "Example Realty"}

    def test_find_unknown(self, repository):
        assert repository.find_agency("NOPE") is None

    def test_codes_are_case_sensitive(self, repository, agency_id):
        assert repository.find_agency("xnwxnw") is None

    def test_reregister_keeps_id(self, repository, agency_id):
        again = repository.register_agency("XNWXNW", "Renamed Realty")
        assert again == agency_id
        assert repository.find_agency("XNWXNW")["name"] == "Renamed Realty"
        assert len(repository.list_agencies()) == 1

    def test_register_trims_values(self, repository):
        repository.register_agency("  ABC  ", " Agency ")
        assert repository.find_agency("ABC")["name"] == "Agency"

    @pytest.mark.parametrize("code,name", [("", "Name"), ("ABC", "  ")])
    def test_blank_values_rejected(self, repository, code, name):
        with pytest.raises(ValidationError):
            repository.register_agency(code, name)

    def test_list_agencies_sorted(self, repository):
        repository.register_agency("ZZZ", "Last")
        repository.register_agency("AAA", "First")
        assert [a["agent_id_code"] for a in repository.list_agencies()] == ["AAA", "ZZZ"]

    def test_persists_across_connections(self, temp_db):
        with open_repository(temp_db) as repo:
            repo.register_agency("XNWXNW", "Example Realty")
        with open_repository(temp_db) as repo:
            assert repo.find_agency("XNWXNW") is not None


class TestListings:
    """Tests for listing writes and read-back."""

    def _store(self, repository, agency_id, record, listing_id="listing-1"):
        mapped = map_listing(record, agency_id, listing_id)
        with repository.transaction():
            repository.insert_listing(mapped.listing)
            repository.insert_children(mapped)
        return listing_id

    def test_insert_and_find(self, repository, agency_id, make_record):
        listing_id = self._store(repository, agency_id, make_record())
        assert repository.find_listing("XNWXNW", "RES-1") == {"id": listing_id, "status": "current"}
        assert repository.count_listings() == 1

    def test_find_listing_missing(self, repository):
        assert repository.find_listing("XNWXNW", "RES-1") is None

    def test_get_listing_sets_timestamps(self, repository, agency_id, make_record):
        listing_id = self._store(repository, agency_id, make_record())
        row = repository.get_listing(listing_id)
        assert row["created_at"]
        assert row["updated_at"]
        assert row["price"] == "500000"
        assert row["price_display"] == 1

    def test_children_read_back(self, repository, agency_id, make_record):
        listing_id = self._store(repository, agency_id, make_record())
        children = repository.get_children(listing_id)
        assert len(children["listing_addresses"]) == 1
        assert children["listing_features"] == []
        assert len(children["listing_images"]) == 1
        assert children["listing_agents"][0]["name"] == "John Doe"

    def test_update_listing(self, repository, agency_id, make_record):
        listing_id = self._store(repository, agency_id, make_record())
        with repository.transaction():
            updated = repository.update_listing(listing_id, {"status": "sold", "id": "ignored"})
        assert updated == 1
        assert repository.get_listing(listing_id)["status"] == "sold"

    def test_update_missing_listing(self, repository):
        assert repository.update_listing("nope", {"status": "sold"}) == 0

    def test_delete_children(self, repository, agency_id, make_record):
        listing_id = self._store(repository, agency_id, make_record())
        with repository.transaction():
            deleted = repository.delete_children(listing_id)
        assert deleted == 3
        assert all(rows == [] for rows in repository.get_children(listing_id).values())

    def test_rollback_discards_listing(self, repository, agency_id, make_record):
        mapped = map_listing(make_record(), agency_id, "listing-1")
        with pytest.raises(RuntimeError):
            with repository.transaction():
                repository.insert_listing(mapped.listing)
                raise RuntimeError("boom")
        assert repository.count_listings() == 0
