"""Tests for the listing search pipeline."""

import asyncio
from typing import Dict

from rental_listings_api.app.core.db import DocumentStore
from rental_listings_api.app.schemas.property import PropertyFilters
from rental_listings_api.app.services.search_service import SearchService, parse_minimum

from conftest import COLLECTION


def search(store, **criteria):
    return asyncio.run(SearchService(store, collection=COLLECTION).search(PropertyFilters(**criteria)))


def titles(results):
    return [prop.title for prop in results]


class StubStore(DocumentStore):
    """Returns canned query results and records the query it received."""

    def __init__(self, rows):
        self.rows = rows
        self.calls = []

    def get(self, collection, doc_id):
        return None

    def query(self, collection, filters, order_by=None):
        self.calls.append((collection, filters, order_by))
        return self.rows

    def add(self, collection, data):
        raise NotImplementedError

    def update(self, collection, doc_id, changes):
        raise NotImplementedError

    def delete(self, collection, doc_id):
        raise NotImplementedError


class TestBuildQuery:
    def test_no_filters_orders_by_title(self) -> None:
        assert SearchService.build_query(PropertyFilters()) == ([], "title")

    def test_price_bounds_order_by_price(self) -> None:
        filters, order_by = SearchService.build_query(PropertyFilters(min_price=50000, max_price=100000))
        assert filters == [("price", ">=", 50000), ("price", "<=", 100000)]
        assert order_by == "price"

    def test_room_bounds_keep_title_order(self) -> None:
        filters, order_by = SearchService.build_query(PropertyFilters(min_bedrooms=2, min_bathrooms=1))
        assert filters == [("bedrooms", ">=", 2), ("bathrooms", ">=", 1)]
        assert order_by == "title"


class TestParseMinimum:
    def test_all_means_no_bound(self) -> None:
        assert parse_minimum("all") is None
        assert parse_minimum(None) is None

    def test_numbers(self) -> None:
        assert parse_minimum("2") == 2
        assert parse_minimum("two") is None


class TestSearch:
    def test_everything_sorted_by_title(self, store, seeded: Dict[str, str]) -> None:
        assert titles(search(store)) == sorted(seeded)

    def test_price_range(self, store, seeded) -> None:
        results = search(store, min_price=50000, max_price=100000)
        assert [prop.price for prop in results] == [60000, 75000]

    def test_min_bedrooms(self, store, seeded) -> None:
        assert titles(search(store, min_bedrooms=3)) == ["Beachfront Villa in Nyali", "Family Home in Lavington"]

    def test_query_is_case_insensitive(self, store, seeded) -> None:
        assert titles(search(store, q="KILIMANI")) == [
            "Cozy Studio near Yaya Centre",
            "Spacious 2 Bedroom Apt in Kilimani",
        ]

    def test_query_matches_amenities(self, store, seeded) -> None:
        assert titles(search(store, q="beach access")) == ["Beachfront Villa in Nyali"]

    def test_query_matches_description(self, store, seeded) -> None:
        assert titles(search(store, q="trm")) == ["Affordable Bedsitter in Roysambu"]

    def test_location(self, store, seeded) -> None:
        assert titles(search(store, location="mombasa")) == ["Beachfront Villa in Nyali"]

    def test_location_equal_to_query_is_not_applied_twice(self, store, seeded) -> None:
        # "gym" only matches amenities, so a location filter would empty the result.
        assert titles(search(store, q="gym", location="Gym")) == titles(search(store, q="gym"))
        assert len(search(store, q="gym")) == 2

    def test_amenities_subset(self, store, seeded) -> None:
        results = search(store, amenities=["Parking", "Gym"])
        assert titles(results) == ["Modern 1 Bedroom in Westlands", "Spacious 2 Bedroom Apt in Kilimani"]
        for prop in results:
            assert {"Parking", "Gym"} <= set(prop.amenities)

    def test_filters_combine(self, store, seeded) -> None:
        results = search(store, q="nairobi", min_price=50000, amenities=["Security"])
        assert titles(results) == ["Modern 1 Bedroom in Westlands", "Family Home in Lavington"]

    def test_no_match(self, store, seeded) -> None:
        assert search(store, q="kisumu") == []

    def test_documents_without_data_are_skipped(self) -> None:
        stub = StubStore([("empty", None), ("blank", {}), ("ok", {"title": "Flat", "price": 5, "location": "X"})])
        assert titles(search(stub)) == ["Flat"]
        assert stub.calls == [(COLLECTION, [], "title")]
