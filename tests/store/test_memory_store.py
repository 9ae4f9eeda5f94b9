"""Tests for the in-memory listing store."""

from __future__ import annotations

import json
from pathlib import Path

from src.common.models import ListingStatus, TradeMode
from src.store.base import ListingStore
from src.store.memory_store import InMemoryListingStore


class TestLoading:
    def test_from_json_skips_invalid_rows(self, sample_store):
        # ad-broken has no category_id
        assert len(sample_store) == 9
        assert sample_store.get_listing("ad-broken") is None

    def test_from_json_plain_list(self, tmp_path: Path):
        path = tmp_path / "rows.json"
        path.write_text(json.dumps([
            {"id": 1, "category_id": "cars", "sale_type": "exchange"},
            {"id": 2, "category_id": "phones"},
        ]), encoding="utf-8")

        store = InMemoryListingStore.from_json(path)

        assert len(store) == 2
        assert store.get_listing("1").trade_mode == TradeMode.EXCHANGE

    def test_satisfies_protocol(self, sample_store):
        assert isinstance(sample_store, ListingStore)

    def test_closed_listings_load_but_never_query(self):
        store = InMemoryListingStore.from_rows([
            {"id": "ad-sold", "category_id": "cars", "status": "sold"},
            {"id": "ad-gone", "category_id": "cars", "status": "deleted"},
            {"id": "ad-odd", "category_id": "cars", "status": "archived"},
            {"id": "ad-live", "category_id": "cars", "status": "active"},
        ])

        assert len(store) == 4
        assert store.get_listing("ad-sold").status == ListingStatus.SOLD
        assert store.get_listing("ad-odd").status == ListingStatus.INACTIVE
        assert [listing.id for listing in store.query_by_category("cars", limit=15)] == ["ad-live"]

    def test_get_listing_ignores_status(self, sample_store):
        assert sample_store.get_listing("ad-car-old").status == ListingStatus.INACTIVE
        assert sample_store.get_listing("nope") is None


class TestQueries:
    def test_by_category_active_only(self, sample_store):
        ids = [listing.id for listing in sample_store.query_by_category("cars", limit=15)]
        assert ids == ["ad-car-1", "ad-car-2", "ad-car-3"]

    def test_by_category_inactive_status(self, sample_store):
        ids = [
            listing.id for listing in sample_store.query_by_category(
                "cars", limit=15, status=ListingStatus.INACTIVE,
            )
        ]
        assert ids == ["ad-car-old"]

    def test_by_category_trade_mode_and_exclusions(self, sample_store):
        ids = [
            listing.id for listing in sample_store.query_by_category(
                "cars", exclude_ids=["ad-car-1"], limit=15, trade_mode=TradeMode.EXCHANGE,
            )
        ]
        assert ids == ["ad-car-2"]

    def test_limit(self, sample_store):
        assert len(sample_store.query_by_category("cars", limit=2)) == 2
        assert sample_store.query_by_category("cars", limit=0) == []

    def test_by_trade_mode_excluding_category(self, sample_store):
        ids = [
            listing.id for listing in sample_store.query_by_trade_mode(
                TradeMode.EXCHANGE,
                exclude_ids=["ad-phone-1"],
                limit=10,
                exclude_category_id="cars",
            )
        ]
        assert ids == ["ad-gold-1", "ad-legacy-1", "ad-laptop-1"]

    def test_text_match_title(self, sample_store):
        ids = [listing.id for listing in sample_store.query_by_text_match("لابتوب", "", limit=6)]
        assert ids == ["ad-laptop-1", "ad-laptop-2"]

    def test_text_match_case_insensitive(self, sample_store):
        ids = [listing.id for listing in sample_store.query_by_text_match("latitude", "", limit=6)]
        assert ids == ["ad-laptop-1"]

    def test_text_match_legacy_description(self, sample_store):
        ids = [
            listing.id for listing in sample_store.query_by_text_match(
                "", "موبايل لابتوب", exclude_ids=["ad-laptop-1"], limit=6,
            )
        ]
        assert ids == []
        ids = [listing.id for listing in sample_store.query_by_text_match("", "لابتوب", limit=6)]
        assert ids == ["ad-legacy-1"]

    def test_text_match_blank_terms(self, sample_store):
        assert sample_store.query_by_text_match("  ", "", limit=6) == []
