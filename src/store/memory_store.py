"""In-memory listing store.

Backs the CLI's ``--fixtures`` mode and the test suite. Query results keep
insertion order so runs over the same snapshot are reproducible.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable, Iterable

from pydantic import ValidationError

from src.common.models import Listing, ListingStatus, TradeMode

logger = logging.getLogger(__name__)


def _contains(haystack: str | None, needle: str | None) -> bool:
    needle = (needle or "").strip()
    if not haystack or not needle:
        return False
    return needle.lower() in haystack.lower()


class InMemoryListingStore:
    """Listing store over a fixed list of listings.

    Usage:
        store = InMemoryListingStore.from_json("tests/fixtures/sample_listings.json")
        store.query_by_category("phones", exclude_ids=["ad-1"], limit=15)
    """

    def __init__(self, listings: Iterable[Listing] = ()) -> None:
        self._listings: dict[str, Listing] = {}
        for listing in listings:
            self.add(listing)

    def add(self, listing: Listing) -> None:
        self._listings[listing.id] = listing

    def __len__(self) -> int:
        return len(self._listings)

    # --- Queries ---

    def query_by_category(
        self,
        category_id: str,
        *,
        exclude_ids: Iterable[str] = (),
        limit: int,
        trade_mode: TradeMode | None = None,
        status: ListingStatus = ListingStatus.ACTIVE,
    ) -> list[Listing]:
        return self._select(
            lambda listing: listing.category_id == category_id
            and (trade_mode is None or listing.trade_mode == trade_mode),
            exclude_ids, limit, status,
        )

    def query_by_trade_mode(
        self,
        trade_mode: TradeMode,
        *,
        exclude_ids: Iterable[str] = (),
        limit: int,
        exclude_category_id: str | None = None,
        status: ListingStatus = ListingStatus.ACTIVE,
    ) -> list[Listing]:
        return self._select(
            lambda listing: listing.trade_mode == trade_mode
            and (exclude_category_id is None or listing.category_id != exclude_category_id),
            exclude_ids, limit, status,
        )

    def query_by_text_match(
        self,
        wanted_text: str,
        offered_title: str,
        *,
        exclude_ids: Iterable[str] = (),
        limit: int,
        status: ListingStatus = ListingStatus.ACTIVE,
    ) -> list[Listing]:
        return self._select(
            lambda listing: _contains(listing.title, wanted_text)
            or _contains(listing.legacy_exchange_text, offered_title),
            exclude_ids, limit, status,
        )

    def get_listing(self, listing_id: str) -> Listing | None:
        return self._listings.get(listing_id)

    def _select(
        self,
        predicate: Callable[[Listing], bool],
        exclude_ids: Iterable[str],
        limit: int,
        status: ListingStatus,
    ) -> list[Listing]:
        excluded = set(exclude_ids)
        results: list[Listing] = []
        for listing in self._listings.values():
            if len(results) >= limit:
                break
            if listing.id in excluded or listing.status != status:
                continue
            if predicate(listing):
                results.append(listing)
        return results

    # --- Loading ---

    @classmethod
    def from_rows(cls, rows: Iterable[dict[str, Any]]) -> InMemoryListingStore:
        """Build a store from raw ``ads`` rows, skipping rows that fail validation."""
        store = cls()
        for row in rows:
            try:
                store.add(Listing.model_validate(row))
            except ValidationError as e:
                logger.warning("Skipping invalid listing row %s: %s", row.get("id"), e)
        return store

    @classmethod
    def from_json(cls, path: str | Path) -> InMemoryListingStore:
        """Load listings from a JSON file (a list of rows, or ``{"listings": [...]}``)."""
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        rows = data.get("listings", []) if isinstance(data, dict) else data
        store = cls.from_rows(rows)
        logger.info("Loaded %d listings from %s", len(store), path)
        return store
