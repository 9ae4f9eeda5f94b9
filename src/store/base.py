"""Listing store contract consumed by the exchange engine.

The engine only reads. Implementations return validated ``Listing``
objects and raise ``RetrievalError`` when a query cannot be answered.
"""

from __future__ import annotations

from typing import Iterable, Protocol, runtime_checkable

from src.common.models import Listing, ListingStatus, TradeMode


@runtime_checkable
class ListingStore(Protocol):
    """Read-only listing queries used by candidate retrieval and chain search."""

    def query_by_category(
        self,
        category_id: str,
        *,
        exclude_ids: Iterable[str] = (),
        limit: int,
        trade_mode: TradeMode | None = None,
        status: ListingStatus = ListingStatus.ACTIVE,
    ) -> list[Listing]:
        """Listings in ``category_id``, optionally restricted to one trade mode."""
        ...

    def query_by_trade_mode(
        self,
        trade_mode: TradeMode,
        *,
        exclude_ids: Iterable[str] = (),
        limit: int,
        exclude_category_id: str | None = None,
        status: ListingStatus = ListingStatus.ACTIVE,
    ) -> list[Listing]:
        """Listings offered in ``trade_mode``, optionally outside one category."""
        ...

    def query_by_text_match(
        self,
        wanted_text: str,
        offered_title: str,
        *,
        exclude_ids: Iterable[str] = (),
        limit: int,
        status: ListingStatus = ListingStatus.ACTIVE,
    ) -> list[Listing]:
        """Listings whose title contains ``wanted_text`` or whose legacy
        exchange text contains ``offered_title`` (case-insensitive substring)."""
        ...

    def get_listing(self, listing_id: str) -> Listing | None:
        """Single listing by id, regardless of status."""
        ...
