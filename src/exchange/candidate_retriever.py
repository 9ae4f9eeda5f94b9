"""Candidate retrieval for exchange matching.

Pulls three overlapping candidate pools from the listing store and merges
them into one deduplicated list:

- Pool A: listings in the wanted category (highest relevance)
- Pool B: exchange listings elsewhere that might want the origin's category
- Pool C: text containment against legacy free-text exchange descriptions

A pool whose query fails is treated as empty.
"""

from __future__ import annotations

import logging

from src.common.config import MatchingSettings
from src.common.models import Listing, TradeMode
from src.store.base import ListingStore

from .models import Candidate, CandidatePool, WantedItem

logger = logging.getLogger(__name__)


class CandidateRetriever:
    """Fetches and deduplicates candidate listings for one origin.

    Usage:
        retriever = CandidateRetriever(store)
        candidates = retriever.retrieve(origin, wanted)
    """

    def __init__(
        self,
        store: ListingStore,
        settings: MatchingSettings | None = None,
    ) -> None:
        self.store = store
        self.settings = settings or MatchingSettings()

    def retrieve(self, origin: Listing, wanted: WantedItem) -> list[Candidate]:
        """Collect all pools, then merge A, B, C keeping each id's first occurrence.

        Args:
            origin: The listing being traded away.
            wanted: What the origin's owner wants in return.

        Returns:
            Deduplicated candidates in pool order.
        """
        pools = [
            (CandidatePool.WANTED_CATEGORY, self._wanted_category_pool(origin, wanted)),
            (CandidatePool.REVERSE_EXCHANGE, self._reverse_exchange_pool(origin, wanted)),
            (CandidatePool.LEGACY_TEXT, self._legacy_text_pool(origin)),
        ]

        seen: set[str] = set()
        candidates: list[Candidate] = []
        for pool, listings in pools:
            for listing in listings:
                if listing.id in seen or listing.id == origin.id:
                    continue
                seen.add(listing.id)
                candidates.append(Candidate(listing=listing, pool=pool))

        logger.info(
            "Retrieved %d candidates for %s (pools: %s)",
            len(candidates),
            origin.id,
            {pool.value: len(listings) for pool, listings in pools},
        )
        return candidates

    def _wanted_category_pool(self, origin: Listing, wanted: WantedItem) -> list[Listing]:
        return self._safe_query(
            CandidatePool.WANTED_CATEGORY,
            lambda: self.store.query_by_category(
                wanted.category_id,
                exclude_ids=[origin.id],
                limit=self.settings.wanted_category_limit,
            ),
        )

    def _reverse_exchange_pool(self, origin: Listing, wanted: WantedItem) -> list[Listing]:
        # Wanted category is already covered by pool A
        return self._safe_query(
            CandidatePool.REVERSE_EXCHANGE,
            lambda: self.store.query_by_trade_mode(
                TradeMode.EXCHANGE,
                exclude_ids=[origin.id],
                limit=self.settings.reverse_exchange_limit,
                exclude_category_id=wanted.category_id,
            ),
        )

    def _legacy_text_pool(self, origin: Listing) -> list[Listing]:
        if not origin.legacy_exchange_text:
            return []
        return self._safe_query(
            CandidatePool.LEGACY_TEXT,
            lambda: self.store.query_by_text_match(
                origin.legacy_exchange_text,
                origin.title,
                exclude_ids=[origin.id],
                limit=self.settings.text_match_limit,
            ),
        )

    @staticmethod
    def _safe_query(pool: CandidatePool, query) -> list[Listing]:
        try:
            return list(query() or [])
        except Exception as e:
            logger.warning("Candidate pool %s unavailable: %s", pool.value, e, exc_info=True)
            return []
