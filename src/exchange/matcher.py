"""Pairwise exchange matching.

Runs retrieval → scoring → tier classification → sort/truncate for one
origin listing. ``LegacyTextMatcher`` covers listings created before
structured wanted items existed.
"""

from __future__ import annotations

import logging

from src.common.config import MatchingSettings
from src.common.models import Listing
from src.store.base import ListingStore

from .candidate_retriever import CandidateRetriever
from .category_config import CategoryRegistry, category_icon
from .models import CandidatePool, MatchResult, WantedItem
from .scorer import ExchangeScorer
from .tier_classifier import classify_tier
from .wanted_item import parse_wanted_item

logger = logging.getLogger(__name__)

LEGACY_EXCHANGE_SCORE = 80
LEGACY_SALE_SCORE = 30
REASON_LEGACY_EXCHANGE = "ممكن يناسبك للتبديل"
REASON_LEGACY_SALE = "بيبيع اللي أنت عايزه"


class ExchangeMatcher:
    """Ranks trade partners for an origin listing with a structured wanted item.

    Usage:
        matcher = ExchangeMatcher(store, categories)
        results = matcher.find_matches(origin, wanted)
        # results[0].tier -> MatchTier.PERFECT
    """

    def __init__(
        self,
        store: ListingStore,
        categories: CategoryRegistry | None = None,
        settings: MatchingSettings | None = None,
    ) -> None:
        self.categories = categories
        self.settings = settings or MatchingSettings()
        self.retriever = CandidateRetriever(store, self.settings)
        self.scorer = ExchangeScorer(categories)

    def find_matches(self, origin: Listing, wanted: WantedItem) -> list[MatchResult]:
        """Score every candidate and return the best, highest score first.

        Candidates scoring under the floor are dropped as noise. Sorting is
        stable, so equal scores keep pool order (A, B, C).
        """
        results: list[MatchResult] = []
        for candidate in self.retriever.retrieve(origin, wanted):
            listing = candidate.listing
            match = self.scorer.score(
                listing, wanted, origin.category_id, origin.attributes
            )
            if match.score < self.settings.score_floor:
                continue

            results.append(
                MatchResult(
                    listing=listing,
                    score=match.score,
                    tier=classify_tier(match.score),
                    reasons=match.reasons,
                    category_icon=category_icon(self.categories, listing.category_id),
                    wanted_item=parse_wanted_item(listing.attributes, self.categories),
                    source_pool=candidate.pool,
                )
            )

        results.sort(key=lambda r: r.score, reverse=True)
        results = results[: self.settings.max_results]

        logger.info(
            "Exchange matches for %s: %d (%s)",
            origin.id,
            len(results),
            {r.listing_id: r.score for r in results},
        )
        return results


class LegacyTextMatcher:
    """Text-only matching for listings without a structured wanted item.

    Exchange-mode hits are offered as likely swaps; anything else is a
    listing selling what the owner described wanting.
    """

    def __init__(
        self,
        store: ListingStore,
        categories: CategoryRegistry | None = None,
        settings: MatchingSettings | None = None,
    ) -> None:
        self.store = store
        self.categories = categories
        self.settings = settings or MatchingSettings()

    def find_matches(self, origin: Listing) -> list[MatchResult]:
        if not origin.legacy_exchange_text:
            return []
        try:
            listings = self.store.query_by_text_match(
                origin.legacy_exchange_text,
                origin.title,
                exclude_ids=[origin.id],
                limit=self.settings.text_match_limit,
            )
        except Exception as e:
            logger.warning(
                "Legacy text matching unavailable for %s: %s", origin.id, e, exc_info=True
            )
            return []

        results: list[MatchResult] = []
        for listing in listings:
            if listing.id == origin.id:
                continue
            if listing.is_exchange:
                score, reason = LEGACY_EXCHANGE_SCORE, REASON_LEGACY_EXCHANGE
            else:
                score, reason = LEGACY_SALE_SCORE, REASON_LEGACY_SALE
            results.append(
                MatchResult(
                    listing=listing,
                    score=score,
                    tier=classify_tier(score),
                    reasons=[reason],
                    category_icon=category_icon(self.categories, listing.category_id),
                    source_pool=CandidatePool.LEGACY_TEXT,
                )
            )
        return results
