"""Exchange engine — the entry points the listing page calls.

Wires the listing store, category registry and settings into the matcher
and chain detector. Every call is read-only and independent, so one
engine instance can serve any number of origins.

Usage:
    engine = ExchangeEngine.from_settings(store)
    matches = engine.find_smart_exchange_matches(origin)
    chains = engine.find_chain_exchanges(origin)
"""

from __future__ import annotations

import logging

from src.common.config import Settings, settings as default_settings
from src.common.models import Listing
from src.store.base import ListingStore

from .category_config import CategoryRegistry
from .chain_detector import ChainDetector
from .matcher import ExchangeMatcher, LegacyTextMatcher
from .models import ChainExchange, ExchangeReport, MatchResult, WantedItem
from .wanted_item import parse_wanted_item

logger = logging.getLogger(__name__)


class ExchangeEngine:
    """Finds trade partners and 3-way trade chains for exchange listings."""

    def __init__(
        self,
        store: ListingStore,
        categories: CategoryRegistry,
        settings: Settings | None = None,
    ) -> None:
        self.store = store
        self.categories = categories
        self.settings = settings or default_settings
        self.matcher = ExchangeMatcher(store, categories, self.settings.matching)
        self.legacy_matcher = LegacyTextMatcher(store, categories, self.settings.matching)
        self.chain_detector = ChainDetector(store, categories, self.settings.chains)

    @classmethod
    def from_settings(
        cls, store: ListingStore, settings: Settings | None = None
    ) -> ExchangeEngine:
        """Build an engine with the category registry named in settings."""
        settings = settings or default_settings
        categories = CategoryRegistry.from_yaml(settings.categories_abs_path)
        return cls(store, categories, settings)

    def wanted_item_for(self, origin: Listing) -> WantedItem | None:
        """The origin's structured wanted item, if it has one."""
        return parse_wanted_item(origin.attributes, self.categories)

    def find_smart_exchange_matches(
        self, origin: Listing, wanted: WantedItem | None = None
    ) -> list[MatchResult]:
        """Ranked trade partners (at most ``max_results``) for a structured want."""
        wanted = wanted or self.wanted_item_for(origin)
        if wanted is None:
            logger.debug("Listing %s has no wanted item; no smart matches", origin.id)
            return []
        return self.matcher.find_matches(origin, wanted)

    def find_chain_exchanges(
        self, origin: Listing, wanted: WantedItem | None = None
    ) -> list[ChainExchange]:
        """3-way trade loops (at most ``max_chains``) through the origin."""
        wanted = wanted or self.wanted_item_for(origin)
        if wanted is None:
            return []
        return self.chain_detector.find_chains(origin, wanted)

    def find_exchange_matches(self, origin: Listing) -> list[MatchResult]:
        """Structured matching when possible, legacy text matching otherwise."""
        wanted = self.wanted_item_for(origin)
        if wanted is not None:
            return self.matcher.find_matches(origin, wanted)
        return self.legacy_matcher.find_matches(origin)

    def find_all(self, origin: Listing) -> ExchangeReport:
        """Matches and chains together, as the listing detail page shows them."""
        wanted = self.wanted_item_for(origin)
        if wanted is None:
            return ExchangeReport(
                origin_id=origin.id,
                matches=self.legacy_matcher.find_matches(origin),
            )
        return ExchangeReport(
            origin_id=origin.id,
            matches=self.matcher.find_matches(origin, wanted),
            chains=self.chain_detector.find_chains(origin, wanted),
        )
