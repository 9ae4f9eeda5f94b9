"""3-way trade chain detection.

Finds loops A→B→C→A where A is the origin:
- A has [A.category] and wants [X]
- B has [X] and wants [Y], with Y != A.category (else it is a direct match)
- C has [Y] and wants [A.category]

Search breadth is bounded (10 B candidates, 5 C candidates per B) and at
most 3 chains are returned overall. This is a bounded best-effort search,
not an exhaustive one.
"""

from __future__ import annotations

import logging

from src.common.config import ChainSettings
from src.common.models import Listing, TradeMode
from src.store.base import ListingStore

from .category_config import CategoryRegistry, category_icon
from .models import ChainExchange, ChainLink, WantedItem
from .wanted_item import parse_wanted_item

logger = logging.getLogger(__name__)


class ChainDetector:
    """Searches the listing store for closed 3-party trade loops.

    Usage:
        detector = ChainDetector(store, categories)
        chains = detector.find_chains(origin, wanted)
        # chains[0].links -> [ChainLink(B), ChainLink(C)]
    """

    def __init__(
        self,
        store: ListingStore,
        categories: CategoryRegistry | None = None,
        settings: ChainSettings | None = None,
    ) -> None:
        self.store = store
        self.categories = categories
        self.settings = settings or ChainSettings()

    def find_chains(self, origin: Listing, wanted: WantedItem) -> list[ChainExchange]:
        """Find up to ``max_chains`` loops through the origin listing.

        Args:
            origin: Listing A, the one being traded away.
            wanted: What A's owner wants (B's category).

        Returns:
            Chains in discovery order; empty when none are found or the
            store cannot be queried.
        """
        b_candidates = self._fetch(
            wanted.category_id,
            exclude_ids=[origin.id],
            limit=self.settings.b_candidate_limit,
        )

        chains: list[ChainExchange] = []
        for b in b_candidates:
            if len(chains) >= self.settings.max_chains:
                break
            if b.id == origin.id:
                continue

            b_wanted = parse_wanted_item(b.attributes, self.categories)
            # B wanting A's category is a direct match, reported by the matcher
            if b_wanted is None or b_wanted.category_id == origin.category_id:
                continue

            target_category = b_wanted.category_id
            c_candidates = self._fetch(
                target_category,
                exclude_ids=[origin.id, b.id],
                limit=self.settings.c_candidate_limit,
            )

            for c in c_candidates:
                if len(chains) >= self.settings.max_chains:
                    break
                if c.id in (origin.id, b.id) or c.category_id != target_category:
                    continue

                c_wanted = parse_wanted_item(c.attributes, self.categories)
                if c_wanted is None or c_wanted.category_id != origin.category_id:
                    continue

                chains.append(
                    ChainExchange(
                        links=[self._link(b, b_wanted), self._link(c, c_wanted)],
                        total_score=self.settings.chain_score,
                    )
                )
                logger.debug("Chain found: %s → %s → %s", origin.id, b.id, c.id)

        logger.info("Chain exchanges for %s: %d", origin.id, len(chains))
        return chains

    def _fetch(self, category_id: str, exclude_ids: list[str], limit: int) -> list[Listing]:
        try:
            return list(
                self.store.query_by_category(
                    category_id,
                    exclude_ids=exclude_ids,
                    limit=limit,
                    trade_mode=TradeMode.EXCHANGE,
                )
                or []
            )
        except Exception as e:
            logger.warning(
                "Chain candidates in %s unavailable: %s", category_id, e, exc_info=True
            )
            return []

    def _link(self, listing: Listing, wanted: WantedItem) -> ChainLink:
        wants = wanted.title
        if not wants and self.categories is not None:
            wants = self.categories.name_for(wanted.category_id)
        return ChainLink(
            listing_id=listing.id,
            title=listing.title,
            image=listing.image,
            category_icon=category_icon(self.categories, listing.category_id),
            display_has=listing.title,
            display_wants=wants,
        )
