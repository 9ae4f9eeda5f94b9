"""Data models for the exchange matching engine.

All result models use @dataclass with to_dict() for JSON serialization.
None of them are persisted; they are rebuilt from the listing store on
every request.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from src.common.models import Listing


class MatchTier(str, Enum):
    """Human-facing bucket for a numeric match score."""
    PERFECT = "perfect"
    STRONG = "strong"
    GOOD = "good"
    PARTIAL = "partial"


class CandidatePool(str, Enum):
    """Query strategy that surfaced a candidate listing."""
    WANTED_CATEGORY = "wanted_category"
    REVERSE_EXCHANGE = "reverse_exchange"
    LEGACY_TEXT = "legacy_text"


@dataclass
class WantedItem:
    """What the owner of an exchange listing wants in return."""

    category_id: str
    subcategory_id: str | None = None
    fields: dict[str, Any] = field(default_factory=dict)
    title: str = ""

    def to_payload(self) -> dict:
        """Render the ``exchange_wanted`` dict stored in the attribute bag."""
        payload: dict[str, Any] = {
            "category_id": self.category_id,
            "fields": dict(self.fields),
            "title": self.title,
        }
        if self.subcategory_id:
            payload["subcategory_id"] = self.subcategory_id
        return payload

    def to_dict(self) -> dict:
        return {
            "category_id": self.category_id,
            "subcategory_id": self.subcategory_id,
            "fields": dict(self.fields),
            "title": self.title,
        }


@dataclass
class Candidate:
    """A listing fetched by the retriever, tagged with its pool."""

    listing: Listing
    pool: CandidatePool


@dataclass
class MatchScore:
    """Scorer output: bounded score plus the reasons behind it."""

    score: int
    reasons: list[str] = field(default_factory=list)


@dataclass
class MatchResult:
    """One ranked trade partner for an origin listing."""

    listing: Listing
    score: int
    tier: MatchTier
    reasons: list[str] = field(default_factory=list)
    category_icon: str = ""
    wanted_item: WantedItem | None = None
    source_pool: CandidatePool | None = None

    @property
    def listing_id(self) -> str:
        return self.listing.id

    def to_dict(self) -> dict:
        return {
            "listing_id": self.listing.id,
            "title": self.listing.title,
            "image": self.listing.image,
            "trade_mode": self.listing.trade_mode.value,
            "price": self.listing.price,
            "legacy_exchange_text": self.listing.legacy_exchange_text,
            "wanted_item": self.wanted_item.to_dict() if self.wanted_item else None,
            "governorate": self.listing.governorate,
            "city": self.listing.city,
            "tier": self.tier.value,
            "score": self.score,
            "reasons": list(self.reasons),
            "category_icon": self.category_icon,
            "source_pool": self.source_pool.value if self.source_pool else None,
        }


@dataclass
class ChainLink:
    """One hop of a 3-way trade: what this listing's owner has and wants."""

    listing_id: str
    title: str
    category_icon: str
    display_has: str
    display_wants: str
    image: str | None = None

    def to_dict(self) -> dict:
        return {
            "listing_id": self.listing_id,
            "title": self.title,
            "image": self.image,
            "category_icon": self.category_icon,
            "display_has": self.display_has,
            "display_wants": self.display_wants,
        }


@dataclass
class ChainExchange:
    """A closed loop A→B→C→A. ``links`` holds B then C; A is the origin."""

    links: list[ChainLink]
    total_score: int

    def to_dict(self) -> dict:
        return {
            "links": [link.to_dict() for link in self.links],
            "total_score": self.total_score,
        }


@dataclass
class ExchangeReport:
    """Matches and chains for one origin listing, as the detail page shows them."""

    origin_id: str
    matches: list[MatchResult] = field(default_factory=list)
    chains: list[ChainExchange] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "origin_id": self.origin_id,
            "matches": [m.to_dict() for m in self.matches],
            "chains": [c.to_dict() for c in self.chains],
        }
