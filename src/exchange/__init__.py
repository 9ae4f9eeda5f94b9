"""Exchange Module — Smart barter matching for marketplace listings.

Finds trade partners for exchange listings (category, field and
bidirectional scoring) and 3-way trade chains A→B→C→A.
"""

from .category_config import CategoryConfig, CategoryRegistry
from .engine import ExchangeEngine
from .models import (
    ChainExchange,
    ChainLink,
    ExchangeReport,
    MatchResult,
    MatchTier,
    WantedItem,
)
from .tier_classifier import classify_tier
from .wanted_item import generate_wanted_title, parse_wanted_item

__all__ = [
    "CategoryConfig",
    "CategoryRegistry",
    "ExchangeEngine",
    "ChainExchange",
    "ChainLink",
    "ExchangeReport",
    "MatchResult",
    "MatchTier",
    "WantedItem",
    "classify_tier",
    "generate_wanted_title",
    "parse_wanted_item",
]
