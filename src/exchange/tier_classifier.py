"""Match tier classification.

Maps a 0-100 match score onto the four tiers the listing page names:
perfect (>= 80), strong (>= 60), good (>= 40), partial (below 40).
"""

from __future__ import annotations

from dataclasses import dataclass

from .models import MatchTier


@dataclass(frozen=True)
class TierDisplay:
    """Display copy for a tier."""

    label: str
    icon: str
    min_score: int


# Ordered from highest threshold to lowest
TIER_CONFIG: dict[MatchTier, TierDisplay] = {
    MatchTier.PERFECT: TierDisplay(label="تطابق مثالي", icon="🎯", min_score=80),
    MatchTier.STRONG: TierDisplay(label="تطابق قوي", icon="💪", min_score=60),
    MatchTier.GOOD: TierDisplay(label="مطابقة جيدة", icon="👍", min_score=40),
    MatchTier.PARTIAL: TierDisplay(label="مطابقة جزئية", icon="🔍", min_score=0),
}


def classify_tier(score: int) -> MatchTier:
    """Return the tier for a score. Lower bounds are inclusive."""
    for tier, display in TIER_CONFIG.items():
        if score >= display.min_score:
            return tier
    return MatchTier.PARTIAL


def tier_label(tier: MatchTier) -> str:
    return TIER_CONFIG[tier].label
