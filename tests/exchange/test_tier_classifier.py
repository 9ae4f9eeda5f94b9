"""Tests for match tier classification."""

import pytest

from src.exchange.models import MatchTier
from src.exchange.tier_classifier import TIER_CONFIG, classify_tier, tier_label


class TestClassifyTier:
    @pytest.mark.parametrize("score, tier", [
        (100, MatchTier.PERFECT),
        (80, MatchTier.PERFECT),
        (79, MatchTier.STRONG),
        (60, MatchTier.STRONG),
        (59, MatchTier.GOOD),
        (40, MatchTier.GOOD),
        (39, MatchTier.PARTIAL),
        (15, MatchTier.PARTIAL),
        (0, MatchTier.PARTIAL),
    ])
    def test_boundaries(self, score, tier):
        assert classify_tier(score) == tier

    def test_monotonic(self):
        order = [MatchTier.PARTIAL, MatchTier.GOOD, MatchTier.STRONG, MatchTier.PERFECT]
        ranks = [order.index(classify_tier(s)) for s in range(0, 101)]
        assert ranks == sorted(ranks)

    def test_every_tier_has_display(self):
        assert set(TIER_CONFIG) == set(MatchTier)
        assert tier_label(MatchTier.PERFECT) == "تطابق مثالي"
        assert tier_label(MatchTier.PARTIAL) == "مطابقة جزئية"
