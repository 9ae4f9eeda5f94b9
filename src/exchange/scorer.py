"""Exchange match scoring — one candidate listing against one wanted item.

Scores a candidate out of 100 across three dimensions:
- Category:      up to 30 (20 for the category, 10 for the subcategory)
- Field overlap: up to 40 (per-field weight capped at 15)
- Bidirectional: up to 30 (the candidate wants what the origin has)

A candidate outside the wanted category short-circuits to a flat 5.
Points are only ever added; the total is clamped to [0, 100].
"""

from __future__ import annotations

import logging
import math
from typing import Any, Mapping

from src.common.models import Listing

from .category_config import CategoryRegistry
from .models import MatchScore, WantedItem
from .wanted_item import is_empty_value, non_empty_fields, parse_wanted_item

logger = logging.getLogger(__name__)

MISMATCH_SCORE = 5
CATEGORY_POINTS = 20
SUBCATEGORY_POINTS = 10
FIELDS_MAX_POINTS = 40
FIELD_POINTS_CAP = 15
UNCONSTRAINED_WANT_POINTS = 15
WANTS_MY_CATEGORY_POINTS = 15
REVERSE_FIELDS_MAX_POINTS = 15

REASON_DIFFERENT_CATEGORY = "قسم مختلف"
REASON_SAME_CATEGORY = "نفس القسم المطلوب"
REASON_SAME_SUBCATEGORY = "نفس القسم الفرعي"
REASON_ALL_FIELDS = "كل المواصفات المطلوبة متطابقة"
REASON_SOME_FIELDS = "{matched} من {total} مواصفات متطابقة"
REASON_WANTS_MINE = "الطرف التاني عايز اللي عندك"
REASON_MUTUAL_PERFECT = "تطابق مثالي — كل واحد عنده اللي التاني عايزه!"
REASON_MUTUAL_PARTIAL = "بعض مواصفات اللي عندك مطلوبة"


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def normalize_value(value: Any) -> str:
    """Comparable form of an attribute value: case-folded string.

    Booleans become "true"/"false" and integral floats lose their ".0", so
    ``256`` and ``"256"`` compare equal while ``"256GB"`` and ``"256"`` do not.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip().lower()


def count_field_matches(wanted: Mapping[str, Any], offered: Mapping[str, Any]) -> int:
    """Count wanted keys whose value equals the offered value, case-insensitively."""
    matched = 0
    for key, wanted_value in wanted.items():
        offered_value = offered.get(key)
        if is_empty_value(offered_value):
            continue
        if normalize_value(wanted_value) == normalize_value(offered_value):
            matched += 1
    return matched


class ExchangeScorer:
    """Computes a 0-100 compatibility score between a listing and a wanted item.

    Pure and deterministic: no I/O, no state beyond the category registry
    used to parse the candidate's own wanted item.

    Usage:
        scorer = ExchangeScorer(categories)
        result = scorer.score(candidate, wanted, "phones", {"brand": "apple"})
        # result.score -> 85, result.reasons -> ["نفس القسم المطلوب", ...]
    """

    def __init__(self, categories: CategoryRegistry | None = None) -> None:
        self.categories = categories

    def score(
        self,
        candidate: Listing,
        wanted: WantedItem,
        origin_category_id: str,
        origin_attributes: Mapping[str, Any],
    ) -> MatchScore:
        """Score one candidate against what the origin's owner wants.

        Args:
            candidate: Listing being considered as a trade partner.
            wanted: What the origin's owner wants in return.
            origin_category_id: Category of the listing being traded away.
            origin_attributes: Attribute bag of the listing being traded away.

        Returns:
            MatchScore with the clamped score and reasons in discovery order.
        """
        if candidate.category_id != wanted.category_id:
            return MatchScore(score=MISMATCH_SCORE, reasons=[REASON_DIFFERENT_CATEGORY])

        reasons: list[str] = []
        total = self._category_points(candidate, wanted, reasons)
        total += self._field_points(candidate, wanted, reasons)
        total += self._bidirectional_points(
            candidate, origin_category_id, origin_attributes, reasons
        )

        clamped = max(0, min(total, 100))
        logger.debug(
            "Score %s vs wanted %s: %d (%s)",
            candidate.id, wanted.category_id, clamped, "; ".join(reasons),
        )
        return MatchScore(score=clamped, reasons=reasons)

    @staticmethod
    def _category_points(
        candidate: Listing, wanted: WantedItem, reasons: list[str]
    ) -> int:
        points = CATEGORY_POINTS
        reasons.append(REASON_SAME_CATEGORY)
        if wanted.subcategory_id and candidate.subcategory_id == wanted.subcategory_id:
            points += SUBCATEGORY_POINTS
            reasons.append(REASON_SAME_SUBCATEGORY)
        return points

    @staticmethod
    def _field_points(
        candidate: Listing, wanted: WantedItem, reasons: list[str]
    ) -> int:
        wanted_fields = non_empty_fields(wanted.fields)
        if not wanted_fields:
            # Unconstrained want: baseline credit for the category alone
            return UNCONSTRAINED_WANT_POINTS

        total = len(wanted_fields)
        per_field = min(FIELDS_MAX_POINTS / total, FIELD_POINTS_CAP)
        matched = count_field_matches(wanted_fields, candidate.attributes)

        if matched == total:
            reasons.append(REASON_ALL_FIELDS)
        elif matched > 0:
            reasons.append(REASON_SOME_FIELDS.format(matched=matched, total=total))
        return round_half_up(per_field * matched)

    def _bidirectional_points(
        self,
        candidate: Listing,
        origin_category_id: str,
        origin_attributes: Mapping[str, Any],
        reasons: list[str],
    ) -> int:
        if not candidate.is_exchange:
            return 0
        their_wanted = parse_wanted_item(candidate.attributes, self.categories)
        if their_wanted is None or their_wanted.category_id != origin_category_id:
            return 0

        points = WANTS_MY_CATEGORY_POINTS
        reasons.append(REASON_WANTS_MINE)

        reverse_fields = non_empty_fields(their_wanted.fields)
        if not reverse_fields:
            return points

        matched = count_field_matches(reverse_fields, origin_attributes or {})
        if matched == len(reverse_fields):
            points += REVERSE_FIELDS_MAX_POINTS
            reasons.append(REASON_MUTUAL_PERFECT)
        elif matched > 0:
            points += round_half_up(REVERSE_FIELDS_MAX_POINTS * matched / len(reverse_fields))
            reasons.append(REASON_MUTUAL_PARTIAL)
        return points
