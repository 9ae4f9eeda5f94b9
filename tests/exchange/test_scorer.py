"""Tests for the exchange match scorer."""

from __future__ import annotations

import pytest

from src.common.models import TradeMode
from src.exchange.models import WantedItem
from src.exchange.scorer import (
    MISMATCH_SCORE,
    REASON_ALL_FIELDS,
    REASON_DIFFERENT_CATEGORY,
    REASON_MUTUAL_PARTIAL,
    REASON_MUTUAL_PERFECT,
    REASON_SAME_CATEGORY,
    REASON_SAME_SUBCATEGORY,
    REASON_WANTS_MINE,
    ExchangeScorer,
    count_field_matches,
    normalize_value,
    round_half_up,
)


ORIGIN_CAR = {"brand": "toyota", "model": "Corolla", "year": 2018, "mileage": 90000}


@pytest.fixture
def scorer(categories) -> ExchangeScorer:
    return ExchangeScorer(categories)


class TestHelpers:
    @pytest.mark.parametrize("value, expected", [
        (0.5, 1), (1.5, 2), (2.5, 3), (13.333, 13), (26.667, 27), (7.5, 8), (0, 0),
    ])
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected

    def test_normalize_value(self):
        assert normalize_value("Apple ") == "apple"
        assert normalize_value(256) == normalize_value("256")
        assert normalize_value(256.0) == "256"
        assert normalize_value(True) == "true"
        assert normalize_value("256GB") != normalize_value("256")

    def test_count_field_matches(self):
        wanted = {"brand": "Apple", "storage": "256", "color": "black"}
        offered = {"brand": "apple", "storage": 256, "color": ""}
        assert count_field_matches(wanted, offered) == 2
        assert count_field_matches(wanted, {}) == 0


class TestCategoryGate:
    def test_different_category_scores_five(self, scorer, make_listing):
        candidate = make_listing(
            "c1", "phones", "mobile", {"brand": "apple"},
            wants={"category_id": "cars"},
        )
        wanted = WantedItem(category_id="cars", fields={"brand": "toyota"})
        result = scorer.score(candidate, wanted, "phones", {})
        assert result.score == MISMATCH_SCORE == 5
        assert result.reasons == [REASON_DIFFERENT_CATEGORY]


class TestCategoryAndFields:
    def test_empty_wants_flat_baseline(self, scorer, make_listing):
        candidate = make_listing("c1", "phones", "mobile", {"brand": "apple"})
        wanted = WantedItem(category_id="phones")
        result = scorer.score(candidate, wanted, "cars", ORIGIN_CAR)
        assert result.score == 35
        assert result.reasons == [REASON_SAME_CATEGORY]

    def test_subcategory_bonus(self, scorer, make_listing):
        candidate = make_listing("c1", "phones", "mobile")
        wanted = WantedItem(category_id="phones", subcategory_id="mobile")
        result = scorer.score(candidate, wanted, "cars", ORIGIN_CAR)
        assert result.score == 45
        assert result.reasons == [REASON_SAME_CATEGORY, REASON_SAME_SUBCATEGORY]

    def test_subcategory_mismatch_no_bonus(self, scorer, make_listing):
        candidate = make_listing("c1", "phones", "tablet")
        wanted = WantedItem(category_id="phones", subcategory_id="mobile")
        assert scorer.score(candidate, wanted, "cars", ORIGIN_CAR).score == 35

    def test_single_field_capped_at_fifteen(self, scorer, make_listing):
        candidate = make_listing("c1", "phones", attributes={"brand": "Apple"})
        wanted = WantedItem(category_id="phones", fields={"brand": "apple"})
        result = scorer.score(candidate, wanted, "cars", ORIGIN_CAR)
        assert result.score == 35
        assert REASON_ALL_FIELDS in result.reasons

    def test_partial_field_match(self, scorer, make_listing):
        candidate = make_listing("c1", "phones", attributes={"brand": "Apple", "storage": "128"})
        wanted = WantedItem(
            category_id="phones",
            fields={"brand": "apple", "model": "13 Pro", "storage": "256"},
        )
        result = scorer.score(candidate, wanted, "cars", ORIGIN_CAR)
        # 20 + round(40/3 * 1)
        assert result.score == 33
        assert result.reasons == [REASON_SAME_CATEGORY, "1 من 3 مواصفات متطابقة"]

    def test_two_of_three_fields_round_up(self, scorer, make_listing):
        candidate = make_listing("c1", "phones", attributes={"brand": "apple", "storage": 256})
        wanted = WantedItem(
            category_id="phones",
            fields={"brand": "apple", "model": "13 Pro", "storage": "256"},
        )
        assert scorer.score(candidate, wanted, "cars", ORIGIN_CAR).score == 47

    def test_no_field_match_adds_nothing(self, scorer, make_listing):
        candidate = make_listing("c1", "phones", attributes={"brand": "samsung"})
        wanted = WantedItem(category_id="phones", fields={"brand": "apple"})
        result = scorer.score(candidate, wanted, "cars", ORIGIN_CAR)
        assert result.score == 20
        assert result.reasons == [REASON_SAME_CATEGORY]

    def test_empty_wanted_values_ignored(self, scorer, make_listing):
        candidate = make_listing("c1", "phones")
        wanted = WantedItem(category_id="phones", fields={"brand": "", "model": None})
        assert scorer.score(candidate, wanted, "cars", ORIGIN_CAR).score == 35


class TestBidirectional:
    def test_perfect_mutual_match(self, scorer, make_listing):
        candidate = make_listing(
            "c1", "phones", "mobile", {"brand": "Apple", "storage": "256"},
            wants={"category_id": "cars", "fields": {"brand": "toyota", "model": "corolla"}},
        )
        wanted = WantedItem(
            category_id="phones", subcategory_id="mobile",
            fields={"brand": "apple", "storage": "256"},
        )
        result = scorer.score(candidate, wanted, "cars", ORIGIN_CAR)
        assert result.score == 90
        assert result.score >= 80
        assert result.reasons == [
            REASON_SAME_CATEGORY,
            REASON_SAME_SUBCATEGORY,
            REASON_ALL_FIELDS,
            REASON_WANTS_MINE,
            REASON_MUTUAL_PERFECT,
        ]

    def test_maximum_score_is_one_hundred(self, scorer, make_listing):
        candidate = make_listing(
            "c1", "phones", "mobile",
            {"brand": "apple", "model": "13 Pro", "storage": "256"},
            wants={"category_id": "cars", "fields": {"brand": "toyota"}},
        )
        wanted = WantedItem(
            category_id="phones", subcategory_id="mobile",
            fields={"brand": "apple", "model": "13 pro", "storage": "256"},
        )
        assert scorer.score(candidate, wanted, "cars", ORIGIN_CAR).score == 100

    def test_partial_reverse_match(self, scorer, make_listing):
        candidate = make_listing(
            "c1", "phones",
            wants={"category_id": "cars", "fields": {"brand": "toyota", "year": 2020}},
        )
        wanted = WantedItem(category_id="phones")
        result = scorer.score(candidate, wanted, "cars", ORIGIN_CAR)
        # 20 + 15 baseline + 15 wants-mine + round(15 * 1/2)
        assert result.score == 58
        assert result.reasons == [REASON_SAME_CATEGORY, REASON_WANTS_MINE, REASON_MUTUAL_PARTIAL]

    def test_reverse_want_without_fields(self, scorer, make_listing):
        candidate = make_listing("c1", "phones", wants={"category_id": "cars"})
        wanted = WantedItem(category_id="phones")
        result = scorer.score(candidate, wanted, "cars", ORIGIN_CAR)
        assert result.score == 50
        assert REASON_MUTUAL_PERFECT not in result.reasons

    def test_reverse_fields_no_match(self, scorer, make_listing):
        candidate = make_listing(
            "c1", "phones", wants={"category_id": "cars", "fields": {"brand": "bmw"}},
        )
        wanted = WantedItem(category_id="phones")
        result = scorer.score(candidate, wanted, "cars", ORIGIN_CAR)
        assert result.score == 50
        assert result.reasons == [REASON_SAME_CATEGORY, REASON_WANTS_MINE]

    def test_candidate_wants_other_category(self, scorer, make_listing):
        candidate = make_listing("c1", "phones", wants={"category_id": "gold"})
        wanted = WantedItem(category_id="phones")
        assert scorer.score(candidate, wanted, "cars", ORIGIN_CAR).score == 35

    def test_cash_listing_with_stale_want_ignored(self, scorer, make_listing):
        candidate = make_listing(
            "c1", "phones", wants={"category_id": "cars"}, trade_mode=TradeMode.CASH,
        )
        wanted = WantedItem(category_id="phones")
        result = scorer.score(candidate, wanted, "cars", ORIGIN_CAR)
        assert result.score == 35
        assert REASON_WANTS_MINE not in result.reasons

    def test_score_is_deterministic(self, scorer, make_listing):
        candidate = make_listing(
            "c1", "phones", "mobile", {"brand": "apple"},
            wants={"category_id": "cars", "fields": {"brand": "toyota"}},
        )
        wanted = WantedItem(category_id="phones", fields={"brand": "apple"})
        first = scorer.score(candidate, wanted, "cars", ORIGIN_CAR)
        second = scorer.score(candidate, wanted, "cars", ORIGIN_CAR)
        assert first == second
