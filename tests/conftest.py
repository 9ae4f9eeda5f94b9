"""Shared test fixtures for the exchange engine."""

import sys
from pathlib import Path

import pytest

# Ensure src is importable
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.common.models import Listing, ListingStatus, TradeMode
from src.exchange.category_config import CategoryRegistry
from src.store.memory_store import InMemoryListingStore


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the test fixtures directory."""
    return PROJECT_ROOT / "tests" / "fixtures"


@pytest.fixture
def categories() -> CategoryRegistry:
    """Category registry loaded from config/categories.yaml."""
    return CategoryRegistry.from_yaml(PROJECT_ROOT / "config" / "categories.yaml")


@pytest.fixture
def sample_store(fixtures_dir) -> InMemoryListingStore:
    """Listing store over tests/fixtures/sample_listings.json."""
    return InMemoryListingStore.from_json(fixtures_dir / "sample_listings.json")


@pytest.fixture
def make_listing():
    """Factory for listings with sensible defaults.

    ``wants`` is shorthand for the ``exchange_wanted`` payload; passing it
    also switches the listing to exchange mode unless ``trade_mode`` is given.
    """

    def _make(
        id: str,
        category_id: str,
        subcategory_id: str | None = None,
        attributes: dict | None = None,
        wants: dict | None = None,
        trade_mode: TradeMode | None = None,
        title: str | None = None,
        legacy_exchange_text: str | None = None,
        status: ListingStatus = ListingStatus.ACTIVE,
    ) -> Listing:
        attributes = dict(attributes or {})
        if wants is not None:
            attributes["exchange_wanted"] = wants
        if trade_mode is None:
            trade_mode = TradeMode.EXCHANGE if wants is not None else TradeMode.CASH
        return Listing(
            id=id,
            title=title or f"listing {id}",
            category_id=category_id,
            subcategory_id=subcategory_id,
            attributes=attributes,
            trade_mode=trade_mode,
            legacy_exchange_text=legacy_exchange_text,
            status=status,
        )

    return _make
