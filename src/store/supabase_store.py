"""Supabase listing store — reads marketplace listings from the ``ads`` table.

Every query selects active rows, excludes the given ids, applies a limit
and validates each row into a ``Listing``. Client or PostgREST failures
are raised as ``RetrievalError``; rows that do not validate are skipped.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from pydantic import ValidationError

from src.common.config import SupabaseSettings
from src.common.errors import RetrievalError
from src.common.models import Listing, ListingStatus, TradeMode

logger = logging.getLogger(__name__)

# Characters with meaning inside a PostgREST or=(...) filter
_OR_FILTER_RESERVED = str.maketrans({'"': "", "\\": "", ",": " ", "(": " ", ")": " "})


def _ilike_pattern(text: str) -> str:
    """Quoted ``%text%`` pattern safe to embed in an ``or`` filter."""
    cleaned = " ".join(text.translate(_OR_FILTER_RESERVED).split())
    return f'"%{cleaned}%"'


class SupabaseListingStore:
    """Listing store backed by the marketplace Supabase project.

    Credentials default to SUPABASE_URL / SUPABASE_SERVICE_KEY from the
    environment (see config/.env.example).
    """

    def __init__(
        self,
        supabase_url: Optional[str] = None,
        supabase_key: Optional[str] = None,
        table: Optional[str] = None,
        settings: Optional[SupabaseSettings] = None,
    ):
        settings = settings or SupabaseSettings()
        self._supabase_url = supabase_url or settings.url
        self._supabase_key = supabase_key or settings.key
        self._table = table or settings.listings_table
        self._client = None  # Lazy init

    def _get_client(self):
        """Lazy-initialize Supabase client (only when a query runs)."""
        if self._client is not None:
            return self._client
        if not self._supabase_url or not self._supabase_key:
            raise ValueError(
                "SUPABASE_URL / SUPABASE_SERVICE_KEY must be set in .env. "
                "See config/.env.example."
            )
        from supabase import create_client

        self._client = create_client(self._supabase_url, self._supabase_key)
        logger.info("Connected to listing store: %s", self._supabase_url)
        return self._client

    # --- Queries ---

    def query_by_category(
        self,
        category_id: str,
        *,
        exclude_ids: Iterable[str] = (),
        limit: int,
        trade_mode: TradeMode | None = None,
        status: ListingStatus = ListingStatus.ACTIVE,
    ) -> list[Listing]:
        def build(query):
            query = query.eq("category_id", category_id)
            if trade_mode is not None:
                query = query.eq("sale_type", trade_mode.value)
            return query

        return self._run(build, exclude_ids, limit, status, f"category={category_id}")

    def query_by_trade_mode(
        self,
        trade_mode: TradeMode,
        *,
        exclude_ids: Iterable[str] = (),
        limit: int,
        exclude_category_id: str | None = None,
        status: ListingStatus = ListingStatus.ACTIVE,
    ) -> list[Listing]:
        def build(query):
            query = query.eq("sale_type", trade_mode.value)
            if exclude_category_id:
                query = query.neq("category_id", exclude_category_id)
            return query

        return self._run(build, exclude_ids, limit, status, f"sale_type={trade_mode.value}")

    def query_by_text_match(
        self,
        wanted_text: str,
        offered_title: str,
        *,
        exclude_ids: Iterable[str] = (),
        limit: int,
        status: ListingStatus = ListingStatus.ACTIVE,
    ) -> list[Listing]:
        clauses = []
        if wanted_text and wanted_text.strip():
            clauses.append(f"title.ilike.{_ilike_pattern(wanted_text)}")
        if offered_title and offered_title.strip():
            clauses.append(f"exchange_description.ilike.{_ilike_pattern(offered_title)}")
        if not clauses:
            return []

        def build(query):
            return query.or_(",".join(clauses))

        return self._run(build, exclude_ids, limit, status, "text match")

    def get_listing(self, listing_id: str) -> Listing | None:
        try:
            response = (
                self._get_client()
                .table(self._table)
                .select("*")
                .eq("id", listing_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            raise RetrievalError(f"Listing lookup failed for {listing_id}: {e}") from e
        listings = self._to_listings(response.data or [])
        return listings[0] if listings else None

    # --- Internals ---

    def _run(
        self,
        build,
        exclude_ids: Iterable[str],
        limit: int,
        status: ListingStatus,
        description: str,
    ) -> list[Listing]:
        try:
            query = self._get_client().table(self._table).select("*").eq("status", status.value)
            query = build(query)
            for listing_id in exclude_ids:
                query = query.neq("id", listing_id)
            response = query.limit(limit).execute()
        except Exception as e:
            raise RetrievalError(f"Listing query failed ({description}): {e}") from e

        listings = self._to_listings(response.data or [])
        logger.debug("Query %s returned %d listings", description, len(listings))
        return listings

    @staticmethod
    def _to_listings(rows: list[dict[str, Any]]) -> list[Listing]:
        listings: list[Listing] = []
        for row in rows:
            try:
                listings.append(Listing.model_validate(row))
            except ValidationError as e:
                logger.warning("Skipping malformed listing row %s: %s", row.get("id"), e)
        return listings
