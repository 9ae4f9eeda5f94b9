"""
Listing store module — read-only access to marketplace listings.

Provides the ListingStore contract plus an in-memory store (fixtures,
tests) and a Supabase-backed store for the live ``ads`` table.
"""

from .base import ListingStore
from .memory_store import InMemoryListingStore
from .supabase_store import SupabaseListingStore

__all__ = [
    "ListingStore",
    "InMemoryListingStore",
    "SupabaseListingStore",
]
