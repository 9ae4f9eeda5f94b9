"""Exception types shared by the engine and the listing stores."""

from __future__ import annotations


class ExchangeError(Exception):
    """Base class for exchange engine errors."""


class RetrievalError(ExchangeError):
    """A listing store query failed (store unreachable, bad response, ...).

    Never escapes the engine: retrieval boundaries turn it into an empty pool.
    """


class CategoryConfigError(ExchangeError):
    """The category configuration file is missing or malformed."""
