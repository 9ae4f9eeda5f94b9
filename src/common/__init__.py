# Common utilities and shared modules
"""
Shared components used by the exchange engine and the listing stores:
- Listing data contract (Pydantic)
- Error types
- Logging configuration
- Project configuration
"""

from .config import CONFIG_DIR, PROJECT_ROOT, Settings, settings
from .errors import CategoryConfigError, ExchangeError, RetrievalError
from .logging import setup_logging
from .models import Listing, ListingStatus, TradeMode

__all__ = [
    "settings",
    "Settings",
    "PROJECT_ROOT",
    "CONFIG_DIR",
    "CategoryConfigError",
    "ExchangeError",
    "RetrievalError",
    "setup_logging",
    "Listing",
    "ListingStatus",
    "TradeMode",
]
