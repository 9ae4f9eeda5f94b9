"""CLI entry point for the exchange engine.

Usage:
    # Against the live Supabase `ads` table (credentials from .env)
    python -m src.exchange.main --listing-id 3f2a...

    # Against a local JSON snapshot of listings
    python -m src.exchange.main --listing-id ad-phone-1 \
        --fixtures tests/fixtures/sample_listings.json --mode all

    # Write the report instead of printing it
    python -m src.exchange.main --listing-id ad-phone-1 --output data/report.json
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from src.common.config import Settings
from src.common.errors import RetrievalError
from src.common.logging import setup_logging
from src.store.memory_store import InMemoryListingStore
from src.store.supabase_store import SupabaseListingStore

from .engine import ExchangeEngine

logger = logging.getLogger(__name__)


def _build_store(args: argparse.Namespace, settings: Settings):
    if args.fixtures:
        return InMemoryListingStore.from_json(args.fixtures)
    return SupabaseListingStore(settings=settings.supabase)


def run(args: argparse.Namespace) -> dict:
    """Load the origin listing and compute the requested results."""
    settings = Settings.load(args.settings) if args.settings else Settings.load()
    if args.categories:
        settings.categories_path = args.categories

    store = _build_store(args, settings)
    engine = ExchangeEngine.from_settings(store, settings)

    try:
        origin = store.get_listing(args.listing_id)
    except RetrievalError as e:
        raise SystemExit(f"Error: could not load listing {args.listing_id}: {e}")
    if origin is None:
        raise SystemExit(f"Error: listing {args.listing_id} not found")

    logger.info("=== Exchange matching: %s (%s) ===", origin.title, origin.id)

    if args.mode == "matches":
        matches = engine.find_exchange_matches(origin)
        return {"origin_id": origin.id, "matches": [m.to_dict() for m in matches]}
    if args.mode == "chains":
        chains = engine.find_chain_exchanges(origin)
        return {"origin_id": origin.id, "chains": [c.to_dict() for c in chains]}
    return engine.find_all(origin).to_dict()


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Exchange engine — find trade matches and 3-way chains for a listing",
    )
    parser.add_argument(
        "--listing-id",
        type=str,
        required=True,
        help="Id of the exchange listing to match",
    )
    parser.add_argument(
        "--mode",
        choices=["matches", "chains", "all"],
        default="all",
        help="What to compute (default: all)",
    )
    parser.add_argument(
        "--fixtures",
        type=str,
        default=None,
        help="JSON file of listing rows to use instead of Supabase",
    )
    parser.add_argument(
        "--settings",
        type=str,
        default=None,
        help="Path to a settings YAML (default: config/settings.yaml)",
    )
    parser.add_argument(
        "--categories",
        type=str,
        default=None,
        help="Path to a categories YAML (default: from settings)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Write the JSON report to this path instead of stdout",
    )
    parser.add_argument("--log-level", type=str, default=None, help="DEBUG | INFO | WARNING")
    args = parser.parse_args()

    setup_logging(args.log_level)

    report = run(args)
    text = json.dumps(report, ensure_ascii=False, indent=2)

    if args.output:
        out = Path(args.output)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(text, encoding="utf-8")
        logger.info("Report saved to %s", out)
    else:
        print(text)


if __name__ == "__main__":
    main()
