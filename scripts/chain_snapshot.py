#!/usr/bin/env python3
"""
Chain Snapshot Script

Fetches and ranks the option chain for each dashboard symbol and prints the
same calls/puts tables the dashboard shows.

Usage:
    python scripts/chain_snapshot.py --token ACCESS_TOKEN

    Or for specific symbols, as JSON:
    python scripts/chain_snapshot.py --token ACCESS_TOKEN --json SPY AAPL
"""
import asyncio
import json
import os
import sys
import argparse
from pathlib import Path
from typing import List

# Add parent directory to path to import app modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.core.config import settings
from app.providers import ProviderError
from app.providers.schwab import SchwabClient
from app.services.chain_ranker import rank
from app.utils.formatting import format_chain_table
from app.utils.time import get_market_time


async def snapshot(symbols: List[str], access_token: str, as_json: bool) -> int:
    """
    Fetch and print ranked chains.

    Returns:
        Number of symbols that failed
    """
    client = SchwabClient()
    failed = 0

    try:
        for symbol in symbols:
            reference_time = get_market_time(settings.market_timezone)
            try:
                raw = await client.get_option_chain(symbol, access_token, reference_time)
            except ProviderError as e:
                print(f"❌ {symbol}: {e}")
                failed += 1
                continue

            result = rank(
                raw,
                symbol,
                reference_time,
                strike_range=settings.strike_range,
                min_open_interest=settings.min_open_interest,
                window_days=settings.expiry_window_days,
                max_results=settings.max_results
            ).to_dict()

            if as_json:
                print(json.dumps(result, indent=2))
            else:
                print(format_chain_table(result))
                print("=" * 60)
    finally:
        await client.close()

    return failed


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Print ranked high open interest options",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Dashboard symbols, token from the environment
  SCHWAB_ACCESS_TOKEN=... python scripts/chain_snapshot.py

  # Specific symbols as JSON
  python scripts/chain_snapshot.py --token ... --json SPY IWM
        """
    )
    parser.add_argument(
        "symbols",
        nargs="*",
        help="Ticker symbols (defaults to DASHBOARD_SYMBOLS)"
    )
    parser.add_argument(
        "--token",
        default=os.environ.get("SCHWAB_ACCESS_TOKEN"),
        help="Schwab access token (defaults to $SCHWAB_ACCESS_TOKEN)"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the API JSON instead of tables"
    )

    args = parser.parse_args()

    if not args.token:
        print("❌ Error: an access token is required (--token or SCHWAB_ACCESS_TOKEN)")
        sys.exit(1)

    symbols = [s.upper() for s in args.symbols] or settings.dashboard_symbols_list
    failed = asyncio.run(snapshot(symbols, args.token, args.json))
    sys.exit(1 if failed else 0)


if __name__ == "__main__":
    main()
