"""
Tracked symbol universe.

Symbols scored by the batch automation, loaded from a JSON file when one
is configured.
"""

import json
import logging
from typing import Optional

logger = logging.getLogger(__name__)

# Nifty 50 constituents
DEFAULT_SYMBOLS = [
    "RELIANCE", "TCS", "HDFCBANK", "INFY", "ICICIBANK", "HINDUNILVR", "SBIN",
    "BHARTIARTL", "ITC", "KOTAKBANK", "LT", "AXISBANK", "ASIANPAINT", "MARUTI",
    "TITAN", "SUNPHARMA", "BAJFINANCE", "WIPRO", "ULTRACEMCO", "HCLTECH",
    "TATAMOTORS", "TATASTEEL", "NTPC", "POWERGRID", "M&M", "TECHM", "INDUSINDBK",
    "DRREDDY", "BAJAJFINSV", "NESTLEIND", "ONGC", "JSWSTEEL", "GRASIM", "ADANIENT",
    "ADANIPORTS", "COALINDIA", "BPCL", "CIPLA", "DIVISLAB", "EICHERMOT",
    "HEROMOTOCO", "HINDALCO", "TATACONSUM", "APOLLOHOSP", "SBILIFE", "BRITANNIA",
    "BAJAJ-AUTO", "UPL", "LTIM", "HDFCLIFE",
]


def _entry_symbol(entry) -> Optional[str]:
    if isinstance(entry, str):
        return entry
    if isinstance(entry, dict):
        return entry.get("symbol") or entry.get("nse")
    return None


def load_symbols(path: Optional[str] = None) -> list[str]:
    """
    Load tracked symbols.

    The file holds a JSON list of symbols, or of objects with a "symbol"
    (or "nse") key. Without a file the Nifty 50 list is used.
    """
    if not path:
        return list(DEFAULT_SYMBOLS)

    with open(path, encoding="utf-8") as fh:
        entries = json.load(fh)

    symbols = []
    for entry in entries:
        symbol = _entry_symbol(entry)
        if symbol:
            symbols.append(symbol.upper())
        else:
            logger.warning(f"Skipping tracked symbol entry without a symbol: {entry!r}")

    # Preserve order, drop duplicates
    return list(dict.fromkeys(symbols))
