"""Default watchlist and symbol naming helpers."""

from __future__ import annotations

WATCHLIST: dict[str, str] = {
    "RELIANCE.NS": "Reliance Industries Ltd",
    "TCS.NS": "Tata Consultancy Services Ltd",
    "HDFCBANK.NS": "HDFC Bank Ltd",
    "INFY.NS": "Infosys Ltd",
    "HINDUNILVR.NS": "Hindustan Unilever Ltd",
    "ICICIBANK.NS": "ICICI Bank Ltd",
    "KOTAKBANK.NS": "Kotak Mahindra Bank Ltd",
    "LT.NS": "Larsen & Toubro Ltd",
    "BAJFINANCE.NS": "Bajaj Finance Ltd",
    "BHARTIARTL.NS": "Bharti Airtel Ltd",
    "SBIN.NS": "State Bank of India",
    "WIPRO.NS": "Wipro Ltd",
}

DEFAULT_SYMBOLS = list(WATCHLIST)[:8]
EXCHANGE_SUFFIXES = (".NS", ".BO")


def split_market_symbol(symbol: str) -> tuple[str | None, str]:
    """Split ``MARKET:SYMBOL`` into its parts."""
    value = symbol.strip()
    if ":" not in value:
        return None, value
    market, bare_symbol = value.split(":", 1)
    market = market.strip()
    bare_symbol = bare_symbol.strip()
    if not market or not bare_symbol:
        return None, value
    return market, bare_symbol


def normalize_symbol(symbol: str, exchange_suffix: str = "") -> str:
    """Uppercase a symbol and append ``exchange_suffix`` when it is missing."""
    cleaned = symbol.strip().upper()
    if not cleaned or not exchange_suffix:
        return cleaned
    suffix = exchange_suffix.strip().upper()
    if not suffix.startswith("."):
        suffix = f".{suffix}"
    if cleaned.endswith(suffix):
        return cleaned
    return f"{cleaned}{suffix}"


def display_name(symbol: str) -> str:
    """Watchlist name when known, otherwise the bare ticker."""
    known = WATCHLIST.get(symbol.strip().upper())
    if known:
        return known
    _, bare_symbol = split_market_symbol(symbol)
    bare_symbol = bare_symbol.upper()
    for suffix in EXCHANGE_SUFFIXES:
        if bare_symbol.endswith(suffix):
            return bare_symbol[: -len(suffix)]
    return bare_symbol
