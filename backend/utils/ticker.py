"""Utility functions for handling ticker symbols.

Tickers are case-insensitive on input and stored uppercase, e.g.
``iwda.as`` and ``IWDA.AS`` name the same listing.
"""

import re
from typing import Iterable

TICKER_PATTERN = re.compile(r"^[A-Z0-9.\-]+$")


def normalize_ticker(ticker: str) -> str:
    """Strip surrounding whitespace and upper-case a ticker."""
    return (ticker or "").strip().upper()


def is_valid_ticker(ticker: str) -> bool:
    """Check whether an already-normalized ticker is well formed.

    Valid tickers are non-empty and use only A-Z, 0-9, ``.`` and ``-``.
    """
    return bool(TICKER_PATTERN.match(ticker))


def unique_tickers(tickers: Iterable[str]) -> list[str]:
    """Normalize tickers, dropping blanks and duplicates.

    First-seen order is kept so log output follows the caller's input.
    """
    seen: set[str] = set()
    out: list[str] = []
    for raw in tickers:
        ticker = normalize_ticker(raw)
        if not ticker or ticker in seen:
            continue
        seen.add(ticker)
        out.append(ticker)
    return out
