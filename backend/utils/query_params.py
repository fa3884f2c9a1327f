"""Shared query parameter parsing utilities."""

from fastapi import HTTPException


def parse_tickers(tickers: str | None) -> list[str]:
    """Parse a comma-separated tickers query string into a list.

    Blank entries are skipped; case and duplicates are left for the
    quote service to normalize.

    Args:
        tickers: Comma-separated tickers, e.g. ``"IWDA.AS,AAPL,VWCE.DE"``.

    Returns:
        The non-blank tickers, in request order.

    Raises:
        HTTPException: 400 if the parameter is missing or has no tickers.
    """
    if tickers is None:
        raise HTTPException(status_code=400, detail="Missing tickers parameter")
    result = [t.strip() for t in tickers.split(",") if t.strip()]
    if not result:
        raise HTTPException(status_code=400, detail="No valid tickers provided")
    return result
