"""Market data provider contract."""

from __future__ import annotations

from typing import Protocol

import pandas as pd

from stockcast.domain.models import Bar

OHLCV_COLUMNS = ["open", "high", "low", "close", "volume"]


class MarketDataProvider(Protocol):
    """Interface for bar retrieval."""

    def get_bars(self, symbol: str) -> pd.DataFrame:
        """Return OHLCV bars with datetime index."""

    def get_series(self, symbol: str) -> list[Bar]:
        """Return ascending, date-unique domain bars."""


def bars_from_frame(frame: pd.DataFrame) -> list[Bar]:
    """Convert a normalized OHLCV frame into ascending, date-unique bars."""
    missing = [column for column in OHLCV_COLUMNS if column not in frame.columns]
    if missing:
        raise ValueError(f"bars missing required columns: {', '.join(missing)}")
    ordered = frame.sort_index(kind="stable")
    dates = pd.to_datetime(ordered.index).date
    ordered = ordered.loc[~pd.Index(dates).duplicated(keep="last")]
    dates = pd.to_datetime(ordered.index).date
    return [
        Bar(
            date=bar_date,
            open=float(row.open),
            high=float(row.high),
            low=float(row.low),
            close=float(row.close),
            volume=float(row.volume),
        )
        for bar_date, row in zip(dates, ordered.itertuples(index=False))
    ]
