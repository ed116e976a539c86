"""Market data provider implementations."""

from .base import MarketDataProvider, bars_from_frame
from .csv_data import CsvDataProvider

__all__ = [
    "MarketDataProvider",
    "CsvDataProvider",
    "bars_from_frame",
]
