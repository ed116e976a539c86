"""Core forecasting domain models."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum


class RecommendationType(StrEnum):
    """Supported recommendation categories."""

    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"

    @property
    def priority(self) -> int:
        """Ranking weight used when ordering recommendation lists."""
        return _PRIORITY[self]


_PRIORITY = {
    RecommendationType.BUY: 3,
    RecommendationType.HOLD: 2,
    RecommendationType.SELL: 1,
}


@dataclass(frozen=True)
class Bar:
    """Single daily OHLCV bar."""

    date: date
    open: float
    high: float
    low: float
    close: float
    volume: float


PriceSeries = Sequence[Bar]


def closes(series: PriceSeries) -> list[float]:
    """Return the close prices of a series as plain floats."""
    return [float(bar.close) for bar in series]


def volumes(series: PriceSeries) -> list[float]:
    """Return the volumes of a series as plain floats."""
    return [float(bar.volume) for bar in series]


def valid_closes(series: PriceSeries) -> list[float]:
    """Close prices that are finite and strictly positive."""
    return [price for price in closes(series) if math.isfinite(price) and price > 0]


def valid_volumes(series: PriceSeries) -> list[float]:
    """Volumes that are finite and non-negative."""
    return [volume for volume in volumes(series) if math.isfinite(volume) and volume >= 0]


@dataclass(frozen=True)
class IndicatorSet:
    """Indicator arrays aligned index-for-index with a close series.

    ``rsi`` is the exception: it follows the one-shorter gains/losses array,
    so it has no entry at the last price index.
    """

    sma20: list[float]
    sma50: list[float]
    ema12: list[float]
    ema26: list[float]
    rsi: list[float]
    macd: list[float]
    macd_signal: list[float]
    macd_histogram: list[float]
    bollinger_upper: list[float]
    bollinger_middle: list[float]
    bollinger_lower: list[float]

    def __len__(self) -> int:
        return len(self.sma20)


@dataclass(frozen=True)
class FeatureVector:
    """Indicator-derived model inputs for one evaluation index."""

    price_to_sma20: float = 1.0
    price_to_sma50: float = 1.0
    sma_ratio: float = 1.0
    rsi_norm: float = 0.5
    macd_signal: float = -1.0
    bollinger_position: float = 0.5
    volume_ratio: float = 1.0
    momentum: float = 0.0
    volatility: float = 0.02

    def as_dict(self) -> dict[str, float]:
        return {
            "price_to_sma20": self.price_to_sma20,
            "price_to_sma50": self.price_to_sma50,
            "sma_ratio": self.sma_ratio,
            "rsi_norm": self.rsi_norm,
            "macd_signal": self.macd_signal,
            "bollinger_position": self.bollinger_position,
            "volume_ratio": self.volume_ratio,
            "momentum": self.momentum,
            "volatility": self.volatility,
        }


@dataclass(frozen=True)
class Prediction:
    """One backtested (or forward) price prediction."""

    date: date
    actual: float | None
    predicted: float
    confidence: float

    @property
    def relative_error(self) -> float | None:
        """Absolute error as a fraction of the actual price."""
        if self.actual is None or self.actual <= 0:
            return None
        return abs(self.actual - self.predicted) / self.actual


@dataclass(frozen=True)
class Recommendation:
    """Ranked investment call for a single symbol."""

    symbol: str
    name: str
    recommendation: RecommendationType
    target_price: float
    confidence: float
    reason: str
    score: int = 0
    current_price: float | None = None

    @property
    def expected_change(self) -> float | None:
        """Fractional move from the current price to the target."""
        if self.current_price is None or self.current_price <= 0:
            return None
        return (self.target_price - self.current_price) / self.current_price


@dataclass(frozen=True)
class SymbolAnalysis:
    """Forecast, backtest and recommendation bundle for one symbol."""

    symbol: str
    bars: int
    next_day: float
    recommendation: Recommendation
    predictions: list[Prediction] = field(default_factory=list)
    accuracy: float = 0.0
