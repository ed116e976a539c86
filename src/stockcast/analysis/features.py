"""Feature extraction for the next-day price model."""

from __future__ import annotations

import math
from collections.abc import Sequence

import pandas as pd

from stockcast.analysis.indicators import compute_indicators, value_at
from stockcast.domain.models import FeatureVector, IndicatorSet

VOLUME_LOOKBACK = 20
MOMENTUM_LOOKBACK = 10
VOLATILITY_LOOKBACK = 20
DEFAULT_VOLATILITY = 0.02


def safe_ratio(numerator: float, denominator: float, fallback: float) -> float:
    """Divide, returning ``fallback`` for a non-positive or non-finite denominator."""
    if not math.isfinite(denominator) or denominator <= 0:
        return fallback
    value = numerator / denominator
    return value if math.isfinite(value) else fallback


def momentum(prices: Sequence[float], lookback: int = MOMENTUM_LOOKBACK) -> float:
    """Fractional change over ``lookback`` bars, 0 without enough history."""
    if len(prices) <= lookback:
        return 0.0
    reference = prices[-1 - lookback]
    if reference <= 0:
        return 0.0
    return (prices[-1] - reference) / reference


def volatility(prices: Sequence[float]) -> float:
    """Population standard deviation of simple returns."""
    if len(prices) < 2:
        return DEFAULT_VOLATILITY
    series = pd.Series(list(prices), dtype=float)
    previous = series.shift(1)
    returns = ((series - previous) / previous)[previous > 0]
    if returns.empty:
        return DEFAULT_VOLATILITY
    return float(returns.std(ddof=0))


def volume_ratio(volumes: Sequence[float], lookback: int = VOLUME_LOOKBACK) -> float:
    """Latest volume relative to the trailing ``lookback`` average."""
    if len(volumes) <= lookback or volumes[-1] <= 0:
        return 1.0
    average = float(pd.Series(list(volumes), dtype=float).iloc[-lookback:].mean())
    return safe_ratio(volumes[-1], average, 1.0)


def extract_features(
    closes: Sequence[float],
    volumes: Sequence[float],
    indicators: IndicatorSet | None = None,
) -> FeatureVector:
    """Build the feature vector at the last index of ``closes``."""
    prices = list(closes)
    if not prices:
        return FeatureVector()
    data = indicators if indicators is not None else compute_indicators(prices)
    last = len(prices) - 1
    current = prices[last]

    sma20 = data.sma20[last]
    sma50 = data.sma50[last]
    # RSI is one shorter than the closes, so the last index is usually empty.
    rsi_value = value_at(data.rsi, last)
    upper = data.bollinger_upper[last]
    lower = data.bollinger_lower[last]
    band_width = upper - lower
    if math.isfinite(band_width) and band_width > 0:
        bollinger_position = (current - lower) / band_width
    else:
        bollinger_position = 0.5

    return FeatureVector(
        price_to_sma20=safe_ratio(current, sma20, 1.0),
        price_to_sma50=safe_ratio(current, sma50, 1.0),
        sma_ratio=safe_ratio(sma20, sma50, 1.0),
        rsi_norm=rsi_value / 100 if rsi_value is not None and math.isfinite(rsi_value) else 0.5,
        macd_signal=1.0 if data.macd[last] > data.macd_signal[last] else -1.0,
        bollinger_position=bollinger_position,
        volume_ratio=volume_ratio(list(volumes)),
        momentum=momentum(prices),
        volatility=volatility(prices[-VOLATILITY_LOOKBACK:]),
    )
