"""Technical indicators over a close-price sequence.

Every function returns a plain list aligned index-for-index with its input and
never raises for short input: warm-up positions carry a passthrough or neutral
value instead of NaN. The one exception to the alignment rule is :func:`rsi`,
which is aligned to the one-shorter gains/losses array (entry ``i`` describes
the move into price ``i + 1``).
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import NamedTuple

import pandas as pd

from stockcast.domain.models import IndicatorSet

NEUTRAL_RSI = 50.0
RSI_LOSS_FLOOR = 0.01


class MacdResult(NamedTuple):
    macd: list[float]
    signal: list[float]
    histogram: list[float]


class BollingerBands(NamedTuple):
    upper: list[float]
    middle: list[float]
    lower: list[float]


def _require_positive(value: int, field_name: str) -> None:
    if value <= 0:
        raise ValueError(f"{field_name} must be positive")


def _as_series(values: Sequence[float]) -> pd.Series:
    if values is None:
        raise ValueError("values are required")
    return pd.Series(list(values), dtype=float)


def sma(values: Sequence[float], window: int) -> list[float]:
    """Trailing mean; the first ``window - 1`` entries pass the raw value through."""
    _require_positive(window, "window")
    series = _as_series(values)
    averaged = series.rolling(window=window).mean()
    warmup = series.index < window - 1
    return series.where(warmup, averaged).tolist()


def ema(values: Sequence[float], period: int) -> list[float]:
    """Exponential moving average seeded with the first value."""
    _require_positive(period, "period")
    series = _as_series(values)
    if series.empty:
        return []
    return series.ewm(span=period, adjust=False).mean().tolist()


def rsi(prices: Sequence[float], period: int = 14) -> list[float]:
    """Simple-average RSI over ``prices[1:]``.

    The result has ``len(prices) - 1`` entries. Entries before ``period - 1``
    hold the neutral 50; afterwards the trailing ``period`` gains and losses
    are averaged and a zero average loss is floored at 0.01.
    """
    _require_positive(period, "period")
    series = _as_series(prices)
    if len(series) < 2:
        return []
    delta = series.diff().iloc[1:].reset_index(drop=True)
    gains = delta.clip(lower=0.0)
    losses = -delta.clip(upper=0.0)
    avg_gain = gains.rolling(window=period).mean()
    avg_loss = losses.rolling(window=period).mean()
    avg_loss = avg_loss.mask(avg_loss == 0.0, RSI_LOSS_FLOOR)
    strength = avg_gain / avg_loss
    values = 100.0 - (100.0 / (1.0 + strength))
    warmup = delta.index < period - 1
    return values.mask(warmup, NEUTRAL_RSI).tolist()


def macd(values: Sequence[float]) -> MacdResult:
    """MACD line (EMA12 - EMA26), its EMA9 signal line and the histogram."""
    fast = ema(values, 12)
    slow = ema(values, 26)
    line = [f - s for f, s in zip(fast, slow)]
    signal = ema(line, 9)
    histogram = [m - s for m, s in zip(line, signal)]
    return MacdResult(macd=line, signal=signal, histogram=histogram)


def bollinger_bands(
    values: Sequence[float],
    period: int = 20,
    std_dev: float = 2.0,
) -> BollingerBands:
    """Bands at ``std_dev`` population deviations around SMA(period)."""
    _require_positive(period, "period")
    series = _as_series(values)
    middle = sma(series, period)
    sigma = series.rolling(window=period).std(ddof=0).tolist()
    upper: list[float] = []
    lower: list[float] = []
    for index, price in enumerate(series.tolist()):
        if index < period - 1:
            upper.append(price)
            lower.append(price)
            continue
        width = sigma[index] * std_dev
        upper.append(middle[index] + width)
        lower.append(middle[index] - width)
    return BollingerBands(upper=upper, middle=middle, lower=lower)


def value_at(values: Sequence[float], index: int) -> float | None:
    """Entry at ``index``, or None when the array is too short to hold it."""
    if 0 <= index < len(values):
        return values[index]
    return None


def compute_indicators(closes: Sequence[float]) -> IndicatorSet:
    """Compute the full indicator set used by the predictor and recommender."""
    prices = list(closes)
    moving = macd(prices)
    bands = bollinger_bands(prices)
    return IndicatorSet(
        sma20=sma(prices, 20),
        sma50=sma(prices, 50),
        ema12=ema(prices, 12),
        ema26=ema(prices, 26),
        rsi=rsi(prices),
        macd=moving.macd,
        macd_signal=moving.signal,
        macd_histogram=moving.histogram,
        bollinger_upper=bands.upper,
        bollinger_middle=bands.middle,
        bollinger_lower=bands.lower,
    )
