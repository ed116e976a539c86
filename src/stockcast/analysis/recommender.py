"""BUY/SELL/HOLD scoring and ranking across a set of symbols."""

from __future__ import annotations

import concurrent.futures
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from stockcast.analysis.features import momentum
from stockcast.analysis.indicators import compute_indicators, value_at
from stockcast.analysis.predictor import NextDayPredictor, last_close
from stockcast.domain.models import (
    PriceSeries,
    Recommendation,
    RecommendationType,
    valid_closes,
)
from stockcast.universe import display_name

MIN_HISTORY = 50
MAX_CONFIDENCE = 0.95
DEGENERATE_CONFIDENCE = 0.5
INSUFFICIENT_DATA_REASON = "Insufficient data for analysis"
INVALID_DATA_REASON = "Invalid price data"
MIXED_SIGNALS_REASON = "Mixed technical signals"


@dataclass(frozen=True)
class ThresholdRule:
    """Fires when a value is above (or below) ``threshold``."""

    threshold: float
    points: int
    reason: str
    above: bool = True

    def matches(self, value: float) -> bool:
        if self.above:
            return value > self.threshold
        return value < self.threshold


# Evaluated top to bottom; only the first match contributes.
PREDICTION_RULES = (
    ThresholdRule(0.025, 4, "Strong predicted gain (+2.5%+)"),
    ThresholdRule(0.01, 2, "Positive price prediction"),
    ThresholdRule(-0.025, -4, "Negative price prediction (-2.5%+)", above=False),
    ThresholdRule(-0.01, -2, "Weak price prediction", above=False),
)

MOMENTUM_RULES = (
    ThresholdRule(0.08, 2, "Strong positive momentum (8%+)"),
    ThresholdRule(0.03, 1, "Positive momentum"),
    ThresholdRule(-0.08, -2, "Strong negative momentum (-8%+)", above=False),
    ThresholdRule(-0.03, -1, "Negative momentum", above=False),
)


def first_match(rules: Iterable[ThresholdRule], value: float) -> ThresholdRule | None:
    for rule in rules:
        if rule.matches(value):
            return rule
    return None


@dataclass
class SignalScore:
    """Running score and the reasons that contributed to it."""

    score: int = 0
    reasons: list[str] = field(default_factory=list)

    def add(self, points: int, reason: str) -> None:
        self.score += points
        self.reasons.append(reason)

    def apply(self, rule: ThresholdRule | None) -> None:
        if rule is not None:
            self.add(rule.points, rule.reason)

    def summary(self) -> str:
        return ", ".join(self.reasons[:2]) or MIXED_SIGNALS_REASON


def categorize(score: int) -> tuple[RecommendationType, float]:
    """Map an integer score to a category and its confidence."""
    if score >= 5:
        confidence = min(0.92, 0.75 + score * 0.03)
        return RecommendationType.BUY, min(confidence, MAX_CONFIDENCE)
    if score <= -4:
        confidence = min(0.88, 0.70 + abs(score) * 0.03)
        return RecommendationType.SELL, min(confidence, MAX_CONFIDENCE)
    confidence = 0.70 + abs(score) * 0.02
    return RecommendationType.HOLD, min(confidence, MAX_CONFIDENCE)


def score_signals(prices: list[float], predicted_price: float) -> SignalScore:
    """Accumulate the five signal groups for a validated close series."""
    signals = SignalScore()
    indicators = compute_indicators(prices)
    last = len(prices) - 1
    current_price = prices[last]

    price_change = (predicted_price - current_price) / current_price
    signals.apply(first_match(PREDICTION_RULES, price_change))

    sma20 = indicators.sma20[last]
    sma50 = indicators.sma50[last]
    if sma20 > sma50 and current_price > sma20:
        signals.add(3, "Bullish trend (above moving averages)")
    elif sma20 < sma50 and current_price < sma20:
        signals.add(-3, "Bearish trend (below moving averages)")

    # No RSI entry exists at the last price index of a full series.
    current_rsi = value_at(indicators.rsi, last)
    if current_rsi is not None:
        if current_rsi < 30:
            signals.add(2, "Oversold condition (RSI < 30)")
        elif current_rsi > 70:
            signals.add(-2, "Overbought condition (RSI > 70)")
        elif 40 <= current_rsi <= 60:
            signals.add(1, "Neutral RSI levels")

    if indicators.macd[last] > indicators.macd_signal[last]:
        signals.add(1, "Positive MACD crossover")
    else:
        signals.add(-1, "Negative MACD signal")

    if len(prices) > 10:
        signals.apply(first_match(MOMENTUM_RULES, momentum(prices)))
    return signals


def recommend(
    symbol: str,
    series: PriceSeries,
    predictor: NextDayPredictor | None = None,
    name: str | None = None,
) -> Recommendation:
    """Score one symbol's history into a recommendation."""
    if series is None:
        raise ValueError("series is required")
    label = name or display_name(symbol)
    if len(series) < MIN_HISTORY:
        return Recommendation(
            symbol=symbol,
            name=label,
            recommendation=RecommendationType.HOLD,
            target_price=last_close(series),
            confidence=DEGENERATE_CONFIDENCE,
            reason=INSUFFICIENT_DATA_REASON,
        )

    prices = valid_closes(series)
    if not prices:
        return Recommendation(
            symbol=symbol,
            name=label,
            recommendation=RecommendationType.HOLD,
            target_price=100.0,
            confidence=DEGENERATE_CONFIDENCE,
            reason=INVALID_DATA_REASON,
        )

    model = predictor or NextDayPredictor()
    predicted_price = model.predict_next_day(series)
    signals = score_signals(prices, predicted_price)
    category, confidence = categorize(signals.score)
    return Recommendation(
        symbol=symbol,
        name=label,
        recommendation=category,
        target_price=max(predicted_price, 1.0),
        confidence=confidence,
        reason=signals.summary(),
        score=signals.score,
        current_price=prices[-1],
    )


def rank_recommendations(recommendations: Iterable[Recommendation]) -> list[Recommendation]:
    """Order by category priority (BUY, HOLD, SELL), then confidence."""
    return sorted(
        recommendations,
        key=lambda item: (-item.recommendation.priority, -item.confidence),
    )


def generate_recommendations(
    stocks: Mapping[str, PriceSeries] | Iterable[tuple[str, PriceSeries]],
    predictor: NextDayPredictor | None = None,
    max_workers: int | None = None,
    names: Mapping[str, str] | None = None,
) -> list[Recommendation]:
    """Recommend every ``(symbol, series)`` pair and return the ranked list.

    With ``max_workers`` above one the symbols are scored on a thread pool;
    the result is re-sorted after collection either way.
    """
    pairs = list(stocks.items()) if isinstance(stocks, Mapping) else list(stocks)
    if max_workers is not None and max_workers <= 0:
        raise ValueError("max_workers must be positive")
    model = predictor or NextDayPredictor()
    labels = names or {}

    if max_workers is None or max_workers == 1 or len(pairs) <= 1:
        results = [
            recommend(symbol, series, model, labels.get(symbol)) for symbol, series in pairs
        ]
        return rank_recommendations(results)

    with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [
            executor.submit(recommend, symbol, series, model, labels.get(symbol))
            for symbol, series in pairs
        ]
        results = [future.result() for future in futures]
    return rank_recommendations(results)
