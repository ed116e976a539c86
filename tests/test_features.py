from __future__ import annotations

import math
from dataclasses import replace

import pytest

from stockcast.analysis.features import (
    DEFAULT_VOLATILITY,
    extract_features,
    momentum,
    safe_ratio,
    volatility,
    volume_ratio,
)
from stockcast.analysis.indicators import compute_indicators
from stockcast.domain.models import FeatureVector


def test_safe_ratio_falls_back_on_bad_denominators() -> None:
    assert safe_ratio(10.0, 4.0, 1.0) == 2.5
    assert safe_ratio(10.0, 0.0, 1.0) == 1.0
    assert safe_ratio(10.0, -3.0, 1.0) == 1.0
    assert safe_ratio(10.0, math.nan, 7.0) == 7.0
    assert safe_ratio(math.inf, 2.0, 3.0) == 3.0


def test_momentum_requires_eleven_prices() -> None:
    assert momentum([100.0] * 10) == 0.0
    assert momentum([100.0] * 10 + [110.0]) == pytest.approx(0.1)


def test_momentum_ignores_non_positive_reference() -> None:
    assert momentum([0.0] + [5.0] * 10) == 0.0


def test_volatility_fallbacks() -> None:
    assert volatility([]) == DEFAULT_VOLATILITY
    assert volatility([100.0]) == DEFAULT_VOLATILITY
    assert volatility([100.0, 100.0]) == 0.0


def test_volatility_is_population_deviation_of_returns() -> None:
    # Returns: +10%, -10%.
    value = volatility([100.0, 110.0, 99.0])

    assert value == pytest.approx(0.1)


def test_volume_ratio_needs_more_than_twenty_points() -> None:
    assert volume_ratio([1000.0] * 20) == 1.0
    assert volume_ratio([1000.0] * 20 + [2000.0]) == pytest.approx(2000.0 / 1050.0)


def test_volume_ratio_ignores_zero_latest_volume() -> None:
    assert volume_ratio([1000.0] * 20 + [0.0]) == 1.0


def test_extract_features_of_empty_input_uses_defaults() -> None:
    assert extract_features([], []) == FeatureVector()


def test_short_history_features_fall_back_to_neutral_values() -> None:
    features = extract_features([10.0, 10.5, 11.0], [100.0, 100.0, 100.0])

    assert features.price_to_sma20 == 1.0
    assert features.price_to_sma50 == 1.0
    assert features.sma_ratio == 1.0
    assert features.bollinger_position == 0.5
    assert features.volume_ratio == 1.0
    assert features.momentum == 0.0


def test_rising_series_features() -> None:
    prices = [100.0 + i for i in range(60)]
    volumes = [1_000_000.0] * 60

    features = extract_features(prices, volumes)

    assert features.price_to_sma20 == pytest.approx(159 / 149.5)
    assert features.price_to_sma50 == pytest.approx(159 / 134.5)
    assert features.sma_ratio == pytest.approx(149.5 / 134.5)
    assert features.rsi_norm == 0.5
    assert features.macd_signal == 1.0
    assert 0.85 < features.bollinger_position < 1.0
    assert features.volume_ratio == pytest.approx(1.0)
    assert features.momentum == pytest.approx(10 / 149)
    assert 0 < features.volatility < 0.001


def test_falling_series_has_bearish_macd_and_neutral_rsi() -> None:
    prices = [200.0 - i for i in range(60)]

    features = extract_features(prices, [1_000_000.0] * 60)

    assert features.macd_signal == -1.0
    assert features.rsi_norm == 0.5
    assert features.momentum == pytest.approx(-10 / 151)


def test_volatility_skips_returns_after_non_positive_price() -> None:
    # Returns: -100%, +10%; the move out of 0 is dropped.
    assert volatility([100.0, 0.0, 50.0, 55.0]) == pytest.approx(0.55)


def test_rsi_of_full_series_has_no_last_entry_and_falls_back() -> None:
    prices = [100.0 + ((i * 7) % 5) for i in range(60)]

    features = extract_features(prices, [1_000_000.0] * 60)

    assert features.rsi_norm == 0.5


def test_supplied_rsi_reaching_last_index_is_used() -> None:
    prices = [100.0 + i for i in range(60)]
    indicators = replace(compute_indicators(prices), rsi=[50.0] * 59 + [80.0])

    features = extract_features(prices, [1_000_000.0] * 60, indicators)

    assert features.rsi_norm == pytest.approx(0.8)
