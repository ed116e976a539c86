from __future__ import annotations

import math

import pytest

from stockcast.analysis.indicators import (
    NEUTRAL_RSI,
    bollinger_bands,
    compute_indicators,
    ema,
    macd,
    rsi,
    sma,
    value_at,
)


def test_sma_passes_raw_values_through_during_warmup() -> None:
    values = sma([1.0, 2.0, 3.0, 4.0, 5.0], 3)

    assert values[:2] == [1.0, 2.0]
    assert values[2:] == pytest.approx([2.0, 3.0, 4.0])


def test_sma_window_longer_than_input_is_all_passthrough() -> None:
    assert sma([3.0, 1.0, 2.0], 20) == [3.0, 1.0, 2.0]


def test_sma_rejects_non_positive_window() -> None:
    with pytest.raises(ValueError, match="window must be positive"):
        sma([1.0, 2.0], 0)


def test_ema_seeds_with_first_value() -> None:
    values = ema([10.0, 20.0, 20.0], 3)

    assert values[0] == 10.0
    assert values[1:] == pytest.approx([15.0, 17.5])


def test_ema_of_empty_input_is_empty() -> None:
    assert ema([], 12) == []


def test_rsi_is_one_shorter_than_prices_with_neutral_warmup() -> None:
    prices = [100.0 + i for i in range(30)]

    values = rsi(prices, period=14)

    assert len(values) == len(prices) - 1
    assert values[:13] == [NEUTRAL_RSI] * 13
    # Only gains: the zero average loss is floored at 0.01.
    assert values[13] == pytest.approx(100 - 100 / (1 + 1 / 0.01))


def test_rsi_balanced_moves_are_neutral() -> None:
    values = rsi([1.0, 2.0, 1.0, 2.0, 1.0], period=2)

    assert values == pytest.approx([50.0, 50.0, 50.0, 50.0])


def test_rsi_flat_series_after_warmup_is_zero() -> None:
    values = rsi([5.0] * 20, period=14)

    assert values[:13] == [NEUTRAL_RSI] * 13
    assert values[13:] == [0.0] * 6


def test_rsi_needs_two_prices() -> None:
    assert rsi([42.0]) == []
    assert rsi([]) == []


def test_macd_histogram_is_line_minus_signal() -> None:
    prices = [100.0 + math.sin(i / 3) * 5 for i in range(60)]

    result = macd(prices)

    assert len(result.macd) == len(result.signal) == len(result.histogram) == 60
    for line, signal, histogram in zip(result.macd, result.signal, result.histogram):
        assert histogram == pytest.approx(line - signal)


def test_macd_of_constant_series_is_flat_zero() -> None:
    result = macd([50.0] * 40)

    assert result.macd == pytest.approx([0.0] * 40)
    assert result.histogram == pytest.approx([0.0] * 40)


def test_bollinger_middle_matches_sma_exactly() -> None:
    prices = [100.0 + ((i * 7) % 11) - i * 0.3 for i in range(45)]

    bands = bollinger_bands(prices, period=20)
    reference = sma(prices, 20)

    for index in range(19, len(prices)):
        assert bands.middle[index] == reference[index]


def test_bollinger_warmup_collapses_bands_onto_price() -> None:
    prices = [10.0, 11.0, 12.5]

    bands = bollinger_bands(prices, period=20)

    assert bands.upper == prices
    assert bands.middle == prices
    assert bands.lower == prices


def test_bollinger_uses_population_deviation() -> None:
    prices = [float(value) for value in range(1, 21)]

    bands = bollinger_bands(prices, period=20, std_dev=2)

    sigma = math.sqrt(33.25)
    assert bands.middle[-1] == pytest.approx(10.5)
    assert bands.upper[-1] == pytest.approx(10.5 + 2 * sigma)
    assert bands.lower[-1] == pytest.approx(10.5 - 2 * sigma)


def test_compute_indicators_aligns_arrays_with_prices_except_rsi() -> None:
    prices = [100.0 + i * 0.5 for i in range(55)]

    indicators = compute_indicators(prices)

    assert len(indicators) == len(prices)
    for values in (
        indicators.sma20,
        indicators.sma50,
        indicators.ema12,
        indicators.ema26,
        indicators.macd,
        indicators.macd_signal,
        indicators.macd_histogram,
        indicators.bollinger_upper,
        indicators.bollinger_middle,
        indicators.bollinger_lower,
    ):
        assert len(values) == len(prices)
        assert all(math.isfinite(value) for value in values)
    assert indicators.rsi == rsi(prices)
    assert len(indicators.rsi) == len(prices) - 1
    assert value_at(indicators.rsi, len(prices) - 1) is None
    assert value_at(indicators.rsi, len(prices) - 2) == indicators.rsi[-1]


def test_compute_indicators_handles_single_price() -> None:
    indicators = compute_indicators([25.0])

    assert indicators.sma20 == [25.0]
    assert indicators.rsi == []
    assert indicators.bollinger_upper == [25.0]


def test_value_at_rejects_out_of_range_indices() -> None:
    assert value_at([1.0, 2.0], 1) == 2.0
    assert value_at([1.0, 2.0], 2) is None
    assert value_at([1.0, 2.0], -1) is None
    assert value_at([], 0) is None


@pytest.mark.parametrize(
    ("call", "message"),
    [
        (lambda: ema([1.0, 2.0], 0), "period must be positive"),
        (lambda: rsi([1.0, 2.0, 3.0], period=-1), "period must be positive"),
        (lambda: bollinger_bands([1.0, 2.0], period=0), "period must be positive"),
        (lambda: sma([1.0, 2.0], -5), "window must be positive"),
    ],
)
def test_non_positive_parameters_are_rejected(call, message: str) -> None:  # type: ignore[no-untyped-def]
    with pytest.raises(ValueError, match=message):
        call()
