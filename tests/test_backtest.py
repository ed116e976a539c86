"""Tests for the walk-forward prediction series."""

from __future__ import annotations

import math
from dataclasses import replace
from datetime import date, timedelta

import pytest

from stockcast.analysis.backtest import (
    generate_predictions,
    prediction_accuracy,
    rolling_confidence,
)
from stockcast.analysis.predictor import ZERO_NOISE, NextDayPredictor, PredictorParams
from stockcast.domain.models import Bar, Prediction


def _bars(closes: list[float], volume: float = 1_000_000.0) -> list[Bar]:
    start = date(2025, 1, 1)
    return [
        Bar(
            date=start + timedelta(days=index),
            open=close,
            high=close,
            low=close,
            close=close,
            volume=volume,
        )
        for index, close in enumerate(closes)
    ]


class _RecordingPredictor(NextDayPredictor):
    def __init__(self) -> None:
        super().__init__(noise=ZERO_NOISE)
        self.lengths: list[int] = []

    def predict_next_day(self, series):  # type: ignore[no-untyped-def]
        self.lengths.append(len(series))
        return super().predict_next_day(series)


def test_short_history_yields_no_predictions() -> None:
    assert generate_predictions(_bars([100.0] * 49)) == []


def test_invalid_closes_count_against_minimum_history() -> None:
    closes = [100.0 + i for i in range(55)]
    closes[3:10] = [math.nan] * 7

    assert generate_predictions(_bars(closes)) == []


def test_window_starts_no_earlier_than_bar_fifty() -> None:
    series = _bars([100.0 + i for i in range(60)])

    predictions = generate_predictions(series, days=30, predictor=NextDayPredictor(noise=ZERO_NOISE))

    assert len(predictions) == 10
    assert [p.date for p in predictions] == [bar.date for bar in series[50:]]
    assert [p.actual for p in predictions] == [bar.close for bar in series[50:]]


def test_days_limits_the_window() -> None:
    series = _bars([100.0 + i for i in range(70)])

    predictions = generate_predictions(series, days=5, predictor=NextDayPredictor(noise=ZERO_NOISE))

    assert [p.date for p in predictions] == [bar.date for bar in series[65:]]


def test_each_prediction_only_sees_prior_bars() -> None:
    series = _bars([100.0 + i for i in range(60)])
    predictor = _RecordingPredictor()

    generate_predictions(series, days=4, predictor=predictor)

    assert predictor.lengths == [56, 57, 58, 59]


def test_confidence_is_lagging_and_bounded() -> None:
    series = _bars([100.0 + ((i * 17) % 9) - i * 0.1 for i in range(90)])

    predictions = generate_predictions(
        series,
        days=30,
        predictor=NextDayPredictor(PredictorParams(seed=3)),
    )

    assert predictions
    assert predictions[0].confidence == pytest.approx(1 - 0.02 * 8)
    for index, prediction in enumerate(predictions):
        assert 0.65 <= prediction.confidence <= 0.95
        assert prediction.confidence == pytest.approx(rolling_confidence(predictions[:index]))


def test_predictions_are_always_positive_and_finite() -> None:
    closes = [50.0 + (i % 5) for i in range(80)]
    closes[77] = math.nan

    predictions = generate_predictions(_bars(closes), days=30)

    assert predictions
    for prediction in predictions:
        assert prediction.actual is not None
        assert math.isfinite(prediction.actual) and prediction.actual > 0
        assert math.isfinite(prediction.predicted) and prediction.predicted > 0


def test_negative_days_is_rejected() -> None:
    with pytest.raises(ValueError, match="days must be non-negative"):
        generate_predictions(_bars([100.0] * 60), days=-1)


def test_rolling_confidence_bounds() -> None:
    base = Prediction(date=date(2025, 1, 1), actual=100.0, predicted=100.0, confidence=0.9)
    wild = replace(base, predicted=150.0)

    assert rolling_confidence([]) == pytest.approx(0.84)
    assert rolling_confidence([base]) == 0.95
    assert rolling_confidence([wild]) == 0.65


def test_rolling_confidence_uses_last_ten_entries() -> None:
    base = Prediction(date=date(2025, 1, 1), actual=100.0, predicted=100.0, confidence=0.9)
    old_misses = [replace(base, predicted=150.0)] * 5
    recent_hits = [base] * 10

    assert rolling_confidence(old_misses + recent_hits) == 0.95


def test_prediction_accuracy() -> None:
    predictions = [
        Prediction(date=date(2025, 1, 1), actual=100.0, predicted=98.0, confidence=0.8),
        Prediction(date=date(2025, 1, 2), actual=200.0, predicted=210.0, confidence=0.8),
    ]

    assert prediction_accuracy(predictions) == pytest.approx(96.5)
    assert prediction_accuracy([]) == 0.0
