"""Walk-forward prediction series over known history.

Each entry is predicted from the bars strictly before it, so the series can be
plotted against the realised closes. The confidence attached to an entry is a
lagging self-calibration: it reflects how wrong the previous ten emitted
predictions were, not a statistical interval around this one.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from stockcast.analysis.predictor import NextDayPredictor
from stockcast.domain.models import Prediction, PriceSeries, valid_closes

MIN_HISTORY = 50
ERROR_LOOKBACK = 10
DEFAULT_ERROR = 0.02
MIN_CONFIDENCE = 0.65
MAX_CONFIDENCE = 0.95


def clamp(value: float, low: float, high: float) -> float:
    """Clamp a float within inclusive bounds."""
    return max(low, min(high, value))


def _is_usable(value: float | None) -> bool:
    return value is not None and math.isfinite(value) and value > 0


def rolling_confidence(previous: Sequence[Prediction]) -> float:
    """Confidence from the mean relative error of recent emitted predictions."""
    recent = list(previous)[-ERROR_LOOKBACK:]
    errors = [entry.relative_error for entry in recent if entry.relative_error is not None]
    average_error = sum(errors) / len(errors) if errors else DEFAULT_ERROR
    return clamp(1 - average_error * 8, MIN_CONFIDENCE, MAX_CONFIDENCE)


def generate_predictions(
    series: PriceSeries,
    days: int = 30,
    predictor: NextDayPredictor | None = None,
) -> list[Prediction]:
    """Backtest the predictor over the last ``days`` bars of ``series``.

    Returns an empty list when fewer than 50 valid closes exist.
    """
    if series is None:
        raise ValueError("series is required")
    if days < 0:
        raise ValueError("days must be non-negative")
    actual_prices = valid_closes(series)
    if len(actual_prices) < MIN_HISTORY:
        return []

    model = predictor or NextDayPredictor()
    predictions: list[Prediction] = []
    start = max(MIN_HISTORY, len(series) - days)
    for index in range(start, len(series)):
        predicted = model.predict_next_day(series[:index])
        actual = actual_prices[index] if index < len(actual_prices) else None
        if not _is_usable(actual) or not _is_usable(predicted):
            continue
        predictions.append(
            Prediction(
                date=series[index].date,
                actual=actual,
                predicted=predicted,
                confidence=rolling_confidence(predictions),
            )
        )
    return predictions


def prediction_accuracy(predictions: Sequence[Prediction]) -> float:
    """Mean ``1 - relative error`` as a percentage; 0 for an empty series."""
    errors = [entry.relative_error for entry in predictions]
    usable = [error for error in errors if error is not None]
    if not usable:
        return 0.0
    return sum(1 - error for error in usable) / len(usable) * 100
