"""Single-symbol analysis: forecast, backtest series and recommendation."""

from __future__ import annotations

import concurrent.futures
from collections.abc import Mapping

from stockcast.analysis.backtest import generate_predictions, prediction_accuracy
from stockcast.analysis.predictor import NextDayPredictor
from stockcast.analysis.recommender import recommend
from stockcast.domain.models import PriceSeries, SymbolAnalysis


def analyze_symbol(
    symbol: str,
    series: PriceSeries,
    days: int = 30,
    predictor: NextDayPredictor | None = None,
    name: str | None = None,
) -> SymbolAnalysis:
    """Run every engine output for one symbol with a shared predictor."""
    if series is None:
        raise ValueError("series is required")
    model = predictor or NextDayPredictor()
    predictions = generate_predictions(series, days=days, predictor=model)
    return SymbolAnalysis(
        symbol=symbol,
        bars=len(series),
        next_day=model.predict_next_day(series),
        recommendation=recommend(symbol, series, model, name),
        predictions=predictions,
        accuracy=prediction_accuracy(predictions),
    )


def analyze_symbols(
    series_by_symbol: Mapping[str, PriceSeries],
    days: int = 30,
    predictor: NextDayPredictor | None = None,
    max_workers: int | None = None,
) -> list[SymbolAnalysis]:
    """Analyze each symbol, in input order, optionally on a thread pool."""
    if max_workers is not None and max_workers <= 0:
        raise ValueError("max_workers must be positive")
    model = predictor or NextDayPredictor()
    items = list(series_by_symbol.items())
    if max_workers is None or max_workers == 1 or len(items) <= 1:
        return [analyze_symbol(symbol, series, days, model) for symbol, series in items]

    with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [
            executor.submit(analyze_symbol, symbol, series, days, model)
            for symbol, series in items
        ]
        return [future.result() for future in futures]
