"""Runtime wiring for a single analysis pass over the configured symbols."""

from __future__ import annotations

from pathlib import Path
from uuid import uuid4

from stockcast.analysis.pipeline import analyze_symbols
from stockcast.analysis.predictor import NextDayPredictor, PredictorParams
from stockcast.analysis.recommender import rank_recommendations
from stockcast.config import Settings
from stockcast.data.base import MarketDataProvider
from stockcast.data.csv_data import CsvDataProvider
from stockcast.domain.events import AnalysisEvent
from stockcast.domain.models import Bar, SymbolAnalysis, valid_closes
from stockcast.logging.event_sink import (
    JsonlEventSink,
    generate_plotly_report,
    serialize_predictions,
    serialize_recommendation,
)
from stockcast.logging.logger import HumanLogger


def run(settings: Settings) -> int:
    """Analyze every configured symbol once and write the run artifacts."""
    symbols = settings.resolved_symbols()
    data_provider = build_data_provider(settings)
    predictor = build_predictor(settings)

    run_id = uuid4().hex
    run_directory = Path(settings.events_dir) / run_id
    run_directory.mkdir(parents=True, exist_ok=True)
    events_path = run_directory / "events.jsonl"
    report_path = run_directory / "report.html"

    event_sink = JsonlEventSink(str(events_path))
    human_logger = HumanLogger(level=settings.log_level)

    human_logger.run_started(run_id, symbols)
    event_sink.emit(
        AnalysisEvent(
            run_id=run_id,
            event_type="run_started",
            payload={"symbols": symbols, "prediction_days": settings.prediction_days},
        )
    )

    exit_code = 0
    try:
        series_by_symbol = load_series(
            symbols=symbols,
            data_provider=data_provider,
            run_id=run_id,
            event_sink=event_sink,
            human_logger=human_logger,
        )
        analyses = analyze_symbols(
            series_by_symbol,
            days=settings.prediction_days,
            predictor=predictor,
            max_workers=settings.max_workers,
        )
        for analysis in analyses:
            series = series_by_symbol[analysis.symbol]
            record_analysis(analysis, series, run_id, event_sink, human_logger)

        recommendations = rank_recommendations(analysis.recommendation for analysis in analyses)
        for rank, item in enumerate(recommendations, start=1):
            human_logger.recommendation(rank, item)
            event_sink.emit(
                AnalysisEvent(
                    run_id=run_id,
                    event_type="recommendation",
                    payload=serialize_recommendation(rank, item),
                )
            )
        if not series_by_symbol:
            exit_code = 1
    except KeyboardInterrupt:
        exit_code = 0
    except Exception as exc:
        human_logger.error(str(exc))
        event_sink.emit(
            AnalysisEvent(
                run_id=run_id,
                event_type="error",
                payload={"message": str(exc)},
            )
        )
        exit_code = 1
    finally:
        if settings.write_report:
            generate_plotly_report(str(events_path), str(report_path))

    return exit_code


def record_analysis(
    analysis: SymbolAnalysis,
    series: list[Bar],
    run_id: str,
    event_sink: JsonlEventSink,
    human_logger: HumanLogger,
) -> None:
    """Log and emit the forecast and backtest outputs for one symbol."""
    prices = valid_closes(series)
    last_close = prices[-1] if prices else None
    human_logger.forecast(analysis.symbol, last_close, analysis.next_day)
    event_sink.emit(
        AnalysisEvent(
            run_id=run_id,
            event_type="forecast",
            payload={
                "symbol": analysis.symbol,
                "bars": analysis.bars,
                "last_close": last_close,
                "next_day": round(analysis.next_day, 6),
            },
        )
    )
    human_logger.prediction_series(analysis.symbol, analysis.predictions, analysis.accuracy)
    event_sink.emit(
        AnalysisEvent(
            run_id=run_id,
            event_type="prediction_series",
            payload={
                "symbol": analysis.symbol,
                "accuracy": round(analysis.accuracy, 4),
                "points": serialize_predictions(analysis.predictions),
            },
        )
    )


def load_series(
    symbols: list[str],
    data_provider: MarketDataProvider,
    run_id: str,
    event_sink: JsonlEventSink,
    human_logger: HumanLogger,
) -> dict[str, list[Bar]]:
    """Fetch bars for all symbols, skipping the ones that fail to load."""
    series_by_symbol: dict[str, list[Bar]] = {}
    for symbol in symbols:
        try:
            series = data_provider.get_series(symbol)
        except ValueError as exc:
            human_logger.skipped(symbol, str(exc))
            event_sink.emit(
                AnalysisEvent(
                    run_id=run_id,
                    event_type="error",
                    payload={"symbol": symbol, "message": str(exc)},
                )
            )
            continue
        if not series:
            human_logger.skipped(symbol, "no bars")
            continue
        series_by_symbol[symbol] = series
    return series_by_symbol


def build_predictor(settings: Settings) -> NextDayPredictor:
    """Create the shared predictor from noise settings."""
    return NextDayPredictor(
        PredictorParams(
            noise_amplitude=settings.noise_amplitude,
            seed=settings.random_seed,
        )
    )


def build_data_provider(settings: Settings) -> MarketDataProvider:
    """Local CSV bars are the only input source."""
    return CsvDataProvider(data_dir=settings.data_dir)
