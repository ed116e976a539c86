"""JSONL event sink and per-run Plotly report generator."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pandas as pd
import plotly.express as px

from stockcast.domain.events import AnalysisEvent
from stockcast.domain.models import Prediction, Recommendation


class JsonlEventSink:
    """Append-only JSONL writer."""

    def __init__(self, path: str) -> None:
        output_path = Path(path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        self.path = output_path

    def emit(self, event: AnalysisEvent) -> None:
        record = event.to_record()
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record, sort_keys=True))
            handle.write("\n")


def serialize_predictions(predictions: list[Prediction]) -> list[dict[str, Any]]:
    """Convert prediction records into JSON-friendly rows."""
    return [
        {
            "date": prediction.date.isoformat(),
            "actual": prediction.actual,
            "predicted": round(prediction.predicted, 6),
            "confidence": round(prediction.confidence, 6),
        }
        for prediction in predictions
    ]


def serialize_recommendation(rank: int, item: Recommendation) -> dict[str, Any]:
    """Convert a recommendation into a stable event payload."""
    return {
        "rank": rank,
        "symbol": item.symbol,
        "name": item.name,
        "recommendation": item.recommendation.value,
        "target_price": round(item.target_price, 6),
        "confidence": round(item.confidence, 6),
        "reason": item.reason,
        "score": item.score,
        "current_price": item.current_price,
    }


def load_events(path: str | Path) -> list[dict[str, Any]]:
    """Load JSONL records from disk."""
    records: list[dict[str, Any]] = []
    input_path = Path(path)
    if not input_path.exists():
        return records
    with input_path.open("r", encoding="utf-8") as handle:
        for line in handle:
            text = line.strip()
            if not text:
                continue
            records.append(json.loads(text))
    return records


def _prediction_figures(events: list[dict[str, Any]]) -> list[Any]:
    figures = []
    for event in events:
        if event.get("event_type") != "prediction_series":
            continue
        payload = event.get("payload", {})
        points = payload.get("points") or []
        if not points:
            continue
        frame = pd.DataFrame(points)
        frame["date"] = pd.to_datetime(frame["date"], errors="coerce")
        long_frame = frame.melt(
            id_vars=["date", "confidence"],
            value_vars=["actual", "predicted"],
            var_name="series",
            value_name="price",
        )
        accuracy = float(payload.get("accuracy", 0.0))
        figures.append(
            px.line(
                long_frame,
                x="date",
                y="price",
                color="series",
                hover_data=["confidence"],
                title=f"{payload.get('symbol', '')} actual vs predicted (accuracy {accuracy:.1f}%)",
            )
        )
    return figures


def _recommendation_figure(events: list[dict[str, Any]]) -> Any | None:
    rows = [
        event.get("payload", {})
        for event in events
        if event.get("event_type") == "recommendation"
    ]
    if not rows:
        return None
    frame = pd.DataFrame(rows).sort_values("rank")
    return px.bar(
        frame,
        x="symbol",
        y="confidence",
        color="recommendation",
        hover_data=["target_price", "reason"],
        title="Ranked Recommendations",
        color_discrete_map={"BUY": "#16a34a", "HOLD": "#ca8a04", "SELL": "#dc2626"},
    )


def generate_plotly_report(events_jsonl_path: str, output_html_path: str) -> None:
    """Render the run's prediction series and recommendations."""
    events = load_events(events_jsonl_path)
    output = Path(output_html_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    figures = _prediction_figures(events)
    recommendation_figure = _recommendation_figure(events)
    if recommendation_figure is not None:
        figures.append(recommendation_figure)

    if not figures:
        counts = pd.DataFrame(
            [event.get("event_type", "none") for event in events] or ["none"],
            columns=["event_type"],
        )
        summary = counts.groupby("event_type").size().reset_index(name="count")
        if not events:
            summary["count"] = 0
        figure = px.bar(summary, x="event_type", y="count", title="Run Event Summary")
        figure.write_html(str(output), include_plotlyjs="cdn")
        return

    html_parts = [
        "<html><head><meta charset='utf-8'><title>stockcast run report</title></head><body>",
        figures[0].to_html(full_html=False, include_plotlyjs="cdn"),
        *(figure.to_html(full_html=False, include_plotlyjs=False) for figure in figures[1:]),
        "</body></html>",
    ]
    output.write_text("".join(html_parts), encoding="utf-8")
