"""Concise human-readable run logger."""

from __future__ import annotations

import logging

from stockcast.domain.models import Prediction, Recommendation


class HumanLogger:
    """Console logger with fixed line types."""

    def __init__(self, level: str = "INFO") -> None:
        self._logger = logging.getLogger("stockcast")
        self._logger.setLevel(getattr(logging, level.upper(), logging.INFO))
        self._logger.propagate = False
        if not self._logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter("%(asctime)s | %(message)s", "%Y-%m-%d %H:%M:%S")
            handler.setFormatter(formatter)
            self._logger.addHandler(handler)

    def run_started(self, run_id: str, symbols: list[str]) -> None:
        self._logger.info(
            "run | %s | symbols %s",
            self._short_id(run_id),
            ",".join(symbols) if symbols else "-",
        )

    def forecast(self, symbol: str, last_close: float | None, next_day: float) -> None:
        parts = [f"forecast | {symbol}"]
        if last_close is not None and last_close > 0:
            parts.append(f"close {last_close:,.2f}")
            parts.append(f"next {next_day:,.2f} ({(next_day - last_close) / last_close:+.2%})")
        else:
            parts.append(f"next {next_day:,.2f}")
        self._logger.info(" | ".join(parts))

    def prediction_series(
        self,
        symbol: str,
        predictions: list[Prediction],
        accuracy: float,
    ) -> None:
        if not predictions:
            self._logger.info("backtest | %s | no predictions (insufficient history)", symbol)
            return
        latest = predictions[-1]
        self._logger.info(
            "backtest | %s | points %d | accuracy %.1f%% | last_confidence %.0f%%",
            symbol,
            len(predictions),
            accuracy,
            latest.confidence * 100,
        )
        self._logger.debug(
            "backtest | %s | %s -> %s",
            symbol,
            predictions[0].date.isoformat(),
            latest.date.isoformat(),
        )

    def recommendation(self, rank: int, item: Recommendation) -> None:
        parts = [
            f"#{rank} {item.symbol}",
            f"{item.recommendation.value}",
            f"conf {item.confidence:.0%}",
            f"target {item.target_price:,.2f}",
        ]
        change = item.expected_change
        if change is not None:
            parts.append(f"move {change:+.2%}")
        parts.append(item.reason)
        self._logger.info("recommend | %s", " | ".join(parts))

    def skipped(self, symbol: str, reason: str) -> None:
        self._logger.warning("skipped | %s | %s", symbol, reason)

    def error(self, message: str) -> None:
        self._logger.error("error | %s", message)

    @staticmethod
    def _short_id(value: str | None, head: int = 10, tail: int = 6) -> str:
        if not value:
            return ""
        text = str(value)
        if len(text) <= head + tail + 1:
            return text
        return f"{text[:head]}...{text[-tail:]}"
