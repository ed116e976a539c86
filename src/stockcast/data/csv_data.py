"""CSV-backed market data provider."""

from __future__ import annotations

from pathlib import Path

import pandas as pd

from stockcast.data.base import OHLCV_COLUMNS, bars_from_frame
from stockcast.domain.models import Bar
from stockcast.universe import split_market_symbol


class CsvDataProvider:
    """Load OHLCV bars from local CSV files."""

    date_column_candidates = ("date", "datetime", "timestamp")

    def __init__(self, data_dir: str, max_bars: int | None = None) -> None:
        if max_bars is not None and max_bars <= 0:
            raise ValueError("max_bars must be positive")
        self.data_dir = Path(data_dir)
        self.max_bars = max_bars
        self._bars_cache: dict[str, pd.DataFrame] = {}

    def get_bars(self, symbol: str) -> pd.DataFrame:
        bars = self._load_bars(symbol)
        if self.max_bars is not None:
            bars = bars.iloc[-self.max_bars :]
        return bars.copy()

    def get_series(self, symbol: str) -> list[Bar]:
        """Bars for ``symbol`` as domain records."""
        return bars_from_frame(self.get_bars(symbol))

    def _load_bars(self, symbol: str) -> pd.DataFrame:
        cached = self._bars_cache.get(symbol)
        if cached is not None:
            return cached

        path = self._resolve_path(symbol)
        if path is None:
            raise ValueError(f"No CSV found for {symbol} under {self.data_dir}")
        frame = pd.read_csv(path)
        normalized = self._normalize_csv(frame, symbol)
        self._bars_cache[symbol] = normalized
        return normalized

    def _resolve_path(self, symbol: str) -> Path | None:
        market, bare_symbol = split_market_symbol(symbol)
        symbol_upper = bare_symbol.upper()
        symbol_lower = bare_symbol.lower()
        candidates: list[Path] = []
        if market is not None:
            market_upper = market.upper()
            market_lower = market.lower()
            candidates.extend(
                [
                    self.data_dir / market_upper / f"{symbol_upper}.csv",
                    self.data_dir / market_upper / f"{symbol_lower}.csv",
                    self.data_dir / market_lower / f"{symbol_upper}.csv",
                    self.data_dir / market_lower / f"{symbol_lower}.csv",
                ]
            )
        candidates.extend(
            [
                self.data_dir / f"{symbol_upper}.csv",
                self.data_dir / f"{symbol_lower}.csv",
            ]
        )
        seen: set[Path] = set()
        for candidate in candidates:
            if candidate in seen:
                continue
            seen.add(candidate)
            if candidate.exists():
                return candidate
        return None

    def _normalize_csv(self, frame: pd.DataFrame, symbol: str) -> pd.DataFrame:
        lower_to_original = {column.strip().lower(): column for column in frame.columns}
        date_column = self._pick_date_column(lower_to_original)
        rename_map = self._build_ohlcv_rename_map(lower_to_original, symbol)
        normalized = frame.rename(columns=rename_map)
        normalized.index = pd.to_datetime(normalized[date_column], utc=False)
        normalized = normalized[~normalized.index.duplicated(keep="last")]
        normalized = normalized.sort_index()
        normalized = normalized[OHLCV_COLUMNS].copy()
        normalized = normalized.apply(pd.to_numeric, errors="coerce")
        normalized = normalized.dropna(subset=["close"])
        normalized["volume"] = normalized["volume"].fillna(0.0)
        if normalized.empty:
            raise ValueError(f"{symbol}: data has no valid OHLCV rows")
        return normalized

    def _pick_date_column(self, lower_to_original: dict[str, str]) -> str:
        for candidate in self.date_column_candidates:
            if candidate in lower_to_original:
                return lower_to_original[candidate]
        candidates = ", ".join(self.date_column_candidates)
        raise ValueError(f"CSV missing date column. Expected one of: {candidates}")

    @staticmethod
    def _build_ohlcv_rename_map(
        lower_to_original: dict[str, str],
        symbol: str,
    ) -> dict[str, str]:
        rename_map: dict[str, str] = {}
        for name in OHLCV_COLUMNS:
            source = lower_to_original.get(name)
            if source is None:
                raise ValueError(f"{symbol}: CSV missing required column '{name}'")
            rename_map[source] = name
        return rename_map
