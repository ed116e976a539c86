"""Environment and CLI runtime configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Self

try:
    from dotenv import load_dotenv
except ImportError:
    load_dotenv = None

from stockcast.universe import DEFAULT_SYMBOLS, normalize_symbol


def parse_bool(value: str | None, default: bool) -> bool:
    """Parse truthy environment strings."""
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def parse_optional_positive_int(value: str | None, *, field_name: str) -> int | None:
    """Parse optional positive integer values from env strings."""
    if value is None:
        return None
    text = value.strip()
    if not text:
        return None
    parsed = int(text)
    if parsed <= 0:
        raise ValueError(f"{field_name} must be positive")
    return parsed


def parse_optional_int(value: str | None) -> int | None:
    """Parse an optional integer, treating blanks as unset."""
    if value is None or not value.strip():
        return None
    return int(value.strip())


def parse_symbols(value: str | None, default: list[str] | None = None) -> list[str]:
    """Parse comma-separated symbols."""
    fallback = default or DEFAULT_SYMBOLS
    if not value:
        return list(fallback)
    symbols = [item.strip().upper() for item in value.split(",") if item.strip()]
    return dedupe_symbols(symbols) or list(fallback)


def dedupe_symbols(symbols: list[str]) -> list[str]:
    """Remove duplicate symbols while preserving order."""
    deduped: list[str] = []
    seen: set[str] = set()
    for symbol in symbols:
        if symbol in seen:
            continue
        seen.add(symbol)
        deduped.append(symbol)
    return deduped


@dataclass(frozen=True)
class Settings:
    """Immutable runtime settings."""

    symbols: list[str] = field(default_factory=lambda: list(DEFAULT_SYMBOLS))
    data_dir: str = "historical_data"
    events_dir: str = "runs"
    log_level: str = "INFO"
    prediction_days: int = 30
    noise_amplitude: float = 0.004
    random_seed: int | None = None
    max_workers: int | None = None
    exchange_suffix: str = ""
    write_report: bool = True

    @classmethod
    def from_env(cls) -> Self:
        """Create settings from environment variables."""
        if load_dotenv is not None:
            load_dotenv()
        raw = cls(
            symbols=parse_symbols(os.getenv("SYMBOLS")),
            data_dir=str(os.getenv("HISTORICAL_DATA_DIR", "historical_data")).strip(),
            events_dir=str(os.getenv("EVENTS_DIR", "runs")).strip(),
            log_level=str(os.getenv("LOG_LEVEL", "INFO")).strip().upper(),
            prediction_days=int(os.getenv("PREDICTION_DAYS", "30")),
            noise_amplitude=float(os.getenv("NOISE_AMPLITUDE", "0.004")),
            random_seed=parse_optional_int(os.getenv("RANDOM_SEED")),
            max_workers=parse_optional_positive_int(
                os.getenv("MAX_WORKERS"),
                field_name="max_workers",
            ),
            exchange_suffix=str(os.getenv("EXCHANGE_SUFFIX", "")).strip(),
            write_report=parse_bool(os.getenv("WRITE_REPORT"), True),
        )
        return raw.validate()

    def with_overrides(self, **kwargs: object) -> Self:
        """Return a new settings object with updated values."""
        updated = replace(self, **kwargs)
        return updated.validate()

    def resolved_symbols(self) -> list[str]:
        """Symbols with the configured exchange suffix applied."""
        return dedupe_symbols(
            [normalize_symbol(symbol, self.exchange_suffix) for symbol in self.symbols]
        )

    def validate(self) -> Self:
        """Validate settings fields."""
        if not self.symbols:
            raise ValueError("symbols must not be empty")
        if self.prediction_days < 0:
            raise ValueError("prediction_days must be non-negative")
        if self.noise_amplitude < 0 or self.noise_amplitude >= 0.08:
            raise ValueError("noise_amplitude must be in [0, 0.08)")
        if self.max_workers is not None and self.max_workers <= 0:
            raise ValueError("max_workers must be positive")
        if not self.data_dir:
            raise ValueError("data_dir must not be empty")
        if not self.events_dir:
            raise ValueError("events_dir must not be empty")
        return self
