"""Next-day close forecast from a fixed linear model over indicator features."""

from __future__ import annotations

import math
import random
import threading
from collections.abc import Callable
from dataclasses import dataclass

from stockcast.analysis.features import extract_features
from stockcast.domain.models import FeatureVector, PriceSeries, valid_closes, valid_volumes

NoiseSource = Callable[[], float]

FEATURE_WEIGHTS: dict[str, float] = {
    "price_to_sma20": 0.18,
    "price_to_sma50": 0.15,
    "sma_ratio": 0.20,
    "rsi_norm": -0.10,
    "macd_signal": 0.12,
    "bollinger_position": -0.08,
    "volume_ratio": 0.08,
    "momentum": 0.28,
    "volatility": -0.09,
}


def zero_noise() -> float:
    return 0.0


ZERO_NOISE: NoiseSource = zero_noise


class UniformNoise:
    """Thread-safe uniform draws in ``[-amplitude, amplitude]``."""

    def __init__(self, amplitude: float = 0.004, seed: int | None = None) -> None:
        if amplitude < 0:
            raise ValueError("amplitude must be non-negative")
        self.amplitude = amplitude
        self._random = random.Random(seed)
        self._lock = threading.Lock()

    def __call__(self) -> float:
        with self._lock:
            return self._random.uniform(-self.amplitude, self.amplitude)


@dataclass(frozen=True)
class PredictorParams:
    """Parameter set for the next-day predictor."""

    min_history: int = 50
    max_change: float = 0.04
    noise_amplitude: float = 0.004
    clamp_band: float = 0.08
    fallback_price: float = 100.0
    seed: int | None = None


def default_predictor_params() -> PredictorParams:
    return PredictorParams()


def weighted_score(features: FeatureVector) -> float:
    """Weighted feature sum; non-finite features are left out."""
    total = 0.0
    for name, value in features.as_dict().items():
        if math.isfinite(value):
            total += value * FEATURE_WEIGHTS[name]
    return total


def last_close(series: PriceSeries, fallback: float = 100.0) -> float:
    """Most recent close, or ``fallback`` when missing, zero or non-finite."""
    if not series:
        return fallback
    price = float(series[-1].close)
    if not math.isfinite(price) or price == 0:
        return fallback
    return price


class NextDayPredictor:
    """Forecast tomorrow's close from a daily bar history."""

    def __init__(
        self,
        params: PredictorParams | None = None,
        noise: NoiseSource | None = None,
    ) -> None:
        params = params or default_predictor_params()
        if params.min_history <= 0:
            raise ValueError("min_history must be positive")
        if params.max_change <= 0:
            raise ValueError("max_change must be positive")
        if params.clamp_band <= 0:
            raise ValueError("clamp_band must be positive")
        self.params = params
        self.noise = noise or UniformNoise(params.noise_amplitude, params.seed)

    def predict_next_day(self, series: PriceSeries) -> float:
        if series is None:
            raise ValueError("series is required")
        fallback = last_close(series, self.params.fallback_price)
        if len(series) < self.params.min_history:
            return fallback

        prices = valid_closes(series)
        if not prices:
            return fallback
        current_price = prices[-1]

        features = extract_features(prices, valid_volumes(series))
        change = math.tanh(weighted_score(features)) * self.params.max_change
        predicted = current_price * (1 + change)
        predicted *= 1 + self.noise()

        band = self.params.clamp_band
        return max(current_price * (1 - band), min(current_price * (1 + band), predicted))


def predict_next_day(series: PriceSeries, noise: NoiseSource | None = None) -> float:
    """Forecast with default parameters."""
    return NextDayPredictor(noise=noise).predict_next_day(series)
