"""Indicator, prediction and recommendation engine."""

from .backtest import generate_predictions, prediction_accuracy
from .pipeline import analyze_symbol, analyze_symbols
from .predictor import ZERO_NOISE, NextDayPredictor, PredictorParams, predict_next_day
from .recommender import generate_recommendations, rank_recommendations, recommend

__all__ = [
    "NextDayPredictor",
    "PredictorParams",
    "ZERO_NOISE",
    "analyze_symbol",
    "analyze_symbols",
    "generate_predictions",
    "generate_recommendations",
    "predict_next_day",
    "prediction_accuracy",
    "rank_recommendations",
    "recommend",
]
