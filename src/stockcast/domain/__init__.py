"""Domain models and event types."""

from .events import AnalysisEvent
from .models import (
    Bar,
    FeatureVector,
    IndicatorSet,
    Prediction,
    PriceSeries,
    Recommendation,
    RecommendationType,
    SymbolAnalysis,
)

__all__ = [
    "AnalysisEvent",
    "Bar",
    "FeatureVector",
    "IndicatorSet",
    "Prediction",
    "PriceSeries",
    "Recommendation",
    "RecommendationType",
    "SymbolAnalysis",
]
