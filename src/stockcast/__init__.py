"""Technical-indicator forecasting and recommendation engine.

Daily bars flow through the indicator library into a fixed feature vector,
a bounded linear next-day predictor, a walk-forward backtest series and a
BUY/SELL/HOLD scorer that ranks a list of symbols.
"""

__all__ = [
    "analysis",
    "config",
    "data",
    "domain",
    "logging",
    "universe",
]
