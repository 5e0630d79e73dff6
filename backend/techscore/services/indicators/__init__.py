"""
Indicator Engine Service

CONTRACT:
    Input:  daily OHLCV series + current price
    Output: AnalysisResult

RESPONSIBILITIES:
    - Prepare and validate the series (null filtering, ordering, length gate)
    - Calculate the indicator battery (moving averages, RSI, MACD, ...)
    - Classify each indicator into a qualitative signal
    - Reduce everything to a weighted 0-100 technical score

PURE PYTHON - Uses NumPy for calculations.
All math is deterministic and reproducible.
"""

from techscore.services.indicators.interface import IndicatorServiceInterface
from techscore.services.indicators.service import (
    IndicatorService,
    analyze,
    get_indicator_service,
)

__all__ = [
    "IndicatorServiceInterface",
    "IndicatorService",
    "analyze",
    "get_indicator_service",
]
