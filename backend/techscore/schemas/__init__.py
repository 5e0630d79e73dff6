"""
TechScore Schema Contracts

This module defines all JSON contracts between system components.
These are the authoritative interfaces - all modules must conform to these schemas.
"""

from techscore.schemas.market import (
    PriceBar,
    SymbolSeries,
)
from techscore.schemas.analysis import (
    SignalLabel,
    SummaryLabel,
    ColorClass,
    IndicatorResult,
    BollingerBandsResult,
    StochasticResult,
    FibonacciResult,
    PivotPointsResult,
    TechnicalIndicators,
    AnalysisSummary,
    AnalysisResult,
)
from techscore.schemas.records import (
    TechnicalAnalysisRecordOut,
    ScoreTrendPoint,
    SearchCriteria,
    ApiResponse,
)

__all__ = [
    # Market
    "PriceBar",
    "SymbolSeries",
    # Analysis
    "SignalLabel",
    "SummaryLabel",
    "ColorClass",
    "IndicatorResult",
    "BollingerBandsResult",
    "StochasticResult",
    "FibonacciResult",
    "PivotPointsResult",
    "TechnicalIndicators",
    "AnalysisSummary",
    "AnalysisResult",
    # Records
    "TechnicalAnalysisRecordOut",
    "ScoreTrendPoint",
    "SearchCriteria",
    "ApiResponse",
]
