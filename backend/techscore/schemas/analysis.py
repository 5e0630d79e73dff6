"""
CONTRACT 2: Technical Analysis

Input: prepared OHLCV series + current price
Output: AnalysisResult

Every indicator is reported with its value (None when the window
requirement is not met), a qualitative signal label and a presentational
colour tag.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


# =============================================================================
# ENUMS
# =============================================================================


class SignalLabel(str, Enum):
    BULLISH = "Bullish"
    BEARISH = "Bearish"
    OVERBOUGHT = "Overbought"
    OVERSOLD = "Oversold"
    NEUTRAL = "Neutral"
    NORMAL = "Normal"
    STRONG_TREND = "Strong trend"
    MODERATE_TREND = "Moderate trend"
    WEAK_TREND = "Weak trend"
    POSITIVE = "Positive"
    NEGATIVE = "Negative"
    CALCULATED = "Calculated"
    VOLUME_INDICATOR = "Volume Indicator"
    NOT_AVAILABLE = "N/A"


class SummaryLabel(str, Enum):
    BULLISH = "Bullish"
    BEARISH = "Bearish"
    OVERBOUGHT = "Overbought"
    OVERSOLD = "Oversold"
    NEUTRAL = "Neutral"
    CALCULATED = "Calculated"
    INDETERMINATE = "Indeterminate"


class ColorClass(str, Enum):
    GREEN = "text-green-600"
    RED = "text-red-600"
    YELLOW = "text-yellow-600"
    BLUE = "text-blue-600"
    PURPLE = "text-purple-600"
    INDIGO = "text-indigo-600"
    TEAL = "text-teal-600"
    ORANGE = "text-orange-600"
    GRAY = "text-gray-600"
    MUTED = "text-gray-500"


# =============================================================================
# OUTPUT: Indicator Components
# =============================================================================


class IndicatorResult(BaseModel):
    """Single-valued indicator."""

    value: Optional[float] = None
    signal: SignalLabel = SignalLabel.NOT_AVAILABLE
    color: ColorClass = ColorClass.MUTED


class BollingerBandsResult(BaseModel):
    """Bollinger Bands values."""

    upper: Optional[float] = None
    middle: Optional[float] = None
    lower: Optional[float] = None
    signal: SignalLabel = SignalLabel.NOT_AVAILABLE
    color: ColorClass = ColorClass.MUTED


class StochasticResult(BaseModel):
    """Stochastic oscillator values."""

    k: Optional[float] = None
    d: Optional[float] = None
    signal: SignalLabel = SignalLabel.NOT_AVAILABLE
    color: ColorClass = ColorClass.MUTED


class FibonacciResult(BaseModel):
    """Fibonacci retracement ladder, high to low."""

    level0: Optional[float] = None
    level236: Optional[float] = None
    level382: Optional[float] = None
    level500: Optional[float] = None
    level618: Optional[float] = None
    level786: Optional[float] = None
    level100: Optional[float] = None
    high: Optional[float] = None
    low: Optional[float] = None
    signal: SignalLabel = SignalLabel.NOT_AVAILABLE
    color: ColorClass = ColorClass.TEAL


class PivotPointsResult(BaseModel):
    """Classic pivot levels from the previous session."""

    pivot_point: Optional[float] = None
    resistance1: Optional[float] = None
    resistance2: Optional[float] = None
    resistance3: Optional[float] = None
    support1: Optional[float] = None
    support2: Optional[float] = None
    support3: Optional[float] = None
    signal: SignalLabel = SignalLabel.NOT_AVAILABLE
    color: ColorClass = ColorClass.ORANGE


class TechnicalIndicators(BaseModel):
    """All indicators produced by one analysis run."""

    # Trend
    sma20: IndicatorResult
    sma50: IndicatorResult
    sma200: IndicatorResult
    ema12: IndicatorResult
    ema26: IndicatorResult
    ema50: IndicatorResult
    ema200: IndicatorResult

    # Momentum
    rsi: IndicatorResult
    macd: IndicatorResult
    macd_signal: IndicatorResult
    macd_histogram: IndicatorResult
    stochastic: StochasticResult
    cci: IndicatorResult
    williams_r: IndicatorResult
    adx: IndicatorResult
    roc: IndicatorResult
    mfi: IndicatorResult

    # Volatility / volume
    bollinger_bands: BollingerBandsResult
    atr: IndicatorResult
    obv: IndicatorResult

    # Levels
    fibonacci: FibonacciResult
    pivot_points: PivotPointsResult


class AnalysisSummary(BaseModel):
    """Headline reading of the indicator set."""

    trend: SummaryLabel
    momentum: SummaryLabel
    volatility: SummaryLabel


# =============================================================================
# OUTPUT: AnalysisResult (Complete Response)
# =============================================================================


class AnalysisResult(BaseModel):
    """
    Complete technical analysis for a series.
    Returned by: analyze()
    Consumed by: API layer, automation record sink
    """

    symbol: Optional[str] = None
    current_price: float
    indicators: TechnicalIndicators
    summary: AnalysisSummary
    score: int = Field(..., ge=0, le=100, description="Composite technical score")

    class Config:
        json_schema_extra = {
            "example": {
                "symbol": "RELIANCE",
                "current_price": 2450.50,
                "indicators": {
                    "sma20": {"value": 2410.2, "signal": "Bullish", "color": "text-green-600"},
                    "rsi": {"value": 62.5, "signal": "Neutral", "color": "text-yellow-600"},
                },
                "summary": {
                    "trend": "Bullish",
                    "momentum": "Neutral",
                    "volatility": "Calculated",
                },
                "score": 74,
            }
        }
