"""
Stored analysis record contracts.

Read models for technical_analysis_records and the query payloads of the
technical-analysis endpoints.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class TechnicalAnalysisRecordOut(BaseModel):
    """One persisted analysis run for a symbol."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    symbol: str
    calculation_timestamp: datetime
    technical_score: int

    sma20: Optional[float] = None
    sma50: Optional[float] = None
    sma200: Optional[float] = None
    ema12: Optional[float] = None
    ema26: Optional[float] = None
    ema50: Optional[float] = None
    ema200: Optional[float] = None
    rsi: Optional[float] = None
    macd: Optional[float] = None
    macd_signal: Optional[float] = None
    macd_histogram: Optional[float] = None
    bollinger_upper: Optional[float] = None
    bollinger_middle: Optional[float] = None
    bollinger_lower: Optional[float] = None
    stochastic_k: Optional[float] = None
    stochastic_d: Optional[float] = None
    atr: Optional[float] = None
    cci: Optional[float] = None
    williams_r: Optional[float] = None
    adx: Optional[float] = None
    roc: Optional[float] = None
    mfi: Optional[float] = None
    obv: Optional[float] = None

    fibonacci_level0: Optional[float] = None
    fibonacci_level236: Optional[float] = None
    fibonacci_level382: Optional[float] = None
    fibonacci_level500: Optional[float] = None
    fibonacci_level618: Optional[float] = None
    fibonacci_level786: Optional[float] = None
    fibonacci_level100: Optional[float] = None

    pivot_point: Optional[float] = None
    pivot_resistance1: Optional[float] = None
    pivot_resistance2: Optional[float] = None
    pivot_resistance3: Optional[float] = None
    pivot_support1: Optional[float] = None
    pivot_support2: Optional[float] = None
    pivot_support3: Optional[float] = None

    created_at: Optional[datetime] = None


class ScoreTrendPoint(BaseModel):
    """Score of a symbol at one calculation time."""
    symbol: str
    technical_score: int
    calculation_timestamp: datetime


class SearchCriteria(BaseModel):
    """Filters for record search. All fields are optional."""
    symbol: Optional[str] = None
    min_score: Optional[int] = Field(default=None, ge=0, le=100)
    max_score: Optional[int] = Field(default=None, ge=0, le=100)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    limit: int = Field(default=100, ge=1, le=1000)

    class Config:
        json_schema_extra = {
            "example": {
                "symbol": "RELIANCE",
                "min_score": 60,
                "max_score": 100,
                "limit": 50,
            }
        }


class ApiResponse(BaseModel):
    """Standard envelope for technical-analysis endpoints."""
    success: bool = True
    count: Optional[int] = None
    data: Any = None
    message: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.utcnow)
