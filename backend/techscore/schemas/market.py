"""
CONTRACT 1: Market Data

Input to the analysis engine: daily OHLCV bars, oldest first.
"""

import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class PriceBar(BaseModel):
    """
    One trading session.
    Supplied by: historical bar store
    Consumed by: series preparation
    """

    model_config = ConfigDict(frozen=True, from_attributes=True)

    date: datetime.date
    open: float
    high: float
    low: float
    close: float
    volume: float = Field(..., ge=0)


class SymbolSeries(BaseModel):
    """
    Bars for one symbol plus its latest quote.
    Sent by: API / batch driver
    Received by: Indicator Service
    """

    symbol: str = Field(..., description="Ticker symbol (e.g., 'RELIANCE')")
    bars: list[PriceBar] = Field(..., description="Daily bars, any order")
    quote: Optional[float] = Field(default=None, description="Latest traded price")
