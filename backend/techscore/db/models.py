"""
SQLAlchemy models for TechScore database.

Uses SQLite for local persistence of:
- Historical daily bars (engine input)
- Latest quotes (current price)
- Technical analysis records (one flattened result per symbol per run)
"""

from datetime import datetime

from sqlalchemy import (
    Column,
    String,
    Float,
    Integer,
    Date,
    DateTime,
    Index,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class HistoricalBar(Base):
    """
    Daily OHLCV bar.
    Fields are nullable; incomplete rows are dropped during series preparation.
    """
    __tablename__ = "historical_ohlcv"

    id = Column(Integer, primary_key=True, autoincrement=True)
    symbol = Column(String(20), nullable=False, index=True)
    date = Column(Date, nullable=False)
    open = Column(Float, nullable=True)
    high = Column(Float, nullable=True)
    low = Column(Float, nullable=True)
    close = Column(Float, nullable=True)
    volume = Column(Float, nullable=True)

    __table_args__ = (
        UniqueConstraint("symbol", "date", name="uq_historical_symbol_date"),
    )


class Tick(Base):
    """
    Latest traded prices.
    The most recent tick per symbol is the analysis current price.
    """
    __tablename__ = "ticks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    symbol = Column(String(20), nullable=False, index=True)
    price = Column(Float, nullable=False)
    volume = Column(Integer, default=0)
    timestamp = Column(DateTime, nullable=False, index=True)
    source = Column(String(20), default="unknown")  # yahoo, manual

    # Composite index for efficient time-range queries
    __table_args__ = (
        Index("ix_ticks_symbol_timestamp", "symbol", "timestamp"),
    )


class TechnicalAnalysisRecord(Base):
    """
    Flattened AnalysisResult.
    Written by the batch automation; read back for score trends and rankings.
    """
    __tablename__ = "technical_analysis_records"

    id = Column(Integer, primary_key=True, autoincrement=True)
    symbol = Column(String(20), nullable=False)
    calculation_timestamp = Column(DateTime, nullable=False)
    technical_score = Column(Integer, nullable=False)

    # Moving averages
    sma20 = Column(Float, nullable=True)
    sma50 = Column(Float, nullable=True)
    sma200 = Column(Float, nullable=True)
    ema12 = Column(Float, nullable=True)
    ema26 = Column(Float, nullable=True)
    ema50 = Column(Float, nullable=True)
    ema200 = Column(Float, nullable=True)

    # Momentum
    rsi = Column(Float, nullable=True)
    macd = Column(Float, nullable=True)
    macd_signal = Column(Float, nullable=True)
    macd_histogram = Column(Float, nullable=True)
    stochastic_k = Column(Float, nullable=True)
    stochastic_d = Column(Float, nullable=True)
    cci = Column(Float, nullable=True)
    williams_r = Column(Float, nullable=True)
    adx = Column(Float, nullable=True)
    roc = Column(Float, nullable=True)
    mfi = Column(Float, nullable=True)

    # Volatility / volume
    bollinger_upper = Column(Float, nullable=True)
    bollinger_middle = Column(Float, nullable=True)
    bollinger_lower = Column(Float, nullable=True)
    atr = Column(Float, nullable=True)
    obv = Column(Float, nullable=True)

    # Fibonacci retracement
    fibonacci_level0 = Column(Float, nullable=True)
    fibonacci_level236 = Column(Float, nullable=True)
    fibonacci_level382 = Column(Float, nullable=True)
    fibonacci_level500 = Column(Float, nullable=True)
    fibonacci_level618 = Column(Float, nullable=True)
    fibonacci_level786 = Column(Float, nullable=True)
    fibonacci_level100 = Column(Float, nullable=True)

    # Pivot points
    pivot_point = Column(Float, nullable=True)
    pivot_resistance1 = Column(Float, nullable=True)
    pivot_resistance2 = Column(Float, nullable=True)
    pivot_resistance3 = Column(Float, nullable=True)
    pivot_support1 = Column(Float, nullable=True)
    pivot_support2 = Column(Float, nullable=True)
    pivot_support3 = Column(Float, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        Index("idx_ta_symbol_timestamp", "symbol", "calculation_timestamp"),
        Index("idx_ta_timestamp", "calculation_timestamp"),
        Index("idx_ta_score", "technical_score"),
        Index("idx_ta_symbol", "symbol"),
    )
