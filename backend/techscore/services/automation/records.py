"""
Analysis record mapping.

Flattens an AnalysisResult into one technical_analysis_records row.
"""

from datetime import datetime
from typing import Optional

from techscore.schemas.analysis import AnalysisResult


def build_record(
    symbol: str,
    result: AnalysisResult,
    calculated_at: Optional[datetime] = None,
) -> dict:
    """Column values for TechnicalAnalysisRecord; missing indicators stay None."""
    ind = result.indicators
    bb = ind.bollinger_bands
    fib = ind.fibonacci
    pivots = ind.pivot_points

    return {
        "symbol": symbol.upper(),
        "calculation_timestamp": calculated_at or datetime.utcnow(),
        "technical_score": result.score,
        "sma20": ind.sma20.value,
        "sma50": ind.sma50.value,
        "sma200": ind.sma200.value,
        "ema12": ind.ema12.value,
        "ema26": ind.ema26.value,
        "ema50": ind.ema50.value,
        "ema200": ind.ema200.value,
        "rsi": ind.rsi.value,
        "macd": ind.macd.value,
        "macd_signal": ind.macd_signal.value,
        "macd_histogram": ind.macd_histogram.value,
        "bollinger_upper": bb.upper,
        "bollinger_middle": bb.middle,
        "bollinger_lower": bb.lower,
        "stochastic_k": ind.stochastic.k,
        "stochastic_d": ind.stochastic.d,
        "atr": ind.atr.value,
        "cci": ind.cci.value,
        "williams_r": ind.williams_r.value,
        "adx": ind.adx.value,
        "roc": ind.roc.value,
        "mfi": ind.mfi.value,
        "obv": ind.obv.value,
        "fibonacci_level0": fib.level0,
        "fibonacci_level236": fib.level236,
        "fibonacci_level382": fib.level382,
        "fibonacci_level500": fib.level500,
        "fibonacci_level618": fib.level618,
        "fibonacci_level786": fib.level786,
        "fibonacci_level100": fib.level100,
        "pivot_point": pivots.pivot_point,
        "pivot_resistance1": pivots.resistance1,
        "pivot_resistance2": pivots.resistance2,
        "pivot_resistance3": pivots.resistance3,
        "pivot_support1": pivots.support1,
        "pivot_support2": pivots.support2,
        "pivot_support3": pivots.support3,
    }
