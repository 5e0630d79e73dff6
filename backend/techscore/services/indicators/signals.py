"""
Signal Classifier

Maps indicator values to qualitative labels and colour tags.
Each classifier returns (SignalLabel, ColorClass); a missing value always
maps to N/A.
"""

from typing import Optional

from techscore.schemas.analysis import ColorClass, SignalLabel

Classification = tuple[SignalLabel, ColorClass]

NOT_AVAILABLE: Classification = (SignalLabel.NOT_AVAILABLE, ColorClass.MUTED)

_BULLISH: Classification = (SignalLabel.BULLISH, ColorClass.GREEN)
_BEARISH: Classification = (SignalLabel.BEARISH, ColorClass.RED)
_OVERBOUGHT: Classification = (SignalLabel.OVERBOUGHT, ColorClass.RED)
_OVERSOLD: Classification = (SignalLabel.OVERSOLD, ColorClass.GREEN)
_NEUTRAL: Classification = (SignalLabel.NEUTRAL, ColorClass.YELLOW)


def _band(value: float, upper: float, lower: float) -> Classification:
    """Overbought above upper, oversold below lower, neutral between."""
    if value > upper:
        return _OVERBOUGHT
    if value < lower:
        return _OVERSOLD
    return _NEUTRAL


def classify_moving_average(value: Optional[float], current_price: float) -> Classification:
    if value is None:
        return NOT_AVAILABLE
    return _BULLISH if current_price > value else _BEARISH


def classify_rsi(value: Optional[float]) -> Classification:
    if value is None:
        return NOT_AVAILABLE
    return _band(value, 70, 30)


def classify_macd(macd: Optional[float], histogram: Optional[float]) -> Classification:
    if macd is None or histogram is None:
        return NOT_AVAILABLE
    return _BULLISH if histogram > 0 else _BEARISH


def classify_macd_signal(value: Optional[float]) -> Classification:
    if value is None:
        return NOT_AVAILABLE
    return SignalLabel.CALCULATED, ColorClass.BLUE


def classify_macd_histogram(value: Optional[float]) -> Classification:
    if value is None:
        return NOT_AVAILABLE
    if value > 0:
        return SignalLabel.POSITIVE, ColorClass.GREEN
    return SignalLabel.NEGATIVE, ColorClass.RED


def classify_bollinger(
    upper: Optional[float], lower: Optional[float], current_price: float
) -> Classification:
    if upper is None or lower is None:
        return NOT_AVAILABLE
    if current_price > upper:
        return _OVERBOUGHT
    if current_price < lower:
        return _OVERSOLD
    return SignalLabel.NORMAL, ColorClass.BLUE


def classify_stochastic(k: Optional[float], d: Optional[float]) -> Classification:
    """Overbought/oversold if either line is past its threshold."""
    if k is None:
        return NOT_AVAILABLE
    values = [k] if d is None else [k, d]
    if any(v > 80 for v in values):
        return _OVERBOUGHT
    if any(v < 20 for v in values):
        return _OVERSOLD
    return _NEUTRAL


def classify_cci(value: Optional[float]) -> Classification:
    if value is None:
        return NOT_AVAILABLE
    return _band(value, 100, -100)


def classify_williams_r(value: Optional[float]) -> Classification:
    if value is None:
        return NOT_AVAILABLE
    return _band(value, -20, -80)


def classify_adx(value: Optional[float]) -> Classification:
    if value is None:
        return NOT_AVAILABLE
    if value > 25:
        return SignalLabel.STRONG_TREND, ColorClass.BLUE
    if value < 20:
        return SignalLabel.WEAK_TREND, ColorClass.GRAY
    return SignalLabel.MODERATE_TREND, ColorClass.PURPLE


def classify_roc(value: Optional[float]) -> Classification:
    if value is None:
        return NOT_AVAILABLE
    return _BULLISH if value > 0 else _BEARISH


def classify_mfi(value: Optional[float]) -> Classification:
    if value is None:
        return NOT_AVAILABLE
    return _band(value, 80, 20)


def classify_atr(value: Optional[float]) -> Classification:
    if value is None:
        return SignalLabel.NOT_AVAILABLE, ColorClass.PURPLE
    return SignalLabel.CALCULATED, ColorClass.PURPLE


def classify_obv(value: Optional[float]) -> Classification:
    if value is None:
        return SignalLabel.NOT_AVAILABLE, ColorClass.INDIGO
    return SignalLabel.VOLUME_INDICATOR, ColorClass.INDIGO


def classify_levels(present: bool, color: ColorClass) -> Classification:
    """Fibonacci and pivot ladders carry no direction."""
    if not present:
        return SignalLabel.NOT_AVAILABLE, color
    return SignalLabel.CALCULATED, color
