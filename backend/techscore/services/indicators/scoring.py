"""
Composite Scorer

Reduces the indicator set to a single 0-100 technical score.

Each available indicator contributes a sub-score on a 0-10 scale,
weighted by INDICATOR_WEIGHTS. The score is the weighted mean scaled to
0-100 and rounded half-up; with nothing available it is NEUTRAL_SCORE.
"""

import math
from dataclasses import dataclass
from typing import Callable, Optional

NEUTRAL_SCORE = 50
SCORE_SCALE = 10

INDICATOR_WEIGHTS: dict[str, int] = {
    "sma20": 8,
    "sma50": 7,
    "sma200": 8,
    "ema12": 7,
    "ema26": 8,
    "ema50": 7,
    "ema200": 8,
    "rsi": 10,
    "macd": 9,
    "stochastic": 5,
    "cci": 5,
    "adx": 7,
    "roc": 9,
    "mfi": 5,
    "obv": 5,
}

TREND_INDICATORS = ("sma20", "sma50", "sma200", "ema12", "ema26", "ema50", "ema200")


@dataclass(frozen=True)
class ScoreInputs:
    """Raw indicator values the scorer reads."""

    current_price: float
    sma20: Optional[float] = None
    sma50: Optional[float] = None
    sma200: Optional[float] = None
    ema12: Optional[float] = None
    ema26: Optional[float] = None
    ema50: Optional[float] = None
    ema200: Optional[float] = None
    rsi: Optional[float] = None
    macd_histogram: Optional[float] = None
    stochastic: Optional[float] = None  # %K
    cci: Optional[float] = None
    adx: Optional[float] = None
    roc: Optional[float] = None
    mfi: Optional[float] = None
    obv: Optional[float] = None


# =============================================================================
# SUB-SCORES (0-10)
# =============================================================================


def _oscillator_score(value: float, upper: float, lower: float, above: int, below: int) -> int:
    """10 inside [lower, upper], otherwise the score for the side it broke."""
    if value > upper:
        return above
    if value < lower:
        return below
    return 10


def trend_subscore(ma: float, current_price: float) -> int:
    return 10 if current_price > ma else 0


def rsi_subscore(value: float) -> int:
    return _oscillator_score(value, 70, 30, above=4, below=6)


def macd_subscore(histogram: float) -> int:
    return 10 if histogram > 0 else 2


def stochastic_subscore(k: float) -> int:
    return _oscillator_score(k, 80, 20, above=3, below=7)


def cci_subscore(value: float) -> int:
    return _oscillator_score(value, 100, -100, above=3, below=7)


def adx_subscore(value: float) -> int:
    if value > 25:
        return 8
    if value >= 20:
        return 6
    return 4


def roc_subscore(value: float) -> int:
    return 10 if value > 0 else 2


def mfi_subscore(value: float) -> int:
    return _oscillator_score(value, 80, 20, above=3, below=7)


def obv_subscore(value: float) -> int:
    # Presence only; OBV direction is not evaluated
    return 6


_SUBSCORERS: dict[str, tuple[str, Callable[[float], int]]] = {
    "rsi": ("rsi", rsi_subscore),
    "macd": ("macd_histogram", macd_subscore),
    "stochastic": ("stochastic", stochastic_subscore),
    "cci": ("cci", cci_subscore),
    "adx": ("adx", adx_subscore),
    "roc": ("roc", roc_subscore),
    "mfi": ("mfi", mfi_subscore),
    "obv": ("obv", obv_subscore),
}


def subscores(inputs: ScoreInputs) -> dict[str, int]:
    """Sub-score for every available indicator, keyed like INDICATOR_WEIGHTS."""
    result = {}

    for name in TREND_INDICATORS:
        ma = getattr(inputs, name)
        if ma is not None:
            result[name] = trend_subscore(ma, inputs.current_price)

    for name, (field, scorer) in _SUBSCORERS.items():
        value = getattr(inputs, field)
        if value is not None:
            result[name] = scorer(value)

    return result


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def composite_score(inputs: ScoreInputs) -> int:
    """Weighted technical score in [0, 100]."""
    weighted_sum = 0
    total_weight = 0

    for name, subscore in subscores(inputs).items():
        weight = INDICATOR_WEIGHTS[name]
        weighted_sum += subscore * weight
        total_weight += weight

    if total_weight == 0:
        return NEUTRAL_SCORE

    score = _round_half_up(weighted_sum / total_weight * SCORE_SCALE)
    return max(0, min(100, score))
