"""
Technical Indicator Calculations

Pure Python/NumPy implementations of technical indicators.
Every function returns the latest value of its indicator (or a small
structured result), and None when the input is too short for the window.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

MACD_FAST = 12
MACD_SLOW = 26
MACD_SIGNAL = 9
MACD_SIGNAL_LOOKBACK = 34

FIBONACCI_LOOKBACK = 20
FIBONACCI_RATIOS = (0.236, 0.382, 0.5, 0.618, 0.786)


@dataclass(frozen=True)
class MACDValues:
    macd: Optional[float]
    signal: Optional[float]
    histogram: Optional[float]


@dataclass(frozen=True)
class BollingerValues:
    upper: float
    middle: float
    lower: float


@dataclass(frozen=True)
class StochasticValues:
    k: float
    d: Optional[float]


@dataclass(frozen=True)
class FibonacciLevels:
    high: float
    low: float
    level236: float
    level382: float
    level500: float
    level618: float
    level786: float

    @property
    def level0(self) -> float:
        return self.high

    @property
    def level100(self) -> float:
        return self.low


@dataclass(frozen=True)
class PivotLevels:
    pivot_point: float
    resistance1: float
    resistance2: float
    resistance3: float
    support1: float
    support2: float
    support3: float


def _array(data) -> np.ndarray:
    return np.asarray(data, dtype=float)


# =============================================================================
# MOVING AVERAGES
# =============================================================================


def sma(data, period: int) -> Optional[float]:
    """Simple Moving Average of the last `period` values."""
    data = _array(data)
    if period <= 0 or len(data) < period:
        return None
    return float(np.mean(data[-period:]))


def ema_series(data, period: int) -> np.ndarray:
    """
    Exponential Moving Average at every position.

    Seeded with the SMA of the first `period` values; positions before the
    seed are NaN.
    """
    data = _array(data)
    result = np.full(len(data), np.nan)
    if period <= 0 or len(data) < period:
        return result

    multiplier = 2 / (period + 1)
    result[period - 1] = np.mean(data[:period])

    for i in range(period, len(data)):
        result[i] = data[i] * multiplier + result[i - 1] * (1 - multiplier)

    return result


def ema(data, period: int) -> Optional[float]:
    """Exponential Moving Average (latest value)."""
    if len(data) < period:
        return None
    return float(ema_series(data, period)[-1])


# =============================================================================
# MOMENTUM INDICATORS
# =============================================================================


def rsi(closes, period: int = 14) -> Optional[float]:
    """Relative Strength Index with Wilder smoothing."""
    closes = _array(closes)
    if len(closes) <= period:
        return None

    deltas = np.diff(closes)
    gains = np.where(deltas > 0, deltas, 0.0)
    losses = np.where(deltas < 0, -deltas, 0.0)

    # First average
    avg_gain = float(np.mean(gains[:period]))
    avg_loss = float(np.mean(losses[:period]))

    for i in range(period, len(deltas)):
        avg_gain = (avg_gain * (period - 1) + gains[i]) / period
        avg_loss = (avg_loss * (period - 1) + losses[i]) / period

    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return 100 - (100 / (1 + rs))


def macd(
    closes,
    fast_period: int = MACD_FAST,
    slow_period: int = MACD_SLOW,
    signal_period: int = MACD_SIGNAL,
) -> MACDValues:
    """
    MACD (Moving Average Convergence Divergence).

    The signal line is the EMA of the trailing MACD values (at most
    MACD_SIGNAL_LOOKBACK of them). A running EMA at position i equals the
    EMA recomputed over closes[: i + 1], so the fast/slow series are built
    once.
    """
    closes = _array(closes)
    empty = MACDValues(None, None, None)
    if len(closes) < slow_period:
        return empty

    macd_line = ema_series(closes, fast_period) - ema_series(closes, slow_period)
    samples = macd_line[slow_period - 1:][-MACD_SIGNAL_LOOKBACK:]
    if len(samples) < signal_period:
        return empty

    macd_val = float(samples[-1])
    signal_val = float(ema_series(samples, signal_period)[-1])

    return MACDValues(
        macd=macd_val,
        signal=signal_val,
        histogram=macd_val - signal_val,
    )


def stochastic(
    highs,
    lows,
    closes,
    k_period: int = 14,
    d_period: int = 3,
) -> Optional[StochasticValues]:
    """
    Stochastic Oscillator.

    %K is 50 for windows whose high equals their low; %D is the SMA of the
    last `d_period` %K values and None until that many exist.
    """
    highs, lows, closes = _array(highs), _array(lows), _array(closes)
    if len(closes) < k_period:
        return None

    k_values = []
    for i in range(k_period - 1, len(closes)):
        highest_high = np.max(highs[i - k_period + 1 : i + 1])
        lowest_low = np.min(lows[i - k_period + 1 : i + 1])

        if highest_high == lowest_low:
            k_values.append(50.0)
        else:
            k_values.append(((closes[i] - lowest_low) / (highest_high - lowest_low)) * 100)

    return StochasticValues(k=float(k_values[-1]), d=sma(k_values, d_period))


def cci(highs, lows, closes, period: int = 20) -> Optional[float]:
    """Commodity Channel Index over the latest window."""
    highs, lows, closes = _array(highs), _array(lows), _array(closes)
    if len(closes) < period:
        return None

    typical_price = ((highs + lows + closes) / 3)[-period:]
    tp_sma = np.mean(typical_price)
    mean_dev = np.mean(np.abs(typical_price - tp_sma))

    if mean_dev == 0:
        return 0.0
    return float((typical_price[-1] - tp_sma) / (0.015 * mean_dev))


def williams_r(highs, lows, closes, period: int = 14) -> Optional[float]:
    """Williams %R."""
    highs, lows, closes = _array(highs), _array(lows), _array(closes)
    if len(closes) < period:
        return None

    highest_high = np.max(highs[-period:])
    lowest_low = np.min(lows[-period:])

    if highest_high == lowest_low:
        return -50.0
    return float(((highest_high - closes[-1]) / (highest_high - lowest_low)) * -100)


def roc(closes, period: int = 12) -> Optional[float]:
    """Rate of Change, in percent."""
    closes = _array(closes)
    if len(closes) < period + 1:
        return None

    current = closes[-1]
    prior = closes[-1 - period]
    if prior == 0:
        return 0.0
    return float((current - prior) / prior * 100)


def mfi(highs, lows, closes, volumes, period: int = 14) -> Optional[float]:
    """
    Money Flow Index over the trailing `period + 1` bars.

    Zero positive flow gives 0, checked before zero negative flow.
    """
    highs, lows, closes, volumes = _array(highs), _array(lows), _array(closes), _array(volumes)
    if len(closes) < period + 1:
        return None

    typical_price = ((highs + lows + closes) / 3)[-(period + 1):]
    raw_money_flow = typical_price * volumes[-(period + 1):]

    pos_flow = 0.0
    neg_flow = 0.0
    for i in range(1, len(typical_price)):
        if typical_price[i] > typical_price[i - 1]:
            pos_flow += raw_money_flow[i]
        elif typical_price[i] < typical_price[i - 1]:
            neg_flow += raw_money_flow[i]

    if pos_flow == 0:
        return 0.0
    if neg_flow == 0:
        return 100.0 if pos_flow > 0 else 50.0

    money_ratio = pos_flow / neg_flow
    return float(100 - (100 / (1 + money_ratio)))


# =============================================================================
# VOLATILITY INDICATORS
# =============================================================================


def true_range(highs, lows, closes) -> np.ndarray:
    """True range for every bar after the first."""
    highs, lows, closes = _array(highs), _array(lows), _array(closes)
    prev_close = closes[:-1]
    return np.maximum.reduce([
        highs[1:] - lows[1:],
        np.abs(highs[1:] - prev_close),
        np.abs(lows[1:] - prev_close),
    ])


def atr(highs, lows, closes, period: int = 14) -> Optional[float]:
    """Average True Range with Wilder smoothing."""
    tr = true_range(highs, lows, closes)
    if len(tr) < period:
        return None

    value = float(np.mean(tr[:period]))
    for i in range(period, len(tr)):
        value = (value * (period - 1) + tr[i]) / period
    return value


def bollinger_bands(closes, period: int = 20, std_dev: float = 2.0) -> Optional[BollingerValues]:
    """Bollinger Bands using the population standard deviation."""
    closes = _array(closes)
    if len(closes) < period:
        return None

    window = closes[-period:]
    middle = float(np.mean(window))
    sigma = float(np.std(window))

    return BollingerValues(
        upper=middle + std_dev * sigma,
        middle=middle,
        lower=middle - std_dev * sigma,
    )


# =============================================================================
# VOLUME INDICATORS
# =============================================================================


def obv(closes, volumes) -> Optional[float]:
    """On-Balance Volume, starting from the first bar's volume."""
    closes, volumes = _array(closes), _array(volumes)
    if len(closes) == 0:
        return None

    total = volumes[0]
    for i in range(1, len(closes)):
        if closes[i] > closes[i - 1]:
            total += volumes[i]
        elif closes[i] < closes[i - 1]:
            total -= volumes[i]

    return float(total)


# =============================================================================
# TREND INDICATORS
# =============================================================================


def adx(highs, lows, closes, period: int = 14) -> Optional[float]:
    """
    Average Directional Index.

    +DM/-DM and TR are Wilder-smoothed from a simple-mean seed; ADX is the
    simple mean of the last `period` DX values.
    """
    highs, lows = _array(highs), _array(lows)
    tr = true_range(highs, lows, closes)
    if len(tr) < period:
        return None

    up_move = highs[1:] - highs[:-1]
    down_move = lows[:-1] - lows[1:]
    plus_dm = np.where((up_move > down_move) & (up_move > 0), up_move, 0.0)
    minus_dm = np.where((down_move > up_move) & (down_move > 0), down_move, 0.0)

    smoothed_tr = float(np.mean(tr[:period]))
    smoothed_plus = float(np.mean(plus_dm[:period]))
    smoothed_minus = float(np.mean(minus_dm[:period]))

    dx_values = []
    for i in range(period - 1, len(tr)):
        if i >= period:
            smoothed_tr = (smoothed_tr * (period - 1) + tr[i]) / period
            smoothed_plus = (smoothed_plus * (period - 1) + plus_dm[i]) / period
            smoothed_minus = (smoothed_minus * (period - 1) + minus_dm[i]) / period

        if smoothed_tr == 0:
            plus_di = minus_di = 0.0
        else:
            plus_di = 100 * smoothed_plus / smoothed_tr
            minus_di = 100 * smoothed_minus / smoothed_tr

        di_sum = plus_di + minus_di
        dx_values.append(0.0 if di_sum == 0 else abs(plus_di - minus_di) / di_sum * 100)

    if len(dx_values) < period:
        return None
    return float(np.mean(dx_values[-period:]))


# =============================================================================
# SUPPORT/RESISTANCE
# =============================================================================


def fibonacci_levels(highs, lows, lookback: int = FIBONACCI_LOOKBACK) -> Optional[FibonacciLevels]:
    """Retracement ladder between the extremes of the last `lookback` bars."""
    highs, lows = _array(highs), _array(lows)
    if len(highs) == 0:
        return None

    window = min(lookback, len(highs))
    high = float(np.max(highs[-window:]))
    low = float(np.min(lows[-window:]))
    diff = high - low

    level236, level382, level500, level618, level786 = (
        high - diff * ratio for ratio in FIBONACCI_RATIOS
    )
    return FibonacciLevels(
        high=high,
        low=low,
        level236=level236,
        level382=level382,
        level500=level500,
        level618=level618,
        level786=level786,
    )


def pivot_points(highs, lows, closes) -> Optional[PivotLevels]:
    """Classic pivot points from the previous session."""
    if len(closes) < 2:
        return None

    high, low, close = float(highs[-2]), float(lows[-2]), float(closes[-2])
    pivot = (high + low + close) / 3

    return PivotLevels(
        pivot_point=pivot,
        resistance1=(2 * pivot) - low,
        resistance2=pivot + (high - low),
        resistance3=high + 2 * (pivot - low),
        support1=(2 * pivot) - high,
        support2=pivot - (high - low),
        support3=low - 2 * (high - pivot),
    )
