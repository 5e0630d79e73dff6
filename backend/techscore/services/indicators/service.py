"""
Indicator Engine Service Implementation

Runs the indicator library over a prepared series, classifies every
value and reduces the set to a composite technical score.
"""

import logging
import math
from dataclasses import asdict, astuple, is_dataclass
from typing import Any, Callable, Iterable, Optional, Union

from techscore.core.config import settings
from techscore.schemas.analysis import (
    AnalysisResult,
    AnalysisSummary,
    BollingerBandsResult,
    ColorClass,
    FibonacciResult,
    IndicatorResult,
    PivotPointsResult,
    StochasticResult,
    SummaryLabel,
    TechnicalIndicators,
)
from techscore.schemas.market import SymbolSeries
from techscore.services.base import InsufficientDataError
from techscore.services.indicators import calculations as calc
from techscore.services.indicators import signals
from techscore.services.indicators.interface import IndicatorServiceInterface
from techscore.services.indicators.scoring import ScoreInputs, composite_score
from techscore.services.indicators.series import (
    MIN_BARS,
    PreparedSeries,
    RawRow,
    prepare_series,
    resolve_current_price,
)

logger = logging.getLogger(__name__)


def _is_finite(value: Any) -> bool:
    if is_dataclass(value):
        return all(v is None or math.isfinite(v) for v in astuple(value))
    return math.isfinite(value)


def _safe(name: str, compute: Callable[[], Any]) -> Any:
    """Run one indicator; failures and non-finite output become None."""
    try:
        value = compute()
    except Exception as e:
        logger.debug(f"Indicator {name} unavailable: {e}")
        return None

    if value is not None and not _is_finite(value):
        logger.debug(f"Indicator {name} produced a non-finite value")
        return None
    return value


def compute_indicators(series: PreparedSeries) -> dict[str, Any]:
    """Raw indicator values keyed by name; each computed independently."""
    c, h, l, v = series.closes, series.highs, series.lows, series.volumes

    jobs: dict[str, Callable[[], Any]] = {
        "sma20": lambda: calc.sma(c, 20),
        "sma50": lambda: calc.sma(c, 50),
        "sma200": lambda: calc.sma(c, 200),
        "ema12": lambda: calc.ema(c, 12),
        "ema26": lambda: calc.ema(c, 26),
        "ema50": lambda: calc.ema(c, 50),
        "ema200": lambda: calc.ema(c, 200),
        "rsi": lambda: calc.rsi(c, 14),
        "macd": lambda: calc.macd(c, 12, 26, 9),
        "bollinger": lambda: calc.bollinger_bands(c, 20, 2.0),
        "stochastic": lambda: calc.stochastic(h, l, c, 14, 3),
        "atr": lambda: calc.atr(h, l, c, 14),
        "cci": lambda: calc.cci(h, l, c, 20),
        "williams_r": lambda: calc.williams_r(h, l, c, 14),
        "adx": lambda: calc.adx(h, l, c, 14),
        "roc": lambda: calc.roc(c, 12),
        "mfi": lambda: calc.mfi(h, l, c, v, 14),
        "obv": lambda: calc.obv(c, v),
        "fibonacci": lambda: calc.fibonacci_levels(h, l),
        "pivot_points": lambda: calc.pivot_points(h, l, c),
    }

    return {name: _safe(name, job) for name, job in jobs.items()}


def _single(value: Optional[float], classification: signals.Classification) -> IndicatorResult:
    signal, color = classification
    return IndicatorResult(value=value, signal=signal, color=color)


def build_indicators(raw: dict[str, Any], current_price: float) -> TechnicalIndicators:
    """Attach signal labels and colour tags to raw indicator values."""
    moving_averages = {
        name: _single(raw[name], signals.classify_moving_average(raw[name], current_price))
        for name in ("sma20", "sma50", "sma200", "ema12", "ema26", "ema50", "ema200")
    }

    macd_values = raw["macd"] or calc.MACDValues(None, None, None)

    bb = raw["bollinger"]
    bb_signal, bb_color = signals.classify_bollinger(
        bb.upper if bb else None, bb.lower if bb else None, current_price
    )

    stoch = raw["stochastic"]
    stoch_k = stoch.k if stoch else None
    stoch_d = stoch.d if stoch else None
    stoch_signal, stoch_color = signals.classify_stochastic(stoch_k, stoch_d)

    fib = raw["fibonacci"]
    fib_signal, fib_color = signals.classify_levels(fib is not None, ColorClass.TEAL)
    fibonacci = FibonacciResult(signal=fib_signal, color=fib_color)
    if fib is not None:
        fibonacci = FibonacciResult(
            level0=fib.level0,
            level236=fib.level236,
            level382=fib.level382,
            level500=fib.level500,
            level618=fib.level618,
            level786=fib.level786,
            level100=fib.level100,
            high=fib.high,
            low=fib.low,
            signal=fib_signal,
            color=fib_color,
        )

    pivots = raw["pivot_points"]
    pivot_signal, pivot_color = signals.classify_levels(pivots is not None, ColorClass.ORANGE)
    pivot_fields = asdict(pivots) if pivots is not None else {}

    return TechnicalIndicators(
        **moving_averages,
        rsi=_single(raw["rsi"], signals.classify_rsi(raw["rsi"])),
        macd=_single(
            macd_values.macd,
            signals.classify_macd(macd_values.macd, macd_values.histogram),
        ),
        macd_signal=_single(macd_values.signal, signals.classify_macd_signal(macd_values.signal)),
        macd_histogram=_single(
            macd_values.histogram, signals.classify_macd_histogram(macd_values.histogram)
        ),
        stochastic=StochasticResult(k=stoch_k, d=stoch_d, signal=stoch_signal, color=stoch_color),
        cci=_single(raw["cci"], signals.classify_cci(raw["cci"])),
        williams_r=_single(raw["williams_r"], signals.classify_williams_r(raw["williams_r"])),
        adx=_single(raw["adx"], signals.classify_adx(raw["adx"])),
        roc=_single(raw["roc"], signals.classify_roc(raw["roc"])),
        mfi=_single(raw["mfi"], signals.classify_mfi(raw["mfi"])),
        bollinger_bands=BollingerBandsResult(
            upper=bb.upper if bb else None,
            middle=bb.middle if bb else None,
            lower=bb.lower if bb else None,
            signal=bb_signal,
            color=bb_color,
        ),
        atr=_single(raw["atr"], signals.classify_atr(raw["atr"])),
        obv=_single(raw["obv"], signals.classify_obv(raw["obv"])),
        fibonacci=fibonacci,
        pivot_points=PivotPointsResult(**pivot_fields, signal=pivot_signal, color=pivot_color),
    )


def summarize(raw: dict[str, Any]) -> AnalysisSummary:
    """Headline trend, momentum and volatility readings."""
    ema12, ema26, rsi_val = raw["ema12"], raw["ema26"], raw["rsi"]

    if ema12 is None or ema26 is None:
        trend = SummaryLabel.INDETERMINATE
    else:
        trend = SummaryLabel.BULLISH if ema12 > ema26 else SummaryLabel.BEARISH

    if rsi_val is None:
        momentum = SummaryLabel.INDETERMINATE
    elif rsi_val > 70:
        momentum = SummaryLabel.OVERBOUGHT
    elif rsi_val < 30:
        momentum = SummaryLabel.OVERSOLD
    else:
        momentum = SummaryLabel.NEUTRAL

    volatility = SummaryLabel.CALCULATED if raw["atr"] is not None else SummaryLabel.INDETERMINATE

    return AnalysisSummary(trend=trend, momentum=momentum, volatility=volatility)


def score_inputs(raw: dict[str, Any], current_price: float) -> ScoreInputs:
    macd_values = raw["macd"]
    stoch = raw["stochastic"]
    return ScoreInputs(
        current_price=current_price,
        sma20=raw["sma20"],
        sma50=raw["sma50"],
        sma200=raw["sma200"],
        ema12=raw["ema12"],
        ema26=raw["ema26"],
        ema50=raw["ema50"],
        ema200=raw["ema200"],
        rsi=raw["rsi"],
        macd_histogram=macd_values.histogram if macd_values else None,
        stochastic=stoch.k if stoch else None,
        cci=raw["cci"],
        adx=raw["adx"],
        roc=raw["roc"],
        mfi=raw["mfi"],
        obv=raw["obv"],
    )


def analyze(
    series: Union[PreparedSeries, Iterable[RawRow]],
    current_price: float,
    symbol: Optional[str] = None,
    min_bars: int = MIN_BARS,
) -> AnalysisResult:
    """
    Full technical analysis of one series.

    Args:
        series: prepared arrays, or raw bars to be prepared
        current_price: price the moving averages and bands are compared to
        symbol: optional ticker, echoed in the result and in errors
        min_bars: hard floor on usable bars

    Raises:
        InsufficientDataError: fewer than min_bars usable bars
    """
    if not isinstance(series, PreparedSeries):
        series = prepare_series(series, min_bars=min_bars, symbol=symbol)
    elif len(series) < min_bars:
        raise InsufficientDataError(len(series), min_bars, symbol)

    raw = compute_indicators(series)

    return AnalysisResult(
        symbol=symbol,
        current_price=current_price,
        indicators=build_indicators(raw, current_price),
        summary=summarize(raw),
        score=composite_score(score_inputs(raw, current_price)),
    )


class IndicatorService(IndicatorServiceInterface):
    """
    Indicator Engine Service.

    Stateless wrapper around analyze(); safe to share between requests.
    """

    def __init__(self, min_bars: int = MIN_BARS):
        self._min_bars = min_bars

    async def execute(self, input_data: list[SymbolSeries]) -> dict[str, AnalysisResult]:
        """Analyze every symbol; failures are logged and skipped."""
        results = {}

        for item in input_data:
            try:
                results[item.symbol] = self.calculate_for_symbol(item.symbol, item.bars, item.quote)
            except InsufficientDataError as e:
                logger.warning(e.message)
            except Exception as e:
                logger.error(f"Error calculating indicators for {item.symbol}: {e}")

        return results

    def calculate_for_symbol(
        self,
        symbol: str,
        rows: Iterable[RawRow],
        quote: Optional[float] = None,
    ) -> AnalysisResult:
        """Prepare raw rows, resolve the current price and analyze."""
        series = prepare_series(rows, min_bars=self._min_bars, symbol=symbol)
        current_price = resolve_current_price(quote, series)
        return analyze(series, current_price, symbol=symbol, min_bars=self._min_bars)

    async def health_check(self) -> bool:
        """Indicator service is always healthy (pure computation)."""
        return True


# Singleton instance
_service_instance: Optional[IndicatorService] = None


def get_indicator_service() -> IndicatorService:
    """Get or create indicator service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = IndicatorService(min_bars=settings.min_bars)
    return _service_instance
