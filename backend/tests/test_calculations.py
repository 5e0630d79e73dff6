"""Tests for the indicator calculations."""

import math

import numpy as np
import pytest

from techscore.services.indicators import calculations as calc

from conftest import make_bars, rising_closes


def _arrays(bars: list[dict]):
    return (
        np.array([b["high"] for b in bars]),
        np.array([b["low"] for b in bars]),
        np.array([b["close"] for b in bars]),
        np.array([b["volume"] for b in bars]),
    )


WAVE = [100 + 10 * math.sin(i / 3) + i * 0.2 for i in range(80)]


class TestMovingAverages:
    """Tests for SMA and EMA."""

    def test_sma_of_constant_series(self) -> None:
        """SMA of a constant series is that constant."""
        assert calc.sma([5.0] * 30, 20) == 5.0

    def test_sma_uses_last_window(self) -> None:
        """SMA averages only the trailing window."""
        assert calc.sma([1, 2, 3, 4, 5], 2) == 4.5

    def test_sma_short_input(self) -> None:
        """SMA is unavailable below the window length."""
        assert calc.sma([1.0] * 19, 20) is None

    def test_ema_of_constant_series(self) -> None:
        """EMA of a constant series is that constant."""
        assert calc.ema([5.0] * 30, 12) == pytest.approx(5.0)

    def test_ema_short_input(self) -> None:
        """EMA is unavailable below the window length."""
        assert calc.ema([1.0] * 11, 12) is None

    def test_ema_series_seed_and_recurrence(self) -> None:
        """EMA is seeded with the SMA and then follows the recurrence."""
        series = calc.ema_series([1, 2, 3, 4, 5], 3)
        assert np.isnan(series[0]) and np.isnan(series[1])
        assert series[2] == 2.0
        assert series[3] == pytest.approx(3.0)
        assert series[4] == pytest.approx(4.0)


class TestRSI:
    """Tests for RSI."""

    def test_strictly_rising_is_100(self) -> None:
        """No losses gives RSI 100."""
        assert calc.rsi(rising_closes(30)) == 100.0

    def test_strictly_falling_is_0(self) -> None:
        """No gains gives RSI 0."""
        assert calc.rsi(list(reversed(rising_closes(30)))) == pytest.approx(0.0)

    def test_needs_more_than_period(self) -> None:
        """RSI needs period + 1 closes."""
        assert calc.rsi(rising_closes(14), 14) is None
        assert calc.rsi(rising_closes(15), 14) is not None

    def test_bounded(self) -> None:
        """RSI stays within [0, 100]."""
        value = calc.rsi(WAVE)
        assert 0 <= value <= 100


class TestMACD:
    """Tests for MACD."""

    def test_unavailable_below_slow_period(self) -> None:
        """Fewer than 26 closes gives no MACD values."""
        assert calc.macd(WAVE[:25]) == calc.MACDValues(None, None, None)

    def test_unavailable_without_enough_signal_samples(self) -> None:
        """30 closes give only 5 MACD samples, too few for the signal."""
        result = calc.macd(rising_closes(30))
        assert result.macd is None
        assert result.signal is None
        assert result.histogram is None

    def test_histogram_is_macd_minus_signal(self) -> None:
        """Histogram equals MACD minus signal."""
        result = calc.macd(WAVE)
        assert result.histogram == pytest.approx(result.macd - result.signal)

    def test_macd_line_is_fast_minus_slow_ema(self) -> None:
        """MACD is EMA12 minus EMA26 of the full series."""
        result = calc.macd(WAVE)
        assert result.macd == pytest.approx(calc.ema(WAVE, 12) - calc.ema(WAVE, 26))

    def test_signal_matches_prefix_recomputation(self) -> None:
        """Signal equals EMA9 of MACD recomputed over each growing prefix."""
        samples = [
            calc.ema(WAVE[: i + 1], 12) - calc.ema(WAVE[: i + 1], 26)
            for i in range(25, len(WAVE))
        ][-calc.MACD_SIGNAL_LOOKBACK:]
        expected = calc.ema(samples, 9)

        assert calc.macd(WAVE).signal == pytest.approx(expected)


class TestOscillators:
    """Tests for Stochastic, CCI, Williams %R, ROC and MFI."""

    def test_stochastic_bounded(self) -> None:
        """%K and %D lie within [0, 100]."""
        highs, lows, closes, _ = _arrays(make_bars(WAVE))
        result = calc.stochastic(highs, lows, closes)
        assert 0 <= result.k <= 100
        assert 0 <= result.d <= 100

    def test_stochastic_flat_window_is_50(self) -> None:
        """A window whose high equals its low gives 50."""
        highs, lows, closes, _ = _arrays(make_bars([10.0] * 20, spread=0.0))
        result = calc.stochastic(highs, lows, closes)
        assert result.k == 50.0
        assert result.d == 50.0

    def test_stochastic_d_needs_three_k_values(self) -> None:
        """%D is None until three %K values exist."""
        highs, lows, closes, _ = _arrays(make_bars(rising_closes(15)))
        result = calc.stochastic(highs, lows, closes)
        assert result.k is not None
        assert result.d is None

    def test_stochastic_short_input(self) -> None:
        """Stochastic needs k_period bars."""
        highs, lows, closes, _ = _arrays(make_bars(rising_closes(13)))
        assert calc.stochastic(highs, lows, closes) is None

    def test_cci_zero_deviation(self) -> None:
        """Flat typical prices give CCI 0."""
        highs, lows, closes, _ = _arrays(make_bars([50.0] * 25))
        assert calc.cci(highs, lows, closes) == 0.0

    def test_cci_rising_series(self) -> None:
        """CCI of the 100..129 series is (129 - 119.5) / (0.015 * 5)."""
        highs, lows, closes, _ = _arrays(make_bars(rising_closes(30)))
        assert calc.cci(highs, lows, closes) == pytest.approx(9.5 / 0.075)

    def test_williams_r_flat_window(self) -> None:
        """A flat window gives -50."""
        highs, lows, closes, _ = _arrays(make_bars([10.0] * 20, spread=0.0))
        assert calc.williams_r(highs, lows, closes) == -50.0

    def test_williams_r_bounded(self) -> None:
        """Williams %R lies within [-100, 0]."""
        highs, lows, closes, _ = _arrays(make_bars(WAVE))
        assert -100 <= calc.williams_r(highs, lows, closes) <= 0

    def test_roc_percent_change(self) -> None:
        """ROC is the percent change over the period."""
        assert calc.roc([100.0] * 12 + [110.0], 12) == pytest.approx(10.0)

    def test_roc_zero_prior_close(self) -> None:
        """A zero prior close gives 0."""
        assert calc.roc([0.0] + [5.0] * 12, 12) == 0.0

    def test_roc_short_input(self) -> None:
        """ROC needs period + 1 closes."""
        assert calc.roc([1.0] * 12, 12) is None

    def test_mfi_only_positive_flow(self) -> None:
        """Rising typical prices give MFI 100."""
        highs, lows, closes, volumes = _arrays(make_bars(rising_closes(20)))
        assert calc.mfi(highs, lows, closes, volumes) == 100.0

    def test_mfi_only_negative_flow(self) -> None:
        """Falling typical prices give MFI 0."""
        highs, lows, closes, volumes = _arrays(make_bars(list(reversed(rising_closes(20)))))
        assert calc.mfi(highs, lows, closes, volumes) == 0.0

    def test_mfi_no_flow_is_zero(self) -> None:
        """With neither flow the zero positive flow branch wins."""
        highs, lows, closes, volumes = _arrays(make_bars([10.0] * 20))
        assert calc.mfi(highs, lows, closes, volumes) == 0.0

    def test_mfi_bounded(self) -> None:
        """MFI lies within [0, 100]."""
        highs, lows, closes, volumes = _arrays(make_bars(WAVE))
        assert 0 <= calc.mfi(highs, lows, closes, volumes) <= 100


class TestVolatility:
    """Tests for ATR and Bollinger Bands."""

    def test_atr_constant_range(self) -> None:
        """Constant bars with a 2-point range give ATR 2."""
        highs, lows, closes, _ = _arrays(make_bars([50.0] * 20))
        assert calc.atr(highs, lows, closes) == pytest.approx(2.0)

    def test_atr_needs_period_true_ranges(self) -> None:
        """14 bars give only 13 true ranges."""
        highs, lows, closes, _ = _arrays(make_bars([50.0] * 14))
        assert calc.atr(highs, lows, closes) is None

    def test_true_range_uses_previous_close(self) -> None:
        """Gaps count towards the true range."""
        tr = calc.true_range([10.0, 20.0], [9.0, 19.0], [10.0, 19.5])
        assert tr.tolist() == [10.0]

    def test_bollinger_constant_series(self) -> None:
        """A constant series collapses all three bands."""
        result = calc.bollinger_bands([7.0] * 25)
        assert result.upper == result.middle == result.lower == 7.0

    def test_bollinger_population_std(self) -> None:
        """Band width uses the population standard deviation."""
        closes = [float(i) for i in range(1, 21)]
        result = calc.bollinger_bands(closes)
        assert result.middle == pytest.approx(10.5)
        assert result.upper - result.middle == pytest.approx(2 * np.std(closes))
        assert result.middle - result.lower == pytest.approx(2 * np.std(closes))


class TestVolumeAndTrend:
    """Tests for OBV and ADX."""

    def test_obv_accumulates_by_direction(self) -> None:
        """Up closes add volume, down closes subtract, flat closes skip."""
        assert calc.obv([10, 11, 10, 10], [100, 200, 300, 400]) == 0.0

    def test_obv_seeded_with_first_volume(self) -> None:
        """OBV starts from the first bar's volume."""
        assert calc.obv([10.0], [500.0]) == 500.0
        assert calc.obv([10, 11], [500, 50]) == 550.0

    def test_adx_pure_uptrend(self) -> None:
        """Only positive directional movement gives ADX 100."""
        highs, lows, closes, _ = _arrays(make_bars(rising_closes(30)))
        assert calc.adx(highs, lows, closes) == pytest.approx(100.0)

    def test_adx_needs_two_periods(self) -> None:
        """ADX needs 14 DX values, which takes 28 bars."""
        highs, lows, closes, _ = _arrays(make_bars(WAVE[:27]))
        assert calc.adx(highs, lows, closes) is None

        highs, lows, closes, _ = _arrays(make_bars(WAVE[:28]))
        assert calc.adx(highs, lows, closes) is not None

    def test_adx_bounded(self) -> None:
        """ADX lies within [0, 100]."""
        highs, lows, closes, _ = _arrays(make_bars(WAVE))
        assert 0 <= calc.adx(highs, lows, closes) <= 100


class TestLevels:
    """Tests for Fibonacci and pivot levels."""

    def test_fibonacci_ordering(self) -> None:
        """Levels descend from the high to the low."""
        highs, lows, _, _ = _arrays(make_bars(WAVE))
        fib = calc.fibonacci_levels(highs, lows)
        assert fib.level0 == fib.high
        assert fib.level100 == fib.low
        assert fib.high > fib.low
        assert fib.high > fib.level236 > fib.level382 > fib.level500
        assert fib.level500 > fib.level618 > fib.level786 > fib.low
        assert fib.level500 == pytest.approx((fib.high + fib.low) / 2)

    def test_fibonacci_lookback_window(self) -> None:
        """Extremes outside the last 20 bars are ignored."""
        bars = make_bars([500.0] + [100.0] * 25)
        highs, lows, _, _ = _arrays(bars)
        fib = calc.fibonacci_levels(highs, lows)
        assert fib.high == 101.0
        assert fib.low == 99.0

    def test_pivot_points_from_previous_bar(self) -> None:
        """Pivots use the second-to-last bar."""
        pivots = calc.pivot_points([10.0, 12.0, 99.0], [8.0, 9.0, 1.0], [9.0, 11.0, 50.0])
        pivot = (12.0 + 9.0 + 11.0) / 3
        assert pivots.pivot_point == pytest.approx(pivot)
        assert pivots.resistance1 == pytest.approx(2 * pivot - 9.0)
        assert pivots.support1 == pytest.approx(2 * pivot - 12.0)
        assert pivots.resistance2 == pytest.approx(pivot + 3.0)
        assert pivots.support2 == pytest.approx(pivot - 3.0)
        assert pivots.resistance3 == pytest.approx(12.0 + 2 * (pivot - 9.0))
        assert pivots.support3 == pytest.approx(9.0 - 2 * (12.0 - pivot))

    def test_pivot_ordering(self) -> None:
        """R1 sits above the pivot and S1 below it when the bar has a range."""
        highs, lows, closes, _ = _arrays(make_bars(WAVE))
        pivots = calc.pivot_points(highs, lows, closes)
        assert pivots.resistance1 > pivots.pivot_point > pivots.support1
        assert pivots.resistance3 > pivots.resistance2 > pivots.resistance1
        assert pivots.support1 > pivots.support2 > pivots.support3

    def test_pivot_points_need_two_bars(self) -> None:
        """A single bar has no previous session."""
        assert calc.pivot_points([10.0], [8.0], [9.0]) is None
