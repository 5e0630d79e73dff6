"""Tests for series preparation."""

from datetime import date, datetime

import numpy as np
import pytest

from techscore.schemas.market import PriceBar
from techscore.services.base import InsufficientDataError
from techscore.services.indicators import analyze
from techscore.services.indicators.series import prepare_series, resolve_current_price

from conftest import make_bars, rising_closes


class TestPrepareSeries:
    """Tests for prepare_series."""

    def test_sorts_ascending(self) -> None:
        """Newest-first rows come back oldest first."""
        bars = make_bars(rising_closes(20))
        series = prepare_series(list(reversed(bars)))
        assert series.closes.tolist() == rising_closes(20)
        assert series.dates[0] == date(2024, 1, 1)

    def test_drops_incomplete_rows(self) -> None:
        """Rows with any null field are dropped."""
        bars = make_bars(rising_closes(16))
        bars[3]["volume"] = None
        bars[7]["high"] = None
        series = prepare_series(bars)
        assert len(series) == 14
        assert 103.0 not in series.closes.tolist()

    def test_duplicate_dates_keep_last(self) -> None:
        """A repeated date keeps its last occurrence."""
        bars = make_bars(rising_closes(14))
        duplicate = dict(bars[5], close=999.0)
        series = prepare_series(bars + [duplicate])
        assert len(series) == 14
        assert series.closes[5] == 999.0

    def test_raises_below_min_bars(self) -> None:
        """Fewer than 14 usable rows raises InsufficientDataError."""
        with pytest.raises(InsufficientDataError) as exc_info:
            prepare_series(make_bars(rising_closes(13)), symbol="INFY")

        error = exc_info.value
        assert error.available == 13
        assert error.required == 14
        assert error.symbol == "INFY"
        assert "INFY" in error.message

    def test_accepts_price_bar_models(self) -> None:
        """PriceBar models are accepted alongside mappings."""
        bars = [PriceBar(**bar) for bar in make_bars(rising_closes(14))]
        series = prepare_series(bars)
        assert series.volumes.tolist() == [1000.0] * 14

    @pytest.mark.parametrize("field", ["close", "high", "volume"])
    @pytest.mark.parametrize("bad", [float("nan"), float("inf")])
    def test_drops_non_finite_rows(self, field: str, bad: float) -> None:
        """Rows with a NaN or infinite field are dropped like null rows."""
        bars = make_bars(rising_closes(15))
        bars[-1][field] = bad
        series = prepare_series(bars)
        assert len(series) == 14
        assert series.closes[-1] == 113.0
        assert np.isfinite(series.volumes).all()

    def test_nan_close_does_not_reach_obv(self) -> None:
        """A NaN close mid-series is dropped rather than counted as a flat day."""
        bars = make_bars(rising_closes(30))
        bars[10]["close"] = float("nan")
        result = analyze(bars, 130.0)
        assert result.indicators.obv.value == 29000.0
        assert result.indicators.sma20.value == pytest.approx((sum(range(111, 130)) + 109) / 20)

    def test_mixed_date_types(self) -> None:
        """ISO strings, dates and datetimes are ordered together."""
        bars = make_bars(rising_closes(14))
        bars[0]["date"] = "2024-01-01"
        bars[1]["date"] = datetime(2024, 1, 2, 15, 30)
        series = prepare_series(list(reversed(bars)))
        assert series.closes.tolist() == rising_closes(14)
        assert all(isinstance(d, date) for d in series.dates)

    def test_same_day_as_date_and_datetime(self) -> None:
        """A datetime on an existing day replaces that day's bar."""
        bars = make_bars(rising_closes(14))
        late = dict(bars[3], date=datetime(2024, 1, 4, 16, 0), close=500.0)
        series = prepare_series(bars + [late])
        assert len(series) == 14
        assert series.closes[3] == 500.0

    def test_drops_unparseable_dates(self) -> None:
        """A row whose date cannot be read is dropped."""
        bars = make_bars(rising_closes(15))
        bars[0]["date"] = "not a date"
        series = prepare_series(bars)
        assert len(series) == 14
        assert series.closes[0] == 101.0


class TestResolveCurrentPrice:
    """Tests for resolve_current_price."""

    @pytest.fixture
    def series(self):
        return prepare_series(make_bars(rising_closes(14)))

    def test_positive_quote_wins(self, series) -> None:
        """A positive quote is used as-is."""
        assert resolve_current_price(130.5, series) == 130.5

    @pytest.mark.parametrize("quote", [None, 0.0, -1.0])
    def test_falls_back_to_last_close(self, series, quote) -> None:
        """Missing or non-positive quotes fall back to the last close."""
        assert resolve_current_price(quote, series) == 113.0
