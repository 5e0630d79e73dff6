"""Tests for flattening analysis results into records."""

from datetime import datetime

import pytest

from techscore.db.models import TechnicalAnalysisRecord
from techscore.services.automation.records import build_record
from techscore.services.indicators import analyze


@pytest.fixture
def record(rising_bars) -> dict:
    result = analyze(rising_bars, 130.0, symbol="infy")
    return build_record("infy", result, calculated_at=datetime(2024, 1, 10, 10, 0))


class TestBuildRecord:
    """Tests for build_record."""

    def test_covers_every_record_column(self, record: dict) -> None:
        """Keys match the table columns except id and created_at."""
        columns = {c.name for c in TechnicalAnalysisRecord.__table__.columns}
        assert set(record) == columns - {"id", "created_at"}

    def test_header_fields(self, record: dict) -> None:
        """Symbol is uppercased; score and timestamp are carried over."""
        assert record["symbol"] == "INFY"
        assert record["technical_score"] == 71
        assert record["calculation_timestamp"] == datetime(2024, 1, 10, 10, 0)

    def test_missing_indicators_stay_none(self, record: dict) -> None:
        """Unavailable indicators are stored as None."""
        assert record["sma200"] is None
        assert record["macd"] is None
        assert record["macd_histogram"] is None

    def test_components_are_flattened(self, record: dict) -> None:
        """Band, stochastic, Fibonacci and pivot components get their own columns."""
        assert record["sma20"] == pytest.approx(119.5)
        assert record["stochastic_k"] == pytest.approx(14 / 15 * 100)
        assert record["bollinger_middle"] == pytest.approx(119.5)
        assert record["fibonacci_level0"] == 130.0
        assert record["fibonacci_level100"] == 109.0
        assert record["pivot_point"] == pytest.approx(128.0)

    def test_default_timestamp(self, rising_bars) -> None:
        """Without a timestamp the current time is used."""
        before = datetime.utcnow()
        result = build_record("INFY", analyze(rising_bars, 130.0))
        assert result["calculation_timestamp"] >= before
