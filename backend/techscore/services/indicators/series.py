"""
Series Preparation

Turns raw OHLCV rows into chronologically ordered numpy arrays.
"""

import datetime
import math
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Union

import numpy as np
from pydantic import TypeAdapter, ValidationError

from techscore.schemas.market import PriceBar
from techscore.services.base import InsufficientDataError

MIN_BARS = 14

OHLCV_FIELDS = ("open", "high", "low", "close", "volume")

RawRow = Union[PriceBar, Mapping[str, Any]]


@dataclass(frozen=True)
class PreparedSeries:
    """OHLCV data arrays for calculations, oldest first."""

    dates: np.ndarray
    opens: np.ndarray
    highs: np.ndarray
    lows: np.ndarray
    closes: np.ndarray
    volumes: np.ndarray

    def __len__(self) -> int:
        return len(self.closes)


_DATE_ADAPTER = TypeAdapter(datetime.date)


def _coerce_date(value: Any) -> Optional[datetime.date]:
    """Normalize a date, datetime or ISO string to a date; None if unparseable."""
    if isinstance(value, datetime.datetime):
        return value.date()
    try:
        return _DATE_ADAPTER.validate_python(value)
    except ValidationError:
        return None


def _row_values(row: RawRow) -> Optional[dict]:
    """Extract date + OHLCV from a row, or None if any field is missing or non-finite."""
    if isinstance(row, PriceBar):
        values = row.model_dump()
    else:
        values = {"date": row.get("date")}
        for field in OHLCV_FIELDS:
            values[field] = row.get(field)

    values["date"] = _coerce_date(values["date"])
    if values["date"] is None:
        return None

    for field in OHLCV_FIELDS:
        value = values[field]
        if value is None or not math.isfinite(float(value)):
            return None
    return values


def prepare_series(
    rows: Iterable[RawRow],
    min_bars: int = MIN_BARS,
    symbol: Optional[str] = None,
) -> PreparedSeries:
    """
    Validate and reshape raw rows into parallel arrays.

    Dates may be date, datetime or ISO strings and are keyed by calendar
    day. Rows with an unparseable date or a null or non-finite OHLCV field
    are dropped, duplicate days keep their last occurrence, and the result
    is sorted ascending by date.

    Raises:
        InsufficientDataError: fewer than min_bars usable rows remain
    """
    by_date: dict = {}
    for row in rows:
        values = _row_values(row)
        if values is not None:
            by_date[values["date"]] = values

    if len(by_date) < min_bars:
        raise InsufficientDataError(len(by_date), min_bars, symbol)

    ordered = [by_date[d] for d in sorted(by_date)]

    return PreparedSeries(
        dates=np.array([r["date"] for r in ordered]),
        opens=np.array([float(r["open"]) for r in ordered]),
        highs=np.array([float(r["high"]) for r in ordered]),
        lows=np.array([float(r["low"]) for r in ordered]),
        closes=np.array([float(r["close"]) for r in ordered]),
        volumes=np.array([float(r["volume"]) for r in ordered]),
    )


def resolve_current_price(quote: Optional[float], series: PreparedSeries) -> float:
    """Latest quote if usable, otherwise the last close."""
    if quote is not None and quote > 0:
        return float(quote)
    return float(series.closes[-1])
