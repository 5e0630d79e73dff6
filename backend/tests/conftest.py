"""Shared fixtures for TechScore tests."""

import asyncio
from datetime import date, timedelta

import pytest
from sqlalchemy.pool import NullPool

from techscore.db.database import build_engine, build_session_factory, init_db


def make_bars(
    closes: list[float],
    spread: float = 1.0,
    volume: float = 1000.0,
    start: date = date(2024, 1, 1),
) -> list[dict]:
    """Daily bars with opens at the close and a symmetric high/low spread."""
    return [
        {
            "date": start + timedelta(days=i),
            "open": close,
            "high": close + spread,
            "low": close - spread,
            "close": close,
            "volume": volume,
        }
        for i, close in enumerate(closes)
    ]


def rising_closes(count: int = 30, first: float = 100.0) -> list[float]:
    return [first + i for i in range(count)]


@pytest.fixture
def rising_bars() -> list[dict]:
    """30 bars, closes 100..129."""
    return make_bars(rising_closes())


@pytest.fixture
def session_factory(tmp_path):
    """Session factory bound to a throwaway SQLite file."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'techscore.db'}", poolclass=NullPool)
    asyncio.run(init_db(engine))
    yield build_session_factory(engine)
    asyncio.run(engine.dispose())
