"""
Database connection and session management.

Uses SQLite with aiosqlite for async support.
"""

import os
import logging
from datetime import datetime, timedelta
from typing import Any, AsyncGenerator, Iterable, Mapping, Optional, Union
from contextlib import asynccontextmanager

from sqlalchemy import and_, case, func, select
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import Pool, StaticPool

from techscore.db.models import Base, HistoricalBar, TechnicalAnalysisRecord, Tick
from techscore.core.config import settings
from techscore.schemas.market import PriceBar

logger = logging.getLogger(__name__)

# Database path - create data directory if needed
DATA_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "data")
os.makedirs(DATA_DIR, exist_ok=True)

# SQLite database URL
SQLITE_PATH = settings.sqlite_path or os.path.join(DATA_DIR, "techscore.db")
DATABASE_URL = f"sqlite+aiosqlite:///{SQLITE_PATH}"


def build_engine(
    url: str = DATABASE_URL,
    echo: bool = False,
    poolclass: type[Pool] = StaticPool,
) -> AsyncEngine:
    """
    Create an async SQLite engine.
    Note: SQLite requires check_same_thread=False for async
    """
    return create_async_engine(
        url,
        echo=echo,  # Set to True for SQL debugging
        connect_args={"check_same_thread": False},
        poolclass=poolclass,
    )


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


engine = build_engine()

# Session factory
AsyncSessionLocal = build_session_factory(engine)


async def init_db(bind: Optional[AsyncEngine] = None) -> None:
    """
    Initialize the database - create all tables.
    Called on application startup.
    """
    bind = bind or engine
    try:
        async with bind.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info(f"Database initialized at: {bind.url}")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise


async def close_db() -> None:
    """
    Close database connections.
    Called on application shutdown.
    """
    await engine.dispose()
    logger.info("Database connections closed")


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency that provides a database session.
    Use with FastAPI Depends().
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


@asynccontextmanager
async def get_db_context(
    session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
) -> AsyncGenerator[AsyncSession, None]:
    """
    Context manager for database sessions.
    Use when not in a FastAPI route.
    """
    async with (session_factory or AsyncSessionLocal)() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# =============================================================================
# Historical bars and quotes
# =============================================================================


async def add_bars(
    session: AsyncSession,
    symbol: str,
    bars: Iterable[Union[PriceBar, Mapping[str, Any]]],
) -> int:
    """Store daily bars for a symbol. Returns the number of rows added."""
    count = 0
    for bar in bars:
        values = bar.model_dump() if isinstance(bar, PriceBar) else dict(bar)
        session.add(HistoricalBar(
            symbol=symbol.upper(),
            date=values["date"],
            open=values.get("open"),
            high=values.get("high"),
            low=values.get("low"),
            close=values.get("close"),
            volume=values.get("volume"),
        ))
        count += 1
    await session.flush()
    return count


async def get_recent_bars(
    session: AsyncSession,
    symbol: str,
    limit: Optional[int] = None,
) -> list[dict]:
    """Most recent daily bars for a symbol, newest first, as raw rows."""
    limit = limit or settings.history_limit
    result = await session.execute(
        select(HistoricalBar)
        .where(HistoricalBar.symbol == symbol.upper())
        .order_by(HistoricalBar.date.desc())
        .limit(limit)
    )
    return [
        {
            "date": bar.date,
            "open": bar.open,
            "high": bar.high,
            "low": bar.low,
            "close": bar.close,
            "volume": bar.volume,
        }
        for bar in result.scalars().all()
    ]


async def add_tick(
    session: AsyncSession,
    symbol: str,
    price: float,
    volume: int = 0,
    timestamp: Optional[datetime] = None,
    source: str = "unknown",
) -> Tick:
    """Add a price tick to the database."""
    tick = Tick(
        symbol=symbol.upper(),
        price=price,
        volume=volume,
        timestamp=timestamp or datetime.utcnow(),
        source=source,
    )
    session.add(tick)
    await session.flush()
    return tick


async def get_latest_price(session: AsyncSession, symbol: str) -> Optional[float]:
    """Price of the most recent tick, if any."""
    result = await session.execute(
        select(Tick.price)
        .where(Tick.symbol == symbol.upper())
        .order_by(Tick.timestamp.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


# =============================================================================
# Technical analysis records
# =============================================================================


async def save_analysis_record(session: AsyncSession, record: dict) -> TechnicalAnalysisRecord:
    """Store a flattened analysis result."""
    if not record or not record.get("symbol"):
        raise ValueError("Invalid record: symbol is required")

    row = TechnicalAnalysisRecord(**record)
    session.add(row)
    await session.flush()
    logger.info(f"Saved technical analysis record for {row.symbol} (ID: {row.id})")
    return row


async def get_latest_record(session: AsyncSession, symbol: str) -> Optional[TechnicalAnalysisRecord]:
    """Most recent record for a symbol."""
    result = await session.execute(
        select(TechnicalAnalysisRecord)
        .where(TechnicalAnalysisRecord.symbol == symbol.upper())
        .order_by(TechnicalAnalysisRecord.calculation_timestamp.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def get_record_history(
    session: AsyncSession, symbol: str, limit: int = 50
) -> list[TechnicalAnalysisRecord]:
    """Records for a symbol, newest first."""
    result = await session.execute(
        select(TechnicalAnalysisRecord)
        .where(TechnicalAnalysisRecord.symbol == symbol.upper())
        .order_by(TechnicalAnalysisRecord.calculation_timestamp.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


def _latest_per_symbol():
    record = TechnicalAnalysisRecord
    latest = (
        select(record.symbol, func.max(record.calculation_timestamp).label("latest_timestamp"))
        .group_by(record.symbol)
        .subquery()
    )
    return (
        select(record)
        .join(
            latest,
            and_(
                record.symbol == latest.c.symbol,
                record.calculation_timestamp == latest.c.latest_timestamp,
            ),
        )
        .order_by(record.technical_score.desc())
    )


async def get_latest_records_for_all_symbols(session: AsyncSession) -> list[TechnicalAnalysisRecord]:
    """Latest record of every symbol, best score first."""
    result = await session.execute(_latest_per_symbol())
    return list(result.scalars().all())


async def get_top_performing(session: AsyncSession, limit: int = 20) -> list[TechnicalAnalysisRecord]:
    """Top `limit` symbols by their latest score."""
    result = await session.execute(_latest_per_symbol().limit(limit))
    return list(result.scalars().all())


async def get_score_trends(
    session: AsyncSession,
    symbol: str,
    days: int = 30,
    now: Optional[datetime] = None,
) -> list[dict]:
    """Score timeline for a symbol over the last `days`, oldest first."""
    since = (now or datetime.utcnow()) - timedelta(days=days)
    result = await session.execute(
        select(
            TechnicalAnalysisRecord.symbol,
            TechnicalAnalysisRecord.technical_score,
            TechnicalAnalysisRecord.calculation_timestamp,
        )
        .where(
            TechnicalAnalysisRecord.symbol == symbol.upper(),
            TechnicalAnalysisRecord.calculation_timestamp >= since,
        )
        .order_by(TechnicalAnalysisRecord.calculation_timestamp.asc())
    )
    return [dict(row._mapping) for row in result.all()]


async def search_records(
    session: AsyncSession,
    symbol: Optional[str] = None,
    min_score: Optional[int] = None,
    max_score: Optional[int] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    limit: int = 100,
) -> list[TechnicalAnalysisRecord]:
    """Filter records by symbol, score range and timestamp range, newest first."""
    record = TechnicalAnalysisRecord
    stmt = select(record)

    if symbol:
        stmt = stmt.where(record.symbol == symbol.upper())
    if min_score is not None:
        stmt = stmt.where(record.technical_score >= min_score)
    if max_score is not None:
        stmt = stmt.where(record.technical_score <= max_score)
    if start_date is not None:
        stmt = stmt.where(record.calculation_timestamp >= start_date)
    if end_date is not None:
        stmt = stmt.where(record.calculation_timestamp <= end_date)

    result = await session.execute(
        stmt.order_by(record.calculation_timestamp.desc()).limit(limit)
    )
    return list(result.scalars().all())


async def get_summary(session: AsyncSession, now: Optional[datetime] = None) -> dict:
    """Score statistics and distribution over the last 24 hours."""
    record = TechnicalAnalysisRecord
    since = (now or datetime.utcnow()) - timedelta(days=1)
    recent = record.calculation_timestamp >= since

    stats = (await session.execute(
        select(
            func.count(func.distinct(record.symbol)).label("total_stocks"),
            func.avg(record.technical_score).label("avg_score"),
            func.min(record.technical_score).label("min_score"),
            func.max(record.technical_score).label("max_score"),
            func.count(record.id).label("total_records"),
        ).where(recent)
    )).one()

    category = case(
        (record.technical_score >= 70, "Strong (70-100)"),
        (record.technical_score >= 50, "Moderate (50-69)"),
        else_="Weak (0-49)",
    ).label("category")

    distribution = await session.execute(
        select(category, func.count(record.id).label("count"))
        .where(recent)
        .group_by(category)
        .order_by(category)
    )

    return {
        "summary": dict(stats._mapping),
        "distribution": [dict(row._mapping) for row in distribution.all()],
    }
