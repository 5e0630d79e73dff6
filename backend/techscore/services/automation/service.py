"""
Technical Analysis Automation

Scores every tracked symbol on a schedule and stores one flattened
record per symbol per run.

Features:
- Batched concurrent processing with a pause between batches
- Per-symbol timeout; one failing symbol never stops the run
- Background scheduler limited to the IST analysis window
"""

import asyncio
import logging
import time
from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from techscore.core.config import settings
from techscore.core.market_hours import get_ist_now, get_next_run_time, is_analysis_window_open
from techscore.db.database import (
    get_db_context,
    get_latest_price,
    get_recent_bars,
    save_analysis_record,
)
from techscore.services.automation.records import build_record
from techscore.services.automation.universe import load_symbols
from techscore.services.base import InsufficientDataError
from techscore.services.indicators import IndicatorService, get_indicator_service

logger = logging.getLogger(__name__)


@dataclass
class BatchRunSummary:
    """Outcome of one pass over the tracked symbols."""
    started_at: str
    processed: int = 0
    succeeded: int = 0
    failed: int = 0
    duration_seconds: float = 0.0
    skipped_reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class TechnicalAnalysisAutomation:
    """
    Batch driver for the analysis engine.

    Usage:
        automation = TechnicalAnalysisAutomation()
        await automation.start()      # background schedule
        await automation.process_all(force=True)  # one-off run
        await automation.stop()
    """

    def __init__(
        self,
        symbols: Optional[List[str]] = None,
        session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
        indicator_service: Optional[IndicatorService] = None,
        batch_size: Optional[int] = None,
        batch_delay_seconds: Optional[float] = None,
        symbol_timeout_seconds: Optional[float] = None,
        interval_minutes: Optional[int] = None,
        clock: Callable[[], datetime] = get_ist_now,
    ):
        self._symbols = symbols if symbols is not None else load_symbols(settings.tracked_symbols_file)
        self._session_factory = session_factory
        self._service = indicator_service or get_indicator_service()
        self._batch_size = batch_size or settings.batch_size
        self._batch_delay = (
            settings.batch_delay_seconds if batch_delay_seconds is None else batch_delay_seconds
        )
        self._symbol_timeout = symbol_timeout_seconds or settings.symbol_timeout_seconds
        self._interval_minutes = interval_minutes or settings.schedule_interval_minutes
        self._clock = clock

        self._processing = False
        self._scheduler_task: Optional[asyncio.Task] = None
        self._last_run: Optional[BatchRunSummary] = None

    @property
    def symbols(self) -> List[str]:
        return list(self._symbols)

    @property
    def is_processing(self) -> bool:
        return self._processing

    @property
    def is_scheduler_active(self) -> bool:
        return self._scheduler_task is not None and not self._scheduler_task.done()

    async def _analyze_symbol(self, symbol: str) -> bool:
        async with get_db_context(self._session_factory) as session:
            rows = await get_recent_bars(session, symbol, settings.history_limit)
            if not rows:
                logger.warning(f"No historical bars stored for {symbol}")
                return False

            quote = await get_latest_price(session, symbol)
            # Indicator math runs in the default executor
            loop = asyncio.get_running_loop()
            result = await loop.run_in_executor(
                None, self._service.calculate_for_symbol, symbol, rows, quote
            )
            await save_analysis_record(session, build_record(symbol, result))
            return True

    async def process_stock(self, symbol: str) -> bool:
        """Analyze and persist one symbol. Returns False on any failure."""
        logger.info(f"Processing technical analysis for {symbol}")
        try:
            return await asyncio.wait_for(self._analyze_symbol(symbol), self._symbol_timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Timeout for {symbol} after {self._symbol_timeout}s")
        except InsufficientDataError as e:
            logger.warning(e.message)
        except Exception as e:
            logger.error(f"Error processing {symbol}: {e}", exc_info=True)
        return False

    async def process_all(self, force: bool = False) -> BatchRunSummary:
        """
        Run the analysis over every tracked symbol.

        Skipped if a run is already in progress, or (unless forced) when the
        analysis window is closed.
        """
        summary = BatchRunSummary(started_at=self._clock().isoformat())

        if self._processing:
            logger.info("Technical analysis processing already running, skipping this cycle")
            summary.skipped_reason = "already_running"
            return summary

        if not force and not is_analysis_window_open(self._clock()):
            logger.info("Analysis window is closed, skipping technical analysis processing")
            summary.skipped_reason = "window_closed"
            return summary

        self._processing = True
        start = time.monotonic()
        total_batches = (len(self._symbols) + self._batch_size - 1) // self._batch_size
        logger.info(f"Starting technical analysis processing for {len(self._symbols)} stocks...")

        try:
            for index in range(0, len(self._symbols), self._batch_size):
                batch = self._symbols[index : index + self._batch_size]
                logger.info(f"Processing batch {index // self._batch_size + 1}/{total_batches}")

                results = await asyncio.gather(*(self.process_stock(s) for s in batch))
                summary.processed += len(results)
                summary.succeeded += sum(1 for ok in results if ok)
                summary.failed += sum(1 for ok in results if not ok)

                if index + self._batch_size < len(self._symbols):
                    await asyncio.sleep(self._batch_delay)
        finally:
            self._processing = False
            summary.duration_seconds = round(time.monotonic() - start, 3)
            self._last_run = summary

        logger.info(
            f"Technical analysis processing completed in {summary.duration_seconds}s: "
            f"{summary.succeeded}/{summary.processed} succeeded, {summary.failed} errors"
        )
        return summary

    async def start(self) -> bool:
        """Start the background scheduler."""
        if self.is_scheduler_active:
            logger.warning("Technical analysis scheduler already running")
            return True

        self._scheduler_task = asyncio.create_task(self._scheduler_loop())
        logger.info(
            f"Technical analysis scheduler started: every {self._interval_minutes} minutes, "
            f"{settings.analysis_window_start}-{settings.analysis_window_end} IST, Monday-Friday"
        )
        return True

    async def stop(self) -> None:
        """Stop the background scheduler."""
        if self._scheduler_task:
            self._scheduler_task.cancel()
            try:
                await self._scheduler_task
            except asyncio.CancelledError:
                pass
            self._scheduler_task = None
            logger.info("Technical analysis scheduler stopped")

    async def _scheduler_loop(self) -> None:
        while True:
            now = self._clock()
            next_run = get_next_run_time(now, self._interval_minutes)
            await asyncio.sleep(max(0.0, (next_run - now).total_seconds()))
            try:
                await self.process_all()
            except Exception as e:
                logger.error(f"Error in technical analysis processing: {e}", exc_info=True)

    def get_status(self) -> Dict[str, Any]:
        """Scheduler and processing status."""
        now = self._clock()
        return {
            "is_running": self._processing,
            "is_scheduler_active": self.is_scheduler_active,
            "stock_count": len(self._symbols),
            "window_open": is_analysis_window_open(now),
            "next_run": get_next_run_time(now, self._interval_minutes).isoformat(),
            "last_run": self._last_run.to_dict() if self._last_run else None,
        }


# Singleton instance
_automation: Optional[TechnicalAnalysisAutomation] = None


def get_automation() -> TechnicalAnalysisAutomation:
    """Get the automation singleton."""
    global _automation
    if _automation is None:
        _automation = TechnicalAnalysisAutomation()
    return _automation
