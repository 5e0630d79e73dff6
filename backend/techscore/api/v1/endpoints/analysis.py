"""
Analysis API Endpoints

On-demand technical analysis from stored daily bars.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from techscore.core.config import settings
from techscore.db.database import get_db, get_latest_price, get_recent_bars
from techscore.schemas.analysis import AnalysisResult
from techscore.services.base import InsufficientDataError
from techscore.services.indicators import IndicatorService, get_indicator_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/{symbol}", response_model=AnalysisResult)
async def get_analysis(
    symbol: str,
    db: AsyncSession = Depends(get_db),
    service: IndicatorService = Depends(get_indicator_service),
):
    """
    Get the full indicator set, summary and composite score for a symbol.

    Uses up to `history_limit` stored bars; the latest tick (if any) is the
    current price, otherwise the last close.
    """
    symbol = symbol.upper().strip()

    rows = await get_recent_bars(db, symbol, settings.history_limit)
    if not rows:
        raise HTTPException(status_code=404, detail=f"No historical data for {symbol}")

    quote = await get_latest_price(db, symbol)

    try:
        return service.calculate_for_symbol(symbol, rows, quote)
    except InsufficientDataError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except Exception as e:
        logger.error(f"Analysis failed for {symbol}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to analyze {symbol}")
