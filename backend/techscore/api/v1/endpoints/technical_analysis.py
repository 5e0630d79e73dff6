"""
Technical Analysis Records API Endpoints

Stored scores, rankings and trends written by the batch automation,
plus scheduler status and manual runs.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from techscore.db.database import (
    get_db,
    get_latest_records_for_all_symbols,
    get_record_history,
    get_score_trends,
    get_summary,
    get_top_performing,
    search_records,
)
from techscore.schemas.records import (
    ApiResponse,
    ScoreTrendPoint,
    SearchCriteria,
    TechnicalAnalysisRecordOut,
)
from techscore.services.automation import TechnicalAnalysisAutomation, get_automation

logger = logging.getLogger(__name__)

router = APIRouter()


def _records_response(records) -> ApiResponse:
    data = [TechnicalAnalysisRecordOut.model_validate(r) for r in records]
    return ApiResponse(count=len(data), data=data)


@router.get("/latest", response_model=ApiResponse)
async def latest_analysis(db: AsyncSession = Depends(get_db)):
    """Latest record for every symbol, best score first."""
    try:
        return _records_response(await get_latest_records_for_all_symbols(db))
    except Exception as e:
        logger.error(f"Error getting latest technical analysis: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch latest technical analysis")


@router.get("/history/{symbol}", response_model=ApiResponse)
async def analysis_history(
    symbol: str,
    limit: int = Query(default=50, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
):
    """Most recent records for a symbol, newest first."""
    try:
        return _records_response(await get_record_history(db, symbol, limit))
    except Exception as e:
        logger.error(f"Error getting technical analysis history for {symbol}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch technical analysis history")


@router.get("/top-performing", response_model=ApiResponse)
async def top_performing(
    limit: int = Query(default=20, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
):
    """Highest latest scores across symbols."""
    try:
        return _records_response(await get_top_performing(db, limit))
    except Exception as e:
        logger.error(f"Error getting top performing stocks: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch top performing stocks")


@router.get("/score/{symbol}", response_model=ApiResponse)
async def score_trends(
    symbol: str,
    days: int = Query(default=30, ge=1, le=365),
    db: AsyncSession = Depends(get_db),
):
    """Score timeline for a symbol, oldest first."""
    try:
        trends = await get_score_trends(db, symbol, days)
    except Exception as e:
        logger.error(f"Error getting score trends for {symbol}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch score trends")

    data = [ScoreTrendPoint(**row) for row in trends]
    return ApiResponse(count=len(data), data=data)


@router.post("/search", response_model=ApiResponse)
async def search_analysis(criteria: SearchCriteria, db: AsyncSession = Depends(get_db)):
    """Filter records by symbol, score range and date range."""
    if (
        criteria.min_score is not None
        and criteria.max_score is not None
        and criteria.min_score > criteria.max_score
    ):
        raise HTTPException(status_code=400, detail="min_score cannot exceed max_score")

    try:
        records = await search_records(
            db,
            symbol=criteria.symbol,
            min_score=criteria.min_score,
            max_score=criteria.max_score,
            start_date=criteria.start_date,
            end_date=criteria.end_date,
            limit=criteria.limit,
        )
    except Exception as e:
        logger.error(f"Error searching technical analysis: {e}")
        raise HTTPException(status_code=500, detail="Failed to search technical analysis")

    return _records_response(records)


@router.get("/summary", response_model=ApiResponse)
async def analysis_summary(db: AsyncSession = Depends(get_db)):
    """Score statistics and Strong/Moderate/Weak distribution over the last 24 hours."""
    try:
        return ApiResponse(data=await get_summary(db))
    except Exception as e:
        logger.error(f"Error getting technical analysis summary: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch technical analysis summary")


@router.get("/status", response_model=ApiResponse)
async def automation_status(
    automation: TechnicalAnalysisAutomation = Depends(get_automation),
):
    """Scheduler and processing status."""
    return ApiResponse(data=automation.get_status())


@router.post("/trigger-manual-run", response_model=ApiResponse)
async def trigger_manual_run(
    automation: TechnicalAnalysisAutomation = Depends(get_automation),
):
    """Run the analysis over all tracked symbols now, ignoring the window."""
    if automation.is_processing:
        raise HTTPException(status_code=409, detail="Technical analysis is already running")

    logger.info("Manual technical analysis run triggered")
    summary = await automation.process_all(force=True)
    return ApiResponse(data=summary.to_dict(), message="Manual technical analysis completed")
