"""
API v1 Router

All API endpoints for the frontend.
"""

from fastapi import APIRouter

from techscore.api.v1.endpoints import analysis, technical_analysis

router = APIRouter()

# Include all endpoint routers
router.include_router(analysis.router, prefix="/analysis", tags=["Analysis"])
router.include_router(technical_analysis.router, prefix="/technical-analysis", tags=["Technical Analysis"])
