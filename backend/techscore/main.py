"""
TechScore Backend - FastAPI Application

Main entry point for the backend API.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from techscore.core.config import settings
from techscore.api.v1 import router as api_v1_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")

    # Initialize SQLite database
    from techscore.db.database import init_db, close_db
    await init_db()

    # Start the analysis scheduler
    from techscore.services.automation import get_automation
    if settings.enable_scheduler:
        automation = get_automation()
        await automation.start()
    else:
        automation = None
        logger.info("Technical analysis scheduler disabled (enable_scheduler=false)")

    yield

    # Shutdown
    logger.info("Shutting down...")
    if automation:
        await automation.stop()
    await close_db()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    TechScore Technical Analysis API

    ## Architecture
    - **Indicator Engine**: Moving averages, oscillators, volatility, volume and level indicators (NumPy)
    - **Scoring**: Weighted 0-100 composite technical score with trend/momentum/volatility summary
    - **Automation**: Scheduled batch scoring of tracked symbols during the IST analysis window
    - **Records**: Stored scores for rankings, history and trends
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware - allow local frontend ports
cors_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
# Add any additional origins from settings
if settings.allowed_origins:
    cors_origins.extend([o for o in settings.allowed_origins if o not in cors_origins])

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_v1_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
    }


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "TechScore Backend API",
        "docs": "/docs",
        "health": "/health",
    }
