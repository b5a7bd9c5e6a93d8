"""
FastAPI Application Configuration

This module contains the main FastAPI application setup with:
- CORS middleware
- API routes
- Error handling
"""

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging

from strategy_ai import __version__
from strategy_ai.config import get_config, setup_logging
from strategy_ai.core import SearchConfigurationError, PlanNotFoundError

# Configure logging
setup_logging()
logger = logging.getLogger(__name__)


# =============================================================================
# Application Lifespan
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup/shutdown events"""
    # Startup
    logger.info("Starting Strategy Search API...")
    logger.info("Search settings: %s", get_config().to_dict())

    yield

    # Shutdown
    logger.info("Shutting down...")


# =============================================================================
# Create FastAPI Application
# =============================================================================

app = FastAPI(
    title="Strategy Search API",
    description="""
    Search engines for a turn-based strategy agent.

    ## Features
    - Plan resource gathering (gold / wood) with a best-first STRIPS planner
    - Pick the best move in a game tree with MinMax + Alpha-Beta pruning
    """,
    version=__version__,
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json"
)


# =============================================================================
# CORS Configuration
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Import and Include Routers
# =============================================================================

from .routes import planner, search

app.include_router(planner.router, prefix="/api/planner", tags=["Planner"])
app.include_router(search.router, prefix="/api/search", tags=["Search"])


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """API root endpoint with welcome message and links"""
    return {
        "message": "Welcome to the Strategy Search API",
        "version": __version__,
        "documentation": "/api/docs",
        "health": "/health",
        "endpoints": {
            "planner": "/api/planner/plan",
            "search": "/api/search/best-move"
        }
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint for monitoring"""
    return {
        "status": "healthy",
        "service": "strategy-search-api",
        "version": __version__
    }


# =============================================================================
# Error Handlers
# =============================================================================

@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc):
    """Custom HTTP exception handler"""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.detail,
            "status_code": exc.status_code
        }
    )


@app.exception_handler(SearchConfigurationError)
async def configuration_error_handler(request, exc):
    """Invalid search input (bad ply budget, malformed snapshot)"""
    logger.warning(f"Rejected search request: {exc}")
    return JSONResponse(
        status_code=422,
        content={
            "error": str(exc),
            "status_code": 422
        }
    )


@app.exception_handler(PlanNotFoundError)
async def plan_not_found_handler(request, exc):
    """The planner exhausted its search"""
    return JSONResponse(
        status_code=404,
        content={
            "error": str(exc),
            "status_code": 404,
            "stats": exc.stats.to_dict() if exc.stats is not None else None
        }
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc):
    """Handle all unhandled exceptions"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "status_code": 500
        }
    )
