"""
Main FastAPI application for the smart property recommendation service.

This module sets up the FastAPI application with all routes, middleware,
and configuration for behavior tracking and intent-aware recommendations.
"""

import logging
import os
import time
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from .routers import behavior_router, health_router, recommendation_router
from ...domain.services.recommendation_service import RecommendationService, RecommendationConfig
from ...infrastructure.data import get_repository_factory, close_repository_factory, DataConfig

load_dotenv()

# Configure logging
logging.basicConfig(
    level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager"""
    logger.info("Starting property recommendation API...")

    try:
        config = DataConfig()
        repository_factory = await get_repository_factory(config)

        health_status = await repository_factory.health_check()
        if not health_status.get("overall"):
            logger.error("Behavior store health check failed during startup")
            raise RuntimeError("System health check failed")
        if not health_status.get("catalog"):
            logger.warning("Property catalog is not reachable yet; recommendations will return 503")

        app.state.repository_factory = repository_factory
        app.state.recommendation_service = RecommendationService(
            RecommendationConfig(
                default_limit=config.recommendations.default_limit,
                max_limit=config.recommendations.max_limit
            )
        )
        app.state.config = config

        yield

    except Exception as e:
        logger.error(f"Startup failed: {e}")
        raise
    finally:
        logger.info("Shutting down property recommendation API...")
        await close_repository_factory()
        logger.info("Shutdown complete")


app = FastAPI(
    title="Property Advisor Recommendations API",
    description="""
    Intent-aware property recommendations for the advisory site.

    ## Features

    * **Smart Recommendations**: investment and end-use scoring with diversity-aware ranking
    * **Behavior Tracking**: views, saves, searches, dwell time and feature clicks per client
    * **Recommendation Analytics**: score and confidence summaries for each result list
    """,
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan
)

# Add middleware
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ALLOW_ORIGINS", "*").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests and add the processing time header"""
    start_time = time.time()
    client_host = request.client.host if request.client else "unknown"
    logger.info(f"{request.method} {request.url.path} - {client_host}")

    try:
        response = await call_next(request)
    except Exception as e:
        duration = time.time() - start_time
        logger.error(f"{request.method} {request.url.path} - ERROR: {str(e)} - {duration:.3f}s")
        raise

    duration = time.time() - start_time
    response.headers["X-Process-Time"] = str(duration)
    logger.info(f"{request.method} {request.url.path} - {response.status_code} - {duration:.3f}s")
    return response


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions with detailed error responses"""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.detail,
            "status_code": exc.status_code,
            "path": request.url.path,
            "method": request.method,
            "timestamp": time.time()
        }
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "message": "An unexpected error occurred",
            "status_code": 500,
            "path": request.url.path,
            "method": request.method,
            "timestamp": time.time()
        }
    )


# Include routers
app.include_router(
    health_router.router,
    prefix="/health",
    tags=["Health Check"]
)

app.include_router(
    recommendation_router.router,
    prefix="/api/v1/recommendations",
    tags=["Recommendations"]
)

app.include_router(
    behavior_router.router,
    prefix="/api/v1/behavior",
    tags=["Behavior"]
)


def run():
    """Console entry point"""
    import uvicorn

    uvicorn.run(
        "property_advisor.application.api.main:app",
        host=os.getenv("API_HOST", "0.0.0.0"),
        port=int(os.getenv("API_PORT", "8000")),
        log_level=os.getenv("LOG_LEVEL", "info").lower()
    )
