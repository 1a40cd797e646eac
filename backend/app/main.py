"""
AuraDeploy Deployment Service
Backend API - FastAPI Application
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging

from app.api import callbacks, deploy, progress
from app.core.config import settings
from app.services.completion_detector import completion_detector

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Run the timeout sweep for the lifetime of the app"""
    await completion_detector.start()
    yield
    await completion_detector.stop()
    logger.info("Completion sweep stopped")


app = FastAPI(
    title="AuraDeploy Deployment API",
    description="Deployment job tracking with progress polling",
    version="1.0.0",
    lifespan=lifespan
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(deploy.router, prefix=settings.API_V1_PREFIX, tags=["deploy"])
app.include_router(progress.router, prefix=settings.API_V1_PREFIX, tags=["progress"])
app.include_router(callbacks.router, prefix=settings.API_V1_PREFIX, tags=["callbacks"])


@app.get("/")
async def root():
    """Health check endpoint"""
    return {"status": "ok", "service": "AuraDeploy Deployment API"}


@app.get("/health")
async def health():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "poll_interval_seconds": settings.CLIENT_POLL_INTERVAL_SECONDS
    }


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An internal error occurred",
            "field": None
        }
    )
