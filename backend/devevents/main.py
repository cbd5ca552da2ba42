"""
DevEvents API - Main Application Entry Point

Persistence core for a developer-events site:
- Events with slugs derived from their titles
- Bookings that may only reference existing events
- One cached, single-flight MongoDB connection per process
- Structured logging with request correlation
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from devevents.core.config import get_settings
from devevents.core.logging import setup_logging, get_logger
from devevents.core.metrics import metrics_endpoint
from devevents.api.router import api_router
from devevents.api.middleware import RequestLoggingMiddleware
from devevents.api.exception_handlers import register_exception_handlers
from devevents.db.connection import acquire_connection, close_connection, ensure_indexes, get_connection_cache

# Raises ConfigurationError at import when MONGODB_URI is missing
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: startup and shutdown hooks."""
    setup_logging()
    logger = get_logger(__name__)

    logger.info(
        "application_starting",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
    )

    db = await acquire_connection()
    await ensure_indexes(db)
    logger.info("mongodb_ready")

    yield

    await close_connection()
    logger.info("application_shutdown")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Events and bookings backed by MongoDB",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Restrict in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestLoggingMiddleware)
register_exception_handlers(app)

app.include_router(api_router)


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint for Docker and load balancers."""
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "database": "connected" if get_connection_cache().is_connected else "idle",
    }


@app.get("/metrics", include_in_schema=False)
def metrics():
    return metrics_endpoint()


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": "/docs",
    }
