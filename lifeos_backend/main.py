"""Life OS backend - Main Application Entry Point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import settings
from .core.exceptions import AuthenticationError, LifeOSException
from .core.logging import RequestIdMiddleware, get_logger, setup_logging, shutdown_logging

# Import routers
from .modules.auth import router as auth_router
from .modules.automation import router as automation_router
from .modules.dashboard import router as dashboard_router
from .modules.fitness import router as fitness_router
from .modules.health import router as health_router
from .modules.productivity import (
    goals_router,
    inbox_router,
    meetings_router,
    tickets_router,
)
from .modules.real_estate import (
    analytics_router as real_estate_analytics_router,
)
from .modules.real_estate import (
    loans_router,
    tenants_router,
    units_router,
)
from .modules.real_estate import (
    router as properties_router,
)
from .modules.telegram import router as telegram_router
from .modules.wealth import router as wealth_router

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    setup_logging()
    logger.info("Starting Life OS backend...")
    logger.info(f"Environment: {settings.app_env}")
    logger.info(f"Debug mode: {settings.app_debug}")
    yield
    # Shutdown
    logger.info("Shutting down Life OS backend...")
    shutdown_logging()


# Create FastAPI application
app = FastAPI(
    title=settings.api_title,
    description="Life OS: wealth, real estate, productivity, health and automation",
    version=settings.api_version,
    docs_url="/api/docs" if settings.app_debug else None,
    redoc_url="/api/redoc" if settings.app_debug else None,
    openapi_url="/api/openapi.json" if settings.app_debug else None,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Request ID middleware for request tracing
app.add_middleware(RequestIdMiddleware)


# Global exception handler
@app.exception_handler(LifeOSException)
async def lifeos_exception_handler(request: Request, exc: LifeOSException):
    """Handle Life OS exceptions with their own status code."""
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
    return JSONResponse(
        status_code=exc.status_code,
        headers=headers,
        content={
            "success": False,
            "message": exc.message,
            "error": exc.message,
            "data": None,
        },
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unhandled exceptions."""
    logger.exception(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "message": "Internal server error",
            "error": str(exc) if settings.app_debug else "Internal server error",
            "data": None,
        },
    )


# Health check endpoint
@app.get("/api/health", tags=["Health"])
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": settings.api_version,
        "env": settings.app_env,
    }


# Register routers with /api prefix
API_PREFIX = settings.api_prefix

# Auth routes
app.include_router(auth_router, prefix=API_PREFIX)

# Dashboard routes
app.include_router(dashboard_router, prefix=API_PREFIX)

# Wealth routes
app.include_router(wealth_router, prefix=API_PREFIX)

# Real estate routes
app.include_router(properties_router, prefix=API_PREFIX)
app.include_router(units_router, prefix=API_PREFIX)
app.include_router(tenants_router, prefix=API_PREFIX)
app.include_router(loans_router, prefix=API_PREFIX)
app.include_router(real_estate_analytics_router, prefix=API_PREFIX)

# Productivity routes
app.include_router(inbox_router, prefix=API_PREFIX)
app.include_router(meetings_router, prefix=API_PREFIX)
app.include_router(goals_router, prefix=API_PREFIX)
app.include_router(tickets_router, prefix=API_PREFIX)

# Health routes
app.include_router(health_router, prefix=API_PREFIX)
app.include_router(fitness_router, prefix=API_PREFIX)

# Automation routes
app.include_router(automation_router, prefix=API_PREFIX)
app.include_router(telegram_router, prefix=API_PREFIX)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "lifeos_backend.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.app_debug,
    )
