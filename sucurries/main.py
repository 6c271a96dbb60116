"""
SU Curries - FastAPI Backend Application
"""

import logging
from contextlib import asynccontextmanager
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
import structlog

from sucurries.config import settings
from sucurries.database import SessionLocal
from sucurries import models  # noqa: F401  registers all mappers
from sucurries.api import auth, reservations, orders, payments
from sucurries.api.csrf import verify_csrf

logging.basicConfig(format="%(message)s", level=settings.log_level.upper())

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
        if settings.log_format == "json"
        else structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    logger.info("Starting SU Curries API", version="1.0.0", environment=settings.environment)
    yield
    logger.info("Shutting down SU Curries API")


# Create FastAPI application
app = FastAPI(
    title="SU Curries",
    description="Restaurant table reservations, online orders and payments",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Health check endpoints
@app.get("/health")
async def health():
    """Basic health check"""
    return {"status": "healthy", "service": "api", "version": "1.0.0"}


@app.get("/health/ready")
async def ready():
    """Readiness check with dependency verification"""
    checks = {}

    # Check database
    try:
        async with SessionLocal() as db:
            await db.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except Exception as e:
        checks["database"] = f"failed: {str(e)}"

    all_ok = all(v == "ok" for v in checks.values())

    return {
        "status": "ready" if all_ok else "not_ready",
        "checks": checks,
    }


csrf_protected = [Depends(verify_csrf)]

# Include API routers
app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(
    reservations.router, prefix="/reservations", tags=["Reservations"], dependencies=csrf_protected
)
app.include_router(orders.router, prefix="/orders", tags=["Orders"], dependencies=csrf_protected)
app.include_router(payments.router, prefix="/payments", tags=["Payments"], dependencies=csrf_protected)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "sucurries.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_debug,
    )
