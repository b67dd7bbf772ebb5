# backend/app/main.py

# FORCE logger module import so handlers attach

import app.core.logger
from app.core.logger import logger

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import router as health_router
from app.core.config import settings
from app.core.database import AsyncSessionLocal, Base, engine
from app.core.error_middleware import ExceptionLoggingMiddleware
from app.core.request_middleware import RequestLoggingMiddleware
from app.core.responses import register_exception_handlers
from app.routers import activity, resources
from app.services.audit import AuditTrail

import app.models  # noqa: F401  (register tables on Base.metadata)


# ---------------------------------------------------
# Startup / shutdown
# ---------------------------------------------------
@asynccontextmanager
async def lifespan(application: FastAPI):
    # Create tables (development databases; production runs alembic)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    application.state.audit = AuditTrail(AsyncSessionLocal)
    logger.info("Backend started with structured JSON logging + activity audit enabled")

    yield

    # let in-flight audit writes finish before the pool goes away
    await application.state.audit.drain()
    await engine.dispose()
    logger.info("Backend stopped")


# ---------------------------------------------------
# Create FastAPI instance FIRST
# ---------------------------------------------------
app = FastAPI(title="LearnHub API", version="1.0", lifespan=lifespan)


# ---------------------------------------------------
# CORS MUST be added immediately after app creation
# ---------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------
# Logging middlewares
# ---------------------------------------------------
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(ExceptionLoggingMiddleware)

register_exception_handlers(app)


# ---------------------------------------------------
# Include Routers
# ---------------------------------------------------
app.include_router(health_router)
app.include_router(resources.router)
app.include_router(activity.router)
