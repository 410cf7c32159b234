"""
Timeclock — Application entry point.

This is the **only** file that assembles the app.  All business logic
lives in the `domain/`, `workflows/` and `repositories/` packages.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from timeclock.api.v1.api import api_router
from timeclock.core.config import settings
from timeclock.core.exceptions import register_exception_handlers
from timeclock.db.base import Base
from timeclock.db.session import async_session_factory, engine

# Ensure all models are imported so metadata.create_all can see them
from timeclock.models.attendance import Attendance  # noqa: F401
from timeclock.models.employee import Employee

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


async def seed_employees(session: AsyncSession, codes: list[str]) -> int:
    """Register any of ``codes`` not yet in the employee table."""
    if not codes:
        return 0
    result = await session.execute(
        select(Employee.employee_code).where(Employee.employee_code.in_(codes))
    )
    existing = set(result.scalars().all())
    missing = [code for code in dict.fromkeys(codes) if code not in existing]
    session.add_all(Employee(employee_code=code, name=code) for code in missing)
    await session.commit()
    return len(missing)


# ── Lifespan ────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(_app: FastAPI):
    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables initialised")

    async with async_session_factory() as session:
        created = await seed_employees(session, settings.SEED_EMPLOYEE_CODES)
    if created:
        logger.info("Seeded %d employee(s)", created)

    logger.info("%s v%s started", settings.PROJECT_NAME, settings.VERSION)
    yield
    await engine.dispose()
    logger.info("Shutdown complete")


# ── App factory ─────────────────────────────────────────────────────
def create_app() -> FastAPI:
    application = FastAPI(
        title=settings.PROJECT_NAME,
        description="Employee attendance clock-in service",
        version=settings.VERSION,
        openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Global exception handlers (prevent stack-trace leakage)
    register_exception_handlers(application)

    # Mount API v1
    application.include_router(api_router, prefix=settings.API_V1_PREFIX)

    return application


app = create_app()
