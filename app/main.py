"""FastAPI application, main entry point."""

import structlog
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings
from app.infrastructure.database import SessionLocal, engine, init_db
from app.core.logging import configure_logging
from app.core.middleware import setup_middleware
from app.core.exceptions import register_exception_handlers

# Import routers
from app.interfaces.api.auth import router as auth_router

settings = get_settings()

# Configure logging immediately
configure_logging()
logger = structlog.get_logger(__name__)


def seed_default_data() -> None:
    from app.interfaces.deps import get_seed_service

    db = SessionLocal()
    try:
        get_seed_service(db).run()
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: schemas, tables, default data, scheduler. Shutdown: scheduler."""
    logger.info("Starting POS backend", env=settings.ENVIRONMENT)

    init_db(engine)
    logger.info("Database schemas and tables verified")

    if settings.SEED_DEFAULT_DATA:
        seed_default_data()

    if settings.SCHEDULER_ENABLED:
        from app.scheduler.jobs import start_scheduler
        start_scheduler()

    yield

    if settings.SCHEDULER_ENABLED:
        from app.scheduler.jobs import stop_scheduler
        stop_scheduler()
    logger.info("POS backend stopped")


app = FastAPI(
    title="Restaurant POS Backend",
    description="Users, roles, sessions, catalog, tables and orders for a restaurant point of sale",
    version="1.0.0",
    lifespan=lifespan,
)

# Setup Middleware (Correlation ID, Logging)
setup_middleware(app)

# Global Exception Handling
register_exception_handlers(app)

# Starlette runs middleware last-added first, so CORS wraps everything above
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth_router)


@app.get("/")
def root():
    return {
        "name": "Restaurant POS Backend",
        "version": "1.0.0",
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health")
def health():
    return {"status": "healthy"}
