"""FastAPI application — main entry point."""

import structlog
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings
from app.core.exceptions import setup_exception_handlers
from app.core.logging import configure_logging
from app.core.middleware import setup_middleware
from app.infrastructure.database import close_pool, get_pool, init_db

# Import routers
from app.interfaces.api.admins import router as admins_router
from app.interfaces.api.categories import router as categories_router
from app.interfaces.api.products import router as products_router
from app.interfaces.api.users import router as users_router

settings = get_settings()

# Configure logging immediately
configure_logging()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan — startup and shutdown events."""
    logger.info("Starting Storefront Backend...", env=settings.ENVIRONMENT)

    # Create DB tables outside production; production runs scripts/init_db.py
    if settings.ENVIRONMENT != "production":
        await init_db(get_pool().engine)
        logger.info("Database tables created/verified")

    yield

    await close_pool()
    logger.info("Storefront Backend stopped")


app = FastAPI(
    title="Storefront Backend",
    description="API Backend — users, administrators, categories and products",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS (added first so it sits innermost, after request id and logging)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Setup Middleware (Correlation ID, Logging)
setup_middleware(app)

# Error envelopes
setup_exception_handlers(app)

# Include routers
app.include_router(admins_router)
app.include_router(users_router)
app.include_router(categories_router)
app.include_router(products_router)


@app.get("/")
def root():
    return {
        "name": "Storefront Backend",
        "version": "1.0.0",
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health")
def health():
    return {"status": "healthy"}
