from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from gameportal.database import init_db, close_db, async_session_maker
from gameportal.config import get_settings
from gameportal.logging_config import setup_logging, get_logger
from gameportal.routers import games, reactions, categories, pages, admin

settings = get_settings()

# Configure logging
setup_logging(
    log_level=settings.log_level,
    log_dir=settings.log_dir,
    log_file=settings.log_file,
)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    await init_db()
    logger.info("Game portal API started")
    yield
    # Shutdown
    await close_db()


app = FastAPI(
    title="Game Portal API",
    description="Content management backend for the casual games listing site",
    version="1.0.0",
    debug=settings.debug,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(games.router, prefix="/api/v1")
app.include_router(reactions.router, prefix="/api/v1")
app.include_router(categories.router, prefix="/api/v1")
app.include_router(pages.router, prefix="/api/v1")
app.include_router(admin.router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    """Basic health check endpoint."""
    return {"status": "healthy", "service": "gameportal-api"}


@app.get("/health/ready")
async def readiness_check():
    """Readiness check - verifies the database is reachable."""
    checks = {
        "service": "gameportal-api",
        "database": "unknown",
    }

    try:
        async with async_session_maker() as session:
            await session.execute(text("SELECT 1"))
        checks["database"] = "healthy"
    except Exception as e:
        logger.warning("Readiness check failed: %s", e)
        checks["database"] = f"unhealthy: {str(e)[:50]}"

    checks["status"] = "healthy" if checks["database"] == "healthy" else "degraded"
    return checks


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Game Portal API",
        "docs": "/docs",
        "health": "/health"
    }
