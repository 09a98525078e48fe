"""
Chorely - Main Application Entry Point

Household chore tracker with recurring tasks, shared households and dashboards.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from chorely.core.config import get_settings
from chorely.core.exceptions import ChorelyError
from chorely.core.logger import logger


def build_scheduler():
    """Background scheduler wired to the shared repositories."""
    from chorely.api.deps import (
        get_recurrence_rule_repository,
        get_task_history_repository,
        get_task_repository,
    )
    from chorely.services.background_scheduler import BackgroundScheduler
    from chorely.services.recurrence_service import RecurrenceService

    settings = get_settings()
    recurrence_service = RecurrenceService(
        get_recurrence_rule_repository(),
        get_task_repository(),
        get_task_history_repository(),
        lookahead_days=settings.RECURRENCE_LOOKAHEAD_DAYS,
    )
    return BackgroundScheduler(recurrence_service, settings)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    # Startup
    settings = get_settings()
    logger.info(f"Starting Chorely in {settings.ENVIRONMENT} mode...")

    from chorely.infrastructure.local.database import init_db

    await init_db()

    scheduler = build_scheduler()
    app.state.scheduler = scheduler
    await scheduler.start()

    yield

    # Shutdown
    logger.info("Shutting down Chorely...")
    await scheduler.stop()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Chorely",
        description="Household chores, recurring tasks and shared households",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
    )

    @app.exception_handler(ChorelyError)
    async def chorely_error_handler(request: Request, exc: ChorelyError):
        from chorely.api.errors import status_code_for

        return JSONResponse(
            status_code=status_code_for(exc),
            content={"detail": exc.message},
        )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    from chorely.api import auth, categories, dashboard, health, households, recurrence, tasks

    app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
    app.include_router(tasks.router, prefix="/api/tasks", tags=["tasks"])
    app.include_router(recurrence.router, prefix="/api", tags=["recurrence"])
    app.include_router(categories.router, prefix="/api/categories", tags=["categories"])
    app.include_router(households.router, prefix="/api/households", tags=["households"])
    app.include_router(dashboard.router, prefix="/api/dashboard", tags=["dashboard"])
    app.include_router(health.router, prefix="/api", tags=["health"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "environment": settings.ENVIRONMENT,
            "version": "0.1.0"
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
