"""Main application entry point."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from prometheus_fastapi_instrumentator import Instrumentator

from shopping_agent.ai.llm_service import llm_service
from shopping_agent.api.routes import chat, status, web_tasks
from shopping_agent.config import settings
from shopping_agent.worker.scheduler import setup_scheduler

# Configure structured logging
from shopping_agent.logging_config import setup_logging

setup_logging()
logger = logging.getLogger(__name__)

# Global scheduler
scheduler = None


def ensure_public_dirs() -> Path:
    """Create the static asset directories the UI writes into."""
    public_dir = Path(settings.public_dir)
    for subdir in settings.public_subdirs:
        (public_dir / subdir).mkdir(parents=True, exist_ok=True)
    return public_dir


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    global scheduler

    # Startup
    logger.info("=" * 60)
    logger.info("Shopping Agent - universal shopping intelligence")
    logger.info(f"URL: http://localhost:{settings.app_port}")
    logger.info(f"API key: {'OK' if settings.llm_configured else 'NOT SET'}")
    logger.info("=" * 60)

    scheduler = setup_scheduler()
    scheduler.start()
    logger.info("Scheduler started")

    yield

    # Shutdown
    logger.info("Shutting down...")

    if scheduler:
        scheduler.shutdown()

    await llm_service.close()
    logger.info("Shutdown complete")


# Create FastAPI app
app = FastAPI(
    title="Shopping Agent",
    description="Chat-driven browser automation for e-commerce search",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add Prometheus instrumentation
instrumentator = Instrumentator(
    should_group_status_codes=True,
    should_ignore_untemplated=True,
    excluded_handlers=["/metrics", "/health", "/favicon.ico"],
)
instrumentator.instrument(app).expose(app, include_in_schema=True, tags=["monitoring"])

# Include API routes
app.include_router(chat.router)
app.include_router(web_tasks.router)
app.include_router(status.router)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/favicon.ico")
async def favicon():
    """Return empty favicon response to avoid 404 noise."""
    return Response(status_code=204)


# Static UI last so it never shadows the API routes
app.mount("/", StaticFiles(directory=str(ensure_public_dirs()), html=True), name="public")


if __name__ == "__main__":
    uvicorn.run(
        "shopping_agent.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
