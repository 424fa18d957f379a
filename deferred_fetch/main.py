import logging
from fastapi import FastAPI
from contextlib import asynccontextmanager
from deferred_fetch.api.routes import router
from deferred_fetch.core.config import configure_logging, get_settings
from deferred_fetch.fetch.base import OutputKind

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    Set up logging and report where fetched files will be stored.
    """
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    logger.info("Initializing Deferred Fetch, download directory: %s", settings.DOWNLOAD_DIR)

    yield

    logger.info("Shutting down Deferred Fetch...")

app = FastAPI(
    title="Deferred Fetch",
    description="Fetch web resources to local files and return only the file path",
    version="1.0.0",
    lifespan=lifespan
)

app.include_router(router)

@app.get("/")
async def root():
    """Root endpoint with basic info"""
    return {
        "service": "Deferred Fetch",
        "version": "1.0.0",
        "endpoints": {
            **{f"fetch_{kind.value}": f"POST /fetch/{kind.value}" for kind in OutputKind},
            "health": "GET /health",
            "debug": "GET /debug/config"
        }
    }
