"""Main FastAPI application with all middleware"""

from fastapi import FastAPI
from contextlib import asynccontextmanager
import logging

from lumera.core.config import settings
from lumera.core.cache import cache
from lumera.core.database import init_db, close_db
from lumera.core.middleware import setup_middleware
from lumera.api.v1 import api_router

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    # Startup
    logger.info(f"Starting up {settings.APP_NAME}...")
    await init_db()
    await cache.connect()

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.APP_NAME}...")
    await cache.disconnect()
    await close_db()

def create_app() -> FastAPI:
    """Build the API application"""
    app = FastAPI(
        title=settings.APP_NAME,
        description="Lumera storefront wishlist API",
        version=settings.APP_VERSION,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
        lifespan=lifespan
    )

    setup_middleware(app)
    app.include_router(api_router, prefix="/api/v1")

    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "version": settings.APP_VERSION}

    return app

app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "lumera.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        workers=settings.WORKERS
    )
