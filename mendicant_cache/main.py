import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import CacheConfig, Settings, settings
from .routers.api import router
from .services.cache_registry import CacheRegistry

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Build the FastAPI app around one cache registry"""
    app_settings = app_settings or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup and shutdown events"""
        logger.info(f"Starting {app_settings.app_name}...")

        registry = CacheRegistry(
            CacheConfig.from_settings(app_settings),
            namespaces=app_settings.cache_namespaces
        )
        await registry.initialize_all()
        app.state.cache_registry = registry

        logger.info(f"{app_settings.app_name} ready")

        yield

        logger.info(f"Shutting down {app_settings.app_name}...")
        registry.destroy_all()

    app = FastAPI(
        title=app_settings.app_name,
        version=app_settings.app_version,
        description="Three-tier cache (memory, disk, long-term) for agent orchestration",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        registry = getattr(app.state, "cache_registry", None)
        return {
            "status": "healthy",
            "namespaces": registry.namespaces if registry else [],
        }

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "mendicant_cache.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
