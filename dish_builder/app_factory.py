"""
Application factory for the dish builder API.

Creates the FastAPI application with the builder and cart routers mounted
both under /api/v1 and at the root.
"""

import logging

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import config
from .routes import builder_router, cart_router

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """
    Create a FastAPI application.

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Dish Builder API",
        description="Custom dish composition, pricing and cart edits",
        version="1.0.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_v1 = APIRouter(prefix="/api/v1")
    api_v1.include_router(builder_router)
    api_v1.include_router(cart_router)
    app.include_router(api_v1)

    app.include_router(builder_router)
    app.include_router(cart_router)

    @app.get("/health")
    def health_check():
        return {"status": "healthy"}

    logger.info("Application created")

    return app


def run(host: str = "0.0.0.0", port: int = 8000, reload: bool = False) -> None:
    """
    Run the application with uvicorn.

    Args:
        host: Host to bind to
        port: Port to run on
        reload: Enable auto-reload for development
    """
    import uvicorn

    logger.info("Starting dish builder on %s:%d", host, port)

    if reload:
        uvicorn.run("dish_builder.main:app", host=host, port=port, reload=True)
    else:
        uvicorn.run(create_app(), host=host, port=port)
