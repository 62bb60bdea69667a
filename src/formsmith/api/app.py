"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..config import Settings, settings as default_settings
from ..documents import DocumentGenerator
from ..registry import DocumentRegistry, load_registry
from .routes import router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle."""
    # Startup
    generator: DocumentGenerator = app.state.generator
    for key in generator.registry:
        if not generator.template_available(key):
            logger.warning(f"Template for '{key}' not found at {generator.template_path(key)}")
    logger.info(f"formsmith ready with {len(generator.registry)} document types")
    yield
    # Shutdown
    logger.info("formsmith shutting down")


def create_app(
    settings: Optional[Settings] = None,
    registry: Optional[DocumentRegistry] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Settings to use (module settings if not provided)
        registry: Document registry (loaded from settings if not provided)
    """
    settings = settings or default_settings
    registry = registry or load_registry(settings.registry_path)

    app = FastAPI(
        title="formsmith",
        description="Form-to-document generator for GST notices",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Collaborators are built once and shared through app state
    app.state.settings = settings
    app.state.registry = registry
    app.state.generator = DocumentGenerator(registry=registry, settings=settings)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition", "X-Unresolved-Placeholders"],
    )

    # API routes
    app.include_router(router, prefix="/api")

    return app
