"""JSON:API Schema Service — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - The document is compiled once during startup; a compile error aborts startup
    - Global error handlers map SchemaCompilationError → structured JSON responses
    - CORS configured from settings (not hardcoded)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from jsonapi_schema.api.error_handlers import register_error_handlers
from jsonapi_schema.api.routes import health, schema
from jsonapi_schema.config import get_settings
from jsonapi_schema.core.document import compile_cached
from jsonapi_schema.core.errors import SchemaCompilationError
from jsonapi_schema.core.resource_model import ResourceModel
from jsonapi_schema.infrastructure.model_loader import load_resource_model
from jsonapi_schema.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


def create_app(model: ResourceModel | None = None) -> FastAPI:
    """Build the service; without `model` the resource model file from settings is used."""
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.log_level, settings.log_format)
        resource_model = (
            model if model is not None
            else load_resource_model(settings.resource_model_path)
        )
        content_hash = resource_model.content_hash()
        try:
            document = compile_cached(resource_model, settings.schema_id)
        except SchemaCompilationError as e:
            logger.error(
                f"Schema compilation failed: {e.message}",
                extra={"error_code": e.code, "content_hash": content_hash},
            )
            raise
        app.state.schema_document = document
        app.state.content_hash = content_hash
        logger.info("JSON:API schema service started", extra={"content_hash": content_hash})
        yield
        logger.info("JSON:API schema service shutting down")

    app = FastAPI(title="JSON:API Schema Service", version="0.1.0", lifespan=lifespan)
    app.state.schema_document = None
    app.state.content_hash = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(schema.router)

    register_error_handlers(app)
    return app
