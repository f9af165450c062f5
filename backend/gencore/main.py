"""GenCore API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map GenCoreError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Logging configured on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern
    - Graph definitions are validated at import time: a ConfigError stops the
      process before it serves a single request
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gencore.infrastructure.observability import setup_logging
from gencore.config import get_settings
from gencore.api.error_handlers import register_error_handlers
from gencore.api.routes import generation_graph, health, review_templates, scoring

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    logger.info("GenCore API started")
    yield
    logger.info("GenCore API shutting down")


app = FastAPI(
    title="GenCore API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes — explicit registration
app.include_router(health.router)
app.include_router(generation_graph.router)
app.include_router(review_templates.router)
app.include_router(scoring.router)

register_error_handlers(app)
