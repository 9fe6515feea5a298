from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from downdetect import __version__
from downdetect.api.v1.router import v1_router
from downdetect.config import settings
from downdetect.core.exceptions import StatusCheckError, status_check_error_handler
from downdetect.core.middleware import RequestLoggingMiddleware
from downdetect.services.status.factory import create_http_client, create_status_resolver

_NAME_TO_LEVEL = {
    "debug": 10,
    "info": 20,
    "warning": 30,
    "warn": 30,
    "error": 40,
    "critical": 50,
}

structlog.configure(
    processors=[
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(
        _NAME_TO_LEVEL.get(settings.downdetect_log_level.lower(), 20)
    ),
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    http_client = create_http_client(settings)
    # Usage counters live for the process; they are created with the resolver here
    app.state.status_resolver = create_status_resolver(settings, http_client)

    logger.info(
        "downdetect_starting",
        downdetector_enabled=app.state.status_resolver.primary_available,
        domains=settings.cascade_domains,
        probe_timeout=settings.probe_timeout,
    )
    yield

    await http_client.aclose()
    logger.info("downdetect_stopping")


app = FastAPI(
    title="DownDetect API",
    description="Service status checks from crowd-sourced outage reports with an HTTP probe fallback",
    version=__version__,
    lifespan=lifespan,
)

app.add_exception_handler(StatusCheckError, status_check_error_handler)

# Starlette: last-added = outermost
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.downdetect_cors_origins.split(","),
    allow_methods=["GET"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

app.include_router(v1_router)


@app.get("/")
async def root():
    return {"service": "downdetect-backend", "version": __version__}
