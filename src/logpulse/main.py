"""
LogPulse service.

Startup admits the configuration file before traffic is served: a
configuration with validation errors stops the process unless setup mode
is on, in which case the service starts unready and waits for a reload.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Dict

import structlog
from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from . import __version__
from .api import admin_router, config_router, healthz_router, metrics_router, pv_router
from .config import Settings, get_settings
from .core.admission import AdmissionService
from .core.exceptions import LogPulseException
from .core.metrics import MetricsCollector

logger = structlog.get_logger(__name__)

# (router, prefix, tag)
ROUTES = (
    (config_router, "/v1", "config"),
    (pv_router, "/v1", "pv"),
    (admin_router, "", "admin"),
    (metrics_router, "", "metrics"),
    (healthz_router, "", "health"),
)


def configure_logging(log_level: str = "INFO", json_output: bool = True) -> None:
    """Route structlog through stdlib logging; JSON lines unless debugging."""
    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, log_level.upper(), logging.INFO),
    )

    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def admission_lifespan(settings: Settings) -> Callable[[FastAPI], AsyncIterator[None]]:
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.metrics = MetricsCollector()
        app.state.admission = AdmissionService(metrics=app.state.metrics)

        logger.info("Admitting configuration", path=settings.config_path, setup_mode=settings.setup_mode)
        # Raises on rejection outside setup mode, which aborts startup
        await run_in_threadpool(app.state.admission.startup, settings)

        logger.info("LogPulse ready" if app.state.admission.is_ready else "LogPulse waiting for a valid configuration")
        yield
        logger.info("LogPulse stopped")

    return lifespan


async def handle_logpulse_error(request: Request, exc: LogPulseException) -> JSONResponse:
    """Render a LogPulseException as ``{"error", "message", "details"}``."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "Request rejected",
        error_code=exc.error_code,
        status_code=exc.status_code,
        reason=str(exc),
        path=request.url.path,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.error_code, "message": str(exc), "details": exc.details},
    )


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level, json_output=not settings.debug)

    app = FastAPI(
        title="LogPulse",
        description="Configuration admission and page-view filter for web log analytics",
        version=__version__,
        lifespan=admission_lifespan(settings),
    )
    app.add_exception_handler(LogPulseException, handle_logpulse_error)

    for router, prefix, tag in ROUTES:
        app.include_router(router, prefix=prefix, tags=[tag])

    @app.get("/", include_in_schema=False)
    async def service_info() -> Dict[str, str]:
        return {"service": "LogPulse", "version": app.version, "docs": app.docs_url or ""}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "logpulse.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=settings.debug,
    )
