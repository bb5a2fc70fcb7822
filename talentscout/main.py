from __future__ import annotations

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI

from talentscout.api.errors import register_api_exception_handlers
from talentscout.api.router import router as api_router
from talentscout.api.runtime_deps import shutdown_runtime
from talentscout.http.middleware import RequestLoggingMiddleware, parse_skip_paths
from talentscout.logging_config import configure_logging, parse_redact_fields
from talentscout.settings import settings

logger = logging.getLogger(__name__)

configure_logging(
    level=settings.log_level,
    log_format=settings.log_format,
    redact_fields=parse_redact_fields(settings.log_redact_fields),
    include_uvicorn_access=settings.log_uvicorn_access,
)


@asynccontextmanager
async def lifespan(_: FastAPI):
    logger.info(
        "app.started",
        extra={
            "enrichment_enabled": settings.enrichment_enabled,
            "gemini_configured": bool(settings.gemini_api_key),
            "github_base_url": settings.github_base_url,
        },
    )
    yield
    await shutdown_runtime()
    logger.info("app.stopped")


app = FastAPI(title=settings.app_name, lifespan=lifespan)
register_api_exception_handlers(app)
app.add_middleware(
    RequestLoggingMiddleware,
    log_requests=settings.log_requests,
    skip_paths=parse_skip_paths(settings.log_request_skip_paths),
)
app.include_router(api_router)


@app.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}
