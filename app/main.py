import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI
from redis.asyncio import Redis

from app.domain.ports.rate_limiter import RateLimiterPort
from app.domain.ports.submission_log import SubmissionLogPort
from app.infrastructure.email.sendgrid_adapter import SendGridEmailAdapter
from app.infrastructure.http.client import create_http_client
from app.infrastructure.persistence.file_logs import (
    AuditTrailLog,
    JsonLinesSubmissionLog,
)
from app.infrastructure.rate_limit.memory import InMemoryRateLimiter
from app.infrastructure.rate_limit.redis_limiter import RedisRateLimiter, create_redis
from app.logging import setup_logging
from app.presentation.api import api
from app.presentation.errors import register_exception_handlers
from app.presentation.middleware import install_middleware
from app.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def build_rate_limiter(
    settings: Settings, redis: Optional[Redis] = None
) -> RateLimiterPort:
    if settings.rate_limit_backend == "redis":
        if redis is None:
            raise ValueError("redis backend needs a Redis client")
        return RedisRateLimiter(
            redis,
            limit=settings.rate_limit_max,
            window_seconds=settings.rate_limit_window_seconds,
        )
    return InMemoryRateLimiter(
        limit=settings.rate_limit_max,
        window_seconds=settings.rate_limit_window_seconds,
    )


def build_submission_logs(settings: Settings) -> list[SubmissionLogPort]:
    logs: list[SubmissionLogPort] = []
    if settings.submission_log_path:
        logs.append(JsonLinesSubmissionLog(settings.submission_log_path))
    if settings.audit_log_path:
        logs.append(AuditTrailLog(settings.audit_log_path))
    return logs


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings

    # startup
    http_client = create_http_client(transport=app.state.http_transport)
    app.state.http_client = http_client

    email_adapter: Optional[SendGridEmailAdapter] = None
    if settings.email_enabled:
        # ONE adapter on top of this app's HTTP client
        email_adapter = SendGridEmailAdapter(
            settings.sendgrid_api_key,
            base_url=settings.sendgrid_base_url,
            client=http_client,
        )
    else:
        logger.warning("SENDGRID_API_KEY not set. Email sending is disabled.")

    app.state.email_adapter = email_adapter  # expose to dependencies
    redis: Optional[Redis] = None
    if settings.rate_limit_backend == "redis":
        redis = create_redis(settings.redis_url)
    app.state.redis = redis
    app.state.rate_limiter = build_rate_limiter(settings, redis)
    app.state.submission_logs = build_submission_logs(settings)
    logger.info(
        "enquiry service started",
        extra={
            "env": settings.app_env,
            "email_enabled": settings.email_enabled,
            "dispatch_policy": settings.dispatch_policy,
            "rate_limit_backend": settings.rate_limit_backend,
        },
    )

    try:
        yield
    finally:
        # shutdown
        if email_adapter is not None:
            await email_adapter.aclose()  # it won't close the app's client
        await http_client.aclose()
        if redis is not None:
            await redis.aclose()


def create_app(
    settings: Settings | None = None,
    *,
    http_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Build the app. `http_transport` replaces the network transport of the
    provider client, e.g. an httpx.MockTransport in tests.
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level)
    app = FastAPI(title="Enquiry Intake API", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.http_transport = http_transport
    install_middleware(app, settings)
    register_exception_handlers(app)
    app.include_router(api)
    return app


app = create_app()
