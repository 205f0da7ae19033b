from typing import Optional, Sequence

from fastapi import Depends, Request, Response

from app.domain.entities import ValidationLimits
from app.domain.errors import RateLimitExceeded
from app.domain.ports.email_port import EmailPort
from app.domain.ports.rate_limiter import RateLimiterPort
from app.domain.ports.submission_log import SubmissionLogPort
from app.settings import Settings


def get_app_settings(request: Request) -> Settings:
    # This is set in app.main create_app()
    return request.app.state.settings


def get_email_port(request: Request) -> Optional[EmailPort]:
    # None when no provider credential is configured (see app.main lifespan)
    return request.app.state.email_adapter


def get_rate_limiter(request: Request) -> RateLimiterPort:
    return request.app.state.rate_limiter


def get_submission_logs(request: Request) -> Sequence[SubmissionLogPort]:
    return request.app.state.submission_logs


def get_validation_limits(
    settings: Settings = Depends(get_app_settings),
) -> ValidationLimits:
    return ValidationLimits(
        max_name_length=settings.max_name_length,
        max_message_length=settings.max_message_length,
        strict_email=settings.strict_email,
    )


def get_client_ip(
    request: Request, settings: Settings = Depends(get_app_settings)
) -> str:
    if settings.trust_proxy:
        forwarded = request.headers.get("x-forwarded-for", "")
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return request.client.host if request.client else "unknown"


def rate_limit_headers(limit: int, remaining: int, reset_after: int) -> dict[str, str]:
    return {
        "RateLimit-Limit": str(limit),
        "RateLimit-Remaining": str(remaining),
        "RateLimit-Reset": str(reset_after),
    }


async def enforce_rate_limit(
    response: Response,
    client_ip: str = Depends(get_client_ip),
    limiter: RateLimiterPort = Depends(get_rate_limiter),
    settings: Settings = Depends(get_app_settings),
) -> None:
    if not settings.rate_limit_enabled:
        return
    decision = await limiter.hit(client_ip)
    if not decision.allowed:
        raise RateLimitExceeded(decision)
    response.headers.update(
        rate_limit_headers(decision.limit, decision.remaining, decision.reset_after)
    )
