import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from app.domain.errors import (
    EmailDispatchError,
    EmailNotConfigured,
    PayloadTooLarge,
    RateLimitExceeded,
    SubmissionInvalid,
)
from app.presentation.dependencies import rate_limit_headers
from app.presentation.middleware import SECURITY_HEADERS

logger = logging.getLogger(__name__)


async def submission_invalid_handler(
    _: Request, exc: SubmissionInvalid
) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST, content={"errors": exc.errors}
    )


async def payload_too_large_handler(_: Request, exc: PayloadTooLarge) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        content={"error": "Request body too large"},
    )


async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    d = exc.decision
    headers = rate_limit_headers(d.limit, d.remaining, d.reset_after)
    headers["Retry-After"] = str(exc.retry_after)
    logger.info(
        "rate limit exceeded",
        extra={"path": request.url.path, "retry_after": exc.retry_after},
    )
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={"error": "Too many requests, please try again later."},
        headers=headers,
    )


async def email_not_configured_handler(
    _: Request, exc: EmailNotConfigured
) -> JSONResponse:
    logger.error("email dispatch required but provider is not configured")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Email service not configured on server."},
    )


async def email_dispatch_handler(_: Request, exc: EmailDispatchError) -> JSONResponse:
    hint = " (provider responded with an error)" if exc.provider_responded else ""
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"error": "Failed to send email" + hint},
    )


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "unexpected server error",
        extra={"path": request.url.path, "method": request.method},
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
        # sent by ServerErrorMiddleware, outside the header middleware
        headers=SECURITY_HEADERS,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SubmissionInvalid, submission_invalid_handler)
    app.add_exception_handler(PayloadTooLarge, payload_too_large_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
    app.add_exception_handler(EmailNotConfigured, email_not_configured_handler)
    app.add_exception_handler(EmailDispatchError, email_dispatch_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
