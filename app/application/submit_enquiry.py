from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Literal, Mapping, Optional, Sequence

import app.domain.services as domain_services
from app.domain.entities import LogRecord, ValidationLimits
from app.domain.errors import EmailDispatchError, EmailNotConfigured
from app.domain.ports.email_port import EmailPort
from app.domain.ports.submission_log import SubmissionLogPort

logger = logging.getLogger(__name__)

DispatchPolicy = Literal["fail_open", "fail_closed"]


@dataclass(frozen=True)
class SubmitResult:
    dispatched: bool
    persisted: bool


async def _persist(logs: Sequence[SubmissionLogPort], record: LogRecord) -> bool:
    persisted = True
    for log in logs:
        try:
            await log.append(record)
        except OSError as e:
            persisted = False
            logger.warning(
                "could not write submission log",
                extra={"log": type(log).__name__, "error": str(e)},
            )
    return persisted


async def submit_enquiry(
    *,
    raw: Mapping[str, Any],
    email_port: Optional[EmailPort],
    logs: Sequence[SubmissionLogPort],
    sender: str,
    recipient: str,
    limits: ValidationLimits = ValidationLimits(),
    dispatch_policy: DispatchPolicy = "fail_closed",
    require_email_provider: bool = False,
    default_source: str | None = None,
    client_ip: str | None = None,
    received_at: datetime | None = None,
) -> SubmitResult:
    """
    Validate, persist, then dispatch one enquiry.

    The record is appended before dispatch so it exists whatever the
    provider does. Persistence failures are logged and never raised.
    A dispatch failure is raised only under the fail_closed policy.
    """
    received_at = received_at or datetime.now(timezone.utc)

    submission = domain_services.validate_submission(
        raw, limits, default_source=default_source
    )

    if email_port is None and require_email_provider:
        raise EmailNotConfigured("email provider credential is not configured")

    record = LogRecord(
        submission=submission, received_at=received_at, client_ip=client_ip
    )
    persisted = await _persist(logs, record)

    if email_port is None:
        logger.info("dispatch skipped, no email provider configured")
        return SubmitResult(dispatched=False, persisted=persisted)

    email = domain_services.compose_enquiry_email(
        submission, sender=sender, recipient=recipient
    )
    try:
        await email_port.send(email)
    except EmailDispatchError as e:
        logger.error(
            "email dispatch failed",
            extra={
                "error": str(e),
                "provider_status": e.status_code,
                "policy": dispatch_policy,
            },
        )
        if dispatch_policy == "fail_closed":
            raise
        return SubmitResult(dispatched=False, persisted=persisted)

    logger.info("enquiry dispatched", extra={"persisted": persisted})
    return SubmitResult(dispatched=True, persisted=persisted)
